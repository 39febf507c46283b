"""Configuration management module.

Stores helpdoc defaults (file extensions, templates, exclusions, the
documentation base URL) in TOML. Every value can be overridden on the
command line.

Lookup order:
    1. --config PATH
    2. ./helpdoc.toml
    3. ~/.helpdoc/config.toml
"""

import logging
import tomllib
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import tomlkit

from helpdoc.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class HelpDocConfig:
    """helpdoc configuration data."""

    script_extension: str = "ps1"
    bundle_extension: str = "psm1"
    help_width: int = 500
    pwsh_executable: str = "pwsh"
    command_timeout: int = 120
    header_template: str | None = None
    footer_template: str | None = None
    docs_base_url: str | None = None
    exclude: list[str] = field(default_factory=list)
    in_progress: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, excluding None values."""
        data = asdict(self)
        # TOML has no null
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HelpDocConfig":
        """Create from dictionary, validating value types.

        Raises:
            ConfigError: If a known key has the wrong type
        """
        known = {f.name: f for f in fields(cls)}
        values: dict[str, Any] = {}

        for key, value in data.items():
            if key not in known:
                logger.warning(f"Ignoring unknown config key: {key}")
                continue
            default = getattr(cls(), key)
            if isinstance(default, list):
                if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                    raise ConfigError(f"Config key '{key}' must be a list of strings")
            elif isinstance(default, int):
                if not isinstance(value, int) or isinstance(value, bool):
                    raise ConfigError(f"Config key '{key}' must be an integer")
            elif not isinstance(value, str):
                raise ConfigError(f"Config key '{key}' must be a string")
            values[key] = value

        return cls(**values)

    def read_template(self, which: str) -> str:
        """Return the header or footer template text ("" when unset).

        Args:
            which: "header" or "footer"

        Raises:
            ConfigError: If the configured template file cannot be read
        """
        template = getattr(self, f"{which}_template")
        if not template:
            return ""
        try:
            return Path(template).expanduser().read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Failed to read {which} template {template}: {e}") from e


class ConfigManager:
    """Locate, load, and save the helpdoc configuration file."""

    DEFAULT_CONFIG_DIR = Path.home() / ".helpdoc"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"
    LOCAL_CONFIG_NAME = "helpdoc.toml"

    @classmethod
    def get_config_path(cls, custom_path: str | None = None) -> Path:
        """Get configuration file path.

        Args:
            custom_path: Custom config file path (optional)

        Returns:
            Path to config file (may not exist unless custom_path was given)

        Raises:
            ConfigError: If custom_path does not exist
        """
        if custom_path:
            path = Path(custom_path).expanduser().resolve()
            if not path.exists():
                raise ConfigError(f"Config file not found: {path}")
            return path

        local = Path.cwd() / cls.LOCAL_CONFIG_NAME
        if local.exists():
            return local

        return cls.DEFAULT_CONFIG_FILE

    @classmethod
    def load_config(cls, custom_path: str | None = None) -> HelpDocConfig:
        """Load configuration from file, falling back to defaults.

        Raises:
            ConfigError: If the file exists but cannot be parsed
        """
        config_path = cls.get_config_path(custom_path)

        if not config_path.exists():
            logger.debug("Config file not found, using defaults")
            return HelpDocConfig()

        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to load config: {e}") from e

        logger.debug(f"Loaded config from: {config_path}")
        return HelpDocConfig.from_dict(data)

    @classmethod
    def save_config(cls, config: HelpDocConfig, path: Path) -> Path:
        """Save configuration, preserving comments of an existing file.

        Args:
            config: Configuration to save
            path: Destination file

        Returns:
            Path written

        Raises:
            ConfigError: If saving fails
        """
        path = Path(path).expanduser()
        temp_path = path.with_suffix(".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)

            if path.exists():
                with open(path, encoding="utf-8") as f:
                    doc = tomlkit.load(f)
            else:
                doc = tomlkit.document()
                doc.add(tomlkit.comment("helpdoc configuration"))

            for key, value in config.to_dict().items():
                doc[key] = value

            with open(temp_path, "w", encoding="utf-8") as f:
                tomlkit.dump(doc, f)
            temp_path.replace(path)

        except Exception as e:
            if temp_path.exists():
                temp_path.unlink()
            raise ConfigError(f"Failed to save config: {e}") from e

        logger.debug(f"Saved config to: {path}")
        return path


__all__ = ["ConfigManager", "HelpDocConfig"]
