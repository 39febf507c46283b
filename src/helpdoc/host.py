"""Host shell bridge.

The renderers never introspect commands themselves. They talk to a
CommandHost, which can load a module from a path, enumerate a module's
commands, and write a command's formatted help text to a file.

PowerShellHost implements the protocol on top of ``pwsh``. Each call is a
fresh process, so modules registered with ``reload_module`` are imported
again at the top of every script.

Usage:
    host = PowerShellHost()
    host.reload_module("Tools", Path("out/Tools.psm1"))
    with help_extract(host, "Get-Foo") as path:
        text = HelpExtractor().read_document(path)
"""

import logging
import os
import subprocess
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Protocol

from helpdoc.errors import HostError
from helpdoc.help_extractor import HELP_WIDTH

logger = logging.getLogger(__name__)


class CommandHost(Protocol):
    """Module-loading and help facilities of the host shell."""

    def command_exists(self, name: str) -> bool: ...

    def module_exists(self, name: str) -> bool: ...

    def list_module_commands(self, module: str) -> list[str]: ...

    def write_help(self, command: str, path: Path, width: int = HELP_WIDTH) -> None: ...

    def reload_module(self, module: str, path: Path) -> None: ...


@contextmanager
def help_extract(host: CommandHost, command: str, width: int = HELP_WIDTH) -> Iterator[Path]:
    """Write a command's help text to a temporary file for the block's duration.

    The file is deleted when the block exits, including on error.

    Args:
        host: Host that formats the help text
        command: Command name
        width: Rendering width passed to the host

    Yields:
        Path to the temporary extract
    """
    fd, name = tempfile.mkstemp(prefix="helpdoc-", suffix=".txt")
    os.close(fd)
    path = Path(name)
    try:
        host.write_help(command, path, width)
        yield path
    finally:
        path.unlink(missing_ok=True)
        logger.debug(f"Removed help extract for {command}")


def _quote(value: str) -> str:
    """Quote a value as a PowerShell single-quoted literal."""
    return "'" + value.replace("'", "''") + "'"


class PowerShellHost:
    """CommandHost backed by the ``pwsh`` executable."""

    def __init__(self, executable: str = "pwsh", timeout: int = 120):
        """Initialize host.

        Args:
            executable: PowerShell executable name or path
            timeout: Seconds allowed per host call
        """
        self.executable = executable
        self.timeout = timeout
        self._modules: dict[str, Path] = {}

    def _run(self, script: str) -> str:
        """Run a script after importing every registered module.

        Returns:
            Standard output of the script

        Raises:
            HostError: If pwsh is missing, times out, or exits non-zero
        """
        imports = [
            f"Import-Module -Name {_quote(str(path))} -Force -ErrorAction Stop"
            for path in self._modules.values()
        ]
        full_script = "\n".join([*imports, script])
        cmd = [self.executable, "-NoProfile", "-NonInteractive", "-Command", full_script]

        logger.debug(f"Running host script: {script}")
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, check=True, timeout=self.timeout
            )
        except FileNotFoundError as e:
            raise HostError(
                f"PowerShell executable not found: {self.executable}\n"
                "Install PowerShell 7 or set pwsh_executable in the config file."
            ) from e
        except subprocess.TimeoutExpired as e:
            raise HostError(f"Host call timed out after {self.timeout}s") from e
        except subprocess.CalledProcessError as e:
            raise HostError(f"Host call failed: {e.stderr.strip() or e}") from e

        return result.stdout

    def _check(self, script: str) -> bool:
        return self._run(f"if ({script}) {{ 'True' }} else {{ 'False' }}").strip() == "True"

    def command_exists(self, name: str) -> bool:
        return self._check(
            f"Get-Command -Name {_quote(name)} -CommandType Cmdlet,Function -ErrorAction SilentlyContinue"
        )

    def module_exists(self, name: str) -> bool:
        if name in self._modules:
            return True
        return self._check(f"Get-Module -ListAvailable -Name {_quote(name)}")

    def list_module_commands(self, module: str) -> list[str]:
        output = self._run(f"Get-Command -Module {_quote(module)} | ForEach-Object {{ $_.Name }}")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def write_help(self, command: str, path: Path, width: int = HELP_WIDTH) -> None:
        self._run(
            f"Get-Help -Name {_quote(command)} -Full | "
            f"Out-File -FilePath {_quote(str(path))} -Width {int(width)} -Encoding utf8"
        )

    def reload_module(self, module: str, path: Path) -> None:
        """Register a module file and import it once to validate it.

        Raises:
            HostError: If the module fails to import
        """
        self._modules.pop(module, None)
        self._run(f"Import-Module -Name {_quote(str(path))} -Force -ErrorAction Stop")
        self._modules[module] = Path(path)
        logger.info(f"Reloaded module {module} from {path}")


__all__ = ["CommandHost", "PowerShellHost", "help_extract"]
