"""Pytest configuration and fixtures for helpdoc tests.

Keeps tests away from the user's ~/.helpdoc/config.toml, from any
helpdoc.toml in the directory pytest was started from, and from a real
pwsh executable.
"""

import pytest


def _refuse_host_call(cmd, *args, **kwargs):
    raise RuntimeError(f"Real host call attempted in tests: {cmd[0]}")


@pytest.fixture(autouse=True)
def prevent_real_host_calls(monkeypatch):
    """Fail any PowerShellHost call that would start a real pwsh process.

    Tests drive FakeHost or patch helpdoc.host.subprocess.run themselves.
    """
    monkeypatch.setattr("helpdoc.host.subprocess.run", _refuse_host_call)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point ConfigManager at tmp_path and run each test from there.

    Example:
        def test_something(isolated_config):
            config_file = isolated_config / "config.toml"
            # Safe to modify - it's in tmp_path
    """
    from helpdoc.config_manager import ConfigManager

    config_dir = tmp_path / ".helpdoc"
    monkeypatch.setattr(ConfigManager, "DEFAULT_CONFIG_DIR", config_dir)
    monkeypatch.setattr(ConfigManager, "DEFAULT_CONFIG_FILE", config_dir / "config.toml")
    monkeypatch.chdir(tmp_path)
    return config_dir
