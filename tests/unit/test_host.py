"""
Unit tests for the host bridge.

Test Coverage:
- Scoped help extracts (creation and guaranteed cleanup)
- PowerShellHost script construction
- Module re-import after reload
- Host failure translation
"""

import subprocess
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from helpdoc.errors import HostError
from helpdoc.host import PowerShellHost, _quote, help_extract
from tests.fixtures.help_texts import GET_FOO_HELP
from tests.mocks.host_mock import FakeHost


def completed(stdout: str = "") -> Mock:
    return Mock(returncode=0, stdout=stdout, stderr="")


def script_of(mock_run: Mock, call: int = -1) -> str:
    """Return the -Command script of a recorded subprocess.run call."""
    cmd = mock_run.call_args_list[call][0][0]
    return cmd[cmd.index("-Command") + 1]


class TestHelpExtract:
    """Test the temporary help extract context manager."""

    def test_extract_exists_inside_block(self):
        host = FakeHost(help_texts={"Get-Foo": GET_FOO_HELP})

        with help_extract(host, "Get-Foo") as path:
            assert path.read_text(encoding="utf-8") == GET_FOO_HELP

        assert not path.exists()

    def test_extract_removed_when_block_raises(self):
        host = FakeHost(help_texts={"Get-Foo": GET_FOO_HELP})

        with pytest.raises(RuntimeError):
            with help_extract(host, "Get-Foo") as path:
                raise RuntimeError("boom")

        assert not path.exists()

    def test_extract_removed_when_host_fails(self):
        host = FakeHost()

        with pytest.raises(HostError):
            with help_extract(host, "Get-Missing"):
                pass

        assert not host.extract_paths[0].exists()

    def test_width_is_passed_to_host(self):
        host = FakeHost(help_texts={"Get-Foo": GET_FOO_HELP})

        with help_extract(host, "Get-Foo", width=200):
            pass

        assert host.widths == [200]


class TestQuote:
    """Test PowerShell literal quoting."""

    def test_plain(self):
        assert _quote("Get-Foo") == "'Get-Foo'"

    def test_embedded_quote(self):
        assert _quote("it's") == "'it''s'"


class TestPowerShellHost:
    """Test pwsh script construction with subprocess.run patched."""

    @patch("helpdoc.host.subprocess.run")
    def test_command_line(self, mock_run):
        mock_run.return_value = completed("True\n")

        assert PowerShellHost(executable="pwsh-preview").command_exists("Get-Foo")

        cmd = mock_run.call_args[0][0]
        assert cmd[:4] == ["pwsh-preview", "-NoProfile", "-NonInteractive", "-Command"]
        assert "Get-Command -Name 'Get-Foo'" in script_of(mock_run)

    @patch("helpdoc.host.subprocess.run")
    def test_command_missing(self, mock_run):
        mock_run.return_value = completed("False\n")
        assert not PowerShellHost().command_exists("Get-Nope")

    @patch("helpdoc.host.subprocess.run")
    def test_list_module_commands(self, mock_run):
        mock_run.return_value = completed("Get-Foo\r\nSet-Foo\r\n\r\n")

        assert PowerShellHost().list_module_commands("Tools") == ["Get-Foo", "Set-Foo"]
        assert "Get-Command -Module 'Tools'" in script_of(mock_run)

    @patch("helpdoc.host.subprocess.run")
    def test_write_help_uses_width(self, mock_run):
        mock_run.return_value = completed()

        PowerShellHost().write_help("Get-Foo", Path("/tmp/extract.txt"), width=500)

        script = script_of(mock_run)
        assert "Get-Help -Name 'Get-Foo' -Full" in script
        assert "-Width 500" in script
        assert "-FilePath '/tmp/extract.txt'" in script

    @patch("helpdoc.host.subprocess.run")
    def test_reloaded_module_is_imported_by_later_calls(self, mock_run):
        mock_run.return_value = completed("True\n")
        host = PowerShellHost()

        host.reload_module("Tools", Path("/out/Tools.psm1"))
        host.command_exists("Get-Foo")

        assert script_of(mock_run, 0).startswith("Import-Module -Name '/out/Tools.psm1'")
        assert script_of(mock_run, 1).startswith("Import-Module -Name '/out/Tools.psm1' -Force")
        assert host.module_exists("Tools")

    @patch("helpdoc.host.subprocess.run")
    def test_failed_reload_is_not_registered(self, mock_run):
        mock_run.side_effect = subprocess.CalledProcessError(1, "pwsh", stderr="bad module")
        host = PowerShellHost()

        with pytest.raises(HostError, match="bad module"):
            host.reload_module("Tools", Path("/out/Tools.psm1"))

        mock_run.side_effect = None
        mock_run.return_value = completed("False\n")
        assert not host.module_exists("Tools")

    @patch("helpdoc.host.subprocess.run")
    def test_missing_executable(self, mock_run):
        mock_run.side_effect = FileNotFoundError("pwsh")

        with pytest.raises(HostError, match="PowerShell executable not found"):
            PowerShellHost().module_exists("Tools")

    def test_real_pwsh_is_never_started(self):
        with pytest.raises(RuntimeError, match="Real host call attempted in tests: pwsh"):
            PowerShellHost().module_exists("Tools")

    @patch("helpdoc.host.subprocess.run")
    def test_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired("pwsh", 5)

        with pytest.raises(HostError, match="timed out after 5s"):
            PowerShellHost(timeout=5).module_exists("Tools")
