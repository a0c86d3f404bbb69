"""Tests for the command-line interface."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from diskrank.app.cli import (
    EXIT_ERROR,
    EXIT_INTERRUPTED,
    apply_cli_overrides,
    cli,
    discover_config_file,
)
from diskrank.core.config import MainConfig
from diskrank.core.data.filesystem import SizeMode
from diskrank.ui import TerminalError

pytestmark = pytest.mark.usefixtures("restore_root_logger")


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at an empty directory so user config files are never found."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


class TestCLIBasicFunctionality:
    """Test basic CLI functionality."""

    def test_help(self, runner: CliRunner) -> None:
        """Help lists the options."""
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "Rank directory contents by size" in result.output
        for option in ("--tui", "--config", "--workers", "--size-mode", "--no-color", "--log-level"):
            assert option in result.output

    def test_short_help(self, runner: CliRunner) -> None:
        """-h is accepted as help."""
        result = runner.invoke(cli, ["-h"])

        assert result.exit_code == 0
        assert "Usage:" in result.output

    def test_version(self, runner: CliRunner) -> None:
        """Version output names the program."""
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "diskrank" in result.output
        assert "version" in result.output.lower()

    def test_default_invocation(self, runner: CliRunner) -> None:
        """Without arguments the current directory is reported."""
        with patch("diskrank.app.runner.ApplicationRunner") as mock_runner:
            mock_instance = MagicMock()
            mock_runner.return_value = mock_instance

            result = runner.invoke(cli, [])

            assert result.exit_code == 0
            mock_runner.assert_called_once()
            call_args = mock_runner.call_args
            assert call_args.args[0] == Path(".")
            assert call_args.kwargs["tui"] is False
            mock_instance.run.assert_called_once()  # pyright: ignore[reportAny]

    def test_tui_flag(self, runner: CliRunner, tmp_path: Path) -> None:
        """--tui selects the browser."""
        with patch("diskrank.app.runner.ApplicationRunner") as mock_runner:
            result = runner.invoke(cli, [str(tmp_path), "--tui"])

            assert result.exit_code == 0
            assert mock_runner.call_args.kwargs["tui"] is True


class TestReportOutput:
    """Test the report printed by a real run."""

    def test_report(self, runner: CliRunner, sample_tree: Path) -> None:
        """The ranked report lists children largest first."""
        result = runner.invoke(cli, [str(sample_tree), "--no-color"])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == f"Analyzing: {sample_tree}"
        rows = lines[3:6]
        assert rows[0].endswith("big.log")
        assert rows[1].endswith("sub/")
        assert rows[2].endswith("small.txt")
        assert lines[6] == "Total: 8.00 MB in 3 entries"

    def test_no_ansi_when_not_a_tty(self, runner: CliRunner, sample_tree: Path) -> None:
        """Colour codes are stripped when output is captured."""
        result = runner.invoke(cli, [str(sample_tree)])

        assert result.exit_code == 0
        assert "\x1b[" not in result.output

    def test_binary_and_bar_width(self, runner: CliRunner, sample_tree: Path) -> None:
        """Display options reach the report."""
        result = runner.invoke(cli, [str(sample_tree), "--no-color", "--binary", "--bar-width", "5"])

        assert result.exit_code == 0
        assert "MiB" in result.output
        assert result.output.splitlines()[3].split(" │ ")[1] == "███░░"

    def test_empty_directory(self, runner: CliRunner, tmp_path: Path) -> None:
        """An empty directory prints the empty message and succeeds."""
        empty = tmp_path / "empty"
        empty.mkdir()

        result = runner.invoke(cli, [str(empty)])

        assert result.exit_code == 0
        assert "Directory is empty or cannot be accessed" in result.output
        assert "Total:" not in result.output

    def test_missing_directory_is_not_an_error(self, runner: CliRunner, tmp_path: Path) -> None:
        """A missing directory is reported as empty."""
        result = runner.invoke(cli, [str(tmp_path / "missing")])

        assert result.exit_code == 0
        assert "Directory is empty or cannot be accessed" in result.output


class TestOptionValidation:
    """Test option validation callbacks."""

    def test_invalid_log_level(self, runner: CliRunner) -> None:
        """Unknown log levels are rejected by click."""
        result = runner.invoke(cli, ["--log-level", "chatty"])

        assert result.exit_code == 2
        assert "Invalid log level" in result.output

    def test_log_level_is_case_insensitive(self, runner: CliRunner, tmp_path: Path) -> None:
        """Lower-case level names are normalised."""
        result = runner.invoke(cli, [str(tmp_path), "-l", "debug"])

        assert result.exit_code == 0

    def test_config_must_be_yaml(self, runner: CliRunner, tmp_path: Path) -> None:
        """Configuration files need a YAML extension."""
        config_file = tmp_path / "diskrank.toml"
        _ = config_file.write_text("")

        result = runner.invoke(cli, ["--config", str(config_file)])

        assert result.exit_code == 2
        assert "Invalid configuration file extension" in result.output

    def test_config_must_not_be_directory(self, runner: CliRunner, tmp_path: Path) -> None:
        """A directory is not a configuration file."""
        config_dir = tmp_path / "conf.yaml"
        config_dir.mkdir()

        result = runner.invoke(cli, ["-c", str(config_dir)])

        assert result.exit_code == 2
        assert "must be a file" in result.output

    def test_workers_must_be_positive(self, runner: CliRunner) -> None:
        """Zero workers is rejected."""
        result = runner.invoke(cli, ["--workers", "0"])

        assert result.exit_code == 2

    def test_size_mode_choices(self, runner: CliRunner) -> None:
        """Only known size modes are accepted."""
        result = runner.invoke(cli, ["--size-mode", "blocks"])

        assert result.exit_code == 2


class TestErrorHandling:
    """Test exit codes for failures."""

    def test_missing_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """A named configuration file that does not exist exits with 1."""
        result = runner.invoke(cli, ["--config", str(tmp_path / "missing.yaml")])

        assert result.exit_code == EXIT_ERROR
        assert "Configuration error" in result.output

    def test_invalid_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """A configuration file that fails validation exits with 1."""
        config_file = tmp_path / "bad.yaml"
        _ = config_file.write_text("display:\n  bar_width: 0\n")

        result = runner.invoke(cli, ["--config", str(config_file)])

        assert result.exit_code == EXIT_ERROR
        assert "bar_width" in result.output

    def test_keyboard_interrupt(self, runner: CliRunner) -> None:
        """Interrupts exit with 130."""
        with patch("diskrank.app.runner.ApplicationRunner") as mock_runner:
            mock_runner.return_value.run.side_effect = KeyboardInterrupt

            result = runner.invoke(cli, [])

        assert result.exit_code == EXIT_INTERRUPTED
        assert "Interrupted" in result.output

    def test_terminal_error(self, runner: CliRunner) -> None:
        """A terminal that cannot enter raw mode exits with 1."""
        with patch("diskrank.app.runner.ApplicationRunner") as mock_runner:
            mock_runner.return_value.run.side_effect = TerminalError("standard input is not a terminal")

            result = runner.invoke(cli, ["--tui"])

        assert result.exit_code == EXIT_ERROR
        assert "Terminal error: standard input is not a terminal" in result.output

    def test_os_error(self, runner: CliRunner) -> None:
        """Operating system failures exit with 1."""
        with patch("diskrank.app.runner.ApplicationRunner") as mock_runner:
            mock_runner.return_value.run.side_effect = OSError("disk on fire")

            result = runner.invoke(cli, [])

        assert result.exit_code == EXIT_ERROR
        assert "Runtime error: disk on fire" in result.output


class TestConfigDiscovery:
    """Test configuration file discovery."""

    def test_none_found(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without any file the defaults apply."""
        monkeypatch.chdir(tmp_path)

        assert discover_config_file() is None

    def test_current_directory_first(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, isolated_home: Path
    ) -> None:
        """A file in the working directory wins over one in HOME."""
        monkeypatch.chdir(tmp_path)
        _ = (tmp_path / "diskrank.yml").write_text("")
        _ = (isolated_home / ".diskrank.yaml").write_text("")

        assert discover_config_file() == Path("diskrank.yml")

    def test_home_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, isolated_home: Path) -> None:
        """XDG-style config under HOME is found."""
        monkeypatch.chdir(tmp_path)
        config_file = isolated_home / ".config" / "diskrank" / "config.yaml"
        config_file.parent.mkdir(parents=True)
        _ = config_file.write_text("")

        assert discover_config_file() == config_file

    def test_discovered_file_is_used(self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """A discovered file configures the run."""
        monkeypatch.chdir(tmp_path)
        _ = (tmp_path / "diskrank.yaml").write_text("scanner:\n  max_workers: 3\n")

        with patch("diskrank.app.runner.ApplicationRunner") as mock_runner:
            result = runner.invoke(cli, [])

        assert result.exit_code == 0
        config = mock_runner.call_args.args[1]
        assert config.scanner.max_workers == 3


class TestApplyCliOverrides:
    """Test merging command-line values into configuration."""

    def test_no_overrides_keeps_config(self) -> None:
        """Without options the configuration is unchanged."""
        config = MainConfig()

        assert apply_cli_overrides(config) == config

    def test_overrides(self, tmp_path: Path) -> None:
        """Given options replace configured values."""
        config = apply_cli_overrides(
            MainConfig(),
            workers=2,
            size_mode="disk_usage",
            bar_width=40,
            no_color=True,
            binary=True,
            log_level="DEBUG",
            log_file=tmp_path / "x.log",
        )

        assert config.scanner.max_workers == 2
        assert config.scanner.size_mode == SizeMode.DISK_USAGE
        assert config.display.bar_width == 40
        assert config.display.color is False
        assert config.display.binary_units is True
        assert config.application.log_level == "DEBUG"
        assert config.application.log_file == tmp_path / "x.log"

    def test_does_not_mutate_input(self) -> None:
        """The original configuration is left untouched."""
        config = MainConfig()

        _ = apply_cli_overrides(config, workers=5)

        assert config.scanner.max_workers is None
