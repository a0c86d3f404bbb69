"""Command-line interface for diskrank."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any

import click

from diskrank.core.config import ConfigurationError, MainConfig, load_main_config
from diskrank.core.data.filesystem import SizeMode
from diskrank.ui import TerminalError
from diskrank.utils.logging import configure_logging

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130

# Configuration file discovery paths in order of precedence
CURRENT_DIR_CONFIG_FILES = [
    "diskrank.yaml",
    "diskrank.yml",
]

HOME_CONFIG_FILES = [
    ".diskrank.yaml",
    ".config/diskrank/config.yaml",
]

try:
    __version__ = version("diskrank")
except PackageNotFoundError:
    __version__ = "unknown"


def discover_config_file() -> Path | None:
    """Discover a configuration file in standard locations.

    Searches for configuration files in the following order of precedence:
    1. Current directory (diskrank.yaml, diskrank.yml)
    2. User home directory (~/.diskrank.yaml, ~/.config/diskrank/config.yaml)

    Returns:
        Path to the first configuration file found, or None when there is
        none and defaults apply.
    """
    for config_file in CURRENT_DIR_CONFIG_FILES:
        config_path = Path(config_file)
        if config_path.is_file():
            return config_path

    try:
        home_dir = Path.home()
    except (OSError, RuntimeError):
        # Path.home() can fail in some environments
        return None

    for config_file in HOME_CONFIG_FILES:
        config_path = home_dir / config_file
        if config_path.is_file():
            return config_path

    return None


def validate_config_path(
    ctx: click.Context,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    param: click.Parameter,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    value: Path | None,
) -> Path | None:
    """Validate configuration file path.

    Raises:
        click.BadParameter: If the path is a directory or not a YAML file
    """
    if value is None:
        return value

    if value.is_dir():
        raise click.BadParameter("Configuration path must be a file, not a directory")

    if value.suffix.lower() not in {".yaml", ".yml"}:
        raise click.BadParameter("Invalid configuration file extension. Supported extensions: .yaml, .yml")

    return value


def validate_log_level(
    ctx: click.Context,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    param: click.Parameter,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    value: str | None,
) -> str | None:
    """Validate and normalize log level.

    Raises:
        click.BadParameter: If the level is unknown
    """
    if value is None:
        return value

    normalized_value = value.upper().strip()

    valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if normalized_value not in valid_levels:
        raise click.BadParameter(f'Invalid log level "{value}". Valid options: {", ".join(sorted(valid_levels))}')

    return normalized_value


def apply_cli_overrides(
    config: MainConfig,
    *,
    workers: int | None = None,
    size_mode: str | None = None,
    bar_width: int | None = None,
    no_color: bool = False,
    binary: bool = False,
    log_level: str | None = None,
    log_file: Path | None = None,
) -> MainConfig:
    """Return a copy of ``config`` with command-line values taking precedence."""
    scanner: dict[str, Any] = {}
    display: dict[str, Any] = {}
    application: dict[str, Any] = {}

    if workers is not None:
        scanner["max_workers"] = workers
    if size_mode is not None:
        scanner["size_mode"] = SizeMode(size_mode)
    if bar_width is not None:
        display["bar_width"] = bar_width
    if no_color:
        display["color"] = False
    if binary:
        display["binary_units"] = True
    if log_level is not None:
        application["log_level"] = log_level
    if log_file is not None:
        application["log_file"] = log_file

    return config.model_copy(
        update={
            "scanner": config.scanner.model_copy(update=scanner),
            "display": config.display.model_copy(update=display),
            "application": config.application.model_copy(update=application),
        }
    )


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument(
    "path",
    type=click.Path(path_type=Path),
    default=Path("."),
)
@click.option(
    "--tui",
    is_flag=True,
    help="Browse interactively instead of printing a one-shot report",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(path_type=Path),
    default=None,
    callback=validate_config_path,
    help="Configuration file path (.yaml, .yml). If not specified, searches for config files in standard locations.",
)
@click.option(
    "--workers",
    "-w",
    type=click.IntRange(min=1),
    default=None,
    help="Worker threads used to measure children (default: one per CPU)",
)
@click.option(
    "--size-mode",
    type=click.Choice([mode.value for mode in SizeMode]),
    default=None,
    help="Count apparent file sizes or allocated disk blocks",
)
@click.option(
    "--bar-width",
    type=click.IntRange(min=1, max=200),
    default=None,
    help="Width of the usage bar in characters",
)
@click.option("--no-color", is_flag=True, help="Disable coloured output")
@click.option("--binary", is_flag=True, help="Show sizes in KiB/MiB/GiB")
@click.option(
    "--log-level",
    "-l",
    type=str,
    default=None,
    callback=validate_log_level,
    help="Logging verbosity level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Append log records to this file",
)
@click.version_option(version=__version__, prog_name="diskrank")
def cli(
    path: Path,
    tui: bool,
    config: Path | None,
    workers: int | None,
    size_mode: str | None,
    bar_width: int | None,
    no_color: bool,
    binary: bool,
    log_level: str | None,
    log_file: Path | None,
) -> None:
    """diskrank - Rank directory contents by size.

    Measures every immediate child of PATH (default: current directory)
    concurrently and lists them largest first.

    Examples:

        # Print a ranked report of the current directory
        diskrank

        # Browse /var interactively
        diskrank /var --tui

        # Use 8 worker threads and show allocated disk usage
        diskrank ~/data --workers 8 --size-mode disk_usage
    """
    from diskrank.app.runner import ApplicationRunner

    config_path = config if config is not None else discover_config_file()

    try:
        main_config = load_main_config(config_path)
    except ConfigurationError as exc:
        click.echo(f"Configuration error:\n{exc}", err=True)
        raise SystemExit(EXIT_ERROR) from exc

    main_config = apply_cli_overrides(
        main_config,
        workers=workers,
        size_mode=size_mode,
        bar_width=bar_width,
        no_color=no_color,
        binary=binary,
        log_level=log_level,
        log_file=log_file,
    )

    configure_logging(
        log_level=main_config.application.log_level,
        log_file=main_config.application.log_file,
        # The browser owns the screen; only the log file may receive records
        enable_console=not tui,
    )

    runner = ApplicationRunner(path, main_config, tui=tui)

    try:
        runner.run()
    except KeyboardInterrupt:
        click.echo("\nInterrupted", err=True)
        raise SystemExit(EXIT_INTERRUPTED) from None
    except OSError as exc:
        click.echo(f"Runtime error: {exc}", err=True)
        raise SystemExit(EXIT_ERROR) from exc
    except TerminalError as exc:
        click.echo(f"Terminal error: {exc}", err=True)
        raise SystemExit(EXIT_ERROR) from exc
