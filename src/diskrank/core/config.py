"""Configuration system for the diskrank application.

This module implements the configuration schema using Pydantic for
validation, with support for environment variable resolution and fail-fast
validation with actionable error messages. A configuration file is optional;
every field has a default.
"""

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Annotated, Final

import yaml
from pydantic import BaseModel, ConfigDict, Field, PositiveInt, ValidationError

from diskrank.core.data.filesystem import SizeMode

# Regular expression pattern for environment variable references
# Matches ${VARIABLE_NAME} syntax where VARIABLE_NAME can contain letters, digits, and underscores
ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([A-Za-z0-9_]+)\}")


class ScannerConfig(BaseModel):
    """Configuration for directory scanning.

    Controls the worker pool used for per-child size measurement and how
    file sizes are counted.
    """

    model_config = ConfigDict(extra="forbid")

    max_workers: Annotated[
        PositiveInt | None,
        Field(
            description="Worker threads per scan (default: one per CPU)",
        ),
    ] = None
    batch_size: Annotated[
        int,
        Field(
            gt=0,
            description="Maximum size measurements pending at once",
        ),
    ] = 4096
    size_mode: Annotated[
        SizeMode,
        Field(
            description="Count apparent file size or allocated disk blocks",
        ),
    ] = SizeMode.APPARENT


class DisplayConfig(BaseModel):
    """Configuration for report and browser rendering."""

    model_config = ConfigDict(extra="forbid")

    bar_width: Annotated[
        int,
        Field(
            ge=1,
            le=200,
            description="Width of the usage bar in characters",
        ),
    ] = 20
    color: Annotated[
        bool,
        Field(
            description="Colour sizes and names by magnitude",
        ),
    ] = True
    binary_units: Annotated[
        bool,
        Field(
            description="Show sizes in KiB/MiB/GiB instead of kB/MB/GB",
        ),
    ] = False


class ApplicationConfig(BaseModel):
    """Configuration for application-level settings."""

    model_config = ConfigDict(extra="forbid")

    log_level: Annotated[
        str,
        Field(
            description="Logging level",
            pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        ),
    ] = "WARNING"
    log_file: Annotated[
        Path | None,
        Field(
            description="Append log records to this file",
        ),
    ] = None


class MainConfig(BaseModel):
    """Main application configuration schema.

    Top-level configuration container aggregating all configuration sections:
    - scanner: Worker pool and size counting
    - display: Rendering options
    - application: Logging settings
    """

    model_config = ConfigDict(extra="forbid")

    scanner: Annotated[
        ScannerConfig,
        Field(
            default_factory=ScannerConfig,
            description="Directory scanning configuration",
        ),
    ]
    display: Annotated[
        DisplayConfig,
        Field(
            default_factory=DisplayConfig,
            description="Rendering configuration",
        ),
    ]
    application: Annotated[
        ApplicationConfig,
        Field(
            default_factory=ApplicationConfig,
            description="Application-level configuration",
        ),
    ]


class EnvironmentVariableError(Exception):
    """Exception raised when environment variable resolution fails.

    This exception is raised when a referenced environment variable is
    missing from the environment.
    """


class ConfigurationError(Exception):
    """Exception raised when configuration loading or validation fails.

    This exception provides detailed, actionable error messages for configuration
    issues including file not found, YAML parsing errors, and validation failures.
    """


def resolve_env_var(value: str) -> str:
    """Resolve environment variable references in a string value.

    Parses ${VARIABLE_NAME} syntax and replaces with environment variable values.

    Args:
        value: String potentially containing environment variable references

    Returns:
        String with environment variables resolved

    Raises:
        EnvironmentVariableError: If a referenced environment variable is missing

    Examples:
        >>> os.environ["LOG_DIR"] = "/var/log"
        >>> resolve_env_var("${LOG_DIR}/diskrank.log")
        '/var/log/diskrank.log'
    """

    def replace_match(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)

        if env_value is None:
            msg = f"Required environment variable '{var_name}' is not set."
            raise EnvironmentVariableError(msg)

        return env_value

    return ENV_VAR_PATTERN.sub(replace_match, value)


def resolve_env_vars_in_dict(data: Mapping[str, object]) -> dict[str, object]:
    """Recursively resolve environment variables in a dictionary.

    Traverses nested dictionaries and lists, resolving environment variable
    references in string values. Non-string values are preserved as-is.

    Args:
        data: Dictionary potentially containing environment variable references

    Returns:
        New dictionary with environment variables resolved

    Raises:
        EnvironmentVariableError: If a referenced environment variable is missing
    """
    return {key: _resolve_value(value) for key, value in data.items()}


def _resolve_value(value: object) -> object:
    if isinstance(value, str):
        return resolve_env_var(value)
    if isinstance(value, dict):
        # YAML data is untyped at load time; validated by Pydantic after resolution
        return resolve_env_vars_in_dict(value)  # pyright: ignore[reportUnknownArgumentType]  # YAML boundary
    if isinstance(value, list):
        return [_resolve_value(item) for item in value]  # pyright: ignore[reportUnknownVariableType]  # YAML list items
    return value


def load_main_config(config_path: Path | None) -> MainConfig:
    """Load and validate application configuration from a YAML file.

    Loads the configuration file, resolves environment variables, and
    validates against the MainConfig schema. An absent path yields the
    default configuration.

    Args:
        config_path: Path to configuration YAML file, or None for defaults

    Returns:
        Validated MainConfig instance

    Raises:
        ConfigurationError: If configuration file cannot be loaded or is invalid

    Examples:
        >>> config = load_main_config(Path("diskrank.yaml"))
        >>> config.display.bar_width
        20
    """
    if config_path is None:
        return MainConfig()

    if not config_path.exists():
        msg = (
            f"Configuration file not found: {config_path}\n"
            f"Please create the file or omit --config to use defaults."
        )
        raise ConfigurationError(msg)

    try:
        with config_path.open("r", encoding="utf-8") as f:
            raw_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]  # YAML boundary
    except yaml.YAMLError as e:
        msg = (
            f"Failed to parse YAML configuration file: {config_path}\n"
            f"YAML parsing error: {e}\n"
            f"Please check the file for syntax errors."
        )
        raise ConfigurationError(msg) from e
    except OSError as e:
        msg = f"Failed to read configuration file: {config_path}\nError: {e}\nPlease check file permissions."
        raise ConfigurationError(msg) from e

    # An empty file means "all defaults"
    if raw_data is None:
        return MainConfig()

    if not isinstance(raw_data, dict):
        msg = (
            f"Invalid configuration file format: {config_path}\n"
            f"Expected YAML dictionary at root level, got: {type(raw_data).__name__}\n"
            f"Configuration file must contain key-value pairs."
        )
        raise ConfigurationError(msg)

    try:
        resolved_data = resolve_env_vars_in_dict(raw_data)  # pyright: ignore[reportUnknownArgumentType]  # YAML boundary
    except EnvironmentVariableError as e:
        msg = (
            f"Environment variable resolution failed in: {config_path}\n"
            f"{e}\n"
            f"Set the required environment variable and try again."
        )
        raise ConfigurationError(msg) from e

    try:
        config = MainConfig.model_validate(resolved_data)
    except ValidationError as e:
        # Format validation errors with field-level diagnostics
        error_lines = ["Configuration validation failed:", ""]
        for error in e.errors():
            field_path = " → ".join(str(loc) for loc in error["loc"])
            error_lines.append(f"  Field: {field_path}")
            error_lines.append(f"  Error: {error['msg']}")
            error_lines.append(f"  Type: {error['type']}")
            error_lines.append("")

        error_lines.append(f"Configuration file: {config_path}")
        error_lines.append("Please fix the above errors and try again.")

        raise ConfigurationError("\n".join(error_lines)) from e

    return config
