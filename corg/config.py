"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

# Filtering order; trace and announce messages bypass the threshold
LOG_LEVELS = ("debug", "info", "success", "warning", "error")


@dataclass
class CorgConfig:
    """Configuration for converting Markdown runbooks into shell scripts.

    Attributes:
        output_dir: Directory receiving generated scripts.
        helper_path: Location of the shell logging helpers, relative to
            `output_dir`.
        write_helper: Whether `convert` also writes the helper library.
        document_extension: Extension used when looking documents up by name.
        script_extension: Extension used when looking scripts up by name.
        shell: Shell that runs generated scripts.
        log_level: Minimum console log level.
        unique_function_names: Whether repeated level-2 headings get numbered
            function names instead of redefining the earlier function.
        max_file_size: Maximum document size in bytes that will be processed.

    Examples:
        CorgConfig(output_dir="build/scripts", unique_function_names=True)
    """

    # Output
    output_dir: str = "scripts"
    helper_path: str = "utils/corg-logger.sh"
    write_helper: bool = True

    # Discovery
    document_extension: str = "md"
    script_extension: str = "sh"

    # Execution
    shell: str = "bash"

    # Behavior
    log_level: str = "info"
    unique_function_names: bool = False

    # Limits
    max_file_size: int = 10 * 1024 * 1024


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`log_level` must be one of: debug, info, ...")
    """


def load_config(search_path: Path) -> CorgConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.corg]`` table from `pyproject.toml` and the ``[corg]`` or
    ``[tool.corg]`` table from `.corg.toml` when present. Returns default
    values when no configuration is found. TOML files that cannot be read or
    decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        CorgConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but is not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("runbooks"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "corg")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".corg.toml",
            table_paths=[("corg",), ("tool", "corg")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return CorgConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> CorgConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> CorgConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    # TOML keys use dashes; dataclass fields use underscores
    settings = {key.replace("-", "_"): value for key, value in raw_config.items()}
    try:
        return CorgConfig(**settings)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: CorgConfig) -> None:
    """Validate a `CorgConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If a path or extension is empty, the log level is unknown,
            a flag is not a boolean, or the size limit is not a positive integer.

    Examples:
        validate_config(CorgConfig(log_level="debug"))
    """
    for key in ("output_dir", "helper_path", "document_extension", "script_extension", "shell"):
        value = getattr(config, key)
        if not isinstance(value, str) or not value:
            raise ConfigError(f"`{key}` must be a non-empty string")

    for key in ("document_extension", "script_extension"):
        if getattr(config, key).startswith("."):
            raise ConfigError(f"`{key}` must not start with a dot")

    if Path(config.helper_path).is_absolute():
        raise ConfigError("`helper_path` must be relative to `output_dir`")

    if config.log_level not in LOG_LEVELS:
        raise ConfigError(f"`log_level` must be one of: {', '.join(LOG_LEVELS)}")

    for key in ("write_helper", "unique_function_names"):
        if not isinstance(getattr(config, key), bool):
            raise ConfigError(f"`{key}` must be a boolean")

    if isinstance(config.max_file_size, bool) or not isinstance(config.max_file_size, int):
        raise ConfigError("`max_file_size` must be an integer")
    if config.max_file_size <= 0:
        raise ConfigError("`max_file_size` must be a positive integer")


def apply_overrides(config: CorgConfig, **overrides: object) -> CorgConfig:
    """Apply override values to a `CorgConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        CorgConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `CorgConfig`.

    Examples:
        updated = apply_overrides(config, output_dir="out", log_level="debug")
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> CorgConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        CorgConfig: Validated configuration.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), output_dir="build")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config
