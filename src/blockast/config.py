"""Configuration loader for blockast.toml."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .core.errors import ConfigError

KEY_STRATEGIES = ("random", "counter")
OUTPUT_FORMATS = ("json", "yaml")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class KeysConfig:
    """Block key generation."""
    strategy: str = "random"
    bytes: int = 3
    prefix: str = "b"


@dataclass
class EntitiesConfig:
    """Entity id numbering."""
    start: int = 1


@dataclass
class OutputConfig:
    """Output format for compiled documents."""
    format: str = "json"
    indent: int = 2
    empty_block_type: str = "unstyled"


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class BlockastConfig:
    """Complete blockast configuration."""
    keys: KeysConfig = field(default_factory=KeysConfig)
    entities: EntitiesConfig = field(default_factory=EntitiesConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _choice(value: Any, choices: tuple[str, ...], name: str) -> str:
    if value not in choices:
        raise ConfigError(f"{name} must be one of {', '.join(choices)}, got {value!r}")
    return value


def load_config(config_path: Path | None = None) -> BlockastConfig:
    """
    Load configuration from blockast.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/blockast.toml

    Args:
        config_path: Explicit path to config file

    Returns:
        BlockastConfig with defaults filled in
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / "blockast.toml")

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    keys_data = toml_data.get("keys", {})
    keys_config = KeysConfig(
        strategy=_choice(keys_data.get("strategy", "random"), KEY_STRATEGIES, "keys.strategy"),
        bytes=keys_data.get("bytes", 3),
        prefix=keys_data.get("prefix", "b"),
    )
    if not isinstance(keys_config.bytes, int) or keys_config.bytes < 1:
        raise ConfigError(f"keys.bytes must be a positive integer, got {keys_config.bytes!r}")

    entities_data = toml_data.get("entities", {})
    entities_config = EntitiesConfig(start=entities_data.get("start", 1))
    if not isinstance(entities_config.start, int):
        raise ConfigError(f"entities.start must be an integer, got {entities_config.start!r}")

    output_data = toml_data.get("output", {})
    output_config = OutputConfig(
        format=_choice(output_data.get("format", "json"), OUTPUT_FORMATS, "output.format"),
        indent=output_data.get("indent", 2),
        empty_block_type=output_data.get("empty_block_type", "unstyled"),
    )
    if not isinstance(output_config.indent, int) or output_config.indent < 0:
        raise ConfigError(f"output.indent must be a non-negative integer, got {output_config.indent!r}")
    if not isinstance(output_config.empty_block_type, str) or not output_config.empty_block_type:
        raise ConfigError("output.empty_block_type must be a non-empty string")

    logging_data = toml_data.get("logging", {})
    level = str(logging_data.get("level", "WARNING")).upper()
    logging_config = LoggingConfig(level=_choice(level, LOG_LEVELS, "logging.level"))

    return BlockastConfig(
        keys=keys_config,
        entities=entities_config,
        output=output_config,
        logging=logging_config,
    )
