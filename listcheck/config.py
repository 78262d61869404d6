"""Configuration management for listcheck.

Configuration Priority Chain (highest to lowest):
1. Command-line arguments (--seed, --runs, --log-level, etc.)
2. Environment variables (LISTCHECK_MIN_SEED_LENGTH, LISTCHECK_RUNS, etc.)
3. Config file (.listcheckrc, listcheck.toml)
4. Built-in defaults

Config files are searched hierarchically:
1. Current directory
2. Parent directories (up to root)
3. User home directory (~/.listcheckrc or ~/.config/listcheck.toml)

Environment Variable Names:
- LISTCHECK_MIN_SEED_LENGTH
- LISTCHECK_MAX_SEED_LENGTH
- LISTCHECK_MAX_ARRAY_LENGTH
- LISTCHECK_RUNS
- LISTCHECK_LOG_LEVEL (or LOG_LEVEL)
- LISTCHECK_LOG_FORMAT (or LOG_FORMAT)
- LISTCHECK_LOG_FILE (or LOG_FILE)

Example .listcheckrc (YAML):
```yaml
harness:
  min_seed_length: 1
  max_seed_length: 10000
  max_array_length: 10000
  runs: 1

logging:
  level: INFO
  format: human
  file: ${LISTCHECK_LOG_DIR}/listcheck.log
```

Example listcheck.toml:
```toml
[harness]
min_seed_length = 1
max_seed_length = 10000
max_array_length = 10000
runs = 1

[logging]
level = "INFO"
format = "human"
```
"""

import json
import os
import re
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from listcheck.logging_config import get_logger

logger = get_logger(__name__)

CONFIG_FILE_NAMES = (".listcheckrc", "listcheck.toml")


class LogLevel(str, Enum):
    """Valid log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ConfigError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


@dataclass
class HarnessConfig:
    """Random content and argument sizing for a session."""
    min_seed_length: int = 1
    max_seed_length: int = 10000
    max_array_length: int = 10000
    runs: int = 1


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "human"  # "human" or "json"
    file: Optional[str] = None


@dataclass
class ListCheckConfig:
    """Complete listcheck configuration."""
    harness: HarnessConfig = field(default_factory=HarnessConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ListCheckConfig":
        """Create config from dictionary.

        Raises:
            ConfigError: If a section contains unknown keys
        """
        data = _expand_env_vars(data or {})

        try:
            return cls(
                harness=HarnessConfig(**data.get("harness", {})),
                logging=LoggingConfig(**data.get("logging", {})),
            )
        except TypeError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        return {
            "harness": {
                "min_seed_length": self.harness.min_seed_length,
                "max_seed_length": self.harness.max_seed_length,
                "max_array_length": self.harness.max_array_length,
                "runs": self.harness.runs,
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
                "file": self.logging.file,
            },
        }

    def merge(self, other: "ListCheckConfig") -> "ListCheckConfig":
        """Merge with another config (other takes precedence).

        Args:
            other: Config to merge with

        Returns:
            New merged config
        """
        merged_dict = self.to_dict()

        for section, values in other.to_dict().items():
            merged_dict.setdefault(section, {}).update(values)

        return ListCheckConfig.from_dict(merged_dict)


def _expand_env_vars(data: Union[Dict, list, str, Any]) -> Any:
    """Recursively expand ${VAR_NAME} and $VAR_NAME references.

    Unknown variables are left as written.
    """
    if isinstance(data, dict):
        return {k: _expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        pattern = re.compile(r'\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)')

        def replace_var(match):
            var_name = match.group(1) or match.group(2)
            return os.environ.get(var_name, match.group(0))

        return pattern.sub(replace_var, data)
    else:
        return data


def find_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find config file using hierarchical search.

    Searches ``start_dir`` (default: current directory) and its parents for
    ``.listcheckrc`` then ``listcheck.toml``, then falls back to
    ``~/.listcheckrc`` and ``~/.config/listcheck.toml``.

    Returns:
        Path to config file, or None if not found
    """
    current = Path.cwd() if start_dir is None else Path(start_dir).resolve()

    while True:
        for name in CONFIG_FILE_NAMES:
            candidate = current / name
            if candidate.is_file():
                logger.info(f"Found config file: {candidate}")
                return candidate

        parent = current.parent
        if parent == current:  # Reached root
            break
        current = parent

    home = Path.home()
    for candidate in (home / ".listcheckrc", home / ".config" / "listcheck.toml"):
        if candidate.is_file():
            logger.info(f"Found config file: {candidate}")
            return candidate

    logger.debug("No config file found")
    return None


def load_config_file(file_path: Path) -> Dict[str, Any]:
    """Load configuration from file.

    Supports:
    - .listcheckrc (YAML or JSON)
    - *.yaml / *.yml / *.json
    - *.toml

    Args:
        file_path: Path to config file

    Returns:
        Configuration dictionary

    Raises:
        ConfigError: If file cannot be parsed or format not supported
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise ConfigError(f"Config file not found: {file_path}")

    try:
        content = file_path.read_text()
    except OSError as e:
        raise ConfigError(f"Failed to read config file {file_path}: {e}")

    if file_path.suffix == ".toml":
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Failed to parse TOML config {file_path}: {e}")
        logger.debug(f"Loaded TOML config from {file_path}")
        return data

    if file_path.name == ".listcheckrc" or file_path.suffix in (".yaml", ".yml", ".json"):
        if file_path.suffix == ".json":
            try:
                data = json.loads(content)
            except json.JSONDecodeError as e:
                raise ConfigError(f"Failed to parse JSON config {file_path}: {e}")
            logger.debug(f"Loaded JSON config from {file_path}")
        else:
            # YAML is a superset of JSON, so .listcheckrc may hold either
            try:
                data = yaml.safe_load(content)
            except yaml.YAMLError as e:
                raise ConfigError(f"Failed to parse {file_path} as YAML or JSON: {e}")
            logger.debug(f"Loaded YAML config from {file_path}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {file_path} must contain a mapping")
        return data

    raise ConfigError(f"Unsupported config file format: {file_path}")


def _int_from_env(key: str) -> Optional[int]:
    value = os.getenv(key)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid {key} value: {value}, ignoring")
        return None


def load_config_from_env() -> Dict[str, Any]:
    """Load configuration from environment variables.

    Environment variables take precedence over config files but are
    overridden by command-line arguments.

    Returns:
        Configuration dictionary with values from environment
    """
    config: Dict[str, Any] = {}

    harness = {}
    for key in ("min_seed_length", "max_seed_length", "max_array_length", "runs"):
        value = _int_from_env(f"LISTCHECK_{key.upper()}")
        if value is not None:
            harness[key] = value
    if harness:
        config["harness"] = harness

    # Unprefixed LOG_LEVEL, LOG_FORMAT, LOG_FILE are accepted as fallbacks
    logging_cfg = {}
    if level := os.getenv("LISTCHECK_LOG_LEVEL") or os.getenv("LOG_LEVEL"):
        logging_cfg["level"] = level.upper()
    if fmt := os.getenv("LISTCHECK_LOG_FORMAT") or os.getenv("LOG_FORMAT"):
        logging_cfg["format"] = fmt
    if file := os.getenv("LISTCHECK_LOG_FILE") or os.getenv("LOG_FILE"):
        logging_cfg["file"] = file
    if logging_cfg:
        config["logging"] = logging_cfg

    return config


def _deep_merge_dicts(base: Dict, override: Dict) -> Dict:
    """Deep merge two dictionaries (base is not modified)."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge_dicts(result[key], value)
        else:
            result[key] = value

    return result


def load_config(
    config_file: Optional[Union[str, Path]] = None,
    search_path: Optional[Path] = None,
    use_env: bool = True,
) -> ListCheckConfig:
    """Load listcheck configuration with fallback chain.

    Args:
        config_file: Explicit path to config file (optional)
        search_path: Starting directory for hierarchical search (default: current dir)
        use_env: Whether to load from environment variables (default: True)

    Returns:
        ListCheckConfig instance with merged configuration

    Raises:
        ConfigError: If specified config file cannot be loaded
    """
    merged_data: Dict[str, Any] = {}

    config_path = Path(config_file) if config_file else find_config_file(search_path)
    if config_path:
        file_data = load_config_file(config_path)
        logger.info(f"Loaded configuration from {config_path}")
        merged_data = _deep_merge_dicts(merged_data, file_data)

    if use_env:
        env_data = load_config_from_env()
        if env_data:
            logger.debug("Loaded configuration from environment variables")
            merged_data = _deep_merge_dicts(merged_data, env_data)

    return ListCheckConfig.from_dict(merged_data)


def validate_config(config: ListCheckConfig) -> List[str]:
    """Validate configuration and return warnings.

    Args:
        config: The configuration to validate

    Returns:
        List of warning messages (empty if no warnings)

    Raises:
        ConfigError: If configuration has invalid values that cannot be used
    """
    warnings: List[str] = []
    harness = config.harness

    if harness.min_seed_length < 1:
        raise ConfigError("harness.min_seed_length must be at least 1")
    if harness.max_seed_length < harness.min_seed_length:
        raise ConfigError("harness.max_seed_length must be >= harness.min_seed_length")
    if harness.max_array_length < 1:
        raise ConfigError("harness.max_array_length must be at least 1")
    if harness.runs < 1:
        raise ConfigError("harness.runs must be at least 1")

    if harness.max_seed_length > 100_000:
        warnings.append(
            f"harness.max_seed_length {harness.max_seed_length} is large - "
            "quadratic candidate operations may make runs slow"
        )

    valid_levels = {level.value for level in LogLevel}
    if config.logging.level.upper() not in valid_levels:
        raise ConfigError(
            f"logging.level must be one of: {', '.join(sorted(valid_levels))}"
        )

    valid_formats = {"human", "json"}
    if config.logging.format not in valid_formats:
        raise ConfigError(
            f"logging.format must be one of: {', '.join(sorted(valid_formats))}"
        )

    return warnings


def generate_config_template(format: str = "yaml") -> str:
    """Generate configuration file template.

    Args:
        format: Template format ("yaml", "json", or "toml")

    Returns:
        Configuration template as string

    Raises:
        ConfigError: If format is not supported
    """
    data = ListCheckConfig().to_dict()

    if format == "yaml":
        template = yaml.dump(data, default_flow_style=False, sort_keys=False)
        return f"""# listcheck Configuration File (.listcheckrc)
#
# This file can be placed:
# - In your project root: .listcheckrc
# - In your home directory: ~/.listcheckrc
#
# Environment variables can be referenced using ${{VAR_NAME}} syntax.

{template}"""

    elif format == "json":
        commented_data = {
            "_comment": "listcheck Configuration File (.listcheckrc)",
            "_note": "Environment variables can be referenced using ${VAR_NAME} syntax",
        }
        commented_data.update(data)
        return json.dumps(commented_data, indent=2)

    elif format == "toml":
        # tomllib only reads, so the template is written by hand
        harness = data["harness"]
        logging_cfg = data["logging"]
        lines = [
            "# listcheck Configuration File (listcheck.toml)",
            "#",
            "# This file can be placed:",
            "# - In your project root: listcheck.toml",
            "# - In your home directory: ~/.config/listcheck.toml",
            "#",
            "# Environment variables can be referenced using ${VAR_NAME} syntax.",
            "",
            "[harness]",
            f'min_seed_length = {harness["min_seed_length"]}',
            f'max_seed_length = {harness["max_seed_length"]}',
            f'max_array_length = {harness["max_array_length"]}',
            f'runs = {harness["runs"]}',
            "",
            "[logging]",
            f'level = "{logging_cfg["level"]}"',
            f'format = "{logging_cfg["format"]}"',
            '# file = "logs/listcheck.log"',
            "",
        ]
        return "\n".join(lines)

    raise ConfigError(f"Unsupported template format: {format}")
