"""Schema and mapping file loading with environment variable substitution."""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from colmapper.core.exceptions import UnsupportedTypeError
from colmapper.core.schema import TableDef

# ${VAR} or ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([^}:-]+)(?::-([^}]*))?\}")


class ConfigLoadError(Exception):
    """Raised when configuration loading fails."""

    pass


class MappingConfig(BaseModel):
    """Column name overrides and aliases read from a mapping file."""

    overrides: dict[str, str] = Field(
        default_factory=dict,
        description="Property name to column name, highest precedence",
    )
    aliases: dict[str, str] = Field(
        default_factory=dict,
        description="Result column label to column name",
    )


def substitute_env_vars(value: Any) -> Any:
    """Recursively substitute ${VAR} patterns with environment variables.

    Supports:
    - ${VAR} - Required variable (raises if not set)
    - ${VAR:-default} - Variable with default value

    Raises:
        ConfigLoadError: If required variable is not set.
    """
    if isinstance(value, str):

        def replace(match: re.Match) -> str:
            var_name, default = match.group(1), match.group(2)
            env_value = os.environ.get(var_name)
            if env_value is not None:
                return env_value
            if default is not None:
                return default
            raise ConfigLoadError(
                f"Environment variable '{var_name}' is not set and no default provided"
            )

        return _ENV_VAR_PATTERN.sub(replace, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(item) for item in value]

    return value


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load a YAML mapping document with environment variable substitution.

    Raises:
        ConfigLoadError: If the file is missing, invalid, empty or not a mapping.
    """
    if not path.exists():
        raise ConfigLoadError(f"Configuration file not found: {path}")

    try:
        with open(path) as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Invalid YAML in {path}: {e}") from e

    if config is None:
        raise ConfigLoadError(f"Empty configuration file: {path}")
    if not isinstance(config, dict):
        raise ConfigLoadError(f"Expected a mapping at the top of {path}")

    return substitute_env_vars(config)


def load_table_def(path: Path) -> TableDef:
    """Load a table schema file.

    Example schema file:
        keyspace: ${KEYSPACE:-app}
        table: users
        partition_key:
          - {name: login, type: text}
        clustering_columns: []
        regular_columns:
          - {name: email_address, type: text}
          - {name: tags, type: set<text>}

    Raises:
        ConfigLoadError: If the file cannot be loaded or is not a valid table.
    """
    config = load_yaml_config(path)
    data = {
        "keyspace_name": config.get("keyspace"),
        "table_name": config.get("table"),
        "partition_key": config.get("partition_key") or [],
        "clustering_columns": config.get("clustering_columns") or [],
        "regular_columns": config.get("regular_columns") or [],
    }
    try:
        return TableDef.model_validate(data)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid table schema in {path}: {e}") from e
    except UnsupportedTypeError as e:
        raise ConfigLoadError(f"Invalid column type in {path}: {e.message}") from e


def load_mapping_config(path: Path) -> MappingConfig:
    """Load a mapping file with ``overrides`` and ``aliases`` sections.

    Raises:
        ConfigLoadError: If the file cannot be loaded or is invalid.
    """
    config = load_yaml_config(path)
    try:
        return MappingConfig.model_validate(config)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid mapping file {path}: {e}") from e
