"""Services for colmapper."""

from colmapper.core.services.config_loader import (
    ConfigLoadError,
    MappingConfig,
    load_mapping_config,
    load_table_def,
    load_yaml_config,
    substitute_env_vars,
)
from colmapper.core.services.mapping_service import (
    MappingService,
    MappingServiceError,
    TargetNotFoundError,
    import_target,
)

__all__ = [
    # Mapping service
    "MappingService",
    "MappingServiceError",
    "TargetNotFoundError",
    "import_target",
    # Config loader
    "ConfigLoadError",
    "MappingConfig",
    "load_yaml_config",
    "load_table_def",
    "load_mapping_config",
    "substitute_env_vars",
]
