"""Service running column mappers for classes named by import path."""

import importlib
import logging
from pathlib import Path

from colmapper.config.settings import Settings, get_settings
from colmapper.core.column_map import ColumnMap
from colmapper.core.mapper import DefaultColumnMapper
from colmapper.core.schema import TableDef
from colmapper.core.services.config_loader import (
    MappingConfig,
    load_mapping_config,
    load_table_def,
)
from colmapper.core.shape import ObjectShape, ShapeCache

logger = logging.getLogger(__name__)


class MappingServiceError(Exception):
    """Raised when a mapping service operation fails."""

    pass


class TargetNotFoundError(MappingServiceError):
    """Raised when a target class cannot be imported."""

    def __init__(self, target: str, reason: str) -> None:
        self.target = target
        self.reason = reason
        super().__init__(f"Cannot load target {target!r}: {reason}")


def import_target(target: str) -> type:
    """Import a class given as ``package.module:ClassName``.

    Nested classes can be reached with dots after the colon
    (``module:Outer.Inner``).

    Raises:
        TargetNotFoundError: If the module or class cannot be found.
    """
    module_name, sep, qualname = target.partition(":")
    if not sep or not module_name or not qualname:
        raise TargetNotFoundError(target, "expected format 'module:ClassName'")

    try:
        obj: object = importlib.import_module(module_name)
    except ImportError as e:
        raise TargetNotFoundError(target, str(e)) from e

    for attr in qualname.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError:
            raise TargetNotFoundError(target, f"{attr!r} not found") from None

    if not isinstance(obj, type):
        raise TargetNotFoundError(target, "not a class")
    return obj


class MappingService:
    """Service for mapping classes to tables.

    Handles:
    - Importing target classes by path
    - Loading schema and mapping files
    - Building column maps and new table definitions
    """

    def __init__(
        self,
        settings: Settings | None = None,
        shape_cache: ShapeCache | None = None,
    ) -> None:
        """Initialize mapping service.

        Args:
            settings: Settings to use; defaults to the cached global settings.
            shape_cache: Cache shared by all mappers built by this service.
        """
        self.settings = settings or get_settings()
        self.shape_cache = shape_cache if shape_cache is not None else ShapeCache()

    def load_mapping(self, mapping_path: Path | None = None) -> MappingConfig:
        """Load overrides and aliases, falling back to the configured file."""
        path = mapping_path or self.settings.mapping_file
        if path is None:
            return MappingConfig()
        return load_mapping_config(path)

    def get_mapper(
        self,
        target: str | type,
        mapping: MappingConfig | None = None,
    ) -> DefaultColumnMapper:
        """Build a mapper for a class or an import path."""
        cls = import_target(target) if isinstance(target, str) else target
        overrides = mapping.overrides if mapping else {}
        return DefaultColumnMapper(
            cls,
            column_name_override=overrides,
            setter_naming=self.settings.resolved_setter_naming,
            shape_cache=self.shape_cache,
            synthetic_marker=self.settings.synthetic_marker,
        )

    def get_shape(self, target: str | type) -> ObjectShape:
        """Get the shape of a class as seen by the mapper."""
        return self.get_mapper(target).shape

    def new_table(
        self,
        target: str | type,
        keyspace_name: str,
        table_name: str,
        partition_key: str | None = None,
    ) -> TableDef:
        """Synthesize a table for a class.

        Raises:
            TargetNotFoundError: If the target cannot be imported.
            MapperConfigurationError: If the class has no mappable properties.
        """
        mapper = self.get_mapper(target)
        table_def = mapper.new_table(keyspace_name, table_name, partition_key=partition_key)
        logger.info(
            f"Created table definition {keyspace_name}.{table_name} for {mapper.type_name}"
        )
        return table_def

    def column_map(
        self,
        target: str | type,
        schema_path: Path,
        mapping_path: Path | None = None,
    ) -> tuple[TableDef, ColumnMap]:
        """Map a class onto the table described by a schema file.

        Returns:
            The loaded table definition and the column map.

        Raises:
            TargetNotFoundError: If the target cannot be imported.
            ConfigLoadError: If a schema or mapping file is invalid.
        """
        table_def = load_table_def(schema_path)
        mapping = self.load_mapping(mapping_path)
        mapper = self.get_mapper(target, mapping)
        return table_def, mapper.column_map(table_def, mapping.aliases)
