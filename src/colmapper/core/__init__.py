"""Core mapping logic for colmapper."""

from colmapper.core.column_map import ColumnMap
from colmapper.core.column_types import (
    ColumnType,
    ListType,
    MapType,
    Native,
    NativeType,
    SetType,
    TupleType,
    column_type_for,
    parse_column_type,
)
from colmapper.core.convention import (
    FLUENT,
    JAVA_BEAN,
    PLAIN,
    SUFFIX_ASSIGN,
    SetterNaming,
    camel_case_to_underscore,
    column_name_for_property,
    get_setter_naming,
    resolve_column_name,
    setter_property_name,
)
from colmapper.core.exceptions import (
    MapperConfigurationError,
    MapperError,
    ShapeExtractionError,
    UnsupportedTypeError,
)
from colmapper.core.mapper import ColumnMapper, DefaultColumnMapper
from colmapper.core.schema import ColumnDef, ColumnName, ColumnRole, TableDef
from colmapper.core.shape import ObjectShape, PropertySpec, ShapeCache, ShapeExtractor
from colmapper.core.synthesizer import synthesize_table

__all__ = [
    # Mappers
    "ColumnMapper",
    "DefaultColumnMapper",
    "ColumnMap",
    "synthesize_table",
    # Schema
    "ColumnName",
    "ColumnRole",
    "ColumnDef",
    "TableDef",
    # Column types
    "ColumnType",
    "NativeType",
    "Native",
    "ListType",
    "SetType",
    "MapType",
    "TupleType",
    "column_type_for",
    "parse_column_type",
    # Conventions
    "SetterNaming",
    "SUFFIX_ASSIGN",
    "JAVA_BEAN",
    "FLUENT",
    "PLAIN",
    "camel_case_to_underscore",
    "column_name_for_property",
    "resolve_column_name",
    "setter_property_name",
    "get_setter_naming",
    # Shapes
    "ObjectShape",
    "PropertySpec",
    "ShapeCache",
    "ShapeExtractor",
    # Exceptions
    "MapperError",
    "MapperConfigurationError",
    "UnsupportedTypeError",
    "ShapeExtractionError",
]
