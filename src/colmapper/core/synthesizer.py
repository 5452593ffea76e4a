"""Table schema synthesis from an object shape."""

import logging
from collections.abc import Callable, Iterable
from typing import Any

from pydantic import ValidationError

from colmapper.core.column_types import ColumnType, column_type_for
from colmapper.core.convention import (
    SUFFIX_ASSIGN,
    SetterNaming,
    camel_case_to_underscore,
    setter_property_name,
)
from colmapper.core.exceptions import MapperConfigurationError, UnsupportedTypeError
from colmapper.core.schema import ColumnDef, ColumnRole, TableDef
from colmapper.core.shape import ObjectShape

logger = logging.getLogger(__name__)

TypeOracle = Callable[[Any], ColumnType]

# Character reserved for compiler or generator synthesized member names
SYNTHETIC_MARKER = "$"


def candidate_property_names(
    shape: ObjectShape,
    root_type_getters: Iterable[str] = (),
    setter_naming: SetterNaming = SUFFIX_ASSIGN,
    synthetic_marker: str = SYNTHETIC_MARKER,
) -> list[str]:
    """Names of the properties that may become columns, in column order.

    Constructor parameters come first, then getters, then setters. Getters
    inherited from runtime base types and synthetic names are left out.
    """
    root_names = set(root_type_getters)
    param_names = [param.name for param in shape.constructor_params]
    getter_names = [g.name for g in shape.getters if g.name not in root_names]
    setter_names = [
        setter_property_name(s.name, setter_naming, shape.property_names)
        for s in shape.setters
    ]

    names = dict.fromkeys(param_names + getter_names + setter_names)
    return [name for name in names if not (synthetic_marker and synthetic_marker in name)]


def mappable_properties(
    shape: ObjectShape,
    names: Iterable[str],
    type_oracle: TypeOracle = column_type_for,
) -> list[tuple[str, ColumnType]]:
    """Pair each property with its column type, dropping unmappable ones."""
    getter_types = shape.getter_types
    param_types = shape.constructor_param_types

    mappable = []
    for name in names:
        python_type = getter_types.get(name, param_types.get(name))
        if python_type is None:
            logger.debug(f"Skipping {shape.type_name}.{name}: no declared type")
            continue
        try:
            column_type = type_oracle(python_type)
        except UnsupportedTypeError as e:
            logger.debug(f"Skipping {shape.type_name}.{name}: {e.message}")
            continue
        mappable.append((name, column_type))
    return mappable


def synthesize_table(
    keyspace_name: str,
    table_name: str,
    shape: ObjectShape,
    type_oracle: TypeOracle = column_type_for,
    root_type_getters: Iterable[str] | None = None,
    setter_naming: SetterNaming = SUFFIX_ASSIGN,
    synthetic_marker: str = SYNTHETIC_MARKER,
    partition_key: str | None = None,
) -> TableDef:
    """Create a new table definition able to store objects of a shape.

    Every mappable property becomes a column named by the camel case to
    underscore convention. Overrides and aliases are not applied.

    The partition key is the first mappable property in declaration order
    (constructor parameters, then getters, then setters) unless
    ``partition_key`` names another one. All other columns are regular;
    no clustering columns are created.

    Args:
        keyspace_name: Keyspace of the new table.
        table_name: Name of the new table.
        shape: Shape of the mapped type.
        type_oracle: Maps a Python type to a column type, raising
            UnsupportedTypeError for types without one.
        root_type_getters: Getter names to exclude; defaults to the shape's
            own ``root_getters``.
        setter_naming: Policy turning setter names into property names.
        synthetic_marker: Names containing it are never mapped.
        partition_key: Property to use as partition key.

    Returns:
        The new TableDef.

    Raises:
        MapperConfigurationError: If the shape has no mappable property, or
            ``partition_key`` is not one of the mappable properties.
    """
    if root_type_getters is None:
        root_type_getters = shape.root_getters

    names = candidate_property_names(shape, root_type_getters, setter_naming, synthetic_marker)
    properties = mappable_properties(shape, names, type_oracle)

    if not properties:
        raise MapperConfigurationError(
            f"No mappable properties found in class: {shape.type_name}"
        )

    if partition_key is not None:
        index = next((i for i, (name, _) in enumerate(properties) if name == partition_key), None)
        if index is None:
            raise MapperConfigurationError(
                f"Partition key {partition_key!r} is not a mappable property "
                f"of class: {shape.type_name}"
            )
        properties.insert(0, properties.pop(index))

    columns = [
        ColumnDef(
            name=camel_case_to_underscore(name),
            role=ColumnRole.PARTITION_KEY if i == 0 else ColumnRole.REGULAR,
            type=column_type,
        )
        for i, (name, column_type) in enumerate(properties)
    ]
    logger.debug(
        f"Synthesized {keyspace_name}.{table_name} for {shape.type_name} "
        f"with partition key {columns[0].name!r} and {len(columns) - 1} regular columns"
    )

    try:
        return TableDef(
            keyspace_name=keyspace_name,
            table_name=table_name,
            partition_key=(columns[0],),
            clustering_columns=(),
            regular_columns=tuple(columns[1:]),
        )
    except ValidationError as e:
        # e.g. "emailAddress" and "email_address" both becoming one column
        raise MapperConfigurationError(
            f"Cannot build table for class {shape.type_name}: {e}"
        ) from e
