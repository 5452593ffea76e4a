"""Column mappers: associate object members with table columns."""

from abc import ABC, abstractmethod
from collections.abc import Mapping

from colmapper.core.column_map import ColumnMap
from colmapper.core.column_types import column_type_for
from colmapper.core.convention import (
    SUFFIX_ASSIGN,
    SetterNaming,
    resolve_column_name,
    setter_property_name,
)
from colmapper.core.schema import ColumnName, TableDef
from colmapper.core.shape import ObjectShape, ShapeCache, ShapeExtractor
from colmapper.core.synthesizer import SYNTHETIC_MARKER, TypeOracle, synthesize_table


class ColumnMapper(ABC):
    """Abstract base class for column mappers.

    A mapper knows one object type and can map it onto an existing table
    or describe a new table able to store it.
    """

    @property
    @abstractmethod
    def type_name(self) -> str:
        """Fully qualified name of the mapped type."""

    @abstractmethod
    def column_map(
        self,
        table_def: TableDef,
        alias_to_column_name: Mapping[str, str] | None = None,
    ) -> ColumnMap:
        """Map the type's constructor parameters and accessors to columns.

        Args:
            table_def: Table the objects are read from or written to.
            alias_to_column_name: Result column labels to column names,
                e.g. aliases of a query projection.

        Returns:
            ColumnMap for the type and table.
        """

    @abstractmethod
    def new_table(
        self,
        keyspace_name: str,
        table_name: str,
        partition_key: str | None = None,
    ) -> TableDef:
        """Describe a new table able to store objects of the type.

        Raises:
            MapperConfigurationError: If the type has no mappable properties.
        """


class DefaultColumnMapper(ColumnMapper):
    """Column mapper for camel case properties and underscore column names.

    Example mapping::

        @dataclass
        class User:
            login: str           # mapped to "login" column
            emailAddress: str    # mapped to "email_address" column
            emailAddress2: str   # mapped to "email_address_2" column

    A property named exactly like an existing column (case-sensitive) is
    mapped to that column, e.g. ``TIN`` to a ``TIN`` column.

    Args:
        target: Class to map, or an explicit ObjectShape.
        column_name_override: Property name to column name; takes precedence
            over aliases and convention.
        setter_naming: How setter names relate to property names.
        type_oracle: Maps property types to column types for new tables.
        shape_cache: Shared cache used when extracting the class shape.
        synthetic_marker: Property names containing it are never mapped
            into new tables.
    """

    def __init__(
        self,
        target: type | ObjectShape,
        column_name_override: Mapping[str, str] | None = None,
        setter_naming: SetterNaming | None = None,
        type_oracle: TypeOracle = column_type_for,
        shape_cache: ShapeCache | None = None,
        synthetic_marker: str = SYNTHETIC_MARKER,
    ) -> None:
        self.setter_naming = setter_naming or SUFFIX_ASSIGN
        if isinstance(target, ObjectShape):
            self.shape = target
        else:
            self.shape = ShapeExtractor(self.setter_naming, cache=shape_cache).extract(target)
        self.column_name_override = dict(column_name_override or {})
        self.type_oracle = type_oracle
        self.synthetic_marker = synthetic_marker

    @property
    def type_name(self) -> str:
        return self.shape.type_name

    def resolve(
        self,
        name: str,
        table_def: TableDef,
        alias_to_column_name: Mapping[str, str] | None = None,
    ) -> ColumnName:
        """Resolve a property name: override, then alias, then convention."""
        return resolve_column_name(
            name, table_def, alias_to_column_name, self.column_name_override
        )

    def constructor_param_to_column_name(
        self,
        param_name: str,
        table_def: TableDef,
        alias_to_column_name: Mapping[str, str] | None = None,
    ) -> ColumnName:
        return self.resolve(param_name, table_def, alias_to_column_name)

    def getter_to_column_name(
        self,
        getter_name: str,
        table_def: TableDef,
        alias_to_column_name: Mapping[str, str] | None = None,
    ) -> ColumnName:
        return self.resolve(getter_name, table_def, alias_to_column_name)

    def setter_to_column_name(
        self,
        setter_name: str,
        table_def: TableDef,
        alias_to_column_name: Mapping[str, str] | None = None,
    ) -> ColumnName:
        property_name = self.setter_property_name(setter_name)
        return self.resolve(property_name, table_def, alias_to_column_name)

    def setter_property_name(self, setter_name: str) -> str:
        """Get the property written by a setter of the mapped type."""
        return setter_property_name(
            setter_name, self.setter_naming, self.shape.property_names
        )

    def column_map(
        self,
        table_def: TableDef,
        alias_to_column_name: Mapping[str, str] | None = None,
    ) -> ColumnMap:
        constructor = tuple(
            self.constructor_param_to_column_name(param.name, table_def, alias_to_column_name)
            for param in self.shape.constructor_params
        )
        getters = {
            getter.name: self.getter_to_column_name(getter.name, table_def, alias_to_column_name)
            for getter in self.shape.getters
        }
        setters = {
            setter.name: self.setter_to_column_name(setter.name, table_def, alias_to_column_name)
            for setter in self.shape.setters
        }
        return ColumnMap(constructor, getters, setters, allows_null=False)

    def new_table(
        self,
        keyspace_name: str,
        table_name: str,
        partition_key: str | None = None,
    ) -> TableDef:
        """Describe a new table for the mapped type.

        Unless ``partition_key`` is given, the first mappable property
        (in declaration order) silently becomes the partition key. Pass it
        explicitly when declaration order is not meaningful.
        """
        return synthesize_table(
            keyspace_name,
            table_name,
            self.shape,
            type_oracle=self.type_oracle,
            root_type_getters=self.shape.root_getters,
            setter_naming=self.setter_naming,
            synthetic_marker=self.synthetic_marker,
            partition_key=partition_key,
        )
