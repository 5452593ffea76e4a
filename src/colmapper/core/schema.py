"""Table schema definitions."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from colmapper.core.column_types import ColumnType, parse_column_type


class ColumnName(str):
    """Case-preserving identifier of a storage column."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"ColumnName({str(self)!r})"


class ColumnRole(str, Enum):
    """Role a column plays in the primary key of a table."""

    PARTITION_KEY = "partition_key"
    CLUSTERING = "clustering"
    REGULAR = "regular"


def quote_identifier(name: str) -> str:
    """Quote a CQL identifier unless it is a plain lowercase name."""
    if name.isidentifier() and name == name.lower():
        return name
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


class ColumnDef(BaseModel):
    """A single column of a table."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., min_length=1, description="Column name, case preserved")
    role: ColumnRole = Field(default=ColumnRole.REGULAR, description="Key role")
    type: ColumnType = Field(..., description="Storage type of the column")

    @field_validator("type", mode="before")
    @classmethod
    def parse_type(cls, value: Any) -> Any:
        """Accept CQL type strings, e.g. from YAML schema files."""
        if isinstance(value, str):
            return parse_column_type(value)
        return value

    @field_serializer("type")
    def serialize_type(self, value: ColumnType) -> str:
        return value.cql()

    @property
    def column_name(self) -> ColumnName:
        return ColumnName(self.name)

    def cql(self) -> str:
        """Render the column as a CQL column definition fragment."""
        return f"{quote_identifier(self.name)} {self.type.cql()}"


class TableDef(BaseModel):
    """A table schema: partition key, clustering columns and regular columns.

    The partition key must hold at least one column, column names must be
    unique across the table, and every column must carry the role of the
    group it belongs to.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    keyspace_name: str = Field(..., description="Keyspace holding the table")
    table_name: str = Field(..., description="Table name")
    partition_key: tuple[ColumnDef, ...] = Field(..., description="Ordered partition key")
    clustering_columns: tuple[ColumnDef, ...] = Field(
        default=(), description="Ordered clustering columns"
    )
    regular_columns: tuple[ColumnDef, ...] = Field(default=(), description="Regular columns")

    @model_validator(mode="before")
    @classmethod
    def assign_roles(cls, data: Any) -> Any:
        """Fill in column roles from the group a column is listed in."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for group, role in (
            ("partition_key", ColumnRole.PARTITION_KEY),
            ("clustering_columns", ColumnRole.CLUSTERING),
            ("regular_columns", ColumnRole.REGULAR),
        ):
            columns = data.get(group)
            if columns is None:
                continue
            data[group] = [
                {**column, "role": column.get("role", role)}
                if isinstance(column, dict)
                else column
                for column in columns
            ]
        return data

    @model_validator(mode="after")
    def validate_columns(self) -> "TableDef":
        """Check the partition key and column name uniqueness."""
        if not self.partition_key:
            raise ValueError(
                f"Table {self.keyspace_name}.{self.table_name} has no partition key columns"
            )

        for columns, role in (
            (self.partition_key, ColumnRole.PARTITION_KEY),
            (self.clustering_columns, ColumnRole.CLUSTERING),
            (self.regular_columns, ColumnRole.REGULAR),
        ):
            misplaced = [c.name for c in columns if c.role != role]
            if misplaced:
                raise ValueError(
                    f"Columns listed as {role.value} have a different role: "
                    f"{', '.join(misplaced)}"
                )

        seen: set[str] = set()
        duplicates = []
        for column in self.columns:
            if column.name in seen:
                duplicates.append(column.name)
            seen.add(column.name)
        if duplicates:
            raise ValueError(f"Duplicate column names: {', '.join(duplicates)}")

        return self

    @property
    def primary_key(self) -> tuple[ColumnDef, ...]:
        return self.partition_key + self.clustering_columns

    @property
    def columns(self) -> tuple[ColumnDef, ...]:
        """All columns, key columns first."""
        return self.primary_key + self.regular_columns

    @property
    def column_names(self) -> list[ColumnName]:
        return [column.column_name for column in self.columns]

    def column_by_name(self, name: str) -> ColumnDef | None:
        """Find a column by its exact (case-sensitive) name."""
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def has_column(self, name: str) -> bool:
        return self.column_by_name(name) is not None

    def cql(self) -> str:
        """Render a CREATE TABLE statement for this table."""
        partition = ", ".join(quote_identifier(c.name) for c in self.partition_key)
        if len(self.partition_key) > 1:
            partition = f"({partition})"
        key_parts = [partition] + [quote_identifier(c.name) for c in self.clustering_columns]
        column_lines = [f"  {column.cql()}" for column in self.columns]
        column_lines.append(f"  PRIMARY KEY ({', '.join(key_parts)})")

        statement = (
            f"CREATE TABLE {quote_identifier(self.keyspace_name)}."
            f"{quote_identifier(self.table_name)} (\n"
            + ",\n".join(column_lines)
            + "\n)"
        )
        return statement
