"""Tests for table definitions."""

import pytest
from pydantic import ValidationError

from colmapper.core import (
    ColumnDef,
    ColumnName,
    ColumnRole,
    ListType,
    Native,
    NativeType,
    TableDef,
    UnsupportedTypeError,
)


class TestColumnDef:
    """Test cases for ColumnDef."""

    def test_type_from_string(self):
        """Test that CQL type strings are parsed."""
        column = ColumnDef(name="tags", type="list<text>")
        assert column.type == ListType(Native(NativeType.TEXT))
        assert column.role == ColumnRole.REGULAR

    def test_invalid_type_string(self):
        """Test that unknown type strings raise."""
        with pytest.raises(UnsupportedTypeError):
            ColumnDef(name="tags", type="varchar2")

    def test_is_immutable(self):
        """Test that columns cannot be modified."""
        column = ColumnDef(name="login", type="text")
        with pytest.raises(ValidationError):
            column.name = "other"

    def test_cql(self):
        """Test column fragment rendering with identifier quoting."""
        assert ColumnDef(name="login", type="text").cql() == "login text"
        assert ColumnDef(name="TIN", type="text").cql() == '"TIN" text'

    def test_column_name_preserves_case(self):
        """Test that column names keep their case."""
        name = ColumnDef(name="TIN", type="text").column_name
        assert isinstance(name, ColumnName)
        assert name == "TIN"


class TestTableDef:
    """Test cases for TableDef."""

    def test_columns_in_key_order(self, users_table: TableDef):
        """Test that key columns come first."""
        assert users_table.column_names == ["login", "email_address", "email_address_2"]
        assert [c.name for c in users_table.primary_key] == ["login"]

    def test_column_by_name(self, users_table: TableDef):
        """Test exact lookups of columns."""
        assert users_table.column_by_name("login").role == ColumnRole.PARTITION_KEY
        assert users_table.column_by_name("LOGIN") is None
        assert users_table.has_column("email_address")

    def test_requires_partition_key(self):
        """Test that a table without partition key is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            TableDef(
                keyspace_name="app",
                table_name="users",
                partition_key=(),
                regular_columns=(ColumnDef(name="login", type="text"),),
            )

        assert "partition key" in str(exc_info.value)

    def test_rejects_duplicate_names(self):
        """Test that column names must be unique across groups."""
        with pytest.raises(ValidationError) as exc_info:
            TableDef(
                keyspace_name="app",
                table_name="users",
                partition_key=(
                    ColumnDef(name="login", role=ColumnRole.PARTITION_KEY, type="text"),
                ),
                regular_columns=(ColumnDef(name="login", type="text"),),
            )

        assert "Duplicate" in str(exc_info.value)

    def test_rejects_misplaced_role(self):
        """Test that a column's role must match its group."""
        with pytest.raises(ValidationError):
            TableDef(
                keyspace_name="app",
                table_name="users",
                partition_key=(ColumnDef(name="login", type="text"),),
            )

    def test_roles_assigned_from_dicts(self):
        """Test that roles are filled in when validating plain data."""
        table_def = TableDef.model_validate(
            {
                "keyspace_name": "metrics",
                "table_name": "readings",
                "partition_key": [{"name": "sensor_id", "type": "uuid"}],
                "clustering_columns": [{"name": "at", "type": "timestamp"}],
                "regular_columns": [{"name": "value", "type": "double"}],
            }
        )
        assert [c.role for c in table_def.columns] == [
            ColumnRole.PARTITION_KEY,
            ColumnRole.CLUSTERING,
            ColumnRole.REGULAR,
        ]

    def test_dump_renders_types(self, users_table: TableDef):
        """Test that JSON dumps carry CQL type strings."""
        data = users_table.model_dump(mode="json")
        assert data["partition_key"] == [
            {"name": "login", "role": "partition_key", "type": "text"}
        ]

    def test_cql(self):
        """Test CREATE TABLE rendering with a compound primary key."""
        table_def = TableDef.model_validate(
            {
                "keyspace_name": "metrics",
                "table_name": "readings",
                "partition_key": [
                    {"name": "sensor_id", "type": "uuid"},
                    {"name": "day", "type": "date"},
                ],
                "clustering_columns": [{"name": "at", "type": "timestamp"}],
                "regular_columns": [{"name": "value", "type": "double"}],
            }
        )
        assert table_def.cql() == (
            "CREATE TABLE metrics.readings (\n"
            "  sensor_id uuid,\n"
            "  day date,\n"
            "  at timestamp,\n"
            "  value double,\n"
            "  PRIMARY KEY ((sensor_id, day), at)\n"
            ")"
        )
