"""Pytest configuration and shared fixtures."""

import os
from collections.abc import Generator

import pytest
from typer.testing import CliRunner

from colmapper.config.settings import get_settings
from colmapper.core import ColumnDef, ColumnRole, ObjectShape, TableDef


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a CLI runner for testing Typer commands."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_settings() -> Generator[None, None, None]:
    """Reset cached settings and COLMAPPER_ environment variables around each test."""
    saved = {k: v for k, v in os.environ.items() if k.startswith("COLMAPPER_")}
    for key in saved:
        del os.environ[key]
    get_settings.cache_clear()
    try:
        yield
    finally:
        for key in [k for k in os.environ if k.startswith("COLMAPPER_")]:
            del os.environ[key]
        os.environ.update(saved)
        get_settings.cache_clear()


@pytest.fixture
def users_table() -> TableDef:
    """Table matching the sample User class."""
    return TableDef(
        keyspace_name="app",
        table_name="users",
        partition_key=(ColumnDef(name="login", role=ColumnRole.PARTITION_KEY, type="text"),),
        regular_columns=(
            ColumnDef(name="email_address", type="text"),
            ColumnDef(name="email_address_2", type="text"),
        ),
    )


@pytest.fixture
def user_shape() -> ObjectShape:
    """Hand-written shape of a user with a login and an email address."""
    return ObjectShape.of(
        "app.User",
        constructor_params=[("login", str), ("emailAddress", str)],
        getters=[("login", str), ("emailAddress", str)],
        setters=[("login_$eq", str), ("emailAddress_$eq", str)],
    )


@pytest.fixture
def users_schema_file(tmp_path):
    """Schema YAML describing the users table."""
    path = tmp_path / "users.yaml"
    path.write_text(
        """
keyspace: app
table: users
partition_key:
  - {name: login, type: text}
regular_columns:
  - {name: email_address, type: text}
  - {name: email_address_2, type: text}
  - {name: contact, type: text}
"""
    )
    return path
