"""Tests for MappingService."""

from pathlib import Path

import pytest
from sample_models import User

from colmapper.config.settings import Settings
from colmapper.core import MapperConfigurationError, ShapeCache
from colmapper.core.services import (
    ConfigLoadError,
    MappingService,
    TargetNotFoundError,
    import_target,
)


@pytest.fixture
def mapping_file(tmp_path: Path) -> Path:
    path = tmp_path / "mapping.yaml"
    path.write_text(
        """
overrides:
  emailAddress2: contact
aliases:
  login: user_login
"""
    )
    return path


class TestImportTarget:
    """Test cases for import_target."""

    def test_import_class(self):
        """Test importing a class by path."""
        assert import_target("sample_models:User") is User

    @pytest.mark.parametrize(
        "target",
        ["sample_models", "sample_models:", ":User", "no_such_module:User"],
    )
    def test_invalid_paths(self, target: str):
        """Test malformed or unknown paths."""
        with pytest.raises(TargetNotFoundError) as exc_info:
            import_target(target)

        assert exc_info.value.target == target

    def test_missing_attribute(self):
        """Test a module without the named class."""
        with pytest.raises(TargetNotFoundError) as exc_info:
            import_target("sample_models:Missing")

        assert "Missing" in exc_info.value.reason

    def test_not_a_class(self):
        """Test that non-class targets are rejected."""
        with pytest.raises(TargetNotFoundError):
            import_target("sample_models:NamedTuple")


class TestMappingService:
    """Test cases for MappingService."""

    def test_new_table(self):
        """Test synthesizing a table by import path."""
        service = MappingService(Settings())
        table_def = service.new_table("sample_models:User", "app", "users")

        assert table_def.column_names == ["login", "email_address", "email_address_2"]

    def test_new_table_no_mappable_properties(self):
        """Test the error for classes without mappable members."""
        service = MappingService(Settings())

        with pytest.raises(MapperConfigurationError):
            service.new_table("sample_models:Opaque", "app", "opaque")

    def test_column_map_with_mapping_file(self, users_schema_file: Path, mapping_file: Path):
        """Test overrides and aliases from a mapping file."""
        service = MappingService(Settings())
        table_def, result = service.column_map(User, users_schema_file, mapping_file)

        assert table_def.table_name == "users"
        assert result.constructor == ("user_login", "email_address", "contact")

    def test_column_map_uses_configured_mapping_file(
        self, users_schema_file: Path, mapping_file: Path
    ):
        """Test the mapping file from settings is used when none is given."""
        service = MappingService(Settings(mapping_file=mapping_file))
        _, result = service.column_map(User, users_schema_file)

        assert result.getters["emailAddress2"] == "contact"

    def test_column_map_missing_schema(self, tmp_path: Path):
        """Test a missing schema file."""
        service = MappingService(Settings())

        with pytest.raises(ConfigLoadError):
            service.column_map(User, tmp_path / "missing.yaml")

    def test_setter_naming_from_settings(self):
        """Test that the configured setter naming is used."""
        service = MappingService(Settings(setter_naming="java_bean"))
        shape = service.get_shape(User)

        assert [s.name for s in shape.setters] == [
            "setLogin",
            "setEmailAddress",
            "setEmailAddress2",
        ]

    def test_setter_naming_from_environment(self, monkeypatch: pytest.MonkeyPatch):
        """Test that settings are read from COLMAPPER_ variables."""
        monkeypatch.setenv("COLMAPPER_SETTER_NAMING", "fluent")
        service = MappingService()

        assert service.get_shape(User).setters[0].name == "withLogin"

    def test_shares_shape_cache(self):
        """Test that one service extracts each class once."""
        cache = ShapeCache()
        service = MappingService(Settings(), shape_cache=cache)
        service.get_shape(User)
        service.new_table(User, "app", "users")

        assert len(cache) == 1
