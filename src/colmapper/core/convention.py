"""Naming conventions between object properties and table columns.

Properties are expected in camel case (``emailAddress``) and columns in
lower case with underscores (``email_address``). A property whose name
matches an existing column exactly (``TIN`` for a ``TIN`` column) keeps
its name.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from colmapper.core.exceptions import MapperConfigurationError
from colmapper.core.schema import ColumnName, TableDef


def camel_case_to_underscore(identifier: str) -> str:
    """Convert a camel case identifier to lower case words joined by ``_``.

    Words are split where a lowercase letter is followed by an uppercase
    letter and where a letter is followed by a digit.

    Examples:
        emailAddress  -> email_address
        emailAddress2 -> email_address_2
        TIN           -> tin
    """
    runs: list[str] = []
    current = ""
    previous = ""
    for char in identifier:
        if current and (
            (previous.islower() and char.isupper())
            or (previous.isalpha() and char.isdigit())
        ):
            runs.append(current)
            current = ""
        current += char
        previous = char
    if current:
        runs.append(current)
    return "_".join(runs).lower()


def column_name_for_property(property_name: str, table_def: TableDef | None) -> ColumnName:
    """Derive the column name for a property by convention.

    An existing column with exactly the property's name wins over the
    camel case conversion.
    """
    if table_def is not None and table_def.has_column(property_name):
        return ColumnName(property_name)
    return ColumnName(camel_case_to_underscore(property_name))


def resolve_column_name(
    property_name: str,
    table_def: TableDef | None,
    alias_to_column_name: Mapping[str, str] | None = None,
    column_name_override: Mapping[str, str] | None = None,
) -> ColumnName:
    """Resolve the column name of a property.

    Precedence: explicit override, then alias, then convention.
    """
    if column_name_override and property_name in column_name_override:
        return ColumnName(column_name_override[property_name])
    if alias_to_column_name and property_name in alias_to_column_name:
        return ColumnName(alias_to_column_name[property_name])
    return column_name_for_property(property_name, table_def)


def _decapitalize(name: str) -> str:
    # Same rule as JavaBeans: "URL" stays "URL", "Email" becomes "email"
    if len(name) > 1 and name[0].isupper() and name[1].isupper():
        return name
    return name[:1].lower() + name[1:]


@dataclass(frozen=True)
class SetterNaming:
    """How write accessor names are derived from property names.

    Attributes:
        prefix: Marker in front of the property name (e.g. ``set``).
        suffix: Marker after the property name (e.g. ``_$eq``).
        decapitalize: Lower the first letter after stripping the prefix.
    """

    prefix: str = ""
    suffix: str = ""
    decapitalize: bool = False

    def property_name(self, setter_name: str) -> str:
        """Strip the setter markers to get the underlying property name.

        Names that do not carry the markers are returned unchanged.
        """
        name = setter_name
        if self.suffix and name.endswith(self.suffix) and len(name) > len(self.suffix):
            name = name[: -len(self.suffix)]
        if self.prefix and name.startswith(self.prefix) and len(name) > len(self.prefix):
            name = name[len(self.prefix) :]
            if self.decapitalize:
                name = _decapitalize(name)
        return name

    def setter_name(self, property_name: str) -> str:
        """Build the setter name of a property."""
        name = property_name
        if self.prefix:
            if self.decapitalize:
                name = name[:1].upper() + name[1:]
            name = self.prefix + name
        return name + self.suffix


SUFFIX_ASSIGN = SetterNaming(suffix="_$eq")
JAVA_BEAN = SetterNaming(prefix="set", decapitalize=True)
FLUENT = SetterNaming(prefix="with", decapitalize=True)
PLAIN = SetterNaming()

SETTER_NAMINGS: dict[str, SetterNaming] = {
    "suffix_assign": SUFFIX_ASSIGN,
    "java_bean": JAVA_BEAN,
    "fluent": FLUENT,
    "plain": PLAIN,
}


def get_setter_naming(name: str) -> SetterNaming:
    """Look up a setter naming preset by name.

    Raises:
        MapperConfigurationError: If no preset has this name.
    """
    try:
        return SETTER_NAMINGS[name]
    except KeyError:
        raise MapperConfigurationError(
            f"Unknown setter naming: {name!r} "
            f"(available: {', '.join(SETTER_NAMINGS)})"
        ) from None


def setter_property_name(
    setter_name: str,
    naming: SetterNaming = SUFFIX_ASSIGN,
    property_names: Iterable[str] = (),
) -> str:
    """Get the property name behind a setter name.

    A known property whose setter name is exactly ``setter_name`` is
    preferred over stripping the markers. Capitalizing after a prefix is
    lossy: ``setXCoordinate`` belongs to ``xCoordinate``, although the
    JavaBeans rule alone would give ``XCoordinate``.

    Args:
        setter_name: Name of the write accessor.
        naming: Policy the setter name follows.
        property_names: Names of the type's other properties, e.g. its
            constructor parameters and getters.
    """
    for name in property_names:
        if naming.setter_name(name) == setter_name:
            return name
    return naming.property_name(setter_name)
