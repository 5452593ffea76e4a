"""Column map: which column backs each constructor parameter and accessor."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from colmapper.core.schema import ColumnName


@dataclass(frozen=True)
class ColumnMap:
    """Association of an object's members with table columns.

    Attributes:
        constructor: Column names aligned with constructor parameter positions.
        getters: Getter name to column name.
        setters: Setter name to column name.
        allows_null: Whether unmapped or optional members may be null.
    """

    constructor: tuple[ColumnName, ...] = ()
    getters: Mapping[str, ColumnName] = field(default_factory=dict)
    setters: Mapping[str, ColumnName] = field(default_factory=dict)
    allows_null: bool = False

    def __post_init__(self) -> None:
        # Freeze the mappings handed in by the caller
        object.__setattr__(self, "constructor", tuple(self.constructor))
        object.__setattr__(self, "getters", MappingProxyType(dict(self.getters)))
        object.__setattr__(self, "setters", MappingProxyType(dict(self.setters)))

    @property
    def column_names(self) -> list[ColumnName]:
        """All referenced columns, deduplicated, in order of first reference."""
        names: Iterable[ColumnName] = (
            list(self.constructor) + list(self.getters.values()) + list(self.setters.values())
        )
        return list(dict.fromkeys(names))

    def to_dict(self) -> dict[str, Any]:
        return {
            "constructor": [str(name) for name in self.constructor],
            "getters": {k: str(v) for k, v in self.getters.items()},
            "setters": {k: str(v) for k, v in self.setters.items()},
            "allows_null": self.allows_null,
        }
