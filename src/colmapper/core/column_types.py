"""Storage column types and the Python type to column type oracle."""

from __future__ import annotations

import collections.abc
import datetime
import decimal
import ipaddress
import types
import typing
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Union

from colmapper.core.exceptions import UnsupportedTypeError


class NativeType(str, Enum):
    """Native (non-collection) CQL column types."""

    ASCII = "ascii"
    BIGINT = "bigint"
    BLOB = "blob"
    BOOLEAN = "boolean"
    DATE = "date"
    DECIMAL = "decimal"
    DOUBLE = "double"
    DURATION = "duration"
    FLOAT = "float"
    INET = "inet"
    INT = "int"
    SMALLINT = "smallint"
    TEXT = "text"
    TIME = "time"
    TIMESTAMP = "timestamp"
    TIMEUUID = "timeuuid"
    TINYINT = "tinyint"
    UUID = "uuid"
    VARINT = "varint"


class ColumnType(ABC):
    """A column type as understood by the storage layer."""

    @abstractmethod
    def cql(self) -> str:
        """Render the type in CQL syntax."""

    def __str__(self) -> str:
        return self.cql()


def _frozen(text: str, frozen: bool) -> str:
    return f"frozen<{text}>" if frozen else text


@dataclass(frozen=True)
class Native(ColumnType):
    type: NativeType

    def cql(self) -> str:
        return self.type.value


@dataclass(frozen=True)
class ListType(ColumnType):
    element_type: ColumnType
    frozen: bool = False

    def cql(self) -> str:
        return _frozen(f"list<{self.element_type.cql()}>", self.frozen)


@dataclass(frozen=True)
class SetType(ColumnType):
    element_type: ColumnType
    frozen: bool = False

    def cql(self) -> str:
        return _frozen(f"set<{self.element_type.cql()}>", self.frozen)


@dataclass(frozen=True)
class MapType(ColumnType):
    key_type: ColumnType
    value_type: ColumnType
    frozen: bool = False

    def cql(self) -> str:
        return _frozen(
            f"map<{self.key_type.cql()}, {self.value_type.cql()}>", self.frozen
        )


@dataclass(frozen=True)
class TupleType(ColumnType):
    element_types: tuple[ColumnType, ...]

    def cql(self) -> str:
        return f"tuple<{', '.join(t.cql() for t in self.element_types)}>"


# Exact type lookups: bool must not match int, datetime must not match date.
_NATIVE_TYPES: dict[type, NativeType] = {
    str: NativeType.TEXT,
    int: NativeType.BIGINT,
    float: NativeType.DOUBLE,
    bool: NativeType.BOOLEAN,
    bytes: NativeType.BLOB,
    bytearray: NativeType.BLOB,
    decimal.Decimal: NativeType.DECIMAL,
    uuid.UUID: NativeType.UUID,
    datetime.datetime: NativeType.TIMESTAMP,
    datetime.date: NativeType.DATE,
    datetime.time: NativeType.TIME,
    datetime.timedelta: NativeType.DURATION,
    ipaddress.IPv4Address: NativeType.INET,
    ipaddress.IPv6Address: NativeType.INET,
}

_LIST_ORIGINS = (list, collections.abc.Sequence, collections.abc.MutableSequence)
_SET_ORIGINS = (set, frozenset, collections.abc.Set, collections.abc.MutableSet)
_MAP_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


def column_type_for(python_type: Any, nested: bool = False) -> ColumnType:
    """Find the column type able to store values of a Python type.

    Optional types map to their inner type. Collections nested inside
    other collections or tuples are frozen.

    Args:
        python_type: A class or typing annotation.
        nested: Whether the type appears inside a collection.

    Returns:
        The matching ColumnType.

    Raises:
        UnsupportedTypeError: If the type has no column representation.
    """
    if isinstance(python_type, type) and python_type in _NATIVE_TYPES:
        return Native(_NATIVE_TYPES[python_type])

    origin = typing.get_origin(python_type)
    args = typing.get_args(python_type)

    if origin is Union or origin is types.UnionType:
        non_none = [arg for arg in args if arg is not type(None)]
        if len(non_none) == 1:
            return column_type_for(non_none[0], nested)

    elif origin in _LIST_ORIGINS and len(args) == 1:
        return ListType(column_type_for(args[0], nested=True), frozen=nested)

    elif origin in _SET_ORIGINS and len(args) == 1:
        return SetType(column_type_for(args[0], nested=True), frozen=nested)

    elif origin in _MAP_ORIGINS and len(args) == 2:
        return MapType(
            column_type_for(args[0], nested=True),
            column_type_for(args[1], nested=True),
            frozen=nested,
        )

    elif origin is tuple and args and Ellipsis not in args:
        return TupleType(tuple(column_type_for(arg, nested=True) for arg in args))

    raise UnsupportedTypeError(
        f"No column type for Python type: {python_type!r}",
        python_type=python_type,
    )


def _split_type_args(text: str) -> list[str]:
    """Split comma separated type arguments at nesting depth zero."""
    parts: list[str] = []
    depth = 0
    current = ""
    for char in text:
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
        if char == "," and depth == 0:
            parts.append(current)
            current = ""
        else:
            current += char
    parts.append(current)
    return [part.strip() for part in parts]


def parse_column_type(text: str) -> ColumnType:
    """Parse a CQL type string such as ``map<text, frozen<list<int>>>``.

    Raises:
        UnsupportedTypeError: If the text is not a known CQL type.
    """
    text = text.strip()
    name, bracket, rest = text.partition("<")
    name = name.strip().lower()

    if not bracket:
        try:
            return Native(NativeType(name))
        except ValueError:
            raise UnsupportedTypeError(f"Unknown column type: {text!r}") from None

    if not rest.endswith(">"):
        raise UnsupportedTypeError(f"Malformed column type: {text!r}")
    params = [parse_column_type(arg) for arg in _split_type_args(rest[:-1])]

    if name == "frozen" and len(params) == 1:
        inner = params[0]
        if isinstance(inner, (ListType, SetType, MapType)):
            return replace(inner, frozen=True)
        return inner
    if name == "list" and len(params) == 1:
        return ListType(params[0])
    if name == "set" and len(params) == 1:
        return SetType(params[0])
    if name == "map" and len(params) == 2:
        return MapType(params[0], params[1])
    if name == "tuple":
        return TupleType(tuple(params))

    raise UnsupportedTypeError(f"Unknown column type: {text!r}")
