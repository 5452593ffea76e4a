"""Object shapes: constructor parameters, getters and setters of a type.

A shape is a plain descriptor value. It can be written by hand for any
type, or derived from a Python class with ``ShapeExtractor``.
"""

import dataclasses
import inspect
import logging
import threading
import typing
from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass
from typing import Any

from colmapper.core.convention import SUFFIX_ASSIGN, SetterNaming
from colmapper.core.exceptions import ShapeExtractionError

logger = logging.getLogger(__name__)

# Base classes from these modules belong to the runtime, not to user data
ROOT_MODULES = frozenset({"builtins", "abc", "typing", "enum", "collections"})
ROOT_MODULE_PREFIXES = ("pydantic.",)


@dataclass(frozen=True)
class PropertySpec:
    """A named member of a type together with its declared type."""

    name: str
    type: Any = None


@dataclass(frozen=True)
class ObjectShape:
    """Explicit description of the members of a mapped type.

    Attributes:
        type_name: Fully qualified name of the type, used in messages.
        constructor_params: Constructor parameters in declaration order.
        getters: Read accessors with their return types.
        setters: Write accessors with their parameter types.
        root_getters: Names of getters inherited from runtime base types.
    """

    type_name: str
    constructor_params: tuple[PropertySpec, ...] = ()
    getters: tuple[PropertySpec, ...] = ()
    setters: tuple[PropertySpec, ...] = ()
    root_getters: frozenset[str] = frozenset()

    @classmethod
    def of(
        cls,
        type_name: str,
        constructor_params: Iterable[tuple[str, Any]] = (),
        getters: Iterable[tuple[str, Any]] = (),
        setters: Iterable[tuple[str, Any]] = (),
        root_getters: Iterable[str] = (),
    ) -> "ObjectShape":
        """Build a shape from ``(name, type)`` pairs."""
        return cls(
            type_name=type_name,
            constructor_params=tuple(PropertySpec(n, t) for n, t in constructor_params),
            getters=tuple(PropertySpec(n, t) for n, t in getters),
            setters=tuple(PropertySpec(n, t) for n, t in setters),
            root_getters=frozenset(root_getters),
        )

    @property
    def property_names(self) -> list[str]:
        """Names of the constructor parameters and getters, without duplicates."""
        names = [param.name for param in self.constructor_params]
        names += [getter.name for getter in self.getters]
        return list(dict.fromkeys(names))

    @property
    def getter_types(self) -> dict[str, Any]:
        return {getter.name: getter.type for getter in self.getters}

    @property
    def constructor_param_types(self) -> dict[str, Any]:
        return {param.name: param.type for param in self.constructor_params}


class ShapeCache:
    """Thread-safe cache of extracted shapes, keyed by type identity.

    Callers own the cache and pass it to the extractors that should share it.
    """

    def __init__(self) -> None:
        self._shapes: dict[Hashable, ObjectShape] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> ObjectShape | None:
        with self._lock:
            return self._shapes.get(key)

    def get_or_create(self, key: Hashable, factory: Callable[[], ObjectShape]) -> ObjectShape:
        """Return the cached shape for a key, building it on first use."""
        with self._lock:
            shape = self._shapes.get(key)
        if shape is None:
            shape = factory()
            with self._lock:
                shape = self._shapes.setdefault(key, shape)
        return shape

    def clear(self) -> None:
        with self._lock:
            self._shapes.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._shapes)


def _is_root_type(base: type) -> bool:
    module = base.__module__ or ""
    return module in ROOT_MODULES or module.startswith(ROOT_MODULE_PREFIXES)


def _is_pydantic_model(cls: type) -> bool:
    return isinstance(getattr(cls, "model_fields", None), dict) and hasattr(
        cls, "model_validate"
    )


def _is_named_tuple(cls: type) -> bool:
    return issubclass(cls, tuple) and hasattr(cls, "_fields")


def _is_public(name: str) -> bool:
    return not name.startswith("_")


def _unwrap(tp: Any) -> Any:
    if isinstance(tp, dataclasses.InitVar):
        return tp.type
    return tp


def _hints(obj: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(obj)
    except (NameError, TypeError) as e:
        logger.debug(f"Cannot resolve type hints of {obj!r}: {e}")
        return {}


def _properties(cls: type) -> dict[str, property]:
    """Public properties of a class and its bases, base classes first."""
    found: dict[str, property] = {}
    for base in reversed(cls.__mro__):
        for name, member in vars(base).items():
            if isinstance(member, property) and _is_public(name):
                found[name] = member
    return found


def _setter_type(prop: property) -> Any:
    try:
        params = list(inspect.signature(prop.fset).parameters)
    except (TypeError, ValueError):
        return None
    if len(params) < 2:
        return None
    return _hints(prop.fset).get(params[1])


class ShapeExtractor:
    """Derive object shapes from dataclasses, pydantic models, named tuples
    and plain annotated classes.

    Args:
        setter_naming: Naming policy used to name write accessors.
        cache: Optional shared cache of extracted shapes.
    """

    def __init__(
        self,
        setter_naming: SetterNaming = SUFFIX_ASSIGN,
        cache: ShapeCache | None = None,
    ) -> None:
        self.setter_naming = setter_naming
        self.cache = cache

    def extract(self, cls: type) -> ObjectShape:
        """Get the shape of a class.

        Raises:
            ShapeExtractionError: If the target is not a class or its type
                hints cannot be resolved.
        """
        if not isinstance(cls, type):
            raise ShapeExtractionError(f"Not a class: {cls!r}", target=cls)
        if self.cache is None:
            return self._extract(cls)
        return self.cache.get_or_create((cls, self.setter_naming), lambda: self._extract(cls))

    def _extract(self, cls: type) -> ObjectShape:
        if _is_pydantic_model(cls):
            # Field annotations are already resolved by pydantic
            hints = {name: info.annotation for name, info in cls.model_fields.items()}
        else:
            try:
                hints = {k: _unwrap(v) for k, v in typing.get_type_hints(cls).items()}
            except (NameError, TypeError) as e:
                raise ShapeExtractionError(
                    f"Cannot resolve type hints of {cls.__qualname__}: {e}", target=cls
                ) from e

        if _is_pydantic_model(cls):
            fields = list(hints)
            params = list(hints.items())
            writable = [] if cls.model_config.get("frozen") else fields
        elif dataclasses.is_dataclass(cls):
            fields = [f.name for f in dataclasses.fields(cls)]
            params = self._signature_params(cls, hints)
            writable = [] if cls.__dataclass_params__.frozen else fields
        elif _is_named_tuple(cls):
            fields = list(cls._fields)
            params = [(name, hints.get(name)) for name in fields]
            writable = []
        else:
            fields = [
                name
                for name, tp in hints.items()
                if typing.get_origin(tp) is not typing.ClassVar and tp is not typing.ClassVar
            ]
            params = self._signature_params(cls, hints)
            writable = fields

        properties = _properties(cls)

        getters = [(name, hints.get(name)) for name in fields if _is_public(name)]
        getters += [
            (name, _hints(prop.fget).get("return") if prop.fget else None)
            for name, prop in properties.items()
            if prop.fget is not None and name not in fields
        ]

        setters = [
            (self.setter_naming.setter_name(name), hints.get(name))
            for name in writable
            if _is_public(name)
        ]
        setters += [
            (self.setter_naming.setter_name(name), _setter_type(prop))
            for name, prop in properties.items()
            if prop.fset is not None and name not in fields
        ]

        root_getters = {
            name
            for base in cls.__mro__[1:]
            if _is_root_type(base)
            for name, member in vars(base).items()
            if isinstance(member, property) and _is_public(name)
        }

        shape = ObjectShape.of(
            type_name=f"{cls.__module__}.{cls.__qualname__}",
            constructor_params=params,
            getters=getters,
            setters=setters,
            root_getters=root_getters,
        )
        logger.debug(
            f"Extracted shape of {shape.type_name}: {len(shape.constructor_params)} params, "
            f"{len(shape.getters)} getters, {len(shape.setters)} setters"
        )
        return shape

    @staticmethod
    def _signature_params(cls: type, hints: dict[str, Any]) -> list[tuple[str, Any]]:
        try:
            signature = inspect.signature(cls)
        except (TypeError, ValueError):
            return []
        init_hints = _hints(cls.__init__)
        return [
            (name, hints.get(name, _unwrap(init_hints.get(name))))
            for name, param in signature.parameters.items()
            if param.kind
            not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        ]
