"""Mapping type names, either concrete or inferred from a document class."""

from typing import TYPE_CHECKING, Any

from .base import UrlParameter, require_connection_settings

if TYPE_CHECKING:
    from ..settings import TransportSettings


class TypeName(UrlParameter):
    __slots__ = ("name", "type")

    def __init__(self, name: str | None = None, type_: type | None = None):
        self.name = name.strip() if name is not None else None
        self.type = type_

    @classmethod
    def of(cls, type_: type) -> "TypeName":
        return cls(type_=type_)

    @classmethod
    def coerce(cls, value: Any) -> "TypeName | None":
        if value is None or isinstance(value, TypeName):
            return value
        if isinstance(value, str):
            return cls(name=value) if value.strip() else None
        if isinstance(value, type):
            return cls.of(value)
        raise TypeError(f"Cannot convert {type(value).__name__} to a type name")

    def get_string(self, settings: "TransportSettings | None") -> str:
        connection_settings = require_connection_settings(settings, "type name")
        return connection_settings.inferrer.type_name(self)

    def __str__(self) -> str:
        if self.name:
            return self.name
        return self.type.__name__ if self.type is not None else ""

    def __repr__(self) -> str:
        return f"TypeName({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            return bool(self.name) and other == self.name
        if not isinstance(other, TypeName):
            return NotImplemented
        if self.name and other.name:
            return self.name == other.name
        if not self.name and not other.name:
            return self.type is not None and self.type is other.type
        return False

    def __hash__(self) -> int:
        return hash(self.name) if self.name else hash((TypeName, self.type))


class Types(UrlParameter):
    """A comma separated list of type names."""

    __slots__ = ("types",)

    def __init__(self, types: list[TypeName] | None = None):
        self.types = [t for t in (types or []) if t is not None]

    @classmethod
    def many(cls, *types: "TypeName | str | type") -> "Types":
        return cls([TypeName.coerce(t) for t in types])

    @classmethod
    def coerce(cls, value: Any) -> "Types | None":
        if value is None or isinstance(value, Types):
            return value
        if isinstance(value, str):
            if not value.strip():
                return None
            return cls.many(*value.split(","))
        if isinstance(value, (TypeName, type)):
            return cls.many(value)
        if isinstance(value, (list, tuple, set)):
            return cls.many(*value)
        raise TypeError(f"Cannot convert {type(value).__name__} to types")

    def get_string(self, settings: "TransportSettings | None") -> str:
        connection_settings = require_connection_settings(settings, "types")
        return ",".join(dict.fromkeys(connection_settings.inferrer.type_name(t) for t in self.types))

    def __str__(self) -> str:
        return ",".join(str(t) for t in self.types)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Types):
            return NotImplemented
        return set(self.types) == set(other.types)

    def __hash__(self) -> int:
        return hash(frozenset(self.types))
