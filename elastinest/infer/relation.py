"""Relation names and join field values for parent/child documents."""

from typing import TYPE_CHECKING, Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from .base import UrlParameter, require_connection_settings
from .id import Id

if TYPE_CHECKING:
    from ..settings import TransportSettings


class RelationName(UrlParameter):
    __slots__ = ("name", "type")

    def __init__(self, name: str | None = None, type_: type | None = None):
        self.name = name.strip() if name is not None else None
        self.type = type_

    @classmethod
    def of(cls, type_: type) -> "RelationName":
        return cls(type_=type_)

    @classmethod
    def coerce(cls, value: Any) -> "RelationName | None":
        if value is None or isinstance(value, RelationName):
            return value
        if isinstance(value, str):
            return cls(name=value) if value.strip() else None
        if isinstance(value, type):
            return cls.of(value)
        raise TypeError(f"Cannot convert {type(value).__name__} to a relation name")

    def get_string(self, settings: "TransportSettings | None") -> str:
        connection_settings = require_connection_settings(settings, "relation name")
        return connection_settings.inferrer.relation_name(self)

    def __str__(self) -> str:
        if self.name:
            return self.name
        return self.type.__name__.lower() if self.type is not None else ""

    def __repr__(self) -> str:
        return f"RelationName({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            return str(self) == other
        if not isinstance(other, RelationName):
            return NotImplemented
        if self.name or other.name:
            return self.name == other.name
        return self.type is other.type

    def __hash__(self) -> int:
        return hash(self.name) if self.name else hash((RelationName, self.type))


class JoinField:
    """
    Value of a join datatype field.

    A parent document holds JoinField.root(Project) which serializes to the
    relation name. A child holds JoinField.link(CommitActivity, "parent-id")
    which serializes to {"name": <relation>, "parent": <id>}.
    """

    __slots__ = ("relation", "parent")

    def __init__(self, relation: RelationName, parent: Id | None = None):
        self.relation = relation
        self.parent = parent

    @classmethod
    def root(cls, relation: "RelationName | str | type") -> "JoinField":
        return cls(RelationName.coerce(relation))

    @classmethod
    def link(cls, relation: "RelationName | str | type", parent: Any) -> "JoinField":
        return cls(RelationName.coerce(relation), Id.coerce(parent))

    @property
    def is_parent(self) -> bool:
        return self.parent is None

    @classmethod
    def coerce(cls, value: Any) -> "JoinField | None":
        if value is None or isinstance(value, JoinField):
            return value
        if isinstance(value, (str, type)):
            return cls.root(value)
        if isinstance(value, dict):
            parent = value.get("parent")
            if parent is None:
                return cls.root(value["name"])
            return cls.link(value["name"], str(parent))
        raise TypeError(f"Cannot convert {type(value).__name__} to a join field")

    def to_json(self, settings: "TransportSettings | None" = None) -> str | dict[str, str]:
        if settings is not None:
            relation = self.relation.get_string(settings)
            parent = self.parent.get_string(settings) if self.parent is not None else None
        else:
            relation = str(self.relation)
            parent = str(self.parent) if self.parent is not None else None
        if parent is None:
            return relation
        return {"name": relation, "parent": parent}

    @classmethod
    def _serialize(cls, value: "JoinField", info: core_schema.SerializationInfo) -> Any:
        return value.to_json((info.context or {}).get("settings"))

    @classmethod
    def __get_pydantic_core_schema__(cls, source: Any, handler: GetCoreSchemaHandler) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls.coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(cls._serialize, info_arg=True),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JoinField):
            return NotImplemented
        return self.relation == other.relation and self.parent == other.parent

    def __hash__(self) -> int:
        return hash((self.relation, self.parent))

    def __repr__(self) -> str:
        if self.parent is None:
            return f"JoinField.root({str(self.relation)!r})"
        return f"JoinField.link({str(self.relation)!r}, {str(self.parent)!r})"
