"""Field references: a plain name, or a class attribute resolved via its alias."""

from typing import TYPE_CHECKING, Any

from .base import UrlParameter, require_connection_settings

if TYPE_CHECKING:
    from ..settings import TransportSettings

BOOST_SEPARATOR = "^"


class Field(UrlParameter):
    """
    A reference to a document field.

    Field("name^2.1") is the field "name" boosted by 2.1. Field.of(Project,
    "start_date") resolves to the attribute's serialization alias when the
    class is a pydantic model.
    """

    __slots__ = ("name", "type", "attribute", "boost")

    def __init__(
        self,
        name: str | None = None,
        boost: float | None = None,
        *,
        type_: type | None = None,
        attribute: str | None = None,
    ):
        if name and BOOST_SEPARATOR in name:
            name, _, raw_boost = name.partition(BOOST_SEPARATOR)
            if boost is None and raw_boost:
                boost = float(raw_boost)
        self.name = name.strip() if name is not None else None
        self.boost = boost
        self.type = type_
        self.attribute = attribute

    @classmethod
    def of(cls, type_: type, attribute: str, boost: float | None = None) -> "Field":
        return cls(type_=type_, attribute=attribute, boost=boost)

    @classmethod
    def coerce(cls, value: Any) -> "Field | None":
        if value is None or isinstance(value, Field):
            return value
        if isinstance(value, str):
            return cls(value) if value.strip() else None
        if isinstance(value, tuple) and len(value) == 2:
            return cls.of(value[0], value[1])
        raise TypeError(f"Cannot convert {type(value).__name__} to a field")

    def get_string(self, settings: "TransportSettings | None") -> str:
        connection_settings = require_connection_settings(settings, "field")
        return connection_settings.inferrer.field(self)

    @property
    def is_conditionless(self) -> bool:
        return not self.name and not self.attribute

    def __str__(self) -> str:
        return self.name or self.attribute or ""

    def __repr__(self) -> str:
        suffix = f"^{self.boost}" if self.boost is not None else ""
        return f"Field({str(self)}{suffix!s})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            other = Field(other)
        if not isinstance(other, Field):
            return NotImplemented
        return (self.name, self.type, self.attribute, self.boost) == (
            other.name, other.type, other.attribute, other.boost
        )

    def __hash__(self) -> int:
        return hash((self.name, self.type, self.attribute, self.boost))
