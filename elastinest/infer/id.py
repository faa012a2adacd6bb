"""Document ids given directly or taken from a document instance."""

from typing import TYPE_CHECKING, Any

from .base import UrlParameter, require_connection_settings

if TYPE_CHECKING:
    from ..settings import TransportSettings


class Id(UrlParameter):
    __slots__ = ("value", "document")

    def __init__(self, value: str | int | None = None, document: Any = None):
        self.value = str(value) if value is not None else None
        self.document = document

    @classmethod
    def from_document(cls, document: Any) -> "Id":
        return cls(document=document)

    @classmethod
    def coerce(cls, value: Any) -> "Id | None":
        if value is None or isinstance(value, Id):
            return value
        if isinstance(value, (str, int)) and not isinstance(value, bool):
            return cls(value)
        return cls.from_document(value)

    def get_string(self, settings: "TransportSettings | None") -> str:
        if self.value is not None:
            return self.value
        connection_settings = require_connection_settings(settings, "id")
        resolved = connection_settings.inferrer.id(self.document)
        return resolved or ""

    def __str__(self) -> str:
        if self.value is not None:
            return self.value
        doc_id = getattr(self.document, "id", None)
        return str(doc_id) if doc_id is not None else ""

    def __repr__(self) -> str:
        return f"Id({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (str, int)):
            return self.value is not None and self.value == str(other)
        if not isinstance(other, Id):
            return NotImplemented
        if self.value is not None or other.value is not None:
            return self.value == other.value
        return self.document is other.document

    def __hash__(self) -> int:
        return hash(self.value) if self.value is not None else id(self.document)
