"""Request bodies, written lazily against the connection settings."""

from collections.abc import Iterable
from enum import Enum
from typing import TYPE_CHECKING, Any

from .serializer import JsonSerializer

if TYPE_CHECKING:
    from ..settings import TransportSettings

NEWLINE = b"\n"


class PostDataKind(str, Enum):
    BYTES = "bytes"
    STRING = "string"
    SERIALIZABLE = "serializable"
    MULTI_JSON = "multi_json"


class PostData:
    """
    A request body.

    Bodies are not serialized until the connection writes them, so inferred
    names resolve against the settings of the client that sends them.
    """

    def __init__(self, kind: PostDataKind, value: Any):
        self.kind = kind
        self.value = value

    @classmethod
    def from_bytes(cls, data: bytes) -> "PostData":
        return cls(PostDataKind.BYTES, data)

    @classmethod
    def from_string(cls, data: str) -> "PostData":
        return cls(PostDataKind.STRING, data)

    @classmethod
    def serializable(cls, value: Any) -> "PostData":
        return cls(PostDataKind.SERIALIZABLE, value)

    @classmethod
    def multi_json(cls, items: Iterable[Any]) -> "PostData":
        """
        Newline delimited JSON, one item per line and a trailing newline.

        Strings and bytes are written verbatim; anything else is serialized
        compactly.
        """
        return cls(PostDataKind.MULTI_JSON, list(items))

    def write(self, settings: "TransportSettings | None" = None) -> bytes:
        if self.kind == PostDataKind.BYTES:
            return bytes(self.value)
        if self.kind == PostDataKind.STRING:
            return self.value.encode("utf-8")

        serializer = JsonSerializer(settings)
        if self.kind == PostDataKind.SERIALIZABLE:
            return serializer.serialize(self.value)

        lines = []
        for item in self.value:
            if isinstance(item, bytes):
                lines.append(item)
            elif isinstance(item, str):
                lines.append(item.encode("utf-8"))
            else:
                lines.append(serializer.serialize(item, pretty=False))
        if not lines:
            return b""
        return NEWLINE.join(lines) + NEWLINE

    def __repr__(self) -> str:
        return f"PostData({self.kind.value})"
