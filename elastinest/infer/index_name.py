"""
Index name resolution.

An IndexName is either a concrete name ("project") or a document class whose
index is inferred from the connection settings. Either form may be qualified
with a remote cluster ("cluster_one:project") for cross cluster search.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from .base import UrlParameter, require_connection_settings

if TYPE_CHECKING:
    from ..settings import TransportSettings

CLUSTER_SEPARATOR = ":"
ALL_INDICES = "_all"


class IndexName(UrlParameter):
    """Value equality wrapper around an index name or a document class."""

    __slots__ = ("name", "type", "cluster")

    def __init__(self, name: str | None = None, type_: type | None = None, cluster: str | None = None):
        self.name = name.strip() if name is not None else None
        self.type = type_
        self.cluster = cluster.strip() if cluster is not None and cluster.strip() else None

    @classmethod
    def parse(cls, index_name: str | None) -> "IndexName | None":
        """
        Parse "name" or "cluster:name".

        Returns None for None, empty or whitespace-only input and for a bare
        ":". Only the first separator splits, so "a:b:c" names index "b:c" on
        cluster "a".
        """
        if index_name is None or not index_name.strip():
            return None
        tokens = [t for t in index_name.split(CLUSTER_SEPARATOR, 1) if t]
        if not tokens:
            return None
        if len(tokens) == 1:
            return cls(name=tokens[0])
        return cls(name=tokens[1], cluster=tokens[0])

    @classmethod
    def of(cls, type_: type, cluster: str | None = None) -> "IndexName":
        return cls(type_=type_, cluster=cluster)

    @classmethod
    def rebuild(cls, name: str, type_: type | None, cluster: str | None = None) -> "IndexName":
        index = cls(type_=type_, cluster=cluster)
        index.name = name
        return index

    @classmethod
    def coerce(cls, value: Any) -> "IndexName | None":
        if value is None or isinstance(value, IndexName):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        if isinstance(value, type):
            return cls.of(value)
        raise TypeError(f"Cannot convert {type(value).__name__} to an index name")

    def and_(self, other: "IndexName | str | type", cluster: str | None = None) -> "Indices":
        if isinstance(other, type) and cluster is not None:
            other_index = IndexName.of(other, cluster)
        else:
            other_index = IndexName.coerce(other)
        return Indices.many(self, other_index)

    def _prefixed(self, name: str) -> str:
        return f"{self.cluster}{CLUSTER_SEPARATOR}{name}" if self.cluster else name

    def get_string(self, settings: "TransportSettings | None") -> str:
        connection_settings = require_connection_settings(settings, "index name")
        return connection_settings.inferrer.index_name(self)

    def __str__(self) -> str:
        if self.name:
            return self._prefixed(self.name)
        if self.type is not None:
            return self._prefixed(self.type.__name__)
        return ""

    def __repr__(self) -> str:
        if self.type is not None and not self.name:
            return f"IndexName for typeof: {self.type.__name__}"
        return f"IndexName({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            return bool(other) and bool(self.name) and other == self._prefixed(self.name)
        if not isinstance(other, IndexName):
            return NotImplemented
        if self.name and other.name:
            return self._prefixed(self.name) == other._prefixed(other.name)
        if not self.name and not other.name and self.type is not None and other.type is not None:
            return (self.type, self.cluster) == (other.type, other.cluster)
        return False

    def __hash__(self) -> int:
        if self.name:
            return hash(self._prefixed(self.name))
        return hash((IndexName, self.type, self.cluster))


class Indices(UrlParameter):
    """Either all indices or a list of index names."""

    __slots__ = ("indices", "is_all")

    def __init__(self, indices: Iterable[IndexName] | None = None, *, is_all: bool = False):
        self.is_all = is_all
        self.indices: list[IndexName] = [] if is_all else [i for i in (indices or []) if i is not None]

    @classmethod
    def all(cls) -> "Indices":
        return cls(is_all=True)

    @classmethod
    def index(cls, index: "IndexName | str | type") -> "Indices":
        return cls.many(index)

    @classmethod
    def many(cls, *indices: "IndexName | str | type") -> "Indices":
        return cls([IndexName.coerce(i) for i in indices])

    @classmethod
    def parse(cls, indices: str | None) -> "Indices | None":
        if indices is None or not indices.strip():
            return None
        if indices.strip() == ALL_INDICES:
            return cls.all()
        return cls(IndexName.parse(i) for i in indices.split(","))

    @classmethod
    def coerce(cls, value: Any) -> "Indices | None":
        if value is None or isinstance(value, Indices):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        if isinstance(value, (IndexName, type)):
            return cls.many(value)
        if isinstance(value, (list, tuple, set)):
            return cls.many(*value)
        raise TypeError(f"Cannot convert {type(value).__name__} to indices")

    def get_string(self, settings: "TransportSettings | None") -> str:
        if self.is_all:
            return ALL_INDICES
        connection_settings = require_connection_settings(settings, "indices")
        resolved = [connection_settings.inferrer.index_name(i) for i in self.indices]
        return ",".join(dict.fromkeys(resolved))

    def __iter__(self):
        return iter(self.indices)

    def __len__(self) -> int:
        return len(self.indices)

    def __str__(self) -> str:
        if self.is_all:
            return ALL_INDICES
        return ",".join(dict.fromkeys(str(i) for i in self.indices))

    def __repr__(self) -> str:
        return f"Indices({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            other = Indices.parse(other)
        if not isinstance(other, Indices):
            return NotImplemented
        if self.is_all or other.is_all:
            return self.is_all == other.is_all
        return set(self.indices) == set(other.indices)

    def __hash__(self) -> int:
        if self.is_all:
            return hash(ALL_INDICES)
        return hash(frozenset(self.indices))
