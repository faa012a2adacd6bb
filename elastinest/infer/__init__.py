"""Inferable identifiers: index names, type names, ids, fields and relations."""

from .field import Field
from .id import Id
from .index_name import IndexName, Indices
from .inferrer import Inferrer
from .relation import JoinField, RelationName
from .type_name import TypeName, Types

__all__ = [
    "Field",
    "Id",
    "IndexName",
    "Indices",
    "Inferrer",
    "JoinField",
    "RelationName",
    "TypeName",
    "Types",
]
