"""
Query model base.

Every query serializes to a single key object, {"<kind>": {...}}, and knows
whether it is conditionless: missing the values it needs to mean anything.
Conditionless queries are left out of request bodies unless they are
verbatim; strict queries raise instead.
"""

from collections.abc import Iterable, Iterator
from typing import Any, ClassVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    model_serializer,
)

from ..exceptions import ConditionlessQueryError


class Query(BaseModel):
    model_config = ConfigDict(
        validate_by_name=True,
        validate_by_alias=True,
        serialize_by_alias=True,
        validate_assignment=True,
        arbitrary_types_allowed=True,
    )

    kind: ClassVar[str] = ""

    name: str | None = Field(default=None, alias="_name")
    boost: float | None = None
    is_verbatim: bool = Field(default=False, exclude=True)
    is_strict: bool = Field(default=False, exclude=True)

    @property
    def conditionless(self) -> bool:
        return False

    def children(self) -> list["Query"]:
        return []

    def iter_queries(self) -> Iterator["Query"]:
        yield self
        for child in self.children():
            yield from child.iter_queries()

    def shape_body(self, body: dict[str, Any], info: SerializationInfo) -> Any:
        return body

    @model_serializer(mode="wrap")
    def _serialize_query(self, handler: SerializerFunctionWrapHandler, info: SerializationInfo) -> dict[str, Any]:
        return {self.kind: self.shape_body(handler(self), info)}

    def __and__(self, other: "Query") -> "Query":
        from .compound import combine

        return combine("must", self, other)

    def __or__(self, other: "Query") -> "Query":
        from .compound import combine

        return combine("should", self, other)

    def __invert__(self) -> "Query":
        from .compound import BoolQuery

        return BoolQuery(must_not=[self])

    def __pos__(self) -> "Query":
        from .compound import BoolQuery

        return BoolQuery(filter=[self])


def is_writable(query: Query | None) -> bool:
    """True when query should be written to a request body."""
    return query is not None and (query.is_verbatim or not query.conditionless)


def writable(queries: Iterable[Query] | None) -> list[Query]:
    return [q for q in queries or [] if is_writable(q)]


def ensure_strict(query: Query | None) -> None:
    """
    Raise when a strict query anywhere in the tree is conditionless.

    Raises:
        ConditionlessQueryError: For the first strict conditionless query found
    """
    if query is None:
        return
    for q in query.iter_queries():
        if q.is_strict and not q.is_verbatim and q.conditionless:
            raise ConditionlessQueryError(
                f"Query {q.kind} is conditionless but was marked strict",
                query_kind=q.kind,
            )


def effective_query(query: Query | None) -> Query | None:
    """The query to send, or None when it should be omitted."""
    ensure_strict(query)
    return query if is_writable(query) else None
