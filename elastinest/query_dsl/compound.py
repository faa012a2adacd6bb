"""Compound queries: bool and dis_max, plus the operator combinators."""

from typing import Any, ClassVar

from pydantic import (
    Field,
    SerializationInfo,
    SerializeAsAny,
    SerializerFunctionWrapHandler,
    field_serializer,
)

from .base import Query, is_writable, writable

BOOL_CLAUSES = ("must", "should", "must_not", "filter")


class BoolQuery(Query):
    kind: ClassVar[str] = "bool"

    must: list[SerializeAsAny[Query]] | None = None
    should: list[SerializeAsAny[Query]] | None = None
    must_not: list[SerializeAsAny[Query]] | None = None
    filter: list[SerializeAsAny[Query]] | None = None
    minimum_should_match: str | int | None = None

    @property
    def conditionless(self) -> bool:
        return not any(writable(getattr(self, clause)) for clause in BOOL_CLAUSES)

    def children(self) -> list[Query]:
        return [q for clause in BOOL_CLAUSES for q in getattr(self, clause) or []]

    @property
    def is_plain(self) -> bool:
        """No name, boost or minimum_should_match, so clauses can be merged into it."""
        return self.name is None and self.boost is None and self.minimum_should_match is None

    @field_serializer(*BOOL_CLAUSES, mode="wrap")
    def _drop_conditionless(self, value: list[Query] | None, handler: SerializerFunctionWrapHandler) -> Any:
        if value is None:
            return None
        return handler(writable(value))

    def shape_body(self, body: dict[str, Any], info: SerializationInfo) -> Any:
        return {k: v for k, v in body.items() if not (isinstance(v, list) and not v)}


class DisMaxQuery(Query):
    kind: ClassVar[str] = "dis_max"

    tie_breaker: float | None = None
    queries: list[SerializeAsAny[Query]] | None = Field(default=None)

    @property
    def conditionless(self) -> bool:
        return not writable(self.queries)

    def children(self) -> list[Query]:
        return list(self.queries or [])

    @field_serializer("queries", mode="wrap")
    def _drop_conditionless(self, value: list[Query] | None, handler: SerializerFunctionWrapHandler) -> Any:
        if value is None:
            return None
        return handler(writable(value))


def combine(clause: str, left: Query, right: Query) -> Query:
    """
    Combine two queries into a bool clause.

    A conditionless operand is dropped. Plain bool queries that already use
    the same clause are merged instead of nested.
    """
    if not is_writable(left):
        return right
    if not is_writable(right):
        return left

    queries: list[Query] = []
    for operand in (left, right):
        if isinstance(operand, BoolQuery) and operand.is_plain and _only_clause(operand) == clause:
            queries.extend(getattr(operand, clause))
        else:
            queries.append(operand)
    return BoolQuery(**{clause: queries})


def _only_clause(query: BoolQuery) -> str | None:
    used = [clause for clause in BOOL_CLAUSES if getattr(query, clause)]
    return used[0] if len(used) == 1 else None
