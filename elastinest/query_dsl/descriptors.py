"""
Fluent builders for queries.

    q = QueryContainerDescriptor(Project)
    query = q.dis_max(lambda d: d
        .name("named_query")
        .boost(1.1)
        .tie_breaker(1.11)
        .queries(
            lambda qq: qq.match_all(lambda m: m.name("query1")),
            lambda qq: qq.match_all(lambda m: m.name("query2")),
        ))

builds the same model as the equivalent DisMaxQuery(...) initializer.
"""

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from .base import Query
from .compound import BoolQuery, DisMaxQuery
from .joining import ParentIdQuery
from .queries import ExistsQuery, IdsQuery, MatchAllQuery, MatchNoneQuery, MatchQuery, TermQuery

QueryT = TypeVar("QueryT", bound=Query)
DescriptorT = TypeVar("DescriptorT", bound="QueryDescriptor")

QuerySelector = Callable[["QueryContainerDescriptor"], Query | None]


class QueryDescriptor(Generic[QueryT]):
    query_class: type[Query] = Query

    def __init__(self, document_type: type | None = None):
        self.document_type = document_type
        self._query: QueryT = self.query_class()

    def name(self: DescriptorT, name: str | None) -> DescriptorT:
        self._query.name = name
        return self

    def boost(self: DescriptorT, boost: float | None) -> DescriptorT:
        self._query.boost = boost
        return self

    def verbatim(self: DescriptorT, verbatim: bool = True) -> DescriptorT:
        self._query.is_verbatim = verbatim
        return self

    def strict(self: DescriptorT, strict: bool = True) -> DescriptorT:
        self._query.is_strict = strict
        return self

    def build(self) -> QueryT:
        return self._query


class MatchAllQueryDescriptor(QueryDescriptor[MatchAllQuery]):
    query_class = MatchAllQuery


class MatchNoneQueryDescriptor(QueryDescriptor[MatchNoneQuery]):
    query_class = MatchNoneQuery


class TermQueryDescriptor(QueryDescriptor[TermQuery]):
    query_class = TermQuery

    def field(self, field: Any) -> "TermQueryDescriptor":
        self._query.field = field
        return self

    def value(self, value: Any) -> "TermQueryDescriptor":
        self._query.value = value
        return self


class MatchQueryDescriptor(QueryDescriptor[MatchQuery]):
    query_class = MatchQuery

    def field(self, field: Any) -> "MatchQueryDescriptor":
        self._query.field = field
        return self

    def query(self, query: str | None) -> "MatchQueryDescriptor":
        self._query.query = query
        return self

    def operator(self, operator: str | None) -> "MatchQueryDescriptor":
        self._query.operator = operator
        return self

    def fuzziness(self, fuzziness: str | int | None) -> "MatchQueryDescriptor":
        self._query.fuzziness = fuzziness
        return self

    def minimum_should_match(self, value: str | int | None) -> "MatchQueryDescriptor":
        self._query.minimum_should_match = value
        return self


class ExistsQueryDescriptor(QueryDescriptor[ExistsQuery]):
    query_class = ExistsQuery

    def field(self, field: Any) -> "ExistsQueryDescriptor":
        self._query.field = field
        return self


class IdsQueryDescriptor(QueryDescriptor[IdsQuery]):
    query_class = IdsQuery

    def values(self, *values: Any) -> "IdsQueryDescriptor":
        self._query.values = list(values)
        return self


class CompoundQueryDescriptor(QueryDescriptor[QueryT]):
    def _build_all(self, selectors: tuple[Any, ...]) -> list[Query]:
        container = QueryContainerDescriptor(self.document_type)
        queries = []
        for selector in selectors:
            query = container.resolve(selector)
            if query is not None:
                queries.append(query)
        return queries


class BoolQueryDescriptor(CompoundQueryDescriptor[BoolQuery]):
    query_class = BoolQuery

    def must(self, *selectors: Any) -> "BoolQueryDescriptor":
        self._query.must = self._build_all(selectors)
        return self

    def should(self, *selectors: Any) -> "BoolQueryDescriptor":
        self._query.should = self._build_all(selectors)
        return self

    def must_not(self, *selectors: Any) -> "BoolQueryDescriptor":
        self._query.must_not = self._build_all(selectors)
        return self

    def filter(self, *selectors: Any) -> "BoolQueryDescriptor":
        self._query.filter = self._build_all(selectors)
        return self

    def minimum_should_match(self, value: str | int | None) -> "BoolQueryDescriptor":
        self._query.minimum_should_match = value
        return self


class DisMaxQueryDescriptor(CompoundQueryDescriptor[DisMaxQuery]):
    query_class = DisMaxQuery

    def tie_breaker(self, tie_breaker: float | None) -> "DisMaxQueryDescriptor":
        self._query.tie_breaker = tie_breaker
        return self

    def queries(self, *selectors: Any) -> "DisMaxQueryDescriptor":
        self._query.queries = self._build_all(selectors)
        return self


class ParentIdQueryDescriptor(QueryDescriptor[ParentIdQuery]):
    query_class = ParentIdQuery

    def type_(self, relation: Any) -> "ParentIdQueryDescriptor":
        """Relation name of the children: a class, or a literal name."""
        self._query.type_ = relation
        return self

    def id(self, parent_id: Any) -> "ParentIdQueryDescriptor":
        self._query.id = parent_id
        return self

    def ignore_unmapped(self, ignore: bool = True) -> "ParentIdQueryDescriptor":
        self._query.ignore_unmapped = ignore
        return self


class QueryContainerDescriptor:
    """Entry point of the fluent query syntax; every method returns a built query."""

    def __init__(self, document_type: type | None = None):
        self.document_type = document_type

    def resolve(self, selector: QuerySelector | Query | None) -> Query | None:
        """Turn a query, a selector over this container, or None into a query."""
        if selector is None or isinstance(selector, Query):
            return selector
        return selector(QueryContainerDescriptor(self.document_type))

    def _apply(self, descriptor_class: type[QueryDescriptor], selector: Callable | None) -> Query:
        descriptor = descriptor_class(self.document_type)
        if selector is not None:
            descriptor = selector(descriptor) or descriptor
        return descriptor.build()

    def match_all(self, selector: Callable[[MatchAllQueryDescriptor], Any] | None = None) -> Query:
        return self._apply(MatchAllQueryDescriptor, selector)

    def match_none(self, selector: Callable[[MatchNoneQueryDescriptor], Any] | None = None) -> Query:
        return self._apply(MatchNoneQueryDescriptor, selector)

    def term(self, field: Any = None, value: Any = None) -> Query:
        """term(lambda t: t.field("name").value("x")) or term("name", "x")."""
        if callable(field) and not isinstance(field, type):
            return self._apply(TermQueryDescriptor, field)
        return self._apply(TermQueryDescriptor, lambda t: t.field(field).value(value))

    def match(self, selector: Callable[[MatchQueryDescriptor], Any] | None = None) -> Query:
        return self._apply(MatchQueryDescriptor, selector)

    def exists(self, field: Any = None) -> Query:
        if callable(field) and not isinstance(field, type):
            return self._apply(ExistsQueryDescriptor, field)
        return self._apply(ExistsQueryDescriptor, lambda e: e.field(field))

    def ids(self, selector: Callable[[IdsQueryDescriptor], Any] | None = None) -> Query:
        return self._apply(IdsQueryDescriptor, selector)

    def bool(self, selector: Callable[[BoolQueryDescriptor], Any] | None = None) -> Query:
        return self._apply(BoolQueryDescriptor, selector)

    def dis_max(self, selector: Callable[[DisMaxQueryDescriptor], Any] | None = None) -> Query:
        return self._apply(DisMaxQueryDescriptor, selector)

    def parent_id(self, selector: Callable[[ParentIdQueryDescriptor], Any] | None = None) -> Query:
        return self._apply(ParentIdQueryDescriptor, selector)
