"""Query DSL models and their fluent descriptors."""

from .base import Query, effective_query, ensure_strict, is_writable, writable
from .compound import BoolQuery, DisMaxQuery
from .descriptors import (
    BoolQueryDescriptor,
    DisMaxQueryDescriptor,
    ExistsQueryDescriptor,
    IdsQueryDescriptor,
    MatchAllQueryDescriptor,
    MatchNoneQueryDescriptor,
    MatchQueryDescriptor,
    ParentIdQueryDescriptor,
    QueryContainerDescriptor,
    QueryDescriptor,
    TermQueryDescriptor,
)
from .joining import ParentIdQuery
from .queries import ExistsQuery, IdsQuery, MatchAllQuery, MatchNoneQuery, MatchQuery, TermQuery

__all__ = [
    "BoolQuery",
    "BoolQueryDescriptor",
    "DisMaxQuery",
    "DisMaxQueryDescriptor",
    "ExistsQuery",
    "ExistsQueryDescriptor",
    "IdsQuery",
    "IdsQueryDescriptor",
    "MatchAllQuery",
    "MatchAllQueryDescriptor",
    "MatchNoneQuery",
    "MatchNoneQueryDescriptor",
    "MatchQuery",
    "MatchQueryDescriptor",
    "ParentIdQuery",
    "ParentIdQueryDescriptor",
    "Query",
    "QueryContainerDescriptor",
    "QueryDescriptor",
    "TermQuery",
    "TermQueryDescriptor",
    "effective_query",
    "ensure_strict",
    "is_writable",
    "writable",
]
