"""
Tests for query models, their fluent descriptors and conditionless handling.
"""

import pytest

from elastinest import ConditionlessQueryError, Field
from elastinest.query_dsl import (
    BoolQuery,
    DisMaxQuery,
    IdsQuery,
    MatchAllQuery,
    MatchQuery,
    ParentIdQuery,
    QueryContainerDescriptor,
    TermQuery,
    effective_query,
)
from elastinest.requests import SearchRequest
from tests.domain import CommitActivity, Project
from tests.factories import ProjectFactory
from tests.framework import assert_same_call, expect_json


@pytest.fixture
def q():
    return QueryContainerDescriptor(Project)


class TestDisMaxQuery:
    """dis_max through both syntaxes."""

    EXPECTED = {
        "dis_max": {
            "_name": "named_query",
            "boost": 1.1,
            "tie_breaker": 1.11,
            "queries": [
                {"match_all": {"_name": "query1"}},
                {"match_all": {"_name": "query2"}},
            ],
        }
    }

    def test_fluent(self, q, connection_settings):
        """The descriptor builds the named dis_max query."""
        query = q.dis_max(lambda d: d
            .name("named_query")
            .boost(1.1)
            .tie_breaker(1.11)
            .queries(
                lambda qq: qq.match_all(lambda m: m.name("query1")),
                lambda qq: qq.match_all(lambda m: m.name("query2")),
            ))
        expect_json(query, self.EXPECTED, connection_settings)

    def test_initializer(self, connection_settings):
        """The model builds the same JSON."""
        query = DisMaxQuery(
            name="named_query",
            boost=1.1,
            tie_breaker=1.11,
            queries=[MatchAllQuery(name="query1"), MatchAllQuery(name="query2")],
        )
        expect_json(query, self.EXPECTED, connection_settings)

    def test_conditionless_children_are_dropped(self, connection_settings):
        """Children that mean nothing are not written."""
        query = DisMaxQuery(queries=[MatchAllQuery(), TermQuery(field="name")])
        expect_json(query, {"dis_max": {"queries": [{"match_all": {}}]}}, connection_settings)

    def test_only_conditionless_children(self):
        """dis_max over conditionless queries is conditionless itself."""
        assert DisMaxQuery(queries=[TermQuery(), MatchQuery(field="name")]).conditionless
        assert DisMaxQuery().conditionless

    @pytest.mark.asyncio
    async def test_search_body(self, connection_settings):
        """Fluent and initializer searches send the same body."""
        _, request = await assert_same_call(
            connection_settings,
            lambda c: c.search(lambda s: s.query(lambda qq: qq.dis_max(lambda d: d
                .name("named_query")
                .boost(1.1)
                .tie_breaker(1.11)
                .queries(
                    lambda x: x.match_all(lambda m: m.name("query1")),
                    lambda x: x.match_all(lambda m: m.name("query2")),
                ))), document_type=Project),
            lambda c: c.search(SearchRequest(
                document_type=Project,
                query=DisMaxQuery(
                    name="named_query",
                    boost=1.1,
                    tie_breaker=1.11,
                    queries=[MatchAllQuery(name="query1"), MatchAllQuery(name="query2")],
                ),
            )),
        )
        expect_json(request.body(), {"query": self.EXPECTED})


class TestLeafQueries:
    """term, match, ids and match_all."""

    def test_match_all(self, q, connection_settings):
        expect_json(q.match_all(), {"match_all": {}}, connection_settings)

    def test_term_shorthand(self, q, connection_settings):
        """term(field, value) is keyed by the field."""
        expect_json(q.term("state", "Stable"), {"term": {"state": {"value": "Stable"}}}, connection_settings)

    def test_term_on_aliased_attribute(self, connection_settings):
        """Class attributes resolve to their serialized name."""
        query = TermQuery(field=Field.of(Project, "start_date"), value="2017-01-01", boost=2.0)
        expect_json(
            query,
            {"term": {"startedOn": {"value": "2017-01-01", "boost": 2.0}}},
            connection_settings,
        )

    def test_match(self, q, connection_settings):
        query = q.match(lambda m: m.field("description").query("search engine").operator("and"))
        expect_json(
            query,
            {"match": {"description": {"query": "search engine", "operator": "and"}}},
            connection_settings,
        )

    def test_ids_from_documents(self, connection_settings):
        """Ids can be documents; their id is inferred."""
        project = ProjectFactory.build(name="NEST")
        expect_json(IdsQuery(values=["1", project]), {"ids": {"values": ["1", "NEST"]}}, connection_settings)

    @pytest.mark.parametrize(
        "query",
        [
            TermQuery(),
            TermQuery(field="name"),
            TermQuery(field="name", value="  "),
            MatchQuery(field="name"),
            MatchQuery(query="text"),
            IdsQuery(values=[]),
        ],
    )
    def test_conditionless(self, query):
        """Queries without their required values are conditionless."""
        assert query.conditionless
        assert effective_query(query) is None


class TestParentIdQuery:
    """parent_id resolves its relation through the mapping."""

    EXPECTED = {"parent_id": {"type": "commits", "id": "NEST"}}

    def test_relation_from_class(self, connection_settings):
        query = ParentIdQuery(type_=CommitActivity, id="NEST")
        expect_json(query, self.EXPECTED, connection_settings)

    def test_fluent_with_parent_document(self, q, connection_settings):
        """The parent id can come from the parent document."""
        project = ProjectFactory.build(name="NEST")
        query = q.parent_id(lambda p: p.type_(CommitActivity).id(project))
        expect_json(query, self.EXPECTED, connection_settings)

    def test_literal_relation(self, connection_settings):
        query = ParentIdQuery(type_="commits", id="NEST", ignore_unmapped=True)
        expect_json(
            query,
            {"parent_id": {"type": "commits", "id": "NEST", "ignore_unmapped": True}},
            connection_settings,
        )

    def test_conditionless_without_id(self):
        assert ParentIdQuery(type_=CommitActivity).conditionless


class TestConditionless:
    """How requests treat conditionless, verbatim and strict queries."""

    def test_conditionless_query_is_omitted(self):
        """A search with only a conditionless query has no body."""
        assert SearchRequest(query=TermQuery(field="name")).body() is None

    def test_verbatim_query_is_kept(self, connection_settings):
        """Verbatim queries are written even when conditionless."""
        request = SearchRequest(query=TermQuery(field="name", value="", is_verbatim=True))
        expect_json(request.body(), {"query": {"term": {"name": {"value": ""}}}}, connection_settings)

    def test_strict_query_raises(self):
        """Strict conditionless queries are an error."""
        request = SearchRequest(query=TermQuery(field="name", is_strict=True))
        with pytest.raises(ConditionlessQueryError) as exc_info:
            request.body()
        assert exc_info.value.context["query"] == "term"

    def test_strict_query_nested_in_bool(self, q):
        """Strictness is checked across the whole query tree."""
        query = q.bool(lambda b: b.must(
            lambda x: x.match_all(),
            lambda x: x.term(lambda t: t.field("name").strict()),
        ))
        with pytest.raises(ConditionlessQueryError):
            effective_query(query)

    def test_bool_drops_conditionless_clauses(self, q, connection_settings):
        query = q.bool(lambda b: b
            .must(lambda x: x.match_all(), lambda x: x.term("name", None))
            .should(lambda x: x.term(None, "x")))
        expect_json(query, {"bool": {"must": [{"match_all": {}}]}}, connection_settings)


class TestOperators:
    """Combining queries with &, |, ~ and +."""

    def test_and(self, connection_settings):
        query = TermQuery(field="name", value="a") & TermQuery(field="name", value="b")
        expect_json(
            query,
            {"bool": {"must": [
                {"term": {"name": {"value": "a"}}},
                {"term": {"name": {"value": "b"}}},
            ]}},
            connection_settings,
        )

    def test_and_chains_are_flattened(self):
        a, b, c = (TermQuery(field="name", value=v) for v in "abc")
        query = a & b & c
        assert isinstance(query, BoolQuery)
        assert query.must == [a, b, c]

    def test_or(self):
        a, b = MatchAllQuery(name="a"), MatchAllQuery(name="b")
        query = a | b
        assert query.should == [a, b]
        assert query.must is None

    def test_not_and_filter(self, connection_settings):
        a = TermQuery(field="state", value="Stable")
        expect_json(~a, {"bool": {"must_not": [{"term": {"state": {"value": "Stable"}}}]}}, connection_settings)
        expect_json(+a, {"bool": {"filter": [{"term": {"state": {"value": "Stable"}}}]}}, connection_settings)

    def test_conditionless_operand_is_dropped(self):
        a = TermQuery(field="name", value="a")
        assert (a & TermQuery()) is a
        assert (TermQuery() | a) is a

    def test_named_bool_is_not_merged(self):
        """Bool queries with a name keep their own scope."""
        named = BoolQuery(must=[MatchAllQuery()], name="scoped")
        other = MatchAllQuery(name="other")
        query = named & other
        assert query.must == [named, other]
