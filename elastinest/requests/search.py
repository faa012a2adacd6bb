"""Search, count and explain requests."""

from datetime import timedelta
from typing import Any

from pydantic import BaseModel, Field, SerializeAsAny

from .. import infer
from ..query_dsl import Query
from ..responses import CountResponse, ExplainResponse, SearchResponse
from ..responses.base import Response
from ..transport.request_data import HttpMethod
from .base import ApiRequest, DocumentRequestDescriptor, Endpoint, PathParam, QueryParam


class DocumentTypeRoutes:
    """Infers index and type route values from document_type when unset."""

    def default_routes(self) -> dict[str, Any]:
        document_type = getattr(self, "document_type", None)
        if document_type is None:
            return {}
        return {
            "index": infer.IndexName.of(document_type),
            "doc_type": infer.TypeName.of(document_type),
        }


class SearchRequest(DocumentTypeRoutes, ApiRequest):
    endpoint = Endpoint("search", HttpMethod.POST, [
        "/_search",
        "/{index}/_search",
        "/{index}/{type}/_search",
    ])
    response_type = SearchResponse
    positional_routes = {1: ("index",), 2: ("index", "doc_type")}

    index: infer.Indices | None = PathParam()
    doc_type: infer.Types | None = PathParam(route="type")
    document_type: type[Any] | None = Field(default=None, exclude=True)

    routing: list[str] | None = QueryParam()
    scroll: timedelta | None = QueryParam()
    search_type: str | None = QueryParam()
    preference: str | None = QueryParam()
    ignore_unavailable: bool | None = QueryParam()
    allow_no_indices: bool | None = QueryParam()
    request_cache: bool | None = QueryParam()
    typed_keys: bool | None = QueryParam()

    query: SerializeAsAny[Query] | None = None
    post_filter: SerializeAsAny[Query] | None = None
    from_: int | None = Field(default=None, alias="from")
    size: int | None = None
    sort: list[Any] | None = None
    source: bool | list[str] | dict[str, Any] | None = Field(default=None, alias="_source")
    min_score: float | None = None
    track_scores: bool | None = None
    aggs: dict[str, Any] | None = None

    def default_routes(self) -> dict[str, Any]:
        routes = super().default_routes()
        return {
            "index": infer.Indices.coerce(routes.get("index")),
            "doc_type": infer.Types.coerce(routes.get("doc_type")),
        } if routes else {}

    def response_model(self) -> type[Response]:
        if isinstance(self.document_type, type) and issubclass(self.document_type, BaseModel):
            return SearchResponse[self.document_type]
        return SearchResponse


class SearchDescriptor(DocumentRequestDescriptor[SearchRequest]):
    request_class = SearchRequest

    def index(self, index: Any) -> "SearchDescriptor":
        return self._assign(index=index)

    def all_indices(self) -> "SearchDescriptor":
        return self._assign(index=infer.Indices.all())

    def type_(self, doc_type: Any) -> "SearchDescriptor":
        return self._assign(doc_type=doc_type)

    def query(self, selector: Any) -> "SearchDescriptor":
        return self._assign(query=self._query(selector))

    def post_filter(self, selector: Any) -> "SearchDescriptor":
        return self._assign(post_filter=self._query(selector))

    def from_(self, value: int | None) -> "SearchDescriptor":
        return self._assign(from_=value)

    def size(self, value: int | None) -> "SearchDescriptor":
        return self._assign(size=value)

    def sort(self, *sort: Any) -> "SearchDescriptor":
        return self._assign(sort=list(sort))

    def source(self, source: bool | list[str] | dict[str, Any] | None) -> "SearchDescriptor":
        return self._assign(source=source)

    def min_score(self, value: float | None) -> "SearchDescriptor":
        return self._assign(min_score=value)

    def aggregations(self, aggs: dict[str, Any]) -> "SearchDescriptor":
        return self._assign(aggs=aggs)

    def routing(self, *routing: str) -> "SearchDescriptor":
        return self._assign(routing=list(routing))

    def scroll(self, scroll: timedelta | None) -> "SearchDescriptor":
        return self._assign(scroll=scroll)

    def search_type(self, search_type: str | None) -> "SearchDescriptor":
        return self._assign(search_type=search_type)

    def preference(self, preference: str | None) -> "SearchDescriptor":
        return self._assign(preference=preference)


class CountRequest(DocumentTypeRoutes, ApiRequest):
    endpoint = Endpoint("count", HttpMethod.POST, [
        "/_count",
        "/{index}/_count",
        "/{index}/{type}/_count",
    ])
    response_type = CountResponse
    positional_routes = {1: ("index",), 2: ("index", "doc_type")}

    index: infer.Indices | None = PathParam()
    doc_type: infer.Types | None = PathParam(route="type")
    document_type: type[Any] | None = Field(default=None, exclude=True)

    routing: list[str] | None = QueryParam()
    min_score: float | None = QueryParam()
    ignore_unavailable: bool | None = QueryParam()
    allow_no_indices: bool | None = QueryParam()

    query: SerializeAsAny[Query] | None = None

    def default_routes(self) -> dict[str, Any]:
        routes = super().default_routes()
        return {
            "index": infer.Indices.coerce(routes.get("index")),
            "doc_type": infer.Types.coerce(routes.get("doc_type")),
        } if routes else {}


class CountDescriptor(DocumentRequestDescriptor[CountRequest]):
    request_class = CountRequest

    def index(self, index: Any) -> "CountDescriptor":
        return self._assign(index=index)

    def type_(self, doc_type: Any) -> "CountDescriptor":
        return self._assign(doc_type=doc_type)

    def query(self, selector: Any) -> "CountDescriptor":
        return self._assign(query=self._query(selector))

    def routing(self, *routing: str) -> "CountDescriptor":
        return self._assign(routing=list(routing))


class ExplainRequest(DocumentTypeRoutes, ApiRequest):
    """
    Explain how a document scores against a query.

    ExplainRequest("NEST", document_type=Project) infers index and type from
    Project; ExplainRequest("project", "doc", "NEST") names all three.
    """

    endpoint = Endpoint("explain", HttpMethod.POST, ["/{index}/{type}/{id}/_explain"])
    response_type = ExplainResponse
    positional_routes = {1: ("id",), 3: ("index", "doc_type", "id")}

    index: infer.IndexName | None = PathParam()
    doc_type: infer.TypeName | None = PathParam(route="type")
    id: infer.Id | None = PathParam()
    document_type: type[Any] | None = Field(default=None, exclude=True)

    analyze_wildcard: bool | None = QueryParam()
    analyzer: str | None = QueryParam()
    default_operator: str | None = QueryParam()
    df: str | None = QueryParam()
    lenient: bool | None = QueryParam()
    preference: str | None = QueryParam()
    routing: str | None = QueryParam()
    stored_fields: list[str] | None = QueryParam()

    query: SerializeAsAny[Query] | None = None

    @classmethod
    def for_document(cls, document: Any, **data: Any) -> "ExplainRequest":
        data.setdefault("document_type", type(document))
        return cls(id=infer.Id.from_document(document), **data)


class ExplainDescriptor(DocumentRequestDescriptor[ExplainRequest]):
    request_class = ExplainRequest

    def __init__(self, id: Any = None, *, document_type: type | None = None, **data: Any):
        if id is not None and not isinstance(id, (str, int, infer.Id)):
            document_type = document_type or type(id)
            id = infer.Id.from_document(id)
        if id is not None:
            data["id"] = id
        super().__init__(document_type=document_type, **data)

    def index(self, index: Any) -> "ExplainDescriptor":
        return self._assign(index=index)

    def type_(self, doc_type: Any) -> "ExplainDescriptor":
        return self._assign(doc_type=doc_type)

    def id(self, id: Any) -> "ExplainDescriptor":
        return self._assign(id=id)

    def query(self, selector: Any) -> "ExplainDescriptor":
        return self._assign(query=self._query(selector))

    def routing(self, routing: str | None) -> "ExplainDescriptor":
        return self._assign(routing=routing)

    def analyzer(self, analyzer: str | None) -> "ExplainDescriptor":
        return self._assign(analyzer=analyzer)

    def stored_fields(self, *fields: str) -> "ExplainDescriptor":
        return self._assign(stored_fields=list(fields))
