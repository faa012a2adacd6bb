"""Document APIs: index, bulk and multi term vectors."""

from collections.abc import Iterable
from datetime import timedelta
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny

from .. import infer
from ..responses import BulkResponse, IndexResponse, MultiTermVectorsResponse
from ..serialization import PostData
from ..transport.request_data import HttpMethod
from .base import ApiRequest, Endpoint, PathParam, QueryParam, RequestDescriptor

if TYPE_CHECKING:
    from ..settings import TransportSettings


def _document_class(document: Any) -> type | None:
    """The class to infer names from; plain mappings carry none."""
    if document is None or isinstance(document, dict):
        return None
    return type(document)


class IndexRequest(ApiRequest):
    """
    Index a document. With an id the document is PUT to /{index}/{type}/{id},
    without one it is POSTed to /{index}/{type} and Elasticsearch assigns it.
    Index, type and id are inferred from the document when not given.
    """

    endpoint = Endpoint("index", HttpMethod.PUT, [
        (HttpMethod.PUT, "/{index}/{type}/{id}"),
        (HttpMethod.POST, "/{index}/{type}"),
    ])
    response_type = IndexResponse
    positional_routes = {1: ("document",)}

    document: Any = Field(default=None, exclude=True)

    index: infer.IndexName | None = PathParam()
    doc_type: infer.TypeName | None = PathParam(route="type")
    id: infer.Id | None = PathParam()

    op_type: str | None = QueryParam()
    refresh: bool | str | None = QueryParam()
    routing: str | None = QueryParam()
    pipeline: str | None = QueryParam()
    timeout: timedelta | None = QueryParam()
    version: int | None = QueryParam()
    version_type: str | None = QueryParam()
    wait_for_active_shards: str | None = QueryParam()

    def default_routes(self) -> dict[str, Any]:
        routes: dict[str, Any] = {}
        if self.document is not None:
            routes["id"] = infer.Id.from_document(self.document)
        document_class = _document_class(self.document)
        if document_class is not None:
            routes["index"] = infer.IndexName.of(document_class)
            routes["doc_type"] = infer.TypeName.of(document_class)
        return routes

    def post_data(self, settings: "TransportSettings | None") -> PostData | None:
        return PostData.serializable(self.document) if self.document is not None else None


class IndexDescriptor(RequestDescriptor[IndexRequest]):
    request_class = IndexRequest

    def __init__(self, document: Any = None, **data: Any):
        super().__init__(document=document, **data)

    def index(self, index: Any) -> "IndexDescriptor":
        return self._assign(index=index)

    def type_(self, doc_type: Any) -> "IndexDescriptor":
        return self._assign(doc_type=doc_type)

    def id(self, id: Any) -> "IndexDescriptor":
        return self._assign(id=id)

    def op_type(self, op_type: str | None) -> "IndexDescriptor":
        return self._assign(op_type=op_type)

    def refresh(self, refresh: bool | str | None = True) -> "IndexDescriptor":
        return self._assign(refresh=refresh)

    def routing(self, routing: str | None) -> "IndexDescriptor":
        return self._assign(routing=routing)

    def pipeline(self, pipeline: str | None) -> "IndexDescriptor":
        return self._assign(pipeline=pipeline)


class BulkOperation(BaseModel):
    """One action of a bulk request: a metadata line, optionally followed by a source line."""

    model_config = ConfigDict(
        validate_by_name=True,
        validate_by_alias=True,
        validate_assignment=True,
        arbitrary_types_allowed=True,
    )

    operation: ClassVar[str] = ""
    has_source: ClassVar[bool] = True

    document: Any = None
    index: infer.IndexName | None = None
    type_: infer.TypeName | None = None
    id: infer.Id | None = None
    routing: str | None = None
    version: int | None = None

    def header(self, settings: "TransportSettings | None", infer_index: bool) -> dict[str, Any]:
        """
        The metadata line. Index and type are inferred from the document class
        only when the request itself names no index.
        """
        document_class = _document_class(self.document)
        index = self.index
        doc_type = self.type_
        if infer_index and document_class is not None:
            index = index or infer.IndexName.of(document_class)
            doc_type = doc_type or infer.TypeName.of(document_class)
        doc_id = self.id or (infer.Id.from_document(self.document) if self.document is not None else None)

        meta: dict[str, Any] = {}
        for key, value in (("_index", index), ("_type", doc_type), ("_id", doc_id)):
            if value is None:
                continue
            text = value.get_string(settings)
            if text:
                meta[key] = text
        if self.routing is not None:
            meta["routing"] = self.routing
        if self.version is not None:
            meta["version"] = self.version
        return {self.operation: meta}

    def lines(self, settings: "TransportSettings | None", infer_index: bool) -> list[Any]:
        lines = [self.header(settings, infer_index)]
        if self.has_source:
            lines.append(self.document)
        return lines


class BulkIndexOperation(BulkOperation):
    operation: ClassVar[str] = "index"


class BulkCreateOperation(BulkOperation):
    operation: ClassVar[str] = "create"


class BulkDeleteOperation(BulkOperation):
    operation: ClassVar[str] = "delete"
    has_source: ClassVar[bool] = False


class BulkRequest(ApiRequest):
    endpoint = Endpoint("bulk", HttpMethod.POST, [
        "/_bulk",
        "/{index}/_bulk",
        "/{index}/{type}/_bulk",
    ])
    response_type = BulkResponse
    positional_routes = {1: ("index",), 2: ("index", "doc_type")}

    index: infer.IndexName | None = PathParam()
    doc_type: infer.TypeName | None = PathParam(route="type")

    refresh: bool | str | None = QueryParam()
    routing: str | None = QueryParam()
    pipeline: str | None = QueryParam()
    timeout: timedelta | None = QueryParam()
    wait_for_active_shards: str | None = QueryParam()

    operations: list[SerializeAsAny[BulkOperation]] = Field(default_factory=list, exclude=True)

    def post_data(self, settings: "TransportSettings | None") -> PostData | None:
        lines: list[Any] = []
        for operation in self.operations:
            lines.extend(operation.lines(settings, infer_index=self.index is None))
        return PostData.multi_json(lines)


class BulkDescriptor(RequestDescriptor[BulkRequest]):
    request_class = BulkRequest

    def index(self, index: Any) -> "BulkDescriptor":
        return self._assign(index=index)

    def type_(self, doc_type: Any) -> "BulkDescriptor":
        return self._assign(doc_type=doc_type)

    def refresh(self, refresh: bool | str | None = True) -> "BulkDescriptor":
        return self._assign(refresh=refresh)

    def _add(self, operation: BulkOperation) -> "BulkDescriptor":
        return self._assign(operations=[*self._request.operations, operation])

    def index_operation(self, document: Any, **values: Any) -> "BulkDescriptor":
        return self._add(BulkIndexOperation(document=document, **values))

    def create_operation(self, document: Any, **values: Any) -> "BulkDescriptor":
        return self._add(BulkCreateOperation(document=document, **values))

    def delete_operation(self, id: Any, **values: Any) -> "BulkDescriptor":
        return self._add(BulkDeleteOperation(id=id, **values))

    def index_many(self, documents: Iterable[Any], **values: Any) -> "BulkDescriptor":
        operations = [BulkIndexOperation(document=document, **values) for document in documents]
        return self._assign(operations=[*self._request.operations, *operations])


class MultiTermVectorOperation(BaseModel):
    model_config = ConfigDict(
        validate_by_name=True,
        validate_by_alias=True,
        serialize_by_alias=True,
        validate_assignment=True,
    )

    index: infer.IndexName | None = Field(default=None, alias="_index")
    type_: infer.TypeName | None = Field(default=None, alias="_type")
    id: infer.Id | None = Field(default=None, alias="_id")
    fields: list[infer.Field] | None = None
    offsets: bool | None = None
    payloads: bool | None = None
    positions: bool | None = None
    term_statistics: bool | None = None
    field_statistics: bool | None = None
    routing: str | None = None


class MultiTermVectorsRequest(ApiRequest):
    endpoint = Endpoint("multi_term_vectors", HttpMethod.POST, [
        "/_mtermvectors",
        "/{index}/_mtermvectors",
        "/{index}/{type}/_mtermvectors",
    ])
    response_type = MultiTermVectorsResponse
    positional_routes = {1: ("index",), 2: ("index", "doc_type")}

    index: infer.IndexName | None = PathParam()
    doc_type: infer.TypeName | None = PathParam(route="type")

    fields: list[infer.Field] | None = QueryParam()
    field_statistics: bool | None = QueryParam()
    offsets: bool | None = QueryParam()
    payloads: bool | None = QueryParam()
    positions: bool | None = QueryParam()
    preference: str | None = QueryParam()
    realtime: bool | None = QueryParam()
    routing: str | None = QueryParam()
    term_statistics: bool | None = QueryParam()

    docs: list[MultiTermVectorOperation] | None = None
    ids: list[infer.Id] | None = None


class MultiTermVectorsDescriptor(RequestDescriptor[MultiTermVectorsRequest]):
    request_class = MultiTermVectorsRequest

    def index(self, index: Any) -> "MultiTermVectorsDescriptor":
        return self._assign(index=index)

    def type_(self, doc_type: Any) -> "MultiTermVectorsDescriptor":
        return self._assign(doc_type=doc_type)

    def documents(self, *operations: MultiTermVectorOperation | dict[str, Any]) -> "MultiTermVectorsDescriptor":
        return self._assign(docs=list(operations))

    def ids(self, *ids: Any) -> "MultiTermVectorsDescriptor":
        return self._assign(ids=list(ids))

    def fields(self, *fields: Any) -> "MultiTermVectorsDescriptor":
        return self._assign(fields=list(fields))

    def term_statistics(self, enabled: bool = True) -> "MultiTermVectorsDescriptor":
        return self._assign(term_statistics=enabled)

    def field_statistics(self, enabled: bool = True) -> "MultiTermVectorsDescriptor":
        return self._assign(field_statistics=enabled)
