"""Document API responses: index, bulk and multi term vectors."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .base import ErrorCause, Response
from .search import ShardStatistics


class WriteResponseBase(Response):
    index: str | None = Field(default=None, alias="_index")
    type_: str | None = Field(default=None, alias="_type")
    id: str | None = Field(default=None, alias="_id")
    version: int | None = Field(default=None, alias="_version")
    result: str | None = None
    shards: ShardStatistics | None = Field(default=None, alias="_shards")
    seq_no: int | None = Field(default=None, alias="_seq_no")
    primary_term: int | None = Field(default=None, alias="_primary_term")


class IndexResponse(WriteResponseBase):
    pass


class BulkResponseItem(BaseModel):
    model_config = ConfigDict(extra="allow", validate_by_name=True, validate_by_alias=True)

    index: str | None = Field(default=None, alias="_index")
    type_: str | None = Field(default=None, alias="_type")
    id: str | None = Field(default=None, alias="_id")
    version: int | None = Field(default=None, alias="_version")
    result: str | None = None
    status: int | None = None
    error: ErrorCause | None = None

    @property
    def is_valid(self) -> bool:
        return self.error is None and self.status is not None and 200 <= self.status < 300


class BulkResponse(Response):
    took: int | None = None
    errors: bool = False
    items: list[dict[str, BulkResponseItem]] = Field(default_factory=list)

    @property
    def operations(self) -> list[tuple[str, BulkResponseItem]]:
        """(operation, item) pairs in request order."""
        return [next(iter(entry.items())) for entry in self.items if entry]

    @property
    def items_with_errors(self) -> list[BulkResponseItem]:
        return [item for _, item in self.operations if not item.is_valid]


class TermVectorsResult(BaseModel):
    model_config = ConfigDict(extra="allow", validate_by_name=True, validate_by_alias=True)

    index: str | None = Field(default=None, alias="_index")
    type_: str | None = Field(default=None, alias="_type")
    id: str | None = Field(default=None, alias="_id")
    version: int | None = Field(default=None, alias="_version")
    found: bool | None = None
    took: int | None = None
    term_vectors: dict[str, Any] = Field(default_factory=dict)


class MultiTermVectorsResponse(Response):
    docs: list[TermVectorsResult] = Field(default_factory=list)
