"""Search, count and explain responses."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .base import Response

DocumentT = TypeVar("DocumentT")


class ShardStatistics(BaseModel):
    model_config = ConfigDict(extra="allow")

    total: int | None = None
    successful: int | None = None
    skipped: int | None = None
    failed: int | None = None


class TotalHits(BaseModel):
    value: int = 0
    relation: str = "eq"


class Hit(BaseModel, Generic[DocumentT]):
    model_config = ConfigDict(extra="allow", validate_by_name=True, validate_by_alias=True)

    index: str | None = Field(default=None, alias="_index")
    type_: str | None = Field(default=None, alias="_type")
    id: str | None = Field(default=None, alias="_id")
    score: float | None = Field(default=None, alias="_score")
    routing: str | None = Field(default=None, alias="_routing")
    version: int | None = Field(default=None, alias="_version")
    source: DocumentT | None = Field(default=None, alias="_source")
    sort: list[Any] | None = None
    highlight: dict[str, list[str]] | None = None


class HitsMetadata(BaseModel, Generic[DocumentT]):
    total: int | TotalHits | None = None
    max_score: float | None = None
    hits: list[Hit[DocumentT]] = Field(default_factory=list)

    @property
    def total_value(self) -> int:
        if isinstance(self.total, TotalHits):
            return self.total.value
        return self.total or 0


class SearchResponse(Response, Generic[DocumentT]):
    """
    Search response. SearchResponse[Project] reads every _source into a
    Project; the plain SearchResponse keeps sources as dictionaries.
    """

    took: int | None = None
    timed_out: bool | None = None
    shards: ShardStatistics | None = Field(default=None, alias="_shards")
    hits: HitsMetadata[DocumentT] = Field(default_factory=HitsMetadata)
    aggregations: dict[str, Any] | None = None
    scroll_id: str | None = Field(default=None, alias="_scroll_id")

    @property
    def documents(self) -> list[DocumentT]:
        return [hit.source for hit in self.hits.hits if hit.source is not None]

    @property
    def total(self) -> int:
        return self.hits.total_value

    @property
    def max_score(self) -> float | None:
        return self.hits.max_score


class CountResponse(Response):
    count: int = 0
    shards: ShardStatistics | None = Field(default=None, alias="_shards")


class ExplanationDetail(BaseModel):
    value: float | None = None
    description: str | None = None
    details: list["ExplanationDetail"] = Field(default_factory=list)


class ExplainResponse(Response):
    index: str | None = Field(default=None, alias="_index")
    type_: str | None = Field(default=None, alias="_type")
    id: str | None = Field(default=None, alias="_id")
    matched: bool = False
    explanation: ExplanationDetail | None = None
