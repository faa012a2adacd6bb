"""Leaf queries: match_all, match_none, term, match, exists and ids."""

from typing import Any, ClassVar

from pydantic import SerializationInfo

from .. import infer
from .base import Query


class MatchAllQuery(Query):
    kind: ClassVar[str] = "match_all"


class MatchNoneQuery(Query):
    kind: ClassVar[str] = "match_none"


class FieldNameQuery(Query):
    """A query whose body is keyed by the field it targets: {"term": {"name": {...}}}."""

    field: infer.Field | None = None

    def shape_body(self, body: dict[str, Any], info: SerializationInfo) -> Any:
        field_name = body.pop("field", None) or ""
        return {field_name: body}


class TermQuery(FieldNameQuery):
    kind: ClassVar[str] = "term"

    value: Any = None

    @property
    def conditionless(self) -> bool:
        if self.field is None or self.field.is_conditionless:
            return True
        return self.value is None or (isinstance(self.value, str) and not self.value.strip())


class MatchQuery(FieldNameQuery):
    kind: ClassVar[str] = "match"

    query: str | None = None
    operator: str | None = None
    fuzziness: str | int | None = None
    minimum_should_match: str | int | None = None

    @property
    def conditionless(self) -> bool:
        if self.field is None or self.field.is_conditionless:
            return True
        return not self.query or not self.query.strip()


class ExistsQuery(Query):
    kind: ClassVar[str] = "exists"

    field: infer.Field | None = None

    @property
    def conditionless(self) -> bool:
        return self.field is None or self.field.is_conditionless


class IdsQuery(Query):
    kind: ClassVar[str] = "ids"

    values: list[infer.Id] | None = None

    @property
    def conditionless(self) -> bool:
        return not self.values
