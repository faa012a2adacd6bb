"""Joining queries."""

from typing import ClassVar

from pydantic import Field

from .. import infer
from .base import Query


class ParentIdQuery(Query):
    """
    Finds child documents that belong to a particular parent.

    `type_` is the relation name of the children (a class resolves through its
    mapping) and `id` the parent's id.
    """

    kind: ClassVar[str] = "parent_id"

    type_: infer.RelationName | None = Field(default=None, alias="type")
    id: infer.Id | None = None
    ignore_unmapped: bool | None = None

    @property
    def conditionless(self) -> bool:
        return self.type_ is None or self.id is None
