"""
Resolution of index names, type names, ids, fields and relation names
against connection settings.
"""

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from ..exceptions import IndexNameResolutionError
from ..utils.logging import get_logger

if TYPE_CHECKING:
    from ..settings import ConnectionSettings
    from .field import Field
    from .index_name import IndexName
    from .relation import RelationName
    from .type_name import TypeName

logger = get_logger(__name__)


def to_camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


class Inferrer:
    """Resolves inferable values for one ConnectionSettings instance."""

    def __init__(self, settings: "ConnectionSettings"):
        self._settings = settings

    def index_name(self, index: "IndexName | None") -> str | None:
        """
        Resolve an index name to its wire string.

        Concrete names are returned as-is (cluster prefixed). Class based
        names use the class mapping, then the default index.

        Raises:
            IndexNameResolutionError: If no index can be inferred or the
                inferred name contains uppercase characters
        """
        if index is None:
            return None
        if index.name:
            return str(index)

        mapping = self._settings.mapping_for(index.type)
        name = mapping.index_name if mapping is not None and mapping.index_name else self._settings.default_index
        if not name:
            type_name = index.type.__name__ if index.type is not None else None
            raise IndexNameResolutionError(
                "Index name is null for the given type and no default index is set. "
                "Map an index name using ConnectionSettings.default_mapping_for() "
                "or set a default index using ConnectionSettings.default_index",
                type_name=type_name,
            )
        if name != name.lower():
            raise IndexNameResolutionError(
                f"Index names cannot contain uppercase characters: {name}."
            )
        return f"{index.cluster}:{name}" if index.cluster else name

    def type_name(self, type_name: "TypeName | None") -> str | None:
        if type_name is None:
            return None
        if type_name.name:
            return type_name.name
        mapping = self._settings.mapping_for(type_name.type)
        if mapping is not None and mapping.type_name:
            return mapping.type_name
        if self._settings.default_type_name:
            return self._settings.default_type_name
        return type_name.type.__name__.lower()

    def relation_name(self, relation: "RelationName | None") -> str | None:
        if relation is None:
            return None
        if relation.name:
            return relation.name
        mapping = self._settings.mapping_for(relation.type)
        if mapping is not None and mapping.relation_name:
            return mapping.relation_name
        return relation.type.__name__.lower()

    def id(self, document: Any) -> str | None:
        """Read the id of a document through its mapped id property, else its `id`."""
        if document is None:
            return None
        if isinstance(document, (str, int)):
            return str(document)
        mapping = self._settings.mapping_for(type(document))
        if mapping is not None and mapping.disable_id_inference:
            return None
        prop = mapping.id_property if mapping is not None and mapping.id_property else "id"
        if isinstance(document, dict):
            value = document.get(prop)
        else:
            value = getattr(document, prop, None)
        if value is None:
            logger.debug(
                "No id inferred for document",
                extra={"document_type": type(document).__name__, "id_property": prop},
            )
            return None
        return str(value)

    def field(self, field: "Field") -> str:
        if field.name:
            return field.name
        attribute = field.attribute or ""
        if isinstance(field.type, type) and issubclass(field.type, BaseModel):
            model_field = field.type.model_fields.get(attribute)
            if model_field is not None:
                alias = model_field.serialization_alias or model_field.alias
                if alias:
                    return alias
        if self._settings.camel_case_field_names:
            return to_camel_case(attribute)
        return attribute
