"""Shared plumbing for values that render through the inferrer."""

from typing import TYPE_CHECKING, Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

if TYPE_CHECKING:
    from ..settings import TransportSettings


def require_connection_settings(settings: "TransportSettings | None", what: str) -> Any:
    """
    Return settings as ConnectionSettings or raise.

    Raises:
        IndexNameResolutionError: If settings carry no inference configuration
    """
    from ..exceptions import IndexNameResolutionError
    from ..settings import ConnectionSettings

    if not isinstance(settings, ConnectionSettings):
        raise IndexNameResolutionError(
            f"Tried to pass {what} on querystring but it could not be resolved "
            "because no connection settings are available"
        )
    return settings


class UrlParameter:
    """
    A value that is written into URLs and request bodies as a string
    resolved against connection settings.

    Subclasses implement coerce() for implicit conversion from plain values
    and get_string() for resolution. When used as a pydantic field type the
    settings are taken from the serialization context key "settings".
    """

    @classmethod
    def coerce(cls, value: Any) -> Any:
        raise NotImplementedError

    def get_string(self, settings: "TransportSettings | None") -> str:
        raise NotImplementedError

    @classmethod
    def _serialize(cls, value: Any, info: core_schema.SerializationInfo) -> Any:
        settings = (info.context or {}).get("settings")
        if settings is not None:
            return value.get_string(settings)
        return str(value)

    @classmethod
    def __get_pydantic_core_schema__(cls, source: Any, handler: GetCoreSchemaHandler) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls.coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(
                cls._serialize, info_arg=True
            ),
        )
