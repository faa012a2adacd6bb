"""
JSON serialization of request bodies and deserialization of responses.

Pydantic models are dumped by alias with None values dropped. Connection
settings travel as serialization context so index names, ids, fields and
join fields resolve to their wire strings.
"""

import json
import traceback
from datetime import timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic_core import to_jsonable_python

from ..exceptions import ResponseDeserializationError
from ..infer.base import UrlParameter
from ..infer.relation import JoinField
from ..utils.logging import get_logger

if TYPE_CHECKING:
    from ..settings import TransportSettings

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

MAX_EXCEPTION_DEPTH = 20


def format_timedelta(value: timedelta) -> str:
    """Render a timedelta the way Elasticsearch time units expect it: `<ms>ms`."""
    return f"{value // timedelta(milliseconds=1)}ms"


def exception_to_json(error: BaseException, max_depth: int = MAX_EXCEPTION_DEPTH) -> list[dict[str, Any]]:
    """
    Serialize an exception and its chain of causes.

    One entry is written per exception, starting with `error` at depth 0 and
    following __cause__ (else __context__) for at most max_depth entries.
    """
    entries: list[dict[str, Any]] = []
    current: BaseException | None = error
    depth = 0
    while current is not None and depth < max_depth:
        tb = current.__traceback__
        source = None
        if tb is not None:
            while tb.tb_next is not None:
                tb = tb.tb_next
            source = tb.tb_frame.f_globals.get("__name__")

        entries.append({
            "Depth": depth,
            "ClassName": f"{type(current).__module__}.{type(current).__qualname__}",
            "Message": str(current),
            "Source": source,
            "StackTraceString": "".join(traceback.format_tb(current.__traceback__)) or None,
            "RemoteStackTraceString": "",
            "RemoteStackIndex": "",
            "HResult": getattr(current, "errno", None) or 0,
            "HelpURL": getattr(current, "help_url", None),
        })
        depth += 1
        current = current.__cause__ or current.__context__
    return entries


class JsonSerializer:
    """Serializer bound to one set of connection settings."""

    def __init__(self, settings: "TransportSettings | None" = None):
        self.settings = settings

    @property
    def context(self) -> dict[str, Any]:
        return {"settings": self.settings}

    def to_jsonable(self, value: Any) -> Any:
        """Convert value into plain JSON types."""
        if value is None or isinstance(value, (str, bool, int, float)):
            return value
        if isinstance(value, BaseModel):
            return value.model_dump(
                mode="json",
                by_alias=True,
                exclude_none=True,
                context=self.context,
            )
        if isinstance(value, BaseException):
            return exception_to_json(value)
        if isinstance(value, UrlParameter):
            return value.get_string(self.settings) if self.settings is not None else str(value)
        if isinstance(value, JoinField):
            return value.to_json(self.settings)
        if isinstance(value, Enum):
            return self.to_jsonable(value.value)
        if isinstance(value, timedelta):
            return format_timedelta(value)
        if isinstance(value, dict):
            return {str(self.to_jsonable(k)): self.to_jsonable(v) for k, v in value.items()}
        if isinstance(value, (list, tuple, set, frozenset)):
            return [self.to_jsonable(v) for v in value]
        return to_jsonable_python(value)

    def serialize(self, value: Any, *, pretty: bool | None = None) -> bytes:
        """
        Serialize value to UTF-8 JSON.

        Args:
            value: Model, mapping, sequence or scalar
            pretty: Indent the output; defaults to the settings' pretty_json
        """
        if pretty is None:
            pretty = bool(self.settings is not None and self.settings.pretty_json)
        data = self.to_jsonable(value)
        if pretty:
            text = json.dumps(data, indent=2, ensure_ascii=False)
        else:
            text = json.dumps(data, separators=(",", ":"), ensure_ascii=False)
        return text.encode("utf-8")

    def deserialize(
        self,
        model: type[ModelT],
        data: bytes | str | None,
        context: dict[str, Any] | None = None,
    ) -> ModelT:
        """
        Build a model from a JSON body. An empty body yields an empty model.

        Raises:
            ResponseDeserializationError: If the body is not valid JSON for the model
        """
        validation_context = {**self.context, **(context or {})}
        try:
            if not data:
                return model.model_validate({}, context=validation_context)
            return model.model_validate_json(data, context=validation_context)
        except ValidationError as e:
            logger.warning(
                "Response could not be deserialized",
                extra={"response_type": model.__name__, "errors": e.error_count()},
            )
            raise ResponseDeserializationError(
                f"Could not deserialize response into {model.__name__}",
                original_error=e,
                response_type=model.__name__,
            ) from e
