"""
Request base classes.

A request is a pydantic model whose fields are split into three groups by
their metadata: path parameters (route values filled into the URL
template), query string parameters, and body fields. The same model backs
both the object initializer and the fluent descriptor, so both produce the
same method, URL and body.
"""

import re
from collections.abc import Callable
from datetime import date, datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

from elastic_transport.client_utils import percent_encode
from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import RouteResolutionError
from ..infer.base import UrlParameter
from ..query_dsl import Query, QueryContainerDescriptor, effective_query
from ..serialization import PostData, format_timedelta
from ..transport.request_data import HttpMethod, RequestConfiguration

if TYPE_CHECKING:
    from ..responses.base import Response
    from ..settings import TransportSettings

PLACEHOLDER = re.compile(r"{(\w+)}")

PATH = "path"
QUERY = "query"


def PathParam(default: Any = None, *, route: str | None = None, **kwargs: Any) -> Any:
    """A field filled into the URL template under `route` (defaults to the field name)."""
    return Field(default, exclude=True, json_schema_extra={"param": PATH, "route": route}, **kwargs)


def QueryParam(default: Any = None, *, key: str | None = None, **kwargs: Any) -> Any:
    """A field written to the query string under `key` (defaults to the field name)."""
    return Field(default, exclude=True, json_schema_extra={"param": QUERY, "key": key}, **kwargs)


def _escape(value: Any, settings: "TransportSettings | None") -> str:
    """Render one query string or route value as text."""
    if isinstance(value, UrlParameter):
        return value.get_string(settings)
    if isinstance(value, (list, tuple, set)):
        return ",".join(_escape(item, settings) for item in value)
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, timedelta):
        return format_timedelta(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Enum):
        return _escape(value.value, settings)
    return str(value)


def _quote(value: Any, settings: "TransportSettings | None") -> str:
    return percent_encode(_escape(value, settings), ",*")


def encode_query(params: dict[str, Any], settings: "TransportSettings | None") -> str:
    """Join query string parameters, skipping None values."""
    return "&".join(f"{key}={_quote(value, settings)}" for key, value in params.items() if value is not None)


class Route:
    __slots__ = ("method", "template", "parts")

    def __init__(self, method: HttpMethod, template: str):
        self.method = method
        self.template = template
        self.parts = frozenset(PLACEHOLDER.findall(template))

    def fill(self, values: dict[str, str]) -> str:
        return PLACEHOLDER.sub(lambda m: percent_encode(values[m.group(1)], ",*"), self.template)


class Endpoint:
    """
    A named API with its URL templates.

    Paths are plain templates using the endpoint method, or (method, template)
    pairs for APIs whose method depends on the route (index with or without
    an id).
    """

    def __init__(self, name: str, method: HttpMethod, paths: list[str | tuple[HttpMethod, str]]):
        self.name = name
        self.method = method
        self.routes = [
            Route(*path) if isinstance(path, tuple) else Route(method, path)
            for path in paths
        ]

    def resolve(self, values: dict[str, str]) -> tuple[HttpMethod, str]:
        """
        Pick the template whose placeholders are exactly the supplied values.

        Raises:
            RouteResolutionError: If no template matches
        """
        supplied = frozenset(values)
        for route in self.routes:
            if route.parts == supplied:
                return route.method, route.fill(values)
        raise RouteResolutionError(
            f"No route for {self.name} takes exactly these route values: {sorted(supplied) or 'none'}. "
            f"Available routes: {', '.join(r.template for r in self.routes)}",
            endpoint=self.name,
            supplied=sorted(supplied),
        )


class ApiRequest(BaseModel):
    """Base for all API requests."""

    model_config = ConfigDict(
        validate_by_name=True,
        validate_by_alias=True,
        serialize_by_alias=True,
        validate_assignment=True,
        arbitrary_types_allowed=True,
    )

    endpoint: ClassVar[Endpoint]
    response_type: ClassVar[type["Response"]]
    # Arity of positional constructor arguments -> the fields they fill
    positional_routes: ClassVar[dict[int, tuple[str, ...]]] = {}

    request_configuration: RequestConfiguration | None = Field(default=None, exclude=True)

    def __init__(self, *args: Any, **data: Any):
        if args:
            names = self.positional_routes.get(len(args))
            if names is None:
                raise TypeError(
                    f"{type(self).__name__} does not take {len(args)} positional route values"
                )
            data.update(zip(names, args))
        super().__init__(**data)

    @classmethod
    def _fields_in(cls, location: str) -> list[tuple[str, str]]:
        fields = []
        for name, info in cls.model_fields.items():
            extra = info.json_schema_extra
            if isinstance(extra, dict) and extra.get("param") == location:
                fields.append((name, extra.get("route") or extra.get("key") or name))
        return fields

    @classmethod
    def body_field_names(cls) -> list[str]:
        # Path, query and bookkeeping fields are all excluded from dumps
        return [name for name, info in cls.model_fields.items() if not info.exclude]

    def default_routes(self) -> dict[str, Any]:
        """Route values inferred when the request leaves them unset."""
        return {}

    def response_model(self) -> type["Response"]:
        return self.response_type

    def route_values(self, settings: "TransportSettings | None") -> dict[str, str]:
        defaults = self.default_routes()
        values = {}
        for name, route in self._fields_in(PATH):
            value = getattr(self, name)
            if value is None:
                value = defaults.get(name)
            if value is None:
                continue
            text = _escape(value, settings)
            if text:
                values[route] = text
        return values

    def query_string(self, settings: "TransportSettings | None") -> str:
        return encode_query({key: getattr(self, name) for name, key in self._fields_in(QUERY)}, settings)

    def resolve(self, settings: "TransportSettings | None") -> tuple[HttpMethod, str]:
        """HTTP method and path plus query string for this request."""
        method, path = self.endpoint.resolve(self.route_values(settings))
        query = self.query_string(settings)
        return method, f"{path}?{query}" if query else path

    def url(self, settings: "TransportSettings | None") -> str:
        return self.resolve(settings)[1]

    def body(self) -> dict[str, Any] | None:
        """Body fields that are set, with conditionless queries left out."""
        data = {}
        for name in self.body_field_names():
            value = getattr(self, name)
            if isinstance(value, Query):
                value = effective_query(value)
            if value is None:
                continue
            info = type(self).model_fields[name]
            data[info.serialization_alias or info.alias or name] = value
        return data or None

    def post_data(self, settings: "TransportSettings | None") -> PostData | None:
        body = self.body()
        return PostData.serializable(body) if body is not None else None


RequestT = TypeVar("RequestT", bound=ApiRequest)
DescriptorT = TypeVar("DescriptorT", bound="RequestDescriptor")


class RequestDescriptor(Generic[RequestT]):
    """
    Fluent builder around a request model.

    Every setter assigns to the wrapped model, so validation and coercion are
    shared with the initializer syntax.
    """

    request_class: type[ApiRequest]

    def __init__(self, *args: Any, **data: Any):
        self._request: RequestT = self.request_class(*args, **data)

    def _assign(self: DescriptorT, **values: Any) -> DescriptorT:
        for name, value in values.items():
            setattr(self._request, name, value)
        return self

    def request_configuration(self: DescriptorT, configuration: RequestConfiguration | None = None, **values: Any) -> DescriptorT:
        return self._assign(request_configuration=configuration or RequestConfiguration(**values))

    def build(self) -> RequestT:
        return self._request


class DocumentRequestDescriptor(RequestDescriptor[RequestT]):
    """Descriptor for requests that carry a document type for inference and query building."""

    def __init__(self, *args: Any, document_type: type | None = None, **data: Any):
        if document_type is not None:
            data.setdefault("document_type", document_type)
        super().__init__(*args, **data)

    @property
    def document_type(self) -> type | None:
        return getattr(self._request, "document_type", None)

    def _query(self, selector: Callable[[QueryContainerDescriptor], Query | None] | Query | None) -> Query | None:
        return QueryContainerDescriptor(self.document_type).resolve(selector)
