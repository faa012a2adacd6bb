"""Index template requests."""

from collections.abc import Callable
from datetime import timedelta
from typing import Any

from pydantic import field_validator

from ..responses import AcknowledgedResponse, ExistsResponse, GetIndexTemplateResponse
from ..transport.request_data import HttpMethod
from .base import ApiRequest, Endpoint, PathParam, QueryParam, RequestDescriptor


class GetIndexTemplateRequest(ApiRequest):
    endpoint = Endpoint("get_index_template", HttpMethod.GET, ["/_template", "/_template/{name}"])
    response_type = GetIndexTemplateResponse
    positional_routes = {1: ("name",)}

    name: list[str] | None = PathParam()

    flat_settings: bool | None = QueryParam()
    master_timeout: timedelta | None = QueryParam()
    local: bool | None = QueryParam()

    @field_validator("name", mode="before")
    @classmethod
    def split_names(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [name.strip() for name in v.split(",") if name.strip()] or None
        return v


class GetIndexTemplateDescriptor(RequestDescriptor[GetIndexTemplateRequest]):
    request_class = GetIndexTemplateRequest

    def name(self, *names: str) -> "GetIndexTemplateDescriptor":
        return self._assign(name=list(names) or None)

    def flat_settings(self, flat: bool = True) -> "GetIndexTemplateDescriptor":
        return self._assign(flat_settings=flat)

    def master_timeout(self, timeout: timedelta | None) -> "GetIndexTemplateDescriptor":
        return self._assign(master_timeout=timeout)

    def local(self, local: bool = True) -> "GetIndexTemplateDescriptor":
        return self._assign(local=local)


class IndexSettingsDescriptor:
    """Builds a settings dictionary: s.number_of_shards(2).setting("index.codec", "best_compression")."""

    def __init__(self):
        self._settings: dict[str, Any] = {}

    def number_of_shards(self, shards: int) -> "IndexSettingsDescriptor":
        return self.setting("index.number_of_shards", shards)

    def number_of_replicas(self, replicas: int) -> "IndexSettingsDescriptor":
        return self.setting("index.number_of_replicas", replicas)

    def refresh_interval(self, interval: str | timedelta) -> "IndexSettingsDescriptor":
        return self.setting("index.refresh_interval", interval)

    def setting(self, key: str, value: Any) -> "IndexSettingsDescriptor":
        self._settings[key] = value
        return self

    def build(self) -> dict[str, Any]:
        return dict(self._settings)


class PutIndexTemplateRequest(ApiRequest):
    endpoint = Endpoint("put_index_template", HttpMethod.PUT, ["/_template/{name}"])
    response_type = AcknowledgedResponse
    positional_routes = {1: ("name",)}

    name: str | None = PathParam()

    create: bool | None = QueryParam()
    flat_settings: bool | None = QueryParam()
    master_timeout: timedelta | None = QueryParam()
    timeout: timedelta | None = QueryParam()

    index_patterns: list[str] | None = None
    template: str | None = None
    order: int | None = None
    version: int | None = None
    settings: dict[str, Any] | None = None
    mappings: dict[str, Any] | None = None
    aliases: dict[str, Any] | None = None


class PutIndexTemplateDescriptor(RequestDescriptor[PutIndexTemplateRequest]):
    request_class = PutIndexTemplateRequest

    def name(self, name: str) -> "PutIndexTemplateDescriptor":
        return self._assign(name=name)

    def index_patterns(self, *patterns: str) -> "PutIndexTemplateDescriptor":
        return self._assign(index_patterns=list(patterns))

    def template(self, template: str | None) -> "PutIndexTemplateDescriptor":
        return self._assign(template=template)

    def order(self, order: int | None) -> "PutIndexTemplateDescriptor":
        return self._assign(order=order)

    def version(self, version: int | None) -> "PutIndexTemplateDescriptor":
        return self._assign(version=version)

    def settings(
        self,
        settings: dict[str, Any] | Callable[[IndexSettingsDescriptor], IndexSettingsDescriptor],
    ) -> "PutIndexTemplateDescriptor":
        if callable(settings):
            descriptor = IndexSettingsDescriptor()
            settings = (settings(descriptor) or descriptor).build()
        return self._assign(settings=settings)

    def mappings(self, mappings: dict[str, Any] | None) -> "PutIndexTemplateDescriptor":
        return self._assign(mappings=mappings)

    def aliases(self, aliases: dict[str, Any] | None) -> "PutIndexTemplateDescriptor":
        return self._assign(aliases=aliases)

    def create(self, create: bool = True) -> "PutIndexTemplateDescriptor":
        return self._assign(create=create)

    def master_timeout(self, timeout: timedelta | None) -> "PutIndexTemplateDescriptor":
        return self._assign(master_timeout=timeout)


class DeleteIndexTemplateRequest(ApiRequest):
    endpoint = Endpoint("delete_index_template", HttpMethod.DELETE, ["/_template/{name}"])
    response_type = AcknowledgedResponse
    positional_routes = {1: ("name",)}

    name: str | None = PathParam()

    master_timeout: timedelta | None = QueryParam()
    timeout: timedelta | None = QueryParam()


class DeleteIndexTemplateDescriptor(RequestDescriptor[DeleteIndexTemplateRequest]):
    request_class = DeleteIndexTemplateRequest

    def name(self, name: str) -> "DeleteIndexTemplateDescriptor":
        return self._assign(name=name)

    def master_timeout(self, timeout: timedelta | None) -> "DeleteIndexTemplateDescriptor":
        return self._assign(master_timeout=timeout)

    def timeout(self, timeout: timedelta | None) -> "DeleteIndexTemplateDescriptor":
        return self._assign(timeout=timeout)


class IndexTemplateExistsRequest(ApiRequest):
    endpoint = Endpoint("index_template_exists", HttpMethod.HEAD, ["/_template/{name}"])
    response_type = ExistsResponse
    positional_routes = {1: ("name",)}

    name: str | None = PathParam()

    flat_settings: bool | None = QueryParam()
    local: bool | None = QueryParam()
    master_timeout: timedelta | None = QueryParam()


class IndexTemplateExistsDescriptor(RequestDescriptor[IndexTemplateExistsRequest]):
    request_class = IndexTemplateExistsRequest

    def name(self, name: str) -> "IndexTemplateExistsDescriptor":
        return self._assign(name=name)

    def local(self, local: bool = True) -> "IndexTemplateExistsDescriptor":
        return self._assign(local=local)
