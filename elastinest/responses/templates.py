"""Index template responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .base import Response

INDEX_PREFIX = "index."


def flatten_settings(settings: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten {"index": {"number_of_shards": "2"}} into {"index.number_of_shards": "2"}."""
    flat: dict[str, Any] = {}
    for key, value in settings.items():
        full_key = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(flatten_settings(value, f"{full_key}."))
        else:
            flat[full_key] = value
    return flat


class IndexSettings(BaseModel):
    """
    Index settings as returned nested or with flat_settings. Well known
    settings are exposed as fields; the rest stay available as extras under
    their flat key.
    """

    model_config = ConfigDict(extra="allow", validate_by_name=True, validate_by_alias=True, serialize_by_alias=True)

    number_of_shards: int | None = Field(default=None, alias="index.number_of_shards")
    number_of_replicas: int | None = Field(default=None, alias="index.number_of_replicas")
    refresh_interval: str | None = Field(default=None, alias="index.refresh_interval")

    @model_validator(mode="before")
    @classmethod
    def flatten(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        flat = flatten_settings(data)
        return {
            key if key.startswith(INDEX_PREFIX) or key in cls.model_fields else f"{INDEX_PREFIX}{key}": value
            for key, value in flat.items()
        }


class TemplateMapping(BaseModel):
    model_config = ConfigDict(extra="allow")

    index_patterns: list[str] = Field(default_factory=list)
    template: str | None = None
    order: int | None = None
    version: int | None = None
    settings: IndexSettings = Field(default_factory=IndexSettings)
    mappings: dict[str, Any] = Field(default_factory=dict)
    aliases: dict[str, Any] = Field(default_factory=dict)


class GetIndexTemplateResponse(Response):
    """Template name -> TemplateMapping, read from the top level of the body."""

    template_mappings: dict[str, TemplateMapping] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def wrap_root(cls, data: Any) -> Any:
        if isinstance(data, dict) and "template_mappings" not in data:
            return {"template_mappings": data}
        return data


class AcknowledgedResponse(Response):
    acknowledged: bool = False
