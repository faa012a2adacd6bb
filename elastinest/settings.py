"""
Connection settings for elastinest.

TransportSettings holds everything the low level transport needs (nodes,
credentials, timeouts, retry, sniff and ping behaviour). ConnectionSettings
adds the inference configuration used by the typed client: default index,
default type name and per-class mappings.
"""

import base64
from datetime import timedelta
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, PrivateAttr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .infer.inferrer import Inferrer


class ConnectionPoolKind(str, Enum):
    """Connection pool implementations the transport can build from hosts."""

    SINGLE = "single"
    STATIC = "static"
    SNIFFING = "sniffing"


class TypeMapping(BaseModel):
    """Inference rules for one document class."""

    index_name: str | None = None
    type_name: str | None = None
    id_property: str | None = None
    relation_name: str | None = None
    disable_id_inference: bool = False


class TransportSettings(BaseSettings):
    """Configuration for the transport layer."""

    model_config = SettingsConfigDict(
        env_prefix="ELASTINEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    hosts: str | list[str] = Field(default="localhost:9200", description="Comma separated node addresses")
    connection_pool: ConnectionPoolKind | None = Field(
        default=None,
        description="Pool kind; defaults to single for one host, static otherwise",
    )
    username: str | None = None
    password: str | None = None
    api_key: str | None = None
    verify_certs: bool = True

    request_timeout: timedelta = Field(default=timedelta(seconds=60))
    ping_timeout: timedelta = Field(default=timedelta(seconds=2))
    dead_timeout: timedelta = Field(default=timedelta(seconds=60))
    max_dead_timeout: timedelta = Field(default=timedelta(minutes=30))
    max_retry_timeout: timedelta | None = Field(
        default=None,
        description="Overall bound on retries; defaults to request_timeout",
    )
    max_retries: int | None = Field(
        default=None, ge=0,
        description="Retries after the first attempt; defaults to number of nodes minus one",
    )

    sniff_on_startup: bool = True
    sniff_on_connection_fault: bool = True
    sniff_lifespan: timedelta | None = Field(default=timedelta(hours=1))
    disable_pings: bool = False

    disable_direct_streaming: bool = False
    throw_exceptions: bool = False
    pretty_json: bool = False
    headers: dict[str, str] = Field(default_factory=dict)

    @field_validator("hosts", mode="before")
    @classmethod
    def parse_hosts(cls, v: str | list[str]) -> list[str]:
        """Parse hosts from string or list."""
        if isinstance(v, str):
            if "," in v:
                hosts = [host.strip() for host in v.split(",") if host.strip()]
            else:
                hosts = [v.strip()]
        else:
            hosts = list(v)

        # Add http:// scheme if not present
        formatted_hosts = []
        for host in hosts:
            if not host.startswith(('http://', 'https://')):
                host = f"http://{host}"
            formatted_hosts.append(host.rstrip("/"))
        return formatted_hosts

    @field_validator("api_key", "username", "password", mode="before")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None or v == "":
            return None
        return v

    @property
    def host_list(self) -> list[str]:
        return self.hosts if isinstance(self.hosts, list) else [self.hosts]

    @property
    def effective_pool_kind(self) -> ConnectionPoolKind:
        if self.connection_pool is not None:
            return self.connection_pool
        return ConnectionPoolKind.SINGLE if len(self.host_list) == 1 else ConnectionPoolKind.STATIC

    def validate_authentication_config(self) -> tuple[bool, str]:
        """
        Validate authentication configuration.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if self.username and not self.password:
            return False, "Password must be provided when using username"
        if self.password and not self.username:
            return False, "Username must be provided when using password"
        if self.api_key and self.username:
            return False, "Configure either an API key or basic credentials, not both"

        return True, ""

    def get_effective_auth_method(self) -> str:
        """Return the authentication method that will be used: api_key, basic or none."""
        if self.api_key:
            return "api_key"
        if self.username and self.password:
            return "basic"
        return "none"

    def ensure_valid(self) -> None:
        """
        Raise when the settings cannot produce a working transport.

        Raises:
            ConfigurationError: If authentication is inconsistent or no hosts are set
        """
        if not self.host_list:
            raise ConfigurationError("At least one host must be configured", setting="hosts")
        valid, error = self.validate_authentication_config()
        if not valid:
            raise ConfigurationError(error, setting="auth")

    def auth_headers(self) -> dict[str, str]:
        """Authorization header for the configured credentials, if any."""
        method = self.get_effective_auth_method()
        if method == "api_key":
            return {"Authorization": f"ApiKey {self.api_key}"}
        if method == "basic":
            token = base64.b64encode(f"{self.username}:{self.password}".encode()).decode()
            return {"Authorization": f"Basic {token}"}
        return {}


class ConnectionSettings(TransportSettings):
    """
    Settings for the typed client.

    Inference of index names, type names, ids and relation names for a
    document class is configured with default_mapping_for():

        settings = ConnectionSettings(default_index="default-index")
        settings.default_mapping_for(Project, index_name="project", id_property="name")
    """

    default_index: str | None = None
    default_type_name: str | None = None
    camel_case_field_names: bool = False

    _mappings: dict[type, TypeMapping] = PrivateAttr(default_factory=dict)
    _inferrer: Inferrer | None = PrivateAttr(default=None)

    @field_validator("default_index", "default_type_name", mode="before")
    @classmethod
    def blank_names_to_none(cls, v: str | None) -> str | None:
        if v is None or not str(v).strip():
            return None
        return str(v).strip()

    def default_mapping_for(
        self,
        cls: type,
        *,
        index_name: str | None = None,
        type_name: str | None = None,
        id_property: str | None = None,
        relation_name: str | None = None,
        disable_id_inference: bool = False,
    ) -> "ConnectionSettings":
        """
        Register inference rules for a document class.

        Args:
            cls: Document class
            index_name: Index the class lives in
            type_name: Mapping type name
            id_property: Attribute holding the document id
            relation_name: Name used in join fields and parent_id queries
            disable_id_inference: Never infer ids from documents of this class

        Returns:
            These settings, for chaining
        """
        if index_name is not None and index_name != index_name.lower():
            raise ConfigurationError(
                f"Index names cannot contain uppercase characters: {index_name}.",
                setting="index_name",
            )
        self._mappings[cls] = TypeMapping(
            index_name=index_name,
            type_name=type_name,
            id_property=id_property,
            relation_name=relation_name,
            disable_id_inference=disable_id_inference,
        )
        return self

    def mapping_for(self, cls: type | None) -> TypeMapping | None:
        if cls is None:
            return None
        for klass in getattr(cls, "__mro__", (cls,)):
            mapping = self._mappings.get(klass)
            if mapping is not None:
                return mapping
        return None

    @property
    def mappings(self) -> dict[type, TypeMapping]:
        return dict(self._mappings)

    @property
    def inferrer(self) -> Inferrer:
        if self._inferrer is None:
            self._inferrer = Inferrer(self)
        return self._inferrer

    def copy_with(self, **changes: Any) -> "ConnectionSettings":
        """Copy these settings with some values replaced, keeping the mappings."""
        copied = self.model_copy(update=changes)
        copied._mappings = dict(self._mappings)
        copied._inferrer = None
        return copied
