"""Configuration objects for constructing a client."""

from __future__ import annotations

import enum
import logging
import ssl
from dataclasses import dataclass, field


class AuthType(enum.IntEnum):
    """Type of identity authentication."""

    PASSWORD = 0
    TOKEN = 1


class ContentType(str, enum.Enum):
    """Content type used for data transmission."""

    MSGPACK = "MSGPACK"
    JSON = "JSON"


class CompressMethod(str, enum.Enum):
    """Compression method used for data transmission."""

    ZSTD = "ZSTD"
    GZIP = "GZIP"
    SNAPPY = "SNAPPY"
    NONE = "NONE"


@dataclass
class Address:
    """A service endpoint."""

    host: str
    port: int

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass
class AuthConfig:
    """Credentials used to authenticate with the server."""

    auth_type: AuthType = AuthType.PASSWORD
    username: str = ""
    password: str = ""
    token: str = ""


@dataclass
class BatchConfig:
    """Batching parameters; the interval is in seconds."""

    batch_interval: float = 0.0
    batch_size: int = 0


@dataclass
class RpConfig:
    """Retention policy settings."""

    name: str = ""
    duration: str = ""
    shard_group_duration: str = ""
    index_duration: str = ""


@dataclass
class GrpcConfig:
    """Settings for the gRPC write service."""

    addresses: list[Address] = field(default_factory=list)
    auth_config: AuthConfig | None = None
    tls_context: ssl.SSLContext | None = None
    compress_method: CompressMethod | None = None
    timeout: float = 30.0


@dataclass
class Config:
    """Client configuration. Timeouts are in seconds."""

    addresses: list[Address] = field(default_factory=list)
    auth_config: AuthConfig | None = None
    batch_config: BatchConfig | None = None
    timeout: float = 30.0
    connect_timeout: float = 10.0
    max_conns_per_host: int = 0
    max_idle_conns_per_host: int = 0
    content_type: ContentType | None = None
    compress_method: CompressMethod | None = None
    tls_context: ssl.SSLContext | None = None
    custom_metrics_labels: dict[str, str] = field(default_factory=dict)
    logger: logging.Logger | None = None
    grpc_config: GrpcConfig | None = None