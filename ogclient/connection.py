"""Client settings validation, endpoint URLs and HTTP request construction."""

from __future__ import annotations

import base64
from collections.abc import Iterable, Mapping, Sequence
from urllib.parse import urlencode, urlsplit, urlunsplit

from .config import Address, AuthConfig, AuthType, Config
from .errors import (
    EmptyAuthPasswordError,
    EmptyAuthTokenError,
    EmptyAuthUsernameError,
    NoAddressError,
)

DEFAULT_TIMEOUT = 30.0
DEFAULT_CONNECT_TIMEOUT = 10.0

QueryValues = Mapping[str, "str | Sequence[str]"]


def validate_config(config: Config) -> Config:
    """Check a client configuration and fill in default timeouts.

    The configuration is updated in place and returned.
    """
    if not config.addresses:
        raise NoAddressError()

    auth = config.auth_config
    if auth is not None:
        if auth.auth_type == AuthType.TOKEN and not auth.token:
            raise EmptyAuthTokenError()
        if auth.auth_type == AuthType.PASSWORD:
            if not auth.username:
                raise EmptyAuthUsernameError()
            if not auth.password:
                raise EmptyAuthPasswordError()

    batch = config.batch_config
    if batch is not None:
        if batch.batch_interval <= 0:
            raise ValueError("batch enabled, batch interval must be great than 0")
        if batch.batch_size <= 0:
            raise ValueError("batch enabled, batch size must be great than 0")

    if config.timeout <= 0:
        config.timeout = DEFAULT_TIMEOUT
    if config.connect_timeout <= 0:
        config.connect_timeout = DEFAULT_CONNECT_TIMEOUT
    return config


def _join_host_port(host: str, port: int) -> str:
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def build_endpoints(addresses: Iterable[Address], tls_enabled: bool) -> list[str]:
    """Return the base URL of every address, using https when TLS is enabled."""
    scheme = "https://" if tls_enabled else "http://"
    return [scheme + _join_host_port(addr.host, addr.port) for addr in addresses]


def authorization_header(auth_config: AuthConfig | None) -> dict[str, str]:
    """Return the authentication headers for the given credentials.

    Only password authentication produces a header (HTTP Basic).
    """
    if auth_config is None or auth_config.auth_type != AuthType.PASSWORD:
        return {}
    credentials = f"{auth_config.username}:{auth_config.password}".encode()
    return {"Authorization": "Basic " + base64.b64encode(credentials).decode("ascii")}


def _encode_query(query_values: QueryValues) -> str:
    pairs: list[tuple[str, str]] = []
    for key in sorted(query_values):
        value = query_values[key]
        if isinstance(value, str):
            pairs.append((key, value))
        else:
            pairs.extend((key, item) for item in value)
    return urlencode(pairs)


def build_request_url(
    server_url: str, url_path: str, query_values: QueryValues | None
) -> str:
    """Join a server URL and path, replacing the query with the encoded values.

    Keys are encoded in sorted order; a sequence value yields repeated keys.
    When ``query_values`` is None the query of the joined URL is kept.
    """
    parts = urlsplit(server_url + url_path)
    query = parts.query if query_values is None else _encode_query(query_values)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))