import base64

import pytest

from ogclient.config import Address, AuthConfig, AuthType, BatchConfig, Config
from ogclient.connection import (
    authorization_header,
    build_endpoints,
    build_request_url,
    validate_config,
)
from ogclient.errors import (
    EmptyAuthPasswordError,
    EmptyAuthTokenError,
    EmptyAuthUsernameError,
    NoAddressError,
)


def _addresses():
    return [Address(host="localhost", port=8086)]


def test_authorization_header_password():
    password = "password"
    headers = authorization_header(
        AuthConfig(auth_type=AuthType.PASSWORD, username="test", password=password)
    )
    value = headers["Authorization"]
    assert value.startswith("Basic ")
    assert base64.b64decode(value[len("Basic "):]) == b"test:password"


def test_authorization_header_without_config():
    assert authorization_header(None) == {}


def test_authorization_header_token_type_sets_nothing():
    assert authorization_header(AuthConfig(auth_type=AuthType.TOKEN, token="token")) == {}


def test_validate_config_no_address():
    with pytest.raises(NoAddressError):
        validate_config(Config())


def test_validate_config_empty_token():
    cfg = Config(addresses=_addresses(), auth_config=AuthConfig(auth_type=AuthType.TOKEN))
    with pytest.raises(EmptyAuthTokenError):
        validate_config(cfg)


def test_validate_config_empty_username():
    password = "password"
    cfg = Config(
        addresses=_addresses(),
        auth_config=AuthConfig(auth_type=AuthType.PASSWORD, password=password),
    )
    with pytest.raises(EmptyAuthUsernameError):
        validate_config(cfg)


def test_validate_config_empty_password():
    cfg = Config(
        addresses=_addresses(),
        auth_config=AuthConfig(auth_type=AuthType.PASSWORD, username="test"),
    )
    with pytest.raises(EmptyAuthPasswordError):
        validate_config(cfg)


def test_validate_config_bad_batch_interval():
    cfg = Config(addresses=_addresses(), batch_config=BatchConfig(0, 10))
    with pytest.raises(ValueError, match="batch interval must be great than 0"):
        validate_config(cfg)


def test_validate_config_bad_batch_size():
    cfg = Config(addresses=_addresses(), batch_config=BatchConfig(1.0, 0))
    with pytest.raises(ValueError, match="batch size must be great than 0"):
        validate_config(cfg)


def test_validate_config_fills_default_timeouts():
    cfg = Config(addresses=_addresses(), timeout=0, connect_timeout=-1)
    result = validate_config(cfg)
    assert result is cfg
    assert cfg.timeout == 30.0
    assert cfg.connect_timeout == 10.0


def test_validate_config_keeps_explicit_timeouts():
    cfg = Config(addresses=_addresses(), timeout=5, connect_timeout=2)
    validate_config(cfg)
    assert (cfg.timeout, cfg.connect_timeout) == (5, 2)


def test_build_endpoints_http_and_https():
    addrs = [Address("127.0.0.1", 8086), Address("db.example.com", 8087)]
    assert build_endpoints(addrs, False) == [
        "http://127.0.0.1:8086",
        "http://db.example.com:8087",
    ]
    assert build_endpoints(addrs, True) == [
        "https://127.0.0.1:8086",
        "https://db.example.com:8087",
    ]


def test_build_endpoints_ipv6():
    assert build_endpoints([Address("::1", 8086)], False) == ["http://[::1]:8086"]


def test_build_request_url_sorted_and_escaped():
    url = build_request_url(
        "http://127.0.0.1:8086", "/query", {"q": "SHOW DATABASES", "db": "db0"}
    )
    assert url == "http://127.0.0.1:8086/query?db=db0&q=SHOW+DATABASES"


def test_build_request_url_repeated_values():
    url = build_request_url("http://localhost:8086", "/write", {"a": ["1", "2"]})
    assert url == "http://localhost:8086/write?a=1&a=2"


def test_build_request_url_without_query():
    assert build_request_url("http://localhost:8086", "/ping", None) == (
        "http://localhost:8086/ping"
    )


def test_build_request_url_escapes_quotes():
    url = build_request_url(
        "http://localhost:8086", "/query", {"q": 'DROP MEASUREMENT "m"'}
    )
    assert url == "http://localhost:8086/query?q=DROP+MEASUREMENT+%22m%22"