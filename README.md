# ogclient

Building blocks for talking to an openGemini time-series database from Python:
configuration objects, request helpers, pooled decompression readers and a
columnar record format with its binary encoding.

## What is here

- `ogclient.config`: `Config`, `Address`, `AuthConfig`, `BatchConfig`,
  `RpConfig`, `GrpcConfig` and the enumerations `AuthType`, `ContentType` and
  `CompressMethod`. Timeouts and the batch interval are in seconds.
- `ogclient.connection`: `validate_config`, `build_endpoints`,
  `authorization_header` and `build_request_url`.
- `ogclient.errors`: `OpenGeminiError` and its subclasses, and the checks
  `check_database_name`, `check_measurement_name`,
  `check_database_and_policy` and `check_command`.
- `ogclient.pool`: `CachePool`, a bounded, thread-safe pool of reusable
  objects.
- `ogclient.compression`: `GzipReader`, `SnappyReader` (framed snappy
  streams), `ZstdDecoder`, `snappy_block_decode`, and the pooled
  `get_*`/`put_*` functions.
- `ogclient.record`: `codec` (binary encoding helpers), `field` (`Field`,
  `FieldType`, `Schemas`), `column` (`ColVal`, `NilCount`), `record`
  (`Record`, `check_record`, `check_schema`) and `sort` (`SortAux`,
  `ColumnSortHelper`, `new_column_sort_helper`).

## What it does not do

There is no client object here that sends queries or writes to a server. The
connection module validates settings and builds endpoint URLs, request URLs
and the `Authorization` header, but it opens no connections and performs no
requests. There is no batching loop, no health checking of endpoints, no gRPC
writer and no metrics. `GrpcConfig`, `BatchConfig`, `ContentType` and the
other settings are plain data for code that does those things.

## Installation

```
pip install ogclient
```

To run the tests:

```
pip install "ogclient[test]"
pytest
```

## Configuration

```python
from ogclient.config import Address, Config
from ogclient.connection import build_endpoints, validate_config

config = Config(addresses=[Address(host="127.0.0.1", port=8086)])
validate_config(config)

print(str(Address(host="127.0.0.1", port=8086)))   # 127.0.0.1:8086
print(build_endpoints(config.addresses, False))    # ['http://127.0.0.1:8086']
```

`validate_config` checks the configuration and updates it in place:

- no address raises `NoAddressError`;
- password authentication with an empty user name or password raises
  `EmptyAuthUsernameError` or `EmptyAuthPasswordError`; token authentication
  with an empty token raises `EmptyAuthTokenError`;
- with a `BatchConfig`, a non-positive interval or size raises `ValueError`;
- a non-positive `timeout` becomes 30 seconds and a non-positive
  `connect_timeout` becomes 10 seconds.

`build_endpoints` uses `https://` when TLS is enabled and brackets IPv6 hosts.

`authorization_header` returns `{"Authorization": "Basic ..."}` for password
authentication and an empty dict otherwise (including token authentication):

```python
from ogclient.config import AuthConfig
from ogclient.connection import authorization_header

password = "password"
print(authorization_header(AuthConfig(username="user", password=password)))
```

`build_request_url(server_url, url_path, query_values)` joins the server URL
and path and replaces the query with the encoded values, keys in sorted order;
a sequence value gives repeated keys. With `None` the joined URL's own query is
kept.

## Errors

Every error derives from `OpenGeminiError`; the empty-argument errors are also
`ValueError`s and `UnsupportedFieldValueTypeError` is also a `TypeError`.

```python
from ogclient.errors import OpenGeminiError, check_database_name

try:
    check_database_name("")
except OpenGeminiError as exc:
    print(exc)   # empty database name
```

## Pools and decompression

`CachePool(factory, max_size)` keeps at most `max_size` idle objects. `get`
returns the most recently returned one or a new one from `factory`; `put`
drops the object when the pool is full.

```python
from ogclient.pool import CachePool

pool = CachePool(list, 2)
item = pool.get()
pool.put(item)
assert pool.get() is item
```

The compression module keeps its readers in such pools, sized to twice the
number of CPUs:

```python
import gzip
from ogclient.compression import get_gzip_reader, put_gzip_reader

reader = get_gzip_reader(gzip.compress(b"test data"))
print(reader.read(-1))   # b'test data'
put_gzip_reader(reader)
```

`get_snappy_reader` reads the framed snappy format, checking each chunk's
CRC-32C; `snappy_block_decode` decodes a single raw snappy block.
`get_zstd_decoder` returns a `ZstdDecoder` that reads the body and can also
`decode_all` any buffer. Return them with `put_snappy_reader` and
`put_zstd_decoder`. Malformed gzip input raises `gzip.BadGzipFile` or
`EOFError`; malformed snappy input raises `ValueError`.

## Columnar records

A `ColVal` holds one column: packed values (little-endian int64, float64, one
byte per boolean, or UTF-8 strings with offsets) and a bitmap of which rows
hold a value.

```python
from ogclient.record.column import ColVal

column = ColVal()
column.append_integers(123, 456)
column.append_integer_null()
print(column.integer_values())   # [123, 456]
print(column.is_nil(2))          # True
```

A `Record` is a schema of `Field(name, type)` with one `ColVal` per field, the
`time` column last. `check_record` raises `ValueError` for an invalid record
and puts an out-of-order schema into name order. `ColumnSortHelper.sort`
returns a record with rows ordered by time; for repeated timestamps the later
non-null value of each column is kept.

```python
from ogclient.record.field import Field, FieldType
from ogclient.record.record import TIME_FIELD, Record, check_record
from ogclient.record.sort import new_column_sort_helper

rec = Record([Field("value", FieldType.INT), Field(TIME_FIELD, FieldType.INT)])
rec.column(0).append_integers(1, 2, 3)
rec.append_time(300, 100, 200)
check_record(rec)

ordered = new_column_sort_helper().sort(rec)
print(ordered.times())                      # [100, 200, 300]
print(ordered.column(0).integer_values())   # [2, 3, 1]
```

`Record.marshal(buf)`, `ColVal.marshal(buf)` and `Field.marshal(buf)` append
the binary form to `buf` and return a `bytearray`; their `size()` methods give
the number of bytes appended. The helpers in `ogclient.record.codec` write
big-endian lengths and zig-zag encoded integers:

```python
from ogclient.record.codec import append_string, append_uint32

print(append_string(b"", "hello"))    # bytearray(b'\x00\x05hello')
print(append_uint32(b"", 16909060))   # bytearray(b'\x01\x02\x03\x04')
```