"""Pooled readers for gzip, snappy (framed) and zstd compressed bodies."""

from __future__ import annotations

import gzip
import io
import os
from collections.abc import Iterator

import zstandard

from .pool import CachePool

_GZIP_MAGIC = b"\x1f\x8b"
_SNAPPY_MAGIC_BODY = b"sNaPpY"
_SNAPPY_MAX_BLOCK_SIZE = 65536
_CHUNK_COMPRESSED = 0x00
_CHUNK_UNCOMPRESSED = 0x01
_CHUNK_STREAM_IDENTIFIER = 0xFF
_READ_CHUNK = 65536


class GzipReader:
    """A resettable reader of a gzip-compressed body."""

    def __init__(self) -> None:
        self._file: gzip.GzipFile | None = None

    def reset(self, body: bytes | None) -> None:
        """Start reading a new body; None releases the current one."""
        self._close()
        if body is None:
            return
        data = bytes(body)
        if not data:
            raise EOFError("empty gzip stream")
        if data[:2] != _GZIP_MAGIC:
            raise gzip.BadGzipFile("gzip: invalid header")
        self._file = gzip.GzipFile(fileobj=io.BytesIO(data), mode="rb")

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` decompressed bytes; all of them when negative."""
        if self._file is None:
            return b""
        return self._file.read(size)

    def _close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None


def _make_crc32c_table() -> list[int]:
    table = []
    for n in range(256):
        c = n
        for _ in range(8):
            c = (c >> 1) ^ 0x82F63B78 if c & 1 else c >> 1
        table.append(c)
    return table


_CRC32C_TABLE = _make_crc32c_table()


def _crc32c(data: bytes) -> int:
    crc = 0xFFFFFFFF
    for byte in data:
        crc = _CRC32C_TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ 0xFFFFFFFF


def _masked_crc32c(data: bytes) -> int:
    crc = _crc32c(data)
    return ((((crc >> 15) | (crc << 17)) & 0xFFFFFFFF) + 0xA282EAD8) & 0xFFFFFFFF


def _corrupt(detail: str) -> ValueError:
    return ValueError(f"snappy: corrupt input: {detail}")


def _read_uvarint(data: bytes) -> tuple[int, int]:
    value = 0
    shift = 0
    for pos, byte in enumerate(data):
        if pos >= 5:
            break
        value |= (byte & 0x7F) << shift
        if byte < 0x80:
            if value > 0xFFFFFFFF:
                raise _corrupt("decoded length too large")
            return value, pos + 1
        shift += 7
    raise _corrupt("bad length header")


def snappy_block_decode(data: bytes) -> bytes:
    """Decode one snappy block (the raw, unframed format)."""
    src = bytes(data)
    expected, pos = _read_uvarint(src)
    out = bytearray()
    n = len(src)
    while pos < n:
        tag = src[pos]
        kind = tag & 0x03
        if kind == 0:
            lit_len = tag >> 2
            if lit_len < 60:
                pos += 1
            else:
                extra = lit_len - 59
                if pos + 1 + extra > n:
                    raise _corrupt("truncated literal length")
                lit_len = int.from_bytes(src[pos + 1 : pos + 1 + extra], "little")
                pos += 1 + extra
            lit_len += 1
            if pos + lit_len > n or len(out) + lit_len > expected:
                raise _corrupt("literal overruns input or output")
            out += src[pos : pos + lit_len]
            pos += lit_len
            continue
        if kind == 1:
            if pos + 2 > n:
                raise _corrupt("truncated copy")
            copy_len = 4 + ((tag >> 2) & 0x07)
            offset = ((tag & 0xE0) << 3) | src[pos + 1]
            pos += 2
        elif kind == 2:
            if pos + 3 > n:
                raise _corrupt("truncated copy")
            copy_len = 1 + (tag >> 2)
            offset = int.from_bytes(src[pos + 1 : pos + 3], "little")
            pos += 3
        else:
            if pos + 5 > n:
                raise _corrupt("truncated copy")
            copy_len = 1 + (tag >> 2)
            offset = int.from_bytes(src[pos + 1 : pos + 5], "little")
            pos += 5
        if offset <= 0 or offset > len(out) or copy_len > expected - len(out):
            raise _corrupt("invalid copy")
        start = len(out) - offset
        if offset >= copy_len:
            out += out[start : start + copy_len]
        else:
            for k in range(copy_len):
                out.append(out[start + k])
    if len(out) != expected:
        raise _corrupt("length mismatch")
    return bytes(out)


def _iter_snappy_frames(body: bytes) -> Iterator[bytes]:
    pos = 0
    seen_header = False
    n = len(body)
    while pos < n:
        if pos + 4 > n:
            raise _corrupt("truncated chunk header")
        chunk_type = body[pos]
        chunk_len = int.from_bytes(body[pos + 1 : pos + 4], "little")
        pos += 4
        if pos + chunk_len > n:
            raise _corrupt("truncated chunk")
        chunk = body[pos : pos + chunk_len]
        pos += chunk_len

        if not seen_header and chunk_type != _CHUNK_STREAM_IDENTIFIER:
            raise _corrupt("missing stream identifier")
        if chunk_type == _CHUNK_STREAM_IDENTIFIER:
            if chunk != _SNAPPY_MAGIC_BODY:
                raise _corrupt("bad stream identifier")
            seen_header = True
            continue
        if chunk_type in (_CHUNK_COMPRESSED, _CHUNK_UNCOMPRESSED):
            if chunk_len < 4:
                raise _corrupt("chunk too short")
            checksum = int.from_bytes(chunk[:4], "little")
            payload = chunk[4:]
            if chunk_type == _CHUNK_COMPRESSED:
                decoded = snappy_block_decode(payload)
            else:
                decoded = bytes(payload)
            if len(decoded) > _SNAPPY_MAX_BLOCK_SIZE:
                raise _corrupt("block too large")
            if _masked_crc32c(decoded) != checksum:
                raise _corrupt("checksum mismatch")
            yield decoded
        elif chunk_type <= 0x7F:
            raise ValueError("snappy: unsupported input")
        # 0x80-0xfe are skippable chunks (including padding).


class SnappyReader:
    """A resettable reader of a framed snappy stream."""

    def __init__(self) -> None:
        self._chunks: Iterator[bytes] | None = None
        self._buffer = bytearray()

    def reset(self, body: bytes | None) -> None:
        """Start reading a new body; None releases the current one."""
        self._buffer.clear()
        self._chunks = None if body is None else _iter_snappy_frames(bytes(body))

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` decompressed bytes; all of them when negative."""
        while self._chunks is not None and (size < 0 or len(self._buffer) < size):
            chunk = next(self._chunks, None)
            if chunk is None:
                self._chunks = None
                break
            self._buffer += chunk
        if size < 0:
            size = len(self._buffer)
        result = bytes(self._buffer[:size])
        del self._buffer[:size]
        return result


def _read_all(reader) -> bytes:
    parts = []
    while True:
        piece = reader.read(_READ_CHUNK)
        if not piece:
            return b"".join(parts)
        parts.append(piece)


class ZstdDecoder:
    """A resettable zstd decoder that can also decode whole buffers."""

    def __init__(self) -> None:
        self._dctx = zstandard.ZstdDecompressor()
        self._reader = None

    def reset(self, body: bytes | None) -> None:
        """Start reading a new body; None releases the current one."""
        if self._reader is not None:
            self._reader.close()
            self._reader = None
        if body is not None:
            self._reader = self._dctx.stream_reader(
                io.BytesIO(bytes(body)), read_across_frames=True
            )

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` decompressed bytes; all of them when negative."""
        if self._reader is None:
            return b""
        if size < 0:
            return _read_all(self._reader)
        return self._reader.read(size)

    def decode_all(self, data: bytes) -> bytes:
        """Decompress every frame in ``data`` at once."""
        with self._dctx.stream_reader(
            io.BytesIO(bytes(data)), read_across_frames=True
        ) as reader:
            return _read_all(reader)


_POOL_SIZE = 2 * (os.cpu_count() or 1)

_gzip_reader_pool: CachePool[GzipReader] = CachePool(GzipReader, _POOL_SIZE)
_snappy_reader_pool: CachePool[SnappyReader] = CachePool(SnappyReader, _POOL_SIZE)
_zstd_decoder_pool: CachePool[ZstdDecoder] = CachePool(ZstdDecoder, _POOL_SIZE)


def get_gzip_reader(body: bytes) -> GzipReader:
    """Take a gzip reader from the pool, positioned at the start of body."""
    reader = _gzip_reader_pool.get()
    try:
        reader.reset(body)
    except Exception:
        _gzip_reader_pool.put(reader)
        raise
    return reader


def put_gzip_reader(reader: GzipReader) -> None:
    _gzip_reader_pool.put(reader)


def get_snappy_reader(body: bytes) -> SnappyReader:
    """Take a snappy reader from the pool, positioned at the start of body."""
    reader = _snappy_reader_pool.get()
    reader.reset(body)
    return reader


def put_snappy_reader(reader: SnappyReader) -> None:
    reader.reset(None)
    _snappy_reader_pool.put(reader)


def get_zstd_decoder(body: bytes) -> ZstdDecoder:
    """Take a zstd decoder from the pool, positioned at the start of body."""
    decoder = _zstd_decoder_pool.get()
    try:
        decoder.reset(body)
    except Exception:
        _zstd_decoder_pool.put(decoder)
        raise
    return decoder


def put_zstd_decoder(decoder: ZstdDecoder) -> None:
    decoder.reset(None)
    _zstd_decoder_pool.put(decoder)