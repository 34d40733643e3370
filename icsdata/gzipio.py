"""Writing and block-wise reading of gzip-wrapped IDS image data."""

from __future__ import annotations

import io
import itertools
import os
import struct
import zlib
from typing import BinaryIO, Iterator, Sequence

from icsdata.errors import ErrorCode, IcsError

BUF_SIZE = 16384
GZIP_MAGIC = b"\x1f\x8b"
OS_CODE = 0x0B if os.name == "nt" else 0x03
DEF_MEM_LEVEL = 8

# gzip flag byte
ASCII_FLAG = 0x01
HEAD_CRC = 0x02
EXTRA_FIELD = 0x04
ORIG_NAME = 0x08
COMMENT = 0x10
RESERVED = 0xE0


def _header() -> bytes:
    """A minimal gzip header: no name, no time stamp, no flags."""
    return GZIP_MAGIC + bytes((zlib.DEFLATED, 0, 0, 0, 0, 0, 0, OS_CODE))


def _compressor(level: int):
    try:
        return zlib.compressobj(
            level, zlib.DEFLATED, -zlib.MAX_WBITS, DEF_MEM_LEVEL, zlib.Z_DEFAULT_STRATEGY
        )
    except (zlib.error, ValueError) as exc:
        raise IcsError(ErrorCode.COMPRESSION_PROBLEM) from exc


def _write(file: BinaryIO, chunk: bytes) -> None:
    if not chunk:
        return
    try:
        written = file.write(chunk)
    except OSError as exc:
        raise IcsError(ErrorCode.F_WRITE_IDS) from exc
    if written is not None and written != len(chunk):
        raise IcsError(ErrorCode.F_WRITE_IDS)


def _write_stream(chunks: Iterator[bytes], file: BinaryIO, level: int) -> None:
    compressor = _compressor(level)
    crc = 0
    total = 0
    _write(file, _header())
    try:
        for chunk in chunks:
            crc = zlib.crc32(chunk, crc)
            total += len(chunk)
            _write(file, compressor.compress(chunk))
        _write(file, compressor.flush(zlib.Z_FINISH))
    except zlib.error as exc:
        raise IcsError(ErrorCode.COMPRESSION_PROBLEM) from exc
    # The length is stored as 32 bits, as the gzip format prescribes.
    _write(file, struct.pack("<II", crc & 0xFFFFFFFF, total & 0xFFFFFFFF))


def write_gzip(data, file: BinaryIO, level: int) -> None:
    """Write ``data`` to ``file`` as a gzip stream compressed at ``level``."""
    view = memoryview(data).cast("B")
    chunks = (bytes(view[start:start + BUF_SIZE]) for start in range(0, len(view), BUF_SIZE))
    _write_stream(chunks, file, level)


def _strided_lines(
    data, dims: Sequence[int], strides: Sequence[int], nbytes: int
) -> Iterator[bytes]:
    """Yield the image one line along the first dimension at a time.

    ``strides`` are counted in samples of ``nbytes`` bytes each.
    """
    if not dims or len(strides) < len(dims) or nbytes <= 0:
        raise IcsError(ErrorCode.ILL_PARAMETER)
    view = memoryview(data).cast("B")
    size = len(view)
    length = dims[0]
    step = strides[0] * nbytes
    higher = list(zip(dims[1:], strides[1:len(dims)]))

    def check(offset: int) -> None:
        if offset < 0 or offset + nbytes > size:
            raise IcsError(ErrorCode.ILL_PARAMETER, "stride points outside the data")

    positions = itertools.product(*(range(dim) for dim, _ in reversed(higher)))
    for position in positions:
        base = sum(p * stride for p, (_, stride) in zip(reversed(position), higher)) * nbytes
        if length == 0:
            yield b""
            continue
        check(base)
        check(base + (length - 1) * step)
        if strides[0] == 1:
            yield bytes(view[base:base + length * nbytes])
        else:
            yield b"".join(
                view[offset:offset + nbytes]
                for offset in range(base, base + length * step, step)
            )


def write_gzip_strided(
    data, dims: Sequence[int], strides: Sequence[int], nbytes: int, file: BinaryIO, level: int
) -> None:
    """Write strided image ``data`` to ``file`` as one gzip stream, in file order."""
    _write_stream(_strided_lines(data, dims, strides, nbytes), file, level)


class GzipBlockReader:
    """Reads decompressed data block by block from a gzip stream in an open file.

    The file must be positioned at the start of the gzip header. It is not
    closed by this reader.
    """

    def __init__(self, file: BinaryIO) -> None:
        self._file = file
        self._parse_header()
        self._decomp = zlib.decompressobj(-zlib.MAX_WBITS)
        self._pending = b""
        self._crc = 0
        self._total_out = 0
        self._finished = False

    def _read_exact(self, n: int) -> bytes:
        try:
            chunk = self._file.read(n)
        except OSError as exc:
            raise IcsError(ErrorCode.F_READ_IDS) from exc
        if len(chunk) != n:
            raise IcsError(ErrorCode.CORRUPTED_STREAM)
        return chunk

    def _skip_string(self) -> None:
        while self._read_exact(1) != b"\x00":
            pass

    def _parse_header(self) -> None:
        head = self._read_exact(4)
        if head[:2] != GZIP_MAGIC:
            raise IcsError(ErrorCode.CORRUPTED_STREAM)
        method, flags = head[2], head[3]
        if method != zlib.DEFLATED or flags & RESERVED:
            raise IcsError(ErrorCode.CORRUPTED_STREAM)
        self._read_exact(6)  # time, extra flags and OS code
        if flags & EXTRA_FIELD:
            (extra_len,) = struct.unpack("<H", self._read_exact(2))
            self._read_exact(extra_len)
        if flags & ORIG_NAME:
            self._skip_string()
        if flags & COMMENT:
            self._skip_string()
        if flags & HEAD_CRC:
            self._read_exact(2)

    @property
    def total_out(self) -> int:
        """Number of decompressed bytes delivered so far."""
        return self._total_out

    def _check_trailer(self) -> None:
        tail = self._decomp.unused_data
        if len(tail) < 8:
            try:
                tail += self._file.read(8 - len(tail))
            except OSError as exc:
                raise IcsError(ErrorCode.F_READ_IDS) from exc
        if len(tail) < 8:
            raise IcsError(ErrorCode.CORRUPTED_STREAM)
        surplus = len(tail) - 8
        if surplus:
            try:
                self._file.seek(-surplus, io.SEEK_CUR)
            except (OSError, io.UnsupportedOperation):
                pass
        crc, size = struct.unpack("<II", tail[:8])
        if crc != self._crc & 0xFFFFFFFF or size != self._total_out & 0xFFFFFFFF:
            raise IcsError(ErrorCode.CORRUPTED_STREAM)

    def read(self, n: int) -> bytes:
        """Return the next ``n`` decompressed bytes.

        Raises :class:`IcsError` with ``END_OF_STREAM`` if the stream ends
        first; the bytes obtained are then in the error's ``partial``.
        """
        if self._decomp is None:
            raise IcsError(ErrorCode.NOT_VALID_ACTION, "reader is closed")
        if n <= 0:
            return b""
        if self._finished:
            raise IcsError(ErrorCode.CORRUPTED_STREAM)
        out = bytearray()
        while len(out) < n and not self._decomp.eof:
            if not self._pending:
                try:
                    self._pending = self._file.read(BUF_SIZE)
                except OSError as exc:
                    raise IcsError(ErrorCode.F_READ_IDS) from exc
                if not self._pending:
                    raise IcsError(ErrorCode.CORRUPTED_STREAM)
            try:
                piece = self._decomp.decompress(self._pending, n - len(out))
            except zlib.error as exc:
                raise IcsError(ErrorCode.F_READ_IDS) from exc
            self._pending = self._decomp.unconsumed_tail
            self._crc = zlib.crc32(piece, self._crc)
            self._total_out += len(piece)
            out += piece
        if self._decomp.eof:
            self._finished = True
            self._check_trailer()
            if len(out) != n:
                error = IcsError(ErrorCode.END_OF_STREAM)
                error.partial = bytes(out)
                raise error
        return bytes(out)

    def close(self) -> None:
        """Release the decompressor; the underlying file stays open."""
        self._decomp = None
        self._pending = b""

    def __enter__(self) -> GzipBlockReader:
        return self

    def __exit__(self, *args) -> None:
        self.close()