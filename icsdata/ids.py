"""Reading and writing the binary image data (IDS) that belongs to an ICS header."""

from __future__ import annotations

import contextlib
import io
import math
import os
import shutil
from dataclasses import dataclass, field
from typing import BinaryIO, Sequence

from icsdata import lzw
from icsdata.datatypes import Compression, DataType, data_type_size, reorder_bytes
from icsdata.errors import ErrorCode, IcsError
from icsdata.gzipio import (
    BUF_SIZE,
    GzipBlockReader,
    _strided_lines,
    write_gzip,
    write_gzip_strided,
)

# Large buffers are written in pieces of this size.
WRITE_CHUNK = 1 << 30


@dataclass
class IdsHeader:
    """What is needed to locate, write and read the image data of an ICS file.

    ``version`` 1 keeps the data in a separate ``.ids`` file next to the
    ``.ics`` file; version 2 appends it to the ICS file itself, or refers to
    ``src_file`` at ``src_offset``.
    """

    filename: str | os.PathLike[str]
    data_type: DataType = DataType.UINT8
    dims: list[int] = field(default_factory=list)
    version: int = 2
    compression: Compression = Compression.UNCOMPRESSED
    comp_level: int = 0
    data: bytes | bytearray | memoryview | None = None
    data_strides: list[int] | None = None
    src_file: str | os.PathLike[str] = ""
    src_offset: int = 0
    byte_order: list[int] = field(default_factory=list)
    for_writing: bool = False

    @property
    def data_size(self) -> int:
        """Number of bytes the whole image occupies."""
        if not self.dims:
            return 0
        return math.prod(self.dims) * data_type_size(self.data_type)


def ids_name(filename: str | os.PathLike[str]) -> str:
    """Return the name of the ``.ids`` data file that belongs to ``filename``."""
    path = os.fspath(filename)
    root, ext = os.path.splitext(path)
    if ext.lower() in (".ics", ".ids"):
        path = root
    return path + ".ids"


def _write(file: BinaryIO, chunk) -> None:
    try:
        written = file.write(chunk)
    except OSError as exc:
        raise IcsError(ErrorCode.F_WRITE_IDS) from exc
    if written is not None and written != len(chunk):
        raise IcsError(ErrorCode.F_WRITE_IDS)


def write_plain_strided(
    data, dims: Sequence[int], strides: Sequence[int], nbytes: int, file: BinaryIO
) -> None:
    """Write strided ``data`` uncompressed to ``file`` in file order.

    ``strides`` are counted in samples of ``nbytes`` bytes each.
    """
    for line in _strided_lines(data, dims, strides, nbytes):
        if line:
            _write(file, line)


def _write_data(header: IdsHeader, file: BinaryIO) -> None:
    nbytes = data_type_size(header.data_type)
    dims = list(header.dims)
    if header.compression is Compression.UNCOMPRESSED:
        if header.data_strides:
            write_plain_strided(header.data, dims, header.data_strides, nbytes, file)
        else:
            view = memoryview(header.data).cast("B")
            for start in range(0, len(view), WRITE_CHUNK):
                _write(file, view[start:start + WRITE_CHUNK])
    elif header.compression is Compression.GZIP:
        if header.data_strides:
            write_gzip_strided(
                header.data, dims, header.data_strides, nbytes, file, header.comp_level
            )
        else:
            write_gzip(header.data, file, header.comp_level)
    else:
        raise IcsError(ErrorCode.UNKNOWN_COMPRESSION)


def write_ids(header: IdsHeader) -> None:
    """Write the image data of ``header`` to its data file.

    Version 1 (re)creates the ``.ids`` file; version 2 appends to the ICS
    file, unless the data lives in another file (``src_file``), in which
    case nothing is written.
    """
    if header.version == 1:
        filename = ids_name(header.filename)
        mode = "wb"
    else:
        if header.src_file:
            return
        filename = os.fspath(header.filename)
        mode = "ab"
    if header.data is None or memoryview(header.data).nbytes == 0:
        raise IcsError(ErrorCode.MISSING_DATA)

    try:
        file = open(filename, mode)
    except OSError as exc:
        raise IcsError(ErrorCode.F_OPEN_IDS) from exc
    try:
        _write_data(header, file)
    except BaseException:
        with contextlib.suppress(OSError):
            file.close()
        raise
    try:
        file.close()
    except OSError as exc:
        raise IcsError(ErrorCode.F_CLOSE_IDS) from exc


def copy_ids(
    in_path: str | os.PathLike[str], in_offset: int, out_path: str | os.PathLike[str]
) -> None:
    """Append the data of ``in_path`` from ``in_offset`` on to ``out_path``."""
    try:
        with open(in_path, "rb") as src:
            src.seek(in_offset)
            with open(out_path, "ab") as dst:
                shutil.copyfileobj(src, dst, BUF_SIZE)
    except (OSError, ValueError) as exc:
        raise IcsError(ErrorCode.F_COPY_IDS) from exc


def _can_open(path: str) -> bool:
    try:
        with open(path, "rb"):
            return True
    except OSError:
        return False


class IdsReader:
    """Block-wise reader of the image data described by an :class:`IdsHeader`.

    For version 1 files a missing ``.ids`` file is looked for as ``.ids.gz``
    and ``.ids.Z``; when one is found the header's compression is updated.
    """

    def __init__(self, header: IdsHeader) -> None:
        self.header = header
        self._file: BinaryIO | None = None
        self._gzip: GzipBlockReader | None = None
        self._compress_read = False
        self._open()

    def _open(self) -> None:
        header = self.header
        offset = 0
        if header.version == 1:
            filename = ids_name(header.filename)
            if not _can_open(filename):
                if _can_open(filename + ".gz"):
                    filename += ".gz"
                    header.compression = Compression.GZIP
                elif _can_open(filename + ".Z"):
                    filename += ".Z"
                    header.compression = Compression.COMPRESS
                else:
                    raise IcsError(ErrorCode.F_OPEN_IDS)
        else:
            if not header.src_file:
                raise IcsError(ErrorCode.MISSING_DATA)
            filename = os.fspath(header.src_file)
            offset = header.src_offset

        try:
            file = open(filename, "rb")
        except OSError as exc:
            raise IcsError(ErrorCode.F_OPEN_IDS) from exc
        try:
            file.seek(offset)
        except (OSError, ValueError) as exc:
            file.close()
            raise IcsError(ErrorCode.F_READ_IDS) from exc

        gzip_reader = None
        if header.compression is Compression.GZIP:
            try:
                gzip_reader = GzipBlockReader(file)
            except IcsError:
                file.close()
                raise
        self._file = file
        self._gzip = gzip_reader
        self._compress_read = False

    def _require_open(self) -> BinaryIO:
        if self._file is None:
            raise IcsError(ErrorCode.NOT_VALID_ACTION, "reader is closed")
        return self._file

    def read_block(self, n: int) -> bytes:
        """Read the next ``n`` bytes of image data, in the machine's byte order."""
        file = self._require_open()
        if n < 0:
            raise IcsError(ErrorCode.ILL_PARAMETER)
        compression = self.header.compression
        if compression is Compression.UNCOMPRESSED:
            try:
                data = file.read(n)
            except OSError as exc:
                raise IcsError(ErrorCode.F_READ_IDS) from exc
            if len(data) != n:
                error = IcsError(ErrorCode.END_OF_STREAM)
                error.partial = data
                raise error
        elif compression is Compression.GZIP:
            data = self._gzip.read(n)
        elif compression is Compression.COMPRESS:
            if self._compress_read:
                raise IcsError(ErrorCode.BLOCK_NOT_ALLOWED)
            self._compress_read = True
            data = lzw.decompress(file, n)
        else:
            raise IcsError(ErrorCode.UNKNOWN_COMPRESSION)
        return reorder_bytes(data, self.header.data_type, self.header.byte_order)

    def skip_block(self, n: int) -> None:
        """Skip ``n`` bytes of image data."""
        self.set_block(n, io.SEEK_CUR)

    def set_block(self, offset: int, whence: int) -> None:
        """Move the read position.

        ``whence`` is ``io.SEEK_SET`` or ``io.SEEK_CUR``. For uncompressed data
        ``SEEK_SET`` is an absolute position in the file; for gzip data it is
        relative to the start of the decompressed data.
        """
        file = self._require_open()
        compression = self.header.compression
        if compression is Compression.UNCOMPRESSED:
            if whence not in (io.SEEK_SET, io.SEEK_CUR):
                raise IcsError(ErrorCode.ILL_PARAMETER)
            try:
                file.seek(offset, whence)
            except (OSError, ValueError) as exc:
                raise IcsError(ErrorCode.END_OF_STREAM) from exc
        elif compression is Compression.GZIP:
            if whence not in (io.SEEK_SET, io.SEEK_CUR):
                raise IcsError(ErrorCode.ILL_PARAMETER)
            self._seek_gzip(offset, whence)
        elif compression is Compression.COMPRESS:
            raise IcsError(ErrorCode.BLOCK_NOT_ALLOWED)
        else:
            raise IcsError(ErrorCode.UNKNOWN_COMPRESSION)

    def _seek_gzip(self, offset: int, whence: int) -> None:
        if whence == io.SEEK_CUR and offset < 0:
            offset += self._gzip.total_out
            whence = io.SEEK_SET
        if whence == io.SEEK_SET:
            if offset < 0:
                raise IcsError(ErrorCode.ILL_PARAMETER)
            self.close()
            self._open()
        remaining = offset
        while remaining > 0:
            chunk = min(remaining, BUF_SIZE)
            self._gzip.read(chunk)
            remaining -= chunk

    def close(self) -> None:
        """Close the data file; closing twice is harmless."""
        file, self._file = self._file, None
        if self._gzip is not None:
            self._gzip.close()
            self._gzip = None
        if file is None:
            return
        try:
            file.close()
        except OSError as exc:
            raise IcsError(ErrorCode.F_CLOSE_IDS) from exc

    def __enter__(self) -> IdsReader:
        return self

    def __exit__(self, *args) -> None:
        self.close()


def read_ids(header: IdsHeader, n: int) -> bytes:
    """Read the first ``n`` bytes of image data described by ``header``."""
    with IdsReader(header) as reader:
        return reader.read_block(n)