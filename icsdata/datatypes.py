"""Pixel data types, compression methods and byte-order handling."""

from __future__ import annotations

import sys
from enum import Enum

from icsdata.errors import ErrorCode, IcsError

MAX_IMEL_SIZE = 16


class DataType(Enum):
    """Element type of the image samples."""

    UINT8 = "uint8"
    SINT8 = "sint8"
    UINT16 = "uint16"
    SINT16 = "sint16"
    UINT32 = "uint32"
    SINT32 = "sint32"
    REAL32 = "real32"
    REAL64 = "real64"
    COMPLEX32 = "complex32"
    COMPLEX64 = "complex64"

    @property
    def size(self) -> int:
        """Bytes occupied by one sample."""
        return data_type_size(self)

    @property
    def is_complex(self) -> bool:
        return self in (DataType.COMPLEX32, DataType.COMPLEX64)

    @property
    def format(self) -> str:
        """struct format character of one sample (one component for complex types)."""
        return _FORMATS[self]


class Compression(Enum):
    """Compression method of the image data."""

    UNCOMPRESSED = "uncompressed"
    COMPRESS = "compress"
    GZIP = "gzip"


_SIZES = {
    DataType.UINT8: 1,
    DataType.SINT8: 1,
    DataType.UINT16: 2,
    DataType.SINT16: 2,
    DataType.UINT32: 4,
    DataType.SINT32: 4,
    DataType.REAL32: 4,
    DataType.REAL64: 8,
    DataType.COMPLEX32: 8,
    DataType.COMPLEX64: 16,
}

_FORMATS = {
    DataType.UINT8: "B",
    DataType.SINT8: "b",
    DataType.UINT16: "H",
    DataType.SINT16: "h",
    DataType.UINT32: "I",
    DataType.SINT32: "i",
    DataType.REAL32: "f",
    DataType.REAL64: "d",
    DataType.COMPLEX32: "f",
    DataType.COMPLEX64: "d",
}


def data_type_size(data_type: DataType) -> int:
    """Return the number of bytes in one sample of ``data_type``."""
    try:
        return _SIZES[data_type]
    except KeyError:
        raise IcsError(ErrorCode.UNKNOWN_DATA_TYPE) from None


def little_endian_byte_order(data_type: DataType, nbytes: int) -> list[int]:
    """Byte-order list (1-based) describing little-endian storage."""
    del data_type  # accepted for symmetry with the big-endian variant
    nbytes = min(nbytes, MAX_IMEL_SIZE)
    return list(range(1, nbytes + 1))


def big_endian_byte_order(data_type: DataType, nbytes: int) -> list[int]:
    """Byte-order list (1-based) describing big-endian storage.

    Complex samples are stored as two big-endian components, real part first.
    """
    nbytes = min(nbytes, MAX_IMEL_SIZE)
    if data_type in (DataType.COMPLEX32, DataType.COMPLEX64):
        half = nbytes // 2
        return [half - i for i in range(half)] + [nbytes - i for i in range(half)]
    return [nbytes - i for i in range(nbytes)]


def machine_byte_order(data_type: DataType, nbytes: int) -> list[int]:
    """Byte-order list of the running machine."""
    if sys.byteorder == "little":
        return little_endian_byte_order(data_type, nbytes)
    return big_endian_byte_order(data_type, nbytes)


def reorder_bytes(data: bytes, data_type: DataType, src_order: list[int]) -> bytes:
    """Convert ``data`` stored in ``src_order`` to the machine's byte order.

    If the source order is unknown (empty or holding zeros) the data is
    returned unchanged.
    """
    nbytes = data_type_size(data_type)
    if len(data) % nbytes:
        raise IcsError(ErrorCode.BITS_VS_SIZE_CONFL)
    src = list(src_order[:nbytes])
    if len(src) < nbytes or 0 in src:
        return bytes(data)
    dst = machine_byte_order(data_type, nbytes)
    if src == dst:
        return bytes(data)
    if any(not 1 <= pos <= nbytes for pos in src):
        raise IcsError(ErrorCode.ILL_PARAMETER, "byte order entry out of range")

    position_of = {pos: index for index, pos in enumerate(src)}
    out = bytearray(len(data))
    view = memoryview(data)
    for target, pos in enumerate(dst):
        source = position_of.get(pos)
        if source is not None:
            out[target::nbytes] = view[source::nbytes]
    return bytes(out)