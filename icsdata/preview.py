"""Conversion of one image plane to an 8-bit preview."""

from __future__ import annotations

import math
from typing import Iterable

from icsdata.datatypes import DataType, data_type_size
from icsdata.errors import ErrorCode, IcsError
from icsdata.ids import IdsHeader, IdsReader

_TOLERATED = (ErrorCode.F_SIZE_CONFLICT, ErrorCode.OUTPUT_NOT_FILLED)


def _to_byte(value: float) -> int:
    if not math.isfinite(value):
        return 0
    return min(max(int(value), 0), 255)


def _scale(samples: Iterable[float], low: float, high: float, count: int) -> bytes:
    span = high - low
    if span == 0:
        return bytes(count)
    gain = 255.0 / span
    return bytes(_to_byte((value - low) * gain) for value in samples)


def to_uint8(data, data_type: DataType) -> bytes:
    """Stretch samples of ``data_type`` (native byte order) to the range 0..255.

    The smallest sample becomes 0 and the largest 255. For complex samples
    the product of the squared components is used, with the extremes taken
    by their square roots. Constant data maps to all zeros.
    """
    if not isinstance(data_type, DataType):
        raise IcsError(ErrorCode.UNKNOWN_DATA_TYPE)
    view = memoryview(data).cast("B")
    if len(view) % data_type_size(data_type):
        raise IcsError(ErrorCode.BITS_VS_SIZE_CONFL)
    values = view.cast(data_type.format).tolist()
    if not values:
        return b""
    if data_type.is_complex:
        mods = [(re * re) * (im * im) for re, im in zip(values[0::2], values[1::2])]
        low, high = math.sqrt(min(mods)), math.sqrt(max(mods))
        return _scale(mods, low, high, len(mods))
    return _scale(values, min(values), max(values), len(values))


def preview_data(header: IdsHeader, plane_number: int = 0, n: int | None = None) -> bytes:
    """Read plane ``plane_number`` of the image and return it as 8-bit data.

    ``n`` is the size of the wanted output, by default the size of one plane.
    If ``n`` is larger than a plane, or the data ends early, :class:`IcsError`
    with ``OUTPUT_NOT_FILLED`` is raised carrying the preview in ``partial``.
    """
    if header.for_writing:
        raise IcsError(ErrorCode.NOT_VALID_ACTION)
    dims = list(header.dims)
    width = dims[0] if dims else 1
    height = dims[1] if len(dims) > 1 else 1
    roi = width * height
    if n is None:
        n = roi
    if n == 0:
        return b""
    planes = math.prod(dims[2:])
    if plane_number < 0 or plane_number > planes:
        raise IcsError(ErrorCode.ILLEGAL_ROI)

    bps = data_type_size(header.data_type)
    failure = None
    with IdsReader(header) as reader:
        if n < roi:
            raise IcsError(ErrorCode.BUFFER_TOO_SMALL)
        try:
            if plane_number > 0:
                reader.skip_block(plane_number * roi * bps)
            raw = reader.read_block(roi * bps)
        except IcsError as exc:
            if exc.code not in _TOLERATED:
                raise
            failure = exc.code
            partial = getattr(exc, "partial", b"")
            raw = partial[: roi * bps].ljust(roi * bps, b"\x00")

    pixels = to_uint8(raw, header.data_type)
    if failure is None and n != roi:
        failure = ErrorCode.OUTPUT_NOT_FILLED
    if failure is not None:
        error = IcsError(failure)
        error.partial = pixels
        raise error
    return pixels