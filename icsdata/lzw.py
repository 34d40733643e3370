"""Decoder for data packed with the Unix ``compress`` (LZW, ``.Z``) format."""

from __future__ import annotations

import io
from typing import BinaryIO

from icsdata.errors import ErrorCode, IcsError

MAGIC = b"\x1f\x9d"
BIT_MASK = 0x1F
BLOCK_MODE = 0x80
FIRST = 257
CLEAR = 256
INIT_BITS = 9
MAX_BITS = 16


def _align(pos: int, group_start: int, n_bits: int) -> int:
    """Round ``pos`` up to the next code-group boundary after ``group_start``.

    Codes are written in groups of eight, i.e. ``n_bits`` bytes; whenever the
    code width changes, the rest of the current group is padding.
    """
    width = n_bits * 8
    used = pos - group_start
    return group_start + -(-used // width) * width


def _max_code(n_bits: int, max_bits: int, max_max_code: int) -> int:
    return max_max_code if n_bits == max_bits else (1 << n_bits) - 1


def decompress(stream: BinaryIO, length: int) -> bytes:
    """Decode ``length`` bytes from a compress-format ``stream``.

    Decoding stops as soon as ``length`` bytes have been produced. If the
    stream ends before that, :class:`IcsError` with code
    ``OUTPUT_NOT_FILLED`` is raised; the bytes decoded so far are available
    as its ``partial`` attribute.
    """
    try:
        data = stream.read()
    except OSError as exc:
        raise IcsError(ErrorCode.F_READ_IDS) from exc
    if not data:
        raise IcsError(ErrorCode.F_READ_IDS)
    if len(data) < 3 or data[:2] != MAGIC:
        raise IcsError(ErrorCode.CORRUPTED_STREAM)

    max_bits = data[2] & BIT_MASK
    block_mode = bool(data[2] & BLOCK_MODE)
    if max_bits > MAX_BITS:
        raise IcsError(ErrorCode.DECOMPRESSION_PROBLEM)
    max_max_code = 1 << max_bits

    body = memoryview(data)[3:]
    total_bits = len(body) * 8

    table: list[bytes] = [b""] * max(max_max_code, FIRST)
    table[:256] = [bytes((value,)) for value in range(256)]

    n_bits = INIT_BITS
    max_code = (1 << n_bits) - 1
    mask = max_code
    free_ent = FIRST if block_mode else 256
    old_code = -1
    fin_char = 0
    pos = 0
    group_start = 0
    out = bytearray()

    while pos + n_bits <= total_bits:
        if free_ent > max_code:
            pos = group_start = _align(pos, group_start, n_bits)
            n_bits += 1
            max_code = _max_code(n_bits, max_bits, max_max_code)
            mask = (1 << n_bits) - 1
            continue

        start = pos >> 3
        code = (int.from_bytes(body[start:start + 3], "little") >> (pos & 7)) & mask
        pos += n_bits

        if old_code == -1:
            if code >= 256:
                raise IcsError(ErrorCode.CORRUPTED_STREAM)
            old_code = fin_char = code
            out.append(code)
            continue

        if code == CLEAR and block_mode:
            free_ent = FIRST - 1
            pos = group_start = _align(pos, group_start, n_bits)
            n_bits = INIT_BITS
            max_code = (1 << n_bits) - 1
            mask = max_code
            continue

        in_code = code
        if code >= free_ent:
            # The KwKwK case: the code being defined is used right away.
            if code > free_ent:
                raise IcsError(ErrorCode.CORRUPTED_STREAM)
            entry = table[old_code] + bytes((fin_char,))
        else:
            entry = table[code]
        fin_char = entry[0]

        room = length - len(out)
        out += entry[: max(room, 0)]
        if len(out) >= length:
            return bytes(out[:length])

        if free_ent < max_max_code:
            table[free_ent] = table[old_code] + bytes((fin_char,))
            free_ent += 1
        old_code = in_code

    if len(out) < length:
        error = IcsError(ErrorCode.OUTPUT_NOT_FILLED)
        error.partial = bytes(out)
        raise error
    return bytes(out[:length])


def decompress_bytes(data: bytes, length: int) -> bytes:
    """Decode ``length`` bytes from compress-format ``data`` held in memory."""
    return decompress(io.BytesIO(data), length)