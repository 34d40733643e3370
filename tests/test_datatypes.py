import struct
import sys

import pytest

from icsdata.datatypes import (
    Compression,
    DataType,
    big_endian_byte_order,
    data_type_size,
    little_endian_byte_order,
    machine_byte_order,
    reorder_bytes,
)
from icsdata.errors import ErrorCode, IcsError


@pytest.mark.parametrize("data_type", list(DataType))
def test_size_matches_struct_format(data_type):
    components = 2 if data_type.is_complex else 1
    assert data_type_size(data_type) == components * struct.calcsize("<" + data_type.format)
    assert data_type.size == data_type_size(data_type)


def test_compression_names():
    assert Compression("gzip") is Compression.GZIP
    assert Compression("compress") is Compression.COMPRESS
    assert Compression("uncompressed") is Compression.UNCOMPRESSED


@pytest.mark.parametrize("data_type", [d for d in DataType if not d.is_complex])
def test_big_endian_is_reverse_of_little(data_type):
    n = data_type.size
    assert big_endian_byte_order(data_type, n) == little_endian_byte_order(data_type, n)[::-1]


@pytest.mark.parametrize("data_type", [DataType.COMPLEX32, DataType.COMPLEX64])
def test_complex_big_endian_reverses_each_half(data_type):
    n = data_type.size
    little = little_endian_byte_order(data_type, n)
    half = n // 2
    assert big_endian_byte_order(data_type, n) == little[:half][::-1] + little[half:][::-1]


def test_byte_order_is_clipped_to_maximum():
    order = little_endian_byte_order(DataType.UINT8, 40)
    assert len(order) == 16
    assert sorted(big_endian_byte_order(DataType.UINT8, 40)) == order


def test_machine_byte_order_follows_platform():
    expected = (
        little_endian_byte_order(DataType.REAL64, 8)
        if sys.byteorder == "little"
        else big_endian_byte_order(DataType.REAL64, 8)
    )
    assert machine_byte_order(DataType.REAL64, 8) == expected


@pytest.mark.parametrize(
    "data_type, values",
    [
        (DataType.UINT16, [1, 258, 65535]),
        (DataType.SINT32, [-5, 70000, 123456789]),
        (DataType.REAL64, [1.5, -2.25, 1e10]),
    ],
)
def test_reorder_big_endian_to_native(data_type, values):
    fmt = data_type.format * len(values)
    big = struct.pack(">" + fmt, *values)
    order = big_endian_byte_order(data_type, data_type.size)
    assert reorder_bytes(big, data_type, order) == struct.pack("=" + fmt, *values)


def test_reorder_complex_big_endian_to_native():
    values = [1.0, -3.5, 2.0, 8.25]
    big = struct.pack(">4f", *values)
    order = big_endian_byte_order(DataType.COMPLEX32, 8)
    assert reorder_bytes(big, DataType.COMPLEX32, order) == struct.pack("=4f", *values)


def test_reorder_native_is_identity():
    data = struct.pack("=3H", 7, 8, 9)
    order = machine_byte_order(DataType.UINT16, 2)
    assert reorder_bytes(data, DataType.UINT16, order) == data


def test_reorder_with_unknown_order_is_identity():
    data = bytes(range(8))
    assert reorder_bytes(data, DataType.UINT32, [0, 0, 0, 0]) == data
    assert reorder_bytes(data, DataType.UINT32, []) == data


def test_reorder_rejects_partial_samples():
    with pytest.raises(IcsError) as info:
        reorder_bytes(bytes(5), DataType.UINT32, [4, 3, 2, 1])
    assert info.value.code is ErrorCode.BITS_VS_SIZE_CONFL


def test_reorder_rejects_out_of_range_order():
    with pytest.raises(IcsError) as info:
        reorder_bytes(bytes(4), DataType.UINT16, [3, 1])
    assert info.value.code is ErrorCode.ILL_PARAMETER


def test_reorder_twice_restores_data():
    data = bytes(range(16))
    order = [2, 1, 4, 3]
    once = reorder_bytes(data, DataType.UINT32, order)
    native = machine_byte_order(DataType.UINT32, 4)
    # Reordering the converted data back from the machine order is a no-op.
    assert reorder_bytes(once, DataType.UINT32, native) == once
    assert sorted(once) == sorted(data)