import struct
from array import array

import pytest

from icsdata.datatypes import Compression, DataType
from icsdata.errors import ErrorCode, IcsError
from icsdata.ids import IdsHeader, write_ids
from icsdata.preview import preview_data, to_uint8

DIMS = [4, 3, 2]
PLANE = DIMS[0] * DIMS[1]


def make_header(tmp_path, compression=Compression.UNCOMPRESSED):
    data = array("H", [(i * 53 + 11) % 4000 for i in range(PLANE * DIMS[2])]).tobytes()
    header = IdsHeader(
        filename=tmp_path / "img.ics",
        data_type=DataType.UINT16,
        dims=list(DIMS),
        version=1,
        compression=compression,
        comp_level=6,
        data=data,
    )
    write_ids(header)
    header.data = None
    return header, data


def test_uint8_full_range_is_unchanged():
    assert to_uint8(bytes([0, 255, 128, 7]), DataType.UINT8) == bytes([0, 255, 128, 7])


@pytest.mark.parametrize(
    "data_type, values",
    [
        (DataType.SINT8, [-3, 0, 7, 12]),
        (DataType.UINT16, [300, 500, 4000, 301]),
        (DataType.SINT16, [-1000, 20, 999]),
        (DataType.UINT32, [3, 5, 4000000]),
        (DataType.SINT32, [-70000, 1, 70000]),
        (DataType.REAL32, [-1.5, 0.25, 8.0]),
        (DataType.REAL64, [1e-3, 2.5, -7.75]),
    ],
)
def test_extremes_map_to_ends(data_type, values):
    raw = struct.pack("=%d%s" % (len(values), data_type.format), *values)
    out = to_uint8(raw, data_type)
    assert len(out) == len(values)
    assert out[values.index(min(values))] == 0
    assert out[values.index(max(values))] == 255
    order = sorted(range(len(values)), key=values.__getitem__)
    assert [out[i] for i in order] == sorted(out)


def test_constant_data_gives_zeros():
    assert to_uint8(array("H", [9, 9, 9]).tobytes(), DataType.UINT16) == bytes(3)


def test_empty_data():
    assert to_uint8(b"", DataType.REAL64) == b""


def test_complex_output_in_range():
    raw = struct.pack("=6f", 1.0, 2.0, 3.0, 1.0, 0.5, 0.5)
    out = to_uint8(raw, DataType.COMPLEX32)
    assert len(out) == 3
    assert all(0 <= value <= 255 for value in out)


def test_partial_sample_rejected():
    with pytest.raises(IcsError) as info:
        to_uint8(b"\x00\x01\x02", DataType.UINT16)
    assert info.value.code is ErrorCode.BITS_VS_SIZE_CONFL


def test_unknown_data_type():
    with pytest.raises(IcsError) as info:
        to_uint8(b"\x00", "uint8")
    assert info.value.code is ErrorCode.UNKNOWN_DATA_TYPE


@pytest.mark.parametrize("compression", [Compression.UNCOMPRESSED, Compression.GZIP])
@pytest.mark.parametrize("plane", [0, 1])
def test_preview_matches_plane(tmp_path, compression, plane):
    header, data = make_header(tmp_path, compression)
    start = plane * PLANE * 2
    expected = to_uint8(data[start:start + PLANE * 2], DataType.UINT16)
    assert preview_data(header, plane) == expected


def test_plane_beyond_image(tmp_path):
    header, _ = make_header(tmp_path)
    with pytest.raises(IcsError) as info:
        preview_data(header, DIMS[2] + 1)
    assert info.value.code is ErrorCode.ILLEGAL_ROI


def test_plane_equal_to_count_reads_past_end(tmp_path):
    header, _ = make_header(tmp_path)
    with pytest.raises(IcsError) as info:
        preview_data(header, DIMS[2])
    assert info.value.code is ErrorCode.END_OF_STREAM


def test_writing_header_rejected(tmp_path):
    header, _ = make_header(tmp_path)
    header.for_writing = True
    with pytest.raises(IcsError) as info:
        preview_data(header, 0)
    assert info.value.code is ErrorCode.NOT_VALID_ACTION


def test_buffer_too_small(tmp_path):
    header, _ = make_header(tmp_path)
    with pytest.raises(IcsError) as info:
        preview_data(header, 0, PLANE - 1)
    assert info.value.code is ErrorCode.BUFFER_TOO_SMALL


def test_larger_buffer_not_filled(tmp_path):
    header, _ = make_header(tmp_path)
    expected = preview_data(header, 0)
    with pytest.raises(IcsError) as info:
        preview_data(header, 0, PLANE + 5)
    assert info.value.code is ErrorCode.OUTPUT_NOT_FILLED
    assert info.value.partial == expected


def test_zero_size_returns_nothing(tmp_path):
    header, _ = make_header(tmp_path)
    assert preview_data(header, 0, 0) == b""


def test_short_compress_stream_is_tolerated(tmp_path):
    path = tmp_path / "img.bin"
    path.write_bytes(b"\x1f\x9d\x10\x61\xc4\x00")
    header = IdsHeader(
        filename=tmp_path / "img.ics",
        dims=[2, 2],
        version=2,
        compression=Compression.COMPRESS,
        src_file=str(path),
    )
    with pytest.raises(IcsError) as info:
        preview_data(header, 0)
    assert info.value.code is ErrorCode.OUTPUT_NOT_FILLED
    assert info.value.partial == to_uint8(b"ab\x00\x00", DataType.UINT8)
    assert len(info.value.partial) == 4