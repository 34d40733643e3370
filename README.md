# icsdata

Reading and writing the binary image data of Image Cytometry Standard (ICS)
files: version 1 `.ids` companion files and version 2 data appended to the
`.ics` file or kept in another file at a given offset.

## Modules

- `icsdata.ids` — `IdsHeader` describes where the data lives, its data type,
  dimensions, compression, byte order and (for writing) the data itself.
  `write_ids` writes it: version 1 (re)creates the `.ids` file named by
  `ids_name`, version 2 appends to the ICS file (and writes nothing if
  `src_file` is set). `write_plain_strided` writes strided data uncompressed.
  `copy_ids` appends a file's contents from an offset to another file.
  `IdsReader` reads the data block by block (`read_block`, `skip_block`,
  `set_block`, `close`; also a context manager); `read_ids` reads the first
  `n` bytes in one call. Version 1 readers fall back to `.ids.gz` or `.ids.Z`
  when the `.ids` file is missing, and update the header's compression.
- `icsdata.gzipio` — `write_gzip` and `write_gzip_strided` write a gzip
  stream; `GzipBlockReader` decompresses one block at a time from an open
  file and checks the CRC and length in the trailer.
- `icsdata.lzw` — `decompress` and `decompress_bytes` decode Unix `compress`
  (`.Z`) data. Such data can only be read in one block.
- `icsdata.datatypes` — `DataType` and `Compression` enums, `data_type_size`,
  the byte-order lists `little_endian_byte_order`, `big_endian_byte_order`,
  `machine_byte_order`, and `reorder_bytes`, which converts data to the
  machine's byte order (data with an empty or unknown order is left as is).
- `icsdata.preview` — `to_uint8` stretches samples to 0..255;
  `preview_data` reads one plane of an image and returns it as 8-bit data.
- `icsdata.history` — `History` holds history lines (`add`, `delete`,
  `clear`, `len()`), and `HistoryIterator` walks them, optionally only those
  with one key (`next_string`, `next_key_value`, `delete_current`,
  `replace_current`). Deleted lines leave holes so iterators stay valid.
- `icsdata.symbols` — the ICS header keyword tables `CATEGORIES`,
  `SUB_CATEGORIES`, `SUB_SUB_CATEGORIES` and `VALUES`, as `SymbolTable`
  objects mapping names to `Token` members (`lookup`, `name_of`).
- `icsdata.errors` — every failure is raised as `IcsError`, whose `code` is
  an `ErrorCode` member. When a read ends early (`END_OF_STREAM`,
  `OUTPUT_NOT_FILLED`) the bytes obtained are in the error's `partial`
  attribute.

## Installation

```
pip install icsdata
```

## Example

```python
from icsdata.datatypes import Compression, DataType
from icsdata.ids import IdsHeader, IdsReader, write_ids

pixels = bytes(64 * 64 * 4 * 2)  # 64 x 64 x 4 uint16 samples

header = IdsHeader(
    filename="image.ics",
    version=1,                 # data goes to image.ids
    data_type=DataType.UINT16,
    dims=[64, 64, 4],
    compression=Compression.GZIP,
    comp_level=6,
    data=pixels,
)
write_ids(header)

with IdsReader(header) as reader:
    reader.skip_block(64 * 64 * 2)
    second_plane = reader.read_block(64 * 64 * 2)
```

For version 2 headers the reader needs `src_file` (and `src_offset`) set to
where the data starts.

History lines:

```python
from icsdata.history import History

history = History()
history.add("author", "someone")
history.add("note", "first acquisition")
for line in history.iterator("note"):
    print(line)                # "note\tfirst acquisition"

it = history.iterator()
print(it.next_key_value())     # ("author", "someone")
```

## What it does not do

The package handles the binary image data, the history lines and the
keyword tables. It does not parse or write the text of the `.ics` header
itself: an `IdsHeader` has to be filled in by the caller. There is no
command-line tool, and `compress` (`.Z`) data can be read but not written.

## Running the tests

```
pip install icsdata[test]
pytest
```