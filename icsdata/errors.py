"""Error codes and the exception raised for ICS/IDS failures."""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Reasons an ICS or IDS operation can fail; each value is its description."""

    ALLOC = "Memory allocation error"
    BITS_VS_SIZE_CONFL = "Data length is not a multiple of the pixel size"
    BLOCK_NOT_ALLOWED = "Block reading is not possible with this compression"
    BUFFER_TOO_SMALL = "The supplied buffer is too small for the data"
    COMPRESSION_PROBLEM = "Problem while compressing data"
    CORRUPTED_STREAM = "The compressed input stream is corrupted"
    DECOMPRESSION_PROBLEM = "Problem while decompressing data"
    END_OF_HISTORY = "No more history lines"
    END_OF_STREAM = "Unexpected end of the data stream"
    F_CLOSE_IDS = "Could not close the IDS file"
    F_COPY_IDS = "Failed to copy image data between files"
    F_OPEN_IDS = "Could not open the IDS file"
    F_READ_IDS = "Failed to read data from the IDS file"
    F_SIZE_CONFLICT = "File size does not match the image description"
    F_WRITE_IDS = "Failed to write data to the IDS file"
    ILLEGAL_ROI = "The region of interest lies outside the image"
    ILL_PARAMETER = "Illegal parameter"
    LINE_OVERFLOW = "Line is too long for the header"
    MISSING_DATA = "There is no data to write or read"
    NOT_VALID_ACTION = "This action is not valid in the current mode"
    OUTPUT_NOT_FILLED = "The output buffer could not be completely filled"
    UNKNOWN_COMPRESSION = "Unknown compression method"
    UNKNOWN_DATA_TYPE = "Unknown data type"
    WRONG_ZLIB_VERSION = "Incompatible deflate library version"


class IcsError(Exception):
    """Raised when reading or writing ICS/IDS data fails."""

    def __init__(self, code: ErrorCode, message: str | None = None) -> None:
        self.code = code
        self.message = message if message else code.value
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"IcsError({self.code.name}, {self.message!r})"