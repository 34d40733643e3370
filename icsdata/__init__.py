"""Reading and writing Image Cytometry Standard image data, history lines and keyword tables."""

__version__ = "0.1.0"
__all__ = ["datatypes", "errors", "gzipio", "history", "ids", "lzw", "preview", "symbols"]