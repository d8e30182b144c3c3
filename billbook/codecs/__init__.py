"""
Format Codecs Package

JSON (lossless backup) and CSV (flat table, plus the legacy free-text
dialect on import).
"""

from billbook.codecs.errors import FormatError
from billbook.codecs.json_codec import decode_json, encode_json
from billbook.codecs.csv_export import encode_csv, quote_field
from billbook.codecs.csv_import import (
    DEFAULT_LEGACY_MARKER,
    detect_dialect,
    parse_csv,
    read_csv,
    split_csv_line,
)
from billbook.codecs.legacy import LegacyState, parse_legacy_lines

__all__ = [
    "DEFAULT_LEGACY_MARKER",
    "FormatError",
    "LegacyState",
    "decode_json",
    "detect_dialect",
    "encode_csv",
    "encode_json",
    "parse_csv",
    "parse_legacy_lines",
    "quote_field",
    "read_csv",
    "split_csv_line",
]
