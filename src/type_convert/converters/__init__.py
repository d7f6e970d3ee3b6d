"""Converters sub-package — concrete converter factories grouped by concern.

numeric    – integer / CHAR / float / decimal cells, boolean numerics
text       – formatters and strict / lenient parsers
enums      – enum-like parsing, formatting and numeric bridging
extensions – seeded converters for int, UUID, date, time, timedelta
table      – programmatic construction of the matrix cells
"""

from .enums import format_member, make_enum_parser, make_from_enum, make_to_enum
from .extensions import seed_entries
from .numeric import (
    integer_extractor,
    make_bool_to_numeric,
    make_decimal_converter,
    make_float_converter,
    make_integer_converter,
    numeric_converter,
    numeric_to_bool,
)
from .table import build_cells
from .text import formatter_for, make_parser, parser_for

__all__ = [
    # numeric
    "integer_extractor",
    "make_bool_to_numeric",
    "make_decimal_converter",
    "make_float_converter",
    "make_integer_converter",
    "numeric_converter",
    "numeric_to_bool",
    # text
    "formatter_for",
    "make_parser",
    "parser_for",
    # enums
    "format_member",
    "make_enum_parser",
    "make_from_enum",
    "make_to_enum",
    # extensions / table
    "seed_entries",
    "build_cells",
]
