"""
Utility package for hex representation support functions.
"""

from .hex_utils import (
    to_hex,
    parse_hex_string,
    format_offset,
    get_byte_range,
    hex_rows
)

__all__ = [
    'to_hex',
    'parse_hex_string',
    'format_offset',
    'get_byte_range',
    'hex_rows'
]
