"""
Utility functions for the hex representation of a save buffer.
"""

from typing import List, Optional, Tuple

HEX_DIGITS = '0123456789ABCDEFabcdef'


def to_hex(data: bytes) -> str:
    """
    Render bytes as space separated lowercase hex pairs.

    Args:
        data (bytes): Buffer to render, may be empty

    Returns:
        str: e.g. "7b 22 67" for b'{"g', or "" for an empty buffer
    """

    return ' '.join(f"{byte:02x}" for byte in data)


def parse_hex_string(hex_str: str) -> Optional[bytes]:
    """
    Parse a hex string into bytes.

    Any whitespace between digits is ignored and both cases are accepted, so
    the output of to_hex() and hand edited variants of it read back the same.

    Args:
        hex_str (str): String of hex values (e.g. "ff 00 a5")

    Returns:
        bytes: Parsed bytes or None if invalid
    """

    clean_str = ''.join(hex_str.split())
    if len(clean_str) % 2 or not all(c in HEX_DIGITS for c in clean_str):
        return None

    return bytes.fromhex(clean_str)


def format_offset(offset: int, width: int = 8) -> str:
    """
    Format a byte offset as a hex string.

    Args:
        offset (int): Byte offset to format
        width (int): Number of hex digits to use

    Returns:
        str: Formatted hex string
    """

    return f"{offset:0{width}X}"


def get_byte_range(data: bytes, start: int, length: int) -> Tuple[bytes, int]:
    """
    Get a range of bytes and the actual number of bytes returned.

    Args:
        data (bytes): Source bytes
        start (int): Starting offset
        length (int): Number of bytes to get

    Returns:
        Tuple[bytes, int]: The bytes and actual length returned
    """

    end = min(start + length, len(data))
    return data[start:end], max(0, end - start)


def hex_rows(data: bytes, bytes_per_line: int = 16) -> List[Tuple[int, str]]:
    """Split a buffer into (offset, hex text) rows for paged display."""

    if bytes_per_line <= 0:
        raise ValueError("bytes_per_line must be positive")

    rows = []
    for offset in range(0, len(data), bytes_per_line):
        chunk, _ = get_byte_range(data, offset, bytes_per_line)
        rows.append((offset, to_hex(chunk)))

    return rows
