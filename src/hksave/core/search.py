"""
Field pattern search over save text and raw save bytes.
"""

import re
from typing import Dict, List, Optional, Pattern, Tuple

from .fields import FIELD_REGISTRY, FieldKind, FieldSpec

INTEGER_LITERAL = r'[0-9]+'
FLOAT_LITERAL = r'[0-9]+\.?[0-9]*'
# A patched literal must end the number, or the leftover would merge with the
# new value on the next pass.
PATCH_LITERAL = FLOAT_LITERAL + r'(?![0-9.])'

_text_patterns: Dict[Tuple[str, bool], Pattern[str]] = {}
_byte_patterns: Dict[str, Pattern[bytes]] = {}


class FieldMatch:
    """Represents a recognized field literal with its position in the buffer."""

    def __init__(self, name: str, position: int, length: int, literal: bytes):
        self.name = name
        self.position = position
        self.length = length
        self.literal = literal

    def __repr__(self) -> str:
        return f"FieldMatch({self.name!r}, position={self.position}, length={self.length})"


def _pattern_source(spec: FieldSpec, for_patch: bool) -> str:
    if for_patch:
        literal = PATCH_LITERAL
    elif spec.kind is FieldKind.FLOATING:
        literal = FLOAT_LITERAL
    else:
        literal = INTEGER_LITERAL

    return f'"{re.escape(spec.name)}":({literal})'


def field_pattern(spec: FieldSpec, for_patch: bool = False) -> Pattern[str]:
    """
    Get the compiled text pattern for a field.

    The pattern is the quoted field name, a colon and a numeric literal with
    nothing in between, so "geo" never matches inside "geography". Reading
    uses the literal shape of the field kind. Patching always consumes the
    longest decimal literal so a float written under an integer key is
    replaced as a whole. A malformed literal such as 1.2.3 is not
    matched at all.

    Args:
        spec (FieldSpec): Field to match
        for_patch (bool): Whether the pattern is used for substitution

    Returns:
        Pattern[str]: Pattern with the literal in group 1
    """

    key = (spec.name, for_patch)
    pattern = _text_patterns.get(key)
    if pattern is None:
        pattern = re.compile(_pattern_source(spec, for_patch), re.ASCII)
        _text_patterns[key] = pattern

    return pattern


def find_field(text: str, spec: FieldSpec) -> Optional[str]:
    """Find the first literal for a field in the text, or None."""

    match = field_pattern(spec).search(text)
    if match:
        return match.group(1)

    return None


def find_field_spans(data: bytes) -> List[FieldMatch]:
    """
    Find every recognized field literal in a raw buffer.

    Offsets are byte offsets into data, which is what the hex view needs. The
    patterns are pure ASCII, and decoding with replacement never swallows an
    ASCII byte, so the spans line up with what the patcher rewrites.

    Args:
        data (bytes): Raw save buffer

    Returns:
        List[FieldMatch]: Matches ordered by position, covering only the literal
    """

    results = []
    for spec in FIELD_REGISTRY:
        pattern = _byte_patterns.get(spec.name)
        if pattern is None:
            pattern = re.compile(_pattern_source(spec, True).encode('ascii'))
            _byte_patterns[spec.name] = pattern

        for match in pattern.finditer(data):
            results.append(FieldMatch(
                spec.name,
                match.start(1),
                match.end(1) - match.start(1),
                match.group(1)
            ))

    results.sort(key=lambda result: result.position)
    return results
