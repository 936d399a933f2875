"""
Decoder and patcher for text-encoded save buffers.

Both work on a surrogate text: the buffer decoded as UTF-8 with every invalid
sequence replaced by U+FFFD. This is a heuristic, not a save format parser.
A save file that does not carry its values as `"name":number` text, for
example an encrypted one, decodes to the registry defaults without any error.
Patching re-encodes the whole surrogate text, so bytes that were not valid
UTF-8 come back as EF BF BD rather than as the original bytes.
"""

import logging
import math
from typing import Mapping

from .errors import PatchFailure
from .fields import FIELD_REGISTRY, FieldKind, FieldMapping, FieldSpec, Number, format_value
from .search import field_pattern, find_field

logger = logging.getLogger(__name__)


def to_surrogate_text(data: bytes) -> str:
    """Decode a buffer as UTF-8, substituting invalid sequences. Never fails."""

    return bytes(data).decode('utf-8', errors='replace')


def _parse_literal(spec: FieldSpec, literal: str) -> Number:
    if spec.kind is FieldKind.INTEGER:
        return int(literal, 10)

    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"{literal[:32]} overflows a float")

    return value


def decode(data: bytes) -> FieldMapping:
    """
    Extract every registered field from a save buffer.

    For each field only the first `"name":literal` occurrence is read. Fields
    that are missing or whose literal cannot be parsed get their default.

    Args:
        data (bytes): Raw save buffer

    Returns:
        FieldMapping: One entry per registered field
    """

    text = to_surrogate_text(data)
    fields: FieldMapping = {}

    for spec in FIELD_REGISTRY:
        literal = find_field(text, spec)
        if literal is None:
            logger.debug("Field %s not found, using default %r", spec.name, spec.default)
            fields[spec.name] = spec.default
            continue

        try:
            fields[spec.name] = _parse_literal(spec, literal)
        except ValueError:
            logger.debug("Field %s literal %r unparseable, using default", spec.name, literal[:32])
            fields[spec.name] = spec.default

    return fields


def patch(data: bytes, fields: Mapping[str, Number]) -> bytes:
    """
    Write field values back into a save buffer.

    Every `"name":literal` occurrence of every registered field is replaced
    with the canonical text of the new value. Text outside the matched spans
    is kept as is. The input buffer is never modified.

    Args:
        data (bytes): Raw save buffer
        fields (Mapping[str, Number]): Fully populated field mapping

    Returns:
        bytes: The new buffer

    Raises:
        PatchFailure: If a registered field is missing from the mapping or the
            text could not be decoded, substituted or encoded
    """

    try:
        text = to_surrogate_text(data)

        for spec in FIELD_REGISTRY:
            if spec.name not in fields:
                raise PatchFailure(f"Missing value for field '{spec.name}'")

            replacement = f'"{spec.name}":{format_value(spec, fields[spec.name])}'
            text, count = field_pattern(spec, for_patch=True).subn(
                lambda _match: replacement, text
            )
            if count:
                logger.debug("Replaced %d occurrence(s) of %s", count, spec.name)

        return text.encode('utf-8')

    except PatchFailure:
        raise

    except Exception as e:
        raise PatchFailure(f"Failed to apply modifications: {e}") from e
