"""
Field registry for the save editor.

The registry is plain data: every recognized field is one FieldSpec entry and
the decoder and patcher iterate over FIELD_REGISTRY without knowing any field
by name. Adding a field means adding a row here.
"""

import enum
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Final, Optional, Tuple, Union

from .errors import UnknownField

Number = Union[int, float]
FieldMapping = Dict[str, Number]


class FieldKind(enum.Enum):
    """Numeric kind of a field value."""

    INTEGER = 'integer'
    FLOATING = 'floating'


@dataclass(frozen=True)
class FieldSpec:
    """A recognized named numeric field."""

    name: str
    kind: FieldKind
    default: Number
    label: str = ''
    minimum: Optional[Number] = None
    maximum: Optional[Number] = None
    step: Number = 1

    @property
    def display_name(self) -> str:
        return self.label or self.name

    def in_range(self, value: Number) -> bool:
        """Check a value against the advisory range. Never enforced by the codec."""

        if self.minimum is not None and value < self.minimum:
            return False

        if self.maximum is not None and value > self.maximum:
            return False

        return True

    def range_hint(self) -> str:
        """Get a short human readable form of the advisory range."""

        if self.minimum is None and self.maximum is None:
            return ''

        low = '' if self.minimum is None else format_value(self, self.minimum)
        high = '' if self.maximum is None else format_value(self, self.maximum)
        return f"[{low}..{high}]"


FIELD_REGISTRY: Final[Tuple[FieldSpec, ...]] = (
    FieldSpec('geo', FieldKind.INTEGER, 0, 'Geo (Currency)'),
    FieldSpec('health', FieldKind.INTEGER, 5, 'Current Health', 1, 9),
    FieldSpec('maxHealth', FieldKind.INTEGER, 5, 'Max Health', 1, 9),
    FieldSpec('soul', FieldKind.INTEGER, 33, 'Current Soul', 0, 198),
    FieldSpec('maxSoul', FieldKind.INTEGER, 33, 'Max Soul', 33, 198),
    FieldSpec('dreamOrbs', FieldKind.INTEGER, 0, 'Dream Orbs', 0),
    FieldSpec('permadeathMode', FieldKind.INTEGER, 0, 'Permadeath Mode'),
    FieldSpec('bossRushMode', FieldKind.INTEGER, 0, 'Boss Rush Mode'),
    FieldSpec('completionPercentage', FieldKind.FLOATING, 0.0, 'Completion %', 0, 112, 0.1),
)

# Quick modifications: (label, partial field mapping)
PRESETS: Final[Dict[str, Tuple[str, FieldMapping]]] = {
    'max-geo': ('Max Geo (999,999)', {'geo': 999999}),
    'max-health': ('Max Health (9 masks)', {'health': 9, 'maxHealth': 9}),
    'max-soul': ('Max Soul (198)', {'soul': 198, 'maxSoul': 198}),
    'max-dream-orbs': ('Max Dream Orbs (2400)', {'dreamOrbs': 2400}),
}

_FIELDS_BY_NAME: Final[Dict[str, FieldSpec]] = {spec.name: spec for spec in FIELD_REGISTRY}


def get_field(name: str) -> FieldSpec:
    """Look up a field spec by name, raising UnknownField if it is not registered."""

    try:
        return _FIELDS_BY_NAME[name]
    except KeyError:
        raise UnknownField(name) from None


def default_fields() -> FieldMapping:
    """Get a fully populated field mapping holding every default."""

    return {spec.name: spec.default for spec in FIELD_REGISTRY}


def coerce_value(spec: FieldSpec, value: Number) -> Number:
    """Convert a number to the Python type matching the field kind. NaN and infinity are rejected."""

    if spec.kind is FieldKind.INTEGER:
        return int(value)

    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{spec.name} cannot hold {value!r}")

    return value


def parse_value(spec: FieldSpec, text: str) -> Number:
    """
    Parse user supplied text into a field value.

    Unparseable text becomes zero, the same way the edit form treats an
    empty or garbled input box. So does text such as "inf", "nan" or "1e999"
    that only parses to a non-finite float.

    Args:
        spec (FieldSpec): Field the text is meant for
        text (str): Raw user input

    Returns:
        Number: The parsed value, an int or float depending on the field kind
    """

    text = text.strip()

    try:
        if spec.kind is FieldKind.INTEGER:
            return int(text)

        value = float(text)
        if math.isfinite(value):
            return value

    except ValueError:
        pass

    if spec.kind is FieldKind.INTEGER:
        try:
            return int(float(text))
        except (ValueError, OverflowError):
            return 0

    return 0.0


def format_value(spec: FieldSpec, value: Number) -> str:
    """
    Format a value in the canonical textual form for its field kind.

    Integers are written without a decimal point. Floats use the shortest
    decimal string that reads back as the same float, in positional notation,
    and integral floats drop the trailing '.0'.

    Args:
        spec (FieldSpec): Field the value belongs to
        value (Number): Value to format

    Returns:
        str: The literal that gets written into the save text

    Raises:
        ValueError: If the value is NaN or infinite
    """

    if spec.kind is FieldKind.INTEGER:
        return str(int(value))

    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{spec.name} cannot be written as {value!r}")

    if value.is_integer():
        return str(int(value))

    return format(Decimal(repr(value)), 'f')
