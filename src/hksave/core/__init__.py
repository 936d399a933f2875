"""
Core package for save decoding and patching.

This package implements the codec of the save editor. It includes the field
registry, the decoder and patcher working on the text view of a save buffer,
and the SaveSession class that keeps a buffer, its fields and its hex view in
step with each other.
"""

from .codec import decode, patch
from .errors import InvalidExtension, InvalidHex, PatchFailure, SaveEditorError, UnknownField
from .fields import FIELD_REGISTRY, PRESETS, FieldKind, FieldSpec
from .session import SaveSession

__all__ = [
    'decode',
    'patch',
    'FIELD_REGISTRY',
    'PRESETS',
    'FieldKind',
    'FieldSpec',
    'SaveSession',
    'SaveEditorError',
    'InvalidExtension',
    'InvalidHex',
    'PatchFailure',
    'UnknownField'
]
