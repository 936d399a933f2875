"""
Session module holding the save buffer, its fields and its hex view.
"""

import logging
import os
from typing import Dict, List, Optional

from .codec import decode, patch, to_surrogate_text
from .errors import InvalidExtension, InvalidHex, UnknownField
from .fields import (
    FIELD_REGISTRY,
    PRESETS,
    FieldMapping,
    FieldSpec,
    Number,
    coerce_value,
    default_fields,
    get_field,
    parse_value,
)
from .search import FieldMatch, find_field_spans
from ..utils.hex_utils import parse_hex_string, to_hex

logger = logging.getLogger(__name__)

SAVE_SUFFIX = '.dat'
MODIFIED_SUFFIX = '_modified.dat'


def output_filename(filename: str) -> str:
    """Derive the download name, e.g. 'user1.dat' -> 'user1_modified.dat'."""

    if filename.endswith(SAVE_SUFFIX):
        return filename[:-len(SAVE_SUFFIX)] + MODIFIED_SUFFIX

    return filename + MODIFIED_SUFFIX


class SaveSession:
    """
    The single loaded save file.

    The buffer is never changed in place. Every change builds a new bytes
    object and swaps it in together with its hex text, so buffer and hex_data
    always describe the same content.
    """

    def __init__(self) -> None:
        self.filename: Optional[str] = None
        self.data = b''
        self.hex_data = ''
        self.field_spans: List[FieldMatch] = []
        self.fields: FieldMapping = default_fields()
        self.original_fields: FieldMapping = default_fields()
        self.modified = False
        self.fields_edited = False

    @property
    def loaded(self) -> bool:
        return self.filename is not None

    def _replace_buffer(self, data: bytes) -> None:
        hex_data = to_hex(data)
        spans = find_field_spans(data)
        self.data, self.hex_data, self.field_spans = data, hex_data, spans

    def load_bytes(self, filename: str, data: bytes) -> None:
        """
        Load an in-memory save file.

        Args:
            filename (str): Original file name, must end in '.dat'
            data (bytes): File content

        Raises:
            InvalidExtension: If the name does not end in '.dat'. Nothing
                about the current session changes in that case.
        """

        if not filename.endswith(SAVE_SUFFIX):
            raise InvalidExtension(filename)

        data = bytes(data)
        fields = decode(data)

        self.filename = filename
        self._replace_buffer(data)
        self.fields = fields
        self.original_fields = dict(fields)
        self.modified = False
        self.fields_edited = False

        logger.info("Loaded %s (%d bytes)", filename, len(data))

    def load_file(self, path: str) -> None:
        """Load a save file from disk."""

        if not os.path.basename(path).endswith(SAVE_SUFFIX):
            raise InvalidExtension(os.path.basename(path))

        with open(path, 'rb') as f:
            data = f.read()

        self.load_bytes(path, data)

    def get_field(self, name: str) -> Number:
        if name not in self.fields:
            raise UnknownField(name)

        return self.fields[name]

    def set_field(self, name: str, value: Number) -> None:
        """Set a field value. Only the field mapping changes, not the buffer."""

        spec = get_field(name)
        self.fields[name] = coerce_value(spec, value)
        self.fields_edited = True

    def set_field_text(self, name: str, text: str) -> Number:
        """Set a field value from user input text and return the parsed value."""

        spec = get_field(name)
        value = parse_value(spec, text)
        self.fields[name] = value
        self.fields_edited = True
        return value

    def apply_preset(self, key: str) -> Dict[str, Number]:
        """
        Merge a quick-modification preset into the field mapping.

        Args:
            key (str): Preset key, e.g. 'max-geo'

        Returns:
            Dict[str, Number]: The values that were set

        Raises:
            KeyError: If there is no such preset
        """

        if key not in PRESETS:
            raise KeyError(f"Unknown preset: {key}")

        _, values = PRESETS[key]
        for name, value in values.items():
            self.set_field(name, value)

        return dict(values)

    def apply_changes(self) -> None:
        """
        Write the field mapping into the buffer and refresh the hex view.

        Raises:
            PatchFailure: If patching fails. Buffer, fields and hex view stay
                exactly as they were.
        """

        new_data = patch(self.data, self.fields)

        if new_data != self.data:
            self.modified = True

        self._replace_buffer(new_data)
        self.original_fields = dict(self.fields)
        self.fields_edited = False
        logger.info("Applied changes (%d bytes)", len(new_data))

    def load_hex(self, hex_text: str) -> None:
        """
        Replace the buffer with bytes parsed from edited hex text.

        The field mapping is re-read from the new buffer, so hex edits are
        never silently dropped.

        Raises:
            InvalidHex: If the text is not a sequence of hex byte pairs
        """

        data = parse_hex_string(hex_text)
        if data is None:
            raise InvalidHex("Hex data must be pairs of hex digits separated by whitespace")

        fields = decode(data)

        if data != self.data:
            self.modified = True

        self._replace_buffer(data)
        self.fields = fields
        self.original_fields = dict(fields)
        self.fields_edited = False

    def surrogate_text(self) -> str:
        return to_surrogate_text(self.data)

    def output_filename(self) -> str:
        if not self.filename:
            raise ValueError("No file loaded")

        return output_filename(self.filename)

    def out_of_range(self) -> List[FieldSpec]:
        """Get the fields whose current value lies outside the advisory range."""

        return [spec for spec in FIELD_REGISTRY if not spec.in_range(self.fields[spec.name])]

    def save_file(self, filename: Optional[str] = None) -> str:
        """
        Save the current buffer to a file.

        Args:
            filename: Optional target path. If None, the '_modified.dat' name
                next to the original file is used.

        Returns:
            str: The path that was written
        """

        save_filename = filename or self.output_filename()

        try:
            with open(save_filename, 'wb') as f:
                f.write(self.data)
        except OSError as e:
            raise IOError(f"Failed to save file: {str(e)}") from e

        self.modified = False
        logger.info("Wrote %s (%d bytes)", save_filename, len(self.data))
        return save_filename
