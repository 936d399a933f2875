"""
Input handler module for processing keyboard events.
"""

import curses
from typing import Callable, Dict, Final

from ..core.errors import SaveEditorError
from ..core.fields import FIELD_REGISTRY, PRESETS, format_value
from .window import TABS, WindowManager

UNAPPLIED_CHANGES_STATUS_MESSAGE: Final[str] = "Field edits not applied. Press Ctrl+A to apply or Ctrl+X again to discard."
UNSAVED_CHANGES_STATUS_MESSAGE: Final[str] = "Modified file not saved. Press Ctrl+W to save or Ctrl+X again to discard."
EDIT_MODE_STATUS_MESSAGE: Final[str] = "Edit mode. Type a value, press Enter to set it, Esc to cancel."
VALUE_CHARS: Final[str] = "0123456789.-+eE"


class InputHandler:
    """Handles keyboard input and executes corresponding actions."""

    def __init__(self, window_manager: WindowManager) -> None:
        self.window_manager = window_manager
        self.window_manager.input_handler = self
        self.session = window_manager.session
        self.edit_mode = False
        self.edit_query = ""
        self.quit_requested = False
        self.command_handlers: Dict[int, Callable[[], None]] = self._setup_handlers()

    def _setup_handlers(self) -> Dict[int, Callable[[], None]]:
        """Set up the keyboard command handlers."""

        handlers = {
            curses.KEY_UP: self._move_up,
            curses.KEY_DOWN: self._move_down,
            curses.KEY_PPAGE: self._page_up,
            curses.KEY_NPAGE: self._page_down,
            ord('\n'): self._start_edit,
            ord('\t'): self._next_tab,

            ord('w') & 0x1f: self._save,  # Ctrl + W (save key)
            ord('a') & 0x1f: self._apply,  # Ctrl + A (apply key)
        }

        for i in range(len(TABS)):
            handlers[ord('1') + i] = lambda index=i: self.window_manager.switch_tab(index)

        for i, key in enumerate(PRESETS):
            handlers[curses.KEY_F1 + i] = lambda preset=key: self._apply_preset(preset)

        return handlers

    def handle_input(self, ch: int) -> bool:
        """Handle a single keyboard input. Returns False if should quit."""

        if self.edit_mode:
            self._handle_edit_input(ch)
            return True

        # Ctrl + X (quit key)
        if ch == ord('x') & 0x1f:
            return self._needs_quit_confirmation()

        self.quit_requested = False

        if ch in self.command_handlers:
            self.command_handlers[ch]()

        return True

    def _handle_edit_input(self, ch: int) -> None:
        """Handle a key while the edit dialog is open."""

        # Enter
        if ch == ord('\n'):
            self._execute_edit()
            return

        # Escape
        if ch == 27:
            self._close_edit()
            return

        # Backspace
        if ch == curses.KEY_BACKSPACE or ch == 127:
            self.edit_query = self.edit_query[:-1]
            return

        if 32 <= ch <= 126 and chr(ch) in VALUE_CHARS:
            self.edit_query += chr(ch)

    def _close_edit(self) -> None:
        self.edit_mode = False
        self.edit_query = ""
        self.window_manager.dialog_window = None

    def _start_edit(self) -> None:
        """Open the value dialog for the selected field."""

        if self.window_manager.active_tab != 'fields' or not self.session.loaded:
            return

        spec = FIELD_REGISTRY[self.window_manager.selected_field]
        self.edit_query = format_value(spec, self.session.fields[spec.name])
        self.edit_mode = True
        self.window_manager.status_message = EDIT_MODE_STATUS_MESSAGE

    def _execute_edit(self) -> None:
        """Store the typed value in the field mapping."""

        spec = FIELD_REGISTRY[self.window_manager.selected_field]
        value = self.session.set_field_text(spec.name, self.edit_query)
        self._close_edit()

        message = f"{spec.display_name} = {format_value(spec, value)}"
        if not spec.in_range(value):
            message += f" (outside {spec.range_hint()})"

        self.window_manager.status_message = message

    def _move_up(self) -> None:
        wm = self.window_manager
        if wm.active_tab == 'fields':
            wm.selected_field = max(0, wm.selected_field - 1)
            return

        wm.scroll_line = max(0, wm.scroll_line - 1)

    def _move_down(self) -> None:
        wm = self.window_manager
        if wm.active_tab == 'fields':
            wm.selected_field = min(len(FIELD_REGISTRY) - 1, wm.selected_field + 1)
            return

        wm.scroll_line = min(max(0, wm.content_line_count() - 1), wm.scroll_line + 1)

    def _page_up(self) -> None:
        wm = self.window_manager
        wm.scroll_line = max(0, wm.scroll_line - wm.visible_lines)

    def _page_down(self) -> None:
        wm = self.window_manager
        wm.scroll_line = min(max(0, wm.content_line_count() - 1), wm.scroll_line + wm.visible_lines)

    def _next_tab(self) -> None:
        index = TABS.index(self.window_manager.active_tab)
        self.window_manager.switch_tab((index + 1) % len(TABS))

    def _apply_preset(self, key: str) -> None:
        if not self.session.loaded:
            return

        self.session.apply_preset(key)
        label, _ = PRESETS[key]
        self.window_manager.status_message = f"{label} set. Press Ctrl+A to apply."

    def _apply(self) -> None:
        """Patch the buffer with the edited fields."""

        if not self.session.loaded:
            return

        try:
            self.session.apply_changes()
            self.window_manager.status_message = "Changes applied"
        except SaveEditorError as e:
            self.window_manager.status_message = f"Error: {e}"

    def _save(self) -> None:
        """Write the current buffer to the '_modified.dat' file."""

        if not self.session.loaded:
            return

        try:
            path = self.session.save_file()
            self.window_manager.status_message = f"Saved: {path}"
        except IOError as e:
            self.window_manager.status_message = f"Error: {e}"

    def _needs_quit_confirmation(self) -> bool:
        """Warn once about unapplied edits or an unsaved file. A second Ctrl+X quits."""

        if self.quit_requested:
            return False

        if self.session.fields_edited:
            self.window_manager.status_message = UNAPPLIED_CHANGES_STATUS_MESSAGE
        elif self.session.modified:
            self.window_manager.status_message = UNSAVED_CHANGES_STATUS_MESSAGE
        else:
            return False

        self.quit_requested = True
        return True
