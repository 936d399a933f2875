"""
Window management module for the save editor UI.
"""

import curses
import os
import time
from typing import List, Optional, Tuple, TYPE_CHECKING

from ..core.fields import FIELD_REGISTRY, PRESETS, format_value
from ..core.search import FieldMatch
from ..core.session import SaveSession
from ..core.syntax import SyntaxHighlighter
from ..utils.hex_utils import format_offset, get_byte_range

if TYPE_CHECKING:
    from .input_handler import InputHandler

TABS: Tuple[str, ...] = ('fields', 'hex', 'text')
TAB_TITLES = {'fields': 'Save Editor', 'hex': 'Hex View', 'text': 'Text View'}


def safe_addstr(window: 'curses.window', y: int, x: int, string: str, attr: int = 0) -> None:
    """Safely add a string to a window, truncating if necessary."""

    height, width = window.getmaxyx()
    if y >= height or x >= width:
        return

    available = width - x
    if available <= 0:
        return

    if len(string) > available:
        string = string[:available]

    try:
        window.addstr(y, x, string, attr)
    except curses.error:
        pass


def span_at(spans: List[FieldMatch], position: int) -> Optional[FieldMatch]:
    """Get the field span covering a byte position, if any."""

    for span in spans:
        if span.position <= position < span.position + span.length:
            return span
        if span.position > position:
            break

    return None


class WindowManager:
    """Manages the curses windows and UI layout."""

    STATUS_MESSAGE_DURATION = 3
    BYTES_PER_LINE = 16
    FIELD_HIGHLIGHT_COLOR = 8

    def __init__(self, stdscr: 'curses.window', session: SaveSession):
        self.stdscr = stdscr
        self.session = session
        self.height, self.width = stdscr.getmaxyx()

        if self.height < 10 or self.width < 40:
            raise ValueError(f"Terminal too small. Minimum size: 40x10, Current size: {self.width}x{self.height}")

        self.active_tab = 'fields'
        self.selected_field = 0
        self.scroll_line = 0
        self.tab_window: Optional['curses.window'] = None
        self.content_window: Optional['curses.window'] = None
        self.status_window: Optional['curses.window'] = None
        self.dialog_window: Optional['curses.window'] = None
        self.input_handler: Optional['InputHandler'] = None
        self.status_message: Optional[str] = None
        self.status_message_time = 0

        self.syntax_highlighter = SyntaxHighlighter()

        curses.start_color()
        curses.init_pair(1, curses.COLOR_WHITE, -1)  # Status bar
        curses.init_pair(2, curses.COLOR_YELLOW, -1)  # Edited values
        curses.init_pair(3, curses.COLOR_GREEN, -1)  # Offsets
        curses.init_pair(6, curses.COLOR_WHITE, -1)  # Dialog
        curses.init_pair(7, curses.COLOR_RED, -1)   # Error messages / out of range
        curses.init_pair(8, curses.COLOR_BLACK, curses.COLOR_YELLOW)  # Field spans
        curses.init_pair(10, 8, -1)  # Hints (gray)
        self.syntax_highlighter.init_colors()

        self.setup_windows()

    def setup_windows(self) -> None:
        """Create and position all windows."""

        if self.height < 10 or self.width < 40:
            return

        self.tab_window = curses.newwin(2, self.width, 0, 0)
        self.content_window = curses.newwin(self.height - 3, self.width, 2, 0)
        self.status_window = curses.newwin(1, self.width, self.height - 1, 0)

    @property
    def visible_lines(self) -> int:
        return self.height - 3

    def refresh_all(self) -> None:
        """Refresh all windows."""

        self.draw_tabs()

        if self.active_tab == 'fields':
            self.draw_fields_view()
        elif self.active_tab == 'hex':
            self.draw_hex_view()
        else:
            self.draw_text_view()

        if self.input_handler and self.input_handler.edit_mode:
            self.draw_edit_dialog()

        self.draw_status()
        curses.doupdate()

    def draw_tabs(self) -> None:
        """Draw the tab bar."""

        if not self.tab_window:
            return

        self.tab_window.clear()
        tab_bar = ""
        for i, tab in enumerate(TABS):
            if tab == self.active_tab:
                tab_bar += f"[{i+1}:{TAB_TITLES[tab]}] "
                continue

            tab_bar += f" {i+1}:{TAB_TITLES[tab]} "

        safe_addstr(self.tab_window, 0, 0, tab_bar)

        self.tab_window.hline(1, 0, curses.ACS_HLINE, self.width)
        self.tab_window.noutrefresh()

    def draw_fields_view(self) -> None:
        """Draw the field list with values, range hints and presets."""

        if not self.content_window:
            return

        self.content_window.clear()
        session = self.session

        if not session.loaded:
            safe_addstr(self.content_window, 1, 2, "No save file loaded.")
            self.content_window.noutrefresh()
            return

        label_width = max(len(spec.display_name) for spec in FIELD_REGISTRY) + 2

        for i, spec in enumerate(FIELD_REGISTRY):
            value = session.fields[spec.name]
            value_text = format_value(spec, value)

            attr = curses.A_NORMAL
            if value != session.original_fields.get(spec.name):
                attr = curses.color_pair(2)

            row_attr = curses.A_REVERSE | curses.A_BOLD if i == self.selected_field else curses.A_NORMAL
            safe_addstr(self.content_window, i + 1, 2, spec.display_name.ljust(label_width), row_attr)
            safe_addstr(self.content_window, i + 1, 2 + label_width, value_text.ljust(14), attr)

            hint = spec.range_hint()
            if hint:
                hint_attr = curses.color_pair(10) if spec.in_range(value) else curses.color_pair(7)
                safe_addstr(self.content_window, i + 1, 2 + label_width + 15, hint, hint_attr)

        row = len(FIELD_REGISTRY) + 2
        safe_addstr(self.content_window, row, 2, "Quick Modifications", curses.A_BOLD)
        for i, (label, _) in enumerate(PRESETS.values()):
            safe_addstr(self.content_window, row + 1 + i, 4, f"F{i+1}: {label}")

        self.content_window.noutrefresh()

    def draw_hex_view(self) -> None:
        """Draw the read-only hex view, highlighting recognized field values."""

        if not self.content_window:
            return

        self.content_window.clear()
        data = self.session.data
        spans = self.session.field_spans

        for i in range(self.visible_lines):
            line_num = self.scroll_line + i
            offset = line_num * self.BYTES_PER_LINE
            if offset >= len(data):
                break

            chunk, _ = get_byte_range(data, offset, self.BYTES_PER_LINE)
            safe_addstr(self.content_window, i, 0, format_offset(offset), curses.color_pair(3))

            for j, byte in enumerate(chunk):
                pos = 10 + j * 3
                if pos + 2 >= self.width:
                    break

                attr = curses.A_NORMAL
                if span_at(spans, offset + j):
                    attr = curses.color_pair(self.FIELD_HIGHLIGHT_COLOR)

                safe_addstr(self.content_window, i, pos, f"{byte:02x}", attr)

            ascii_x = 10 + self.BYTES_PER_LINE * 3 + 1
            ascii_str = ''.join(chr(b) if 32 <= b <= 126 else '.' for b in chunk)
            safe_addstr(self.content_window, i, ascii_x, ascii_str, curses.color_pair(3))

        self.content_window.noutrefresh()

    def draw_text_view(self) -> None:
        """Draw the surrogate text with syntax highlighting."""

        if not self.content_window:
            return

        self.content_window.clear()
        lines = self.session.surrogate_text().splitlines()

        for i in range(self.visible_lines):
            line_num = self.scroll_line + i
            if line_num >= len(lines):
                break

            x_pos = 0
            for text, attr in self.syntax_highlighter.highlight_line(lines[line_num]):
                text = ''.join(c if c.isprintable() else '.' for c in text)
                safe_addstr(self.content_window, i, x_pos, text, attr)
                x_pos += len(text)
                if x_pos >= self.width:
                    break

        self.content_window.noutrefresh()

    def content_line_count(self) -> int:
        """Get the number of scrollable lines in the active tab."""

        if self.active_tab == 'hex':
            return (len(self.session.data) + self.BYTES_PER_LINE - 1) // self.BYTES_PER_LINE

        if self.active_tab == 'text':
            return len(self.session.surrogate_text().splitlines())

        return len(FIELD_REGISTRY)

    def draw_edit_dialog(self) -> None:
        """Draw the field value dialog."""

        if not self.input_handler:
            return

        if not self.dialog_window:
            dialog_height = 7
            dialog_width = min(60, self.width - 4)
            dialog_y = (self.height - dialog_height) // 2
            dialog_x = (self.width - dialog_width) // 2
            self.dialog_window = curses.newwin(dialog_height, dialog_width, dialog_y, dialog_x)

        _, dialog_width = self.dialog_window.getmaxyx()
        spec = FIELD_REGISTRY[self.selected_field]

        self.dialog_window.clear()
        self.dialog_window.attron(curses.color_pair(6) | curses.A_BOLD)
        self.dialog_window.box()

        title = f" {spec.display_name} "
        title_x = (dialog_width - len(title)) // 2
        safe_addstr(self.dialog_window, 0, title_x, title)

        prompt = "Value:"
        safe_addstr(self.dialog_window, 2, 2, prompt)

        input_x = len(prompt) + 3
        query = self.input_handler.edit_query
        safe_addstr(self.dialog_window, 2, input_x, query + " ")

        if len(query) < dialog_width - input_x - 3:
            self.dialog_window.attron(curses.A_REVERSE)
            safe_addstr(self.dialog_window, 2, input_x + len(query), " ")
            self.dialog_window.attroff(curses.A_REVERSE)

        hint = spec.range_hint()
        if hint:
            safe_addstr(self.dialog_window, 3, 2, f"Range: {hint}")

        safe_addstr(self.dialog_window, 5, 2, "Enter: Set value")
        safe_addstr(self.dialog_window, 5, dialog_width // 2, "Esc: Cancel")

        self.dialog_window.attroff(curses.color_pair(6) | curses.A_BOLD)
        self.dialog_window.noutrefresh()

    def draw_status(self) -> None:
        """Draw the status bar."""

        if not self.status_window:
            return

        self.status_window.clear()
        self.status_window.attron(curses.color_pair(1) | curses.A_BOLD | curses.A_REVERSE)

        if self.status_message:
            if self.status_message_time == 0:
                self.status_message_time = time.time()
            elif time.time() - self.status_message_time > self.STATUS_MESSAGE_DURATION:
                self.status_message = None
                self.status_message_time = 0
            else:
                if self.status_message.startswith("Error:"):
                    self.status_window.attron(curses.color_pair(7) | curses.A_BOLD)
                safe_addstr(self.status_window, 0, 0, " " + self.status_message)
                if self.status_message.startswith("Error:"):
                    self.status_window.attroff(curses.color_pair(7) | curses.A_BOLD)
                self.status_window.attroff(curses.color_pair(1) | curses.A_BOLD | curses.A_REVERSE)
                self.status_window.noutrefresh()
                return

        session = self.session
        if not session.loaded:
            safe_addstr(self.status_window, 0, 0, " No save file loaded - run with a .dat file")
            self.status_window.attroff(curses.color_pair(1) | curses.A_BOLD | curses.A_REVERSE)
            self.status_window.noutrefresh()
            return

        name = os.path.basename(session.filename or '')
        status = f" {name} [{len(session.data)} bytes] "

        if session.fields_edited:
            status += "[Edited] "

        if session.modified:
            status += "[Modified] "

        keys = "^A Apply  ^W Save  ^X Quit"
        available_width = self.width - len(keys) - 1
        if len(status) > available_width:
            status = status[:available_width-3] + "... "
        else:
            status += " " * (available_width - len(status))

        safe_addstr(self.status_window, 0, 0, status + keys)
        self.status_window.attroff(curses.color_pair(1) | curses.A_BOLD | curses.A_REVERSE)
        self.status_window.noutrefresh()

    def switch_tab(self, index: int) -> bool:
        """Switch to the tab at the given index."""

        if index < 0 or index >= len(TABS):
            return False

        self.active_tab = TABS[index]
        self.scroll_line = 0
        return True

    def resize(self) -> None:
        """Handle terminal resize events."""

        self.height, self.width = self.stdscr.getmaxyx()

        if self.height < 10 or self.width < 40:
            self.status_message = "Error: Terminal too small"
            return

        self.dialog_window = None
        self.setup_windows()
