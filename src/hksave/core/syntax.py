"""
Syntax highlighting of save text using Pygments.
"""

import curses
from typing import Any, Dict, Final, List, Tuple

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import JsonLexer
from pygments.token import Token

from .fields import FIELD_REGISTRY

SYNTAX_COLORS: Final[Dict[str, int]] = {
    'field': 11,       # Magenta, registered field keys
    'key': 12,         # Cyan
    'string': 13,      # Yellow
    'number': 14,      # Red
    'keyword': 15,     # Cyan
    'punctuation': 0,  # Default
    'error': 16,       # White on red
    'default': 0,      # Default
}

TOKEN_CATEGORY_MAP: Final[Dict[Any, str]] = {
    Token.Name.Tag: 'key',
    Token.String: 'string',
    Token.String.Double: 'string',
    Token.Number: 'number',
    Token.Number.Integer: 'number',
    Token.Number.Float: 'number',
    Token.Keyword.Constant: 'keyword',
    Token.Punctuation: 'punctuation',
    Token.Error: 'error',
    Token.Text: 'default',
    Token.Text.Whitespace: 'default',
}

FIELD_KEYS: Final[frozenset] = frozenset(f'"{spec.name}"' for spec in FIELD_REGISTRY)


def highlight_text(text: str) -> str:
    """Render save text with ANSI colours for terminal output."""

    return highlight(text, JsonLexer(), TerminalFormatter())


class SyntaxHighlighter:
    """Handles syntax highlighting of the surrogate save text for the curses view."""

    def __init__(self) -> None:
        self.lexer = JsonLexer(stripnl=False, ensurenl=False)
        self.color_pairs_initialized = False

    def init_colors(self) -> None:
        """Initialize color pairs for syntax highlighting."""

        if self.color_pairs_initialized:
            return

        curses.init_pair(SYNTAX_COLORS['field'], curses.COLOR_MAGENTA, -1)
        curses.init_pair(SYNTAX_COLORS['key'], curses.COLOR_CYAN, -1)
        curses.init_pair(SYNTAX_COLORS['string'], curses.COLOR_YELLOW, -1)
        curses.init_pair(SYNTAX_COLORS['number'], curses.COLOR_RED, -1)
        curses.init_pair(SYNTAX_COLORS['keyword'], curses.COLOR_CYAN, -1)
        curses.init_pair(SYNTAX_COLORS['error'], curses.COLOR_WHITE, curses.COLOR_RED)

        self.color_pairs_initialized = True

    def tokenize_line(self, line: str) -> List[Tuple[str, str]]:
        """
        Split a line of save text into categorized chunks.

        Args:
            line: The line of text to tokenize

        Returns:
            A list of (text, category) tuples whose texts join back to the line
        """

        if not line:
            return []

        result = []
        for token_type, text in self.lexer.get_tokens(line):
            category = self._get_token_category(token_type)
            if category == 'key' and text in FIELD_KEYS:
                category = 'field'
            result.append((text, category))

        return result

    def highlight_line(self, line: str) -> List[Tuple[str, int]]:
        """
        Highlight a line of save text.

        Args:
            line: The line of text to highlight

        Returns:
            A list of (text, color_attr) tuples
        """

        if not line:
            return [(line, curses.color_pair(0))]

        return [
            (text, curses.color_pair(SYNTAX_COLORS[category]))
            for text, category in self.tokenize_line(line)
        ]

    def _get_token_category(self, token_type: Any) -> str:
        """Get the display category for a token type, walking up its parents."""

        if token_type in TOKEN_CATEGORY_MAP:
            return TOKEN_CATEGORY_MAP[token_type]

        while token_type.parent:
            token_type = token_type.parent
            if token_type in TOKEN_CATEGORY_MAP:
                return TOKEN_CATEGORY_MAP[token_type]

        return 'default'
