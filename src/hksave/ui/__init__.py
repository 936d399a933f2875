"""
UI package for the save editor's terminal interface.

This package implements the curses front end: the WindowManager that lays out
the Fields, Hex and Text tabs and the InputHandler that turns key presses into
session operations.
"""

from .window import WindowManager
from .input_handler import InputHandler

__all__ = ['WindowManager', 'InputHandler']
