"""
Retro Windows Library

A text-mode window manager for terminals built on the Blessed library.
Provides draggable, resizable, minimizable and maximizable windows composited
in z-order on a character grid, with mouse and keyboard interaction.
"""

from .controller import TerminalEventError, WindowController
from .events import Button, ErrorEvent, KeyEvent, Modifier, PointerEvent
from .grid import CellGrid, CharacterGrid, Style
from .retro_windows import (
    CallbackContent,
    ContentRenderer,
    ControlButton,
    Dimensions,
    TextContent,
    Window,
    WindowStack,
    WindowState,
    WindowTheme,
)
from .screen import TerminalScreen

__all__ = [
    'Button',
    'CallbackContent',
    'CellGrid',
    'CharacterGrid',
    'ContentRenderer',
    'ControlButton',
    'Dimensions',
    'ErrorEvent',
    'KeyEvent',
    'Modifier',
    'PointerEvent',
    'Style',
    'TerminalEventError',
    'TerminalScreen',
    'TextContent',
    'Window',
    'WindowController',
    'WindowStack',
    'WindowState',
    'WindowTheme',
]

__version__ = '0.1.0'
