"""
Terminal-backed character grid built on blessed.

TerminalScreen buffers cells like CellGrid and writes only the cells that
changed since the previous flush. It also reads input from the terminal,
turning keystrokes and blessed mouse reports into engine events.
"""

import logging
from typing import Dict, Optional

from blessed import Terminal

from .events import is_mouse_keystroke, key_event_from_keystroke, pointer_event_from_keystroke
from .grid import DEFAULT_STYLE, CellGrid, Style

log = logging.getLogger(__name__)


class TerminalScreen(CellGrid):
    """Character grid flushed to a blessed Terminal.

    Attributes:
        term: Blessed Terminal instance
    """

    def __init__(self, term: Optional[Terminal] = None):
        self.term = term or Terminal()
        self._shown = None
        self._formats: Dict[Style, str] = {}
        super().__init__(self.term.width, self.term.height)

    def resize(self, width, height, style=DEFAULT_STYLE):
        super().resize(width, height, style)
        self._shown = None

    def handle_resize(self):
        """Match the terminal size and repaint everything on the next flush."""
        self.resize(self.term.width, self.term.height)
        log.debug("screen resized to %dx%d", self.width, self.height)

    def invalidate(self):
        """Forget what is on the terminal so the next flush redraws all cells."""
        self._shown = None

    def _color(self, color, background: bool) -> str:
        if isinstance(color, tuple):
            if background:
                return self.term.on_color_rgb(*color)
            return self.term.color_rgb(*color)
        return getattr(self.term, f'on_{color}' if background else color)

    def format(self, style: Style) -> str:
        """Blessed formatting sequence for a style (cached)."""
        sequence = self._formats.get(style)
        if sequence is None:
            sequence = str(self.term.normal)
            if style.fg is not None:
                sequence += self._color(style.fg, background=False)
            if style.bg is not None:
                sequence += self._color(style.bg, background=True)
            if style.underline:
                sequence += self.term.underline
            self._formats[style] = sequence
        return sequence

    def flush(self):
        """Write the cells that changed since the last flush."""
        chunks = []
        for y, row in enumerate(self.cells):
            shown = self._shown[y] if self._shown is not None else None
            current_style = None
            cursor_x = None
            for x, cell in enumerate(row):
                if shown is not None and shown[x] == cell:
                    continue
                glyph, style = cell
                if cursor_x != x:
                    chunks.append(self.term.move_xy(x, y))
                if style != current_style:
                    chunks.append(self.format(style))
                    current_style = style
                chunks.append(glyph)
                cursor_x = x + 1
        if chunks:
            chunks.append(self.term.normal)
            print(''.join(chunks), end='', flush=True)
        self._shown = [list(row) for row in self.cells]

    def mouse_tracking(self):
        """Context manager reporting clicks and drags (SGR encoding) while active."""
        return self.term.mouse_enabled(report_drag=True)

    def read_event(self, timeout: Optional[float] = None):
        """Read one event from the terminal.

        Returns a PointerEvent, a KeyEvent, or None when the timeout expired
        or the input was a mouse report the engine does not use (wheel
        scrolling, extended buttons).
        """
        key = self.term.inkey(timeout=timeout)
        if not key:
            return None
        if is_mouse_keystroke(key):
            event = pointer_event_from_keystroke(key)
            if event is None:
                log.debug("dropped mouse report %s", key.name)
            return event
        return key_event_from_keystroke(key)
