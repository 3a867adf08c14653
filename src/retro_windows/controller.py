"""
Event loop host for a retro desktop.

WindowController owns the blessed terminal, the screen grid and the window
stack. Each loop iteration reads one event, offers it to the windows and,
when no window consumed it, applies the global keys (Esc, F3, Ctrl-C and q
quit). The whole desktop is then redrawn and flushed.
"""

import logging
import signal
from typing import Optional

from blessed import Terminal

from .events import ErrorEvent, KeyEvent, Modifier
from .grid import Style, fill_rect, print_at, print_centered
from .retro_windows import DEFAULT_WINDOW_SIZE, Window, WindowStack, WindowTheme
from .screen import TerminalScreen

log = logging.getLogger(__name__)

QUIT_KEYS = ('KEY_ESCAPE', 'KEY_F3')
QUIT_RUNES = ('q', 'Q')


class TerminalEventError(RuntimeError):
    """The terminal reported an input error; the loop cannot continue."""


class WindowController:
    """Helper that hosts a window stack and its event loop.

    Subclasses typically create their initial windows in ``__init__`` with
    :meth:`create_window` and override :meth:`on_event` for application
    shortcuts.

    Attributes:
        term: Blessed Terminal instance
        screen: TerminalScreen the desktop is drawn on
        stack: WindowStack holding the windows
        background: Desktop background color
        title_text: Text of the top row (reserved above maximized windows)
        status_text: Text of the bottom status row
        running: True while :meth:`run` is looping
    """

    def __init__(
        self,
        *,
        term: Optional[Terminal] = None,
        inkey_timeout: float = 0.1,
        theme: Optional[WindowTheme] = None,
        background: str = 'blue',
        title_text: str = '',
        status_text: str = 'F3: Quit',
        register_resize_handler: bool = True,
    ):
        self.term = term or Terminal()
        self.inkey_timeout = inkey_timeout
        self.screen = TerminalScreen(self.term)
        self.stack = WindowStack(self.screen, theme=theme)
        self.background = background
        self.title_text = title_text
        self.status_text = status_text
        self.running = False
        self._resize_pending = False
        if register_resize_handler:
            signal.signal(signal.SIGWINCH, self._handle_sigwinch)

    def _handle_sigwinch(self, signum, frame):
        """Defer the resize to the event loop."""
        self._resize_pending = True

    def create_window(self, title, content=None, width=DEFAULT_WINDOW_SIZE[0],
                      height=DEFAULT_WINDOW_SIZE[1], x=None, y=None, **kwargs) -> Window:
        """Create a window on top of the stack, centered unless x/y are given."""
        return self.stack.create_window(title, x, y, width, height, content=content, **kwargs)

    def on_event(self, event) -> bool:
        """Optional hook for events no window consumed. Return True if handled."""
        return False

    def quit(self):
        self.running = False

    def handle_event(self, event) -> bool:
        """Dispatch one event: windows first, then the hook, then global keys.

        Raises:
            TerminalEventError: for an ErrorEvent
        """
        if isinstance(event, ErrorEvent):
            raise TerminalEventError(str(event.error))
        if self.stack.route_event(event):
            return True
        if self.on_event(event):
            return True
        if isinstance(event, KeyEvent) and self._is_quit_key(event):
            log.debug("quit requested by %r", event)
            self.quit()
            return True
        return False

    @staticmethod
    def _is_quit_key(event: KeyEvent) -> bool:
        if event.key in QUIT_KEYS:
            return True
        if Modifier.CTRL in event.modifiers:
            return event.rune == 'c'
        return event.rune in QUIT_RUNES and not event.modifiers

    def draw_desktop(self):
        """Draw the background, the top and bottom bars, and the windows."""
        width, height = self.screen.size()
        fill_rect(self.screen, 0, 0, width, height, Style(bg=self.background))
        bar = Style('white', 'blue')
        fill_rect(self.screen, 0, 0, width, 1, bar)
        if self.title_text:
            print_centered(self.screen, 0, 0, width, self.title_text, Style('yellow', 'blue'))
        self.stack.composite()
        if height > 1:
            fill_rect(self.screen, 0, height - 1, width, 1, bar)
            print_at(self.screen, 1, height - 1, self.status_text, Style('green', 'blue'))

    def redraw(self):
        self.draw_desktop()
        self.screen.flush()

    def _process_resize(self):
        """Re-render the desktop after a terminal resize."""
        self._resize_pending = False
        print(self.term.clear(), end="")
        self.screen.handle_resize()
        self.redraw()

    def run(self):
        """Enter the main event loop until a quit key is pressed.

        Raises:
            TerminalEventError: when the event source reports an error
        """
        with self.term.fullscreen(), self.term.cbreak(), self.term.hidden_cursor(), \
                self.screen.mouse_tracking():
            self.running = True
            self.screen.invalidate()
            self.redraw()

            while self.running:
                if self._resize_pending:
                    self._process_resize()

                event = self.screen.read_event(timeout=self.inkey_timeout)
                if event is None:
                    continue
                self.handle_event(event)
                if self.running:
                    self.redraw()
