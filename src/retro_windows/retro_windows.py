"""
Core window classes for retro text-mode desktops.

This module provides the window model (stored geometry plus a
normal/maximized/minimized state), the mouse gesture tracking that drags,
resizes and operates the title bar buttons, and the window stack that routes
events topmost-first and composites every visible window back-to-front onto
a character grid.
"""

import enum
import logging
import textwrap
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple, Union

from .events import PointerEvent
from .grid import CharacterGrid, Color, Style, draw_box, fill_rect, print_at, print_centered

log = logging.getLogger(__name__)

BUTTON_WIDTH = 7
TITLE_PADDING = 4
MIN_FRAME_WIDTH = 10
MIN_FRAME_HEIGHT = 3
DEFAULT_MIN_WIDTH = 20
DEFAULT_MIN_HEIGHT = 5
DEFAULT_WINDOW_SIZE = (50, 15)

RESIZE_GRIP = '╬'
TITLE_BAR_FILL = '═'


@dataclass
class Dimensions:
    """A rectangle on the character grid (position and size)."""
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    @property
    def right(self) -> int:
        """First column past the right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """First row past the bottom edge."""
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.right and self.y <= y < self.bottom

    def inset(self, amount: int = 1) -> 'Dimensions':
        """Shrink by ``amount`` cells on every side, never below zero size."""
        return Dimensions(
            self.x + amount,
            self.y + amount,
            max(0, self.width - 2 * amount),
            max(0, self.height - 2 * amount),
        )


class WindowState(enum.Enum):
    """Lifecycle state of a window."""
    NORMAL = "normal"
    MAXIMIZED = "maximized"
    MINIMIZED = "minimized"


class ControlButton(enum.Enum):
    """Title bar buttons, valued by the glyph drawn inside the brackets."""
    MINIMIZE = "-"
    MAXIMIZE = "+"
    CLOSE = "*"


# Left to right; the close button owns the rightmost BUTTON_WIDTH columns.
CONTROL_BUTTONS = (ControlButton.MINIMIZE, ControlButton.MAXIMIZE, ControlButton.CLOSE)


@dataclass
class WindowTheme:
    """Colors used to draw window frames.

    Inactive windows swap the border and title foregrounds for the
    ``inactive_*`` variants; backgrounds are shared.
    """
    border_fg: Color = 'white'
    border_bg: Color = 'blue'
    title_fg: Color = 'yellow'
    title_bg: Color = 'blue'
    control_fg: Color = 'red'
    control_bg: Color = 'blue'
    inactive_border_fg: Color = 'bright_black'
    inactive_title_fg: Color = 'white'

    def border_style(self, active: bool = True) -> Style:
        return Style(self.border_fg if active else self.inactive_border_fg, self.border_bg)

    def title_style(self, active: bool = True) -> Style:
        return Style(self.title_fg if active else self.inactive_title_fg, self.title_bg)

    def control_style(self) -> Style:
        return Style(self.control_fg, self.control_bg)

    def fill_style(self) -> Style:
        return Style(bg=self.border_bg)


class ContentRenderer:
    """Paints window-specific content.

    The window calls :meth:`paint` with its interior rectangle every time it
    is drawn. Renderers belong to the application; they must not change the
    window that draws them.
    """

    def paint(self, grid: CharacterGrid, rect: Dimensions):
        raise NotImplementedError


class CallbackContent(ContentRenderer):
    """Adapts a plain ``func(grid, rect)`` callable to a ContentRenderer."""

    def __init__(self, func: Callable[[CharacterGrid, Dimensions], None]):
        self.func = func

    def paint(self, grid, rect):
        self.func(grid, rect)


class TextContent(ContentRenderer):
    """Wrapped text inside a window.

    Text is wrapped to the interior width minus padding on each side and
    as many lines as fit are written, left-aligned or centered.
    """

    def __init__(self, text, style: Optional[Style] = None, centered: bool = False,
                 padding: int = 1):
        """Initialize a text renderer.

        Args:
            text: Text content (string, list, or tuple of lines)
            style: Style for the text, white on blue by default
            centered: Center each line instead of left-aligning it
            padding: Blank cells kept between the text and the frame
        """
        self.text = "\n".join(text) if isinstance(text, (list, tuple)) else text
        self.style = style or Style('white', 'blue')
        self.centered = centered
        self.padding = padding

    def lines(self, width: int) -> List[str]:
        """Wrap the text to ``width`` columns."""
        if width <= 0:
            return []
        lines = []
        for line in self.text.splitlines() or ['']:
            lines.extend(textwrap.wrap(line, width) or [''])
        return lines

    def paint(self, grid, rect):
        area = rect.inset(self.padding)
        for row, line in enumerate(self.lines(area.width)[:area.height]):
            if self.centered:
                print_centered(grid, area.y + row, area.x, area.width, line, self.style)
            else:
                print_at(grid, area.x, area.y + row, line, self.style)


class Window:
    """A draggable, resizable, minimizable and maximizable window.

    The stored geometry (``x``, ``y``, ``width``, ``height``) is the Normal
    state geometry; maximizing or minimizing never changes it, so restoring
    returns the window exactly where it was. The on-screen rectangle for the
    current state comes from :meth:`effective_rect`.

    Attributes:
        title: Window title displayed in the top border
        x, y: Top-left corner in grid coordinates
        width, height: Normal-state size, never below the minimum size
        min_width, min_height: Size floor applied while resizing
        state: Current WindowState
        visible: False once the close button was pressed
        active: Whether this is the focused window (the stack keeps one)
        dragging, resizing: Gesture in progress (never both)
        last_mouse_x, last_mouse_y: Pointer position the next delta is
            measured from
        content: ContentRenderer painting the interior, or None
    """

    def __init__(self, title="", x=0, y=0, width=DEFAULT_WINDOW_SIZE[0],
                 height=DEFAULT_WINDOW_SIZE[1], content: Optional[ContentRenderer] = None,
                 min_width=DEFAULT_MIN_WIDTH, min_height=DEFAULT_MIN_HEIGHT):
        self.title = title
        self.x = x
        self.y = y
        self.min_width = min_width
        self.min_height = min_height
        self.width = max(width, min_width)
        self.height = max(height, min_height)
        self.state = WindowState.NORMAL
        self.visible = True
        self.active = True
        self.dragging = False
        self.resizing = False
        self.last_mouse_x = 0
        self.last_mouse_y = 0
        self.content = content

    def __repr__(self):
        return (
            f"Window({self.title!r}, x={self.x}, y={self.y}, width={self.width}, "
            f"height={self.height}, state={self.state.value})"
        )

    @property
    def position(self) -> Dimensions:
        """Stored (Normal state) geometry."""
        return Dimensions(self.x, self.y, self.width, self.height)

    def effective_rect(self, screen_width: int, screen_height: int) -> Dimensions:
        """Rectangle the window occupies on screen in its current state.

        Maximized windows fill the screen between the top and bottom rows,
        which stay reserved for the menu and status bars. Minimized windows
        shrink to their title bar.
        """
        if self.state is WindowState.MAXIMIZED:
            return Dimensions(0, 1, max(0, screen_width), max(0, screen_height - 2))
        if self.state is WindowState.MINIMIZED:
            return Dimensions(self.x, self.y, self.width, 1)
        return self.position

    # -- State transitions -----------------------------------------------

    def _set_state(self, state: WindowState):
        if state is not WindowState.NORMAL:
            self.end_gesture()
        if state is not self.state:
            log.debug("%r: %s -> %s", self.title, self.state.value, state.value)
        self.state = state

    def minimize(self):
        self._set_state(WindowState.MINIMIZED)

    def restore(self):
        self._set_state(WindowState.NORMAL)

    def toggle_maximize(self):
        """Maximize a Normal window; restore a Maximized or Minimized one."""
        if self.state is WindowState.NORMAL:
            self._set_state(WindowState.MAXIMIZED)
        else:
            self._set_state(WindowState.NORMAL)

    def close(self):
        """Hide the window. Geometry and state are kept."""
        self.end_gesture()
        self.visible = False
        log.debug("%r: closed", self.title)

    def show(self):
        self.visible = True

    def press_button(self, button: ControlButton):
        if button is ControlButton.MINIMIZE:
            self.minimize()
        elif button is ControlButton.MAXIMIZE:
            self.toggle_maximize()
        else:
            self.close()

    # -- Hit testing -----------------------------------------------------

    def button_at(self, rect: Dimensions, x: int) -> Optional[ControlButton]:
        """Control button whose column run contains ``x`` on the title row."""
        for index, button in enumerate(CONTROL_BUTTONS):
            start = rect.right - (len(CONTROL_BUTTONS) - index) * BUTTON_WIDTH
            if start <= x < start + BUTTON_WIDTH:
                return button
        return None

    def in_drag_zone(self, rect: Dimensions, x: int, y: int) -> bool:
        """Whether (x, y) lies on the bracketed title text."""
        start = rect.x + 2
        return y == rect.y and start <= x < start + len(self.title) + TITLE_PADDING

    def in_resize_zone(self, rect: Dimensions, x: int, y: int) -> bool:
        """Whether (x, y) is the bottom-right corner cell."""
        return x == rect.right - 1 and y == rect.bottom - 1

    # -- Gestures --------------------------------------------------------

    def begin_drag(self, x: int, y: int):
        self.end_gesture()
        self.dragging = True
        self.last_mouse_x, self.last_mouse_y = x, y
        log.debug("%r: drag started at (%d, %d)", self.title, x, y)

    def begin_resize(self, x: int, y: int):
        self.end_gesture()
        self.resizing = True
        self.last_mouse_x, self.last_mouse_y = x, y
        log.debug("%r: resize started at (%d, %d)", self.title, x, y)

    def end_gesture(self):
        if self.dragging or self.resizing:
            log.debug("%r: gesture ended at %r", self.title, self.position)
        self.dragging = False
        self.resizing = False

    def move_by(self, dx: int, dy: int):
        self.x += dx
        self.y += dy

    def resize_by(self, dx: int, dy: int):
        """Grow or shrink, clamping each axis to the minimum size."""
        self.width = max(self.min_width, self.width + dx)
        self.height = max(self.min_height, self.height + dy)

    def _continue_gesture(self, event: PointerEvent) -> bool:
        if not event.primary:
            self.end_gesture()
            return True
        dx = event.x - self.last_mouse_x
        dy = event.y - self.last_mouse_y
        if self.dragging:
            self.move_by(dx, dy)
        else:
            self.resize_by(dx, dy)
        self.last_mouse_x, self.last_mouse_y = event.x, event.y
        return True

    def handle_event(self, event, stack: 'WindowStack') -> bool:
        """Process one event and report whether it was consumed.

        A drag or resize in progress on the active window takes every pointer
        event until the primary button is released. Otherwise a primary press
        inside an inactive window only activates it. The active window checks,
        in order, the control buttons, the resize corner and the title
        drag zone; any other press inside it is consumed as a plain click.

        Args:
            event: PointerEvent, KeyEvent or ErrorEvent
            stack: The stack owning this window, used for the screen size
        """
        if not self.visible or not isinstance(event, PointerEvent):
            return False

        if self.active and (self.dragging or self.resizing):
            return self._continue_gesture(event)

        if not event.primary:
            return False

        rect = self.effective_rect(*stack.screen_size())
        if not rect.contains(event.x, event.y):
            return False

        if not self.active:
            self.active = True
            log.debug("%r: activated", self.title)
            return True

        if event.y == rect.y:
            button = self.button_at(rect, event.x)
            if button is not None:
                self.press_button(button)
                return True

        if self.state is WindowState.NORMAL:
            if self.in_resize_zone(rect, event.x, event.y):
                self.begin_resize(event.x, event.y)
            elif self.in_drag_zone(rect, event.x, event.y):
                self.begin_drag(event.x, event.y)
        return True

    # -- Drawing ---------------------------------------------------------

    def draw(self, grid: CharacterGrid, theme: WindowTheme):
        """Draw the frame and content for the current state.

        Frames need at least MIN_FRAME_WIDTH x MIN_FRAME_HEIGHT cells;
        smaller windows only get their background filled.
        """
        if not self.visible:
            return
        rect = self.effective_rect(*grid.size())
        if rect.is_empty:
            return

        fill_rect(grid, rect.x, rect.y, rect.width, rect.height, theme.fill_style())
        # A minimized window is a single row, below the frame floor
        if rect.width < MIN_FRAME_WIDTH or rect.height < MIN_FRAME_HEIGHT:
            return

        draw_box(grid, rect.x, rect.y, rect.width, rect.height,
                 theme.border_style(self.active), double=True, fill=None)
        self._draw_controls(grid, rect, theme)
        self._draw_title(grid, rect, theme)
        if self.state is WindowState.NORMAL:
            grid.set_cell(rect.right - 1, rect.bottom - 1, RESIZE_GRIP,
                          theme.border_style(self.active))

        interior = rect.inset(1)
        if self.content is not None and not interior.is_empty:
            self.content.paint(grid, interior)

    def _draw_title(self, grid, rect, theme):
        text = f"[ {self.title} ]"[:max(0, rect.width - 3)]
        print_at(grid, rect.x + 2, rect.y, text, theme.title_style(self.active))

    def _draw_controls(self, grid, rect, theme):
        """Draw the ``══[ g ]`` button runs, leaving both top corners intact."""
        border = theme.border_style(self.active)
        control = theme.control_style()
        for index, button in enumerate(CONTROL_BUTTONS):
            start = rect.right - (len(CONTROL_BUTTONS) - index) * BUTTON_WIDTH
            cells = (
                (TITLE_BAR_FILL, border), (TITLE_BAR_FILL, border), ('[', border),
                (' ', border), (button.value, control), (' ', border), (']', border),
            )
            for offset, (glyph, style) in enumerate(cells):
                column = start + offset
                if rect.x < column < rect.right - 1:
                    grid.set_cell(column, rect.y, glyph, style)


class WindowStack:
    """Back-to-front ordered windows sharing one character grid.

    The last window is topmost: it is drawn last and offered events first.
    The stack keeps a single active window: whichever window was created or
    consumed an event most recently.

    Promotion removes the window from its position and appends it, which is
    O(n) in the number of windows.

    Attributes:
        grid: CharacterGrid all windows draw onto
        theme: WindowTheme used for every frame
    """

    def __init__(self, grid: CharacterGrid, theme: Optional[WindowTheme] = None):
        self.grid = grid
        self.theme = theme or WindowTheme()
        self._windows: List[Window] = []

    def __len__(self):
        return len(self._windows)

    def __iter__(self) -> Iterator[Window]:
        return iter(list(self._windows))

    def __contains__(self, window):
        return window in self._windows

    @property
    def windows(self) -> List[Window]:
        """Windows in back-to-front order (a copy)."""
        return list(self._windows)

    @property
    def visible_windows(self) -> List[Window]:
        return [window for window in self._windows if window.visible]

    @property
    def top(self) -> Optional[Window]:
        """The topmost window, if any."""
        return self._windows[-1] if self._windows else None

    @property
    def active_window(self) -> Optional[Window]:
        for window in reversed(self._windows):
            if window.active:
                return window
        return None

    def screen_size(self) -> Tuple[int, int]:
        return self.grid.size()

    def add(self, window: Window) -> Window:
        """Put a window on top of the stack and make it the active one."""
        self._windows.append(window)
        self.activate(window)
        log.debug("added %r (%d windows)", window.title, len(self._windows))
        return window

    def create_window(self, title: str, x: Optional[int] = None, y: Optional[int] = None,
                      width: int = DEFAULT_WINDOW_SIZE[0], height: int = DEFAULT_WINDOW_SIZE[1],
                      content: Union[ContentRenderer, Callable, None] = None, **kwargs) -> Window:
        """Create a window on top of the stack.

        A position left as None centers the window on that axis. A plain
        callable is accepted as content and wrapped in CallbackContent.
        """
        screen_width, screen_height = self.screen_size()
        if x is None:
            x = (screen_width - width) // 2
        if y is None:
            y = (screen_height - height) // 2
        if content is not None and not isinstance(content, ContentRenderer):
            content = CallbackContent(content)
        return self.add(Window(title, x, y, width, height, content=content, **kwargs))

    def remove(self, window: Window) -> bool:
        """Drop a window from the stack. Returns False if it was not there."""
        if window not in self._windows:
            return False
        self._windows.remove(window)
        log.debug("removed %r", window.title)
        return True

    def activate(self, window: Window):
        """Make ``window`` the only active window.

        Windows losing active status drop any drag or resize in progress.
        """
        for other in self._windows:
            if other is not window:
                other.end_gesture()
            other.active = other is window

    def raise_window(self, window: Window):
        """Move a window to the top of the stack (no-op if already there)."""
        if self._windows and self._windows[-1] is window:
            return
        self._windows.remove(window)
        self._windows.append(window)
        log.debug("raised %r", window.title)

    def route_event(self, event) -> bool:
        """Offer an event to the windows, topmost first.

        The first window that consumes it is raised, made active and the
        stack is redrawn. A window that closed itself instead hands the
        active status to the topmost visible window. Returns False when no
        window consumed the event, leaving global handling to the caller.
        """
        for window in reversed(list(self._windows)):
            if window.handle_event(event, self):
                if window.visible:
                    self.raise_window(window)
                    self.activate(window)
                else:
                    window.active = False
                    visible = self.visible_windows
                    if visible:
                        self.activate(visible[-1])
                self.composite()
                return True
        return False

    def composite(self):
        """Draw all visible windows back-to-front."""
        for window in self._windows:
            if window.visible:
                window.draw(self.grid, self.theme)
