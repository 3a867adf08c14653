"""Tests for WindowStack routing and compositing."""

from unittest.mock import Mock

import pytest
from retro_windows import (
    Button,
    CallbackContent,
    CellGrid,
    KeyEvent,
    PointerEvent,
    TextContent,
    Window,
    WindowStack,
    WindowState,
    WindowTheme,
)


def press(x, y):
    return PointerEvent(x, y, {Button.PRIMARY})


def create_stack(width=80, height=24):
    """Create a stack drawing onto an in-memory grid."""
    return WindowStack(CellGrid(width, height))


@pytest.fixture
def abc_stack():
    """Three windows A, B, C with C topmost; A and C overlap at columns 20..29 of row 14."""
    stack = create_stack()
    a = stack.create_window("A", 0, 2, 30, 13)
    b = stack.create_window("B", 40, 2, 30, 10)
    c = stack.create_window("C", 20, 14, 30, 8)
    return stack, a, b, c


class TestWindowStack:
    """Tests for stack bookkeeping."""

    def test_create_window_centers(self):
        """Test that omitted coordinates center the window."""
        stack = create_stack()
        window = stack.create_window("Centered")
        assert (window.x, window.y) == (15, 4)
        assert (window.width, window.height) == (50, 15)

    def test_create_window_single_active(self, abc_stack):
        """Test that the newest window is the only active one."""
        stack, a, b, c = abc_stack
        assert [w.active for w in stack.windows] == [False, False, True]
        assert stack.active_window is c
        assert stack.top is c

    def test_create_window_wraps_callable(self):
        """Test that a plain function is accepted as content."""
        stack = create_stack()
        window = stack.create_window("Fn", content=lambda grid, rect: None)
        assert isinstance(window.content, CallbackContent)

    def test_create_window_passes_options(self):
        """Test that extra keyword arguments reach the Window."""
        stack = create_stack()
        window = stack.create_window("Small", 0, 0, 8, 3, min_width=5, min_height=3)
        assert (window.width, window.height) == (8, 3)

    def test_container_protocol(self, abc_stack):
        """Test len, iteration and membership."""
        stack, a, b, c = abc_stack
        assert len(stack) == 3
        assert list(stack) == [a, b, c]
        assert b in stack
        assert Window("Other") not in stack

    def test_windows_is_a_copy(self, abc_stack):
        """Test that mutating the returned list leaves the stack alone."""
        stack, a, b, c = abc_stack
        stack.windows.clear()
        assert len(stack) == 3

    def test_remove(self, abc_stack):
        """Test removing windows."""
        stack, a, b, c = abc_stack
        assert stack.remove(b) is True
        assert stack.windows == [a, c]
        assert stack.remove(b) is False

    def test_raise_window(self, abc_stack):
        """Test explicit promotion."""
        stack, a, b, c = abc_stack
        stack.raise_window(a)
        assert stack.windows == [b, c, a]
        stack.raise_window(a)
        assert stack.windows == [b, c, a]

    def test_add_existing_window(self):
        """Test adding a window built by the caller."""
        stack = create_stack()
        first = stack.create_window("First", 0, 0)
        second = stack.add(Window("Second", 10, 10))
        assert stack.top is second
        assert first.active is False
        assert second.active is True


class TestRouteEvent:
    """Tests for WindowStack.route_event()."""

    def test_falls_through_to_lower_window(self, abc_stack):
        """Test a click inside A only, routed past C and B."""
        stack, a, b, c = abc_stack
        assert stack.route_event(press(5, 5)) is True
        assert stack.windows == [b, c, a]
        assert a.active is True
        assert b.active is False
        assert c.active is False

    def test_topmost_wins_overlap(self, abc_stack):
        """Test that the topmost window takes a click where windows overlap."""
        stack, a, b, c = abc_stack
        assert stack.route_event(press(25, 14)) is True
        assert stack.windows == [a, b, c]
        assert a.active is False

    def test_promotion_is_idempotent(self, abc_stack):
        """Test that a click on the topmost window keeps the order."""
        stack, a, b, c = abc_stack
        assert stack.route_event(press(30, 18)) is True
        assert stack.windows == [a, b, c]
        assert stack.route_event(press(30, 18)) is True
        assert stack.windows == [a, b, c]

    def test_not_consumed(self, abc_stack):
        """Test a click on the desktop."""
        stack, a, b, c = abc_stack
        assert stack.route_event(press(79, 0)) is False
        assert stack.windows == [a, b, c]
        assert c.active is True

    def test_key_event_not_consumed(self, abc_stack):
        """Test that keys fall through to the caller."""
        stack, a, b, c = abc_stack
        assert stack.route_event(KeyEvent(key='KEY_F3')) is False

    def test_empty_stack(self):
        """Test routing with no windows."""
        assert create_stack().route_event(press(1, 1)) is False

    def test_close_button_on_topmost(self, abc_stack):
        """Test closing the active topmost window."""
        stack, a, b, c = abc_stack
        # C spans columns 20..49; close button is 43..49 on row 14
        assert stack.route_event(press(45, 14)) is True
        assert c.visible is False
        assert stack.windows == [a, b, c]
        assert stack.visible_windows == [a, b]

        stack.grid.clear()
        stack.composite()
        assert 'C' not in stack.grid.row_text(14)[20:30]
        assert stack.grid.row_text(2)[2:7] == '[ A ]'
        assert stack.grid.row_text(2)[42:47] == '[ B ]'

    def test_closed_window_lets_events_through(self, abc_stack):
        """Test that a hidden window no longer shadows the one below."""
        stack, a, b, c = abc_stack
        c.close()
        assert stack.route_event(press(25, 14)) is True
        assert stack.top is a

    def test_drag_through_stack(self, abc_stack):
        """Test a full drag routed through the stack."""
        stack, a, b, c = abc_stack
        # Activate and raise A, then drag it by its title
        stack.route_event(press(5, 5))
        assert stack.route_event(press(3, 2)) is True
        assert a.dragging is True
        assert stack.route_event(press(13, 4)) is True
        assert (a.x, a.y) == (10, 4)
        assert stack.route_event(PointerEvent(13, 4)) is True
        assert a.dragging is False
        assert stack.top is a

    def test_route_composites(self, abc_stack):
        """Test that a consumed event redraws the stack."""
        stack, a, b, c = abc_stack
        stack.composite = Mock()
        stack.route_event(press(5, 5))
        stack.composite.assert_called_once()

    def test_unconsumed_does_not_composite(self, abc_stack):
        """Test that an ignored event leaves drawing to the caller."""
        stack, a, b, c = abc_stack
        stack.composite = Mock()
        stack.route_event(press(79, 0))
        stack.composite.assert_not_called()

    def test_new_window_ends_drag(self):
        """Test that a window opened mid-drag takes the gesture away."""
        stack = create_stack()
        a = stack.create_window("A", 0, 2, 30, 13)
        assert stack.route_event(press(3, 2)) is True
        assert a.dragging is True

        b = stack.create_window("B", 40, 2, 30, 10)
        assert a.dragging is False
        assert stack.route_event(press(10, 20)) is False
        assert (a.x, a.y) == (0, 2)
        assert stack.top is b
        assert stack.active_window is b

    def test_activate_ends_resize(self, abc_stack):
        """Test that losing active status drops a resize in progress."""
        stack, a, b, c = abc_stack
        c.begin_resize(49, 21)
        stack.activate(a)
        assert c.resizing is False
        assert c.active is False

    def test_close_hands_over_active(self, abc_stack):
        """Test that closing the active window activates the next visible one."""
        stack, a, b, c = abc_stack
        assert stack.route_event(press(45, 14)) is True
        assert c.visible is False
        assert c.active is False
        assert stack.active_window is b
        assert stack.windows == [a, b, c]

    def test_close_last_window(self):
        """Test closing the only window leaves nothing active."""
        stack = create_stack()
        window = stack.create_window("Only", 0, 0, 30, 10)
        assert stack.route_event(press(25, 0)) is True
        assert window.visible is False
        assert stack.active_window is None


class TestComposite:
    """Tests for drawing the stack."""

    def test_frame(self):
        """Test border, title, buttons and resize grip."""
        stack = create_stack()
        stack.create_window("Test", 5, 5, 50, 15)
        stack.composite()
        grid = stack.grid

        assert grid.row_text(5)[5] == '╔'
        assert grid.row_text(5)[7:15] == '[ Test ]'
        assert grid.row_text(5)[34:55] == '══[ - ]══[ + ]══[ * ╗'
        assert grid.row_text(10)[5] == '║'
        assert grid.row_text(10)[54] == '║'
        assert grid.row_text(19)[5:54] == '╚' + '═' * 48
        assert grid.row_text(19)[54] == '╬'

    def test_styles(self):
        """Test active and inactive frame colors."""
        stack = create_stack()
        theme = stack.theme
        first = stack.create_window("First", 0, 0, 30, 10)
        stack.create_window("Second", 40, 0, 30, 10)
        stack.composite()

        glyph, style = stack.grid.get_cell(0, 0)
        assert style.fg == theme.inactive_border_fg
        glyph, style = stack.grid.get_cell(40, 0)
        assert style.fg == theme.border_fg
        glyph, style = stack.grid.get_cell(2, 0)
        assert (glyph, style.fg) == ('[', theme.inactive_title_fg)
        # Button glyphs use the control color
        glyph, style = stack.grid.get_cell(67, 0)
        assert (glyph, style.fg) == ('*', theme.control_fg)
        assert first.active is False

    def test_back_to_front(self):
        """Test that the topmost window is drawn over the others."""
        stack = create_stack()
        a = stack.create_window("A", 0, 0, 30, 10)
        stack.create_window("B", 10, 5, 30, 10)
        stack.composite()
        assert stack.grid.get_cell(10, 5)[0] == '╔'

        stack.route_event(press(2, 2))
        assert stack.top is a
        assert stack.grid.get_cell(10, 5)[0] == ' '

    def test_content_gets_interior(self):
        """Test that the renderer is called with the rectangle inside the border."""
        stack = create_stack()
        renderer = Mock()
        stack.create_window("Test", 5, 5, 50, 15, content=renderer)
        stack.composite()
        grid, rect = renderer.call_args.args
        assert grid is stack.grid
        assert (rect.x, rect.y, rect.width, rect.height) == (6, 6, 48, 13)

    def test_text_content(self):
        """Test that TextContent writes inside the window."""
        stack = create_stack()
        stack.create_window("Text", 0, 0, 30, 8, content=TextContent("Hello world"))
        stack.composite()
        assert stack.grid.row_text(2)[2:13] == 'Hello world'

    def test_maximized(self):
        """Test that a maximized window fills the rows between the bars."""
        stack = create_stack()
        window = stack.create_window("Max", 5, 5, 30, 10)
        window.toggle_maximize()
        stack.composite()
        assert stack.grid.row_text(0) == ' ' * 80
        assert stack.grid.row_text(1)[0] == '╔'
        assert stack.grid.row_text(22)[0] == '╚'
        assert stack.grid.row_text(23) == ' ' * 80
        # No resize grip while maximized
        assert stack.grid.row_text(22)[79] == '╝'

    def test_minimized_draws_filled_strip_only(self):
        """Test that a minimized window fills one row and draws no frame."""
        stack = create_stack()
        window = stack.create_window("Min", 5, 5, 30, 10)
        window.minimize()
        stack.composite()
        grid = stack.grid
        assert grid.row_text(5) == ' ' * 80
        assert grid.get_cell(5, 5)[1].bg == 'blue'
        assert grid.get_cell(34, 5)[1].bg == 'blue'
        assert grid.get_cell(35, 5)[1].bg is None
        assert grid.row_text(6) == ' ' * 80
        assert grid.get_cell(5, 6)[1].bg is None

    def test_minimized_strip_buttons_still_work(self):
        """Test that the undrawn buttons of a minimized strip keep their columns."""
        stack = create_stack()
        window = stack.create_window("Min", 5, 5, 30, 10)
        window.minimize()
        # Maximize/restore run is columns 21..27 on row 5
        assert stack.route_event(press(24, 5)) is True
        assert window.state is WindowState.NORMAL

    def test_too_small_for_frame(self):
        """Test that windows under 10x3 get no frame and no content."""
        stack = create_stack()
        renderer = Mock()
        window = stack.create_window("Tiny", 2, 2, 8, 2, content=renderer,
                                     min_width=5, min_height=2)
        stack.composite()
        assert '╔' not in stack.grid.row_text(2)
        renderer.assert_not_called()
        assert (window.width, window.height) == (8, 2)

    def test_tiny_screen(self):
        """Test that a maximized window on a one-row screen draws nothing."""
        stack = create_stack(80, 1)
        window = stack.create_window("Max", 0, 0, 30, 10)
        window.toggle_maximize()
        stack.composite()
        assert stack.grid.row_text(0) == ' ' * 80

    def test_invisible_skipped(self):
        """Test that closed windows are not drawn."""
        stack = create_stack()
        renderer = Mock()
        window = stack.create_window("Hidden", 0, 0, 30, 10, content=renderer)
        window.close()
        stack.composite()
        assert stack.grid.row_text(0) == ' ' * 80
        renderer.assert_not_called()

    def test_custom_theme(self):
        """Test drawing with a custom theme."""
        theme = WindowTheme(border_fg='green', border_bg=(0, 0, 128))
        stack = WindowStack(CellGrid(40, 12), theme=theme)
        stack.create_window("Theme", 0, 0, 30, 10)
        stack.composite()
        glyph, style = stack.grid.get_cell(0, 0)
        assert style.fg == 'green'
        assert style.bg == (0, 0, 128)
        assert stack.grid.get_cell(5, 5)[1].bg == (0, 0, 128)

    def test_state_of_other_windows_untouched(self, abc_stack):
        """Test that compositing never changes window state."""
        stack, a, b, c = abc_stack
        b.minimize()
        stack.composite()
        assert [w.state for w in stack.windows] == [
            WindowState.NORMAL, WindowState.MINIMIZED, WindowState.NORMAL,
        ]
