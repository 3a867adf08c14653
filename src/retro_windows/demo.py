"""
Demo desktop: a few overlapping windows to drag, resize and close.

Run with ``retro-windows-demo`` (or ``python -m retro_windows.demo``).
Press ``n`` for another window and F3, Esc or q to quit.
"""

import argparse
import logging

from .controller import WindowController
from .events import KeyEvent
from .grid import Style, print_at, print_centered
from .retro_windows import CallbackContent, TextContent

WELCOME_TEXT = (
    "Drag a window by its title, resize it from the bottom-right corner "
    "and use the [ - ] [ + ] [ * ] buttons to minimize, maximize or close it."
)

CONTENT_STYLE = Style('white', 'blue')


def paint_coordinates(window):
    """Content callback showing where the window currently is."""
    def paint(grid, rect):
        print_at(grid, rect.x + 1, rect.y + 1, f"Position: {window.x}, {window.y}", CONTENT_STYLE)
        print_at(grid, rect.x + 1, rect.y + 2, f"Size:     {window.width} x {window.height}",
                 CONTENT_STYLE)
    return paint


class DemoController(WindowController):
    """Opens three windows and adds one more for every ``n`` pressed."""

    def __init__(self, **kwargs):
        kwargs.setdefault('title_text', 'Retro Windows')
        kwargs.setdefault('status_text', 'n: New window   F3: Quit')
        super().__init__(**kwargs)
        self.opened = 0
        self.create_window("Welcome", TextContent(WELCOME_TEXT), x=2, y=2, width=44, height=9)
        self.create_window(
            "About",
            lambda grid, rect: print_centered(
                grid, rect.y + rect.height // 2, rect.x, rect.width, "Retro Windows demo",
                Style('yellow', 'blue'),
            ),
            x=20, y=8, width=40, height=8,
        )
        self.new_window()

    def new_window(self):
        self.opened += 1
        offset = 2 * (self.opened % 8)
        window = self.create_window(f"Window {self.opened}", x=30 + offset, y=4 + offset,
                                    width=36, height=10)
        window.content = CallbackContent(paint_coordinates(window))
        return window

    def on_event(self, event):
        if isinstance(event, KeyEvent) and event.rune in ('n', 'N') and not event.modifiers:
            self.new_window()
            return True
        return False


def build_parser():
    parser = argparse.ArgumentParser(description="Retro text-mode window manager demo")
    parser.add_argument('--log-file', help="write debug logs to this file")
    parser.add_argument('--log-level', default='DEBUG',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return parser


def setup_logging(log_file, level):
    """Log to a file; the full-screen UI owns the terminal."""
    if not log_file:
        return
    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, level),
        format="%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_file, args.log_level)
    DemoController().run()


if __name__ == '__main__':
    main()
