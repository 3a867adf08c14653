"""
Character grid rendering primitives.

A CharacterGrid is the only rendering capability the window engine needs:
set one cell to a glyph and a style, and report its size. CellGrid keeps the
cells in memory; the terminal screen builds on it to flush them with blessed.
The drawing helpers below are plain functions over any grid.
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple, Union

Color = Optional[Union[str, Tuple[int, int, int]]]

BOX_SINGLE = ('─', '│', '┌', '┐', '└', '┘')
BOX_DOUBLE = ('═', '║', '╔', '╗', '╚', '╝')


@dataclass(frozen=True)
class Style:
    """Cell style.

    Colors are blessed color names (``'white'``, ``'bright_black'``) or
    ``(r, g, b)`` tuples. None leaves the terminal default in place.
    """
    fg: Color = None
    bg: Color = None
    underline: bool = False

    def foreground(self, color: Color) -> 'Style':
        return replace(self, fg=color)

    def background(self, color: Color) -> 'Style':
        return replace(self, bg=color)

    def with_underline(self, underline: bool = True) -> 'Style':
        return replace(self, underline=underline)


DEFAULT_STYLE = Style()


class CharacterGrid:
    """Rendering capability: a width x height grid of styled cells."""

    def set_cell(self, x: int, y: int, glyph: str, style: Style = DEFAULT_STYLE):
        raise NotImplementedError

    def size(self) -> Tuple[int, int]:
        raise NotImplementedError


class CellGrid(CharacterGrid):
    """In-memory character grid.

    Writes outside the grid are ignored, so callers can draw partially
    off-screen shapes without checking bounds.
    """

    def __init__(self, width: int, height: int, style: Style = DEFAULT_STYLE):
        self.width = 0
        self.height = 0
        self.cells: List[List[Tuple[str, Style]]] = []
        self.resize(width, height, style)

    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def set_cell(self, x, y, glyph, style=DEFAULT_STYLE):
        if 0 <= x < self.width and 0 <= y < self.height:
            self.cells[y][x] = (glyph, style)

    def get_cell(self, x: int, y: int) -> Tuple[str, Style]:
        return self.cells[y][x]

    def row_text(self, y: int) -> str:
        """The glyphs of one row as a string."""
        return ''.join(glyph for glyph, _ in self.cells[y])

    def resize(self, width: int, height: int, style: Style = DEFAULT_STYLE):
        """Resize the grid, clearing every cell."""
        self.width = max(0, width)
        self.height = max(0, height)
        self.clear(style)

    def clear(self, style: Style = DEFAULT_STYLE):
        self.cells = [[(' ', style)] * self.width for _ in range(self.height)]


def print_at(grid: CharacterGrid, x: int, y: int, text: str, style: Style = DEFAULT_STYLE):
    """Write text starting at (x, y), one glyph per cell."""
    for offset, glyph in enumerate(text):
        grid.set_cell(x + offset, y, glyph, style)


def print_centered(grid: CharacterGrid, y: int, x: int, width: int, text: str,
                   style: Style = DEFAULT_STYLE):
    """Center text within the span [x, x + width); width 0 means the whole row."""
    if width == 0:
        x, width = 0, grid.size()[0]
    print_at(grid, x + (width - len(text)) // 2, y, text, style)


def fill_rect(grid: CharacterGrid, x: int, y: int, width: int, height: int,
              style: Style = DEFAULT_STYLE, glyph: str = ' '):
    """Fill a rectangle (no border)."""
    for row in range(y, y + height):
        for column in range(x, x + width):
            grid.set_cell(column, row, glyph, style)


def draw_box(grid: CharacterGrid, x: int, y: int, width: int, height: int,
             style: Style = DEFAULT_STYLE, double: bool = False, fill: Optional[str] = ' '):
    """Draw a box outline with single or double lines and fill its interior.

    Boxes smaller than 2x2 are not drawn. Pass ``fill=None`` to leave the
    interior untouched.
    """
    if width < 2 or height < 2:
        return
    horizontal, vertical, top_left, top_right, bottom_left, bottom_right = (
        BOX_DOUBLE if double else BOX_SINGLE
    )
    right = x + width - 1
    bottom = y + height - 1
    for column in range(x + 1, right):
        grid.set_cell(column, y, horizontal, style)
        grid.set_cell(column, bottom, horizontal, style)
    for row in range(y + 1, bottom):
        grid.set_cell(x, row, vertical, style)
        grid.set_cell(right, row, vertical, style)
    grid.set_cell(x, y, top_left, style)
    grid.set_cell(right, y, top_right, style)
    grid.set_cell(x, bottom, bottom_left, style)
    grid.set_cell(right, bottom, bottom_right, style)

    if fill is not None:
        fill_rect(grid, x + 1, y + 1, width - 2, height - 2, Style(bg=style.bg), fill)
