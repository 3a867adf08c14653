"""
Input events consumed by the window engine.

Three variants reach the window stack: pointer events (mouse position and
the set of held buttons), key events and error events. This module also
converts blessed keystrokes, including the mouse reports blessed decodes
while ``Terminal.mouse_enabled()`` is active, into these events.
"""

import enum
from dataclasses import dataclass
from typing import FrozenSet, Optional, Union

MOUSE_PREFIX = 'MOUSE_'


class Button(enum.Enum):
    """Mouse buttons."""
    PRIMARY = "primary"
    MIDDLE = "middle"
    SECONDARY = "secondary"


class Modifier(enum.Enum):
    """Keyboard modifiers reported with keys and mouse events."""
    SHIFT = "shift"
    ALT = "alt"
    CTRL = "ctrl"


# blessed mouse names: MOUSE_[CTRL_][SHIFT_][META_]<button>[_MOTION|_RELEASED]
_MOUSE_BUTTONS = {
    'LEFT': Button.PRIMARY,
    'MIDDLE': Button.MIDDLE,
    'RIGHT': Button.SECONDARY,
}

_MOUSE_MODIFIERS = {
    'CTRL': Modifier.CTRL,
    'SHIFT': Modifier.SHIFT,
    'META': Modifier.ALT,
}


@dataclass(frozen=True)
class PointerEvent:
    """Mouse position (grid coordinates) and the buttons held at that moment.

    An empty ``buttons`` set means every button is released.
    """
    x: int
    y: int
    buttons: FrozenSet[Button] = frozenset()
    modifiers: FrozenSet[Modifier] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, 'buttons', frozenset(self.buttons))
        object.__setattr__(self, 'modifiers', frozenset(self.modifiers))

    @property
    def primary(self) -> bool:
        """True while the primary button is held."""
        return Button.PRIMARY in self.buttons


@dataclass(frozen=True)
class KeyEvent:
    """A key press.

    Attributes:
        key: blessed key name for special keys (``'KEY_F3'``), else None
        modifiers: held modifiers
        rune: the typed character for printable keys, else ``''``
    """
    key: Optional[str] = None
    modifiers: FrozenSet[Modifier] = frozenset()
    rune: str = ''

    def __post_init__(self):
        object.__setattr__(self, 'modifiers', frozenset(self.modifiers))


@dataclass(frozen=True)
class ErrorEvent:
    """The event source broke. Windows never consume it."""
    error: Union[BaseException, str]


Event = Union[PointerEvent, KeyEvent, ErrorEvent]


def is_mouse_keystroke(keystroke) -> bool:
    """True for the mouse reports blessed names ``MOUSE_*``."""
    name = keystroke.name
    return bool(name) and name.startswith(MOUSE_PREFIX)


def pointer_event_from_keystroke(keystroke) -> Optional[PointerEvent]:
    """Convert a blessed mouse keystroke into a PointerEvent.

    Drag motion (``MOUSE_LEFT_MOTION``) keeps the held button, releases
    carry no buttons. Returns None for wheel scrolling, the extended
    buttons and keystrokes that are not mouse reports.
    """
    if not is_mouse_keystroke(keystroke):
        return None
    tokens = keystroke.name[len(MOUSE_PREFIX):].split('_')
    modifiers = set()
    while tokens and tokens[0] in _MOUSE_MODIFIERS:
        modifiers.add(_MOUSE_MODIFIERS[tokens.pop(0)])
    if not tokens or tokens[0] in ('SCROLL', 'BUTTON'):
        return None

    buttons = frozenset()
    if tokens[-1] != 'RELEASED':
        button = _MOUSE_BUTTONS.get(tokens[0])
        if button is not None:
            buttons = frozenset({button})
    x, y = keystroke.mouse_xy
    return PointerEvent(x, y, buttons, frozenset(modifiers))


def key_event_from_keystroke(keystroke) -> KeyEvent:
    """Convert a blessed Keystroke into a KeyEvent."""
    text = str(keystroke)
    if len(text) == 2 and text[0] == '\x1b' and text[1].isprintable():
        # metaSendsEscape: Alt+key arrives as ESC followed by the key
        return KeyEvent(modifiers=frozenset({Modifier.ALT}), rune=text[1])
    if keystroke.is_sequence:
        return KeyEvent(key=keystroke.name)
    if len(text) == 1 and 0 < ord(text) < 27:
        # Ctrl-A .. Ctrl-Z arrive as control characters
        return KeyEvent(modifiers=frozenset({Modifier.CTRL}), rune=chr(ord(text) + 96))
    return KeyEvent(rune=text)
