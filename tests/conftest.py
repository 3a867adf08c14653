"""Shared fixtures."""

import pytest
from blessed.dec_modes import DecPrivateMode
from blessed.keyboard import Keystroke
from blessed.mouse import RE_PATTERN_MOUSE_SGR


def make_mouse_keystroke(sequence):
    """Keystroke as blessed's inkey() returns it for an SGR mouse report."""
    return Keystroke(sequence, mode=DecPrivateMode.MOUSE_EXTENDED_SGR,
                     match=RE_PATTERN_MOUSE_SGR.match(sequence))


@pytest.fixture
def mouse_keystroke():
    return make_mouse_keystroke
