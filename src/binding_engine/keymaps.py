"""Physical key maps on a 0.25u grid (a standard 1u key is 4 wide).

Key heights default to 4 when omitted. The mouse block sits to the right
of the keyboard so both devices share one coordinate space.
"""

from __future__ import annotations

from .models import KeyDefinition


def _row(y: float, start_x: float, keys: list[tuple[str, float]]) -> list[KeyDefinition]:
    """Lay out ``(code, width)`` pairs left to right starting at *start_x*."""
    row: list[KeyDefinition] = []
    x = start_x
    for code, width in keys:
        row.append(KeyDefinition(code=code, x=x, y=y, width=width))
        x += width
    return row


ANSI_LAYOUT: list[KeyDefinition] = [
    *_row(0, 0, [
        ("Backquote", 4), ("Digit1", 4), ("Digit2", 4), ("Digit3", 4),
        ("Digit4", 4), ("Digit5", 4), ("Digit6", 4), ("Digit7", 4),
        ("Digit8", 4), ("Digit9", 4), ("Digit0", 4), ("Minus", 4),
        ("Equal", 4), ("Backspace", 8),
    ]),
    *_row(4, 0, [
        ("Tab", 6), ("KeyQ", 4), ("KeyW", 4), ("KeyE", 4), ("KeyR", 4),
        ("KeyT", 4), ("KeyY", 4), ("KeyU", 4), ("KeyI", 4), ("KeyO", 4),
        ("KeyP", 4), ("BracketLeft", 4), ("BracketRight", 4), ("Backslash", 6),
    ]),
    *_row(8, 0, [
        ("CapsLock", 7), ("KeyA", 4), ("KeyS", 4), ("KeyD", 4), ("KeyF", 4),
        ("KeyG", 4), ("KeyH", 4), ("KeyJ", 4), ("KeyK", 4), ("KeyL", 4),
        ("Semicolon", 4), ("Quote", 4), ("Enter", 9),
    ]),
    *_row(12, 0, [
        ("ShiftLeft", 9), ("KeyZ", 4), ("KeyX", 4), ("KeyC", 4), ("KeyV", 4),
        ("KeyB", 4), ("KeyN", 4), ("KeyM", 4), ("Comma", 4), ("Period", 4),
        ("Slash", 4), ("ShiftRight", 11),
    ]),
    *_row(16, 0, [
        ("ControlLeft", 5), ("MetaLeft", 5), ("AltLeft", 5), ("Space", 4),
        ("SpaceRightSide", 21), ("AltRight", 5), ("MetaRight", 5),
        ("ContextMenu", 5), ("ControlRight", 5),
    ]),
]

MOUSE_LAYOUT: list[KeyDefinition] = [
    KeyDefinition("MouseLeft", 70, 4, 4),
    KeyDefinition("MouseUp", 74, 0, 4),
    KeyDefinition("MouseRight", 78, 4, 4),
    KeyDefinition("Mouse4", 66, 8, 4),
    KeyDefinition("MouseMiddle", 74, 4, 4),
    KeyDefinition("Mouse5", 66, 12, 4),
    KeyDefinition("MouseDown", 74, 8, 4),
]

ALL_KEYS: list[KeyDefinition] = [*ANSI_LAYOUT, *MOUSE_LAYOUT]


def all_key_codes() -> list[str]:
    """Codes of every keyboard and mouse key, keyboard rows first."""
    return [key.code for key in ALL_KEYS]
