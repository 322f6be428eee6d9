"""CHIP-8 hexadecimal keypad handling."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping

from pychip8.state import KEY_COUNT
from pychip8.utils import debug_enabled, debug_log


# Host keys laid out as the 4x4 COSMAC VIP keypad:
#   1 2 3 C      1 2 3 4
#   4 5 6 D  ->  q w e r
#   7 8 9 E      a s d f
#   A 0 B F      z x c v
KEY_LAYOUT_TEMPLATE: Mapping[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


ALIAS_TABLE: Mapping[str, str] = {
    "[1]": "1",
    "[2]": "2",
    "[3]": "3",
    "[4]": "4",
}


@dataclass
class Keypad:
    """Sixteen logical keys driven by named host keys."""

    layout: Mapping[str, int] = field(default_factory=lambda: dict(KEY_LAYOUT_TEMPLATE))
    _state: list[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    _active: Dict[int, int] = field(default_factory=dict)
    _listeners: list[Callable[[int, bool], None]] = field(default_factory=list)

    def press(self, key_name: str) -> None:
        key = self._lookup(key_name)
        if key is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_press=%s", key_name)
            return
        before = self._state[key]
        self._state[key] = True
        self._active[key] = self._active.get(key, 0) + 1
        if debug_enabled("input"):
            debug_log("input", "key_press name=%s key=%X", key_name, key)
        if not before:
            self._notify_listeners(key, True)

    def release(self, key_name: str) -> None:
        key = self._lookup(key_name)
        if key is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_release=%s", key_name)
            return
        count = self._active.get(key, 0)
        before = self._state[key]
        if count <= 1:
            self._state[key] = False
            self._active.pop(key, None)
        else:
            self._active[key] = count - 1
        if debug_enabled("input"):
            debug_log("input", "key_release name=%s key=%X count=%d", key_name, key, self._active.get(key, 0))
        if before and not self._state[key]:
            self._notify_listeners(key, False)

    def reset(self) -> None:
        self._state[:] = [False] * KEY_COUNT
        self._active.clear()

    def is_pressed(self, key: int) -> bool:
        return self._state[key & 0x0F]

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._state)

    def add_listener(self, listener: Callable[[int, bool], None]) -> None:
        self._listeners.append(listener)

    def _lookup(self, key_name: str) -> int | None:
        name = key_name.lower()
        name = ALIAS_TABLE.get(name, name)
        return self.layout.get(name)

    def _notify_listeners(self, key: int, pressed: bool) -> None:
        for listener in tuple(self._listeners):
            listener(key, pressed)


__all__ = ["Keypad", "KEY_LAYOUT_TEMPLATE"]
