"""Input helpers for the CHIP-8 interpreter."""

from .keypad import KEY_LAYOUT_TEMPLATE, Keypad

__all__ = ["Keypad", "KEY_LAYOUT_TEMPLATE"]
