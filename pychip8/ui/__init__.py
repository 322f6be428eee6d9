"""User interface front ends."""

from .app import AppConfig, Chip8App

__all__ = ["AppConfig", "Chip8App"]
