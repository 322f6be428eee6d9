"""Tests for square-wave sample generation."""

from __future__ import annotations

from array import array

from pychip8.audio import build_square_wave


def test_square_wave_has_one_period() -> None:
    samples = array("h")
    samples.frombytes(build_square_wave(44_100, 441.0, amplitude=1000))

    assert len(samples) == 100
    assert set(samples[:50]) == {1000}
    assert set(samples[50:]) == {-1000}


def test_square_wave_minimum_length() -> None:
    samples = array("h")
    samples.frombytes(build_square_wave(100, 1000.0))
    assert len(samples) == 2
