import importlib


def test_pychip8_package_structure():
    pkg = importlib.import_module("pychip8")

    expected_submodules = {"state", "cpu", "system", "video", "audio", "io", "loader", "ui", "utils"}
    for name in expected_submodules:
        module = importlib.import_module(f"pychip8.{name}")
        assert module.__name__ == f"pychip8.{name}"
        assert name in pkg.__all__


def test_core_exports():
    from pychip8 import cpu, system

    assert hasattr(cpu, "Chip8CPU")
    assert hasattr(cpu, "decode")
    assert hasattr(system, "CycleScheduler")
    assert hasattr(system, "create_machine")
