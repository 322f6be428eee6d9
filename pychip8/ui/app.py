"""Pygame front end for the CHIP-8 interpreter."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pychip8.audio import SquareWaveBeeper
from pychip8.cpu import IllegalOpcodeError
from pychip8.io import Keypad
from pychip8.loader import RomLoadError, load_rom_from_path
from pychip8.state import DISPLAY_HEIGHT, DISPLAY_WIDTH
from pychip8.system import (
    DEFAULT_INSTRUCTIONS_PER_SECOND,
    CycleOutcome,
    Machine,
    MachineConfig,
    create_machine,
)
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import MONOCHROME, Renderer
from pychip8.video.palette import Palette


@dataclass
class AppConfig:
    """Configuration for the pygame front end."""

    rom_path: Optional[Path] = None
    scale: int = 12
    fullscreen: bool = False
    instructions_per_second: int = DEFAULT_INSTRUCTIONS_PER_SECOND
    palette: Palette = field(default=MONOCHROME)
    mute: bool = False
    seed: Optional[int] = None
    strict_opcodes: bool = False


class Chip8App:
    """Window, keyboard and speaker wrapped around one machine."""

    def __init__(self, config: AppConfig) -> None:
        if config.scale <= 0:
            raise ValueError("scale must be positive")
        self._config = config
        self._running = False
        self._keypad = Keypad()
        self._beeper: SquareWaveBeeper | None = None
        self._machine: Machine | None = None
        self._pygame = None
        self._perf_enabled = debug_enabled("perf")
        self._perf_cycles = 0
        self._perf_last_time = 0.0
        self._frame_counter = 0
        self._trace_recorder: TraceRecorder | None = None
        if debug_enabled("trace"):
            self._trace_recorder = TraceRecorder(512)

    @property
    def keypad(self) -> Keypad:
        return self._keypad

    @property
    def machine(self) -> Machine | None:
        return self._machine

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        if not self._config.rom_path:
            raise RuntimeError("ROM image is required; pass --rom <path>")
        machine = self._create_machine(self._config.rom_path)
        self._machine = machine

        if not self._config.mute:
            pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        pygame.display.set_caption(f"CHIP-8 - {self._config.rom_path.name}")
        self._pygame = pygame
        self._initialise_audio(pygame)

        renderer = Renderer(self._config.palette)
        scale = self._config.scale
        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        screen = pygame.display.set_mode((DISPLAY_WIDTH * scale, DISPLAY_HEIGHT * scale), flags)

        self._running = True
        next_frame = time.perf_counter()
        self._perf_last_time = next_frame

        try:
            while self._running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self._running = False
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                        self._running = False
                    elif event.type == pygame.KEYDOWN:
                        self._handle_key_event(pygame.key.name(event.key), pressed=True)
                    elif event.type == pygame.KEYUP:
                        self._handle_key_event(pygame.key.name(event.key), pressed=False)

                if not self._running:
                    break

                self._run_cycle(machine)

                now = time.perf_counter()
                if now >= next_frame:
                    frame = renderer.render(machine.state.framebuffer, scale=scale)
                    screen.blit(frame.to_surface(), (0, 0))
                    pygame.display.flip()
                    if self._beeper is not None:
                        self._beeper.update(machine.state.sound_timer)
                    self._frame_counter += 1
                    self._report_perf(now)
                    next_frame = now + _FRAME_INTERVAL
        finally:
            if self._beeper is not None:
                self._beeper.shutdown()
            pygame.quit()

    # ------------------------------------------------------------------
    # Helpers

    def _create_machine(self, rom_path: Path) -> Machine:
        machine = create_machine(
            MachineConfig(
                instructions_per_second=self._config.instructions_per_second,
                seed=self._config.seed,
                strict_opcodes=self._config.strict_opcodes,
            )
        )
        try:
            image = load_rom_from_path(rom_path, machine.state)
        except FileNotFoundError as exc:
            raise RuntimeError(f"ROM file not found: {rom_path}") from exc
        except RomLoadError as exc:
            raise RuntimeError(f"Failed to load ROM {rom_path}: {exc}") from exc
        if debug_enabled("cpu"):
            debug_log("cpu", "loaded rom=%s size=%d end=%03x", image.name, image.size, image.end_address)
        return machine

    def _initialise_audio(self, pygame) -> None:
        if self._config.mute:
            return
        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init(44_100, -16, 1)
            except pygame.error as exc:  # pragma: no cover - best-effort path
                if debug_enabled("audio"):
                    debug_log("audio", "mixer_init_failed=%s", exc)
                return
        mixer_state = pygame.mixer.get_init()
        if mixer_state is None:
            if debug_enabled("audio"):
                debug_log("audio", "mixer_unavailable")
            return
        try:
            self._beeper = SquareWaveBeeper(sample_rate=mixer_state[0])
        except RuntimeError as exc:
            self._beeper = None
            if debug_enabled("audio"):
                debug_log("audio", "beeper_init_failed=%s", exc)

    def _handle_key_event(self, name: str, *, pressed: bool) -> None:
        if debug_enabled("input"):
            debug_log("input", "event=%s pressed=%s", name, pressed)
        if pressed:
            self._keypad.press(name)
        else:
            self._keypad.release(name)

    def _run_cycle(self, machine: Machine) -> CycleOutcome:
        machine.state.set_keys(self._keypad.snapshot())
        try:
            outcome = machine.run_cycle()
        except IllegalOpcodeError as exc:
            self._running = False
            if self._trace_recorder is not None:
                self._trace_recorder.dump("trace", limit=32)
            raise RuntimeError(f"Illegal opcode encountered: {exc}") from exc

        if self._trace_recorder is not None:
            self._trace_recorder.record_step(
                machine.state,
                outcome.pc_before,
                outcome.executed_opcode,
                mnemonic=outcome.instruction.disassemble() if outcome.instruction else "",
                note=outcome.fault or "",
            )
        self._perf_cycles += 1
        return outcome

    def _report_perf(self, now: float) -> None:
        if not self._perf_enabled or self._frame_counter % _FRAME_RATE:
            return
        duration = now - self._perf_last_time
        if duration > 0:
            debug_log(
                "perf",
                "frames=%d cycles=%d effective_ips=%.1f",
                self._frame_counter,
                self._perf_cycles,
                self._perf_cycles / duration,
            )
        self._perf_cycles = 0
        self._perf_last_time = now


_FRAME_RATE = 60
_FRAME_INTERVAL = 1.0 / _FRAME_RATE
