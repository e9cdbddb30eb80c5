"""
CHIP-8 Emulator - Main Orchestrator
===================================

This module provides the main `Emulator` class that wires the interpreter
core to its peripherals and offers a high-level API for hosts and tests.

The Emulator class:
- Initializes all components (memory, CPU, framebuffer, keypad, timers)
- Loads programs from ROM files or raw bytes
- Supports execution control (step, run, run_until_pc, run_frame)
- Integrates PC breakpoints
- Offers framebuffer inspection and PNG rendering
- Forwards key presses from the host

Timing
------
The core has no clock. run_frame() is a convenience driver: it executes
`instructions_per_frame` steps and then decrements the timers once. A host
that calls it `timer_hz` times per second gets the configured instruction
rate with 60 Hz timers. Hosts are free to schedule step() themselves.

Example usage:
    >>> from chip8vm.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(instructions_per_second=600))
    >>> emu.load_rom("maze.ch8")
    >>> for _ in range(60):
    ...     emu.run_frame()
    >>> print(emu.display_text)

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from chip8vm.errors import MachineError, RomTooLargeError
from .breakpoints import BreakEvent, BreakpointManager, BreakReason
from .cpu import CPU
from .display import Framebuffer
from .keyboard import Keypad
from .memory import PROGRAM_CAPACITY, Memory
from .timers import Timers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmulatorConfig:
    """
    Configuration for emulator initialization.

    Attributes:
        instructions_per_second: Target instruction rate used by
            run_frame() (default 700)
        timer_hz: Timer decrement rate, i.e. frames per second (default 60)
        seed: Seed for the Cxnn random generator. None uses system
            entropy; set it for reproducible runs.

    Example:
        >>> config = EmulatorConfig(instructions_per_second=1000, seed=1)
        >>> config.instructions_per_frame
        17
    """
    instructions_per_second: int = 700
    timer_hz: int = 60
    seed: Optional[int] = None

    def __post_init__(self):
        if self.instructions_per_second <= 0:
            raise ValueError(
                f"instructions_per_second must be positive, got {self.instructions_per_second}"
            )
        if self.timer_hz <= 0:
            raise ValueError(f"timer_hz must be positive, got {self.timer_hz}")

    @property
    def instructions_per_frame(self) -> int:
        """Steps executed between two timer ticks (at least 1)."""
        return max(1, round(self.instructions_per_second / self.timer_hz))

    @classmethod
    def from_env(cls) -> "EmulatorConfig":
        """
        Create EmulatorConfig from environment variables.

        Environment variables (all optional):
            CHIP8_IPS: Instructions per second (integer)
            CHIP8_TIMER_HZ: Timer rate (integer)
            CHIP8_SEED: Random seed (integer)

        Invalid values are ignored and the default is kept.

        Returns:
            EmulatorConfig with values from environment variables
        """
        values = {}

        for name, key in (
            ("CHIP8_IPS", "instructions_per_second"),
            ("CHIP8_TIMER_HZ", "timer_hz"),
            ("CHIP8_SEED", "seed"),
        ):
            if raw := os.environ.get(name):
                try:
                    values[key] = int(raw)
                except ValueError:
                    logger.warning(f"Ignoring invalid {name}={raw!r}")

        try:
            return cls(**values)
        except ValueError as e:
            logger.warning(f"Ignoring environment configuration: {e}")
            return cls()


class Emulator:
    """
    CHIP-8 emulator.

    Attributes:
        config: The EmulatorConfig used to initialize this instance
        memory: The 4 KB address space
        cpu: The interpreter core (accessible for low-level control)
        framebuffer: The 64x32 display
        keypad: The 16-key keypad
        timers: Delay and sound timers
        breakpoints: The PC breakpoint manager

    Example:
        >>> emu = Emulator()
        >>> emu.load_bytes(bytes([0x60, 0x00, 0xF0, 0x29, 0xD0, 0x05]))
        >>> event = emu.run(3)
        >>> print(emu.display_text.splitlines()[0][:8])
        ####....
    """

    def __init__(self, config: Optional[EmulatorConfig] = None):
        self.config = config or EmulatorConfig()

        self.memory = Memory()
        self.framebuffer = Framebuffer()
        self.keypad = Keypad()
        self.timers = Timers()
        self.cpu = CPU(
            self.memory,
            self.framebuffer,
            self.keypad,
            self.timers,
            seed=self.config.seed,
        )
        self.breakpoints = BreakpointManager()

        self._program: bytes = b""
        self._is_running = False
        self._total_steps = 0
        self._total_frames = 0

    # =========================================================================
    # Program Loading
    # =========================================================================

    def load_rom(self, path: Union[str, Path]) -> None:
        """
        Load a raw ROM file at $200.

        Args:
            path: Path to the ROM image

        Raises:
            FileNotFoundError: If the ROM file doesn't exist
            RomTooLargeError: If the ROM is larger than 3584 bytes
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"ROM file not found: {path}")

        data = path.read_bytes()
        self.load_bytes(data)
        logger.info(f"Loaded ROM '{path.name}' ({len(data)} bytes)")

    def load_bytes(self, data: bytes) -> None:
        """
        Load a program image from bytes at $200.

        Memory is cleared first, so nothing of a previous program
        survives. The image is remembered so that reset() can restore it.

        Raises:
            RomTooLargeError: If the image is larger than 3584 bytes.
                Memory and the remembered program are left unchanged.
        """
        data = bytes(data)
        if len(data) > PROGRAM_CAPACITY:
            raise RomTooLargeError(len(data), PROGRAM_CAPACITY)

        self.memory.clear()
        self.memory.load(data)
        self._program = data

    # =========================================================================
    # Execution Control
    # =========================================================================

    def reset(self) -> None:
        """
        Reset emulator to power-on state.

        Memory is cleared (font reinstalled, loaded program restored),
        registers zeroed, PC set to $200, framebuffer cleared, keys
        released and timers zeroed. Breakpoints are kept.
        """
        self.memory.clear()
        if self._program:
            self.memory.load(self._program)
        self.framebuffer.clear()
        self.keypad.clear()
        self.timers.reset()
        self.cpu.reset()
        self._is_running = False
        self._total_steps = 0
        self._total_frames = 0

    def _step(self) -> None:
        try:
            self.cpu.step()
        except MachineError as e:
            logger.error(f"Execution stopped: {e}")
            raise
        self._total_steps += 1

    def step(self) -> BreakEvent:
        """
        Execute a single instruction, ignoring breakpoints.

        Returns:
            BreakEvent with reason=STEP and the new PC

        Raises:
            MachineError: If the instruction faults
        """
        self._step()
        return BreakEvent(
            BreakReason.STEP,
            address=self.cpu.pc,
            steps=1,
            message=f"Step at ${self.cpu.pc:04X}",
        )

    def run(self, max_steps: int = 100_000) -> BreakEvent:
        """
        Run until a breakpoint, a key wait, or max_steps.

        Execution continues until:
        - PC reaches a breakpoint (checked from the second step on, so a
          run started on a breakpoint makes progress)
        - The program blocks on Fx0A with its key not pressed
        - max_steps instructions have executed

        Timers are not decremented; use run_frame() for timed execution.

        Args:
            max_steps: Maximum number of steps to execute

        Returns:
            BreakEvent describing why execution stopped

        Raises:
            MachineError: If an instruction faults
        """
        self.breakpoints.last_event = None
        self._is_running = True
        steps = 0

        try:
            while steps < max_steps:
                if steps > 0 and not self.cpu.is_waiting_for_key:
                    if not self.breakpoints.check_pc(self.cpu.pc):
                        event = self.breakpoints.last_event
                        event.steps = steps
                        return event

                self._step()
                steps += 1

                if self.cpu.is_waiting_for_key:
                    return BreakEvent(BreakReason.KEY_WAIT, address=self.cpu.pc, steps=steps)
        finally:
            self._is_running = False

        return BreakEvent(BreakReason.MAX_STEPS, address=self.cpu.pc, steps=steps)

    def run_until_pc(self, address: int, max_steps: int = 100_000) -> bool:
        """
        Run until PC reaches a specific address.

        Creates a temporary breakpoint at the address and runs until hit.

        Returns:
            True if address was reached, False otherwise
        """
        was_set = self.breakpoints.has_breakpoint(address)
        if not was_set:
            self.breakpoints.add_breakpoint(address)

        try:
            event = self.run(max_steps)
            return (event.reason == BreakReason.PC_BREAKPOINT and
                    event.address == address)
        finally:
            if not was_set:
                self.breakpoints.remove_breakpoint(address)

    def run_frame(self) -> int:
        """
        Run one frame: instructions_per_frame steps, then one timer tick.

        Steps spent polling for a key still count, so a program waiting
        on Fx0A keeps its timers running as on real hardware.

        Returns:
            Number of steps executed

        Raises:
            MachineError: If an instruction faults
        """
        count = self.config.instructions_per_frame
        for _ in range(count):
            self._step()
        self.timers.tick()
        self._total_frames += 1
        return count

    def run_frames(self, frames: int) -> int:
        """
        Run several frames back to back.

        Returns:
            Total number of steps executed
        """
        return sum(self.run_frame() for _ in range(frames))

    # =========================================================================
    # Keyboard Input
    # =========================================================================

    def press_key(self, key: str) -> None:
        """
        Press a physical key (e.g. "Q" for logical key 4).

        The key remains pressed until release_key() is called.
        """
        self.keypad.key_down(key)

    def release_key(self, key: str) -> None:
        """Release a physical key."""
        self.keypad.key_up(key)

    def set_keys(self, keys: Iterable[bool]) -> None:
        """Replace the state of all 16 logical keys."""
        self.keypad.set_state(keys)

    # =========================================================================
    # Display Output
    # =========================================================================

    @property
    def display_text(self) -> str:
        """Framebuffer as text ('#' lit, '.' dark), one line per row."""
        return self.framebuffer.get_text()

    @property
    def display_lines(self) -> List[str]:
        """Framebuffer as a list of text rows."""
        return self.framebuffer.get_text_grid()

    @property
    def display_pixels(self) -> tuple:
        """Framebuffer pixels, row-major (index = x + y * 64)."""
        return self.framebuffer.pixels

    def render_display(self, scale: int = 8) -> bytes:
        """Render the framebuffer as PNG bytes."""
        return self.framebuffer.render_image(scale=scale)

    # =========================================================================
    # Memory Access
    # =========================================================================

    def read_byte(self, address: int) -> int:
        """Read a single byte from memory."""
        return self.memory.read(address)

    def read_bytes(self, address: int, count: int) -> bytes:
        """Read multiple bytes from memory."""
        return self.memory.read_block(address, count)

    def write_bytes(self, address: int, data: bytes) -> None:
        """Write multiple bytes to memory."""
        self.memory.write_block(address, data)

    # =========================================================================
    # State Inspection
    # =========================================================================

    @property
    def registers(self) -> dict:
        """
        Get current register values as a dictionary.

        Returns:
            Dictionary with keys v0-vf, i, pc, sp, dt, st
        """
        registers = self.cpu.get_registers()
        registers["dt"] = self.timers.delay
        registers["st"] = self.timers.sound
        return registers

    @property
    def total_steps(self) -> int:
        """Steps executed since construction or the last reset."""
        return self._total_steps

    @property
    def total_frames(self) -> int:
        """Frames run since construction or the last reset."""
        return self._total_frames

    @property
    def is_running(self) -> bool:
        """True while inside run()."""
        return self._is_running

    def __repr__(self) -> str:
        return (
            f"Emulator(pc=${self.cpu.pc:04X}, "
            f"steps={self._total_steps}, "
            f"mode={self.cpu.mode.name})"
        )
