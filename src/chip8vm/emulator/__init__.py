"""
CHIP-8 Emulator
===============

An interpreter for the CHIP-8 instruction set, the 1970s bytecode
used on the COSMAC VIP and its successors.

This package provides:

- **CPU**: Full 35-instruction catalog with the classic flag quirks
- **Memory System**: 4 KB address space with the built-in hex font
- **Framebuffer**: 64x32 monochrome display with XOR sprite drawing
- **Keypad**: 16-key hex keypad with the standard host key layout
- **Timers**: Delay and sound timers driven by the host
- **Debugging**: PC breakpoints and stop events

Quick Start
-----------

Basic usage::

    >>> from chip8vm.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(seed=1))
    >>> emu.load_rom("pong.ch8")
    >>> emu.run_frames(120)
    >>> print(emu.display_text)

Driving it yourself::

    >>> emu.press_key("Q")        # logical key 4
    >>> emu.step()
    >>> emu.timers.tick()         # 60 times per second

Module Structure
----------------

- `emulator.py`: Main Emulator class (high-level API) and EmulatorConfig
- `cpu.py`: Register file and fetch-decode-execute engine
- `opcodes.py`: Opcode decoder
- `memory.py`: Address space, font table and program loader
- `display.py`: Framebuffer and sprite engine
- `keyboard.py`: Keypad state and host key mapping
- `timers.py`: Delay and sound timers
- `breakpoints.py`: Debugging support

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

# Main entry point
from .emulator import Emulator, EmulatorConfig

# CPU components
from .cpu import CPU, CPUState, MachineMode
from .opcodes import Instruction, Op, decode

# Memory subsystem
from .memory import (
    Memory,
    FONT_ADDRESS,
    FONT_SET,
    MEMORY_SIZE,
    PROGRAM_CAPACITY,
    PROGRAM_START,
)

# I/O
from .display import Framebuffer, WIDTH, HEIGHT
from .keyboard import Keypad, KEY_MAP
from .timers import Timers

# Debugging support
from .breakpoints import BreakpointManager, BreakEvent, BreakReason

__all__ = [
    # Main API
    "Emulator",
    "EmulatorConfig",

    # CPU
    "CPU",
    "CPUState",
    "MachineMode",
    "Instruction",
    "Op",
    "decode",

    # Memory
    "Memory",
    "FONT_ADDRESS",
    "FONT_SET",
    "MEMORY_SIZE",
    "PROGRAM_CAPACITY",
    "PROGRAM_START",

    # Display
    "Framebuffer",
    "WIDTH",
    "HEIGHT",

    # Keypad
    "Keypad",
    "KEY_MAP",

    # Timers
    "Timers",

    # Debugging
    "BreakpointManager",
    "BreakEvent",
    "BreakReason",
]
