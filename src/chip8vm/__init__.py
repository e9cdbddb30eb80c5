"""
chip8vm - CHIP-8 Virtual Machine
================================

This package provides an interpreter for CHIP-8, the small 8-bit virtual
machine that ran games on 1970s hobbyist computers such as the COSMAC VIP.
It executes existing ROM images and exposes the 64x32 monochrome display
and the 16-key keypad to a host application.

Main Components
---------------
- **emulator**: The interpreter core and its peripherals
    Memory, CPU, framebuffer, keypad, timers and the Emulator orchestrator

- **cli**: Command-line host (chip8run)
    Runs a ROM headless and writes the display as PNG or text

- **errors**: Exception hierarchy shared by all components

Quick Start
-----------
Run a ROM for two seconds of emulated time:
    >>> from chip8vm import Emulator
    >>> emu = Emulator()
    >>> emu.load_rom("ibm_logo.ch8")
    >>> emu.run_frames(120)
    >>> print(emu.display_text)

Save the display:
    >>> with open("screen.png", "wb") as f:
    ...     f.write(emu.render_display(scale=8))

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

__version__ = "1.0.0"
__author__ = "Hugo José Pinto & Contributors"

# Emulator
from chip8vm.emulator import Emulator, EmulatorConfig

# Exceptions
from chip8vm.errors import (
    Chip8Error,
    LoadError,
    RomTooLargeError,
    MachineError,
    ReservedMemoryAccessError,
    StackUnderflowError,
    MemoryBoundsError,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Emulator
    "Emulator",
    "EmulatorConfig",
    # Exception hierarchy
    "Chip8Error",
    "LoadError",
    "RomTooLargeError",
    "MachineError",
    "ReservedMemoryAccessError",
    "StackUnderflowError",
    "MemoryBoundsError",
]
