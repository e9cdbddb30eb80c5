"""
CHIP-8 VM Error Hierarchy
=========================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from Chip8Error, allowing a host to catch every
interpreter fault with a single except clause if desired.

Exception Hierarchy
-------------------
Chip8Error (base)
├── LoadError (program loading)
│   └── RomTooLargeError - program does not fit in program memory
└── MachineError (raised while executing)
    ├── ReservedMemoryAccessError - fetch below the program area
    ├── StackUnderflowError - return with an empty call stack
    └── MemoryBoundsError - access past the end of the address space

Unknown opcodes are deliberately absent: they execute as no-ops.

Every MachineError records the program counter of the faulting
instruction so the host can report where the program went wrong:

    ROM fault at $0A4C: return with empty call stack

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Chip8Error(Exception):
    """
    Base exception for all interpreter errors.

        try:
            emu.run(10_000)
        except Chip8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Loading Exceptions
# =============================================================================

class LoadError(Chip8Error):
    """Base exception for program loading errors."""
    pass


class RomTooLargeError(LoadError):
    """
    Program image exceeds the available program memory.

    Programs are loaded at $200, so at most 4096 - 0x200 = 3584 bytes fit.
    Nothing is written to memory when this is raised.

    Attributes:
        size: Size of the rejected image in bytes
        capacity: Number of bytes available for programs
    """

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(
            f"ROM is {size} bytes, but only {capacity} bytes of program memory are available"
        )


# =============================================================================
# Execution Exceptions
# =============================================================================

class MachineError(Chip8Error):
    """
    Base exception for faults raised while executing a program.

    Attributes:
        message: The error description
        pc: Address of the instruction that faulted (optional)
    """

    def __init__(self, message: str, pc: Optional[int] = None):
        self.message = message
        self.pc = pc
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.pc is None:
            return self.message
        return f"ROM fault at ${self.pc:04X}: {self.message}"


class ReservedMemoryAccessError(MachineError):
    """
    Instruction fetch from the interpreter-reserved area ($000-$1FF).

    The reserved area holds the font table; a program counter pointing
    there means the program jumped somewhere it should not have.
    """

    def __init__(self, address: int):
        self.address = address
        super().__init__(
            f"instruction fetch from reserved memory at ${address:04X}",
            pc=address,
        )


class StackUnderflowError(MachineError):
    """Return instruction executed with an empty call stack."""

    def __init__(self, pc: Optional[int] = None):
        super().__init__("return with empty call stack", pc=pc)


class MemoryBoundsError(MachineError):
    """
    Memory access past the end of the 4096-byte address space.

    Raised for fetches near the top of memory and for instructions that
    address memory through the index register (sprite reads, BCD
    stores, register dumps and loads).

    Attributes:
        address: First address of the attempted access
        count: Number of bytes the access spans
    """

    def __init__(self, address: int, count: int = 1, pc: Optional[int] = None):
        self.address = address
        self.count = count
        if count == 1:
            where = f"${address:04X}"
        else:
            where = f"${address:04X}-${address + count - 1:04X}"
        super().__init__(f"memory access out of range at {where}", pc=pc)
