"""
Memory Subsystem for the CHIP-8 Interpreter
===========================================

Memory Map:
    $000-$1FF  Reserved for the interpreter
        $050-$09F  Hexadecimal font (16 glyphs x 5 bytes)
    $200-$FFF  Program memory (loaded ROM, data, scratch)

The font table is copied into memory at construction time and again by
clear(). Programs never fetch instructions from the reserved area; the
CPU enforces that on fetch.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging
from typing import Iterable

from chip8vm.errors import MemoryBoundsError, RomTooLargeError

logger = logging.getLogger(__name__)


MEMORY_SIZE = 4096
PROGRAM_START = 0x200
PROGRAM_CAPACITY = MEMORY_SIZE - PROGRAM_START

FONT_ADDRESS = 0x050
FONT_GLYPH_SIZE = 5

# 4x5 glyphs for hex digits 0-F, high nibble of each byte is the pixel row
FONT_SET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])


class Memory:
    """
    Flat 4096-byte address space.

    Provides byte, word and block accessors. All accessors check the
    address against the size of memory and raise MemoryBoundsError
    instead of letting an IndexError escape.

    Example:
        >>> mem = Memory()
        >>> mem.load(bytes([0xA2, 0xF0]))
        >>> hex(mem.read_word(0x200))
        '0xa2f0'
    """

    def __init__(self):
        self._data = bytearray(MEMORY_SIZE)
        self._program_size = 0
        self._install_font()

    def _install_font(self) -> None:
        self._data[FONT_ADDRESS:FONT_ADDRESS + len(FONT_SET)] = FONT_SET

    @property
    def size(self) -> int:
        """Total size of the address space in bytes."""
        return MEMORY_SIZE

    @property
    def program_size(self) -> int:
        """Size of the most recently loaded program in bytes."""
        return self._program_size

    # =========================================================================
    # Byte / Word Access
    # =========================================================================

    def _check_range(self, address: int, count: int) -> None:
        if address < 0 or count < 0 or address + count > MEMORY_SIZE:
            raise MemoryBoundsError(address, count)

    def read(self, address: int) -> int:
        """
        Read byte from memory.

        Args:
            address: 12-bit address

        Returns:
            Byte value at address

        Raises:
            MemoryBoundsError: If address is outside $000-$FFF
        """
        self._check_range(address, 1)
        return self._data[address]

    def write(self, address: int, value: int) -> None:
        """
        Write byte to memory.

        Args:
            address: 12-bit address
            value: Byte value to write (masked to 8 bits)

        Raises:
            MemoryBoundsError: If address is outside $000-$FFF
        """
        self._check_range(address, 1)
        self._data[address] = value & 0xFF

    def read_word(self, address: int) -> int:
        """Read 16-bit word from memory (big-endian)."""
        self._check_range(address, 2)
        return (self._data[address] << 8) | self._data[address + 1]

    def read_block(self, address: int, count: int) -> bytes:
        """
        Read a contiguous block of bytes.

        The whole range is checked before anything is read.

        Raises:
            MemoryBoundsError: If any byte of the block is out of range
        """
        self._check_range(address, count)
        return bytes(self._data[address:address + count])

    def write_block(self, address: int, data: Iterable[int]) -> None:
        """
        Write a contiguous block of bytes.

        The whole range is checked before anything is written, so a
        failing write leaves memory untouched.

        Raises:
            MemoryBoundsError: If any byte of the block is out of range
        """
        values = bytes(value & 0xFF for value in data)
        self._check_range(address, len(values))
        self._data[address:address + len(values)] = values

    # =========================================================================
    # Program Loading
    # =========================================================================

    def load(self, program: bytes) -> None:
        """
        Copy a program image into memory at $200.

        Args:
            program: Raw ROM bytes

        Raises:
            RomTooLargeError: If the image is larger than 3584 bytes.
                Memory is not modified in that case.
        """
        if len(program) > PROGRAM_CAPACITY:
            raise RomTooLargeError(len(program), PROGRAM_CAPACITY)

        self._data[PROGRAM_START:PROGRAM_START + len(program)] = program
        self._program_size = len(program)
        logger.debug(f"Loaded {len(program)} bytes at ${PROGRAM_START:03X}")

    def clear(self) -> None:
        """Zero all memory and reinstall the font table."""
        self._data[:] = bytes(MEMORY_SIZE)
        self._program_size = 0
        self._install_font()

