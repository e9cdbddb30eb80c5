"""
Breakpoints and Stop Events
===========================

PC breakpoints for stopping a run at a given address, plus the
BreakEvent value that every run/step call returns to explain why
execution stopped.

Example usage:

    >>> from chip8vm.emulator import Emulator, BreakReason
    >>> emu = Emulator()
    >>> emu.load_rom("pong.ch8")
    >>> emu.breakpoints.add_breakpoint(0x2A0)
    >>> event = emu.run(100_000)
    >>> if event.reason == BreakReason.PC_BREAKPOINT:
    ...     print(f"Hit breakpoint at ${event.address:04X}")

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Set


class BreakReason(Enum):
    """
    Enumeration of reasons why execution stopped.

    Used in BreakEvent to indicate what triggered the break.
    """
    NONE = auto()           # No specific reason
    PC_BREAKPOINT = auto()  # PC reached a breakpoint address
    STEP = auto()           # Single-step mode
    KEY_WAIT = auto()       # Program is blocked on Fx0A
    MAX_STEPS = auto()      # Step budget exhausted


@dataclass
class BreakEvent:
    """
    Information about why execution stopped.

    Attributes:
        reason: Why execution stopped
        address: PC at the time of the stop (if applicable)
        steps: Number of steps executed by the call that stopped
        message: Human-readable description
    """
    reason: BreakReason
    address: Optional[int] = None
    steps: int = 0
    message: str = ""

    def __str__(self) -> str:
        if self.message:
            return self.message
        match self.reason:
            case BreakReason.PC_BREAKPOINT:
                return f"Breakpoint at ${self.address:04X}"
            case BreakReason.KEY_WAIT:
                return f"Waiting for key at ${self.address:04X}"
            case BreakReason.MAX_STEPS:
                return f"Reached max steps ({self.steps})"
            case _:
                return self.reason.name


class BreakpointManager:
    """
    Set of PC breakpoints.

    A breakpoint stops execution before the instruction at its address
    runs. The emulator skips the check for the very first step of a run
    so that resuming from a breakpoint makes progress.
    """

    def __init__(self):
        self._breakpoints: Set[int] = set()
        self.last_event: Optional[BreakEvent] = None

    def add_breakpoint(self, address: int) -> None:
        """Add a PC breakpoint."""
        self._breakpoints.add(address & 0xFFFF)

    def remove_breakpoint(self, address: int) -> None:
        """Remove a PC breakpoint (no error if absent)."""
        self._breakpoints.discard(address & 0xFFFF)

    def has_breakpoint(self, address: int) -> bool:
        """Check whether a breakpoint is set at address."""
        return (address & 0xFFFF) in self._breakpoints

    def list_breakpoints(self) -> List[int]:
        """Get all breakpoint addresses, sorted."""
        return sorted(self._breakpoints)

    def clear_all(self) -> None:
        """Remove all breakpoints."""
        self._breakpoints.clear()
        self.last_event = None

    def check_pc(self, pc: int) -> bool:
        """
        Check the PC about to execute.

        Returns:
            True to continue execution, False to stop (breakpoint hit)
        """
        if pc in self._breakpoints:
            self.last_event = BreakEvent(BreakReason.PC_BREAKPOINT, address=pc)
            return False
        return True
