"""
Delay and Sound Timers
======================

Two independent 8-bit countdown counters. Instructions read and write
them; only the external driver decrements them, by calling tick() at a
fixed rate (60 Hz on the original hardware) that is independent of how
many instructions run in between.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass


@dataclass
class TimerState:
    """Timer values for inspection."""
    delay: int = 0
    sound: int = 0


class Timers:
    """
    Delay and sound timers.

    Example:
        >>> timers = Timers()
        >>> timers.delay = 2
        >>> timers.tick()
        >>> timers.delay
        1
    """

    def __init__(self):
        self._state = TimerState()

    @property
    def delay(self) -> int:
        """Delay timer (8-bit)."""
        return self._state.delay

    @delay.setter
    def delay(self, value: int) -> None:
        self._state.delay = value & 0xFF

    @property
    def sound(self) -> int:
        """Sound timer (8-bit)."""
        return self._state.sound

    @sound.setter
    def sound(self, value: int) -> None:
        self._state.sound = value & 0xFF

    @property
    def is_sound_active(self) -> bool:
        """True while the sound timer is running (host should beep)."""
        return self._state.sound > 0

    def tick(self) -> None:
        """Decrement both timers by one, stopping at zero."""
        if self._state.delay > 0:
            self._state.delay -= 1
        if self._state.sound > 0:
            self._state.sound -= 1

    def reset(self) -> None:
        """Zero both timers."""
        self._state = TimerState()
