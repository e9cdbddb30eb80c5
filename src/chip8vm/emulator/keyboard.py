"""
Keypad for the CHIP-8 Interpreter
=================================

The machine has a 16-key hexadecimal keypad. Instructions see it as a
vector of 16 booleans indexed 0x0-0xF; the host replaces that vector
(or individual keys) between steps.

Physical key layout (host keyboard) and the logical key it produces:

    1 2 3 4        1 2 3 C
    Q W E R   ->   4 5 6 D
    A S D F        7 8 9 E
    Z X C V        A 0 B F

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from typing import Dict, Iterable, List


NUM_KEYS = 16


# =============================================================================
# PHYSICAL KEY TO LOGICAL KEY MAPPING
# =============================================================================

KEY_MAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}


class Keypad:
    """
    16-key keypad state.

    Example:
        >>> kp = Keypad()
        >>> kp.key_down("Q")      # physical Q is logical key 4
        >>> kp.is_pressed(0x4)
        True
        >>> kp.set_state([False] * 16)
        >>> kp.is_pressed(0x4)
        False
    """

    def __init__(self):
        self._keys: List[bool] = [False] * NUM_KEYS

    @property
    def state(self) -> tuple:
        """Current state of all 16 keys."""
        return tuple(self._keys)

    @property
    def pressed_keys(self) -> List[int]:
        """Logical values of all keys currently held down."""
        return [key for key, down in enumerate(self._keys) if down]

    def is_pressed(self, key: int) -> bool:
        """
        Check whether a logical key is held down.

        Args:
            key: Logical key value (0x0-0xF). Values outside that
                 range name no key and read as not pressed.
        """
        if not 0 <= key < NUM_KEYS:
            return False
        return self._keys[key]

    def set_state(self, keys: Iterable[bool]) -> None:
        """
        Replace the whole keypad state.

        Args:
            keys: Exactly 16 truthy/falsy values, indexed by logical key

        Raises:
            ValueError: If keys does not hold exactly 16 values
        """
        values = [bool(k) for k in keys]
        if len(values) != NUM_KEYS:
            raise ValueError(f"Keypad state needs {NUM_KEYS} keys, got {len(values)}")
        self._keys = values

    def press(self, key: int) -> None:
        """Press a logical key (0x0-0xF)."""
        self._set(key, True)

    def release(self, key: int) -> None:
        """Release a logical key (0x0-0xF)."""
        self._set(key, False)

    def _set(self, key: int, down: bool) -> None:
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key must be 0x0-0xF, got {key}")
        self._keys[key] = down

    def clear(self) -> None:
        """Release all keys."""
        self._keys = [False] * NUM_KEYS

    # =========================================================================
    # Physical Key API
    # =========================================================================

    def key_down(self, name: str) -> None:
        """
        Press a physical key.

        Args:
            name: Host key name (e.g. "1", "Q", "v"). Unknown names are
                  ignored.
        """
        key = KEY_MAP.get(name.upper())
        if key is None:
            return  # Not part of the keypad
        self._keys[key] = True

    def key_up(self, name: str) -> None:
        """
        Release a physical key.

        Args:
            name: Host key name. Unknown names are ignored.
        """
        key = KEY_MAP.get(name.upper())
        if key is None:
            return
        self._keys[key] = False

    def is_key_down(self, name: str) -> bool:
        """Check whether a physical key is held down."""
        key = KEY_MAP.get(name.upper())
        return key is not None and self._keys[key]
