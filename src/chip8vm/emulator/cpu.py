"""
CHIP-8 CPU
==========

Register file and fetch-decode-execute engine.

Registers:
- V0-VF: 8-bit general purpose. VF doubles as the flag register and is
  overwritten by arithmetic, shift and draw instructions (carry, borrow,
  shifted-out bit, collision).
- I: 16-bit index register, used as a memory pointer.
- PC: program counter, advances 2 bytes per instruction.
- Call stack: growable list of return addresses.

Each step fetches one big-endian opcode at PC, advances PC by 2, decodes
it and executes it. Jumps, calls, returns and Bnnn overwrite PC; the skip
family adds another 2 when its condition holds.

Quirks kept on purpose, since ROMs can observe them:
- 8xy6 / 8xyE shift Vy (not Vx) into Vx, VF takes the LSB of Vy.
- 8xy5 / 8xy7 report "no borrow" (VF=1) when the operands are equal.
- When an instruction writes both Vx and VF, VF is written last.

Fx0A (wait for key) does not block the host. The machine switches to
AWAITING_KEY with PC left on the Fx0A instruction; following steps only
poll the keypad until the awaited key is down, then move past it.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

from chip8vm.errors import (
    MachineError,
    MemoryBoundsError,
    ReservedMemoryAccessError,
    StackUnderflowError,
)
from .display import Framebuffer
from .keyboard import Keypad
from .memory import FONT_ADDRESS, FONT_GLYPH_SIZE, PROGRAM_START, Memory
from .opcodes import Instruction, Op, decode
from .timers import Timers

logger = logging.getLogger(__name__)


NUM_REGISTERS = 16
FLAG = 0xF


class MachineMode(Enum):
    """Execution mode checked at the start of every step."""
    RUNNING = auto()
    AWAITING_KEY = auto()


@dataclass
class CPUState:
    """
    Complete register state.

    All values stored as Python ints but represent:
    - v: sixteen 8-bit unsigned registers
    - i: 16-bit index register
    - pc: program counter
    - stack: return addresses, most recent last
    - mode / wait_register: key-wait bookkeeping for Fx0A
    """
    v: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)
    i: int = 0
    pc: int = PROGRAM_START
    stack: List[int] = field(default_factory=list)
    mode: MachineMode = MachineMode.RUNNING
    wait_register: Optional[int] = None


class CPU:
    """
    CHIP-8 interpreter core.

    The CPU owns no clock: the host calls step() once per instruction
    and decrements the timers on its own schedule.

    Example:
        >>> mem = Memory()
        >>> mem.load(bytes([0x68, 0x42]))  # LD V8, $42
        >>> cpu = CPU(mem, Framebuffer(), Keypad(), Timers())
        >>> instruction = cpu.step()
        >>> hex(cpu.v[8])
        '0x42'
    """

    def __init__(
        self,
        memory: Memory,
        framebuffer: Framebuffer,
        keypad: Keypad,
        timers: Timers,
        seed: Optional[int] = None,
    ):
        """
        Initialize CPU with its peripherals.

        Args:
            memory: 4 KB address space (font already installed)
            framebuffer: Display target for 00E0 / Dxyn
            keypad: Key state read by Ex9E / ExA1 / Fx0A
            timers: Delay and sound timers
            seed: Seed for the Cxnn random generator (None = system entropy)
        """
        self.memory = memory
        self.framebuffer = framebuffer
        self.keypad = keypad
        self.timers = timers
        self.state = CPUState()
        self._seed = seed
        self._rng = random.Random(seed)

        # Address of the instruction currently executing (for error reports)
        self._instruction_pc = PROGRAM_START

    # ========================================
    # Register Properties
    # ========================================

    @property
    def v(self) -> List[int]:
        """General purpose registers V0-VF."""
        return self.state.v

    @property
    def i(self) -> int:
        """Index register (16-bit)."""
        return self.state.i

    @i.setter
    def i(self, value: int) -> None:
        self.state.i = value & 0xFFFF

    @property
    def pc(self) -> int:
        """Program counter."""
        return self.state.pc

    @pc.setter
    def pc(self, value: int) -> None:
        self.state.pc = value & 0xFFFF

    @property
    def stack(self) -> List[int]:
        """Call stack, most recent return address last."""
        return self.state.stack

    @property
    def mode(self) -> MachineMode:
        """Current execution mode."""
        return self.state.mode

    @property
    def is_waiting_for_key(self) -> bool:
        """True while an Fx0A instruction is waiting for its key."""
        return self.state.mode is MachineMode.AWAITING_KEY

    def _set_v(self, index: int, value: int) -> None:
        self.state.v[index] = value & 0xFF

    # ========================================
    # Reset
    # ========================================

    def reset(self) -> None:
        """
        Reset registers to power-on state.

        Clears V0-VF and I, empties the stack, sets PC to $200 and leaves
        any key wait. The random generator restarts from its seed. Memory,
        framebuffer and timers are reset by their owners.
        """
        self.state = CPUState()
        self._rng = random.Random(self._seed)
        self._instruction_pc = PROGRAM_START

    # ========================================
    # Fetch / Step
    # ========================================

    def fetch(self) -> int:
        """
        Read the opcode at PC without advancing.

        Returns:
            16-bit opcode (big-endian)

        Raises:
            ReservedMemoryAccessError: If PC points below $200
            MemoryBoundsError: If the opcode would extend past $FFF
        """
        pc = self.pc
        if pc < PROGRAM_START:
            raise ReservedMemoryAccessError(pc)
        try:
            return self.memory.read_word(pc)
        except MemoryBoundsError as e:
            raise MemoryBoundsError(e.address, e.count, pc=pc) from e

    def step(self) -> Optional[Instruction]:
        """
        Execute exactly one instruction.

        While waiting for a key (Fx0A) no instruction is fetched; the step
        only checks the keypad and, once the key is down, moves PC past
        the waiting instruction.

        Returns:
            The executed Instruction, or None if the step only polled the
            keypad

        Raises:
            MachineError: On reserved-memory fetch, stack underflow or an
                out-of-range memory access. PC is left on the faulting
                instruction.
        """
        if self.state.mode is MachineMode.AWAITING_KEY:
            self._poll_key_wait()
            return None

        pc = self.pc
        instruction = decode(self.fetch())
        self._instruction_pc = pc
        self.pc = pc + 2

        # A faulting instruction leaves PC on itself
        try:
            self.execute(instruction)
        except MemoryBoundsError as e:
            self.pc = pc
            if e.pc is not None:
                raise
            raise MemoryBoundsError(e.address, e.count, pc=pc) from e
        except MachineError:
            self.pc = pc
            raise

        return instruction

    def _poll_key_wait(self) -> None:
        register = self.state.wait_register
        if not self.keypad.is_pressed(self.v[register]):
            return
        logger.debug(f"Key {self.v[register]:X} pressed, resuming at ${self.pc + 2:04X}")
        self.state.mode = MachineMode.RUNNING
        self.state.wait_register = None
        self.pc = self.pc + 2

    # ========================================
    # Execute
    # ========================================

    def execute(self, instruction: Instruction) -> None:
        """
        Apply one decoded instruction.

        PC must already point past the instruction.

        Args:
            instruction: Decoded instruction
        """
        x = instruction.x
        y = instruction.y
        v = self.state.v

        match instruction.op:
            # ============================================
            # Flow control
            # ============================================
            case Op.CLS:
                self.framebuffer.clear()
            case Op.RET:
                if not self.state.stack:
                    raise StackUnderflowError(pc=self._instruction_pc)
                self.pc = self.state.stack.pop()
            case Op.SYS:
                pass  # Machine-code call, not supported by interpreters
            case Op.JP:
                self.pc = instruction.nnn
            case Op.CALL:
                self.state.stack.append(self.pc)
                self.pc = instruction.nnn
            case Op.JP_V0:
                self.pc = instruction.nnn + v[0]

            # ============================================
            # Conditional skips
            # ============================================
            case Op.SE_BYTE:
                self._skip_if(v[x] == instruction.nn)
            case Op.SNE_BYTE:
                self._skip_if(v[x] != instruction.nn)
            case Op.SE_REG:
                self._skip_if(v[x] == v[y])
            case Op.SNE_REG:
                self._skip_if(v[x] != v[y])
            case Op.SKP:
                self._skip_if(self.keypad.is_pressed(v[x]))
            case Op.SKNP:
                self._skip_if(not self.keypad.is_pressed(v[x]))

            # ============================================
            # Loads and arithmetic
            # ============================================
            case Op.LD_BYTE:
                self._set_v(x, instruction.nn)
            case Op.ADD_BYTE:
                self._set_v(x, v[x] + instruction.nn)
            case Op.LD_REG:
                self._set_v(x, v[y])
            case Op.OR:
                self._set_v(x, v[x] | v[y])
            case Op.AND:
                self._set_v(x, v[x] & v[y])
            case Op.XOR:
                self._set_v(x, v[x] ^ v[y])
            case Op.ADD_REG:
                total = v[x] + v[y]
                self._set_v(x, total)
                self._set_v(FLAG, 1 if total > 0xFF else 0)
            case Op.SUB:
                no_borrow = v[x] >= v[y]
                self._set_v(x, v[x] - v[y])
                self._set_v(FLAG, 1 if no_borrow else 0)
            case Op.SUBN:
                no_borrow = v[y] >= v[x]
                self._set_v(x, v[y] - v[x])
                self._set_v(FLAG, 1 if no_borrow else 0)
            case Op.SHR:
                source = v[y]
                self._set_v(x, source >> 1)
                self._set_v(FLAG, source & 0x01)
            case Op.SHL:
                source = v[y]
                self._set_v(x, source << 1)
                self._set_v(FLAG, source & 0x01)
            case Op.RND:
                self._set_v(x, self._rng.randint(0, 0xFF) & instruction.nn)

            # ============================================
            # Index register and memory
            # ============================================
            case Op.LD_I:
                self.i = instruction.nnn
            case Op.ADD_I:
                self.i = self.i + v[x]
            case Op.LD_F:
                self.i = FONT_ADDRESS + (v[x] & 0x0F) * FONT_GLYPH_SIZE
            case Op.LD_B:
                value = v[x]
                self.memory.write_block(self.i, (value // 100, (value // 10) % 10, value % 10))
            case Op.LD_I_VX:
                self.memory.write_block(self.i, v[:x + 1])
            case Op.LD_VX_I:
                for index, value in enumerate(self.memory.read_block(self.i, x + 1)):
                    self._set_v(index, value)

            # ============================================
            # Display
            # ============================================
            case Op.DRW:
                rows = self.memory.read_block(self.i, instruction.n)
                origin_x, origin_y = v[x], v[y]
                self._set_v(FLAG, 0)
                if self.framebuffer.draw_sprite(origin_x, origin_y, rows):
                    self._set_v(FLAG, 1)

            # ============================================
            # Timers and keypad
            # ============================================
            case Op.LD_VX_DT:
                self._set_v(x, self.timers.delay)
            case Op.LD_DT_VX:
                self.timers.delay = v[x]
            case Op.LD_ST_VX:
                self.timers.sound = v[x]
            case Op.LD_VX_K:
                if not self.keypad.is_pressed(v[x]):
                    self.pc = self._instruction_pc
                    self.state.mode = MachineMode.AWAITING_KEY
                    self.state.wait_register = x
                    logger.debug(f"Waiting for key {v[x]:X} at ${self.pc:04X}")

            case _:
                logger.debug(
                    f"Ignoring unknown opcode ${instruction.opcode:04X} "
                    f"at ${self._instruction_pc:04X}"
                )

    def _skip_if(self, condition: bool) -> None:
        if condition:
            self.pc = self.pc + 2

    # ========================================
    # Inspection
    # ========================================

    def get_registers(self) -> dict:
        """
        Get register values as a dictionary.

        Returns:
            Dictionary with keys v0-vf, i, pc, sp (stack depth)
        """
        registers = {f"v{index:x}": value for index, value in enumerate(self.state.v)}
        registers["i"] = self.i
        registers["pc"] = self.pc
        registers["sp"] = len(self.state.stack)
        return registers
