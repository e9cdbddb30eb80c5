#!/usr/bin/env python3
"""
CHIP-8 Emulator Demo
====================

This script demonstrates how to use the chip8vm emulator to:
1. Create an emulator with a fixed configuration
2. Load a program
3. Run until the program waits for a key
4. Take screenshots
5. Press a key and keep running

Usage:
    python examples/emulator_demo.py

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from pathlib import Path

from chip8vm.emulator import BreakReason, Emulator, EmulatorConfig


# Prints 254 as three hex-font digits, waits for key 0 (physical X),
# then clears the screen and spins.
DEMO_PROGRAM = bytes([
    0x62, 0xFE,  # $200  LD V2, 254
    0xA3, 0x00,  # $202  LD I, $300
    0xF2, 0x33,  # $204  LD B, V2
    0xF2, 0x65,  # $206  LD V2, [I]     V0..V2 = 2, 5, 4
    0x63, 0x00,  # $208  LD V3, 0       x
    0x64, 0x00,  # $20A  LD V4, 0       y
    0xF0, 0x29,  # $20C  LD F, V0
    0xD3, 0x45,  # $20E  DRW V3, V4, 5
    0x73, 0x05,  # $210  ADD V3, 5
    0xF1, 0x29,  # $212  LD F, V1
    0xD3, 0x45,  # $214  DRW V3, V4, 5
    0x73, 0x05,  # $216  ADD V3, 5
    0xF2, 0x29,  # $218  LD F, V2
    0xD3, 0x45,  # $21A  DRW V3, V4, 5
    0xF5, 0x0A,  # $21C  LD V5, K       V5 = 0
    0x00, 0xE0,  # $21E  CLS
    0x12, 0x20,  # $220  JP $220
])


def main():
    output_dir = Path("trash")
    output_dir.mkdir(exist_ok=True)

    # ==========================================================================
    # 1. Create an emulator instance
    # ==========================================================================
    # instructions_per_second and timer_hz only matter for run_frame();
    # the seed makes Cxnn reproducible.

    print("Creating CHIP-8 emulator...")
    emu = Emulator(EmulatorConfig(instructions_per_second=700, seed=42))
    print(f"  {emu}")
    print(f"  Instructions per frame: {emu.config.instructions_per_frame}")

    # ==========================================================================
    # 2. Load a program
    # ==========================================================================
    # load_rom(path) reads a .ch8 file; load_bytes() takes raw bytes.

    emu.load_bytes(DEMO_PROGRAM)
    print(f"\nLoaded {emu.memory.program_size} bytes at $200")

    # ==========================================================================
    # 3. Run until the program blocks
    # ==========================================================================

    event = emu.run(max_steps=1_000)
    print(f"\nStopped: {event} after {event.steps} steps")
    assert event.reason == BreakReason.KEY_WAIT

    for line in emu.display_lines[:6]:
        print(f"  {line[:20]}")

    # ==========================================================================
    # 4. Take a screenshot
    # ==========================================================================

    (output_dir / "demo_chip8.png").write_bytes(emu.render_display(scale=10))
    print("\nSaved demo_chip8.png")

    # ==========================================================================
    # 5. Press a key and continue
    # ==========================================================================
    # Host layout:  1 2 3 4 / Q W E R / A S D F / Z X C V
    # X is logical key 0.

    emu.press_key("X")
    emu.run(max_steps=10)
    emu.release_key("X")

    print(f"\nAfter key press: {emu}")
    print(f"  Screen blank: {not any(emu.display_pixels)}")

    regs = emu.registers
    print(f"  V0-V2: {regs['v0']} {regs['v1']} {regs['v2']}  I=${regs['i']:04X}")


if __name__ == "__main__":
    main()
