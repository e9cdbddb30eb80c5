"""
chip8run - Headless CHIP-8 Runner
=================================

This module implements a command-line host for the interpreter. It loads
a ROM, runs it for a number of 60 Hz frames without opening a window, and
then writes the display as a PNG image or prints it as text.

Usage Examples
--------------
Run for one second and print the display:
    $ chip8run ibm_logo.ch8

Run for five seconds and save a screenshot:
    $ chip8run pong.ch8 --frames 300 -o pong.png --scale 10

Hold keys (host layout 1234/QWER/ASDF/ZXCV) during the run:
    $ chip8run breakout.ch8 --key Q --key E --frames 600 --text

Reproducible random numbers:
    $ chip8run maze.ch8 --seed 42

Defaults for --ips, --timer-hz and --seed can also be set through the
CHIP8_IPS, CHIP8_TIMER_HZ and CHIP8_SEED environment variables.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from chip8vm import __version__
from chip8vm.cli.errors import ExitCode, handle_cli_exception
from chip8vm.emulator import Emulator, EmulatorConfig, KEY_MAP

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def validate_keys(ctx, param, value: Tuple[str, ...]) -> Tuple[str, ...]:
    """Click callback rejecting key names that are not on the keypad."""
    for key in value:
        if key.upper() not in KEY_MAP:
            valid = " ".join(KEY_MAP)
            raise click.BadParameter(f"'{key}' is not a keypad key (valid: {valid})")
    return value


def build_config(
    ips: Optional[int],
    timer_hz: Optional[int],
    seed: Optional[int],
) -> EmulatorConfig:
    """
    Merge command-line options over the environment configuration.

    Raises:
        click.BadParameter: If a rate is not positive
    """
    base = EmulatorConfig.from_env()
    try:
        return EmulatorConfig(
            instructions_per_second=ips if ips is not None else base.instructions_per_second,
            timer_hz=timer_hz if timer_hz is not None else base.timer_hz,
            seed=seed if seed is not None else base.seed,
        )
    except ValueError as e:
        raise click.BadParameter(str(e))


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "rom_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-f", "--frames",
    type=click.IntRange(min=0),
    default=60,
    show_default=True,
    help="Number of frames (one timer tick each)",
)
@click.option(
    "--ips",
    type=int,
    default=None,
    help="Instructions per second (default: 700)",
)
@click.option(
    "--timer-hz",
    type=int,
    default=None,
    help="Timer decrement rate in Hz (default: 60)",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Seed for the random number instruction",
)
@click.option(
    "-k", "--key",
    "keys",
    multiple=True,
    callback=validate_keys,
    help="Host key to hold down for the whole run (repeatable)",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the final display as PNG",
)
@click.option(
    "--scale",
    type=click.IntRange(min=1),
    default=8,
    show_default=True,
    help="Pixel scale factor for PNG output",
)
@click.option(
    "--text",
    "show_text",
    is_flag=True,
    help="Print the final display as text (default when no --output)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="chip8run")
def main(
    rom_file: Path,
    frames: int,
    ips: Optional[int],
    timer_hz: Optional[int],
    seed: Optional[int],
    keys: Tuple[str, ...],
    output: Optional[Path],
    scale: int,
    show_text: bool,
    verbose: bool,
) -> None:
    """
    Run a CHIP-8 ROM headless and capture the display.

    ROM_FILE is a raw CHIP-8 program image (loaded at $200).

    Examples:

        # Run for one second, print the display
        chip8run ibm_logo.ch8

        # Run for five seconds with Q held, save a PNG
        chip8run pong.ch8 -f 300 -k Q -o pong.png
    """
    setup_logging(verbose)

    try:
        config = build_config(ips, timer_hz, seed)

        emu = Emulator(config)
        emu.load_rom(rom_file)

        for key in keys:
            logger.debug(f"Holding key {key.upper()}")
            emu.press_key(key)

        if verbose:
            click.echo(f"ROM: {rom_file} ({emu.memory.program_size} bytes)", err=True)
            click.echo(
                f"Rate: {config.instructions_per_second} ips, "
                f"{config.instructions_per_frame} instructions/frame",
                err=True,
            )

        steps = emu.run_frames(frames)

        if verbose:
            regs = emu.registers
            click.echo(f"Executed {steps} steps in {frames} frames", err=True)
            click.echo(
                f"PC=${regs['pc']:04X} I=${regs['i']:04X} "
                f"DT={regs['dt']} ST={regs['st']} mode={emu.cpu.mode.name}",
                err=True,
            )

        if output:
            written = emu.framebuffer.render_to_file(output, scale=scale)
            if verbose:
                click.echo(f"Output written to: {output} ({written} bytes)", err=True)

        if show_text or not output:
            click.echo(emu.display_text)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Run")

    sys.exit(ExitCode.SUCCESS)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
