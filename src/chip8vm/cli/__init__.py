"""
CHIP-8 VM Command-Line Interface
================================

This package provides command-line tools for chip8vm:

- **chip8run**: Run a ROM headless and capture the display

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["chip8run"]
