"""
Framebuffer and Sprite Engine
=============================

The CHIP-8 display is a 64x32 monochrome pixel grid stored row-major
(index = x + y * 64). Only two instructions touch it:

- 00E0 clears every pixel
- Dxyn XORs an 8-pixel-wide, n-row sprite into it

Sprite drawing
--------------
The sprite origin wraps (x mod 64, y mod 32), but the sprite body does
not: rows and columns that would run past the bottom or right edge are
clipped. Each set bit in the sprite toggles its pixel; turning a lit
pixel off is a collision, reported to the caller so the CPU can set VF.
Unset sprite bits never change the framebuffer.

Host queries (get_pixel, get_text, render_image) are read-only.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from pathlib import Path
from typing import List, Sequence, Union


WIDTH = 64
HEIGHT = 32
SPRITE_WIDTH = 8


class Framebuffer:
    """
    64x32 monochrome framebuffer.

    Example:
        >>> fb = Framebuffer()
        >>> fb.draw_sprite(0, 0, bytes([0x80]))
        False
        >>> fb.get_pixel(0, 0)
        True
        >>> fb.draw_sprite(0, 0, bytes([0x80]))
        True
    """

    def __init__(self, width: int = WIDTH, height: int = HEIGHT):
        self._width = width
        self._height = height
        self._pixels: List[bool] = [False] * (width * height)

    @property
    def width(self) -> int:
        """Width in pixels."""
        return self._width

    @property
    def height(self) -> int:
        """Height in pixels."""
        return self._height

    @property
    def pixels(self) -> tuple:
        """All pixels, row-major (index = x + y * width)."""
        return tuple(self._pixels)

    def get_pixel(self, x: int, y: int) -> bool:
        """
        Get a single pixel.

        Raises:
            IndexError: If (x, y) is outside the framebuffer
        """
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self._width}x{self._height} framebuffer")
        return self._pixels[x + y * self._width]

    # =========================================================================
    # Instruction-side API
    # =========================================================================

    def clear(self) -> None:
        """Turn every pixel off."""
        self._pixels = [False] * (self._width * self._height)

    def draw_sprite(self, x: int, y: int, rows: Sequence[int]) -> bool:
        """
        XOR a sprite into the framebuffer.

        Args:
            x: Origin column (wrapped modulo width)
            y: Origin row (wrapped modulo height)
            rows: Sprite data, one byte per row, MSB is the leftmost pixel

        Returns:
            True if any lit pixel was turned off (collision)
        """
        origin_x = x % self._width
        origin_y = y % self._height

        # Clip rather than wrap the sprite body
        visible_rows = min(len(rows), self._height - origin_y)
        visible_cols = min(SPRITE_WIDTH, self._width - origin_x)

        collision = False
        for row in range(visible_rows):
            sprite_byte = rows[row]
            if not sprite_byte:
                continue
            base = (origin_y + row) * self._width + origin_x
            for col in range(visible_cols):
                if sprite_byte & (0x80 >> col):
                    index = base + col
                    if self._pixels[index]:
                        collision = True
                    self._pixels[index] = not self._pixels[index]

        return collision

    # =========================================================================
    # Rendering (for host display)
    # =========================================================================

    def get_text_grid(self, on: str = "#", off: str = ".") -> List[str]:
        """
        Get the framebuffer as text, one string per pixel row.

        Args:
            on: Character for lit pixels
            off: Character for dark pixels
        """
        return [
            "".join(
                on if self._pixels[y * self._width + x] else off
                for x in range(self._width)
            )
            for y in range(self._height)
        ]

    def get_text(self, on: str = "#", off: str = ".") -> str:
        """Get the framebuffer as newline-separated text."""
        return "\n".join(self.get_text_grid(on, off))

    def render_image(
        self,
        scale: int = 8,
        ink_color: tuple = (255, 255, 255),
        paper_color: tuple = (0, 0, 0),
    ) -> bytes:
        """
        Render the framebuffer as a PNG image.

        Args:
            scale: Pixel scale factor (default 8, giving 512x256)
            ink_color: RGB tuple for lit pixels
            paper_color: RGB tuple for dark pixels

        Returns:
            PNG image bytes

        Raises:
            ValueError: If scale is less than 1
        """
        from PIL import Image
        import io

        if scale < 1:
            raise ValueError(f"Scale must be at least 1, got {scale}")

        img = Image.new("RGB", (self._width, self._height), color=paper_color)
        img.putdata([ink_color if lit else paper_color for lit in self._pixels])
        if scale != 1:
            img = img.resize(
                (self._width * scale, self._height * scale),
                Image.Resampling.NEAREST,
            )

        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        return buffer.getvalue()

    def render_to_file(self, path: Union[str, Path], scale: int = 8) -> int:
        """
        Write the framebuffer as a PNG file.

        Returns:
            Number of bytes written
        """
        data = self.render_image(scale=scale)
        Path(path).write_bytes(data)
        return len(data)
