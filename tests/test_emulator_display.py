"""
Framebuffer Unit Tests
======================

Tests for the 64x32 framebuffer, sprite XOR drawing, text output and
PNG rendering.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import io

import pytest
from PIL import Image

from chip8vm.emulator import HEIGHT, WIDTH, Framebuffer


@pytest.fixture
def fb():
    """Create a blank framebuffer."""
    return Framebuffer()


# =============================================================================
# Basic State Tests
# =============================================================================

class TestFramebufferState:
    """Test dimensions and pixel access."""

    def test_dimensions(self, fb):
        """Framebuffer is 64x32."""
        assert (WIDTH, HEIGHT) == (64, 32)
        assert fb.width == 64
        assert fb.height == 32
        assert len(fb.pixels) == 64 * 32

    def test_starts_blank(self, fb):
        """All pixels start off."""
        assert not any(fb.pixels)

    def test_get_pixel_out_of_range(self, fb):
        """Host queries outside the screen raise IndexError."""
        with pytest.raises(IndexError):
            fb.get_pixel(64, 0)
        with pytest.raises(IndexError):
            fb.get_pixel(0, 32)

    def test_pixels_row_major(self, fb):
        """pixels is indexed x + y * 64."""
        fb.draw_sprite(3, 2, [0x80])
        assert fb.pixels[3 + 2 * 64]

    def test_clear(self, fb):
        """clear() turns every pixel off."""
        fb.draw_sprite(0, 0, [0xFF, 0xFF])
        fb.clear()
        assert not any(fb.pixels)


# =============================================================================
# Sprite Tests
# =============================================================================

class TestSprites:
    """Test XOR sprite drawing."""

    def test_draw_no_collision(self, fb):
        """Drawing on a blank screen reports no collision."""
        assert fb.draw_sprite(0, 0, [0xF0]) is False
        assert [fb.get_pixel(x, 0) for x in range(8)] == [True] * 4 + [False] * 4

    def test_draw_collision(self, fb):
        """Turning a lit pixel off is a collision."""
        fb.draw_sprite(0, 0, [0x80])
        assert fb.draw_sprite(0, 0, [0x80]) is True
        assert not fb.get_pixel(0, 0)

    def test_unset_bits_ignored(self, fb):
        """Zero bits leave pixels unchanged."""
        fb.draw_sprite(1, 0, [0x80])
        assert fb.draw_sprite(0, 0, [0x00, 0x00]) is False
        assert fb.get_pixel(1, 0)

    def test_partial_overlap(self, fb):
        """Only overlapping bits collide, the rest are drawn."""
        fb.draw_sprite(0, 0, [0b11000000])
        assert fb.draw_sprite(0, 0, [0b01100000]) is True
        assert [fb.get_pixel(x, 0) for x in range(3)] == [True, False, True]

    def test_origin_wraps(self, fb):
        """The origin wraps modulo the screen size."""
        fb.draw_sprite(64 + 10, 32 + 4, [0x80])
        assert fb.get_pixel(10, 4)

    def test_clip_right(self, fb):
        """Columns past the right edge are dropped."""
        fb.draw_sprite(60, 0, [0xFF])
        assert sum(fb.pixels) == 4
        assert not fb.get_pixel(0, 0)

    def test_clip_bottom(self, fb):
        """Rows past the bottom edge are dropped."""
        fb.draw_sprite(0, 30, [0x80] * 5)
        assert fb.get_pixel(0, 30)
        assert fb.get_pixel(0, 31)
        assert sum(fb.pixels) == 2

    def test_full_height_sprite(self, fb):
        """A 15-row sprite draws 15 rows."""
        fb.draw_sprite(0, 0, [0x80] * 15)
        assert [fb.get_pixel(0, y) for y in range(16)] == [True] * 15 + [False]


# =============================================================================
# Rendering Tests
# =============================================================================

class TestRendering:
    """Test text and image output."""

    def test_text_grid(self, fb):
        """Text rows use '#' and '.'."""
        fb.draw_sprite(0, 0, [0b10100000])
        lines = fb.get_text_grid()
        assert len(lines) == 32
        assert lines[0] == "#.#" + "." * 61
        assert lines[1] == "." * 64

    def test_text_custom_chars(self, fb):
        """Custom characters can be used."""
        fb.draw_sprite(0, 0, [0x80])
        assert fb.get_text_grid(on="X", off=" ")[0].startswith("X ")

    def test_text(self, fb):
        """get_text() joins rows with newlines."""
        text = fb.get_text()
        assert text.count("\n") == 31

    def test_render_png(self, fb):
        """render_image() produces a PNG."""
        data = fb.render_image()
        assert data[:4] == b"\x89PNG"

    def test_render_size(self, fb):
        """Image size is the screen size times scale."""
        img = Image.open(io.BytesIO(fb.render_image(scale=4)))
        assert img.size == (256, 128)

    def test_render_colors(self, fb):
        """Lit pixels use ink, dark pixels use paper."""
        fb.draw_sprite(0, 0, [0x80])
        img = Image.open(io.BytesIO(fb.render_image(scale=1))).convert("RGB")
        assert img.getpixel((0, 0)) == (255, 255, 255)
        assert img.getpixel((1, 0)) == (0, 0, 0)

    def test_render_bad_scale(self, fb):
        """Scale must be at least 1."""
        with pytest.raises(ValueError):
            fb.render_image(scale=0)

    def test_render_to_file(self, fb, tmp_path):
        """render_to_file() writes PNG bytes to disk."""
        path = tmp_path / "screen.png"
        written = fb.render_to_file(path, scale=2)
        assert path.read_bytes()[:4] == b"\x89PNG"
        assert written == path.stat().st_size
