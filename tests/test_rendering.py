"""Tests for display rendering helpers."""

import numpy as np
import pytest
from PIL import Image

from chip8vm import create_state, execute, framebuffer
from chip8vm.rendering import (
    chip8_display_to_rgb, create_color_scheme, save_png,
)


@pytest.fixture
def glyph_display(fresh_state):
    """Display with font glyph 0 drawn at the origin."""
    state = execute(fresh_state, 0xF029)
    return framebuffer(execute(state, 0xD005))


class TestDisplayToRGB:
    """Test framebuffer colour conversion."""

    def test_shape_and_colors(self, glyph_display):
        rgb = chip8_display_to_rgb(glyph_display, scale=1)

        assert rgb.shape == (32, 64, 3)
        assert rgb.dtype == np.uint8
        assert tuple(rgb[0, 0]) == (255, 255, 255)
        assert tuple(rgb[2, 1]) == (0, 0, 0)

    def test_scaling(self, glyph_display):
        rgb = chip8_display_to_rgb(glyph_display, scale=4)

        assert rgb.shape == (128, 256, 3)
        assert (rgb[:4, :4] == 255).all()

    def test_custom_colors(self, glyph_display):
        on, off = create_color_scheme("amber")
        rgb = chip8_display_to_rgb(glyph_display, 1, on, off)

        assert tuple(rgb[0, 0]) == on
        assert tuple(rgb[31, 63]) == off

    def test_unknown_scheme(self):
        with pytest.raises(ValueError):
            create_color_scheme("plasma")


class TestSavePNG:
    """Test PNG export."""

    def test_save_png(self, glyph_display, tmp_path):
        path = tmp_path / "frame.png"
        save_png(glyph_display, path, scale=2)

        with Image.open(path) as image:
            assert image.size == (128, 64)
            assert image.getpixel((0, 0)) == (255, 255, 255)
