"""CHIP-8 rendering utilities for visualization.

These helpers sit on the renderer side of the display buffer: they only read
display snapshots and never touch machine state.
"""

import os
from typing import Tuple, Union

import jax.numpy as jnp
import numpy as np
from PIL import Image


def chip8_display_to_rgb(
    display: jnp.ndarray,
    scale: int = 8,
    on_color: Tuple[int, int, int] = (255, 255, 255),
    off_color: Tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Convert CHIP-8 boolean display to RGB array with optional upscaling.

    Args:
        display: Boolean array of shape (32, 64), row-major
        scale: Upscaling factor for better visibility (default: 8x)
        on_color: RGB color for "on" pixels (default: white)
        off_color: RGB color for "off" pixels (default: black)

    Returns:
        RGB array of shape (height*scale, width*scale, 3) with uint8 values
    """
    pixels = np.array(display, dtype=np.bool_)
    height, width = pixels.shape

    rgb_frame = np.zeros((height, width, 3), dtype=np.uint8)

    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    # Nearest neighbour upscaling
    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


def create_color_scheme(
    scheme: str = "classic",
) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Get predefined color schemes for CHIP-8 rendering.

    Args:
        scheme: Color scheme name ("classic", "green", "amber", "blue", "retro")

    Returns:
        Tuple of (on_color, off_color) as RGB tuples
    """
    schemes = {
        "classic": ((255, 255, 255), (0, 0, 0)),  # White on black
        "green": ((0, 255, 0), (0, 0, 0)),  # Green on black
        "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
        "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
        "retro": ((255, 255, 0), (64, 0, 64)),  # Yellow on purple
    }

    if scheme not in schemes:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(schemes.keys())}"
        )

    return schemes[scheme]


def save_png(
    display: jnp.ndarray,
    filename: Union[str, os.PathLike],
    scale: int = 8,
    color_scheme: str = "classic",
) -> None:
    """Write one display snapshot to a PNG file."""
    on_color, off_color = create_color_scheme(color_scheme)
    frame = chip8_display_to_rgb(display, scale, on_color, off_color)
    Image.fromarray(frame).save(filename)
