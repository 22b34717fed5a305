"""Read-only host access to the display buffer."""

import numpy as np
from chip8vm.state import EmulatorState
from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT


def pixel_at(state: EmulatorState, x: int, y: int) -> bool:
    """Pixel at column ``x``, row ``y``; coordinates are not wrapped."""
    if not (0 <= x < SCREEN_WIDTH and 0 <= y < SCREEN_HEIGHT):
        raise ValueError(
            f"Pixel ({x}, {y}) is outside the {SCREEN_WIDTH}x{SCREEN_HEIGHT} display"
        )
    return bool(state.display[y, x])


def framebuffer(state: EmulatorState) -> np.ndarray:
    """Snapshot of the display as a (32, 64) boolean numpy array, row-major."""
    return np.array(state.display, dtype=np.bool_)
