"""Turn CHIP-8 display buffers into pictures.

Display buffers are boolean arrays indexed ``[x, y]`` with shape
(SCREEN_WIDTH, SCREEN_HEIGHT); images come out row-major, (height, width, 3).
"""

from typing import Tuple

import cv2
import numpy as np

from chipax.constants import SCREEN_WIDTH, SCREEN_HEIGHT

Color = Tuple[int, int, int]

COLOR_SCHEMES = {
    "classic": ((0, 255, 0), (0, 0, 0)),
    "amber": ((255, 176, 0), (0, 0, 0)),
    "white": ((255, 255, 255), (0, 0, 0)),
    "blue": ((0, 255, 255), (0, 0, 64)),
    "octo": ((255, 204, 0), (153, 102, 0)),
}

# Fraction of a pixel's brightness left one frame after it turns off
PHOSPHOR_DECAY = 0.8


def create_color_scheme(scheme: str = "classic") -> Tuple[Color, Color]:
    """(on_color, off_color) RGB pair of a named scheme."""
    if scheme not in COLOR_SCHEMES:
        raise ValueError(f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES)}")
    return COLOR_SCHEMES[scheme]


def _shade(intensity: np.ndarray, scale: int, on_color: Color, off_color: Color) -> np.ndarray:
    """Blend off->on colors by a (width, height) intensity in [0, 1] and upscale."""
    on_color = np.asarray(on_color, dtype=np.float32)
    off_color = np.asarray(off_color, dtype=np.float32)
    rows = intensity.T[..., None]
    image = np.rint(off_color + rows * (on_color - off_color)).astype(np.uint8)
    if scale > 1:
        image = image.repeat(scale, axis=0).repeat(scale, axis=1)
    return image


def chip8_display_to_rgb(
    display,
    scale: int = 8,
    on_color: Color = COLOR_SCHEMES["classic"][0],
    off_color: Color = COLOR_SCHEMES["classic"][1],
) -> np.ndarray:
    """RGB image of shape (32 * scale, 64 * scale, 3) for one display buffer."""
    pixels = np.asarray(display, dtype=np.float32)
    return _shade(pixels, scale, on_color, off_color)


def create_video(
    frames,
    filename: str = None,
    fps: float = 60.0,
    scale: int = 8,
    color_scheme: str = "classic",
    persistence: bool = True,
) -> None:
    """Write a stack of display buffers, e.g. from ``run_ticks``, to an MP4 file.

    With ``persistence`` pixels that turn off fade out over a few frames like a
    phosphor screen, which hides the flicker of XOR-drawn sprites.
    """
    if filename is None:
        return
    frames = np.asarray(frames, dtype=bool)
    if frames.ndim != 3 or frames.shape[1:] != (SCREEN_WIDTH, SCREEN_HEIGHT):
        raise ValueError(
            f"Expected frames of shape (N, {SCREEN_WIDTH}, {SCREEN_HEIGHT}), got {frames.shape}"
        )

    on_color, off_color = create_color_scheme(color_scheme)
    size = (SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale)
    writer = cv2.VideoWriter(filename, cv2.VideoWriter_fourcc(*"mp4v"), fps, size)

    glow = np.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=np.float32)
    try:
        for frame in frames:
            if persistence:
                glow = np.maximum(glow * PHOSPHOR_DECAY, frame)
            else:
                glow = frame.astype(np.float32)
            image = _shade(glow, scale, on_color, off_color)
            writer.write(cv2.cvtColor(image, cv2.COLOR_RGB2BGR))
    finally:
        writer.release()
