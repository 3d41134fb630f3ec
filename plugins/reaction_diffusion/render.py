"""
Field -> RGB rendering

Reads a (2, H, W) state snapshot and produces a display image. The shade
is a soft threshold on A - B, which is ~1 on bare substrate and drops
toward 0 (or below) inside the pattern:

    shade = 1 - smoothstep(threshold - delta, threshold + delta, A - B)

Grid row 0 is the bottom of the picture, so the image is flipped
vertically before display.
"""

import numpy as np
from scipy.ndimage import gaussian_filter

from .brush import smoothstep
from .colormaps import apply_colormap, get_colormap


def shade(state, threshold=0.7, delta=0.05):
    """Pattern intensity in [0, 1] for each cell."""
    diff = state[0] - state[1]
    return 1.0 - smoothstep(threshold - delta, threshold + delta, diff)


def apply_bloom(rgb, sigma=12, intensity=0.4):
    """Colored glow halo via 4x downsample-blur-upsample additive blend."""
    h, w = rgb.shape[:2]
    factor = 4
    small = rgb[::factor, ::factor, :].astype(np.float32)
    small_sigma = max(1.0, sigma / factor)
    glow = gaussian_filter(small, [small_sigma, small_sigma, 0])
    glow = np.repeat(np.repeat(glow, factor, axis=0), factor, axis=1)[:h, :w, :]

    result = rgb.astype(np.float32) + glow * intensity
    np.clip(result, 0, 255, out=result)
    return result.astype(np.uint8)


class Renderer:
    """Turns simulator snapshots into (H, W, 3) uint8 images."""

    def __init__(self, palette="bioluminescent", threshold=0.7, delta=0.05, bloom=0.0):
        self.palette = palette
        self.lut = get_colormap(palette)
        self.threshold = threshold
        self.delta = delta
        self.bloom = bloom

    def set_palette(self, name):
        self.lut = get_colormap(name)
        self.palette = name

    def render(self, state):
        """RGB image, top row first."""
        values = shade(state, self.threshold, self.delta)
        rgb = apply_colormap(np.flipud(values), self.lut)
        if self.bloom > 0:
            rgb = apply_bloom(rgb, intensity=self.bloom)
        return rgb
