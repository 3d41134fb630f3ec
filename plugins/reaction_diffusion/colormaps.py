"""
Colormaps for Reaction-Diffusion Display

Maps shade values [0, 1] (0 = bare substrate, 1 = pattern) to RGB. Each
colormap is a (256, 3) uint8 lookup table.
"""

import numpy as np


def _interpolate_colors(stops, n=256):
    """
    Build a colormap by smoothstep-interpolating between color stops.

    Args:
        stops: List of (position, (r, g, b)) where position is [0, 1]
        n: Number of entries in the LUT
    """
    positions = np.array([s[0] for s in stops], dtype=np.float64)
    colors = np.array([s[1] for s in stops], dtype=np.float64)
    t = np.linspace(0.0, 1.0, n)

    # Segment index for each entry, then eased fraction within the segment
    seg = np.clip(np.searchsorted(positions, t, side="right") - 1, 0, len(stops) - 2)
    span = positions[seg + 1] - positions[seg]
    frac = np.where(span > 0, (t - positions[seg]) / np.where(span > 0, span, 1.0), 0.0)
    frac = np.clip(frac, 0.0, 1.0)
    frac = frac * frac * (3 - 2 * frac)

    lut = colors[seg] + frac[:, None] * (colors[seg + 1] - colors[seg])
    return lut.astype(np.uint8)


# --- Colormap Definitions ---

def ink():
    """Dark ink on warm paper."""
    return _interpolate_colors([
        (0.00, (242, 236, 222)),
        (0.40, (180, 170, 155)),
        (0.75, (60, 55, 60)),
        (1.00, (15, 12, 20)),
    ])


def bioluminescent():
    """Deep navy background, cyan bodies, white-hot cores."""
    return _interpolate_colors([
        (0.00, (2, 4, 16)),
        (0.30, (5, 40, 90)),
        (0.60, (20, 170, 200)),
        (0.85, (150, 240, 230)),
        (1.00, (250, 255, 255)),
    ])


def ember():
    """Black through red to yellow-white."""
    return _interpolate_colors([
        (0.00, (0, 0, 0)),
        (0.30, (90, 10, 0)),
        (0.60, (220, 70, 10)),
        (0.85, (255, 190, 60)),
        (1.00, (255, 250, 210)),
    ])


def mono():
    """Plain grayscale."""
    return _interpolate_colors([
        (0.00, (0, 0, 0)),
        (1.00, (255, 255, 255)),
    ])


# Registry of all colormaps
COLORMAPS = {
    "ink": ink,
    "bioluminescent": bioluminescent,
    "ember": ember,
    "mono": mono,
}

COLORMAP_ORDER = list(COLORMAPS.keys())


def get_colormap(name):
    """Get a colormap LUT (256, 3) uint8 array by name."""
    if name not in COLORMAPS:
        raise ValueError(f"Unknown colormap: {name!r}. Available: {COLORMAP_ORDER}")
    return COLORMAPS[name]()


def apply_colormap(field, lut):
    """
    Apply a colormap LUT to a 2D float field.

    Args:
        field: 2D numpy array with values in [0, 1]
        lut: (256, 3) uint8 colormap lookup table

    Returns:
        (H, W, 3) uint8 RGB image
    """
    indices = (np.clip(field, 0, 1) * 255).astype(np.uint8)
    return lut[indices]
