"""
Pointer Brush

Small state machine for the interactive brush:

    Inactive --press--> Active --move--> Active --release/leave--> Inactive

Positions are normalized grid coordinates in [0, 1] x [0, 1] with y
growing upward (see grid.py). normalize_pointer() converts window pixels,
where y grows downward, into that convention.

The step kernel reads `active` and `influence(shape)` every step. Input
events may land between steps of a frame; the latest position wins.
"""

import numpy as np

from .grid import normalized_distance


def smoothstep(edge0, edge1, x):
    """GLSL-style smoothstep over numpy arrays."""
    t = np.clip((x - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def normalize_pointer(px, py, width, height, flip_y=True):
    """Window pixel position -> normalized grid position.

    Args:
        px, py: Pointer position in pixels relative to the canvas origin
        width, height: Canvas size in pixels
        flip_y: Invert y (window y grows down, grid y grows up)

    Returns:
        (x, y) clipped to [0, 1]
    """
    x = px / float(width)
    y = py / float(height)
    if flip_y:
        y = 1.0 - y
    return (min(1.0, max(0.0, x)), min(1.0, max(0.0, y)))


class BrushController:
    """Tracks pointer state and builds the brush falloff weights."""

    def __init__(self, radius=0.03, strength=0.9):
        if radius <= 0:
            raise ValueError(f"Brush radius must be positive, got {radius}")
        if not 0 < strength <= 1:
            raise ValueError(f"Brush strength must be in (0, 1], got {strength}")
        self.radius = radius
        self.strength = strength
        self.active = False
        self.position = (0.5, 0.5)
        # (shape, position) -> weights
        self._cache_key = None
        self._cache = None

    def _set_position(self, pos):
        x, y = pos
        self.position = (min(1.0, max(0.0, float(x))), min(1.0, max(0.0, float(y))))

    def press(self, pos):
        self.active = True
        self._set_position(pos)

    def move(self, pos):
        if not self.active:
            return
        self._set_position(pos)

    def release(self):
        self.active = False

    def leave(self):
        self.release()

    @property
    def state(self):
        return {"active": self.active, "position": self.position}

    def influence(self, shape):
        """Falloff weights for a grid of the given (H, W) shape.

        1 at the brush center, easing to exactly 0 at `radius` and beyond.
        Cached until the position or grid shape changes.
        """
        key = (tuple(shape), self.position)
        if key != self._cache_key:
            height, width = shape
            dist = normalized_distance(width, height, self.position)
            weights = 1.0 - smoothstep(0.0, self.radius, dist)
            self._cache = weights.astype(np.float32)
            self._cache_key = key
        return self._cache
