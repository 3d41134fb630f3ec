"""
Double-Buffered Grid State

Two (2, H, W) buffers hold the chemical fields: channel 0 is A (substrate),
channel 1 is B (pattern former). One buffer is current (read), the other is
the write target for the next step; swap() flips the roles.

Normalized coordinates follow the texture convention: cell (row i, col j)
sits at ((j + 0.5) / W, (i + 0.5) / H), so y grows with the row index and
row 0 is the bottom of the displayed image. Circular distances scale x by
W / H so circles stay round on non-square grids.
"""

import numpy as np


A, B = 0, 1


def normalized_distance(width, height, center):
    """(H, W) array of aspect-corrected distances from a normalized point.

    Distances are in units of the grid height.
    """
    cx, cy = center
    aspect = width / height
    ys = (np.arange(height) + 0.5) / height
    xs = (np.arange(width) + 0.5) / width
    Y, X = np.ix_(ys, xs)
    return np.sqrt(((X - cx) * aspect) ** 2 + (Y - cy) ** 2)


class GridState:
    """Ping-pong pair of two-channel concentration fields."""

    def __init__(self, width, height, dtype=np.float32):
        if int(width) <= 0 or int(height) <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.dtype = np.dtype(dtype)
        self.buffers = None
        self.current = 0
        self.allocate()

    @property
    def shape(self):
        return (self.height, self.width)

    @property
    def released(self):
        return self.buffers is None

    def allocate(self):
        """(Re)create both buffers in the blank state (A=1, B=0)."""
        self.buffers = [np.empty((2, self.height, self.width), dtype=self.dtype)
                        for _ in range(2)]
        for buf in self.buffers:
            buf[A] = 1.0
            buf[B] = 0.0
        self.current = 0

    def release(self):
        """Drop both buffers. The grid is unusable until allocate()."""
        self.buffers = None

    def _require(self):
        if self.buffers is None:
            raise RuntimeError("Grid buffers were released; allocate and re-seed first")

    @property
    def read(self):
        """Buffer holding the live state."""
        self._require()
        return self.buffers[self.current]

    @property
    def write(self):
        """Buffer the next step writes into."""
        self._require()
        return self.buffers[1 - self.current]

    def swap(self):
        self._require()
        self.current = 1 - self.current

    def snapshot(self, copy=False):
        """Read-only view of the current buffer (or an independent copy).

        The view stays valid until the buffer is written again, i.e. the
        second step after this call.
        """
        state = self.read
        if copy:
            return state.copy()
        view = state.view()
        view.flags.writeable = False
        return view

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def seed(self, seed_type="center", center=(0.5, 0.5), radius=0.06, rng=None):
        """Reset to A=1, B=0 and place the initial B perturbation.

        Args:
            seed_type: "center" (one disk) or "scatter" (random small dots)
            center: Normalized disk center for "center"
            radius: Normalized disk radius (fraction of grid height)
            rng: numpy Generator for "scatter"
        """
        self._require()
        self.current = 0
        state = self.buffers[0]
        state[A] = 1.0
        state[B] = 0.0
        if seed_type == "center":
            self._seed_disk(state, center, radius)
        elif seed_type == "scatter":
            self._seed_scattered(state, radius, rng)
        else:
            raise ValueError(f"Unknown seed type: {seed_type!r}")
        self.buffers[1][:] = state

    def _seed_disk(self, state, center, radius):
        dist = normalized_distance(self.width, self.height, center)
        state[B][dist < radius] = 1.0

    def _seed_scattered(self, state, radius, rng=None):
        """Seed B=1 in a handful of small dots at random positions."""
        if rng is None:
            rng = np.random.default_rng()
        n_dots = 12
        r = max(radius / 4.0, 1.5 / self.height)
        for _ in range(n_dots):
            cx, cy = rng.uniform(0.1, 0.9, size=2)
            dist = normalized_distance(self.width, self.height, (cx, cy))
            state[B][dist < r] = 1.0

    # ------------------------------------------------------------------

    @property
    def stats(self):
        """Return current field statistics."""
        state = self.read
        b = state[B]
        return {
            "mass_a": float(state[A].sum(dtype=np.float64)),
            "mass_b": float(b.sum(dtype=np.float64)),
            "mean_b": float(b.mean()),
            "max_b": float(b.max()),
            "active_pct": float((b > 0.01).sum()) / b.size * 100,
        }
