"""
RDSimulator — Headless simulation core

Owns the grid buffers, the step kernel, the brush and the parameter bank,
and runs the frame loop with zero pygame dependency. The viewer and the
headless snapshot mode both drive it.

Per frame:
  1. tick += 1
  2. params = bank.evaluate(tick)         (once, before stepping)
  3. N x (kernel(read -> write), swap)
  4. hand the current buffer to the renderer as a read-only snapshot

Usage:
    from reaction_diffusion.simulator import RDSimulator
    sim = RDSimulator("drift", width=256, height=256, seed=1)
    state = sim.frame()            # (2, H, W) read-only, A=state[0], B=state[1]
    sim.press((0.5, 0.5))
"""

import numpy as np

from .brush import BrushController
from .grid import GridState
from .gray_scott import StepKernel
from .modulation import ParameterBank
from .presets import build_config


class RDSimulator:
    """Frame loop around the double-buffered Gray-Scott grid."""

    def __init__(self, preset="drift", config=None, **overrides):
        """Build a simulator from a preset or an explicit config.

        Args:
            preset: Preset key used when config is None
            config: Full config dict (already built with build_config)
            **overrides: Config values applied on top of the preset
        """
        if config is None:
            config = build_config(preset, **overrides)
        elif overrides:
            config = build_config(None, **{**config, **overrides})
        self.config = config
        self.preset_key = preset

        self.steps_per_frame = int(config["steps_per_frame"])
        self.heartbeat = int(config["heartbeat"])
        self.tick = 0

        self.bank = ParameterBank(config, seed=config["seed"])
        self.brush = BrushController(config["brush_radius"], config["brush_strength"])
        self.params = self.bank.base

        self.grid = None
        self.kernel = None
        self._build_grid(config["width"], config["height"])
        self.reset()

    def _build_grid(self, width, height):
        dtype = self.config["dtype"]
        grid = GridState(width, height, dtype=dtype)
        kernel = StepKernel(
            grid.width, grid.height,
            boundary=self.config["boundary"],
            dtype=dtype,
            clamp_values=self.config["clamp_values"],
        )
        self.grid, self.kernel = grid, kernel

    @property
    def width(self):
        return self.grid.width

    @property
    def height(self):
        return self.grid.height

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self):
        """Re-seed the grid and restart the tick counter."""
        if self.grid.released:
            self.grid.allocate()
        rng = np.random.default_rng(self.config["seed"])
        self.grid.seed(
            self.config["seed_type"],
            center=self.config["seed_center"],
            radius=self.config["seed_radius"],
            rng=rng,
        )
        self.tick = 0
        self.params = self.bank.evaluate(self.tick)

    def resize(self, width, height):
        """Recreate both buffers at a new resolution and re-seed."""
        self._build_grid(width, height)
        self.config = {**self.config, "width": self.grid.width, "height": self.grid.height}
        self.reset()

    def release(self):
        """Free the grid buffers. Call reset() before running again."""
        self.grid.release()

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def step(self, params=None):
        """One kernel invocation followed by a buffer swap."""
        if params is None:
            params = self.params
        self.kernel(self.grid.read, self.grid.write, params, self.brush)
        self.grid.swap()

    def step_n(self, n, params=None):
        """Advance n steps. Returns the read-only state."""
        for _ in range(n):
            self.step(params)
        return self.grid.snapshot()

    def frame(self):
        """Advance one output frame. Returns the read-only state."""
        self.tick += 1
        self.params = self.bank.evaluate(self.tick)
        n = self.bank.steps_per_frame(self.tick, self.steps_per_frame)
        for _ in range(n):
            self.step(self.params)

        if self.heartbeat and self.tick % self.heartbeat == 0:
            p = self.params
            print(f"[RD] tick {self.tick}  feed: {p.feed:.4f}  kill: {p.kill:.4f}  "
                  f"dA: {p.diffusion_a:.3f}  dB: {p.diffusion_b:.3f}")
        return self.grid.snapshot()

    def run(self, frames):
        """Advance several frames. Returns the final read-only state."""
        state = None
        for _ in range(frames):
            state = self.frame()
        return state

    def snapshot(self, copy=False):
        return self.grid.snapshot(copy=copy)

    # ------------------------------------------------------------------
    # Pointer input (normalized, y up)
    # ------------------------------------------------------------------

    def press(self, pos):
        self.brush.press(pos)

    def move(self, pos):
        self.brush.move(pos)

    def release_pointer(self):
        self.brush.release()

    def leave(self):
        self.brush.leave()

    # ------------------------------------------------------------------

    @property
    def stats(self):
        """Grid statistics plus tick and live parameters."""
        stats = self.grid.stats
        stats["tick"] = self.tick
        stats.update(self.params.as_dict())
        return stats
