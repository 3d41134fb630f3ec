"""
Noise-Driven Parameter Modulation

Walks the Gray-Scott parameters through slow coherent-noise trajectories
so the pattern keeps reorganising instead of settling:

1. NoiseParameter - one bounded scalar driven by 2D OpenSimplex noise
2. ParameterBank - feed / kill offset / diffusion parameters plus the
   derived values (kill from the feed band, dB from dA)

Kill is tied to feed by a linear band through feed/kill space:

    kill = k0 + slope * (feed - f0) + kill_offset

Independent random walks of feed and kill wander out of the patterned
region within minutes (into pure decay or full saturation). The band keeps
the pair on the diagonal where spots, worms and mazes live, and the small
kill offset lets the pattern slide across it.
"""

from dataclasses import dataclass, replace

import numpy as np
from opensimplex import OpenSimplex


@dataclass
class StepParams:
    """Live parameter set consumed by one frame of kernel steps."""
    feed: float = 0.055
    kill: float = 0.062
    diffusion_a: float = 1.0
    diffusion_b: float = 0.5
    dt: float = 1.0
    kill_offset: float = 0.0

    def as_dict(self):
        return {
            "feed": self.feed,
            "kill": self.kill,
            "dA": self.diffusion_a,
            "dB": self.diffusion_b,
            "dt": self.dt,
        }


class NoiseParameter:
    """Bounded scalar as a smooth function of the tick counter.

    Samples 2D simplex noise along the line y=0, so the output is a
    continuous 1D walk. The noise value in [-1, 1] is mapped affinely onto
    [lower, upper].
    """

    def __init__(self, lower, upper, speed, seed=0, name=""):
        """Initialize parameter.

        Args:
            lower: Lower bound of the output (inclusive)
            upper: Upper bound of the output (inclusive)
            speed: Noise-domain distance travelled per tick
            seed: Integer seed for this parameter's own noise generator
            name: Label used in heartbeat output and errors
        """
        if lower > upper:
            raise ValueError(
                f"Parameter {name!r}: lower bound {lower} exceeds upper bound {upper}"
            )
        self.lower = float(lower)
        self.upper = float(upper)
        self.speed = float(speed)
        self.seed = int(seed)
        self.name = name
        self._noise = OpenSimplex(seed=self.seed)

    def sample(self, tick):
        """Raw noise value in [-1, 1] at the given tick."""
        value = self._noise.noise2(tick * self.speed, 0.0)
        # simplex output can overshoot unit range by a hair
        return min(1.0, max(-1.0, value))

    def get(self, tick):
        """Mapped value in [lower, upper] at the given tick."""
        delta = self.upper - self.lower
        return self.lower + (self.sample(tick) + 1.0) * 0.5 * delta

    def __repr__(self):
        return (f"NoiseParameter({self.name!r}, [{self.lower}, {self.upper}], "
                f"speed={self.speed}, seed={self.seed})")


def kill_band_range(k0, slope, f0, feed_bounds, offset_bounds):
    """(min, max) of k0 + slope * (feed - f0) + offset over the bounds."""
    ends = [k0 + slope * (f - f0) for f in feed_bounds]
    return (min(ends) + offset_bounds[0], max(ends) + offset_bounds[1])


def derive_seeds(seed, count):
    """Derive `count` independent noise seeds from one bank seed.

    seed=None draws fresh entropy, so every run drifts differently.
    """
    seq = np.random.SeedSequence(seed)
    return [int(s) for s in seq.generate_state(count, dtype=np.uint32) & 0x7FFFFFFF]


class ParameterBank:
    """Translates the tick counter into the live StepParams for a frame.

    Owns the feed, kill-offset and diffusion NoiseParameters (each with its
    own seed so they vary incoherently), and derives kill through the band
    formula and dB through a fixed ratio of dA.
    """

    def __init__(self, config, seed=None):
        """Initialize bank from a validated config dict.

        Args:
            config: Config dict (see presets.DEFAULTS)
            seed: Bank seed. Same seed -> bit-identical parameter sequences.
        """
        self.seed = seed
        self.f0 = config["f0"]
        self.k0 = config["k0"]
        self.slope = config["slope"]
        self.ratio = config["diffusion_ratio"]
        self.dt = config["dt"]
        self.modulate = config["modulate"]

        # Static values (used when modulation is off)
        self.base = StepParams(
            feed=config["feed"],
            kill=config["kill"],
            diffusion_a=config["diffusion_a"],
            diffusion_b=config["diffusion_b"],
            dt=self.dt,
        )

        feed_seed, kill_seed, diff_seed, spf_seed = derive_seeds(seed, 4)
        self.feed_param = NoiseParameter(
            *config["feed_bounds"], config["feed_speed"], seed=feed_seed, name="feed")
        self.kill_offset_param = NoiseParameter(
            *config["kill_offset_bounds"], config["kill_offset_speed"],
            seed=kill_seed, name="killOffset")
        self.diffusion_param = NoiseParameter(
            *config["diffusion_bounds"], config["diffusion_speed"],
            seed=diff_seed, name="dA")

        self.spf_param = None
        if config["modulate_steps"]:
            self.spf_param = NoiseParameter(
                *config["spf_bounds"], config["spf_speed"], seed=spf_seed, name="spf")

    def calculate_kill(self, feed, offset=0.0):
        """Kill rate on the interesting band for a given feed."""
        return self.k0 + self.slope * (feed - self.f0) + offset

    def kill_range(self):
        """(min, max) kill reachable with the configured bounds."""
        return kill_band_range(
            self.k0, self.slope, self.f0,
            (self.feed_param.lower, self.feed_param.upper),
            (self.kill_offset_param.lower, self.kill_offset_param.upper),
        )

    def evaluate(self, tick):
        """Compute the StepParams for this tick.

        Args:
            tick: Frame counter (monotonically increasing)

        Returns:
            StepParams with feed, kill, dA, dB, dt, kill_offset
        """
        if not self.modulate:
            return replace(self.base)

        feed = self.feed_param.get(tick)
        kill_offset = self.kill_offset_param.get(tick)
        diffusion_a = self.diffusion_param.get(tick)
        return StepParams(
            feed=feed,
            kill=self.calculate_kill(feed, kill_offset),
            diffusion_a=diffusion_a,
            diffusion_b=diffusion_a * self.ratio,
            dt=self.dt,
            kill_offset=kill_offset,
        )

    def steps_per_frame(self, tick, default):
        """Inner step count for this tick (noise-driven when configured)."""
        if self.spf_param is None:
            return default
        return max(1, int(self.spf_param.get(tick)))
