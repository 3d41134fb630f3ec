"""
Reaction-Diffusion Configuration Presets

DEFAULTS holds every recognised tunable. Each preset overrides a subset of
them with a configuration known to produce interesting behaviour; keyword
overrides passed to build_config() win over both.

All values are static for the lifetime of a run. Grid size can only change
through RDSimulator.resize(), which recreates and re-seeds the buffers.
"""

import numpy as np

from .modulation import kill_band_range


DEFAULTS = {
    # Grid
    "width": 512,
    "height": 512,
    "dtype": "float32",
    "boundary": "wrap",          # "wrap" (toroidal) or "clamp" (clamp-to-edge)

    # Base Gray-Scott constants (live values when modulate=False)
    "feed": 0.055,
    "kill": 0.062,
    "diffusion_a": 1.0,
    "diffusion_b": 0.5,
    "dt": 1.0,

    # Noise-driven drift
    "modulate": True,
    "feed_bounds": (0.015, 0.06),
    "feed_speed": 0.001,
    "kill_offset_bounds": (-0.0035, 0.0035),
    "kill_offset_speed": 0.005,
    "diffusion_bounds": (1.0, 1.2),
    "diffusion_speed": 0.001,
    "diffusion_ratio": 0.5,       # dB = dA * ratio

    # Feed/kill band: kill = k0 + slope * (feed - f0) + offset
    "f0": 0.03,
    "k0": 0.055,
    "slope": 0.5,

    # Stepping
    "steps_per_frame": 30,
    "modulate_steps": False,
    "spf_bounds": (1, 20),
    "spf_speed": 0.2,
    "clamp_values": False,

    # Brush
    "brush_radius": 0.03,
    "brush_strength": 0.9,

    # Seeding
    "seed_type": "center",       # "center" or "scatter"
    "seed_center": (0.5, 0.5),
    "seed_radius": 0.06,
    "seed": None,                # noise / RNG seed (None = fresh each run)

    # Console heartbeat every N ticks (0 = off)
    "heartbeat": 1000,
}

BOUNDARIES = ("wrap", "clamp")
SEED_TYPES = ("center", "scatter")


PRESETS = {
    "drift": {
        "name": "Drift",
        "description": "Feed, kill and diffusion wander along the pattern band",
    },
    "classic": {
        "name": "Classic",
        "description": "Static Pearson mitosis regime (F=0.055, k=0.062)",
        "modulate": False,
    },
    "coral": {
        "name": "Coral",
        "description": "Drift held to the high-feed end: worms and coral growth",
        "feed_bounds": (0.045, 0.06),
    },
    "spots": {
        "name": "Spots",
        "description": "Drift held to the low-feed end: spots and splitting cells",
        "feed_bounds": (0.02, 0.035),
        "kill_offset_bounds": (0.0, 0.004),
    },
    "restless": {
        "name": "Restless",
        "description": "Fast drift with noise-driven steps per frame",
        "feed_speed": 0.004,
        "kill_offset_speed": 0.01,
        "diffusion_speed": 0.004,
        "modulate_steps": True,
    },
    "scatter": {
        "name": "Scatter",
        "description": "Drift from a field of small random seeds",
        "seed_type": "scatter",
    },
    "tiles": {
        "name": "Tiles",
        "description": "Clamp-to-edge borders instead of a torus",
        "boundary": "clamp",
    },
}

PRESET_ORDER = ["drift", "classic", "coral", "spots", "restless", "scatter", "tiles"]


def get_preset(name):
    """Get a preset by name. Returns None if not found."""
    return PRESETS.get(name)


def list_presets():
    """Return list of (key, name, description) for presets."""
    return [(k, PRESETS[k]["name"], PRESETS[k]["description"])
            for k in PRESET_ORDER if k in PRESETS]


def _check_bounds(config, key):
    lower, upper = config[key]
    if lower > upper:
        raise ValueError(f"{key}: lower bound {lower} exceeds upper bound {upper}")


def validate_config(config):
    """Fail fast on values the simulation cannot start with.

    Returns a list of warning strings for values that are legal but likely
    to produce a degenerate pattern.
    """
    for key in ("width", "height"):
        if int(config[key]) <= 0:
            raise ValueError(f"Grid {key} must be positive, got {config[key]}")
    for key in ("feed_bounds", "kill_offset_bounds", "diffusion_bounds", "spf_bounds"):
        _check_bounds(config, key)
    if int(config["steps_per_frame"]) < 1:
        raise ValueError(f"steps_per_frame must be >= 1, got {config['steps_per_frame']}")
    if config["dt"] <= 0:
        raise ValueError(f"dt must be positive, got {config['dt']}")
    if config["brush_radius"] <= 0:
        raise ValueError(f"brush_radius must be positive, got {config['brush_radius']}")
    if not 0 < config["brush_strength"] <= 1:
        raise ValueError(f"brush_strength must be in (0, 1], got {config['brush_strength']}")
    if config["seed_radius"] < 0:
        raise ValueError(f"seed_radius must be non-negative, got {config['seed_radius']}")
    if config["boundary"] not in BOUNDARIES:
        raise ValueError(f"Unknown boundary: {config['boundary']!r}. "
                         f"Supported: {list(BOUNDARIES)}")
    if config["seed_type"] not in SEED_TYPES:
        raise ValueError(f"Unknown seed type: {config['seed_type']!r}. "
                         f"Supported: {list(SEED_TYPES)}")
    np.dtype(config["dtype"])

    warnings = []
    f_lo = config["feed_bounds"][0]
    k_lo, _ = kill_band_range(config["k0"], config["slope"], config["f0"],
                              config["feed_bounds"], config["kill_offset_bounds"])
    if k_lo <= 0:
        warnings.append(f"kill band reaches {k_lo:.4f} (<= 0) at the feed bounds")
    if f_lo < 0:
        warnings.append(f"feed lower bound {f_lo} is negative")

    # Explicit Euler with the 9-point stencil is stable for D * dt < 1.25
    d_max = config["diffusion_bounds"][1] if config["modulate"] else config["diffusion_a"]
    if d_max * config["dt"] >= 1.25:
        warnings.append(f"diffusion {d_max} * dt {config['dt']} is past the "
                        f"explicit stability limit (1.25)")
    return warnings


def build_config(preset="drift", **overrides):
    """Merge DEFAULTS, a named preset and keyword overrides into one dict.

    Args:
        preset: Preset key (see PRESET_ORDER) or None for plain defaults
        **overrides: Individual config values

    Returns:
        Validated config dict
    """
    config = dict(DEFAULTS)
    if preset is not None:
        p = get_preset(preset)
        if p is None:
            raise ValueError(f"Unknown preset: {preset!r}. Available: {PRESET_ORDER}")
        config.update({k: v for k, v in p.items() if k not in ("name", "description")})

    unknown = set(overrides) - set(DEFAULTS)
    if unknown:
        raise ValueError(f"Unknown config keys: {sorted(unknown)}")
    config.update(overrides)

    for msg in validate_config(config):
        print(f"[RD] warning: {msg}")
    return config
