"""
Reaction-Diffusion Drift - Entry Point

Usage:
    python -m reaction_diffusion [preset] [--size N] [--window WxH]
                                 [--steps N] [--seed N] [--snap FRAMES]

Examples:
    python -m reaction_diffusion
    python -m reaction_diffusion coral --size 384
    python -m reaction_diffusion classic --seed 7 --snap 300
    python -m reaction_diffusion drift --window 1000x1000

Use --list to see all available presets.
"""

import os
import sys

from .presets import PRESET_ORDER, list_presets


def snap(preset, frames, **overrides):
    """Headless mode: run N frames, save a PNG, exit."""
    from PIL import Image

    from .render import Renderer
    from .simulator import RDSimulator

    sim = RDSimulator(preset, **overrides)
    print(f"  {preset}: running {frames} frames "
          f"({sim.steps_per_frame} steps/frame)...", end="", flush=True)
    state = sim.run(frames)

    screenshots_dir = os.path.join(os.getcwd(), "screenshots")
    os.makedirs(screenshots_dir, exist_ok=True)
    rgb = Renderer(bloom=0.4).render(state)
    img = Image.fromarray(rgb)
    path = os.path.join(screenshots_dir, f"rd_{preset}.png")
    img.save(path)
    img.save(os.path.join(screenshots_dir, "latest.png"))
    print(f" saved: {path}")
    return path


def main(argv=None):
    preset = "drift"
    win_w, win_h = 800, 800
    snap_frames = 0
    overrides = {}

    args = sys.argv[1:] if argv is None else list(argv)
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--size" and i + 1 < len(args):
            size = int(args[i + 1])
            overrides["width"] = overrides["height"] = size
            i += 2
        elif arg == "--window" and i + 1 < len(args):
            parts = args[i + 1].split("x")
            win_w, win_h = int(parts[0]), int(parts[1])
            i += 2
        elif arg == "--steps" and i + 1 < len(args):
            overrides["steps_per_frame"] = int(args[i + 1])
            i += 2
        elif arg == "--seed" and i + 1 < len(args):
            overrides["seed"] = int(args[i + 1])
            i += 2
        elif arg == "--snap" and i + 1 < len(args):
            snap_frames = int(args[i + 1])
            i += 2
        elif arg == "--list":
            print("\nAvailable presets:\n")
            for key, name, desc in list_presets():
                print(f"    {key:12s} {name:12s} {desc}")
            print()
            return 0
        elif arg in ("--help", "-h"):
            print(__doc__)
            return 0
        elif arg in PRESET_ORDER:
            preset = arg
            i += 1
        else:
            print(f"Unknown argument: {arg}")
            print("Use --list to see available presets")
            return 2

    if snap_frames > 0:
        print(f"Headless snap mode: {preset}, {snap_frames} frames")
        snap(preset, snap_frames, **overrides)
        return 0

    from .viewer import Viewer

    print("Starting Reaction-Diffusion Viewer")
    print(f"  Preset: {preset}")
    print(f"  Window: {win_w}x{win_h}")
    print()

    viewer = Viewer(width=win_w, height=win_h, preset=preset, **overrides)
    viewer.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
