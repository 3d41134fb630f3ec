#!/usr/bin/env python3
"""
Tests for the Gray-Scott step kernel and the brush.

Verifies:
1. 9-point laplacian against scipy for both boundary modes
2. Mass conservation with feed = kill = 0
3. Seed scenario: first step from the centred disk
4. Brush containment and inactive-brush idempotence
5. Source buffer is never written
"""

import numpy as np
import pytest
from scipy.ndimage import correlate

from reaction_diffusion.brush import BrushController
from reaction_diffusion.grid import A, B, GridState, normalized_distance
from reaction_diffusion.gray_scott import StepKernel, laplacian
from reaction_diffusion.modulation import StepParams


STENCIL = np.array([
    [0.05, 0.2, 0.05],
    [0.2, -1.0, 0.2],
    [0.05, 0.2, 0.05],
])

CLASSIC = StepParams(feed=0.055, kill=0.062, diffusion_a=1.0, diffusion_b=0.5, dt=1.0)


def _random_state(h, w, seed=0):
    rng = np.random.default_rng(seed)
    return rng.random((2, h, w))


def test_laplacian_matches_scipy():
    print("Testing laplacian...")
    field = np.random.default_rng(1).random((17, 23))
    wrapped = laplacian(field, boundary="wrap")
    assert np.allclose(wrapped, correlate(field, STENCIL, mode="wrap"))
    clamped = laplacian(field, boundary="clamp")
    assert np.allclose(clamped, correlate(field, STENCIL, mode="nearest"))


def test_laplacian_of_constant_is_zero():
    field = np.full((8, 8), 0.37)
    assert np.allclose(laplacian(field), 0.0), "Stencil weights must sum to zero"
    assert STENCIL.sum() == pytest.approx(0.0)


def test_pure_diffusion_conserves_mass():
    print("Testing mass conservation...")
    h, w = 32, 40
    src = _random_state(h, w, seed=2)
    dst = np.empty_like(src)
    kernel = StepKernel(w, h, dtype=np.float64)
    params = StepParams(feed=0.0, kill=0.0, diffusion_a=1.0, diffusion_b=0.5, dt=1.0)

    total = src.sum()
    for _ in range(10):
        kernel(src, dst, params)
        src, dst = dst, src
    assert src.sum() == pytest.approx(total, rel=1e-10), "A+B mass drifted"


def test_seed_scenario_first_step():
    print("Testing seed scenario...")
    grid = GridState(64, 64, dtype=np.float64)
    grid.seed("center", center=(0.5, 0.5), radius=0.06)
    kernel = StepKernel(64, 64, dtype=np.float64)

    before = grid.read.copy()
    kernel(grid.read, grid.write, CLASSIC)
    grid.swap()
    after = grid.read

    dist = normalized_distance(64, 64, (0.5, 0.5))
    far = dist > 0.2
    assert np.allclose(after[A][far], 1.0), "Far field A should stay at 1"
    assert np.allclose(after[B][far], 0.0), "Far field B should stay at 0"

    # Deep inside the disk the laplacian vanishes, so the step is pure reaction
    inside = dist < 0.06 - 2.0 / 64
    assert inside.any()
    a0, b0 = before[A][inside], before[B][inside]
    assert np.all(a0 == 1.0) and np.all(b0 == 1.0)
    reaction_a = -a0 * b0 * b0 + CLASSIC.feed * (1.0 - a0)
    reaction_b = a0 * b0 * b0 - (CLASSIC.feed + CLASSIC.kill) * b0
    assert np.allclose(after[A][inside], a0 + reaction_a)
    assert np.allclose(after[B][inside], b0 + reaction_b)
    assert np.all(after[A][inside] < a0), "A is consumed inside the seed"

    # Disk cells touching the outside lose B to diffusion on top of the reaction
    disk = before[B] == 1.0
    outside_neighbours = correlate((~disk).astype(float), np.ones((3, 3)), mode="wrap")
    edge = disk & (outside_neighbours > 0)
    assert edge.any()
    assert (after[B][edge] < 1.0 + reaction_b[0]).all()


def test_brush_containment():
    print("Testing brush containment...")
    size = 128
    grid = GridState(size, size, dtype=np.float64)
    kernel = StepKernel(size, size, dtype=np.float64)
    brush = BrushController(radius=0.03, strength=0.9)
    brush.press((0.5, 0.5))

    kernel(grid.read, grid.write, CLASSIC, brush)
    grid.swap()
    state = grid.read

    dist = normalized_distance(size, size, (0.5, 0.5))
    assert np.all(state[B][dist >= brush.radius] == 0.0), "B leaked outside the brush"
    assert np.all(state[B][dist < 0.9 * brush.radius] > 0.0), "Brush missed interior cells"
    assert state[B].max() <= 0.9 + 1e-12
    assert np.all(state[A][dist >= brush.radius] == 1.0), "A changed outside the brush"
    inner = dist < 0.9 * brush.radius
    assert np.allclose(state[A][inner] + state[B][inner], 1.0), "A lowered by what B gained"


def test_brush_is_bounded_under_sustained_painting():
    size = 48
    grid = GridState(size, size, dtype=np.float64)
    kernel = StepKernel(size, size, dtype=np.float64)
    brush = BrushController(radius=0.1, strength=0.9)
    brush.press((0.3, 0.6))
    for _ in range(30):
        kernel(grid.read, grid.write, CLASSIC, brush)
        grid.swap()
    state = grid.read
    assert np.isfinite(state).all()
    assert state.min() > -0.5 and state.max() < 1.5


def test_inactive_brush_matches_no_brush():
    print("Testing inactive brush idempotence...")
    h, w = 24, 24
    src = _random_state(h, w, seed=4)
    brush = BrushController()
    brush.press((0.5, 0.5))
    brush.release()

    out_brush = np.empty_like(src)
    out_plain = np.empty_like(src)
    k1 = StepKernel(w, h, dtype=np.float64)
    k2 = StepKernel(w, h, dtype=np.float64)
    s1, s2 = src.copy(), src.copy()
    for _ in range(5):
        k1(s1, out_brush, CLASSIC, brush)
        k2(s2, out_plain, CLASSIC)
        s1, out_brush = out_brush, s1
        s2, out_plain = out_plain, s2
    assert np.array_equal(s1, s2)


def test_kernel_never_writes_source():
    src = _random_state(16, 16, seed=5)
    frozen = src.copy()
    dst = np.zeros_like(src)
    brush = BrushController(radius=0.2)
    brush.press((0.5, 0.5))
    StepKernel(16, 16, dtype=np.float64)(src, dst, CLASSIC, brush)
    assert np.array_equal(src, frozen)

    with pytest.raises(ValueError):
        StepKernel(16, 16, dtype=np.float64)(src, src, CLASSIC)


def test_clamp_values_option():
    grid = GridState(32, 32, dtype=np.float64)
    grid.seed("center", radius=0.2)
    kernel = StepKernel(32, 32, dtype=np.float64, clamp_values=True)
    kernel(grid.read, grid.write, CLASSIC)
    out = grid.write
    assert out.min() >= 0.0 and out.max() <= 1.0

    unclamped = StepKernel(32, 32, dtype=np.float64)
    unclamped(grid.read, grid.write, CLASSIC)
    assert grid.write[B].max() > 1.0, "No clamping by default"


def test_unknown_boundary_rejected():
    with pytest.raises(ValueError):
        StepKernel(8, 8, boundary="mirror")


if __name__ == "__main__":
    print("\n=== Testing Step Kernel ===\n")

    test_laplacian_matches_scipy()
    test_laplacian_of_constant_is_zero()
    test_pure_diffusion_conserves_mass()
    test_seed_scenario_first_step()
    test_brush_containment()
    test_brush_is_bounded_under_sustained_painting()
    test_inactive_brush_matches_no_brush()
    test_kernel_never_writes_source()
    test_clamp_values_option()
    test_unknown_boundary_rejected()

    print("\n✓ All tests passed!\n")
