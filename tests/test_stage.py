"""Terrain generation, collision predicates and the escape search."""

from __future__ import annotations

import numpy as np

from core.geometry import Position, Vector2
from environment.navigability import CastSettings, EscapeSearch, _CastNode
from environment.noise import NoiseField
from environment.stage import Stage


def test_noise_is_deterministic_and_bounded() -> None:
    xs, ys = np.meshgrid(np.linspace(0.0, 12.0, 40), np.linspace(0.0, 12.0, 40))
    first = NoiseField(seed=7, octaves=4).value(xs, ys)
    second = NoiseField(seed=7, octaves=4).value(xs, ys)

    assert np.array_equal(first, second)
    assert first.min() >= 0.0
    assert first.max() <= 1.0
    assert first.std() > 0.0


def test_noise_changes_only_on_generate() -> None:
    field = NoiseField(seed=1)
    before = field.value(np.linspace(0.0, 5.0, 50), np.linspace(0.0, 3.0, 50))
    assert np.array_equal(before, field.value(np.linspace(0.0, 5.0, 50), np.linspace(0.0, 3.0, 50)))

    field.generate(2)
    after = field.value(np.linspace(0.0, 5.0, 50), np.linspace(0.0, 3.0, 50))
    assert field.seed == 2
    assert not np.array_equal(before, after)

    field.generate(1)
    assert np.array_equal(before, field.value(np.linspace(0.0, 5.0, 50), np.linspace(0.0, 3.0, 50)))


def test_scalar_value_is_float() -> None:
    assert isinstance(NoiseField(seed=3).value(0.3, 0.7), float)
    assert isinstance(Stage(50, 50).value(10.0, 10.0), float)


def test_value_accepts_a_position() -> None:
    stage = Stage(80, 60, seed=4)
    expected = stage.value(12.5, 33.0)

    assert stage.value((12.5, 33.0)) == expected
    assert stage.value(Vector2(12.5, 33.0)) == expected
    assert stage.value(Position(12.5, 33.0, 1.0)) == expected


def test_parameters_are_clamped() -> None:
    stage = Stage(20, 20, octaves=40, frequency=0.0, threshold=1.5)
    assert stage.noise_field.octaves == 16
    assert stage.noise_field.frequency == 0.1
    assert stage.threshold == 1.0

    stage.set_octaves(0)
    stage.set_frequency(100.0)
    stage.threshold = -3.0
    assert stage.noise_field.octaves == 1
    assert stage.noise_field.frequency == 64.0
    assert stage.threshold == 0.0


def test_spawn_point_and_bounds() -> None:
    stage = Stage(101, 40)
    assert stage.spawn_point == (50, 20)
    assert stage.window_size == (101, 40)
    assert stage.in_bounds(stage.spawn_point)
    assert stage.in_bounds((0.0, 0.0))
    assert not stage.in_bounds((101.0, 5.0))
    assert not stage.in_bounds((5.0, -0.01))


def test_no_collision_outside_bounds() -> None:
    stage = Stage(10, 10, threshold=0.0)
    for point in [(-1.0, 5.0), (5.0, -1.0), (10.0, 5.0), (5.0, 10.0), (1e6, 1e6)]:
        assert not stage.collision(point)
    assert stage.collision((5.0, 5.0))

    hits = stage.collisions(np.array([-1.0, 5.0, 10.0]), np.array([5.0, 5.0, 5.0]))
    assert hits.tolist() == [False, True, False]


def test_threshold_one_has_no_collisions_and_is_navigable() -> None:
    stage = Stage(200, 200, seed=11, threshold=1.0)
    xs, ys = np.meshgrid(np.arange(0.0, 200.0, 5.0), np.arange(0.0, 200.0, 5.0))

    assert not stage.collisions(xs, ys).any()
    assert stage.navigable()


def test_blocked_spawn_is_not_navigable() -> None:
    stage = Stage(10, 10, threshold=0.0)
    assert stage.collision(stage.spawn_point)
    assert not stage.navigable()


def test_open_stage_escapes_along_first_ray(mask_stage) -> None:
    stage = mask_stage(1000, 1000, lambda x, y: np.zeros_like(x, dtype=bool))
    search = EscapeSearch(stage)

    assert search.run(Vector2(*stage.spawn_point))
    # Root plus nine chained nodes straight along ray 0 before x reaches 1000.
    assert search.casts == 10


def test_budget_exhaustion_is_reported_as_not_navigable(mask_stage) -> None:
    stage = mask_stage(
        1000,
        1000,
        lambda x, y: np.zeros_like(x, dtype=bool),
        cast_settings=CastSettings(max_cast_iterations=0),
    )
    assert not stage.navigable()


def test_wall_on_one_side_still_navigable(mask_stage) -> None:
    stage = mask_stage(200, 200, lambda x, y: x >= 120.0)
    assert not stage.collision(stage.spawn_point)
    assert stage.collision((150.0, 100.0))
    assert stage.navigable()


def test_enclosed_spawn_is_not_navigable(mask_stage) -> None:
    def ring(x: np.ndarray, y: np.ndarray) -> np.ndarray:
        inside = (x > 60.0) & (x < 140.0) & (y > 60.0) & (y < 140.0)
        return ~inside

    stage = mask_stage(200, 200, ring, cast_settings=CastSettings(max_cast_iterations=200))
    assert not stage.collision(stage.spawn_point)
    assert not stage.navigable()


def test_backtrack_skip_only_applies_to_child_nodes() -> None:
    search = EscapeSearch(Stage(10, 10))
    root = _CastNode(origin=Vector2(5.0, 5.0), parent_ray=32)
    child = _CastNode(origin=Vector2(5.0, 5.0), parent_ray=3)

    assert not any(search._skip(root, i) for i in range(32))
    assert [i for i in range(32) if search._skip(child, i)] == [16]


def test_backtrack_skip_needs_even_half_count() -> None:
    search = EscapeSearch(Stage(10, 10), CastSettings(cast_count=6))
    child = _CastNode(origin=Vector2(5.0, 5.0), parent_ray=1)
    assert not any(search._skip(child, i) for i in range(6))
