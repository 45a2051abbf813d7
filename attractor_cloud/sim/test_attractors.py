"""
Tests for attractors, their text form and the command-driven collection.
"""

import math

import numpy as np
import pytest

from attractor_cloud.sim import (
    MIN_RADIUS,
    AddAttractor,
    Attractor,
    AttractorSet,
    RemoveAttractor,
    UpdateAttractor,
    default_attractors,
)


def test_derived_coefficients():
    a = Attractor((0.0, 0.0, 0.0), radius=0.5, amplitude=0.2)
    assert a.coefficient == pytest.approx(0.2 / 0.25)
    assert a.inv_exp_denominator == pytest.approx(1.0 / (-2.0 * 0.25))


def test_coefficients_follow_edits():
    a = Attractor((0.0, 0.0, 0.0), radius=1.0, amplitude=-0.05)
    assert a.coefficient == pytest.approx(-0.05)
    assert a.inv_exp_denominator == pytest.approx(-0.5)
    
    a.radius = 2.0
    assert a.coefficient == pytest.approx(-0.05 / 4.0)
    assert a.inv_exp_denominator == pytest.approx(-1.0 / 8.0)
    
    a.amplitude = 1.0
    assert a.coefficient == pytest.approx(0.25)


@pytest.mark.parametrize("radius", [0.0, -1.0, math.nan, math.inf])
def test_invalid_radius_is_clamped(radius):
    a = Attractor((0.0, 0.0, 0.0), radius=radius, amplitude=0.1)
    assert a.radius == MIN_RADIUS
    assert math.isfinite(a.coefficient)
    assert math.isfinite(a.inv_exp_denominator)


def test_text_round_trip_is_lossless():
    a = Attractor((0.1, -1.0 / 3.0, 2.0 ** -20), radius=0.123456789012345, amplitude=-0.05)
    b = Attractor.from_text(a.to_text())
    assert a == b
    
    # Repeated save/load never drifts
    for _ in range(10):
        b = Attractor.from_text(b.to_text())
    assert a == b


def test_from_text_rejects_malformed():
    with pytest.raises(ValueError):
        Attractor.from_text("1,2,3")
    with pytest.raises(ValueError):
        Attractor.from_text("1,2,3,abc,0.1")


def test_default_attractors():
    attractors = default_attractors()
    assert len(attractors) == 2
    assert attractors[0].radius == 1.0 and attractors[0].amplitude == 0.05
    assert attractors[1].radius == 0.25 and attractors[1].amplitude == -0.05


def test_commands():
    attractors = AttractorSet(default_attractors(), device="cpu")
    
    index = attractors.apply(AddAttractor(Attractor((0.5, 0.0, 0.0), 0.2, 0.1)))
    assert index == 2
    assert len(attractors) == 3
    
    attractors.apply(UpdateAttractor(2, position=(0.0, 0.5, 0.0), radius=0.4))
    updated = attractors[2]
    assert updated.position == (0.0, 0.5, 0.0)
    assert updated.radius == 0.4
    assert updated.amplitude == 0.1
    assert updated.coefficient == pytest.approx(0.1 / 0.16)
    
    attractors.apply(RemoveAttractor(0))
    assert len(attractors) == 2
    assert attractors[0].radius == 0.25


def test_add_uses_default_attractor():
    attractors = AttractorSet([], device="cpu")
    attractors.apply(AddAttractor())
    assert attractors[0] == Attractor((0.0, 0.0, 0.0), 1.0, 0.05)


def test_out_of_range_index():
    attractors = AttractorSet(default_attractors(), device="cpu")
    with pytest.raises(ValueError):
        attractors.apply(RemoveAttractor(5))
    with pytest.raises(ValueError):
        attractors.apply(UpdateAttractor(-3, amplitude=1.0))


def test_unknown_command():
    attractors = AttractorSet(default_attractors(), device="cpu")
    with pytest.raises(ValueError):
        attractors.apply("remove everything")


def test_snapshot_is_isolated_from_later_edits():
    attractors = AttractorSet(default_attractors(), device="cpu")
    before = attractors.snapshot()
    version = attractors.version
    
    attractors.apply(UpdateAttractor(0, amplitude=0.5))
    after = attractors.snapshot()
    
    assert attractors.version == version + 1
    assert after is not before
    assert before.attractors[0].amplitude == 0.05
    assert np.isclose(before.coefficient.numpy()[0], 0.05)
    assert np.isclose(after.coefficient.numpy()[0], 0.5)


def test_snapshot_is_cached_between_edits():
    attractors = AttractorSet(default_attractors(), device="cpu")
    assert attractors.snapshot() is attractors.snapshot()


def test_empty_snapshot():
    snapshot = AttractorSet([], device="cpu").snapshot()
    assert snapshot.count == 0
    assert snapshot.position.shape[0] == 1
