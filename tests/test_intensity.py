"""Tests for the IntensitySmoother."""

import pytest

from moodvis.intensity import IntensitySmoother


def test_starts_at_half():
    assert IntensitySmoother().intensity == 0.5


def test_flux_moving_average(make_features):
    smoother = IntensitySmoother()
    f = make_features(energy=0.1, flux=1.0)

    assert smoother.update(f) == pytest.approx(0.2 + 0.08 * 0.4)
    assert smoother.flux_avg == pytest.approx(0.08)

    assert smoother.update(f) == pytest.approx(0.2 + 0.1536 * 0.4)
    assert smoother.flux_avg == pytest.approx(0.1536)


def test_clamped_to_unit_range(make_features):
    smoother = IntensitySmoother()
    assert smoother.update(make_features(energy=1.0, flux=50.0)) == 1.0
    smoother.reset()
    assert smoother.update(make_features()) == 0.0


def test_reset(make_features):
    smoother = IntensitySmoother()
    smoother.update(make_features(energy=0.3, flux=2.0))
    smoother.reset()
    assert smoother.flux_avg == 0.0
    assert smoother.intensity == 0.5
