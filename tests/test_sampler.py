from __future__ import annotations

import numpy as np
import pytest

from distributions.benchmarks import SCATTER_VARIATIONS, default_production_settings
from distributions.sampler import (
    DistributionSampler,
    DistributionSettings,
    MonteCarloSampler,
    UncertainVariable,
    apply_path,
)


def test_triangular_mean_matches_theory(rng):
    sampler = DistributionSampler(rng=rng)
    draws = sampler.triangular(0.0, 3.0, 10.0, size=10_000)
    assert draws.min() >= 0.0
    assert draws.max() <= 10.0
    assert draws.mean() == pytest.approx(13.0 / 3.0, abs=0.1)


def test_normal_moments_converge(rng):
    sampler = DistributionSampler(rng=rng)
    draws = sampler.normal(5.0, 2.0, size=20_000)
    assert draws.mean() == pytest.approx(5.0, abs=0.05)
    assert draws.std() == pytest.approx(2.0, abs=0.05)


def test_normal_negative_std_collapses_to_mean():
    sampler = DistributionSampler(seed=1)
    assert np.all(sampler.normal(3.0, -1.0, size=5) == 3.0)


def test_triangular_degenerate_range_returns_mode():
    sampler = DistributionSampler(seed=1)
    assert sampler.triangular(5.0, 5.0, 5.0) == 5.0
    assert np.all(sampler.triangular(5.0, 5.0, 5.0, size=4) == 5.0)


def test_triangular_tolerates_swapped_bounds_and_outside_mode():
    sampler = DistributionSampler(seed=1)
    draws = sampler.triangular(10.0, 20.0, 0.0, size=500)
    assert draws.min() >= 0.0
    assert draws.max() <= 10.0


def test_integer_bounds_are_inclusive():
    sampler = DistributionSampler(seed=3)
    draws = sampler.integer(1, 3, size=2_000)
    assert set(np.unique(draws).tolist()) == {1, 2, 3}


def test_vary_stays_within_range():
    sampler = DistributionSampler(seed=3)
    draws = sampler.vary(100.0, 20.0, size=1_000)
    assert draws.min() >= 80.0
    assert draws.max() <= 120.0


def test_settings_from_camel_case_dict():
    settings = DistributionSettings.from_dict({
        "peakProduction": {"min": 150, "mode": 180, "max": 210},
        "declineRate": {"min": 6, "mode": 8, "max": 10, "active": False},
        "unrelated": {"min": 0, "mode": 1, "max": 2},
    })
    assert settings.peak_production == UncertainVariable(150, 180, 210)
    assert settings.decline_rate.active is False
    assert settings.plateau_duration is None
    assert list(settings.active_variables()) == ["peak_production"]


def test_inactive_variables_are_not_sampled(base_params):
    settings = DistributionSettings(
        peak_production=UncertainVariable(150, 180, 210),
        plateau_duration=UncertainVariable(2, 4, 6, active=False),
    )
    paths = MonteCarloSampler(settings, n_paths=50, seed=11).sample()
    assert set(paths.values) == {"peak_production"}

    applied = apply_path(base_params, paths, 0)
    assert applied.plateau_duration == base_params.plateau_duration
    assert 150 <= applied.peak_production <= 210


def test_sampling_is_reproducible_with_seed(base_params):
    settings = default_production_settings(base_params)
    a = MonteCarloSampler(settings, n_paths=100, seed=42).sample()
    b = MonteCarloSampler(settings, n_paths=100, seed=42).sample()
    for name in a.values:
        np.testing.assert_array_equal(a.values[name], b.values[name])


def test_sampled_paths_table_and_summary(base_params):
    settings = default_production_settings(base_params)
    paths = MonteCarloSampler(settings, n_paths=200, seed=5).sample()
    df = paths.to_dataframe()
    assert len(df) == 200
    assert "path_id" in df.columns
    assert set(paths.summary()["Variable"]) == set(settings.active_variables())


def test_apply_path_without_overrides_returns_base(base_params):
    paths = MonteCarloSampler(DistributionSettings(), n_paths=3, seed=1).sample()
    assert apply_path(base_params, paths, 1) is base_params


def test_default_ranges_centre_on_base_case(base_params):
    settings = default_production_settings(base_params)
    assert (settings.peak_production.min, settings.peak_production.max) == (144.0, 216.0)
    assert (settings.plateau_duration.min, settings.plateau_duration.max) == (2.0, 6.0)
    assert (settings.decline_rate.min, settings.decline_rate.max) == (5.6, 10.4)
    assert settings.bsw_growth_rate.min == 0.6
    for var in settings.active_variables().values():
        assert var.min <= var.mode <= var.max


def test_default_ranges_respect_floors(base_params):
    p = base_params.with_overrides(plateau_duration=1, decline_rate=1, bsw_growth_rate=0.1)
    settings = default_production_settings(p)
    assert settings.plateau_duration.min == 1.0
    assert settings.decline_rate.min == 1.0
    assert settings.bsw_growth_rate.min == 0.1


def test_scatter_variations_name_real_parameters(base_params):
    for name, variation in SCATTER_VARIATIONS.items():
        assert variation.parameter == name
        assert hasattr(base_params, name)
