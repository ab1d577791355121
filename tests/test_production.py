from __future__ import annotations

import math

import pytest

from engine.opex import OpexModel
from engine.production import (
    KBPD_TO_MMBBL,
    ProductionModel,
    ProductionPoint,
    arps_rate,
    peak_from_reserves,
)


def _profile(params, years=None):
    """Oil rates for production years 1..years, fed through the decline clamp."""
    model = ProductionModel(params)
    opex = OpexModel(params)
    years = years or params.project_duration - params.capex_duration + 1
    rates, previous = [], None
    for n in range(1, years + 1):
        year = params.capex_duration + n - 1
        point = model.produce(n, opex.failure_rate(year), previous)
        rates.append(point)
        previous = point.oil_rate
    return rates


def test_nothing_before_first_oil(base_params):
    point = ProductionModel(base_params).produce(0)
    assert point.oil_rate == 0.0
    assert point.liquid_rate == 0.0


def test_ramp_plateau_and_decline_shape(base_params):
    model = ProductionModel(base_params)
    assert model.potential(1) == pytest.approx(60.0)
    assert model.potential(3) == pytest.approx(180.0)
    assert model.potential(7) == pytest.approx(180.0)
    assert model.potential(8) == pytest.approx(180.0 / 1.04 ** 2)
    assert not model.in_decline(7)
    assert model.in_decline(8)


def test_arps_limits():
    assert arps_rate(100.0, 10.0, 0.5, 0.0) == pytest.approx(100.0)
    assert arps_rate(100.0, 10.0, 0.0, 2.0) == pytest.approx(100.0 * math.exp(-0.2))
    # Hyperbolic tends to exponential as b → 0
    assert arps_rate(100.0, 10.0, 1e-6, 5.0) == pytest.approx(arps_rate(100.0, 10.0, 0.0, 5.0), rel=1e-5)
    # Harmonic declines slower than exponential
    assert arps_rate(100.0, 10.0, 1.0, 10.0) > arps_rate(100.0, 10.0, 0.0, 10.0)


def test_zero_ramp_starts_on_plateau(base_params):
    model = ProductionModel(base_params.with_overrides(ramp_up_duration=0))
    assert model.potential(1) == pytest.approx(180.0)


def test_simple_mode_has_no_water(base_params):
    for point in _profile(base_params):
        assert point.water_cut == 0.0
        assert point.water_rate == 0.0
        assert point.liquid_rate == point.oil_rate
        assert point.efficiency == 1.0


def test_decline_never_rises_with_bathtub_derate(detailed_params):
    points = _profile(detailed_params)
    decline_start = int(detailed_params.ramp_up_duration + detailed_params.plateau_duration)
    rates = [p.oil_rate for p in points[decline_start:]]
    assert all(later <= earlier for earlier, later in zip(rates, rates[1:]))


def test_water_cut_rises_to_its_ceiling(detailed_params):
    model = ProductionModel(detailed_params)
    cuts = [model.water_cut(n) for n in range(1, 60)]
    assert all(later >= earlier for earlier, later in zip(cuts, cuts[1:]))
    assert max(cuts) <= detailed_params.bsw_max / 100.0
    assert model.water_cut(int(detailed_params.bsw_breakthrough)) == pytest.approx(0.02)


def test_liquids_capacity_constrains_oil(detailed_params):
    p = detailed_params.with_overrides(max_liquids=100_000, workover_lambda=0)
    point = ProductionModel(p).produce(5)
    bsw = point.water_cut
    assert point.oil_rate == pytest.approx(100.0 * (1.0 - bsw))
    assert point.liquid_rate == pytest.approx(100.0)
    assert point.water_rate == pytest.approx(100.0 - point.oil_rate)


def test_unconstrained_liquids_back_calculated(detailed_params):
    p = detailed_params.with_overrides(workover_lambda=0)
    point = ProductionModel(p).produce(2)
    assert point.liquid_rate == pytest.approx(point.oil_rate / (1.0 - point.water_cut))
    assert point.water_rate >= 0.0


def test_downtime_derate(detailed_params):
    model = ProductionModel(detailed_params)
    assert model.efficiency(0.15) == pytest.approx(1.0 - 0.15 * 90 / 365)
    assert model.efficiency(10.0) == 0.0
    assert ProductionModel(detailed_params.with_overrides(workover_tesp=0)).efficiency(0.15) == 1.0


def test_oil_volume_conversion():
    assert ProductionPoint(oil_rate=100.0).oil_mmbbl == pytest.approx(36.5)
    assert KBPD_TO_MMBBL == 0.365


def test_peak_from_reserves():
    assert peak_from_reserves(365.0, 0, 10, 8, 10) == pytest.approx(100.0)
    with_ramp = peak_from_reserves(365.0, 2, 8, 8, 10)
    assert with_ramp > 100.0
    assert peak_from_reserves(100.0, 0, 0, 8, 0) == 0.0
