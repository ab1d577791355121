from __future__ import annotations

import logging

import numpy as np
import pytest

from analysis.metrics import npv
from core.schema import YEAR_RECORD_COLUMNS, YEAR_RECORD_WIRE_NAMES
from engine.cashflow import CashFlowAssembler, sanitize_record
from engine.pricing import api_price_multiplier, brent_curve, price_for_year, realised_price
from engine.runner import run_project


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------

def test_constant_curve_covers_project_plus_tail(base_params):
    curve = brent_curve(base_params)
    assert len(curve) == base_params.project_duration + 6
    assert set(curve.tolist()) == {70.0}
    assert price_for_year(curve, 500) == 70.0


def test_market_scenarios(base_params):
    bull = brent_curve(base_params.with_overrides(brent_strategy="market_bull"))
    assert bull[2] == pytest.approx(77.0)
    assert bull[10] == pytest.approx(87.5)

    bear = brent_curve(base_params.with_overrides(brent_strategy="market_bear"))
    assert bear[1] == pytest.approx(70 * 0.97)
    assert bear.min() == 30.0


def test_custom_curve_peaks_then_relaxes(base_params):
    curve = brent_curve(base_params.with_overrides(brent_strategy="custom"))
    assert curve[5] == pytest.approx(90.0)
    assert curve[0] == pytest.approx(70.0)
    assert curve[6] == pytest.approx(60 + 30 * np.exp(-0.15))
    assert curve[-1] > 60.0


def test_realised_price_applies_spread_and_quality(base_params, detailed_params):
    assert realised_price(base_params.with_overrides(brent_spread=10), 70.0) == pytest.approx(63.0)
    assert api_price_multiplier(base_params) == 1.0
    assert api_price_multiplier(detailed_params) == pytest.approx(1.0 - 2 * 0.004)


# ---------------------------------------------------------------------------
# Yearly fold
# ---------------------------------------------------------------------------

def test_record_per_year_including_decommissioning(base_params):
    result = run_project(base_params)
    records = result.yearly_data
    assert len(records) == base_params.project_duration + 2
    assert [r.year for r in records] == list(range(base_params.project_duration + 2))

    last = records[-1]
    assert last.is_decommissioning_year
    assert last.revenue == 0.0
    assert last.taxes == 0.0
    assert last.free_cash_flow == pytest.approx(-last.capex)
    assert sum(r.is_decommissioning_year for r in records) == 1


def test_build_years_have_no_production(base_params):
    records = run_project(base_params).yearly_data
    for r in records[: base_params.capex_duration]:
        assert r.production_year == 0
        assert r.production_volume == 0.0
        assert r.revenue == 0.0
    assert records[base_params.capex_duration].production_year == 1
    assert records[base_params.capex_duration].production_volume > 0


def test_free_cash_flow_identity(base_params):
    for r in run_project(base_params).yearly_data:
        expected = r.revenue - r.opex - r.charter_cost - r.taxes - r.capex
        assert r.free_cash_flow == pytest.approx(expected)
        assert r.taxes == pytest.approx(
            r.royalties + r.special_participation + r.profit_oil_gov + r.corporate_tax
        )


def test_cumulative_columns_and_metrics_agree(base_params):
    result = run_project(base_params)
    flows = result.free_cash_flows
    assert result.yearly_data[-1].cumulative_cash_flow == pytest.approx(flows.sum())
    assert result.yearly_data[-1].cumulative_discounted_cash_flow == pytest.approx(result.metrics.npv)
    assert result.metrics.npv == pytest.approx(npv(base_params.discount_rate, flows))
    assert dict(result.npv_profile)[0.0] == pytest.approx(flows.sum())


def test_irr_zeroes_project_npv(base_params):
    result = run_project(base_params)
    assert result.metrics.irr is not None
    scale = np.abs(result.free_cash_flows).max()
    assert abs(npv(result.metrics.irr, result.free_cash_flows)) < 1e-4 * scale


def test_reference_case_is_economic(base_params):
    m = run_project(base_params).metrics
    assert m.npv > 0
    assert m.irr > base_params.discount_rate
    assert m.spread == pytest.approx(m.irr - base_params.discount_rate)
    assert m.nominal_payback <= m.discounted_payback
    assert m.discounted_capex > 0


def test_payback_matches_cumulative_crossing(base_params):
    result = run_project(base_params)
    cumulative = np.cumsum(result.free_cash_flows)
    first_positive = int(np.argmax(cumulative >= 0))
    assert first_positive - 1 <= result.metrics.nominal_payback <= first_positive


def test_runs_are_independent(base_params):
    first = run_project(base_params)
    second = run_project(base_params)
    assert first.yearly_data == second.yearly_data
    assert first.metrics == second.metrics


def test_linear_depreciation_exhausts_base(base_params):
    p = base_params.with_overrides(depreciation_mode="simple")
    assembler = CashFlowAssembler(p)
    records, state = assembler.assemble()
    assert sum(r.depreciation for r in records) == pytest.approx(assembler.schedule.capitalised_capex, rel=1e-12)
    assert state.depreciation["total"] == pytest.approx(assembler.schedule.capitalised_capex, rel=1e-12)


def test_detailed_depreciation_never_exceeds_bases(base_params):
    assembler = CashFlowAssembler(base_params)
    _, state = assembler.assemble()
    for pool, base in assembler.depreciation.bases.items():
        assert state.depreciation[pool] <= base * (1 + 1e-12)
    assert state.depreciation["platform"] == pytest.approx(assembler.depreciation.bases["platform"])


def test_chartered_platform_pays_charter_in_production_years(base_params):
    p = base_params.with_overrides(platform_ownership="chartered")
    records = run_project(p).yearly_data
    assert all(r.charter_cost == 0.0 for r in records[: p.capex_duration])
    assert all(r.charter_cost > 0.0 for r in records[p.capex_duration: p.decommissioning_year])
    assert records[-1].charter_cost == 0.0


def test_shorter_project_lowers_npv(base_params):
    full = run_project(base_params).metrics.npv
    assert run_project(base_params.with_overrides(project_duration=25)).metrics.npv < full
    assert run_project(base_params.with_overrides(project_duration=20)).metrics.npv < full


def test_cutting_loss_making_tail_can_still_lower_npv(base_params):
    # No government take and a flat fixed opex: FCF = revenue − 1.85 bn in every
    # production year, negative once the decline drops revenue below that.
    p = base_params.with_overrides(
        tax_regime="transfer_rights",
        royalties_rate=0,
        corporate_tax_rate=0,
        opex_mode="detailed",
        opex_fixed=1.85e9,
        opex_variable=0,
        cost_inflation=0,
        workover_lambda=0,
        workover_cost=0,
        abex_simple_rate=100,
    )
    full = run_project(p)
    shorter = run_project(p.with_overrides(project_duration=25))

    removed = full.yearly_data[26:31]
    assert [r.year for r in removed] == [26, 27, 28, 29, 30]
    assert all(r.free_cash_flow < 0 for r in removed)
    assert shorter.yearly_data[-1].year == 26
    assert shorter.yearly_data[-1].capex == pytest.approx(6e9)

    # Decommissioning five years earlier costs more PV than the tail losses save.
    assert shorter.metrics.npv < full.metrics.npv


def test_build_years_carry_no_fiscal_terms(base_params):
    records, state = CashFlowAssembler(base_params).assemble()
    build = records[: base_params.capex_duration]
    assert all(r.capex > 0 for r in build)
    for r in build:
        assert r.recoverable_cost_balance == 0.0
        assert r.loss_carry_forward == 0.0
        assert r.taxes == 0.0
        assert r.depreciation == 0.0
    assert records[base_params.capex_duration - 1].recoverable_cost_balance == 0.0


def test_cost_pool_starts_with_completion_capex(base_params):
    records, _ = CashFlowAssembler(base_params).assemble()
    first_oil = records[base_params.capex_duration]
    # pool = completion capex + opex + charter, recovered up to half the revenue
    pool = first_oil.capex + first_oil.opex + first_oil.charter_cost
    recovered = min(pool, first_oil.revenue * 0.5)
    assert first_oil.recoverable_cost_balance == pytest.approx(pool - recovered)
    assert first_oil.profit_oil_gov == pytest.approx(
        (first_oil.revenue - first_oil.royalties - recovered) * 0.30
    )


@pytest.mark.parametrize("regime", ["concession", "sharing", "transfer_rights"])
@pytest.mark.parametrize("production_mode", ["simple", "detailed"])
@pytest.mark.parametrize("opex_mode", ["simple", "detailed"])
@pytest.mark.parametrize("ownership", ["owned", "chartered"])
def test_no_values_need_sanitizing(base_params, regime, production_mode, opex_mode, ownership):
    p = base_params.with_overrides(
        tax_regime=regime,
        production_mode=production_mode,
        opex_mode=opex_mode,
        platform_ownership=ownership,
        special_participation_rate=10,
    )
    result = run_project(p)
    assert result.sanitized_fields == ()
    assert np.all(np.isfinite(result.free_cash_flows))


def test_zero_discount_rate_is_handled(base_params):
    result = run_project(base_params.with_overrides(discount_rate=0))
    assert result.sanitized_fields == ()
    assert result.metrics.npv == pytest.approx(result.free_cash_flows.sum())


def test_sanitize_record_replaces_and_logs(caplog):
    with caplog.at_level(logging.WARNING, logger="engine.cashflow"):
        clean, replaced = sanitize_record({"year": 3, "revenue": float("nan"), "opex": 5.0}, 3)
    assert clean["revenue"] == 0.0
    assert clean["opex"] == 5.0
    assert replaced == ["revenue"]
    assert "revenue" in caplog.text


def test_output_tables(base_params):
    result = run_project(base_params)
    df = result.to_dataframe()
    assert list(df.columns) == list(YEAR_RECORD_COLUMNS)
    assert len(df) == base_params.project_duration + 2

    wire = result.to_dict()
    assert set(wire) == {"yearlyData", "metrics", "npvProfile", "brentCurve"}
    assert set(wire["yearlyData"][0]) == set(YEAR_RECORD_WIRE_NAMES.values())
    assert wire["metrics"]["vpl"] == result.metrics.npv
