from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

# Make project root importable
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.config import ProjectParameters  # noqa: E402

# Reference case used in the field diagnostics: 6 bn capex FPSO development under
# production sharing, constant 70 $/bbl Brent, 30-year life.
DOCUMENTED_CASE = {
    "abex_mode": "simple",
    "abex_simple_rate": 15,
    "abex_per_well": 25_000_000,
    "abex_subsea_pct": 25,
    "abex_platform": 150_000_000,
    "total_capex": 6_000_000_000,
    "capex_duration": 5,
    "capex_peak_relative": 4,
    "capex_concentration": 50,
    "platform_ownership": "owned",
    "charter_pv": 2_000_000_000,
    "repetro_ratio": {"platform": 95, "wells": 45, "subsea": 75},
    "capex_tax_rate": 40,
    "brent_price": 70,
    "brent_spread": 0,
    "brent_strategy": "constant",
    "brent_long_term": 60,
    "brent_peak_value": 90,
    "brent_peak_year": 5,
    "peak_production": 180,
    "ramp_up_duration": 3,
    "plateau_duration": 4,
    "decline_rate": 8,
    "hyperbolic_factor": 0.5,
    "production_mode": "simple",
    "oil_api": 28,
    "gor": 150,
    "max_liquids": 252_000,
    "bsw_max": 95,
    "bsw_breakthrough": 7,
    "bsw_growth_rate": 0.7,
    "opex_margin": 15,
    "opex_mode": "simple",
    "opex_fixed": 100_000_000,
    "opex_variable": 4,
    "workover_cost": 57_600_000,
    "workover_lambda": 0.15,
    "workover_mob_cost": 8,
    "workover_duration": 20,
    "workover_tesp": 90,
    "workover_daily_rate": 800,
    "cost_inflation": 2,
    "total_reserves": 1000,
    "discount_rate": 10,
    "project_duration": 30,
    "depreciation_years": 10,
    "tax_regime": "sharing",
    "royalties_rate": 10,
    "special_participation_rate": 0,
    "cost_oil_cap": 50,
    "profit_oil_gov_share": 30,
    "corporate_tax_rate": 34,
    "depreciation_mode": "detailed",
    "capex_split": {"platform": 40, "wells": 40, "subsea": 20},
    "depreciation_config": {
        "platform": {"method": "accelerated", "years": 2},
        "wells": {"method": "uop", "years": 5},
        "subsea": {"method": "accelerated", "years": 2},
    },
}


@pytest.fixture
def base_params() -> ProjectParameters:
    return ProjectParameters.model_validate(DOCUMENTED_CASE)


@pytest.fixture
def detailed_params(base_params) -> ProjectParameters:
    return base_params.with_overrides(
        production_mode="detailed",
        opex_mode="detailed",
        workover_failure_profile="bathtub",
    )


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(12345)
