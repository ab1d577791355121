"""
Project and simulation configuration.

ProjectParameters is the single immutable input of the cash-flow engine. Field names are
snake_case; the camelCase names used by the presentation layer are accepted as aliases
(``totalCapex``, ``oilAPI``, ``charterPV``, ...). Uncertainty ranges for Monte Carlo live
in distributions/sampler.py (DistributionSettings).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .schema import (
    AbexMode,
    BrentStrategy,
    DepreciationMethod,
    DepreciationMode,
    FailureProfile,
    OpexMode,
    Ownership,
    ProductionMode,
    TaxRegime,
)


# Nested presentation-layer block carrying the well count (wellsParams.numWells).
NESTED_WELLS_KEY = "wellsParams"


def _clamp_pct(value: float) -> float:
    return min(max(float(value), 0.0), 100.0)


class _FrozenModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


class CapexSplit(_FrozenModel):
    """Share of total capex per asset category, in percent (re-normalized by the engine)."""

    platform: float = Field(40.0, ge=0)
    wells: float = Field(40.0, ge=0)
    subsea: float = Field(20.0, ge=0)

    @property
    def total(self) -> float:
        return self.platform + self.wells + self.subsea


class CharterSplit(_FrozenModel):
    charter: float = Field(85.0, ge=0)
    service: float = Field(15.0, ge=0)


class RepetroRatio(_FrozenModel):
    """Capital-import tax exemption ratio per category, in percent."""

    platform: float = 100.0
    wells: float = 100.0
    subsea: float = 100.0

    @field_validator("platform", "wells", "subsea")
    @classmethod
    def _exemption_range(cls, v: float) -> float:
        return _clamp_pct(v)


class DepreciationCategory(_FrozenModel):
    method: DepreciationMethod = DepreciationMethod.ACCELERATED
    years: int = 5

    @field_validator("years")
    @classmethod
    def _at_least_one_year(cls, v: int) -> int:
        return max(int(v), 1)


class DepreciationConfig(_FrozenModel):
    platform: DepreciationCategory = DepreciationCategory(method=DepreciationMethod.ACCELERATED, years=5)
    wells: DepreciationCategory = DepreciationCategory(method=DepreciationMethod.UNIT_OF_PRODUCTION, years=5)
    subsea: DepreciationCategory = DepreciationCategory(method=DepreciationMethod.ACCELERATED, years=5)

    def for_category(self, category: str) -> DepreciationCategory:
        return getattr(self, category)


class ProjectParameters(_FrozenModel):
    """
    Immutable technical and financial assumptions for one project evaluation.

    Money is in USD, production in kbpd, reserves in MMbbl, durations in years and
    every rate in percent (``discount_rate=10`` means 10%).
    """

    # --- capex & contracting ---
    total_capex: float = Field(6_000_000_000.0, ge=0)
    capex_duration: int = 5
    capex_peak_relative: float = 4.0  # peak disbursement year, 1..capex_duration
    capex_concentration: float = 50.0  # 0-100, higher = more concentrated around the peak
    capex_split: CapexSplit = CapexSplit()
    platform_ownership: Ownership = Ownership.OWNED
    charter_pv: float = Field(2_000_000_000.0, ge=0, alias="charterPV")
    charter_split: CharterSplit = CharterSplit()
    service_tax_rate: float = 14.25
    repetro_ratio: RepetroRatio = RepetroRatio()
    capex_tax_rate: float = 40.0

    # --- oil price ---
    brent_price: float = Field(70.0, ge=0)
    brent_strategy: BrentStrategy = BrentStrategy.CONSTANT
    brent_spread: float = 0.0
    brent_long_term: float = Field(60.0, ge=0)
    brent_peak_value: float = Field(90.0, ge=0)
    brent_peak_year: int = 5

    # --- production ---
    peak_production: float = Field(180.0, ge=0)
    ramp_up_duration: float = 3.0
    plateau_duration: float = 4.0
    decline_rate: float = 8.0
    hyperbolic_factor: float = 0.5
    production_mode: ProductionMode = ProductionMode.SIMPLE
    oil_api: float = Field(28.0, alias="oilAPI")
    gor: float = Field(150.0, ge=0)
    max_liquids: float = Field(252_000.0, ge=0)  # bpd
    bsw_max: float = 95.0
    bsw_breakthrough: float = 7.0
    bsw_growth_rate: float = 0.7
    total_reserves: float = Field(1000.0, ge=0)

    # --- opex & well interventions ---
    opex_mode: OpexMode = OpexMode.SIMPLE
    opex_margin: float = 15.0
    opex_fixed: float = Field(100_000_000.0, ge=0)
    opex_variable: float = Field(4.0, ge=0)  # USD/bbl
    cost_inflation: float = 2.0
    well_count: int = 16
    workover_cost: float = Field(57_600_000.0, ge=0)
    workover_lambda: float = Field(0.15, ge=0)  # failures per well-year
    workover_mob_cost: float = Field(8.0, ge=0)  # USD MM per event
    workover_duration: float = Field(20.0, ge=0)  # intervention days per event
    workover_daily_rate: float = Field(800.0, ge=0)  # USD k per day
    workover_tesp: float = Field(90.0, ge=0)  # days waiting for a rig, production stopped
    workover_failure_profile: FailureProfile = FailureProfile.WEAROUT

    # --- economics & fiscal ---
    discount_rate: float = 10.0
    project_duration: int = 30
    tax_regime: TaxRegime = TaxRegime.SHARING
    royalties_rate: float = 10.0
    special_participation_rate: float = 0.0
    cost_oil_cap: float = 50.0
    profit_oil_gov_share: float = 30.0
    corporate_tax_rate: float = 34.0

    # --- depreciation ---
    depreciation_mode: DepreciationMode = DepreciationMode.DETAILED
    depreciation_years: int = 10
    depreciation_config: DepreciationConfig = DepreciationConfig()

    # --- decommissioning ---
    abex_mode: AbexMode = AbexMode.SIMPLE
    abex_simple_rate: float = 15.0
    abex_per_well: float = Field(25_000_000.0, ge=0)
    abex_subsea_pct: float = 25.0
    abex_platform: float = Field(150_000_000.0, ge=0)

    @field_validator(
        "service_tax_rate",
        "capex_tax_rate",
        "capex_concentration",
        "brent_spread",
        "decline_rate",
        "opex_margin",
        "royalties_rate",
        "special_participation_rate",
        "cost_oil_cap",
        "profit_oil_gov_share",
        "corporate_tax_rate",
        "abex_simple_rate",
        "abex_subsea_pct",
    )
    @classmethod
    def _percent_range(cls, v: float) -> float:
        return _clamp_pct(v)

    @field_validator("capex_duration")
    @classmethod
    def _capex_duration_floor(cls, v: int) -> int:
        return max(int(v), 1)

    @field_validator("project_duration")
    @classmethod
    def _project_covers_completion(cls, v: int, info: ValidationInfo) -> int:
        # Both post-first-oil completion years must fall inside the project.
        capex_duration = info.data.get("capex_duration", 1)
        return max(int(v), capex_duration + 1)

    @field_validator("ramp_up_duration", "plateau_duration", "bsw_breakthrough", "cost_inflation", "discount_rate")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        return max(float(v), 0.0)

    @field_validator("hyperbolic_factor")
    @classmethod
    def _arps_exponent_range(cls, v: float) -> float:
        return min(max(float(v), 0.0), 2.0)

    @field_validator("bsw_max")
    @classmethod
    def _bsw_max_range(cls, v: float) -> float:
        # Must stay above the 2% breakthrough threshold for the logistic curve to be defined.
        return min(max(float(v), 2.5), 100.0)

    @field_validator("bsw_growth_rate")
    @classmethod
    def _bsw_growth_positive(cls, v: float) -> float:
        return max(float(v), 1e-3)

    @field_validator("well_count", "brent_peak_year")
    @classmethod
    def _non_negative_int(cls, v: int) -> int:
        return max(int(v), 0)

    @field_validator("depreciation_years")
    @classmethod
    def _depreciation_years_floor(cls, v: int) -> int:
        return max(int(v), 1)

    @model_validator(mode="before")
    @classmethod
    def _nested_well_count(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "well_count" in data or "wellCount" in data:
            return data
        wells = data.get(NESTED_WELLS_KEY)
        if isinstance(wells, dict) and wells.get("numWells") is not None:
            return {**data, "well_count": wells["numWells"]}
        return data

    @property
    def production_start_year(self) -> int:
        """Project year of first oil (production year 1)."""
        return self.capex_duration

    @property
    def decommissioning_year(self) -> int:
        return self.project_duration + 1

    def with_overrides(self, **updates: Any) -> "ProjectParameters":
        """Return a re-validated copy with ``updates`` applied (snake_case or camelCase keys)."""
        data = self.model_dump()
        for key, value in updates.items():
            data[resolve_field_name(key)] = value
        return ProjectParameters.model_validate(data)

    def to_wire(self) -> dict:
        """camelCase dict in the shape the presentation layer sends."""
        return self.model_dump(by_alias=True, mode="json")


def resolve_field_name(key: str) -> str:
    if key in ProjectParameters.model_fields:
        return key
    for name, field in ProjectParameters.model_fields.items():
        if field.alias == key:
            return name
    raise KeyError(f"Unknown project parameter: {key}")


@dataclass(frozen=True)
class MonteCarloConfig:
    iterations: int = 1000
    seed: int = 7

    # P10 / P50 / P90 in oil & gas convention (P10 = optimistic, P90 = conservative)
    percentiles: Tuple[int, ...] = (10, 50, 90)

    # keep every iteration's YearRecord table (memory heavy; off by default)
    keep_paths: bool = False
