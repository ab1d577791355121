"""
Capital deployment: phasing, import tax, chartering and decommissioning.

Flow:
  1. Re-normalize the platform/wells/subsea split (all-zero → 40/40/20)
  2. Ownership decides what is capitalised: owned → everything,
     chartered → wells + subsea only (the platform becomes a charter annuity)
  3. Effective import tax = Σ share × (1 − exemption) × base rate
  4. 85% of capitalised capex is spread over the build years with Gaussian
     weights; the remaining 15% is split evenly over production years 1 and 2
  5. Every disbursement carries the import tax; asset bases include it
  6. Decommissioning (ABEX) is booked once, in year project_duration + 1
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

import numpy as np

from core.config import ProjectParameters
from core.schema import ASSET_CATEGORIES, AbexMode, Ownership
from core.utils import annuity_payment, discount_factor, gaussian_weights

BUILD_SHARE = 0.85
COMPLETION_YEARS = 2

_DEFAULT_SPLIT = {"platform": 0.40, "wells": 0.40, "subsea": 0.20}


def normalized_split(params: ProjectParameters) -> Dict[str, float]:
    """Category shares of total capex, summing to 1."""
    split = params.capex_split
    total = split.total
    if total <= 0:
        return dict(_DEFAULT_SPLIT)
    return {c: getattr(split, c) / total for c in ASSET_CATEGORIES}


def capitalised_shares(params: ProjectParameters) -> Dict[str, float]:
    """
    Shares of the capitalised amount per category.

    Owned: the normalized split. Chartered: platform 0, wells/subsea re-normalized
    between themselves.
    """
    shares = normalized_split(params)
    if params.platform_ownership != Ownership.CHARTERED:
        return shares
    remaining = shares["wells"] + shares["subsea"]
    if remaining <= 0:
        return {c: 0.0 for c in ASSET_CATEGORIES}
    return {"platform": 0.0, "wells": shares["wells"] / remaining, "subsea": shares["subsea"] / remaining}


def import_tax_rate(params: ProjectParameters) -> float:
    """Effective capital import tax rate (fraction) on every capex disbursement."""
    shares = capitalised_shares(params)
    base_rate = params.capex_tax_rate / 100.0
    return sum(
        shares[c] * (1.0 - getattr(params.repetro_ratio, c) / 100.0) * base_rate
        for c in ASSET_CATEGORIES
    )


def annual_charter_cost(params: ProjectParameters) -> float:
    """Charter annuity over the project life, service portion grossed up by service tax."""
    if params.platform_ownership != Ownership.CHARTERED:
        return 0.0
    base = annuity_payment(params.charter_pv, params.discount_rate, params.project_duration)
    charter = base * params.charter_split.charter / 100.0
    service = base * params.charter_split.service / 100.0 * (1.0 + params.service_tax_rate / 100.0)
    return charter + service


def decommissioning_cost(params: ProjectParameters) -> float:
    if params.abex_mode == AbexMode.DETAILED:
        wells = params.well_count * params.abex_per_well
        subsea = params.total_capex * normalized_split(params)["subsea"] * params.abex_subsea_pct / 100.0
        return wells + subsea + params.abex_platform
    return params.total_capex * params.abex_simple_rate / 100.0


@dataclass(frozen=True)
class CapexSchedule:
    """
    Per-year capital outflows for years 0 .. project_duration + 1.

    ``capex`` includes import tax and, in the last slot, decommissioning.
    """
    capex: np.ndarray
    capex_tax: np.ndarray
    charter_cost: np.ndarray
    asset_bases: Dict[str, float]
    constructable_capex: float  # capitalised amount before import tax
    effective_tax_rate: float
    annual_charter_cost: float
    decommissioning_cost: float

    @property
    def capitalised_capex(self) -> float:
        """Depreciable total: constructable capex plus capitalised import tax."""
        return self.constructable_capex * (1.0 + self.effective_tax_rate)

    @property
    def n_years(self) -> int:
        return len(self.capex)

    def discounted_capex(self, rate_pct: float) -> float:
        """Present value of all capex except decommissioning."""
        last = self.n_years - 1
        return float(sum(
            self.capex[t] * discount_factor(rate_pct, t)
            for t in range(last)
            if self.capex[t] > 0
        ))


class CapexScheduler:
    """
    Turns total capex, phasing shape and ownership into a CapexSchedule.

    Usage:
        schedule = CapexScheduler(params).schedule()
        schedule.capex[year]        → outflow in that year
        schedule.asset_bases        → {"platform": ..., "wells": ..., "subsea": ...}
    """

    def __init__(self, params: ProjectParameters):
        self.params = params

    def schedule(self) -> CapexSchedule:
        p = self.params
        n_years = p.project_duration + 2
        decom_year = p.decommissioning_year

        shares = capitalised_shares(p)
        if p.platform_ownership == Ownership.CHARTERED:
            owned_fraction = 1.0 - normalized_split(p)["platform"]
        else:
            owned_fraction = 1.0
        constructable = p.total_capex * owned_fraction
        tax_rate = import_tax_rate(p)

        base = np.zeros(n_years, dtype=float)
        weights = gaussian_weights(p.capex_duration, p.capex_peak_relative, p.capex_concentration)
        base[: p.capex_duration] += constructable * BUILD_SHARE * weights

        completion = constructable * (1.0 - BUILD_SHARE) / COMPLETION_YEARS
        for k in range(COMPLETION_YEARS):
            base[p.production_start_year + k] += completion

        capex_tax = base * tax_rate
        capex = base + capex_tax
        abex = decommissioning_cost(p)
        capex[decom_year] += abex

        charter_cost = np.zeros(n_years, dtype=float)
        annual_charter = annual_charter_cost(p)
        charter_cost[p.production_start_year: decom_year] = annual_charter

        capitalised = constructable * (1.0 + tax_rate)
        asset_bases = {c: capitalised * shares[c] for c in ASSET_CATEGORIES}

        return CapexSchedule(
            capex=capex,
            capex_tax=capex_tax,
            charter_cost=charter_cost,
            asset_bases=asset_bases,
            constructable_capex=constructable,
            effective_tax_rate=tax_rate,
            annual_charter_cost=annual_charter,
            decommissioning_cost=abex,
        )
