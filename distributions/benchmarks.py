"""
Default uncertainty ranges for project Monte Carlo runs.

Used when the caller does not supply its own DistributionSettings. Ranges are
centred on the base case (mode = base value):

  peak production   ±20% of base (rounded to whole kbpd)
  plateau duration  base ± 2 years, floored at 1
  decline rate      0.7× .. 1.3× base, floored at 1%
  BSW breakthrough  0.8× .. 1.2× base, floored at 1 year
  BSW growth rate   0.8× .. 1.2× base, floored at 0.1

Scatter Monte Carlo uses uniform ± variations instead of triangular ranges; those
percentages live in SCATTER_VARIATIONS.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from core.config import ProjectParameters

from .sampler import DistributionSettings, UncertainVariable


def _r1(value: float) -> float:
    return round(value * 10) / 10


def default_production_settings(params: ProjectParameters) -> DistributionSettings:
    """Reservoir uncertainty ranges around the base case of ``params``."""
    peak = params.peak_production
    plateau = params.plateau_duration
    decline = params.decline_rate
    breakthrough = params.bsw_breakthrough
    growth = params.bsw_growth_rate

    return DistributionSettings(
        peak_production=UncertainVariable(
            min=float(round(peak * 0.8)), mode=peak, max=float(round(peak * 1.2)),
        ),
        plateau_duration=UncertainVariable(
            min=max(1.0, plateau - 2.0), mode=plateau, max=plateau + 2.0,
        ),
        decline_rate=UncertainVariable(
            min=_r1(max(1.0, decline * 0.7)), mode=decline, max=_r1(decline * 1.3),
        ),
        bsw_breakthrough=UncertainVariable(
            min=_r1(max(1.0, breakthrough * 0.8)), mode=breakthrough, max=_r1(breakthrough * 1.2),
        ),
        bsw_growth_rate=UncertainVariable(
            min=_r1(max(0.1, growth * 0.8)), mode=growth, max=_r1(growth * 1.2),
        ),
    )


@dataclass(frozen=True)
class ScatterVariation:
    """Uniform ± variation (in percent) applied to one continuous input."""
    parameter: str
    range_pct: float
    clamp_pct: bool = False  # clamp the varied value to [0, 100]


SCATTER_VARIATIONS: Dict[str, ScatterVariation] = {
    "total_capex": ScatterVariation("total_capex", 20.0),
    "capex_concentration": ScatterVariation("capex_concentration", 30.0, clamp_pct=True),
    "peak_production": ScatterVariation("peak_production", 20.0),
    "decline_rate": ScatterVariation("decline_rate", 20.0),
    "opex_margin": ScatterVariation("opex_margin", 20.0),
    "opex_fixed": ScatterVariation("opex_fixed", 15.0),
    "opex_variable": ScatterVariation("opex_variable", 15.0),
}
