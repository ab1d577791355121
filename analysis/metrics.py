"""
Investment metrics computed from a free-cash-flow vector (index = project year).

All rates are in percent, both as inputs and outputs (IRR = 12.3 means 12.3%).
Metrics that are undefined (IRR does not converge, cash flow never pays back)
are None, never an exception.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

NPV_PROFILE_RATES: Tuple[float, ...] = tuple(float(r) for r in range(0, 41, 5))


def npv(rate_pct: float, cash_flows: Sequence[float]) -> float:
    """Σ CF(t) / (1 + r)^t."""
    flows = np.asarray(cash_flows, dtype=float)
    t = np.arange(len(flows), dtype=float)
    return float(np.sum(flows / (1.0 + rate_pct / 100.0) ** t))


def irr(
    cash_flows: Sequence[float],
    guess: float = 0.1,
    *,
    max_iterations: int = 1000,
    tolerance: float = 1e-5,
) -> Optional[float]:
    """
    Internal rate of return by Newton-Raphson on NPV(r) = 0.

    Parameters
    ----------
    cash_flows : sequence of float
        Free cash flow per year, year 0 first
    guess : float
        Starting rate as a fraction (0.1 = 10%)

    Returns
    -------
    IRR in percent, or None when an iterate goes non-finite, the derivative
    vanishes, or the iteration budget runs out.
    """
    flows = np.asarray(cash_flows, dtype=float)
    t = np.arange(len(flows), dtype=float)
    rate = float(guess)

    with np.errstate(all="ignore"):
        for _ in range(max_iterations):
            base = 1.0 + rate
            if base <= 0:
                return None
            term = base ** t
            value = float(np.sum(flows / term))
            derivative = float(-np.sum(t[1:] * flows[1:] / (term[1:] * base)))

            if not np.isfinite(value):
                return None
            if abs(value) < tolerance:
                return rate * 100.0
            if derivative == 0 or not np.isfinite(derivative):
                return None

            new_rate = rate - value / derivative
            if not np.isfinite(new_rate):
                return None
            if abs(new_rate - rate) < tolerance:
                return new_rate * 100.0
            rate = new_rate
    return None


def payback(rate_pct: float, cash_flows: Sequence[float]) -> Optional[float]:
    """
    Year at which the (discounted) cumulative cash flow turns non-negative.

    Linear interpolation inside the crossing year: (t − 1) + |deficit| / inflow.
    None if the cumulative never turns non-negative.
    """
    cumulative = 0.0
    for t, cf in enumerate(cash_flows):
        discounted = cf / (1.0 + rate_pct / 100.0) ** t
        previous = cumulative
        cumulative += discounted
        if cumulative >= 0:
            if t == 0:
                return 0.0
            return t - 1 + abs(previous) / discounted
    return None


def discounted_payback(rate_pct: float, cash_flows: Sequence[float]) -> Optional[float]:
    return payback(rate_pct, cash_flows)


def nominal_payback(cash_flows: Sequence[float]) -> Optional[float]:
    return payback(0.0, cash_flows)


def npv_profile(
    cash_flows: Sequence[float],
    rates: Sequence[float] = NPV_PROFILE_RATES,
) -> List[Tuple[float, float]]:
    """(rate %, NPV) pairs, 0% to 40% in 5% steps by default."""
    return [(float(r), npv(r, cash_flows)) for r in rates]


@dataclass(frozen=True)
class Metrics:
    npv: float
    irr: Optional[float]
    discounted_payback: Optional[float]
    nominal_payback: Optional[float]
    investment_efficiency: float  # NPV / discounted capex
    discounted_capex: float
    spread: Optional[float]  # IRR − discount rate, percentage points

    def to_dict(self) -> Dict[str, Optional[float]]:
        return asdict(self)

    def to_wire(self) -> Dict[str, Optional[float]]:
        return {
            "vpl": self.npv,
            "tir": self.irr,
            "payback": self.discounted_payback,
            "paybackNominal": self.nominal_payback,
            "vpl_ia": self.investment_efficiency,
            "ia": self.discounted_capex,
            "spread": self.spread,
        }


def compute_metrics(
    cash_flows: Sequence[float],
    discount_rate: float,
    discounted_capex: float,
) -> Metrics:
    """Reduce a free-cash-flow vector to the headline investment metrics."""
    value = npv(discount_rate, cash_flows)
    rate = irr(cash_flows)
    efficiency = value / discounted_capex if discounted_capex > 0 else 0.0
    return Metrics(
        npv=value,
        irr=rate,
        discounted_payback=discounted_payback(discount_rate, cash_flows),
        nominal_payback=nominal_payback(cash_flows),
        investment_efficiency=efficiency,
        discounted_capex=discounted_capex,
        spread=rate - discount_rate if rate is not None else None,
    )
