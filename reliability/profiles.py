"""
Failure-rate profiles used by the workover provision and the production derate.

  constant λ(t) = λavg
  wearout  linear growth centred on mid-life: λavg · (1 + k · (t − 0.5)), k = 1.5
  bathtub  quadratic, high at both ends: 6·λavg · (t − 0.5)² + 0.5·λavg, capped at 2·λavg

t is the project year normalized to [0, 1]. Both shaped profiles average to λavg
over t ∈ [0, 1].
"""

from __future__ import annotations

from dataclasses import dataclass

from core.schema import FailureProfile

from .base import FailureRateProfile, normalized_time


@dataclass(frozen=True)
class ConstantFailureRate(FailureRateProfile):
    average_rate: float = 0.15

    def rate(self, year: int, project_duration: int) -> float:
        return max(0.0, float(self.average_rate))


@dataclass(frozen=True)
class WearoutFailureRate(FailureRateProfile):
    """Ageing wells: rate starts at (1 − k/2)·λavg and ends at (1 + k/2)·λavg."""

    average_rate: float = 0.15
    growth_factor: float = 1.5

    def rate(self, year: int, project_duration: int) -> float:
        t = normalized_time(year, project_duration)
        multiplier = 1.0 + self.growth_factor * (t - 0.5)
        return max(0.0, self.average_rate * multiplier)


@dataclass(frozen=True)
class BathtubFailureRate(FailureRateProfile):
    """Infant mortality and wear-out: 2·λavg at both ends, 0.5·λavg at mid-life."""

    average_rate: float = 0.15

    def rate(self, year: int, project_duration: int) -> float:
        t = normalized_time(year, project_duration)
        min_rate = 0.5 * self.average_rate
        max_rate = 2.0 * self.average_rate
        a = (max_rate - min_rate) * 4.0
        value = a * (t - 0.5) ** 2 + min_rate
        return max(0.0, min(max_rate, value))


_PROFILES = {
    FailureProfile.CONSTANT: ConstantFailureRate,
    FailureProfile.WEAROUT: WearoutFailureRate,
    FailureProfile.BATHTUB: BathtubFailureRate,
}


def failure_profile(tag: FailureProfile | str, average_rate: float) -> FailureRateProfile:
    """Build the profile named by ``tag`` around ``average_rate``."""
    return _PROFILES[FailureProfile(tag)](average_rate=average_rate)
