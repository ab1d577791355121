"""
Base class for well failure-rate profiles.
Just the interface and the shared time normalization, no implementations.
"""

from __future__ import annotations


def normalized_time(year: int, project_duration: int) -> float:
    """Project year mapped onto [0, 1] over the project life."""
    return year / max(project_duration - 1, 1)


class FailureRateProfile:
    """
    Interface for time-dependent failure rates λ(t), in failures per well-year.

    Implementations are built around an average rate and must keep their
    time-average over the project life equal to it.
    """

    average_rate: float

    def rate(self, year: int, project_duration: int) -> float:
        raise NotImplementedError
