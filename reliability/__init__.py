"""
Reliability package: time-dependent well failure rates λ(t).
"""

from .base import FailureRateProfile, normalized_time
from .profiles import (
    BathtubFailureRate,
    ConstantFailureRate,
    WearoutFailureRate,
    failure_profile,
)

__all__ = [
    "FailureRateProfile",
    "normalized_time",
    "BathtubFailureRate",
    "ConstantFailureRate",
    "WearoutFailureRate",
    "failure_profile",
]
