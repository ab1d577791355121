"""
Analysis outputs: investment metrics and percentile aggregation.

Sensitivity studies (analysis.sensitivity) drive the engine and are imported
from their module directly.
"""

from .metrics import Metrics, compute_metrics, irr, npv, npv_profile
from .aggregator import percentile_bands, summarize_distributions, yearly_bands

__all__ = [
    "Metrics",
    "compute_metrics",
    "irr",
    "npv",
    "npv_profile",
    "percentile_bands",
    "summarize_distributions",
    "yearly_bands",
]
