"""
Cash-flow engine: capex, production, opex, depreciation, fiscal terms and the runners.
"""

from .cashflow import AccumulatorState, CashFlowAssembler, YearRecord
from .runner import MonteCarloResult, ProjectResult, run, run_monte_carlo, run_project

__all__ = [
    "AccumulatorState",
    "CashFlowAssembler",
    "YearRecord",
    "MonteCarloResult",
    "ProjectResult",
    "run",
    "run_monte_carlo",
    "run_project",
]
