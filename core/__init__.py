"""
Core package: schema definitions, configuration, validation and shared utilities.
No business logic lives here.
"""

from .schema import ASSET_CATEGORIES, YEAR_RECORD_COLUMNS, YEAR_RECORD_WIRE_NAMES
from .config import MonteCarloConfig, ProjectParameters
from .utils import annuity_payment, finite_or, gaussian_weights
from .validators import ValidationResult, validate_parameters

__all__ = [
    "ASSET_CATEGORIES",
    "YEAR_RECORD_COLUMNS",
    "YEAR_RECORD_WIRE_NAMES",
    "MonteCarloConfig",
    "ProjectParameters",
    "annuity_payment",
    "finite_or",
    "gaussian_weights",
    "ValidationResult",
    "validate_parameters",
]
