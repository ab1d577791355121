"""
Parameter quality report for project inputs before they enter the engine.

ProjectParameters clamps and re-normalizes silently; this report tells the caller
what construction will change:
- Blocking errors (negative money, unknown tags, wrong types)
- Values that will be clamped into range
- Capex splits that will be re-normalized
- Keys that will be ignored
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from pydantic import ValidationError

from .config import NESTED_WELLS_KEY, ProjectParameters, resolve_field_name
from .schema import Ownership


@dataclass
class ValidationResult:
    """Collects all validation warnings/errors for one parameter set."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    params: Optional[ProjectParameters] = None

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        lines = []
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  ✗ {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  ⚠ {w}")
        if not lines:
            lines.append("✓ All checks passed.")
        return "\n".join(lines)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_parameters(raw: Mapping[str, Any]) -> ValidationResult:
    """
    Validate a raw parameter mapping (snake_case or camelCase keys).
    Returns a ValidationResult with errors (blocking) and warnings (informational).
    On success ``result.params`` holds the constructed ProjectParameters.
    """
    result = ValidationResult()

    try:
        params = ProjectParameters.model_validate(dict(raw))
    except ValidationError as exc:
        for err in exc.errors():
            loc = ".".join(str(part) for part in err["loc"])
            result.errors.append(f"{loc}: {err['msg']}")
        return result

    result.params = params

    # --- Unknown keys ---
    for key in raw:
        if key == NESTED_WELLS_KEY:
            continue
        try:
            resolve_field_name(key)
        except KeyError:
            result.warnings.append(f"Unknown parameter '{key}' is ignored.")

    # --- Clamped scalars ---
    for key, value in raw.items():
        try:
            name = resolve_field_name(key)
        except KeyError:
            continue
        if not _is_number(value):
            continue
        constructed = getattr(params, name)
        if not _is_number(constructed):
            continue
        if not math.isclose(float(value), float(constructed), rel_tol=0.0, abs_tol=1e-12):
            result.warnings.append(f"{name} clamped from {value} to {constructed}.")

    # --- Capex split ---
    split = params.capex_split
    if split.total <= 0:
        result.warnings.append("capex_split sums to 0; the default 40/40/20 split will be used.")
    elif not math.isclose(split.total, 100.0, abs_tol=1e-9):
        result.warnings.append(f"capex_split sums to {split.total:g}%; shares will be re-normalized.")

    if (
        params.platform_ownership == Ownership.CHARTERED
        and split.total > 0
        and split.wells + split.subsea <= 0
    ):
        result.warnings.append("Chartered platform with no wells/subsea share: no capex is capitalised.")

    # --- Degenerate economics ---
    if params.discount_rate == 0:
        result.warnings.append("discount_rate is 0; charter PV is amortized straight-line.")
    if params.total_reserves == 0:
        result.warnings.append("total_reserves is 0; unit-of-production depreciation charges nothing.")

    return result
