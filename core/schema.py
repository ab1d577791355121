from __future__ import annotations

from enum import Enum
from typing import Tuple


class Ownership(str, Enum):
    OWNED = "owned"
    CHARTERED = "chartered"


class ProductionMode(str, Enum):
    SIMPLE = "simple"
    DETAILED = "detailed"


class OpexMode(str, Enum):
    SIMPLE = "simple"
    DETAILED = "detailed"


class DepreciationMode(str, Enum):
    SIMPLE = "simple"
    DETAILED = "detailed"


class DepreciationMethod(str, Enum):
    STRAIGHT_LINE = "linear"
    ACCELERATED = "accelerated"
    UNIT_OF_PRODUCTION = "uop"


class AbexMode(str, Enum):
    SIMPLE = "simple"
    DETAILED = "detailed"


class TaxRegime(str, Enum):
    CONCESSION = "concession"
    SHARING = "sharing"
    TRANSFER_RIGHTS = "transfer_rights"


class FailureProfile(str, Enum):
    CONSTANT = "constant"
    WEAROUT = "wearout"
    BATHTUB = "bathtub"


class BrentStrategy(str, Enum):
    CONSTANT = "constant"
    MARKET_BULL = "market_bull"
    MARKET_BEAR = "market_bear"
    CUSTOM = "custom"


# Depreciable asset categories, in reporting order.
ASSET_CATEGORIES: Tuple[str, ...] = ("platform", "wells", "subsea")

# Canonical yearly output columns. The assembler emits exactly these fields per year.
YEAR_RECORD_COLUMNS: Tuple[str, ...] = (
    "year",
    "production_year",
    "is_decommissioning_year",
    "capex",
    "capex_tax",
    "revenue",
    "opex",
    "charter_cost",
    "royalties",
    "special_participation",
    "profit_oil_gov",
    "corporate_tax",
    "taxes",
    "depreciation",
    "depreciation_tax_shield",
    "free_cash_flow",
    "discounted_cash_flow",
    "cumulative_cash_flow",
    "cumulative_discounted_cash_flow",
    "brent_price",
    "oil_price",
    "production_volume",
    "production_mmbbl",
    "liquid_volume",
    "water_volume",
    "water_cut",
    "failure_rate",
    "production_efficiency",
    "loss_carry_forward",
    "recoverable_cost_balance",
)

# camelCase names used by the presentation layer for the same fields.
YEAR_RECORD_WIRE_NAMES = {
    "year": "year",
    "production_year": "productionYear",
    "is_decommissioning_year": "isDecomYear",
    "capex": "capex",
    "capex_tax": "capexTax",
    "revenue": "revenue",
    "opex": "opex",
    "charter_cost": "charterCost",
    "royalties": "royalties",
    "special_participation": "specialParticipation",
    "profit_oil_gov": "profitOilGov",
    "corporate_tax": "corporateTax",
    "taxes": "taxes",
    "depreciation": "depreciation",
    "depreciation_tax_shield": "depreciationTaxShield",
    "free_cash_flow": "freeCashFlow",
    "discounted_cash_flow": "discountedCashFlow",
    "cumulative_cash_flow": "accumulatedCashFlow",
    "cumulative_discounted_cash_flow": "accumulatedDiscountedCashFlow",
    "brent_price": "brentPrice",
    "oil_price": "oilPrice",
    "production_volume": "productionVolume",
    "production_mmbbl": "productionMMbbl",
    "liquid_volume": "liquidVolume",
    "water_volume": "waterVolume",
    "water_cut": "bsw",
    "failure_rate": "failureRate",
    "production_efficiency": "productionEfficiency",
    "loss_carry_forward": "lossCarryForward",
    "recoverable_cost_balance": "recoverableCostBalance",
}
