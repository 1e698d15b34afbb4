# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import re
from enum import Enum
from typing import Optional

from .model import to_camel_alias


def _snake_case(value: str) -> str:
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", value).lower()


class PropertyTypeEnum(str, Enum):
    """
    Type of commercial property under analysis.

    Options:
        OFFICE: Office building leased to business tenants
        RETAIL: Shopping center or single retail property
        INDUSTRIAL: Warehouse, distribution, manufacturing or flex property
        MULTIFAMILY: Multi-unit residential rental property
        MIXED_USE: Property combining several of the above in one asset
    """

    OFFICE = "office"
    RETAIL = "retail"
    INDUSTRIAL = "industrial"
    MULTIFAMILY = "multifamily"
    MIXED_USE = "mixed-use"

    @classmethod
    def _missing_(cls, value: object) -> Optional["PropertyTypeEnum"]:
        # Accept "mixed_use" / "Mixed-Use" spellings from older form payloads
        if isinstance(value, str):
            normalized = value.strip().lower().replace("_", "-")
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class MetricName(str, Enum):
    """
    Identifier of every metric or analysis the engine can be asked to produce.

    Values match the attribute names on ``MetricFlags`` and
    ``CalculatedMetrics``. camelCase names from form payloads (``capRate``)
    are accepted on lookup.
    """

    # Core financial metrics
    CAP_RATE = "cap_rate"
    CASH_ON_CASH = "cash_on_cash"
    DSCR = "dscr"
    LTV = "ltv"
    IRR = "irr"
    ROI = "roi"
    BREAKEVEN = "breakeven"
    NPV = "npv"
    DEBT_YIELD = "debt_yield"
    PRICE_PER_SF = "price_per_sf"
    GRM = "grm"
    PRICE_PER_UNIT = "price_per_unit"
    EGI = "egi"
    EFFECTIVE_RENT_PSF = "effective_rent_psf"
    OCCUPANCY_COST_RATIO = "occupancy_cost_ratio"

    # Simple asset metrics
    WALT = "walt"
    SALES_PER_SF = "sales_per_sf"
    CLEAR_HEIGHT_ANALYSIS = "clear_height_analysis"
    INDUSTRIAL_METRICS = "industrial_metrics"
    REVENUE_PER_UNIT = "revenue_per_unit"
    MULTIFAMILY_METRICS = "multifamily_metrics"

    # Office analyses
    TENANT_FINANCIAL_HEALTH = "tenant_financial_health"
    LEASE_ECONOMICS = "lease_economics"
    BUILDING_OPERATIONS = "building_operations"
    MARKET_POSITIONING = "market_positioning"

    # Retail analyses
    TENANT_HEALTH = "tenant_health"
    CO_TENANCY_RISK = "co_tenancy_risk"
    TRADE_AREA_ANALYSIS = "trade_area_analysis"
    PERCENTAGE_RENT = "percentage_rent"

    # Industrial analyses
    FUNCTIONAL_SCORE = "functional_score"
    LOCATION_SCORE = "location_score"

    # Multifamily analyses
    REVENUE_METRICS = "revenue_metrics"
    OPERATING_PERFORMANCE = "operating_performance"
    MARKET_POSITION = "market_position"

    # Mixed-use analyses
    MIXED_USE_PERFORMANCE = "mixed_use_performance"
    CROSS_USE_INTERACTIONS = "cross_use_interactions"

    @classmethod
    def _missing_(cls, value: object) -> Optional["MetricName"]:
        if isinstance(value, str):
            aliases = {"simpleWalt": "walt", "pricePerSF": "price_per_sf"}
            normalized = _snake_case(aliases.get(value, value))
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @property
    def camel(self) -> str:
        """camelCase spelling used by the JSON form."""
        return to_camel_alias(self.value)


class MetricCategory(str, Enum):
    """Grouping used when presenting metric metadata."""

    BASIC = "Basic"
    DEBT = "Debt"
    ADVANCED = "Advanced"
    PROPERTY = "Property"
    MULTIFAMILY = "Multifamily"
    ASSET = "Asset"


class MetricKind(str, Enum):
    """How a metric value is rendered."""

    PERCENTAGE = "percentage"
    CURRENCY = "currency"
    RATIO = "ratio"
    NUMBER = "number"
    YEARS = "years"


class PackageTier(str, Enum):
    """Depth of a calculation package."""

    BASIC = "basic"
    COMPLETE = "complete"
    INVESTMENT = "investment"
    INSTITUTIONAL = "institutional"


class AssessmentLevel(str, Enum):
    """Qualitative grade for a single metric or a whole deal."""

    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"
    INSUFFICIENT = "insufficient"


class FieldKind(str, Enum):
    """Input widget kind of a property data field."""

    CURRENCY = "currency"
    PERCENTAGE = "percentage"
    NUMBER = "number"
    TEXT = "text"
    SELECT = "select"


class CreditRating(str, Enum):
    """Tenant credit rating, S&P style."""

    AAA = "AAA"
    AA = "AA"
    A = "A"
    BBB = "BBB"
    BB = "BB"
    B = "B"
    CCC = "CCC"
    D = "D"
    NR = "NR"

    @property
    def is_investment_grade(self) -> bool:
        return self in (CreditRating.AAA, CreditRating.AA, CreditRating.A, CreditRating.BBB)

    @property
    def is_high_grade(self) -> bool:
        """A or better."""
        return self in (CreditRating.AAA, CreditRating.AA, CreditRating.A)


class RiskLevel(str, Enum):
    """Four-step risk scale shared by the asset analyzers."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class IndustrialTypeEnum(str, Enum):
    """Functional sub-type of an industrial building."""

    WAREHOUSE = "Warehouse"
    MANUFACTURING = "Manufacturing"
    FLEX = "Flex"
    COLD_STORAGE = "Cold Storage"
    LAST_MILE = "Last Mile"


class RetailCenterTypeEnum(str, Enum):
    """Shopping center format, used for sales benchmarks."""

    REGIONAL_MALL = "Regional Mall"
    LIFESTYLE = "Lifestyle"
    STRIP = "Strip"
    POWER = "Power"
    OUTLET = "Outlet"


class ComponentTypeEnum(str, Enum):
    """Use type of a mixed-use component."""

    OFFICE = "Office"
    RETAIL = "Retail"
    RESIDENTIAL = "Residential"
    HOTEL = "Hotel"
    OTHER = "Other"
