# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Calculation package catalog.

A package is a named bundle of metrics for one property type together with
the input fields it needs. Each property type offers three tiers: a quick
analysis, a complete (or, for industrial, investment) analysis and an
institutional analysis that adds the type's asset analytics.

The module also carries the metric metadata (``ALL_METRICS``) and the input
field metadata (``FIELD_METADATA``) used to build forms and messages.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from pydantic import Field

from ..asset.property import PropertyData
from ..asset.registry import get_asset_analyzers, validate_asset_data_requirements
from ..core.primitives import (
    FieldKind,
    MetricCategory,
    MetricName,
    Model,
    PackageTier,
    PropertyTypeEnum,
    to_camel_alias,
)

logger = logging.getLogger(__name__)


class CalculationPackage(Model):
    """
    Immutable catalog entry.

    Attributes:
        id: Package identifier, e.g. ``office-complete``
        property_type: Property type the package applies to
        name: Display name
        description: One-line summary
        tier: Depth of the analysis
        included_metrics: Metrics the package calculates
        required_fields: ``PropertyData`` attributes that must be provided
        optional_fields: Attributes that enrich the asset analytics
    """

    id: str
    property_type: PropertyTypeEnum
    name: str
    description: str
    tier: PackageTier
    included_metrics: List[MetricName]
    required_fields: List[str]
    optional_fields: List[str] = Field(default_factory=list)


class MetricInfo(Model):
    name: str
    category: MetricCategory
    description: str
    required_fields: List[str]


class FieldMetadata(Model):
    """Form metadata of one ``PropertyData`` input."""

    label: str
    category: str
    kind: FieldKind = FieldKind.NUMBER
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    prefix: Optional[str] = None
    helper_text: Optional[str] = None


class PackageRecommendation(Model):
    package_id: str
    name: str
    description: str
    match_score: int


class AssetAnalysisAvailability(Model):
    function_name: str
    description: str
    available: bool
    requirements: List[str]


# --- Package catalog ------------------------------------------------------------

BASIC_METRICS = [MetricName.CAP_RATE, MetricName.CASH_ON_CASH]
COMPLETE_METRICS = BASIC_METRICS + [MetricName.DSCR, MetricName.IRR, MetricName.BREAKEVEN]
INVESTMENT_METRICS = BASIC_METRICS + [MetricName.DSCR, MetricName.ROI]
INSTITUTIONAL_METRICS = BASIC_METRICS + [
    MetricName.DSCR,
    MetricName.IRR,
    MetricName.ROI,
    MetricName.BREAKEVEN,
]

BASIC_FIELDS = ["purchase_price", "current_noi", "total_investment", "annual_cash_flow"]
LOAN_FIELDS = ["loan_amount", "interest_rate", "loan_term"]
INVESTMENT_FIELDS = BASIC_FIELDS[:2] + ["projected_noi"] + BASIC_FIELDS[2:] + LOAN_FIELDS
COMPLETE_FIELDS = INVESTMENT_FIELDS + ["operating_expenses", "gross_income"]

# Institutional additions per type: (metrics, required fields, optional fields)
_INSTITUTIONAL: Dict[PropertyTypeEnum, tuple] = {
    PropertyTypeEnum.OFFICE: (
        [
            MetricName.PRICE_PER_SF,
            MetricName.WALT,
            MetricName.TENANT_FINANCIAL_HEALTH,
            MetricName.LEASE_ECONOMICS,
        ],
        ["rentable_square_feet", "number_of_tenants", "average_rent_psf", "weighted_average_lease_term"],
        ["office_tenants", "office_market", "building_operations"],
    ),
    PropertyTypeEnum.RETAIL: (
        [
            MetricName.PRICE_PER_SF,
            MetricName.SALES_PER_SF,
            MetricName.TENANT_HEALTH,
            MetricName.CO_TENANCY_RISK,
            MetricName.PERCENTAGE_RENT,
        ],
        ["gross_leasable_area", "sales_per_sf", "occupancy_cost_ratio", "traffic_count"],
        ["retail_tenants", "retail_sales", "trade_areas", "competitors", "traffic_counts"],
    ),
    PropertyTypeEnum.INDUSTRIAL: (
        [
            MetricName.PRICE_PER_SF,
            MetricName.CLEAR_HEIGHT_ANALYSIS,
            MetricName.FUNCTIONAL_SCORE,
            MetricName.LOCATION_SCORE,
        ],
        ["clear_height", "number_of_dock_doors", "power_capacity", "distance_to_highway"],
        ["building_specs", "location_metrics", "industrial_tenants", "industrial_type"],
    ),
    PropertyTypeEnum.MULTIFAMILY: (
        [
            MetricName.PRICE_PER_UNIT,
            MetricName.GRM,
            MetricName.EGI,
            MetricName.REVENUE_METRICS,
            MetricName.MARKET_POSITION,
        ],
        ["number_of_units", "current_occupancy", "average_rent_per_unit", "unit_mix"],
        ["units", "amenities", "market_comps", "submarket", "expense_detail"],
    ),
    PropertyTypeEnum.MIXED_USE: (
        [
            MetricName.PRICE_PER_SF,
            MetricName.MIXED_USE_PERFORMANCE,
            MetricName.CROSS_USE_INTERACTIONS,
        ],
        ["total_square_footage", "property_type"],
        ["components", "shared_systems", "shared_amenities"],
    ),
}

_LABELS = {
    PropertyTypeEnum.OFFICE: ("office", "Office", "office properties"),
    PropertyTypeEnum.RETAIL: ("retail", "Retail", "retail properties"),
    PropertyTypeEnum.INDUSTRIAL: ("industrial", "Industrial", "industrial properties"),
    PropertyTypeEnum.MULTIFAMILY: ("multifamily", "Multifamily", "multifamily properties"),
    PropertyTypeEnum.MIXED_USE: ("mixed", "Mixed-Use", "mixed residential/commercial"),
}

_INSTITUTIONAL_FOCUS = {
    PropertyTypeEnum.OFFICE: "institutional-grade office analysis with tenant and lease analytics",
    PropertyTypeEnum.RETAIL: "retail analysis with sales performance and trade area analytics",
    PropertyTypeEnum.INDUSTRIAL: "industrial analysis with building functionality and logistics analytics",
    PropertyTypeEnum.MULTIFAMILY: "multifamily analysis with revenue performance and market analytics",
    PropertyTypeEnum.MIXED_USE: "mixed-use analysis with component performance and synergy analytics",
}


def _build_packages(property_type: PropertyTypeEnum) -> List[CalculationPackage]:
    prefix, title, audience = _LABELS[property_type]
    basic = CalculationPackage(
        id=f"{prefix}-basic",
        property_type=property_type,
        name=f"{title} Quick Analysis",
        description=f"Basic metrics for {title.lower()} properties",
        tier=PackageTier.BASIC,
        included_metrics=BASIC_METRICS,
        required_fields=BASIC_FIELDS,
    )
    if property_type == PropertyTypeEnum.INDUSTRIAL:
        middle = CalculationPackage(
            id=f"{prefix}-investment",
            property_type=property_type,
            name="Investment Analysis",
            description="Returns and financing metrics",
            tier=PackageTier.INVESTMENT,
            included_metrics=INVESTMENT_METRICS,
            required_fields=INVESTMENT_FIELDS,
        )
    else:
        middle = CalculationPackage(
            id=f"{prefix}-complete",
            property_type=property_type,
            name=f"Complete {title} Analysis",
            description=f"Full analysis for {audience}",
            tier=PackageTier.COMPLETE,
            included_metrics=COMPLETE_METRICS,
            required_fields=COMPLETE_FIELDS,
        )
    asset_metrics, asset_fields, optional_fields = _INSTITUTIONAL[property_type]
    institutional = CalculationPackage(
        id=f"{prefix}-institutional",
        property_type=property_type,
        name=f"Institutional {title} Analysis",
        description=f"Comprehensive {_INSTITUTIONAL_FOCUS[property_type]}",
        tier=PackageTier.INSTITUTIONAL,
        included_metrics=INSTITUTIONAL_METRICS + asset_metrics,
        required_fields=COMPLETE_FIELDS + asset_fields,
        optional_fields=optional_fields,
    )
    return [basic, middle, institutional]


PROPERTY_PACKAGES: Dict[PropertyTypeEnum, List[CalculationPackage]] = {
    property_type: _build_packages(property_type) for property_type in PropertyTypeEnum
}


def get_packages(property_type: PropertyTypeEnum | str) -> List[CalculationPackage]:
    """Packages offered for ``property_type``, quick to institutional."""
    return list(PROPERTY_PACKAGES[PropertyTypeEnum(property_type)])


def get_package(
    package_id: str, property_type: Optional[PropertyTypeEnum | str] = None
) -> CalculationPackage:
    """
    Look up a package by id, optionally restricted to one property type.

    Raises:
        KeyError: If no package with ``package_id`` exists (for the type)
    """
    types = [PropertyTypeEnum(property_type)] if property_type else list(PropertyTypeEnum)
    for candidate_type in types:
        for package in PROPERTY_PACKAGES[candidate_type]:
            if package.id == package_id:
                return package
    suffix = f" for property type {PropertyTypeEnum(property_type).value}" if property_type else ""
    raise KeyError(f"Package {package_id} not found{suffix}")


# --- Metric metadata ------------------------------------------------------------

ALL_METRICS: Dict[MetricName, MetricInfo] = {
    MetricName.CAP_RATE: MetricInfo(
        name="Cap Rate",
        category=MetricCategory.BASIC,
        description="Annual return on investment based on property's net operating income",
        required_fields=["purchase_price", "current_noi"],
    ),
    MetricName.CASH_ON_CASH: MetricInfo(
        name="Cash-on-Cash Return",
        category=MetricCategory.BASIC,
        description="Annual return on actual cash invested in the property",
        required_fields=["total_investment", "annual_cash_flow"],
    ),
    MetricName.DSCR: MetricInfo(
        name="Debt Service Coverage Ratio",
        category=MetricCategory.DEBT,
        description="Ability to cover debt payments with property income",
        required_fields=["current_noi", "loan_amount", "interest_rate", "loan_term"],
    ),
    MetricName.LTV: MetricInfo(
        name="Loan-to-Value Ratio",
        category=MetricCategory.DEBT,
        description="Ratio of loan amount to property value",
        required_fields=["loan_amount", "purchase_price"],
    ),
    MetricName.DEBT_YIELD: MetricInfo(
        name="Debt Yield",
        category=MetricCategory.DEBT,
        description="Net operating income as a share of the loan amount",
        required_fields=["current_noi", "loan_amount"],
    ),
    MetricName.IRR: MetricInfo(
        name="Internal Rate of Return",
        category=MetricCategory.ADVANCED,
        description="Expected annual return over the investment period",
        required_fields=["total_investment", "annual_cash_flow", "current_noi", "projected_noi"],
    ),
    MetricName.ROI: MetricInfo(
        name="Return on Investment",
        category=MetricCategory.ADVANCED,
        description="Total return on investment relative to initial cost",
        required_fields=["total_investment", "current_noi", "projected_noi"],
    ),
    MetricName.BREAKEVEN: MetricInfo(
        name="Breakeven Analysis",
        category=MetricCategory.ADVANCED,
        description="Point where income equals expenses",
        required_fields=["operating_expenses", "gross_income", "loan_amount", "interest_rate", "loan_term"],
    ),
    MetricName.NPV: MetricInfo(
        name="Net Present Value",
        category=MetricCategory.ADVANCED,
        description="Discounted cash flows and sale value less the equity invested",
        required_fields=["total_investment", "annual_cash_flow", "projected_noi", "discount_rate"],
    ),
    MetricName.PRICE_PER_SF: MetricInfo(
        name="Price per Square Foot",
        category=MetricCategory.PROPERTY,
        description="Property value per square foot of space",
        required_fields=["purchase_price", "square_footage"],
    ),
    MetricName.EFFECTIVE_RENT_PSF: MetricInfo(
        name="Effective Rent per SF",
        category=MetricCategory.PROPERTY,
        description="Average rent per square foot net of operating expenses",
        required_fields=["average_rent_psf", "operating_expenses", "square_footage"],
    ),
    MetricName.OCCUPANCY_COST_RATIO: MetricInfo(
        name="Occupancy Cost Ratio",
        category=MetricCategory.PROPERTY,
        description="Operating expenses as a share of gross income",
        required_fields=["operating_expenses", "gross_income"],
    ),
    MetricName.PRICE_PER_UNIT: MetricInfo(
        name="Price per Unit",
        category=MetricCategory.MULTIFAMILY,
        description="Property value per residential unit",
        required_fields=["purchase_price", "number_of_units"],
    ),
    MetricName.GRM: MetricInfo(
        name="Gross Rent Multiplier",
        category=MetricCategory.MULTIFAMILY,
        description="Ratio of property price to gross rental income",
        required_fields=["purchase_price", "gross_income"],
    ),
    MetricName.EGI: MetricInfo(
        name="Effective Gross Income",
        category=MetricCategory.MULTIFAMILY,
        description="Gross income adjusted for vacancy and collection losses",
        required_fields=["gross_income", "occupancy_rate"],
    ),
    MetricName.REVENUE_PER_UNIT: MetricInfo(
        name="Revenue per Unit",
        category=MetricCategory.MULTIFAMILY,
        description="Monthly rental income per unit",
        required_fields=["number_of_units", "monthly_rental_income"],
    ),
    MetricName.MULTIFAMILY_METRICS: MetricInfo(
        name="Multifamily Revenue Metrics",
        category=MetricCategory.MULTIFAMILY,
        description="Revenue per unit, annualized revenue and comparison to market rent",
        required_fields=["number_of_units", "monthly_rental_income"],
    ),
    MetricName.WALT: MetricInfo(
        name="Weighted Average Lease Term",
        category=MetricCategory.ASSET,
        description="Rent-weighted remaining lease term of the office rent roll",
        required_fields=["purchase_price", "current_noi", "office_tenants"],
    ),
    MetricName.SALES_PER_SF: MetricInfo(
        name="Sales per SF",
        category=MetricCategory.ASSET,
        description="Average tenant sales per square foot",
        required_fields=["retail_tenants"],
    ),
    MetricName.CLEAR_HEIGHT_ANALYSIS: MetricInfo(
        name="Clear Height Analysis",
        category=MetricCategory.ASSET,
        description="Clear height category and its typical pricing effect",
        required_fields=["square_footage", "purchase_price", "clear_height"],
    ),
    MetricName.INDUSTRIAL_METRICS: MetricInfo(
        name="Industrial Metrics",
        category=MetricCategory.ASSET,
        description="Price per SF with the clear height premium or discount",
        required_fields=["square_footage", "purchase_price", "clear_height"],
    ),
}

# Asset analyzer switches take their metadata from the registry
for _property_type in PropertyTypeEnum:
    for _analyzer in get_asset_analyzers(_property_type):
        ALL_METRICS[_analyzer.flag] = MetricInfo(
            name=_analyzer.flag.value.replace("_", " ").title(),
            category=MetricCategory.ASSET,
            description=_analyzer.description,
            required_fields=[],
        )


FIELD_METADATA: Dict[str, FieldMetadata] = {
    # Basic
    "property_type": FieldMetadata(
        label="Property Type", category="basic", kind=FieldKind.SELECT, helper_text="Select the type of property"
    ),
    "purchase_price": FieldMetadata(
        label="Purchase Price",
        category="basic",
        kind=FieldKind.CURRENCY,
        min=0,
        step=1000,
        prefix="$",
        helper_text="Total purchase price of the property",
    ),
    # Financial
    "current_noi": FieldMetadata(
        label="Current NOI",
        category="financial",
        kind=FieldKind.CURRENCY,
        min=0,
        step=1000,
        prefix="$",
        helper_text="Current Net Operating Income",
    ),
    "gross_income": FieldMetadata(
        label="Gross Income",
        category="financial",
        kind=FieldKind.CURRENCY,
        min=0,
        step=1000,
        prefix="$",
        helper_text="Total income before expenses",
    ),
    "operating_expenses": FieldMetadata(
        label="Operating Expenses",
        category="financial",
        kind=FieldKind.CURRENCY,
        min=0,
        step=1000,
        prefix="$",
        helper_text="Total annual operating expenses",
    ),
    "annual_cash_flow": FieldMetadata(
        label="Annual Cash Flow",
        category="financial",
        kind=FieldKind.CURRENCY,
        step=1000,
        prefix="$",
        helper_text="Net cash flow after all expenses",
    ),
    "total_investment": FieldMetadata(
        label="Total Investment",
        category="financial",
        kind=FieldKind.CURRENCY,
        min=0,
        step=1000,
        prefix="$",
        helper_text="Total amount invested in the property",
    ),
    "occupancy_rate": FieldMetadata(
        label="Occupancy Rate",
        category="financial",
        kind=FieldKind.PERCENTAGE,
        min=0,
        max=100,
        step=1,
        helper_text="Current occupancy percentage",
    ),
    "average_rent": FieldMetadata(
        label="Average Rent",
        category="financial",
        kind=FieldKind.CURRENCY,
        min=0,
        step=100,
        prefix="$",
        helper_text="Average rent per unit",
    ),
    # Projection
    "projected_noi": FieldMetadata(
        label="Projected NOI (Year 5)",
        category="projection",
        kind=FieldKind.CURRENCY,
        prefix="$",
        helper_text="Expected NOI in year 5",
    ),
    "discount_rate": FieldMetadata(
        label="Discount Rate",
        category="projection",
        kind=FieldKind.PERCENTAGE,
        min=0,
        max=100,
        step=0.5,
        helper_text="Discount rate for NPV calculations",
    ),
    "holding_period": FieldMetadata(
        label="Holding Period (Years)",
        category="projection",
        min=1,
        max=30,
        step=1,
        helper_text="Expected holding period",
    ),
    # Loan
    "loan_amount": FieldMetadata(
        label="Loan Amount",
        category="loan",
        kind=FieldKind.CURRENCY,
        min=0,
        step=1000,
        prefix="$",
        helper_text="Total loan amount",
    ),
    "interest_rate": FieldMetadata(
        label="Interest Rate",
        category="loan",
        kind=FieldKind.PERCENTAGE,
        min=0,
        max=100,
        step=0.125,
        helper_text="Annual interest rate",
    ),
    "loan_term": FieldMetadata(
        label="Loan Term (Years)",
        category="loan",
        min=1,
        max=30,
        step=1,
        helper_text="Length of the loan in years",
    ),
    # Property
    "square_footage": FieldMetadata(
        label="Square Footage", category="property", min=0, step=100,
        helper_text="Total square footage of the property",
    ),
    "number_of_units": FieldMetadata(
        label="Number of Units", category="property", min=0, step=1, helper_text="Total number of units"
    ),
    "parking_spaces": FieldMetadata(
        label="Parking Spaces", category="property", min=0, step=1, helper_text="Number of parking spaces"
    ),
    # Asset core fields
    "rentable_square_feet": FieldMetadata(label="Rentable Square Feet", category="property", min=0),
    "number_of_tenants": FieldMetadata(label="Number of Tenants", category="property", min=0, step=1),
    "average_rent_psf": FieldMetadata(
        label="Average Rent PSF", category="financial", kind=FieldKind.CURRENCY, min=0, prefix="$"
    ),
    "weighted_average_lease_term": FieldMetadata(
        label="Weighted Average Lease Term", category="property", min=0,
        helper_text="Rent-weighted remaining lease term in years",
    ),
    "gross_leasable_area": FieldMetadata(label="Gross Leasable Area", category="property", min=0),
    "sales_per_sf": FieldMetadata(
        label="Sales per SF", category="financial", kind=FieldKind.CURRENCY, min=0, prefix="$"
    ),
    "occupancy_cost_ratio": FieldMetadata(
        label="Occupancy Cost Ratio", category="financial", kind=FieldKind.PERCENTAGE, min=0, max=100
    ),
    "traffic_count": FieldMetadata(
        label="Traffic Count", category="property", min=0, helper_text="Average daily traffic past the site"
    ),
    "clear_height": FieldMetadata(label="Clear Height (ft)", category="property", min=0),
    "number_of_dock_doors": FieldMetadata(label="Number of Dock Doors", category="property", min=0, step=1),
    "power_capacity": FieldMetadata(label="Power Capacity (kW)", category="property", min=0),
    "distance_to_highway": FieldMetadata(label="Distance to Highway (miles)", category="property", min=0),
    "current_occupancy": FieldMetadata(
        label="Current Occupancy", category="financial", kind=FieldKind.PERCENTAGE, min=0, max=100
    ),
    "average_rent_per_unit": FieldMetadata(
        label="Average Rent per Unit", category="financial", kind=FieldKind.CURRENCY, min=0, prefix="$"
    ),
    "unit_mix": FieldMetadata(
        label="Unit Mix", category="property", kind=FieldKind.TEXT, helper_text="e.g. 40 1BR / 60 2BR"
    ),
    "total_square_footage": FieldMetadata(label="Total Square Footage", category="property", min=0),
}


def field_label(field: str) -> str:
    """Display label of a ``PropertyData`` attribute."""
    metadata = FIELD_METADATA.get(field)
    return metadata.label if metadata else to_camel_alias(field)


# --- Catalog queries ------------------------------------------------------------


def get_required_fields(metrics: Sequence[MetricName | str], data: PropertyData) -> List[str]:
    """
    Inputs needed for ``metrics`` plus the asset core fields ``data`` lacks.

    Order is first appearance; duplicates are dropped.
    """
    fields: Dict[str, None] = {}
    for metric in metrics:
        info = ALL_METRICS.get(MetricName(metric))
        if info is not None:
            fields.update(dict.fromkeys(info.required_fields))
    if data.property_type is not None:
        validation = validate_asset_data_requirements(data, data.property_type)
        fields.update(dict.fromkeys(validation.missing_fields))
    return list(fields)


def get_asset_package_recommendations(data: PropertyData) -> List[PackageRecommendation]:
    """
    Rank the record's packages by how many of their required fields are present.

    ``match_score`` is the rounded percentage of required fields provided.
    """
    if data.property_type is None:
        return []
    recommendations = []
    for package in get_packages(data.property_type):
        available = [field for field in package.required_fields if getattr(data, field, None) is not None]
        score = len(available) / len(package.required_fields) * 100
        recommendations.append(
            PackageRecommendation(
                package_id=package.id,
                name=package.name,
                description=package.description,
                match_score=round(score),
            )
        )
    return sorted(recommendations, key=lambda r: r.match_score, reverse=True)


def get_available_asset_analysis(data: PropertyData) -> List[AssetAnalysisAvailability]:
    """The record's asset analyzers and whether its core asset data is complete."""
    if data.property_type is None:
        return []
    validation = validate_asset_data_requirements(data, data.property_type)
    return [
        AssetAnalysisAvailability(
            function_name=analyzer.name,
            description=analyzer.description,
            available=validation.is_valid,
            requirements=validation.missing_fields,
        )
        for analyzer in get_asset_analyzers(data.property_type)
    ]
