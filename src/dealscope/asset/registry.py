# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Asset analyzer dispatch.

Maps each property type to the analyzers that apply to it. An analyzer is
registered against the ``MetricName`` switch that enables it; running a set
of enabled switches over a ``PropertyData`` record returns the results of
the analyzers that had their inputs and a reason for each one that did not.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..core.primitives import (
    GlobalSettings,
    IndustrialTypeEnum,
    MetricName,
    Model,
    PropertyTypeEnum,
)
from ..valuation.metrics import annual_debt_service
from .industrial.analysis import analyze_building_functionality, analyze_location_logistics
from .industrial.specs import BuildingSpecs
from .mixed_use.analysis import analyze_cross_use_interactions, analyze_mixed_use_performance
from .multifamily.analysis import (
    analyze_market_position,
    analyze_operating_performance,
    analyze_revenue_performance,
)
from .office.analysis import (
    analyze_building_operations,
    analyze_lease_economics,
    analyze_market_positioning,
    analyze_tenant_financial_health,
)
from .property import PropertyData
from .retail.analysis import (
    analyze_co_tenancy,
    analyze_percentage_rent,
    analyze_sales_performance,
    analyze_trade_area,
)

logger = logging.getLogger(__name__)

AnalyzerFn = Callable[[PropertyData, GlobalSettings], Optional[Model]]


@dataclass(frozen=True)
class AssetAnalyzer:
    """
    A registered asset analyzer.

    Attributes:
        name: Function name, used as the key of the analyzer's result
        flag: Switch that enables the analyzer
        description: One-line summary for catalog listings
        requires: Why the analyzer is skipped when it returns nothing
        run: Adapter from a property record to the analyzer call
    """

    name: str
    flag: MetricName
    description: str
    requires: str
    run: AnalyzerFn


ANALYZER_REGISTRY: Dict[PropertyTypeEnum, List[AssetAnalyzer]] = {t: [] for t in PropertyTypeEnum}

# Core fields each property type should carry for its asset analytics
ASSET_CORE_FIELDS: Dict[PropertyTypeEnum, List[str]] = {
    PropertyTypeEnum.OFFICE: ["rentable_square_feet", "number_of_tenants", "average_rent_psf"],
    PropertyTypeEnum.RETAIL: ["gross_leasable_area", "sales_per_sf", "occupancy_cost_ratio"],
    PropertyTypeEnum.INDUSTRIAL: ["clear_height", "number_of_dock_doors", "power_capacity"],
    PropertyTypeEnum.MULTIFAMILY: ["number_of_units", "current_occupancy", "average_rent_per_unit"],
    PropertyTypeEnum.MIXED_USE: ["total_square_footage", "property_type"],
}

# Optional field and the recommendation made when it is absent
ASSET_RECOMMENDED_FIELDS: Dict[PropertyTypeEnum, Dict[str, str]] = {
    PropertyTypeEnum.OFFICE: {
        "weighted_average_lease_term": "Add weightedAverageLeaseTerm for lease analysis",
    },
    PropertyTypeEnum.RETAIL: {
        "traffic_count": "Add trafficCount for trade area analysis",
    },
    PropertyTypeEnum.INDUSTRIAL: {
        "distance_to_highway": "Add distanceToHighway for location analysis",
    },
    PropertyTypeEnum.MULTIFAMILY: {
        "unit_mix": "Add unitMix for detailed unit analysis",
    },
    PropertyTypeEnum.MIXED_USE: {},
}


def register_asset_analyzer(
    property_type: PropertyTypeEnum, flag: MetricName, description: str, requires: str
) -> Callable[[AnalyzerFn], AnalyzerFn]:
    """
    A decorator to register an analyzer adapter for a property type.

    The adapter's name, without a leading underscore, becomes the analyzer
    name.
    """

    def decorator(fn: AnalyzerFn) -> AnalyzerFn:
        name = fn.__name__.lstrip("_")
        if any(a.flag == flag for a in ANALYZER_REGISTRY[property_type]):
            raise ValueError(f"Analyzer for {flag.value} is already registered for {property_type.value}.")
        ANALYZER_REGISTRY[property_type].append(
            AssetAnalyzer(name=name, flag=flag, description=description, requires=requires, run=fn)
        )
        return fn

    return decorator


# --- Result records -----------------------------------------------------------


class AssetDataValidation(Model):
    """Completeness of the core asset fields for a property type."""

    is_valid: bool
    missing_fields: List[str]
    recommendations: List[str]


class AssetAnalysisRun(Model):
    """Results of the analyzers that ran and the reasons the others did not."""

    results: Dict[str, Any]
    skipped: Dict[str, str]


# --- Office -------------------------------------------------------------------


@register_asset_analyzer(
    PropertyTypeEnum.OFFICE,
    MetricName.TENANT_FINANCIAL_HEALTH,
    "Comprehensive tenant credit and financial health analysis",
    "office tenants with annual rent are required",
)
def _analyze_tenant_financial_health(data: PropertyData, settings: GlobalSettings):
    return analyze_tenant_financial_health(data.office_tenants)


@register_asset_analyzer(
    PropertyTypeEnum.OFFICE,
    MetricName.LEASE_ECONOMICS,
    "Detailed lease economics and valuation analysis",
    "office tenants are required",
)
def _analyze_lease_economics(data: PropertyData, settings: GlobalSettings):
    discount_rate = data.discount_rate or settings.calculation.default_discount_rate
    return analyze_lease_economics(
        data.office_tenants, data.office_market, settings.analysis_date, discount_rate=discount_rate / 100
    )


@register_asset_analyzer(
    PropertyTypeEnum.OFFICE,
    MetricName.BUILDING_OPERATIONS,
    "Building systems and operational efficiency analysis",
    "building operations data is required",
)
def _analyze_building_operations(data: PropertyData, settings: GlobalSettings):
    return analyze_building_operations(data.building_operations, data.area or 0.0)


@register_asset_analyzer(
    PropertyTypeEnum.OFFICE,
    MetricName.MARKET_POSITIONING,
    "Market positioning and competitive analysis",
    "office market data and average rent per SF are required",
)
def _analyze_market_positioning(data: PropertyData, settings: GlobalSettings):
    return analyze_market_positioning(
        data.occupancy or 0.0,
        data.average_rent_psf or 0.0,
        data.office_market,
        data.building_operations,
    )


# --- Retail -------------------------------------------------------------------


@register_asset_analyzer(
    PropertyTypeEnum.RETAIL,
    MetricName.TENANT_HEALTH,
    "Sales performance and tenant productivity analysis",
    "retail tenants are required",
)
def _analyze_sales_performance(data: PropertyData, settings: GlobalSettings):
    center_type = data.center_type.value if data.center_type else None
    return analyze_sales_performance(
        data.retail_sales, data.retail_tenants, center_type, settings.analysis_date
    )


@register_asset_analyzer(
    PropertyTypeEnum.RETAIL,
    MetricName.CO_TENANCY_RISK,
    "Co-tenancy risk and anchor dependency analysis",
    "retail tenants and gross leasable area are required",
)
def _analyze_co_tenancy(data: PropertyData, settings: GlobalSettings):
    gla = data.gross_leasable_area or sum(t.square_footage for t in data.retail_tenants)
    occupancy = data.occupancy if data.occupancy is not None else 100.0
    return analyze_co_tenancy(data.retail_tenants, occupancy, gla, settings.analysis_date)


@register_asset_analyzer(
    PropertyTypeEnum.RETAIL,
    MetricName.TRADE_AREA_ANALYSIS,
    "Trade area demographics and market analysis",
    "trade area demographics and retail tenants are required",
)
def _analyze_trade_area(data: PropertyData, settings: GlobalSettings):
    return analyze_trade_area(
        data.trade_areas, data.retail_tenants, data.competitors, data.traffic_counts
    )


@register_asset_analyzer(
    PropertyTypeEnum.RETAIL,
    MetricName.PERCENTAGE_RENT,
    "Percentage rent optimization analysis",
    "retail tenants with percentage rent clauses are required",
)
def _analyze_percentage_rent(data: PropertyData, settings: GlobalSettings):
    return analyze_percentage_rent(data.retail_tenants, data.retail_sales, settings.analysis_date)


# --- Industrial ---------------------------------------------------------------


def building_specs_for(data: PropertyData) -> Optional[BuildingSpecs]:
    """
    Building specs of the record, falling back to its flat industrial fields.

    The flat form collects square footage, clear height, dock doors and
    power; those are enough for a basic functionality score.
    """
    if data.building_specs is not None:
        return data.building_specs
    if not data.area or not data.clear_height:
        return None
    return BuildingSpecs(
        total_sf=data.area,
        clear_height=data.clear_height,
        dock_doors=int(data.number_of_dock_doors or 0),
        power_capacity=data.power_capacity or 0.0,
    )


def _industrial_type(data: PropertyData) -> IndustrialTypeEnum:
    return data.industrial_type or IndustrialTypeEnum.WAREHOUSE


@register_asset_analyzer(
    PropertyTypeEnum.INDUSTRIAL,
    MetricName.FUNCTIONAL_SCORE,
    "Building functionality and efficiency analysis",
    "building specs (or square footage and clear height) are required",
)
def _analyze_building_functionality(data: PropertyData, settings: GlobalSettings):
    return analyze_building_functionality(
        building_specs_for(data), data.industrial_tenants, _industrial_type(data)
    )


@register_asset_analyzer(
    PropertyTypeEnum.INDUSTRIAL,
    MetricName.LOCATION_SCORE,
    "Location logistics and accessibility analysis",
    "location metrics are required",
)
def _analyze_location_logistics(data: PropertyData, settings: GlobalSettings):
    return analyze_location_logistics(
        data.location_metrics, _industrial_type(data), data.industrial_tenants
    )


# --- Multifamily --------------------------------------------------------------


@register_asset_analyzer(
    PropertyTypeEnum.MULTIFAMILY,
    MetricName.REVENUE_METRICS,
    "Revenue performance and rent roll analysis",
    "a unit-level rent roll is required",
)
def _analyze_revenue_performance(data: PropertyData, settings: GlobalSettings):
    return analyze_revenue_performance(data.units, data.market_comps)


@register_asset_analyzer(
    PropertyTypeEnum.MULTIFAMILY,
    MetricName.OPERATING_PERFORMANCE,
    "Operating performance and expense analysis",
    "a unit-level rent roll and expense detail are required",
)
def _analyze_operating_performance(data: PropertyData, settings: GlobalSettings):
    rent_growth = data.submarket.avg_rent_growth if data.submarket else None
    return analyze_operating_performance(data.units, data.expense_detail, rent_growth)


@register_asset_analyzer(
    PropertyTypeEnum.MULTIFAMILY,
    MetricName.MARKET_POSITION,
    "Market position and competitive analysis",
    "a unit-level rent roll and market comps are required",
)
def _analyze_market_position(data: PropertyData, settings: GlobalSettings):
    return analyze_market_position(
        data.units,
        data.amenities,
        data.market_comps,
        submarket=data.submarket,
        neighborhood=data.neighborhood,
        year_built=data.year_built,
        last_renovation=data.last_renovation,
        analysis_date=settings.analysis_date,
    )


# --- Mixed-use ----------------------------------------------------------------


@register_asset_analyzer(
    PropertyTypeEnum.MIXED_USE,
    MetricName.MIXED_USE_PERFORMANCE,
    "Mixed-use component performance analysis",
    "mixed-use components are required",
)
def _analyze_mixed_use_performance(data: PropertyData, settings: GlobalSettings):
    investment = data.purchase_price or data.total_investment or 0.0
    return analyze_mixed_use_performance(
        data.components,
        data.shared_systems,
        total_investment=investment,
        debt_service=annual_debt_service(data) or 0.0,
        equity=data.total_investment,
    )


@register_asset_analyzer(
    PropertyTypeEnum.MIXED_USE,
    MetricName.CROSS_USE_INTERACTIONS,
    "Cross-use synergies and conflicts analysis",
    "mixed-use components are required",
)
def _analyze_cross_use_interactions(data: PropertyData, settings: GlobalSettings):
    return analyze_cross_use_interactions(data.components, data.retail_tenants, data.shared_amenities)


# --- Public API ---------------------------------------------------------------


def get_asset_analyzers(property_type: PropertyTypeEnum | str) -> List[AssetAnalyzer]:
    """Registered analyzers for ``property_type``; raises ValueError for an unknown type."""
    return list(ANALYZER_REGISTRY[PropertyTypeEnum(property_type)])


def get_available_analyses(property_type: PropertyTypeEnum | str) -> List[str]:
    """Names of the analyzers that apply to ``property_type``."""
    return [analyzer.name for analyzer in get_asset_analyzers(property_type)]


def validate_asset_data_requirements(
    data: PropertyData, property_type: PropertyTypeEnum | str
) -> AssetDataValidation:
    """
    Check the core asset fields of ``property_type`` on ``data``.

    Missing core fields are reported by attribute name; absent optional
    fields produce recommendations.
    """
    property_type = PropertyTypeEnum(property_type)
    missing = [field for field in ASSET_CORE_FIELDS[property_type] if not data.has(field)]
    recommendations = [
        message
        for field, message in ASSET_RECOMMENDED_FIELDS[property_type].items()
        if not data.has(field)
    ]
    if property_type == PropertyTypeEnum.MIXED_USE:
        recommendations.append("Consider adding component-specific data for detailed analysis")
    return AssetDataValidation(
        is_valid=not missing, missing_fields=missing, recommendations=recommendations
    )


def run_asset_analyses(
    data: PropertyData,
    enabled: Iterable[MetricName],
    settings: Optional[GlobalSettings] = None,
) -> AssetAnalysisRun:
    """
    Run every enabled analyzer registered for the record's property type.

    Analyzers are pure and independent; one returning nothing or raising
    does not affect the others. Results are keyed by the enabling switch.

    Args:
        data: Property record; its ``property_type`` selects the analyzers
        enabled: Switches that are on
        settings: Analysis settings (analysis date, discount rate default)

    Returns:
        AssetAnalysisRun with results and skip reasons, both keyed by the
        switch's value
    """
    settings = settings or GlobalSettings()
    enabled = set(enabled)
    results: Dict[str, Any] = {}
    skipped: Dict[str, str] = {}
    if data.property_type is None:
        return AssetAnalysisRun(results=results, skipped=skipped)

    for analyzer in ANALYZER_REGISTRY[data.property_type]:
        if analyzer.flag not in enabled:
            continue
        try:
            result = analyzer.run(data, settings)
        except (ArithmeticError, ValueError, TypeError, KeyError, AttributeError) as e:
            logger.warning("Error running %s: %s", analyzer.name, e)
            skipped[analyzer.flag.value] = f"{analyzer.description} failed: {str(e) or type(e).__name__}"
            continue
        if result is None:
            logger.debug("%s skipped for %s", analyzer.name, data.property_type.value)
            skipped[analyzer.flag.value] = f"{analyzer.description} skipped: {analyzer.requires}"
        else:
            results[analyzer.flag.value] = result

    for flag in (name for name in MetricName if name in enabled):
        if flag.value not in results and flag.value not in skipped and is_asset_analysis(flag):
            skipped[flag.value] = f"{flag.camel} does not apply to {data.property_type.value} properties"
    return AssetAnalysisRun(results=results, skipped=skipped)


ASSET_ANALYSIS_FLAGS = frozenset(
    analyzer.flag for analyzers in ANALYZER_REGISTRY.values() for analyzer in analyzers
)


def is_asset_analysis(metric: MetricName | str) -> bool:
    """True when ``metric`` switches an asset analyzer rather than a formula."""
    return MetricName(metric) in ASSET_ANALYSIS_FLAGS
