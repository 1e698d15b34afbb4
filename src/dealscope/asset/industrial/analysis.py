# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Industrial Analytics

Building functionality and location/logistics scoring for warehouse,
manufacturing, flex, cold storage and last-mile buildings. Scores are on a
0-100 scale and are measured against the requirements of the building's
functional sub-type.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Literal, Optional, Sequence

from ...core.primitives import CamelModel, IndustrialTypeEnum
from .._calc_utils import clamp, safe_divide
from .specs import BuildingSpecs, LocationMetrics
from .tenant import IndustrialTenant

logger = logging.getLogger(__name__)

NATIONAL_AVERAGE_WAGE = 18.50

_IMPACT_ORDER = {"Critical": 0, "High": 1, "Medium": 2, "Low": 3}


class TypeRequirements(CamelModel):
    """Minimum and ideal functional specs for one industrial sub-type."""

    min_clear_height: float
    ideal_clear_height: float
    min_dock_ratio: float
    ideal_dock_ratio: float
    min_power_per_sf: float
    ideal_power_per_sf: float


TYPE_REQUIREMENTS: Dict[IndustrialTypeEnum, TypeRequirements] = {
    IndustrialTypeEnum.WAREHOUSE: TypeRequirements(
        min_clear_height=24, ideal_clear_height=32,
        min_dock_ratio=0.8, ideal_dock_ratio=1.2,
        min_power_per_sf=2, ideal_power_per_sf=3,
    ),
    IndustrialTypeEnum.MANUFACTURING: TypeRequirements(
        min_clear_height=20, ideal_clear_height=28,
        min_dock_ratio=0.5, ideal_dock_ratio=0.8,
        min_power_per_sf=5, ideal_power_per_sf=10,
    ),
    IndustrialTypeEnum.FLEX: TypeRequirements(
        min_clear_height=16, ideal_clear_height=20,
        min_dock_ratio=0.3, ideal_dock_ratio=0.5,
        min_power_per_sf=3, ideal_power_per_sf=5,
    ),
    IndustrialTypeEnum.COLD_STORAGE: TypeRequirements(
        min_clear_height=28, ideal_clear_height=35,
        min_dock_ratio=1.0, ideal_dock_ratio=1.5,
        min_power_per_sf=10, ideal_power_per_sf=15,
    ),
    IndustrialTypeEnum.LAST_MILE: TypeRequirements(
        min_clear_height=18, ideal_clear_height=24,
        min_dock_ratio=1.5, ideal_dock_ratio=2.5,
        min_power_per_sf=2, ideal_power_per_sf=3,
    ),
}


# --- Result records ---------------------------------------------------------


class FunctionalScore(CamelModel):
    overall: float
    clear_height: float
    loading: float
    power: float
    layout: float
    special_features: float


class TenantSuitability(CamelModel):
    tenant: str
    requirements_met: float
    gaps: List[str]
    critical_gaps: bool


class ModernizationNeed(CamelModel):
    item: str
    cost: float
    impact: Literal["Critical", "High", "Medium", "Low"]


class IndustrialMarketPositioning(CamelModel):
    classification: Literal["Class A", "Class B", "Class C"]
    competitive_advantages: List[str]
    functional_obsolescence: List[str]
    modernization_needs: List[ModernizationNeed]


class BuildingEfficiency(CamelModel):
    cubic_footage: float
    cubic_foot_per_dock: float
    dock_door_ratio: float
    employee_parking_ratio: Optional[float] = None
    trailer_parking_ratio: Optional[float] = None
    column_efficiency: float


class BuildingFunctionality(CamelModel):
    functional_score: FunctionalScore
    tenant_suitability: List[TenantSuitability]
    market_positioning: IndustrialMarketPositioning
    efficiency: BuildingEfficiency


class LocationScore(CamelModel):
    overall: float
    transportation: float
    labor: float
    market: float


class LogisticsProfile(CamelModel):
    last_mile_suitability: float
    regional_distribution: float
    national_distribution: float
    manufacturing_suitability: float


class LaborAnalysis(CamelModel):
    availability: Literal["Abundant", "Adequate", "Tight", "Critical"]
    cost_competitiveness: float
    skill_match: List[str]
    risks: List[str]


class IndustrialMarketDynamics(CamelModel):
    supply_demand_balance: Literal["Oversupplied", "Balanced", "Undersupplied"]
    rent_growth_potential: float
    occupancy_outlook: Literal["Strengthening", "Stable", "Weakening"]
    competitive_threats: List[str]


class DistributionReach(CamelModel):
    one_day: int
    two_day: int


class StrategicValue(CamelModel):
    e_commerce_fulfillment: float
    port_proximity: float
    intermodal_access: float
    distribution_reach: DistributionReach


class LocationLogistics(CamelModel):
    location_score: LocationScore
    logistics_profile: LogisticsProfile
    labor_analysis: LaborAnalysis
    market_dynamics: IndustrialMarketDynamics
    strategic_value: StrategicValue


class ClearHeightAnalysis(CamelModel):
    price_per_sf: float
    clear_height_category: str
    estimated_premium: str


# --- Helpers ----------------------------------------------------------------


def get_type_requirements(industrial_type: IndustrialTypeEnum | str) -> TypeRequirements:
    """Requirements for ``industrial_type``; unknown types use warehouse requirements."""
    try:
        return TYPE_REQUIREMENTS[IndustrialTypeEnum(industrial_type)]
    except ValueError:
        return TYPE_REQUIREMENTS[IndustrialTypeEnum.WAREHOUSE]


def _spec_score(actual: float, minimum: float, ideal: float) -> float:
    """100 at or above ideal, 50-100 between minimum and ideal, pro rata below minimum."""
    if actual >= ideal:
        return 100.0
    if actual >= minimum:
        return 50 + (actual - minimum) / (ideal - minimum) * 50
    if minimum > 0:
        return actual / minimum * 50
    return 0.0


def _truck_court_multiplier(depth: float) -> float:
    if depth >= 130:
        return 1.0
    if depth >= 120:
        return 0.9
    if depth >= 110:
        return 0.7
    return 0.5


def calculate_column_efficiency(width: float, depth: float, total_sf: float) -> float:
    """Share of floor area clear of column footprints (%), assuming 4 SF per column."""
    if width <= 0 or depth <= 0 or total_sf <= 0:
        return 0.0
    columns = total_sf / (width * depth)
    return (total_sf - columns * 4) / total_sf * 100


def clear_height_category(clear_height: float) -> tuple:
    """(category, estimated value premium) for a clear height in feet."""
    if clear_height >= 36:
        return "Modern Spec (36ft+)", "15-25% premium"
    if clear_height >= 28:
        return "Standard Modern (28-35ft)", "Market rate"
    if clear_height >= 24:
        return "Older Generation (24-27ft)", "10-20% discount"
    return "Functionally Obsolete (<24ft)", "25-40% discount"


def calculate_industrial_metrics(
    square_footage: float, clear_height: float, purchase_price: float
) -> Optional[ClearHeightAnalysis]:
    """Price per SF with the clear height category and its typical pricing effect."""
    if not square_footage or not purchase_price:
        return None
    category, premium = clear_height_category(clear_height)
    return ClearHeightAnalysis(
        price_per_sf=purchase_price / square_footage,
        clear_height_category=category,
        estimated_premium=premium,
    )


def _tenant_suitability(specs: BuildingSpecs, tenant: IndustrialTenant) -> TenantSuitability:
    gaps: List[str] = []
    met = 100.0

    if specs.clear_height < tenant.clear_height_required:
        gaps.append(f"Clear height {specs.clear_height:g}' < required {tenant.clear_height_required:g}'")
        met -= 25
    if specs.dock_doors < tenant.dock_doors_required:
        gaps.append(f"{specs.dock_doors} dock doors < required {tenant.dock_doors_required}")
        met -= 20

    power_need = (tenant.power_requirement or 0) * tenant.square_footage / 1000
    power_available = specs.power_capacity * (tenant.square_footage / specs.total_sf)
    if power_available < power_need:
        gaps.append("Insufficient power capacity")
        met -= 15
    if tenant.rail_access and not specs.rail_siding:
        gaps.append("No rail access available")
        met -= 20
    if tenant.temperature_control and tenant.temperature_control != "Ambient" and not specs.has_cold_storage:
        gaps.append("No temperature-controlled space")
        met -= 30

    met = max(0.0, met)
    return TenantSuitability(tenant=tenant.name, requirements_met=met, gaps=gaps, critical_gaps=met < 70)


# --- Analyzers --------------------------------------------------------------


def analyze_building_functionality(
    specs: Optional[BuildingSpecs],
    tenants: Sequence[IndustrialTenant] = (),
    industrial_type: IndustrialTypeEnum | str = IndustrialTypeEnum.WAREHOUSE,
) -> Optional[BuildingFunctionality]:
    """
    Functional quality of an industrial building for its sub-type.

    Clear height, loading, power, layout and special features are scored
    0-100 and weighted 25/25/20/20/10 into the overall score. Loading is
    discounted for shallow truck courts.

    Args:
        specs: Physical building specification
        tenants: Tenants whose requirements are checked against the building
        industrial_type: Functional sub-type that sets the requirements

    Returns:
        BuildingFunctionality, or None without a building specification
    """
    if specs is None:
        logger.debug("Building functionality skipped: no building specs")
        return None

    req = get_type_requirements(industrial_type)
    cubic_footage = specs.total_sf * specs.clear_height
    dock_ratio = specs.dock_doors / specs.total_sf * 10_000
    power_per_sf = specs.power_capacity * 1000 / specs.total_sf

    clear_height_score = _spec_score(specs.clear_height, req.min_clear_height, req.ideal_clear_height)
    loading_score = min(100.0, dock_ratio / req.ideal_dock_ratio * 100)
    loading_score *= _truck_court_multiplier(specs.truck_court_depth)
    power_score = _spec_score(power_per_sf, req.min_power_per_sf, req.ideal_power_per_sf)

    width, depth = specs.column_dimensions
    column_area = width * depth
    layout_score = 70.0
    if column_area >= 3000:
        layout_score += 20
    elif column_area >= 2000:
        layout_score += 10
    if specs.bay_depth >= 48:
        layout_score += 10
    elif specs.bay_depth >= 40:
        layout_score += 5
    layout_score = min(100.0, layout_score)

    special_score = 50.0
    if specs.fire_suppression_type == "ESFR":
        special_score += 20
    if specs.lighting_type == "LED":
        special_score += 10
    if specs.rail_siding:
        special_score += 10
    if specs.crane_system:
        special_score += 10

    overall = (
        clear_height_score * 0.25
        + loading_score * 0.25
        + power_score * 0.20
        + layout_score * 0.20
        + special_score * 0.10
    )

    if overall >= 85 and specs.clear_height >= 32:
        classification = "Class A"
    elif overall >= 70 and specs.clear_height >= 24:
        classification = "Class B"
    else:
        classification = "Class C"

    advantages = []
    if specs.clear_height >= 36:
        advantages.append("36'+ clear height")
    if dock_ratio >= 1.5:
        advantages.append("Abundant loading")
    if specs.truck_court_depth >= 130:
        advantages.append("Deep truck courts")
    if specs.rail_siding:
        advantages.append("Rail-served")
    if specs.fire_suppression_type == "ESFR":
        advantages.append("ESFR sprinklers")
    if specs.lighting_type == "LED":
        advantages.append("LED lighting")
    if power_per_sf >= 5:
        advantages.append("High power capacity")

    obsolescence = []
    if specs.clear_height < 24:
        obsolescence.append("Low clear height")
    if dock_ratio < 1.0:
        obsolescence.append("Insufficient dock doors")
    if specs.truck_court_depth < 120:
        obsolescence.append("Shallow truck courts")
    if column_area < 2000:
        obsolescence.append("Tight column spacing")
    if specs.lighting_type != "LED":
        obsolescence.append("Outdated lighting")

    needs: List[ModernizationNeed] = []
    if specs.clear_height < req.min_clear_height:
        needs.append(ModernizationNeed(item="Raise roof/clear height", cost=specs.total_sf * 25, impact="Critical"))
    if dock_ratio < 1.0:
        doors_needed = math.ceil(specs.total_sf / 10_000 - specs.dock_doors)
        needs.append(
            ModernizationNeed(item=f"Add {doors_needed} dock doors", cost=doors_needed * 25_000, impact="High")
        )
    if specs.lighting_type != "LED":
        needs.append(ModernizationNeed(item="LED lighting retrofit", cost=specs.total_sf * 2.5, impact="Medium"))
    if power_per_sf < req.min_power_per_sf:
        needs.append(ModernizationNeed(item="Electrical service upgrade", cost=specs.total_sf * 5, impact="High"))
    needs.sort(key=lambda n: _IMPACT_ORDER[n.impact])

    total_employees = sum(t.employee_count for t in tenants)
    total_parking = sum(t.parking_required for t in tenants)
    employee_parking = total_parking / total_employees if total_employees else None
    trailer_parking = math.ceil(specs.dock_doors * 1.5) / specs.dock_doors if specs.dock_doors else None

    return BuildingFunctionality(
        functional_score=FunctionalScore(
            overall=overall,
            clear_height=clear_height_score,
            loading=loading_score,
            power=power_score,
            layout=layout_score,
            special_features=special_score,
        ),
        tenant_suitability=[_tenant_suitability(specs, t) for t in tenants],
        market_positioning=IndustrialMarketPositioning(
            classification=classification,
            competitive_advantages=advantages,
            functional_obsolescence=obsolescence,
            modernization_needs=needs,
        ),
        efficiency=BuildingEfficiency(
            cubic_footage=cubic_footage,
            cubic_foot_per_dock=safe_divide(cubic_footage, specs.dock_doors),
            dock_door_ratio=dock_ratio,
            employee_parking_ratio=employee_parking,
            trailer_parking_ratio=trailer_parking,
            column_efficiency=calculate_column_efficiency(width, depth, specs.total_sf),
        ),
    )


def _within(distance: Optional[float], limit: float) -> bool:
    return distance is not None and distance <= limit


def calculate_last_mile_suitability(location: LocationMetrics, transportation_score: float) -> float:
    score = transportation_score * 0.3
    if location.population_one_hour >= 1_000_000:
        score += 40
    elif location.population_one_hour >= 500_000:
        score += 25
    elif location.population_one_hour >= 250_000:
        score += 15
    if location.distance_to_highway <= 3:
        score += 20
    elif location.distance_to_highway <= 5:
        score += 10
    return min(100.0, score)


def calculate_regional_suitability(location: LocationMetrics, transportation_score: float) -> float:
    score = transportation_score * 0.4
    if location.distance_to_highway <= 1:
        score += 30
    elif location.distance_to_highway <= 3:
        score += 20
    if location.population_one_hour >= 500_000:
        score += 20
    if _within(location.distance_to_rail, 5):
        score += 10
    return min(100.0, score)


def calculate_national_suitability(location: LocationMetrics, transportation_score: float) -> float:
    score = transportation_score * 0.3
    if _within(location.distance_to_intermodal, 10):
        score += 30
    elif _within(location.distance_to_rail, 2):
        score += 20
    if location.distance_to_highway <= 1:
        score += 20
    if _within(location.distance_to_airport, 10):
        score += 20
    return min(100.0, score)


def calculate_manufacturing_suitability(location: LocationMetrics, labor_score: float) -> float:
    score = labor_score * 0.5
    if location.average_wage < 20:
        score += 20
    if location.population_one_hour >= 250_000:
        score += 15
    if not location.union_presence:
        score += 15
    return min(100.0, score)


def _transportation_score(location: LocationMetrics, industrial_type: str) -> float:
    kind = industrial_type.lower()
    score = 50.0
    if location.distance_to_highway <= 1:
        score += 30
    elif location.distance_to_highway <= 3:
        score += 20
    elif location.distance_to_highway <= 5:
        score += 10
    else:
        score -= 10

    if "last mile" in kind and location.distance_to_highway <= 0.5:
        score += 10
    if ("warehouse" in kind or "distribution" in kind) and _within(location.distance_to_port, 50):
        score += 15
    if "manufacturing" in kind and _within(location.distance_to_rail, 2):
        score += 20
    if _within(location.distance_to_port, 25):
        score += 10
    if _within(location.distance_to_rail, 1):
        score += 10
    return clamp(score, 0, 100)


def _labor_score(location: LocationMetrics, wage_ratio: float) -> float:
    score = 50.0
    if location.population_one_hour >= 1_000_000:
        score += 20
    elif location.population_one_hour >= 500_000:
        score += 10
    elif location.population_one_hour < 250_000:
        score -= 10
    if wage_ratio < 0.9:
        score += 15
    elif wage_ratio < 1.0:
        score += 10
    elif wage_ratio > 1.2:
        score -= 10
    if location.unemployment_rate > 5:
        score += 10
    elif location.unemployment_rate < 3:
        score -= 5
    return clamp(score, 0, 100)


def _market_score(location: LocationMetrics, absorption_ratio: float, pipeline_ratio: float) -> float:
    score = 50.0
    if location.vacancy_rate < 3:
        score += 20
    elif location.vacancy_rate < 5:
        score += 10
    elif location.vacancy_rate > 10:
        score -= 20
    elif location.vacancy_rate > 7:
        score -= 10
    if absorption_ratio > 0.03:
        score += 15
    elif absorption_ratio > 0.01:
        score += 10
    elif absorption_ratio < -0.01:
        score -= 10
    if pipeline_ratio < 0.02:
        score += 10
    elif pipeline_ratio > 0.05:
        score -= 10
    return clamp(score, 0, 100)


def analyze_location_logistics(
    location: Optional[LocationMetrics],
    industrial_type: IndustrialTypeEnum | str = IndustrialTypeEnum.WAREHOUSE,
    tenants: Sequence[IndustrialTenant] = (),
) -> Optional[LocationLogistics]:
    """
    Transportation, labor and submarket strength of an industrial location.

    The overall location score weights transportation 40%, labor 30% and
    market 30%. Wages are compared to a national warehouse average of
    $18.50/hr.

    Args:
        location: Location, labor and submarket facts
        industrial_type: Functional sub-type of the building
        tenants: Current tenants, used for the labor skill match

    Returns:
        LocationLogistics, or None without location data
    """
    if location is None:
        logger.debug("Location logistics skipped: no location metrics")
        return None

    kind = getattr(industrial_type, "value", industrial_type) or ""
    wage_ratio = location.average_wage / NATIONAL_AVERAGE_WAGE
    absorption_ratio = location.net_absorption_12_mo / location.total_inventory_sf
    pipeline_ratio = location.under_construction / location.total_inventory_sf

    transportation = _transportation_score(location, kind)
    labor = _labor_score(location, wage_ratio)
    market = _market_score(location, absorption_ratio, pipeline_ratio)
    last_mile = calculate_last_mile_suitability(location, transportation)

    population = location.population_one_hour
    if population > 1_000_000 and location.unemployment_rate > 4:
        availability = "Abundant"
    elif population > 500_000 and location.unemployment_rate > 3:
        availability = "Adequate"
    elif population > 250_000:
        availability = "Tight"
    else:
        availability = "Critical"

    if wage_ratio < 0.9:
        cost_competitiveness = 90.0
    elif wage_ratio < 1.0:
        cost_competitiveness = 75.0
    elif wage_ratio < 1.1:
        cost_competitiveness = 50.0
    else:
        cost_competitiveness = 25.0

    skill_match: List[str] = []
    if any(t.industry in ("Logistics", "Distribution") for t in tenants):
        skill_match += ["Warehouse workers", "Forklift operators", "Logistics coordinators"]
    if any(t.industry == "Manufacturing" for t in tenants):
        skill_match += ["Machine operators", "Quality control", "Maintenance technicians"]

    risks = []
    if location.unemployment_rate < 3:
        risks.append("Tight labor market")
    if location.union_presence:
        risks.append("Union presence")
    if wage_ratio > 1.2:
        risks.append("Above-average wage pressure")

    if location.vacancy_rate > 8 or pipeline_ratio > 0.08:
        balance = "Oversupplied"
    elif location.vacancy_rate < 4 and pipeline_ratio < 0.03:
        balance = "Undersupplied"
    else:
        balance = "Balanced"

    if location.vacancy_rate < 5 and absorption_ratio > 0.02:
        rent_growth = 5.0
    elif location.vacancy_rate < 7 and absorption_ratio > 0:
        rent_growth = 3.0
    elif location.vacancy_rate > 10 or absorption_ratio < 0:
        rent_growth = 0.0
    else:
        rent_growth = 2.0

    if absorption_ratio > 0.02 and pipeline_ratio < 0.05:
        outlook = "Strengthening"
    elif absorption_ratio < -0.01 or pipeline_ratio > 0.08:
        outlook = "Weakening"
    else:
        outlook = "Stable"

    threats = []
    if pipeline_ratio > 0.05:
        threats.append(f"{pipeline_ratio * 100:.1f}% new supply coming")
    if location.vacancy_rate > 10:
        threats.append("High existing vacancy")
    if absorption_ratio < 0:
        threats.append("Negative net absorption")

    port = max(0.0, 100 - location.distance_to_port * 2) if location.distance_to_port else 0.0
    intermodal = (
        max(0.0, 100 - location.distance_to_intermodal * 10) if location.distance_to_intermodal else 0.0
    )

    return LocationLogistics(
        location_score=LocationScore(
            overall=transportation * 0.4 + labor * 0.3 + market * 0.3,
            transportation=transportation,
            labor=labor,
            market=market,
        ),
        logistics_profile=LogisticsProfile(
            last_mile_suitability=last_mile,
            regional_distribution=calculate_regional_suitability(location, transportation),
            national_distribution=calculate_national_suitability(location, transportation),
            manufacturing_suitability=calculate_manufacturing_suitability(location, labor),
        ),
        labor_analysis=LaborAnalysis(
            availability=availability,
            cost_competitiveness=cost_competitiveness,
            skill_match=skill_match,
            risks=risks,
        ),
        market_dynamics=IndustrialMarketDynamics(
            supply_demand_balance=balance,
            rent_growth_potential=rent_growth,
            occupancy_outlook=outlook,
            competitive_threats=threats,
        ),
        strategic_value=StrategicValue(
            e_commerce_fulfillment=last_mile * 0.7 + (30 if population > 1_000_000 else 15),
            port_proximity=port,
            intermodal_access=intermodal,
            distribution_reach=DistributionReach(one_day=population * 20, two_day=population * 50),
        ),
    )
