# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Mixed-Use Analytics

Component performance, synergy value and cross-use interactions for
properties combining office, retail, residential and hotel uses.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Literal, Optional, Sequence

from ...core.primitives import CamelModel, ComponentTypeEnum
from ..retail.tenant import RetailTenant
from .component import MixedUseComponent, SharedAmenity, SharedSystems

logger = logging.getLogger(__name__)

MARKET_CAP_RATES: Dict[ComponentTypeEnum, float] = {
    ComponentTypeEnum.OFFICE: 6.5,
    ComponentTypeEnum.RETAIL: 7.0,
    ComponentTypeEnum.RESIDENTIAL: 5.5,
    ComponentTypeEnum.HOTEL: 8.5,
    ComponentTypeEnum.OTHER: 7.5,
}
CAP_RATE_BAND = 0.5
STANDALONE_CAP_RATE = 0.065
DEFAULT_EQUITY_SHARE = 0.30

OFFICE = ComponentTypeEnum.OFFICE
RETAIL = ComponentTypeEnum.RETAIL
RESIDENTIAL = ComponentTypeEnum.RESIDENTIAL


# --- Result records ---------------------------------------------------------


class MixedUseFinancialSummary(CamelModel):
    total_noi: float
    blended_cap_rate: Optional[float] = None
    total_revenue: float
    total_expenses: float
    expense_ratio: Optional[float] = None
    cash_flow: float
    dscr: Optional[float] = None
    cash_on_cash: Optional[float] = None


class ComponentPerformance(CamelModel):
    component: str
    noi_contribution: float
    revenue_per_sf: float
    expense_per_sf: float
    margin_percentage: Optional[float] = None
    cap_rate_vs_market: float
    performance_rating: Literal["Outperforming", "Meeting", "Underperforming"]


class SynergyValue(CamelModel):
    operational_synergies: float
    revenue_synergies: float
    cost_synergies: float
    total_synergy_value: float
    synergy_multiple: Optional[float] = None


class ConcentrationRisk(CamelModel):
    largest_component: str
    percent_of_noi: float
    risk_level: Literal["Low", "Medium", "High"]


class MixedUseRiskAnalysis(CamelModel):
    concentration_risk: ConcentrationRisk
    operational_complexity: float
    cross_default_risk: List[str]
    market_cycle_exposure: Dict[str, Literal["Stable", "Growing", "Declining"]]


class OptimizationOpportunity(CamelModel):
    opportunity: str
    components: List[str]
    potential_value: float
    implementation: str
    timeline: str


class MixedUsePerformance(CamelModel):
    financial_summary: MixedUseFinancialSummary
    component_performance: List[ComponentPerformance]
    synergy_value: SynergyValue
    risk_analysis: MixedUseRiskAnalysis
    optimization_opportunities: List[OptimizationOpportunity]


class Synergy(CamelModel):
    description: str
    beneficiary: List[str]
    value_add: float
    implementation: Literal["Existing", "Potential"]


class Conflict(CamelModel):
    issue: str
    affected: List[str]
    severity: Literal["Low", "Medium", "High"]
    mitigation: str


class SharedAmenityUsage(CamelModel):
    amenity: str
    users: List[str]
    utilization: float
    cost_per_user: float
    cost_sharing: Dict[str, float]


class CrossUseAnalysis(CamelModel):
    synergies: List[Synergy]
    conflicts: List[Conflict]
    shared_amenities: List[SharedAmenityUsage]


# --- Helpers ----------------------------------------------------------------


def _types(components: Sequence[MixedUseComponent]) -> set:
    return {c.type for c in components}


def _first_sf(components: Sequence[MixedUseComponent], kind: ComponentTypeEnum) -> float:
    return next((c.square_footage for c in components if c.type == kind), 0.0)


def calculate_operational_synergies(
    components: Sequence[MixedUseComponent], systems: SharedSystems
) -> float:
    """Savings from central HVAC, integrated security and shared parking."""
    value = 0.0
    if systems.hvac_type == "Central":
        value += len(components) * 50_000
    if systems.integrated_security:
        value += 100_000
    if systems.parking_validation:
        # Separate parking would need 30% more spaces at $20k per space
        value += systems.parking_spaces * 0.3 * 20_000
    return value


def calculate_revenue_synergies(components: Sequence[MixedUseComponent]) -> float:
    """Retail spending from on-site workers and residents plus the residential amenity premium."""
    kinds = _types(components)
    value = 0.0
    if RETAIL in kinds and OFFICE in kinds:
        value += _first_sf(components, OFFICE) * 0.5
    if RETAIL in kinds and RESIDENTIAL in kinds:
        value += _first_sf(components, RESIDENTIAL) * 0.75
    if RESIDENTIAL in kinds and (RETAIL in kinds or OFFICE in kinds):
        value += _first_sf(components, RESIDENTIAL) * 1.0
    return value


def calculate_cost_synergies(components: Sequence[MixedUseComponent], systems: SharedSystems) -> float:
    """Bulk purchasing, shared utility infrastructure and combined insurance."""
    value = sum(c.square_footage for c in components) * 0.25
    if systems.master_metered:
        value += 75_000
    value += len(components) * 25_000
    return value


def _optimization_opportunities(
    components: Sequence[MixedUseComponent],
    systems: SharedSystems,
    performance: List[ComponentPerformance],
) -> List[OptimizationOpportunity]:
    names = [c.type.value for c in components]
    found = []
    if not systems.parking_validation:
        found.append(
            OptimizationOpportunity(
                opportunity="Implement dynamic parking allocation",
                components=names,
                potential_value=150_000,
                implementation="Install validation system, time-based pricing",
                timeline="3-6 months",
            )
        )
    if systems.hvac_type != "Central":
        found.append(
            OptimizationOpportunity(
                opportunity="Centralize HVAC systems",
                components=names,
                potential_value=200_000,
                implementation="Phased conversion to central plant",
                timeline="12-24 months",
            )
        )
    weakest = min(performance, key=lambda p: p.noi_contribution)
    if weakest.performance_rating == "Underperforming":
        found.append(
            OptimizationOpportunity(
                opportunity=f"Reposition {weakest.component} component",
                components=[weakest.component],
                # 30% improvement on the component's NOI share, per $1M of value
                potential_value=weakest.noi_contribution * 0.3 * 1_000_000,
                implementation="Renovation, re-tenanting, or conversion",
                timeline="6-18 months",
            )
        )
    return sorted(found, key=lambda o: o.potential_value, reverse=True)


def _market_cycle_exposure(components: Sequence[MixedUseComponent]) -> Dict[str, str]:
    exposure = {}
    for comp in components:
        if comp.type == OFFICE:
            exposure[comp.type.value] = "Stable" if comp.occupancy > 90 else "Declining"
        elif comp.type == RETAIL:
            exposure[comp.type.value] = "Growing" if comp.occupancy > 92 else "Declining"
        elif comp.type == RESIDENTIAL:
            exposure[comp.type.value] = "Growing"
    return exposure


# --- Analyzers --------------------------------------------------------------


def analyze_mixed_use_performance(
    components: Sequence[MixedUseComponent],
    shared_systems: Optional[SharedSystems],
    total_investment: float,
    debt_service: float,
    equity: Optional[float] = None,
) -> Optional[MixedUsePerformance]:
    """
    Integrated financial and risk view of a mixed-use property.

    Each component's cap rate is compared with the market rate for its use;
    more than half a point above market is underperforming and more than
    half a point below is outperforming.

    Args:
        components: Property components
        shared_systems: Shared building systems (none shared when missing)
        total_investment: Property value the blended cap rate is measured on
        debt_service: Annual debt service
        equity: Cash invested; defaults to 30% of ``total_investment``

    Returns:
        MixedUsePerformance, or None without components
    """
    if not components:
        logger.debug("Mixed-use performance skipped: no components")
        return None

    systems = shared_systems or SharedSystems()
    total_noi = sum(c.noi for c in components)
    total_revenue = sum(c.annual_revenue for c in components)
    total_expenses = sum(c.total_expenses for c in components)
    cash_flow = total_noi - debt_service
    if equity is None:
        equity = total_investment * DEFAULT_EQUITY_SHARE

    performance = []
    for comp in components:
        market_cap = MARKET_CAP_RATES.get(comp.type, 7.0)
        revenue_psf = comp.rent_psf * 12 if comp.rent_psf else comp.annual_revenue / comp.square_footage
        component_revenue = revenue_psf * comp.square_footage
        if comp.cap_rate > market_cap + CAP_RATE_BAND:
            rating = "Underperforming"
        elif comp.cap_rate < market_cap - CAP_RATE_BAND:
            rating = "Outperforming"
        else:
            rating = "Meeting"
        performance.append(
            ComponentPerformance(
                component=comp.type.value,
                noi_contribution=comp.noi / total_noi * 100 if total_noi else 0.0,
                revenue_per_sf=revenue_psf,
                expense_per_sf=comp.total_expenses / comp.square_footage,
                margin_percentage=comp.noi / component_revenue * 100 if component_revenue else None,
                cap_rate_vs_market=comp.cap_rate - market_cap,
                performance_rating=rating,
            )
        )

    operational = calculate_operational_synergies(components, systems)
    revenue = calculate_revenue_synergies(components)
    cost = calculate_cost_synergies(components, systems)
    total_synergy = operational + revenue + cost
    standalone_value = total_noi / STANDALONE_CAP_RATE
    multiple = (standalone_value + total_synergy) / standalone_value if standalone_value > 0 else None

    largest = max(performance, key=lambda p: p.noi_contribution)
    if largest.noi_contribution > 60:
        concentration = "High"
    elif largest.noi_contribution > 40:
        concentration = "Medium"
    else:
        concentration = "Low"

    complexity = 30 + len(components) * 10
    if not systems.master_metered:
        complexity += 10
    if not systems.integrated_security:
        complexity += 10
    if any(not c.separate_management for c in components):
        complexity -= 15
    complexity = max(0, min(100, complexity))

    cross_default = []
    if any(c.type == RETAIL and c.occupancy < 85 for c in components):
        cross_default.append("Retail vacancy may impact residential desirability")
    if any(c.type == OFFICE and c.occupancy < 80 for c in components):
        cross_default.append("Office vacancy reduces daytime retail traffic")

    return MixedUsePerformance(
        financial_summary=MixedUseFinancialSummary(
            total_noi=total_noi,
            blended_cap_rate=total_noi / total_investment * 100 if total_investment else None,
            total_revenue=total_revenue,
            total_expenses=total_expenses,
            expense_ratio=total_expenses / total_revenue * 100 if total_revenue else None,
            cash_flow=cash_flow,
            dscr=total_noi / debt_service if debt_service else None,
            cash_on_cash=cash_flow / equity * 100 if equity else None,
        ),
        component_performance=performance,
        synergy_value=SynergyValue(
            operational_synergies=operational,
            revenue_synergies=revenue,
            cost_synergies=cost,
            total_synergy_value=total_synergy,
            synergy_multiple=multiple,
        ),
        risk_analysis=MixedUseRiskAnalysis(
            concentration_risk=ConcentrationRisk(
                largest_component=largest.component,
                percent_of_noi=largest.noi_contribution,
                risk_level=concentration,
            ),
            operational_complexity=complexity,
            cross_default_risk=cross_default,
            market_cycle_exposure=_market_cycle_exposure(components),
        ),
        optimization_opportunities=_optimization_opportunities(components, systems, performance),
    )


def _amenity_usage(amenity: SharedAmenity) -> SharedAmenityUsage:
    users = [u.value for u in amenity.accessible_to]
    count = len(users)
    name = amenity.name

    utilization = 50.0
    if "Fitness" in name and "Residential" in users:
        utilization += 20
    if "Conference" in name and "Office" in users:
        utilization += 25
    if "Parking" in name:
        utilization = 85.0
    if count > 3:
        utilization += 10
    if count > 5:
        utilization += 5

    weights = {}
    for user in users:
        if user == "Office" and "Conference" in name:
            weights[user] = 0.6
        elif user == "Residential" and "Fitness" in name:
            weights[user] = 0.5
        else:
            weights[user] = 1 / count
    total = sum(weights.values())

    return SharedAmenityUsage(
        amenity=name,
        users=users,
        utilization=min(100.0, utilization),
        cost_per_user=amenity.cost / count,
        cost_sharing={user: weight / total for user, weight in weights.items()},
    )


def analyze_cross_use_interactions(
    components: Sequence[MixedUseComponent],
    retail_tenants: Sequence[RetailTenant] = (),
    shared_amenities: Sequence[SharedAmenity] = (),
) -> Optional[CrossUseAnalysis]:
    """
    Synergies and conflicts between the uses of a mixed-use property.

    Synergy values are annual dollar estimates. Shared amenity cost shares
    are normalized to sum to 1 per amenity.

    Args:
        components: Property components
        retail_tenants: Retail tenants, for food, essential service and entertainment checks
        shared_amenities: Amenities open to more than one component

    Returns:
        CrossUseAnalysis, or None without components
    """
    if not components:
        logger.debug("Cross-use interactions skipped: no components")
        return None

    kinds = _types(components)
    has_office, has_retail, has_residential = OFFICE in kinds, RETAIL in kinds, RESIDENTIAL in kinds
    synergies: List[Synergy] = []
    conflicts: List[Conflict] = []

    if has_office and has_retail:
        synergies.append(
            Synergy(
                description="Lunchtime retail traffic from office workers",
                beneficiary=["Retail"],
                value_add=50_000,
                implementation="Existing",
            )
        )
        if any(t.merchandise_type == "Food" for t in retail_tenants):
            synergies.append(
                Synergy(
                    description="Catering opportunities for office tenants",
                    beneficiary=["Retail", "Office"],
                    value_add=30_000,
                    implementation="Potential",
                )
            )
    if has_residential and has_retail:
        synergies.append(
            Synergy(
                description="Captive customer base for retail",
                beneficiary=["Retail"],
                value_add=100_000,
                implementation="Existing",
            )
        )
        if any(t.essential_service for t in retail_tenants):
            synergies.append(
                Synergy(
                    description="Convenience factor increases residential rents",
                    beneficiary=["Residential"],
                    value_add=75_000,
                    implementation="Existing",
                )
            )
    if has_office and has_retail and has_residential:
        all_three = ["Office", "Retail", "Residential"]
        synergies.append(
            Synergy(
                description="24/7 activity creates vibrant live-work-play environment",
                beneficiary=all_three,
                value_add=200_000,
                implementation="Existing",
            )
        )
        synergies.append(
            Synergy(
                description="Shared amenities reduce per-component costs",
                beneficiary=all_three,
                value_add=150_000,
                implementation="Existing",
            )
        )

    if has_residential and has_retail and any(t.merchandise_type == "Entertainment" for t in retail_tenants):
        conflicts.append(
            Conflict(
                issue="Late-night retail noise affecting residents",
                affected=["Residential"],
                severity="High",
                mitigation="Sound insulation, restricted hours, tenant selection",
            )
        )
    if len(components) > 2:
        conflicts.append(
            Conflict(
                issue="Peak parking demand overlap",
                affected=[c.type.value for c in components],
                severity="Medium",
                mitigation="Time-based allocation, validation systems, shared parking agreements",
            )
        )
    if has_retail and (has_office or has_residential):
        conflicts.append(
            Conflict(
                issue="Delivery truck routing and timing",
                affected=["Retail", "Office" if has_office else "Residential"],
                severity="Medium",
                mitigation="Designated delivery hours, separate service entrances",
            )
        )
    if has_residential and (has_office or has_retail):
        conflicts.append(
            Conflict(
                issue="Access control for residential security",
                affected=["Residential"],
                severity="Medium",
                mitigation="Separate entrances, controlled access points, security protocols",
            )
        )
    if has_office and has_residential:
        conflicts.append(
            Conflict(
                issue="Different HVAC scheduling needs",
                affected=["Office", "Residential"],
                severity="Low",
                mitigation="Zone controls, separate systems for major components",
            )
        )

    return CrossUseAnalysis(
        synergies=synergies,
        conflicts=conflicts,
        shared_amenities=[_amenity_usage(a) for a in shared_amenities],
    )
