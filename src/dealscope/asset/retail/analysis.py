# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Retail Analytics

Sales productivity, co-tenancy exposure, trade area depth and percentage
rent structure for shopping centers.

Occupancy cost is measured as annual base rent PSF over annual sales PSF,
so both sides are on the same annual footing.
"""

from __future__ import annotations

import calendar
import logging
from datetime import date
from typing import Dict, List, Literal, Optional, Sequence

import pandas as pd
from pydantic import Field

from ...core.primitives import CamelModel, RetailCenterTypeEnum, RiskLevel
from .._calc_utils import clamp, group_by, mean, months_between, safe_divide
from .tenant import RetailTenant, SalesRecord
from .trade_area import RetailCompetitor, TradeArea, TrafficCount

logger = logging.getLogger(__name__)

CENTER_BENCHMARKS: Dict[RetailCenterTypeEnum, Dict[str, float]] = {
    RetailCenterTypeEnum.REGIONAL_MALL: {"sales_psf": 550, "growth_rate": 2.5, "avg_ocr": 12},
    RetailCenterTypeEnum.LIFESTYLE: {"sales_psf": 450, "growth_rate": 3.5, "avg_ocr": 10},
    RetailCenterTypeEnum.STRIP: {"sales_psf": 350, "growth_rate": 2.0, "avg_ocr": 8},
    RetailCenterTypeEnum.POWER: {"sales_psf": 300, "growth_rate": 1.5, "avg_ocr": 7},
    RetailCenterTypeEnum.OUTLET: {"sales_psf": 400, "growth_rate": 3.0, "avg_ocr": 9},
}

IDEAL_OCR: Dict[str, Dict[str, float]] = {
    "Apparel": {"Regional Mall": 13, "Lifestyle": 12, "Strip": 10, "Power": 8, "Outlet": 10},
    "Food": {"Regional Mall": 8, "Lifestyle": 7, "Strip": 6, "Power": 6, "Outlet": 7},
    "Entertainment": {"Regional Mall": 10, "Lifestyle": 9, "Strip": 8, "Power": 8, "Outlet": 9},
    "Service": {"Regional Mall": 15, "Lifestyle": 14, "Strip": 12, "Power": 10, "Outlet": 12},
    "Fitness": {"Regional Mall": 12, "Lifestyle": 11, "Strip": 10, "Power": 9, "Outlet": 10},
}

MARKET_BASE_RENTS: Dict[str, float] = {
    "Apparel": 35,
    "Food": 45,
    "Entertainment": 25,
    "Service": 30,
    "Fitness": 20,
    "Electronics": 40,
    "Home": 25,
    "Other": 28,
}

MARKET_PERCENTAGE_RATES: Dict[str, Dict[str, float]] = {
    "Apparel": {"rate": 6, "breakpoint": 400_000},
    "Food": {"rate": 6, "breakpoint": 1_000_000},
    "Entertainment": {"rate": 8, "breakpoint": 500_000},
    "Service": {"rate": 5, "breakpoint": 300_000},
    "Fitness": {"rate": 4, "breakpoint": 600_000},
    "Electronics": {"rate": 4, "breakpoint": 800_000},
    "Home": {"rate": 5, "breakpoint": 400_000},
    "Other": {"rate": 5, "breakpoint": 400_000},
}

CROSS_SHOPPING_INDEX = {"Apparel": 0.8, "Food": 0.6, "Service": 0.4}

# Share of retail spending by category, by income tier
_HOUSEHOLD_RETAIL_SPENDING = 35_000
_NATIONAL_MEDIAN_INCOME = 65_000
_ASSUMED_SALES_PSF = 400


# --- Result records ---------------------------------------------------------


class TenantPerformance(CamelModel):
    tenant: str
    sales_psf: float
    growth: float


class CategoryPerformance(CamelModel):
    category: str
    sales_psf: float
    growth: float


class CenterMetrics(CamelModel):
    total_sales_psf: float
    sales_growth_yoy: float
    top_performers: List[TenantPerformance]
    bottom_performers: List[TenantPerformance]
    category_performance: List[CategoryPerformance]


class TenantHealth(CamelModel):
    tenant: str
    sales_psf: float
    occupancy_cost: Optional[float]
    health_score: float
    risk_level: RiskLevel
    indicators: List[str]


class SeasonalIndex(CamelModel):
    month: str
    index: float


class BenchmarkComparison(CamelModel):
    metric: str
    center_value: float
    benchmark: float
    percentile: float


class SalesPerformance(CamelModel):
    center_metrics: CenterMetrics
    tenant_health: List[TenantHealth]
    seasonal_pattern: List[SeasonalIndex]
    benchmark_comparison: List[BenchmarkComparison]


class CoTenancyTrigger(CamelModel):
    tenant: str
    trigger_tenant: str
    remedy: str
    probability: float


class CoTenancyRiskSummary(CamelModel):
    level: RiskLevel
    exposed_gla: float
    exposed_rent: float
    triggers: List[CoTenancyTrigger]


class AnchorDependency(CamelModel):
    anchor_name: str
    gla_percentage: float
    dependent_tenants: int
    dependent_gla: float
    replacement_difficulty: Literal["Low", "Medium", "High"]


class CriticalMass(CamelModel):
    current_status: Literal["Healthy", "At Risk", "Below Critical"]
    minimum_occupancy: float
    cushion: float
    essential_occupancy: float
    vulnerable_tenants: List[str]


class TenantSynergy(CamelModel):
    cluster: str
    tenants: List[str]
    synergy_score: float
    cross_shopping_index: float


class CoTenancyAnalysis(CamelModel):
    co_tenancy_risk: CoTenancyRiskSummary
    anchor_dependency: List[AnchorDependency]
    critical_mass: CriticalMass
    tenant_synergies: List[TenantSynergy]


class PrimaryTradeArea(CamelModel):
    definition: str
    population: int
    spending_power: float
    penetration_rate: float
    market_share: float


class CustomerProfile(CamelModel):
    dominant_segment: str
    income_index: float
    lifestyle_traits: List[str]
    spending_patterns: Dict[str, float]


class CompetitivePosition(CamelModel):
    direct_competitors: int
    competitive_density: float = Field(description="Market GLA per capita.")
    differentiators: List[str]
    vulnerabilities: List[str]
    market_gaps: List[str]


class GrowthPotential(CamelModel):
    population_growth: float
    income_growth: float
    capture_rate: float
    five_year_projection: float


class VoidCategory(CamelModel):
    category: str
    demand: float
    supply: float
    gap: float
    opportunity: Literal["High", "Medium", "Low"]


class TradeAreaAnalysis(CamelModel):
    primary_trade_area: PrimaryTradeArea
    customer_profile: CustomerProfile
    competitive_position: CompetitivePosition
    growth_potential: GrowthPotential
    void_analysis: List[VoidCategory]


class PercentageRentPerformance(CamelModel):
    total_percentage_rent: float
    percentage_of_total: float
    performing_tenants: int
    underperforming_tenants: int


class TenantPercentageRent(CamelModel):
    tenant: str
    natural_breakpoint: float
    actual_sales: float
    percentage_rent: float
    overage_percentage: float
    optimization: Literal["Lower Breakpoint", "Increase Base", "Optimal", "Restructure"]


class RentOptimization(CamelModel):
    tenant: str
    current_structure: str
    recommended_structure: str
    estimated_increase: float


class PercentageRentMarketComparison(CamelModel):
    category: str
    market_rate: float
    market_breakpoint: float
    our_average: float


class PercentageRentAnalysis(CamelModel):
    current_performance: PercentageRentPerformance
    tenant_analysis: List[TenantPercentageRent]
    optimization_opportunities: List[RentOptimization]
    market_comparison: List[PercentageRentMarketComparison]


# --- Helpers ----------------------------------------------------------------


def get_center_benchmarks(center_type: Optional[str]) -> Dict[str, float]:
    """Sales and occupancy cost benchmarks for a center format (Strip by default)."""
    try:
        return CENTER_BENCHMARKS[RetailCenterTypeEnum(center_type)]
    except ValueError:
        return CENTER_BENCHMARKS[RetailCenterTypeEnum.STRIP]


def get_ideal_ocr(merchandise_type: str, center_type: str) -> float:
    """Sustainable occupancy cost ratio (%) for a merchandise type in a center format."""
    return IDEAL_OCR.get(merchandise_type, {}).get(center_type, 10)


def get_market_base_rent(merchandise_type: str) -> float:
    return MARKET_BASE_RENTS.get(merchandise_type, 30)


def get_market_percentage_rates(merchandise_type: str) -> Dict[str, float]:
    return MARKET_PERCENTAGE_RATES.get(merchandise_type, {"rate": 5, "breakpoint": 400_000})


def _risk_from_score(score: float) -> RiskLevel:
    if score >= 80:
        return RiskLevel.LOW
    if score >= 60:
        return RiskLevel.MEDIUM
    if score >= 40:
        return RiskLevel.HIGH
    return RiskLevel.CRITICAL


def _sales_frame(sales: Sequence[SalesRecord]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"tenant": s.tenant, "year": s.year, "month": s.month, "net_sales": s.net_sales} for s in sales],
        columns=["tenant", "year", "month", "net_sales"],
    )


def _annual_sales(tenant: RetailTenant, frame: pd.DataFrame, year: int) -> float:
    """Net sales for ``year``; falls back to reported sales when unreported monthly."""
    tenant_rows = frame[frame["tenant"] == tenant.name]
    if not tenant_rows.empty:
        return float(tenant_rows.loc[tenant_rows["year"] == year, "net_sales"].sum())
    sales_psf = tenant.effective_sales_psf
    return sales_psf * tenant.square_footage if sales_psf is not None else 0.0


def score_tenant_health(
    tenant: RetailTenant, sales_psf: float
) -> TenantHealth:
    """
    Score a tenant's sales health 0-100 and grade its default risk.

    Args:
        tenant: Tenant record
        sales_psf: Annual sales per square foot

    Returns:
        TenantHealth with score, risk level and warning indicators
    """
    occupancy_cost = safe_divide(tenant.base_rent_psf, sales_psf, default=None)
    score = 50.0
    if sales_psf > 400:
        score += 20
    elif sales_psf > 300:
        score += 10
    elif sales_psf < 200:
        score -= 20
    if occupancy_cost is not None:
        if occupancy_cost < 0.08:
            score += 15
        elif occupancy_cost > 0.12:
            score -= 15
    if tenant.credit_rating.is_high_grade:
        score += 10
    if tenant.essential_service:
        score += 5
    score = clamp(score, 0, 100)

    indicators: List[str] = []
    if sales_psf < 250:
        indicators.append("Low sales productivity")
    if occupancy_cost is not None and occupancy_cost > 0.12:
        indicators.append("High occupancy cost")
    if tenant.credit_rating.value == "NR":
        indicators.append("No credit rating")
    if not tenant.essential_service and sales_psf < 300:
        indicators.append("Non-essential low performer")

    return TenantHealth(
        tenant=tenant.name,
        sales_psf=sales_psf,
        occupancy_cost=occupancy_cost,
        health_score=score,
        risk_level=_risk_from_score(score),
        indicators=indicators,
    )


# --- Analyzers --------------------------------------------------------------


def analyze_sales_performance(
    sales: Sequence[SalesRecord],
    tenants: Sequence[RetailTenant],
    center_type: Optional[str],
    analysis_date: date,
) -> Optional[SalesPerformance]:
    """
    Center-level and tenant-level sales productivity.

    The analysis year is the year of ``analysis_date``; growth compares it
    with the prior year. Tenants without monthly reports use their reported
    annual sales and show no growth.
    """
    if not tenants:
        logger.debug("Sales performance skipped: no retail tenants")
        return None

    year = analysis_date.year
    frame = _sales_frame(sales)
    rows = []
    for tenant in tenants:
        reported_monthly = not frame[frame["tenant"] == tenant.name].empty
        current = _annual_sales(tenant, frame, year)
        prior = _annual_sales(tenant, frame, year - 1) if reported_monthly else 0.0
        rows.append(
            {
                "tenant": tenant.name,
                "category": tenant.merchandise_type,
                "sf": tenant.square_footage,
                "current": current,
                "prior": prior,
            }
        )
    perf = pd.DataFrame(rows)
    perf["sales_psf"] = perf["current"] / perf["sf"]
    perf["growth"] = [
        (cur - pri) / pri * 100 if pri > 0 else 0.0 for cur, pri in zip(perf["current"], perf["prior"])
    ]

    total_current = float(perf["current"].sum())
    total_prior = float(perf["prior"].sum())
    total_sales_psf = safe_divide(total_current, float(perf["sf"].sum()))
    growth_yoy = (total_current - total_prior) / total_prior * 100 if total_prior > 0 else 0.0

    ranked = perf.sort_values("sales_psf", ascending=False)
    top = [
        TenantPerformance(tenant=r.tenant, sales_psf=r.sales_psf, growth=r.growth)
        for r in ranked.head(5).itertuples()
    ]
    bottom = [
        TenantPerformance(tenant=r.tenant, sales_psf=r.sales_psf, growth=r.growth)
        for r in ranked.tail(5).itertuples()
    ]

    categories = []
    for category, group in perf.groupby("category", sort=False):
        cat_prior = float(group["prior"].sum())
        cat_current = float(group["current"].sum())
        categories.append(
            CategoryPerformance(
                category=category,
                sales_psf=safe_divide(cat_current, float(group["sf"].sum())),
                growth=(cat_current - cat_prior) / cat_prior * 100 if cat_prior > 0 else 0.0,
            )
        )

    health = [
        score_tenant_health(tenant, float(psf)) for tenant, psf in zip(tenants, perf["sales_psf"])
    ]

    monthly = frame[frame["year"] == year].groupby("month")["net_sales"].sum()
    average_month = total_current / 12
    seasonal = [
        SeasonalIndex(
            month=calendar.month_abbr[m],
            index=float(monthly[m]) / average_month * 100 if m in monthly.index and average_month else 100.0,
        )
        for m in range(1, 13)
    ]

    benchmarks = get_center_benchmarks(center_type)
    comparison = [
        BenchmarkComparison(
            metric="Sales PSF",
            center_value=total_sales_psf,
            benchmark=benchmarks["sales_psf"],
            percentile=75 if total_sales_psf > benchmarks["sales_psf"] else 25,
        ),
        BenchmarkComparison(
            metric="Sales Growth",
            center_value=growth_yoy,
            benchmark=benchmarks["growth_rate"],
            percentile=75 if growth_yoy > benchmarks["growth_rate"] else 25,
        ),
    ]

    return SalesPerformance(
        center_metrics=CenterMetrics(
            total_sales_psf=total_sales_psf,
            sales_growth_yoy=growth_yoy,
            top_performers=top,
            bottom_performers=bottom,
            category_performance=categories,
        ),
        tenant_health=health,
        seasonal_pattern=seasonal,
        benchmark_comparison=comparison,
    )


def analyze_co_tenancy(
    tenants: Sequence[RetailTenant],
    current_occupancy: float,
    total_gla: float,
    analysis_date: date,
) -> Optional[CoTenancyAnalysis]:
    """
    Exposure to co-tenancy remedies, anchor dependency and critical mass.

    A trigger is certain-ish (0.8) when a required tenant is already gone,
    0.5 when its lease ends within 12 months and 0.3 within 24 months.
    Exposed GLA and rent are probability-weighted.
    """
    if not tenants or total_gla <= 0:
        logger.debug("Co-tenancy analysis skipped: no tenants or GLA")
        return None

    by_name = {t.name: t for t in tenants}
    triggers: List[CoTenancyTrigger] = []
    exposed_gla = 0.0
    exposed_rent = 0.0

    for tenant in tenants:
        clause = tenant.co_tenancy
        if clause is None:
            continue
        missing = [name for name in clause.required if name not in by_name]
        if missing:
            exposed_gla += tenant.square_footage
            exposed_rent += tenant.annual_base_rent
            triggers.extend(
                CoTenancyTrigger(
                    tenant=tenant.name, trigger_tenant=name, remedy=clause.remedy, probability=0.8
                )
                for name in missing
            )
            continue
        for name in clause.required:
            required = by_name[name]
            if required.lease_end_date is None:
                continue
            months = max(0.0, months_between(analysis_date, required.lease_end_date))
            if months >= 24:
                continue
            probability = 0.5 if months < 12 else 0.3
            triggers.append(
                CoTenancyTrigger(
                    tenant=tenant.name, trigger_tenant=name, remedy=clause.remedy, probability=probability
                )
            )
            exposed_gla += tenant.square_footage * probability
            exposed_rent += tenant.annual_base_rent * probability

    exposure = exposed_gla / total_gla * 100
    if exposure < 5:
        level = RiskLevel.LOW
    elif exposure < 15:
        level = RiskLevel.MEDIUM
    elif exposure < 25:
        level = RiskLevel.HIGH
    else:
        level = RiskLevel.CRITICAL

    anchors = []
    for anchor in (t for t in tenants if t.is_anchor):
        dependents = [t for t in tenants if t.co_tenancy and anchor.name in t.co_tenancy.required]
        if anchor.square_footage < 20_000:
            difficulty = "Low"
        elif anchor.square_footage < 50_000 and not anchor.essential_service:
            difficulty = "Medium"
        else:
            difficulty = "High"
        anchors.append(
            AnchorDependency(
                anchor_name=anchor.name,
                gla_percentage=anchor.square_footage / total_gla * 100,
                dependent_tenants=len(dependents),
                dependent_gla=sum(t.square_footage for t in dependents),
                replacement_difficulty=difficulty,
            )
        )

    essential_sf = sum(
        t.square_footage
        for t in tenants
        if t.essential_service or t.category == "Anchor" or (t.effective_sales_psf or 0) > 500
    )
    if total_gla > 500_000:
        minimum = 85.0
    elif total_gla > 200_000:
        minimum = 80.0
    else:
        minimum = 75.0
    if current_occupancy >= minimum + 10:
        status = "Healthy"
    elif current_occupancy >= minimum:
        status = "At Risk"
    else:
        status = "Below Critical"
    # Tenants without sales data are not flagged
    vulnerable = [
        t.name
        for t in tenants
        if t.effective_sales_psf is not None and t.effective_sales_psf <= 300
    ]

    synergies = []
    for category, group in group_by(tenants, lambda t: t.merchandise_type).items():
        if len(group) < 3:
            continue
        avg_sales = mean(t.effective_sales_psf or 0 for t in group) or 0.0
        synergies.append(
            TenantSynergy(
                cluster=category,
                tenants=[t.name for t in group],
                synergy_score=min(100.0, len(group) * 10 + avg_sales / 5),
                cross_shopping_index=CROSS_SHOPPING_INDEX.get(category, 0.5),
            )
        )
    synergies.sort(key=lambda s: s.synergy_score, reverse=True)

    return CoTenancyAnalysis(
        co_tenancy_risk=CoTenancyRiskSummary(
            level=level, exposed_gla=exposed_gla, exposed_rent=exposed_rent, triggers=triggers
        ),
        anchor_dependency=anchors,
        critical_mass=CriticalMass(
            current_status=status,
            minimum_occupancy=minimum,
            cushion=current_occupancy - minimum,
            essential_occupancy=essential_sf / total_gla * 100,
            vulnerable_tenants=vulnerable,
        ),
        tenant_synergies=synergies,
    )


def _customer_segment(income_index: float) -> tuple:
    if income_index > 150:
        return "Affluent Professionals", ["Quality focused", "Brand conscious", "Experience driven"]
    if income_index > 120:
        return "Upper Middle Class", ["Value conscious", "Family oriented", "Convenience seeking"]
    if income_index > 80:
        return "Middle Income", ["Price sensitive", "Deal seeking", "Practical"]
    return "Value Oriented", ["Budget conscious", "Necessity focused", "Discount driven"]


def analyze_trade_area(
    demographics: Sequence[TradeArea],
    tenants: Sequence[RetailTenant],
    competitors: Sequence[RetailCompetitor],
    traffic: Sequence[TrafficCount],
) -> Optional[TradeAreaAnalysis]:
    """
    Spending power, competitive position and category voids of the trade area.

    The first demographic ring is treated as the primary trade area.
    """
    if not demographics or not tenants:
        logger.debug("Trade area analysis skipped: no demographics or tenants")
        return None

    primary = demographics[0]
    income_index = primary.median_income / _NATIONAL_MEDIAN_INCOME * 100
    spending_power = primary.households * _HOUSEHOLD_RETAIL_SPENDING * (
        primary.median_income / _NATIONAL_MEDIAN_INCOME
    )
    our_gla = sum(t.square_footage for t in tenants)
    market_gla = our_gla + sum(c.gla for c in competitors)
    penetration = safe_divide(our_gla * _ASSUMED_SALES_PSF, spending_power) * 100

    segment, traits = _customer_segment(income_index)
    spending_patterns = {
        "Apparel": 15 if income_index > 120 else 10,
        "Food": 25,
        "Entertainment": 10 if income_index > 100 else 5,
        "Home": 15,
        "Electronics": 10,
        "Service": 15,
        "Other": 10 if income_index > 120 else 20,
    }

    differentiators: List[str] = []
    vulnerabilities: List[str] = []
    competitor_anchors = {name for c in competitors for name in c.anchors}
    unique_anchors = [t.name for t in tenants if t.category == "Anchor" and t.name not in competitor_anchors]
    if unique_anchors:
        differentiators.append(f"Unique anchors: {', '.join(unique_anchors)}")
    avg_traffic = mean(t.daily_count for t in traffic)
    if avg_traffic is not None:
        if avg_traffic > 30_000:
            differentiators.append("High traffic location")
        elif avg_traffic < 15_000:
            vulnerabilities.append("Low traffic visibility")
    if any(c.distance < 2 for c in competitors):
        vulnerabilities.append("Direct competition within 2 miles")

    # Demand: 35% of household income spent at retail, split by category
    total_spending = primary.households * primary.average_income * 0.35
    supply: Dict[str, float] = {}
    for tenant in tenants:
        supply[tenant.merchandise_type] = supply.get(tenant.merchandise_type, 0.0) + (
            tenant.effective_sales_psf or 350
        ) * tenant.square_footage
    competitor_sales = sum(c.gla * 300 * 0.8 for c in competitors)
    for category in supply:
        supply[category] += competitor_sales * 0.15

    voids = []
    for category, share in spending_patterns.items():
        demand = total_spending * share / 100
        category_supply = supply.get(category, 0.0)
        gap = demand - category_supply
        gap_pct = safe_divide(gap, demand) * 100
        if gap_pct > 30 and gap > 1_000_000:
            opportunity = "High"
        elif gap_pct > 15 and gap > 500_000:
            opportunity = "Medium"
        else:
            opportunity = "Low"
        voids.append(
            VoidCategory(
                category=category,
                demand=round(demand),
                supply=round(category_supply),
                gap=round(gap),
                opportunity=opportunity,
            )
        )
    voids.sort(key=lambda v: v.gap, reverse=True)

    growth = primary.growth_5_year
    capture = penetration * (1 + growth / 100)
    return TradeAreaAnalysis(
        primary_trade_area=PrimaryTradeArea(
            definition=f"{primary.radius:g}-mile radius",
            population=primary.population,
            spending_power=round(spending_power),
            penetration_rate=penetration,
            market_share=safe_divide(our_gla, market_gla) * 100,
        ),
        customer_profile=CustomerProfile(
            dominant_segment=segment,
            income_index=round(income_index),
            lifestyle_traits=traits,
            spending_patterns=spending_patterns,
        ),
        competitive_position=CompetitivePosition(
            direct_competitors=sum(1 for c in competitors if c.distance <= 3 and c.type != "Convenience"),
            competitive_density=safe_divide(market_gla, primary.population),
            differentiators=differentiators,
            vulnerabilities=vulnerabilities,
            market_gaps=[v.category for v in voids if v.opportunity == "High"],
        ),
        growth_potential=GrowthPotential(
            population_growth=growth,
            income_growth=growth * 0.6,
            capture_rate=capture,
            five_year_projection=round(spending_power * (1 + growth / 100) * capture / 100),
        ),
        void_analysis=voids,
    )


def _breakpoint_label(amount: float) -> str:
    return f"{amount / 1000:.0f}k"


def analyze_percentage_rent(
    tenants: Sequence[RetailTenant],
    sales: Sequence[SalesRecord],
    analysis_date: date,
) -> Optional[PercentageRentAnalysis]:
    """
    Overage rent collected, breakpoint fit per tenant and restructuring upside.

    Optimization compares sales PSF with breakpoint PSF: above 1.5x the
    breakpoint is left on the table, 1.2x-1.5x is optimal, under 0.8x the
    base rent should carry the lease, anything else needs restructuring.
    """
    if not any(t.percentage_rent is not None for t in tenants):
        logger.debug("Percentage rent analysis skipped: no percentage rent clauses")
        return None

    frame = _sales_frame(sales)
    total_pct_rent = 0.0
    total_base = 0.0
    performing = 0
    underperforming = 0
    analyses: List[TenantPercentageRent] = []
    opportunities: List[RentOptimization] = []

    for tenant in tenants:
        tenant_sales = _annual_sales(tenant, frame, analysis_date.year)
        terms = tenant.percentage_rent
        pct_rent = 0.0
        overage_pct = 0.0
        if terms is not None and tenant_sales > 0:
            overage = max(0.0, tenant_sales - terms.natural_breakpoint)
            pct_rent = overage * terms.rate / 100
            overage_pct = overage / tenant_sales * 100
            if pct_rent > 0:
                performing += 1
            else:
                underperforming += 1
        total_pct_rent += pct_rent
        total_base += tenant.annual_base_rent

        sales_psf = tenant_sales / tenant.square_footage
        breakpoint_psf = terms.natural_breakpoint / tenant.square_footage if terms else 0.0
        if sales_psf > breakpoint_psf * 1.5:
            optimization = "Lower Breakpoint"
        elif sales_psf > breakpoint_psf * 1.2:
            optimization = "Optimal"
        elif sales_psf < breakpoint_psf * 0.8:
            optimization = "Increase Base"
        else:
            optimization = "Restructure"
        analyses.append(
            TenantPercentageRent(
                tenant=tenant.name,
                natural_breakpoint=terms.natural_breakpoint if terms else 0.0,
                actual_sales=tenant_sales,
                percentage_rent=pct_rent,
                overage_percentage=overage_pct,
                optimization=optimization,
            )
        )

        if optimization == "Optimal":
            continue
        if optimization == "Lower Breakpoint":
            new_breakpoint = tenant_sales * 0.7
            rate = terms.rate if terms else 6
            increase = (tenant_sales - new_breakpoint) * rate / 100 - pct_rent
            recommended = f"Lower breakpoint to ${_breakpoint_label(new_breakpoint)}"
        elif optimization == "Increase Base":
            market_base = get_market_base_rent(tenant.merchandise_type)
            increase = max(0.0, (market_base - tenant.base_rent_psf) * tenant.square_footage)
            recommended = f"Increase base to ${market_base:g}/SF"
        else:
            increase = tenant.annual_base_rent * 0.03
            recommended = "Convert to graduated or CPI-based rent"
        if increase <= 0:
            continue
        current = (
            f"Base: ${tenant.base_rent_psf:g}/SF, {terms.rate:g}% over {_breakpoint_label(terms.natural_breakpoint)}"
            if terms
            else f"Base: ${tenant.base_rent_psf:g}/SF, no percentage rent"
        )
        opportunities.append(
            RentOptimization(
                tenant=tenant.name,
                current_structure=current,
                recommended_structure=recommended,
                estimated_increase=increase,
            )
        )
    opportunities.sort(key=lambda o: o.estimated_increase, reverse=True)

    comparison = []
    for category, group in group_by(tenants, lambda t: t.merchandise_type).items():
        market = get_market_percentage_rates(category)
        comparison.append(
            PercentageRentMarketComparison(
                category=category,
                market_rate=market["rate"],
                market_breakpoint=market["breakpoint"],
                our_average=mean(t.percentage_rent.rate if t.percentage_rent else 0.0 for t in group) or 0.0,
            )
        )

    return PercentageRentAnalysis(
        current_performance=PercentageRentPerformance(
            total_percentage_rent=total_pct_rent,
            percentage_of_total=safe_divide(total_pct_rent, total_base + total_pct_rent) * 100,
            performing_tenants=performing,
            underperforming_tenants=underperforming,
        ),
        tenant_analysis=analyses,
        optimization_opportunities=opportunities,
        market_comparison=comparison,
    )


class TenantSales(CamelModel):
    name: str
    sales_psf: float


class SalesPerSF(CamelModel):
    """Average sales PSF across tenants with a per-tenant breakdown."""

    average: float
    by_tenant: List[TenantSales]


def calculate_sales_per_sf(tenants: Sequence[RetailTenant]) -> Optional[SalesPerSF]:
    """Sales PSF per tenant; tenants without reported sales count as zero."""
    if not tenants:
        return None
    by_tenant = [TenantSales(name=t.name, sales_psf=t.effective_sales_psf or 0.0) for t in tenants]
    return SalesPerSF(
        average=sum(t.sales_psf for t in by_tenant) / len(by_tenant), by_tenant=by_tenant
    )
