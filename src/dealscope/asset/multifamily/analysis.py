# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Multifamily Analytics

Rent roll revenue, operating expense and competitive market analysis for
apartment properties. Revenue analysis runs over a pandas rent roll built
from the unit records; rents on the rent roll are monthly and all revenue
totals are annualized.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Literal, Optional, Sequence

import pandas as pd

from ...core.primitives import CamelModel
from .._calc_utils import clamp, mean, safe_divide
from .market import (
    MarketComp,
    MultifamilyExpenses,
    NeighborhoodProfile,
    PropertyAmenities,
    SubmarketData,
)
from .unit import Unit

logger = logging.getLogger(__name__)

AMENITY_WEIGHTS: Dict[str, float] = {
    # High value
    "pool": 8,
    "fitness": 8,
    "smart_home": 10,
    "package_lockers": 7,
    "ev_charging": 6,
    # Medium value
    "clubhouse": 5,
    "business_center": 4,
    "dog_park": 5,
    "concierge": 5,
    "valet": 4,
    # Basic
    "gated_parking": 3,
    "covered_parking": 3,
    "bbq_area": 2,
    "playground": 3,
    # Utility features
    "central_hvac": 4,
    "high_speed_internet": 4,
    "keyless_entry": 3,
    "trash_valet": 3,
}
_PARKING_BONUS_MAX = 5

# Typical share of total operating expenses by category
EXPENSE_BENCHMARKS: Dict[str, float] = {
    "taxes": 0.15,
    "insurance": 0.08,
    "utilities": 0.12,
    "payroll": 0.20,
    "maintenance": 0.15,
    "management": 0.10,
    "marketing": 0.05,
    "administrative": 0.10,
    "other": 0.05,
}

# (attribute, label, addition cost, monthly rent premium)
AMENITY_CHECKLIST = [
    ("pool", "Swimming Pool", 250_000, 15),
    ("fitness", "Fitness Center", 100_000, 20),
    ("clubhouse", "Clubhouse", 150_000, 10),
    ("dog_park", "Dog Park", 50_000, 15),
    ("package_lockers", "Package Lockers", 30_000, 10),
    ("smart_home", "Smart Home Features", 1_000, 25),
    ("ev_charging", "EV Charging", 10_000, 5),
    ("trash_valet", "Valet Trash", 0, 20),
]

UNIT_MIX_BUCKETS = ("Studio", "1BR", "2BR", "3BR")
OTHER_INCOME_CATEGORIES = ("parking", "storage", "pet", "utilities")

_PRIORITY_ORDER = {"High": 0, "Medium": 1, "Low": 2}


# --- Result records ---------------------------------------------------------


class RevenueMetrics(CamelModel):
    gross_potential_rent: float
    actual_rent: float
    loss_to_lease: float
    vacancy: float
    concessions: float
    effective_rent: float
    other_income: float
    total_revenue: float


class UnitPerformance(CamelModel):
    rev_pau: float
    rev_pocc_u: Optional[float] = None
    avg_rent_psf: float
    occupancy: float
    economic_occupancy: float
    rent_psf_vs_market: Optional[float] = None


class UnitMixAnalysis(CamelModel):
    unit_type: str
    count: int
    occupancy: float
    avg_rent: float
    avg_market_rent: float
    loss_to_lease: float
    revenue_psf: float
    percent_of_revenue: float


class MultifamilyConcessionAnalysis(CamelModel):
    units_with_concessions: int
    avg_concession_value: float
    concession_rate: float
    net_effective_rent: float
    concession_trend: Literal["Increasing", "Stable", "Decreasing"]


class OtherIncomeLine(CamelModel):
    category: str
    monthly_amount: float
    per_unit_amount: float
    percent_of_revenue: float
    growth_potential: float


class RevenuePerformance(CamelModel):
    revenue_metrics: RevenueMetrics
    unit_performance: UnitPerformance
    unit_mix_analysis: List[UnitMixAnalysis]
    concession_analysis: MultifamilyConcessionAnalysis
    other_income_analysis: List[OtherIncomeLine]


class ExpenseMetrics(CamelModel):
    total_expenses: float
    expense_ratio: Optional[float] = None
    per_unit_expenses: float
    expense_psf: float
    controllable_ratio: float


class ExpenseLine(CamelModel):
    category: str
    amount: float
    per_unit: float
    percent_of_total: float
    benchmark: float
    variance: float


class OperationalKPI(CamelModel):
    metric: str
    value: float
    target: float
    status: Literal["On Track", "Needs Attention", "Critical"]


class OperatingPerformance(CamelModel):
    expense_metrics: ExpenseMetrics
    expense_breakdown: List[ExpenseLine]
    operational_kpis: List[OperationalKPI]


class CompetitivePosition(CamelModel):
    market_rank: int
    rent_premium_discount: float
    occupancy_outperformance: float
    amenity_score: float
    overall_rating: Literal["Leader", "Competitive", "Follower", "Laggard"]


class SWOTAnalysis(CamelModel):
    strengths: List[str]
    weaknesses: List[str]
    opportunities: List[str]
    threats: List[str]


class PricingPower(CamelModel):
    score: float
    indicators: List[str]
    recommended_strategy: str
    max_rent_increase: float


class AmenityGap(CamelModel):
    amenity: str
    market_adoption: float
    has_amenity: bool
    addition_cost: Optional[float] = None
    rent_premium: Optional[float] = None
    priority: Literal["High", "Medium", "Low"]


class DemographicAlignment(CamelModel):
    target_resident: str
    alignment_score: float
    mismatches: List[str]
    recommendations: List[str]


class MultifamilyMarketPosition(CamelModel):
    competitive_position: CompetitivePosition
    strengths_weaknesses: SWOTAnalysis
    pricing_power: PricingPower
    amenity_gap_analysis: List[AmenityGap]
    demographic_alignment: Optional[DemographicAlignment] = None


class MultifamilyMetrics(CamelModel):
    revenue_per_unit: float
    annualized_revenue: float
    market_comparison: Optional[str] = None


# --- Helpers ----------------------------------------------------------------


def calculate_amenity_score(amenities: Optional[PropertyAmenities]) -> float:
    """
    Weighted amenity score normalized to 0-100.

    Each amenity present adds its weight; a parking ratio of 1.5+ adds 5 and
    1.0+ adds 3.
    """
    if amenities is None:
        return 0.0
    score = sum(weight for name, weight in AMENITY_WEIGHTS.items() if getattr(amenities, name))
    if amenities.parking_ratio >= 1.5:
        score += 5
    elif amenities.parking_ratio >= 1.0:
        score += 3
    max_score = sum(AMENITY_WEIGHTS.values()) + _PARKING_BONUS_MAX
    return score / max_score * 100


def calculate_multifamily_metrics(
    total_units: float, monthly_rental_income: float, market_average_rent: Optional[float] = None
) -> Optional[MultifamilyMetrics]:
    """Monthly revenue per unit, annualized revenue and a comparison to market rent."""
    if not total_units or not monthly_rental_income:
        return None
    per_unit = monthly_rental_income / total_units
    comparison = None
    if market_average_rent:
        difference = (per_unit - market_average_rent) / market_average_rent * 100
        if difference > 5:
            comparison = f"{difference:.1f}% above market"
        elif difference < -5:
            comparison = f"{abs(difference):.1f}% below market"
        else:
            comparison = "At market rate"
    return MultifamilyMetrics(
        revenue_per_unit=per_unit,
        annualized_revenue=monthly_rental_income * 12,
        market_comparison=comparison,
    )


def rent_roll_frame(units: Sequence[Unit]) -> pd.DataFrame:
    """One row per unit with monthly rent, concession and other income columns."""
    rows = []
    for u in units:
        income = u.other_income
        rows.append(
            {
                "unit": u.unit_number,
                "bucket": u.mix_bucket,
                "sf": u.square_footage,
                "occupied": u.occupied,
                "renovated": u.renovated,
                "current_rent": u.current_rent if u.occupied else 0.0,
                "market_rent": u.market_rent,
                "concession": u.concessions.monthly_value if u.occupied and u.concessions else 0.0,
                "concession_amount": u.concessions.amount if u.occupied and u.concessions else 0.0,
                "has_concession": bool(u.occupied and u.concessions),
                **{
                    cat: (getattr(income, cat) if income and u.occupied else 0.0)
                    for cat in OTHER_INCOME_CATEGORIES
                },
            }
        )
    return pd.DataFrame(rows)


# --- Analyzers --------------------------------------------------------------


def analyze_revenue_performance(
    units: Sequence[Unit], comps: Sequence[MarketComp] = ()
) -> Optional[RevenuePerformance]:
    """
    Rent roll revenue analysis.

    Gross potential rent is market rent on every unit. Loss-to-lease is the
    shortfall of in-place rent under market on occupied units; vacancy is
    market rent on vacant units. Economic occupancy is effective rent over
    gross potential rent.

    Args:
        units: Rent roll
        comps: Competing properties, for the rent and concession comparisons

    Returns:
        RevenuePerformance, or None for an empty rent roll
    """
    if not units:
        logger.debug("Revenue performance skipped: empty rent roll")
        return None

    roll = rent_roll_frame(units)
    occupied = roll[roll["occupied"]]
    total_units = len(roll)
    occupied_count = len(occupied)

    gpr = float(roll["market_rent"].sum()) * 12
    actual = float(occupied["current_rent"].sum()) * 12
    loss_to_lease = float((occupied["market_rent"] - occupied["current_rent"]).clip(lower=0).sum()) * 12
    vacancy = float(roll.loc[~roll["occupied"], "market_rent"].sum()) * 12
    concessions = float(occupied["concession"].sum()) * 12
    effective = actual - concessions
    other_monthly = occupied[list(OTHER_INCOME_CATEGORIES)].sum()
    other_income = float(other_monthly.sum()) * 12
    total_revenue = effective + other_income

    total_sf = float(roll["sf"].sum())
    avg_rent_psf = actual / 12 / total_sf
    comp_rent_psf = mean(c.avg_rent_psf for c in comps)
    rent_vs_market = (
        (avg_rent_psf - comp_rent_psf) / comp_rent_psf * 100 if comp_rent_psf else None
    )

    mix = []
    for bucket in UNIT_MIX_BUCKETS:
        group = roll[roll["bucket"] == bucket]
        if group.empty:
            continue
        occ = group[group["occupied"]]
        revenue = float(occ["current_rent"].sum()) * 12
        mix.append(
            UnitMixAnalysis(
                unit_type=bucket,
                count=len(group),
                occupancy=len(occ) / len(group) * 100,
                avg_rent=float(occ["current_rent"].mean()) if not occ.empty else 0.0,
                avg_market_rent=float(group["market_rent"].mean()),
                loss_to_lease=float((occ["market_rent"] - occ["current_rent"]).clip(lower=0).sum()),
                revenue_psf=revenue / float(group["sf"].sum()),
                percent_of_revenue=safe_divide(revenue, actual) * 100,
            )
        )

    with_concessions = int(occupied["has_concession"].sum())
    concession_rate = safe_divide(with_concessions, occupied_count) * 100
    trend = "Stable"
    if comps:
        market_rate = sum(1 for c in comps if c.concession_offered) / len(comps) * 100
        if concession_rate > market_rate * 1.2:
            trend = "Increasing"
        elif concession_rate < market_rate * 0.8:
            trend = "Decreasing"

    other_lines = []
    for category in OTHER_INCOME_CATEGORIES:
        monthly = float(other_monthly[category])
        penetration = safe_divide(int((occupied[category] > 0).sum()), occupied_count)
        other_lines.append(
            OtherIncomeLine(
                category=category.capitalize(),
                monthly_amount=monthly,
                per_unit_amount=safe_divide(monthly, occupied_count),
                percent_of_revenue=safe_divide(monthly * 12, total_revenue) * 100,
                growth_potential=(1 - penetration) * 50,
            )
        )

    return RevenuePerformance(
        revenue_metrics=RevenueMetrics(
            gross_potential_rent=gpr,
            actual_rent=actual,
            loss_to_lease=loss_to_lease,
            vacancy=vacancy,
            concessions=concessions,
            effective_rent=effective,
            other_income=other_income,
            total_revenue=total_revenue,
        ),
        unit_performance=UnitPerformance(
            rev_pau=total_revenue / total_units / 12,
            rev_pocc_u=total_revenue / occupied_count / 12 if occupied_count else None,
            avg_rent_psf=avg_rent_psf,
            occupancy=occupied_count / total_units * 100,
            economic_occupancy=safe_divide(effective, gpr) * 100,
            rent_psf_vs_market=rent_vs_market,
        ),
        unit_mix_analysis=mix,
        concession_analysis=MultifamilyConcessionAnalysis(
            units_with_concessions=with_concessions,
            avg_concession_value=safe_divide(float(occupied["concession_amount"].sum()), with_concessions),
            concession_rate=concession_rate,
            net_effective_rent=effective,
            concession_trend=trend,
        ),
        other_income_analysis=other_lines,
    )


def _kpi_status(on_track: bool, needs_attention: bool) -> str:
    if on_track:
        return "On Track"
    if needs_attention:
        return "Needs Attention"
    return "Critical"


def analyze_operating_performance(
    units: Sequence[Unit],
    expenses: Optional[MultifamilyExpenses],
    rent_growth: Optional[float] = None,
) -> Optional[OperatingPerformance]:
    """
    Operating expense efficiency of an apartment property.

    Taxes and insurance are non-controllable; everything else is
    controllable. Each category's share of total expenses is compared with
    a typical share.

    Args:
        units: Rent roll
        expenses: Annual operating expenses by category
        rent_growth: Trailing or market rent growth (%), reported as a KPI when given

    Returns:
        OperatingPerformance, or None without units or expenses
    """
    if not units or expenses is None or expenses.total <= 0:
        logger.debug("Operating performance skipped: no rent roll or expenses")
        return None

    total_units = len(units)
    total_sf = sum(u.square_footage for u in units)
    occupied = sum(1 for u in units if u.occupied)
    revenue = sum(u.current_rent * 12 for u in units if u.occupied)
    total = expenses.total
    expense_ratio = total / revenue * 100 if revenue else None

    breakdown = []
    for category, amount in expenses.as_dict().items():
        share = amount / total * 100
        benchmark = EXPENSE_BENCHMARKS.get(category, 0) * 100
        breakdown.append(
            ExpenseLine(
                category=category.capitalize(),
                amount=amount,
                per_unit=amount / total_units,
                percent_of_total=share,
                benchmark=benchmark,
                variance=(share - benchmark) / benchmark * 100 if benchmark else 0.0,
            )
        )
    breakdown.sort(key=lambda line: line.amount, reverse=True)

    occupancy = occupied / total_units * 100
    kpis = [
        OperationalKPI(
            metric="Occupancy Rate",
            value=occupancy,
            target=95,
            status=_kpi_status(occupancy >= 95, occupancy >= 90),
        )
    ]
    if rent_growth is not None:
        kpis.append(
            OperationalKPI(
                metric="Rent Growth",
                value=rent_growth,
                target=3,
                status=_kpi_status(rent_growth >= 3, rent_growth >= 1),
            )
        )
    if expense_ratio is not None:
        kpis.append(
            OperationalKPI(
                metric="Expense Ratio",
                value=expense_ratio,
                target=35,
                status=_kpi_status(expense_ratio <= 35, expense_ratio <= 40),
            )
        )

    return OperatingPerformance(
        expense_metrics=ExpenseMetrics(
            total_expenses=total,
            expense_ratio=expense_ratio,
            per_unit_expenses=total / total_units,
            expense_psf=total / total_sf,
            controllable_ratio=(total - expenses.non_controllable) / total * 100,
        ),
        expense_breakdown=breakdown,
        operational_kpis=kpis,
    )


def _pricing_strategy(score: float) -> tuple:
    if score >= 80:
        return "Aggressive rent growth - push 5-7% on renewals", 7.0
    if score >= 60:
        return "Moderate growth - target 3-5% increases", 5.0
    if score >= 40:
        return "Conservative approach - 2-3% increases", 3.0
    return "Focus on occupancy - minimal increases", 2.0


def _demographic_alignment(
    units: Sequence[Unit],
    amenities: PropertyAmenities,
    submarket: SubmarketData,
    neighborhood: NeighborhoodProfile,
) -> Optional[DemographicAlignment]:
    rents = [u.current_rent for u in units if u.occupied]
    if not rents or submarket.median_income <= 0:
        return None
    # Qualifying income at three times annual rent
    resident_income = mean(r * 12 * 3 for r in rents)
    score = 70.0
    mismatches: List[str] = []
    recommendations: List[str] = []

    if resident_income > submarket.median_income * 1.5:
        target = "Young Professionals"
        if not amenities.fitness:
            mismatches.append("No fitness center for active demographic")
            recommendations.append("Add fitness center")
            score -= 10
        if not amenities.smart_home:
            mismatches.append("No smart home features")
            recommendations.append("Implement smart home technology")
            score -= 10
    elif resident_income > submarket.median_income * 0.8:
        target = "Middle Income Families"
        if not amenities.playground:
            mismatches.append("No playground for families")
            recommendations.append("Add playground")
            score -= 10
        if neighborhood.school_rating < 7:
            mismatches.append("Below-average schools")
            score -= 15
    else:
        target = "Value-Conscious Renters"
        if amenities.valet or amenities.concierge:
            mismatches.append("Luxury amenities increase costs")
            recommendations.append("Focus on essential amenities only")
            score -= 5

    return DemographicAlignment(
        target_resident=target, alignment_score=score, mismatches=mismatches, recommendations=recommendations
    )


def analyze_market_position(
    units: Sequence[Unit],
    amenities: Optional[PropertyAmenities],
    comps: Sequence[MarketComp],
    submarket: Optional[SubmarketData] = None,
    neighborhood: Optional[NeighborhoodProfile] = None,
    year_built: Optional[int] = None,
    last_renovation: Optional[int] = None,
    analysis_date: Optional[date] = None,
) -> Optional[MultifamilyMarketPosition]:
    """
    Competitive position of an apartment property within its comp set.

    The property and each comp are scored as 0.4 x rent PSF + 0.3 x
    occupancy + 0.3 x amenity score; rank 1 is the best. The rating follows
    the rank quartile within the comp set.

    Args:
        units: Rent roll
        amenities: Community amenities (none assumed when missing)
        comps: Competing properties
        submarket: Submarket fundamentals
        neighborhood: Walk, transit, school and crime scores
        year_built: Year of construction
        last_renovation: Year of the last major renovation
        analysis_date: Date property age is measured at

    Returns:
        MultifamilyMarketPosition, or None without units or comps
    """
    if not units or not comps:
        logger.debug("Market position skipped: no rent roll or comps")
        return None

    amenities = amenities or PropertyAmenities()
    submarket = submarket or SubmarketData()
    neighborhood = neighborhood or NeighborhoodProfile()
    current_year = (analysis_date or date.today()).year

    total_units = len(units)
    occupied = [u for u in units if u.occupied]
    occupancy = len(occupied) / total_units * 100
    avg_rent = mean(u.current_rent for u in occupied) or 0.0
    avg_sf = sum(u.square_footage for u in units) / total_units
    avg_rent_psf = avg_rent / avg_sf

    market_rent_psf = mean(c.avg_rent_psf for c in comps)
    market_occupancy = mean(c.occupancy for c in comps)
    market_amenity = mean(c.amenity_score for c in comps)
    rent_premium = safe_divide(avg_rent_psf - market_rent_psf, market_rent_psf) * 100
    amenity_score = calculate_amenity_score(amenities)

    own_score = avg_rent_psf * 0.4 + occupancy * 0.3 + amenity_score * 0.3
    rank = 1 + sum(
        1 for c in comps if c.avg_rent_psf * 0.4 + c.occupancy * 0.3 + c.amenity_score * 0.3 > own_score
    )
    if rank <= len(comps) * 0.25:
        rating = "Leader"
    elif rank <= len(comps) * 0.5:
        rating = "Competitive"
    elif rank <= len(comps) * 0.75:
        rating = "Follower"
    else:
        rating = "Laggard"

    concession_share = sum(1 for c in comps if c.concession_offered) / len(comps)
    heavy_supply = submarket.new_supply_units > submarket.population * 0.02

    strengths, weaknesses, opportunities, threats = [], [], [], []
    if occupancy > 95:
        strengths.append("High occupancy")
    if rent_premium > 5:
        strengths.append("Premium rent achievement")
    if neighborhood.walk_score > 80:
        strengths.append("Excellent walkability")
    if neighborhood.transit_score > 70:
        strengths.append("Strong transit access")
    if amenity_score > market_amenity:
        strengths.append("Superior amenity package")
    if last_renovation and current_year - last_renovation < 5:
        strengths.append("Recently renovated")

    if occupancy < 90:
        weaknesses.append("Below-market occupancy")
    if rent_premium < -5:
        weaknesses.append("Below-market rents")
    if year_built and current_year - year_built > 20 and not last_renovation:
        weaknesses.append("Dated property")
    if neighborhood.crime_index > 50:
        weaknesses.append("Safety concerns")
    if amenity_score < market_amenity * 0.8:
        weaknesses.append("Inferior amenity package")

    if sum(1 for u in units if not u.renovated) > total_units * 0.3:
        opportunities.append("Unit renovation program")
    if rent_premium < 0:
        opportunities.append("Rent growth potential")
    if not amenities.smart_home:
        opportunities.append("Smart home technology adoption")
    if not amenities.package_lockers:
        opportunities.append("Package management solution")

    if heavy_supply:
        threats.append("Significant new supply")
    if submarket.rent_to_income_ratio > 0.35:
        threats.append("Affordability pressure")
    if sum(1 for c in comps if c.renovated) > len(comps) * 0.5:
        threats.append("Competitor renovations")
    if concession_share > 0.5:
        threats.append("Market-wide concessions")

    pricing = 50.0
    indicators = []
    if occupancy > 95:
        pricing += 20
        indicators.append("High occupancy supports increases")
    if rent_premium < -5:
        pricing += 15
        indicators.append("Below-market rents")
    if neighborhood.walk_score > 80:
        pricing += 10
        indicators.append("Premium location")
    if submarket.avg_rent_growth > 3:
        pricing += 10
        indicators.append("Strong market rent growth")
    if concession_share > 0.5:
        pricing -= 15
        indicators.append("High market concessions")
    if heavy_supply:
        pricing -= 10
        indicators.append("New supply pressure")
    pricing = clamp(pricing, 0, 100)
    strategy, max_increase = _pricing_strategy(pricing)

    # Comps with a strong amenity score are taken to offer each amenity
    adoption = sum(1 for c in comps if c.amenity_score > 70) / len(comps) * 100
    gaps = []
    for attr, label, cost, premium in AMENITY_CHECKLIST:
        has = bool(getattr(amenities, attr))
        priority = "Low"
        if not has and adoption > 70:
            priority = "High"
        elif not has and adoption > 40:
            priority = "Medium"
        gaps.append(
            AmenityGap(
                amenity=label,
                market_adoption=adoption,
                has_amenity=has,
                addition_cost=None if has else cost,
                rent_premium=None if has else premium,
                priority=priority,
            )
        )
    gaps.sort(key=lambda g: _PRIORITY_ORDER[g.priority])

    return MultifamilyMarketPosition(
        competitive_position=CompetitivePosition(
            market_rank=rank,
            rent_premium_discount=rent_premium,
            occupancy_outperformance=occupancy - market_occupancy,
            amenity_score=amenity_score,
            overall_rating=rating,
        ),
        strengths_weaknesses=SWOTAnalysis(
            strengths=strengths, weaknesses=weaknesses, opportunities=opportunities, threats=threats
        ),
        pricing_power=PricingPower(
            score=pricing,
            indicators=indicators,
            recommended_strategy=strategy,
            max_rent_increase=max_increase,
        ),
        amenity_gap_analysis=gaps,
        demographic_alignment=_demographic_alignment(units, amenities, submarket, neighborhood),
    )
