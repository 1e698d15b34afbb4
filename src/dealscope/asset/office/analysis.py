# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Office Analytics

Tenant credit, lease economics, building operations and market positioning
for multi-tenant office buildings. Every analyzer is a pure function of the
records it receives and returns ``None`` when it has nothing to work with.
"""

from __future__ import annotations

import logging
import math
from datetime import date
from typing import Dict, List, Literal, Optional, Sequence

import numpy as np
from pydantic import Field

from ...core.primitives import CamelModel, CreditRating
from .._calc_utils import annuity_factor, clamp, group_by, mean, safe_divide, years_between
from .market import BuildingOperations, OfficeMarketData
from .tenant import OfficeTenant

logger = logging.getLogger(__name__)

CREDIT_SCORES: Dict[CreditRating, float] = {
    CreditRating.AAA: 100,
    CreditRating.AA: 90,
    CreditRating.A: 80,
    CreditRating.BBB: 70,
    CreditRating.BB: 55,
    CreditRating.B: 40,
    CreditRating.CCC: 25,
    CreditRating.D: 0,
    CreditRating.NR: 50,
}

INDUSTRY_OUTLOOKS: Dict[str, str] = {
    "Technology": "Growing",
    "Healthcare": "Growing",
    "Financial Services": "Stable",
    "Legal": "Stable",
    "Government": "Stable",
    "Media": "Declining",
    "Insurance": "Declining",
}

WFH_IMPACTS: Dict[str, str] = {
    "Technology": "High",
    "Financial Services": "Medium",
    "Legal": "Low",
    "Healthcare": "Low",
    "Government": "Low",
}

_WFH_DOWNSIZING = {"High": 0.4, "Medium": 0.25, "Low": 0.1}
_LEED_ENERGY_SCORES = {"Platinum": 95, "Gold": 85, "Silver": 75, "Certified": 65}
_WELL_BONUS = {"Platinum": 30, "Gold": 25, "Silver": 20, "Bronze": 15}
_FIXTURE_SCORES = {"Waterless": 90, "Low Flow": 75, "Standard": 50}
_CONTROL_BONUS = {"Smart": 15, "DDC": 10, "Pneumatic": 0}


# --- Result records ---------------------------------------------------------


class WatchListEntry(CamelModel):
    tenant: str
    reasons: List[str]
    risk_level: Literal["High", "Medium", "Low"]
    recommended_action: str


class IndustryExposure(CamelModel):
    industry: str
    percentage: float
    tenant_count: int
    market_outlook: str


class TenantOutlook(CamelModel):
    tenant: str
    employee_density: Optional[float] = Field(default=None, description="Rentable SF per employee.")
    expansion_probability: float
    downsizing_risk: float
    positive_indicators: List[str] = Field(default_factory=list)
    negative_indicators: List[str] = Field(default_factory=list)


class TenantFinancialHealth(CamelModel):
    weighted_credit_score: float
    investment_grade_percentage: float
    public_company_percentage: float
    watch_list: List[WatchListEntry]
    herfindahl_index: float
    top_tenant_exposure: float
    industry_concentration: List[IndustryExposure]
    tenant_outlooks: List[TenantOutlook]


class LeaseValuation(CamelModel):
    tenant: str
    contractual_rent: float
    market_rent: float
    remaining_term: float
    lease_value: float
    face_rent: float
    effective_rent: float


class EscalationTypeSummary(CamelModel):
    type: str
    count: int
    avg_rate: float


class EscalationAnalysis(CamelModel):
    avg_escalation: float
    escalation_types: List[EscalationTypeSummary]
    cpi_exposure: float
    fixed_increases: float


class ConcessionAnalysis(CamelModel):
    total_concessions: float
    free_rent_value: float
    ti_allowances: float
    leasing_commissions: float
    concession_rate: float
    payback_period: float


class LeaseEconomics(CamelModel):
    lease_valuation: List[LeaseValuation]
    escalation_analysis: EscalationAnalysis
    concession_analysis: ConcessionAnalysis


class OperationalEfficiency(CamelModel):
    overall_score: float
    energy_efficiency: float
    water_efficiency: float
    waste_efficiency: float
    indoor_environment: float


class SystemCondition(CamelModel):
    system: str
    age: float
    remaining_life: float
    condition: str
    replacement_cost: float
    annual_maintenance: float


class ExpenseSummary(CamelModel):
    total_expenses: float
    expense_psf: float
    controllable: float
    non_controllable: float
    recoverable: float


class BuildingOperationsAnalysis(CamelModel):
    operational_efficiency: OperationalEfficiency
    systems_condition: List[SystemCondition]
    expense_analysis: ExpenseSummary


class MarketPosition(CamelModel):
    overall_rank: int
    total_properties: int
    percentile: float
    classification: Literal["Market Leader", "Above Average", "Average", "Below Average"]
    key_differentiators: List[str]
    competitive_weaknesses: List[str]


class PricingAnalysis(CamelModel):
    asking_vs_market: float
    effective_vs_market: float
    pricing_power: Literal["Strong", "Moderate", "Weak"]
    recommended_strategy: str
    target_rent: float


class MarketPositioning(CamelModel):
    market_cycle: str
    market_position: MarketPosition
    pricing_analysis: PricingAnalysis


# --- Helpers ----------------------------------------------------------------


def get_industry_outlook(industry: Optional[str]) -> str:
    """Demand outlook for office space by tenant industry."""
    return INDUSTRY_OUTLOOKS.get(industry or "", "Stable")


def get_wfh_impact(industry: Optional[str]) -> str:
    """Exposure of an industry's space needs to remote work."""
    return WFH_IMPACTS.get(industry or "", "Medium")


def calculate_real_estate_option_value(
    current_value: float,
    strike_price: float,
    time_to_expiry: float,
    volatility: float = 0.15,
    risk_free_rate: float = 0.03,
) -> float:
    """
    Approximate value of a lease option (expansion, renewal, purchase).

    Intrinsic value plus a simplified time value of
    ``0.4 * volatility * value * sqrt(T)``, discounted at the risk-free rate.

    Args:
        current_value: Value of the underlying space today
        strike_price: Cost to exercise
        time_to_expiry: Years until the option lapses
        volatility: Annual value volatility (decimal)
        risk_free_rate: Continuous discount rate (decimal)

    Returns:
        Option value in dollars
    """
    time_value = math.sqrt(max(time_to_expiry, 0.0)) * volatility * current_value
    intrinsic_value = max(0.0, current_value - strike_price)
    discount_factor = math.exp(-risk_free_rate * time_to_expiry)
    return (intrinsic_value + time_value * 0.4) * discount_factor


def calculate_space_efficiency_score(
    usable_sf: float,
    rentable_sf: float,
    occupancy: float,
) -> float:
    """Score 0-100 from the load factor and occupancy of a building."""
    score = 50.0
    core_efficiency = safe_divide(usable_sf, rentable_sf) * 100
    if core_efficiency >= 85:
        score += 30
    elif core_efficiency >= 82:
        score += 20
    elif core_efficiency >= 78:
        score += 10
    else:
        score -= 10

    if occupancy >= 95:
        score += 25
    elif occupancy >= 90:
        score += 15
    elif occupancy >= 85:
        score += 5
    else:
        score -= 10

    return clamp(score, 0, 100)


def determine_market_cycle(
    vacancy: float, rent_growth: float, new_supply: float, absorption: float
) -> Literal["Recovery", "Expansion", "Hypersupply", "Recession"]:
    """Place a submarket in the four-phase real estate cycle."""
    if vacancy > 15 and rent_growth < 0:
        return "Recession"
    if vacancy > 10 and new_supply > absorption * 2:
        return "Hypersupply"
    if vacancy < 10 and rent_growth > 3:
        return "Expansion"
    return "Recovery"


def calculate_retention_probability(tenant: OfficeTenant, market_rent: float) -> float:
    """
    Probability that a tenant renews at expiration.

    Tenants paying well below market are more likely to stay; those paying
    above market are more likely to relocate. Strong credit adds stability.
    """
    probability = 0.7
    rent_psf = tenant.rent_psf
    if rent_psf is not None and market_rent > 0:
        rent_vs_market = rent_psf / market_rent
        if rent_vs_market < 0.9:
            probability += 0.15
        elif rent_vs_market > 1.1:
            probability -= 0.15

    if tenant.credit_rating.is_high_grade:
        probability += 0.1

    return clamp(probability, 0.1, 0.95)


def calculate_walt(tenants: Sequence[OfficeTenant], analysis_date: date) -> Optional[float]:
    """
    Rent-weighted average remaining lease term, in years.

    Expired leases contribute zero remaining term. Returns None when there
    are no tenants or no rent to weight by.
    """
    if not tenants:
        return None
    rents = np.array([t.annual_rent for t in tenants], dtype=float)
    if rents.sum() == 0:
        return None
    terms = np.array([years_between(analysis_date, t.lease_expiration) for t in tenants])
    return float(np.average(terms, weights=rents))


# --- Analyzers --------------------------------------------------------------


def _watch_list_entry(tenant: OfficeTenant) -> Optional[WatchListEntry]:
    reasons = []
    if not tenant.credit_rating.is_investment_grade and tenant.credit_rating != CreditRating.NR:
        reasons.append(f"Speculative-grade credit ({tenant.credit_rating.value})")
    if tenant.financial_strength in ("Watch", "Weak"):
        reasons.append(f"Financial strength rated {tenant.financial_strength}")
    if tenant.defaults > 0:
        reasons.append("Prior payment default")
    elif tenant.late_payments > 2:
        reasons.append(f"{tenant.late_payments} late payments")
    if not reasons:
        return None

    severe = tenant.credit_rating in (CreditRating.CCC, CreditRating.D) or tenant.financial_strength == "Weak"
    if severe or len(reasons) >= 2:
        risk_level, action = "High", "Increase security deposit and prepare a re-leasing plan"
    else:
        risk_level, action = "Medium", "Monitor financial statements quarterly"
    return WatchListEntry(
        tenant=tenant.name, reasons=reasons, risk_level=risk_level, recommended_action=action
    )


def _tenant_outlook(tenant: OfficeTenant) -> TenantOutlook:
    outlook = get_industry_outlook(tenant.industry)
    wfh = get_wfh_impact(tenant.industry)
    density = tenant.sf_per_employee
    positive: List[str] = []
    negative: List[str] = []

    expansion = 0.3
    downsizing = _WFH_DOWNSIZING[wfh]
    if outlook == "Growing":
        expansion += 0.2
        positive.append(f"{tenant.industry} sector growing")
    elif outlook == "Declining":
        expansion -= 0.15
        downsizing += 0.15
        negative.append(f"{tenant.industry} sector declining")
    if tenant.expansion_options > 0:
        expansion += 0.1
        positive.append("Holds expansion rights")
    if density is not None:
        if density < 150:
            expansion += 0.15
            positive.append("Dense occupancy suggests space need")
        elif density > 250:
            downsizing += 0.1
            negative.append("Underutilized space")
    if tenant.financial_strength in ("Watch", "Weak"):
        downsizing += 0.15
        negative.append("Weak financial strength")
    if tenant.termination_options > 0:
        downsizing += 0.05
        negative.append("Holds termination option")
    if wfh == "High":
        negative.append("High remote-work exposure")
    if tenant.credit_rating.is_high_grade:
        positive.append("Strong credit")

    return TenantOutlook(
        tenant=tenant.name,
        employee_density=density,
        expansion_probability=clamp(expansion, 0, 1),
        downsizing_risk=clamp(downsizing, 0, 1),
        positive_indicators=positive,
        negative_indicators=negative,
    )


def analyze_tenant_financial_health(
    tenants: Sequence[OfficeTenant],
) -> Optional[TenantFinancialHealth]:
    """
    Credit quality and concentration of an office rent roll.

    All percentages are rent-weighted. The Herfindahl index is the sum of
    squared rent shares (1.0 for a single-tenant building).

    Args:
        tenants: Office tenants on the rent roll

    Returns:
        TenantFinancialHealth, or None without tenants or rent
    """
    total_rent = sum(t.annual_rent for t in tenants)
    if not tenants or total_rent <= 0:
        logger.debug("Tenant financial health skipped: no rent-paying tenants")
        return None

    shares = {id(t): t.annual_rent / total_rent for t in tenants}
    weighted_score = sum(CREDIT_SCORES[t.credit_rating] * shares[id(t)] for t in tenants)
    investment_grade = sum(shares[id(t)] for t in tenants if t.credit_rating.is_investment_grade)
    public = sum(shares[id(t)] for t in tenants if t.is_public)

    industries = []
    for industry, members in group_by(tenants, lambda t: t.industry or "Unknown").items():
        industries.append(
            IndustryExposure(
                industry=industry,
                percentage=sum(shares[id(t)] for t in members) * 100,
                tenant_count=len(members),
                market_outlook=get_industry_outlook(industry),
            )
        )
    industries.sort(key=lambda x: x.percentage, reverse=True)

    return TenantFinancialHealth(
        weighted_credit_score=weighted_score,
        investment_grade_percentage=investment_grade * 100,
        public_company_percentage=public * 100,
        watch_list=[entry for entry in map(_watch_list_entry, tenants) if entry is not None],
        herfindahl_index=sum(share**2 for share in shares.values()),
        top_tenant_exposure=max(shares.values()) * 100,
        industry_concentration=industries,
        tenant_outlooks=[_tenant_outlook(t) for t in tenants],
    )


def analyze_lease_economics(
    tenants: Sequence[OfficeTenant],
    market: Optional[OfficeMarketData],
    analysis_date: date,
    discount_rate: float = 0.08,
) -> Optional[LeaseEconomics]:
    """
    Value each lease against market and summarize escalations and concessions.

    Lease value is the present value of the contract-over-market rent
    differential for the remaining term (positive means above-market
    income). Effective rent nets free rent, TI and commissions out of face
    rent over the full lease term.
    """
    if not tenants:
        return None

    valuations: List[LeaseValuation] = []
    for tenant in tenants:
        contractual = tenant.rent_psf
        if contractual is None:
            continue
        market_rent = market.market_rent if market else contractual
        remaining = years_between(analysis_date, tenant.lease_expiration)
        if tenant.commencement_date is not None:
            term = years_between(tenant.commencement_date, tenant.lease_expiration)
        else:
            term = remaining
        term = max(term, 1.0)
        concessions = (
            tenant.free_rent_months / 12 * tenant.annual_rent
            + tenant.ti_allowance
            + tenant.leasing_commissions
        )
        valuations.append(
            LeaseValuation(
                tenant=tenant.name,
                contractual_rent=contractual,
                market_rent=market_rent,
                remaining_term=remaining,
                lease_value=(contractual - market_rent)
                * tenant.rentable_sf
                * annuity_factor(discount_rate, remaining),
                face_rent=contractual,
                effective_rent=contractual - concessions / (term * tenant.rentable_sf),
            )
        )

    total_rent = sum(t.annual_rent for t in tenants)
    escalating = [t for t in tenants if t.escalation_type is not None]
    type_summaries = []
    for esc_type, members in group_by(escalating, lambda t: t.escalation_type).items():
        rates = [t.escalation_rate for t in members if t.escalation_rate is not None]
        type_summaries.append(
            EscalationTypeSummary(type=esc_type, count=len(members), avg_rate=mean(rates) or 0.0)
        )

    def rent_share(esc_type: str) -> float:
        rent = sum(t.annual_rent for t in tenants if t.escalation_type == esc_type)
        return safe_divide(rent, total_rent) * 100

    free_rent = sum(t.free_rent_months / 12 * t.annual_rent for t in tenants)
    ti = sum(t.ti_allowance for t in tenants)
    commissions = sum(t.leasing_commissions for t in tenants)
    total_concessions = free_rent + ti + commissions
    contract_value = 0.0
    for t in tenants:
        start = t.commencement_date or analysis_date
        contract_value += t.annual_rent * max(years_between(start, t.lease_expiration), 1.0)

    return LeaseEconomics(
        lease_valuation=valuations,
        escalation_analysis=EscalationAnalysis(
            avg_escalation=mean(t.escalation_rate for t in tenants if t.escalation_rate is not None) or 0.0,
            escalation_types=type_summaries,
            cpi_exposure=rent_share("CPI"),
            fixed_increases=rent_share("Fixed"),
        ),
        concession_analysis=ConcessionAnalysis(
            total_concessions=total_concessions,
            free_rent_value=free_rent,
            ti_allowances=ti,
            leasing_commissions=commissions,
            concession_rate=safe_divide(total_concessions, contract_value) * 100,
            payback_period=safe_divide(total_concessions, total_rent),
        ),
    )


def analyze_building_operations(
    building: Optional[BuildingOperations], total_sf: float
) -> Optional[BuildingOperationsAnalysis]:
    """Sustainability scores, system remaining lives and expense structure."""
    if building is None:
        return None

    if building.energy_star_score is not None:
        energy = building.energy_star_score
    else:
        energy = _LEED_ENERGY_SCORES.get(building.leed_certification or "", 50)
    water = _FIXTURE_SCORES.get(building.plumbing_fixtures or "", 50)
    waste = building.recycling_rate if building.recycling_rate is not None else 50
    indoor = clamp(
        60
        + _WELL_BONUS.get(building.well_certification or "", 0)
        + _CONTROL_BONUS.get(building.hvac_controls or "", 0),
        0,
        100,
    )

    systems = [
        SystemCondition(
            system=s.name,
            age=s.age,
            remaining_life=max(0.0, s.useful_life - s.age),
            condition=s.condition,
            replacement_cost=s.replacement_cost,
            annual_maintenance=s.annual_maintenance,
        )
        for s in building.systems
    ]
    systems.sort(key=lambda s: s.remaining_life)

    total = sum(e.annual for e in building.expenses)
    controllable = sum(e.annual for e in building.expenses if e.controllable)
    return BuildingOperationsAnalysis(
        operational_efficiency=OperationalEfficiency(
            overall_score=(energy + water + waste + indoor) / 4,
            energy_efficiency=energy,
            water_efficiency=water,
            waste_efficiency=waste,
            indoor_environment=indoor,
        ),
        systems_condition=systems,
        expense_analysis=ExpenseSummary(
            total_expenses=total,
            expense_psf=safe_divide(total, total_sf),
            controllable=controllable,
            non_controllable=total - controllable,
            recoverable=sum(e.annual for e in building.expenses if e.recoverable),
        ),
    )


def _classify_percentile(percentile: float) -> str:
    if percentile >= 75:
        return "Market Leader"
    if percentile >= 50:
        return "Above Average"
    if percentile >= 25:
        return "Average"
    return "Below Average"


def analyze_market_positioning(
    occupancy: float,
    avg_rent: float,
    market: Optional[OfficeMarketData],
    building: Optional[BuildingOperations] = None,
) -> Optional[MarketPositioning]:
    """
    Rank the property against its competitive set and size its pricing power.

    Properties are scored on occupancy and rent relative to market in equal
    measure; the subject is ranked among the competitive set on that score.
    """
    if market is None or avg_rent <= 0:
        return None

    def position_score(prop_occupancy: float, rent: float) -> float:
        return 0.5 * prop_occupancy + 0.5 * safe_divide(rent, market.market_rent) * 100

    subject_score = position_score(occupancy, avg_rent)
    comp_scores = [position_score(c.occupancy, c.asking_rent) for c in market.competitive_properties]
    total = len(comp_scores) + 1
    rank = 1 + sum(1 for score in comp_scores if score > subject_score)
    percentile = 100.0 if total == 1 else (total - rank) / (total - 1) * 100

    comps = market.competitive_properties
    comp_occupancy = mean(c.occupancy for c in comps)
    comp_effective = mean(c.effective_rent or c.asking_rent for c in comps)

    differentiators: List[str] = []
    weaknesses: List[str] = []
    if comp_occupancy is not None:
        if occupancy >= comp_occupancy + 5:
            differentiators.append("Occupancy above competitive set")
        elif occupancy <= comp_occupancy - 5:
            weaknesses.append("Occupancy below competitive set")
    if avg_rent > market.market_rent * 1.05:
        differentiators.append("Achieves premium rents")
    elif avg_rent < market.market_rent * 0.95:
        weaknesses.append("Rents below market")
    if building is not None:
        if building.leed_certification:
            differentiators.append(f"LEED {building.leed_certification} certification")
        if building.energy_star_score is not None and building.energy_star_score >= 75:
            differentiators.append("Energy Star certified")
        if any(s.age >= 0.8 * s.useful_life for s in building.systems):
            weaknesses.append("Building systems near end of life")

    if occupancy >= 92 and market.vacancy < 10:
        power, strategy, target_factor = "Strong", "Push rents on renewals and new leases", 1.05
    elif occupancy >= 85:
        power, strategy, target_factor = "Moderate", "Selective rent increases", 1.0
    else:
        power, strategy, target_factor = "Weak", "Prioritize occupancy with competitive concessions", 0.95

    return MarketPositioning(
        market_cycle=determine_market_cycle(
            market.vacancy, market.rent_growth, market.new_supply_sf, market.absorption_sf
        ),
        market_position=MarketPosition(
            overall_rank=rank,
            total_properties=total,
            percentile=percentile,
            classification=_classify_percentile(percentile),
            key_differentiators=differentiators,
            competitive_weaknesses=weaknesses,
        ),
        pricing_analysis=PricingAnalysis(
            asking_vs_market=(safe_divide(avg_rent, market.market_rent) - 1) * 100,
            effective_vs_market=(
                (safe_divide(avg_rent, comp_effective) - 1) * 100 if comp_effective else 0.0
            ),
            pricing_power=power,
            recommended_strategy=strategy,
            target_rent=market.market_rent * target_factor,
        ),
    )

