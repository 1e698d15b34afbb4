# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Property Metrics - Investment Formula Set

Two layers:

- ``PropertyMetrics`` holds the strict formulas. They take plain numbers
  and raise ``ValueError`` for a denominator that cannot produce a
  meaningful result.
- The metric calculators below read a ``PropertyData`` record, check the
  inputs each metric needs and return ``None`` when those are missing or
  the result is not finite.

Rates on ``PropertyData`` are percentages (``interest_rate=6`` means 6%) and
every percentage metric is returned on the 0-100 scale. Nothing is rounded.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

from pyxirr import npv, pmt

from ..asset.industrial.analysis import calculate_industrial_metrics
from ..asset.multifamily.analysis import calculate_multifamily_metrics
from ..asset.office.analysis import calculate_walt
from ..asset.property import PropertyData
from ..asset.retail.analysis import calculate_sales_per_sf
from ..core.primitives import GlobalSettings, MetricKind, MetricName, finite_or_none

logger = logging.getLogger(__name__)


class PropertyMetrics:
    """
    Strict investment formulas over plain numbers.

    Each method raises ``ValueError`` when a denominator is zero or negative,
    so callers that want a soft failure go through ``calculate_metric``.
    """

    @staticmethod
    def annual_debt_service(loan_amount: float, interest_rate: float, loan_term: float) -> float:
        """
        Annual payment on a fully amortizing, monthly-pay loan.

        Args:
            loan_amount: Principal
            interest_rate: Annual rate in percent
            loan_term: Amortization in years

        Returns:
            Twelve monthly payments. A zero rate amortizes straight-line.
        """
        if loan_term <= 0:
            raise ValueError("loan term must be positive")
        if interest_rate < 0:
            raise ValueError("interest rate cannot be negative")
        if interest_rate == 0:
            return loan_amount / loan_term
        return -pmt(interest_rate / 100 / 12, loan_term * 12, loan_amount) * 12

    @staticmethod
    def cap_rate(noi: float, purchase_price: float) -> float:
        if purchase_price <= 0:
            raise ValueError("purchase price must be positive")
        return noi / purchase_price * 100

    @staticmethod
    def cash_on_cash(annual_cash_flow: float, total_investment: float) -> float:
        if total_investment <= 0:
            raise ValueError("total investment must be positive")
        return annual_cash_flow / total_investment * 100

    @staticmethod
    def dscr(noi: float, annual_debt_service: float) -> float:
        if annual_debt_service <= 0:
            raise ValueError("annual debt service must be positive")
        return noi / annual_debt_service

    @staticmethod
    def ltv(loan_amount: float, purchase_price: float) -> float:
        if purchase_price <= 0:
            raise ValueError("purchase price must be positive")
        return loan_amount / purchase_price * 100

    @staticmethod
    def debt_yield(noi: float, loan_amount: float) -> float:
        if loan_amount <= 0:
            raise ValueError("loan amount must be positive")
        return noi / loan_amount * 100

    @staticmethod
    def price_per_sf(purchase_price: float, square_footage: float) -> float:
        if square_footage <= 0:
            raise ValueError("square footage must be positive")
        return purchase_price / square_footage

    @staticmethod
    def price_per_unit(purchase_price: float, units: float) -> float:
        if units <= 0:
            raise ValueError("number of units must be positive")
        return purchase_price / units

    @staticmethod
    def grm(purchase_price: float, gross_income: float) -> float:
        """Gross rent multiplier: years of gross income the price represents."""
        if gross_income <= 0:
            raise ValueError("gross income must be positive")
        return purchase_price / gross_income

    @staticmethod
    def egi(gross_income: float, occupancy: float) -> float:
        """Effective gross income at ``occupancy`` percent."""
        return gross_income * occupancy / 100

    @staticmethod
    def effective_rent_psf(average_rent_psf: float, operating_expenses: float, square_footage: float) -> float:
        if square_footage <= 0:
            raise ValueError("square footage must be positive")
        return average_rent_psf - operating_expenses / square_footage

    @staticmethod
    def occupancy_cost_ratio(operating_expenses: float, gross_income: float) -> float:
        if gross_income <= 0:
            raise ValueError("gross income must be positive")
        return operating_expenses / gross_income * 100

    @staticmethod
    def breakeven(operating_expenses: float, annual_debt_service: float, gross_income: float) -> float:
        """Breakeven occupancy: share of gross income consumed by expenses and debt."""
        if gross_income <= 0:
            raise ValueError("gross income must be positive")
        return (operating_expenses + annual_debt_service) / gross_income * 100

    @staticmethod
    def appreciation(current_noi: float, projected_noi: float, exit_cap_rate: float) -> float:
        """Value created by NOI growth, capitalized at ``exit_cap_rate`` (decimal)."""
        if exit_cap_rate <= 0:
            raise ValueError("exit cap rate must be positive")
        return (projected_noi - current_noi) / exit_cap_rate

    @staticmethod
    def irr_approximation(
        total_investment: float,
        annual_cash_flow: float,
        appreciation: float,
        holding_period: float,
        floor: float = 0.0,
        cap: float = 50.0,
    ) -> Optional[float]:
        """
        Annualized return of cash flows plus appreciation over the hold.

        Not a discounted cash flow IRR: the cash flows and the appreciation
        are summed and the total multiple is annualized. The result is
        clamped to ``[floor, cap]``.

        Returns:
            IRR in percent, or None when the total return is not positive
        """
        if total_investment <= 0:
            raise ValueError("total investment must be positive")
        if holding_period <= 0:
            raise ValueError("holding period must be positive")
        total_return = total_investment + annual_cash_flow * holding_period + appreciation
        if total_return <= 0:
            return None
        irr = ((total_return / total_investment) ** (1 / holding_period) - 1) * 100
        return max(floor, min(cap, irr))

    @staticmethod
    def net_present_value(
        total_investment: float,
        annual_cash_flow: float,
        reversion_value: float,
        holding_period: int,
        discount_rate: float,
    ) -> float:
        """
        NPV of a level annual cash flow with a sale at the end of the hold.

        Args:
            total_investment: Equity paid at time zero
            annual_cash_flow: Cash flow received at the end of each year
            reversion_value: Sale value received with the final year's cash flow
            holding_period: Whole years held
            discount_rate: Annual discount rate in percent
        """
        if holding_period < 1:
            raise ValueError("holding period must be at least one year")
        flows: List[float] = [-total_investment] + [annual_cash_flow] * holding_period
        flows[-1] += reversion_value
        return npv(discount_rate / 100, flows)


# --- Requirements -------------------------------------------------------------


class Requirement(NamedTuple):
    """
    One input a metric needs, with the label used in error messages.

    ``attribute`` names the ``PropertyData`` field or property the check
    reads, when there is a single one.
    """

    label: str
    check: Callable[[PropertyData], bool]
    attribute: Optional[str] = None


def _field(name: str, label: str) -> Requirement:
    # Zero is a value; only None, blanks and empty collections are missing
    return Requirement(label, lambda data: data.has(name), name)


_NOI = _field("current_noi", "Current NOI")
_PROJECTED_NOI = _field("projected_noi", "Projected NOI")
_PRICE = _field("purchase_price", "Purchase Price")
_INVESTMENT = _field("total_investment", "Total Investment")
_CASH_FLOW = _field("annual_cash_flow", "Annual Cash Flow")
_LOAN = _field("loan_amount", "Loan Amount")
_RATE = _field("interest_rate", "Interest Rate")
_TERM = _field("loan_term", "Loan Term")
_OPEX = _field("operating_expenses", "Operating Expenses")
_GROSS = _field("gross_income", "Gross Income")
_AREA = Requirement(
    "Square Footage (any of: squareFootage, totalSF, grossLeasableArea, "
    "rentableSquareFeet or totalSquareFootage)",
    lambda data: bool(data.area),
    "area",
)
_UNITS = Requirement("Number of Units", lambda data: bool(data.unit_count), "unit_count")

METRIC_REQUIREMENTS: Dict[MetricName, Tuple[Requirement, ...]] = {
    MetricName.CAP_RATE: (_NOI, _PRICE),
    MetricName.CASH_ON_CASH: (_CASH_FLOW, _INVESTMENT),
    MetricName.DSCR: (_NOI, _LOAN, _RATE, _TERM),
    MetricName.LTV: (_LOAN, _PRICE),
    MetricName.IRR: (_CASH_FLOW, _INVESTMENT, _PROJECTED_NOI, _NOI),
    MetricName.ROI: (
        _INVESTMENT,
        Requirement(
            "Current and Projected NOI (or Annual Cash Flow)",
            lambda data: data.current_noi is not None and data.projected_noi is not None
            or data.annual_cash_flow is not None,
        ),
    ),
    MetricName.BREAKEVEN: (_OPEX, _GROSS, _LOAN, _RATE, _TERM),
    MetricName.NPV: (_INVESTMENT, _CASH_FLOW, _PROJECTED_NOI),
    MetricName.DEBT_YIELD: (_NOI, _LOAN),
    MetricName.PRICE_PER_SF: (_PRICE, _AREA),
    MetricName.GRM: (_PRICE, _GROSS),
    MetricName.PRICE_PER_UNIT: (_PRICE, _UNITS),
    MetricName.EGI: (_GROSS, Requirement("Occupancy Rate", lambda data: data.occupancy is not None, "occupancy")),
    MetricName.EFFECTIVE_RENT_PSF: (
        _field("average_rent_psf", "Average Rent per SF"),
        _OPEX,
        _AREA,
    ),
    MetricName.OCCUPANCY_COST_RATIO: (_OPEX, _GROSS),
    MetricName.WALT: (
        _PRICE,
        _NOI,
        _field("office_tenants", "Office Tenants (at least one tenant with lease expiration date)"),
    ),
    MetricName.SALES_PER_SF: (
        _field("retail_tenants", "Retail Tenants (at least one tenant with sales data)"),
    ),
    MetricName.CLEAR_HEIGHT_ANALYSIS: (
        Requirement("Square Footage", lambda data: bool(data.area), "area"),
        _PRICE,
        _field("clear_height", "Clear Height"),
    ),
    MetricName.INDUSTRIAL_METRICS: (
        Requirement("Square Footage", lambda data: bool(data.area), "area"),
        _PRICE,
        _field("clear_height", "Clear Height"),
    ),
    MetricName.REVENUE_PER_UNIT: (_UNITS, _field("monthly_rental_income", "Monthly Rental Income")),
    MetricName.MULTIFAMILY_METRICS: (_UNITS, _field("monthly_rental_income", "Monthly Rental Income")),
}

METRIC_LABELS: Dict[MetricName, str] = {
    MetricName.CAP_RATE: "Cap Rate",
    MetricName.CASH_ON_CASH: "Cash-on-Cash Return",
    MetricName.DSCR: "DSCR",
    MetricName.LTV: "LTV",
    MetricName.IRR: "IRR",
    MetricName.ROI: "ROI",
    MetricName.BREAKEVEN: "Breakeven",
    MetricName.NPV: "NPV",
    MetricName.DEBT_YIELD: "Debt Yield",
    MetricName.PRICE_PER_SF: "Price per SF",
    MetricName.GRM: "GRM",
    MetricName.PRICE_PER_UNIT: "Price per Unit",
    MetricName.EGI: "EGI",
    MetricName.EFFECTIVE_RENT_PSF: "Effective Rent per SF",
    MetricName.OCCUPANCY_COST_RATIO: "Occupancy Cost Ratio",
    MetricName.WALT: "WALT",
    MetricName.SALES_PER_SF: "Sales per SF",
    MetricName.CLEAR_HEIGHT_ANALYSIS: "Clear Height Analysis",
    MetricName.INDUSTRIAL_METRICS: "Industrial Metrics",
    MetricName.REVENUE_PER_UNIT: "Revenue per Unit",
    MetricName.MULTIFAMILY_METRICS: "Multifamily Metrics",
}

METRIC_KINDS: Dict[MetricName, MetricKind] = {
    MetricName.CAP_RATE: MetricKind.PERCENTAGE,
    MetricName.CASH_ON_CASH: MetricKind.PERCENTAGE,
    MetricName.DSCR: MetricKind.RATIO,
    MetricName.LTV: MetricKind.PERCENTAGE,
    MetricName.IRR: MetricKind.PERCENTAGE,
    MetricName.ROI: MetricKind.PERCENTAGE,
    MetricName.BREAKEVEN: MetricKind.PERCENTAGE,
    MetricName.NPV: MetricKind.CURRENCY,
    MetricName.DEBT_YIELD: MetricKind.PERCENTAGE,
    MetricName.PRICE_PER_SF: MetricKind.CURRENCY,
    MetricName.GRM: MetricKind.RATIO,
    MetricName.PRICE_PER_UNIT: MetricKind.CURRENCY,
    MetricName.EGI: MetricKind.CURRENCY,
    MetricName.EFFECTIVE_RENT_PSF: MetricKind.CURRENCY,
    MetricName.OCCUPANCY_COST_RATIO: MetricKind.PERCENTAGE,
    MetricName.WALT: MetricKind.YEARS,
    MetricName.REVENUE_PER_UNIT: MetricKind.CURRENCY,
}


def has_required_data(metric: MetricName | str, data: PropertyData) -> bool:
    """True when every input ``metric`` needs is present on ``data``."""
    requirements = METRIC_REQUIREMENTS.get(MetricName(metric))
    if requirements is None:
        return False
    return all(req.check(data) for req in requirements)


def get_metric_validation_error(metric: MetricName | str, data: PropertyData) -> Optional[str]:
    """
    Message naming the inputs ``metric`` is missing, or None when it has them.

    Example: ``"Cap Rate calculation requires: Current NOI, Purchase Price"``.
    """
    metric = MetricName(metric)
    requirements = METRIC_REQUIREMENTS.get(metric)
    if requirements is None:
        return f"{metric.camel} calculation requires additional data fields that are not available"
    missing = [req.label for req in requirements if not req.check(data)]
    if not missing:
        return None
    return f"{METRIC_LABELS[metric]} calculation requires: {', '.join(missing)}"


def format_metric_value(value: Optional[float], kind: MetricKind | str) -> str:
    """Render a metric for display: ``7.00%``, ``$1,000,000``, ``1.25``; None is ``N/A``."""
    if value is None:
        return "N/A"
    kind = MetricKind(kind)
    if kind == MetricKind.PERCENTAGE:
        return f"{value:.2f}%"
    if kind == MetricKind.CURRENCY:
        sign = "-" if value < 0 else ""
        return f"{sign}${abs(value):,.0f}"
    if kind == MetricKind.RATIO:
        return f"{value:.2f}"
    if kind == MetricKind.YEARS:
        return f"{value:.1f} years"
    return str(value)


# --- Metric calculators -------------------------------------------------------

MetricCalculator = Callable[[PropertyData, GlobalSettings], Any]

METRIC_CALCULATORS: Dict[MetricName, MetricCalculator] = {}


def register_metric(name: MetricName) -> Callable[[MetricCalculator], MetricCalculator]:
    """Decorator registering the calculator of a metric."""

    def decorator(fn: MetricCalculator) -> MetricCalculator:
        if name in METRIC_CALCULATORS:
            raise ValueError(f"Calculator for {name.value} is already registered.")
        METRIC_CALCULATORS[name] = fn
        return fn

    return decorator


def annual_debt_service(data: PropertyData) -> Optional[float]:
    """
    Annual debt service of the record's loan.

    None without loan, rate or term, or when the term is not positive or the
    rate is negative. A zero loan services to zero.
    """
    if data.loan_amount is None or data.interest_rate is None or data.loan_term is None:
        return None
    if data.loan_term <= 0 or data.interest_rate < 0:
        return None
    return finite_or_none(
        PropertyMetrics.annual_debt_service(data.loan_amount, data.interest_rate, data.loan_term)
    )


def _holding_period(data: PropertyData, settings: GlobalSettings) -> float:
    return data.holding_period or settings.calculation.default_holding_period


@register_metric(MetricName.CAP_RATE)
def _cap_rate(data: PropertyData, settings: GlobalSettings) -> Optional[float]:
    return PropertyMetrics.cap_rate(data.current_noi, data.purchase_price)


@register_metric(MetricName.CASH_ON_CASH)
def _cash_on_cash(data: PropertyData, settings: GlobalSettings) -> Optional[float]:
    return PropertyMetrics.cash_on_cash(data.annual_cash_flow, data.total_investment)


@register_metric(MetricName.DSCR)
def _dscr(data: PropertyData, settings: GlobalSettings) -> Optional[float]:
    debt_service = annual_debt_service(data)
    if not debt_service:
        logger.debug("DSCR skipped: no annual debt service")
        return None
    return PropertyMetrics.dscr(data.current_noi, debt_service)


@register_metric(MetricName.LTV)
def _ltv(data: PropertyData, settings: GlobalSettings) -> Optional[float]:
    return PropertyMetrics.ltv(data.loan_amount, data.purchase_price)


@register_metric(MetricName.DEBT_YIELD)
def _debt_yield(data: PropertyData, settings: GlobalSettings) -> Optional[float]:
    return PropertyMetrics.debt_yield(data.current_noi, data.loan_amount)


@register_metric(MetricName.IRR)
def _irr(data: PropertyData, settings: GlobalSettings) -> Optional[float]:
    if data.current_noi <= 0 or data.total_investment <= 0:
        logger.debug("IRR skipped: current NOI and total investment must be positive")
        return None
    calc = settings.calculation
    appreciation = PropertyMetrics.appreciation(data.current_noi, data.projected_noi, calc.exit_cap_rate)
    return PropertyMetrics.irr_approximation(
        data.total_investment,
        data.annual_cash_flow,
        appreciation,
        _holding_period(data, settings),
        floor=calc.irr_floor,
        cap=calc.irr_cap,
    )


@register_metric(MetricName.ROI)
def _roi(data: PropertyData, settings: GlobalSettings) -> Optional[float]:
    if data.current_noi is not None and data.projected_noi is not None:
        appreciation = PropertyMetrics.appreciation(
            data.current_noi, data.projected_noi, settings.calculation.exit_cap_rate
        )
        annual_gain = appreciation / _holding_period(data, settings)
        return PropertyMetrics.cash_on_cash(annual_gain, data.total_investment)
    # Without an NOI projection ROI falls back to the cash yield
    return PropertyMetrics.cash_on_cash(data.annual_cash_flow, data.total_investment)


@register_metric(MetricName.BREAKEVEN)
def _breakeven(data: PropertyData, settings: GlobalSettings) -> Optional[float]:
    debt_service = annual_debt_service(data)
    if debt_service is None:
        return None
    return PropertyMetrics.breakeven(data.operating_expenses, debt_service, data.gross_income)


@register_metric(MetricName.NPV)
def _npv(data: PropertyData, settings: GlobalSettings) -> Optional[float]:
    calc = settings.calculation
    hold = max(1, int(round(_holding_period(data, settings))))
    discount_rate = data.discount_rate if data.discount_rate is not None else calc.default_discount_rate
    return PropertyMetrics.net_present_value(
        data.total_investment,
        data.annual_cash_flow,
        data.projected_noi / calc.exit_cap_rate,
        hold,
        discount_rate,
    )


@register_metric(MetricName.PRICE_PER_SF)
def _price_per_sf(data: PropertyData, settings: GlobalSettings) -> Optional[float]:
    return PropertyMetrics.price_per_sf(data.purchase_price, data.area)


@register_metric(MetricName.GRM)
def _grm(data: PropertyData, settings: GlobalSettings) -> Optional[float]:
    return PropertyMetrics.grm(data.purchase_price, data.gross_income)


@register_metric(MetricName.PRICE_PER_UNIT)
def _price_per_unit(data: PropertyData, settings: GlobalSettings) -> Optional[float]:
    return PropertyMetrics.price_per_unit(data.purchase_price, data.unit_count)


@register_metric(MetricName.EGI)
def _egi(data: PropertyData, settings: GlobalSettings) -> Optional[float]:
    return PropertyMetrics.egi(data.gross_income, data.occupancy)


@register_metric(MetricName.EFFECTIVE_RENT_PSF)
def _effective_rent_psf(data: PropertyData, settings: GlobalSettings) -> Optional[float]:
    return PropertyMetrics.effective_rent_psf(data.average_rent_psf, data.operating_expenses, data.area)


@register_metric(MetricName.OCCUPANCY_COST_RATIO)
def _occupancy_cost_ratio(data: PropertyData, settings: GlobalSettings) -> Optional[float]:
    return PropertyMetrics.occupancy_cost_ratio(data.operating_expenses, data.gross_income)


@register_metric(MetricName.WALT)
def _walt(data: PropertyData, settings: GlobalSettings) -> Optional[float]:
    return calculate_walt(data.office_tenants, settings.analysis_date)


@register_metric(MetricName.SALES_PER_SF)
def _sales_per_sf(data: PropertyData, settings: GlobalSettings):
    return calculate_sales_per_sf(data.retail_tenants)


@register_metric(MetricName.CLEAR_HEIGHT_ANALYSIS)
@register_metric(MetricName.INDUSTRIAL_METRICS)
def _industrial_metrics(data: PropertyData, settings: GlobalSettings):
    return calculate_industrial_metrics(data.area, data.clear_height, data.purchase_price)


@register_metric(MetricName.REVENUE_PER_UNIT)
def _revenue_per_unit(data: PropertyData, settings: GlobalSettings) -> Optional[float]:
    return data.monthly_rental_income / data.unit_count


@register_metric(MetricName.MULTIFAMILY_METRICS)
def _multifamily_metrics(data: PropertyData, settings: GlobalSettings):
    return calculate_multifamily_metrics(
        data.unit_count, data.monthly_rental_income, data.market_average_rent
    )


def calculate_metric(
    metric: MetricName | str, data: PropertyData, settings: Optional[GlobalSettings] = None
) -> Any:
    """
    Compute one metric from ``data``.

    Returns None when the metric's inputs are missing or the formula result is
    not finite. A ``ValueError`` from a strict formula (for example a negative
    purchase price) propagates to the caller.

    Raises:
        KeyError: When ``metric`` has no calculator (the asset analyzer
            switches run through ``dealscope.asset.registry``)
    """
    metric = MetricName(metric)
    settings = settings or GlobalSettings()
    calculator = METRIC_CALCULATORS[metric]
    if not has_required_data(metric, data):
        logger.debug("%s skipped: missing inputs", metric.value)
        return None
    value = calculator(data, settings)
    if isinstance(value, float) or isinstance(value, int):
        if not math.isfinite(value):
            logger.debug("%s skipped: non-finite result", metric.value)
            return None
        return float(value)
    return value


def supported_metrics() -> Sequence[MetricName]:
    """Metrics with a formula calculator, in declaration order."""
    return [name for name in MetricName if name in METRIC_CALCULATORS]
