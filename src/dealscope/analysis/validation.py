# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Input and Result Validation

Three layers of checks around a calculation:

- ``validate_property_data``: range and cross-field checks on the record
- ``validate_metric_requirements`` / ``validate_metric_calculation``: what a
  single metric needs, with warnings for suspicious implied values
- ``validate_calculation_results``: sanity bounds on calculated metrics,
  split into hard errors and soft warnings by ``SanityThresholds``

None of these raise for bad input; problems come back as message lists.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from pydantic import Field

from ..asset.property import PropertyData
from ..core.primitives import (
    FieldKind,
    MetricName,
    Model,
    SanityThresholds,
    is_valid_number,
)
from ..valuation import METRIC_LABELS, METRIC_REQUIREMENTS
from .packages import FIELD_METADATA, field_label, get_package

logger = logging.getLogger(__name__)


class ValidationResult(Model):
    """Outcome of a validation pass."""

    is_valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class SafeCalculation(Model):
    """Outcome of one isolated metric computation."""

    success: bool
    result: Any = None
    error: Optional[str] = None


# --- Record checks --------------------------------------------------------------


def validate_property_data(
    data: PropertyData, thresholds: Optional[SanityThresholds] = None
) -> List[str]:
    """
    Range and cross-field checks on a property record.

    Only provided values are checked; absence is the business of the package
    and metric checks.

    Returns:
        Error messages, empty when the record is acceptable
    """
    thresholds = thresholds or SanityThresholds()
    errors: List[str] = []

    if not data.property_type:
        errors.append("Property type is required")

    if data.purchase_price is not None and data.purchase_price <= 0:
        errors.append("Purchase price must be greater than 0")
    if data.current_noi is not None and data.current_noi < 0:
        errors.append("Current NOI cannot be negative")
    if data.total_investment is not None and data.total_investment <= 0:
        errors.append("Total investment must be greater than 0")
    if data.loan_amount is not None and data.loan_amount < 0:
        errors.append("Loan amount cannot be negative")
    if data.interest_rate is not None and not 0 <= data.interest_rate <= 100:
        errors.append("Interest rate must be between 0 and 100")
    if data.loan_term is not None and data.loan_term <= 0:
        errors.append("Loan term must be greater than 0")

    if data.square_footage is not None and data.square_footage <= 0:
        errors.append("Square footage must be greater than 0")
    if data.number_of_units is not None and data.number_of_units <= 0:
        errors.append("Number of units must be greater than 0")
    if data.occupancy_rate is not None and not 0 <= data.occupancy_rate <= 100:
        errors.append("Occupancy rate must be between 0 and 100")

    # Cross-field
    if data.loan_amount and data.purchase_price and data.loan_amount > data.purchase_price:
        errors.append("Loan amount cannot exceed purchase price")
    if (
        data.total_investment
        and data.purchase_price
        and data.total_investment < data.purchase_price * thresholds.min_equity_share
    ):
        share = round(thresholds.min_equity_share * 100)
        errors.append(f"Total investment seems too low (less than {share}% of purchase price)")

    return errors


# --- Metric checks --------------------------------------------------------------

# Metrics whose inputs are checked before a package runs. Their inputs and
# labels come from METRIC_REQUIREMENTS.
_CHECKED_METRICS = (
    MetricName.CAP_RATE,
    MetricName.CASH_ON_CASH,
    MetricName.DSCR,
    MetricName.LTV,
    MetricName.PRICE_PER_SF,
    MetricName.GRM,
)

# Inputs that must be strictly positive once provided. NOI may be zero and
# cash flow may be negative.
_MUST_BE_POSITIVE = {
    "purchase_price",
    "total_investment",
    "loan_amount",
    "loan_term",
    "area",
    "gross_income",
}
_NON_NEGATIVE = {"current_noi"}


def validate_metric_requirements(metric: MetricName | str, data: PropertyData) -> List[str]:
    """
    Input errors that would stop ``metric`` from being calculated.

    Metrics without a dedicated check return no errors; their inputs are
    explained by the metric layer when the calculation comes back empty.
    """
    metric = MetricName(metric)
    if metric not in _CHECKED_METRICS:
        return []

    name = METRIC_LABELS[metric]
    requirements = METRIC_REQUIREMENTS[metric]
    errors = [
        f"{req.label} is required for {name} calculation"
        for req in requirements
        if not req.check(data)
    ]
    for req in requirements:
        if not req.check(data):
            continue
        value = getattr(data, req.attribute)
        if req.attribute in _MUST_BE_POSITIVE and value <= 0:
            errors.append(f"{req.label} must be positive")
        elif req.attribute in _NON_NEGATIVE and value < 0:
            errors.append(f"{req.label} cannot be negative")

    rate = data.interest_rate
    if metric == MetricName.DSCR and rate is not None and not 0 <= rate <= 100:
        errors.append("Interest Rate must be between 0 and 100")
    if (
        metric == MetricName.LTV
        and data.loan_amount
        and data.purchase_price
        and data.loan_amount > data.purchase_price
    ):
        errors.append("Loan Amount cannot exceed Purchase Price")
    return errors


def validate_metric_calculation(
    metric: MetricName | str,
    data: PropertyData,
    thresholds: Optional[SanityThresholds] = None,
) -> ValidationResult:
    """Requirement errors for ``metric`` plus warnings on the input-implied value."""
    thresholds = thresholds or SanityThresholds()
    metric = MetricName(metric)
    errors = validate_metric_requirements(metric, data)
    warnings: List[str] = []

    if metric == MetricName.CAP_RATE and data.current_noi is not None and data.purchase_price:
        cap_rate = data.current_noi / data.purchase_price * 100
        if cap_rate < thresholds.input_cap_rate_warn_min:
            warnings.append(
                f"Cap rate is unusually low (below {thresholds.input_cap_rate_warn_min:g}%)"
            )
        elif cap_rate > thresholds.input_cap_rate_warn_max:
            warnings.append(
                f"Cap rate is unusually high (above {thresholds.input_cap_rate_warn_max:g}%)"
            )

    if metric == MetricName.LTV and data.loan_amount and data.purchase_price:
        ltv = data.loan_amount / data.purchase_price * 100
        if ltv > thresholds.ltv_warn_max:
            warnings.append(f"LTV is very high (above {thresholds.ltv_warn_max:g}%)")

    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def batch_validate_metrics(
    metrics: Sequence[MetricName | str],
    data: PropertyData,
    thresholds: Optional[SanityThresholds] = None,
) -> Dict[MetricName, ValidationResult]:
    """``validate_metric_calculation`` for each of ``metrics``."""
    return {
        MetricName(metric): validate_metric_calculation(metric, data, thresholds)
        for metric in metrics
    }


# --- Package checks -------------------------------------------------------------


def validate_data_for_package(
    package_id: str,
    data: PropertyData,
    thresholds: Optional[SanityThresholds] = None,
) -> ValidationResult:
    """
    Check that ``data`` can run the package ``package_id``.

    Combines the record checks, the package's required fields and the checks
    of every metric the package includes.
    """
    try:
        package = get_package(package_id, data.property_type)
    except (KeyError, ValueError):
        property_type = data.property_type.value if data.property_type else None
        return ValidationResult(
            is_valid=False,
            errors=[f"Package {package_id} not found for property type {property_type}"],
        )

    errors = validate_property_data(data, thresholds)
    warnings: List[str] = []

    for field in package.required_fields:
        value = getattr(data, field)
        label = field_label(field)
        metadata = FIELD_METADATA.get(field)
        kind = metadata.kind if metadata else FieldKind.NUMBER
        if not value:
            errors.append(f"{label} is required for {package.name}")
        elif kind in (FieldKind.NUMBER, FieldKind.PERCENTAGE) and isinstance(value, float):
            if not is_valid_number(value):
                errors.append(f"{label} must be a valid number")
        elif kind == FieldKind.CURRENCY and isinstance(value, float):
            if not is_valid_number(value):
                errors.append(f"{label} must be a valid number")
            elif value <= 0:
                errors.append(f"{label} must be greater than 0")

    for metric in package.included_metrics:
        metric_validation = validate_metric_calculation(metric, data, thresholds)
        errors.extend(metric_validation.errors)
        warnings.extend(metric_validation.warnings)

    if errors:
        logger.debug("Package %s rejected %d input problem(s)", package_id, len(errors))
    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


# --- Result checks --------------------------------------------------------------


def _value(metrics: Any, metric: MetricName) -> Optional[float]:
    if isinstance(metrics, Mapping):
        value = metrics.get(metric, metrics.get(metric.value, metrics.get(metric.camel)))
    else:
        value = getattr(metrics, metric.value, None)
    return value if is_valid_number(value) else None


def validate_calculation_results(
    metrics: Any, thresholds: Optional[SanityThresholds] = None
) -> ValidationResult:
    """
    Sanity-check calculated metrics.

    Args:
        metrics: ``CalculatedMetrics`` or a mapping keyed by ``MetricName``,
            snake_case or camelCase name
        thresholds: Bounds; defaults to ``SanityThresholds()``

    Returns:
        Hard errors for impossible values, warnings for unusual ones. At most
        one message per metric.
    """
    t = thresholds or SanityThresholds()
    errors: List[str] = []
    warnings: List[str] = []

    cap_rate = _value(metrics, MetricName.CAP_RATE)
    if cap_rate is not None:
        if cap_rate < 0:
            errors.append("Cap Rate cannot be negative")
        elif cap_rate > t.cap_rate_error_max:
            errors.append(f"Cap Rate is unrealistically high (>{t.cap_rate_error_max:g}%)")
        elif cap_rate < t.cap_rate_warn_min:
            warnings.append(f"Cap Rate is unusually low (<{t.cap_rate_warn_min:g}%)")
        elif cap_rate > t.cap_rate_warn_max:
            warnings.append(f"Cap Rate is unusually high (>{t.cap_rate_warn_max:g}%)")

    cash_on_cash = _value(metrics, MetricName.CASH_ON_CASH)
    if cash_on_cash is not None:
        if cash_on_cash < t.cash_on_cash_error_min:
            errors.append("Cash-on-Cash Return is unrealistically negative")
        elif cash_on_cash > t.cash_on_cash_warn_max:
            warnings.append(f"Cash-on-Cash Return is unusually high (>{t.cash_on_cash_warn_max:g}%)")
        elif cash_on_cash < 0:
            warnings.append("Cash-on-Cash Return is negative")

    dscr = _value(metrics, MetricName.DSCR)
    if dscr is not None:
        if dscr < 0:
            errors.append("DSCR cannot be negative")
        elif dscr < t.dscr_warn_min:
            warnings.append(
                f"DSCR is below {t.dscr_warn_min:.1f}, indicating potential cash flow issues"
            )
        elif dscr > t.dscr_warn_max:
            warnings.append(f"DSCR is unusually high (>{t.dscr_warn_max:g})")

    ltv = _value(metrics, MetricName.LTV)
    if ltv is not None:
        if ltv < 0:
            errors.append("LTV cannot be negative")
        elif ltv > t.ltv_error_max:
            errors.append(f"LTV cannot exceed {t.ltv_error_max:g}%")
        elif ltv > t.ltv_warn_max:
            warnings.append(f"LTV is very high (>{t.ltv_warn_max:g}%)")

    price_per_sf = _value(metrics, MetricName.PRICE_PER_SF)
    if price_per_sf is not None:
        if price_per_sf <= 0:
            errors.append("Price per SF must be positive")
        elif price_per_sf > t.price_per_sf_warn_max:
            warnings.append(f"Price per SF is unusually high (>${t.price_per_sf_warn_max:,.0f}/SF)")

    grm = _value(metrics, MetricName.GRM)
    if grm is not None:
        if grm <= 0:
            errors.append("GRM must be positive")
        elif grm > t.grm_warn_max:
            warnings.append(f"GRM is unusually high (>{t.grm_warn_max:g})")
        elif grm < t.grm_warn_min:
            warnings.append(f"GRM is unusually low (<{t.grm_warn_min:g})")

    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


# --- Isolation ------------------------------------------------------------------


def safe_calculate_metric(
    metric_name: str,
    fn: Callable[[PropertyData], Any],
    data: PropertyData,
) -> SafeCalculation:
    """
    Run one metric computation, converting failures into an error message.

    A float result that is not finite counts as a failure. Exceptions raised
    by ``fn`` are logged and reported by their message.
    """
    try:
        result = fn(data)
    except (ArithmeticError, ValueError, TypeError, KeyError, AttributeError) as e:
        logger.warning("Error calculating %s: %s", metric_name, e)
        return SafeCalculation(success=False, error=str(e) or f"Unknown error calculating {metric_name}")

    if isinstance(result, float) and not is_valid_number(result):
        return SafeCalculation(
            success=False,
            error=f"{metric_name} calculation resulted in invalid number: {result}",
        )
    return SafeCalculation(success=True, result=result)
