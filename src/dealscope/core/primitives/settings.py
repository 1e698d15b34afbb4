# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import date

from pydantic import Field, model_validator

from .model import Model
from .types import FloatBetween0And1, PositiveFloat, PositiveInt


class SanityThresholds(Model):
    """
    Bounds used to sanity-check calculated metrics.

    Values outside an ``*_error_*`` bound are reported as hard errors;
    values outside a ``*_warn_*`` bound are reported as soft warnings.
    These are policy constants, not business rules, and can be tuned per
    market or per investor.
    """

    cap_rate_error_max: float = Field(default=50.0, description="Cap rate above this is unrealistic (%).")
    cap_rate_warn_min: float = Field(default=1.0, description="Cap rate below this is unusual (%).")
    cap_rate_warn_max: float = Field(default=20.0, description="Cap rate above this is unusual (%).")
    cash_on_cash_error_min: float = Field(default=-50.0, description="Cash-on-cash below this is unrealistic (%).")
    cash_on_cash_warn_max: float = Field(default=100.0, description="Cash-on-cash above this is unusual (%).")
    dscr_warn_min: float = Field(default=1.0, description="DSCR below this signals cash flow stress.")
    dscr_warn_max: float = Field(default=10.0, description="DSCR above this is unusual.")
    ltv_error_max: float = Field(default=100.0, description="LTV may not exceed this (%).")
    ltv_warn_max: float = Field(default=90.0, description="LTV above this is very high (%).")
    price_per_sf_warn_max: float = Field(default=1000.0, description="Price per SF above this is unusual ($).")
    grm_warn_min: float = Field(default=5.0, description="GRM below this is unusual.")
    grm_warn_max: float = Field(default=30.0, description="GRM above this is unusual.")

    # Pre-calculation input warnings
    input_cap_rate_warn_min: float = Field(default=2.0, description="Input-implied cap rate below this is flagged (%).")
    input_cap_rate_warn_max: float = Field(default=15.0, description="Input-implied cap rate above this is flagged (%).")
    min_equity_share: FloatBetween0And1 = Field(
        default=0.10,
        description="Total investment below this share of the purchase price is flagged.",
    )


class MetricThreshold(Model):
    """Strong/moderate cut-offs for one metric."""

    strong: float
    moderate: float
    higher_is_better: bool = True


class AssessmentThresholds(Model):
    """Cut-offs used to grade a deal's metrics."""

    cap_rate: MetricThreshold = MetricThreshold(strong=8.0, moderate=6.0)
    cash_on_cash: MetricThreshold = MetricThreshold(strong=8.0, moderate=6.0)
    dscr: MetricThreshold = MetricThreshold(strong=1.25, moderate=1.1)
    irr: MetricThreshold = MetricThreshold(strong=12.0, moderate=8.0)
    roi: MetricThreshold = MetricThreshold(strong=12.0, moderate=8.0)
    breakeven: MetricThreshold = MetricThreshold(strong=85.0, moderate=90.0, higher_is_better=False)


class CalculationSettings(Model):
    """
    Assumptions behind the approximated return metrics.

    IRR and ROI are simplified annualized approximations rather than
    discounted cash flow solutions; these settings make their assumptions
    explicit.
    """

    exit_cap_rate: PositiveFloat = Field(
        default=0.08,
        description="Cap rate (decimal) used to capitalize NOI growth into appreciation.",
    )
    default_holding_period: PositiveInt = Field(
        default=5, ge=1, description="Hold period in years when the record has none."
    )
    default_discount_rate: PositiveFloat = Field(
        default=10.0, description="Discount rate (%) for NPV when the record has none."
    )
    irr_floor: float = Field(default=0.0, description="Lower clamp of the IRR approximation (%).")
    irr_cap: float = Field(default=50.0, description="Upper clamp of the IRR approximation (%).")

    @model_validator(mode="after")
    def check_irr_bounds(self) -> "CalculationSettings":
        if self.irr_floor > self.irr_cap:
            raise ValueError("irr_floor must not exceed irr_cap")
        return self


class GlobalSettings(Model):
    """Container for all analysis-wide settings."""

    analysis_date: date = Field(
        default_factory=date.today,
        description="Date lease terms and sales periods are measured from.",
    )
    calculation: CalculationSettings = Field(default_factory=CalculationSettings)
    sanity: SanityThresholds = Field(default_factory=SanityThresholds)
    assessment: AssessmentThresholds = Field(default_factory=AssessmentThresholds)
