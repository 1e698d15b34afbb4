# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit Tests for Core Primitives

Tests alias generation, enum lookups, numeric guards and settings.
"""

import math

import pytest
from pydantic import ValidationError

from dealscope.core.primitives import (
    CalculationSettings,
    CreditRating,
    MetricName,
    PropertyTypeEnum,
    SanityThresholds,
    finite_or_none,
    is_present,
    is_valid_number,
    is_valid_percentage,
    safe_to_number,
    to_camel_alias,
)


class TestCamelAlias:
    """Test suite for the camelCase alias generator."""

    def test_plain_names(self):
        assert to_camel_alias("purchase_price") == "purchasePrice"
        assert to_camel_alias("loan_term") == "loanTerm"
        assert to_camel_alias("dscr") == "dscr"

    def test_acronyms_stay_uppercase(self):
        """NOI, SF and PSF keep the capitalization the form uses."""
        assert to_camel_alias("current_noi") == "currentNOI"
        assert to_camel_alias("price_per_sf") == "pricePerSF"
        assert to_camel_alias("average_rent_psf") == "averageRentPSF"
        assert to_camel_alias("total_sf") == "totalSF"


class TestMetricName:
    """Test suite for MetricName lookups."""

    def test_snake_case_lookup(self):
        assert MetricName("cap_rate") is MetricName.CAP_RATE

    def test_camel_case_lookup(self):
        assert MetricName("capRate") is MetricName.CAP_RATE
        assert MetricName("cashOnCash") is MetricName.CASH_ON_CASH
        assert MetricName("tenantFinancialHealth") is MetricName.TENANT_FINANCIAL_HEALTH

    def test_form_synonyms(self):
        assert MetricName("simpleWalt") is MetricName.WALT
        assert MetricName("pricePerSF") is MetricName.PRICE_PER_SF

    def test_camel_property(self):
        assert MetricName.CASH_ON_CASH.camel == "cashOnCash"
        assert MetricName.PRICE_PER_SF.camel == "pricePerSF"

    def test_unknown_metric_raises(self):
        with pytest.raises(ValueError):
            MetricName("unicorn_metric")


class TestPropertyTypeEnum:
    def test_alternate_spellings(self):
        assert PropertyTypeEnum("mixed_use") is PropertyTypeEnum.MIXED_USE
        assert PropertyTypeEnum("Mixed-Use") is PropertyTypeEnum.MIXED_USE
        assert PropertyTypeEnum("Office") is PropertyTypeEnum.OFFICE

    def test_unknown_type_raises(self):
        with pytest.raises(ValueError):
            PropertyTypeEnum("hotel")


class TestCreditRating:
    def test_investment_grade_cutoff(self):
        assert CreditRating.BBB.is_investment_grade
        assert not CreditRating.BB.is_investment_grade
        assert not CreditRating.NR.is_investment_grade

    def test_high_grade(self):
        assert CreditRating.A.is_high_grade
        assert not CreditRating.BBB.is_high_grade


class TestNumericGuards:
    """Test suite for the numeric helpers used on form input."""

    def test_is_valid_number(self):
        assert is_valid_number(5)
        assert is_valid_number(-2.5)
        assert not is_valid_number(math.nan)
        assert not is_valid_number(math.inf)
        assert not is_valid_number("5")
        assert not is_valid_number(None)
        assert not is_valid_number(True)

    def test_safe_to_number(self):
        assert safe_to_number(12.5) == 12.5
        assert safe_to_number("$1,250,000") == 1_250_000.0
        assert safe_to_number("not a number") == 0.0
        assert safe_to_number(None) == 0.0
        assert safe_to_number(math.inf) == 0.0

    def test_is_valid_percentage(self):
        assert is_valid_percentage(0)
        assert is_valid_percentage(100)
        assert not is_valid_percentage(100.5)
        assert not is_valid_percentage(-1)

    def test_finite_or_none(self):
        assert finite_or_none(3) == 3.0
        assert finite_or_none(math.nan) is None
        assert finite_or_none(None) is None

    def test_is_present(self):
        assert is_present(0)
        assert is_present("x")
        assert not is_present("   ")
        assert not is_present([])
        assert not is_present(None)


class TestSettings:
    """Test suite for settings validation."""

    def test_sanity_defaults(self):
        thresholds = SanityThresholds()
        assert thresholds.ltv_error_max == 100.0
        assert thresholds.cap_rate_warn_min == 1.0
        assert thresholds.min_equity_share == 0.10

    def test_irr_bounds_checked(self):
        with pytest.raises(ValidationError):
            CalculationSettings(irr_floor=60.0, irr_cap=50.0)

    def test_settings_are_frozen(self):
        thresholds = SanityThresholds()
        with pytest.raises(ValidationError):
            thresholds.ltv_error_max = 80.0

    def test_unknown_settings_key_rejected(self):
        with pytest.raises(ValidationError):
            SanityThresholds(ltv_max=80.0)
