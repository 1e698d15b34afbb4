# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit Tests for the Analysis API

Tests ``validate_and_calculate`` and ``analyze``: the validation gate,
the sanity checks on results and the deal assessment attached to each
result.
"""

import pytest

from dealscope.analysis import MetricFlags, analyze, validate_and_calculate
from dealscope.asset import PropertyData
from dealscope.core.primitives import AssessmentLevel, MetricName

from ...conftest import complete_office_form, office_form


class TestValidateAndCalculate:
    """Test suite for package runs."""

    def test_complete_office_package(self, complete_office_data, settings):
        result = validate_and_calculate("office-complete", complete_office_data, settings)

        assert result.success
        assert result.package_id == "office-complete"
        assert result.error == ""
        assert result.warnings == []
        assert result.validation_errors == {}
        assert result.metrics.produced() == [
            MetricName.CAP_RATE,
            MetricName.CASH_ON_CASH,
            MetricName.DSCR,
            MetricName.IRR,
            MetricName.BREAKEVEN,
        ]
        # cash-on-cash, DSCR and IRR strong; cap rate and breakeven moderate
        assert result.assessment.level is AssessmentLevel.STRONG
        assert result.assessment.strong_count == 3
        assert result.assessment.moderate_count == 2

    def test_accepts_camel_case_form(self, settings):
        result = validate_and_calculate("office-basic", office_form(), settings)

        assert result.success
        assert result.metrics.cap_rate == pytest.approx(7.0)
        assert result.metrics.cash_on_cash == pytest.approx(10.0)

    def test_validation_failure(self, settings):
        form = office_form()
        del form["currentNOI"]

        result = validate_and_calculate("office-basic", form, settings)

        assert not result.success
        assert result.validation_errors == {
            "validation_0": "Current NOI is required for Office Quick Analysis",
            "validation_1": "Current NOI is required for Cap Rate calculation",
        }
        assert result.error == (
            "Data validation failed: Current NOI is required for Office Quick Analysis, "
            "Current NOI is required for Cap Rate calculation"
        )
        assert result.metrics.produced() == []
        assert result.assessment is None

    def test_unknown_package(self, office_data, settings):
        result = validate_and_calculate("office-deluxe", office_data, settings)

        assert not result.success
        assert result.validation_errors == {
            "validation_0": "Package office-deluxe not found for property type office"
        }
        assert result.package_id == "office-deluxe"

    def test_malformed_record(self, settings):
        result = validate_and_calculate("office-basic", {"purchasePrice": "lots"}, settings)

        assert not result.success
        assert list(result.validation_errors) == ["calculation"]
        assert result.error == result.validation_errors["calculation"]

    def test_input_warnings_are_kept(self, settings):
        result = validate_and_calculate("office-basic", office_form(currentNOI=15_000), settings)

        assert result.success
        assert result.warnings == ["Cap rate is unusually low (below 2%)"]
        assert result.metrics.cap_rate == pytest.approx(1.5)

    def test_zero_required_field(self, settings):
        result = validate_and_calculate("office-complete", complete_office_form(grossIncome=0), settings)

        # Package required fields must be non-zero
        assert not result.success
        assert result.validation_errors == {
            "validation_0": "Gross Income is required for Complete Office Analysis"
        }


class TestAnalyze:
    """Test suite for ad-hoc metric runs."""

    def test_defaults_to_computable_metrics(self, office_data, settings):
        result = analyze(office_data, settings=settings)

        assert result.success
        assert result.package_id is None
        assert result.metrics.produced() == [MetricName.CAP_RATE, MetricName.CASH_ON_CASH, MetricName.ROI]
        # Without an NOI projection ROI is the cash yield
        assert result.metrics.roi == pytest.approx(10.0)
        assert result.assessment.level is AssessmentLevel.MODERATE

    def test_sanity_error_keeps_success(self, settings):
        data = PropertyData(property_type="office", loan_amount=1_200_000, purchase_price=1_000_000)

        result = analyze(data, ["ltv"], settings)

        assert result.success
        assert result.metrics.ltv == pytest.approx(120.0)
        assert result.error == "LTV cannot exceed 100%"

    def test_sanity_warning(self, settings):
        result = analyze({"currentNOI": 250_000, "purchasePrice": 1_000_000}, ["capRate"], settings)

        assert result.success
        assert result.warnings == ["Cap Rate is unusually high (>20%)"]
        assert result.assessment.level is AssessmentLevel.STRONG

    def test_accepts_flags(self, office_data, settings):
        result = analyze(office_data, MetricFlags(cash_on_cash=True), settings)
        assert result.metrics.produced() == [MetricName.CASH_ON_CASH]

    def test_zero_noi_cap_rate(self, settings):
        result = analyze({"purchasePrice": 1_000_000, "currentNOI": 0}, ["capRate"], settings)

        assert result.success
        assert result.metrics.cap_rate == 0.0
        assert result.validation_errors == {}
        assert result.warnings == ["Cap Rate is unusually low (<1%)"]

    def test_failing_analyzer_keeps_formula_metrics(self, monkeypatch, office_data, settings):
        def explode(tenants):
            raise ZeroDivisionError("division by zero")

        monkeypatch.setattr("dealscope.asset.registry.analyze_tenant_financial_health", explode)

        result = analyze(office_data, ["capRate", "tenantFinancialHealth"], settings)

        assert result.success
        assert result.metrics.cap_rate == pytest.approx(7.0)
        assert result.validation_errors["tenant_financial_health"].endswith("failed: division by zero")

    def test_malformed_record(self, settings):
        result = analyze({"propertyType": "castle"}, ["capRate"], settings)
        assert not result.success
        assert "calculation" in result.validation_errors
