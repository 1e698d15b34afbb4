# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit Tests for Flag-Driven Metric Calculation

Every enabled flag must end up either with a value or with an entry in
``validation_errors`` explaining why it has none.
"""

import pytest

from dealscope.analysis import AssetAnalysis, MetricFlags, calculate_metrics
from dealscope.asset import PropertyData
from dealscope.asset.office import OfficeTenant
from dealscope.core.primitives import MetricName, PropertyTypeEnum

from ...conftest import complete_office_form


class TestCalculateMetrics:
    """Test suite for the formula metrics."""

    def test_enabled_metrics_only(self, office_data, settings):
        metrics = calculate_metrics(office_data, MetricFlags(cap_rate=True), settings)

        assert metrics.cap_rate == pytest.approx(7.0)
        assert metrics.cash_on_cash is None
        assert metrics.validation_errors == {}

    def test_missing_inputs_are_explained(self, office_data, settings):
        metrics = calculate_metrics(office_data, ["capRate", "cashOnCash", "dscr"], settings)

        assert metrics.cap_rate == pytest.approx(7.0)
        assert metrics.cash_on_cash == pytest.approx(10.0)
        assert metrics.dscr is None
        assert metrics.validation_errors == {
            "dscr": "DSCR calculation requires: Loan Amount, Interest Rate, Loan Term"
        }

    def test_complete_record(self, complete_office_data, settings):
        metrics = calculate_metrics(
            complete_office_data,
            [MetricName.DSCR, MetricName.IRR, MetricName.ROI, MetricName.BREAKEVEN],
            settings,
        )

        # $750k at 6% over 30 years is $53,959.55 a year
        assert metrics.dscr == pytest.approx(70_000 / 53_959.55, rel=1e-6)
        # ($250k + 5 x $25k + $125k appreciation) doubles the equity over 5 years
        assert metrics.irr == pytest.approx((2 ** 0.2 - 1) * 100)
        assert metrics.roi == pytest.approx(10.0)
        assert metrics.breakeven == pytest.approx((40_000 + 53_959.55) / 110_000 * 100, rel=1e-6)
        assert metrics.validation_errors == {}

    def test_formula_error_is_isolated(self, settings):
        data = PropertyData(property_type="office", purchase_price=-1_000_000, current_noi=70_000, loan_amount=500_000)

        metrics = calculate_metrics(data, ["cap_rate", "debt_yield"], settings)

        assert metrics.validation_errors["cap_rate"] == "purchase price must be positive"
        assert metrics.debt_yield == pytest.approx(14.0)

    def test_empty_result_is_explained(self, settings):
        data = PropertyData.model_validate(complete_office_form(currentNOI=-5_000))

        metrics = calculate_metrics(data, [MetricName.IRR], settings)

        assert metrics.irr is None
        assert metrics.validation_errors == {"irr": "IRR could not be calculated from the provided data"}

    def test_zero_noi_is_a_value(self, settings):
        data = PropertyData(purchase_price=1_000_000, current_noi=0)

        metrics = calculate_metrics(data, [MetricName.CAP_RATE], settings)

        assert metrics.cap_rate == 0.0
        assert metrics.validation_errors == {}

    def test_zero_rate_loan(self, settings):
        data = PropertyData.model_validate(complete_office_form(interestRate=0))

        metrics = calculate_metrics(data, [MetricName.DSCR, MetricName.BREAKEVEN], settings)

        # $750k over 30 years straight-line is $25k a year
        assert metrics.dscr == pytest.approx(2.8)
        assert metrics.breakeven == pytest.approx((40_000 + 25_000) / 110_000 * 100)
        assert metrics.validation_errors == {}

    def test_zero_loan_is_explained(self, settings):
        data = PropertyData.model_validate(complete_office_form(loanAmount=0))

        metrics = calculate_metrics(data, [MetricName.DSCR, MetricName.BREAKEVEN], settings)

        assert metrics.dscr is None
        assert metrics.validation_errors == {
            "dscr": "DSCR calculation requires a non-zero annual debt service"
        }
        # Without debt service breakeven is expenses over gross income
        assert metrics.breakeven == pytest.approx(40_000 / 110_000 * 100)

    def test_unusable_loan_term_is_explained(self, settings):
        data = PropertyData.model_validate(complete_office_form(loanTerm=0))

        metrics = calculate_metrics(data, [MetricName.DSCR], settings)

        assert metrics.validation_errors == {
            "dscr": "DSCR calculation requires a positive Loan Term and a non-negative Interest Rate"
        }

    def test_no_flags(self, office_data, settings):
        metrics = calculate_metrics(office_data, MetricFlags(), settings)
        assert metrics.produced() == []
        assert metrics.validation_errors == {}


class TestAssetAnalysis:
    """Test suite for the asset analyzer pass."""

    def test_asset_analysis_attached(self, office_data, settings):
        metrics = calculate_metrics(office_data, ["capRate"], settings)

        analysis = metrics.asset_analysis
        assert isinstance(analysis, AssetAnalysis)
        assert analysis.property_type is PropertyTypeEnum.OFFICE
        assert len(analysis.available_analyses) == 4
        assert not analysis.data_validation.is_valid
        assert analysis.results == {}

    def test_asset_results_reachable_through_get(self, settings):
        data = PropertyData(
            property_type="office",
            office_tenants=[OfficeTenant(name="Acme", annual_rent=300_000, lease_expiration="2030-01", credit_rating="A")],
        )

        metrics = calculate_metrics(data, [MetricName.TENANT_FINANCIAL_HEALTH], settings)

        health = metrics.get("tenantFinancialHealth")
        assert health.investment_grade_percentage == pytest.approx(100.0)
        assert metrics.produced() == [MetricName.TENANT_FINANCIAL_HEALTH]

    def test_skipped_analyzer_becomes_error(self, office_data, settings):
        metrics = calculate_metrics(office_data, [MetricName.TENANT_FINANCIAL_HEALTH], settings)

        assert metrics.validation_errors == {
            "tenant_financial_health": (
                "Comprehensive tenant credit and financial health analysis skipped: "
                "office tenants with annual rent are required"
            )
        }
        assert metrics.asset_analysis.skipped == metrics.validation_errors

    def test_switch_for_another_type(self, office_data, settings):
        metrics = calculate_metrics(office_data, [MetricName.CO_TENANCY_RISK], settings)
        assert metrics.validation_errors == {"co_tenancy_risk": "coTenancyRisk does not apply to office properties"}

    def test_no_property_type(self, settings):
        data = PropertyData(purchase_price=1_000_000, current_noi=70_000)

        metrics = calculate_metrics(data, [MetricName.CAP_RATE, MetricName.TENANT_FINANCIAL_HEALTH], settings)

        assert metrics.cap_rate == pytest.approx(7.0)
        assert metrics.asset_analysis is None
        assert metrics.validation_errors == {
            "tenant_financial_health": "Property type is required for asset analysis"
        }


class TestCalculatedMetrics:
    def test_get_and_produced(self, complete_office_data, settings):
        metrics = calculate_metrics(complete_office_data, ["capRate", "dscr", "ltv"], settings)

        assert metrics.get("capRate") == pytest.approx(7.0)
        assert metrics.get(MetricName.LTV) == pytest.approx(75.0)
        assert metrics.get(MetricName.IRR) is None
        assert metrics.produced() == [MetricName.CAP_RATE, MetricName.DSCR, MetricName.LTV]

    def test_camel_case_dump(self, office_data, settings):
        dumped = calculate_metrics(office_data, ["capRate"], settings).model_dump(by_alias=True)
        assert dumped["capRate"] == pytest.approx(7.0)
        assert dumped["validationErrors"] == {}
