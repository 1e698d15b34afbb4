# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit Tests for the Calculation Package Catalog

Tests package lookup, the metric and field metadata and the package and
asset analysis recommendations.
"""

import pytest

from dealscope.analysis import (
    ALL_METRICS,
    PROPERTY_PACKAGES,
    get_asset_package_recommendations,
    get_available_asset_analysis,
    get_package,
    get_packages,
    get_required_fields,
)
from dealscope.analysis.packages import field_label
from dealscope.asset import PropertyData
from dealscope.core.primitives import MetricName, PackageTier, PropertyTypeEnum


class TestCatalog:
    """Test suite for the package catalog."""

    def test_three_tiers_per_type(self):
        for property_type in PropertyTypeEnum:
            tiers = [p.tier for p in PROPERTY_PACKAGES[property_type]]
            assert len(tiers) == 3
            assert tiers[0] is PackageTier.BASIC
            assert tiers[-1] is PackageTier.INSTITUTIONAL

    def test_office_ids(self):
        assert [p.id for p in get_packages("office")] == [
            "office-basic",
            "office-complete",
            "office-institutional",
        ]

    def test_industrial_middle_tier_is_investment(self):
        package = get_package("industrial-investment")
        assert package.name == "Investment Analysis"
        assert package.tier is PackageTier.INVESTMENT
        assert package.included_metrics == [
            MetricName.CAP_RATE,
            MetricName.CASH_ON_CASH,
            MetricName.DSCR,
            MetricName.ROI,
        ]

    def test_mixed_use_ids(self):
        assert [p.id for p in get_packages("mixed-use")] == ["mixed-basic", "mixed-complete", "mixed-institutional"]

    def test_basic_package(self):
        package = get_package("office-basic", "office")
        assert package.name == "Office Quick Analysis"
        assert package.included_metrics == [MetricName.CAP_RATE, MetricName.CASH_ON_CASH]
        assert package.required_fields == ["purchase_price", "current_noi", "total_investment", "annual_cash_flow"]

    def test_institutional_adds_asset_analytics(self):
        package = get_package("office-institutional")
        assert MetricName.TENANT_FINANCIAL_HEALTH in package.included_metrics
        assert MetricName.WALT in package.included_metrics
        assert "office_tenants" in package.optional_fields
        assert "weighted_average_lease_term" in package.required_fields

    def test_package_for_wrong_type(self):
        with pytest.raises(KeyError, match="not found for property type retail"):
            get_package("office-basic", "retail")

    def test_unknown_package(self):
        with pytest.raises(KeyError):
            get_package("office-deluxe")


class TestMetadata:
    def test_every_metric_has_info(self):
        assert set(ALL_METRICS) == set(MetricName)

    def test_asset_switch_info_comes_from_registry(self):
        info = ALL_METRICS[MetricName.CO_TENANCY_RISK]
        assert info.name == "Co Tenancy Risk"
        assert info.description == "Co-tenancy risk and anchor dependency analysis"

    def test_field_labels(self):
        assert field_label("current_noi") == "Current NOI"
        assert field_label("loan_term") == "Loan Term (Years)"
        # Fields without metadata fall back to the form key
        assert field_label("monthly_rental_income") == "monthlyRentalIncome"


class TestRequiredFields:
    def test_metric_inputs_in_first_appearance_order(self):
        fields = get_required_fields([MetricName.CAP_RATE, MetricName.LTV], PropertyData())
        assert fields == ["purchase_price", "current_noi", "loan_amount"]

    def test_adds_missing_asset_core_fields(self):
        data = PropertyData(property_type="office", rentable_square_feet=50_000)
        fields = get_required_fields(["capRate"], data)
        assert fields == ["purchase_price", "current_noi", "number_of_tenants", "average_rent_psf"]


class TestRecommendations:
    """Test suite for package and asset analysis recommendations."""

    def test_packages_ranked_by_match(self, office_data):
        recommendations = get_asset_package_recommendations(office_data)

        assert recommendations[0].package_id == "office-basic"
        assert recommendations[0].match_score == 100
        scores = [r.match_score for r in recommendations]
        assert scores == sorted(scores, reverse=True)

    def test_no_property_type(self):
        assert get_asset_package_recommendations(PropertyData()) == []
        assert get_available_asset_analysis(PropertyData()) == []

    def test_available_asset_analysis(self):
        data = PropertyData(property_type="multifamily", number_of_units=100, current_occupancy=95)

        availability = get_available_asset_analysis(data)

        assert [a.function_name for a in availability] == [
            "analyze_revenue_performance",
            "analyze_operating_performance",
            "analyze_market_position",
        ]
        assert not availability[0].available
        assert availability[0].requirements == ["average_rent_per_unit"]
