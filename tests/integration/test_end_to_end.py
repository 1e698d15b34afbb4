# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
End-to-end tests: camelCase form payload in, graded and exported result out.

Each enabled metric must come back either with a value or with an entry in
``validation_errors``.
"""

import json

import pytest

from dealscope.analysis import PROPERTY_PACKAGES, analyze, get_package, validate_and_calculate
from dealscope.core.primitives import AssessmentLevel, MetricName, PropertyTypeEnum
from dealscope.reporting import export_result_json, result_to_frame

from ..conftest import complete_office_form


def deal_form(property_type: PropertyTypeEnum):
    """Complete financials plus the core asset fields of every property type."""
    return complete_office_form(
        propertyType=property_type.value,
        square_footage=20_000,
        # Office
        rentable_square_feet=20_000,
        number_of_tenants=2,
        average_rent_psf=30,
        weighted_average_lease_term=3.5,
        # Retail
        gross_leasable_area=20_000,
        sales_per_sf=350,
        occupancy_cost_ratio=8,
        traffic_count=25_000,
        # Industrial
        clear_height=32,
        number_of_dock_doors=12,
        power_capacity=800,
        distance_to_highway=2,
        # Multifamily
        number_of_units=20,
        current_occupancy=95,
        occupancy_rate=95,
        average_rent_per_unit=1_500,
        unit_mix="1BR/2BR",
        # Mixed-use
        total_square_footage=20_000,
    )


CATALOG = [package for packages in PROPERTY_PACKAGES.values() for package in packages]


def assert_accounted_for(result, metrics):
    for metric in metrics:
        produced = result.metrics.get(metric) is not None
        explained = metric.value in result.validation_errors
        assert produced or explained, f"{metric.value} neither produced nor explained"


class TestOfficeInstitutional:
    """Full office deal with a rent roll."""

    @pytest.fixture
    def form(self):
        return complete_office_form(
            rentableSquareFeet=20_000,
            numberOfTenants=2,
            averageRentPSF=30,
            weightedAverageLeaseTerm=3.5,
            officeTenants={
                "tenants": [
                    {"tenantName": "Acme", "annualRent": 300_000, "leaseExpiration": "2030-01", "creditRating": "A"},
                    {"name": "Beta", "annualRent": 300_000, "leaseExpiration": "2027-01"},
                ]
            },
        )

    def test_package_run(self, form, settings):
        result = validate_and_calculate("office-institutional", form, settings)

        assert result.success, result.error
        assert_accounted_for(result, get_package("office-institutional").included_metrics)
        assert result.metrics.price_per_sf == pytest.approx(50.0)
        # 5 and 2 years remaining, equally weighted by rent
        assert result.metrics.walt == pytest.approx(3.5)
        health = result.metrics.get(MetricName.TENANT_FINANCIAL_HEALTH)
        assert health.investment_grade_percentage == pytest.approx(50.0)
        assert result.metrics.get(MetricName.LEASE_ECONOMICS) is not None

    def test_assessment_tie_goes_to_moderate(self, form, settings):
        result = validate_and_calculate("office-institutional", form, settings)

        # Strong: cash-on-cash, DSCR, IRR. Moderate: cap rate, ROI, breakeven.
        assert result.assessment.strong_count == 3
        assert result.assessment.moderate_count == 3
        assert result.assessment.level is AssessmentLevel.MODERATE

    def test_export(self, form, settings):
        result = validate_and_calculate("office-institutional", form, settings)

        document = json.loads(export_result_json(result))
        metrics = document["result"]["metrics"]
        assert metrics["walt"] == pytest.approx(3.5)
        assert metrics["assetAnalysis"]["propertyType"] == "office"
        assert "tenant_financial_health" in metrics["assetAnalysis"]["results"]

        frame = result_to_frame(result)
        assert "walt" in set(frame["metric"])
        assert frame.set_index("metric").loc["walt", "formatted"] == "3.5 years"


class TestMultifamilyQuickRun:
    def test_unit_metrics(self, settings):
        form = {
            "propertyType": "multifamily",
            "purchasePrice": "2,000,000",
            "numberOfUnits": 10,
            "monthlyRentalIncome": 15_000,
            "marketAverageRent": 1_400,
            "grossIncome": 180_000,
        }

        result = analyze(
            form, ["pricePerUnit", "grm", "revenuePerUnit", "multifamilyMetrics", "revenueMetrics"], settings
        )

        assert result.success
        assert result.metrics.price_per_unit == pytest.approx(200_000)
        assert result.metrics.grm == pytest.approx(2_000_000 / 180_000)
        assert result.metrics.revenue_per_unit == pytest.approx(1_500)
        assert result.metrics.multifamily_metrics.market_comparison == "7.1% above market"
        # No rent roll, so the revenue analyzer is explained rather than run
        assert "revenue_metrics" in result.validation_errors
        assert result.assessment.level is AssessmentLevel.INSUFFICIENT


class TestMixedUseRun:
    def test_component_analytics(self, settings):
        form = {
            "propertyType": "mixed-use",
            "purchasePrice": 15_000_000,
            "totalInvestment": 4_500_000,
            "totalSquareFootage": 120_000,
            "components": [
                {"type": "Office", "squareFootage": 100_000, "noi": 600_000, "capRate": 6.5},
                {"type": "Retail", "squareFootage": 20_000, "noi": 400_000, "capRate": 8.0, "occupancy": 80},
            ],
        }

        result = analyze(form, ["pricePerSF", "mixedUsePerformance", "crossUseInteractions"], settings)

        assert result.success
        assert result.metrics.price_per_sf == pytest.approx(125.0)
        performance = result.metrics.get(MetricName.MIXED_USE_PERFORMANCE)
        assert performance.financial_summary.total_noi == pytest.approx(1_000_000)
        # No loan, so no coverage ratio
        assert performance.financial_summary.dscr is None
        interactions = result.metrics.get(MetricName.CROSS_USE_INTERACTIONS)
        assert [c.issue for c in interactions.conflicts] == ["Delivery truck routing and timing"]
        assert result.validation_errors == {}


@pytest.mark.parametrize("package", CATALOG, ids=lambda package: package.id)
class TestPackageCatalog:
    """Every catalog package over a record carrying all core fields."""

    def test_every_included_metric_accounted_for(self, package, settings):
        result = validate_and_calculate(package.id, deal_form(package.property_type), settings)

        assert result.success, result.error
        assert_accounted_for(result, package.included_metrics)

    def test_repeat_runs_are_identical(self, package, settings):
        form = deal_form(package.property_type)

        first = validate_and_calculate(package.id, form, settings)
        second = validate_and_calculate(package.id, form, settings)

        assert first.model_dump() == second.model_dump()
