# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit Tests for Multifamily Analytics

Tests rent roll revenue, operating expenses, market position and the
simple revenue-per-unit metric.
"""

from datetime import date

import pytest

from dealscope.asset.multifamily import (
    MarketComp,
    MultifamilyExpenses,
    PropertyAmenities,
    SubmarketData,
    Unit,
    UnitConcession,
    analyze_market_position,
    analyze_operating_performance,
    analyze_revenue_performance,
    calculate_amenity_score,
    calculate_multifamily_metrics,
    rent_roll_frame,
)


@pytest.fixture
def rent_roll():
    """One leased 1BR slightly under market and one vacant 2BR."""
    return [
        Unit(unit_number="101", unit_type="1BR", square_footage=700, current_rent=1_200, market_rent=1_300),
        Unit(unit_number="102", unit_type="2BR", square_footage=1_000, market_rent=1_800, occupied=False),
    ]


@pytest.fixture
def stabilized_roll():
    return [
        Unit(unit_number=str(100 + i), unit_type="1BR", square_footage=800, current_rent=1_600, market_rent=1_650)
        for i in range(10)
    ]


class TestMultifamilyMetrics:
    def test_revenue_per_unit(self):
        metrics = calculate_multifamily_metrics(100, 150_000, 1_400)
        assert metrics.revenue_per_unit == pytest.approx(1_500.0)
        assert metrics.annualized_revenue == pytest.approx(1_800_000)
        assert metrics.market_comparison == "7.1% above market"

    def test_market_comparison_bands(self):
        assert calculate_multifamily_metrics(100, 140_000, 1_400).market_comparison == "At market rate"
        assert calculate_multifamily_metrics(100, 120_000, 1_400).market_comparison == "14.3% below market"
        assert calculate_multifamily_metrics(100, 120_000).market_comparison is None

    def test_needs_units_and_income(self):
        assert calculate_multifamily_metrics(0, 150_000) is None
        assert calculate_multifamily_metrics(100, None) is None


class TestRevenuePerformance:
    """Test suite for rent roll revenue analysis."""

    def test_revenue_waterfall(self, rent_roll):
        result = analyze_revenue_performance(rent_roll)

        revenue = result.revenue_metrics
        assert revenue.gross_potential_rent == pytest.approx(37_200)
        assert revenue.actual_rent == pytest.approx(14_400)
        assert revenue.loss_to_lease == pytest.approx(1_200)
        assert revenue.vacancy == pytest.approx(21_600)
        assert revenue.effective_rent == pytest.approx(14_400)

    def test_occupancy(self, rent_roll):
        performance = analyze_revenue_performance(rent_roll).unit_performance
        assert performance.occupancy == pytest.approx(50.0)
        assert performance.economic_occupancy == pytest.approx(14_400 / 37_200 * 100)
        assert performance.avg_rent_psf == pytest.approx(1_200 / 1_700)
        assert performance.rent_psf_vs_market is None

    def test_unit_mix(self, rent_roll):
        mix = analyze_revenue_performance(rent_roll).unit_mix_analysis
        assert [m.unit_type for m in mix] == ["1BR", "2BR"]
        assert mix[0].occupancy == pytest.approx(100.0)
        assert mix[0].loss_to_lease == pytest.approx(100.0)
        assert mix[1].occupancy == 0.0
        assert mix[1].avg_rent == 0.0

    def test_concessions_reduce_effective_rent(self, rent_roll):
        discounted = rent_roll[0].model_copy(update={"concessions": UnitConcession(amount=1_200, months=12)})

        result = analyze_revenue_performance([discounted, rent_roll[1]])

        assert result.revenue_metrics.concessions == pytest.approx(1_200)
        assert result.revenue_metrics.effective_rent == pytest.approx(13_200)
        assert result.concession_analysis.units_with_concessions == 1
        assert result.concession_analysis.concession_rate == pytest.approx(100.0)

    def test_empty_roll(self):
        assert analyze_revenue_performance([]) is None


class TestOperatingPerformance:
    def test_expense_metrics(self, rent_roll):
        expenses = MultifamilyExpenses(taxes=6_000, insurance=2_000, payroll=4_000)

        result = analyze_operating_performance(rent_roll, expenses)

        metrics = result.expense_metrics
        assert metrics.total_expenses == pytest.approx(12_000)
        assert metrics.expense_ratio == pytest.approx(12_000 / 14_400 * 100)
        assert metrics.per_unit_expenses == pytest.approx(6_000)
        assert metrics.controllable_ratio == pytest.approx(4_000 / 12_000 * 100)

    def test_breakdown_against_benchmarks(self, rent_roll):
        expenses = MultifamilyExpenses(taxes=6_000, insurance=2_000, payroll=4_000)

        breakdown = analyze_operating_performance(rent_roll, expenses).expense_breakdown

        taxes = breakdown[0]
        assert taxes.category == "Taxes"
        assert taxes.percent_of_total == pytest.approx(50.0)
        assert taxes.benchmark == pytest.approx(15.0)
        assert taxes.variance == pytest.approx((50 - 15) / 15 * 100)

    def test_kpis(self, rent_roll):
        expenses = MultifamilyExpenses(taxes=6_000, insurance=2_000, payroll=4_000)

        kpis = analyze_operating_performance(rent_roll, expenses, rent_growth=2.0).operational_kpis

        status = {kpi.metric: kpi.status for kpi in kpis}
        assert status == {
            "Occupancy Rate": "Critical",
            "Rent Growth": "Needs Attention",
            "Expense Ratio": "Critical",
        }

    def test_requires_expenses(self, rent_roll):
        assert analyze_operating_performance(rent_roll, None) is None
        assert analyze_operating_performance(rent_roll, MultifamilyExpenses()) is None
        assert analyze_operating_performance([], MultifamilyExpenses(taxes=1_000)) is None


class TestMarketPosition:
    """Test suite for competitive position within the comp set."""

    @pytest.fixture
    def comps(self):
        return [
            MarketComp(property_name=f"Comp {i}", occupancy=94, avg_rent_psf=1.8, amenity_score=40)
            for i in range(4)
        ]

    @pytest.fixture
    def amenities(self):
        return PropertyAmenities(pool=True, fitness=True, smart_home=True, package_lockers=True)

    def test_leader_of_comp_set(self, stabilized_roll, amenities, comps):
        result = analyze_market_position(stabilized_roll, amenities, comps, analysis_date=date(2025, 1, 1))

        position = result.competitive_position
        assert position.market_rank == 1
        assert position.overall_rating == "Leader"
        assert position.rent_premium_discount == pytest.approx((2.0 - 1.8) / 1.8 * 100)
        assert position.occupancy_outperformance == pytest.approx(6.0)

    def test_swot_and_pricing(self, stabilized_roll, amenities, comps):
        result = analyze_market_position(stabilized_roll, amenities, comps, analysis_date=date(2025, 1, 1))

        swot = result.strengths_weaknesses
        assert "High occupancy" in swot.strengths
        assert "Premium rent achievement" in swot.strengths
        assert swot.opportunities == ["Unit renovation program"]
        assert result.pricing_power.score == pytest.approx(70.0)
        assert result.pricing_power.max_rent_increase == pytest.approx(5.0)

    def test_amenity_gaps(self, stabilized_roll, amenities, comps):
        gaps = analyze_market_position(stabilized_roll, amenities, comps).amenity_gap_analysis
        pool = next(g for g in gaps if g.amenity == "Swimming Pool")
        clubhouse = next(g for g in gaps if g.amenity == "Clubhouse")
        assert pool.has_amenity and pool.addition_cost is None
        assert clubhouse.addition_cost == 150_000
        assert {g.priority for g in gaps} == {"Low"}

    def test_demographic_alignment(self, stabilized_roll, amenities, comps):
        submarket = SubmarketData(median_income=50_000)

        result = analyze_market_position(stabilized_roll, amenities, comps, submarket=submarket)

        alignment = result.demographic_alignment
        assert alignment.target_resident == "Middle Income Families"
        assert alignment.alignment_score == pytest.approx(45.0)
        assert "Add playground" in alignment.recommendations

    def test_no_alignment_without_income(self, stabilized_roll, amenities, comps):
        result = analyze_market_position(stabilized_roll, amenities, comps)
        assert result.demographic_alignment is None

    def test_requires_comps(self, stabilized_roll, amenities):
        assert analyze_market_position(stabilized_roll, amenities, []) is None


class TestAmenityScore:
    def test_bounds(self):
        assert calculate_amenity_score(None) == 0.0
        assert calculate_amenity_score(PropertyAmenities()) == 0.0
        everything = PropertyAmenities(
            **{name: True for name in PropertyAmenities.model_fields if name != "parking_ratio"},
            parking_ratio=1.5,
        )
        assert calculate_amenity_score(everything) == pytest.approx(100.0)


def test_rent_roll_frame_zeroes_vacant_rent(rent_roll):
    frame = rent_roll_frame(rent_roll)
    assert list(frame["current_rent"]) == [1_200, 0.0]
    assert list(frame["bucket"]) == ["1BR", "2BR"]
