# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit Tests for Mixed-Use Analytics
"""

import pytest

from dealscope.asset.mixed_use import (
    MixedUseComponent,
    SharedAmenity,
    SharedSystems,
    analyze_cross_use_interactions,
    analyze_mixed_use_performance,
)
from dealscope.asset.retail import RetailTenant


@pytest.fixture
def office_retail():
    return [
        MixedUseComponent(type="Office", square_footage=100_000, noi=600_000, cap_rate=6.5),
        MixedUseComponent(type="Retail", square_footage=20_000, noi=400_000, cap_rate=8.0, occupancy=80),
    ]


class TestMixedUsePerformance:
    """Test suite for the integrated mixed-use financial view."""

    def test_financial_summary(self, office_retail):
        result = analyze_mixed_use_performance(office_retail, None, 15_000_000, 800_000)

        summary = result.financial_summary
        assert summary.total_noi == pytest.approx(1_000_000)
        assert summary.blended_cap_rate == pytest.approx(6.6667, rel=1e-4)
        assert summary.dscr == pytest.approx(1.25)
        assert summary.cash_flow == pytest.approx(200_000)
        # Equity defaults to 30% of the investment
        assert summary.cash_on_cash == pytest.approx(200_000 / 4_500_000 * 100)

    def test_component_ratings(self, office_retail):
        result = analyze_mixed_use_performance(office_retail, None, 15_000_000, 800_000)

        ratings = {p.component: p.performance_rating for p in result.component_performance}
        assert ratings == {"Office": "Meeting", "Retail": "Underperforming"}
        retail = result.component_performance[1]
        assert retail.noi_contribution == pytest.approx(40.0)
        assert retail.cap_rate_vs_market == pytest.approx(1.0)

    def test_risk_analysis(self, office_retail):
        risk = analyze_mixed_use_performance(office_retail, None, 15_000_000, 800_000).risk_analysis

        assert risk.concentration_risk.largest_component == "Office"
        assert risk.concentration_risk.risk_level == "Medium"
        assert risk.operational_complexity == pytest.approx(55)
        assert risk.cross_default_risk == ["Retail vacancy may impact residential desirability"]
        assert risk.market_cycle_exposure == {"Office": "Stable", "Retail": "Declining"}

    def test_synergies(self, office_retail):
        synergy = analyze_mixed_use_performance(office_retail, None, 15_000_000, 800_000).synergy_value

        assert synergy.operational_synergies == 0.0
        assert synergy.revenue_synergies == pytest.approx(50_000)
        assert synergy.cost_synergies == pytest.approx(120_000 * 0.25 + 50_000)

    def test_shared_systems_add_operational_synergy(self, office_retail):
        systems = SharedSystems(hvac_type="Central", integrated_security=True, parking_validation=True, parking_spaces=100)

        result = analyze_mixed_use_performance(office_retail, systems, 15_000_000, 800_000)

        # 2 x 50k HVAC + 100k security + 30 avoided spaces at 20k
        assert result.synergy_value.operational_synergies == pytest.approx(800_000)
        assert [o.opportunity for o in result.optimization_opportunities] == ["Reposition Retail component"]

    def test_opportunities_sorted_by_value(self, office_retail):
        result = analyze_mixed_use_performance(office_retail, None, 15_000_000, 800_000)

        opportunities = [o.opportunity for o in result.optimization_opportunities]
        assert opportunities[0] == "Reposition Retail component"
        assert opportunities[1:] == ["Centralize HVAC systems", "Implement dynamic parking allocation"]

    def test_no_debt(self, office_retail):
        result = analyze_mixed_use_performance(office_retail, None, 15_000_000, 0)
        assert result.financial_summary.dscr is None

    def test_no_components(self):
        assert analyze_mixed_use_performance([], None, 15_000_000, 800_000) is None


class TestCrossUseInteractions:
    """Test suite for synergies and conflicts between uses."""

    def test_office_retail_synergies(self, office_retail):
        cafe = RetailTenant(name="Cafe", square_footage=2_000, merchandise_type="Food")

        result = analyze_cross_use_interactions(office_retail, [cafe])

        descriptions = [s.description for s in result.synergies]
        assert descriptions == [
            "Lunchtime retail traffic from office workers",
            "Catering opportunities for office tenants",
        ]
        assert [c.issue for c in result.conflicts] == ["Delivery truck routing and timing"]

    def test_live_work_play(self, office_retail):
        components = office_retail + [
            MixedUseComponent(type="Residential", square_footage=80_000, noi=500_000, cap_rate=5.0)
        ]
        tenants = [
            RetailTenant(name="Grocer", square_footage=30_000, merchandise_type="Food", essential_service=True),
            RetailTenant(name="Night Club", square_footage=5_000, merchandise_type="Entertainment"),
        ]

        result = analyze_cross_use_interactions(components, tenants)

        descriptions = [s.description for s in result.synergies]
        assert "Convenience factor increases residential rents" in descriptions
        assert "24/7 activity creates vibrant live-work-play environment" in descriptions
        issues = [c.issue for c in result.conflicts]
        assert issues[0] == "Late-night retail noise affecting residents"
        assert "Peak parking demand overlap" in issues
        assert "Different HVAC scheduling needs" in issues

    def test_shared_amenity_cost_sharing(self, office_retail):
        amenity = SharedAmenity(name="Conference Center", accessible_to=["Office", "Residential"], cost=11_000)

        usage = analyze_cross_use_interactions(office_retail, shared_amenities=[amenity]).shared_amenities[0]

        assert usage.utilization == pytest.approx(75.0)
        assert usage.cost_per_user == pytest.approx(5_500)
        assert usage.cost_sharing["Office"] == pytest.approx(0.6 / 1.1)
        assert sum(usage.cost_sharing.values()) == pytest.approx(1.0)

    def test_no_components(self):
        assert analyze_cross_use_interactions([]) is None
