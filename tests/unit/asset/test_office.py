# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit Tests for Office Analytics

Tests WALT, tenant credit, lease economics, building operations and
market positioning.
"""

import math
from datetime import date

import pytest

from dealscope.asset.office import (
    BuildingOperations,
    BuildingSystem,
    OfficeMarketData,
    OfficeTenant,
    OperatingExpenseItem,
    analyze_building_operations,
    analyze_lease_economics,
    analyze_market_positioning,
    analyze_tenant_financial_health,
    calculate_real_estate_option_value,
    calculate_retention_probability,
    calculate_space_efficiency_score,
    calculate_walt,
    determine_market_cycle,
    get_industry_outlook,
    get_wfh_impact,
)

ANALYSIS_DATE = date(2025, 1, 1)


@pytest.fixture
def tenants():
    """A credit anchor paying 75% of rent and a speculative-grade tenant."""
    return [
        OfficeTenant(
            name="Anchor Corp",
            annual_rent=300_000,
            lease_expiration="2030-01",
            credit_rating="AAA",
            ticker="ANC",
            industry="Technology",
        ),
        OfficeTenant(
            name="Small Co",
            annual_rent=100_000,
            lease_expiration="2027-01",
            credit_rating="BB",
            industry="Retail",
        ),
    ]


class TestWalt:
    """Test suite for the weighted average lease term."""

    def test_single_tenant(self):
        tenant = OfficeTenant(name="Acme", annual_rent=100_000, lease_expiration="2030-01")
        assert calculate_walt([tenant], ANALYSIS_DATE) == pytest.approx(5.0)

    def test_rent_weighted(self, tenants):
        # (300k * 5 + 100k * 2) / 400k
        assert calculate_walt(tenants, ANALYSIS_DATE) == pytest.approx(4.25)

    def test_expired_lease_contributes_zero(self):
        tenant = OfficeTenant(name="Gone", annual_rent=50_000, lease_expiration="2020-06")
        assert calculate_walt([tenant], ANALYSIS_DATE) == 0.0

    def test_no_tenants_or_rent(self):
        assert calculate_walt([], ANALYSIS_DATE) is None
        free = OfficeTenant(name="Free", annual_rent=0, lease_expiration="2030-01")
        assert calculate_walt([free], ANALYSIS_DATE) is None


class TestTenantFinancialHealth:
    def test_credit_and_concentration(self, tenants):
        health = analyze_tenant_financial_health(tenants)

        # 100 * 0.75 + 55 * 0.25
        assert health.weighted_credit_score == pytest.approx(88.75)
        assert health.investment_grade_percentage == pytest.approx(75.0)
        assert health.public_company_percentage == pytest.approx(75.0)
        assert health.herfindahl_index == pytest.approx(0.625)
        assert health.top_tenant_exposure == pytest.approx(75.0)

    def test_watch_list(self, tenants):
        health = analyze_tenant_financial_health(tenants)
        assert [entry.tenant for entry in health.watch_list] == ["Small Co"]
        assert "Speculative-grade credit (BB)" in health.watch_list[0].reasons

    def test_industry_concentration_sorted(self, tenants):
        health = analyze_tenant_financial_health(tenants)
        assert [i.industry for i in health.industry_concentration] == ["Technology", "Retail"]

    def test_no_tenants(self):
        assert analyze_tenant_financial_health([]) is None


class TestLeaseEconomics:
    def test_above_market_lease_has_positive_value(self):
        tenant = OfficeTenant(
            name="Acme",
            annual_rent=400_000,
            rentable_sf=10_000,
            lease_expiration="2030-01",
            escalation_type="Fixed",
            escalation_rate=3,
        )
        market = OfficeMarketData(vacancy=8, market_rent=35)

        economics = analyze_lease_economics([tenant], market, ANALYSIS_DATE, discount_rate=0.08)

        valuation = economics.lease_valuation[0]
        assert valuation.contractual_rent == pytest.approx(40.0)
        assert valuation.remaining_term == pytest.approx(5.0)
        # $5/SF over 10,000 SF for 5 years at 8%
        assert valuation.lease_value == pytest.approx(5 * 10_000 * 3.99271, rel=1e-4)
        assert economics.escalation_analysis.fixed_increases == pytest.approx(100.0)
        assert economics.escalation_analysis.cpi_exposure == 0.0

    def test_no_tenants(self):
        assert analyze_lease_economics([], None, ANALYSIS_DATE) is None


class TestBuildingOperations:
    def test_scores_systems_and_expenses(self):
        building = BuildingOperations(
            systems=[
                BuildingSystem(name="Roof", age=5, useful_life=25),
                BuildingSystem(name="HVAC", age=15, useful_life=20),
            ],
            expenses=[
                OperatingExpenseItem(category="Taxes", annual=100_000, controllable=False),
                OperatingExpenseItem(category="Janitorial", annual=50_000),
            ],
            energy_star_score=80,
            recycling_rate=40,
        )

        analysis = analyze_building_operations(building, 50_000)

        assert analysis.operational_efficiency.overall_score == pytest.approx((80 + 50 + 40 + 60) / 4)
        assert [s.system for s in analysis.systems_condition] == ["HVAC", "Roof"]
        assert analysis.systems_condition[0].remaining_life == 5
        assert analysis.expense_analysis.expense_psf == pytest.approx(3.0)
        assert analysis.expense_analysis.controllable == 50_000
        assert analysis.expense_analysis.non_controllable == 100_000

    def test_no_building_data(self):
        assert analyze_building_operations(None, 50_000) is None


class TestMarketPositioning:
    def test_sole_property_leads_market(self):
        market = OfficeMarketData(vacancy=8, market_rent=35)

        positioning = analyze_market_positioning(95, 40, market)

        assert positioning.market_cycle == "Recovery"
        assert positioning.market_position.overall_rank == 1
        assert positioning.market_position.classification == "Market Leader"
        assert "Achieves premium rents" in positioning.market_position.key_differentiators
        assert positioning.pricing_analysis.pricing_power == "Strong"
        assert positioning.pricing_analysis.target_rent == pytest.approx(36.75)

    def test_ranked_against_competitive_set(self):
        market = OfficeMarketData(
            vacancy=12,
            market_rent=30,
            competitive_properties=[
                {"name": "Tower One", "occupancy": 98, "askingRent": 36},
                {"name": "Plaza", "occupancy": 70, "askingRent": 24},
            ],
        )

        positioning = analyze_market_positioning(85, 30, market)

        assert positioning.market_position.overall_rank == 2
        assert positioning.market_position.total_properties == 3
        assert positioning.market_position.percentile == pytest.approx(50.0)
        assert positioning.pricing_analysis.pricing_power == "Moderate"

    def test_requires_market_and_rent(self):
        assert analyze_market_positioning(95, 40, None) is None
        assert analyze_market_positioning(95, 0, OfficeMarketData(vacancy=8, market_rent=35)) is None

    @pytest.mark.parametrize(
        "vacancy, growth, supply, absorption, expected",
        [
            (18, -1, 0, 0, "Recession"),
            (12, 1, 300_000, 100_000, "Hypersupply"),
            (8, 4, 0, 100_000, "Expansion"),
            (12, 1, 100_000, 100_000, "Recovery"),
        ],
    )
    def test_market_cycle(self, vacancy, growth, supply, absorption, expected):
        assert determine_market_cycle(vacancy, growth, supply, absorption) == expected


class TestRetentionProbability:
    def test_below_market_high_grade_tenant_stays(self):
        tenant = OfficeTenant(
            name="Acme", annual_rent=300_000, rentable_sf=10_000, lease_expiration="2030-01", credit_rating="A"
        )
        # $30/SF vs $40 market: 0.7 + 0.15 + 0.1
        assert calculate_retention_probability(tenant, 40) == pytest.approx(0.95)

    def test_unrated_tenant_at_market(self):
        tenant = OfficeTenant(name="Acme", annual_rent=400_000, rentable_sf=10_000, lease_expiration="2030-01")
        assert calculate_retention_probability(tenant, 40) == pytest.approx(0.7)


class TestOfficeHelpers:
    def test_industry_lookups(self):
        assert get_industry_outlook("Technology") == "Growing"
        assert get_industry_outlook("Media") == "Declining"
        assert get_industry_outlook(None) == "Stable"
        assert get_wfh_impact("Technology") == "High"
        assert get_wfh_impact("Agriculture") == "Medium"

    def test_option_value(self):
        # $200k intrinsic plus 0.4 x 0.15 x $1M x sqrt(4) time value
        value = calculate_real_estate_option_value(1_000_000, 800_000, 4)
        assert value == pytest.approx(320_000 * math.exp(-0.12))

    def test_expired_out_of_the_money_option(self):
        assert calculate_real_estate_option_value(1_000_000, 1_200_000, 0) == 0.0

    @pytest.mark.parametrize(
        "usable, occupancy, expected",
        [(87_000, 96, 100), (80_000, 88, 65), (70_000, 80, 30)],
    )
    def test_space_efficiency(self, usable, occupancy, expected):
        assert calculate_space_efficiency_score(usable, 100_000, occupancy) == pytest.approx(expected)
