# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Office Asset Analytics

Rent roll, building and market records for multi-tenant office buildings,
with tenant credit, lease economics, operations and positioning analyzers.
"""

from .analysis import (
    LeaseEconomics,
    MarketPositioning,
    TenantFinancialHealth,
    BuildingOperationsAnalysis,
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
from .market import (
    BuildingOperations,
    BuildingSystem,
    CompetitiveProperty,
    OfficeMarketData,
    OperatingExpenseItem,
)
from .tenant import OfficeTenant

__all__ = [
    # Records
    "OfficeTenant",
    "OfficeMarketData",
    "CompetitiveProperty",
    "BuildingOperations",
    "BuildingSystem",
    "OperatingExpenseItem",
    # Results
    "TenantFinancialHealth",
    "LeaseEconomics",
    "BuildingOperationsAnalysis",
    "MarketPositioning",
    # Analyzers
    "analyze_tenant_financial_health",
    "analyze_lease_economics",
    "analyze_building_operations",
    "analyze_market_positioning",
    "calculate_walt",
    # Helpers
    "get_industry_outlook",
    "get_wfh_impact",
    "calculate_real_estate_option_value",
    "calculate_space_efficiency_score",
    "determine_market_cycle",
    "calculate_retention_probability",
]
