# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Retail Asset Analytics

Tenant, sales and trade area records for shopping centers, with sales
performance, co-tenancy, trade area and percentage rent analyzers.
"""

from .analysis import (
    CoTenancyAnalysis,
    PercentageRentAnalysis,
    SalesPerformance,
    SalesPerSF,
    TradeAreaAnalysis,
    analyze_co_tenancy,
    analyze_percentage_rent,
    analyze_sales_performance,
    analyze_trade_area,
    calculate_sales_per_sf,
    score_tenant_health,
)
from .tenant import CoTenancyClause, PercentageRentTerms, RetailTenant, SalesRecord
from .trade_area import RetailCompetitor, TradeArea, TrafficCount

__all__ = [
    "RetailTenant",
    "PercentageRentTerms",
    "CoTenancyClause",
    "SalesRecord",
    "TradeArea",
    "RetailCompetitor",
    "TrafficCount",
    "SalesPerformance",
    "CoTenancyAnalysis",
    "TradeAreaAnalysis",
    "PercentageRentAnalysis",
    "SalesPerSF",
    "analyze_sales_performance",
    "analyze_co_tenancy",
    "analyze_trade_area",
    "analyze_percentage_rent",
    "calculate_sales_per_sf",
    "score_tenant_health",
]
