# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Multifamily Asset Analytics

Rent roll, amenity and submarket records for apartment properties, with
revenue, operating and market position analyzers.
"""

from .analysis import (
    MultifamilyMarketPosition,
    MultifamilyMetrics,
    OperatingPerformance,
    RevenuePerformance,
    analyze_market_position,
    analyze_operating_performance,
    analyze_revenue_performance,
    calculate_amenity_score,
    calculate_multifamily_metrics,
    rent_roll_frame,
)
from .market import (
    MarketComp,
    MultifamilyExpenses,
    NeighborhoodProfile,
    PropertyAmenities,
    SubmarketData,
)
from .unit import OtherIncome, Unit, UnitConcession

__all__ = [
    "Unit",
    "UnitConcession",
    "OtherIncome",
    "PropertyAmenities",
    "MarketComp",
    "SubmarketData",
    "NeighborhoodProfile",
    "MultifamilyExpenses",
    "RevenuePerformance",
    "OperatingPerformance",
    "MultifamilyMarketPosition",
    "MultifamilyMetrics",
    "analyze_revenue_performance",
    "analyze_operating_performance",
    "analyze_market_position",
    "calculate_amenity_score",
    "calculate_multifamily_metrics",
    "rent_roll_frame",
]
