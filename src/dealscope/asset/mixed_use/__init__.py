# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Mixed-Use Asset Analytics
"""

from .analysis import (
    MARKET_CAP_RATES,
    CrossUseAnalysis,
    MixedUsePerformance,
    analyze_cross_use_interactions,
    analyze_mixed_use_performance,
)
from .component import MixedUseComponent, SharedAmenity, SharedSystems

__all__ = [
    "MixedUseComponent",
    "SharedSystems",
    "SharedAmenity",
    "MixedUsePerformance",
    "CrossUseAnalysis",
    "MARKET_CAP_RATES",
    "analyze_mixed_use_performance",
    "analyze_cross_use_interactions",
]
