# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Industrial Asset Analytics

Building specification, location and tenant records for industrial
buildings, with functionality and location/logistics analyzers.
"""

from .analysis import (
    TYPE_REQUIREMENTS,
    BuildingFunctionality,
    ClearHeightAnalysis,
    LocationLogistics,
    analyze_building_functionality,
    analyze_location_logistics,
    calculate_industrial_metrics,
    clear_height_category,
    get_type_requirements,
)
from .specs import BuildingSpecs, LocationMetrics
from .tenant import IndustrialTenant

__all__ = [
    "BuildingSpecs",
    "LocationMetrics",
    "IndustrialTenant",
    "BuildingFunctionality",
    "LocationLogistics",
    "ClearHeightAnalysis",
    "TYPE_REQUIREMENTS",
    "analyze_building_functionality",
    "analyze_location_logistics",
    "calculate_industrial_metrics",
    "clear_height_category",
    "get_type_requirements",
]
