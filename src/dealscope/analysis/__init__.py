# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
dealscope Analysis Engine

Package catalog, input validation, flag-driven calculation, deal assessment
and the orchestrating ``validate_and_calculate`` entry point.
"""

from .api import analyze, validate_and_calculate
from .assessment import calculate_deal_assessment
from .calculator import calculate_metrics
from .flags import MetricFlags
from .packages import (
    ALL_METRICS,
    FIELD_METADATA,
    PROPERTY_PACKAGES,
    AssetAnalysisAvailability,
    CalculationPackage,
    FieldMetadata,
    MetricInfo,
    PackageRecommendation,
    get_asset_package_recommendations,
    get_available_asset_analysis,
    get_package,
    get_packages,
    get_required_fields,
)
from .results import (
    AssetAnalysis,
    CalculatedMetrics,
    CalculationResult,
    DealAssessment,
    MetricAssessment,
)
from .validation import (
    SafeCalculation,
    ValidationResult,
    batch_validate_metrics,
    safe_calculate_metric,
    validate_calculation_results,
    validate_data_for_package,
    validate_metric_calculation,
    validate_metric_requirements,
    validate_property_data,
)

__all__ = [
    # Main API functions
    "validate_and_calculate",
    "analyze",
    "calculate_metrics",
    "calculate_deal_assessment",
    # Flags and results
    "MetricFlags",
    "CalculatedMetrics",
    "AssetAnalysis",
    "CalculationResult",
    "DealAssessment",
    "MetricAssessment",
    # Catalog
    "CalculationPackage",
    "PROPERTY_PACKAGES",
    "get_packages",
    "get_package",
    "MetricInfo",
    "ALL_METRICS",
    "FieldMetadata",
    "FIELD_METADATA",
    "get_required_fields",
    "PackageRecommendation",
    "get_asset_package_recommendations",
    "AssetAnalysisAvailability",
    "get_available_asset_analysis",
    # Validation
    "ValidationResult",
    "SafeCalculation",
    "validate_property_data",
    "validate_metric_requirements",
    "validate_metric_calculation",
    "batch_validate_metrics",
    "validate_data_for_package",
    "validate_calculation_results",
    "safe_calculate_metric",
]
