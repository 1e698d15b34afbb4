# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
dealscope Valuation - Investment Metric Formulas

Cap rate, cash-on-cash, debt coverage, leverage, return approximations and
per-unit pricing, plus the requirement table that explains which inputs a
metric is missing.
"""

from .metrics import (
    METRIC_CALCULATORS,
    METRIC_KINDS,
    METRIC_LABELS,
    METRIC_REQUIREMENTS,
    PropertyMetrics,
    Requirement,
    annual_debt_service,
    calculate_metric,
    format_metric_value,
    get_metric_validation_error,
    has_required_data,
    register_metric,
    supported_metrics,
)

__all__ = [
    # Strict formulas
    "PropertyMetrics",
    # Record-level calculators
    "calculate_metric",
    "annual_debt_service",
    "register_metric",
    "supported_metrics",
    "METRIC_CALCULATORS",
    # Requirements and presentation
    "Requirement",
    "METRIC_REQUIREMENTS",
    "METRIC_LABELS",
    "METRIC_KINDS",
    "has_required_data",
    "get_metric_validation_error",
    "format_metric_value",
]
