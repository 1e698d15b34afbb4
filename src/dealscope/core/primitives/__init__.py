# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Core Primitives

Base model, enumerations, settings and numeric guards shared by every
dealscope module.
"""

from .enums import (
    AssessmentLevel,
    ComponentTypeEnum,
    CreditRating,
    FieldKind,
    IndustrialTypeEnum,
    MetricCategory,
    MetricKind,
    MetricName,
    PackageTier,
    PropertyTypeEnum,
    RetailCenterTypeEnum,
    RiskLevel,
)
from .model import CamelModel, Model, to_camel_alias
from .settings import (
    AssessmentThresholds,
    CalculationSettings,
    GlobalSettings,
    MetricThreshold,
    SanityThresholds,
)
from .types import (
    FloatBetween0And1,
    FloatBetween0And100,
    PositiveFloat,
    PositiveInt,
    Score,
)
from .validation import (
    finite_or_none,
    is_present,
    is_valid_number,
    is_valid_percentage,
    safe_to_number,
)

__all__ = [
    # Models
    "Model",
    "CamelModel",
    "to_camel_alias",
    # Settings
    "GlobalSettings",
    "CalculationSettings",
    "SanityThresholds",
    "AssessmentThresholds",
    "MetricThreshold",
    # Enums
    "AssessmentLevel",
    "ComponentTypeEnum",
    "CreditRating",
    "FieldKind",
    "IndustrialTypeEnum",
    "MetricCategory",
    "MetricKind",
    "MetricName",
    "PackageTier",
    "PropertyTypeEnum",
    "RetailCenterTypeEnum",
    "RiskLevel",
    # Types
    "PositiveFloat",
    "PositiveInt",
    "FloatBetween0And1",
    "FloatBetween0And100",
    "Score",
    # Validation
    "is_valid_number",
    "is_valid_percentage",
    "is_present",
    "finite_or_none",
    "safe_to_number",
]
