# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Analysis result models.

``CalculatedMetrics`` holds one optional slot per metric; a slot is filled
only when its flag was on and the computation succeeded, otherwise
``validation_errors`` says why it is empty. ``CalculationResult`` wraps it
with the orchestrator's success flag, warnings and deal assessment.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from ..asset.industrial.analysis import ClearHeightAnalysis
from ..asset.multifamily.analysis import MultifamilyMetrics
from ..asset.registry import AssetDataValidation
from ..asset.retail.analysis import SalesPerSF
from ..core.primitives import AssessmentLevel, CamelModel, MetricName, PropertyTypeEnum


class AssetAnalysis(CamelModel):
    """
    Asset-specific analytics for the record's property type.

    Attributes:
        property_type: Type the analyzers were selected for
        available_analyses: Analyzer names registered for the type
        data_validation: Core asset field completeness
        results: Analyzer outputs keyed by the enabling switch
        skipped: Why an enabled analyzer produced nothing
    """

    property_type: PropertyTypeEnum
    available_analyses: List[str]
    data_validation: AssetDataValidation
    results: Dict[str, Any] = Field(default_factory=dict)
    skipped: Dict[str, str] = Field(default_factory=dict)


class CalculatedMetrics(CamelModel):
    """Metrics produced by one calculation."""

    # Core financial metrics (percentages as 0..100, ratios as plain numbers)
    cap_rate: Optional[float] = None
    cash_on_cash: Optional[float] = None
    dscr: Optional[float] = None
    ltv: Optional[float] = None
    irr: Optional[float] = None
    roi: Optional[float] = None
    breakeven: Optional[float] = None
    npv: Optional[float] = None
    debt_yield: Optional[float] = None
    price_per_sf: Optional[float] = None
    grm: Optional[float] = None
    price_per_unit: Optional[float] = None
    egi: Optional[float] = None
    effective_rent_psf: Optional[float] = None
    occupancy_cost_ratio: Optional[float] = None

    # Simple asset metrics
    walt: Optional[float] = None
    sales_per_sf: Optional[SalesPerSF] = None
    clear_height_analysis: Optional[ClearHeightAnalysis] = None
    industrial_metrics: Optional[ClearHeightAnalysis] = None
    revenue_per_unit: Optional[float] = None
    multifamily_metrics: Optional[MultifamilyMetrics] = None

    asset_analysis: Optional[AssetAnalysis] = None
    validation_errors: Dict[str, str] = Field(default_factory=dict)

    def get(self, metric: MetricName | str) -> Any:
        """
        Value of ``metric``, looking through the asset analysis results.

        Returns None when the metric was not produced.
        """
        metric = MetricName(metric)
        if metric.value in type(self).model_fields:
            return getattr(self, metric.value)
        if self.asset_analysis is not None:
            return self.asset_analysis.results.get(metric.value)
        return None

    def produced(self) -> List[MetricName]:
        """Metrics that hold a value, in declaration order."""
        return [metric for metric in MetricName if self.get(metric) is not None]


class MetricAssessment(CamelModel):
    metric: MetricName
    value: float
    level: AssessmentLevel


class DealAssessment(CamelModel):
    """
    Overall grade of a deal.

    Attributes:
        level: Majority grade across the scored metrics
        recommendation: One-sentence summary of the grade
        scores: Grade of each scored metric
        strong_count: Number of metrics graded strong
        moderate_count: Number graded moderate
        weak_count: Number graded weak
    """

    level: AssessmentLevel
    recommendation: str
    scores: List[MetricAssessment] = Field(default_factory=list)
    strong_count: int = 0
    moderate_count: int = 0
    weak_count: int = 0


class CalculationResult(CamelModel):
    """
    Outcome of ``validate_and_calculate``.

    ``success`` is False only when the inputs failed validation or the
    calculation raised; sanity-check failures on the results are reported
    in ``error`` alongside ``success=True``.
    """

    success: bool
    metrics: CalculatedMetrics = Field(default_factory=CalculatedMetrics)
    validation_errors: Dict[str, str] = Field(default_factory=dict)
    warnings: List[str] = Field(default_factory=list)
    error: str = ""
    assessment: Optional[DealAssessment] = None
    package_id: Optional[str] = None
    property_type: Optional[PropertyTypeEnum] = None
