# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Deal assessment.

Grades the return and coverage metrics against ``AssessmentThresholds`` and
rolls the grades up into one overall level by majority.
"""

from __future__ import annotations

from collections import Counter
from typing import Optional

from ..core.primitives import (
    AssessmentLevel,
    AssessmentThresholds,
    MetricName,
    MetricThreshold,
    is_valid_number,
)
from .flags import MetricFlags
from .results import CalculatedMetrics, DealAssessment, MetricAssessment

RECOMMENDATIONS = {
    AssessmentLevel.STRONG: "This deal shows excellent potential with multiple positive metrics.",
    AssessmentLevel.MODERATE: "This deal shows good potential. Consider negotiating better terms.",
    AssessmentLevel.WEAK: "This deal shows moderate potential with some areas of concern.",
    AssessmentLevel.INSUFFICIENT: "This deal shows several areas of concern. Consider passing or renegotiating.",
}

NO_METRICS_RECOMMENDATION = "Please enable metrics to get an assessment."

# Metrics that are graded, in scoring order
SCORED_METRICS = (
    MetricName.CAP_RATE,
    MetricName.CASH_ON_CASH,
    MetricName.DSCR,
    MetricName.IRR,
    MetricName.ROI,
    MetricName.BREAKEVEN,
)


def grade(value: float, threshold: MetricThreshold) -> AssessmentLevel:
    """Grade one value against its strong/moderate cut-offs."""
    if threshold.higher_is_better:
        if value >= threshold.strong:
            return AssessmentLevel.STRONG
        if value >= threshold.moderate:
            return AssessmentLevel.MODERATE
        return AssessmentLevel.WEAK
    if value <= threshold.strong:
        return AssessmentLevel.STRONG
    if value <= threshold.moderate:
        return AssessmentLevel.MODERATE
    return AssessmentLevel.WEAK


def calculate_deal_assessment(
    metrics: CalculatedMetrics,
    flags: MetricFlags,
    thresholds: Optional[AssessmentThresholds] = None,
) -> DealAssessment:
    """
    Overall grade of a calculated deal.

    Only metrics that are flagged and came out positive are graded. Strong
    wins only with a strict majority; moderate wins ties with strong; weak
    needs a strict majority too. Anything else, including a calculation in
    which nothing could be graded, is insufficient.
    """
    thresholds = thresholds or AssessmentThresholds()
    if not flags.enabled():
        return DealAssessment(
            level=AssessmentLevel.INSUFFICIENT, recommendation=NO_METRICS_RECOMMENDATION
        )

    scores = []
    for metric in SCORED_METRICS:
        value = metrics.get(metric)
        if not flags.is_enabled(metric) or not is_valid_number(value) or value <= 0:
            continue
        level = grade(value, getattr(thresholds, metric.value))
        scores.append(MetricAssessment(metric=metric, value=value, level=level))

    counts = Counter(score.level for score in scores)
    strong = counts[AssessmentLevel.STRONG]
    moderate = counts[AssessmentLevel.MODERATE]
    weak = counts[AssessmentLevel.WEAK]

    if not scores:
        level = AssessmentLevel.INSUFFICIENT
    elif strong > moderate and strong > weak:
        level = AssessmentLevel.STRONG
    elif moderate >= strong and moderate >= weak:
        level = AssessmentLevel.MODERATE
    elif weak > strong and weak > moderate:
        level = AssessmentLevel.WEAK
    else:
        level = AssessmentLevel.INSUFFICIENT

    return DealAssessment(
        level=level,
        recommendation=RECOMMENDATIONS[level],
        scores=scores,
        strong_count=strong,
        moderate_count=moderate,
        weak_count=weak,
    )
