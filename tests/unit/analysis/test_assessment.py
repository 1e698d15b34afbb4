# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit Tests for Deal Assessment
"""

import math

import pytest

from dealscope.analysis import CalculatedMetrics, MetricFlags, calculate_deal_assessment
from dealscope.analysis.assessment import NO_METRICS_RECOMMENDATION, RECOMMENDATIONS, grade
from dealscope.core.primitives import (
    AssessmentLevel,
    AssessmentThresholds,
    MetricName,
    MetricThreshold,
)


def assess(flags=None, thresholds=None, **values):
    metrics = CalculatedMetrics(**values)
    if flags is None:
        flags = list(values)
    return calculate_deal_assessment(metrics, MetricFlags.from_metrics(flags), thresholds)


class TestGrade:
    @pytest.mark.parametrize(
        "value, expected",
        [(8.0, AssessmentLevel.STRONG), (7.99, AssessmentLevel.MODERATE), (6.0, AssessmentLevel.MODERATE), (5.9, AssessmentLevel.WEAK)],
    )
    def test_higher_is_better(self, value, expected):
        assert grade(value, AssessmentThresholds().cap_rate) is expected

    @pytest.mark.parametrize(
        "value, expected",
        [(80.0, AssessmentLevel.STRONG), (85.0, AssessmentLevel.STRONG), (88.0, AssessmentLevel.MODERATE), (95.0, AssessmentLevel.WEAK)],
    )
    def test_breakeven_lower_is_better(self, value, expected):
        assert grade(value, AssessmentThresholds().breakeven) is expected


class TestCalculateDealAssessment:
    """Test suite for the majority roll-up."""

    def test_no_flags(self):
        assessment = calculate_deal_assessment(CalculatedMetrics(cap_rate=9.0), MetricFlags())

        assert assessment.level is AssessmentLevel.INSUFFICIENT
        assert assessment.recommendation == NO_METRICS_RECOMMENDATION
        assert assessment.scores == []

    def test_strong_majority(self):
        assessment = assess(cap_rate=9.0, cash_on_cash=10.0, dscr=1.0)

        assert assessment.level is AssessmentLevel.STRONG
        assert assessment.recommendation == RECOMMENDATIONS[AssessmentLevel.STRONG]
        assert (assessment.strong_count, assessment.moderate_count, assessment.weak_count) == (2, 0, 1)

    def test_moderate_wins_tie_with_strong(self):
        assert assess(cap_rate=9.0, cash_on_cash=7.0).level is AssessmentLevel.MODERATE

    def test_weak_majority(self):
        assessment = assess(cap_rate=3.0, cash_on_cash=2.0, dscr=1.3)
        assert assessment.level is AssessmentLevel.WEAK
        assert assessment.recommendation == "This deal shows moderate potential with some areas of concern."

    def test_strong_weak_tie_is_insufficient(self):
        assessment = assess(cap_rate=9.0, cash_on_cash=2.0)
        assert assessment.level is AssessmentLevel.INSUFFICIENT
        assert assessment.recommendation == RECOMMENDATIONS[AssessmentLevel.INSUFFICIENT]

    def test_unflagged_metrics_are_ignored(self):
        assessment = assess(flags=["cap_rate"], cap_rate=9.0, cash_on_cash=2.0)

        assert assessment.level is AssessmentLevel.STRONG
        assert [score.metric for score in assessment.scores] == [MetricName.CAP_RATE]

    @pytest.mark.parametrize("value", [0.0, -4.0, math.nan, math.inf])
    def test_unusable_values_are_not_graded(self, value):
        assessment = assess(cap_rate=value)

        assert assessment.scores == []
        assert assessment.level is AssessmentLevel.INSUFFICIENT
        assert assessment.recommendation == (
            "This deal shows several areas of concern. Consider passing or renegotiating."
        )

    def test_flagged_but_missing_is_not_graded(self):
        assessment = assess(flags=["cap_rate", "irr"], cap_rate=7.0)
        assert [score.metric for score in assessment.scores] == [MetricName.CAP_RATE]
        assert assessment.level is AssessmentLevel.MODERATE

    def test_scores_follow_scoring_order(self):
        assessment = assess(breakeven=80.0, roi=9.0, cap_rate=7.0)
        assert [score.metric for score in assessment.scores] == [
            MetricName.CAP_RATE,
            MetricName.ROI,
            MetricName.BREAKEVEN,
        ]

    def test_custom_thresholds(self):
        thresholds = AssessmentThresholds(cap_rate=MetricThreshold(strong=6.5, moderate=5.0))

        assessment = assess(thresholds=thresholds, cap_rate=7.0)

        assert assessment.level is AssessmentLevel.STRONG
        assert assessment.scores[0].level is AssessmentLevel.STRONG
