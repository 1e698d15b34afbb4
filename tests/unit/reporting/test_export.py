# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit Tests for Result Export
"""

import json
from datetime import datetime, timezone

import pytest

from dealscope.analysis import CalculationResult, analyze, validate_and_calculate
from dealscope.reporting import FRAME_COLUMNS, export_result_json, result_to_frame

GENERATED_AT = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def complete_result(complete_office_data, settings):
    return validate_and_calculate("office-complete", complete_office_data, settings)


class TestExportResultJson:
    """Test suite for the JSON document."""

    def test_metadata(self, complete_result):
        document = json.loads(export_result_json(complete_result, generated_at=GENERATED_AT))

        assert document["metadata"] == {
            "generatedAt": "2025-01-01T12:00:00+00:00",
            "packageId": "office-complete",
            "propertyType": "office",
        }

    def test_camel_case_result(self, complete_result):
        result = json.loads(export_result_json(complete_result, generated_at=GENERATED_AT))["result"]

        assert result["success"] is True
        assert result["packageId"] == "office-complete"
        assert result["metrics"]["capRate"] == pytest.approx(7.0)
        assert result["metrics"]["cashOnCash"] == pytest.approx(10.0)
        assert result["assessment"]["level"] == "strong"
        assert result["assessment"]["strongCount"] == 3
        # Metrics that were not produced are left out
        assert "ltv" not in result["metrics"]

    def test_compact_output(self, complete_result):
        assert "\n" not in export_result_json(complete_result, indent=None, generated_at=GENERATED_AT)

    def test_result_without_asset_analysis(self, settings):
        result = analyze({"currentNOI": 70_000, "purchasePrice": 1_000_000}, ["capRate"], settings)

        document = json.loads(export_result_json(result, generated_at=GENERATED_AT))

        assert document["metadata"]["propertyType"] is None
        assert document["metadata"]["packageId"] is None

    def test_validation_failure_keeps_property_type(self, settings):
        result = validate_and_calculate("office-complete", {"propertyType": "office"}, settings)

        document = json.loads(export_result_json(result, generated_at=GENERATED_AT))

        assert document["result"]["success"] is False
        assert document["metadata"]["propertyType"] == "office"
        assert document["metadata"]["packageId"] == "office-complete"

    def test_failed_result(self):
        failed = CalculationResult(success=False, error="boom", validation_errors={"calculation": "boom"})

        result = json.loads(export_result_json(failed, generated_at=GENERATED_AT))["result"]

        assert result["success"] is False
        assert result["validationErrors"] == {"calculation": "boom"}


class TestResultToFrame:
    """Test suite for the tabular metric view."""

    def test_one_row_per_metric(self, complete_result):
        frame = result_to_frame(complete_result)

        assert list(frame.columns) == FRAME_COLUMNS
        assert list(frame["metric"]) == ["cap_rate", "cash_on_cash", "dscr", "irr", "breakeven"]

    def test_formatting_and_grades(self, complete_result):
        frame = result_to_frame(complete_result).set_index("metric")

        assert frame.loc["cap_rate", "label"] == "Cap Rate"
        assert frame.loc["cap_rate", "formatted"] == "7.00%"
        assert frame.loc["cap_rate", "assessment"] == "moderate"
        assert frame.loc["dscr", "formatted"] == "1.30"
        assert frame.loc["dscr", "assessment"] == "strong"
        assert frame.loc["breakeven", "value"] == pytest.approx(85.42, abs=0.01)

    def test_empty_result(self):
        frame = result_to_frame(CalculationResult(success=False))

        assert frame.empty
        assert list(frame.columns) == FRAME_COLUMNS
