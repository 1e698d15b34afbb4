# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Result Export

Serializes a ``CalculationResult`` to the camelCase JSON the web form
consumes, and flattens its numeric metrics into a DataFrame for tabular
review.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import pandas as pd

from ..analysis.results import CalculationResult
from ..core.primitives import MetricName, is_valid_number
from ..valuation import METRIC_KINDS, METRIC_LABELS, format_metric_value

FRAME_COLUMNS = ["metric", "label", "value", "formatted", "assessment"]


def export_result_json(
    result: CalculationResult,
    indent: Optional[int] = 2,
    generated_at: Optional[datetime] = None,
) -> str:
    """
    JSON document of ``result`` with camelCase keys and a metadata block.

    Args:
        result: Outcome of ``validate_and_calculate`` or ``analyze``
        indent: ``json.dumps`` indentation; None for compact output
        generated_at: Timestamp recorded in the metadata; defaults to now (UTC)

    Returns:
        JSON string with ``metadata`` (generatedAt, packageId, propertyType)
        and ``result`` members
    """
    generated_at = generated_at or datetime.now(timezone.utc)
    document: Dict[str, Any] = {
        "metadata": {
            "generatedAt": generated_at.isoformat(),
            "packageId": result.package_id,
            "propertyType": result.property_type.value if result.property_type else None,
        },
        "result": result.model_dump(mode="json", by_alias=True, exclude_none=True),
    }
    return json.dumps(document, indent=indent)


def result_to_frame(result: CalculationResult) -> pd.DataFrame:
    """
    One row per numeric metric the calculation produced.

    Columns are ``metric`` (snake_case name), ``label``, ``value``,
    ``formatted`` and ``assessment`` (the grade when the metric was scored).
    Structured asset results are left out.
    """
    grades = {}
    if result.assessment is not None:
        grades = {score.metric: score.level.value for score in result.assessment.scores}

    rows = []
    for metric in MetricName:
        value = result.metrics.get(metric)
        if not is_valid_number(value):
            continue
        kind = METRIC_KINDS.get(metric)
        rows.append(
            {
                "metric": metric.value,
                "label": METRIC_LABELS.get(metric, metric.camel),
                "value": float(value),
                "formatted": format_metric_value(value, kind) if kind else str(value),
                "assessment": grades.get(metric),
            }
        )
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)
