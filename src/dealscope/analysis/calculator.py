# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Flag-driven metric calculation.

``calculate_metrics`` walks the enabled flags, computes each formula metric
in isolation and runs the asset analyzers of the record's property type. A
flag that produces nothing always leaves an explanation in
``validation_errors``, so every requested metric is either present or
accounted for.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional, Union

from ..asset.property import PropertyData
from ..asset.registry import (
    get_available_analyses,
    is_asset_analysis,
    run_asset_analyses,
    validate_asset_data_requirements,
)
from ..core.primitives import GlobalSettings, MetricName
from ..valuation import (
    METRIC_LABELS,
    annual_debt_service,
    calculate_metric,
    get_metric_validation_error,
    has_required_data,
)
from .flags import MetricFlags
from .results import AssetAnalysis, CalculatedMetrics
from .validation import safe_calculate_metric

logger = logging.getLogger(__name__)


def _empty_reason(metric: MetricName, data: PropertyData) -> str:
    label = METRIC_LABELS.get(metric, metric.camel)
    if metric in (MetricName.DSCR, MetricName.BREAKEVEN):
        debt_service = annual_debt_service(data)
        if debt_service is None:
            return f"{label} calculation requires a positive Loan Term and a non-negative Interest Rate"
        if debt_service == 0:
            return f"{label} calculation requires a non-zero annual debt service"
    return f"{label} could not be calculated from the provided data"


def calculate_metrics(
    data: PropertyData,
    flags: Union[MetricFlags, Iterable[Union[MetricName, str]]],
    settings: Optional[GlobalSettings] = None,
) -> CalculatedMetrics:
    """
    Compute every enabled metric for ``data``.

    Args:
        data: Property record
        flags: ``MetricFlags`` or an iterable of metric names to enable
        settings: Analysis settings; defaults to ``GlobalSettings()``

    Returns:
        CalculatedMetrics with a value for each metric that succeeded and a
        ``validation_errors`` entry, keyed by metric name, for each that did
        not
    """
    settings = settings or GlobalSettings()
    if not isinstance(flags, MetricFlags):
        flags = MetricFlags.from_metrics(flags)
    enabled = flags.enabled()

    values: Dict[str, Any] = {}
    errors: Dict[str, str] = {}

    for metric in enabled:
        if is_asset_analysis(metric):
            continue
        if not has_required_data(metric, data):
            errors[metric.value] = get_metric_validation_error(metric, data) or "Validation error"
            continue

        outcome = safe_calculate_metric(
            METRIC_LABELS.get(metric, metric.camel),
            lambda record: calculate_metric(metric, record, settings),
            data,
        )
        if not outcome.success:
            errors[metric.value] = outcome.error
        elif outcome.result is None:
            errors[metric.value] = _empty_reason(metric, data)
        else:
            values[metric.value] = outcome.result

    asset_analysis = None
    if data.property_type is not None:
        run = run_asset_analyses(data, enabled, settings)
        asset_analysis = AssetAnalysis(
            property_type=data.property_type,
            available_analyses=get_available_analyses(data.property_type),
            data_validation=validate_asset_data_requirements(data, data.property_type),
            results=run.results,
            skipped=run.skipped,
        )
        errors.update(run.skipped)
    else:
        for metric in enabled:
            if is_asset_analysis(metric):
                errors[metric.value] = "Property type is required for asset analysis"

    if errors:
        logger.debug("%d of %d enabled metrics not produced", len(errors), len(enabled))
    return CalculatedMetrics(**values, asset_analysis=asset_analysis, validation_errors=errors)
