# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Analysis API

Public entry points: ``validate_and_calculate`` runs a catalog package end
to end, ``analyze`` runs an ad-hoc set of metrics without a package.
Neither raises for bad input; problems are reported in the returned
``CalculationResult``.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from pydantic import ValidationError

from ..asset.property import PropertyData
from ..core.primitives import GlobalSettings, MetricName
from ..valuation import has_required_data, supported_metrics
from .assessment import calculate_deal_assessment
from .calculator import calculate_metrics
from .flags import MetricFlags
from .packages import get_package
from .results import CalculationResult
from .validation import validate_calculation_results, validate_data_for_package

logger = logging.getLogger(__name__)


def _as_property_data(data: Union[PropertyData, Mapping[str, Any]]) -> PropertyData:
    if isinstance(data, PropertyData):
        return data
    return PropertyData.model_validate(data)


def _finish(
    data: PropertyData,
    flags: MetricFlags,
    settings: GlobalSettings,
    package_warnings: Iterable[str] = (),
    package_id: Optional[str] = None,
) -> CalculationResult:
    metrics = calculate_metrics(data, flags, settings)
    checks = validate_calculation_results(metrics, settings.sanity)
    return CalculationResult(
        success=True,
        metrics=metrics,
        validation_errors=dict(metrics.validation_errors),
        warnings=[*package_warnings, *checks.warnings],
        error=", ".join(checks.errors),
        assessment=calculate_deal_assessment(metrics, flags, settings.assessment),
        package_id=package_id,
        property_type=data.property_type,
    )


def _failure(message: str, package_id: Optional[str] = None) -> CalculationResult:
    return CalculationResult(
        success=False,
        validation_errors={"calculation": message},
        error=message,
        package_id=package_id,
    )


def validate_and_calculate(
    package_id: str,
    data: Union[PropertyData, Mapping[str, Any]],
    settings: Optional[GlobalSettings] = None,
) -> CalculationResult:
    """
    Validate ``data`` for a package and calculate its metrics.

    Workflow:
      1) Resolve the package for the record's property type
      2) Validate the record, the package's required fields and its metrics
      3) Switch on the package's metrics
      4) Calculate each metric in isolation, then run the asset analyzers
      5) Sanity-check the results and grade the deal

    Args:
        package_id: Catalog id, e.g. ``office-complete``
        data: ``PropertyData`` or its camelCase JSON form
        settings: Analysis settings; defaults to ``GlobalSettings()``

    Returns:
        CalculationResult. On validation failure ``success`` is False, the
        problems are listed as ``validation_0``, ``validation_1``... and
        ``error`` reads "Data validation failed: ...". Sanity-check errors on
        the results are joined into ``error`` while ``success`` stays True.
    """
    settings = settings or GlobalSettings()
    try:
        data = _as_property_data(data)

        # Step 1-2: package lookup and input validation
        validation = validate_data_for_package(package_id, data, settings.sanity)
        if not validation.is_valid:
            return CalculationResult(
                success=False,
                validation_errors={f"validation_{i}": e for i, e in enumerate(validation.errors)},
                warnings=validation.warnings,
                error=f"Data validation failed: {', '.join(validation.errors)}",
                package_id=package_id,
                property_type=data.property_type,
            )

        # Step 3: flags from the package
        package = get_package(package_id, data.property_type)
        flags = MetricFlags.from_metrics(package.included_metrics)

        # Step 4-5: calculate and check
        return _finish(data, flags, settings, validation.warnings, package_id)

    except ValidationError as e:
        logger.info("Rejected malformed property record: %s", e.error_count())
        return _failure(str(e), package_id)
    except Exception as e:
        logger.exception("Error in validate_and_calculate for package %s", package_id)
        return _failure(str(e) or "Unknown error occurred during calculation", package_id)


def analyze(
    data: Union[PropertyData, Mapping[str, Any]],
    metrics: Optional[Union[MetricFlags, Iterable[Union[MetricName, str]]]] = None,
    settings: Optional[GlobalSettings] = None,
) -> CalculationResult:
    """
    Calculate an ad-hoc set of metrics without a package.

    The stand-alone calculators (cap rate, cash-on-cash, GRM, price per SF)
    use this entry point. With ``metrics`` omitted, every metric whose
    inputs ``data`` provides is switched on.

    Args:
        data: ``PropertyData`` or its camelCase JSON form
        metrics: ``MetricFlags`` or metric names to enable
        settings: Analysis settings; defaults to ``GlobalSettings()``

    Returns:
        CalculationResult without input validation; sanity-check findings
        are reported as for ``validate_and_calculate``
    """
    settings = settings or GlobalSettings()
    try:
        data = _as_property_data(data)
        if metrics is None:
            flags = MetricFlags.from_metrics(
                metric for metric in supported_metrics() if has_required_data(metric, data)
            )
        elif isinstance(metrics, MetricFlags):
            flags = metrics
        else:
            flags = MetricFlags.from_metrics(metrics)
        return _finish(data, flags, settings)

    except ValidationError as e:
        logger.info("Rejected malformed property record: %s", e.error_count())
        return _failure(str(e))
    except Exception as e:
        logger.exception("Error in analyze")
        return _failure(str(e) or "Unknown error occurred during calculation")
