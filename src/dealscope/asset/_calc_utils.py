# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Calculation helpers shared by the asset analyzers.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, TypeVar

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta
from pyxirr import pv

T = TypeVar("T")


def coerce_date(value: Any) -> Any:
    """
    Parse lease and sales dates given as ``YYYY-MM`` or ISO strings.

    The form collects lease expirations as ``YYYY-MM``; those resolve to the
    first day of the month. Non-string values are returned unchanged for
    pydantic to validate.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and value.strip():
        return isoparse(value.strip()).date()
    return value


def years_between(start: date, end: date) -> float:
    """Fractional years from ``start`` to ``end``; 0 when ``end`` has passed."""
    if end <= start:
        return 0.0
    delta = relativedelta(end, start)
    return delta.years + delta.months / 12 + delta.days / 365.25


def months_between(start: date, end: date) -> float:
    """Fractional months from ``start`` to ``end``; negative when ``end`` has passed."""
    if end < start:
        return -months_between(end, start)
    delta = relativedelta(end, start)
    return delta.years * 12 + delta.months + delta.days / 30.4375


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning ``default`` for a zero or non-finite denominator."""
    if not denominator or not math.isfinite(denominator):
        return default
    return numerator / denominator


def annuity_factor(rate: float, years: float) -> float:
    """Present value of 1 per year for ``years`` at ``rate`` (decimal)."""
    if years <= 0:
        return 0.0
    return pv(rate, years, -1)


def group_by(items: Iterable[T], key) -> Dict[Any, List[T]]:
    """Group items by ``key(item)`` preserving first-seen order."""
    groups: Dict[Any, List[T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def mean(values: Iterable[float]) -> Optional[float]:
    values = list(values)
    if not values:
        return None
    return sum(values) / len(values)
