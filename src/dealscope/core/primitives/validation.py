# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Numeric guards shared by the formula and validation layers.

Form input arrives as numbers, numeric strings or blanks; these helpers
decide what counts as a usable value without raising.
"""

from __future__ import annotations

import math
from typing import Any, Optional


def is_valid_number(value: Any) -> bool:
    """True for a finite int or float (booleans excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def safe_to_number(value: Any) -> float:
    """
    Coerce form input to a finite number.

    Numbers pass through, numeric strings (commas and ``$`` allowed) are
    parsed, and anything else becomes 0.
    """
    if is_valid_number(value):
        return float(value)
    if isinstance(value, str):
        cleaned = value.replace(",", "").replace("$", "").strip()
        try:
            parsed = float(cleaned)
        except ValueError:
            return 0.0
        return parsed if math.isfinite(parsed) else 0.0
    return 0.0


def is_valid_percentage(value: Any) -> bool:
    """True for a valid number between 0 and 100 inclusive."""
    return is_valid_number(value) and 0 <= value <= 100


def finite_or_none(value: Optional[float]) -> Optional[float]:
    """Return ``value`` if it is a finite number, else None."""
    if value is None or not is_valid_number(value):
        return None
    return float(value)


def is_present(value: Any) -> bool:
    """A field counts as provided when it is neither None nor blank."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) > 0
    return True
