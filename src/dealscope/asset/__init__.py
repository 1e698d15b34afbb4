# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Asset Records and Analyzers

Per-property-type records and the pure analyzers that run on them, plus the
flat ``PropertyData`` input record.
"""

from . import industrial, mixed_use, multifamily, office, retail
from .property import PropertyData

__all__ = [
    "PropertyData",
    "office",
    "retail",
    "industrial",
    "multifamily",
    "mixed_use",
]
