# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
dealscope Core

Foundational building blocks shared by the asset analyzers, the metric
formulas and the orchestration layer.
"""

from . import primitives

__all__ = ["primitives"]
