# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

import importlib
import logging

"""
dealscope - Commercial Real Estate Investment Analysis Engine

Maps a property record and a set of enabled metrics to calculated metrics,
asset-specific analytics, sanity checks and an overall deal assessment.

Key Entry Points:
- dealscope.analysis.validate_and_calculate() - Run a catalog package end to end
- dealscope.analysis.analyze() - Ad-hoc metrics without a package
- dealscope.valuation.* - Investment metric formulas
- dealscope.asset.* - Office, retail, industrial, multifamily and mixed-use analytics

Example Usage:
    ```python
    from dealscope.analysis import validate_and_calculate

    result = validate_and_calculate(
        "office-basic",
        {
            "propertyType": "office",
            "purchasePrice": 1_000_000,
            "currentNOI": 70_000,
            "totalInvestment": 250_000,
            "annualCashFlow": 25_000,
        },
    )
    print(result.metrics.cap_rate)  # 7.0
    ```
"""

# Libraries leave handler configuration to the application
logging.getLogger(__name__).addHandler(logging.NullHandler())


# Public API surface (lazy-loaded on first attribute access)
__all__ = [  # noqa: F822 - lazy loading
    "analysis",
    "asset",
    "core",
    "reporting",
    "valuation",
]


_LAZY_MODULES = {
    "analysis": "dealscope.analysis",
    "asset": "dealscope.asset",
    "core": "dealscope.core",
    "reporting": "dealscope.reporting",
    "valuation": "dealscope.valuation",
}


def __getattr__(name: str):
    module_path = _LAZY_MODULES.get(name)
    if module_path is None:
        raise AttributeError(f"module 'dealscope' has no attribute '{name}'")
    module = importlib.import_module(module_path)
    globals()[name] = module
    return module
