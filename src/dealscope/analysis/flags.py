# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Metric switches.

``MetricFlags`` carries one boolean per ``MetricName``; a calculation
produces exactly the metrics whose flag is on.
"""

from __future__ import annotations

from typing import Iterable, List

from pydantic import AliasChoices, Field

from ..core.primitives import CamelModel, MetricName


class MetricFlags(CamelModel):
    """
    Which metrics and analyses to produce. Every flag defaults to off.

    The JSON form posts camelCase keys (``capRate``, ``pricePerSF``);
    ``simpleWalt`` is accepted as a synonym of ``walt``.
    """

    # Core financial metrics
    cap_rate: bool = False
    cash_on_cash: bool = False
    dscr: bool = False
    ltv: bool = False
    irr: bool = False
    roi: bool = False
    breakeven: bool = False
    npv: bool = False
    debt_yield: bool = False
    price_per_sf: bool = False
    grm: bool = False
    price_per_unit: bool = False
    egi: bool = False
    effective_rent_psf: bool = False
    occupancy_cost_ratio: bool = False

    # Simple asset metrics
    walt: bool = Field(default=False, validation_alias=AliasChoices("walt", "simpleWalt"))
    sales_per_sf: bool = False
    clear_height_analysis: bool = False
    industrial_metrics: bool = False
    revenue_per_unit: bool = False
    multifamily_metrics: bool = False

    # Office analyses
    tenant_financial_health: bool = False
    lease_economics: bool = False
    building_operations: bool = False
    market_positioning: bool = False

    # Retail analyses
    tenant_health: bool = False
    co_tenancy_risk: bool = False
    trade_area_analysis: bool = False
    percentage_rent: bool = False

    # Industrial analyses
    functional_score: bool = False
    location_score: bool = False

    # Multifamily analyses
    revenue_metrics: bool = False
    operating_performance: bool = False
    market_position: bool = False

    # Mixed-use analyses
    mixed_use_performance: bool = False
    cross_use_interactions: bool = False

    @classmethod
    def from_metrics(cls, metrics: Iterable[MetricName | str]) -> "MetricFlags":
        """Flags with exactly ``metrics`` switched on (camelCase names accepted)."""
        return cls(**{MetricName(m).value: True for m in metrics})

    def enabled(self) -> List[MetricName]:
        """Switched-on metrics, in declaration order."""
        return [name for name in MetricName if getattr(self, name.value)]

    def is_enabled(self, metric: MetricName | str) -> bool:
        return getattr(self, MetricName(metric).value)
