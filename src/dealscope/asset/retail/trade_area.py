# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import List

from pydantic import Field

from ...core.primitives import CamelModel, PositiveFloat, PositiveInt


class TradeArea(CamelModel):
    """Demographics of a trade area ring; the first ring is the primary."""

    radius: PositiveFloat
    population: PositiveInt
    households: PositiveInt
    median_income: PositiveFloat
    average_income: PositiveFloat
    growth_5_year: float = Field(default=0.0, description="Population growth (%).")
    daytime_population: PositiveInt = 0


class RetailCompetitor(CamelModel):
    """Competing shopping center."""

    name: str
    type: str = "Strip"
    distance: PositiveFloat
    gla: PositiveFloat
    anchors: List[str] = Field(default_factory=list)


class TrafficCount(CamelModel):
    """Average daily traffic on an adjacent road."""

    location: str
    daily_count: PositiveInt
    growth_rate: float = 0.0
