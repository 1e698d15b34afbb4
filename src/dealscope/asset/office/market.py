# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field

from ...core.primitives import CamelModel, FloatBetween0And100, PositiveFloat, PositiveInt


class BuildingSystem(CamelModel):
    """Major building system with its age and replacement economics."""

    name: str
    age: PositiveFloat
    useful_life: PositiveFloat
    condition: Literal["Excellent", "Good", "Fair", "Poor"] = "Good"
    replacement_cost: PositiveFloat = 0.0
    annual_maintenance: PositiveFloat = 0.0


class OperatingExpenseItem(CamelModel):
    """Annual operating expense line."""

    category: str
    annual: PositiveFloat
    recoverable: bool = True
    controllable: bool = True


class BuildingOperations(CamelModel):
    """Operating profile of an office building."""

    systems: List[BuildingSystem] = Field(default_factory=list)
    expenses: List[OperatingExpenseItem] = Field(default_factory=list)
    hvac_controls: Optional[Literal["Pneumatic", "DDC", "Smart"]] = None
    plumbing_fixtures: Optional[Literal["Standard", "Low Flow", "Waterless"]] = None
    recycling_rate: Optional[FloatBetween0And100] = None
    energy_star_score: Optional[FloatBetween0And100] = None
    leed_certification: Optional[Literal["Certified", "Silver", "Gold", "Platinum"]] = None
    well_certification: Optional[Literal["Bronze", "Silver", "Gold", "Platinum"]] = None


class CompetitiveProperty(CamelModel):
    """Competing office building in the same submarket."""

    name: str
    building_class: Literal["A+", "A", "B+", "B", "C"] = "B"
    year_built: Optional[PositiveInt] = None
    total_sf: Optional[PositiveFloat] = None
    occupancy: FloatBetween0And100
    asking_rent: PositiveFloat
    effective_rent: Optional[PositiveFloat] = None
    amenities: List[str] = Field(default_factory=list)


class OfficeMarketData(CamelModel):
    """Submarket conditions used for lease and positioning analysis."""

    submarket: Optional[str] = None
    vacancy: FloatBetween0And100
    market_rent: PositiveFloat = Field(description="Average asking rent ($/SF/yr).")
    rent_growth: float = Field(default=0.0, description="Trailing annual rent growth (%).")
    absorption_sf: float = 0.0
    new_supply_sf: PositiveFloat = 0.0
    competitive_properties: List[CompetitiveProperty] = Field(default_factory=list)
