# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Literal, Optional, Tuple

from pydantic import Field

from ...core.primitives import CamelModel, FloatBetween0And100, PositiveFloat, PositiveInt


class BuildingSpecs(CamelModel):
    """
    Physical specification of an industrial building.

    ``power_capacity`` is the electrical service in kW; the analyzers convert
    it to watts per square foot. ``column_spacing`` uses the broker
    convention ``"50x60"`` (width x depth, in feet).
    """

    total_sf: PositiveFloat = Field(gt=0)
    clear_height: PositiveFloat = Field(description="Clear height (ft).")
    column_spacing: str = "50x50"
    bay_depth: PositiveFloat = 0.0
    dock_doors: PositiveInt = 0
    drive_in_doors: PositiveInt = 0
    truck_court_depth: PositiveFloat = Field(default=120.0, description="Truck court depth (ft).")
    power_capacity: PositiveFloat = Field(default=0.0, description="Electrical service (kW).")
    lighting_type: Literal["LED", "Metal Halide", "Fluorescent", "Other"] = "Other"
    fire_suppression_type: Literal["ESFR", "Wet", "Dry", "None"] = "Wet"
    rail_siding: bool = False
    crane_system: bool = False
    cold_storage_sf: PositiveFloat = 0.0

    @property
    def column_dimensions(self) -> Tuple[float, float]:
        """Column bay (width, depth) in feet; (0, 0) when unparseable."""
        parts = self.column_spacing.lower().replace(" ", "").split("x")
        if len(parts) != 2:
            return 0.0, 0.0
        try:
            return float(parts[0]), float(parts[1])
        except ValueError:
            return 0.0, 0.0

    @property
    def has_cold_storage(self) -> bool:
        return self.cold_storage_sf > 0


class LocationMetrics(CamelModel):
    """Location, labor and submarket facts for an industrial site. Distances in miles."""

    distance_to_highway: PositiveFloat
    distance_to_port: Optional[PositiveFloat] = None
    distance_to_airport: Optional[PositiveFloat] = None
    distance_to_rail: Optional[PositiveFloat] = None
    distance_to_intermodal: Optional[PositiveFloat] = None

    # Labor
    population_one_hour: PositiveInt = 0
    average_wage: PositiveFloat = Field(default=18.5, description="Average warehouse wage ($/hr).")
    unemployment_rate: FloatBetween0And100 = 4.0
    union_presence: bool = False

    # Submarket
    total_inventory_sf: PositiveFloat = Field(gt=0)
    vacancy_rate: FloatBetween0And100 = 5.0
    net_absorption_12_mo: float = 0.0
    under_construction: PositiveFloat = 0.0
    avg_asking_rent: Optional[PositiveFloat] = None
