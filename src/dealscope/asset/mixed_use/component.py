# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field

from ...core.primitives import (
    CamelModel,
    ComponentTypeEnum,
    FloatBetween0And100,
    PositiveFloat,
    PositiveInt,
)


class MixedUseComponent(CamelModel):
    """
    One use within a mixed-use property.

    ``rent_psf`` is monthly rent per square foot. When it is missing,
    component revenue is estimated from NOI at a 60% margin.
    """

    type: ComponentTypeEnum
    square_footage: PositiveFloat = Field(gt=0)
    floors: List[int] = Field(default_factory=list)
    separate_entrance: bool = False
    dedicated_elevators: bool = False
    percent_of_total: Optional[FloatBetween0And100] = None

    noi: float = 0.0
    cap_rate: PositiveFloat = Field(description="Component cap rate (%).")
    rent_psf: Optional[PositiveFloat] = None
    occupancy: FloatBetween0And100 = 100.0

    separate_management: bool = False
    pro_rata_expenses: PositiveFloat = 0.0
    direct_expenses: PositiveFloat = 0.0

    @property
    def total_expenses(self) -> float:
        return self.pro_rata_expenses + self.direct_expenses

    @property
    def annual_revenue(self) -> float:
        if self.rent_psf:
            return self.rent_psf * self.square_footage * self.occupancy / 100 * 12
        return self.noi / 0.6


class SharedSystems(CamelModel):
    """Building systems shared between the components."""

    hvac_type: Literal["Central", "Separate", "Hybrid"] = "Separate"
    hvac_redundancy: bool = False
    total_elevators: PositiveInt = 0
    shared_elevators: PositiveInt = 0
    parking_spaces: PositiveInt = 0
    parking_validation: bool = False
    separate_parking_levels: bool = False
    master_metered: bool = False
    utility_allocation: Literal["Actual", "ProRata", "Fixed"] = "ProRata"
    integrated_security: bool = False
    shared_lobby: bool = False


class SharedAmenity(CamelModel):
    """Amenity open to more than one component."""

    name: str
    location: Optional[str] = None
    accessible_to: List[ComponentTypeEnum] = Field(min_length=1)
    operating_hours: Optional[str] = None
    cost: PositiveFloat = Field(default=0.0, description="Annual operating cost ($).")
