# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Literal, Optional

from pydantic import AliasChoices, Field

from ...core.primitives import CamelModel, PositiveFloat, PositiveInt

IndustrialIndustry = Literal[
    "Logistics", "Manufacturing", "Distribution", "Cold Storage", "Data Center", "Flex", "Other"
]


class IndustrialTenant(CamelModel):
    """Industrial tenant and the building features its operation needs."""

    name: str = Field(validation_alias=AliasChoices("name", "tenantName"))
    industry: IndustrialIndustry = "Other"
    square_footage: PositiveFloat = Field(gt=0)
    base_rent_psf: PositiveFloat = 0.0

    # Operational requirements
    clear_height_required: PositiveFloat = 0.0
    dock_doors_required: PositiveInt = 0
    power_requirement: Optional[PositiveFloat] = Field(default=None, description="Watts per SF.")
    rail_access: bool = False
    temperature_control: Optional[Literal["Ambient", "Cooler", "Freezer"]] = None

    employee_count: PositiveInt = 0
    parking_required: PositiveInt = 0

    @property
    def annual_rent(self) -> float:
        return self.base_rent_psf * self.square_footage
