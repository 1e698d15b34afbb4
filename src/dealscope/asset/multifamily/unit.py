# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import Field, field_validator

from ...core.primitives import CamelModel, PositiveFloat, PositiveInt
from .._calc_utils import coerce_date

UnitType = Literal["Studio", "1BR", "2BR", "3BR", "4BR", "Penthouse"]


class UnitConcession(CamelModel):
    """Concession granted on a lease: ``amount`` spread over ``months``."""

    type: Literal["Free Rent", "Reduced Rent", "Other"] = "Free Rent"
    amount: PositiveFloat
    months: PositiveFloat = Field(default=12.0, gt=0)

    @property
    def monthly_value(self) -> float:
        return self.amount / self.months


class OtherIncome(CamelModel):
    """Monthly ancillary income from one unit."""

    parking: PositiveFloat = 0.0
    storage: PositiveFloat = 0.0
    pet: PositiveFloat = 0.0
    utilities: PositiveFloat = 0.0

    @property
    def total(self) -> float:
        return self.parking + self.storage + self.pet + self.utilities


class Unit(CamelModel):
    """One apartment on the rent roll. Rents are monthly."""

    unit_number: str
    unit_type: UnitType
    square_footage: PositiveFloat = Field(gt=0)
    floor: Optional[PositiveInt] = None

    current_rent: PositiveFloat = 0.0
    market_rent: PositiveFloat
    lease_start_date: Optional[date] = None
    lease_end_date: Optional[date] = None
    mtm_status: bool = False

    occupied: bool = True
    renovated: bool = False
    concessions: Optional[UnitConcession] = None
    other_income: Optional[OtherIncome] = None

    @field_validator("lease_start_date", "lease_end_date", mode="before")
    @classmethod
    def _parse_dates(cls, value):
        return coerce_date(value)

    @property
    def mix_bucket(self) -> str:
        """Unit-mix bucket; 4BR and larger fold into 3BR, penthouses stand alone."""
        if self.unit_type == "4BR":
            return "3BR"
        return self.unit_type
