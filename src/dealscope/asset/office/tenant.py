# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import AliasChoices, Field, field_validator

from ...core.primitives import CamelModel, CreditRating, PositiveFloat, PositiveInt
from .._calc_utils import coerce_date, safe_divide


class OfficeTenant(CamelModel):
    """
    Office tenant record from the rent roll.

    Only name, annual rent and lease expiration are needed for WALT; the
    remaining fields feed the credit, lease economics and retention analyses
    and may be left blank.
    """

    name: str = Field(validation_alias=AliasChoices("name", "tenantName"))
    annual_rent: PositiveFloat
    lease_expiration: date
    commencement_date: Optional[date] = None

    # Credit profile
    industry: Optional[str] = None
    credit_rating: CreditRating = CreditRating.NR
    financial_strength: Optional[Literal["Strong", "Stable", "Watch", "Weak"]] = None
    ticker: Optional[str] = None

    # Space
    rentable_sf: Optional[PositiveFloat] = None
    usable_sf: Optional[PositiveFloat] = None
    employees: Optional[PositiveInt] = None

    # Lease economics
    escalation_type: Optional[Literal["Fixed", "CPI", "Market", "Porter Wage", "Operating Expense"]] = None
    escalation_rate: Optional[float] = Field(default=None, description="Annual escalation (%).")
    free_rent_months: PositiveFloat = 0.0
    ti_allowance: PositiveFloat = Field(default=0.0, description="Total tenant improvement allowance ($).")
    leasing_commissions: PositiveFloat = 0.0
    expansion_options: PositiveInt = 0
    termination_options: PositiveInt = 0

    # Payment history
    late_payments: PositiveInt = 0
    defaults: PositiveInt = 0

    @field_validator("lease_expiration", "commencement_date", mode="before")
    @classmethod
    def _parse_dates(cls, value):
        return coerce_date(value)

    @field_validator("credit_rating", mode="before")
    @classmethod
    def _default_rating(cls, value):
        return value or CreditRating.NR

    @property
    def rent_psf(self) -> Optional[float]:
        if not self.rentable_sf:
            return None
        return safe_divide(self.annual_rent, self.rentable_sf)

    @property
    def sf_per_employee(self) -> Optional[float]:
        if not self.rentable_sf or not self.employees:
            return None
        return self.rentable_sf / self.employees

    @property
    def is_public(self) -> bool:
        return bool(self.ticker)
