# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from pydantic import AliasChoices, Field, field_validator

from ...core.primitives import CamelModel, CreditRating, FloatBetween0And100, PositiveFloat, PositiveInt
from .._calc_utils import coerce_date

MerchandiseType = Literal[
    "Apparel", "Food", "Entertainment", "Service", "Fitness", "Electronics", "Home", "Other"
]
TenantCategory = Literal["Anchor", "Junior Anchor", "Inline", "Pad", "Kiosk", "Pop-up"]


class PercentageRentTerms(CamelModel):
    """Overage rent clause: ``rate`` percent of sales above the breakpoint."""

    rate: FloatBetween0And100
    natural_breakpoint: PositiveFloat


class CoTenancyClause(CamelModel):
    """Tenants whose presence this tenant's lease depends on."""

    required: List[str]
    remedy: Literal["Rent Reduction", "Termination", "Both"] = "Rent Reduction"
    rent_reduction: Optional[FloatBetween0And100] = None


class RetailTenant(CamelModel):
    """Shopping center tenant record."""

    name: str = Field(validation_alias=AliasChoices("name", "tenantName"))
    square_footage: PositiveFloat = Field(gt=0)
    category: TenantCategory = "Inline"
    merchandise_type: MerchandiseType = "Other"
    essential_service: bool = False
    national_tenant: bool = False
    base_rent_psf: PositiveFloat = 0.0
    percentage_rent: Optional[PercentageRentTerms] = None
    reported_sales: Optional[PositiveFloat] = Field(default=None, description="Trailing annual sales ($).")
    sales_psf: Optional[PositiveFloat] = None
    lease_end_date: Optional[date] = None
    co_tenancy: Optional[CoTenancyClause] = None
    credit_rating: CreditRating = CreditRating.NR

    @field_validator("lease_end_date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        return coerce_date(value)

    @field_validator("credit_rating", mode="before")
    @classmethod
    def _default_rating(cls, value):
        return value or CreditRating.NR

    @property
    def effective_sales_psf(self) -> Optional[float]:
        """Reported sales PSF, or reported annual sales spread over the space."""
        if self.sales_psf is not None:
            return self.sales_psf
        if self.reported_sales is not None:
            return self.reported_sales / self.square_footage
        return None

    @property
    def annual_base_rent(self) -> float:
        return self.base_rent_psf * self.square_footage

    @property
    def is_anchor(self) -> bool:
        return self.category in ("Anchor", "Junior Anchor")


class SalesRecord(CamelModel):
    """Monthly sales report from one tenant."""

    tenant: str
    year: PositiveInt
    month: PositiveInt = Field(ge=1, le=12)
    gross_sales: PositiveFloat
    returns: PositiveFloat = 0.0
    transactions: Optional[PositiveInt] = None

    @property
    def net_sales(self) -> float:
        return self.gross_sales - self.returns
