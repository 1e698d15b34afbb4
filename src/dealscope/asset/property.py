# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Property data record.

``PropertyData`` is the single flat input record of an analysis: the
financial basics every package needs plus the optional, asset-specific
detail (rent rolls, building specs, components) the asset analyzers run on.
Every field is optional; what a calculation needs is checked by the metric
and validation layers, not at construction time.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import Field, field_validator

from ..core.primitives import (
    CamelModel,
    IndustrialTypeEnum,
    PropertyTypeEnum,
    RetailCenterTypeEnum,
    is_present,
)
from .industrial.specs import BuildingSpecs, LocationMetrics
from .industrial.tenant import IndustrialTenant
from .mixed_use.component import MixedUseComponent, SharedAmenity, SharedSystems
from .multifamily.market import (
    MarketComp,
    MultifamilyExpenses,
    NeighborhoodProfile,
    PropertyAmenities,
    SubmarketData,
)
from .multifamily.unit import Unit
from .office.market import BuildingOperations, OfficeMarketData
from .office.tenant import OfficeTenant
from .retail.tenant import RetailTenant, SalesRecord
from .retail.trade_area import RetailCompetitor, TradeArea, TrafficCount

# Square footage fields in the order they are consulted
AREA_FIELDS = (
    "square_footage",
    "total_sf",
    "gross_leasable_area",
    "rentable_square_feet",
    "total_square_footage",
)

NUMERIC_FIELDS = (
    "purchase_price",
    "square_footage",
    "total_sf",
    "gross_leasable_area",
    "rentable_square_feet",
    "total_square_footage",
    "number_of_units",
    "total_units",
    "parking_spaces",
    "current_noi",
    "projected_noi",
    "gross_income",
    "operating_expenses",
    "annual_cash_flow",
    "total_investment",
    "occupancy_rate",
    "current_occupancy",
    "average_rent",
    "average_rent_psf",
    "average_rent_per_unit",
    "monthly_rental_income",
    "market_average_rent",
    "other_income",
    "loan_amount",
    "interest_rate",
    "loan_term",
    "discount_rate",
    "holding_period",
    "number_of_tenants",
    "weighted_average_lease_term",
    "sales_per_sf",
    "occupancy_cost_ratio",
    "traffic_count",
    "clear_height",
    "number_of_dock_doors",
    "power_capacity",
    "distance_to_highway",
    "year_built",
    "last_renovation",
)


class PropertyData(CamelModel):
    """
    Input record of one property analysis.

    Attributes use snake_case; the camelCase keys of the JSON form
    (``purchasePrice``, ``currentNOI``, ``officeTenants``) are accepted as
    aliases. Numeric form values may arrive as strings with thousands
    separators or a ``$`` prefix; blank strings count as missing.

    Rates are percentages (``interest_rate=6`` is 6%), loan term and holding
    period are in years.
    """

    # Basic
    property_type: Optional[PropertyTypeEnum] = None
    purchase_price: Optional[float] = None
    square_footage: Optional[float] = None
    total_sf: Optional[float] = None
    gross_leasable_area: Optional[float] = None
    rentable_square_feet: Optional[float] = None
    total_square_footage: Optional[float] = None
    number_of_units: Optional[float] = None
    total_units: Optional[float] = None
    parking_spaces: Optional[float] = None

    # Financial
    current_noi: Optional[float] = None
    projected_noi: Optional[float] = Field(default=None, description="Expected NOI at the end of the hold.")
    gross_income: Optional[float] = None
    operating_expenses: Optional[float] = None
    annual_cash_flow: Optional[float] = None
    total_investment: Optional[float] = None
    occupancy_rate: Optional[float] = None
    current_occupancy: Optional[float] = None
    average_rent: Optional[float] = None
    average_rent_psf: Optional[float] = None
    average_rent_per_unit: Optional[float] = None
    monthly_rental_income: Optional[float] = None
    market_average_rent: Optional[float] = None
    other_income: Optional[float] = None

    # Loan
    loan_amount: Optional[float] = None
    interest_rate: Optional[float] = Field(default=None, description="Annual interest rate (%).")
    loan_term: Optional[float] = Field(default=None, description="Amortization term (years).")

    # Projection
    discount_rate: Optional[float] = Field(default=None, description="NPV discount rate (%).")
    holding_period: Optional[float] = Field(default=None, description="Hold period (years).")

    # Office
    number_of_tenants: Optional[float] = None
    weighted_average_lease_term: Optional[float] = None
    office_tenants: List[OfficeTenant] = Field(default_factory=list)
    office_market: Optional[OfficeMarketData] = None
    building_operations: Optional[BuildingOperations] = None

    # Retail
    sales_per_sf: Optional[float] = None
    occupancy_cost_ratio: Optional[float] = None
    traffic_count: Optional[float] = None
    center_type: Optional[RetailCenterTypeEnum] = None
    retail_tenants: List[RetailTenant] = Field(default_factory=list)
    retail_sales: List[SalesRecord] = Field(default_factory=list)
    trade_areas: List[TradeArea] = Field(default_factory=list)
    competitors: List[RetailCompetitor] = Field(default_factory=list)
    traffic_counts: List[TrafficCount] = Field(default_factory=list)

    # Industrial
    clear_height: Optional[float] = Field(default=None, description="Clear height (ft).")
    number_of_dock_doors: Optional[float] = None
    power_capacity: Optional[float] = Field(default=None, description="Electrical service (kW).")
    distance_to_highway: Optional[float] = Field(default=None, description="Miles to the nearest highway.")
    industrial_type: Optional[IndustrialTypeEnum] = None
    building_specs: Optional[BuildingSpecs] = None
    location_metrics: Optional[LocationMetrics] = None
    industrial_tenants: List[IndustrialTenant] = Field(default_factory=list)

    # Multifamily
    unit_mix: Optional[str] = None
    units: List[Unit] = Field(default_factory=list)
    amenities: Optional[PropertyAmenities] = None
    market_comps: List[MarketComp] = Field(default_factory=list)
    expense_detail: Optional[MultifamilyExpenses] = None
    submarket: Optional[SubmarketData] = None
    neighborhood: Optional[NeighborhoodProfile] = None
    year_built: Optional[int] = None
    last_renovation: Optional[int] = None

    # Mixed-use
    components: List[MixedUseComponent] = Field(default_factory=list)
    shared_systems: Optional[SharedSystems] = None
    shared_amenities: List[SharedAmenity] = Field(default_factory=list)

    @field_validator(*NUMERIC_FIELDS, mode="before")
    @classmethod
    def _clean_form_number(cls, value: Any) -> Any:
        if isinstance(value, str):
            cleaned = value.replace(",", "").replace("$", "").strip()
            return cleaned or None
        return value

    @field_validator("office_tenants", mode="before")
    @classmethod
    def _unwrap_tenant_envelope(cls, value: Any) -> Any:
        # The form posts the rent roll as {"tenants": [...]}
        if isinstance(value, dict):
            return value.get("tenants") or []
        return value if value is not None else []

    @field_validator("property_type", "center_type", "industrial_type", "unit_mix", mode="before")
    @classmethod
    def _blank_as_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    # --- Derived views ----------------------------------------------------

    def has(self, field: str) -> bool:
        """True when ``field`` holds a usable (non-blank) value."""
        return is_present(getattr(self, field, None))

    @property
    def area(self) -> Optional[float]:
        """First square footage field that is present."""
        for name in AREA_FIELDS:
            value = getattr(self, name)
            if value:
                return value
        return None

    @property
    def unit_count(self) -> Optional[float]:
        return self.number_of_units or self.total_units or None

    @property
    def occupancy(self) -> Optional[float]:
        """Occupancy percentage from ``occupancy_rate`` or ``current_occupancy``."""
        if self.occupancy_rate is not None:
            return self.occupancy_rate
        return self.current_occupancy
