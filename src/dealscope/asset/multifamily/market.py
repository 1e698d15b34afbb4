# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Dict, Optional

from pydantic import Field

from ...core.primitives import CamelModel, FloatBetween0And100, PositiveFloat, PositiveInt, Score


class PropertyAmenities(CamelModel):
    """Community amenities and services of a multifamily property."""

    # Community
    pool: bool = False
    fitness: bool = False
    clubhouse: bool = False
    business_center: bool = False
    playground: bool = False
    dog_park: bool = False
    bbq_area: bool = False

    # Services
    concierge: bool = False
    valet: bool = False
    package_receiving: bool = False
    maintenance_on_site: bool = False

    # Parking
    covered_parking: bool = False
    gated_parking: bool = False
    ev_charging: bool = False
    parking_ratio: PositiveFloat = Field(default=0.0, description="Spaces per unit.")

    # Technology and utilities
    high_speed_internet: bool = False
    smart_home: bool = False
    keyless_entry: bool = False
    package_lockers: bool = False
    central_hvac: bool = False
    trash_valet: bool = False


class MarketComp(CamelModel):
    """Competing apartment property."""

    property_name: str
    distance: PositiveFloat = Field(default=0.0, description="Miles from the subject.")
    year_built: Optional[PositiveInt] = None
    total_units: Optional[PositiveInt] = None
    occupancy: FloatBetween0And100
    avg_rent_psf: PositiveFloat = Field(description="Average monthly rent per SF.")
    amenity_score: Score = 50.0
    renovated: bool = False
    concession_offered: bool = False


class SubmarketData(CamelModel):
    """Apartment submarket fundamentals."""

    avg_occupancy: FloatBetween0And100 = 95.0
    avg_rent_growth: float = Field(default=3.0, description="Annual market rent growth (%).")
    new_supply_units: PositiveInt = 0
    population: PositiveInt = 0
    median_income: PositiveFloat = 0.0
    rent_to_income_ratio: PositiveFloat = Field(default=0.30, description="Decimal share of income.")


class NeighborhoodProfile(CamelModel):
    """Location quality scores for a residential property."""

    walk_score: Score = 50.0
    transit_score: Score = 50.0
    school_rating: PositiveFloat = Field(default=5.0, le=10)
    crime_index: Score = Field(default=50.0, description="Lower is safer.")


class MultifamilyExpenses(CamelModel):
    """Annual operating expenses by category."""

    taxes: PositiveFloat = 0.0
    insurance: PositiveFloat = 0.0
    utilities: PositiveFloat = 0.0
    payroll: PositiveFloat = 0.0
    maintenance: PositiveFloat = 0.0
    management: PositiveFloat = 0.0
    marketing: PositiveFloat = 0.0
    administrative: PositiveFloat = 0.0
    other: PositiveFloat = 0.0

    def as_dict(self) -> Dict[str, float]:
        return self.model_dump()

    @property
    def total(self) -> float:
        return sum(self.as_dict().values())

    @property
    def non_controllable(self) -> float:
        return self.taxes + self.insurance
