# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit Tests for the Property Data Record

Tests form parsing, aliases and the derived views.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from dealscope.asset import PropertyData
from dealscope.core.primitives import PropertyTypeEnum


class TestFormParsing:
    """Test suite for building PropertyData from the camelCase form."""

    def test_camel_case_keys(self):
        data = PropertyData.model_validate(
            {"propertyType": "office", "purchasePrice": 1_000_000, "currentNOI": 70_000}
        )
        assert data.property_type is PropertyTypeEnum.OFFICE
        assert data.purchase_price == 1_000_000
        assert data.current_noi == 70_000

    def test_snake_case_keys(self):
        data = PropertyData(property_type="retail", gross_leasable_area=50_000)
        assert data.property_type is PropertyTypeEnum.RETAIL

    def test_formatted_numbers_are_cleaned(self):
        data = PropertyData.model_validate({"purchasePrice": "$1,250,000", "loanTerm": " 25 "})
        assert data.purchase_price == 1_250_000
        assert data.loan_term == 25

    def test_blank_strings_are_missing(self):
        data = PropertyData.model_validate({"purchasePrice": "", "propertyType": "  "})
        assert data.purchase_price is None
        assert data.property_type is None

    def test_non_numeric_string_rejected(self):
        with pytest.raises(ValidationError):
            PropertyData.model_validate({"purchasePrice": "a lot"})

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            PropertyData.model_validate({"purchasePrise": 1_000_000})

    def test_record_is_frozen(self):
        data = PropertyData(purchase_price=1_000_000)
        with pytest.raises(ValidationError):
            data.purchase_price = 2_000_000


class TestOfficeTenants:
    def test_tenant_envelope_is_unwrapped(self):
        data = PropertyData.model_validate(
            {
                "officeTenants": {
                    "tenants": [
                        {"tenantName": "Acme", "annualRent": 100_000, "leaseExpiration": "2030-01"}
                    ]
                }
            }
        )
        tenant = data.office_tenants[0]
        assert tenant.name == "Acme"
        assert tenant.lease_expiration == date(2030, 1, 1)

    def test_empty_envelope(self):
        data = PropertyData.model_validate({"officeTenants": {"tenants": []}})
        assert data.office_tenants == []


class TestDerivedViews:
    """Test suite for the area, unit count and occupancy views."""

    def test_area_uses_first_present_field(self):
        assert PropertyData(total_sf=80_000).area == 80_000
        assert PropertyData(square_footage=50_000, total_sf=80_000).area == 50_000
        assert PropertyData().area is None

    def test_unit_count(self):
        assert PropertyData(total_units=40).unit_count == 40
        assert PropertyData(number_of_units=24, total_units=40).unit_count == 24
        assert PropertyData().unit_count is None

    def test_occupancy_prefers_occupancy_rate(self):
        assert PropertyData(occupancy_rate=92, current_occupancy=88).occupancy == 92
        assert PropertyData(current_occupancy=88).occupancy == 88

    def test_has(self):
        data = PropertyData(purchase_price=0, unit_mix="")
        assert data.has("purchase_price")
        assert not data.has("unit_mix")
        assert not data.has("office_tenants")
