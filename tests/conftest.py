# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Test utilities and fixtures for dealscope testing.

Property records are provided both as the camelCase JSON the web form
posts and as ``PropertyData`` instances, so tests can exercise either
entry path.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict

import pytest

from dealscope.asset import PropertyData
from dealscope.core.primitives import GlobalSettings

ANALYSIS_DATE = date(2025, 1, 1)


def office_form(**overrides: Any) -> Dict[str, Any]:
    """
    camelCase form payload for a simple office deal.

    $1M price, $70k NOI (7% cap rate), $250k equity and $25k cash flow
    (10% cash-on-cash).
    """
    payload: Dict[str, Any] = {
        "propertyType": "office",
        "purchasePrice": 1_000_000,
        "currentNOI": 70_000,
        "totalInvestment": 250_000,
        "annualCashFlow": 25_000,
    }
    payload.update(overrides)
    return payload


def complete_office_form(**overrides: Any) -> Dict[str, Any]:
    """Office payload with projection, loan and operating fields filled in."""
    payload = office_form(
        projectedNOI=80_000,
        loanAmount=750_000,
        interestRate=6,
        loanTerm=30,
        operatingExpenses=40_000,
        grossIncome=110_000,
    )
    payload.update(overrides)
    return payload


@pytest.fixture
def settings() -> GlobalSettings:
    """Settings pinned to a fixed analysis date."""
    return GlobalSettings(analysis_date=ANALYSIS_DATE)


@pytest.fixture
def office_data() -> PropertyData:
    return PropertyData.model_validate(office_form())


@pytest.fixture
def complete_office_data() -> PropertyData:
    return PropertyData.model_validate(complete_office_form())
