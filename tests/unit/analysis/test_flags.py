# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit Tests for Metric Flags
"""

import pytest
from pydantic import ValidationError

from dealscope.analysis import MetricFlags
from dealscope.core.primitives import MetricName


class TestMetricFlags:
    def test_all_off_by_default(self):
        assert MetricFlags().enabled() == []

    def test_one_flag_per_metric(self):
        assert set(MetricFlags.model_fields) == {name.value for name in MetricName}

    def test_camel_case_form(self):
        flags = MetricFlags.model_validate({"capRate": True, "cashOnCash": True, "pricePerSF": True})
        assert flags.enabled() == [MetricName.CAP_RATE, MetricName.CASH_ON_CASH, MetricName.PRICE_PER_SF]

    def test_simple_walt_synonym(self):
        assert MetricFlags.model_validate({"simpleWalt": True}).walt
        assert MetricFlags.model_validate({"walt": True}).walt

    def test_from_metrics_accepts_names(self):
        flags = MetricFlags.from_metrics([MetricName.DSCR, "irr", "tenantFinancialHealth"])
        assert flags.enabled() == [MetricName.DSCR, MetricName.IRR, MetricName.TENANT_FINANCIAL_HEALTH]

    def test_enabled_follows_declaration_order(self):
        flags = MetricFlags.from_metrics(["breakeven", "cap_rate"])
        assert flags.enabled() == [MetricName.CAP_RATE, MetricName.BREAKEVEN]

    def test_is_enabled(self):
        flags = MetricFlags(cap_rate=True)
        assert flags.is_enabled("capRate")
        assert not flags.is_enabled(MetricName.DSCR)

    def test_unknown_flag_rejected(self):
        with pytest.raises(ValidationError):
            MetricFlags.model_validate({"unicornMetric": True})
