"""
Tests for core.config — LedgerSettings.
"""

import pytest

from core.config import LedgerSettings


class TestLedgerSettings:
    def test_defaults(self):
        settings = LedgerSettings()
        assert settings.snapshot_key == "agrosync_farm"
        assert settings.order_code_prefix == "PED-"
        assert settings.order_code_width == 6

    def test_rejects_empty_key(self):
        with pytest.raises(ValueError, match="snapshot_key"):
            LedgerSettings(snapshot_key="")

    def test_rejects_zero_width(self):
        with pytest.raises(ValueError, match="order_code_width"):
            LedgerSettings(order_code_width=0)

    def test_from_django_settings_reads_agrosync_values(self, settings):
        settings.AGROSYNC_SNAPSHOT_KEY = "farm_test"
        settings.AGROSYNC_ORDER_CODE_PREFIX = "PO-"
        settings.AGROSYNC_ORDER_CODE_WIDTH = 4

        loaded = LedgerSettings.from_django_settings()

        assert loaded == LedgerSettings(
            snapshot_key="farm_test", order_code_prefix="PO-", order_code_width=4,
        )

    def test_from_django_settings_project_defaults(self):
        loaded = LedgerSettings.from_django_settings()
        assert loaded.order_code_prefix == "PED-"
        assert loaded.order_code_width == 6
