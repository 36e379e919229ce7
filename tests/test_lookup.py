"""Tests for wifi_recon.lookup — OUI vendor lookups."""

import json
import os
import tempfile
import unittest
import unittest.mock


class TestGetOuiVendor(unittest.TestCase):
    def setUp(self):
        # Patch the OUI cache with known data
        patcher = unittest.mock.patch(
            "wifi_recon.lookup._oui_cache",
            {"AABBCC": "TestCorp", "001A2B": "Apple Inc"},
        )
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_colon_format(self):
        from wifi_recon.lookup import get_oui_vendor
        self.assertEqual(get_oui_vendor("AA:BB:CC:DD:EE:FF"), "TestCorp")

    def test_dash_format(self):
        from wifi_recon.lookup import get_oui_vendor
        self.assertEqual(get_oui_vendor("AA-BB-CC-DD-EE-FF"), "TestCorp")

    def test_plain_format(self):
        from wifi_recon.lookup import get_oui_vendor
        self.assertEqual(get_oui_vendor("AABBCCDDEEFF"), "TestCorp")

    def test_lowercase(self):
        from wifi_recon.lookup import get_oui_vendor
        self.assertEqual(get_oui_vendor("00:1a:2b:00:00:00"), "Apple Inc")

    def test_unknown_mac(self):
        from wifi_recon.lookup import get_oui_vendor
        self.assertIsNone(get_oui_vendor("FF:FF:FF:FF:FF:FF"))

    def test_empty_mac(self):
        from wifi_recon.lookup import get_oui_vendor
        self.assertIsNone(get_oui_vendor(""))
        self.assertIsNone(get_oui_vendor(None))


class TestOuiDatabase(unittest.TestCase):
    def setUp(self):
        patcher = unittest.mock.patch("wifi_recon.lookup._oui_cache", None)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_env_var_database(self):
        from wifi_recon.lookup import get_oui_vendor
        with tempfile.NamedTemporaryFile(
                mode="w", suffix=".json", delete=False) as f:
            json.dump({"DEADBE": "Beef Networks"}, f)
            path = f.name
        try:
            with unittest.mock.patch.dict(os.environ, {"WIFI_RECON_OUI_DB": path}):
                self.assertEqual(get_oui_vendor("de:ad:be:ef:00:01"), "Beef Networks")
        finally:
            os.unlink(path)

    def test_missing_database_is_empty(self):
        from wifi_recon.lookup import get_oui_vendor
        with unittest.mock.patch.dict(
                os.environ, {"WIFI_RECON_OUI_DB": "/nonexistent/oui.json"}):
            self.assertIsNone(get_oui_vendor("AA:BB:CC:DD:EE:FF"))


if __name__ == "__main__":
    unittest.main()
