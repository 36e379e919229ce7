"""Tests for wifi_recon.aliases — alias table and its JSON backing file."""

import json
import os
import tempfile
import unittest


class TestAliasStore(unittest.TestCase):
    def test_get_unknown_is_empty(self):
        from wifi_recon.aliases import AliasStore
        self.assertEqual(AliasStore().get("aa:bb:cc:dd:ee:ff"), "")

    def test_set_and_get_canonicalizes(self):
        from wifi_recon.aliases import AliasStore
        store = AliasStore()
        self.assertTrue(store.set("aa-bb-cc-dd-ee-ff", "printer"))
        self.assertEqual(store.get("AA:BB:CC:DD:EE:FF"), "printer")
        self.assertEqual(store.to_dict(), {"AA:BB:CC:DD:EE:FF": "printer"})

    def test_overwrite(self):
        from wifi_recon.aliases import AliasStore
        store = AliasStore()
        store.set("aa:bb:cc:dd:ee:ff", "one")
        store.set("aa:bb:cc:dd:ee:ff", "two")
        self.assertEqual(store.get("aa:bb:cc:dd:ee:ff"), "two")
        self.assertEqual(len(store), 1)

    def test_invalid_mac_rejected(self):
        from wifi_recon.aliases import AliasStore
        store = AliasStore()
        self.assertFalse(store.set("not-a-mac", "x"))
        self.assertEqual(len(store), 0)

    def test_clear(self):
        from wifi_recon.aliases import AliasStore
        store = AliasStore()
        store.set("00:11:22:33:44:55", "tv")
        store.clear()
        self.assertEqual(len(store), 0)
        self.assertEqual(store.get("00:11:22:33:44:55"), "")


class TestAliasFile(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.path = os.path.join(self.tmp.name, "aliases.json")

    def test_missing_file_is_empty(self):
        from wifi_recon.aliases import AliasStore
        self.assertEqual(len(AliasStore(self.path)), 0)

    def test_set_persists(self):
        from wifi_recon.aliases import AliasStore
        AliasStore(self.path).set("aa:bb:cc:dd:ee:ff", "laptop")
        with open(self.path) as f:
            self.assertEqual(json.load(f), {"AA:BB:CC:DD:EE:FF": "laptop"})
        self.assertEqual(AliasStore(self.path).get("aa:bb:cc:dd:ee:ff"), "laptop")

    def test_malformed_file_ignored(self):
        from wifi_recon.aliases import AliasStore
        with open(self.path, "w") as f:
            f.write("{broken")
        with self.assertLogs("wifi_recon.aliases", level="WARNING"):
            store = AliasStore(self.path)
        self.assertEqual(len(store), 0)

    def test_invalid_entries_skipped(self):
        from wifi_recon.aliases import AliasStore
        with open(self.path, "w") as f:
            json.dump({"garbage": "x", "00:11:22:33:44:55": "ok",
                       "66:77:88:99:aa:bb": 3}, f)
        store = AliasStore(self.path)
        self.assertEqual(store.to_dict(), {"00:11:22:33:44:55": "ok"})

    def _on_disk(self):
        with open(self.path) as f:
            return json.load(f)

    def test_clear_persists_by_default(self):
        from wifi_recon.aliases import AliasStore
        store = AliasStore(self.path)
        store.set("aa:bb:cc:dd:ee:ff", "laptop")
        store.clear()
        self.assertEqual(self._on_disk(), {})

    def test_live_clear_keeps_file(self):
        from wifi_recon.aliases import AliasStore
        store = AliasStore(self.path)
        store.set("aa:bb:cc:dd:ee:ff", "laptop")
        store.clear(persist=False)
        self.assertEqual(len(store), 0)
        self.assertEqual(self._on_disk(), {"AA:BB:CC:DD:EE:FF": "laptop"})

        store.set("00:11:22:33:44:55", "tv")
        self.assertEqual(store.to_dict(), {"00:11:22:33:44:55": "tv"})
        self.assertEqual(self._on_disk(), {"AA:BB:CC:DD:EE:FF": "laptop",
                                           "00:11:22:33:44:55": "tv"})
        self.assertEqual(AliasStore(self.path).get("aa:bb:cc:dd:ee:ff"), "laptop")


if __name__ == "__main__":
    unittest.main()
