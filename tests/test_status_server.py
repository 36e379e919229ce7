"""Tests for wifi_recon.status_server — JSON routes and SocketIO events."""

import json
import unittest
import unittest.mock

from scapy.layers.dot11 import Dot11, Dot11Beacon, Dot11Elt, RadioTap

AP = "AA:BB:CC:DD:EE:FF"


def beacon():
    return (
        RadioTap(present="Channel", ChannelFrequency=2412)
        / Dot11(type=0, subtype=8, addr1="ff:ff:ff:ff:ff:ff", addr2=AP, addr3=AP)
        / Dot11Beacon()
        / Dot11Elt(ID=0, info=b"lab-net")
    )


def _recon():
    from wifi_recon.recon import WiFiRecon
    device = unittest.mock.MagicMock()
    return WiFiRecon("wlan0", device_factory=lambda iface: device)


class TestRoutes(unittest.TestCase):
    def setUp(self):
        from wifi_recon.status_server import create_app
        self.recon = _recon()
        self.client = create_app(self.recon).test_client()

    def test_snapshot_before_configure(self):
        resp = self.client.get("/api/wifi")
        self.assertEqual(resp.status_code, 503)
        self.assertEqual(resp.get_json(), {"error": "WiFi is not yet initialized."})

    def test_snapshot(self):
        self.recon.configure()
        self.recon.process_packet(beacon())
        resp = self.client.get("/api/wifi")
        self.assertEqual(resp.status_code, 200)
        doc = json.loads(resp.data)
        self.assertEqual(doc["interface"]["name"], "wlan0")
        self.assertEqual([h["mac"] for h in doc["hosts"]], [AP])
        self.assertEqual(doc["hosts"][0]["hostname"], "lab-net")
        self.assertEqual(doc["hosts"][0]["channel"], 1)

    def test_stats(self):
        self.recon.configure()
        pkt = beacon()
        self.recon.process_packet(pkt)
        stats = self.client.get("/api/wifi/stats").get_json()
        self.assertEqual(stats[AP], 2 * len(pkt))

    def test_status(self):
        self.recon.set_access_point(AP.lower())
        status = self.client.get("/api/wifi/status").get_json()
        self.assertEqual(status, {
            "running": False,
            "interface": "wlan0",
            "access_point": AP,
            "client": "",
        })


class TestEvents(unittest.TestCase):
    def test_new_and_lost_payloads(self):
        from wifi_recon.registry import Endpoint
        from wifi_recon.status_server import StatusServer
        server = StatusServer(_recon())
        ep = Endpoint(hw_address=AP, first_seen=0.0, last_seen=0.0,
                      hostname="lab-net", vendor="ACME", channel=6)
        with unittest.mock.patch.object(server._sio, "emit") as emit:
            server.emit_new(ep)
            server.emit_lost(ep)
        payload = {"mac": AP, "hostname": "lab-net", "vendor": "ACME", "channel": 6}
        self.assertEqual(emit.call_args_list, [
            unittest.mock.call("endpoint.new", payload),
            unittest.mock.call("endpoint.lost", payload),
        ])


if __name__ == "__main__":
    unittest.main()
