"""Tests for wifi_recon.capture — capture device setup and release."""

import unittest
import unittest.mock


class TestCaptureDeviceOpen(unittest.TestCase):
    def setUp(self):
        self.cleanup = unittest.mock.Mock()
        patcher = unittest.mock.patch(
            "wifi_recon.capture.setup_monitor",
            return_value=("wlan0mon", self.cleanup),
        )
        self.setup_monitor = patcher.start()
        self.addCleanup(patcher.stop)

        patcher = unittest.mock.patch("wifi_recon.capture.conf")
        self.conf = patcher.start()
        self.addCleanup(patcher.stop)
        self.sock = self.conf.L2socket.return_value

    def test_open_and_close(self):
        from wifi_recon.capture import CaptureDevice
        dev = CaptureDevice("wlan0")
        dev.open()
        self.assertTrue(dev.is_open)
        self.assertEqual(dev.monitor_iface, "wlan0mon")
        self.conf.L2socket.assert_called_once_with(iface="wlan0mon")

        dev.close()
        dev.close()
        self.assertFalse(dev.is_open)
        self.sock.close.assert_called_once_with()
        self.cleanup.assert_called_once_with()

    def test_socket_failure_releases_monitor(self):
        from wifi_recon.capture import CaptureDevice
        from wifi_recon.errors import ConfigurationError
        self.conf.L2socket.side_effect = OSError("no such device")
        dev = CaptureDevice("wlan0")
        with self.assertRaises(ConfigurationError):
            dev.open()
        self.cleanup.assert_called_once_with()
        self.assertFalse(dev.is_open)

    def test_bad_snaplen_releases_socket(self):
        from wifi_recon.capture import CaptureDevice
        from wifi_recon.errors import ConfigurationError
        dev = CaptureDevice("wlan0", snaplen=0)
        with self.assertRaises(ConfigurationError):
            dev.open()
        self.sock.close.assert_called_once_with()
        self.cleanup.assert_called_once_with()
        self.assertFalse(dev.is_open)

    def test_monitor_setup_failure(self):
        from wifi_recon.capture import CaptureDevice
        from wifi_recon.errors import ConfigurationError
        self.setup_monitor.side_effect = RuntimeError("Could not configure wlan0")
        dev = CaptureDevice("wlan0")
        with self.assertRaises(ConfigurationError):
            dev.open()
        self.conf.L2socket.assert_not_called()
        self.assertFalse(dev.is_open)

    def test_closed_device(self):
        from wifi_recon.capture import CaptureDevice
        from wifi_recon.errors import TransientIOError
        dev = CaptureDevice("wlan0")
        with self.assertRaises(OSError):
            dev.read()
        with self.assertRaises(TransientIOError):
            dev.write(b"frame")

    def test_write_failure_is_transient(self):
        from wifi_recon.capture import CaptureDevice
        from wifi_recon.errors import TransientIOError
        self.sock.send.side_effect = OSError("queue full")
        dev = CaptureDevice("wlan0")
        dev.open()
        with self.assertRaises(TransientIOError):
            dev.write(b"frame")
        self.assertTrue(dev.is_open)


if __name__ == "__main__":
    unittest.main()
