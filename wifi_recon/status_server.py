"""Flask + SocketIO status endpoint for wifi-recon.

Publishes the WiFi registry snapshot and traffic counters as JSON and pushes
``endpoint.new`` / ``endpoint.lost`` events to connected SocketIO clients.
"""

import logging
import threading
from typing import TYPE_CHECKING, Optional

from flask import Flask, Response, jsonify
from flask_socketio import SocketIO

from .errors import ReconError

if TYPE_CHECKING:
    from .recon import WiFiRecon
    from .registry import Endpoint

logger = logging.getLogger(__name__)


def create_app(recon: "WiFiRecon") -> Flask:
    app = Flask(__name__)

    @app.route("/api/wifi")
    def wifi_snapshot():
        try:
            body = recon.to_json()
        except ReconError as e:
            return jsonify({"error": str(e)}), 503
        return Response(body, mimetype="application/json")

    @app.route("/api/wifi/stats")
    def wifi_stats():
        return jsonify(recon.stats.snapshot())

    @app.route("/api/wifi/status")
    def wifi_status():
        return jsonify({
            "running": recon.running,
            "interface": recon.interface,
            "access_point": recon.access_point,
            "client": recon.client,
        })

    return app


class StatusServer:
    def __init__(self, recon: "WiFiRecon", host: str = "127.0.0.1", port: int = 8081):
        self._recon = recon
        self._host = host
        self._port = port
        self._thread: Optional[threading.Thread] = None
        self.app = create_app(recon)
        self._sio = SocketIO(self.app, cors_allowed_origins="*",
                             async_mode="threading", logger=False,
                             engineio_logger=False)

    def start(self):
        self._thread = threading.Thread(
            target=self._sio.run,
            kwargs={"app": self.app, "port": self._port,
                    "host": self._host, "allow_unsafe_werkzeug": True},
            daemon=True,
        )
        self._thread.start()
        logger.info("status server listening on http://%s:%d", self._host, self._port)

    def _emit(self, event: str, endpoint: "Endpoint"):
        payload = {
            "mac": endpoint.hw_address,
            "hostname": endpoint.hostname,
            "vendor": endpoint.vendor,
            "channel": endpoint.channel,
        }
        try:
            self._sio.emit(event, payload)
        except (OSError, RuntimeError) as e:
            logger.debug("could not emit %s: %s", event, e)

    def emit_new(self, endpoint: "Endpoint"):
        self._emit("endpoint.new", endpoint)

    def emit_lost(self, endpoint: "Endpoint"):
        self._emit("endpoint.lost", endpoint)

    def stop(self):
        try:
            self._sio.stop()
        except RuntimeError as e:
            logger.debug("status server stop: %s", e)
