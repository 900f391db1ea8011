"""
GoldWatch Dashboard - Flask web interface

Serves the browser dashboard and a small JSON API over a GoldMonitor.
"""

import logging

from flask import Flask, Response, jsonify, render_template_string, request

from ..config import DASHBOARD_REFRESH_MS
from ..utils.plotting_utils import render_price_chart_png
from .page import DASHBOARD_HTML

logger = logging.getLogger("Dashboard")


def _bad_request(message: str, status: int = 400):
    return jsonify({"ok": False, "error": message}), status


def create_app(monitor) -> Flask:
    """
    Build the dashboard application.

    Args:
        monitor: GoldMonitor instance backing every endpoint

    Returns:
        Flask app
    """
    app = Flask(__name__)
    app.config["MONITOR"] = monitor

    @app.route("/")
    def index():
        return render_template_string(
            DASHBOARD_HTML,
            refresh_ms=DASHBOARD_REFRESH_MS,
            symbol=monitor.feed.symbol.display_name(),
            unit=monitor.feed.symbol.unit_label(),
            currency=monitor.currency,
        )

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({"ok": True, "monitoring": monitor.is_monitoring})

    @app.route("/api/status", methods=["GET"])
    def status():
        return jsonify(monitor.get_status())

    @app.route("/api/history", methods=["GET"])
    def history():
        return jsonify({
            "points": monitor.history.to_list(),
            "stats": monitor.history.get_stats(),
        })

    @app.route("/api/chart.png", methods=["GET"])
    def chart():
        png = render_price_chart_png(monitor.history, threshold=monitor.store.threshold)
        return Response(png, mimetype="image/png", headers={"Cache-Control": "no-store"})

    @app.route("/api/monitor/start", methods=["POST"])
    def start_monitor():
        started = monitor.start()
        return jsonify({"ok": True, "started": started, "monitoring": monitor.is_monitoring})

    @app.route("/api/monitor/stop", methods=["POST"])
    def stop_monitor():
        stopped = monitor.stop(wait=False)
        return jsonify({"ok": True, "stopped": stopped, "monitoring": monitor.is_monitoring})

    @app.route("/api/threshold", methods=["POST"])
    def set_threshold():
        payload = request.get_json(silent=True) or {}
        if "threshold" not in payload:
            return _bad_request("Missing 'threshold'")
        try:
            threshold = monitor.set_threshold(payload["threshold"])
        except ValueError as e:
            return _bad_request(str(e))
        return jsonify({"ok": True, "threshold": threshold})

    @app.route("/api/settings", methods=["GET"])
    def get_settings():
        return jsonify({
            "telegram": monitor.store.telegram.masked(),
            "threshold": monitor.store.threshold,
        })

    @app.route("/api/settings", methods=["POST"])
    def update_settings():
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return _bad_request("Expected a JSON object")

        bot_token = payload.get("bot_token")
        chat_id = payload.get("chat_id")
        enabled = payload.get("enabled")

        if bot_token is not None and not isinstance(bot_token, str):
            return _bad_request("'bot_token' must be a string")
        if chat_id is not None and not isinstance(chat_id, (str, int)):
            return _bad_request("'chat_id' must be a string")
        if enabled is not None and not isinstance(enabled, bool):
            return _bad_request("'enabled' must be a boolean")

        config = monitor.update_telegram(bot_token=bot_token, chat_id=chat_id, enabled=enabled)
        return jsonify({"ok": True, "telegram": config.masked()})

    @app.route("/api/telegram/test", methods=["POST"])
    def test_telegram():
        success = monitor.test_telegram()
        return jsonify({"ok": success})

    @app.route("/api/logs", methods=["GET"])
    def logs():
        return jsonify({"logs": monitor.notification_log.to_list()})

    @app.route("/api/insight", methods=["POST"])
    def insight():
        try:
            result = monitor.fetch_insight()
        except ValueError as e:
            return _bad_request(str(e), status=409)
        return jsonify({"ok": True, "insight": result.to_dict()})

    logger.info("Dashboard app created")
    return app
