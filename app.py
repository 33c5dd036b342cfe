"""BAC Tracker Flask API over a single drink ledger.

Run from project root:
    python app.py
"""

import os
from datetime import datetime, timedelta
from typing import Callable, Optional

from flask import Flask, jsonify, request
from loguru import logger

from bac_engine.config import EngineConfig, clamp_float
from bac_engine.drinks import DrinkKind, list_drink_kinds
from bac_engine.errors import InvalidInput, NotFound
from bac_engine.graph import curve_data
from bac_engine.ledger import DrinkLedger
from bac_engine.profile import UserProfile
from bac_engine.safety import get_drive_advice
from bac_engine.scheduler import ResetScheduler
from bac_engine.stats import format_time_until_legal, format_time_until_sober
from bac_engine.store import SqliteStore

MIN_WEIGHT_LB = 80.0
MAX_WEIGHT_LB = 400.0
MAX_HOURS_AGO = 24.0
MAX_CURVE_HOURS = 24.0

ENGINE_KEY = "bac_engine"


def create_app(config: Optional[EngineConfig] = None, clock: Callable[[], datetime] = datetime.now) -> Flask:
    """Build the app with one ledger and its reset scheduler (not started)."""
    config = config or EngineConfig.from_env()
    app = Flask(__name__)

    store = SqliteStore(config.db_path)
    ledger = DrinkLedger(store, clock=clock)
    scheduler = ResetScheduler(ledger, store, reset_hour=config.reset_hour, tick_seconds=config.tick_seconds)
    app.extensions[ENGINE_KEY] = {"ledger": ledger, "scheduler": scheduler, "store": store}

    @app.errorhandler(InvalidInput)
    def handle_invalid_input(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(NotFound)
    def handle_not_found(e):
        return jsonify({"error": str(e)}), 404

    @app.route("/healthz")
    def healthz():
        return jsonify({"ok": True})

    @app.route("/api/drink-types")
    def api_drink_types():
        return jsonify({"items": list_drink_kinds()})

    @app.route("/api/profile")
    def api_profile():
        return jsonify(ledger.profile.to_dict())

    @app.route("/api/profile", methods=["POST"])
    def api_profile_update():
        data = request.get_json() or {}
        try:
            weight = float(data.get("weight_lb"))
        except (TypeError, ValueError):
            return jsonify({"error": "Weight is required"}), 400
        if weight < MIN_WEIGHT_LB or weight > MAX_WEIGHT_LB:
            return jsonify({"error": "Weight must be between 80 and 400 lb"}), 400
        profile = UserProfile(weight_lb=weight, sex=data.get("sex", "male"))
        ledger.update_profile(profile)
        return jsonify({"ok": True, "profile": profile.to_dict()})

    @app.route("/api/drink", methods=["POST"])
    def api_drink():
        data = request.get_json() or {}
        kind = DrinkKind.parse(data.get("kind", "beer"))
        size_oz = data.get("size_oz", kind.default_oz)
        percent = data.get("alcohol_percent", kind.default_percent)
        hours_ago = clamp_float(data.get("hours_ago"), 0.0, 0.0, MAX_HOURS_AGO)
        at = ledger.now() - timedelta(hours=hours_ago) if hours_ago else None
        record = ledger.add_drink(kind, size_oz, percent, at=at)
        return jsonify({"ok": True, "drink": record.to_dict()})

    @app.route("/api/drink/<record_id>", methods=["DELETE"])
    def api_drink_remove(record_id: str):
        record = ledger.remove_drink(record_id)
        return jsonify({"ok": True, "drink": record.to_dict()})

    @app.route("/api/reset", methods=["POST"])
    def api_reset():
        ledger.clear_drinks()
        return jsonify({"ok": True})

    @app.route("/api/state")
    def api_state():
        state = ledger.refresh()
        return jsonify({
            **state.to_dict(),
            "time_until_sober_text": format_time_until_sober(state.time_until_sober),
            "time_until_legal_text": format_time_until_legal(state.time_until_legal),
            "drive_advice": get_drive_advice(state.current_bac, state.time_until_sober),
        })

    @app.route("/api/curve")
    def api_curve():
        state = ledger.state
        hours = clamp_float(request.args.get("hours"), 12.0, 1.0, MAX_CURVE_HOURS)
        start = ledger.now()
        points = curve_data(state.records, state.profile, start, max_hours=hours)
        return jsonify({"start": start.isoformat(), "curve": [{"t": t, "bac": bac} for t, bac in points]})

    logger.info(f"BAC API ready (db={config.db_path})")
    return app


if __name__ == "__main__":
    app = create_app()
    app.extensions[ENGINE_KEY]["scheduler"].start()
    port = int(os.environ.get("PORT", 5000))
    try:
        app.run(host="0.0.0.0", port=port, debug=os.environ.get("FLASK_DEBUG", "0") == "1", use_reloader=False)
    finally:
        app.extensions[ENGINE_KEY]["scheduler"].shutdown()
