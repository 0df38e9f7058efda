from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, send_file, session

from ..common.datetime_utils import now_utc
from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from ..container import Container
from .qr import build_checkin_payload, decode_scan_payload, render_qr_png

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        """The identity layer puts the authenticated member id in session["user_id"]."""

        @wraps(view)
        def wrapper(*args, **kwargs):
            if not session.get("user_id"):
                return jsonify({"success": False, "message": "Please sign in to continue."}), 401
            return view(*args, **kwargs)

        return wrapper

    @app.route("/api/scan", methods=["POST"], endpoint="api_scan")
    @login_required
    def api_scan():
        """Check in or out based on the scanned gym code."""
        data = request.get_json(silent=True) or {}
        code = str(data.get("code") or "").strip()
        if not code:
            return jsonify({"success": False, "message": "QR code is empty"}), 400

        gym_id = decode_scan_payload(code)
        result = container.attendance_service.record_scan(str(session["user_id"]), gym_id, now_utc())
        return jsonify(result.to_dict()), (200 if result.success else 409)

    @app.route("/api/history", methods=["GET"], endpoint="api_history")
    @login_required
    def api_history():
        try:
            rows = container.attendance_service.get_history_ui(
                str(session["user_id"]),
                limit=request.args.get("limit"),
            )
            return jsonify({"success": True, "sessions": rows}), 200
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("failed to load history")
            return jsonify({"success": False, "message": "Failed to load history."}), 500

    @app.route("/api/gyms/<gym_id>/qr.png", methods=["GET"], endpoint="gym_qr_image")
    @login_required
    def gym_qr_image(gym_id: str):
        """Check-in QR code to print at the gym entrance."""
        try:
            payload = build_checkin_payload(require_non_empty(gym_id, "Gym id"))
            return send_file(render_qr_png(payload), mimetype="image/png")
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("failed to render QR for gym=%s", gym_id)
            return jsonify({"success": False, "message": "Failed to generate QR code."}), 500
