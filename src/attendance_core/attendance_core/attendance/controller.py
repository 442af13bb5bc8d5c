from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import today_date_key
from ..core.exceptions import AttendanceError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container) -> None:
    """JSON routes over the attendance service.

    Authentication happens upstream; the acting user id is read from the
    Flask session.
    """

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"message": "Authentication required"}), 401
            return view(int(session["user_id"]), *args, **kwargs)

        return wrapper

    def handle_errors(action: str):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                try:
                    return view(*args, **kwargs)
                except ValidationError as e:
                    return jsonify({"message": str(e)}), 400
                except AttendanceError as e:
                    return jsonify({"reason": e.reason.value, "message": str(e)}), 409
                except Exception:
                    logger.exception("Failed to %s", action)
                    return jsonify({"message": f"Failed to {action}"}), 500

            return wrapper

        return decorator

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="api_check_in")
    @login_required
    @handle_errors("check in")
    def api_check_in(user_id: int):
        record = container.attendance_service.check_in(user_id)
        return jsonify({"attendance": record.to_dict()}), 200

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="api_check_out")
    @login_required
    @handle_errors("check out")
    def api_check_out(user_id: int):
        record = container.attendance_service.check_out(user_id)
        return jsonify({"attendance": record.to_dict()}), 200

    @app.route("/api/attendance/today", methods=["GET"], endpoint="api_today")
    @login_required
    @handle_errors("fetch today's attendance")
    def api_today(user_id: int):
        view = container.attendance_service.get_today(user_id)
        return jsonify(view.to_dict()), 200

    @app.route("/api/attendance/me", methods=["GET"], endpoint="api_my_attendance")
    @login_required
    @handle_errors("fetch attendance history")
    def api_my_attendance(user_id: int):
        month = (request.args.get("month") or "").strip() or today_date_key()[:7]
        items = container.attendance_service.get_monthly_history(user_id, month)
        return jsonify({"items": [d.to_dict() for d in items]}), 200
