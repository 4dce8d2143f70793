from __future__ import annotations

import calendar as pycalendar
from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import now_local, parse_iso_date
from ..core.exceptions import AuthorizationError, StorageError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Please sign in to continue."}), 401
            return view(*args, **kwargs)

        return wrapper

    def _month_bounds():
        today = now_local().date()
        last = pycalendar.monthrange(today.year, today.month)[1]
        return today.replace(day=1), today.replace(day=last)

    @app.route("/groups/<group_id>/calendar", methods=["GET"], endpoint="group_calendar")
    @login_required
    def group_calendar(group_id: str):
        # Defaults to the current month.
        month_start, month_end = _month_bounds()
        try:
            start = parse_iso_date(request.args["start"]) if request.args.get("start") else month_start
            end = parse_iso_date(request.args["end"]) if request.args.get("end") else month_end
        except ValueError:
            return jsonify({"success": False, "message": "Dates must be YYYY-MM-DD"}), 400

        mine = (request.args.get("mine") or "").lower() in ("1", "true", "yes")
        color_ids = [c for c in (request.args.get("colors") or "").split(",") if c] or None

        try:
            viewer = container.member_service.viewer_context(group_id=group_id, user_id=str(session["user_id"]))
            data = container.calendar_service.view_dict(viewer, start=start, end=end, mine=mine, color_ids=color_ids)
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StorageError:
            return jsonify({"success": False, "message": "Could not load the calendar."}), 500

        return jsonify({"success": True, **data}), 200

    @app.route("/holidays/<int:year>/<int:month>", methods=["GET"], endpoint="holidays_for_month")
    def holidays_for_month(year: int, month: int):
        if not 1 <= month <= 12:
            return jsonify({"success": False, "message": "month must be 1-12"}), 400
        holidays = container.holiday_calendar.holidays_for_month(year, month)
        return jsonify({"success": True, "holidays": [h.to_dict() for h in holidays]}), 200
