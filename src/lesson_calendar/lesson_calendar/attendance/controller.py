from __future__ import annotations

import io
from functools import wraps

import qrcode
from flask import Flask, jsonify, request, send_file, session

from ..common.datetime_utils import coerce_datetime, now_local
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

    def _viewer(group_id: str):
        return container.member_service.viewer_context(group_id=group_id, user_id=str(session["user_id"]))

    def _qr_png(payload: str):
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=2,
        )
        qr.add_data(payload)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)
        return buf

    @app.route("/groups/<group_id>/scan", methods=["POST"], endpoint="attendance_scan")
    @login_required
    def attendance_scan(group_id: str):
        data = request.get_json(silent=True) or {}
        try:
            viewer = _viewer(group_id)
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except StorageError:
            return jsonify({"success": False, "reason": "storage error", "message": "Please try again."}), 500

        result = container.attendance_service.scan(viewer, str(data.get("code") or ""))
        if result.accepted:
            return jsonify(result.to_dict()), 200
        status = 500 if result.reason == "storage error" else 400
        return jsonify(result.to_dict()), status

    @app.route("/groups/<group_id>/lessons/<lesson_id>/qr", methods=["POST"], endpoint="attendance_issue_code")
    @login_required
    def attendance_issue_code(group_id: str, lesson_id: str):
        try:
            viewer = _viewer(group_id)
            qr = container.attendance_service.issue_code(viewer, lesson_id)
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StorageError:
            return jsonify({"success": False, "message": "Could not open attendance. Please try again."}), 500

        return jsonify({"success": True, "code": qr.code, "expiresAt": qr.expires_at.isoformat()}), 200

    @app.route("/groups/<group_id>/lessons/<lesson_id>/qr.png", methods=["GET"], endpoint="attendance_code_image")
    @login_required
    def attendance_code_image(group_id: str, lesson_id: str):
        """PNG of the lesson's live scan code, for the instructor to display."""
        try:
            viewer = _viewer(group_id)
            qr = container.attendance_service.issue_code(viewer, lesson_id)
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StorageError:
            return jsonify({"success": False, "message": "Could not open attendance. Please try again."}), 500

        return send_file(_qr_png(qr.code), mimetype="image/png")

    @app.route("/groups/<group_id>/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @login_required
    def attendance_stats(group_id: str):
        start = coerce_datetime(request.args.get("start"))
        end = coerce_datetime(request.args.get("end")) or now_local()
        if start is None:
            return jsonify({"success": False, "message": "start is required"}), 400

        try:
            viewer = _viewer(group_id)
            stats = container.attendance_service.stats_for_member(viewer, start=start, end=end)
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except StorageError:
            return jsonify({"success": False, "message": "Could not load attendance."}), 500

        return jsonify(
            {
                "success": True,
                "total": stats.total,
                "present": stats.present,
                "late": stats.late,
                "earlyLeave": stats.early_leave,
                "absent": stats.absent,
                "excused": stats.excused,
                "rate": stats.rate,
            }
        ), 200
