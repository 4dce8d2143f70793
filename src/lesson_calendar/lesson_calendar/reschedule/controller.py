from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date
from ..core.exceptions import AuthorizationError, StorageError, ValidationError
from ..container import Container
from .service import time_slots


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

    def _lesson_dict(lesson) -> dict:
        return {
            "id": lesson.lesson_id,
            "scheduledAt": lesson.scheduled_at.isoformat(),
            "endsAt": lesson.ends_at.isoformat(),
            "durationMinutes": lesson.duration_minutes,
            "instructorId": lesson.instructor_id,
            "roomId": lesson.room_id,
        }

    def _request_dict(req) -> dict:
        return {
            "id": req.request_id,
            "lessonId": req.lesson_id,
            "requestedBy": req.requested_by,
            "requestedDate": req.requested_date.isoformat(),
            "reason": req.reason,
            "status": req.status.value,
            "createdAt": req.created_at.isoformat() if req.created_at else None,
        }

    @app.route("/groups/<group_id>/reschedule/candidates", methods=["GET"], endpoint="reschedule_candidates")
    @login_required
    def reschedule_candidates(group_id: str):
        try:
            viewer = _viewer(group_id)
            lessons = container.reschedule_service.candidates(viewer)
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except StorageError:
            return jsonify({"success": False, "message": "Could not load lessons."}), 500

        today, horizon = container.reschedule_service.window()
        return jsonify(
            {
                "success": True,
                "lessons": [_lesson_dict(lesson) for lesson in lessons],
                "timeSlots": time_slots(),
                "minDate": today.date().isoformat(),
                "maxDate": horizon.date().isoformat(),
            }
        ), 200

    @app.route("/groups/<group_id>/reschedule", methods=["POST"], endpoint="reschedule_submit")
    @login_required
    def reschedule_submit(group_id: str):
        data = request.get_json(silent=True) or {}
        try:
            viewer = _viewer(group_id)
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except StorageError:
            return jsonify({"success": False, "reason": "submission failed", "message": "Please try again."}), 500

        requested_date = None
        raw_date = str(data.get("date") or "").strip()
        if raw_date:
            try:
                requested_date = parse_iso_date(raw_date)
            except ValueError:
                requested_date = None

        result = container.reschedule_service.submit(
            viewer,
            lesson_id=data.get("lesson_id"),
            requested_date=requested_date,
            requested_time=data.get("time"),
            reason=data.get("reason"),
        )
        if result.submitted:
            return jsonify(result.to_dict()), 201
        status = 500 if result.reason == "submission failed" else 400
        return jsonify(result.to_dict()), status

    @app.route("/groups/<group_id>/reschedule/pending", methods=["GET"], endpoint="reschedule_pending")
    @login_required
    def reschedule_pending(group_id: str):
        try:
            viewer = _viewer(group_id)
            pending = container.reschedule_service.list_pending_for_instructor(viewer)
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except StorageError:
            return jsonify({"success": False, "message": "Could not load requests."}), 500

        return jsonify({"success": True, "requests": [_request_dict(r) for r in pending]}), 200

    def _review(request_id: int, approve: bool):
        try:
            viewer = _viewer(container.reschedule_service.group_id_for(request_id))
            if approve:
                container.reschedule_service.approve(viewer, request_id)
            else:
                container.reschedule_service.reject(viewer, request_id)
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StorageError:
            return jsonify({"success": False, "message": "Could not review the request."}), 500

        return jsonify({"success": True, "status": "approved" if approve else "rejected"}), 200

    @app.route("/reschedule/<int:request_id>/approve", methods=["POST"], endpoint="reschedule_approve")
    @login_required
    def reschedule_approve(request_id: int):
        return _review(request_id, True)

    @app.route("/reschedule/<int:request_id>/reject", methods=["POST"], endpoint="reschedule_reject")
    @login_required
    def reschedule_reject(request_id: int):
        return _review(request_id, False)
