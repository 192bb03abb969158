from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import admin_required, error_response, server_error
from ..core.enums import ServiceType
from ..core.exceptions import DomainError, InvalidInputError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    def attendance_mark():
        data = request.get_json(silent=True) or {}
        try:
            record = container.attendance_service.mark_attendance(
                data.get("email"),
                data.get("latitude"),
                data.get("longitude"),
                data.get("deviceId"),
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error marking attendance")
            return server_error("Failed to mark attendance")

        return (
            jsonify(
                {
                    "success": True,
                    "message": f"Attendance marked successfully at {record.location_name}!",
                    "data": record.to_dict(),
                }
            ),
            201,
        )

    @app.route("/api/attendance/status", methods=["GET"], endpoint="attendance_status")
    def attendance_status():
        try:
            status = container.attendance_service.service_status()
        except Exception:
            logger.exception("Error getting service status")
            return server_error("Failed to get service status")
        return jsonify({"success": True, "data": status.to_dict()})

    @app.route("/api/attendance/member/<path:email>", methods=["GET"], endpoint="attendance_member")
    def attendance_member(email: str):
        try:
            limit = int(request.args.get("limit") or 50)
            history = container.attendance_service.member_history(email, limit=limit)
        except ValueError:
            return error_response(InvalidInputError("Limit must be an integer"))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error fetching member attendance")
            return server_error("Failed to fetch member attendance")
        return jsonify({"success": True, "data": history.to_dict()})

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @admin_required
    def attendance_list():
        try:
            start_s = request.args.get("startDate")
            end_s = request.args.get("endDate")
            service_s = request.args.get("serviceType")
            member_s = request.args.get("memberId")
            try:
                start = parse_iso_date(start_s) if start_s else None
                end = parse_iso_date(end_s) if end_s else None
                service_type = ServiceType(service_s) if service_s else None
                member_id = int(member_s) if member_s else None
            except ValueError:
                raise InvalidInputError("Invalid filter value") from None

            listing = container.attendance_service.list_records(
                start=start,
                end=end,
                service_type=service_type,
                member_id=member_id,
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error fetching attendance")
            return server_error("Failed to fetch attendance")

        return jsonify(
            {
                "success": True,
                "data": {
                    "attendances": [row.to_dict() for row in listing.rows],
                    "total": listing.total,
                    "byService": listing.counts_by_service,
                },
            }
        )
