from __future__ import annotations

import logging

from flask import Flask, jsonify, request, session

from ..common.http import admin_required, error_response, roles_required, server_error
from ..core.enums import Role
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)

_EDITABLE = ("name", "description", "latitude", "longitude", "radius", "address")


def register(app: Flask, container: Container) -> None:
    locations = container.location_service

    @app.route("/api/attendance/locations", methods=["GET"], endpoint="locations_list")
    @admin_required
    def locations_list():
        try:
            items = locations.list_locations()
        except Exception:
            logger.exception("Error fetching locations")
            return server_error("Failed to fetch locations")
        return jsonify({"success": True, "data": [loc.to_dict() for loc in items]})

    @app.route("/api/attendance/locations/active", methods=["GET"], endpoint="locations_active")
    @admin_required
    def locations_active():
        try:
            active = locations.active_locations()
        except Exception:
            logger.exception("Error fetching active locations")
            return server_error("Failed to fetch active locations")
        return jsonify(
            {
                "success": True,
                "data": {service.value: (loc.to_dict() if loc else None) for service, loc in active.items()},
            }
        )

    @app.route("/api/attendance/locations", methods=["POST"], endpoint="locations_create")
    @roles_required(Role.CLERK, Role.ELDER)
    def locations_create():
        data = request.get_json(silent=True) or {}
        try:
            location = locations.create(
                name=data.get("name"),
                latitude=data.get("latitude"),
                longitude=data.get("longitude"),
                radius=data.get("radius"),
                address=data.get("address"),
                description=data.get("description"),
                created_by=session.get("admin_id"),
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error creating location")
            return server_error("Failed to create location")
        return jsonify({"success": True, "message": "Church location created successfully", "data": location.to_dict()}), 201

    @app.route("/api/attendance/locations/<int:location_id>", methods=["PUT"], endpoint="locations_update")
    @roles_required(Role.CLERK, Role.ELDER)
    def locations_update(location_id: int):
        data = request.get_json(silent=True) or {}
        try:
            location = locations.update(location_id, **{k: data[k] for k in _EDITABLE if k in data})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error updating location")
            return server_error("Failed to update location")
        return jsonify({"success": True, "message": "Location updated successfully", "data": location.to_dict()})

    @app.route("/api/attendance/locations/<int:location_id>/activate", methods=["PUT"], endpoint="locations_activate")
    @roles_required(Role.CLERK, Role.ELDER)
    def locations_activate(location_id: int):
        data = request.get_json(silent=True) or {}
        try:
            location = locations.activate_for_services(location_id, data.get("services"))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error setting active location")
            return server_error("Failed to set active location")
        return jsonify(
            {
                "success": True,
                "message": f"{location.name} is now active for selected services",
                "data": location.to_dict(),
            }
        )

    @app.route("/api/attendance/locations/<int:location_id>/deactivate", methods=["PUT"], endpoint="locations_deactivate")
    @roles_required(Role.CLERK, Role.ELDER)
    def locations_deactivate(location_id: int):
        data = request.get_json(silent=True) or {}
        try:
            location = locations.deactivate_for_services(location_id, data.get("services"))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error deactivating location")
            return server_error("Failed to deactivate location")
        return jsonify({"success": True, "message": f"{location.name} deactivated", "data": location.to_dict()})

    @app.route("/api/attendance/locations/<int:location_id>", methods=["DELETE"], endpoint="locations_delete")
    @roles_required(Role.ELDER)
    def locations_delete(location_id: int):
        try:
            locations.delete(location_id)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error deleting location")
            return server_error("Failed to delete location")
        return jsonify({"success": True, "message": "Location deleted successfully"})
