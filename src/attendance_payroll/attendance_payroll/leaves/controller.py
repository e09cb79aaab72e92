from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import error_response, server_error, to_json
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leaves", methods=["POST"], endpoint="api_apply_leave")
    def apply_leave():
        body = request.get_json(silent=True) or {}
        try:
            leave = service.apply(
                body.get("tenant", ""),
                body.get("worker_id"),
                body.get("leave_type"),
                body.get("start_date"),
                body.get("end_date"),
                body.get("reason", ""),
                total_days=body.get("total_days"),
                start_time=body.get("start_time"),
                end_time=body.get("end_time"),
            )
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e)
        return jsonify(to_json(leave)), 201

    @app.route("/api/leaves", methods=["GET"], endpoint="api_list_leaves")
    def list_leaves():
        try:
            leaves = service.list_for_tenant(request.args.get("tenant", ""), request.args.get("status"))
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e)
        return jsonify(to_json(list(leaves)))

    @app.route("/api/leaves/<leave_id>/status", methods=["PUT"], endpoint="api_leave_status")
    def update_leave_status(leave_id: str):
        body = request.get_json(silent=True) or {}
        try:
            leave = service.decide(body.get("tenant", ""), leave_id, body.get("status"))
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e)
        return jsonify(to_json(leave))
