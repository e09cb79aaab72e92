from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import error_response, server_error, to_json
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    ledger = container.advance_ledger

    @app.route("/api/advances", methods=["POST"], endpoint="api_issue_advance")
    def issue_advance():
        body = request.get_json(silent=True) or {}
        try:
            advance = ledger.issue(
                body.get("tenant", ""),
                body.get("worker_id"),
                body.get("amount"),
                description=body.get("description"),
                approved_by=body.get("approved_by"),
            )
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e)
        return jsonify({"message": "Advance voucher created successfully", "advance": to_json(advance)}), 201

    @app.route("/api/advances/<advance_id>/deduct", methods=["POST"], endpoint="api_deduct_advance")
    def deduct_advance(advance_id: str):
        body = request.get_json(silent=True) or {}
        try:
            advance = ledger.deduct(
                body.get("tenant", ""),
                advance_id,
                body.get("amount"),
                description=body.get("description"),
            )
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e)
        return jsonify({"message": "Deduction recorded successfully", "advance": to_json(advance)})

    @app.route("/api/advances", methods=["GET"], endpoint="api_list_advances")
    def list_advances():
        try:
            advances = ledger.list_for_tenant(request.args.get("tenant", ""))
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e)
        return jsonify(to_json(list(advances)))

    @app.route("/api/advances/worker/<worker_id>", methods=["GET"], endpoint="api_worker_advances")
    def worker_advances(worker_id: str):
        try:
            advances = ledger.list_for_worker(request.args.get("tenant", ""), worker_id)
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e)
        return jsonify(to_json(list(advances)))
