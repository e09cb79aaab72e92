from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, to_json
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    runner = container.job_runner

    @app.route("/api/jobs/status/<job_id>", methods=["GET"], endpoint="api_job_status")
    def job_status(job_id: str):
        try:
            job = runner.status(job_id)
        except DomainError as e:
            return error_response(e)
        return jsonify(to_json(job))
