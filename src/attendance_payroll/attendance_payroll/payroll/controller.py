from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import error_response, server_error, to_json
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    reports = container.salary_report_service
    adjustments = container.salary_adjustment_service
    runner = container.job_runner

    @app.route("/api/salary-report/<tenant>/<year>/<month>", methods=["GET"], endpoint="api_salary_report")
    def salary_report(tenant: str, year: str, month: str):
        try:
            report = reports.generate(tenant, year, month)
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e, "Error generating salary report")
        return jsonify({"message": "Salary report generated successfully", "data": to_json(report)})

    @app.route(
        "/api/salary-report/<tenant>/<year>/<month>/worker/<worker_id>",
        methods=["GET"],
        endpoint="api_salary_report_worker",
    )
    def salary_report_worker(tenant: str, year: str, month: str, worker_id: str):
        try:
            summary = reports.worker_summary(tenant, year, month, worker_id)
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e, "Error getting worker attendance summary")
        return jsonify({"message": "Worker attendance summary retrieved successfully", "data": to_json(summary)})

    @app.route("/api/salary-report/<tenant>/<year>/<month>/jobs", methods=["POST"], endpoint="api_salary_report_job")
    def salary_report_job(tenant: str, year: str, month: str):
        def _job(progress):
            return to_json(reports.generate(tenant, year, month, progress=progress))

        try:
            job, _ = runner.submit(f"salary-report:{tenant}:{year}-{month}", _job)
        except Exception as e:
            return server_error(e)
        return jsonify({"job_id": job.job_id, "state": job.state.value}), 202

    @app.route("/api/salary/<worker_id>/bonus", methods=["POST"], endpoint="api_salary_bonus")
    def give_bonus(worker_id: str):
        body = request.get_json(silent=True) or {}
        try:
            worker = adjustments.give_bonus(body.get("tenant", ""), worker_id, body.get("amount"))
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e)
        return jsonify({"message": "Bonus added successfully", "worker": to_json(worker)})

    @app.route("/api/salary/reset", methods=["POST"], endpoint="api_salary_reset")
    def reset_salaries():
        body = request.get_json(silent=True) or {}
        try:
            count = adjustments.reset_salaries(body.get("tenant", ""))
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e)
        return jsonify({"message": "Salaries reset successfully", "updated_count": count})

    @app.route("/api/salary/<worker_id>", methods=["PUT"], endpoint="api_salary_update")
    def update_salary(worker_id: str):
        body = request.get_json(silent=True) or {}
        try:
            worker = adjustments.update_salary(body.get("tenant", ""), worker_id, body.get("salary"))
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e)
        return jsonify({"message": "Salary updated successfully", "worker": to_json(worker)})
