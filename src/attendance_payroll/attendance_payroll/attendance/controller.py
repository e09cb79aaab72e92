from __future__ import annotations

import csv
import io
from datetime import date
from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import error_response, server_error, to_json
from ..common.validators import require_id
from ..container import Container
from ..core.exceptions import DomainError, ValidationError
from .deriver import CSV_HEADERS, DaySummary, to_csv_rows
from .model import PunchRequest


def _summary_json(s: DaySummary) -> dict:
    return {
        "rfid": s.rfid,
        "worker_id": s.worker_id,
        "name": s.worker_name,
        "department_name": s.department_name,
        "date": s.day,
        "in_times": to_json(list(s.in_times)),
        "out_times": to_json(list(s.out_times)),
        "duration": s.duration,
        "latest_activity": s.latest_activity.isoformat(),
    }


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _punch_body() -> dict:
        return request.get_json(silent=True) or {}

    def _punch_response(outcome):
        return (
            jsonify(
                {
                    "message": outcome.message,
                    "attendance": to_json(outcome.event),
                    "correction": to_json(outcome.correction) if outcome.correction else None,
                    "distance": round(outcome.geofence.distance_m, 2) if outcome.geofence.distance_m is not None else None,
                }
            ),
            201,
        )

    def _parse_day(value: Optional[str], field_name: str) -> date:
        if not value:
            raise ValidationError(f"{field_name} is required")
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError(f"Invalid {field_name} (YYYY-MM-DD)")

    def _report_query():
        worker_id = request.args.get("worker_id")
        return service.day_summaries(
            request.args.get("tenant", ""),
            _parse_day(request.args.get("start"), "start"),
            _parse_day(request.args.get("end"), "end"),
            worker_id=require_id(worker_id, "worker id") if worker_id not in (None, "") else None,
        )

    @app.route("/api/attendance", methods=["PUT"], endpoint="api_put_attendance")
    def put_attendance():
        body = _punch_body()
        try:
            outcome = service.record_punch(
                PunchRequest(
                    tenant=body.get("tenant", ""),
                    rfid=body.get("rfid", ""),
                    presence=body.get("presence"),
                    latitude=body.get("latitude"),
                    longitude=body.get("longitude"),
                )
            )
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e)
        return _punch_response(outcome)

    @app.route("/api/attendance/rfid", methods=["PUT"], endpoint="api_put_rfid_attendance")
    def put_rfid_attendance():
        body = _punch_body()
        try:
            outcome = service.record_card_punch(
                body.get("rfid", ""),
                presence=body.get("presence"),
                latitude=body.get("latitude"),
                longitude=body.get("longitude"),
            )
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e)
        return _punch_response(outcome)

    @app.route("/api/attendance/last", methods=["POST"], endpoint="api_last_attendance")
    def last_attendance():
        body = _punch_body()
        try:
            preview = service.next_presence(body.get("tenant", ""), body.get("rfid", ""))
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e)
        return jsonify(
            {
                "presence": preview.presence,
                "message": preview.message,
                "last_attendance": to_json(preview.last_event) if preview.last_event else None,
            }
        )

    @app.route("/api/attendance/report", methods=["GET"], endpoint="api_attendance_report")
    def attendance_report():
        try:
            summaries = _report_query()
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e)
        return jsonify([_summary_json(s) for s in summaries])

    @app.route("/api/attendance/report.csv", methods=["GET"], endpoint="api_attendance_report_csv")
    def attendance_report_csv():
        try:
            summaries = _report_query()
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e)

        out = io.StringIO()
        writer = csv.writer(out)
        writer.writerow(CSV_HEADERS)
        writer.writerows(to_csv_rows(summaries))

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=attendance_report.csv"},
        )
