from __future__ import annotations

import io
import logging

from flask import Flask, jsonify, request, send_file

from ..common.http import current_profile_id, error_response, login_required, server_error_response
from ..core.enums import ReportFormat
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from .renderers import render_report_csv, render_report_pdf

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _download(payload: bytes, *, mimetype: str, filename: str):
        # send_file escapes quotes and adds an RFC 5987 filename* for non-ASCII names.
        return send_file(io.BytesIO(payload), mimetype=mimetype, as_attachment=True, download_name=filename)

    @app.route("/api/attendance/report/<session_id>", methods=["GET"], endpoint="attendance_report")
    @login_required
    def attendance_report(session_id: str):
        """Session report as PDF (default), JSON or CSV via ``?format=``."""
        try:
            fmt_s = (request.args.get("format") or ReportFormat.PDF.value).lower()
            try:
                fmt = ReportFormat(fmt_s)
            except ValueError:
                raise ValidationError("Unsupported report format", details={"format": fmt_s})

            report = container.report_service.build_session_report(
                session_id=session_id,
                lecturer_id=current_profile_id(),
            )

            if fmt == ReportFormat.JSON:
                return jsonify({"success": True, "data": report.to_dict()})
            if fmt == ReportFormat.CSV:
                return _download(render_report_csv(report), mimetype="text/csv", filename=f"{report.filename_stem}.csv")
            return _download(
                render_report_pdf(report, font_path=app.config.get("PDF_FONT_PATH")),
                mimetype="application/pdf",
                filename=f"{report.filename_stem}.pdf",
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("failed to build report for session %s", session_id)
            return server_error_response("Failed to generate report")
