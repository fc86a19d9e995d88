from flask import Blueprint, request, jsonify, send_file

from services import report_service
from utils.decorators import auth_required

reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.route("/summary")
@auth_required
def summary():
    start, end = report_service.resolve_range(request.args.get("start"), request.args.get("end"))
    rows = report_service.attendance_summary(start, end, class_label=request.args.get("class"))
    return jsonify({
        "start": start.isoformat(),
        "end": end.isoformat(),
        "students": rows
    })


@reports_bp.route("/daily")
@auth_required
def daily():
    start, end = report_service.resolve_range(request.args.get("start"), request.args.get("end"))
    return jsonify({
        "start": start.isoformat(),
        "end": end.isoformat(),
        "days": report_service.daily_counts(start, end)
    })


@reports_bp.route("/export")
@auth_required
def export():
    start, end = report_service.resolve_range(request.args.get("start"), request.args.get("end"))
    rows = report_service.attendance_summary(start, end, class_label=request.args.get("class"))

    output, mimetype, download_name = report_service.export_summary(
        rows, request.args.get("format", "csv"), start, end
    )
    return send_file(output, mimetype=mimetype, as_attachment=True, download_name=download_name)
