import io
import logging

from flask import Blueprint, jsonify, request, send_file

from services.export_service import build_pdf_bytes, csv_content, json_content
from utils.exceptions import ExportError
from utils.filenames import export_filename

logger = logging.getLogger(__name__)

export_bp = Blueprint('export', __name__)

MIMETYPES = {
    "pdf": "application/pdf",
    "json": "application/json",
    "csv": "text/csv",
}


@export_bp.route('/<fmt>', methods=['POST'])
def export_analysis(fmt):
    if fmt not in MIMETYPES:
        return jsonify({"error": f"Unsupported export format: {fmt}"}), 404

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    result = data.get("result")
    idea_title = data.get("ideaTitle")

    if not result or not idea_title:
        return jsonify({"error": "Missing result or ideaTitle"}), 400

    try:
        if fmt == "pdf":
            options = {key: data[key] for key in ("format", "orientation") if key in data}
            content = build_pdf_bytes(result, idea_title, options)
        elif fmt == "json":
            content = json_content(result, idea_title).encode("utf-8")
        else:
            content = csv_content(result, idea_title).encode("utf-8")
    except ExportError as e:
        logger.exception(f"Export to {fmt} failed for '{idea_title}'")
        return jsonify({"error": str(e)}), 500
    except Exception:
        logger.exception(f"Unexpected error exporting {fmt} for '{idea_title}'")
        return jsonify({"error": "Export failed"}), 500

    return send_file(
        io.BytesIO(content),
        mimetype=MIMETYPES[fmt],
        as_attachment=True,
        download_name=data.get("filename") or export_filename(idea_title, fmt),
    )
