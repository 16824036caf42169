import csv
import io
import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from reportlab.lib.pagesizes import A4, landscape, letter
from reportlab.pdfgen import canvas

from config.settings import Config
from models.analysis_schema import AnalysisResult
from services.pdf_report import ReportLabMeasurer, ReportLabSurface, render_pdf
from utils.exceptions import ExportError
from utils.filenames import export_filename
from utils.formatting import format_currency, format_number

logger = logging.getLogger(__name__)

PAGE_SIZES = {"a4": A4, "letter": letter}
EXPORT_VERSION = "1.0"


def _coerce(result: Union[AnalysisResult, Dict[str, Any]]) -> AnalysisResult:
    if isinstance(result, AnalysisResult):
        return result
    try:
        return AnalysisResult.model_validate(result)
    except PydanticValidationError as e:
        raise ExportError(f"Analysis result is malformed: {e}") from e


def _page_size(options: Dict[str, Any]):
    page_format = str(options.get("format", "a4")).lower()
    if page_format not in PAGE_SIZES:
        raise ExportError(f"Unsupported page format: {page_format}")
    size = PAGE_SIZES[page_format]
    if options.get("orientation", "portrait") == "landscape":
        size = landscape(size)
    return size


def build_pdf_bytes(result, title: str, options: Optional[Dict[str, Any]] = None) -> bytes:
    """Render the whole report in memory. Raises ExportError when the result cannot be laid out."""
    options = options or {}
    analysis = _coerce(result)
    page_size = _page_size(options)
    generated_at = options.get("generated_at") or datetime.now()

    buffer = io.BytesIO()
    # invariant=1 fixes the document id and creation date, so equal inputs give equal bytes
    pdf = canvas.Canvas(buffer, pagesize=page_size, invariant=1)
    pdf.setTitle(f"{title} - Analysis Report")
    pdf.setAuthor("IdeaLyzer")

    try:
        render_pdf(analysis, title, ReportLabSurface(pdf, page_size), ReportLabMeasurer(), generated_at)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ExportError(f"Failed to lay out PDF: {e}") from e

    pdf.save()
    return buffer.getvalue()


def _write_file(content: Union[bytes, str], filename: str, output_dir: str) -> str:
    """Write through a temporary file in the target directory so a failed write leaves nothing behind."""
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, filename)
    data = content if isinstance(content, bytes) else content.encode("utf-8")

    fd, tmp_path = tempfile.mkstemp(dir=output_dir, prefix=".export-", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except Exception:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    return path


def _export(kind: str, build: Callable[[], Union[bytes, str]], title: str, options: Dict[str, Any]) -> Dict[str, Any]:
    """Build the content in memory, then save it. Failures come back in the record, never as exceptions."""
    filename = options.get("filename") or export_filename(title, kind)
    try:
        content = build()
        path = _write_file(content, filename, options.get("output_dir") or Config.EXPORT_DIR)
    except Exception as e:
        logger.exception(f"Error exporting {kind.upper()} for '{title}'")
        return {"success": False, "error": str(e)}

    logger.info(f"{kind.upper()} export written to {path}")
    return {"success": True, "filename": filename, "path": path}


def build_json_export(result, title: str, exported_at: Optional[datetime] = None) -> Dict[str, Any]:
    analysis = result.to_dict() if isinstance(result, AnalysisResult) else result
    exported_at = exported_at or datetime.now(timezone.utc)
    return {
        "metadata": {
            "title": title,
            "exportedAt": exported_at.isoformat().replace("+00:00", "Z"),
            "version": EXPORT_VERSION,
        },
        "analysis": analysis,
    }


def json_content(result, title: str, exported_at: Optional[datetime] = None) -> str:
    return json.dumps(build_json_export(result, title, exported_at), indent=2, ensure_ascii=False)


def _list_block(header: str, items: List[str]) -> List[List[str]]:
    return [[header, ""]] + [["", item] for item in items] + [["", ""]]


def build_csv_export(result, title: str) -> List[List[str]]:
    """Rows of the two-column Metric/Value sheet."""
    analysis = _coerce(result)
    metrics = analysis.frameworks.metrics
    bcg = analysis.frameworks.bcg
    swot = analysis.frameworks.swot
    budget = analysis.budget_estimate
    recs = analysis.recommendations
    canvas_model = analysis.frameworks.business_model

    rows = [
        ["Metric", "Value"],
        ["Idea Title", title],
        ["Quality Score", format_number(analysis.quality_score)],
        ["Desirability", format_number(metrics.desirability)],
        ["Viability", format_number(metrics.viability)],
        ["Feasibility", format_number(metrics.feasibility)],
        ["Sustainability", format_number(metrics.sustainability)],
        ["BCG Category", bcg.category],
        ["Market Growth", f"{format_number(bcg.market_growth)}%"],
        ["Market Share", f"{format_number(bcg.market_share)}%"],
        ["Total Budget", format_currency(budget.total)],
        ["Development Cost", format_currency(budget.breakdown.development)],
        ["Marketing Cost", format_currency(budget.breakdown.marketing)],
        ["Operations Cost", format_currency(budget.breakdown.operations)],
        ["Legal Cost", format_currency(budget.breakdown.legal)],
        ["Timeline", budget.timeline],
        ["Summary", analysis.summary],
        ["Evaluation", analysis.evaluation],
        ["BCG Reasoning", bcg.reasoning],
        ["Elevator Pitch", recs.elevator_pitch],
        ["Mission", recs.brand_wheel.mission],
        ["Vision", recs.brand_wheel.vision],
        ["", ""],
    ]
    rows += _list_block("Strengths", analysis.pros)
    rows += _list_block("Challenges", analysis.cons)
    rows += _list_block("SWOT - Strengths", swot.strengths)
    rows += _list_block("SWOT - Weaknesses", swot.weaknesses)
    rows += _list_block("SWOT - Opportunities", swot.opportunities)
    rows += _list_block("SWOT - Threats", swot.threats)
    rows += _list_block("Suggested Names", recs.startup_names)
    rows += _list_block("Brand Values", recs.brand_wheel.values)
    rows += _list_block("Brand Personality", recs.brand_wheel.personality)
    rows += _list_block("Action Plan", [f"{i}. {step}" for i, step in enumerate(recs.action_plan, start=1)])
    rows += _list_block("Improvements", recs.improvements)
    for name, items in (
        ("Key Partners", canvas_model.key_partners),
        ("Key Activities", canvas_model.key_activities),
        ("Key Resources", canvas_model.key_resources),
        ("Value Propositions", canvas_model.value_propositions),
        ("Customer Relationships", canvas_model.customer_relationships),
        ("Channels", canvas_model.channels),
        ("Customer Segments", canvas_model.customer_segments),
        ("Cost Structure", canvas_model.cost_structure),
        ("Revenue Streams", canvas_model.revenue_streams),
    ):
        rows += _list_block(f"Business Model - {name}", items)

    # no separator after the last list
    return rows[:-1]


def csv_content(result, title: str) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(build_csv_export(result, title))
    return buffer.getvalue().rstrip("\n")


def render_document(result, title: str, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build the PDF report and save it."""
    options = options or {}
    return _export("pdf", lambda: build_pdf_bytes(result, title, options), title, options)


def to_json(result, title: str, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    options = options or {}
    return _export("json", lambda: json_content(result, title, options.get("exported_at")), title, options)


def to_csv(result, title: str, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    options = options or {}
    return _export("csv", lambda: csv_content(result, title), title, options)
