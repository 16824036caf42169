import json
import os
import textwrap
from datetime import datetime

import pytest

from models.analysis_schema import AnalysisResult
from services.export_service import (
    build_csv_export,
    build_json_export,
    build_pdf_bytes,
    csv_content,
    render_document,
    to_csv,
    to_json,
)
from services.pdf_report import Cursor, DrawingSurface, ReportLayout, TextMeasurer, render_pdf
from utils.filenames import export_filename

GENERATED_AT = datetime(2024, 3, 5, 14, 30)


class CharMeasurer(TextMeasurer):
    """Wraps by character count, roughly 0.2mm per point of font size per character."""

    def split(self, text, bold, size, width):
        return textwrap.wrap(text, max(int(width / (size * 0.2)), 1)) or [""]


class RecordingSurface(DrawingSurface):
    width = 210.0
    height = 297.0

    def __init__(self):
        self.page = 1
        self.texts = []
        self.pages_started = 0

    def set_font(self, bold, size):
        pass

    def set_text_color(self, rgb):
        pass

    def set_fill_color(self, rgb):
        pass

    def set_draw_color(self, rgb):
        pass

    def set_line_width(self, width):
        pass

    def text(self, value, x, y):
        self.texts.append((self.page, value, x, y))

    def rect(self, x, y, w, h):
        pass

    def line(self, x1, y1, x2, y2):
        pass

    def new_page(self):
        self.page += 1
        self.pages_started += 1


def test_cursor_breaks_page_only_when_needed():
    assert Cursor(page=1, y=100).ensure_space(20, 272) == (Cursor(page=1, y=100), False)
    assert Cursor(page=1, y=260).ensure_space(20, 272) == (Cursor(page=2, y=25), True)
    assert Cursor(page=3, y=10).advance(6) == Cursor(page=3, y=16)


def test_layout_paginates_long_reports(canned_result_dict):
    canned_result_dict["pros"] = [f"Advantage number {i} with enough words to wrap a little" for i in range(60)]
    result = AnalysisResult.model_validate(canned_result_dict)
    surface = RecordingSurface()

    cursor = render_pdf(result, "Test Idea", surface, CharMeasurer(), GENERATED_AT)

    assert surface.pages_started > 0
    assert cursor.page == surface.pages_started + 1
    max_y = surface.height - 25
    for page, value, x, y in surface.texts:
        if value.startswith("Generated by") or value.startswith("Report Date"):
            assert y == max_y + 10
        else:
            assert y <= max_y

    first_page = [value for page, value, _, _ in surface.texts if page == 1]
    assert "Test Idea - Analysis Report" not in first_page
    for page in range(2, cursor.page + 1):
        on_page = [value for p, value, _, _ in surface.texts if p == page]
        assert "Test Idea - Analysis Report" in on_page
        assert f"Page {page}" in on_page


def test_layout_draws_sections_in_order(canned_result):
    surface = RecordingSurface()
    render_pdf(canned_result, "Test Idea", surface, CharMeasurer(), GENERATED_AT)

    texts = [value for _, value, _, _ in surface.texts]
    order = [
        "Executive Summary",
        "Key Metrics",
        "BCG Matrix Analysis",
        "SWOT Analysis",
        "Budget Estimate",
        "Recommendations",
        "Strengths & Challenges",
        "Business Model Canvas",
        "Generated by IdeaLyzer - AI-Powered Business Analysis",
    ]
    assert [texts.index(title) for title in order] == sorted(texts.index(title) for title in order)
    assert "Generated: March 05, 2024, 02:30 PM" in texts
    assert "Quality Score: 7.7/10" in texts
    assert "QUESTION MARK" in texts
    assert "Total Budget: $125,000" in texts
    assert "(40.0%)" in texts
    assert "Report Date: 03/05/2024" in texts


def test_canvas_lists_are_capped_at_three_items(canned_result):
    surface = RecordingSurface()
    render_pdf(canned_result, "Test Idea", surface, CharMeasurer(), GENERATED_AT)

    texts = [value for _, value, _, _ in surface.texts]
    assert "Durable" in texts
    assert "Portable" not in texts


def test_layout_primitives_return_advanced_cursor():
    layout = ReportLayout(RecordingSurface(), CharMeasurer(), "T")
    assert layout.section(Cursor(page=1, y=50), "Title") == Cursor(page=1, y=65)
    assert layout.subsection(Cursor(page=1, y=50), "Sub") == Cursor(page=1, y=58)
    assert layout.bullet(Cursor(page=1, y=50), "short") == Cursor(page=1, y=56)
    assert layout.metric_bar(Cursor(page=1, y=50), "Viability", 7) == Cursor(page=1, y=58)


def test_pdf_bytes_are_identical_for_identical_inputs(canned_result):
    options = {"generated_at": GENERATED_AT}
    first = build_pdf_bytes(canned_result, "Test Idea", options)
    second = build_pdf_bytes(canned_result, "Test Idea", options)

    assert first.startswith(b"%PDF")
    assert first == second


def test_pdf_supports_letter_landscape(canned_result):
    content = build_pdf_bytes(canned_result, "Test Idea", {"format": "letter", "orientation": "landscape"})
    assert content.startswith(b"%PDF")


def test_render_document_writes_file(canned_result, tmp_path):
    outcome = render_document(canned_result, "My Idea: v2!", {"output_dir": str(tmp_path), "generated_at": GENERATED_AT})

    assert outcome["success"] is True
    assert outcome["filename"] == "My_Idea__v2__analysis.pdf"
    with open(outcome["path"], "rb") as f:
        assert f.read().startswith(b"%PDF")


def test_render_document_reports_failure_without_writing(canned_result_dict, tmp_path):
    del canned_result_dict["frameworks"]

    outcome = render_document(canned_result_dict, "Broken", {"output_dir": str(tmp_path)})

    assert outcome["success"] is False
    assert "malformed" in outcome["error"]
    assert os.listdir(tmp_path) == []


def test_render_document_rejects_unknown_page_format(canned_result, tmp_path):
    outcome = render_document(canned_result, "Idea", {"output_dir": str(tmp_path), "format": "a0"})
    assert outcome == {"success": False, "error": "Unsupported page format: a0"}
    assert os.listdir(tmp_path) == []


def test_json_export_round_trip(canned_result, tmp_path):
    outcome = to_json(canned_result, "Test Idea", {"output_dir": str(tmp_path)})

    assert outcome["success"] is True
    assert outcome["filename"] == "Test_Idea_analysis.json"
    with open(outcome["path"], encoding="utf-8") as f:
        exported = json.load(f)
    assert exported["metadata"]["title"] == "Test Idea"
    assert exported["metadata"]["version"] == "1.0"
    assert exported["metadata"]["exportedAt"].endswith("Z")
    assert exported["analysis"] == canned_result.to_dict()
    assert AnalysisResult.model_validate(exported["analysis"]) == canned_result


def test_json_export_keeps_dict_result_unchanged(canned_result_dict):
    exported = build_json_export(canned_result_dict, "Test Idea", exported_at=GENERATED_AT)
    assert exported["analysis"] is canned_result_dict
    assert exported["metadata"]["exportedAt"] == "2024-03-05T14:30:00"


def test_csv_doubles_embedded_quotes(canned_result_dict):
    canned_result_dict["pros"] = ['Says "hello" to users', "Plain"]

    content = csv_content(canned_result_dict, "Test Idea")

    assert '"","Says ""hello"" to users"' in content.splitlines()


def test_csv_layout(canned_result):
    rows = build_csv_export(canned_result, "Test Idea")
    lines = csv_content(canned_result, "Test Idea").split("\n")

    assert rows[0] == ["Metric", "Value"]
    assert ["Quality Score", "7.7"] in rows
    assert ["Desirability", "9"] in rows
    assert ["Market Growth", "12.5%"] in rows
    assert ["Total Budget", "$125,000"] in rows
    assert ["Development Cost", "$50,000"] in rows

    strengths = rows.index(["Strengths", ""])
    assert rows[strengths + 1:strengths + 5] == [["", pro] for pro in canned_result.pros]
    assert rows[strengths + 5] == ["", ""]

    plan = rows.index(["Action Plan", ""])
    assert rows[plan + 1] == ["", "1. Build prototype"]

    assert lines[0] == '"Metric","Value"'
    assert lines[-1] == '"","Unit sales"'


def test_csv_rejects_malformed_result():
    from utils.exceptions import ExportError

    with pytest.raises(ExportError):
        build_csv_export({"summary": "only"}, "Test Idea")


def test_csv_export_writes_file(canned_result, tmp_path):
    outcome = to_csv(canned_result, "Test Idea", {"output_dir": str(tmp_path), "filename": "sheet.csv"})

    assert outcome == {"success": True, "filename": "sheet.csv", "path": str(tmp_path / "sheet.csv")}
    with open(outcome["path"], encoding="utf-8") as f:
        assert f.read() == csv_content(canned_result, "Test Idea")


def test_csv_export_reports_malformed_result(tmp_path):
    outcome = to_csv({"summary": "only"}, "Test Idea", {"output_dir": str(tmp_path)})

    assert outcome["success"] is False
    assert "malformed" in outcome["error"]
    assert os.listdir(tmp_path) == []


def test_unexpected_layout_error_is_reported(canned_result, tmp_path, monkeypatch, caplog):
    def explode(*args, **kwargs):
        raise IndexError("list index out of range")

    monkeypatch.setattr("services.export_service.render_pdf", explode)

    outcome = render_document(canned_result, "Test Idea", {"output_dir": str(tmp_path)})

    assert outcome == {"success": False, "error": "list index out of range"}
    assert os.listdir(tmp_path) == []
    assert "Error exporting PDF for 'Test Idea'" in caplog.text


def test_failed_write_keeps_previous_file(canned_result, tmp_path, monkeypatch):
    target = tmp_path / "Test_Idea_analysis.json"
    target.write_text("previous export", encoding="utf-8")

    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("services.export_service.os.replace", fail_replace)

    outcome = to_json(canned_result, "Test Idea", {"output_dir": str(tmp_path)})

    assert outcome == {"success": False, "error": "disk full"}
    assert os.listdir(tmp_path) == ["Test_Idea_analysis.json"]
    assert target.read_text(encoding="utf-8") == "previous export"


def test_export_filename():
    assert export_filename("My Idea: v2!", "csv") == "My_Idea__v2__analysis.csv"
