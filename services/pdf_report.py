"""
Paginated PDF layout for an analysis report.

The layout is greedy: a single vertical cursor moves down the page, and
before anything is drawn the caller checks that it fits above the bottom
threshold. If it does not, a new page is started. Content already placed on an
earlier page is never moved.

All positions are in millimetres measured from the top-left corner of the page.
``ReportLabSurface`` converts them to reportlab's bottom-left point system, so
the layout code can be exercised against a recording surface in tests.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Tuple

from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit

from models.analysis_schema import AnalysisResult
from services.scoring import DANGER, SUCCESS, WARNING, score_level
from utils.formatting import format_currency, format_number

MARGIN = 20
BOTTOM_GAP = 25
HEADER_OFFSET = 25

COLORS = {
    "primary": (139, 92, 246),
    "secondary": (6, 182, 212),
    "success": (16, 185, 129),
    "warning": (245, 158, 11),
    "danger": (239, 68, 68),
    "text": (31, 41, 55),
    "muted": (107, 114, 128),
    "light": (243, 244, 246),
    "white": (255, 255, 255),
}

LEVEL_COLORS = {
    SUCCESS: COLORS["success"],
    WARNING: COLORS["warning"],
    DANGER: COLORS["danger"],
}

BCG_COLORS = {
    "star": COLORS["warning"],
    "cash-cow": COLORS["success"],
    "question-mark": COLORS["secondary"],
    "dog": COLORS["danger"],
}

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

BUSINESS_MODEL_SECTIONS = [
    ("Value Propositions", "value_propositions"),
    ("Customer Segments", "customer_segments"),
    ("Revenue Streams", "revenue_streams"),
    ("Key Partners", "key_partners"),
    ("Key Activities", "key_activities"),
    ("Key Resources", "key_resources"),
    ("Customer Relationships", "customer_relationships"),
    ("Channels", "channels"),
    ("Cost Structure", "cost_structure"),
]
CANVAS_ITEMS_PER_LIST = 3


@dataclass(frozen=True)
class Cursor:
    page: int = 1
    y: float = MARGIN

    def advance(self, height: float) -> "Cursor":
        return replace(self, y=self.y + height)

    def moved_to(self, y: float) -> "Cursor":
        return replace(self, y=y)

    def ensure_space(self, required: float, max_y: float) -> Tuple["Cursor", bool]:
        """Return the cursor to draw at, and whether a new page had to be started."""
        if self.y + required > max_y:
            return Cursor(page=self.page + 1, y=HEADER_OFFSET), True
        return self, False


class TextMeasurer:
    """Strategy interface for wrapping text to a width."""

    def split(self, text: str, bold: bool, size: float, width: float) -> List[str]:
        raise NotImplementedError


class ReportLabMeasurer(TextMeasurer):
    def split(self, text: str, bold: bool, size: float, width: float) -> List[str]:
        return simpleSplit(text or "", FONT_BOLD if bold else FONT_REGULAR, size, width * mm)


class DrawingSurface:
    """Strategy interface for the drawing calls the layout needs."""

    width: float
    height: float

    def set_font(self, bold: bool, size: float):
        raise NotImplementedError

    def set_text_color(self, rgb):
        raise NotImplementedError

    def set_fill_color(self, rgb):
        raise NotImplementedError

    def set_draw_color(self, rgb):
        raise NotImplementedError

    def set_line_width(self, width: float):
        raise NotImplementedError

    def text(self, value: str, x: float, y: float):
        raise NotImplementedError

    def rect(self, x: float, y: float, w: float, h: float):
        raise NotImplementedError

    def line(self, x1: float, y1: float, x2: float, y2: float):
        raise NotImplementedError

    def new_page(self):
        raise NotImplementedError


def _rgb(color):
    return tuple(channel / 255 for channel in color)


class ReportLabSurface(DrawingSurface):
    def __init__(self, canvas, page_size: Tuple[float, float]):
        self.canvas = canvas
        self._height_pt = page_size[1]
        self.width = page_size[0] / mm
        self.height = page_size[1] / mm

    def _y(self, y: float) -> float:
        return self._height_pt - y * mm

    def set_font(self, bold: bool, size: float):
        self.canvas.setFont(FONT_BOLD if bold else FONT_REGULAR, size)

    def set_text_color(self, rgb):
        self.canvas.setFillColorRGB(*_rgb(rgb))

    def set_fill_color(self, rgb):
        self.canvas.setFillColorRGB(*_rgb(rgb))

    def set_draw_color(self, rgb):
        self.canvas.setStrokeColorRGB(*_rgb(rgb))

    def set_line_width(self, width: float):
        self.canvas.setLineWidth(width * mm)

    def text(self, value: str, x: float, y: float):
        self.canvas.drawString(x * mm, self._y(y), value)

    def rect(self, x: float, y: float, w: float, h: float):
        self.canvas.rect(x * mm, self._y(y + h), w * mm, h * mm, stroke=0, fill=1)

    def line(self, x1: float, y1: float, x2: float, y2: float):
        self.canvas.line(x1 * mm, self._y(y1), x2 * mm, self._y(y2))

    def new_page(self):
        # reportlab resets graphics state on showPage; callers set fonts and colours again
        self.canvas.showPage()


class ReportLayout:
    """Drawing primitives. Each takes the current cursor and returns the advanced one."""

    def __init__(self, surface: DrawingSurface, measurer: TextMeasurer, title: str):
        self.surface = surface
        self.measurer = measurer
        self.title = title
        self.page_width = surface.width
        self.page_height = surface.height
        self.content_width = self.page_width - 2 * MARGIN
        self.max_y = self.page_height - BOTTOM_GAP

    def _reset_text(self, size: float = 10):
        self.surface.set_font(False, size)
        self.surface.set_text_color(COLORS["text"])

    def page_header(self, page: int):
        if page <= 1:
            return
        self.surface.set_font(False, 8)
        self.surface.set_text_color(COLORS["muted"])
        self.surface.text(f"{self.title} - Analysis Report", MARGIN, 12)
        self.surface.text(f"Page {page}", self.page_width - MARGIN - 15, 12)
        self.surface.set_draw_color(COLORS["light"])
        self.surface.set_line_width(0.2)
        self.surface.line(MARGIN, 15, self.page_width - MARGIN, 15)
        self._reset_text()

    def ensure_space(self, cursor: Cursor, required: float) -> Cursor:
        cursor, page_broken = cursor.ensure_space(required, self.max_y)
        if page_broken:
            self.surface.new_page()
            self.page_header(cursor.page)
        return cursor

    def section(self, cursor: Cursor, title: str, color=COLORS["primary"]) -> Cursor:
        cursor = self.ensure_space(cursor, 20)
        self.surface.set_fill_color(color)
        self.surface.rect(MARGIN - 5, cursor.y - 5, self.content_width + 10, 12)
        self.surface.set_font(True, 14)
        self.surface.set_text_color(COLORS["white"])
        self.surface.text(title, MARGIN, cursor.y + 2)
        self._reset_text()
        return cursor.advance(15)

    def subsection(self, cursor: Cursor, title: str, color=COLORS["secondary"]) -> Cursor:
        cursor = self.ensure_space(cursor, 12)
        self.surface.set_font(True, 11)
        self.surface.set_text_color(color)
        self.surface.text(title, MARGIN + 2, cursor.y)
        self._reset_text()
        return cursor.advance(8)

    def text(self, cursor: Cursor, value: str, size: float = 10, indent: float = 0) -> Cursor:
        line_height = size * 0.4
        self.surface.set_font(False, size)
        for line in self.measurer.split(value, False, size, self.content_width - indent):
            cursor = self.ensure_space(cursor, line_height)
            self.surface.set_font(False, size)
            self.surface.text(line, MARGIN + indent, cursor.y)
            cursor = cursor.advance(line_height)
        return cursor

    def line_of_text(self, cursor: Cursor, value: str, size: float = 9, indent: float = 5,
                     color=COLORS["text"], bold: bool = False) -> Cursor:
        cursor = self.ensure_space(cursor, size * 0.4)
        self.surface.set_font(bold, size)
        self.surface.set_text_color(color)
        self.surface.text(value, MARGIN + indent, cursor.y)
        self._reset_text()
        return cursor

    def bullet(self, cursor: Cursor, value: str, color=COLORS["primary"], indent: float = 5) -> Cursor:
        cursor = self.ensure_space(cursor, 6)
        self.surface.set_font(False, 10)
        self.surface.set_text_color(color)
        self.surface.text("•", MARGIN + indent, cursor.y)
        self.surface.set_text_color(COLORS["text"])

        lines = self.measurer.split(value, False, 10, self.content_width - indent - 8)
        for index, line in enumerate(lines):
            if index > 0:
                cursor = self.ensure_space(cursor, 4)
                self.surface.set_font(False, 10)
            self.surface.text(line, MARGIN + indent + 6, cursor.y)
            if index < len(lines) - 1:
                cursor = cursor.advance(4)
        return cursor.advance(6)

    def progress_bar(self, x: float, y: float, length: float, value: float, color, width: float):
        """A light full-length track with a coloured fill proportional to value/10."""
        self.surface.set_line_width(width)
        self.surface.set_draw_color(COLORS["light"])
        self.surface.line(x, y, x + length, y)
        self.surface.set_draw_color(color)
        self.surface.line(x, y, x + length * value / 10, y)

    def metric_bar(self, cursor: Cursor, name: str, value: float) -> Cursor:
        cursor = self.ensure_space(cursor, 10)
        color = LEVEL_COLORS[score_level(value)]
        self.surface.set_font(False, 10)
        self.surface.set_text_color(COLORS["text"])
        self.surface.text(f"{name}:", MARGIN + 5, cursor.y)
        self.surface.set_font(True, 10)
        self.surface.set_text_color(color)
        self.surface.text(f"{format_number(value)}/10", MARGIN + 50, cursor.y)
        self._reset_text()
        self.progress_bar(MARGIN + 70, cursor.y - 1, 50, value, color, width=2)
        return cursor.advance(8)


def _title_page(layout: ReportLayout, result: AnalysisResult, generated_at: datetime) -> Cursor:
    surface = layout.surface
    surface.set_fill_color(COLORS["primary"])
    surface.rect(0, 0, layout.page_width, 80)

    surface.set_text_color(COLORS["white"])
    surface.set_font(True, 22)
    title_y = 35
    for line in layout.measurer.split(layout.title, True, 22, layout.content_width):
        surface.text(line, MARGIN, title_y)
        title_y += 10

    surface.set_font(False, 14)
    surface.text("Business Idea Analysis Report", MARGIN, title_y + 8)
    surface.set_draw_color(COLORS["white"])
    surface.set_line_width(0.5)
    surface.line(MARGIN, title_y + 15, layout.page_width - MARGIN, title_y + 15)

    layout._reset_text()
    cursor = Cursor(page=1, y=100)
    surface.text(f"Generated: {generated_at.strftime('%B %d, %Y, %I:%M %p')}", MARGIN, cursor.y)
    cursor = cursor.advance(8)

    score_color = LEVEL_COLORS[score_level(result.quality_score)]
    surface.set_font(True, 10)
    surface.set_text_color(score_color)
    surface.text(f"Quality Score: {format_number(result.quality_score)}/10", MARGIN, cursor.y)
    layout.progress_bar(MARGIN + 50, cursor.y - 2, 50, result.quality_score, score_color, width=3)
    layout._reset_text()
    return cursor.advance(20)


def _metrics(layout: ReportLayout, cursor: Cursor, result: AnalysisResult) -> Cursor:
    cursor = layout.section(cursor, "Key Metrics")
    metrics = result.frameworks.metrics
    for name in ("desirability", "viability", "feasibility", "sustainability"):
        cursor = layout.metric_bar(cursor, name.capitalize(), getattr(metrics, name))
    return cursor.advance(10)


def _bcg(layout: ReportLayout, cursor: Cursor, result: AnalysisResult) -> Cursor:
    bcg = result.frameworks.bcg
    cursor = layout.section(cursor, "BCG Matrix Analysis")
    category_color = BCG_COLORS.get(bcg.category, COLORS["muted"])

    cursor = layout.subsection(cursor, "Category Classification", category_color)
    cursor = layout.line_of_text(cursor, bcg.category.replace("-", " ").upper(), size=10,
                                 color=category_color, bold=True)
    cursor = cursor.advance(10)

    cursor = layout.subsection(cursor, "Market Data")
    cursor = layout.line_of_text(cursor, f"Market Growth: {format_number(bcg.market_growth)}%").advance(6)
    cursor = layout.line_of_text(cursor, f"Market Share: {format_number(bcg.market_share)}%").advance(10)

    cursor = layout.subsection(cursor, "Strategic Analysis")
    cursor = layout.text(cursor, bcg.reasoning, 9, 5)
    return cursor.advance(10)


def _swot(layout: ReportLayout, cursor: Cursor, result: AnalysisResult) -> Cursor:
    swot = result.frameworks.swot
    cursor = layout.section(cursor, "SWOT Analysis")
    for title, items, color in (
        ("Strengths", swot.strengths, COLORS["success"]),
        ("Weaknesses", swot.weaknesses, COLORS["warning"]),
        ("Opportunities", swot.opportunities, COLORS["secondary"]),
        ("Threats", swot.threats, COLORS["danger"]),
    ):
        cursor = layout.subsection(cursor, title, color)
        for item in items:
            cursor = layout.bullet(cursor, item, color)
        cursor = cursor.advance(5)
    return cursor


def _budget(layout: ReportLayout, cursor: Cursor, result: AnalysisResult) -> Cursor:
    budget = result.budget_estimate
    surface = layout.surface
    cursor = layout.section(cursor, "Budget Estimate")

    cursor = layout.ensure_space(cursor, 15)
    surface.set_fill_color(COLORS["primary"])
    surface.rect(MARGIN, cursor.y - 3, layout.content_width, 10)
    surface.set_font(True, 12)
    surface.set_text_color(COLORS["white"])
    surface.text(f"Total Budget: {format_currency(budget.total)}", MARGIN + 5, cursor.y + 3)
    layout._reset_text()
    cursor = cursor.advance(15)

    cursor = layout.line_of_text(cursor, f"Timeline: {budget.timeline}").advance(15)
    cursor = layout.subsection(cursor, "Cost Breakdown")

    for name, amount, color in (
        ("Development", budget.breakdown.development, COLORS["primary"]),
        ("Marketing", budget.breakdown.marketing, COLORS["secondary"]),
        ("Operations", budget.breakdown.operations, COLORS["success"]),
        ("Legal", budget.breakdown.legal, COLORS["warning"]),
    ):
        cursor = layout.ensure_space(cursor, 8)
        percentage = amount / budget.total * 100 if budget.total else 0.0
        surface.set_fill_color(color)
        surface.rect(MARGIN + 5, cursor.y - 3, 3, 3)
        surface.set_font(False, 9)
        surface.set_text_color(COLORS["text"])
        surface.text(f"{name}:", MARGIN + 12, cursor.y)
        surface.text(format_currency(amount), MARGIN + 60, cursor.y)
        surface.set_text_color(COLORS["muted"])
        surface.text(f"({percentage:.1f}%)", MARGIN + 110, cursor.y)
        surface.set_text_color(COLORS["text"])
        cursor = cursor.advance(7)
    return cursor.advance(10)


def _recommendations(layout: ReportLayout, cursor: Cursor, result: AnalysisResult) -> Cursor:
    recs = result.recommendations
    cursor = layout.section(cursor, "Recommendations")

    cursor = layout.subsection(cursor, "Suggested Names")
    cursor = layout.text(cursor, " • ".join(recs.startup_names), 9, 5).advance(8)

    cursor = layout.subsection(cursor, "Elevator Pitch")
    cursor = layout.text(cursor, f'"{recs.elevator_pitch}"', 9, 5).advance(10)

    cursor = layout.subsection(cursor, "100-Day Action Plan")
    for index, step in enumerate(recs.action_plan, start=1):
        cursor = layout.bullet(cursor, f"{index}. {step}", COLORS["secondary"])
    cursor = cursor.advance(8)

    cursor = layout.subsection(cursor, "Key Improvements")
    for improvement in recs.improvements:
        cursor = layout.bullet(cursor, improvement, COLORS["warning"])
    return cursor.advance(10)


def _pros_cons(layout: ReportLayout, cursor: Cursor, result: AnalysisResult) -> Cursor:
    cursor = layout.section(cursor, "Strengths & Challenges")
    cursor = layout.subsection(cursor, "Strengths", COLORS["success"])
    for pro in result.pros:
        cursor = layout.bullet(cursor, pro, COLORS["success"])
    cursor = cursor.advance(8)

    cursor = layout.subsection(cursor, "Challenges", COLORS["danger"])
    for con in result.cons:
        cursor = layout.bullet(cursor, con, COLORS["danger"])
    return cursor.advance(10)


def _business_model(layout: ReportLayout, cursor: Cursor, result: AnalysisResult) -> Cursor:
    canvas = result.frameworks.business_model
    cursor = layout.section(cursor, "Business Model Canvas")
    for title, field_name in BUSINESS_MODEL_SECTIONS:
        cursor = layout.subsection(cursor, title)
        for item in getattr(canvas, field_name)[:CANVAS_ITEMS_PER_LIST]:
            cursor = layout.bullet(cursor, item, COLORS["secondary"])
        cursor = cursor.advance(5)
    return cursor


def _footer(layout: ReportLayout, cursor: Cursor, generated_at: datetime) -> Cursor:
    cursor = layout.ensure_space(cursor, 20)
    layout.surface.set_font(False, 8)
    layout.surface.set_text_color(COLORS["muted"])
    layout.surface.text("Generated by IdeaLyzer - AI-Powered Business Analysis", MARGIN, layout.max_y + 10)
    layout.surface.text(
        f"Report Date: {generated_at.strftime('%m/%d/%Y')}", layout.page_width - MARGIN - 50, layout.max_y + 10
    )
    return cursor


def render_pdf(result: AnalysisResult, title: str, surface: DrawingSurface,
               measurer: TextMeasurer, generated_at: datetime) -> Cursor:
    """Lay out the whole report on ``surface`` and return the final cursor."""
    layout = ReportLayout(surface, measurer, title)

    cursor = _title_page(layout, result, generated_at)

    cursor = layout.section(cursor, "Executive Summary")
    cursor = layout.text(cursor, result.summary, 10, 5).advance(10)

    cursor = _metrics(layout, cursor, result)
    cursor = _bcg(layout, cursor, result)
    cursor = _swot(layout, cursor, result)
    cursor = _budget(layout, cursor, result)
    cursor = _recommendations(layout, cursor, result)
    cursor = _pros_cons(layout, cursor, result)
    cursor = _business_model(layout, cursor, result)
    return _footer(layout, cursor, generated_at)
