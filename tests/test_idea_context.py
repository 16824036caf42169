import io

from werkzeug.datastructures import FileStorage

from models.idea_submission import IdeaSubmission, ResearchPaper
from services.idea_context import build_idea_context, read_text_attachments


def _upload(content: bytes, filename: str, content_type: str) -> FileStorage:
    return FileStorage(stream=io.BytesIO(content), filename=filename, content_type=content_type)


def test_context_contains_every_field():
    submission = IdeaSubmission(
        title="Test Idea",
        description="A widget",
        key_features=["x", "y"],
        value_proposition="Saves time",
        concept="Hardware",
        background={"industry": "tools"},
        source="manual",
    )

    context = build_idea_context(submission, "notes\n")

    assert context.startswith("STARTUP IDEA ANALYSIS REQUEST")
    assert "Title: Test Idea" in context
    assert "Description: A widget" in context
    assert "Key Features: x, y" in context
    assert "Value Proposition: Saves time" in context
    assert "Implementation Concept: Hardware" in context
    assert 'Background: {"industry": "tools"}' in context
    assert "Source: manual" in context
    assert "Additional File Content: notes" in context
    assert "RELEVANT RESEARCH PAPERS" not in context


def test_context_lists_research_papers():
    paper = ResearchPaper(
        id="1", title="Widgets at Scale", description="A study.", authors="Dr. A",
        url="https://example.org/1", year=2024, subjects=["Tools", "Scale"],
    )
    submission = IdeaSubmission(title="T", description="D", research_data=[paper])

    context = build_idea_context(submission)

    assert "RELEVANT RESEARCH PAPERS:" in context
    assert "- Widgets at Scale (2024) by Dr. A" in context
    assert "Subjects: Tools, Scale" in context


def test_only_plain_text_attachments_are_read():
    files = [
        _upload(b"first file", "a.txt", "text/plain"),
        _upload(b"%PDF-1.4 binary", "b.pdf", "application/pdf"),
        _upload(b"second file", "c.txt", "text/plain"),
    ]

    assert read_text_attachments(files) == "first file\nsecond file\n"


def test_no_attachments():
    assert read_text_attachments([]) == ""
