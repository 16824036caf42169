import json
import logging
from typing import Iterable

from models.idea_submission import IdeaSubmission

logger = logging.getLogger(__name__)

TEXT_MIMETYPE = "text/plain"


def read_text_attachments(files: Iterable) -> str:
    """Concatenate plain-text uploads. Other types are accepted but their content is not parsed."""
    content = ""
    for upload in files:
        mimetype = getattr(upload, "mimetype", None) or getattr(upload, "content_type", "")
        if mimetype != TEXT_MIMETYPE:
            logger.info(f"Skipping attachment {getattr(upload, 'filename', '?')} ({mimetype})")
            continue
        raw = upload.read()
        text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
        content += text + "\n"
    return content


def format_research_context(submission: IdeaSubmission) -> str:
    if not submission.research_data:
        return ""
    lines = [
        f"- {paper.title} ({paper.year}) by {paper.authors}\n"
        f"  Description: {paper.description}\n"
        f"  Subjects: {', '.join(paper.subjects)}"
        for paper in submission.research_data
    ]
    return "\n\nRELEVANT RESEARCH PAPERS:\n" + "\n".join(lines)


def build_idea_context(submission: IdeaSubmission, file_content: str = "") -> str:
    """Flatten the submitted form into the single text blob every prompt is built from."""
    context = f"""
STARTUP IDEA ANALYSIS REQUEST

Title: {submission.title}
Description: {submission.description}
Key Features: {", ".join(submission.key_features)}
Value Proposition: {submission.value_proposition}
Implementation Concept: {submission.concept}
Background: {json.dumps(submission.background)}
Source: {submission.source}
Additional File Content: {file_content}{format_research_context(submission)}
"""
    return context.strip()
