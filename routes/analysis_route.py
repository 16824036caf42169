import asyncio
import json
import logging

from flask import Blueprint, jsonify, request
from pydantic import ValidationError as PydanticValidationError

from config.settings import Config
from models.idea_submission import IdeaSubmission
from services.analysis_service import get_analysis_service
from services.idea_context import build_idea_context, read_text_attachments
from utils.exceptions import AnalysisError, ConfigurationError

logger = logging.getLogger(__name__)

analysis_bp = Blueprint('analysis', __name__)

# Form fields that arrive as JSON-encoded strings, with the value used when absent
JSON_FIELDS = {
    "keyFeatures": "[]",
    "background": "{}",
    "researchData": "[]",
}


def parse_submission(form) -> IdeaSubmission:
    """Decode the multipart form into an IdeaSubmission. Raises ValueError or pydantic's ValidationError."""
    data = {
        "title": form.get("title", ""),
        "description": form.get("description", ""),
        "valueProposition": form.get("valueProposition", ""),
        "concept": form.get("concept", ""),
        "source": form.get("source", ""),
    }
    for field_name, default in JSON_FIELDS.items():
        raw = form.get(field_name) or default
        try:
            data[field_name] = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"Field '{field_name}' is not valid JSON: {e.msg}") from e
    return IdeaSubmission.model_validate(data)


@analysis_bp.route('/analyze', methods=['POST'])
async def analyze_idea():
    try:
        submission = parse_submission(request.form)
    except PydanticValidationError as e:
        return jsonify({"error": "Invalid idea submission", "details": e.errors(include_url=False, include_context=False)}), 400
    except ValueError as e:
        return jsonify({"error": "Invalid idea submission", "details": [str(e)]}), 400

    file_content = read_text_attachments(request.files.getlist("files"))
    idea_context = build_idea_context(submission, file_content)
    has_research = bool(submission.research_data)

    try:
        service = get_analysis_service()
        result = await asyncio.wait_for(
            service.run_analysis(idea_context, has_research=has_research),
            timeout=Config.ANALYSIS_TIMEOUT_SECONDS,
        )
    except ConfigurationError as e:
        logger.error(f"Analysis rejected: {e}")
        return jsonify({"error": str(e)}), 500
    except asyncio.TimeoutError:
        logger.error(f"Analysis of '{submission.title}' exceeded {Config.ANALYSIS_TIMEOUT_SECONDS}s")
        return jsonify({"error": "Analysis timed out"}), 504
    except AnalysisError as e:
        logger.error(f"Analysis error: {e}")
        return jsonify({"error": "Analysis failed"}), 500
    except Exception:
        logger.exception(f"Unexpected error analysing '{submission.title}'")
        return jsonify({"error": "Analysis failed"}), 500

    return jsonify(result.to_dict())
