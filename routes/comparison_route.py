from flask import Blueprint, jsonify, request
from pydantic import ValidationError as PydanticValidationError

from services.comparison_service import ComparisonRequest, compare_ideas

comparison_bp = Blueprint('comparison', __name__)


@comparison_bp.route('/compare', methods=['POST'])
def compare():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    try:
        comparison_request = ComparisonRequest.model_validate(data)
        ranked = compare_ideas(comparison_request)
    except PydanticValidationError as e:
        return jsonify({"error": "Invalid comparison request", "details": e.errors(include_url=False, include_context=False)}), 400
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify({"sortBy": comparison_request.sort_by, "ideas": ranked, "count": len(ranked)})
