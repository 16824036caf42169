import logging

from flask import Blueprint, jsonify, request

from services.research_service import search_research_papers

logger = logging.getLogger(__name__)

research_bp = Blueprint('research', __name__)


@research_bp.route('/search', methods=['POST'])
def search():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    query = data.get("query")

    if not query or not isinstance(query, str):
        return jsonify({"error": "Query parameter is required"}), 400

    try:
        papers = search_research_papers(query)
        return jsonify({
            "success": True,
            "data": [paper.model_dump(by_alias=True) for paper in papers],
            "count": len(papers),
        })
    except Exception as e:
        logger.exception("Research search failed")
        return jsonify({"error": "Failed to search research database", "details": str(e)}), 500


@research_bp.route('/search', methods=['GET'])
def search_get():
    return jsonify({"error": "GET method not allowed. Use POST with query parameter."}), 405
