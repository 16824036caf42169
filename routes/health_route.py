from flask import Blueprint, jsonify

from services.ai_provider import has_provider

health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health():
    return jsonify({"status": "ok", "providerConfigured": has_provider()})
