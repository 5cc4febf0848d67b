"""Site content routes (banners, categories, phases)."""

from flask import Blueprint, request, jsonify

from app.services import content as content_service
from app.services.errors import NotFoundError, PersistenceError, ValidationError
from app.utils import token_required, error_response

content_bp = Blueprint('content', __name__)

SERVICE_ERRORS = (ValidationError, NotFoundError, PersistenceError)


@content_bp.route('', methods=['GET'])
def get_content():
    """Get active content of one type, e.g. /api/content?type=banner."""
    try:
        content = content_service.get_content(request.args.get('type', 'banner'))
    except SERVICE_ERRORS as e:
        return error_response(e)

    return jsonify({
        'content': content,
        'total': len(content)
    }), 200


@content_bp.route('', methods=['POST'])
@token_required
def create_content(current_user_id):
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400

    try:
        content_id = content_service.create_content(data)
    except SERVICE_ERRORS as e:
        return error_response(e)

    return jsonify({
        'message': 'Content created successfully',
        'id': content_id
    }), 201


@content_bp.route('/<int:content_id>', methods=['PUT'])
@token_required
def update_content(current_user_id, content_id):
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400

    try:
        content = content_service.update_content(content_id, data)
    except SERVICE_ERRORS as e:
        return error_response(e)

    return jsonify({
        'message': 'Content updated successfully',
        'content': content
    }), 200


@content_bp.route('/<int:content_id>', methods=['DELETE'])
@token_required
def delete_content(current_user_id, content_id):
    try:
        content_service.delete_content(content_id)
    except SERVICE_ERRORS as e:
        return error_response(e)

    return jsonify({'message': 'Content deleted successfully'}), 200
