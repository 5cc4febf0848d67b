"""Product video routes."""

from flask import Blueprint, request, jsonify

from app.services import content as content_service
from app.services.errors import NotFoundError, PersistenceError, ValidationError
from app.utils import token_required, error_response

videos_bp = Blueprint('videos', __name__)

SERVICE_ERRORS = (ValidationError, NotFoundError, PersistenceError)


@videos_bp.route('/machines/<machine_id>/videos', methods=['GET'])
def get_machine_videos(machine_id):
    videos = content_service.get_product_videos(machine_id)
    return jsonify({'videos': videos, 'total': len(videos)}), 200


@videos_bp.route('/machines/<machine_id>/videos', methods=['POST'])
@token_required
def add_machine_video(current_user_id, machine_id):
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400

    try:
        video_id = content_service.add_product_video(machine_id, data)
    except SERVICE_ERRORS as e:
        return error_response(e)

    return jsonify({
        'message': 'Video added successfully',
        'id': video_id
    }), 201


@videos_bp.route('/videos/<int:video_id>', methods=['PUT'])
@token_required
def update_video(current_user_id, video_id):
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400

    try:
        video = content_service.update_product_video(video_id, data)
    except SERVICE_ERRORS as e:
        return error_response(e)

    return jsonify({
        'message': 'Video updated successfully',
        'video': video
    }), 200


@videos_bp.route('/videos/<int:video_id>', methods=['DELETE'])
@token_required
def delete_video(current_user_id, video_id):
    try:
        content_service.delete_product_video(video_id)
    except SERVICE_ERRORS as e:
        return error_response(e)

    return jsonify({'message': 'Video deleted successfully'}), 200
