"""Category, category icon and work phase routes."""

from flask import Blueprint, request, jsonify

from app.constants.categories import WORK_PHASES
from app.services import content as content_service
from app.services import machines as machine_service
from app.services.errors import NotFoundError, PersistenceError, ValidationError
from app.utils import token_required, error_response

categories_bp = Blueprint('categories', __name__)

SERVICE_ERRORS = (ValidationError, NotFoundError, PersistenceError)


@categories_bp.route('/categories', methods=['GET'])
def get_categories():
    """Get all active categories ordered for display."""
    categories = content_service.get_categories()
    return jsonify({
        'categories': categories,
        'total': len(categories)
    }), 200


@categories_bp.route('/categories', methods=['POST'])
@token_required
def create_category(current_user_id):
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400

    try:
        category_id = content_service.create_category(data)
    except SERVICE_ERRORS as e:
        return error_response(e)

    return jsonify({
        'message': 'Category created successfully',
        'id': category_id
    }), 201


@categories_bp.route('/categories/<int:category_id>', methods=['PUT'])
@token_required
def update_category(current_user_id, category_id):
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400

    try:
        category = content_service.update_category(category_id, data)
    except SERVICE_ERRORS as e:
        return error_response(e)

    return jsonify({
        'message': 'Category updated successfully',
        'category': category
    }), 200


@categories_bp.route('/categories/<int:category_id>', methods=['DELETE'])
@token_required
def delete_category(current_user_id, category_id):
    """Delete a category and its uploaded banner image."""
    try:
        content_service.delete_category(category_id)
    except SERVICE_ERRORS as e:
        return error_response(e)

    return jsonify({'message': 'Category deleted successfully'}), 200


@categories_bp.route('/categories/<category>/machines', methods=['GET'])
def get_category_machines(category):
    """Get active machines in a category."""
    machines = machine_service.get_machines_by_category(category)
    return jsonify({
        'category': category,
        'machines': machines,
        'total': len(machines)
    }), 200


@categories_bp.route('/categories/icons', methods=['GET'])
def get_category_icons():
    icons = content_service.get_category_icons()
    return jsonify({'icons': icons}), 200


@categories_bp.route('/categories/icons/<int:icon_id>', methods=['PUT'])
@token_required
def update_category_icon(current_user_id, icon_id):
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400

    try:
        icon = content_service.update_category_icon(icon_id, data)
    except SERVICE_ERRORS as e:
        return error_response(e)

    return jsonify({
        'message': 'Category icon updated successfully',
        'icon': icon
    }), 200


@categories_bp.route('/phases', methods=['GET'])
def get_phases():
    """Get the work phases with the machine types used in each."""
    phases = [
        {'name': name, 'machines': machines}
        for name, machines in WORK_PHASES.items()
    ]
    return jsonify({'phases': phases}), 200


@categories_bp.route('/phases/<path:phase>/machines', methods=['GET'])
def get_phase_machines(phase):
    """Get active machines usable during a work phase."""
    machines = machine_service.get_machines_by_work_phase(phase)
    return jsonify({
        'phase': phase,
        'machines': machines,
        'total': len(machines)
    }), 200
