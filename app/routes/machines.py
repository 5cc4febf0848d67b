"""Machine routes for the equipment rental catalog."""

from flask import Blueprint, request, jsonify

from app.services import machines as machine_service
from app.services.errors import NotFoundError, PersistenceError, ValidationError
from app.utils import token_required, token_optional, error_response

machines_bp = Blueprint('machines', __name__)

SERVICE_ERRORS = (ValidationError, NotFoundError, PersistenceError)


@machines_bp.route('', methods=['GET'])
@token_optional
def get_machines(current_user_id):
    """List machines.

    Query params:
    - owner_id: Machines of one owner (includes inactive ones)
    - mine: Machines of the authenticated user
    - category: Active machines in a category
    - work_phase: Active machines for a work phase
    """
    owner_id = request.args.get('owner_id')
    category = request.args.get('category')
    work_phase = request.args.get('work_phase')

    if request.args.get('mine') and current_user_id:
        owner_id = current_user_id

    if owner_id:
        machines = machine_service.get_machines_by_owner(owner_id)
    elif category:
        machines = machine_service.get_machines_by_category(category)
    elif work_phase:
        machines = machine_service.get_machines_by_work_phase(work_phase)
    else:
        machines = machine_service.get_machines()

    return jsonify({
        'machines': machines,
        'total': len(machines)
    }), 200


@machines_bp.route('/<machine_id>', methods=['GET'])
def get_machine(machine_id):
    """Get a specific machine by ID."""
    try:
        return jsonify(machine_service.get_machine(machine_id)), 200
    except SERVICE_ERRORS as e:
        return error_response(e)


@machines_bp.route('', methods=['POST'])
@token_required
def create_machine(current_user_id):
    """Create a new machine owned by the authenticated user."""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400

    try:
        machine_id = machine_service.create_machine(data, owner_id=current_user_id)
        machine = machine_service.get_machine(machine_id)
    except SERVICE_ERRORS as e:
        return error_response(e)

    return jsonify({
        'message': 'Machine created successfully',
        'id': machine_id,
        'machine': machine
    }), 201


def _owned_machine(machine_id, current_user_id):
    """Return an error response unless the user owns the machine."""
    machine = machine_service.get_machine(machine_id)
    if machine['owner_id'] and machine['owner_id'] != current_user_id:
        return jsonify({'error': 'Not authorized to modify this machine'}), 403
    return None


@machines_bp.route('/<machine_id>', methods=['PUT'])
@token_required
def update_machine(current_user_id, machine_id):
    """Update an existing machine."""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400

    try:
        forbidden = _owned_machine(machine_id, current_user_id)
        if forbidden:
            return forbidden
        machine = machine_service.update_machine(machine_id, data)
    except SERVICE_ERRORS as e:
        return error_response(e)

    return jsonify({
        'message': 'Machine updated successfully',
        'machine': machine
    }), 200


@machines_bp.route('/<machine_id>', methods=['DELETE'])
@token_required
def delete_machine(current_user_id, machine_id):
    """Delete a machine."""
    try:
        forbidden = _owned_machine(machine_id, current_user_id)
        if forbidden:
            return forbidden
        machine_service.delete_machine(machine_id)
    except SERVICE_ERRORS as e:
        return error_response(e)

    return jsonify({'message': 'Machine deleted successfully'}), 200
