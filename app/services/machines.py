"""Machine persistence: create, update, delete and lookups.

Every write goes through the taxonomy normalizer so stored machines always
carry a consistent categories / subcategories / work phases block.
"""

import logging
from datetime import datetime

from app import db
from app.constants.categories import validate_availability_status
from app.models import Machine, ProductVideo
from app.services.errors import ValidationError
from app.services.persistence import commit as _commit, get_or_raise
from app.services.storage import delete_machine_images
from app.services.taxonomy import normalize_for_create, normalize_for_update

logger = logging.getLogger(__name__)

# Never taken from an update payload
PROTECTED_FIELDS = {'id', 'owner_id', 'created_at', 'updated_at'}


def _get_or_raise(machine_id):
    return get_or_raise(Machine, machine_id, 'Machine')


def _checked_availability(data):
    """Return `data` with its availability status validated and normalized."""
    availability = data.get('availability')
    if availability is None:
        return data
    if not isinstance(availability, dict):
        raise ValidationError("'availability' must be an object")
    if availability.get('status') is None:
        return data

    status, error = validate_availability_status(availability['status'])
    if error:
        raise ValidationError(error)
    return {**data, 'availability': {**availability, 'status': status}}


def create_machine(data, owner_id=None):
    """Normalize and insert a new machine.

    Returns:
        The id assigned to the machine.

    Raises:
        ValidationError: If the data cannot be normalized or the
            availability status is unknown.
        PersistenceError: If the insert fails.
    """
    record = normalize_for_create(_checked_availability(data or {}))

    now = datetime.utcnow()
    machine = Machine(owner_id=owner_id, created_at=now, updated_at=now)
    machine.apply_record(record)

    db.session.add(machine)
    _commit('create machine')

    logger.info(f'Created machine {machine.id} ({machine.name})')
    return machine.id


def update_machine(machine_id, patch):
    """Apply a partial update to a stored machine.

    Returns:
        The updated machine as a dict.

    Raises:
        NotFoundError: If no machine has this id.
        ValidationError: If the patch leaves the machine without categories
            or sets an unknown availability status.
        PersistenceError: If the write fails.
    """
    machine = _get_or_raise(machine_id)
    patch = {k: v for k, v in (patch or {}).items() if k not in PROTECTED_FIELDS}
    patch = _checked_availability(patch)

    record = normalize_for_update(machine.to_record(), patch)
    machine.apply_record(record)
    machine.updated_at = datetime.utcnow()
    _commit('update machine')

    return machine.to_dict()


def delete_machine(machine_id):
    """Delete a machine, its videos and its stored images.

    Image deletion is best-effort: failures are logged and the machine
    stays deleted.
    """
    machine = _get_or_raise(machine_id)

    ProductVideo.query.filter_by(product_id=machine_id).delete()
    db.session.delete(machine)
    _commit('delete machine')

    deleted, error = delete_machine_images(machine_id)
    if not deleted:
        logger.warning(f'Could not delete images of machine {machine_id}: {error}')


def get_machine(machine_id):
    """Get a machine by id as a dict."""
    return _get_or_raise(machine_id).to_dict()


def get_machines(active_only=True):
    query = Machine.query
    if active_only:
        query = query.filter_by(active=True)
    return [m.to_dict() for m in query.order_by(Machine.created_at).all()]


def get_machines_by_owner(owner_id):
    machines = Machine.query.filter_by(owner_id=owner_id).order_by(Machine.created_at).all()
    return [m.to_dict() for m in machines]


def _filter_by_member(field, value):
    # JSON array membership is checked in Python to stay database-agnostic
    machines = Machine.query.filter_by(active=True).order_by(Machine.created_at).all()
    return [m.to_dict() for m in machines if value in (getattr(m, field) or [])]


def get_machines_by_category(category):
    """Get active machines whose categories include `category`."""
    return _filter_by_member('categories', category)


def get_machines_by_work_phase(work_phase):
    """Get active machines usable during `work_phase`."""
    return _filter_by_member('work_phases', work_phase)
