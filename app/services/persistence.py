"""Session helpers shared by the persistence services."""

import logging

from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.services.errors import NotFoundError, PersistenceError

logger = logging.getLogger(__name__)


def commit(action):
    """Commit the session, rolling back and raising PersistenceError on failure."""
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f'Failed to {action}: {e}')
        raise PersistenceError(f'Failed to {action}') from e


def get_or_raise(model, record_id, label):
    record = db.session.get(model, record_id)
    if record is None:
        raise NotFoundError(f'{label} not found')
    return record
