"""One-shot data migrations.

- run_category_migration: seeds category content from the taxonomy constants
- run_machine_migration: backfills the normalized taxonomy block on every
  stored machine and writes a plain-text report

Both take an optional logger so callers (scripts, tests) choose where
progress goes.
"""

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.constants.categories import (
    DEFAULT_CATEGORY_IMAGE,
    MAIN_CATEGORIES,
    WORK_PHASES,
    machine_types_for,
)
from app.models import Machine, SiteContent
from app.services.errors import PersistenceError, ValidationError
from app.services.taxonomy import migrate_legacy_record

logger = logging.getLogger(__name__)


def _phase_icon(name):
    return 'phase-' + '-'.join(name.lower().split())


def build_category_records():
    """Return the category content records seeded on a fresh site."""
    records = []

    for category in MAIN_CATEGORIES:
        records.append({
            'type': 'category',
            'title': category['name'],
            'description': category.get('description') or f"Categoria de máquinas: {category['name']}",
            'image_url': category.get('image_url') or DEFAULT_CATEGORY_IMAGE['url'],
            'machines': machine_types_for(category['id']),
            'metadata': {
                'icon': category.get('icon', ''),
                'type': 'main_category',
                'colors': category.get('colors', {}),
                'image_credit': None if category.get('image_url') else DEFAULT_CATEGORY_IMAGE['credit'],
            },
        })

    for name, machines in WORK_PHASES.items():
        records.append({
            'type': 'category',
            'title': name,
            'description': f'Fase de obra: {name}',
            'image_url': DEFAULT_CATEGORY_IMAGE['url'],
            'machines': list(machines),
            'metadata': {
                'icon': _phase_icon(name),
                'type': 'work_phase',
                'machines': list(machines),
                'image_credit': DEFAULT_CATEGORY_IMAGE['credit'],
            },
        })

    for index, record in enumerate(records):
        record['order'] = index
        record['active'] = True
    return records


def run_category_migration(log=None):
    """Seed category content unless categories already exist.

    Returns:
        Number of category records created (0 when skipped).

    Raises:
        PersistenceError: If the insert fails; nothing is written.
    """
    log = log or logger

    if SiteContent.query.filter_by(type='category').count() > 0:
        log.info('Categories already exist. Skipping migration.')
        return 0

    now = datetime.utcnow()
    records = build_category_records()
    for data in records:
        metadata = data.pop('metadata')
        db.session.add(SiteContent(content_metadata=metadata, created_at=now, updated_at=now, **data))

    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        log.error(f'Category migration failed: {e}')
        raise PersistenceError('Category migration failed') from e

    log.info(f'Migrated {len(records)} categories successfully.')
    return len(records)


def format_report(total, succeeded, failed, lines):
    """Render the plain-text migration summary."""
    return '\n'.join([
        'Migration Summary:',
        f'Total Machines: {total}',
        f'Successfully Migrated: {succeeded}',
        f'Errors: {failed}',
        '\n--- Migration Logs ---\n',
        *lines,
    ])


def _write_report(report_path, content):
    if report_path:
        with open(report_path, 'w', encoding='utf-8') as f:
            f.write(content)


def run_machine_migration(report_path=None, log=None):
    """Rewrite every stored machine into the normalized taxonomy shape.

    Records that fail normalization are reported and left untouched; the
    rest are committed together. If the commit fails nothing is persisted.

    Args:
        report_path: Optional file to write the text report to.
        log: Logger receiving progress and the report.

    Returns:
        dict with 'total', 'succeeded', 'failed' and the 'report' text.

    Raises:
        PersistenceError: If the batched commit fails.
    """
    log = log or logger
    log.info('Starting machine migration...')

    machines = Machine.query.order_by(Machine.created_at).all()
    lines = []
    succeeded = 0
    failed = 0

    for machine in machines:
        try:
            migrated = migrate_legacy_record(machine.to_record())
        except ValidationError as e:
            log.error(f'Error migrating machine {machine.id}: {e}')
            lines.append(f'Error migrating machine: {machine.name} ({machine.id})')
            failed += 1
            continue

        machine.apply_record(migrated)
        lines.append(f'Migrated machine: {machine.name} ({machine.id})')
        succeeded += 1

    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        log.error(f'Migration failed: {e}')
        _write_report(report_path, f'Migration Failed: {e}')
        raise PersistenceError('Machine migration failed') from e

    report = format_report(len(machines), succeeded, failed, lines)
    log.info(report)
    _write_report(report_path, report)
    if report_path:
        log.info(f'Log file written to: {report_path}')

    return {
        'total': len(machines),
        'succeeded': succeeded,
        'failed': failed,
        'report': report,
    }
