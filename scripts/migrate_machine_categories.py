#!/usr/bin/env python3
"""Backfill the normalized taxonomy block on every stored machine.

Older machines only carry the singular category / subcategory / work_phase
fields. This rewrites each one with the plural arrays and category_details,
commits everything in one go and writes a text report.

Usage:
    python scripts/migrate_machine_categories.py [report_path]
"""

import logging
import sys
import os

# Add parent directory to path to import app modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from app.services.errors import PersistenceError
from app.services.migrations import run_machine_migration

DEFAULT_REPORT_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'migration-log.txt')


def main():
    logging.basicConfig(level=logging.INFO, format='%(message)s')
    log = logging.getLogger('machine_migration')

    report_path = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_REPORT_PATH

    app = create_app(os.getenv('FLASK_ENV', 'development'))
    with app.app_context():
        try:
            result = run_machine_migration(report_path=report_path, log=log)
        except PersistenceError as e:
            print(f'\n❌ Migration failed: {e}')
            print(f'   Details written to: {report_path}')
            sys.exit(1)

    print(f"\n✅ Machine migration completed: {result['succeeded']}/{result['total']} migrated, "
          f"{result['failed']} errors")
    sys.exit(0)


if __name__ == '__main__':
    main()
