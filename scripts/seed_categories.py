#!/usr/bin/env python3
"""Seed the category content records (main categories and work phases).

Does nothing when categories already exist.

Usage:
    python scripts/seed_categories.py
"""

import logging
import sys
import os

# Add parent directory to path to import app modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from app.services.errors import PersistenceError
from app.services.migrations import run_category_migration


def main():
    logging.basicConfig(level=logging.INFO, format='%(message)s')

    app = create_app(os.getenv('FLASK_ENV', 'development'))
    with app.app_context():
        try:
            created = run_category_migration(log=logging.getLogger('category_migration'))
        except PersistenceError as e:
            print(f'❌ Migration failed: {e}')
            sys.exit(1)

    if created:
        print(f'✅ Created {created} categories')
    else:
        print('ℹ️  Categories already exist, nothing to do')
    sys.exit(0)


if __name__ == '__main__':
    main()
