#!/usr/bin/env python3
"""
Taxonomy Sync Check

Verifies that the taxonomy constants in app/constants/categories.py
match the expected canonical lists, and that every machine type used by
a work phase exists in some machine group.

If you're adding/removing/renaming a category or work phase:
1. Update app/constants/categories.py
2. Update the EXPECTED_* lists below
3. Update frontend: src/lib/constants.ts
"""

import sys
import os

# -- Expected canonical values (keep sorted) --
# This is the contract. Both frontend and backend must match.
EXPECTED_MAIN_CATEGORIES = sorted([
    'concrete',
    'construction',
    'construction-equipment',
    'earth-moving',
    'elevation',
    'tools',
])

EXPECTED_WORK_PHASES = sorted([
    'Acabamento',
    'Canteiro de obras',
    'Cobertura',
    'Esquadrias',
    'Estrutura e alvenaria',
    'Fundação',
    'Inst. elétricas e hidrossanitárias',
    'Jardinagem',
    'Limpeza',
    'Revestimento',
])


def load_taxonomy():
    """Import the taxonomy constants from the backend module."""
    # Add project root to path so we can import app modules
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    sys.path.insert(0, project_root)

    from app.constants.categories import MAIN_CATEGORIES, WORK_PHASES, MACHINE_SUBCATEGORIES
    return MAIN_CATEGORIES, WORK_PHASES, MACHINE_SUBCATEGORIES


def compare(label, expected, actual):
    """Print differences; return True when aligned."""
    missing = [k for k in expected if k not in actual]
    extra = [k for k in actual if k not in expected]

    if missing:
        print(f'❌ {label} missing from categories.py: {", ".join(missing)}')
    if extra:
        print(f'❌ {label} not in expected list: {", ".join(extra)}')
        print('   → Update the EXPECTED lists in scripts/check_category_sync.py')
    return not missing and not extra


def main():
    print('\n\U0001f50d Taxonomy Sync Check\n')

    try:
        main_categories, work_phases, machine_groups = load_taxonomy()
    except Exception as e:
        print(f'❌ Failed to import taxonomy constants: {e}')
        sys.exit(1)

    ok = compare('Main categories', EXPECTED_MAIN_CATEGORIES, sorted(c['id'] for c in main_categories))
    ok = compare('Work phases', EXPECTED_WORK_PHASES, sorted(work_phases)) and ok

    # Phase machine types that no machine group lists are informational only
    known_types = {t for group in machine_groups.values() for t in group}
    orphans = sorted({t for types in work_phases.values() for t in types} - known_types)
    if orphans:
        print(f'ℹ️  Phase machine types outside any machine group: {", ".join(orphans)}')

    if ok:
        print('✅ Taxonomy aligned!\n')
        print('  ℹ️  Remember: frontend src/lib/constants.ts must match too.\n')
        sys.exit(0)

    print('\n\U0001f4cb To fix: update both the source file AND the expected lists,')
    print('   then sync frontend src/lib/constants.ts.\n')
    sys.exit(1)


if __name__ == '__main__':
    main()
