"""Taxonomy normalization for machine records.

A machine is classified three ways: by category, by subcategory (machine
type) and by work phase. Older records carry a single legacy value for each
(`category`, `subcategory`, `work_phase`); newer ones carry the plural arrays
(`categories`, `subcategories`, `work_phases`) plus a `category_details` map
marking the primary category.

The plural arrays are the source of truth. The singular fields are a
projection of them (see `legacy_view`) kept for older consumers, and the
functions here always return all of them together so the stored record can
never drift.

All functions are pure: inputs are never mutated and results share no
mutable state with them.
"""

import copy

from app.constants.categories import DEFAULT_DOMAIN_TAG
from app.services.errors import ValidationError

# The normalized form of a machine with no classification at all.
EMPTY_TAXONOMY = {
    'categories': [DEFAULT_DOMAIN_TAG],
    'subcategories': [],
    'work_phases': [],
    'category_details': {},
}


def _as_list(value, field):
    """Return a plural field as a list of strings, rejecting other shapes."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ValidationError(
            f"'{field}' must be a list, got {type(value).__name__}"
        )
    for item in value:
        if item is not None and not isinstance(item, str):
            raise ValidationError(f"'{field}' must only contain strings")
    return list(value)


def _as_text(value, field):
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValidationError(
            f"'{field}' must be a string, got {type(value).__name__}"
        )
    return value


def _unique(values):
    """Drop empty values and duplicates, keeping first-seen order."""
    result = []
    for value in values:
        if value and value not in result:
            result.append(value)
    return result


def _detail_entry(raw):
    """Reshape one category_details entry, keeping any extra keys."""
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValidationError('category_details entries must be objects')

    entry = copy.deepcopy(raw)
    info = entry.get('additional_info') or {}
    if not isinstance(info, dict):
        raise ValidationError("'additional_info' must be an object")

    entry['primary_category'] = bool(entry.get('primary_category'))
    entry['additional_info'] = info
    entry['subcategories'] = _unique(
        _as_list(entry.get('subcategories'), 'category_details.subcategories')
    )
    return entry


def _details_map(raw):
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValidationError("'category_details' must be an object")
    return {key: _detail_entry(value) for key, value in raw.items()}


def _primary_entry(subcategories, additional_info=None):
    return {
        'primary_category': True,
        'additional_info': dict(additional_info or {}),
        'subcategories': list(subcategories),
    }


def _assert_primary(details, category, subcategories):
    """Make `category` the one and only primary entry of a non-empty map."""
    if not details:
        return details
    if category not in details:
        details[category] = _primary_entry(subcategories)
    for key, entry in details.items():
        entry['primary_category'] = key == category
    return details


def legacy_view(record):
    """Project the legacy singular fields from the plural arrays.

    Returns:
        dict with 'category', 'subcategory' and 'work_phase'; each is the
        first element of its array, or '' when the array is empty.
    """
    categories = record.get('categories') or []
    subcategories = record.get('subcategories') or []
    work_phases = record.get('work_phases') or []
    return {
        'category': categories[0] if categories else '',
        'subcategory': subcategories[0] if subcategories else '',
        'work_phase': work_phases[0] if work_phases else '',
    }


def _block(categories, subcategories, work_phases, details):
    block = {
        'categories': categories,
        'subcategories': subcategories,
        'work_phases': work_phases,
        'category_details': details,
    }
    block.update(legacy_view(block))
    return block


def _plural_or_singular(data, plural, singular):
    values = _unique(_as_list(data.get(plural), plural))
    if values:
        return values
    single = _as_text(data.get(singular), singular)
    return [single] if single else []


def normalize_for_create(data):
    """Build the normalized record for a new machine.

    Args:
        data: Caller-supplied machine fields. Any mix of legacy singular
            and plural taxonomy fields is accepted; `name` is required.

    Returns:
        A new dict holding every input field plus the complete taxonomy
        block. `categories` always starts with the domain tag.

    Raises:
        ValidationError: If the name is missing or the taxonomy fields are
            malformed.
    """
    data = data or {}
    name = data.get('name')
    if not isinstance(name, str) or not name.strip():
        raise ValidationError('Machine name is required')

    category = _as_text(data.get('category'), 'category')
    subcategory = _as_text(data.get('subcategory'), 'subcategory')

    categories = _unique(
        [DEFAULT_DOMAIN_TAG]
        + _as_list(data.get('categories'), 'categories')
        + [category]
    )
    work_phases = _plural_or_singular(data, 'work_phases', 'work_phase')
    subcategories = _plural_or_singular(data, 'subcategories', 'subcategory')

    details = _details_map(data.get('category_details'))
    categories = _unique(categories + list(details))
    if not categories:
        raise ValidationError('Machine must belong to at least one category')

    primary = categories[0]
    if primary not in details:
        # Keep the pre-normalization values traceable on the synthesized entry
        details[primary] = _primary_entry(subcategories, {
            'original_category': category,
            'original_subcategory': subcategory,
        })
    _assert_primary(details, primary, subcategories)

    record = copy.deepcopy(data)
    record.update(_block(categories, subcategories, work_phases, details))
    return record


def normalize_for_update(existing, patch):
    """Merge a partial update over a stored machine and renormalize.

    A stored record without the plural arrays (written before they existed)
    is migrated first, so its legacy singular values seed the merge.

    Plural fields in the patch replace the stored arrays instead of merging
    with them. A singular `work_phase` replaces every stored phase with that
    one phase and attaches a category_details entry for it; multiple phases
    collapse to one on such an update.

    Args:
        existing: The stored, normalized machine record.
        patch: Fields to change.

    Returns:
        A new dict: the existing record with the patch applied and the
        taxonomy block recomputed.

    Raises:
        ValidationError: If the result would have no categories or the
            patch is malformed.
    """
    existing = existing or {}
    patch = patch or {}
    if existing.get('categories') is None:
        existing = migrate_legacy_record(existing)

    if patch.get('categories') is not None:
        categories = _unique(
            [DEFAULT_DOMAIN_TAG] + _as_list(patch['categories'], 'categories')
        )
    else:
        categories = _unique(_as_list(existing.get('categories'), 'categories'))
    categories = _unique(categories + [_as_text(patch.get('category'), 'category')])

    if patch.get('subcategories') is not None:
        subcategories = _unique(_as_list(patch['subcategories'], 'subcategories'))
    else:
        subcategories = _unique(
            _as_list(existing.get('subcategories'), 'subcategories')
        )
    subcategories = _unique(
        subcategories + [_as_text(patch.get('subcategory'), 'subcategory')]
    )

    details = _details_map(existing.get('category_details'))
    patch_details = _details_map(patch.get('category_details'))
    details.update(patch_details)
    introduced = list(patch_details)

    work_phase = _as_text(patch.get('work_phase'), 'work_phase')
    if work_phase:
        work_phases = [work_phase]
        details[work_phase] = _detail_entry(details.get(work_phase))
        introduced.append(work_phase)
    elif patch.get('work_phases') is not None:
        work_phases = _unique(_as_list(patch['work_phases'], 'work_phases'))
    else:
        work_phases = _unique(_as_list(existing.get('work_phases'), 'work_phases'))

    # Entries named by the caller join the categories; stale ones are dropped
    categories = _unique(categories + introduced)
    details = {key: entry for key, entry in details.items() if key in categories}
    if not categories:
        raise ValidationError('Machine must belong to at least one category')

    _assert_primary(details, categories[0], subcategories)

    record = copy.deepcopy(existing)
    record.update(copy.deepcopy(patch))
    record.update(_block(categories, subcategories, work_phases, details))
    return record


def migrate_legacy_record(record):
    """Rewrite a stored record into the normalized shape.

    The record is applied as an update over an empty machine, then the
    primary category gets a details entry if it still lacks one. Running
    this on its own output returns an equal record.

    Raises:
        ValidationError: If the record's taxonomy fields are malformed.
    """
    patch = copy.deepcopy(record or {})

    # A stored work_phase already present in work_phases is the projection,
    # not a legacy override; applying it would collapse the phases.
    work_phases = _as_list(patch.get('work_phases'), 'work_phases')
    if work_phases and patch.get('work_phase') in work_phases:
        patch.pop('work_phase')

    migrated = normalize_for_update(EMPTY_TAXONOMY, patch)
    details = migrated['category_details']
    if migrated['category'] not in details:
        details[migrated['category']] = _primary_entry(migrated['subcategories'])
    return migrated
