"""Shared constants for the application."""

from app.constants.categories import (
    DEFAULT_DOMAIN_TAG,
    CONTENT_TYPES,
    AVAILABILITY_STATUSES,
    WORK_PHASES,
    MACHINE_SUBCATEGORIES,
    MAIN_CATEGORIES,
    DEFAULT_CATEGORY_IMAGE,
    machine_types_for,
    validate_content_type,
    validate_availability_status,
)

__all__ = [
    'DEFAULT_DOMAIN_TAG',
    'CONTENT_TYPES',
    'AVAILABILITY_STATUSES',
    'WORK_PHASES',
    'MACHINE_SUBCATEGORIES',
    'MAIN_CATEGORIES',
    'DEFAULT_CATEGORY_IMAGE',
    'machine_types_for',
    'validate_content_type',
    'validate_availability_status',
]
