"""Database models for the equipment rental application."""

from .machine import Machine
from .site_content import SiteContent, CategoryIcon, ProductVideo

__all__ = ['Machine', 'SiteContent', 'CategoryIcon', 'ProductVideo']
