"""Machine model for the equipment rental catalog."""

from datetime import datetime
from uuid import uuid4

from app import db
from app.services.taxonomy import legacy_view


# Fields a caller may set through create/update payloads
EDITABLE_FIELDS = (
    'name',
    'description',
    'short_description',
    'long_description',
    'image_url',
    'photo_url',
    'active',
    'specifications',
    'photos',
    'pricing',
    'availability',
)


def _new_id():
    return uuid4().hex


class Machine(db.Model):
    """Rentable machine with its category / subcategory / work phase taxonomy."""

    __tablename__ = 'machines'

    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    name = db.Column(db.String(255), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    short_description = db.Column(db.String(500), nullable=True)
    long_description = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.String(500), nullable=True)
    photo_url = db.Column(db.String(500), nullable=True)
    owner_id = db.Column(db.String(128), nullable=True, index=True)
    active = db.Column(db.Boolean, default=True, nullable=False)

    # Taxonomy: the arrays are authoritative, singular columns mirror them
    categories = db.Column(db.JSON, nullable=True)
    category = db.Column(db.String(100), nullable=True, index=True)
    subcategories = db.Column(db.JSON, nullable=True)
    subcategory = db.Column(db.String(100), nullable=True)
    work_phases = db.Column(db.JSON, nullable=True)
    work_phase = db.Column(db.String(100), nullable=True)
    category_details = db.Column(db.JSON, nullable=True)

    specifications = db.Column(db.JSON, nullable=True)  # brand, model, year, power, weight
    photos = db.Column(db.JSON, nullable=True)  # main, gallery
    pricing = db.Column(db.JSON, nullable=True)  # hourly, daily, weekly, monthly
    availability = db.Column(db.JSON, nullable=True)  # status, location

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_record(self):
        """Return the stored fields as a plain dict for the normalizer."""
        record = {'id': self.id, 'owner_id': self.owner_id}
        for field in EDITABLE_FIELDS:
            record[field] = getattr(self, field)
        # Legacy rows may only have the singular columns; pass them as stored
        record.update({
            'categories': self.categories,
            'category': self.category,
            'subcategories': self.subcategories,
            'subcategory': self.subcategory,
            'work_phases': self.work_phases,
            'work_phase': self.work_phase,
            'category_details': self.category_details,
        })
        return record

    def apply_record(self, record):
        """Copy a normalized record onto the row.

        The singular taxonomy columns are always written from the arrays.
        """
        for field in EDITABLE_FIELDS:
            if field in record:
                setattr(self, field, record[field])
        self.categories = list(record['categories'])
        self.subcategories = list(record['subcategories'])
        self.work_phases = list(record['work_phases'])
        self.category_details = dict(record['category_details'])
        legacy = legacy_view(record)
        self.category = legacy['category']
        self.subcategory = legacy['subcategory']
        self.work_phase = legacy['work_phase']

    def to_dict(self):
        """Convert machine to dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'short_description': self.short_description,
            'long_description': self.long_description,
            'image_url': self.image_url,
            'photo_url': self.photo_url,
            'owner_id': self.owner_id,
            'active': self.active,
            'categories': self.categories or [],
            'category': self.category or '',
            'subcategories': self.subcategories or [],
            'subcategory': self.subcategory or '',
            'work_phases': self.work_phases or [],
            'work_phase': self.work_phase or '',
            'category_details': self.category_details or {},
            'specifications': self.specifications,
            'photos': self.photos,
            'pricing': self.pricing,
            'availability': self.availability,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<Machine {self.id}: {self.name}>'
