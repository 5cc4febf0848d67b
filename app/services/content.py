"""Site content: banners, categories, phases, category icons and videos.

These records need no normalization; writes pass through with refreshed
timestamps.
"""

import logging
from datetime import datetime

from app import db
from app.constants.categories import validate_content_type
from app.models import CategoryIcon, Machine, ProductVideo, SiteContent
from app.services.errors import PersistenceError, ValidationError
from app.services.persistence import commit as _commit, get_or_raise as _get_or_raise
from app.services.storage import CONTENT_BUCKET, delete_file

logger = logging.getLogger(__name__)

CONTENT_FIELDS = (
    'type', 'title', 'description', 'image_url', 'link', 'icon',
    'order', 'active', 'category', 'machines',
)
ICON_FIELDS = ('name', 'icon', 'image_url', 'order', 'active')
VIDEO_FIELDS = ('title', 'video_url', 'thumbnail_url', 'order')


def _assign(record, data, fields):
    for field in fields:
        if field in data:
            setattr(record, field, data[field])


def _checked_type(content_type):
    normalized, error = validate_content_type(content_type)
    if error:
        raise ValidationError(error)
    return normalized


# ============ Site content ============

def get_content(content_type):
    """Get active content of one type ordered by `order`.

    Ties keep insertion order.
    """
    content_type = _checked_type(content_type)
    records = SiteContent.query.filter_by(type=content_type, active=True).order_by(
        SiteContent.order.asc(), SiteContent.id.asc()
    ).all()
    return [r.to_dict() for r in records]


def create_content(data):
    """Insert a content record and return its id."""
    if not data.get('title'):
        raise ValidationError('Title is required')

    now = datetime.utcnow()
    record = SiteContent(created_at=now, updated_at=now)
    _assign(record, data, CONTENT_FIELDS)
    record.type = _checked_type(data.get('type'))
    if 'metadata' in data:
        record.content_metadata = data['metadata']

    db.session.add(record)
    _commit('create content')
    return record.id


def update_content(content_id, data):
    record = _get_or_raise(SiteContent, content_id, 'Content')
    _assign(record, data, CONTENT_FIELDS)
    if 'type' in data:
        record.type = _checked_type(data['type'])
    if 'metadata' in data:
        record.content_metadata = data['metadata']
    record.updated_at = datetime.utcnow()
    _commit('update content')
    return record.to_dict()


def delete_content(content_id):
    record = _get_or_raise(SiteContent, content_id, 'Content')
    db.session.delete(record)
    _commit('delete content')


# ============ Categories ============

def get_categories():
    return get_content('category')


def create_category(data):
    """Create a category record, active and first in order unless told otherwise."""
    data = dict(data)
    data['type'] = 'category'
    data['order'] = data.get('order') or 0
    if data.get('active') is None:
        data['active'] = True
    return create_content(data)


def update_category(category_id, data):
    data = dict(data)
    data['type'] = 'category'
    return update_content(category_id, data)


def delete_category(category_id):
    """Delete a category and its uploaded image."""
    record = _get_or_raise(SiteContent, category_id, 'Category')

    if record.image_url:
        deleted, error = delete_file(CONTENT_BUCKET, record.image_url)
        if not deleted:
            raise PersistenceError(f'Failed to delete category image: {error}')

    delete_content(category_id)


# ============ Category icons ============

def get_category_icons():
    icons = CategoryIcon.query.order_by(CategoryIcon.order.asc(), CategoryIcon.id.asc()).all()
    return [icon.to_dict() for icon in icons]


def update_category_icon(icon_id, data):
    icon = _get_or_raise(CategoryIcon, icon_id, 'Category icon')
    _assign(icon, data, ICON_FIELDS)
    icon.updated_at = datetime.utcnow()
    _commit('update category icon')
    return icon.to_dict()


# ============ Product videos ============

def get_product_videos(product_id):
    videos = ProductVideo.query.filter_by(product_id=product_id).order_by(
        ProductVideo.order.asc(), ProductVideo.id.asc()
    ).all()
    return [video.to_dict() for video in videos]


def add_product_video(product_id, data):
    """Attach a video to a machine and return the video id."""
    _get_or_raise(Machine, product_id, 'Machine')
    if not data.get('title') or not data.get('video_url'):
        raise ValidationError('Title and video_url are required')

    now = datetime.utcnow()
    video = ProductVideo(product_id=product_id, created_at=now, updated_at=now)
    _assign(video, data, VIDEO_FIELDS)

    db.session.add(video)
    _commit('add product video')
    return video.id


def update_product_video(video_id, data):
    video = _get_or_raise(ProductVideo, video_id, 'Video')
    _assign(video, data, VIDEO_FIELDS)
    video.updated_at = datetime.utcnow()
    _commit('update product video')
    return video.to_dict()


def delete_product_video(video_id):
    video = _get_or_raise(ProductVideo, video_id, 'Video')
    db.session.delete(video)
    _commit('delete product video')
