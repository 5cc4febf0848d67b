"""Site content models: banners, categories, phases, icons and videos."""

from datetime import datetime

from app import db


class SiteContent(db.Model):
    """Content record shown on the site (banner, category or phase)."""

    __tablename__ = 'site_content'

    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(20), nullable=False, index=True)  # 'banner', 'category', 'phase'
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.String(500), nullable=True)
    link = db.Column(db.String(500), nullable=True)
    icon = db.Column(db.String(100), nullable=True)
    order = db.Column(db.Integer, default=0, nullable=False)
    active = db.Column(db.Boolean, default=True, nullable=False, index=True)
    category = db.Column(db.String(100), nullable=True)
    machines = db.Column(db.JSON, nullable=True)  # Machine types (subcategory names)
    # 'metadata' is reserved on declarative models
    content_metadata = db.Column('metadata', db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        """Convert content record to dictionary."""
        return {
            'id': self.id,
            'type': self.type,
            'title': self.title,
            'description': self.description,
            'image_url': self.image_url,
            'link': self.link,
            'icon': self.icon,
            'order': self.order,
            'active': self.active,
            'category': self.category,
            'machines': self.machines or [],
            'metadata': self.content_metadata or {},
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<SiteContent {self.id}: {self.type} {self.title}>'


class CategoryIcon(db.Model):
    """Icon shown next to a category in the navigation."""

    __tablename__ = 'category_icons'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    icon = db.Column(db.String(100), nullable=False)
    image_url = db.Column(db.String(500), nullable=True)
    order = db.Column(db.Integer, default=0, nullable=False)
    active = db.Column(db.Boolean, default=True, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'icon': self.icon,
            'image_url': self.image_url,
            'order': self.order,
            'active': self.active,
        }

    def __repr__(self):
        return f'<CategoryIcon {self.id}: {self.name}>'


class ProductVideo(db.Model):
    """Demonstration video attached to a machine."""

    __tablename__ = 'product_videos'

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.String(32), db.ForeignKey('machines.id', ondelete='CASCADE'), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    video_url = db.Column(db.String(500), nullable=False)
    thumbnail_url = db.Column(db.String(500), nullable=True)
    order = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        """Convert video to dictionary."""
        return {
            'id': self.id,
            'product_id': self.product_id,
            'title': self.title,
            'video_url': self.video_url,
            'thumbnail_url': self.thumbnail_url,
            'order': self.order,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<ProductVideo {self.id}: {self.title}>'
