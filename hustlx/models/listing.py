"""Listing model"""
from hustlx import db
from .base import BaseModel, TimestampMixin, SoftDeleteMixin

LISTING_TYPES = ('service', 'product')
LISTING_STATUSES = ('draft', 'active', 'inactive', 'pending')
STATUS_ACTIVE = 'active'

# Columns the owner may change after creation
EDITABLE_FIELDS = (
    'title', 'description', 'price', 'type', 'category', 'subcategory',
    'tags', 'images', 'is_featured', 'location', 'status',
)


class Listing(BaseModel, TimestampMixin, SoftDeleteMixin):
    """
    Listing model - a service or product offered by one homemaker.
    Price is stored in minor currency units (cents).
    """
    __tablename__ = 'listings'

    homemaker_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    price = db.Column(db.Integer, nullable=False)
    type = db.Column(db.String(20), nullable=False)  # service, product
    category = db.Column(db.String(100), nullable=False)
    subcategory = db.Column(db.String(100))
    tags = db.Column(db.JSON, nullable=False, default=list)
    images = db.Column(db.JSON, nullable=False, default=list)
    is_featured = db.Column(db.Boolean, nullable=False, default=False)
    location = db.Column(db.String(255))
    status = db.Column(db.String(20), nullable=False, default=STATUS_ACTIVE)

    __table_args__ = (
        db.CheckConstraint('price >= 0', name='ck_listings_price'),
        db.Index('idx_listings_status', 'status'),
        db.Index('idx_listings_category', 'category'),
    )

    media = db.relationship('Media', backref='listing', lazy='dynamic')

    def __repr__(self):
        return f'<Listing {self.title} - {self.status}>'

    @classmethod
    def get_or_404(cls, record_id, message=None):
        """Deleted listings are treated as missing"""
        listing = super().get_or_404(record_id, message or 'Listing not found')
        if listing.is_deleted:
            from hustlx.errors import NotFound
            raise NotFound(message or 'Listing not found')
        return listing

    @property
    def is_active(self):
        return self.status == STATUS_ACTIVE and not self.is_deleted

    def is_owned_by(self, user_id):
        return self.homemaker_id == user_id

    def to_dict(self):
        return super().to_dict(exclude=['deleted_at'])
