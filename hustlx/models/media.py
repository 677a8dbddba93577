"""Media model"""
from hustlx import db
from .base import BaseModel

MEDIA_TYPES = ('image', 'video', 'audio')
MEDIA_PURPOSES = ('skill_verification', 'listing', 'profile')


class Media(BaseModel):
    """Uploaded file attached to at most one skill or listing"""
    __tablename__ = 'media'

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    type = db.Column(db.String(20), nullable=False)  # image, video, audio
    url = db.Column(db.Text, nullable=False)
    purpose = db.Column(db.String(30), nullable=False)
    skill_id = db.Column(db.Integer, db.ForeignKey('skills.id'), index=True)
    listing_id = db.Column(db.Integer, db.ForeignKey('listings.id'), index=True)

    __table_args__ = (
        db.CheckConstraint('skill_id IS NULL OR listing_id IS NULL', name='ck_media_single_parent'),
    )

    def __repr__(self):
        return f'<Media {self.type} {self.url}>'

    @property
    def filename(self):
        return self.url.rsplit('/', 1)[-1]
