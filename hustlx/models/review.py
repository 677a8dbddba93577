"""Review model"""
from hustlx import db
from .base import BaseModel


class Review(BaseModel):
    """
    Review model - append-only rating of a listing.

    recipient_id is copied from the listing owner when the review is written;
    there is no update or delete path.
    """
    __tablename__ = 'reviews'

    listing_id = db.Column(db.Integer, db.ForeignKey('listings.id'), nullable=False, index=True)
    author_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    recipient_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    rating = db.Column(db.Integer, nullable=False)
    comment = db.Column(db.Text)

    __table_args__ = (
        db.CheckConstraint('rating BETWEEN 1 AND 5', name='ck_reviews_rating'),
        db.UniqueConstraint('listing_id', 'author_id', name='unique_review_per_author'),
    )

    def __repr__(self):
        return f'<Review {self.rating}/5 on listing {self.listing_id}>'
