"""
Review routes.
Customers rate listings they bought; reviews are append-only.
"""
import logging

from flask import Blueprint, current_app, jsonify
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from hustlx import db
from hustlx.auth import current_identity, require_role
from hustlx.errors import Forbidden, ValidationError
from hustlx.models import Listing, Order, Review, User
from hustlx.models.order import STATUS_COMPLETED
from hustlx.models.user import ROLE_CUSTOMER
from hustlx.schemas import ReviewCreate, parse_body

logger = logging.getLogger(__name__)

reviews_bp = Blueprint('reviews', __name__)


def _rating_summary(*criteria):
    """Average rating and count over the reviews matching ``criteria``"""
    average, total = db.session.query(func.avg(Review.rating), func.count(Review.id)).filter(*criteria).one()
    return {
        'average_rating': round(float(average), 2) if average is not None else None,
        'total_reviews': total,
    }


def _newest_first(query):
    return query.order_by(Review.created_at.desc(), Review.id.desc()).all()


# ---------------------------------------------------------------------------
# POST /api/reviews : Create a review
# ---------------------------------------------------------------------------
@reviews_bp.route('', methods=['POST'])
@require_role(ROLE_CUSTOMER)
def create_review():
    """Create a review for a listing.

    Body JSON:
        listing_id: int (required)
        rating: int 1-5 (required)
        comment: str (optional)
    """
    data = parse_body(ReviewCreate)
    author_id = current_identity().user_id

    # The listing must still exist; deleted listings cannot be reviewed
    listing = Listing.get_or_404(data.listing_id)

    if current_app.config['REVIEWS_REQUIRE_COMPLETED_ORDER']:
        completed = Order.query.filter_by(
            listing_id=listing.id,
            customer_id=author_id,
            status=STATUS_COMPLETED,
        ).first()
        if completed is None:
            raise Forbidden('You can only review listings you have a completed order for')

    if Review.query.filter_by(listing_id=listing.id, author_id=author_id).first():
        raise ValidationError('You have already reviewed this listing')

    review = Review(
        listing_id=listing.id,
        author_id=author_id,
        recipient_id=listing.homemaker_id,
        rating=data.rating,
        comment=data.comment.strip() if data.comment else None,
    )
    try:
        db.session.add(review)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ValidationError('You have already reviewed this listing')

    logger.info('Review %s (%s/5) left on listing %s', review.id, review.rating, listing.id)
    return jsonify({'review': review.to_dict()}), 201


# ---------------------------------------------------------------------------
# GET /api/reviews/listing/<id> : Reviews for a listing
# ---------------------------------------------------------------------------
@reviews_bp.route('/listing/<int:listing_id>', methods=['GET'])
def listing_reviews(listing_id):
    Listing.get_or_404(listing_id)
    reviews = _newest_first(Review.query.filter_by(listing_id=listing_id))
    return jsonify({
        'reviews': [review.to_dict() for review in reviews],
        **_rating_summary(Review.listing_id == listing_id),
    }), 200


# ---------------------------------------------------------------------------
# GET /api/reviews/author/<id> : Reviews written by a user
# ---------------------------------------------------------------------------
@reviews_bp.route('/author/<int:user_id>', methods=['GET'])
def author_reviews(user_id):
    User.get_or_404(user_id, 'User not found')
    reviews = _newest_first(Review.query.filter_by(author_id=user_id))
    return jsonify({'reviews': [review.to_dict() for review in reviews]}), 200


# ---------------------------------------------------------------------------
# GET /api/reviews/recipient/<id> : Reviews received by a homemaker
# ---------------------------------------------------------------------------
@reviews_bp.route('/recipient/<int:user_id>', methods=['GET'])
def recipient_reviews(user_id):
    User.get_or_404(user_id, 'User not found')
    reviews = _newest_first(Review.query.filter_by(recipient_id=user_id))
    return jsonify({
        'reviews': [review.to_dict() for review in reviews],
        **_rating_summary(Review.recipient_id == user_id),
    }), 200
