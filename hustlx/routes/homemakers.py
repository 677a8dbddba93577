"""Per-homemaker storefront reads"""
from flask import Blueprint, jsonify

from hustlx.auth import current_identity
from hustlx.errors import NotFound
from hustlx.models import Skill, User
from hustlx.services.listings import listings_by_homemaker

homemakers_bp = Blueprint('homemakers', __name__)


def _get_homemaker(user_id):
    user = User.get_or_404(user_id, 'Homemaker not found')
    if not user.is_homemaker():
        raise NotFound('Homemaker not found')
    return user


@homemakers_bp.route('/<int:homemaker_id>/listings', methods=['GET'])
def get_homemaker_listings(homemaker_id):
    """Active listings; the homemaker also sees their unpublished ones"""
    _get_homemaker(homemaker_id)
    identity = current_identity()
    own = identity is not None and identity.user_id == homemaker_id
    listings = listings_by_homemaker(homemaker_id, include_unpublished=own)
    return jsonify({'listings': [listing.to_dict() for listing in listings]}), 200


@homemakers_bp.route('/<int:homemaker_id>/skills', methods=['GET'])
def get_homemaker_skills(homemaker_id):
    _get_homemaker(homemaker_id)
    skills = Skill.query.filter_by(homemaker_id=homemaker_id).order_by(Skill.created_at, Skill.id).all()
    return jsonify({'skills': [skill.to_dict() for skill in skills]}), 200
