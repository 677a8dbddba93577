"""User profile routes"""
import logging

from flask import Blueprint, jsonify

from hustlx import db
from hustlx.auth import current_identity, require_auth
from hustlx.errors import Forbidden
from hustlx.models import SkillSuggestion, User
from hustlx.models.user import PROFILE_FIELDS
from hustlx.schemas import ProfileUpdate, parse_body

logger = logging.getLogger(__name__)

users_bp = Blueprint('users', __name__)


def _update_profile(user):
    """Apply the profile fields present in the body; nothing else is writable"""
    data = parse_body(ProfileUpdate)
    for field, value in data.model_dump(exclude_unset=True).items():
        if field in PROFILE_FIELDS:
            setattr(user, field, value)
    db.session.commit()
    logger.info('User %s updated their profile', user.id)
    return jsonify({'user': user.to_dict()}), 200


def _check_self(user_id):
    if current_identity().user_id != user_id:
        raise Forbidden("You can only update your own profile")


@users_bp.route('/me', methods=['GET'])
@require_auth
def get_me():
    user = User.get_or_404(current_identity().user_id, 'User not found')
    return jsonify({'user': user.to_dict()}), 200


@users_bp.route('/me', methods=['PATCH'])
@require_auth
def update_me():
    user = User.get_or_404(current_identity().user_id, 'User not found')
    return _update_profile(user)


@users_bp.route('/<int:user_id>', methods=['GET'])
def get_user(user_id):
    """Public profile; email and phone are never shown here"""
    user = User.get_or_404(user_id, 'User not found')
    return jsonify({'user': user.to_dict(public=True)}), 200


@users_bp.route('/<int:user_id>', methods=['PATCH'])
@require_auth
def update_user(user_id):
    _check_self(user_id)
    user = User.get_or_404(user_id, 'User not found')
    return _update_profile(user)


@users_bp.route('/<int:user_id>/skill-suggestions', methods=['GET'])
@require_auth
def get_skill_suggestions(user_id):
    if current_identity().user_id != user_id:
        raise Forbidden("You can only view your own skill suggestions")

    suggestions = (
        SkillSuggestion.query
        .filter_by(user_id=user_id)
        .order_by(SkillSuggestion.created_at.desc(), SkillSuggestion.id.desc())
        .all()
    )
    return jsonify({'suggestions': [s.to_dict() for s in suggestions]}), 200
