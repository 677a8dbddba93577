"""
Skill routes.

Homemakers declare skills, then ask for them to be verified by the AI
assessor. Verification fields are server-owned and verification is one-way.
"""
import logging

from flask import Blueprint, jsonify

from hustlx import db
from hustlx.auth import current_identity, require_auth, require_role
from hustlx.errors import Forbidden, InvalidTransition, ValidationError
from hustlx.models import Media, Skill
from hustlx.models.user import ROLE_HOMEMAKER
from hustlx.schemas import SkillCreate, SkillUpdate, SkillVerifyRequest, parse_body
from hustlx.services.groq import get_groq_client

logger = logging.getLogger(__name__)

skills_bp = Blueprint('skills', __name__)


def _get_owned_skill(skill_id, action):
    skill = Skill.get_or_404(skill_id, 'Skill not found')
    if skill.homemaker_id != current_identity().user_id:
        raise Forbidden(f"You don't have permission to {action} this skill")
    return skill


# ---------------------------------------------------------------------------
# POST /api/skills
# ---------------------------------------------------------------------------
@skills_bp.route('', methods=['POST'])
@require_role(ROLE_HOMEMAKER)
def create_skill():
    data = parse_body(SkillCreate)
    skill = Skill(homemaker_id=current_identity().user_id, **data.model_dump())
    db.session.add(skill)
    db.session.commit()
    return jsonify({'skill': skill.to_dict()}), 201


# ---------------------------------------------------------------------------
# POST /api/skills/verify
# ---------------------------------------------------------------------------
@skills_bp.route('/verify', methods=['POST'])
@require_role(ROLE_HOMEMAKER)
def verify_skill():
    """
    Assess a skill and mark it verified
    Body: {"skill_id": 1, "answers": {...}}
    """
    data = parse_body(SkillVerifyRequest)
    skill = _get_owned_skill(data.skill_id, 'verify')
    if skill.is_verified:
        raise InvalidTransition('Skill is already verified')

    media_count = skill.media.count()
    result = get_groq_client().verify_skill(skill, data.answers, media_count)

    details = skill.mark_verified(result['level'], result['feedback'], result['score'])
    db.session.commit()

    logger.info('Skill %s verified at level %s', skill.id, skill.level)
    return jsonify({'skill': skill.to_dict(), 'verification': details}), 200


# ---------------------------------------------------------------------------
# /api/skills/<id>
# ---------------------------------------------------------------------------
@skills_bp.route('/<int:skill_id>', methods=['GET'])
def get_skill(skill_id):
    skill = Skill.get_or_404(skill_id, 'Skill not found')
    return jsonify({'skill': skill.to_dict()}), 200


@skills_bp.route('/<int:skill_id>', methods=['PATCH'])
@require_auth
def update_skill(skill_id):
    skill = _get_owned_skill(skill_id, 'update')
    changes = parse_body(SkillUpdate).model_dump(exclude_unset=True)

    if skill.is_verified and 'level' in changes:
        raise ValidationError('The level of a verified skill cannot be changed')

    for field in ('category', 'name', 'level'):
        if changes.get(field) is not None:
            setattr(skill, field, changes[field])

    db.session.commit()
    return jsonify({'skill': skill.to_dict()}), 200


@skills_bp.route('/<int:skill_id>', methods=['DELETE'])
@require_auth
def delete_skill(skill_id):
    skill = _get_owned_skill(skill_id, 'delete')

    # Uploaded samples stay with the user, detached from the skill
    Media.query.filter_by(skill_id=skill.id).update({'skill_id': None})
    db.session.delete(skill)
    db.session.commit()

    logger.info('Skill %s deleted', skill_id)
    return '', 204
