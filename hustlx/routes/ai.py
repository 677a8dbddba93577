"""
AI assistant routes and the mentor directory.

All AI calls go through GroqClient, which answers with fallback content when
Groq is unavailable, so these endpoints do not fail on AI outages.
"""
import logging

from flask import Blueprint, jsonify

from hustlx import db
from hustlx.auth import current_identity, require_auth
from hustlx.errors import NotFound
from hustlx.models import AssessmentResponse, SkillSuggestion, User
from hustlx.models.user import ROLE_MENTOR
from hustlx.schemas import (
    AssessmentSubmission,
    BusinessSuggestionRequest,
    MentorRecommendationRequest,
    SkillSuggestionRequest,
    parse_body,
)
from hustlx.services.groq import get_groq_client

logger = logging.getLogger(__name__)

ai_bp = Blueprint('ai', __name__)
mentors_bp = Blueprint('mentors', __name__)


def _store_suggestions(user_id, skills):
    """Persist AI skill suggestions for the user and return them serialized"""
    rows = [
        SkillSuggestion(
            user_id=user_id,
            name=skill['name'],
            description=skill['description'],
            match_percentage=skill['match_percentage'],
            tags=skill.get('tags') or [],
            icon=skill.get('icon'),
        )
        for skill in skills
    ]
    db.session.add_all(rows)
    db.session.commit()
    return [row.to_dict() for row in rows]


def _mentor_query():
    return User.query.filter_by(role=ROLE_MENTOR).order_by(User.id)


# ---------------------------------------------------------------------------
# POST /api/ai/skill-suggestions
# ---------------------------------------------------------------------------
@ai_bp.route('/ai/skill-suggestions', methods=['POST'])
@require_auth
def skill_suggestions():
    """
    Suggest monetizable skills from a short profile
    Body: {"interests": [...], "experience": [...], "hobbies": [...],
           "personality_traits": [...], "demographics": "..."}
    """
    profile = parse_body(SkillSuggestionRequest).model_dump()
    result = get_groq_client().generate_skill_suggestions(profile)
    suggestions = _store_suggestions(current_identity().user_id, result['skills'])
    return jsonify({'skills': suggestions}), 200


# ---------------------------------------------------------------------------
# POST /api/assessments
# ---------------------------------------------------------------------------
@ai_bp.route('/assessments', methods=['POST'])
@require_auth
def submit_assessment():
    """
    Store assessment answers and return the AI analysis
    Body: {"responses": {"question": "answer", ...}}
    """
    data = parse_body(AssessmentSubmission)
    user_id = current_identity().user_id

    assessment = AssessmentResponse(user_id=user_id, responses=data.responses, completed=True)
    db.session.add(assessment)
    db.session.commit()

    analysis = get_groq_client().analyze_assessment(data.responses)
    suggestions = _store_suggestions(user_id, analysis['suggested_skills'])

    logger.info('Assessment %s analyzed for user %s', assessment.id, user_id)
    return jsonify({
        'assessment': assessment.to_dict(),
        'suggested_skills': suggestions,
        'business_insights': analysis['business_insights'],
    }), 201


# ---------------------------------------------------------------------------
# POST /api/ai/business-suggestions
# ---------------------------------------------------------------------------
@ai_bp.route('/ai/business-suggestions', methods=['POST'])
@require_auth
def business_suggestions():
    info = parse_body(BusinessSuggestionRequest).model_dump()
    return jsonify(get_groq_client().generate_business_suggestions(info)), 200


# ---------------------------------------------------------------------------
# POST /api/ai/mentor-recommendations
# ---------------------------------------------------------------------------
@ai_bp.route('/ai/mentor-recommendations', methods=['POST'])
@require_auth
def mentor_recommendations():
    """Rank registered mentors against the caller's skills and goals"""
    profile = parse_body(MentorRecommendationRequest).model_dump()
    mentors = {mentor.id: mentor for mentor in _mentor_query().all()}

    candidates = [
        {'id': m.id, 'name': m.full_name, 'specialty': m.specialty, 'bio': m.bio}
        for m in mentors.values()
    ]
    result = get_groq_client().suggest_mentors(profile, candidates)

    recommendations = [
        {
            'mentor': mentors[match['id']].to_dict(public=True),
            'match_percentage': match['match_percentage'],
            'match_reason': match['match_reason'],
        }
        for match in result['mentors']
    ]
    return jsonify({'mentors': recommendations}), 200


# ---------------------------------------------------------------------------
# Mentor directory
# ---------------------------------------------------------------------------
@mentors_bp.route('', methods=['GET'])
def list_mentors():
    return jsonify({'mentors': [m.to_dict(public=True) for m in _mentor_query().all()]}), 200


@mentors_bp.route('/<int:mentor_id>', methods=['GET'])
def get_mentor(mentor_id):
    mentor = User.get_or_404(mentor_id, 'Mentor not found')
    if not mentor.is_mentor():
        raise NotFound('Mentor not found')
    return jsonify({'mentor': mentor.to_dict(public=True)}), 200
