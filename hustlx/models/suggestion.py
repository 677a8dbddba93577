"""AI suggestion and assessment records"""
from hustlx import db
from .base import BaseModel


class SkillSuggestion(BaseModel):
    """A monetizable skill proposed to a user by the AI assistant"""
    __tablename__ = 'skill_suggestions'

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    match_percentage = db.Column(db.Integer, nullable=False)
    tags = db.Column(db.JSON, nullable=False, default=list)
    icon = db.Column(db.String(100))


class AssessmentResponse(BaseModel):
    """Answers a user gave to the skill assessment questionnaire"""
    __tablename__ = 'assessment_responses'

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    responses = db.Column(db.JSON, nullable=False)
    completed = db.Column(db.Boolean, nullable=False, default=True)
