"""SQLAlchemy models package"""
from .user import User
from .skill import Skill
from .listing import Listing
from .order import Order
from .review import Review
from .media import Media
from .auth_session import AuthSession
from .suggestion import SkillSuggestion, AssessmentResponse

__all__ = [
    'User',
    'Skill',
    'Listing',
    'Order',
    'Review',
    'Media',
    'AuthSession',
    'SkillSuggestion',
    'AssessmentResponse',
]
