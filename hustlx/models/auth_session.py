"""Server-side login session"""
import secrets

from hustlx import db
from .base import utcnow


def generate_session_id():
    return secrets.token_urlsafe(32)


class AuthSession(db.Model):
    """Session row backing the cookie issued in session auth mode"""
    __tablename__ = 'auth_sessions'

    id = db.Column(db.String(64), primary_key=True, default=generate_session_id)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, nullable=False)
    expires_at = db.Column(db.DateTime(timezone=True), nullable=False, index=True)

    user = db.relationship('User')

    @classmethod
    def find_valid(cls, session_id):
        """Return the unexpired session with this id, or None"""
        return cls.query.filter(cls.id == session_id, cls.expires_at > utcnow()).first()
