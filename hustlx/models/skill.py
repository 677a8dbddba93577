"""Skill model"""
from hustlx import db
from .base import BaseModel, utcnow

MIN_LEVEL = 1
MAX_LEVEL = 5


class Skill(BaseModel):
    """
    Skill model - a homemaker's claimed ability in a category.

    Created unverified. Verification is one-way: it sets the level, the
    verification date and the assessment details, and there is no path back.
    """
    __tablename__ = 'skills'

    homemaker_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    category = db.Column(db.String(100), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    level = db.Column(db.Integer, nullable=False, default=MIN_LEVEL)

    is_verified = db.Column(db.Boolean, nullable=False, default=False)
    verification_date = db.Column(db.DateTime(timezone=True))
    verification_details = db.Column(db.JSON)

    __table_args__ = (
        db.CheckConstraint(f'level BETWEEN {MIN_LEVEL} AND {MAX_LEVEL}', name='ck_skills_level'),
    )

    media = db.relationship('Media', backref='skill', lazy='dynamic')

    def __repr__(self):
        return f'<Skill {self.name} L{self.level}{" verified" if self.is_verified else ""}>'

    def mark_verified(self, level, feedback, score):
        """Record a successful assessment and return the stored details"""
        now = utcnow()
        self.level = max(MIN_LEVEL, min(MAX_LEVEL, int(level)))
        self.is_verified = True
        self.verification_date = now
        self.verification_details = {
            'verified_at': now.isoformat(),
            'skill_level': self.level,
            'feedback': feedback,
            'score': score,
        }
        return self.verification_details
