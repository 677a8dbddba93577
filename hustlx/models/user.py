"""User model"""
from hustlx import db
from .base import BaseModel, TimestampMixin

ROLE_HOMEMAKER = 'homemaker'
ROLE_CUSTOMER = 'customer'
ROLE_MENTOR = 'mentor'
ROLES = (ROLE_HOMEMAKER, ROLE_CUSTOMER, ROLE_MENTOR)

# Profile fields a user may change on their own account
PROFILE_FIELDS = ('first_name', 'last_name', 'bio', 'location', 'phone', 'profile_picture', 'specialty')

# Never shown on the public profile
PRIVATE_FIELDS = ('email', 'phone')


class User(BaseModel, TimestampMixin):
    """
    User model - homemakers sell, customers buy, mentors advise.
    The role is fixed at registration.
    """
    __tablename__ = 'users'

    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    username = db.Column(db.String(50), nullable=False, unique=True, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    role = db.Column(db.String(20), nullable=False)  # homemaker, customer, mentor

    first_name = db.Column(db.String(100))
    last_name = db.Column(db.String(100))
    profile_picture = db.Column(db.Text)
    bio = db.Column(db.Text)
    location = db.Column(db.String(255))
    phone = db.Column(db.String(50))
    specialty = db.Column(db.String(255))  # mentors

    __table_args__ = (
        db.CheckConstraint(f"role IN {ROLES}", name='ck_users_role'),
        db.Index('idx_users_role', 'role'),
    )

    # Relationships
    skills = db.relationship('Skill', backref='homemaker', lazy='dynamic')
    listings = db.relationship('Listing', backref='homemaker', lazy='dynamic')

    def __repr__(self):
        return f'<User {self.username} ({self.role})>'

    @property
    def full_name(self):
        """Get full name"""
        return ' '.join(part for part in (self.first_name, self.last_name) if part) or self.username

    def is_homemaker(self):
        return self.role == ROLE_HOMEMAKER

    def is_customer(self):
        return self.role == ROLE_CUSTOMER

    def is_mentor(self):
        return self.role == ROLE_MENTOR

    def to_dict(self, public=False):
        """Convert to dictionary; the password hash is never included"""
        exclude = ['password_hash']
        if public:
            exclude.extend(PRIVATE_FIELDS)

        data = super().to_dict(exclude=exclude)
        data['full_name'] = self.full_name
        return data
