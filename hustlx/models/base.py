"""
Base model with common fields and methods
"""
from datetime import datetime, timezone

from hustlx import db


def utcnow():
    return datetime.now(timezone.utc)


class BaseModel(db.Model):
    """Abstract base model with common fields"""
    __abstract__ = True

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, nullable=False)

    def to_dict(self, exclude=None):
        """
        Convert model to dictionary

        Args:
            exclude (list): List of fields to exclude

        Returns:
            dict: Model as dictionary
        """
        exclude = exclude or []
        data = {}

        for column in self.__table__.columns:
            if column.name not in exclude:
                value = getattr(self, column.name)

                # Handle datetime
                if isinstance(value, datetime):
                    value = value.isoformat()

                data[column.name] = value

        return data

    @classmethod
    def get_or_404(cls, record_id, message=None):
        """Fetch by primary key or raise NotFound"""
        from hustlx.errors import NotFound

        record = db.session.get(cls, record_id)
        if record is None:
            raise NotFound(message or f'{cls.__name__} not found')
        return record


class TimestampMixin:
    """Adds an updated_at column maintained on every write"""
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class SoftDeleteMixin:
    """Rows are hidden rather than removed so that references stay valid"""
    deleted_at = db.Column(db.DateTime(timezone=True), nullable=True)

    def soft_delete(self):
        """Soft delete by setting deleted_at timestamp"""
        self.deleted_at = utcnow()

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    @classmethod
    def active(cls):
        """Query only non-deleted records"""
        return cls.query.filter(cls.deleted_at.is_(None))
