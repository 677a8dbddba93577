"""Order model"""
from hustlx import db
from .base import BaseModel, TimestampMixin

STATUS_PENDING = 'pending'
STATUS_PAID = 'paid'
STATUS_COMPLETED = 'completed'
STATUS_CANCELED = 'canceled'
ORDER_STATUSES = (STATUS_PENDING, STATUS_PAID, STATUS_COMPLETED, STATUS_CANCELED)

# Allowed transitions; completed and canceled are terminal
ORDER_TRANSITIONS = {
    STATUS_PENDING: frozenset({STATUS_PAID, STATUS_CANCELED}),
    STATUS_PAID: frozenset({STATUS_COMPLETED, STATUS_CANCELED}),
    STATUS_COMPLETED: frozenset(),
    STATUS_CANCELED: frozenset(),
}


class Order(BaseModel, TimestampMixin):
    """
    Order model - a customer's purchase of a listing.

    homemaker_id and total_amount are snapshots taken at creation and are
    never re-derived from the listing afterwards.
    """
    __tablename__ = 'orders'

    listing_id = db.Column(db.Integer, db.ForeignKey('listings.id'), nullable=False, index=True)
    customer_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    homemaker_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    total_amount = db.Column(db.Integer, nullable=False)  # cents

    payment_id = db.Column(db.String(255))
    delivery_date = db.Column(db.DateTime(timezone=True))
    notes = db.Column(db.Text)

    __table_args__ = (
        db.CheckConstraint('quantity >= 1', name='ck_orders_quantity'),
        db.Index('idx_orders_status', 'status'),
    )

    listing = db.relationship('Listing', backref=db.backref('orders', lazy='dynamic'))

    def __repr__(self):
        return f'<Order {self.id} - {self.status}>'

    @property
    def is_terminal(self):
        return not ORDER_TRANSITIONS[self.status]

    def can_transition_to(self, status):
        return status in ORDER_TRANSITIONS.get(self.status, ())

    def involves(self, user_id):
        """True when the user is the buyer or the seller"""
        return user_id in (self.customer_id, self.homemaker_id)
