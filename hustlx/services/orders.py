r"""
Order lifecycle.

    pending --> paid --> completed
       \          \
        +----------+--> canceled

Who may request each target status:

* ``completed``: the order's homemaker
* ``canceled``: the order's customer
* ``paid``: nobody through the API; only the payment processor callback

Every check runs before anything is written, so a rejected request never
mutates the order. The write itself is a compare-and-set on the status the
checks saw; a concurrent transition that got there first makes this one fail
with InvalidTransition instead of silently overwriting it.
"""
import logging

from hustlx import db
from hustlx.errors import Forbidden, InvalidTransition, ValidationError
from hustlx.models import Listing, Order
from hustlx.models.base import utcnow
from hustlx.models.order import (
    STATUS_CANCELED,
    STATUS_COMPLETED,
    STATUS_PAID,
    STATUS_PENDING,
)
from hustlx.models.user import ROLE_CUSTOMER, ROLE_HOMEMAKER

logger = logging.getLogger(__name__)

# Party allowed to request each target status through the status endpoint
_REQUESTED_BY = {
    STATUS_COMPLETED: ROLE_HOMEMAKER,
    STATUS_CANCELED: ROLE_CUSTOMER,
}


def create_order(customer_id, listing_id, quantity=1, notes=None, delivery_date=None):
    """
    Place an order against an active listing.

    The total and the homemaker are taken from the stored listing at this
    moment; nothing the client sent about price or seller is used.
    """
    listing = Listing.get_or_404(listing_id)
    if not listing.is_active:
        raise ValidationError('Listing is not available for ordering')
    if listing.homemaker_id == customer_id:
        raise Forbidden('You cannot order your own listing')

    order = Order(
        listing_id=listing.id,
        customer_id=customer_id,
        homemaker_id=listing.homemaker_id,
        status=STATUS_PENDING,
        quantity=quantity,
        total_amount=listing.price * quantity,
        notes=notes,
        delivery_date=delivery_date,
    )
    db.session.add(order)
    db.session.commit()

    logger.info('Order %s placed by customer %s for listing %s (%s cents)',
                order.id, customer_id, listing.id, order.total_amount)
    return order


def check_party(order, identity):
    """Only the buyer or the seller of an order may see or touch it"""
    if identity.role == ROLE_CUSTOMER and order.customer_id == identity.user_id:
        return
    if identity.role == ROLE_HOMEMAKER and order.homemaker_id == identity.user_id:
        return
    raise Forbidden("You don't have permission to access this order")


def _apply_transition(order, new_status, **changes):
    """Compare-and-set the status; returns the refreshed order"""
    if not order.can_transition_to(new_status):
        raise InvalidTransition(f'Cannot change order status from {order.status} to {new_status}')

    previous = order.status
    values = dict(changes, status=new_status, updated_at=utcnow())
    updated = (
        Order.query
        .filter(Order.id == order.id, Order.status == previous)
        .update(values, synchronize_session=False)
    )
    if updated != 1:
        db.session.rollback()
        raise InvalidTransition('Order status was changed by another request')

    db.session.commit()
    db.session.refresh(order)
    logger.info('Order %s moved %s -> %s', order.id, previous, new_status)
    return order


def update_order_status(order, new_status, identity):
    """Status change requested by one of the order's parties"""
    check_party(order, identity)

    required_role = _REQUESTED_BY.get(new_status)
    if required_role is None:
        raise Forbidden(f'Orders cannot be set to {new_status} directly')
    if identity.role != required_role:
        if identity.role == ROLE_HOMEMAKER:
            raise Forbidden('Homemakers can only mark orders as completed')
        raise Forbidden('Customers can only cancel orders')

    return _apply_transition(order, new_status)


def confirm_payment(order, payment_id):
    """pending -> paid, driven by the payment processor callback"""
    return _apply_transition(order, STATUS_PAID, payment_id=payment_id)
