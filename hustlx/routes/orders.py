"""
Order routes.

Customers place and cancel orders, homemakers complete them. The move to
``paid`` is only reachable through the payment processor callback, which
authenticates with a shared secret instead of a user credential.
"""
import hmac
import logging

from flask import Blueprint, current_app, jsonify, request

from hustlx.auth import current_identity, require_auth, require_role
from hustlx.errors import NotFound, Unauthorized
from hustlx.models import Order
from hustlx.models.user import ROLE_CUSTOMER, ROLE_HOMEMAKER
from hustlx.schemas import OrderCreate, OrderStatusUpdate, PaymentConfirmation, parse_body
from hustlx.services import orders as order_service

logger = logging.getLogger(__name__)

orders_bp = Blueprint('orders', __name__)


# ---------------------------------------------------------------------------
# POST /api/orders
# ---------------------------------------------------------------------------
@orders_bp.route('', methods=['POST'])
@require_role(ROLE_CUSTOMER)
def create_order():
    """
    Place an order
    Body: {"listing_id": 1, "quantity": 2, "notes": "...", "delivery_date": "2026-01-01T10:00:00Z"}
    """
    data = parse_body(OrderCreate)
    order = order_service.create_order(
        customer_id=current_identity().user_id,
        listing_id=data.listing_id,
        quantity=data.quantity,
        notes=data.notes,
        delivery_date=data.delivery_date,
    )
    return jsonify({'order': order.to_dict()}), 201


# ---------------------------------------------------------------------------
# GET /api/orders/me
# ---------------------------------------------------------------------------
@orders_bp.route('/me', methods=['GET'])
@require_role(ROLE_CUSTOMER, ROLE_HOMEMAKER)
def my_orders():
    """Orders placed (customers) or received (homemakers)"""
    identity = current_identity()
    if identity.role == ROLE_CUSTOMER:
        query = Order.query.filter_by(customer_id=identity.user_id)
    else:
        query = Order.query.filter_by(homemaker_id=identity.user_id)

    orders = query.order_by(Order.created_at.desc(), Order.id.desc()).all()
    return jsonify({'orders': [order.to_dict() for order in orders]}), 200


# ---------------------------------------------------------------------------
# GET /api/orders/<id>
# ---------------------------------------------------------------------------
@orders_bp.route('/<int:order_id>', methods=['GET'])
@require_auth
def get_order(order_id):
    order = Order.get_or_404(order_id, 'Order not found')
    order_service.check_party(order, current_identity())
    return jsonify({'order': order.to_dict()}), 200


# ---------------------------------------------------------------------------
# PATCH /api/orders/<id>/status
# ---------------------------------------------------------------------------
@orders_bp.route('/<int:order_id>/status', methods=['PATCH'])
@require_auth
def update_status(order_id):
    """
    Request a status change
    Body: {"status": "completed" | "canceled"}
    """
    order = Order.get_or_404(order_id, 'Order not found')
    data = parse_body(OrderStatusUpdate)
    order = order_service.update_order_status(order, data.status, current_identity())
    return jsonify({'order': order.to_dict()}), 200


# ---------------------------------------------------------------------------
# POST /api/orders/<id>/payment-confirmation
# ---------------------------------------------------------------------------
@orders_bp.route('/<int:order_id>/payment-confirmation', methods=['POST'])
def payment_confirmation(order_id):
    """
    Payment processor callback, authenticated by X-Webhook-Secret
    Body: {"payment_id": "pi_123"}
    """
    secret = current_app.config.get('PAYMENT_WEBHOOK_SECRET')
    if not secret:
        raise NotFound('Not found')

    provided = request.headers.get('X-Webhook-Secret', '')
    if not hmac.compare_digest(provided.encode('utf-8'), secret.encode('utf-8')):
        logger.warning('Rejected payment confirmation for order %s: bad webhook secret', order_id)
        raise Unauthorized('Invalid webhook secret')

    order = Order.get_or_404(order_id, 'Order not found')
    data = parse_body(PaymentConfirmation)
    order = order_service.confirm_payment(order, data.payment_id)
    return jsonify({'order': order.to_dict()}), 200
