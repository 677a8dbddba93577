"""Listing management and marketplace search"""
import logging

from sqlalchemy import or_

from hustlx import db
from hustlx.errors import Forbidden
from hustlx.models import Listing
from hustlx.models.listing import EDITABLE_FIELDS, STATUS_ACTIVE

logger = logging.getLogger(__name__)

DEFAULT_FEATURED_LIMIT = 6


def _escape_like(value):
    return value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def search_listings(query=None, category=None, type=None, min_price=None, max_price=None, tags=None):
    """
    Search active listings.

    Every supplied criterion must hold (they are AND-ed): the text must
    appear in the title or the description (case-insensitive), and a listing
    only passes the tag filter when it carries all of the requested tags.
    """
    q = Listing.active().filter(Listing.status == STATUS_ACTIVE)

    if query:
        pattern = f'%{_escape_like(query)}%'
        q = q.filter(or_(
            Listing.title.ilike(pattern, escape='\\'),
            Listing.description.ilike(pattern, escape='\\'),
        ))
    if category:
        q = q.filter(Listing.category == category)
    if type:
        q = q.filter(Listing.type == type)
    if min_price is not None:
        q = q.filter(Listing.price >= min_price)
    if max_price is not None:
        q = q.filter(Listing.price <= max_price)

    results = q.order_by(Listing.created_at.desc(), Listing.id.desc()).all()

    # Tags live in a JSON column; containment is checked here so the same
    # query works on SQLite and PostgreSQL
    if tags:
        wanted = set(tags)
        results = [listing for listing in results if wanted.issubset(listing.tags or [])]

    return results


def featured_listings(limit=DEFAULT_FEATURED_LIMIT):
    return (
        Listing.active()
        .filter(Listing.status == STATUS_ACTIVE, Listing.is_featured.is_(True))
        .order_by(Listing.created_at.desc(), Listing.id.desc())
        .limit(limit)
        .all()
    )


def listings_by_homemaker(homemaker_id, include_unpublished=False):
    q = Listing.active().filter(Listing.homemaker_id == homemaker_id)
    if not include_unpublished:
        q = q.filter(Listing.status == STATUS_ACTIVE)
    return q.order_by(Listing.created_at.desc(), Listing.id.desc()).all()


def create_listing(homemaker_id, data):
    listing = Listing(homemaker_id=homemaker_id, **data.model_dump())
    db.session.add(listing)
    db.session.commit()
    logger.info('Listing %s created by homemaker %s', listing.id, homemaker_id)
    return listing


def check_owner(listing, identity, action='modify'):
    if identity is None or not listing.is_owned_by(identity.user_id):
        raise Forbidden(f"You don't have permission to {action} this listing")


def update_listing(listing, identity, data):
    """Apply a validated partial update; only the owner may do this"""
    check_owner(listing, identity, 'update')

    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if field in EDITABLE_FIELDS:
            setattr(listing, field, value)

    db.session.commit()
    return listing


def delete_listing(listing, identity):
    """Soft delete; orders and reviews keep pointing at the row"""
    check_owner(listing, identity, 'delete')
    listing.soft_delete()
    db.session.commit()
    logger.info('Listing %s deleted by homemaker %s', listing.id, identity.user_id)
