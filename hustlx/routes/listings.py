"""Listing routes: marketplace search, reads and owner-only writes"""
from flask import Blueprint, jsonify, request

from hustlx.auth import current_identity, require_auth, require_role
from hustlx.errors import NotFound
from hustlx.models import Listing
from hustlx.models.user import ROLE_HOMEMAKER
from hustlx.schemas import ListingCreate, ListingSearch, ListingUpdate, parse_body, validate_payload
from hustlx.services import listings as listing_service

listings_bp = Blueprint('listings', __name__)

MAX_FEATURED_LIMIT = 50


def _search_params():
    """Collect search criteria from the query string"""
    params = {key: request.args.get(key) for key in ('category', 'type', 'minPrice', 'maxPrice', 'min_price', 'max_price')}
    params = {key: value for key, value in params.items() if value not in (None, '')}

    query = request.args.get('query') or request.args.get('q')
    if query:
        params['query'] = query

    # ?tags=a&tags=b and ?tags=a,b are both accepted
    tags = []
    for raw in request.args.getlist('tags'):
        tags.extend(tag.strip() for tag in raw.split(',') if tag.strip())
    params['tags'] = tags

    return validate_payload(ListingSearch, params)


@listings_bp.route('', methods=['GET'])
def list_listings():
    """
    Search active listings
    GET /api/listings?query=cake&category=baking&type=product&minPrice=100&maxPrice=5000&tags=vegan
    """
    criteria = _search_params()
    results = listing_service.search_listings(**criteria.model_dump())
    return jsonify({
        'listings': [listing.to_dict() for listing in results],
        'total': len(results),
    }), 200


@listings_bp.route('/featured', methods=['GET'])
def featured():
    limit = request.args.get('limit', listing_service.DEFAULT_FEATURED_LIMIT, type=int)
    limit = max(1, min(limit, MAX_FEATURED_LIMIT))
    results = listing_service.featured_listings(limit)
    return jsonify({'listings': [listing.to_dict() for listing in results]}), 200


@listings_bp.route('/<int:listing_id>', methods=['GET'])
def get_listing(listing_id):
    listing = Listing.get_or_404(listing_id)

    # Drafts are private to their owner
    if listing.status == 'draft':
        identity = current_identity()
        if identity is None or not listing.is_owned_by(identity.user_id):
            raise NotFound('Listing not found')

    return jsonify({'listing': listing.to_dict()}), 200


@listings_bp.route('', methods=['POST'])
@require_role(ROLE_HOMEMAKER)
def create_listing():
    data = parse_body(ListingCreate)
    listing = listing_service.create_listing(current_identity().user_id, data)
    return jsonify({'listing': listing.to_dict()}), 201


@listings_bp.route('/<int:listing_id>', methods=['PATCH'])
@require_auth
def update_listing(listing_id):
    listing = Listing.get_or_404(listing_id)
    listing_service.check_owner(listing, current_identity(), 'update')
    data = parse_body(ListingUpdate)
    listing = listing_service.update_listing(listing, current_identity(), data)
    return jsonify({'listing': listing.to_dict()}), 200


@listings_bp.route('/<int:listing_id>', methods=['DELETE'])
@require_auth
def delete_listing(listing_id):
    listing = Listing.get_or_404(listing_id)
    listing_service.delete_listing(listing, current_identity())
    return '', 204
