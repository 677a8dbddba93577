"""
Review tests for Hustlx
Tests review creation rules and the public review reads
"""
import json
from unittest import mock

import pytest

from hustlx.models import Review


@pytest.fixture
def completed_order(order_factory):
    return order_factory(status='completed')


class TestCreateReview:
    """POST /api/reviews"""

    def test_recipient_is_listing_owner(self, client, homemaker, listing, completed_order,
                                        user_factory, customer_headers):
        other = user_factory('homemaker')
        response = client.post('/api/reviews', json={
            'listing_id': listing.id,
            'rating': 5,
            'comment': 'Lovely bread',
            'recipient_id': other.id,
        }, headers=customer_headers)

        assert response.status_code == 201
        data = json.loads(response.data)['review']
        assert data['recipient_id'] == homemaker.id
        assert data['rating'] == 5

    @pytest.mark.parametrize('rating', [0, 6, 'great', None])
    def test_rating_out_of_range(self, client, listing, completed_order, customer_headers, rating):
        response = client.post('/api/reviews', json={'listing_id': listing.id, 'rating': rating},
                               headers=customer_headers)

        assert response.status_code == 400
        assert Review.query.count() == 0

    def test_requires_completed_order(self, client, listing, order_factory, customer_headers):
        order_factory(status='paid')
        response = client.post('/api/reviews', json={'listing_id': listing.id, 'rating': 4},
                               headers=customer_headers)

        assert response.status_code == 403
        assert Review.query.count() == 0

    def test_completed_order_check_can_be_disabled(self, app, client, listing, customer_headers):
        app.config['REVIEWS_REQUIRE_COMPLETED_ORDER'] = False
        response = client.post('/api/reviews', json={'listing_id': listing.id, 'rating': 4},
                               headers=customer_headers)
        assert response.status_code == 201

    def test_one_review_per_listing(self, client, listing, completed_order, customer_headers):
        first = client.post('/api/reviews', json={'listing_id': listing.id, 'rating': 4},
                            headers=customer_headers)
        second = client.post('/api/reviews', json={'listing_id': listing.id, 'rating': 1},
                             headers=customer_headers)

        assert first.status_code == 201
        assert second.status_code == 400
        assert Review.query.count() == 1

    def test_concurrent_duplicate_is_rejected(self, client, listing, completed_order, customer_headers):
        """A duplicate that slips past the lookup still fails on the unique constraint"""
        first = client.post('/api/reviews', json={'listing_id': listing.id, 'rating': 4},
                            headers=customer_headers)
        assert first.status_code == 201

        with mock.patch.object(Review, 'query') as query:
            query.filter_by.return_value.first.return_value = None
            second = client.post('/api/reviews', json={'listing_id': listing.id, 'rating': 1},
                                 headers=customer_headers)

        assert second.status_code == 400
        assert json.loads(second.data)['message'] == 'You have already reviewed this listing'
        assert Review.query.count() == 1

    def test_only_customers_review(self, client, listing, homemaker_headers):
        response = client.post('/api/reviews', json={'listing_id': listing.id, 'rating': 5},
                               headers=homemaker_headers)
        assert response.status_code == 403

    def test_unknown_listing(self, client, customer_headers):
        response = client.post('/api/reviews', json={'listing_id': 999, 'rating': 5},
                               headers=customer_headers)
        assert response.status_code == 404

    def test_reviews_are_immutable(self, client, listing, completed_order, customer_headers):
        response = client.post('/api/reviews', json={'listing_id': listing.id, 'rating': 4},
                               headers=customer_headers)
        review_id = json.loads(response.data)['review']['id']

        assert client.patch(f'/api/reviews/{review_id}', json={'rating': 1},
                            headers=customer_headers).status_code in (404, 405)
        assert client.delete(f'/api/reviews/{review_id}', headers=customer_headers).status_code in (404, 405)


class TestReadReviews:
    """Public review reads"""

    def test_listing_reviews_with_average(self, client, listing, order_factory, user_factory, make_headers):
        for rating in (5, 4):
            author = user_factory('customer')
            order_factory(status='completed', customer_id=author.id)
            client.post('/api/reviews', json={'listing_id': listing.id, 'rating': rating},
                        headers=make_headers(author))

        response = client.get(f'/api/reviews/listing/{listing.id}')

        assert response.status_code == 200
        data = json.loads(response.data)
        assert len(data['reviews']) == 2
        assert data['average_rating'] == 4.5
        assert data['total_reviews'] == 2

    def test_empty_listing(self, client, listing):
        data = json.loads(client.get(f'/api/reviews/listing/{listing.id}').data)

        assert data['reviews'] == []
        assert data['average_rating'] is None
        assert data['total_reviews'] == 0

    def test_author_and_recipient_reads(self, client, homemaker, customer, listing, completed_order,
                                        customer_headers):
        client.post('/api/reviews', json={'listing_id': listing.id, 'rating': 3}, headers=customer_headers)

        by_author = json.loads(client.get(f'/api/reviews/author/{customer.id}').data)
        for_recipient = json.loads(client.get(f'/api/reviews/recipient/{homemaker.id}').data)

        assert len(by_author['reviews']) == 1
        assert len(for_recipient['reviews']) == 1
        assert for_recipient['average_rating'] == 3.0
