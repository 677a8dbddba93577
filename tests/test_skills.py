"""
Skill tests for Hustlx
Tests skill CRUD and AI-backed verification (Groq is never reached in tests)
"""
import json

import pytest

from hustlx import db
from hustlx.models import Skill


@pytest.fixture
def skill(homemaker):
    skill = Skill(homemaker_id=homemaker.id, category='baking', name='Sourdough', level=2)
    db.session.add(skill)
    db.session.commit()
    return skill


class TestSkillCrud:

    def test_create(self, client, homemaker, homemaker_headers):
        response = client.post('/api/skills', json={
            'category': 'crafts',
            'name': 'Knitting',
            'level': 3,
            'is_verified': True,
        }, headers=homemaker_headers)

        assert response.status_code == 201
        data = json.loads(response.data)['skill']
        assert data['homemaker_id'] == homemaker.id
        assert data['is_verified'] is False
        assert data['verification_date'] is None

    def test_customer_cannot_create(self, client, customer_headers):
        response = client.post('/api/skills', json={'category': 'crafts', 'name': 'Knitting'},
                               headers=customer_headers)
        assert response.status_code == 403

    def test_level_bounds(self, client, homemaker_headers):
        response = client.post('/api/skills', json={'category': 'crafts', 'name': 'Knitting', 'level': 6},
                               headers=homemaker_headers)
        assert response.status_code == 400

    def test_public_reads(self, client, homemaker, skill):
        assert client.get(f'/api/skills/{skill.id}').status_code == 200

        response = client.get(f'/api/homemakers/{homemaker.id}/skills')
        assert [s['id'] for s in json.loads(response.data)['skills']] == [skill.id]

    def test_owner_updates(self, client, skill, homemaker_headers):
        response = client.patch(f'/api/skills/{skill.id}', json={'level': 4}, headers=homemaker_headers)

        assert response.status_code == 200
        assert json.loads(response.data)['skill']['level'] == 4

    def test_non_owner_cannot_update_or_delete(self, client, skill, user_factory, make_headers):
        headers = make_headers(user_factory('homemaker'))

        assert client.patch(f'/api/skills/{skill.id}', json={'level': 5}, headers=headers).status_code == 403
        assert client.delete(f'/api/skills/{skill.id}', headers=headers).status_code == 403

    def test_delete(self, client, skill, homemaker_headers):
        response = client.delete(f'/api/skills/{skill.id}', headers=homemaker_headers)

        assert response.status_code == 204
        assert client.get(f'/api/skills/{skill.id}').status_code == 404


class TestVerification:
    """POST /api/skills/verify"""

    def test_verify_uses_fallback_assessment(self, client, skill, homemaker_headers):
        response = client.post('/api/skills/verify', json={
            'skill_id': skill.id,
            'answers': {'experience': 'Ten years of weekend baking'},
        }, headers=homemaker_headers)

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['skill']['is_verified'] is True
        assert data['skill']['level'] == 4
        assert data['verification']['skill_level'] == 4
        assert data['verification']['score'] == 88
        assert data['verification']['feedback']
        assert data['skill']['verification_date'] is not None

    def test_verify_twice(self, client, skill, homemaker_headers):
        payload = {'skill_id': skill.id, 'answers': {'q': 'a'}}
        client.post('/api/skills/verify', json=payload, headers=homemaker_headers)
        response = client.post('/api/skills/verify', json=payload, headers=homemaker_headers)

        assert response.status_code == 409

    def test_verified_level_locked(self, client, skill, homemaker_headers):
        client.post('/api/skills/verify', json={'skill_id': skill.id, 'answers': {'q': 'a'}},
                    headers=homemaker_headers)

        response = client.patch(f'/api/skills/{skill.id}', json={'level': 5}, headers=homemaker_headers)
        assert response.status_code == 400

        response = client.patch(f'/api/skills/{skill.id}', json={'name': 'Rye bread'}, headers=homemaker_headers)
        assert response.status_code == 200

    def test_answers_required(self, client, skill, homemaker_headers):
        response = client.post('/api/skills/verify', json={'skill_id': skill.id, 'answers': {}},
                               headers=homemaker_headers)
        assert response.status_code == 400

    def test_only_owner_verifies(self, client, skill, user_factory, make_headers):
        response = client.post('/api/skills/verify', json={'skill_id': skill.id, 'answers': {'q': 'a'}},
                               headers=make_headers(user_factory('homemaker')))

        assert response.status_code == 403
        db.session.expire_all()
        assert db.session.get(Skill, skill.id).is_verified is False
