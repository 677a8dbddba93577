"""
Groq AI client for skill suggestions, assessments, mentor matching and
skill verification.

Groq exposes an OpenAI-compatible chat-completions endpoint; every call asks
for a JSON object back.

IMPORTANT: No public method of GroqClient ever raises. A missing API key,
a network failure, a non-2xx answer or a payload of the wrong shape is
logged and answered with a static fallback, so an AI outage never surfaces
to the end user as an error.
"""
import json
import logging

import requests
from flask import current_app

logger = logging.getLogger(__name__)


class GroqError(Exception):
    """Raised internally when a completion cannot be used"""


# ---------------------------------------------------------------------------
# Fallback payloads
# ---------------------------------------------------------------------------
FALLBACK_SKILL_SUGGESTIONS = [
    {
        'name': 'Gourmet Catering Service',
        'description': 'Launch a premium catering business for private events and corporate functions with your signature dishes.',
        'match_percentage': 98,
        'tags': ['Premium market', 'High profit margin'],
        'icon': 'ri-restaurant-line',
    },
    {
        'name': 'Creative Workshop Academy',
        'description': 'Run a branded series of crafting workshops, in person and as recorded courses.',
        'match_percentage': 92,
        'tags': ['Scalable business', 'Passive income potential'],
        'icon': 'ri-artboard-line',
    },
    {
        'name': 'Home Organization Consulting',
        'description': 'Offer space transformation consultations for clients who want functional, calm homes.',
        'match_percentage': 85,
        'tags': ['Affluent clientele', 'High-ticket service'],
        'icon': 'ri-layout-line',
    },
]

FALLBACK_BUSINESS_INSIGHTS = (
    'Position yourself in the premium segment of your market rather than competing on price. '
    'Build a recognisable brand, collect reviews early and offer tiered packages so new clients '
    'have an easy entry point.'
)

FALLBACK_BUSINESS_SUGGESTION = {
    'suggestion': 'Launch a signature collection of premium offerings with limited availability.',
    'potential_increase': '30-45%',
    'actions': [
        'Develop 3-5 signature offerings with distinctive packaging',
        'Price the signature collection at 2-3x your standard rates',
        'Announce the collection to past customers first',
    ],
}

FALLBACK_MENTOR_REASONS = (
    'Specializes in your primary skill area and has helped beginners grow their business.',
    'Has expertise in marketing and client acquisition that matches your goals.',
)

# category -> (level, score, feedback)
FALLBACK_VERIFICATION = {
    'cooking': (4, 88, 'Your techniques show a good understanding of flavour and presentation.'),
    'baking': (4, 88, 'Your techniques show a good understanding of flavour and presentation.'),
    'crafts': (3, 82, 'Your craftsmanship shows attention to detail; finishing could be more consistent.'),
    'handmade': (3, 82, 'Your craftsmanship shows attention to detail; finishing could be more consistent.'),
    'tutoring': (4, 90, 'Your explanations are clear and adapt well to different learners.'),
    'teaching': (4, 90, 'Your explanations are clear and adapt well to different learners.'),
}
DEFAULT_VERIFICATION = (3, 75, 'Your skill level appears competent with room to refine some techniques.')


def _clamp(value, low, high):
    return max(low, min(high, value))


def _as_list(value, name):
    if value is None:
        return []
    if not isinstance(value, list):
        raise GroqError(f'Malformed {name}')
    return value


def _normalize_suggestion(raw):
    """Accept camelCase or snake_case suggestion objects"""
    if not isinstance(raw, dict) or not raw.get('name') or not raw.get('description'):
        raise GroqError('Malformed skill suggestion')

    match = raw.get('match_percentage', raw.get('matchPercentage'))
    try:
        match = _clamp(int(match), 0, 100)
    except (TypeError, ValueError):
        raise GroqError('Malformed match percentage')

    tags = raw.get('tags') or []
    if not isinstance(tags, list):
        raise GroqError('Malformed tags')

    return {
        'name': str(raw['name']),
        'description': str(raw['description']),
        'match_percentage': match,
        'tags': [str(tag) for tag in tags],
        'icon': raw.get('icon'),
    }


class GroqClient:
    """Thin wrapper around the Groq chat-completions API"""

    def __init__(self, api_key, api_url, model, timeout=20, session=None):
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def enabled(self):
        return bool(self.api_key)

    def complete_json(self, prompt):
        """Send one user prompt and return the decoded JSON object reply"""
        if not self.enabled:
            raise GroqError('GROQ_API_KEY is not configured')

        try:
            response = self.session.post(
                self.api_url,
                headers={
                    'Authorization': f'Bearer {self.api_key}',
                    'Content-Type': 'application/json',
                },
                json={
                    'model': self.model,
                    'messages': [{'role': 'user', 'content': prompt}],
                    'response_format': {'type': 'json_object'},
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            content = response.json()['choices'][0]['message']['content']
        except requests.RequestException as e:
            raise GroqError(f'Groq request failed: {e}')
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise GroqError(f'Unexpected Groq response: {e}')

        if not content:
            raise GroqError('No content in Groq response')

        try:
            data = json.loads(content)
        except ValueError as e:
            raise GroqError(f'Groq returned invalid JSON: {e}')

        if not isinstance(data, dict):
            raise GroqError('Groq returned a non-object payload')
        return data

    # -- skill suggestions -------------------------------------------------

    def generate_skill_suggestions(self, profile):
        """
        Suggest marketable skills for a profile
        ({interests, experience, hobbies, personality_traits, demographics}).

        Returns:
            dict: {'skills': [{name, description, match_percentage, tags, icon}]}
        """
        prompt = (
            'Suggest 3 marketable skills a homemaker could monetize.\n'
            f'Profile: {json.dumps(profile)}\n'
            "Reply with a JSON object with a 'skills' array; each item has "
            "name, description, matchPercentage (80-98), tags (two strings) and icon "
            '(Remix Icon name, ri-xxx-line).'
        )
        try:
            data = self.complete_json(prompt)
            skills = [_normalize_suggestion(item) for item in _as_list(data.get('skills'), 'skills')]
            if not skills:
                raise GroqError('No skills in Groq response')
            return {'skills': skills}
        except GroqError as e:
            logger.warning('Error generating skill suggestions, using fallback: %s', e)
            return {'skills': [dict(item) for item in FALLBACK_SKILL_SUGGESTIONS]}

    def analyze_assessment(self, responses):
        """
        Analyze assessment answers.

        Returns:
            dict: {'suggested_skills': [...], 'business_insights': str}
        """
        prompt = (
            'Analyze these assessment responses from a homemaker looking to monetize their skills:\n'
            f'{json.dumps(responses)}\n'
            "Reply with a JSON object with a 'suggestedSkills' array (name, description, "
            "matchPercentage 80-98, tags, icon) and a 'businessInsights' string."
        )
        try:
            data = self.complete_json(prompt)
            raw_skills = _as_list(data.get('suggestedSkills', data.get('suggested_skills')), 'suggested skills')
            skills = [_normalize_suggestion(item) for item in raw_skills]
            insights = data.get('businessInsights', data.get('business_insights'))
            if not skills or not isinstance(insights, str):
                raise GroqError('Incomplete assessment analysis')
            return {'suggested_skills': skills, 'business_insights': insights}
        except GroqError as e:
            logger.warning('Error analyzing assessment responses, using fallback: %s', e)
            return {
                'suggested_skills': [dict(item) for item in FALLBACK_SKILL_SUGGESTIONS],
                'business_insights': FALLBACK_BUSINESS_INSIGHTS,
            }

    def generate_business_suggestions(self, info):
        """
        Growth advice for an existing business.

        Returns:
            dict: {'suggestion': str, 'potential_increase': str, 'actions': [str]}
        """
        prompt = (
            "Based on this information about a homemaker's business:\n"
            f'{json.dumps(info)}\n'
            'Suggest one way to increase revenue. Reply with a JSON object with '
            "'suggestion', 'potentialIncrease' (a percentage range) and 'actions' (2-3 strings)."
        )
        try:
            data = self.complete_json(prompt)
            actions = data.get('actions')
            result = {
                'suggestion': data.get('suggestion'),
                'potential_increase': data.get('potentialIncrease', data.get('potential_increase')),
                'actions': actions,
            }
            if not isinstance(result['suggestion'], str) or not isinstance(actions, list):
                raise GroqError('Incomplete business suggestion')
            result['potential_increase'] = str(result['potential_increase'] or '')
            result['actions'] = [str(action) for action in actions]
            return result
        except GroqError as e:
            logger.warning('Error generating business suggestions, using fallback: %s', e)
            return dict(FALLBACK_BUSINESS_SUGGESTION, actions=list(FALLBACK_BUSINESS_SUGGESTION['actions']))

    # -- mentors -----------------------------------------------------------

    def suggest_mentors(self, profile, mentors):
        """
        Pick the best mentors for a profile out of ``mentors``
        (dicts with id, name, specialty, bio).

        Returns:
            dict: {'mentors': [{id, match_percentage, match_reason}]}, only ids
            present in ``mentors``
        """
        known_ids = {mentor['id'] for mentor in mentors}
        prompt = (
            'Match a homemaker with the most suitable mentors.\n'
            f'User profile: {json.dumps(profile)}\n'
            f'Available mentors: {json.dumps(mentors)}\n'
            "Reply with a JSON object with a 'mentors' array of the top 2; each item has "
            'id, matchPercentage (70-95) and matchReason.'
        )
        try:
            if not mentors:
                return {'mentors': []}
            data = self.complete_json(prompt)
            matches = []
            for item in _as_list(data.get('mentors'), 'mentors'):
                if not isinstance(item, dict) or not isinstance(item.get('id'), int):
                    continue
                if item['id'] not in known_ids:
                    continue
                try:
                    match = _clamp(int(item.get('matchPercentage', item.get('match_percentage'))), 0, 100)
                except (TypeError, ValueError):
                    continue
                matches.append({
                    'id': item['id'],
                    'match_percentage': match,
                    'match_reason': str(item.get('matchReason', item.get('match_reason')) or ''),
                })
            if not matches:
                raise GroqError('No usable mentor matches')
            return {'mentors': matches}
        except GroqError as e:
            logger.warning('Error suggesting mentors, using fallback: %s', e)
            return {
                'mentors': [
                    {
                        'id': mentor['id'],
                        'match_percentage': 94 if index == 0 else 85,
                        'match_reason': FALLBACK_MENTOR_REASONS[index],
                    }
                    for index, mentor in enumerate(mentors[:2])
                ]
            }

    # -- skill verification ------------------------------------------------

    def verify_skill(self, skill, answers, media_count=0):
        """
        Assess a skill from the homemaker's answers and uploaded samples.

        Returns:
            dict: {'level': 1-5, 'score': 0-100, 'feedback': str}
        """
        prompt = (
            'Assess the skill level of a homemaker.\n'
            f'Skill category: {skill.category}\n'
            f'Skill name: {skill.name}\n'
            f'Media uploaded: {media_count} files\n'
            f'Assessment answers: {json.dumps(answers)}\n'
            "Reply with a JSON object with 'level' (integer 1-5), 'score' (integer 0-100) "
            "and 'feedback' (two or three sentences)."
        )
        try:
            data = self.complete_json(prompt)
            try:
                level = _clamp(int(data['level']), 1, 5)
                score = _clamp(int(data['score']), 0, 100)
            except (KeyError, TypeError, ValueError):
                raise GroqError('Malformed verification result')
            feedback = data.get('feedback')
            if not isinstance(feedback, str) or not feedback:
                raise GroqError('Verification result has no feedback')
            return {'level': level, 'score': score, 'feedback': feedback}
        except GroqError as e:
            logger.warning('Error verifying skill %s, using fallback: %s', skill.id, e)
            level, score, feedback = FALLBACK_VERIFICATION.get(
                (skill.category or '').lower(), DEFAULT_VERIFICATION
            )
            return {'level': level, 'score': score, 'feedback': feedback}


def get_groq_client():
    return current_app.extensions['groq']
