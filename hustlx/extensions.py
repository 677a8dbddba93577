"""
Shared Flask extension instances.

Kept apart from the application factory so that route blueprints can import
them without a circular import.
"""

import os

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Use Redis for rate-limit storage when available (production), otherwise
# fall back to in-memory storage (single-process / development).
_storage_uri = os.environ.get('REDIS_URL') or 'memory://'

# Limiter is created without an app; init_app() is called in create_app().
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=_storage_uri,
    default_limits=[],
)
