"""
Validation utilities
"""
import re

USERNAME_PATTERN = r'^[A-Za-z0-9_.-]{3,50}$'


def validate_email(email):
    """
    Validate email format

    Args:
        email (str): Email address to validate

    Returns:
        bool: True if valid, False otherwise
    """
    if not email:
        return False

    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))


def validate_username(username):
    """
    Validate username: 3-50 letters, digits, dots, dashes or underscores

    Args:
        username (str): Username to validate

    Returns:
        bool: True if valid, False otherwise
    """
    if not username:
        return False

    return bool(re.match(USERNAME_PATTERN, username))


def normalize_email(email):
    """Emails are compared case-insensitively"""
    return email.strip().lower()
