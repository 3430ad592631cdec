# apps/core/validators.py
"""
Input rules for registration, login and password changes.
"""

import re
from typing import List

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

SPECIAL_CHARACTERS = set('!@#$%^&*()_+-=[]{}|;:\'",.<>?/\\`~')

COMMON_PASSWORDS = frozenset({
    'password', 'password1', 'password123', '12345678', '123456789',
    'qwerty123', 'letmein1', 'welcome1', 'iloveyou', 'admin123',
    'passw0rd', 'p@ssw0rd', 'p@ssword1', 'password1!', 'laundry123',
})


def is_valid_email(email: str) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def password_policy_violations(password: str, min_length: int = 8) -> List[str]:
    """
    List every rule the password breaks.

    Args:
        password: Candidate password
        min_length: Minimum number of characters

    Returns:
        Human readable violations, empty when the password is acceptable
    """
    violations = []

    if len(password) < min_length:
        violations.append(f"Password must be at least {min_length} characters")

    if not any(c.isupper() for c in password):
        violations.append("Password must contain at least one uppercase letter")

    if not any(c.islower() for c in password):
        violations.append("Password must contain at least one lowercase letter")

    if not any(c.isdigit() for c in password):
        violations.append("Password must contain at least one digit")

    if not any(c in SPECIAL_CHARACTERS for c in password):
        violations.append("Password must contain at least one special character")

    if password.lower() in COMMON_PASSWORDS:
        violations.append("Password is too common")

    return violations
