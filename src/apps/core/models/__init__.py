# apps/core/models/__init__.py
"""
Core models: accounts, roles and refresh-token sessions.
"""

from .user import Role, User, UserSession

__all__ = [
    'Role',
    'User',
    'UserSession',
]
