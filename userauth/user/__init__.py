"""
User System

Identity storage in the MongoDB `users` collection.
"""

from userauth.user.services.user_store import UserStore

__all__ = ["UserStore"]
