"""
Authentication: user model, bearer-token validation and the current-user
dependency.
"""

from circle.auth.middleware import CurrentUser, get_current_user
from circle.auth.models import User

__all__ = ["CurrentUser", "User", "get_current_user"]
