"""Identity provider for blog_notes.

The server runs for a single local user whose id comes from configuration.
Every record is owned by that id; the store trusts whatever id it is given.
"""

from dataclasses import dataclass
from typing import Optional

from blog_notes.config import get_config
from blog_notes.errors import ValidationError


@dataclass(frozen=True)
class CurrentUser:
    id: str


def get_current_user() -> Optional[CurrentUser]:
    """Return the configured user, or None when no identity is configured."""
    user_id = get_config().user_id
    if not user_id:
        return None
    return CurrentUser(id=user_id)


def require_user() -> CurrentUser:
    """Return the current user or fail.

    Raises:
        ValidationError: If no user identity is configured
    """
    user = get_current_user()
    if user is None:
        raise ValidationError("Missing credentials: no user is signed in (set BLOG_NOTES_USER_ID)")
    return user
