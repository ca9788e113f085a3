from pydantic import BaseModel
from typing import Optional


def build_display_name(first_name: Optional[str], last_name: Optional[str]) -> str:
    """Join first and last name with a single space, a missing part becomes an empty string"""
    return f"{first_name or ''} {last_name or ''}"


class UserUpdate(BaseModel):
    """Columns a user.updated event overwrites"""

    name: str
    image_url: Optional[str] = None


class UserRecord(UserUpdate):
    """A row of the users table, keyed by the Clerk user id"""

    clerk_id: str
