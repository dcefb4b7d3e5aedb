"""
Common dependencies for API endpoints.
"""

from fastapi import Query

from app.errors import InvalidInputError


async def get_current_user_id(user_id: str = Query(..., description="User ID")) -> str:
    """
    Extract user_id from query parameter.

    The frontend authenticates the session and passes the
    authenticated user_id directly to API calls.
    """
    if not user_id.strip():
        raise InvalidInputError("user_id is required")
    return user_id
