"""FastAPI dependencies for session authentication.

Dependencies:
  get_session_user  → return ``request.session["user"]`` or None
  require_login     → raise 401 unless a user is logged in
"""

from fastapi import Request

from app.middleware.exceptions import AuthenticationRequiredError


def get_session_user(request: Request) -> dict | None:
    return request.session.get("user")


async def require_login(request: Request) -> dict:
    """Gate a route (or a whole router) on a logged-in session.

    Returns the session user ``{"id": ..., "username": ...}``.
    """
    user = get_session_user(request)
    if not user:
        raise AuthenticationRequiredError()
    return user
