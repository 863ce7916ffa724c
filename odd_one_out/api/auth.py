"""User identity decorator and helper.

The auth front in front of this service resolves the caller and passes
their stable user id in the ``X-User-Id`` header.
"""
from functools import wraps
from typing import Callable, Any
from flask import request, g
from ..errors import NotAuthenticatedError

USER_ID_HEADER = "X-User-Id"


def current_user_id() -> str | None:
    """Return the caller's user id, or None if the request carries none."""
    user_id = (request.headers.get(USER_ID_HEADER) or "").strip()
    return user_id or None


def require_user(f: Callable) -> Callable:
    """Decorator that reads the caller's user id and populates g.user_id.

    Raises:
        NotAuthenticatedError: If the header is missing or blank.
    """

    @wraps(f)
    def decorated(*args: Any, **kwargs: Any) -> Any:
        user_id = current_user_id()
        if user_id is None:
            raise NotAuthenticatedError()
        g.user_id = user_id
        return f(*args, **kwargs)

    return decorated
