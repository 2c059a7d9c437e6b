from __future__ import annotations

from functools import wraps
from typing import Callable

from flask import current_app, g, request

from ..auth.model import CurrentUser
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError


def _bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Access token is required")
    return token.strip()


def current_user() -> CurrentUser:
    return g.current_user


def token_required(view: Callable) -> Callable:
    """Decode the Bearer token into ``g.current_user``."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        tokens = current_app.extensions["hrms"].tokens
        g.current_user = tokens.decode(_bearer_token())
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role) -> Callable:
    allowed = frozenset(roles)

    def decorator(view: Callable) -> Callable:
        @wraps(view)
        @token_required
        def wrapper(*args, **kwargs):
            if g.current_user.role not in allowed:
                raise AuthorizationError("Access denied: insufficient permissions")
            return view(*args, **kwargs)

        return wrapper

    return decorator
