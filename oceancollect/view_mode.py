"""List / card display preference, remembered per list in a cookie."""
from flask import request

from oceancollect.config import config

VIEW_MODES = ('list', 'card')
DEFAULT_VIEW_MODE = 'card'
VIEW_KEYS = ('users-view', 'establishments-view', 'questions-view', 'templates-view')


def is_valid(key, mode) -> bool:
    return key in VIEW_KEYS and mode in VIEW_MODES


def resolve_view_mode(key: str):
    """
    Returns (mode, should_persist).

    A valid ?view= wins and must be stored; otherwise the cookie value, then the default.
    """
    requested = request.args.get('view')
    if requested in VIEW_MODES:
        return requested, True
    stored = request.cookies.get(key)
    if stored in VIEW_MODES:
        return stored, False
    return DEFAULT_VIEW_MODE, False


def persist_view_mode(response, key: str, mode: str):
    response.set_cookie(
        key,
        mode,
        max_age=config.VIEW_MODE_COOKIE_MAX_AGE,
        samesite='Lax',
        httponly=True,
    )
    return response
