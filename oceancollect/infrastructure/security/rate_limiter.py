"""
Request throttling for the back-office.

Blueprints import `limiter` and `login_limit` from here; the Flask app is
bound later through `init_limiter`. Clients are keyed on `remote_addr`,
which ProxyFix (app.py) sets from the hop appended by the load balancer.
"""

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from oceancollect.config import config


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[config.RATELIMIT_DEFAULT],
    storage_uri=config.RATELIMIT_STORAGE_URI,
    strategy="fixed-window",
)


def init_limiter(app):
    app.config.setdefault('RATELIMIT_ENABLED', config.RATELIMIT_ENABLED)
    limiter.init_app(app)


def login_limit():
    """Throttle sign-in attempts per client IP."""
    return limiter.limit(
        config.RATELIMIT_LOGIN,
        error_message="Trop de tentatives de connexion. Patientez une minute.",
    )
