"""Flask configuration."""
import secrets
import re
import os

#################### General config for app ####################
API_URL = os.environ.get('API_URL', 'http://localhost:3001')
"""Base URL of the REST API that owns servicios and usuarios."""

LOGIN_URL = os.environ.get('LOGIN_URL', '/login')
"""Where the route guard sends visitors without a session."""

LOGOUT_REDIRECT_URL = os.environ.get('LOGOUT_REDIRECT_URL', '/')
"""Landing path after a logout."""

DEFAULT_LOGIN_REDIRECT_URL = os.environ.get('DEFAULT_LOGIN_REDIRECT_URL',
                                            '/servicios')
"""URL to redirect the user to on a successful login, if they have not provided
a `next_page` query param."""

LOGIN_REDIRECT_REGEX = os.environ.get('LOGIN_REDIRECT_REGEX', r'^/(?![/\\]).*$')
"""Regex to check next_page of /login.

Only next_page values that match this regex will be allowed. All others go to
the DEFAULT_LOGIN_REDIRECT_URL. The default allows local paths only."""

login_redirect_pattern = re.compile(LOGIN_REDIRECT_REGEX)


#################### Auth provider ####################
AUTH_PROVIDER_URL = os.environ.get('AUTH_PROVIDER_URL',
                                   'http://localhost:54321')
"""Base URL of the hosted auth/database provider (Supabase compatible)."""

AUTH_PROVIDER_KEY = os.environ.get('AUTH_PROVIDER_KEY', '')
"""Public (anon) API key sent to the provider with every request."""

AUTH_PROVIDER_TIMEOUT = float(os.environ.get('AUTH_PROVIDER_TIMEOUT', '10'))


#################### Session persistence ####################
STORAGE_KEY = os.environ.get('STORAGE_KEY', 'auth-storage')
"""Fixed key under which the encrypted session envelope is kept."""

STORAGE_SECRET = os.environ.get('STORAGE_SECRET', "85eew2_'9*//")
"""Symmetric secret for the session envelope.

The default ships with the code, so it only keeps the envelope from being read
casually. Set it in the environment if the envelope must stay confidential."""

STORAGE_MAX_AGE = int(os.environ.get('STORAGE_MAX_AGE', str(30 * 24 * 3600)))
"""Lifetime in seconds of the persisted envelope."""

STORAGE_COOKIE_SECURE = bool(int(os.environ.get('STORAGE_COOKIE_SECURE', '0')))

SESSION_BACKEND = os.environ.get('SESSION_BACKEND', 'cookie')
"""Either ``cookie`` (envelope kept in the browser cookie jar) or ``redis``
(envelope kept in redis under a namespace named by a signed browser cookie)."""

BROWSER_COOKIE_NAME = os.environ.get('BROWSER_COOKIE_NAME', 'peluqueria_browser')

JWT_SECRET = os.environ.get('JWT_SECRET', secrets.token_urlsafe(16))
"""Signs the browser-id cookie used by the redis backend."""

REDIS_HOST = os.environ.get('REDIS_HOST', 'localhost')
REDIS_PORT = os.environ.get('REDIS_PORT', '6379')
REDIS_DATABASE = os.environ.get('REDIS_DATABASE', '0')

REDIS_FAKE = bool(int(os.environ.get('REDIS_FAKE', '0')))
"""Use the FakeRedis library instead of a redis service.

Useful for testing and dev."""


#################### Minor configs ##############################
SECRET_KEY = os.environ.get('SECRET_KEY', secrets.token_urlsafe(16))
"""Sets the `Flask` secret key. Not used by the session envelope."""

LOGLEVEL = int(os.environ.get('LOGLEVEL', '20'))

LOG_JSON = bool(int(os.environ.get('LOG_JSON', '0')))
"""Emit log records as JSON lines."""

VERSION = '0.1.0'
APP_VERSION = '0.1.0'
"""The application version."""
