"""Provides tools for working with the authenticated session of a browser."""

from typing import Any, Optional
import os

from flask import Flask, Response, g, request
import fakeredis
import redis

from ..store import SessionStore
from ..store.persistence import CookieStorage, EncryptedStorage, \
    redis_storage
from ..store.ticks import NextTick
from .facade import AuthView
from .guard import GuardState, RouteGuard, protected

import logging

logger = logging.getLogger(__name__)


class Auth(object):
    """
    Attaches the session store, auth view and route guard to each request.

    Set env var or `Flask.config` `PELUQUERIA_AUTH_DEBUG` to True to turn the
    auth loggers to DEBUG.

    Intended for use in a Flask application factory, for example:

    .. code-block:: python

       from flask import Flask
       from peluqueria.auth import Auth
       from peluqueria.routes import ui


       def create_web_app() -> Flask:
          app = Flask('peluqueria')
          app.config.from_pyfile('config.py')
          Auth(app)
          app.register_blueprint(ui.blueprint)
          return app

    Within a request, ``request.auth`` is the :class:`.AuthView`,
    ``request.guard`` the :class:`.RouteGuard` and ``g.session_store`` the
    :class:`.SessionStore`.
    """

    def __init__(self, app: Optional[Flask] = None) -> None:
        self._redis: Optional[redis.StrictRedis] = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """
        Attach :meth:`.load_session` and :meth:`.save_session` to the app.

        Parameters
        ----------
        app : :class:`Flask`

        """
        self.app = app
        app.config['peluqueria.Auth'] = self
        app.config.setdefault('STORAGE_KEY', 'auth-storage')
        app.config.setdefault('STORAGE_MAX_AGE', 30 * 24 * 3600)
        app.config.setdefault('STORAGE_COOKIE_SECURE', False)
        app.config.setdefault('SESSION_BACKEND', 'cookie')
        app.config.setdefault('LOGIN_URL', '/login')
        app.config.setdefault('STORAGE_SECRET', "85eew2_'9*//")
        app.config.setdefault('BROWSER_COOKIE_NAME', 'peluqueria_browser')
        app.config.setdefault('JWT_SECRET', 'foosecret')
        app.before_request(self.load_session)
        app.after_request(self.save_session)

        if app.config.get('PELUQUERIA_AUTH_DEBUG') \
                or os.getenv('PELUQUERIA_AUTH_DEBUG'):
            self.auth_debug()
            logger.debug('PELUQUERIA_AUTH_DEBUG is set')

    def get_redis(self) -> redis.StrictRedis:
        """Connection used by the redis session backend."""
        if self._redis is None:
            config = self.app.config
            if config.get('REDIS_FAKE'):
                logger.debug('Using FakeRedis for session storage')
                self._redis = fakeredis.FakeStrictRedis()
            else:
                host = config.get('REDIS_HOST', 'localhost')
                port = int(config.get('REDIS_PORT', '6379'))
                db = int(config.get('REDIS_DATABASE', '0'))
                logger.debug('New Redis connection at %s, port %s', host, port)
                self._redis = redis.StrictRedis(host=host, port=port, db=db)
        return self._redis

    def _medium(self) -> Any:
        config = self.app.config
        max_age = int(config['STORAGE_MAX_AGE'])
        secure = bool(config['STORAGE_COOKIE_SECURE'])
        if config['SESSION_BACKEND'] == 'redis':
            return redis_storage(self.get_redis(), request.cookies,
                                 config['BROWSER_COOKIE_NAME'],
                                 config['JWT_SECRET'], max_age, secure=secure)
        return CookieStorage(request.cookies, max_age, secure=secure)

    def load_session(self) -> Optional[Response]:
        """
        Build the session store for this request and rehydrate it.

        The guard and view are subscribed before the deferred rehydration
        runs, so both observe the transition to ready.
        """
        config = self.app.config
        ticks = NextTick()
        medium = self._medium()
        storage = EncryptedStorage(medium, config['STORAGE_SECRET'])
        store = SessionStore(storage, ticks.call_soon,
                             key=config['STORAGE_KEY'])
        store.rehydrate()

        def navigate(url: str) -> None:
            g.navigation = url

        view = AuthView(store)
        guard = RouteGuard(view, navigate, config['LOGIN_URL'])
        g.ticks = ticks
        g.storage_medium = medium
        g.session_store = store
        request.auth = view
        request.guard = guard
        ticks.run_pending()
        return None

    def save_session(self, response: Response) -> Response:
        """Flush deferred writes, and hand them to the response."""
        ticks: Optional[NextTick] = g.get('ticks')
        if ticks is not None:
            ticks.run_pending()
        medium = g.get('storage_medium')
        if medium is not None:
            medium.commit(response)
        return response

    def auth_debug(self) -> None:
        """Sets the auth loggers to DEBUG."""
        for name in ('peluqueria.auth', 'peluqueria.store'):
            logging.getLogger(name).setLevel(logging.DEBUG)


def current_store() -> SessionStore:
    """The :class:`.SessionStore` of the current request."""
    store: SessionStore = g.session_store
    return store


__all__ = ('Auth', 'AuthView', 'RouteGuard', 'GuardState', 'protected',
           'current_store')
