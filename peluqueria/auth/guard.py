"""
Gating of protected screens on the authentication state.

:class:`RouteGuard` follows an :class:`.AuthView` through three states:

- ``PENDING``: the store is not ready yet. Render a placeholder and make no
  navigation decision.
- ``UNAUTHENTICATED``: ready, and no identity. Every transition into this
  state (from pending, or from authenticated after a logout) navigates to the
  login page exactly once.
- ``AUTHENTICATED``: ready, with an identity. Render the screen.

:func:`protected` applies the guard attached to the current Flask request by
:class:`peluqueria.auth.Auth`.
"""

from enum import Enum
from functools import wraps
from typing import Any, Callable
from urllib.parse import urlencode

from flask import g, make_response, redirect, render_template, request

from .. import status
from .facade import AuthView

import logging

logger = logging.getLogger(__name__)


class GuardState(Enum):
    PENDING = 'pending'
    UNAUTHENTICATED = 'unauthenticated'
    AUTHENTICATED = 'authenticated'


def _state_of(view: AuthView) -> GuardState:
    if view.loading:
        return GuardState.PENDING
    if view.identity is None:
        return GuardState.UNAUTHENTICATED
    return GuardState.AUTHENTICATED


class RouteGuard(object):
    """Navigates to the login page on each entry into unauthenticated."""

    def __init__(self, view: AuthView, navigate: Callable[[str], None],
                 login_url: str) -> None:
        self._navigate = navigate
        self.login_url = login_url
        self.state = GuardState.PENDING
        self._evaluate(view)
        view.subscribe(self._evaluate)

    def _evaluate(self, view: AuthView) -> None:
        new_state = _state_of(view)
        entering = new_state is GuardState.UNAUTHENTICATED \
            and self.state is not GuardState.UNAUTHENTICATED
        if new_state is not self.state:
            logger.debug('Guard %s -> %s', self.state.value, new_state.value)
        self.state = new_state
        if entering:
            self._navigate(self.login_url)


def protected(func: Callable) -> Callable:
    """Only render ``func`` for an authenticated visitor."""
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        guard: RouteGuard = request.guard
        if guard.state is GuardState.PENDING:
            logger.debug('Session not ready; rendering placeholder')
            return make_response(render_template('peluqueria/loading.html'),
                                 status.HTTP_200_OK)
        if guard.state is GuardState.UNAUTHENTICATED:
            target = g.get('navigation') or guard.login_url
            query = urlencode({'next_page': request.full_path.rstrip('?')})
            logger.debug('No session; redirecting to %s', target)
            return redirect(f'{target}?{query}', code=status.HTTP_303_SEE_OTHER)
        return func(*args, **kwargs)
    return wrapper
