"""HTTP session with the REST API that owns servicios and usuarios."""

from typing import Any, Dict, Optional

import requests
from flask import Flask

from ..context import get_application_config, get_application_global
from .exceptions import RequestFailed

import logging

logger = logging.getLogger(__name__)


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason or ''
    if isinstance(payload, dict):
        return str(payload.get('message') or payload.get('error') or payload)
    return str(payload)


class ApiSession(object):
    """
    Preserves the HTTP session with the REST API for the request context.

    2xx responses carry the resource as their JSON body. Anything else is
    logged and raised as :class:`.RequestFailed`. There is no retry here; the
    caller decides what to roll back.
    """

    def __init__(self, base_url: str, token: Optional[str] = None,
                 timeout: float = 10) -> None:
        """Create a new HTTP session."""
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._session = requests.Session()
        if token:
            self._session.headers['Authorization'] = f'Bearer {token}'
        logger.debug('New ApiSession with base_url = %s', self.base_url)

    def request(self, method: str, path: str,
                data: Optional[Dict[str, Any]] = None) -> Any:
        """
        Make a request to the API.

        Parameters
        ----------
        method : str
            HTTP verb.
        path : str
            Path relative to the base URL, starting with ``/``.
        data : dict
            JSON body, if any.

        Returns
        -------
        object or None
            The decoded JSON body, or None if the body is empty.

        Raises
        ------
        :class:`.RequestFailed`
            If the API could not be reached or did not respond with 2xx.

        """
        url = f'{self.base_url}{path}'
        try:
            response = self._session.request(method, url, json=data,
                                             timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error('%s %s failed: %s', method, path, e)
            raise RequestFailed(f'Could not reach the API: {e}') from e

        if not response.ok:
            message = _error_message(response)
            logger.error('%s %s responded with status %i: %s',
                         method, path, response.status_code, message)
            raise RequestFailed(message, status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error('%s %s returned a body that is not JSON',
                         method, path)
            raise RequestFailed('Could not read the API response',
                                status_code=response.status_code) from e

    def get(self, path: str) -> Any:
        return self.request('GET', path)

    def post(self, path: str, data: Dict[str, Any]) -> Any:
        return self.request('POST', path, data)

    def patch(self, path: str, data: Dict[str, Any]) -> Any:
        return self.request('PATCH', path, data)

    def delete(self, path: str) -> Any:
        return self.request('DELETE', path)


def init_app(app: Flask) -> None:
    """Set required configuration defaults for the application."""
    app.config.setdefault('API_URL', 'http://localhost:3001')
    app.config.setdefault('API_TIMEOUT', 10)


def get_session(app: Optional[Flask] = None) -> ApiSession:
    """Create a new :class:`.ApiSession`, authorized as the current identity."""
    config = get_application_config(app)
    base_url = config.get('API_URL', 'http://localhost:3001')
    timeout = float(config.get('API_TIMEOUT', 10))
    token = None
    g = get_application_global()
    store = g.get('session_store') if g else None
    if store is not None and store.identity is not None:
        token = store.identity.token
    return ApiSession(base_url, token=token, timeout=timeout)


def current_session(app: Optional[Flask] = None) -> ApiSession:
    """Get the current :class:`.ApiSession` for this context."""
    g = get_application_global()
    if g:
        if 'api' not in g:
            g.api = get_session(app)
        return g.api    # type: ignore
    return get_session(app)
