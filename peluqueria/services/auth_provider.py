"""
Integration with the hosted authentication/database provider.

The provider speaks the Supabase HTTP dialect: password sign-in and sign-out
under ``/auth/v1``, and table reads under ``/rest/v1``. :func:`authenticate`
strings these together into the :class:`.Identity` kept by the session store.
"""

from typing import Any, Dict, Optional

import requests
from flask import Flask
from retry import retry

from ..context import get_application_config, get_application_global
from ..domain import Identity
from .exceptions import AuthenticationFailed, MissingSession, \
    PeluqueriaNotFound, ProfileNotFound, SessionDeletionFailed, Unavailable

import logging

logger = logging.getLogger(__name__)

SINGLE_OBJECT = 'application/vnd.pgrst.object+json'
PROFILE_TABLE = 'perfil_usuarios'
PELUQUERIA_TABLE = 'peluquerias'


def _reason(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.reason or str(response.status_code)
    if isinstance(data, dict):
        return str(data.get('error_description') or data.get('msg')
                   or data.get('message') or data.get('error') or data)
    return str(data)


class ProviderSession(object):
    """HTTP session with the auth provider."""

    def __init__(self, base_url: str, api_key: str,
                 timeout: float = 10) -> None:
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers['apikey'] = api_key
        logger.debug('New ProviderSession at %s', self.base_url)

    def _headers(self, access_token: Optional[str] = None,
                 **extra: str) -> Dict[str, str]:
        headers = {'Authorization': f'Bearer {access_token or self.api_key}'}
        headers.update(extra)
        return headers

    @retry(Unavailable, tries=3, delay=0.5, backoff=2)
    def sign_in_with_password(self, email: str, password: str) \
            -> Dict[str, Any]:
        """
        Exchange credentials for a session.

        Returns
        -------
        dict
            Provider session, with ``access_token`` and ``user``.

        Raises
        ------
        :class:`.AuthenticationFailed`
            The provider refused the credentials.
        :class:`.Unavailable`
            The provider could not be reached or failed.

        """
        url = f'{self.base_url}/auth/v1/token'
        try:
            response = self._session.post(
                url, params={'grant_type': 'password'},
                json={'email': email, 'password': password},
                headers=self._headers(), timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise Unavailable(f'Could not reach provider: {e}') from e
        if response.status_code >= 500:
            raise Unavailable(f'Provider failed: {response.status_code}')
        if not response.ok:
            raise AuthenticationFailed(_reason(response))
        try:
            session: Dict[str, Any] = response.json()
        except ValueError as e:
            raise Unavailable('Provider response is not JSON') from e
        return session

    def sign_out(self, access_token: str) -> None:
        """Revoke ``access_token`` at the provider."""
        url = f'{self.base_url}/auth/v1/logout'
        try:
            response = self._session.post(url,
                                          headers=self._headers(access_token),
                                          timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise SessionDeletionFailed(f'Could not reach provider: {e}') from e
        if not response.ok:
            raise SessionDeletionFailed(_reason(response))

    @retry(Unavailable, tries=3, delay=0.5, backoff=2)
    def fetch_row(self, table: str, row_id: Any,
                  access_token: Optional[str] = None) \
            -> Optional[Dict[str, Any]]:
        """Get the single row of ``table`` with ``id = row_id``, or None."""
        url = f'{self.base_url}/rest/v1/{table}'
        try:
            response = self._session.get(
                url, params={'id': f'eq.{row_id}', 'select': '*'},
                headers=self._headers(access_token, Accept=SINGLE_OBJECT),
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise Unavailable(f'Could not reach provider: {e}') from e
        if response.status_code >= 500:
            raise Unavailable(f'Provider failed: {response.status_code}')
        if not response.ok:
            logger.debug('No %s row for %s: %s', table, row_id,
                         _reason(response))
            return None
        try:
            row = response.json()
        except ValueError as e:
            raise Unavailable('Provider response is not JSON') from e
        return row if isinstance(row, dict) and row else None


def init_app(app: Flask) -> None:
    """Set required configuration defaults for the application."""
    app.config.setdefault('AUTH_PROVIDER_URL', 'http://localhost:54321')
    app.config.setdefault('AUTH_PROVIDER_KEY', '')
    app.config.setdefault('AUTH_PROVIDER_TIMEOUT', 10)


def get_session(app: Optional[Flask] = None) -> ProviderSession:
    """Create a new :class:`.ProviderSession`."""
    config = get_application_config(app)
    return ProviderSession(config.get('AUTH_PROVIDER_URL',
                                      'http://localhost:54321'),
                           config.get('AUTH_PROVIDER_KEY', ''),
                           float(config.get('AUTH_PROVIDER_TIMEOUT', 10)))


def current_session(app: Optional[Flask] = None) -> ProviderSession:
    """Get the current :class:`.ProviderSession` for this context."""
    g = get_application_global()
    if g:
        if 'provider' not in g:
            g.provider = get_session(app)
        return g.provider   # type: ignore
    return get_session(app)


def authenticate(email: str, password: str) -> Identity:
    """
    Sign in and build the :class:`.Identity` of the user.

    The identity merges the provider session (id, e-mail, access token), the
    whole ``perfil_usuarios`` row, and the display name of the peluquería the
    profile belongs to. Profile fields win over session fields.

    Raises
    ------
    :class:`.AuthenticationFailed`
    :class:`.Unavailable`
    :class:`.MissingSession`
        The provider answered without a user.
    :class:`.ProfileNotFound`
    :class:`.PeluqueriaNotFound`

    """
    provider = current_session()
    session = provider.sign_in_with_password(email, password)
    user = session.get('user')
    if not user or not user.get('id'):
        raise MissingSession('Provider returned no user')
    token = session.get('access_token')

    perfil = provider.fetch_row(PROFILE_TABLE, user['id'], token)
    if not perfil:
        raise ProfileNotFound(f'No profile for {user["id"]}')

    peluqueria = provider.fetch_row(PELUQUERIA_TABLE,
                                    perfil.get('peluqueria_id'), token)
    if not peluqueria:
        raise PeluqueriaNotFound(
            f'No peluqueria {perfil.get("peluqueria_id")} for {user["id"]}'
        )
    logger.debug('Authenticated %s for peluqueria %s', user['id'],
                 peluqueria.get('id'))

    return Identity.model_validate({
        'id': user['id'],
        'email': user.get('email'),
        'token': token,
        **perfil,
        'peluqueria': peluqueria.get('nombre'),
    })


def sign_out(access_token: str) -> None:
    """Revoke ``access_token`` at the provider."""
    current_session().sign_out(access_token)
