"""
Controllers for logging in to and out of the dashboard.

Logging in exchanges e-mail and password for a provider session, then reads
the profile of the user and the peluquería it belongs to. The merged
:class:`.Identity` is handed to the :class:`.SessionStore` of the request,
which persists it through the encrypted storage once the request is done.
Logging out revokes the token at the provider and clears the store.
"""

from typing import Any, Dict, Optional, Tuple

from werkzeug.datastructures import MultiDict

from .. import status
from ..next_page import good_next_page
from ..services import auth_provider
from ..services.exceptions import AuthenticationFailed, MissingSession, \
    PeluqueriaNotFound, ProfileNotFound, SessionDeletionFailed, Unavailable
from ..store import SessionStore
from .forms import LoginForm

import logging

logger = logging.getLogger(__name__)

ResponseData = Tuple[dict, int, dict]

INVALID_DATA = 'Datos inválidos'
LOGIN_FAILED = 'Error al iniciar sesión'
NO_SESSION = 'No se pudo obtener la sesión del usuario'
NO_PROFILE = 'No se encontró el perfil del usuario'
NO_PELUQUERIA = 'No se encontró peluqueria del usuario'


def login(method: str, form_data: MultiDict, store: SessionStore,
          next_page: str) -> ResponseData:
    """
    Provide the login form, and log the user in.

    Parameters
    ----------
    method : str
        ``GET`` or ``POST``.
    form_data : MultiDict
        Should include `email` and `password` data.
    store : :class:`.SessionStore`
        Session store of the current request.
    next_page : str
        Page to which the user should be redirected upon login.

    Returns
    -------
    dict
        Additional data to add to the response.
    int
        Status code. This should be 303 (See Other) if all goes well.
    dict
        Headers to add to the response.

    """
    if method == 'GET':
        logger.debug('Request for login form')
        return {'form': LoginForm(), 'next_page': next_page}, \
            status.HTTP_200_OK, {}

    logger.debug('Login form submitted')
    form = LoginForm(form_data)
    data: Dict[str, Any] = {'form': form, 'next_page': next_page}
    if not form.validate():
        logger.debug('Form data is not valid')
        data.update({'error': INVALID_DATA})
        return data, status.HTTP_400_BAD_REQUEST, {}

    try:
        identity = auth_provider.authenticate(form.email.data,
                                              form.password.data)
    except (AuthenticationFailed, Unavailable) as e:
        logger.info('Authentication failed for %s: %s', form.email.data, e)
        data.update({'error': LOGIN_FAILED})
        return data, status.HTTP_400_BAD_REQUEST, {}
    except MissingSession as e:
        logger.error('Login without session for %s: %s', form.email.data, e)
        data.update({'error': NO_SESSION})
        return data, status.HTTP_400_BAD_REQUEST, {}
    except ProfileNotFound as e:
        logger.error('Login without profile for %s: %s', form.email.data, e)
        data.update({'error': NO_PROFILE})
        return data, status.HTTP_400_BAD_REQUEST, {}
    except PeluqueriaNotFound as e:
        logger.error('Login without peluqueria for %s: %s',
                     form.email.data, e)
        data.update({'error': NO_PELUQUERIA})
        return data, status.HTTP_400_BAD_REQUEST, {}

    store.set_identity(identity)
    logger.info('Logged in %s', identity.id)
    return data, status.HTTP_303_SEE_OTHER, \
        {'Location': good_next_page(next_page)}


def logout(store: SessionStore, next_page: str) -> ResponseData:
    """
    Log the user out, and redirect to the landing page.

    Revoking the token at the provider is best-effort; the local session is
    cleared either way.

    Parameters
    ----------
    store : :class:`.SessionStore`
    next_page : str
        Page to which the user should be redirected upon logout.

    Returns
    -------
    dict
        Additional data to add to the response.
    int
        Status code. This should be 303 (See Other).
    dict
        Headers to add to the response.

    """
    logger.debug('Request to log out')
    identity = store.identity
    token: Optional[str] = identity.token if identity is not None else None
    if token:
        try:
            auth_provider.sign_out(token)
        except (SessionDeletionFailed, Unavailable) as e:
            logger.debug('Logout failed at provider: %s', e)
    store.clear()
    return {}, status.HTTP_303_SEE_OTHER, {'Location': next_page}
