"""Controllers for the usuarios screen."""

from typing import Any, Dict, List, Optional, Tuple

from werkzeug.datastructures import MultiDict

from .. import status
from ..domain import ROLES, Identity, Usuario
from ..optimistic import OptimisticList
from ..services import usuarios
from ..services.exceptions import RequestFailed
from .forms import UsuarioForm
from .servicios import temporary_id

import logging

logger = logging.getLogger(__name__)

ResponseData = Tuple[dict, int, dict]

LOCATION = '/usuarios'
TODOS = 'todos'
"""Tab that shows every role."""


def matches(usuario: Usuario, query: str) -> bool:
    """Match ``query`` on nombre or email (any case), or within telefono."""
    raw = query.strip()
    query = raw.lower()
    return not query or query in (usuario.nombre or '').lower() \
        or query in (usuario.email or '').lower() \
        or raw in (usuario.telefono or '')


def counts(items: List[Usuario]) -> Dict[str, int]:
    """Number of usuarios per role, plus the total under ``todos``."""
    result = {rol: 0 for rol in ROLES}
    for usuario in items:
        result[usuario.rol] = result.get(usuario.rol, 0) + 1
    result[TODOS] = len(items)
    return result


def _load(identity: Optional[Identity]) \
        -> Tuple[OptimisticList, Optional[str]]:
    if identity is None or not identity.peluqueria_id:
        return OptimisticList([]), 'No se encontró peluqueria del usuario'
    try:
        found = usuarios.obtener_usuarios(identity.peluqueria_id)
    except RequestFailed as e:
        return OptimisticList([]), e.message or 'Error al obtener usuarios'
    return OptimisticList(found), None


def _render(people: OptimisticList, rol: str = TODOS, query: str = '',
            **extra: Any) -> Dict[str, Any]:
    if rol != TODOS and rol not in ROLES:
        rol = TODOS
    items = people.items
    shown = [u for u in items
             if (rol == TODOS or u.rol == rol) and matches(u, query)]
    data: Dict[str, Any] = {'usuarios': shown, 'counts': counts(items),
                            'rol': rol, 'q': query, 'roles': ROLES,
                            'form': UsuarioForm()}
    data.update(extra)
    return data


def _from_form(usuario_id: str, form: UsuarioForm,
               identity: Optional[Identity]) -> Usuario:
    return Usuario(id=usuario_id, nombre=form.nombre.data,
                   email=form.email.data, telefono=form.telefono.data,
                   rol=form.rol.data, password=form.password.data or None,
                   peluqueria_id=identity.peluqueria_id if identity else None)


def _shown(usuario: Usuario) -> Usuario:
    return usuario.model_copy(update={'password': None})


def list_usuarios(identity: Optional[Identity], rol: str = TODOS,
                  query: str = '') -> ResponseData:
    """
    Show the usuarios of the peluquería of ``identity``.

    Parameters
    ----------
    identity : :class:`.Identity`
    rol : str
        ``todos``, or only show usuarios with this role.
    query : str
        Search on nombre, email or telefono.

    Returns
    -------
    dict
        Response data.
    int
        200, or 502 if the API could not be read.
    dict
        Headers to add to the response.

    """
    people, error = _load(identity)
    if error:
        return _render(people, rol, query, error=error), \
            status.HTTP_502_BAD_GATEWAY, {}
    return _render(people, rol, query), status.HTTP_200_OK, {}


def create_usuario(form_data: MultiDict,
                   identity: Optional[Identity]) -> ResponseData:
    """Add a usuario to the peluquería of ``identity``."""
    form = UsuarioForm(form_data)
    people, error = _load(identity)
    if not form.validate():
        logger.debug('Usuario form is not valid: %s', form.errors)
        return _render(people, form=form, error=error), \
            status.HTTP_400_BAD_REQUEST, {}

    usuario = _from_form(temporary_id(), form, identity)
    try:
        people.add(_shown(usuario),
                   lambda: usuarios.crear_usuario(usuario.payload()))
    except RequestFailed as e:
        return _render(people, form=form, error=e.message), \
            status.HTTP_400_BAD_REQUEST, {}
    return {}, status.HTTP_303_SEE_OTHER, {'Location': LOCATION}


def update_usuario(usuario_id: str, form_data: MultiDict,
                   identity: Optional[Identity]) -> ResponseData:
    """Change the usuario ``usuario_id``."""
    form = UsuarioForm(form_data)
    people, error = _load(identity)
    if not form.validate():
        logger.debug('Usuario form is not valid: %s', form.errors)
        return _render(people, form=form, editing=usuario_id,
                       error=error), status.HTTP_400_BAD_REQUEST, {}

    usuario = _from_form(usuario_id, form, identity)
    try:
        people.replace(_shown(usuario), lambda: usuarios.actualizar_usuario(
            usuario_id, usuario.payload()
        ))
    except RequestFailed as e:
        return _render(people, form=form, editing=usuario_id,
                       error=e.message), status.HTTP_400_BAD_REQUEST, {}
    return {}, status.HTTP_303_SEE_OTHER, {'Location': LOCATION}


def delete_usuario(usuario_id: str,
                   identity: Optional[Identity]) -> ResponseData:
    """Remove the usuario ``usuario_id``."""
    people, _ = _load(identity)
    try:
        people.remove(usuario_id,
                      lambda: usuarios.eliminar_usuario(usuario_id))
    except RequestFailed as e:
        return _render(people, error=e.message), \
            status.HTTP_400_BAD_REQUEST, {}
    return {}, status.HTTP_303_SEE_OTHER, {'Location': LOCATION}
