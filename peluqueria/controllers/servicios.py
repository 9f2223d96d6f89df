"""
Controllers for the servicios screen.

Every mutation goes through an :class:`.OptimisticList` built from the list
the API returned for this request, so a failed call leaves the screen showing
the last-known-good catalog with an inline error.
"""

from typing import Any, Dict, List, Optional, Tuple
import time

from werkzeug.datastructures import MultiDict

from .. import status
from ..domain import Identity, Servicio
from ..optimistic import OptimisticList
from ..services import servicios
from ..services.exceptions import RequestFailed
from .forms import ServicioForm

import logging

logger = logging.getLogger(__name__)

ResponseData = Tuple[dict, int, dict]

LOCATION = '/servicios'


def temporary_id() -> str:
    """Id shown for a servicio until the API assigns the real one."""
    return str(int(time.time() * 1000))


def peluqueria_of(identity: Optional[Identity]) -> Optional[int]:
    """The numeric peluquería id of ``identity``, if it has one."""
    if identity is None or identity.peluqueria_id is None:
        return None
    try:
        return int(identity.peluqueria_id)
    except ValueError:
        logger.error('Non numeric peluqueria_id: %s', identity.peluqueria_id)
        return None


def matches(servicio: Servicio, query: str) -> bool:
    """Case-insensitive match of ``query`` on nombre or descripcion."""
    query = query.strip().lower()
    return not query or query in servicio.nombre.lower() \
        or query in servicio.descripcion.lower()


def _load() -> Tuple[OptimisticList, Optional[str]]:
    try:
        return OptimisticList(servicios.obtener_servicios()), None
    except RequestFailed as e:
        return OptimisticList([]), e.message or 'Error al obtener servicios'


def _render(catalog: OptimisticList, query: str = '',
            **extra: Any) -> Dict[str, Any]:
    shown: List[Servicio] = catalog.filter(lambda s: matches(s, query))
    data: Dict[str, Any] = {'servicios': shown, 'total': len(catalog.items),
                            'q': query, 'form': ServicioForm()}
    data.update(extra)
    return data


def list_servicios(query: str = '') -> ResponseData:
    """
    Show the servicio catalog.

    Parameters
    ----------
    query : str
        Only servicios whose nombre or descripcion contains this are shown.

    Returns
    -------
    dict
        Response data.
    int
        200, or 502 if the API could not be read.
    dict
        Headers to add to the response.

    """
    catalog, error = _load()
    if error:
        return _render(catalog, query, error=error), \
            status.HTTP_502_BAD_GATEWAY, {}
    return _render(catalog, query), status.HTTP_200_OK, {}


def create_servicio(form_data: MultiDict,
                    identity: Optional[Identity]) -> ResponseData:
    """Add a servicio to the catalog of the peluquería of ``identity``."""
    form = ServicioForm(form_data)
    catalog, error = _load()
    if not form.validate():
        logger.debug('Servicio form is not valid: %s', form.errors)
        return _render(catalog, form=form, error=error), \
            status.HTTP_400_BAD_REQUEST, {}

    servicio = Servicio(id=temporary_id(), nombre=form.nombre.data,
                        descripcion=form.descripcion.data,
                        precio=float(form.precio.data),
                        duracion_min=form.duracion_min.data,
                        peluqueria_id=peluqueria_of(identity))
    try:
        catalog.add(servicio,
                    lambda: servicios.crear_servicio(servicio.payload()))
    except RequestFailed as e:
        return _render(catalog, form=form, error=e.message), \
            status.HTTP_400_BAD_REQUEST, {}
    return {}, status.HTTP_303_SEE_OTHER, {'Location': LOCATION}


def update_servicio(servicio_id: str, form_data: MultiDict,
                    identity: Optional[Identity]) -> ResponseData:
    """Change the servicio ``servicio_id``."""
    form = ServicioForm(form_data)
    catalog, error = _load()
    if not form.validate():
        logger.debug('Servicio form is not valid: %s', form.errors)
        return _render(catalog, form=form, editing=servicio_id,
                       error=error), status.HTTP_400_BAD_REQUEST, {}

    servicio = Servicio(id=servicio_id, nombre=form.nombre.data,
                        descripcion=form.descripcion.data,
                        precio=float(form.precio.data),
                        duracion_min=form.duracion_min.data,
                        peluqueria_id=peluqueria_of(identity))
    try:
        catalog.replace(servicio, lambda: servicios.actualizar_servicio(
            servicio_id, servicio.payload()
        ))
    except RequestFailed as e:
        return _render(catalog, form=form, editing=servicio_id,
                       error=e.message), status.HTTP_400_BAD_REQUEST, {}
    return {}, status.HTTP_303_SEE_OTHER, {'Location': LOCATION}


def delete_servicio(servicio_id: str) -> ResponseData:
    """Remove the servicio ``servicio_id`` from the catalog."""
    catalog, _ = _load()
    try:
        catalog.remove(servicio_id,
                       lambda: servicios.eliminar_servicio(servicio_id))
    except RequestFailed as e:
        return _render(catalog, error=e.message), \
            status.HTTP_400_BAD_REQUEST, {}
    return {}, status.HTTP_303_SEE_OTHER, {'Location': LOCATION}
