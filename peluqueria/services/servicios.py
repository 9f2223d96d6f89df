"""REST proxy for the ``/servicios`` resource."""

from typing import Any, Dict, List

from pydantic import ValidationError

from ..domain import Servicio
from .api import current_session
from .exceptions import RequestFailed

import logging

logger = logging.getLogger(__name__)


def crear_servicio(data: Dict[str, Any]) -> Servicio:
    """Create a servicio; ``data`` has no ``id``."""
    try:
        created = current_session().post('/servicios', data)
    except RequestFailed as e:
        logger.error('Error al crear servicio: %s', e.message)
        raise
    try:
        return Servicio.model_validate(created)
    except ValidationError as e:
        logger.error('Servicio creado con forma inesperada: %s', e)
        raise RequestFailed('Respuesta inválida al crear servicio') from e


def actualizar_servicio(servicio_id: str, data: Dict[str, Any]) -> Any:
    """Patch the servicio ``servicio_id`` with ``data``."""
    try:
        return current_session().patch(f'/servicios/{servicio_id}', data)
    except RequestFailed as e:
        logger.error('Error al actualizar servicio %s: %s',
                     servicio_id, e.message)
        raise


def eliminar_servicio(servicio_id: str) -> Any:
    """Delete the servicio ``servicio_id``."""
    try:
        return current_session().delete(f'/servicios/{servicio_id}')
    except RequestFailed as e:
        logger.error('Error al eliminar servicio %s: %s',
                     servicio_id, e.message)
        raise


def obtener_servicios() -> List[Servicio]:
    """List every servicio."""
    try:
        data = current_session().get('/servicios')
    except RequestFailed as e:
        logger.error('Error al obtener servicios: %s', e.message)
        raise
    try:
        return [Servicio.model_validate(item) for item in data or []]
    except ValidationError as e:
        logger.error('Servicios con forma inesperada: %s', e)
        raise RequestFailed('Respuesta inválida al obtener servicios') from e
