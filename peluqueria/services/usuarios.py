"""REST proxy for the ``/usuarios`` resource."""

from typing import Any, Dict, List

from pydantic import ValidationError

from ..domain import Usuario
from .api import current_session
from .exceptions import RequestFailed

import logging

logger = logging.getLogger(__name__)


def crear_usuario(data: Dict[str, Any]) -> Usuario:
    """Create a usuario; ``data`` has no ``id``."""
    try:
        created = current_session().post('/usuarios', data)
    except RequestFailed as e:
        logger.error('Error al crear usuario: %s', e.message)
        raise
    try:
        return Usuario.model_validate(created)
    except ValidationError as e:
        logger.error('Usuario creado con forma inesperada: %s', e)
        raise RequestFailed('Respuesta inválida al crear usuario') from e


def actualizar_usuario(usuario_id: str, data: Dict[str, Any]) -> Any:
    """Patch the usuario ``usuario_id`` with ``data``."""
    try:
        return current_session().patch(f'/usuarios/{usuario_id}', data)
    except RequestFailed as e:
        logger.error('Error al actualizar usuario %s: %s',
                     usuario_id, e.message)
        raise


def eliminar_usuario(usuario_id: str) -> Any:
    """Delete the usuario ``usuario_id``."""
    try:
        return current_session().delete(f'/usuarios/{usuario_id}')
    except RequestFailed as e:
        logger.error('Error al eliminar usuario %s: %s', usuario_id, e.message)
        raise


def obtener_usuarios(peluqueria_id: str) -> List[Usuario]:
    """List the usuarios of one peluquería."""
    try:
        data = current_session().get(f'/usuarios/peluqueria/{peluqueria_id}')
    except RequestFailed as e:
        logger.error('Error al obtener usuarios de %s: %s',
                     peluqueria_id, e.message)
        raise
    try:
        return [Usuario.model_validate(item) for item in data or []]
    except ValidationError as e:
        logger.error('Usuarios de %s con forma inesperada: %s',
                     peluqueria_id, e)
        raise RequestFailed('Respuesta inválida al obtener usuarios') from e
