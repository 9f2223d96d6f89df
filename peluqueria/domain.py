"""Defines the core data structures for the peluquería dashboard."""

from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict

ROLES: Tuple[str, ...] = ('cliente', 'barbero', 'admin')
"""Account roles known to the REST API."""

CLIENTE = 'cliente'


class Identity(BaseModel):
    """
    The currently authenticated user.

    Merged at login from the provider session, the ``perfil_usuarios`` row and
    the ``peluquerias`` row, so anything the profile row carries is kept as an
    extra field.
    """

    model_config = ConfigDict(extra='allow', coerce_numbers_to_str=True)

    id: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    token: Optional[str] = None
    role: Optional[str] = None
    rol: Optional[str] = None
    nombre: Optional[str] = None
    telefono: Optional[str] = None
    peluqueria: Optional[str] = None
    """Display name of the peluquería."""
    peluqueria_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Servicio(BaseModel):
    """An entry in the service catalog of a peluquería."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    nombre: str
    descripcion: str
    precio: float
    duracion_min: int
    peluqueria_id: Optional[int] = None

    def payload(self) -> Dict[str, Any]:
        """Body sent to the REST API, which assigns its own ids."""
        return self.model_dump(exclude={'id'})


class Usuario(BaseModel):
    """A staff or client account of a peluquería."""

    model_config = ConfigDict(extra='allow', coerce_numbers_to_str=True)

    id: Optional[str] = None
    nombre: Optional[str] = None
    email: Optional[str] = None
    telefono: Optional[str] = None
    rol: Optional[str] = CLIENTE
    password: Optional[str] = None
    peluqueria_id: Optional[str] = None
    created_at: Optional[datetime] = None

    def payload(self) -> Dict[str, Any]:
        """Body sent to the REST API; clients never carry a password."""
        data = self.model_dump(mode='json', exclude={'id', 'created_at'},
                               exclude_none=True)
        if self.rol == CLIENTE or not self.password:
            data.pop('password', None)
        return data
