"""Request controllers for the peluqueria dashboard."""

from . import authentication, servicios, usuarios
