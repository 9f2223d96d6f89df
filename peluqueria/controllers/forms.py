"""Provides forms for login, servicios and usuarios."""

from typing import Any

from wtforms import DecimalField, Form, IntegerField, PasswordField, \
    SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Email, InputRequired, Length, \
    ValidationError

from ..domain import CLIENTE, ROLES


class LoginForm(Form):
    """Log in form."""

    email = StringField('Email', validators=[DataRequired(), Email()])
    password = PasswordField('Contraseña',
                             validators=[DataRequired(), Length(min=6)])


def _positive(message: str) -> Any:
    def check(form: Form, field: Any) -> None:
        if field.data is not None and field.data <= 0:
            raise ValidationError(message)
    return check


class ServicioForm(Form):
    """Create or edit a servicio."""

    nombre = StringField('Nombre', validators=[
        DataRequired(), Length(
            min=2, message='El nombre debe tener al menos 2 caracteres.'
        )
    ])
    descripcion = TextAreaField('Descripción', validators=[
        DataRequired(), Length(
            min=5, message='La descripción debe tener al menos 5 caracteres.'
        )
    ])
    precio = DecimalField('Precio', validators=[
        InputRequired(message='El precio debe ser un número positivo.'),
        _positive('El precio debe ser un número positivo.')
    ])
    duracion_min = IntegerField('Duración (min)', validators=[
        InputRequired(
            message='La duración debe ser un número entero positivo.'
        ),
        _positive('La duración debe ser un número entero positivo.')
    ])


class UsuarioForm(Form):
    """
    Create or edit a usuario.

    A password is optional for clients, and required for barberos and
    admins. When given it must have at least 6 characters.
    """

    nombre = StringField('Nombre completo', validators=[
        DataRequired(), Length(
            min=2, message='El nombre debe tener al menos 2 caracteres.'
        )
    ])
    email = StringField('Email', validators=[
        DataRequired(), Email(message='Ingresa un email válido.')
    ])
    telefono = StringField('Teléfono', validators=[
        DataRequired(), Length(
            min=7, message='Ingresa un número de teléfono válido.'
        )
    ])
    password = PasswordField('Contraseña')
    rol = SelectField('Rol', choices=[(rol, rol.capitalize()) for rol in ROLES],
                      default=CLIENTE,
                      validate_choice=True)

    def validate_password(self, field: PasswordField) -> None:
        if not field.data:
            if self.rol.data != CLIENTE:
                raise ValidationError('La contraseña es obligatoria para '
                                      'barberos y administradores')
            return
        if len(field.data) < 6:
            raise ValidationError('La contraseña debe tener al menos 6 '
                                  'caracteres.')
