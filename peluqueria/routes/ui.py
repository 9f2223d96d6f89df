"""Provides Flask integration for the dashboard user interface."""

from typing import Any, Callable
from functools import wraps

from flask import Blueprint, Response, current_app, g, make_response, \
    redirect, render_template, request

from .. import status
from ..auth import protected
from ..controllers import authentication, servicios, usuarios
from ..next_page import good_next_page

import logging

logger = logging.getLogger(__name__)
blueprint = Blueprint('ui', __name__, url_prefix='')


def anonymous_only(func: Callable) -> Callable:
    """Redirect logged-in users to where they were going."""
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if request.auth:
            next_page = good_next_page(request.args.get('next_page', ''))
            return make_response(redirect(next_page,
                                          code=status.HTTP_303_SEE_OTHER))
        return func(*args, **kwargs)
    return wrapper


def respond(template: str, data: dict, code: int, headers: dict) -> Response:
    """Render controller data, or follow its redirect."""
    if code == status.HTTP_303_SEE_OTHER:
        return make_response(redirect(headers['Location'], code=code))
    data.update({'identity': request.auth.identity})
    return make_response(render_template(template, **data), code, headers)


@blueprint.after_request
def apply_response_headers(response: Response) -> Response:
    """Prevent UI redress attacks."""
    response.headers['Content-Security-Policy'] = "frame-ancestors 'none'"
    response.headers['X-Frame-Options'] = 'DENY'
    return response


@blueprint.route('/login', methods=['GET', 'POST'])
@anonymous_only
def login() -> Response:
    """User can log in with e-mail and password."""
    default_next_page = current_app.config['DEFAULT_LOGIN_REDIRECT_URL']
    next_page = request.args.get('next_page', default_next_page)
    logger.debug('Request to log in, then redirect to %s', next_page)
    data, code, headers = authentication.login(request.method, request.form,
                                               g.session_store, next_page)
    data.update({'pagetitle': 'Iniciar sesión'})
    return respond('peluqueria/login.html', data, code, headers)


@blueprint.route('/logout', methods=['GET'])
def logout() -> Response:
    """Log out of the dashboard."""
    next_page = current_app.config['LOGOUT_REDIRECT_URL']
    logger.debug('Request to log out, then redirect to %s', next_page)
    data, code, headers = authentication.logout(g.session_store, next_page)
    return respond('peluqueria/login.html', data, code, headers)


@blueprint.route('/', methods=['GET'])
def home() -> Response:
    """Land on the servicios screen."""
    return redirect(current_app.config['DEFAULT_LOGIN_REDIRECT_URL'],
                    code=status.HTTP_302_FOUND)


@blueprint.route('/servicios', methods=['GET', 'POST'])
@protected
def servicios_list() -> Response:
    """Show the catalog, or add a servicio to it."""
    if request.method == 'POST':
        data, code, headers = servicios.create_servicio(request.form,
                                                        request.auth.identity)
    else:
        data, code, headers = \
            servicios.list_servicios(request.args.get('q', ''))
    data.update({'pagetitle': 'Servicios'})
    return respond('peluqueria/servicios.html', data, code, headers)


@blueprint.route('/servicios/<servicio_id>', methods=['POST'])
@protected
def servicio_update(servicio_id: str) -> Response:
    """Change a servicio."""
    data, code, headers = servicios.update_servicio(servicio_id, request.form,
                                                    request.auth.identity)
    data.update({'pagetitle': 'Servicios'})
    return respond('peluqueria/servicios.html', data, code, headers)


@blueprint.route('/servicios/<servicio_id>/delete', methods=['POST'])
@protected
def servicio_delete(servicio_id: str) -> Response:
    """Remove a servicio."""
    data, code, headers = servicios.delete_servicio(servicio_id)
    data.update({'pagetitle': 'Servicios'})
    return respond('peluqueria/servicios.html', data, code, headers)


@blueprint.route('/usuarios', methods=['GET', 'POST'])
@protected
def usuarios_list() -> Response:
    """Show the usuarios of the peluqueria, or add one."""
    identity = request.auth.identity
    if request.method == 'POST':
        data, code, headers = usuarios.create_usuario(request.form, identity)
    else:
        data, code, headers = usuarios.list_usuarios(
            identity, request.args.get('rol', usuarios.TODOS),
            request.args.get('q', '')
        )
    data.update({'pagetitle': 'Usuarios'})
    return respond('peluqueria/usuarios.html', data, code, headers)


@blueprint.route('/usuarios/<usuario_id>', methods=['POST'])
@protected
def usuario_update(usuario_id: str) -> Response:
    """Change a usuario."""
    data, code, headers = usuarios.update_usuario(usuario_id, request.form,
                                                  request.auth.identity)
    data.update({'pagetitle': 'Usuarios'})
    return respond('peluqueria/usuarios.html', data, code, headers)


@blueprint.route('/usuarios/<usuario_id>/delete', methods=['POST'])
@protected
def usuario_delete(usuario_id: str) -> Response:
    """Remove a usuario."""
    data, code, headers = usuarios.delete_usuario(usuario_id,
                                                  request.auth.identity)
    data.update({'pagetitle': 'Usuarios'})
    return respond('peluqueria/usuarios.html', data, code, headers)


@blueprint.route('/auth_status', methods=['GET'])
def auth_status() -> Response:
    """Get if the app is running."""
    return make_response("OK")
