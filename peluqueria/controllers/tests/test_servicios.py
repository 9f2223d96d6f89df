"""Tests for :mod:`peluqueria.controllers.servicios`."""

from unittest import TestCase, mock

from werkzeug.datastructures import MultiDict

from ... import status
from ...domain import Identity, Servicio
from ...services.exceptions import RequestFailed
from .. import servicios as controller

IDENTITY = Identity(id='u1', token='T', peluqueria_id='7')


def catalog():
    return [Servicio(id='1', nombre='Corte', descripcion='Corte clásico',
                     precio=15000, duracion_min=30, peluqueria_id=7),
            Servicio(id='2', nombre='Barba', descripcion='Perfilado de barba',
                     precio=8000, duracion_min=20, peluqueria_id=7)]


FORM = {'nombre': 'Tinte', 'descripcion': 'Color completo',
        'precio': '25000', 'duracion_min': '90'}


@mock.patch('peluqueria.controllers.servicios.servicios')
class TestServiciosController(TestCase):
    """List, search and optimistic mutations of the catalog."""

    def test_list(self, mock_api):
        """The whole catalog is shown."""
        mock_api.obtener_servicios.return_value = catalog()
        data, code, _ = controller.list_servicios()
        self.assertEqual(code, status.HTTP_200_OK)
        self.assertEqual([s.id for s in data['servicios']], ['1', '2'])

    def test_search(self, mock_api):
        """Search is case-insensitive on nombre and descripcion."""
        mock_api.obtener_servicios.return_value = catalog()
        data, _, _ = controller.list_servicios('BARBA')
        self.assertEqual([s.id for s in data['servicios']], ['2'])
        data, _, _ = controller.list_servicios('clásico')
        self.assertEqual([s.id for s in data['servicios']], ['1'])
        self.assertEqual(data['total'], 2)

    def test_list_failure(self, mock_api):
        """If the API cannot be read, an error is shown."""
        mock_api.obtener_servicios.side_effect = RequestFailed('caído', 503)
        data, code, _ = controller.list_servicios()
        self.assertEqual(code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(data['servicios'], [])
        self.assertEqual(data['error'], 'caído')

    @mock.patch('peluqueria.controllers.servicios.time.time',
                return_value=1700000000.123)
    def test_create(self, mock_time, mock_api):
        """The new servicio carries the peluquería of the identity."""
        mock_api.obtener_servicios.return_value = catalog()
        mock_api.crear_servicio.return_value = Servicio(
            id='3', nombre='Tinte', descripcion='Color completo',
            precio=25000, duracion_min=90, peluqueria_id=7
        )
        data, code, headers = controller.create_servicio(MultiDict(FORM),
                                                         IDENTITY)
        self.assertEqual(code, status.HTTP_303_SEE_OTHER)
        self.assertEqual(headers['Location'], '/servicios')
        mock_api.crear_servicio.assert_called_once_with({
            'nombre': 'Tinte', 'descripcion': 'Color completo',
            'precio': 25000.0, 'duracion_min': 90, 'peluqueria_id': 7
        })
        self.assertEqual(controller.temporary_id(), '1700000000123')

    def test_create_invalid(self, mock_api):
        """Invalid input is reported field by field, with no API call."""
        mock_api.obtener_servicios.return_value = catalog()
        form = MultiDict({'nombre': 'T', 'descripcion': 'Cor',
                          'precio': '0', 'duracion_min': '12.5'})
        data, code, _ = controller.create_servicio(form, IDENTITY)
        self.assertEqual(code, status.HTTP_400_BAD_REQUEST)
        errors = data['form'].errors
        for field in ('nombre', 'descripcion', 'precio', 'duracion_min'):
            self.assertIn(field, errors)
        mock_api.crear_servicio.assert_not_called()

    def test_create_rolls_back(self, mock_api):
        """A refused create leaves the last-known-good catalog."""
        mock_api.obtener_servicios.return_value = catalog()
        mock_api.crear_servicio.side_effect = RequestFailed('duplicado', 409)
        data, code, _ = controller.create_servicio(MultiDict(FORM), IDENTITY)
        self.assertEqual(code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(data['error'], 'duplicado')
        self.assertEqual([s.id for s in data['servicios']], ['1', '2'])

    def test_update(self, mock_api):
        """Updating patches the servicio without its id."""
        mock_api.obtener_servicios.return_value = catalog()
        _, code, _ = controller.update_servicio('1', MultiDict(FORM),
                                                IDENTITY)
        self.assertEqual(code, status.HTTP_303_SEE_OTHER)
        servicio_id, payload = mock_api.actualizar_servicio.call_args[0]
        self.assertEqual(servicio_id, '1')
        self.assertNotIn('id', payload)
        self.assertEqual(payload['nombre'], 'Tinte')

    def test_update_rolls_back(self, mock_api):
        """A refused update shows the servicio as it was."""
        mock_api.obtener_servicios.return_value = catalog()
        mock_api.actualizar_servicio.side_effect = RequestFailed('no', 400)
        data, code, _ = controller.update_servicio('1', MultiDict(FORM),
                                                   IDENTITY)
        self.assertEqual(code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(data['servicios'][0].nombre, 'Corte')
        self.assertEqual(data['editing'], '1')

    def test_delete(self, mock_api):
        """Deleting calls the API with the id."""
        mock_api.obtener_servicios.return_value = catalog()
        _, code, _ = controller.delete_servicio('2')
        self.assertEqual(code, status.HTTP_303_SEE_OTHER)
        mock_api.eliminar_servicio.assert_called_once_with('2')

    def test_delete_rolls_back(self, mock_api):
        """A refused delete keeps the servicio on screen."""
        mock_api.obtener_servicios.return_value = catalog()
        mock_api.eliminar_servicio.side_effect = RequestFailed('en uso', 409)
        data, code, _ = controller.delete_servicio('2')
        self.assertEqual(code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual([s.id for s in data['servicios']], ['1', '2'])


class TestPeluqueriaOf(TestCase):
    """The numeric peluquería id comes from the identity."""

    def test_values(self):
        self.assertEqual(controller.peluqueria_of(IDENTITY), 7)
        self.assertIsNone(controller.peluqueria_of(None))
        self.assertIsNone(controller.peluqueria_of(Identity(id='u1')))
        self.assertIsNone(
            controller.peluqueria_of(Identity(peluqueria_id='acme'))
        )
