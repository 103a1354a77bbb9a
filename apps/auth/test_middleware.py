"""
Tests de autenticación con Firebase y permisos por rol.
"""

from unittest import mock

import pytest
from firebase_admin import auth as firebase_auth
from rest_framework.test import APIClient

from apps.mecanicos.models import Mecanico
from apps.sucursales.models import Sucursal

pytestmark = [pytest.mark.django_db, pytest.mark.integration]


class TestFirebaseAuthMiddleware:

    def test_token_invalido_responde_401(self, cliente_api, usuario_mecanico, firebase_verificacion):
        firebase_verificacion.side_effect = ValueError('token mal formado')

        response = cliente_api(usuario_mecanico).get('/api/appointments/today')

        assert response.status_code == 401
        assert response.json() == {'error': 'Token inválido'}

    def test_token_expirado_responde_401(self, cliente_api, usuario_mecanico, firebase_verificacion):
        firebase_verificacion.side_effect = firebase_auth.ExpiredIdTokenError('expirado', cause=None)

        response = cliente_api(usuario_mecanico).get('/api/appointments/today')

        assert response.status_code == 401
        assert response.json() == {'error': 'Token expirado'}

    def test_error_inesperado_responde_500(self, cliente_api, usuario_mecanico, firebase_verificacion):
        firebase_verificacion.side_effect = RuntimeError('sin red')

        response = cliente_api(usuario_mecanico).get('/api/appointments/today')

        assert response.status_code == 500

    def test_uid_sin_usuario_responde_401(self, db):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION='Bearer uid-desconocido')

        response = client.get('/api/appointments/today')

        assert response.status_code == 401
        assert response.json() == {'error': 'Usuario no encontrado en el sistema'}

    def test_usuario_inactivo_responde_401(self, cliente_api, usuario_mecanico):
        usuario_mecanico.activo = False
        usuario_mecanico.save()

        response = cliente_api(usuario_mecanico).get('/api/appointments/today')

        assert response.status_code == 401

    def test_sin_header_responde_401(self, cliente_api, db):
        response = cliente_api().get('/api/appointments/today')

        assert response.status_code == 401

    def test_me_regresa_usuario_actual(self, api_seguimiento, usuario_seguimiento, sucursal):
        response = api_seguimiento.get('/api/auth/me')

        assert response.status_code == 200
        assert response.data['user'] == {
            'uid': 'uid-seguimiento',
            'id': usuario_seguimiento.user_id,
            'email': usuario_seguimiento.email,
            'nombre': usuario_seguimiento.nombre,
            'rol': 'seguimiento',
            'sucursal_id': sucursal.branch_id,
        }


class TestVerifyToken:
    URL = '/api/auth/verify-token'

    def test_token_valido(self, cliente_api, usuario_admin):
        with mock.patch('apps.auth.views.verificar_token', return_value={'uid': 'uid-admin'}):
            response = cliente_api().post(self.URL, {'token': 'abc'})

        assert response.status_code == 200
        assert response.data['user']['rol'] == 'administrador'

    def test_sin_token_responde_400(self, cliente_api, db):
        response = cliente_api().post(self.URL, {})

        assert response.status_code == 400

    def test_token_invalido(self, cliente_api, db):
        with mock.patch('apps.auth.views.verificar_token',
                        side_effect=firebase_auth.InvalidIdTokenError('inválido')):
            response = cliente_api().post(self.URL, {'token': 'abc'})

        assert response.status_code == 401

    def test_usuario_no_registrado(self, cliente_api, db):
        with mock.patch('apps.auth.views.verificar_token', return_value={'uid': 'nadie'}):
            response = cliente_api().post(self.URL, {'token': 'abc'})

        assert response.status_code == 404


class TestPermisosPorRol:

    def test_usuarios_solo_administrador(self, api_admin, api_mecanico):
        assert api_admin.get('/api/users').status_code == 200
        assert api_mecanico.get('/api/users').status_code == 403

    def test_mecanicos_filtrados_por_sucursal(self, api_mecanico, api_admin, sucursal):
        otra = Sucursal.objects.create(nombre='Norte', direccion='Av. Norte 5')
        Mecanico.objects.create(branch=sucursal, numero_empleado='M-01', nombre='Juan', apellidos='López')
        Mecanico.objects.create(branch=otra, numero_empleado='M-02', nombre='Raúl', apellidos='Díaz')
        Mecanico.objects.create(branch=sucursal, numero_empleado='M-03', nombre='Beto', apellidos='Ruiz',
                                activo=False)

        propios = api_mecanico.get('/api/mechanics')
        todos = api_admin.get('/api/mechanics')

        assert [m['numero_empleado'] for m in propios.data] == ['M-01']
        assert sorted(m['numero_empleado'] for m in todos.data) == ['M-01', 'M-02']
