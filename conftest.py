"""
Configuración de pytest y fixtures compartidas.

La verificación de tokens de Firebase se reemplaza por una que acepta
cualquier token y lo usa como uid: ``Authorization: Bearer <firebase_uid>``.
"""

from datetime import time
from unittest import mock

import pytest
from rest_framework.test import APIClient

from apps.clientes.models import Cliente
from apps.oportunidades.models import Oportunidad
from apps.sucursales.models import Sucursal
from apps.users.models import Usuario
from apps.vehiculos.models import Vehiculo


@pytest.fixture(autouse=True)
def firebase_verificacion():
    """El token es el uid; no se contacta a Firebase."""
    with mock.patch('apps.auth.middleware.verificar_token', side_effect=lambda token: {'uid': token}) as m:
        yield m


@pytest.fixture
def sucursal(db):
    return Sucursal.objects.create(nombre='Matriz', direccion='Av. Reforma 100')


def _crear_usuario(sucursal, rol, uid):
    return Usuario.objects.create(
        firebase_uid=uid,
        email=f'{uid}@henrys.mx',
        nombre=uid.replace('-', ' ').title(),
        rol=rol,
        sucursal=sucursal,
    )


@pytest.fixture
def usuario_admin(sucursal):
    return _crear_usuario(sucursal, Usuario.ROL_ADMINISTRADOR, 'uid-admin')


@pytest.fixture
def usuario_mecanico(sucursal):
    return _crear_usuario(sucursal, Usuario.ROL_MECANICO, 'uid-mecanico')


@pytest.fixture
def usuario_seguimiento(sucursal):
    return _crear_usuario(sucursal, Usuario.ROL_SEGUIMIENTO, 'uid-seguimiento')


@pytest.fixture
def cliente_api():
    """Fábrica de APIClient autenticados como el usuario dado."""
    def _cliente(usuario=None):
        client = APIClient()
        if usuario is not None:
            client.credentials(HTTP_AUTHORIZATION=f'Bearer {usuario.firebase_uid}')
        return client
    return _cliente


@pytest.fixture
def api_admin(cliente_api, usuario_admin):
    return cliente_api(usuario_admin)


@pytest.fixture
def api_mecanico(cliente_api, usuario_mecanico):
    return cliente_api(usuario_mecanico)


@pytest.fixture
def api_seguimiento(cliente_api, usuario_seguimiento):
    return cliente_api(usuario_seguimiento)


@pytest.fixture
def cliente(db):
    return Cliente.objects.create(nombre='Luis Pérez', telefono='5550001111', whatsapp='5550001111')


@pytest.fixture
def vehiculo(cliente):
    return Vehiculo.objects.create(
        vin='1HGCM82633A004352', marca='Toyota', modelo='Corolla', anio=2020,
        placa_actual='XYZ-987', customer=cliente, kilometraje_actual=45000,
    )


@pytest.fixture
def crear_cita(db):
    """Fábrica de citas (oportunidades con tiene_cita=True)."""
    def _crear(fecha, hora=time(10, 0), **extra):
        datos = {
            'tipo_oportunidad': 'cita_agendada',
            'titulo': 'Cita - Ruido en frenos',
            'estado': Oportunidad.ESTADO_AGENDADO,
            'tiene_cita': True,
            'cita_fecha': fecha,
            'cita_hora': hora,
            'cita_descripcion_breve': 'Ruido en frenos',
            'cita_telefono_contacto': '5559998888',
            'cita_nombre_contacto': 'María Gómez',
        }
        datos.update(extra)
        return Oportunidad.objects.create(**datos)
    return _crear
