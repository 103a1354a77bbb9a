"""Tests del comando crear_usuario"""

from unittest import mock

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import DatabaseError

from apps.users.models import Usuario

pytestmark = pytest.mark.django_db

COMANDO = 'apps.users.management.commands.crear_usuario'


def test_crea_cuenta_y_usuario(sucursal):
    with mock.patch(f'{COMANDO}.crear_cuenta', return_value='uid-nuevo') as crear:
        call_command('crear_usuario', 'ana@henrys.mx', 'Ana López', '--rol', 'seguimiento',
                     '--password', 'secreto123', '--sucursal', str(sucursal.branch_id))

    crear.assert_called_once_with('ana@henrys.mx', 'secreto123', 'Ana López')
    usuario = Usuario.objects.get(firebase_uid='uid-nuevo')
    assert usuario.rol == 'seguimiento'
    assert usuario.sucursal_id == sucursal.branch_id


def test_email_repetido(usuario_admin):
    with mock.patch(f'{COMANDO}.crear_cuenta') as crear:
        with pytest.raises(CommandError):
            call_command('crear_usuario', usuario_admin.email, 'Otro', '--password', 'secreto123')

    crear.assert_not_called()


def test_falla_al_guardar_elimina_la_cuenta():
    with mock.patch(f'{COMANDO}.crear_cuenta', return_value='uid-huerfano'), \
            mock.patch(f'{COMANDO}.eliminar_cuenta') as eliminar, \
            mock.patch.object(Usuario.objects, 'create', side_effect=DatabaseError('sin conexión')):
        with pytest.raises(CommandError):
            call_command('crear_usuario', 'beto@henrys.mx', 'Beto', '--password', 'secreto123')

    eliminar.assert_called_once_with('uid-huerfano')
