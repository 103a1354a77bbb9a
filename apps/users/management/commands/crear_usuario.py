"""
Management command para dar de alta un usuario del sistema

Crea la cuenta en Firebase Auth y la fila correspondiente en users.
Si la fila no se puede insertar, la cuenta de Firebase se elimina.

Uso:
    python manage.py crear_usuario admin@henrys.mx "Ana López" --rol administrador --password 12345678
"""

from django.core.management.base import BaseCommand, CommandError
from django.db import DatabaseError
from firebase_admin import exceptions as firebase_exceptions

from apps.users.models import Usuario
from services.firebase_service import crear_cuenta, eliminar_cuenta


class Command(BaseCommand):
    help = 'Crea un usuario en Firebase Auth y en la tabla users'

    def add_arguments(self, parser):
        parser.add_argument('email')
        parser.add_argument('nombre')
        parser.add_argument(
            '--rol',
            choices=[rol for rol, _ in Usuario.ROLES],
            default=Usuario.ROL_MECANICO,
            help='Rol del usuario (default: mecanico)'
        )
        parser.add_argument('--password', required=True, help='Contraseña inicial (mínimo 6 caracteres)')
        parser.add_argument('--telefono', default=None)
        parser.add_argument('--sucursal', type=int, default=None, help='branch_id de la sucursal')

    def handle(self, *args, **options):
        email = options['email']
        nombre = options['nombre']

        if Usuario.objects.filter(email=email).exists():
            raise CommandError(f'Ya existe un usuario con email {email}')

        self.stdout.write(f'🔥 Creando cuenta en Firebase Auth para {email}...')
        try:
            uid = crear_cuenta(email, options['password'], nombre)
        except (firebase_exceptions.FirebaseError, ValueError) as e:
            raise CommandError(f'❌ Error creando cuenta en Firebase: {str(e)}')

        try:
            usuario = Usuario.objects.create(
                firebase_uid=uid,
                email=email,
                nombre=nombre,
                rol=options['rol'],
                telefono=options['telefono'],
                sucursal_id=options['sucursal'],
            )
        except DatabaseError as e:
            eliminar_cuenta(uid)
            raise CommandError(f'❌ Error guardando usuario (cuenta de Firebase eliminada): {str(e)}')

        self.stdout.write(self.style.SUCCESS(
            f'✅ Usuario creado: {usuario.user_id} {usuario.email} ({usuario.rol}) uid={uid}'
        ))
