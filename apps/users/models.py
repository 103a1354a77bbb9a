"""Modelos de Usuarios - Mapea tabla users"""

from django.db import models
from apps.sucursales.models import Sucursal


class Usuario(models.Model):
    """Modelo que representa un usuario del sistema (principal autenticado)"""

    ROL_ADMINISTRADOR = 'administrador'
    ROL_MECANICO = 'mecanico'
    ROL_SEGUIMIENTO = 'seguimiento'
    ROLES = [
        (ROL_ADMINISTRADOR, 'Administrador'),
        (ROL_MECANICO, 'Mecánico'),
        (ROL_SEGUIMIENTO, 'Seguimiento'),
    ]

    user_id = models.BigAutoField(primary_key=True)
    created_at = models.DateTimeField(auto_now_add=True)
    firebase_uid = models.TextField(unique=True)
    email = models.TextField()
    nombre = models.TextField()
    rol = models.TextField(choices=ROLES)
    telefono = models.TextField(blank=True, null=True)
    sucursal = models.ForeignKey(Sucursal, on_delete=models.SET_NULL,
                                 null=True, blank=True, db_column='branch_id')
    activo = models.BooleanField(default=True)

    class Meta:
        db_table = 'users'
        ordering = ['nombre']

    def __str__(self):
        return f"{self.nombre} ({self.rol})"
