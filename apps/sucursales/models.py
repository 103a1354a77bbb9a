"""
Modelos de Sucursales

Mapea la tabla 'branches'. Las sucursales son datos de referencia:
el flujo de recepción las consulta pero no las modifica.
"""

from django.db import models


class Sucursal(models.Model):
    """
    Modelo que representa una sucursal del taller.

    Campos:
        branch_id: ID único de la sucursal
        created_at: Fecha de creación
        nombre: Nombre de la sucursal
        direccion: Dirección física
        descripcion: Descripción adicional
        activa: Si la sucursal está activa
    """

    branch_id = models.BigAutoField(primary_key=True)
    created_at = models.DateTimeField(auto_now_add=True)
    nombre = models.TextField()
    direccion = models.TextField(blank=True, null=True)
    descripcion = models.TextField(blank=True, null=True)
    activa = models.BooleanField(default=True)

    class Meta:
        db_table = 'branches'
        ordering = ['nombre']

    def __str__(self):
        return self.nombre
