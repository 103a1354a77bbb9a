"""Modelos de Clientes - Mapea tabla customers"""

from django.db import models
from apps.sucursales.models import Sucursal


class Cliente(models.Model):
    """
    Cliente / propietario de vehículos.

    El teléfono es único. Un cliente que tiene vehículos no se elimina.
    """

    customer_id = models.BigAutoField(primary_key=True)
    nombre = models.TextField()
    telefono = models.TextField(unique=True)
    whatsapp = models.TextField(blank=True, null=True)
    email = models.TextField(blank=True, null=True)
    direccion = models.TextField(blank=True, null=True)
    codigo_postal = models.TextField(blank=True, null=True)
    rfc = models.TextField(blank=True, null=True)
    notas = models.TextField(blank=True, null=True)
    branch = models.ForeignKey(Sucursal, on_delete=models.SET_NULL, null=True, blank=True,
                               related_name='clientes')
    fecha_registro = models.DateTimeField(auto_now_add=True)
    fecha_actualizacion = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'customers'
        ordering = ['nombre']

    def __str__(self):
        return f"{self.nombre} ({self.telefono})"
