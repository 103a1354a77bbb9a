"""Modelos de Servicios - Mapea tabla services (órdenes de trabajo)"""

from django.db import models
from apps.clientes.models import Cliente
from apps.mecanicos.models import Mecanico
from apps.sucursales.models import Sucursal
from apps.users.models import Usuario
from apps.vehiculos.models import Vehiculo


class Servicio(models.Model):
    """
    Orden de trabajo. Siempre tiene vehículo y cliente.
    """

    ESTADO_COTIZADO = 'cotizado'
    ESTADO_AUTORIZADO = 'autorizado'
    ESTADOS = [
        (ESTADO_COTIZADO, 'Cotizado'),
        (ESTADO_AUTORIZADO, 'Autorizado'),
        ('en_proceso', 'En proceso'),
        ('completado', 'Completado'),
        ('cancelado', 'Cancelado'),
    ]

    service_id = models.BigAutoField(primary_key=True)
    vehicle = models.ForeignKey(Vehiculo, on_delete=models.PROTECT, related_name='servicios')
    customer = models.ForeignKey(Cliente, on_delete=models.PROTECT, related_name='servicios')
    # Campo legacy: mecánico como usuario del sistema
    usuario_mecanico = models.ForeignKey(Usuario, on_delete=models.SET_NULL, null=True, blank=True,
                                         db_column='usuario_mecanico', related_name='+')
    mechanic = models.ForeignKey(Mecanico, on_delete=models.SET_NULL, null=True, blank=True,
                                 related_name='servicios')
    branch = models.ForeignKey(Sucursal, on_delete=models.SET_NULL, null=True, blank=True,
                               related_name='servicios')
    fecha_servicio = models.DateField()
    tipo_servicio = models.TextField()
    descripcion = models.TextField(blank=True, default='')
    kilometraje_servicio = models.IntegerField(blank=True, null=True)
    precio = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    estado = models.TextField(choices=ESTADOS, default=ESTADO_COTIZADO)
    notas = models.TextField(blank=True, null=True)
    garantia_meses = models.IntegerField(default=0)
    fecha_creacion = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'services'
        ordering = ['-fecha_servicio', '-service_id']

    def __str__(self):
        return f"Servicio #{self.service_id} - {self.tipo_servicio} ({self.estado})"
