"""
Modelos de Vehículos

Mapea las tablas 'vehicles' y 'vehicle_plate_history'.
El VIN es la llave de negocio; la placa puede cambiar a lo largo de la vida
del vehículo y cada cambio queda registrado en el historial.
"""

from django.db import models
from django.db.models import Q
from apps.clientes.models import Cliente
from apps.users.models import Usuario


class VehiculoQuerySet(models.QuerySet):

    def activos(self):
        return self.filter(activo=True)

    def placa_en_uso(self, placa, excluir_id=None):
        """True si otro vehículo activo ya tiene esa placa."""
        qs = self.activos().filter(placa_actual=placa)
        if excluir_id is not None:
            qs = qs.exclude(pk=excluir_id)
        return qs.exists()


class Vehiculo(models.Model):
    """
    Vehículo atendido en el taller.

    Campos:
        vehicle_id: ID único
        vin: Número de identificación vehicular (puede faltar en altas rápidas)
        placa_actual: Única entre vehículos activos
        customer: Propietario (opcional)
        activo: Baja lógica
    """

    COMBUSTIBLES = [
        ('gasolina', 'Gasolina'),
        ('diesel', 'Diésel'),
        ('hibrido', 'Híbrido'),
        ('electrico', 'Eléctrico'),
    ]
    TRANSMISIONES = [
        ('manual', 'Manual'),
        ('automatica', 'Automática'),
    ]

    vehicle_id = models.BigAutoField(primary_key=True)
    vin = models.TextField(unique=True, null=True, blank=True)
    marca = models.TextField()
    modelo = models.TextField()
    anio = models.IntegerField(db_column='año')
    placa_actual = models.TextField(blank=True, null=True)
    customer = models.ForeignKey(Cliente, on_delete=models.PROTECT, null=True, blank=True,
                                 related_name='vehiculos')
    kilometraje_actual = models.IntegerField(default=0)
    color = models.TextField(blank=True, null=True)
    numero_motor = models.TextField(blank=True, null=True)
    tipo_combustible = models.TextField(choices=COMBUSTIBLES, default='gasolina')
    transmision = models.TextField(choices=TRANSMISIONES, default='manual')
    notas = models.TextField(blank=True, null=True)
    activo = models.BooleanField(default=True)
    fecha_registro = models.DateTimeField(auto_now_add=True)
    fecha_actualizacion = models.DateTimeField(auto_now=True)

    objects = VehiculoQuerySet.as_manager()

    class Meta:
        db_table = 'vehicles'
        ordering = ['-fecha_registro']
        constraints = [
            models.UniqueConstraint(
                fields=['placa_actual'],
                condition=Q(activo=True),
                name='uq_vehiculo_placa_activa',
            ),
        ]

    def __str__(self):
        return f"{self.marca} {self.modelo} {self.anio} ({self.placa_actual or self.vin})"


class HistorialPlaca(models.Model):
    """Registro append-only de placas anteriores de un vehículo"""

    history_id = models.BigAutoField(primary_key=True)
    vehicle = models.ForeignKey(Vehiculo, on_delete=models.CASCADE, related_name='historial_placas')
    placa_anterior = models.TextField()
    fecha_cambio = models.DateTimeField(auto_now_add=True)
    motivo_cambio = models.TextField(default='actualizacion')
    notas = models.TextField(blank=True, null=True)
    creado_por = models.ForeignKey(Usuario, on_delete=models.SET_NULL, null=True, blank=True,
                                   db_column='creado_por')

    class Meta:
        db_table = 'vehicle_plate_history'
        ordering = ['-fecha_cambio', '-history_id']
