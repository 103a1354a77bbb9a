"""
Modelos de Oportunidades

Mapea las tablas 'opportunities' y 'opportunity_notes'.

Una oportunidad es un posible trabajo futuro para un vehículo. Cuando
``tiene_cita`` es verdadero representa una visita agendada (cita), que
puede llegar sin vehículo ni cliente (cita rápida) y termina convertida
en un servicio.
"""

from django.db import models
from apps.clientes.models import Cliente
from apps.servicios.models import Servicio
from apps.users.models import Usuario
from apps.vehiculos.models import Vehiculo


class Oportunidad(models.Model):
    """
    Oportunidad de venta / cita.

    ``converted_to_service`` pasa de nulo a un servicio una sola vez; al ser
    uno a uno la base de datos impide ligar el mismo servicio a dos citas.
    """

    ESTADO_PENDIENTE = 'pendiente'
    ESTADO_CONTACTADO = 'contactado'
    ESTADO_AGENDADO = 'agendado'
    ESTADO_EN_PROCESO = 'en_proceso'
    ESTADO_COMPLETADO = 'completado'
    ESTADO_PERDIDO = 'perdido'
    ESTADOS = [
        (ESTADO_PENDIENTE, 'Pendiente'),
        (ESTADO_CONTACTADO, 'Contactado'),
        (ESTADO_AGENDADO, 'Agendado'),
        (ESTADO_EN_PROCESO, 'En proceso'),
        (ESTADO_COMPLETADO, 'Completado'),
        (ESTADO_PERDIDO, 'Perdido'),
    ]

    PRIORIDADES = [
        ('alta', 'Alta'),
        ('media', 'Media'),
        ('baja', 'Baja'),
    ]

    ORIGENES = [
        ('manual', 'Manual'),
        ('automatico', 'Automático'),
        ('historial', 'Historial'),
        ('kilometraje', 'Kilometraje'),
    ]

    ORIGENES_CITA = [
        ('opportunity', 'Oportunidad'),
        ('llamada_cliente', 'Llamada del cliente'),
        ('walk_in', 'Walk-in'),
        ('seguimiento', 'Seguimiento'),
        ('manual', 'Manual'),
    ]

    opportunity_id = models.BigAutoField(primary_key=True)
    vehicle = models.ForeignKey(Vehiculo, on_delete=models.SET_NULL, null=True, blank=True,
                                related_name='oportunidades')
    customer = models.ForeignKey(Cliente, on_delete=models.SET_NULL, null=True, blank=True,
                                 related_name='oportunidades')
    usuario_creador = models.ForeignKey(Usuario, on_delete=models.SET_NULL, null=True, blank=True,
                                        db_column='usuario_creador', related_name='+')
    usuario_asignado = models.ForeignKey(Usuario, on_delete=models.SET_NULL, null=True, blank=True,
                                         db_column='usuario_asignado', related_name='+')
    tipo_oportunidad = models.TextField()
    titulo = models.TextField()
    descripcion = models.TextField(blank=True, null=True)
    servicio_sugerido = models.TextField(blank=True, null=True)
    precio_estimado = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True)
    fecha_sugerida = models.DateField(blank=True, null=True)
    fecha_contacto_sugerida = models.DateField(blank=True, null=True)
    estado = models.TextField(choices=ESTADOS, default=ESTADO_PENDIENTE)
    prioridad = models.TextField(choices=PRIORIDADES, default='media')
    origen = models.TextField(choices=ORIGENES, default='manual')
    origen_cita = models.TextField(choices=ORIGENES_CITA, blank=True, null=True)
    kilometraje_referencia = models.IntegerField(blank=True, null=True)

    # Datos de la cita
    tiene_cita = models.BooleanField(default=False)
    cita_fecha = models.DateField(blank=True, null=True)
    cita_hora = models.TimeField(blank=True, null=True)
    cita_descripcion_breve = models.TextField(blank=True, null=True)
    cita_telefono_contacto = models.TextField(blank=True, null=True)
    cita_nombre_contacto = models.TextField(blank=True, null=True)

    converted_to_service = models.OneToOneField(Servicio, on_delete=models.SET_NULL,
                                                null=True, blank=True,
                                                db_column='converted_to_service_id',
                                                related_name='cita_origen')

    fecha_creacion = models.DateTimeField(auto_now_add=True)
    fecha_actualizacion = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'opportunities'
        ordering = ['-fecha_creacion']
        indexes = [
            models.Index(fields=['tiene_cita', 'cita_fecha'], name='idx_opp_cita_fecha'),
            models.Index(fields=['fecha_contacto_sugerida'], name='idx_opp_fecha_contacto'),
        ]

    def __str__(self):
        return f"Oportunidad #{self.opportunity_id} - {self.titulo} ({self.estado})"


class NotaOportunidad(models.Model):
    """Seguimiento de una oportunidad. Solo se agregan, nunca se editan."""

    TIPOS_CONTACTO = [
        ('llamada', 'Llamada'),
        ('whatsapp', 'WhatsApp'),
        ('visita', 'Visita'),
        ('email', 'Email'),
        ('nota_interna', 'Nota interna'),
    ]

    RESULTADOS = [
        ('contactado', 'Contactado'),
        ('no_contesta', 'No contesta'),
        ('ocupado', 'Ocupado'),
        ('interesado', 'Interesado'),
        ('no_interesado', 'No interesado'),
        ('agendado', 'Agendado'),
    ]

    note_id = models.BigAutoField(primary_key=True)
    opportunity = models.ForeignKey(Oportunidad, on_delete=models.CASCADE, related_name='notas')
    usuario = models.ForeignKey(Usuario, on_delete=models.SET_NULL, null=True, blank=True,
                                related_name='+')
    tipo_contacto = models.TextField(choices=TIPOS_CONTACTO, blank=True, null=True)
    resultado = models.TextField(choices=RESULTADOS, blank=True, null=True)
    notas = models.TextField()
    seguimiento_requerido = models.BooleanField(default=False)
    fecha_seguimiento = models.DateField(blank=True, null=True)
    fecha_contacto = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'opportunity_notes'
        ordering = ['-fecha_contacto', '-note_id']

    def __str__(self):
        return f"Nota #{self.note_id} de oportunidad {self.opportunity_id}"
