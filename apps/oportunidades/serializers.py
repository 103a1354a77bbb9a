"""
Serializers de Oportunidades

Los serializers de entrada validan el payload completo antes de cualquier
escritura; los de salida agregan los datos de cliente, vehículo y usuarios
que el frontend muestra junto a cada oportunidad.
"""

from rest_framework import serializers
from .models import Oportunidad, NotaOportunidad


class NotaOportunidadSerializer(serializers.ModelSerializer):
    opportunity_id = serializers.IntegerField(read_only=True)
    usuario_id = serializers.IntegerField(read_only=True)
    usuario_nombre = serializers.CharField(source='usuario.nombre', read_only=True, allow_null=True)

    class Meta:
        model = NotaOportunidad
        fields = ['note_id', 'opportunity_id', 'usuario_id', 'usuario_nombre', 'tipo_contacto',
                  'resultado', 'notas', 'seguimiento_requerido', 'fecha_seguimiento',
                  'fecha_contacto']
        read_only_fields = fields


class OportunidadSerializer(serializers.ModelSerializer):
    """Oportunidad con los datos relacionados para mostrar"""

    vehicle_id = serializers.IntegerField(read_only=True)
    customer_id = serializers.IntegerField(read_only=True)
    usuario_creador = serializers.IntegerField(source='usuario_creador_id', read_only=True)
    usuario_asignado = serializers.IntegerField(source='usuario_asignado_id', read_only=True)
    converted_to_service_id = serializers.IntegerField(read_only=True)

    customer_nombre = serializers.CharField(source='customer.nombre', read_only=True, allow_null=True)
    customer_telefono = serializers.CharField(source='customer.telefono', read_only=True, allow_null=True)
    customer_whatsapp = serializers.CharField(source='customer.whatsapp', read_only=True, allow_null=True)
    vehicle_vin = serializers.CharField(source='vehicle.vin', read_only=True, allow_null=True)
    vehicle_marca = serializers.CharField(source='vehicle.marca', read_only=True, allow_null=True)
    vehicle_modelo = serializers.CharField(source='vehicle.modelo', read_only=True, allow_null=True)
    vehicle_año = serializers.IntegerField(source='vehicle.anio', read_only=True, allow_null=True)
    vehicle_placa = serializers.CharField(source='vehicle.placa_actual', read_only=True, allow_null=True)
    usuario_creador_nombre = serializers.CharField(source='usuario_creador.nombre', read_only=True,
                                                   allow_null=True)
    usuario_asignado_nombre = serializers.CharField(source='usuario_asignado.nombre', read_only=True,
                                                    allow_null=True)

    class Meta:
        model = Oportunidad
        fields = [
            'opportunity_id', 'vehicle_id', 'customer_id', 'usuario_creador', 'usuario_asignado',
            'tipo_oportunidad', 'titulo', 'descripcion', 'servicio_sugerido', 'precio_estimado',
            'fecha_sugerida', 'fecha_contacto_sugerida', 'estado', 'prioridad', 'origen',
            'origen_cita', 'kilometraje_referencia', 'tiene_cita', 'cita_fecha', 'cita_hora',
            'cita_descripcion_breve', 'cita_telefono_contacto', 'cita_nombre_contacto',
            'converted_to_service_id', 'fecha_creacion', 'fecha_actualizacion',
            'customer_nombre', 'customer_telefono', 'customer_whatsapp', 'vehicle_vin',
            'vehicle_marca', 'vehicle_modelo', 'vehicle_año', 'vehicle_placa',
            'usuario_creador_nombre', 'usuario_asignado_nombre',
        ]
        read_only_fields = fields


class OportunidadDetalleSerializer(OportunidadSerializer):
    """Detalle con notas de seguimiento (más recientes primero)"""

    notes = NotaOportunidadSerializer(source='notas', many=True, read_only=True)
    customer_email = serializers.CharField(source='customer.email', read_only=True, allow_null=True)
    vehicle_kilometraje = serializers.IntegerField(source='vehicle.kilometraje_actual', read_only=True,
                                                   allow_null=True)

    class Meta(OportunidadSerializer.Meta):
        fields = OportunidadSerializer.Meta.fields + ['customer_email', 'vehicle_kilometraje', 'notes']
        read_only_fields = fields


# ---------------------------------------------------------------------------
# Entrada
# ---------------------------------------------------------------------------

class OportunidadCrearSerializer(serializers.Serializer):
    vin = serializers.CharField()
    customer_id = serializers.IntegerField(min_value=1)
    usuario_asignado = serializers.IntegerField(min_value=1, required=False, allow_null=True,
                                                source='usuario_asignado_id')
    tipo_oportunidad = serializers.CharField()
    titulo = serializers.CharField(required=False, allow_blank=True)
    descripcion = serializers.CharField()
    servicio_sugerido = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    precio_estimado = serializers.DecimalField(max_digits=12, decimal_places=2, required=False,
                                               allow_null=True)
    fecha_sugerida = serializers.DateField(required=False, allow_null=True)
    prioridad = serializers.ChoiceField(choices=Oportunidad.PRIORIDADES, default='media')
    kilometraje_referencia = serializers.IntegerField(min_value=0, required=False, allow_null=True)

    def validate_precio_estimado(self, value):
        if value is not None and value <= 0:
            raise serializers.ValidationError('Precio debe ser positivo')
        return value


class OportunidadActualizarSerializer(OportunidadCrearSerializer):
    """Actualización parcial: se usa con partial=True"""

    vin = None
    estado = serializers.ChoiceField(choices=Oportunidad.ESTADOS, required=False)


class NotaCrearSerializer(serializers.Serializer):
    tipo_contacto = serializers.ChoiceField(choices=NotaOportunidad.TIPOS_CONTACTO, required=False,
                                            allow_null=True)
    resultado = serializers.ChoiceField(choices=NotaOportunidad.RESULTADOS, required=False,
                                        allow_null=True)
    notas = serializers.CharField()
    seguimiento_requerido = serializers.BooleanField(default=False)
    fecha_seguimiento = serializers.DateField(required=False, allow_null=True)


class BusquedaSerializer(serializers.Serializer):
    """Parámetros de GET /api/opportunities/search (recibe query_params.dict())"""

    vin = serializers.CharField(required=False)
    customer_id = serializers.IntegerField(required=False)
    estado = serializers.CharField(required=False)
    fecha_desde = serializers.DateField(required=False)
    fecha_hasta = serializers.DateField(required=False)
    usuario_asignado = serializers.IntegerField(required=False)
    prioridad = serializers.CharField(required=False)
    tiene_cita = serializers.BooleanField(required=False)
    limit = serializers.IntegerField(required=False, default=50, min_value=0)
    offset = serializers.IntegerField(required=False, default=0, min_value=0)


class CitaRapidaSerializer(serializers.Serializer):
    """Cita sin vehículo ni cliente: solo datos de contacto"""

    cita_fecha = serializers.DateField()
    cita_hora = serializers.TimeField()
    cita_descripcion_breve = serializers.CharField()
    cita_telefono_contacto = serializers.CharField()
    cita_nombre_contacto = serializers.CharField()
    titulo = serializers.CharField(required=False, allow_blank=True)
    descripcion = serializers.CharField(required=False, allow_blank=True)


class ConvertirEnCitaSerializer(serializers.Serializer):
    cita_fecha = serializers.DateField()
    cita_hora = serializers.TimeField()
    notas = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ReagendarSerializer(serializers.Serializer):
    cita_fecha = serializers.DateField()
    cita_hora = serializers.TimeField()
    notas = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class CancelarSerializer(serializers.Serializer):
    motivo_cancelacion = serializers.CharField(required=False, allow_blank=True,
                                               default='Cancelada por usuario')
