"""Serializers de Vehículos"""

from rest_framework import serializers
from .models import Vehiculo, HistorialPlaca


class HistorialPlacaSerializer(serializers.ModelSerializer):
    creado_por_nombre = serializers.CharField(source='creado_por.nombre', read_only=True, allow_null=True)

    class Meta:
        model = HistorialPlaca
        fields = ['history_id', 'placa_anterior', 'fecha_cambio', 'motivo_cambio', 'notas',
                  'creado_por_nombre']
        read_only_fields = fields


class VehiculoSerializer(serializers.ModelSerializer):
    """Vehículo con propietario e historial de placas"""

    año = serializers.IntegerField(source='anio', read_only=True)
    customer_id = serializers.IntegerField(read_only=True)
    customer_nombre = serializers.CharField(source='customer.nombre', read_only=True, allow_null=True)
    customer_telefono = serializers.CharField(source='customer.telefono', read_only=True, allow_null=True)
    plate_history = HistorialPlacaSerializer(source='historial_placas', many=True, read_only=True)

    class Meta:
        model = Vehiculo
        fields = ['vehicle_id', 'vin', 'marca', 'modelo', 'año', 'placa_actual', 'customer_id',
                  'customer_nombre', 'customer_telefono', 'kilometraje_actual', 'color',
                  'numero_motor', 'tipo_combustible', 'transmision', 'notas', 'activo',
                  'fecha_registro', 'fecha_actualizacion', 'plate_history']
        read_only_fields = fields


class CambioPlacaSerializer(serializers.Serializer):
    placa_nueva = serializers.CharField()
    motivo_cambio = serializers.CharField(required=False, default='actualizacion')
    notas = serializers.CharField(required=False, allow_blank=True, allow_null=True)
