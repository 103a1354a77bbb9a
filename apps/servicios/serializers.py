"""Serializers de Servicios"""

from rest_framework import serializers
from .models import Servicio


class ServicioSerializer(serializers.ModelSerializer):
    """Fila de servicio tal como se crea"""

    vehicle_id = serializers.IntegerField(read_only=True)
    customer_id = serializers.IntegerField(read_only=True)
    mechanic_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Servicio
        fields = ['service_id', 'vehicle_id', 'customer_id', 'usuario_mecanico', 'mechanic_id',
                  'branch', 'fecha_servicio', 'tipo_servicio', 'descripcion',
                  'kilometraje_servicio', 'precio', 'estado', 'notas', 'garantia_meses',
                  'fecha_creacion']
        read_only_fields = fields


class ServicioDetalleSerializer(ServicioSerializer):
    """Servicio con datos de cliente, vehículo y mecánico para mostrar"""

    customer_name = serializers.CharField(source='customer.nombre', read_only=True)
    marca = serializers.CharField(source='vehicle.marca', read_only=True)
    modelo = serializers.CharField(source='vehicle.modelo', read_only=True)
    año = serializers.IntegerField(source='vehicle.anio', read_only=True)
    color = serializers.CharField(source='vehicle.color', read_only=True)
    placa_actual = serializers.CharField(source='vehicle.placa_actual', read_only=True)
    mecanico_nombre = serializers.SerializerMethodField()

    class Meta(ServicioSerializer.Meta):
        fields = ServicioSerializer.Meta.fields + [
            'customer_name', 'marca', 'modelo', 'año', 'color', 'placa_actual',
            'mecanico_nombre',
        ]
        read_only_fields = fields

    def get_mecanico_nombre(self, obj):
        if obj.mechanic_id:
            return obj.mechanic.nombre_completo
        if obj.usuario_mecanico_id:
            return obj.usuario_mecanico.nombre
        return None
