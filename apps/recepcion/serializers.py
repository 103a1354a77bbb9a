"""
Serializers de Recepción

Validan el payload completo del flujo de recepción (walk-in,
conversión a cita, recepción de cita, conversión a servicio) antes de que
se haga cualquier inserción.
"""

from rest_framework import serializers

from apps.oportunidades.models import Oportunidad
from apps.oportunidades.serializers import ConvertirEnCitaSerializer
from apps.users.models import Usuario


class ClienteNuevoSerializer(serializers.Serializer):
    nombre = serializers.CharField()
    telefono = serializers.CharField()
    whatsapp = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    direccion = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class VehiculoNuevoSerializer(serializers.Serializer):
    marca = serializers.CharField()
    modelo = serializers.CharField()
    año = serializers.IntegerField(source='anio', min_value=1900, max_value=2100)
    placa_actual = serializers.CharField()
    vin = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    color = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    kilometraje_actual = serializers.IntegerField(min_value=0, required=False, allow_null=True)


class ServicioInmediatoSerializer(serializers.Serializer):
    tipo_servicio = serializers.CharField()
    descripcion = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    precio_estimado = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0,
                                               required=False, allow_null=True)


class CitaWalkInSerializer(serializers.Serializer):
    fecha = serializers.DateField()
    hora = serializers.TimeField()
    descripcion_breve = serializers.CharField()


class WalkInSerializer(serializers.Serializer):
    """
    Cliente que llega sin cita.

    Cliente: ``cliente_existente_id`` o ``cliente_nuevo``.
    Vehículo: ``vehiculo_existente_id`` o ``vehiculo_nuevo``.
    ``accion`` decide si se crea un servicio ahora o se agenda una cita.
    """

    ACCION_SERVICIO_INMEDIATO = 'servicio_inmediato'
    ACCION_AGENDAR_CITA = 'agendar_cita'

    cliente_existente_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    cliente_nuevo = ClienteNuevoSerializer(required=False, allow_null=True)
    vehiculo_existente_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    vehiculo_nuevo = VehiculoNuevoSerializer(required=False, allow_null=True)
    accion = serializers.ChoiceField(choices=[ACCION_SERVICIO_INMEDIATO, ACCION_AGENDAR_CITA])
    servicio_inmediato = ServicioInmediatoSerializer(required=False, allow_null=True)
    cita = CitaWalkInSerializer(required=False, allow_null=True)

    def validate(self, attrs):
        errores = {}

        if not attrs.get('cliente_existente_id') and not attrs.get('cliente_nuevo'):
            errores['cliente'] = 'Debe especificar cliente existente o datos de cliente nuevo'
        if not attrs.get('vehiculo_existente_id') and not attrs.get('vehiculo_nuevo'):
            errores['vehiculo'] = 'Debe especificar vehículo existente o datos de vehículo nuevo'

        accion = attrs.get('accion')
        if accion == self.ACCION_SERVICIO_INMEDIATO and not attrs.get('servicio_inmediato'):
            errores['servicio_inmediato'] = 'Datos de servicio inmediato requeridos'
        if accion == self.ACCION_AGENDAR_CITA and not attrs.get('cita'):
            errores['cita'] = 'Datos de cita requeridos'

        if errores:
            raise serializers.ValidationError(errores)
        return attrs


class ConvertirOportunidadSerializer(ConvertirEnCitaSerializer):
    opportunity_id = serializers.IntegerField(min_value=1)


class RecepcionarCitaSerializer(serializers.Serializer):
    tipo_servicio = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    descripcion = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    precio_estimado = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0,
                                               required=False, allow_null=True)
    usuario_mecanico = serializers.PrimaryKeyRelatedField(
        queryset=Usuario.objects.filter(activo=True), required=False, allow_null=True,
    )


class ClienteCitaSerializer(serializers.Serializer):
    """Cliente nuevo al convertir una cita; el teléfono sale de la cita si falta"""

    nombre = serializers.CharField()
    telefono = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    whatsapp = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    direccion = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ConvertirCitaServicioSerializer(serializers.Serializer):
    tipo_servicio = serializers.CharField()
    descripcion = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    precio = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, default=0)
    mechanic_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    customer_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    vehicle_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    new_customer = ClienteCitaSerializer(required=False, allow_null=True)
    new_vehicle = VehiculoNuevoSerializer(required=False, allow_null=True)


class CitaRecepcionSerializer(serializers.ModelSerializer):
    """Renglón de la agenda de recepción"""

    vehicle_id = serializers.IntegerField(read_only=True)
    customer_id = serializers.IntegerField(read_only=True)
    cliente_completo = serializers.CharField(source='customer.nombre', read_only=True, allow_null=True)
    marca = serializers.CharField(source='vehicle.marca', read_only=True, allow_null=True)
    modelo = serializers.CharField(source='vehicle.modelo', read_only=True, allow_null=True)
    placa_actual = serializers.CharField(source='vehicle.placa_actual', read_only=True, allow_null=True)
    tipo_cita = serializers.CharField(read_only=True)

    class Meta:
        model = Oportunidad
        fields = ['opportunity_id', 'cita_fecha', 'cita_hora', 'cita_nombre_contacto',
                  'cita_telefono_contacto', 'cita_descripcion_breve', 'origen_cita', 'estado',
                  'vehicle_id', 'customer_id', 'cliente_completo', 'marca', 'modelo',
                  'placa_actual', 'tipo_cita']
        read_only_fields = fields
