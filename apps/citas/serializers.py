"""Serializers de Citas"""

from rest_framework import serializers
from apps.oportunidades.models import Oportunidad


class CitaListadoSerializer(serializers.ModelSerializer):
    """Cita con el estado del servicio en que se convirtió (si existe)"""

    converted_to_service_id = serializers.IntegerField(read_only=True)
    existing_service_id = serializers.IntegerField(source='converted_to_service_id', read_only=True)
    service_status = serializers.CharField(source='converted_to_service.estado', read_only=True,
                                           allow_null=True)

    class Meta:
        model = Oportunidad
        fields = ['opportunity_id', 'cita_fecha', 'cita_hora', 'cita_nombre_contacto',
                  'cita_telefono_contacto', 'cita_descripcion_breve', 'converted_to_service_id',
                  'origen_cita', 'existing_service_id', 'service_status']
        read_only_fields = fields
