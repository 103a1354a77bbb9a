"""
Vistas de Citas

Una cita es una oportunidad con ``tiene_cita = true``.

Endpoints:
    POST /api/appointments - Crea una cita rápida
    GET /api/appointments?start_date&end_date - Citas en un rango
    GET /api/appointments/today - Citas de hoy
    POST /api/appointments/{id}/convert-to-service - Convierte la cita en servicio
"""

from django.db import DatabaseError
from django.utils import timezone
from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.oportunidades import services as oportunidades
from apps.oportunidades.serializers import CitaRapidaSerializer, OportunidadSerializer
from apps.recepcion import services as recepcion
from apps.recepcion.serializers import ConvertirCitaServicioSerializer
from apps.servicios.serializers import ServicioDetalleSerializer
from henrys.exceptions import error_interno
from .serializers import CitaListadoSerializer
import logging

logger = logging.getLogger(__name__)


def respuesta_conversion(salida):
    return {
        'success': True,
        'message': 'Cita convertida exitosamente a servicio',
        'service': ServicioDetalleSerializer(salida['service']).data,
        'appointment_id': salida['appointment_id'],
        'created_customer_id': salida['created_customer_id'],
        'created_vehicle_id': salida['created_vehicle_id'],
    }


def convertir_a_servicio(request, pk):
    """Lógica compartida por /appointments y /opportunities"""
    serializer = ConvertirCitaServicioSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        salida = recepcion.convertir_cita_en_servicio(int(pk), serializer.validated_data, request.user)
    except DatabaseError as e:
        return error_interno('Error interno del servidor', e)

    return Response(respuesta_conversion(salida))


class CitaViewSet(viewsets.ViewSet):
    """ViewSet de citas"""

    lookup_value_regex = r'\d+'

    def list(self, request):
        """Citas entre start_date y end_date (ambas requeridas)"""
        inicio = request.query_params.get('start_date')
        fin = request.query_params.get('end_date')
        if not inicio or not fin:
            return Response({
                'success': False,
                'error': 'Se requieren las fechas start_date y end_date',
            }, status=status.HTTP_400_BAD_REQUEST)

        campo = serializers.DateField()
        inicio = campo.run_validation(inicio)
        fin = campo.run_validation(fin)

        citas = recepcion.citas_en_rango(inicio, fin)
        logger.info(f"📅 {len(citas)} citas del {inicio} al {fin}")
        return Response({
            'success': True,
            'appointments': CitaListadoSerializer(citas, many=True).data,
            'start_date': inicio.isoformat(),
            'end_date': fin.isoformat(),
        })

    def create(self, request):
        """Crea una cita rápida (sin vehículo ni cliente)"""
        serializer = CitaRapidaSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cita = oportunidades.crear_cita_rapida(serializer.validated_data, request.user)
        return Response({
            'message': 'Cita creada exitosamente',
            'appointment': OportunidadSerializer(cita).data,
        }, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'])
    def today(self, request):
        """Citas de hoy"""
        hoy = timezone.localdate()
        citas = recepcion.citas_en_rango(hoy, hoy)
        return Response({
            'success': True,
            'appointments': CitaListadoSerializer(citas, many=True).data,
            'date': hoy.isoformat(),
        })

    @action(detail=True, methods=['post'], url_path='convert-to-service')
    def convert_to_service(self, request, pk=None):
        """Convierte la cita en servicio autorizado"""
        return convertir_a_servicio(request, pk)
