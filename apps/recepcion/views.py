"""
Vistas de Recepción

Endpoints del mostrador: clientes walk-in, conversión de oportunidades en
citas, recepción de citas y agenda del día.
"""

from django.db import DatabaseError
from django.utils import timezone
from rest_framework import serializers as drf_serializers
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from apps.oportunidades.serializers import OportunidadSerializer
from apps.servicios.serializers import ServicioSerializer
from henrys.exceptions import error_interno
from . import services
from .serializers import (
    CitaRecepcionSerializer,
    ConvertirOportunidadSerializer,
    RecepcionarCitaSerializer,
    WalkInSerializer,
)
import logging

logger = logging.getLogger(__name__)


def _serializar_resultado(resultado):
    if resultado['type'] == 'servicio_inmediato':
        return {'type': resultado['type'], 'service': ServicioSerializer(resultado['service']).data}
    return {'type': resultado['type'], 'opportunity': OportunidadSerializer(resultado['opportunity']).data}


@api_view(['POST'])
def walk_in(request):
    """
    Procesa un cliente que llega sin cita.

    Body:
        {
            "cliente_existente_id": 1 | "cliente_nuevo": {...},
            "vehiculo_existente_id": 1 | "vehiculo_nuevo": {...},
            "accion": "servicio_inmediato" | "agendar_cita",
            "servicio_inmediato": {"tipo_servicio", "descripcion", "precio_estimado"},
            "cita": {"fecha", "hora", "descripcion_breve"}
        }

    Errors:
        400: Datos inválidos
        409: Teléfono o placa ya registrados
    """
    serializer = WalkInSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        salida = services.procesar_walk_in(serializer.validated_data, request.user)
    except DatabaseError as e:
        return error_interno('Error procesando cliente walk-in', e)

    return Response({
        'message': 'Cliente walk-in procesado exitosamente',
        'customer_id': salida['customer_id'],
        'vehicle_id': salida['vehicle_id'],
        'result': _serializar_resultado(salida['result']),
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
def convert_opportunity(request):
    """Convierte una oportunidad en cita (el cliente aceptó agendar)."""
    serializer = ConvertirOportunidadSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    datos = serializer.validated_data

    try:
        oportunidad = services.convertir_oportunidad_en_cita(
            datos['opportunity_id'], datos['cita_fecha'], datos['cita_hora'],
            notas=datos.get('notas'), usuario=request.user,
        )
    except DatabaseError as e:
        return error_interno('Error convirtiendo opportunity en cita', e)

    return Response({
        'message': 'Opportunity convertida en cita exitosamente',
        'opportunity': OportunidadSerializer(oportunidad).data,
    })


@api_view(['POST'])
def recepcionar(request, opportunity_id):
    """
    Recepciona una cita completa: crea el servicio cotizado.

    Errors:
        404: Cita no encontrada
        400: La cita no tiene vehículo o cliente (usar walk-in primero)
    """
    serializer = RecepcionarCitaSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        servicio, oportunidad = services.recepcionar_cita(
            opportunity_id, serializer.validated_data, request.user,
        )
    except DatabaseError as e:
        return error_interno('Error recepcionando cita', e)

    return Response({
        'message': 'Cita recepcionada exitosamente',
        'service': ServicioSerializer(servicio).data,
        'opportunity': OportunidadSerializer(oportunidad).data,
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
def citas(request):
    """Agenda de recepción (?fecha=YYYY-MM-DD, hoy por defecto)"""
    fecha = None
    if request.query_params.get('fecha'):
        fecha = drf_serializers.DateField().run_validation(request.query_params['fecha'])

    citas_dia = services.citas_para_recepcion(fecha)
    return Response({
        'fecha': (fecha or timezone.localdate()).isoformat(),
        'citas': CitaRecepcionSerializer(citas_dia, many=True).data,
    })
