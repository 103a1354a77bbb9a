"""
Vistas de Oportunidades

Endpoints:
    POST /api/opportunities - Crea una oportunidad (mecanico, administrador)
    GET /api/opportunities/search - Búsqueda con filtros y paginación
    GET /api/opportunities/reminders/today - Recordatorios del día
    GET /api/opportunities/vehicle/{vehicle_id} - Oportunidades de un vehículo
    GET /api/opportunities/{id} - Detalle con notas
    PUT|PATCH /api/opportunities/{id} - Actualización parcial (seguimiento, administrador)
    POST /api/opportunities/{id}/notes - Nota de seguimiento (seguimiento, administrador)
    POST /api/opportunities/appointments - Cita rápida
    POST /api/opportunities/{id}/convert-to-appointment - Oportunidad -> cita
    PUT /api/opportunities/{id}/reschedule - Reagenda la cita
    PUT /api/opportunities/{id}/cancel - Cancela la cita
    POST /api/opportunities/{id}/convert-to-service - Cita -> servicio
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.auth.permissions import IsAuthenticated, IsMecanicoOrAdmin, IsSeguimientoOrAdmin
from apps.citas.views import convertir_a_servicio
from apps.recepcion import services as recepcion
from . import services
from .serializers import (
    BusquedaSerializer,
    CancelarSerializer,
    CitaRapidaSerializer,
    ConvertirEnCitaSerializer,
    NotaCrearSerializer,
    NotaOportunidadSerializer,
    OportunidadActualizarSerializer,
    OportunidadCrearSerializer,
    OportunidadDetalleSerializer,
    OportunidadSerializer,
    ReagendarSerializer,
)
import logging

logger = logging.getLogger(__name__)


class OportunidadViewSet(viewsets.ViewSet):
    """
    ViewSet de oportunidades de venta y sus citas.

    Permisos:
        - Crear: mecanico o administrador
        - Actualizar / notas: seguimiento o administrador
        - Resto: cualquier usuario autenticado
    """

    lookup_value_regex = r'\d+'

    def get_permissions(self):
        """Define permisos según la acción"""
        if self.action == 'create':
            return [IsAuthenticated(), IsMecanicoOrAdmin()]
        if self.action in ['update', 'partial_update', 'notes']:
            return [IsAuthenticated(), IsSeguimientoOrAdmin()]
        return [IsAuthenticated()]

    def create(self, request):
        serializer = OportunidadCrearSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        oportunidad = services.crear_oportunidad(serializer.validated_data, request.user)
        return Response({
            'message': 'Oportunidad creada exitosamente',
            'opportunity': OportunidadSerializer(oportunidad).data,
        }, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        oportunidad = services.obtener_oportunidad(pk)
        return Response({'opportunity': OportunidadDetalleSerializer(oportunidad).data})

    def update(self, request, pk=None):
        serializer = OportunidadActualizarSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        oportunidad = services.actualizar_oportunidad(int(pk), serializer.validated_data)
        return Response({
            'message': 'Oportunidad actualizada exitosamente',
            'opportunity': OportunidadSerializer(oportunidad).data,
        })

    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    @action(detail=False, methods=['get'])
    def search(self, request):
        serializer = BusquedaSerializer(data=request.query_params.dict())
        serializer.is_valid(raise_exception=True)

        oportunidades, total, limit, offset = services.buscar_oportunidades(serializer.validated_data)
        return Response({
            'opportunities': OportunidadSerializer(oportunidades, many=True).data,
            'total': total,
            'limit': limit,
            'offset': offset,
        })

    @action(detail=False, methods=['get'], url_path='reminders/today')
    def reminders_today(self, request):
        recordatorios = services.recordatorios_hoy()
        return Response({
            'reminders': OportunidadSerializer(recordatorios, many=True).data,
            'count': len(recordatorios),
        })

    @action(detail=False, methods=['get'], url_path=r'vehicle/(?P<vehicle_id>\d+)')
    def by_vehicle(self, request, vehicle_id=None):
        oportunidades = services.oportunidades_por_vehiculo(int(vehicle_id))
        return Response({
            'opportunities': OportunidadSerializer(oportunidades, many=True).data,
            'total': len(oportunidades),
        })

    @action(detail=True, methods=['post'])
    def notes(self, request, pk=None):
        serializer = NotaCrearSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        nota = services.agregar_nota(int(pk), serializer.validated_data, request.user)
        return Response({
            'message': 'Nota agregada exitosamente',
            'note': NotaOportunidadSerializer(nota).data,
        }, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'])
    def appointments(self, request):
        """Cita rápida (mismo flujo que POST /api/appointments)"""
        serializer = CitaRapidaSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cita = services.crear_cita_rapida(serializer.validated_data, request.user)
        return Response({
            'message': 'Cita creada exitosamente',
            'appointment': OportunidadSerializer(cita).data,
        }, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], url_path='convert-to-appointment')
    def convert_to_appointment(self, request, pk=None):
        serializer = ConvertirEnCitaSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        datos = serializer.validated_data

        oportunidad = recepcion.convertir_oportunidad_en_cita(
            int(pk), datos['cita_fecha'], datos['cita_hora'],
            notas=datos.get('notas'), usuario=request.user,
        )
        return Response({
            'message': 'Oportunidad convertida en cita exitosamente',
            'opportunity': OportunidadSerializer(oportunidad).data,
        })

    @action(detail=True, methods=['put'])
    def reschedule(self, request, pk=None):
        serializer = ReagendarSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        datos = serializer.validated_data

        cita = recepcion.reagendar_cita(
            int(pk), datos['cita_fecha'], datos['cita_hora'],
            notas=datos.get('notas'), usuario=request.user,
        )
        return Response({
            'message': 'Cita reagendada exitosamente',
            'opportunity': OportunidadSerializer(cita).data,
        })

    @action(detail=True, methods=['put'])
    def cancel(self, request, pk=None):
        serializer = CancelarSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cita = recepcion.cancelar_cita(
            int(pk), serializer.validated_data.get('motivo_cancelacion'), request.user,
        )
        return Response({
            'message': 'Cita cancelada exitosamente',
            'opportunity': OportunidadSerializer(cita).data,
        })

    @action(detail=True, methods=['post'], url_path='convert-to-service')
    def convert_to_service(self, request, pk=None):
        return convertir_a_servicio(request, pk)
