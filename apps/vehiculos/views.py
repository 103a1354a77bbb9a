"""
Vistas de Vehículos

Endpoints:
    GET /api/vehicles/{id} - Vehículo con propietario e historial de placas
    PUT /api/vehicles/{id}/plate - Cambia la placa
"""

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from .models import Vehiculo
from .serializers import CambioPlacaSerializer, VehiculoSerializer
from .services import cambiar_placa


class VehiculoViewSet(viewsets.ViewSet):
    lookup_value_regex = r'\d+'

    def _obtener(self, pk):
        vehiculo = (
            Vehiculo.objects.select_related('customer')
            .prefetch_related('historial_placas__creado_por')
            .filter(pk=pk)
            .first()
        )
        if vehiculo is None:
            raise NotFound('Vehículo no encontrado')
        return vehiculo

    def retrieve(self, request, pk=None):
        return Response({'vehicle': VehiculoSerializer(self._obtener(pk)).data})

    @action(detail=True, methods=['put'])
    def plate(self, request, pk=None):
        serializer = CambioPlacaSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        datos = serializer.validated_data

        cambiar_placa(int(pk), datos['placa_nueva'], datos['motivo_cambio'],
                      datos.get('notas'), request.user)
        return Response({
            'message': 'Placa actualizada exitosamente',
            'vehicle': VehiculoSerializer(self._obtener(pk)).data,
        })
