"""
Vistas de Sucursales

Consulta de sucursales (solo lectura).
"""

from rest_framework import viewsets
from rest_framework.exceptions import NotFound
from rest_framework.response import Response
from .models import Sucursal
from .serializers import SucursalSerializer
import logging

logger = logging.getLogger(__name__)


class SucursalViewSet(viewsets.ViewSet):
    """
    ViewSet de sucursales.

    Endpoints:
        GET /api/branches - Lista sucursales (?activa=true para solo activas)
        GET /api/branches/{id} - Obtiene una sucursal específica
    """

    lookup_value_regex = r'\d+'

    def list(self, request):
        """Lista todas las sucursales"""
        sucursales = Sucursal.objects.all()
        if request.query_params.get('activa') == 'true':
            sucursales = sucursales.filter(activa=True)
        return Response(SucursalSerializer(sucursales, many=True).data)

    def retrieve(self, request, pk=None):
        """Obtiene una sucursal específica"""
        sucursal = Sucursal.objects.filter(pk=pk).first()
        if sucursal is None:
            raise NotFound('Sucursal no encontrada')
        return Response(SucursalSerializer(sucursal).data)
