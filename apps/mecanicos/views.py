"""Vistas de Mecánicos - Solo lectura"""

from rest_framework import viewsets
from rest_framework.exceptions import NotFound
from rest_framework.response import Response
from apps.auth.permissions import filter_by_sucursal
from .models import Mecanico
from .serializers import MecanicoSerializer
import logging

logger = logging.getLogger(__name__)


class MecanicoViewSet(viewsets.ViewSet):
    """
    Endpoints:
        GET /api/mechanics - Mecánicos activos (de la sucursal del usuario)
        GET /api/mechanics/{id} - Detalle
    """

    lookup_value_regex = r'\d+'

    def list(self, request):
        mecanicos = Mecanico.objects.select_related('branch').filter(activo=True)
        mecanicos = filter_by_sucursal(mecanicos, request.firebase_user)

        branch_id = request.query_params.get('branch_id')
        if branch_id and branch_id.isdigit():
            mecanicos = mecanicos.filter(branch_id=int(branch_id))

        mecanicos = mecanicos.order_by('nombre', 'apellidos')
        logger.debug(f"Mecánicos obtenidos: {len(mecanicos)}")
        return Response(MecanicoSerializer(mecanicos, many=True).data)

    def retrieve(self, request, pk=None):
        mecanico = Mecanico.objects.select_related('branch').filter(pk=pk).first()
        if mecanico is None:
            raise NotFound('Mecánico no encontrado')
        return Response(MecanicoSerializer(mecanico).data)
