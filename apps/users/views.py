"""Vistas de Usuarios - Solo administrador"""

from rest_framework import viewsets
from rest_framework.exceptions import NotFound
from rest_framework.response import Response
from .models import Usuario
from .serializers import UsuarioSerializer
from apps.auth.permissions import IsAuthenticated, IsAdmin
import logging

logger = logging.getLogger(__name__)


class UsuarioViewSet(viewsets.ViewSet):
    """
    ViewSet de usuarios del sistema - Solo administrador.

    Endpoints:
        GET /api/users - Lista usuarios (?rol=, ?activo=true)
        GET /api/users/{id} - Detalle
    """

    permission_classes = [IsAuthenticated, IsAdmin]
    lookup_value_regex = r'\d+'

    def list(self, request):
        usuarios = Usuario.objects.select_related('sucursal')

        rol = request.query_params.get('rol')
        if rol:
            usuarios = usuarios.filter(rol=rol)
        if request.query_params.get('activo') == 'true':
            usuarios = usuarios.filter(activo=True)

        logger.info(f"Usuarios obtenidos: {usuarios.count()}")
        return Response(UsuarioSerializer(usuarios, many=True).data)

    def retrieve(self, request, pk=None):
        usuario = Usuario.objects.select_related('sucursal').filter(pk=pk).first()
        if usuario is None:
            raise NotFound('Usuario no encontrado')
        return Response(UsuarioSerializer(usuario).data)
