"""
Serializers de Sucursales

Serializa datos de sucursales para la API.
"""

from rest_framework import serializers
from .models import Sucursal


class SucursalSerializer(serializers.ModelSerializer):
    """
    Serializer para el modelo Sucursal.
    """

    class Meta:
        model = Sucursal
        fields = ['branch_id', 'created_at', 'nombre', 'direccion', 'descripcion', 'activa']
        read_only_fields = ['branch_id', 'created_at']
