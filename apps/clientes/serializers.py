"""Serializers de Clientes"""

from rest_framework import serializers
from .models import Cliente


class ClienteSerializer(serializers.ModelSerializer):
    class Meta:
        model = Cliente
        fields = ['customer_id', 'nombre', 'telefono', 'whatsapp', 'email', 'direccion',
                  'codigo_postal', 'rfc', 'notas', 'branch', 'fecha_registro',
                  'fecha_actualizacion']
        read_only_fields = ['customer_id', 'fecha_registro', 'fecha_actualizacion']
