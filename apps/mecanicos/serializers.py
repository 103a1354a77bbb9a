"""Serializers de Mecánicos"""

from rest_framework import serializers
from .models import Mecanico


class MecanicoSerializer(serializers.ModelSerializer):
    branch_nombre = serializers.CharField(source='branch.nombre', read_only=True)

    class Meta:
        model = Mecanico
        fields = ['mechanic_id', 'branch', 'branch_nombre', 'numero_empleado', 'nombre',
                  'apellidos', 'alias', 'telefono', 'email', 'nivel_experiencia', 'activo']
