"""Modelos de Mecánicos - Mapea tabla mechanics"""

from django.db import models
from apps.sucursales.models import Sucursal


class Mecanico(models.Model):
    """Personal técnico asignable a servicios"""

    NIVELES = [
        ('junior', 'Junior'),
        ('intermedio', 'Intermedio'),
        ('senior', 'Senior'),
        ('master', 'Master'),
    ]

    mechanic_id = models.BigAutoField(primary_key=True)
    branch = models.ForeignKey(Sucursal, on_delete=models.PROTECT, related_name='mecanicos')
    numero_empleado = models.TextField(unique=True)
    nombre = models.TextField()
    apellidos = models.TextField()
    alias = models.CharField(max_length=15, blank=True, null=True)
    telefono = models.TextField(blank=True, null=True)
    email = models.TextField(blank=True, null=True)
    nivel_experiencia = models.TextField(choices=NIVELES, default='junior')
    activo = models.BooleanField(default=True)
    fecha_creacion = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'mechanics'
        ordering = ['nombre', 'apellidos']

    def __str__(self):
        return self.nombre_completo

    @property
    def nombre_completo(self):
        return f"{self.nombre} {self.apellidos}".strip()
