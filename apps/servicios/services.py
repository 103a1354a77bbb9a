"""
Servicios de Órdenes de Trabajo

Alta de servicios: es el efecto final de "el cliente se está atendiendo
ahora", venga de un walk-in, de una recepción o de una conversión de cita.
"""

import logging
from decimal import Decimal
from typing import Optional

from django.utils import timezone

from .models import Servicio

logger = logging.getLogger(__name__)


def crear_servicio(
    *,
    vehicle_id: int,
    customer_id: int,
    tipo_servicio: str,
    descripcion: str = '',
    precio: Optional[Decimal] = None,
    estado: str = Servicio.ESTADO_COTIZADO,
    mechanic_id: Optional[int] = None,
    usuario_mecanico_id: Optional[int] = None,
    branch_id: Optional[int] = None,
) -> Servicio:
    """
    Inserta una orden de trabajo con fecha de hoy.

    Debe llamarse dentro de la transacción de la operación que la origina.

    Args:
        vehicle_id: Vehículo atendido (obligatorio)
        customer_id: Cliente (obligatorio)
        tipo_servicio: Tipo de servicio
        descripcion: Descripción del trabajo
        precio: Precio; None equivale a 0
        estado: 'cotizado' o 'autorizado' según el origen

    Returns:
        Servicio: La fila creada
    """
    servicio = Servicio.objects.create(
        vehicle_id=vehicle_id,
        customer_id=customer_id,
        usuario_mecanico_id=usuario_mecanico_id,
        mechanic_id=mechanic_id,
        branch_id=branch_id,
        fecha_servicio=timezone.localdate(),
        tipo_servicio=tipo_servicio,
        descripcion=descripcion or '',
        precio=precio if precio is not None else Decimal('0'),
        estado=estado,
    )
    logger.info(f"Servicio creado: {servicio.service_id} ({tipo_servicio}, {estado})")
    return servicio
