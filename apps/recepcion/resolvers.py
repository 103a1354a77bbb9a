"""
Resolución de Cliente y Vehículo

Dado un id existente o los datos de una entidad nueva, regresan un id
concreto; solo insertan en el segundo caso. Se llaman dentro de la
transacción del flujo que los usa.
"""

import logging

from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from apps.clientes.models import Cliente
from apps.vehiculos.models import Vehiculo
from .exceptions import Conflicto

logger = logging.getLogger(__name__)


def resolver_cliente(cliente_id=None, datos=None, branch_id=None, **extra):
    """
    Args:
        extra: Campos adicionales para el cuerpo del 409

    Returns:
        tuple: (customer_id, creado)

    Raises:
        ValidationError: ni id ni datos
        Conflicto: el teléfono ya está registrado
    """
    if cliente_id:
        return cliente_id, False
    if not datos:
        raise ValidationError({'cliente': 'Debe especificar cliente existente o datos de cliente nuevo'})

    telefono = datos['telefono']
    try:
        # Savepoint: el error de unicidad no rompe la transacción exterior
        with transaction.atomic():
            cliente = Cliente.objects.create(
                nombre=datos['nombre'],
                telefono=telefono,
                whatsapp=datos.get('whatsapp') or telefono,
                email=datos.get('email') or None,
                direccion=datos.get('direccion') or None,
                branch_id=branch_id,
            )
    except IntegrityError:
        raise Conflicto(f"Ya existe un cliente con el teléfono {telefono}", **extra)

    logger.info(f"👤 Cliente creado: {cliente.customer_id} ({cliente.nombre})")
    return cliente.customer_id, True


def resolver_vehiculo(vehiculo_id=None, datos=None, customer_id=None, **extra):
    """
    Returns:
        tuple: (vehicle_id, creado)

    Raises:
        ValidationError: ni id ni datos
        Conflicto: la placa ya pertenece a un vehículo activo
    """
    if vehiculo_id:
        return vehiculo_id, False
    if not datos:
        raise ValidationError({'vehiculo': 'Debe especificar vehículo existente o datos de vehículo nuevo'})

    placa = datos['placa_actual']
    if Vehiculo.objects.placa_en_uso(placa):
        raise Conflicto(f"Ya existe un vehículo con la placa {placa}", **extra)

    try:
        with transaction.atomic():
            vehiculo = Vehiculo.objects.create(
                marca=datos['marca'],
                modelo=datos['modelo'],
                anio=datos['anio'],
                placa_actual=placa,
                vin=datos.get('vin') or None,
                color=datos.get('color') or None,
                kilometraje_actual=datos.get('kilometraje_actual') or 0,
                customer_id=customer_id,
            )
    except IntegrityError:
        raise Conflicto(f"Ya existe un vehículo con la placa {placa} o el VIN indicado", **extra)

    logger.info(f"🚗 Vehículo creado: {vehiculo.vehicle_id} ({vehiculo.marca} {vehiculo.modelo}, {placa})")
    return vehiculo.vehicle_id, True
