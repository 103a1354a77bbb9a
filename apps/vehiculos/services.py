"""Cambio de placa con registro en el historial"""

import logging

from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound

from apps.recepcion.exceptions import Conflicto
from services.database_service import transaccion
from .models import HistorialPlaca, Vehiculo

logger = logging.getLogger(__name__)


def cambiar_placa(vehicle_id, placa_nueva, motivo='actualizacion', notas=None, usuario=None):
    """
    Cambia la placa de un vehículo activo y guarda la anterior en el historial.

    Raises:
        NotFound: vehículo inexistente o inactivo
        Conflicto: otra unidad activa ya usa la placa
    """
    with transaccion('cambiar placa'):
        vehiculo = Vehiculo.objects.activos().select_for_update().filter(pk=vehicle_id).first()
        if vehiculo is None:
            raise NotFound('Vehículo no encontrado')

        if Vehiculo.objects.placa_en_uso(placa_nueva, excluir_id=vehiculo.vehicle_id):
            raise Conflicto(f"Ya existe un vehículo con la placa {placa_nueva}")

        placa_anterior = vehiculo.placa_actual
        if placa_anterior == placa_nueva:
            return vehiculo

        if placa_anterior:
            HistorialPlaca.objects.create(
                vehicle=vehiculo,
                placa_anterior=placa_anterior,
                motivo_cambio=motivo,
                notas=notas,
                creado_por=usuario,
            )

        vehiculo.placa_actual = placa_nueva
        try:
            # Savepoint: la restricción de placa activa puede fallar si otra petición la tomó
            with transaction.atomic():
                vehiculo.save(update_fields=['placa_actual', 'fecha_actualizacion'])
        except IntegrityError:
            raise Conflicto(f"Ya existe un vehículo con la placa {placa_nueva}")

    logger.info(f"🚗 Vehículo {vehicle_id}: placa {placa_anterior} -> {placa_nueva}")
    return vehiculo
