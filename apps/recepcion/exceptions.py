"""Errores del flujo oportunidad -> cita -> servicio"""

from rest_framework import status
from rest_framework.exceptions import APIException, NotFound


class Conflicto(APIException):
    """409: el recurso ya existe o cambió de estado"""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Conflicto con el estado actual del recurso'
    default_code = 'conflict'

    def __init__(self, detail=None, code=None, **extra):
        super().__init__(detail, code)
        self.extra = extra


class YaConvertida(Conflicto):
    default_detail = 'Esta cita ya fue convertida a servicio'
    default_code = 'already_converted'

    def __init__(self, existing_service_id=None):
        super().__init__(existing_service_id=existing_service_id, success=False)


class CitaIncompleta(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = (
        'Esta cita no tiene vehículo o cliente asignado. '
        'Use processWalkInClient primero.'
    )
    default_code = 'incomplete_appointment'


class CitaNoEncontrada(NotFound):
    """404 de los endpoints de conversión; lleva success=False como el resto de sus errores"""
    default_detail = 'Cita no encontrada o no es una cita válida'

    def __init__(self, detail=None, code=None):
        super().__init__(detail, code)
        self.extra = {'success': False}
