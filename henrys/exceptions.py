"""
Manejo de errores de la API

Todas las respuestas de error tienen la forma ``{"error": "<mensaje>"}``,
con campos extra cuando la excepción los trae (``errors``,
``existing_service_id``, ``success``).
"""

import logging

from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _aplanar_errores(detalle, prefijo=''):
    """Convierte el detalle anidado de un ValidationError en ["campo: mensaje", ...]"""
    mensajes = []
    if isinstance(detalle, dict):
        for campo, valor in detalle.items():
            nombre = campo if not prefijo else f"{prefijo}.{campo}"
            if campo == 'non_field_errors':
                nombre = prefijo
            mensajes.extend(_aplanar_errores(valor, nombre))
    elif isinstance(detalle, list):
        for valor in detalle:
            mensajes.extend(_aplanar_errores(valor, prefijo))
    else:
        mensajes.append(f"{prefijo}: {detalle}" if prefijo else str(detalle))
    return mensajes


def error_interno(mensaje, exc):
    """Respuesta 500 para errores no esperados; incluye detalles solo en DEBUG."""
    logger.error(f"{mensaje}: {str(exc)}", exc_info=exc)
    cuerpo = {'error': mensaje}
    if settings.DEBUG:
        cuerpo['details'] = str(exc)
    return Response(cuerpo, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


def manejador_excepciones(exc, context):
    """
    EXCEPTION_HANDLER de DRF.

    - ValidationError -> 400 {error: 'Datos inválidos', errors: [...]}
    - Otras APIException -> {error: detail, **extra}
    - Cualquier otra excepción -> 500 {error: 'Error interno del servidor'}
    """
    response = exception_handler(exc, context)

    if response is None:
        vista = context.get('view')
        logger.error(f"Excepción no controlada en {vista.__class__.__name__}")
        return error_interno('Error interno del servidor', exc)

    if isinstance(exc, ValidationError):
        cuerpo = {
            'error': 'Datos inválidos',
            'errors': _aplanar_errores(exc.detail),
        }
    else:
        detalle = exc.detail
        cuerpo = {'error': str(detalle) if not isinstance(detalle, (dict, list)) else detalle}

    cuerpo.update(getattr(exc, 'extra', None) or {})
    response.data = cuerpo
    return response
