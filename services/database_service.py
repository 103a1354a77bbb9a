"""
Database Service

Este módulo centraliza el acceso transaccional a PostgreSQL a través del
ORM de Django. Todas las operaciones de varios pasos (walk-in, recepción,
conversión de citas) pasan por aquí.

Funciones principales:
- transaccion(): Bloque atómico con commit al salir y rollback ante cualquier error
- construir_actualizacion(): Construye un UPDATE parcial a partir de campos opcionales
- cerrar_conexiones(): Libera las conexiones (y el pool) al terminar el proceso
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterable, Optional
import logging

from django.db import connections, transaction
from django.utils import timezone

logger = logging.getLogger(__name__)


@contextmanager
def transaccion(operacion: str, using: Optional[str] = None):
    """
    Abre una transacción para una operación de negocio.

    Toda la secuencia de sentencias dentro del bloque usa la misma conexión.
    Si el bloque termina normalmente se hace COMMIT; si lanza cualquier
    excepción se hace ROLLBACK y la excepción se propaga al llamador.

    Args:
        operacion: Nombre legible de la operación (para logs)
        using: Alias de base de datos (por defecto 'default')

    Example:
        >>> with transaccion('walk-in'):
        >>>     cliente = Cliente.objects.create(...)
        >>>     Servicio.objects.create(customer=cliente, ...)
    """
    try:
        with transaction.atomic(using=using):
            yield
    except Exception as e:
        logger.warning(f"Rollback en '{operacion}': {str(e)}")
        raise
    logger.debug(f"Commit de '{operacion}'")


def construir_actualizacion(
    datos: Dict[str, Any],
    permitidos: Iterable[str],
    **derivados: Any
) -> Dict[str, Any]:
    """
    Mapea un conjunto de campos opcionales a los argumentos de un UPDATE.

    Solo se incluyen los campos presentes en ``datos`` y listados en
    ``permitidos``; los ausentes se omiten (no se sobreescriben). Un valor
    ``None`` presente sí se escribe, para poder limpiar columnas.
    Siempre se actualiza ``fecha_actualizacion``.

    Args:
        datos: Datos validados (por ejemplo ``serializer.validated_data``)
        permitidos: Nombres de campo que se pueden actualizar
        **derivados: Campos calculados que se agregan tal cual

    Returns:
        Dict listo para ``QuerySet.update(**campos)``. Si no hay ningún
        campo de ``datos`` que aplicar, regresa un dict vacío.

    Example:
        >>> campos = construir_actualizacion(
        >>>     {'prioridad': 'alta'}, ['prioridad', 'estado']
        >>> )
        >>> Oportunidad.objects.filter(pk=1).update(**campos)
    """
    permitidos = set(permitidos)
    campos = {campo: valor for campo, valor in datos.items() if campo in permitidos}

    if not campos:
        return {}

    campos.update(derivados)
    campos['fecha_actualizacion'] = timezone.now()
    return campos


def cerrar_conexiones():
    """
    Cierra todas las conexiones abiertas y, si existe, el pool de psycopg.

    Se registra con ``atexit`` en el arranque WSGI para que el pool se
    libere cuando el worker termina.
    """
    for conexion in connections.all(initialized_only=True):
        try:
            conexion.close()
            cerrar_pool = getattr(conexion, 'close_pool', None)
            if cerrar_pool is not None:
                cerrar_pool()
        except Exception as e:
            logger.error(f"Error al cerrar conexión {conexion.alias}: {str(e)}")
    logger.info("Conexiones a base de datos cerradas")
