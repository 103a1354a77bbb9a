"""
Servicios de Oportunidades

Alta, búsqueda, actualización parcial, notas de seguimiento, recordatorios
y citas rápidas. El flujo oportunidad -> cita -> servicio vive en
apps.recepcion.services.
"""

import logging
import re
from datetime import timedelta

from django.db.models import Case, F, IntegerField, Value, When
from django.utils import timezone
from rest_framework.exceptions import NotFound, ParseError

from apps.clientes.models import Cliente
from apps.users.models import Usuario
from apps.vehiculos.models import Vehiculo
from services.database_service import construir_actualizacion, transaccion
from .models import NotaOportunidad, Oportunidad

logger = logging.getLogger(__name__)

DIAS_ANTES_CONTACTO = 7

CAMPOS_ACTUALIZABLES = [
    'customer_id', 'usuario_asignado_id', 'tipo_oportunidad', 'titulo', 'descripcion',
    'servicio_sugerido', 'precio_estimado', 'fecha_sugerida', 'prioridad',
    'kilometraje_referencia', 'estado',
]

ORDEN_PRIORIDAD = Case(
    When(prioridad='alta', then=Value(1)),
    When(prioridad='media', then=Value(2)),
    When(prioridad='baja', then=Value(3)),
    default=Value(4),
    output_field=IntegerField(),
)


def con_relaciones(queryset=None):
    """Queryset de oportunidades con cliente, vehículo y usuarios ya cargados"""
    if queryset is None:
        queryset = Oportunidad.objects.all()
    return queryset.select_related('customer', 'vehicle', 'usuario_creador', 'usuario_asignado')


def titulo_por_tipo(tipo_oportunidad):
    """'cambio_de_aceite' -> 'Cambio De Aceite'"""
    return re.sub(r'\b\w', lambda m: m.group().upper(), tipo_oportunidad.replace('_', ' '))


def fecha_contacto_para(fecha_sugerida):
    if not fecha_sugerida:
        return None
    return fecha_sugerida - timedelta(days=DIAS_ANTES_CONTACTO)


def _verificar_cliente(customer_id):
    if not Cliente.objects.filter(pk=customer_id).exists():
        raise NotFound('Cliente no encontrado')


def _verificar_usuario_asignado(user_id):
    if user_id and not Usuario.objects.filter(pk=user_id, activo=True).exists():
        raise NotFound('Usuario asignado no encontrado')


def obtener_oportunidad(opportunity_id):
    """Oportunidad con relaciones o NotFound"""
    try:
        return con_relaciones().get(pk=opportunity_id)
    except Oportunidad.DoesNotExist:
        raise NotFound('Oportunidad no encontrada')


def crear_oportunidad(datos, usuario=None):
    """
    Registra una oportunidad manual para un vehículo activo.

    Args:
        datos: validated_data de OportunidadCrearSerializer
        usuario: Usuario que la registra

    Returns:
        Oportunidad: creada (con relaciones cargadas)

    Raises:
        NotFound: vehículo, cliente o usuario asignado inexistente
    """
    vehiculo = Vehiculo.objects.activos().filter(vin=datos['vin']).first()
    if vehiculo is None:
        raise NotFound('Vehículo no encontrado')

    _verificar_cliente(datos['customer_id'])
    _verificar_usuario_asignado(datos.get('usuario_asignado_id'))

    with transaccion('crear oportunidad'):
        oportunidad = Oportunidad.objects.create(
            vehicle=vehiculo,
            customer_id=datos['customer_id'],
            usuario_creador=usuario,
            usuario_asignado_id=datos.get('usuario_asignado_id'),
            tipo_oportunidad=datos['tipo_oportunidad'],
            titulo=datos.get('titulo') or titulo_por_tipo(datos['tipo_oportunidad']),
            descripcion=datos['descripcion'],
            servicio_sugerido=datos.get('servicio_sugerido') or None,
            precio_estimado=datos.get('precio_estimado'),
            fecha_sugerida=datos.get('fecha_sugerida'),
            fecha_contacto_sugerida=fecha_contacto_para(datos.get('fecha_sugerida')),
            prioridad=datos['prioridad'],
            kilometraje_referencia=datos.get('kilometraje_referencia'),
            origen='manual',
        )

    logger.info(f"Oportunidad creada: {oportunidad.opportunity_id} (VIN {vehiculo.vin})")
    return obtener_oportunidad(oportunidad.opportunity_id)


def buscar_oportunidades(filtros):
    """
    Búsqueda paginada.

    Las fechas filtran ``cita_fecha`` cuando se piden citas
    (``tiene_cita=true``) y ``fecha_sugerida`` en otro caso.

    Returns:
        tuple: (lista de oportunidades, total, limit, offset)
    """
    qs = con_relaciones()

    if filtros.get('vin'):
        qs = qs.filter(vehicle__vin=filtros['vin'])
    if filtros.get('customer_id'):
        qs = qs.filter(customer_id=filtros['customer_id'])
    if filtros.get('estado'):
        qs = qs.filter(estado=filtros['estado'])

    campo_fecha = 'cita_fecha' if filtros.get('tiene_cita') is True else 'fecha_sugerida'
    if filtros.get('fecha_desde'):
        qs = qs.filter(**{f'{campo_fecha}__gte': filtros['fecha_desde']})
    if filtros.get('fecha_hasta'):
        qs = qs.filter(**{f'{campo_fecha}__lte': filtros['fecha_hasta']})

    if filtros.get('usuario_asignado'):
        qs = qs.filter(usuario_asignado_id=filtros['usuario_asignado'])
    if filtros.get('prioridad'):
        qs = qs.filter(prioridad=filtros['prioridad'])
    if 'tiene_cita' in filtros:
        qs = qs.filter(tiene_cita=filtros['tiene_cita'])

    limit = min(filtros.get('limit', 50), 100)
    offset = filtros.get('offset', 0)

    total = qs.count()
    qs = qs.annotate(orden_prioridad=ORDEN_PRIORIDAD).order_by(
        'orden_prioridad',
        F('fecha_contacto_sugerida').asc(nulls_last=True),
        '-fecha_creacion',
    )
    return list(qs[offset:offset + limit]), total, limit, offset


def actualizar_oportunidad(opportunity_id, datos):
    """
    Actualización parcial. Si cambia ``fecha_sugerida`` se recalcula la
    fecha de contacto sugerida.

    Raises:
        NotFound: oportunidad, cliente o usuario asignado inexistente
        ParseError: no hay campos que actualizar
    """
    if not Oportunidad.objects.filter(pk=opportunity_id).exists():
        raise NotFound('Oportunidad no encontrada')
    if datos.get('customer_id'):
        _verificar_cliente(datos['customer_id'])
    _verificar_usuario_asignado(datos.get('usuario_asignado_id'))

    derivados = {}
    if 'fecha_sugerida' in datos:
        derivados['fecha_contacto_sugerida'] = fecha_contacto_para(datos['fecha_sugerida'])

    campos = construir_actualizacion(datos, CAMPOS_ACTUALIZABLES, **derivados)
    if not campos:
        raise ParseError('No se proporcionaron datos para actualizar')

    with transaccion('actualizar oportunidad'):
        Oportunidad.objects.filter(pk=opportunity_id).update(**campos)

    logger.info(f"Oportunidad {opportunity_id} actualizada: {', '.join(sorted(campos))}")
    return obtener_oportunidad(opportunity_id)


def agregar_nota(opportunity_id, datos, usuario=None):
    """Agrega una nota de seguimiento (append-only)."""
    if not Oportunidad.objects.filter(pk=opportunity_id).exists():
        raise NotFound('Oportunidad no encontrada')

    with transaccion('agregar nota'):
        nota = NotaOportunidad.objects.create(
            opportunity_id=opportunity_id,
            usuario=usuario,
            tipo_contacto=datos.get('tipo_contacto'),
            resultado=datos.get('resultado'),
            notas=datos['notas'],
            seguimiento_requerido=datos.get('seguimiento_requerido', False),
            fecha_seguimiento=datos.get('fecha_seguimiento'),
        )

    logger.info(f"Nota {nota.note_id} agregada a oportunidad {opportunity_id}")
    return nota


def oportunidades_por_vehiculo(vehicle_id):
    return list(con_relaciones().filter(vehicle_id=vehicle_id).order_by('-fecha_creacion'))


def recordatorios_hoy():
    """Oportunidades pendientes/contactadas cuya fecha de contacto ya llegó (alta primero)."""
    hoy = timezone.localdate()
    qs = con_relaciones().filter(
        fecha_contacto_sugerida__lte=hoy,
        estado__in=[Oportunidad.ESTADO_PENDIENTE, Oportunidad.ESTADO_CONTACTADO],
    ).annotate(
        es_alta=Case(When(prioridad='alta', then=Value(0)), default=Value(1),
                     output_field=IntegerField()),
    ).order_by('es_alta', 'fecha_contacto_sugerida')
    return list(qs)


def crear_cita_rapida(datos, usuario=None):
    """
    Cita agendada por teléfono: solo datos de contacto, sin vehículo ni
    cliente. Se completa en recepción o al convertirla en servicio.
    """
    descripcion_breve = datos['cita_descripcion_breve']

    with transaccion('cita rápida'):
        cita = Oportunidad.objects.create(
            usuario_creador=usuario,
            tipo_oportunidad='cita_agendada',
            titulo=datos.get('titulo') or f"Cita - {descripcion_breve}",
            descripcion=datos.get('descripcion') or (
                f"Cita agendada para {datos['cita_nombre_contacto']} - {descripcion_breve}"
            ),
            estado=Oportunidad.ESTADO_AGENDADO,
            prioridad='media',
            origen='manual',
            tiene_cita=True,
            cita_fecha=datos['cita_fecha'],
            cita_hora=datos['cita_hora'],
            cita_descripcion_breve=descripcion_breve,
            cita_telefono_contacto=datos['cita_telefono_contacto'],
            cita_nombre_contacto=datos['cita_nombre_contacto'],
        )

    logger.info(f"📅 Cita rápida creada: {cita.opportunity_id} para {cita.cita_fecha} {cita.cita_hora}")
    return cita
