"""
Recepción de Clientes: Oportunidad -> Cita -> Servicio

Cada operación corre en una sola transacción: o se aplican todas sus
escrituras o ninguna.

Funciones principales:
- procesar_walk_in(): Cliente sin cita (servicio inmediato o cita agendada)
- convertir_oportunidad_en_cita(): Seguimiento agenda una oportunidad
- recepcionar_cita(): Llega el cliente de una cita completa
- convertir_cita_en_servicio(): Cita (rápida o completa) -> servicio autorizado
- reagendar_cita() / cancelar_cita()
- citas_para_recepcion(): Agenda del día
"""

import logging

from django.db.models import Case, F, Q, Value, When
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from apps.clientes.models import Cliente
from apps.oportunidades.models import NotaOportunidad, Oportunidad
from apps.servicios.models import Servicio
from apps.servicios.services import crear_servicio
from services.database_service import transaccion
from .exceptions import CitaIncompleta, CitaNoEncontrada, Conflicto, YaConvertida
from .resolvers import resolver_cliente, resolver_vehiculo
from .serializers import WalkInSerializer

logger = logging.getLogger(__name__)

ESTADOS_AGENDA = [Oportunidad.ESTADO_AGENDADO, Oportunidad.ESTADO_EN_PROCESO]


def _sucursal_de(usuario):
    return usuario.sucursal_id if usuario is not None else None


def _cita_pendiente(opportunity_id):
    """Filtro del UPDATE condicional: cita vigente y aún no convertida"""
    return Oportunidad.objects.filter(
        pk=opportunity_id, tiene_cita=True, converted_to_service__isnull=True,
    )


def procesar_walk_in(datos, usuario=None):
    """
    Procesa un cliente que llega al taller sin cita.

    Args:
        datos: validated_data de WalkInSerializer
        usuario: Usuario que atiende (su sucursal se asigna al cliente nuevo)

    Returns:
        dict: {'customer_id', 'vehicle_id', 'result'} donde result es
        {'type': 'servicio_inmediato', 'service'} o
        {'type': 'cita_agendada', 'opportunity'}

    Raises:
        Conflicto: teléfono o placa ya registrados
    """
    with transaccion('walk-in'):
        customer_id, _ = resolver_cliente(
            datos.get('cliente_existente_id'), datos.get('cliente_nuevo'), _sucursal_de(usuario),
        )
        vehicle_id, _ = resolver_vehiculo(
            datos.get('vehiculo_existente_id'), datos.get('vehiculo_nuevo'), customer_id,
        )

        if datos['accion'] == WalkInSerializer.ACCION_SERVICIO_INMEDIATO:
            servicio_datos = datos['servicio_inmediato']
            tipo_servicio = servicio_datos['tipo_servicio'].strip()
            descripcion = (servicio_datos.get('descripcion') or '').strip() or tipo_servicio or 'Servicio general'

            servicio = crear_servicio(
                vehicle_id=vehicle_id,
                customer_id=customer_id,
                tipo_servicio=tipo_servicio,
                descripcion=descripcion,
                precio=servicio_datos.get('precio_estimado'),
                estado=Servicio.ESTADO_COTIZADO,
            )
            resultado = {'type': 'servicio_inmediato', 'service': servicio}
        else:
            cita = datos['cita']
            try:
                cliente = Cliente.objects.only('nombre', 'telefono').get(pk=customer_id)
            except Cliente.DoesNotExist:
                raise NotFound('Cliente no encontrado')

            oportunidad = Oportunidad.objects.create(
                vehicle_id=vehicle_id,
                customer_id=customer_id,
                usuario_creador=usuario,
                tipo_oportunidad='servicio_programado',
                titulo=f"Servicio programado - {cita['descripcion_breve']}",
                descripcion=f"Cliente walk-in programó cita para {cita['descripcion_breve']}",
                tiene_cita=True,
                cita_fecha=cita['fecha'],
                cita_hora=cita['hora'],
                cita_descripcion_breve=cita['descripcion_breve'],
                cita_nombre_contacto=cliente.nombre,
                cita_telefono_contacto=cliente.telefono,
                origen_cita='walk_in',
                estado=Oportunidad.ESTADO_AGENDADO,
            )
            logger.info(f"📅 Cita walk-in agendada: {oportunidad.opportunity_id}")
            resultado = {'type': 'cita_agendada', 'opportunity': oportunidad}

    logger.info(f"🚪 Walk-in procesado: cliente {customer_id}, vehículo {vehicle_id}, {resultado['type']}")
    return {'customer_id': customer_id, 'vehicle_id': vehicle_id, 'result': resultado}


def convertir_oportunidad_en_cita(opportunity_id, cita_fecha, cita_hora, notas=None, usuario=None):
    """
    Convierte una oportunidad en cita cuando el cliente acepta agendar.

    Copia los datos de contacto del cliente y usa el servicio sugerido como
    descripción breve de la cita.

    Raises:
        NotFound: oportunidad o cliente inexistente
    """
    with transaccion('oportunidad -> cita'):
        try:
            oportunidad = Oportunidad.objects.select_for_update().get(pk=opportunity_id)
        except Oportunidad.DoesNotExist:
            raise NotFound('Opportunity no encontrada')

        cliente = Cliente.objects.filter(pk=oportunidad.customer_id).only('nombre', 'telefono').first()
        if cliente is None:
            raise NotFound('Cliente no encontrado')

        Oportunidad.objects.filter(pk=opportunity_id).update(
            tiene_cita=True,
            cita_fecha=cita_fecha,
            cita_hora=cita_hora,
            cita_descripcion_breve=F('servicio_sugerido'),
            cita_nombre_contacto=cliente.nombre,
            cita_telefono_contacto=cliente.telefono,
            origen_cita='opportunity',
            estado=Oportunidad.ESTADO_AGENDADO,
            fecha_actualizacion=timezone.now(),
        )

        if notas:
            NotaOportunidad.objects.create(
                opportunity_id=opportunity_id,
                usuario=usuario,
                resultado='agendado',
                notas=notas,
            )

    logger.info(f"📅 Oportunidad {opportunity_id} convertida en cita para {cita_fecha} {cita_hora}")
    return Oportunidad.objects.select_related('customer', 'vehicle').get(pk=opportunity_id)


def recepcionar_cita(opportunity_id, datos, usuario=None):
    """
    El cliente de una cita llegó: se crea el servicio cotizado y la cita
    pasa a 'en_proceso'.

    Esta ruta no marca ``converted_to_service``; una cita recepcionada aún
    puede convertirse con convertir_cita_en_servicio().

    Returns:
        tuple: (servicio, oportunidad)

    Raises:
        NotFound: no existe una cita con ese id
        CitaIncompleta: la cita no tiene vehículo o cliente
    """
    with transaccion('recepcionar cita'):
        oportunidad = (
            Oportunidad.objects.select_related('customer', 'vehicle')
            .filter(pk=opportunity_id, tiene_cita=True)
            .first()
        )
        if oportunidad is None:
            raise NotFound('Cita no encontrada')
        if not oportunidad.vehicle_id or not oportunidad.customer_id:
            raise CitaIncompleta()

        mecanico = datos.get('usuario_mecanico')
        precio = datos.get('precio_estimado') or oportunidad.precio_estimado

        servicio = crear_servicio(
            vehicle_id=oportunidad.vehicle_id,
            customer_id=oportunidad.customer_id,
            tipo_servicio=datos.get('tipo_servicio') or oportunidad.servicio_sugerido or 'Servicio general',
            descripcion=datos.get('descripcion') or oportunidad.descripcion,
            precio=precio,
            estado=Servicio.ESTADO_COTIZADO,
            usuario_mecanico_id=mecanico.pk if mecanico is not None else None,
            branch_id=_sucursal_de(usuario),
        )

        Oportunidad.objects.filter(pk=opportunity_id).update(
            estado=Oportunidad.ESTADO_EN_PROCESO,
            fecha_actualizacion=timezone.now(),
        )
        oportunidad.estado = Oportunidad.ESTADO_EN_PROCESO

    logger.info(f"🔧 Cita {opportunity_id} recepcionada -> servicio {servicio.service_id}")
    return servicio, oportunidad


def convertir_cita_en_servicio(opportunity_id, datos, usuario=None):
    """
    Convierte una cita en servicio autorizado, creando cliente y vehículo si
    la cita era rápida.

    Una cita se convierte una sola vez: la fila se bloquea, se revisa
    ``converted_to_service`` y el UPDATE final solo aplica si sigue nulo.

    Args:
        opportunity_id: Id de la cita
        datos: validated_data de ConvertirCitaServicioSerializer
        usuario: Usuario que convierte

    Returns:
        dict: {'service', 'appointment_id', 'created_customer_id', 'created_vehicle_id'}

    Raises:
        CitaNoEncontrada: no existe una cita con ese id
        YaConvertida: la cita ya tiene servicio
        Conflicto: teléfono o placa ya registrados
        ValidationError: no hay cliente o vehículo para el servicio
    """
    with transaccion('cita -> servicio'):
        cita = (
            Oportunidad.objects.select_for_update()
            .filter(pk=opportunity_id, tiene_cita=True)
            .first()
        )
        if cita is None:
            raise CitaNoEncontrada()
        if cita.converted_to_service_id:
            raise YaConvertida(existing_service_id=cita.converted_to_service_id)

        nuevo_cliente = datos.get('new_customer')
        if nuevo_cliente:
            nuevo_cliente = dict(nuevo_cliente)
            nuevo_cliente['telefono'] = nuevo_cliente.get('telefono') or cita.cita_telefono_contacto
            if not nuevo_cliente['telefono']:
                raise ValidationError({'new_customer': 'telefono: requerido (la cita no tiene teléfono de contacto)'})
        customer_id, cliente_creado = resolver_cliente(
            None if nuevo_cliente else (datos.get('customer_id') or cita.customer_id),
            nuevo_cliente,
            _sucursal_de(usuario),
            success=False,
        )

        nuevo_vehiculo = datos.get('new_vehicle')
        vehicle_id, vehiculo_creado = resolver_vehiculo(
            None if nuevo_vehiculo else (datos.get('vehicle_id') or cita.vehicle_id),
            nuevo_vehiculo,
            customer_id,
            success=False,
        )

        servicio = crear_servicio(
            vehicle_id=vehicle_id,
            customer_id=customer_id,
            tipo_servicio=datos['tipo_servicio'],
            descripcion=datos.get('descripcion') or f"Servicio programado: {cita.cita_descripcion_breve}",
            precio=datos.get('precio'),
            estado=Servicio.ESTADO_AUTORIZADO,
            mechanic_id=datos.get('mechanic_id'),
            branch_id=_sucursal_de(usuario),
        )

        actualizadas = _cita_pendiente(opportunity_id).update(
            customer_id=customer_id,
            vehicle_id=vehicle_id,
            converted_to_service=servicio,
            tiene_cita=False,
            fecha_actualizacion=timezone.now(),
        )
        if actualizadas == 0:
            actual = Oportunidad.objects.filter(pk=opportunity_id).values_list(
                'converted_to_service_id', flat=True).first()
            raise YaConvertida(existing_service_id=actual)

    logger.info(f"🎉 Cita {opportunity_id} convertida en servicio {servicio.service_id}")

    servicio = Servicio.objects.select_related(
        'customer', 'vehicle', 'mechanic', 'usuario_mecanico',
    ).get(pk=servicio.service_id)
    return {
        'service': servicio,
        'appointment_id': opportunity_id,
        'created_customer_id': customer_id if cliente_creado else None,
        'created_vehicle_id': vehicle_id if vehiculo_creado else None,
    }


def reagendar_cita(opportunity_id, cita_fecha, cita_hora, notas=None, usuario=None):
    """
    Mueve una cita vigente a otra fecha/hora.

    Raises:
        NotFound: no existe una cita con ese id
        Conflicto: la cita ya fue convertida a servicio
    """
    with transaccion('reagendar cita'):
        if not Oportunidad.objects.filter(pk=opportunity_id, tiene_cita=True).exists():
            raise NotFound('Cita no encontrada')

        actualizadas = _cita_pendiente(opportunity_id).update(
            cita_fecha=cita_fecha,
            cita_hora=cita_hora,
            estado=Oportunidad.ESTADO_AGENDADO,
            fecha_actualizacion=timezone.now(),
        )
        if actualizadas == 0:
            raise Conflicto('La cita ya fue convertida a servicio')

        if notas:
            NotaOportunidad.objects.create(
                opportunity_id=opportunity_id,
                usuario=usuario,
                tipo_contacto='nota_interna',
                resultado='agendado',
                notas=f"Cita reagendada: {notas}",
            )

    logger.info(f"📅 Cita {opportunity_id} reagendada para {cita_fecha} {cita_hora}")
    return Oportunidad.objects.select_related('customer', 'vehicle').get(pk=opportunity_id)


def cancelar_cita(opportunity_id, motivo=None, usuario=None):
    """
    Cancela una cita vigente: deja de ser cita y la oportunidad se da por perdida.

    Raises:
        NotFound: no existe una cita con ese id
        Conflicto: la cita ya fue convertida a servicio
    """
    motivo = motivo or 'Cancelada por usuario'

    with transaccion('cancelar cita'):
        if not Oportunidad.objects.filter(pk=opportunity_id, tiene_cita=True).exists():
            raise NotFound('Cita no encontrada')

        actualizadas = _cita_pendiente(opportunity_id).update(
            tiene_cita=False,
            estado=Oportunidad.ESTADO_PERDIDO,
            fecha_actualizacion=timezone.now(),
        )
        if actualizadas == 0:
            raise Conflicto('La cita ya fue convertida a servicio')

        NotaOportunidad.objects.create(
            opportunity_id=opportunity_id,
            usuario=usuario,
            tipo_contacto='nota_interna',
            notas=f"Cita cancelada: {motivo}",
        )

    logger.info(f"❌ Cita {opportunity_id} cancelada: {motivo}")
    return Oportunidad.objects.select_related('customer', 'vehicle').get(pk=opportunity_id)


def citas_para_recepcion(fecha=None):
    """
    Citas de un día (hoy por defecto) en estado agendado/en_proceso,
    marcadas como 'cita_rapida' si les falta vehículo o cliente.
    """
    fecha = fecha or timezone.localdate()
    return list(
        Oportunidad.objects.select_related('customer', 'vehicle')
        .filter(tiene_cita=True, cita_fecha=fecha, estado__in=ESTADOS_AGENDA)
        .annotate(tipo_cita=Case(
            When(Q(vehicle__isnull=True) | Q(customer__isnull=True), then=Value('cita_rapida')),
            default=Value('cita_completa'),
        ))
        .order_by('cita_hora')
    )


def citas_en_rango(fecha_inicio, fecha_fin):
    """Citas vigentes entre dos fechas (inclusive) con el estado del servicio ligado."""
    return list(
        Oportunidad.objects.select_related('converted_to_service')
        .filter(tiene_cita=True, cita_fecha__range=(fecha_inicio, fecha_fin))
        .order_by('cita_fecha', 'cita_hora')
    )
