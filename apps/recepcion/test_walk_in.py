"""
Tests de recepción de clientes walk-in.
"""

from decimal import Decimal

import pytest
from django.utils import timezone

from apps.clientes.models import Cliente
from apps.oportunidades.models import Oportunidad
from apps.servicios.models import Servicio
from apps.vehiculos.models import Vehiculo

URL = '/api/reception/walk-in'

pytestmark = [pytest.mark.django_db, pytest.mark.integration]


def _conteos():
    return (Cliente.objects.count(), Vehiculo.objects.count(),
            Servicio.objects.count(), Oportunidad.objects.count())


def _payload_nuevo(placa='ABC-123', telefono='5551234567'):
    return {
        'cliente_nuevo': {'nombre': 'Ana', 'telefono': telefono},
        'vehiculo_nuevo': {'marca': 'Honda', 'modelo': 'Civic', 'año': 2018, 'placa_actual': placa},
        'accion': 'servicio_inmediato',
        'servicio_inmediato': {'tipo_servicio': 'Cambio de aceite'},
    }


def test_servicio_inmediato_con_cliente_y_vehiculo_nuevos(api_mecanico):
    """Test that a new walk-in gets a quoted service with price 0."""
    response = api_mecanico.post(URL, _payload_nuevo())

    assert response.status_code == 201
    assert response.data['message'] == 'Cliente walk-in procesado exitosamente'

    cliente = Cliente.objects.get(pk=response.data['customer_id'])
    assert cliente.nombre == 'Ana'
    assert cliente.whatsapp == '5551234567'

    vehiculo = Vehiculo.objects.get(pk=response.data['vehicle_id'])
    assert vehiculo.customer_id == cliente.customer_id
    assert vehiculo.kilometraje_actual == 0
    assert vehiculo.placa_actual == 'ABC-123'

    result = response.data['result']
    assert result['type'] == 'servicio_inmediato'
    servicio = result['service']
    assert servicio['estado'] == 'cotizado'
    assert servicio['precio'] == 0
    assert servicio['tipo_servicio'] == 'Cambio de aceite'
    assert servicio['descripcion'] == 'Cambio de aceite'
    assert servicio['fecha_servicio'] == timezone.localdate().isoformat()
    assert servicio['vehicle_id'] == vehiculo.vehicle_id


def test_servicio_inmediato_con_descripcion_y_precio(api_mecanico, cliente, vehiculo):
    payload = {
        'cliente_existente_id': cliente.customer_id,
        'vehiculo_existente_id': vehiculo.vehicle_id,
        'accion': 'servicio_inmediato',
        'servicio_inmediato': {
            'tipo_servicio': '  Frenos  ',
            'descripcion': 'Cambio de balatas delanteras',
            'precio_estimado': '1250.50',
        },
    }
    antes = (Cliente.objects.count(), Vehiculo.objects.count())

    response = api_mecanico.post(URL, payload)

    assert response.status_code == 201
    assert (Cliente.objects.count(), Vehiculo.objects.count()) == antes
    servicio = Servicio.objects.get()
    assert servicio.tipo_servicio == 'Frenos'
    assert servicio.descripcion == 'Cambio de balatas delanteras'
    assert servicio.precio == Decimal('1250.50')
    assert servicio.customer_id == cliente.customer_id


def test_placa_duplicada_responde_409_sin_cambios(api_mecanico, vehiculo):
    """Test that a plate already used by an active vehicle rolls everything back."""
    antes = _conteos()

    response = api_mecanico.post(URL, _payload_nuevo(placa=vehiculo.placa_actual))

    assert response.status_code == 409
    assert response.data['error'] == f'Ya existe un vehículo con la placa {vehiculo.placa_actual}'
    assert _conteos() == antes
    assert not Cliente.objects.filter(telefono='5551234567').exists()


def test_placa_de_vehiculo_inactivo_se_puede_reusar(api_mecanico, vehiculo):
    Vehiculo.objects.filter(pk=vehiculo.pk).update(activo=False)

    response = api_mecanico.post(URL, _payload_nuevo(placa=vehiculo.placa_actual))

    assert response.status_code == 201
    assert Vehiculo.objects.filter(placa_actual=vehiculo.placa_actual).count() == 2


def test_telefono_duplicado_responde_409_sin_cambios(api_mecanico, cliente):
    antes = _conteos()

    response = api_mecanico.post(URL, _payload_nuevo(telefono=cliente.telefono))

    assert response.status_code == 409
    assert _conteos() == antes


def test_sin_cliente_responde_400_sin_inserciones(api_mecanico):
    payload = _payload_nuevo()
    del payload['cliente_nuevo']
    antes = _conteos()

    response = api_mecanico.post(URL, payload)

    assert response.status_code == 400
    assert response.data['error'] == 'Datos inválidos'
    assert any(e.startswith('cliente:') for e in response.data['errors'])
    assert _conteos() == antes


def test_accion_sin_datos_de_servicio_responde_400(api_mecanico):
    payload = _payload_nuevo()
    del payload['servicio_inmediato']
    antes = _conteos()

    response = api_mecanico.post(URL, payload)

    assert response.status_code == 400
    assert any(e.startswith('servicio_inmediato:') for e in response.data['errors'])
    assert _conteos() == antes


def test_tipo_servicio_en_blanco_responde_400(api_mecanico):
    payload = _payload_nuevo()
    payload['servicio_inmediato']['tipo_servicio'] = '   '

    response = api_mecanico.post(URL, payload)

    assert response.status_code == 400
    assert Cliente.objects.count() == 0


def test_agendar_cita_copia_contacto_del_cliente(api_seguimiento, cliente, vehiculo):
    """Test that scheduling from the counter creates an appointment for the client."""
    payload = {
        'cliente_existente_id': cliente.customer_id,
        'vehiculo_existente_id': vehiculo.vehicle_id,
        'accion': 'agendar_cita',
        'cita': {'fecha': '2026-11-03', 'hora': '09:30', 'descripcion_breve': 'Afinación mayor'},
    }

    response = api_seguimiento.post(URL, payload)

    assert response.status_code == 201
    result = response.data['result']
    assert result['type'] == 'cita_agendada'

    cita = Oportunidad.objects.get(pk=result['opportunity']['opportunity_id'])
    assert cita.tiene_cita is True
    assert cita.tipo_oportunidad == 'servicio_programado'
    assert cita.estado == 'agendado'
    assert cita.origen_cita == 'walk_in'
    assert cita.titulo == 'Servicio programado - Afinación mayor'
    assert cita.descripcion == 'Cliente walk-in programó cita para Afinación mayor'
    assert cita.cita_nombre_contacto == cliente.nombre
    assert cita.cita_telefono_contacto == cliente.telefono
    assert cita.cita_fecha.isoformat() == '2026-11-03'
    assert Servicio.objects.count() == 0


def test_agendar_cita_sin_datos_de_cita_responde_400(api_mecanico, cliente, vehiculo):
    payload = {
        'cliente_existente_id': cliente.customer_id,
        'vehiculo_existente_id': vehiculo.vehicle_id,
        'accion': 'agendar_cita',
    }

    response = api_mecanico.post(URL, payload)

    assert response.status_code == 400
    assert Oportunidad.objects.count() == 0


def test_requiere_autenticacion(cliente_api, db):
    response = cliente_api().post(URL, _payload_nuevo())

    assert response.status_code == 401
    assert Cliente.objects.count() == 0
