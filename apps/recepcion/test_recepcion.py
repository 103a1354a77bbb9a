"""
Tests de conversión de oportunidades en citas, recepción de citas y agenda.
"""

from datetime import date, time, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.oportunidades.models import NotaOportunidad, Oportunidad
from apps.servicios.models import Servicio

pytestmark = [pytest.mark.django_db, pytest.mark.integration]


@pytest.fixture
def oportunidad(cliente, vehiculo, usuario_mecanico):
    return Oportunidad.objects.create(
        vehicle=vehiculo,
        customer=cliente,
        usuario_creador=usuario_mecanico,
        tipo_oportunidad='mantenimiento',
        titulo='Mantenimiento',
        descripcion='Toca servicio de 50,000 km',
        servicio_sugerido='Afinación',
        precio_estimado=Decimal('1800.00'),
    )


class TestConvertirOportunidad:
    URL = '/api/reception/convert-opportunity'

    def test_convierte_en_cita_con_contacto_del_cliente(self, api_seguimiento, oportunidad, cliente):
        response = api_seguimiento.post(self.URL, {
            'opportunity_id': oportunidad.opportunity_id,
            'cita_fecha': '2026-11-10',
            'cita_hora': '11:00',
        })

        assert response.status_code == 200
        assert response.data['message'] == 'Opportunity convertida en cita exitosamente'

        oportunidad.refresh_from_db()
        assert oportunidad.tiene_cita is True
        assert oportunidad.cita_fecha == date(2026, 11, 10)
        assert oportunidad.cita_hora == time(11, 0)
        assert oportunidad.cita_descripcion_breve == 'Afinación'
        assert oportunidad.cita_nombre_contacto == cliente.nombre
        assert oportunidad.cita_telefono_contacto == cliente.telefono
        assert oportunidad.origen_cita == 'opportunity'
        assert oportunidad.estado == 'agendado'
        assert NotaOportunidad.objects.count() == 0

    def test_con_notas_agrega_nota_agendado(self, api_seguimiento, oportunidad, usuario_seguimiento):
        response = api_seguimiento.post(self.URL, {
            'opportunity_id': oportunidad.opportunity_id,
            'cita_fecha': '2026-11-10',
            'cita_hora': '11:00',
            'notas': 'Prefiere temprano',
        })

        assert response.status_code == 200
        nota = NotaOportunidad.objects.get(opportunity=oportunidad)
        assert nota.resultado == 'agendado'
        assert nota.notas == 'Prefiere temprano'
        assert nota.usuario_id == usuario_seguimiento.user_id

    def test_oportunidad_inexistente_responde_404(self, api_seguimiento, db):
        response = api_seguimiento.post(self.URL, {
            'opportunity_id': 999,
            'cita_fecha': '2026-11-10',
            'cita_hora': '11:00',
        })

        assert response.status_code == 404

    def test_oportunidad_sin_cliente_responde_404(self, api_seguimiento, oportunidad):
        Oportunidad.objects.filter(pk=oportunidad.pk).update(customer=None)

        response = api_seguimiento.post(self.URL, {
            'opportunity_id': oportunidad.opportunity_id,
            'cita_fecha': '2026-11-10',
            'cita_hora': '11:00',
        })

        assert response.status_code == 404
        oportunidad.refresh_from_db()
        assert oportunidad.tiene_cita is False

    def test_sin_fecha_responde_400(self, api_seguimiento, oportunidad):
        response = api_seguimiento.post(self.URL, {'opportunity_id': oportunidad.opportunity_id})

        assert response.status_code == 400


class TestRecepcionarCita:

    def url(self, opportunity_id):
        return f'/api/reception/recepcionar/{opportunity_id}'

    def test_cita_completa_crea_servicio_cotizado(self, api_mecanico, oportunidad, usuario_mecanico):
        Oportunidad.objects.filter(pk=oportunidad.pk).update(
            tiene_cita=True, cita_fecha=timezone.localdate(), cita_hora=time(9, 0),
            estado='agendado',
        )

        response = api_mecanico.post(self.url(oportunidad.opportunity_id), {
            'usuario_mecanico': usuario_mecanico.user_id,
        })

        assert response.status_code == 201
        servicio = Servicio.objects.get()
        assert servicio.estado == 'cotizado'
        assert servicio.tipo_servicio == 'Afinación'
        assert servicio.descripcion == 'Toca servicio de 50,000 km'
        assert servicio.precio == Decimal('1800.00')
        assert servicio.usuario_mecanico_id == usuario_mecanico.user_id
        assert servicio.fecha_servicio == timezone.localdate()

        oportunidad.refresh_from_db()
        assert oportunidad.estado == 'en_proceso'
        # La recepción no liga la cita con el servicio
        assert oportunidad.converted_to_service_id is None
        assert response.data['opportunity']['estado'] == 'en_proceso'

    def test_valores_explicitos_tienen_prioridad(self, api_mecanico, oportunidad):
        Oportunidad.objects.filter(pk=oportunidad.pk).update(tiene_cita=True)

        response = api_mecanico.post(self.url(oportunidad.opportunity_id), {
            'tipo_servicio': 'Diagnóstico',
            'descripcion': 'Revisar testigo de motor',
            'precio_estimado': '450.00',
        })

        assert response.status_code == 201
        servicio = Servicio.objects.get()
        assert servicio.tipo_servicio == 'Diagnóstico'
        assert servicio.descripcion == 'Revisar testigo de motor'
        assert servicio.precio == Decimal('450.00')

    def test_cita_rapida_responde_400_sin_servicio(self, api_mecanico, crear_cita):
        cita = crear_cita(timezone.localdate())

        response = api_mecanico.post(self.url(cita.opportunity_id), {})

        assert response.status_code == 400
        assert 'processWalkInClient' in response.data['error']
        assert Servicio.objects.count() == 0
        cita.refresh_from_db()
        assert cita.estado == 'agendado'

    def test_oportunidad_sin_cita_responde_404(self, api_mecanico, oportunidad):
        response = api_mecanico.post(self.url(oportunidad.opportunity_id), {})

        assert response.status_code == 404
        assert Servicio.objects.count() == 0

    def test_walk_in_agendado_luego_recepcionado(self, api_mecanico, cliente, vehiculo):
        """Test that a walk-in appointment is received with the default values."""
        walk_in = api_mecanico.post('/api/reception/walk-in', {
            'cliente_existente_id': cliente.customer_id,
            'vehiculo_existente_id': vehiculo.vehicle_id,
            'accion': 'agendar_cita',
            'cita': {'fecha': timezone.localdate().isoformat(), 'hora': '16:00',
                     'descripcion_breve': 'Alineación'},
        })
        assert walk_in.status_code == 201
        opportunity_id = walk_in.data['result']['opportunity']['opportunity_id']

        response = api_mecanico.post(self.url(opportunity_id), {})

        assert response.status_code == 201
        servicio = Servicio.objects.get()
        assert servicio.tipo_servicio == 'Servicio general'
        assert servicio.descripcion == 'Cliente walk-in programó cita para Alineación'
        assert servicio.precio == 0
        assert servicio.estado == 'cotizado'


class TestAgendaRecepcion:
    URL = '/api/reception/citas'

    def test_citas_del_dia_con_tipo(self, api_mecanico, crear_cita, cliente, vehiculo):
        hoy = timezone.localdate()
        rapida = crear_cita(hoy, time(12, 0))
        completa = crear_cita(hoy, time(8, 30), customer=cliente, vehicle=vehiculo)
        crear_cita(hoy, time(9, 0), estado='perdido')
        crear_cita(hoy + timedelta(days=1))

        response = api_mecanico.get(self.URL)

        assert response.status_code == 200
        assert response.data['fecha'] == hoy.isoformat()
        citas = response.data['citas']
        assert [c['opportunity_id'] for c in citas] == [completa.opportunity_id, rapida.opportunity_id]
        assert citas[0]['tipo_cita'] == 'cita_completa'
        assert citas[0]['placa_actual'] == vehiculo.placa_actual
        assert citas[1]['tipo_cita'] == 'cita_rapida'
        assert citas[1]['cliente_completo'] is None

    def test_fecha_por_parametro(self, api_mecanico, crear_cita):
        manana = timezone.localdate() + timedelta(days=1)
        cita = crear_cita(manana)

        response = api_mecanico.get(self.URL, {'fecha': manana.isoformat()})

        assert [c['opportunity_id'] for c in response.data['citas']] == [cita.opportunity_id]

    def test_fecha_invalida_responde_400(self, api_mecanico):
        response = api_mecanico.get(self.URL, {'fecha': 'mañana'})

        assert response.status_code == 400
