"""
Tests de citas: alta rápida, listados y conversión a servicio.
"""

from datetime import time, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.clientes.models import Cliente
from apps.oportunidades.models import Oportunidad
from apps.servicios.models import Servicio
from apps.vehiculos.models import Vehiculo

pytestmark = [pytest.mark.django_db, pytest.mark.integration]


def _conversion(**extra):
    datos = {
        'tipo_servicio': 'Frenos',
        'precio': '2300.00',
        'new_customer': {'nombre': 'María Gómez'},
        'new_vehicle': {'marca': 'Nissan', 'modelo': 'Versa', 'año': 2019,
                        'placa_actual': 'NVS-456', 'color': 'Gris'},
    }
    datos.update(extra)
    return datos


class TestCitaRapida:
    URL = '/api/appointments'

    def test_crea_cita_sin_vehiculo_ni_cliente(self, api_seguimiento, usuario_seguimiento):
        response = api_seguimiento.post(self.URL, {
            'cita_fecha': '2026-11-05',
            'cita_hora': '10:15',
            'cita_descripcion_breve': 'Jetta blanco, ruido al frenar',
            'cita_telefono_contacto': '5557776666',
            'cita_nombre_contacto': 'Pedro Ruiz',
        })

        assert response.status_code == 201
        assert response.data['message'] == 'Cita creada exitosamente'
        cita = Oportunidad.objects.get(pk=response.data['appointment']['opportunity_id'])
        assert cita.tiene_cita is True
        assert cita.vehicle_id is None
        assert cita.customer_id is None
        assert cita.tipo_oportunidad == 'cita_agendada'
        assert cita.estado == 'agendado'
        assert cita.prioridad == 'media'
        assert cita.titulo == 'Cita - Jetta blanco, ruido al frenar'
        assert cita.descripcion == 'Cita agendada para Pedro Ruiz - Jetta blanco, ruido al frenar'
        assert cita.usuario_creador_id == usuario_seguimiento.user_id

    def test_campos_faltantes_responde_400(self, api_seguimiento):
        response = api_seguimiento.post(self.URL, {'cita_fecha': '2026-11-05'})

        assert response.status_code == 400
        assert response.data['error'] == 'Datos inválidos'
        campos = {e.split(':')[0] for e in response.data['errors']}
        assert {'cita_hora', 'cita_descripcion_breve', 'cita_telefono_contacto',
                'cita_nombre_contacto'} <= campos
        assert Oportunidad.objects.count() == 0

    def test_tambien_disponible_en_opportunities(self, api_mecanico):
        response = api_mecanico.post('/api/opportunities/appointments', {
            'cita_fecha': '2026-11-05',
            'cita_hora': '10:15',
            'cita_descripcion_breve': 'Aveo rojo',
            'cita_telefono_contacto': '5557776666',
            'cita_nombre_contacto': 'Pedro Ruiz',
            'titulo': 'Cita por teléfono',
        })

        assert response.status_code == 201
        assert response.data['appointment']['titulo'] == 'Cita por teléfono'


class TestListados:

    def test_rango_requiere_ambas_fechas(self, api_mecanico):
        response = api_mecanico.get('/api/appointments', {'start_date': '2026-11-01'})

        assert response.status_code == 400
        assert response.data['success'] is False

    def test_rango_de_fechas(self, api_mecanico, crear_cita):
        hoy = timezone.localdate()
        primera = crear_cita(hoy, time(9, 0))
        segunda = crear_cita(hoy + timedelta(days=2), time(8, 0))
        crear_cita(hoy + timedelta(days=10))

        response = api_mecanico.get('/api/appointments', {
            'start_date': hoy.isoformat(),
            'end_date': (hoy + timedelta(days=3)).isoformat(),
        })

        assert response.status_code == 200
        ids = [c['opportunity_id'] for c in response.data['appointments']]
        assert ids == [primera.opportunity_id, segunda.opportunity_id]

    def test_citas_de_hoy_con_estado_de_servicio(self, api_mecanico, crear_cita):
        hoy = timezone.localdate()
        tarde = crear_cita(hoy, time(17, 0))
        manana = crear_cita(hoy, time(8, 0))
        crear_cita(hoy + timedelta(days=1))

        response = api_mecanico.get('/api/appointments/today')

        assert response.status_code == 200
        assert response.data['date'] == hoy.isoformat()
        citas = response.data['appointments']
        assert [c['opportunity_id'] for c in citas] == [manana.opportunity_id, tarde.opportunity_id]
        assert citas[0]['service_status'] is None
        assert citas[0]['existing_service_id'] is None


class TestConvertirEnServicio:

    def url(self, cita):
        return f'/api/appointments/{cita.opportunity_id}/convert-to-service'

    def test_cita_rapida_crea_cliente_vehiculo_y_servicio(self, api_mecanico, crear_cita):
        cita = crear_cita(timezone.localdate())

        response = api_mecanico.post(self.url(cita), _conversion())

        assert response.status_code == 200
        assert response.data['success'] is True
        assert response.data['appointment_id'] == cita.opportunity_id

        cliente = Cliente.objects.get(pk=response.data['created_customer_id'])
        assert cliente.telefono == cita.cita_telefono_contacto
        assert cliente.whatsapp == cita.cita_telefono_contacto
        vehiculo = Vehiculo.objects.get(pk=response.data['created_vehicle_id'])
        assert vehiculo.customer_id == cliente.customer_id

        servicio = response.data['service']
        assert servicio['estado'] == 'autorizado'
        assert servicio['precio'] == Decimal('2300.00')
        assert servicio['descripcion'] == 'Servicio programado: Ruido en frenos'
        assert servicio['customer_name'] == 'María Gómez'
        assert servicio['placa_actual'] == 'NVS-456'
        assert servicio['año'] == 2019

        cita.refresh_from_db()
        assert cita.converted_to_service_id == servicio['service_id']
        assert cita.tiene_cita is False
        assert cita.customer_id == cliente.customer_id
        assert cita.vehicle_id == vehiculo.vehicle_id

    def test_con_cliente_y_vehiculo_existentes(self, api_mecanico, crear_cita, cliente, vehiculo):
        cita = crear_cita(timezone.localdate())

        response = api_mecanico.post(self.url(cita), {
            'tipo_servicio': 'Suspensión',
            'customer_id': cliente.customer_id,
            'vehicle_id': vehiculo.vehicle_id,
        })

        assert response.status_code == 200
        assert response.data['created_customer_id'] is None
        assert response.data['created_vehicle_id'] is None
        servicio = Servicio.objects.get()
        assert servicio.precio == 0
        assert servicio.customer_id == cliente.customer_id

    def test_segunda_conversion_responde_409(self, api_mecanico, crear_cita, cliente, vehiculo):
        """Test that an appointment turns into a service only once."""
        cita = crear_cita(timezone.localdate(), customer=cliente, vehicle=vehiculo)
        primera = api_mecanico.post(self.url(cita), {'tipo_servicio': 'Frenos'})
        assert primera.status_code == 200

        # La primera conversión apaga tiene_cita; se reactiva para forzar el rechazo por servicio ligado
        Oportunidad.objects.filter(pk=cita.pk).update(tiene_cita=True)
        segunda = api_mecanico.post(self.url(cita), {'tipo_servicio': 'Frenos'})

        assert segunda.status_code == 409
        assert segunda.data['success'] is False
        assert segunda.data['existing_service_id'] == primera.data['service']['service_id']
        assert Servicio.objects.count() == 1

    def test_cita_ya_convertida_deja_de_ser_cita(self, api_mecanico, crear_cita, cliente, vehiculo):
        cita = crear_cita(timezone.localdate(), customer=cliente, vehicle=vehiculo)
        api_mecanico.post(self.url(cita), {'tipo_servicio': 'Frenos'})

        response = api_mecanico.post(self.url(cita), {'tipo_servicio': 'Frenos'})

        assert response.status_code == 404
        assert Servicio.objects.count() == 1

    def test_placa_duplicada_responde_409_sin_cambios(self, api_mecanico, crear_cita, vehiculo):
        cita = crear_cita(timezone.localdate())
        nuevo_vehiculo = _conversion()['new_vehicle']
        nuevo_vehiculo['placa_actual'] = vehiculo.placa_actual
        clientes = Cliente.objects.count()

        response = api_mecanico.post(self.url(cita), _conversion(new_vehicle=nuevo_vehiculo))

        assert response.status_code == 409
        assert response.data['success'] is False
        assert response.data['error'] == f"Ya existe un vehículo con la placa {vehiculo.placa_actual}"
        assert Servicio.objects.count() == 0
        assert Cliente.objects.count() == clientes
        cita.refresh_from_db()
        assert cita.converted_to_service_id is None
        assert cita.tiene_cita is True

    def test_sin_cliente_responde_400(self, api_mecanico, crear_cita, vehiculo):
        cita = crear_cita(timezone.localdate())

        response = api_mecanico.post(self.url(cita), {
            'tipo_servicio': 'Frenos',
            'vehicle_id': vehiculo.vehicle_id,
        })

        assert response.status_code == 400
        assert Servicio.objects.count() == 0

    def test_cita_inexistente_responde_404(self, api_mecanico):
        response = api_mecanico.post('/api/appointments/4040/convert-to-service', {'tipo_servicio': 'X'})

        assert response.status_code == 404
        assert response.data == {'error': 'Cita no encontrada o no es una cita válida', 'success': False}

    def test_ruta_de_opportunities(self, api_mecanico, crear_cita, cliente, vehiculo):
        cita = crear_cita(timezone.localdate(), customer=cliente, vehicle=vehiculo)

        response = api_mecanico.post(
            f'/api/opportunities/{cita.opportunity_id}/convert-to-service',
            {'tipo_servicio': 'Afinación', 'descripcion': 'Afinación completa'},
        )

        assert response.status_code == 200
        assert response.data['service']['descripcion'] == 'Afinación completa'
