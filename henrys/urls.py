"""
Henry's Diagnostics URL Configuration

Este archivo define todas las rutas principales del proyecto.
Cada app tiene su propio archivo urls.py que se incluye bajo /api/.
"""

from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse


def api_root(request):
    """Vista raíz de la API"""
    return JsonResponse({
        'message': "Henry's Diagnostics API funcionando correctamente",
        'version': '1.0.0',
        'endpoints': {
            'auth': '/api/auth',
            'reception': '/api/reception',
            'appointments': '/api/appointments',
            'opportunities': '/api/opportunities',
            'vehicles': '/api/vehicles',
            'mechanics': '/api/mechanics',
            'branches': '/api/branches',
            'users': '/api/users',
        }
    })


urlpatterns = [
    # API Root
    path('', api_root, name='api-root'),
    path('api/', api_root, name='api-root-with-prefix'),

    # Django Admin
    path('admin/', admin.site.urls),

    # API Endpoints
    path('api/auth/', include('apps.auth.urls')),
    path('api/', include('apps.recepcion.urls')),
    path('api/', include('apps.citas.urls')),
    path('api/', include('apps.oportunidades.urls')),
    path('api/', include('apps.vehiculos.urls')),
    path('api/', include('apps.mecanicos.urls')),
    path('api/', include('apps.sucursales.urls')),
    path('api/', include('apps.users.urls')),
]
