"""
URLs del módulo de recepción
"""

from django.urls import path
from . import views

urlpatterns = [
    path('reception/walk-in', views.walk_in, name='reception-walk-in'),
    path('reception/convert-opportunity', views.convert_opportunity, name='reception-convert-opportunity'),
    path('reception/recepcionar/<int:opportunity_id>', views.recepcionar, name='reception-recepcionar'),
    path('reception/citas', views.citas, name='reception-citas'),
]
