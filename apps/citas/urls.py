"""
URLs del módulo de citas
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter(trailing_slash=False)
router.include_root_view = False
router.register(r'appointments', views.CitaViewSet, basename='appointment')

urlpatterns = [
    path('', include(router.urls)),
]
