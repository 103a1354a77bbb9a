from django.apps import AppConfig


class RecepcionConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.recepcion'
    verbose_name = 'Recepción'
