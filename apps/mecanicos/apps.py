from django.apps import AppConfig


class MecanicosConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.mecanicos'
