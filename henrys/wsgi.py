"""
WSGI config for Henry's Diagnostics.

Expone el callable WSGI como una variable a nivel de módulo llamada ``application``.
Se usa para deployment en servidores de producción.
"""

import atexit
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'henrys.settings')

application = get_wsgi_application()

from services.database_service import cerrar_conexiones  # noqa: E402

# El pool se crea al arrancar el worker y se libera al terminar
atexit.register(cerrar_conexiones)
