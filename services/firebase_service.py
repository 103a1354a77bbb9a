"""
Firebase Service

Este módulo centraliza las interacciones con Firebase Auth.
El backend no emite tokens: el frontend inicia sesión con Firebase y envía
el ID token como ``Authorization: Bearer <token>``.

Funciones principales:
- initialize_firebase(): Inicializa Firebase Admin SDK
- verificar_token(token): Valida un ID token y regresa sus claims
- crear_cuenta(email, password, nombre): Crea una cuenta en Firebase Auth
"""

import os
import firebase_admin
from firebase_admin import auth, credentials
from django.conf import settings
import logging
from typing import Dict

logger = logging.getLogger(__name__)

# Variable global para mantener la instancia de Firebase
_firebase_initialized = False


def initialize_firebase():
    """
    Inicializa Firebase Admin SDK con las credenciales del proyecto.

    Es seguro llamarla múltiples veces.

    Returns:
        bool: True si la inicialización fue exitosa
    """
    global _firebase_initialized

    if _firebase_initialized:
        return True

    try:
        # Intentar usar archivo de credenciales si existe
        creds_path = getattr(settings, 'FIREBASE_CREDENTIALS_PATH', None)
        if creds_path:
            full_path = os.path.join(settings.BASE_DIR, creds_path)
            if os.path.exists(full_path):
                cred = credentials.Certificate(full_path)
                firebase_admin.initialize_app(cred)
                _firebase_initialized = True
                logger.info("Firebase Admin SDK inicializado desde archivo JSON")
                return True

        # Si no hay archivo, usar variables de entorno
        config = settings.FIREBASE_CONFIG

        if not config.get('project_id'):
            logger.warning("FIREBASE_PROJECT_ID no está configurado - Firebase deshabilitado")
            return False

        cred_dict = {
            "type": "service_account",
            "project_id": config['project_id'],
            "private_key_id": config.get('private_key_id', ''),
            "private_key": config.get('private_key', ''),
            "client_email": config.get('client_email', ''),
            "client_id": config.get('client_id', ''),
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "auth_provider_x509_cert_url": "https://www.googleapis.com/oauth2/v1/certs",
        }

        cred = credentials.Certificate(cred_dict)
        firebase_admin.initialize_app(cred)

        _firebase_initialized = True
        logger.info("Firebase Admin SDK inicializado correctamente")
        return True

    except Exception as e:
        logger.error(f"Error al inicializar Firebase: {str(e)}")
        return False


def verificar_token(token: str) -> Dict:
    """
    Valida un ID token de Firebase.

    Args:
        token: ID token enviado por el frontend

    Returns:
        Dict con los claims del token (incluye 'uid' y normalmente 'email')

    Raises:
        firebase_admin.auth.InvalidIdTokenError: Token inválido
        firebase_admin.auth.ExpiredIdTokenError: Token expirado
    """
    initialize_firebase()
    return auth.verify_id_token(token)


def crear_cuenta(email: str, password: str, nombre: str) -> str:
    """
    Crea una cuenta en Firebase Auth.

    Args:
        email: Correo del usuario
        password: Contraseña inicial
        nombre: Nombre para mostrar

    Returns:
        str: uid asignado por Firebase
    """
    initialize_firebase()
    cuenta = auth.create_user(email=email, password=password, display_name=nombre)
    logger.info(f"Cuenta creada en Firebase Auth: {cuenta.uid} ({email})")
    return cuenta.uid


def eliminar_cuenta(uid: str):
    """Elimina una cuenta de Firebase Auth (se usa para deshacer altas fallidas)."""
    initialize_firebase()
    auth.delete_user(uid)
    logger.info(f"Cuenta eliminada de Firebase Auth: {uid}")
