"""
Vistas de Autenticación

Endpoints para validar tokens de Firebase y obtener información del usuario.
"""

from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.response import Response
from rest_framework import status
from firebase_admin import auth as firebase_auth
from services.firebase_service import verificar_token
from apps.users.models import Usuario
from .middleware import datos_usuario
import logging

logger = logging.getLogger(__name__)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([])  # No requiere autenticación previa
def verify_token(request):
    """
    Verifica un token de Firebase y retorna información del usuario.

    Body:
        {"token": "<Firebase ID token>"}
    """
    token = request.data.get('token')

    if not token:
        return Response({
            'error': 'Token no proporcionado'
        }, status=status.HTTP_400_BAD_REQUEST)

    try:
        decoded_token = verificar_token(token)
    except firebase_auth.ExpiredIdTokenError:
        logger.warning("Token de Firebase expirado")
        return Response({'error': 'Token expirado'}, status=status.HTTP_401_UNAUTHORIZED)
    except (firebase_auth.InvalidIdTokenError, ValueError):
        logger.warning("Token de Firebase inválido")
        return Response({'error': 'Token inválido'}, status=status.HTTP_401_UNAUTHORIZED)

    uid = decoded_token['uid']
    usuario = Usuario.objects.filter(firebase_uid=uid, activo=True).first()

    if usuario is None:
        logger.warning(f"Usuario con uid {uid} no encontrado en base de datos")
        return Response({
            'error': 'Usuario no encontrado en el sistema'
        }, status=status.HTTP_404_NOT_FOUND)

    logger.info(f"Token verificado para usuario: {usuario.email}")
    return Response({'user': datos_usuario(usuario, uid)}, status=status.HTTP_200_OK)


@api_view(['GET'])
def get_current_user(request):
    """
    Obtiene información del usuario actualmente autenticado.

    Response:
        {
            "user": {
                "uid": "firebase_uid",
                "id": 1,
                "email": "usuario@example.com",
                "nombre": "Juan Pérez",
                "rol": "administrador",
                "sucursal_id": 1
            }
        }

    Errors:
        401: No autenticado
    """
    return Response({
        'user': request.firebase_user
    }, status=status.HTTP_200_OK)
