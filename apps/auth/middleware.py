"""
Firebase Authentication Middleware

Este middleware intercepta todas las requests y valida el token de Firebase.
Si el token es válido, agrega el usuario al request.

Flujo:
1. Extrae el token del header Authorization
2. Valida el token con Firebase Admin SDK
3. Obtiene el uid del usuario
4. Busca el usuario activo en la base de datos
5. Agrega el usuario a request.firebase_user y request.usuario
"""

from django.utils.deprecation import MiddlewareMixin
from django.http import JsonResponse
from firebase_admin import auth as firebase_auth
from services.firebase_service import verificar_token
from apps.users.models import Usuario
import logging

logger = logging.getLogger(__name__)


def datos_usuario(usuario, uid):
    """Diccionario que se expone como request.firebase_user"""
    return {
        'uid': uid,
        'id': usuario.user_id,
        'email': usuario.email,
        'nombre': usuario.nombre,
        'rol': usuario.rol,
        'sucursal_id': usuario.sucursal_id,
    }


class FirebaseAuthMiddleware(MiddlewareMixin):
    """
    Middleware para autenticación con Firebase.

    Valida el ID token de Firebase en cada request y carga
    el usuario correspondiente de la tabla users.
    Sin header Authorization no responde nada: la vista (DRF)
    decide si la ruta requiere autenticación.
    """

    # Rutas que no requieren autenticación
    EXEMPT_URLS = [
        '/admin/',
        '/api/auth/',           # verify-token valida su propio token
    ]

    def process_request(self, request):
        """
        Procesa cada request para validar autenticación.

        Args:
            request: HttpRequest de Django

        Returns:
            None si la autenticación es exitosa (o no hay token)
            JsonResponse con error si falla
        """
        request.firebase_user = None
        request.usuario = None

        is_exempt = any(request.path.startswith(url) for url in self.EXEMPT_URLS)

        auth_header = request.META.get('HTTP_AUTHORIZATION', '')
        if not auth_header.startswith('Bearer '):
            return None

        token = auth_header.split('Bearer ', 1)[1].strip()

        try:
            decoded_token = verificar_token(token)
        except firebase_auth.ExpiredIdTokenError:
            logger.warning("Token de Firebase expirado")
            if is_exempt:
                return None
            return JsonResponse({'error': 'Token expirado'}, status=401)
        except (firebase_auth.InvalidIdTokenError, ValueError):
            logger.warning("Token de Firebase inválido")
            if is_exempt:
                return None
            return JsonResponse({'error': 'Token inválido'}, status=401)
        except Exception as e:
            logger.error(f"Error en autenticación: {str(e)}")
            if is_exempt:
                return None
            return JsonResponse({'error': 'Error de autenticación'}, status=500)

        uid = decoded_token['uid']
        usuario = Usuario.objects.filter(firebase_uid=uid, activo=True).first()

        if usuario is None:
            logger.warning(f"Usuario con uid {uid} no encontrado en base de datos")
            if is_exempt:
                return None
            return JsonResponse({'error': 'Usuario no encontrado en el sistema'}, status=401)

        request.usuario = usuario
        request.firebase_user = datos_usuario(usuario, uid)
        logger.debug(f"Usuario autenticado: {usuario.email} ({usuario.rol})")
        return None
