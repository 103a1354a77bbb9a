"""
Puente entre FirebaseAuthMiddleware y Django REST Framework.

El middleware ya validó el token; aquí solo se expone el usuario a DRF
para que ``request.user`` funcione y las rutas protegidas respondan 401
cuando no hay credenciales.
"""

from rest_framework.authentication import BaseAuthentication


class FirebaseAuthentication(BaseAuthentication):
    """
    Espera: Authorization: Bearer <Firebase ID token>
    """

    def authenticate(self, request):
        usuario = getattr(request._request, 'usuario', None)
        if usuario is None:
            return None

        # DRF espera (user, auth)
        return (usuario, None)

    def authenticate_header(self, request):
        return 'Bearer'
