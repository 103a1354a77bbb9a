"""
Permisos personalizados para Henry's Diagnostics

Define los permisos basados en roles:
- administrador: Acceso total
- mecanico: Registra oportunidades y atiende servicios
- seguimiento: Da seguimiento a oportunidades (notas, actualizaciones)
"""

from rest_framework import permissions
from apps.users.models import Usuario


def _rol(request):
    user = getattr(request, 'firebase_user', None)
    if user is None:
        return None
    return user.get('rol')


class IsAuthenticated(permissions.BasePermission):
    """
    Permiso que verifica que el usuario esté autenticado con Firebase.
    """

    def has_permission(self, request, view):
        """
        Verifica si el request tiene un usuario autenticado.

        Args:
            request: Request con firebase_user
            view: Vista que se está accediendo

        Returns:
            bool: True si está autenticado
        """
        return getattr(request, 'firebase_user', None) is not None


class IsAdmin(permissions.BasePermission):
    """
    Permiso que solo permite acceso a usuarios con rol administrador.
    """

    message = 'Se requiere rol administrador'

    def has_permission(self, request, view):
        return _rol(request) == Usuario.ROL_ADMINISTRADOR


class IsMecanicoOrAdmin(permissions.BasePermission):
    """Mecánicos y administradores"""

    message = 'Se requiere rol mecanico o administrador'

    def has_permission(self, request, view):
        return _rol(request) in (Usuario.ROL_MECANICO, Usuario.ROL_ADMINISTRADOR)


class IsSeguimientoOrAdmin(permissions.BasePermission):
    """Personal de seguimiento y administradores"""

    message = 'Se requiere rol seguimiento o administrador'

    def has_permission(self, request, view):
        return _rol(request) in (Usuario.ROL_SEGUIMIENTO, Usuario.ROL_ADMINISTRADOR)


def filter_by_sucursal(queryset, user, campo='branch_id'):
    """
    Filtra un queryset según la sucursal del usuario.

    Función auxiliar para aplicar filtros de sucursal en las vistas.

    Args:
        queryset: QuerySet de Django a filtrar
        user: Diccionario con datos del usuario (firebase_user)
        campo: Columna de sucursal del modelo

    Returns:
        QuerySet filtrado

    Example:
        >>> from apps.auth.permissions import filter_by_sucursal
        >>> mecanicos = Mecanico.objects.filter(activo=True)
        >>> mecanicos = filter_by_sucursal(mecanicos, request.firebase_user)
    """
    # administrador ve todo
    if user.get('rol') == Usuario.ROL_ADMINISTRADOR:
        return queryset

    # Los demás solo ven su sucursal; sin sucursal asignada ven todo
    sucursal_id = user.get('sucursal_id')
    if sucursal_id:
        return queryset.filter(**{campo: sucursal_id})

    return queryset
