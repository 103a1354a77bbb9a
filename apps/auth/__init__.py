"""
Módulo de Autenticación

Este módulo maneja la autenticación con Firebase Auth.
Valida ID tokens de Firebase y gestiona permisos por rol.
"""
