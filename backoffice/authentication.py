"""
Token authentication for legacy clients.

Subclass of Django REST framework's ``TokenAuthentication`` kept in its
own module so that settings can reference a stable import path without
pulling in any view code (which would cause circular imports while DRF
initialises authentication classes).  JWT bearer tokens are handled by
SimpleJWT's ``JWTAuthentication``, configured alongside this class.
"""
from __future__ import annotations

from rest_framework import authentication, exceptions


class TokenAuthentication(authentication.TokenAuthentication):
    """``Authorization: Token <key>``; disabled accounts are rejected."""

    keyword = 'Token'

    def authenticate_credentials(self, key):
        user, token = super().authenticate_credentials(key)
        if not user.is_active:
            raise exceptions.AuthenticationFailed('Akun dinonaktifkan.')
        return user, token
