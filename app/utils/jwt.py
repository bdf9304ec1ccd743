"""Criação e verificação de tokens JWT.

JWT token creation and verification utility module.

JWT Payload Structure:
    {
        "sub": "user_uuid",          # ID do usuário (User identifier)
        "username": "admin",         # Login do usuário
        "exp": 1234567890,           # Expiração UNIX timestamp
        "type": "access"|"refresh"   # Discriminador do tipo de token
    }
"""

from datetime import datetime, timedelta, timezone
from typing import Any
import jwt

from app.config import settings


def _encode(data: dict[str, Any], expires_in: timedelta, token_type: str) -> str:
    to_encode: dict[str, Any] = data.copy()
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_in, "type": token_type})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(data: dict[str, Any]) -> str:
    """Gera um access token JWT.

    Generate a JWT access token. Expires after
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES (default: 30 min).

    Args:
        data: Payload, normalmente {"sub": user_id, "username": username}

    Returns:
        str: Token JWT codificado (Encoded JWT string)
    """
    return _encode(data, timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES), "access")


def create_refresh_token(data: dict[str, Any]) -> str:
    """Gera um refresh token JWT (validade JWT_REFRESH_TOKEN_EXPIRE_DAYS)."""
    return _encode(data, timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS), "refresh")


def decode_token(token: str) -> dict[str, Any]:
    """Decodifica e valida um token JWT.

    Raises:
        jwt.ExpiredSignatureError: Token expirado (Token has expired)
        jwt.InvalidTokenError: Token inválido (Any other validation failure)
    """
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
