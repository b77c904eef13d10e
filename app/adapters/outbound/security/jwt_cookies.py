# app/adapters/outbound/security/jwt_cookies.py

"""
Transporte de tokens JWT em HTTP.

O refresh token viaja apenas num cookie HttpOnly (nunca visível para
JavaScript); o access token chega no header ``Authorization: Bearer``.
"""

from datetime import timedelta
from typing import Optional
from fastapi import Response, Request
import logging

from app.adapters.configuration.config import settings

# Configurar logger
logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer"


class JWTCookieManager:
    """
    Gerenciador de cookies e headers JWT.

    Esta classe fornece métodos para:
    - Definir o cookie seguro do refresh token
    - Remover esse cookie no logout
    - Ler o refresh token do cookie
    - Extrair o access token do header Authorization
    """

    def __init__(self, app_settings=settings):
        """Inicializa o gerenciador com configurações do settings."""
        self.cookie_name = app_settings.REFRESH_COOKIE_NAME
        self.cookie_domain = app_settings.COOKIE_DOMAIN
        self.cookie_path = app_settings.COOKIE_PATH
        self.cookie_samesite = app_settings.COOKIE_SAMESITE
        self.cookie_secure = app_settings.is_production
        self.refresh_token_expire = app_settings.refresh_token_lifetime

    def set_refresh_token_cookie(
            self,
            response: Response,
            token: str,
            expires_delta: Optional[timedelta] = None
    ):
        """
        Define um cookie com o token de refresh (max-age renovado a cada emissão).

        Args:
            response: Objeto Response do FastAPI
            token: Token JWT de refresh
            expires_delta: Tempo personalizado de expiração (opcional)
        """
        if expires_delta is None:
            expires_delta = self.refresh_token_expire

        response.set_cookie(
            key=self.cookie_name,
            value=token,
            max_age=int(expires_delta.total_seconds()),
            path=self.cookie_path,
            domain=self.cookie_domain,
            secure=self.cookie_secure,  # Secure em produção
            httponly=True,  # Protege contra XSS
            samesite=self.cookie_samesite
        )

    def unset_refresh_token_cookie(self, response: Response):
        """
        Remove o cookie do refresh token (mesmos path/domain usados ao definir).
        """
        response.delete_cookie(
            key=self.cookie_name,
            path=self.cookie_path,
            domain=self.cookie_domain,
            secure=self.cookie_secure,
            httponly=True,
            samesite=self.cookie_samesite,
        )

    def get_token_from_cookie(self, request: Request) -> Optional[str]:
        """
        Extrai o refresh token do cookie.

        Returns:
            Token JWT ou None se não encontrado
        """
        return request.cookies.get(self.cookie_name) or None

    @staticmethod
    def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
        """
        Extrai o token de um header ``Authorization: Bearer <token>``.

        Falha de forma suave: header ausente ou malformado devolve None, e quem
        chama decide se acesso anônimo é permitido.
        """
        if not authorization:
            return None

        parts = authorization.split()
        if len(parts) != 2 or parts[0].lower() != BEARER_PREFIX:
            logger.debug("Malformed Authorization header")
            return None

        return parts[1]


# Instância global
jwt_cookie_manager = JWTCookieManager()
