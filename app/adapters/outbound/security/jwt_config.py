# app/adapters/outbound/security/jwt_config.py

"""Configuração global de JWT: um segredo por classe de token."""

import logging
from datetime import timedelta

from app.adapters.configuration.config import settings
from app.domain.models.identity_claims import TokenClass

logger = logging.getLogger(__name__)


class JWTConfig:
    """Configuração centralizada para JWT."""

    def __init__(
            self,
            access_secret: str,
            refresh_secret: str,
            algorithm: str = "HS256",
            access_expiry: timedelta = timedelta(minutes=15),
            refresh_expiry: timedelta = timedelta(days=7),
    ):
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh tokens must be signed with different secrets")
        self._secrets = {
            TokenClass.ACCESS: access_secret,
            TokenClass.REFRESH: refresh_secret,
        }
        self._expiries = {
            TokenClass.ACCESS: access_expiry,
            TokenClass.REFRESH: refresh_expiry,
        }
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, app_settings=settings) -> "JWTConfig":
        return cls(
            access_secret=app_settings.JWT_ACCESS_SECRET.get_secret_value(),
            refresh_secret=app_settings.JWT_REFRESH_SECRET.get_secret_value(),
            algorithm=app_settings.JWT_ALGORITHM,
            access_expiry=app_settings.access_token_lifetime,
            refresh_expiry=app_settings.refresh_token_lifetime,
        )

    def get_secret_key(self, token_class: TokenClass) -> str:
        """Retorna a chave secreta da classe de token."""
        return self._secrets[token_class]

    def get_expiry(self, token_class: TokenClass) -> timedelta:
        """Retorna o tempo de vida da classe de token."""
        return self._expiries[token_class]


# Instância global usada pelos adapters
jwt_config = JWTConfig.from_settings()
