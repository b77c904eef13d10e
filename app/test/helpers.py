# app/test/helpers.py

"""Funções auxiliares compartilhadas pelos testes de rota."""

from http.cookies import SimpleCookie
from typing import Optional

from app.adapters.configuration.config import settings

API = settings.API_PREFIX

STUDENT_PASSWORD = "StudentPass123!"
ADMIN_PASSWORD = "AdminPass123!"


def read_refresh_cookie(response) -> Optional[str]:
    """Valor do cookie de refresh no Set-Cookie da resposta (None se ausente)."""
    for header in response.headers.get_list("set-cookie"):
        cookie = SimpleCookie()
        cookie.load(header)
        if settings.REFRESH_COOKIE_NAME in cookie:
            return cookie[settings.REFRESH_COOKIE_NAME].value
    return None


def refresh_cookie_cleared(response) -> bool:
    """True se a resposta manda o navegador apagar o cookie de refresh."""
    for header in response.headers.get_list("set-cookie"):
        if header.startswith(f"{settings.REFRESH_COOKIE_NAME}=") and "max-age=0" in header.lower():
            return True
    return False


def refresh_cookie_header(refresh_token: str) -> dict:
    return {"Cookie": f"{settings.REFRESH_COOKIE_NAME}={refresh_token}"}


def bearer(access_token: str) -> dict:
    return {"Authorization": f"Bearer {access_token}"}
