# app/adapters/inbound/api/v1/router.py

from fastapi import APIRouter
# Manter em ordem alfabética
from app.adapters.inbound.api.v1.endpoints import (
    auth_endpoint,
    encryption_endpoint,
    user_endpoint,
)

api_router = APIRouter()

# Autenticação (login, refresh, logout, sessões)
api_router.include_router(auth_endpoint.router)

# Perfil do usuário (campos criptografados)
api_router.include_router(user_endpoint.router)

# Administração da criptografia de campos
api_router.include_router(encryption_endpoint.router)
