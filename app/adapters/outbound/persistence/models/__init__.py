# app/adapters/outbound/persistence/models/__init__.py

"""
Módulo de modelos de dados.

Este módulo exporta todos os modelos SQLAlchemy do sistema,
facilitando a importação e uso em outros módulos.
"""

# Importar Base
from app.adapters.outbound.persistence.models.base_model import Base, register_all_events

# Importar modelos principais
from app.adapters.outbound.persistence.models.user_model import User, Organization
from app.adapters.outbound.persistence.models.token_blacklist_model import TokenBlacklist

# Exportar todos os modelos
__all__ = [
    # Base
    "Base",
    "register_all_events",

    # Modelos principais
    "User",
    "Organization",
    "TokenBlacklist",
]
