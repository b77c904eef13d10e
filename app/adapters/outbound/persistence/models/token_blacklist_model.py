# app/adapters/outbound/persistence/models/token_blacklist_model.py

"""
Modelo para blacklist de tokens.

Este módulo define o modelo usado para armazenar o hash de tokens
revogados (logout) para prevenir sua reutilização antes da expiração.
"""

from sqlalchemy import Column, Integer, String, DateTime, Index
from app.adapters.outbound.persistence.models.base_model import Base


class TokenBlacklist(Base):
    """
    Modelo para armazenar tokens revogados.

    O token em si nunca é gravado, apenas o seu SHA-256.

    Attributes:
        id: Identificador da linha
        token_hash: SHA-256 (hex, 64 caracteres) do token revogado
        expires_at: Data e hora de expiração original do token (UTC)
        created_at: Data e hora em que o token foi revogado (UTC)
    """
    __tablename__ = "token_blacklist"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token_hash = Column(String(64), nullable=False, unique=True)
    expires_at = Column(DateTime(timezone=False), nullable=False)  # explicitamente timezone=False
    created_at = Column(DateTime(timezone=False), nullable=False)

    __table_args__ = (
        Index("idx_token_blacklist_hash", "token_hash"),
        Index("idx_token_blacklist_expires", "expires_at"),
    )
