# app/adapters/outbound/persistence/models/user_model.py

"""
Modelo de usuário e organização.

Only the columns the authentication subsystem reads or writes are mapped
here; the business tables of the training platform live elsewhere.
"""

from sqlalchemy import (
    Column,
    Boolean,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
)
from sqlalchemy.orm import relationship

from app.adapters.outbound.persistence.models.base_model import Base
from app.domain.models.identity_claims import IdentityClaims, UserRole


class Organization(Base):
    """
    Organização (empresa ou centro de treinamento) à qual usuários pertencem.
    """
    __tablename__ = "organizations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=False), nullable=True)

    users = relationship("User", back_populates="organization")

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name={self.name})>"


class User(Base):
    """
    Modelo de usuário do sistema.

    Attributes:
        id: Identificador numérico do usuário
        username: Nome de login (comparação exata, sensível a maiúsculas)
        email: Email do usuário (opcional)
        password_hash: Hash bcrypt da senha
        role: Papel do usuário (student, instructor, admin, ...)
        organization_id: Organização do usuário (opcional)
        is_active: Indica se o usuário está ativo
        token_version: Incrementado para invalidar todos os tokens já emitidos
        phone: Envelope criptografado do telefone (iv:tag:ciphertext)
        created_at: Data e hora de criação (UTC)
        updated_at: Data e hora da última atualização (UTC)
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(150), unique=True, nullable=False, index=True)
    email = Column(String(255), nullable=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=UserRole.STUDENT.value)
    organization_id = Column(Integer, ForeignKey("organizations.id", ondelete="SET NULL"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    token_version = Column(Integer, default=0, nullable=False)
    phone = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=False), nullable=True)
    updated_at = Column(DateTime(timezone=False), nullable=True)

    organization = relationship(
        "Organization",
        back_populates="users",
        lazy="joined"  # organization_name vai para os claims em todo login/refresh
    )

    def __repr__(self) -> str:
        """Representação em string do objeto User (sem dados sensíveis)."""
        return f"<User(username={self.username}, role={self.role}, active={self.is_active})>"

    @property
    def organization_name(self):
        return self.organization.name if self.organization is not None else None

    def to_claims(self, session_id=None) -> IdentityClaims:
        """
        Converte o usuário nos claims que vão dentro dos tokens.

        Args:
            session_id: Sessão a ser preservada (refresh) ou None

        Returns:
            IdentityClaims com o estado atual do usuário
        """
        return IdentityClaims(
            user_id=self.id,
            username=self.username,
            role=self.role,
            organization_id=self.organization_id,
            organization_name=self.organization_name,
            session_id=session_id,
            token_version=self.token_version or 0,
        )
