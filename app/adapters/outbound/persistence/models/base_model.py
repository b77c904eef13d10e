# app/adapters/outbound/persistence/models/base_model.py

"""
Base class for SQLAlchemy models.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base declarativa para todos os modelos."""


_protected_models = set()


def register_password_protection():
    """
    Registra o PasswordProtectionMiddleware em todos os modelos que tenham o campo `password_hash`.
    """
    from sqlalchemy import event
    from app.shared.middleware.logging_middleware import PasswordProtectionMiddleware

    for mapper in Base.registry.mappers:
        model = mapper.class_
        if hasattr(model, 'password_hash'):
            if model in _protected_models:
                continue
            event.listen(model, 'before_insert', PasswordProtectionMiddleware.before_insert_or_update)
            event.listen(model, 'before_update', PasswordProtectionMiddleware.before_insert_or_update)
            _protected_models.add(model)


def register_all_events():
    """
    Registra todos os eventos para os modelos.
    """
    register_password_protection()

    # Registra eventos de timestamps
    from app.adapters.outbound.persistence.events import register_datetime_events
    register_datetime_events()
