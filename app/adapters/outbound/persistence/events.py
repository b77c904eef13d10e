# app/adapters/outbound/persistence/events.py

"""
Event listeners for SQLAlchemy ORM lifecycle.

This module adds event listeners that stamp created_at/updated_at
(naive UTC) during creation and updates of entities.
"""

import logging
from sqlalchemy import event

from app.shared.utils.datetime_utils import DateTimeUtil

logger = logging.getLogger(__name__)


def set_created_at(mapper, connection, target):
    """
    Set created_at and updated_at to current UTC time before insert.
    """
    if hasattr(target, 'created_at') and (target.created_at is None):
        target.created_at = DateTimeUtil.for_storage()

    if hasattr(target, 'updated_at'):
        target.updated_at = DateTimeUtil.for_storage()


def set_updated_at(mapper, connection, target):
    """
    Set updated_at to current UTC time before update.
    """
    if hasattr(target, 'updated_at'):
        target.updated_at = DateTimeUtil.for_storage()


_registered = False


def register_datetime_events():
    """
    Register event listeners for datetime fields in SQLAlchemy models.
    """
    global _registered
    from app.adapters.outbound.persistence.models.base_model import Base

    if _registered:
        return
    _registered = True

    event.listen(Base, 'before_insert', set_created_at, propagate=True)
    event.listen(Base, 'before_update', set_updated_at, propagate=True)

    logger.info("DateTime event listeners registered for SQLAlchemy models")
