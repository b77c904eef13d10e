# app/application/ports/outbound/generic_repository.py

from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Optional, Any, Dict

T = TypeVar("T")


class IRepository(Generic[T], ABC):
    """Generic repository interface."""

    @abstractmethod
    async def get(self, db, id: Any) -> Optional[T]:
        pass

    @abstractmethod
    async def create(self, db, *, obj_in: Dict[str, Any]) -> T:
        pass

    @abstractmethod
    async def update(self, db, *, db_obj: T, obj_in: Dict[str, Any]) -> T:
        pass
