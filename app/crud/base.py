# app/crud/base.py
from abc import ABC, abstractmethod
from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

T = TypeVar("T")
Q = TypeVar("Q")

class AbstractRepository(ABC, Generic[T, Q]):
    @abstractmethod
    async def get_by_id(self, product_id: UUID) -> T | None: ...

    @abstractmethod
    async def name_exists(self, name: str, exclude_id: UUID | None = None) -> bool: ...

    @abstractmethod
    async def create(self, data: dict[str, Any]) -> T: ...

    @abstractmethod
    async def update(self, entity: T, data: dict[str, Any]) -> T: ...

    @abstractmethod
    async def delete(self, entity: T) -> None: ...

    @abstractmethod
    async def delete_many(self, ids: Sequence[UUID]) -> int: ...

    @abstractmethod
    async def find(self, query: Q) -> list[T]: ...

    @abstractmethod
    async def count(self, query: Q) -> int: ...

    @abstractmethod
    async def rollback(self) -> None: ...
