# interfaces/product_service_interface.py
from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID
from app.crud.query_builder import ProductQuery
from app.models import Product
from app.schemas.product import BulkCreateResults

class IProductService(ABC):
    @abstractmethod
    async def create_product(self, payload: Any) -> Product:
        pass

    @abstractmethod
    async def create_many(self, payload: Any) -> BulkCreateResults:
        pass

    @abstractmethod
    async def list_products(self, query: ProductQuery) -> tuple[list[Product], int]:
        pass

    @abstractmethod
    async def get_product(self, product_id: UUID) -> Product:
        pass

    @abstractmethod
    async def update_product(self, product_id: UUID, payload: Any) -> Product:
        pass

    @abstractmethod
    async def delete_product(self, product_id: UUID) -> None:
        pass

    @abstractmethod
    async def delete_many(self, payload: Any) -> int:
        pass
