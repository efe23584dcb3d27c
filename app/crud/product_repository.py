# app/crud/product_repository.py
from typing import Any, Sequence
from uuid import UUID
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from app.models import Product, ProductOption
from app.models.product import utcnow
from app.crud.base import AbstractRepository
from app.crud.query_builder import ProductQuery, build_count, build_select

COLUMN_FIELDS = (
    "name",
    "brand",
    "seller",
    "product_description",
    "price",
    "discount",
    "ratings",
    "cod_availability",
    "total_stock_availability",
    "category",
    "is_active",
    "is_featured",
)

class ProductRepository(AbstractRepository[Product, ProductQuery]):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, product_id: UUID) -> Product | None:
        result = await self.db.execute(select(Product).where(Product.id == product_id))
        return result.scalars().first()

    async def name_exists(self, name: str, exclude_id: UUID | None = None) -> bool:
        stmt = select(Product.id).where(Product.name == name)
        if exclude_id is not None:
            stmt = stmt.where(Product.id != exclude_id)
        result = await self.db.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None

    async def create(self, data: dict[str, Any]) -> Product:
        product = Product(**{key: data[key] for key in COLUMN_FIELDS if key in data})
        product.set_options(data.get("colors", []), data.get("variants", []), data.get("size", []))
        self.db.add(product)
        await self.db.commit()
        return product

    async def update(self, product: Product, data: dict[str, Any]) -> Product:
        for key in COLUMN_FIELDS:
            if key in data:
                setattr(product, key, data[key])
        product.set_options(
            data.get("colors", product.colors),
            data.get("variants", product.variants),
            data.get("size", product.size),
        )
        # option-only edits issue no UPDATE on products, so stamp it here
        product.updated_at = utcnow()
        await self.db.commit()
        return product

    async def delete(self, product: Product) -> None:
        await self.db.delete(product)
        await self.db.commit()

    async def delete_many(self, ids: Sequence[UUID]) -> int:
        if not ids:
            return 0
        await self.db.execute(delete(ProductOption).where(ProductOption.product_id.in_(ids)))
        result = await self.db.execute(delete(Product).where(Product.id.in_(ids)))
        await self.db.commit()
        return result.rowcount

    async def find(self, query: ProductQuery) -> list[Product]:
        result = await self.db.execute(build_select(query))
        return list(result.scalars().all())

    async def count(self, query: ProductQuery) -> int:
        result = await self.db.execute(build_count(query))
        return result.scalar_one()

    async def rollback(self) -> None:
        await self.db.rollback()
