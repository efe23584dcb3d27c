import asyncio
import logging
from collections.abc import Mapping
from typing import Any
from uuid import UUID
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from app.core.error_tracking import ErrorTracker
from app.core.errors import ApplicationError, DuplicateProductError, ProductValidationError
from app.crud.product_repository import ProductRepository
from app.crud.query_builder import ProductQuery
from app.models import Product
from app.schemas.product import BulkCreateFailure, BulkCreateResults, BulkCreateSuccess, BulkItemError, ProductCreate
from app.services.interfaces.product_service_interface import IProductService
from app.validation.product_validator import FIELD_ALIASES, ErrorMap, merge_errors, validate_product

logger = logging.getLogger(__name__)


def _candidate_name(payload: Any) -> str | None:
    if not isinstance(payload, Mapping):
        return None
    name = payload.get("name")
    if isinstance(name, str) and name.strip():
        return name.strip()
    return None


def _duplicate_name(name: str) -> ErrorMap:
    return DuplicateProductError("name", name).errors


def _failure(index: int, errors: ErrorMap) -> BulkCreateFailure:
    field, messages = next(iter(errors.items()))
    return BulkCreateFailure(
        index=index,
        error=BulkItemError(field=field, message=messages[0]),
        errors=errors,
    )


class ProductService(IProductService):
    def __init__(
        self,
        repo: ProductRepository,
        session_factory: async_sessionmaker[AsyncSession],
        error_tracker: ErrorTracker,
        bulk_limit: int = 500,
        validation_concurrency: int = 10,
    ):
        self.repo = repo
        self.session_factory = session_factory
        self.error_tracker = error_tracker
        self.bulk_limit = bulk_limit
        self.validation_concurrency = validation_concurrency

    async def _insert(self, product: ProductCreate) -> Product:
        try:
            return await self.repo.create(product.model_dump())
        except IntegrityError as exc:
            await self.repo.rollback()
            raise self._constraint_error(exc, product.name) from exc
        except ProductValidationError:
            await self.repo.rollback()
            raise

    def _constraint_error(self, exc: IntegrityError, name: str) -> ProductValidationError:
        reason = str(exc.orig).lower()
        if "unique" in reason or "duplicate" in reason:
            # name is unique on its own, so (name, brand) clashes are name clashes too
            return DuplicateProductError("name", name)
        logger.warning(f"Constraint violation for product '{name}': {exc.orig}")
        return ProductValidationError({"general": ["Product violates a data constraint"]})

    async def create_product(self, payload: Any) -> Product:
        product, errors = validate_product(payload)

        name = _candidate_name(payload)
        if name and await self.repo.name_exists(name):
            merge_errors(errors, _duplicate_name(name))

        if errors:
            raise ProductValidationError(errors)

        created = await self._insert(product)
        logger.info(f"Product created: {created.name}")
        return created

    async def _validate_item(
        self, index: int, item: Any, semaphore: asyncio.Semaphore
    ) -> tuple[int, ProductCreate | None, ErrorMap]:
        product, errors = validate_product(item)

        name = _candidate_name(item)
        if name:
            try:
                async with semaphore:
                    async with self.session_factory() as session:
                        taken = await ProductRepository(session).name_exists(name)
            except SQLAlchemyError as exc:
                self.error_tracker.track(exc, message="Bulk name check failed", index=index)
                merge_errors(errors, {"unknown": ["Could not verify product name"]})
            else:
                if taken:
                    merge_errors(errors, _duplicate_name(name))

        return index, (None if errors else product), errors

    async def create_many(self, payload: Any) -> BulkCreateResults:
        if not isinstance(payload, list) or not payload:
            raise ApplicationError("Invalid or empty array of products provided", 400)
        if len(payload) > self.bulk_limit:
            raise ApplicationError(f"Cannot create more than {self.bulk_limit} products at once", 400)

        semaphore = asyncio.Semaphore(self.validation_concurrency)
        outcomes = await asyncio.gather(
            *(self._validate_item(index, item, semaphore) for index, item in enumerate(payload))
        )

        results = BulkCreateResults(total=len(payload))
        # inserts stay sequential, in input order
        for index, product, errors in outcomes:
            if errors:
                results.failed.append(_failure(index, errors))
                continue

            try:
                created = await self._insert(product)
            except ProductValidationError as exc:
                results.failed.append(_failure(index, exc.errors))
                continue
            except SQLAlchemyError as exc:
                await self.repo.rollback()
                self.error_tracker.track(exc, message="Bulk insert failed", index=index)
                results.failed.append(_failure(index, {"unknown": ["Creation failed"]}))
                continue

            results.success.append(BulkCreateSuccess(id=created.id, name=created.name))

        logger.info(
            f"Bulk product creation: {len(results.success)} succeeded, {len(results.failed)} failed"
        )
        return results

    async def list_products(self, query: ProductQuery) -> tuple[list[Product], int]:
        products = await self.repo.find(query)
        total = await self.repo.count(query)
        logger.info(f"Fetched {len(products)} products from the database (Total: {total})")
        return products, total

    async def get_product(self, product_id: UUID) -> Product:
        product = await self.repo.get_by_id(product_id)
        if product is None:
            raise ApplicationError("Product not found", 404)
        return product

    async def update_product(self, product_id: UUID, payload: Any) -> Product:
        if not isinstance(payload, Mapping):
            raise ProductValidationError({"general": ["Request body must be a product object"]})

        product = await self.get_product(product_id)
        changes = {FIELD_ALIASES.get(key, key): value for key, value in payload.items()}

        # the merged record, not just the patch, has to satisfy every rule
        validated, errors = validate_product({**product.to_record(), **changes})

        name = _candidate_name(changes)
        if name and name != product.name and await self.repo.name_exists(name, exclude_id=product.id):
            merge_errors(errors, _duplicate_name(name))

        if errors:
            raise ProductValidationError(errors)

        try:
            updated = await self.repo.update(product, validated.model_dump())
        except IntegrityError as exc:
            await self.repo.rollback()
            raise self._constraint_error(exc, validated.name) from exc
        except ProductValidationError:
            await self.repo.rollback()
            raise

        logger.info(f"Product with ID {product_id} updated successfully")
        return updated

    async def delete_product(self, product_id: UUID) -> None:
        product = await self.get_product(product_id)
        await self.repo.delete(product)
        logger.info(f"Product with ID {product_id} deleted successfully")

    async def delete_many(self, payload: Any) -> int:
        ids = payload.get("ids") if isinstance(payload, Mapping) else None
        if not isinstance(ids, list) or not ids:
            raise ProductValidationError(
                {"ids": ["Please select at least one product to delete"]},
                message="No product IDs provided",
            )

        parsed: list[UUID] = []
        invalid: list[str] = []
        for raw in ids:
            try:
                parsed.append(UUID(str(raw)))
            except ValueError:
                invalid.append(str(raw))
        if invalid:
            raise ProductValidationError({"ids": [f"Invalid product id: {value}" for value in invalid]})

        deleted = await self.repo.delete_many(list(dict.fromkeys(parsed)))
        if deleted == 0:
            raise ApplicationError("No products found to delete", 404)

        logger.info(f"Bulk product deletion: {deleted} deleted")
        return deleted
