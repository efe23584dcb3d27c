import json
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from app.crud.product_repository import ProductRepository
from app.validation.product_validator import validate_product

logger = logging.getLogger(__name__)

async def seed_products_from_json(session: AsyncSession, file_path: str) -> tuple[int, int]:
    """Insert the products listed in a JSON array file.

    Records that fail validation or whose name is already taken are skipped.
    Returns ``(inserted, skipped)``.
    """
    with open(file_path, "r", encoding="utf-8") as f:
        records = json.load(f)

    repo = ProductRepository(session)
    inserted = skipped = 0

    for index, record in enumerate(records):
        product, errors = validate_product(record)
        if errors:
            logger.warning(f"Skipping seed record {index}: {errors}")
            skipped += 1
            continue

        if await repo.name_exists(product.name):
            skipped += 1
            continue

        await repo.create(product.model_dump())
        inserted += 1

    logger.info(f"Products seeded from file: {inserted} inserted, {skipped} skipped")
    return inserted, skipped
