from typing import Any, Optional
from uuid import UUID
from fastapi import APIRouter, Body, Depends, Query
from app.core.config import Settings
from app.crud.query_builder import ProductQuery, normalize_pagination, split_csv, total_pages
from app.dependencies import get_product_service, get_settings
from app.schemas.product import (
    BulkCreateResponse,
    DeletedCount,
    DeleteManyResponse,
    MessageResponse,
    ProductListResponse,
    ProductOut,
    ProductResponse,
    RulesResponse,
)
from app.services.interfaces.product_service_interface import IProductService
from app.validation.product_validator import rules_document

router = APIRouter()

@router.post("/CreateProduct", status_code=201, response_model=ProductResponse, response_model_exclude_none=True)
async def create_product(
    payload: Any = Body(...),
    product_service: IProductService = Depends(get_product_service),
):
    product = await product_service.create_product(payload)
    return ProductResponse(data=ProductOut.model_validate(product), message="Product created successfully")

@router.post("/CreateMultipleProducts", status_code=201, response_model=BulkCreateResponse, response_model_exclude_none=True)
async def create_multiple_products(
    payload: Any = Body(...),
    product_service: IProductService = Depends(get_product_service),
):
    results = await product_service.create_many(payload)
    return BulkCreateResponse(
        message=f"{len(results.success)} of {results.total} products created",
        results=results,
    )

@router.get("/GetAllProducts", response_model=ProductListResponse, response_model_exclude_none=True)
async def get_all_products(
    search: Optional[str] = None,
    category: Optional[str] = None,
    price_min: Optional[float] = Query(None, alias="priceMin"),
    price_max: Optional[float] = Query(None, alias="priceMax"),
    ratings: Optional[float] = None,
    colors: Optional[str] = Query(None, description="Comma-separated colors"),
    variants: Optional[str] = Query(None, description="Comma-separated variants"),
    size: Optional[str] = Query(None, description="Comma-separated sizes"),
    sort: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    settings: Settings = Depends(get_settings),
    product_service: IProductService = Depends(get_product_service),
):
    page, limit = normalize_pagination(page, limit, settings.DEFAULT_PAGE_LIMIT, settings.MAX_PAGE_LIMIT)
    query = ProductQuery(
        search=search,
        category=category,
        price_min=price_min,
        price_max=price_max,
        ratings=ratings,
        colors=split_csv(colors),
        variants=split_csv(variants),
        size=split_csv(size),
        sort=sort,
        page=page,
        limit=limit,
    )
    products, total = await product_service.list_products(query)
    return ProductListResponse(
        data=[ProductOut.model_validate(product) for product in products],
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages(total, limit),
    )

@router.get("/GetProductById/{product_id}", response_model=ProductResponse, response_model_exclude_none=True)
async def get_product_by_id(
    product_id: UUID,
    product_service: IProductService = Depends(get_product_service),
):
    product = await product_service.get_product(product_id)
    return ProductResponse(data=ProductOut.model_validate(product))

@router.put("/UpdateProductById/{product_id}", response_model=ProductResponse, response_model_exclude_none=True)
async def update_product_by_id(
    product_id: UUID,
    payload: Any = Body(...),
    product_service: IProductService = Depends(get_product_service),
):
    product = await product_service.update_product(product_id, payload)
    return ProductResponse(data=ProductOut.model_validate(product), message="Product updated successfully")

@router.delete("/DeleteMultipleProducts", response_model=DeleteManyResponse)
async def delete_multiple_products(
    payload: Any = Body(None),
    product_service: IProductService = Depends(get_product_service),
):
    deleted = await product_service.delete_many(payload)
    return DeleteManyResponse(
        message=f"Successfully deleted {deleted} products",
        data=DeletedCount(deleted_count=deleted),
    )

@router.delete("/DeleteProductById/{product_id}", response_model=MessageResponse)
async def delete_product_by_id(
    product_id: UUID,
    product_service: IProductService = Depends(get_product_service),
):
    await product_service.delete_product(product_id)
    return MessageResponse(message="Product deleted successfully")

@router.get("/ValidationRules", response_model=RulesResponse)
async def validation_rules():
    return RulesResponse(data=rules_document())
