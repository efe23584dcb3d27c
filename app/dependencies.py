from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from app.core.config import Settings
from app.core.error_tracking import ErrorTracker, get_error_tracker
from app.db.session import get_db, get_sessionmaker
from app.crud.product_repository import ProductRepository
from app.services.interfaces.product_service_interface import IProductService
from app.services.product_service import ProductService

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_product_service(
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_sessionmaker),
    error_tracker: ErrorTracker = Depends(get_error_tracker),
    settings: Settings = Depends(get_settings),
) -> IProductService:
    return ProductService(
        repo=ProductRepository(db),
        session_factory=session_factory,
        error_tracker=error_tracker,
        bulk_limit=settings.BULK_CREATE_LIMIT,
        validation_concurrency=settings.BULK_VALIDATION_CONCURRENCY,
    )
