import logging
from contextlib import asynccontextmanager
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from sqlalchemy import select
from app.api.v1.endpoints import products
from app.core.config import Settings
from app.core.error_tracking import ErrorTracker
from app.core.errors import register_exception_handlers
from app.db.seed_products import seed_products_from_json
from app.db.session import Base, create_engine_and_sessionmaker
from app.logging_config import setup_logging
from app.middleware.rate_limiter import FixedWindowRateLimiter, RateLimitMiddleware
from app.models import Product

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    if settings.DB_CREATE_ALL:
        async with app.state.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    if settings.DB_SEED_FILE:
        async with app.state.sessionmaker() as session:
            result = await session.scalar(select(Product.id).limit(1))
            if result is None:
                logger.info(f"Seeding products from {settings.DB_SEED_FILE}")
                await seed_products_from_json(session, settings.DB_SEED_FILE)

    logger.info("Product catalog service started")
    yield
    await app.state.engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    setup_logging(log_dir=settings.LOG_DIR, app_env=settings.APP_ENV, level=settings.LOG_LEVEL)

    app = FastAPI(
        title="Product Catalog Service",
        lifespan=lifespan
    )

    engine, session_factory = create_engine_and_sessionmaker(settings.DATABASE_URL)
    app.state.settings = settings
    app.state.engine = engine
    app.state.sessionmaker = session_factory
    app.state.error_tracker = ErrorTracker()

    register_exception_handlers(app)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"[{request.method}] {request.url.path}")
        return await call_next(request)

    app.add_middleware(
        RateLimitMiddleware,
        limiter=FixedWindowRateLimiter(
            max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        ),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def root():
        return "API is running..."

    app.include_router(products.router, prefix="/api/products", tags=["Products"])
    return app


def run() -> None:
    uvicorn.run("app.main:create_app", factory=True, host="0.0.0.0", port=3000)
