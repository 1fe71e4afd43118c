# backend/main.py
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, get_settings
from database import build_engine, create_session_factory, init_db
from utils.error_handlers import register_exception_handlers

# Routers
from routes.auth import router as auth_router
from routes.customers import router as customers_router
from routes.distributors import router as distributors_router
from routes.inventory import router as inventory_router
from routes.orders import router as orders_router
from routes.warehouse import router as warehouse_router

API_PREFIX = "/api"

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application around an explicitly constructed engine/session factory.

    Run with: uvicorn main:create_app --factory
    """
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    engine = build_engine(settings.DATABASE_URL)
    if settings.AUTO_CREATE_TABLES:
        init_db(engine)

    app = FastAPI(title="Inventory & Order API", version="1.0.0")
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    # CORS Configuration
    origins = ["http://localhost:5173", "http://127.0.0.1:5173"]
    if settings.FRONTEND_URL:
        origins.append(settings.FRONTEND_URL)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Register routers under the API prefix
    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(customers_router, prefix=API_PREFIX)
    app.include_router(distributors_router, prefix=API_PREFIX)
    app.include_router(inventory_router, prefix=API_PREFIX)
    app.include_router(orders_router, prefix=API_PREFIX)
    app.include_router(warehouse_router, prefix=API_PREFIX)

    @app.get("/health")
    def health():
        return {"success": True, "message": "Inventory & Order API is running"}

    logger.info("Application started (database: %s)", engine.url.render_as_string(hide_password=True))
    return app
