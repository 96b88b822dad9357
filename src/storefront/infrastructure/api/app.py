"""Storefront FastAPI application.

Usage:
    uvicorn storefront.infrastructure.api.app:create_app --factory
"""

from collections.abc import AsyncIterator
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.infrastructure.api.errors import register_error_handlers
from storefront.infrastructure.api.routes import cart_router, notification_router, order_router
from storefront.infrastructure.bootstrap import Container, build_container
from storefront.infrastructure.config import get_settings
from storefront.infrastructure.logging import configure_logging


def create_app(container: Container | None = None) -> FastAPI:
    executor: ThreadPoolExecutor | None = None
    if container is None:
        settings = get_settings()
        configure_logging(settings)
        executor = ThreadPoolExecutor(
            max_workers=settings.notification_workers,
            thread_name_prefix="notify",
        )
        container = build_container(settings, executor=executor)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        if executor is not None:
            executor.shutdown(wait=True)

    app = FastAPI(
        title="Storefront API",
        description="Checkout, order lifecycle and notifications",
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(order_router)
    app.include_router(cart_router)
    app.include_router(notification_router)

    @app.get("/health")
    async def health() -> JSONResponse:
        return JSONResponse(content={"status": "ok"})

    return app
