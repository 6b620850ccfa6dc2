"""Storefront client service entrypoint."""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from services.storefront.app.db.init_db import init_db
from services.storefront.app.deps import build_runtime, set_runtime
from services.storefront.app.routers.cart import router as cart_router
from services.storefront.app.routers.checkout import router as checkout_router
from services.storefront.app.routers.session import router as session_router

logging.basicConfig(
    level=os.getenv("STOREFRONT_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    init_db()
    runtime = build_runtime()
    set_runtime(runtime)
    await runtime.synchronizer.start()
    try:
        yield
    finally:
        runtime.close_checkout()
        await runtime.api.aclose()
        set_runtime(None)


app = FastAPI(title="Storefront API", lifespan=lifespan)

app.include_router(session_router)
app.include_router(cart_router)
app.include_router(checkout_router)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
