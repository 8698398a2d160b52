# portfolio/main.py
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from portfolio.core.contact_store import ContactStore
from portfolio.core.db import close_pool
from portfolio.core.mailer import get_mailer
from portfolio.core.migrations import ensure_contact_schema
from portfolio.core.settings import settings
from portfolio.routers.health import router as health_router
from portfolio.routers.send import router as send_router

log = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One mailer per process, built from config and torn down on shutdown
    app.state.mailer = get_mailer(settings)
    app.state.contact_store = ContactStore()
    log.info(f"[main] email provider = {app.state.mailer.provider}")
    try:
        if settings.auto_migrate:
            await ensure_contact_schema()
        yield
    finally:
        app.state.mailer.close()
        await close_pool()
        log.info("[main] shutdown complete")


app = FastAPI(title=settings.api_title, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(send_router)
app.include_router(health_router)

