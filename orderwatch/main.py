"""Main application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from prometheus_fastapi_instrumentator import Instrumentator

from orderwatch import __version__
from orderwatch.api.routes import sources
from orderwatch.config import settings
from orderwatch.detect.throttle import AlertThrottle
from orderwatch.ingest.headless import HeadlessNetworkFetcher
from orderwatch.logging_config import setup_logging
from orderwatch.notify.discord import DiscordWebhook
from orderwatch.seed import seed_default_sources
from orderwatch.store import SourceStore
from orderwatch.worker.scheduler import setup_scheduler
from orderwatch.worker.tasks import SourceChecker

setup_logging()
logger = logging.getLogger(__name__)


def build_checker(store: SourceStore) -> SourceChecker:
    """Wire the checker with the browser fetcher and Discord notifier."""
    return SourceChecker(
        store=store,
        fetcher=HeadlessNetworkFetcher(),
        notifier=DiscordWebhook(settings.discord_webhook_url),
        throttle=AlertThrottle(settings.alert_cooldown_seconds),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(
        "Starting Order Watch: poll=%ss headless=%s webhook=%s cooldown=%ss",
        settings.poll_seconds,
        settings.headless,
        "SET" if settings.discord_webhook_url.strip() else "NOT SET",
        settings.alert_cooldown_seconds,
    )

    if settings.seed_default_sources:
        seed_default_sources(app.state.store)

    scheduler = setup_scheduler(app.state.checker)
    scheduler.start()
    logger.info("Scheduler started")

    yield

    logger.info("Shutting down...")
    scheduler.shutdown()
    await app.state.checker.close()
    logger.info("Shutdown complete")


app = FastAPI(
    title="Order Watch",
    description="Monitor market pages for buy order changes",
    version=__version__,
    lifespan=lifespan,
)
app.state.store = SourceStore()
app.state.checker = build_checker(app.state.store)

Instrumentator(
    should_group_status_codes=True,
    should_ignore_untemplated=True,
    excluded_handlers=["/metrics", "/health"],
).instrument(app).expose(app, include_in_schema=True, tags=["monitoring"])

app.include_router(sources.router)


@app.get("/", response_class=PlainTextResponse)
async def root():
    """Liveness text."""
    return "Bot is running!"


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"ok": True, "time": datetime.now(timezone.utc).isoformat()}


def run():
    """Run the API server and scheduler with uvicorn."""
    uvicorn.run(
        "orderwatch.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
