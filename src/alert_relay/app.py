"""FastAPI application with lifespan, health and stats endpoints."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from alert_relay.config import get_settings
from alert_relay.helpdesk import close_client
from alert_relay.logging_config import configure_logging
from alert_relay.slack.lifecycle import BotCoordinator
from alert_relay.slack.router import get_coordinator
from alert_relay.slack.router import router as slack_router
from alert_relay.slack.teams import create_team_store
from alert_relay.webhook import router as webhook_router

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging, validate settings and connect every installed team.

    Exits the process when required settings are missing or the team store
    cannot be opened.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    missing = settings.missing_required()
    if missing:
        logger.error("Missing required environment variables: %s", ", ".join(missing))
        raise SystemExit(1)

    try:
        store = create_team_store(settings.database_url)
    except ValueError as exc:
        logger.error("Invalid team store configuration: %s", exc)
        raise SystemExit(1)

    coordinator = BotCoordinator(settings, store)
    app.state.settings = settings
    app.state.coordinator = coordinator
    await coordinator.start_all()

    yield

    await coordinator.shutdown()
    await close_client()


app = FastAPI(
    title="Alert Relay",
    lifespan=lifespan,
)
app.include_router(webhook_router)
app.include_router(slack_router)


@app.get("/health")
async def health():
    """Liveness check."""
    return {
        "status": "ok",
        "service": "alert-relay",
        "version": VERSION,
    }


@app.get("/stats")
async def stats(coordinator: BotCoordinator = Depends(get_coordinator)):
    """Relay counters and the number of live team connections."""
    return {
        **coordinator.stats.as_dict(),
        "connections": sum(1 for c in coordinator.connections.values() if c.is_connected),
    }
