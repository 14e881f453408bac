"""FastAPI application for gocd-slack-relay."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.config import settings
from src.routes.webhooks import router as webhooks_router

logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.slack_signing_secret:
        raise RuntimeError("Slack signing secret not configured — set RELAY_SLACK_SIGNING_SECRET")
    if not settings.monitors:
        logger.warning("No monitors configured — every build message will be ignored")
    logger.info(
        "gocd-slack-relay starting up with monitors: %s",
        ", ".join(m.name for m in settings.monitors) or "none",
    )
    yield
    logger.info("gocd-slack-relay shutting down")


app = FastAPI(
    title="GoCD Slack Relay",
    description="Keeps one continuously updated Slack message per GoCD build",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(webhooks_router)


@app.get("/health")
async def health():
    return {"status": "ok", "service": "gocd-slack-relay"}
