"""GoCD REST API client (Basic auth, pipeline history)."""

from __future__ import annotations

import logging
import ssl
from functools import lru_cache
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from src.config import settings
from src.errors import GoCDTransportError
from src.schemas.gocd import HistoryRecord, PipelineHistory

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def _ssl_context(cafile: str) -> ssl.SSLContext:
    """Load the private CA bundle once per process."""
    return ssl.create_default_context(cafile=cafile)


class GoCDClient:
    """Read pipeline history from a GoCD server."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        if not settings.gocd_base_url:
            raise RuntimeError("GoCD not configured — set RELAY_GOCD_BASE_URL")
        self._base_url = settings.gocd_base_url.rstrip("/")
        self._headers = {"Accept": settings.gocd_accept_header}
        if settings.gocd_auth:
            self._headers["Authorization"] = f"Basic {settings.gocd_auth}"

        verify: ssl.SSLContext | bool = True
        if settings.gocd_ca_cert_path:
            verify = _ssl_context(settings.gocd_ca_cert_path)
        self._client = httpx.AsyncClient(
            timeout=settings.gocd_timeout_seconds,
            verify=verify,
            transport=transport,
        )

    async def get_history(self, pipeline_name: str) -> list[HistoryRecord]:
        """Return recent runs of ``pipeline_name``, newest first.

        Runs without a counter are dropped. Runs without a revision id are
        kept with ``revision_id=None``.
        """
        url = f"{self._base_url}/go/api/pipelines/{quote(pipeline_name, safe='')}/history"
        try:
            resp = await self._client.get(url, headers=self._headers)
            resp.raise_for_status()
            history = PipelineHistory.model_validate(resp.json())
            records = [
                HistoryRecord(counter=instance.counter, revision_id=instance.revision_id)
                for instance in history.pipelines
                if instance.counter is not None
            ]
        except (httpx.HTTPError, ValueError, ValidationError) as exc:
            raise GoCDTransportError(f"history request for {pipeline_name} failed: {exc}") from exc

        logger.debug("GoCD history for %s: %d records", pipeline_name, len(records))
        return records

    async def close(self) -> None:
        await self._client.aclose()
