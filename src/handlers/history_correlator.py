"""Maps a GoCD (pipeline, counter) pair to the revision id it built."""

from __future__ import annotations

import logging
from contextlib import suppress

from src.clients.gocd_client import GoCDClient
from src.errors import BuildNotFoundError, NoRevisionDataError

logger = logging.getLogger(__name__)


async def resolve_revision(pipeline_name: str, build_counter: int) -> int:
    """Return the source revision id for one run of ``pipeline_name``.

    Raises BuildNotFoundError, NoRevisionDataError or GoCDTransportError.
    """
    client = GoCDClient()
    try:
        history = await client.get_history(pipeline_name)
    finally:
        with suppress(Exception):
            await client.close()

    for record in history:
        if record.counter != build_counter:
            continue
        if record.revision_id is None:
            raise NoRevisionDataError(pipeline_name, build_counter)
        logger.debug(
            "Resolved %s/%d to revision %d", pipeline_name, build_counter, record.revision_id
        )
        return record.revision_id

    raise BuildNotFoundError(pipeline_name, build_counter)
