import asyncio
import logging
from typing import Optional
from fntriggers.resources.client import ResourceClient
from fntriggers.resources.document import ResourceDocument
from fntriggers.utils.errors import WaitCancelled, WaitTimeout, WatchFailure

logger = logging.getLogger(__name__)

ADDED = "ADDED"
MODIFIED = "MODIFIED"
ERROR = "ERROR"


async def _observe(client: ResourceClient, namespace: str, name: str) -> None:
    events = client.watch(namespace)
    try:
        async for event in events:
            event_type = event.get("type")
            obj = event.get("object") or {}
            if event_type == ERROR:
                raise WatchFailure(f"Watch of `{namespace}` failed: {obj}")
            if event_type not in (ADDED, MODIFIED):
                continue
            observed = ResourceDocument(obj).name
            if observed == name:
                return
            logger.debug(f"Skipping {event_type} event for `{observed}`")
    except (WatchFailure, asyncio.CancelledError):
        raise
    except Exception as ex:
        raise WatchFailure(f"Watch of `{namespace}` failed: {ex}", ex)
    finally:
        aclose = getattr(events, "aclose", None)
        if aclose is not None:
            await aclose()
    raise WaitCancelled(f"Watch of `{namespace}` closed before `{name}` was observed")


async def wait_for_trigger(
    client: ResourceClient,
    namespace: str,
    name: str,
    timeout: Optional[float] = None,
) -> None:
    """Block until an added or modified event for `name` arrives.

    Cancelling the calling task cancels the wait. `timeout` is the only
    deadline; the trigger's status conditions are not inspected.

    Raises:
        WaitTimeout: `timeout` elapsed first.
        WaitCancelled: the stream closed first.
        WatchFailure: the stream delivered an error.
    """
    try:
        await asyncio.wait_for(_observe(client, namespace, name), timeout)
    except asyncio.TimeoutError as ex:
        raise WaitTimeout(
            f"Trigger `{namespace}/{name}` not observed within {timeout}s", ex
        )
