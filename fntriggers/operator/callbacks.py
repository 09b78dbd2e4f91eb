import inspect
import logging
from typing import Any, Optional, Sequence
from fntriggers.operator.options import Callback
from fntriggers.utils.errors import CallbackAborted, CallbackObservedFailure

logger = logging.getLogger(__name__)

PRE = "pre"
POST = "post"


async def run_phase(
    phase: str,
    callbacks: Optional[Sequence[Callback]],
    subject: Any,
    error: Optional[Exception] = None,
) -> None:
    """Run the callbacks of one phase in order.

    The first callback that raises stops the phase. In the pre phase that
    aborts the operation (CallbackAborted); in the post phase it vetoes it
    even when the mutation succeeded (CallbackObservedFailure). When every
    post callback passes, the mutation's own `error` is raised again so it
    stays the result of the operation.
    """
    for callback in callbacks or ():
        try:
            result = callback(subject, error)
            if inspect.isawaitable(result):
                await result
        except Exception as ex:
            name = getattr(callback, "__name__", repr(callback))
            logger.debug(f"{phase} callback {name} failed: {ex}")
            if phase == PRE:
                raise CallbackAborted(f"pre callback {name} aborted: {ex}", ex)
            raise CallbackObservedFailure(f"post callback {name} failed: {ex}", ex)
    if error is not None:
        raise error
