import json
import kopf
import kubernetes_asyncio

_ALREADY_EXISTS = "alreadyexists"
_NOT_FOUND = "notfound"


class TriggersError(Exception):
    """Base error raised while reconciling function triggers."""

    def __init__(self, message: str, cause: Exception = None):
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause


class ListFailure(TriggersError):
    """Listing triggers failed."""


class FetchFailure(TriggersError):
    """Reading an existing trigger failed for a reason other than not found."""


class MutationFailure(TriggersError):
    """Create, update or delete of a trigger failed."""


class DecodeFailure(TriggersError):
    """A listed resource could not be decoded into a trigger."""


class WaitTimeout(TriggersError):
    """The trigger was not observed before the deadline."""


class WaitCancelled(TriggersError):
    """The watch stream closed before the trigger was observed."""


class WatchFailure(TriggersError):
    """The watch stream delivered an error."""


class CallbackAborted(TriggersError):
    """A pre callback vetoed the operation before any mutation."""


class CallbackObservedFailure(TriggersError):
    """A post callback vetoed the operation after the mutation."""


def _reason(ex: kubernetes_asyncio.client.ApiException) -> str:
    try:
        err = json.loads(ex.body)
    except (TypeError, ValueError):
        return ""
    return (err.get("reason") or "").lower()


def already_exists_error(ex: Exception) -> bool:
    if not isinstance(ex, kubernetes_asyncio.client.ApiException):
        return False
    return ex.status == 409 and _reason(ex) == _ALREADY_EXISTS


def not_found_error(ex: Exception) -> bool:
    if not isinstance(ex, kubernetes_asyncio.client.ApiException):
        return False
    return ex.status == 404 or _reason(ex) == _NOT_FOUND


def convert_triggers_error(ex: TriggersError, delay: float = 30):
    """
    Convert an engine error into a Kopf-friendly exception.

    Decode failures need the offending resource fixed by hand, so they are
    raised as PermanentError. Everything else is retried after `delay` seconds.

    Raises:
        kopf.TemporaryError or kopf.PermanentError
    """
    if not isinstance(ex, TriggersError):
        raise ex

    error_msg = f"{ex.__class__.__name__}: {ex}"
    cause = ex.__cause__
    if isinstance(cause, kubernetes_asyncio.client.ApiException):
        error_msg = f"{error_msg} (Kubernetes API error {cause.status}: {cause.reason})"

    if isinstance(ex, DecodeFailure):
        raise kopf.PermanentError(error_msg)
    raise kopf.TemporaryError(error_msg, delay=delay)
