import os
from typing import Any

_TRUE, _FALSE = {"True", "true", "yes", "1"}, {"False", "false", "no", "0"}


def _getenv(name: str, *default: Any) -> Any:
    try:
        v = os.environ[name]
        if v in _TRUE:
            return True
        elif v in _FALSE:
            return False
        else:
            return v
    except KeyError:
        pass
    if default:
        return default[0]
    raise KeyError(name)


# ------------------------------------------------
# ---- Defaults and environment variables ----
# ------------------------------------------------

#: API group of the trigger custom resource
TRIGGER_API_GROUP = str(_getenv("TRIGGER_API_GROUP", "eventing.knative.dev"))

#: API version of the trigger custom resource
TRIGGER_API_VERSION = str(_getenv("TRIGGER_API_VERSION", "v1alpha1"))

#: Plural name of the trigger custom resource
TRIGGER_PLURAL = str(_getenv("TRIGGER_PLURAL", "triggers"))

#: Broker the generated triggers are attached to
TRIGGER_BROKER = str(_getenv("TRIGGER_BROKER", "default"))

#: Block each function reconciliation until every applied trigger is observed
WAIT_FOR_APPLY = bool(_getenv("WAIT_FOR_APPLY", False))

#: Seconds to wait for an applied trigger to be observed (0 disables the deadline)
WAIT_TIMEOUT_SECONDS = float(_getenv("WAIT_TIMEOUT_SECONDS", 60.0))

#: Propagation policy used when a function's triggers are deleted
DELETION_PROPAGATION = str(_getenv("DELETION_PROPAGATION", "Background"))

#: Port of the Prometheus metrics server
METRICS_PORT = int(_getenv("METRICS_PORT", 8000))


class Settings:
    """Operator settings"""

    trigger_api_group: str = TRIGGER_API_GROUP
    trigger_api_version: str = TRIGGER_API_VERSION
    trigger_plural: str = TRIGGER_PLURAL
    trigger_broker: str = TRIGGER_BROKER
    wait_for_apply: bool = WAIT_FOR_APPLY
    wait_timeout_seconds: float = WAIT_TIMEOUT_SECONDS
    deletion_propagation: str = DELETION_PROPAGATION
    metrics_port: int = METRICS_PORT

    def __init__(
        self,
        *args,
        trigger_api_group: str = None,
        trigger_api_version: str = None,
        trigger_plural: str = None,
        trigger_broker: str = None,
        wait_for_apply: bool = None,
        wait_timeout_seconds: float = None,
        deletion_propagation: str = None,
        metrics_port: int = None,
        **kwargs,
    ):
        if trigger_api_group is not None:
            self.trigger_api_group = trigger_api_group

        if trigger_api_version is not None:
            self.trigger_api_version = trigger_api_version

        if trigger_plural is not None:
            self.trigger_plural = trigger_plural

        if trigger_broker is not None:
            self.trigger_broker = trigger_broker

        if wait_for_apply is not None:
            self.wait_for_apply = wait_for_apply

        if wait_timeout_seconds is not None:
            self.wait_timeout_seconds = wait_timeout_seconds

        if deletion_propagation is not None:
            self.deletion_propagation = deletion_propagation

        if metrics_port is not None:
            self.metrics_port = metrics_port

    @property
    def wait_timeout(self):
        """Deadline for the readiness wait, None when disabled."""
        return self.wait_timeout_seconds or None
