from typing import Dict, List, Optional
from fntriggers.types.models import FunctionTriggerSpec
from fntriggers.types.settings import Settings
from fntriggers.common.models.labels import Labels
from fntriggers.resources.base import BaseResource


class FunctionTriggers(BaseResource):
    """Desired triggers of a function.

    Each declared event subscription maps to one trigger delivering to the
    function's service. Trigger names are derived from a hash of the
    subscription, so the same subscription keeps the same trigger across
    reconciliations and dropped subscriptions show up as orphans.
    """

    KIND = "Trigger"
    COMPONENT_NAME = "trigger"
    SUBSCRIBER_KIND = "Service"
    SUBSCRIBER_API_VERSION = "v1"

    conf: Settings = None

    function_name: str
    namespace: str
    _labels: Labels

    def __init__(
        self,
        function_name: str,
        namespace: str,
        labels: Optional[Dict[str, str]] = None,
        settings: Settings = None,
    ):
        self.function_name = function_name
        self.namespace = namespace
        self.settings = settings or self.conf or Settings()
        _labels = Labels.generate_default_labels(
            function_name, self.COMPONENT_NAME, self.OPERATOR_NAME
        )
        _labels.update(labels or {})
        self._labels = _labels

    @property
    def labels(self) -> Labels:
        return self._labels

    def prepare_attributes(self, spec: FunctionTriggerSpec) -> Dict[str, str]:
        return {
            "eventtypeversion": spec.event_type_version,
            "source": spec.source,
            "type": spec.type,
        }

    def trigger_name(self, spec: FunctionTriggerSpec) -> str:
        attributes_hash = self.compute_hash(self.prepare_attributes(spec))
        return f"{self.function_name}-{attributes_hash}"

    def prepare_trigger(self, spec: FunctionTriggerSpec) -> Dict:
        attributes = self.prepare_attributes(spec)
        return {
            "apiVersion": f"{self.settings.trigger_api_group}/{self.settings.trigger_api_version}",
            "kind": self.KIND,
            "metadata": {
                "name": self.trigger_name(spec),
                "namespace": self.namespace,
                "labels": self.labels.as_dict(),
                "annotations": self.prepare_hash_annotation(
                    self.compute_hash(attributes)
                ),
            },
            "spec": {
                "broker": self.settings.trigger_broker,
                "filter": {"attributes": attributes},
                "subscriber": {
                    "ref": {
                        "apiVersion": self.SUBSCRIBER_API_VERSION,
                        "kind": self.SUBSCRIBER_KIND,
                        "name": self.function_name,
                        "namespace": self.namespace,
                    }
                },
            },
        }

    def prepare_triggers(self, specs: Optional[List[FunctionTriggerSpec]]) -> List[Dict]:
        """Prepare one trigger per distinct subscription, in declaration order."""
        triggers, seen = [], set()
        for spec in specs or []:
            trigger = self.prepare_trigger(spec)
            name = trigger["metadata"]["name"]
            if name not in seen:
                seen.add(name)
                triggers.append(trigger)
        return triggers
