from .trigger import (
    OwnerReference,
    ObjectMeta,
    TriggerAttributes,
    TriggerFilter,
    TriggerReference,
    TriggerSubscriber,
    TriggerSpec,
    Trigger,
)
from .function import FunctionTriggerSpec, FunctionSpec
