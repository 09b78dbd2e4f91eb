from .trigger import (
    OwnerReferenceSchema,
    ObjectMetaSchema,
    TriggerAttributesSchema,
    TriggerFilterSchema,
    TriggerReferenceSchema,
    TriggerSubscriberSchema,
    TriggerSpecSchema,
    TriggerSchema,
)
from .function import FunctionTriggerSpecSchema, FunctionSpecSchema
