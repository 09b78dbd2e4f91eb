from typing import Dict, List, Optional
from fntriggers.types.base import BaseModel


class OwnerReference(BaseModel):
    api_version: Optional[str]
    kind: str
    name: str
    uid: str
    controller: Optional[bool]
    block_owner_deletion: Optional[bool]


class ObjectMeta(BaseModel):
    name: str
    namespace: Optional[str]
    labels: Optional[Dict[str, str]]
    annotations: Optional[Dict[str, str]]
    owner_references: Optional[List[OwnerReference]]


class TriggerAttributes(BaseModel):
    eventtypeversion: Optional[str]
    source: Optional[str]
    type: Optional[str]


class TriggerFilter(BaseModel):
    attributes: Optional[TriggerAttributes]


class TriggerReference(BaseModel):
    kind: Optional[str]
    name: Optional[str]
    namespace: Optional[str]


class TriggerSubscriber(BaseModel):
    reference: Optional[TriggerReference]


class TriggerSpec(BaseModel):
    broker: Optional[str]
    filter: Optional[TriggerFilter]
    subscriber: Optional[TriggerSubscriber]


class Trigger(BaseModel):
    SUBSCRIBER_KIND = "Service"

    metadata: ObjectMeta
    spec: Optional[TriggerSpec]

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def subscriber_reference(self) -> Optional[TriggerReference]:
        if self.spec is None or self.spec.subscriber is None:
            return None
        return self.spec.subscriber.reference

    def is_reference(self, name: str, namespace: str) -> bool:
        """True if the trigger delivers events to the function's service."""
        ref = self.subscriber_reference
        return (
            ref is not None
            and ref.kind == self.SUBSCRIBER_KIND
            and ref.name == name
            and ref.namespace == namespace
        )
