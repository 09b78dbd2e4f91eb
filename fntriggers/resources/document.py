from typing import Dict, List, Mapping, Optional
from marshmallow import ValidationError
from fntriggers.types.models import Trigger
from fntriggers.types.schemas import TriggerSchema
from fntriggers.utils.errors import DecodeFailure


class ResourceDocument:
    """Loosely typed resource body with accessors for the fields we read."""

    body: Dict

    def __init__(self, body: Mapping) -> None:
        self.body = body

    @property
    def metadata(self) -> Dict:
        metadata = self.body.get("metadata")
        return metadata if isinstance(metadata, dict) else {}

    @property
    def name(self) -> Optional[str]:
        return self.metadata.get("name")

    @property
    def namespace(self) -> Optional[str]:
        return self.metadata.get("namespace")

    @property
    def labels(self) -> Optional[Dict[str, str]]:
        return self.metadata.get("labels")

    @property
    def annotations(self) -> Optional[Dict[str, str]]:
        return self.metadata.get("annotations")

    @property
    def owner_references(self) -> List[Dict]:
        return self.metadata.get("ownerReferences") or []

    @property
    def resource_version(self) -> Optional[str]:
        return self.metadata.get("resourceVersion")

    def decode(self) -> Trigger:
        """Decode the body into a Trigger.

        Raises:
            DecodeFailure: the body does not have the trigger shape.
        """
        if not isinstance(self.body, Mapping):
            raise DecodeFailure(f"Expected a mapping, got {type(self.body).__name__}")
        try:
            return TriggerSchema().load(self.body)
        except ValidationError as ex:
            raise DecodeFailure(
                f"Resource `{self.name}` is not a valid trigger: {ex.messages}", ex
            )

    def __repr__(self) -> str:
        return f"ResourceDocument<{self.namespace}/{self.name}>"
