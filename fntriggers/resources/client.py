import abc
import copy
from typing import AsyncIterator, Dict, List, Optional
from kubernetes_asyncio import watch
from kubernetes_asyncio.client import CustomObjectsApi, V1DeleteOptions
from kubernetes_asyncio.client.api_client import ApiClient
from fntriggers.types.settings import Settings
from fntriggers.utils.objects import cached_property
from fntriggers.resources.base import BaseResource


class ResourceClient(abc.ABC):
    """Namespaced access to one kind of custom resource.

    Bodies are plain dicts, exactly as the API server returns them.
    """

    @abc.abstractmethod
    async def list(self, namespace: str) -> Dict:
        """Return the list response (``items`` holds the resource bodies)."""

    @abc.abstractmethod
    async def get(self, namespace: str, name: str) -> Optional[Dict]:
        """Return the resource body, or None if it does not exist."""

    @abc.abstractmethod
    async def apply(self, body: Dict, owner_references: List[Dict]) -> Dict:
        """Create or update the resource with exactly the given owner references."""

    @abc.abstractmethod
    async def delete(self, namespace: str, name: str, propagation: str = None) -> None:
        """Delete the resource, a missing resource counts as deleted."""

    @abc.abstractmethod
    def watch(self, namespace: str) -> AsyncIterator[Dict]:
        """Stream ``{"type": ..., "object": ...}`` events for the namespace."""


class TriggerClient(BaseResource, ResourceClient):
    """Trigger custom resources served through the CustomObjectsApi."""

    KIND = "Trigger"

    conf: Settings = None
    shared_api_client: ApiClient = None  # Shared across all TriggerClient instances

    def __init__(self, api_client: ApiClient = None, settings: Settings = None):
        self._api_client = api_client
        self.settings = settings or self.conf or Settings()

    @property
    def group(self) -> str:
        return self.settings.trigger_api_group

    @property
    def version(self) -> str:
        return self.settings.trigger_api_version

    @property
    def plural(self) -> str:
        return self.settings.trigger_plural

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}"

    @cached_property
    def api_client(self) -> ApiClient:
        return self._api_client or self.shared_api_client or ApiClient()

    @cached_property
    def custom_objects_api(self) -> CustomObjectsApi:
        return CustomObjectsApi(self.api_client)

    async def list(self, namespace: str) -> Dict:
        return await self.list_custom_objects(
            self.custom_objects_api,
            namespace=namespace,
            group=self.group,
            version=self.version,
            plural=self.plural,
        )

    async def get(self, namespace: str, name: str) -> Optional[Dict]:
        return await self.get_custom_object(
            self.custom_objects_api,
            namespace=namespace,
            group=self.group,
            version=self.version,
            plural=self.plural,
            name=name,
        )

    async def apply(self, body: Dict, owner_references: List[Dict]) -> Dict:
        body = copy.deepcopy(body)
        body.setdefault("apiVersion", self.api_version)
        body.setdefault("kind", self.KIND)
        metadata = body.setdefault("metadata", {})
        metadata["ownerReferences"] = copy.deepcopy(list(owner_references or []))
        namespace = metadata.get("namespace")

        if metadata.get("resourceVersion"):
            return await self.replace_custom_object(
                self.custom_objects_api,
                namespace=namespace,
                group=self.group,
                version=self.version,
                plural=self.plural,
                name=metadata["name"],
                body=body,
            )
        return await self.create_custom_object(
            self.custom_objects_api,
            namespace=namespace,
            group=self.group,
            version=self.version,
            plural=self.plural,
            body=body,
        )

    async def delete(self, namespace: str, name: str, propagation: str = None) -> None:
        delete_options = None
        if propagation is not None:
            delete_options = V1DeleteOptions(propagation_policy=str(propagation))
        await self.delete_custom_object(
            self.custom_objects_api,
            namespace=namespace,
            group=self.group,
            version=self.version,
            plural=self.plural,
            name=name,
            delete_options=delete_options,
        )

    async def watch(self, namespace: str) -> AsyncIterator[Dict]:
        async with watch.Watch() as w:
            async for event in w.stream(
                self.custom_objects_api.list_namespaced_custom_object,
                group=self.group,
                version=self.version,
                namespace=namespace,
                plural=self.plural,
            ):
                yield event
