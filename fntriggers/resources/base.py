import mmh3
import hashlib
from typing import Any, Dict, Optional, Union
from fntriggers.utils.helpers import canonicalize_dict
from fntriggers.utils.errors import already_exists_error, not_found_error
from kubernetes_asyncio.client import (
    ApiException,
    CustomObjectsApi,
    V1DeleteOptions,
)


class BaseResource:
    """Base resource model."""

    OPERATOR_NAME = "function-triggers-operator"

    def compute_hash(self, data: Any) -> str:
        """Compute a murmur3 hash."""
        if isinstance(data, dict):
            _data = canonicalize_dict(data)
        elif isinstance(data, str):
            _data = data.encode()
        else:
            raise ValueError(f"Hash of {type(data)} is not supported.")
        mumur_str = str(mmh3.hash128(_data))

        hash_obj = hashlib.sha256(mumur_str.encode("utf-8"))
        full_hash = hash_obj.hexdigest()

        # First 16 characters keep names and labels readable
        return full_hash[:16]

    def prepare_hash_annotation(self, hash: Union[str, int]) -> Dict[str, str]:
        """Prepare hash annotation for k8s resources."""
        return {"serverless.kyma-project.io/trigger-hash": str(hash)}

    async def get_custom_object(
        self,
        custom_objects_api: CustomObjectsApi,
        namespace: str,
        group: str,
        version: str,
        plural: str,
        name: str,
    ) -> Optional[Dict]:
        try:
            return await custom_objects_api.get_namespaced_custom_object(
                group=group,
                version=version,
                namespace=namespace,
                plural=plural,
                name=name,
            )
        except ApiException as ex:
            if not_found_error(ex):
                return None
            raise

    async def list_custom_objects(
        self,
        custom_objects_api: CustomObjectsApi,
        namespace: str,
        group: str,
        version: str,
        plural: str,
        label_selector: str = None,
    ) -> Dict:
        return await custom_objects_api.list_namespaced_custom_object(
            group=group,
            version=version,
            namespace=namespace,
            plural=plural,
            label_selector=label_selector,
        )

    async def create_custom_object(
        self,
        custom_objects_api: CustomObjectsApi,
        namespace: str,
        group: str,
        version: str,
        plural: str,
        body: Dict,
    ) -> Dict:
        try:
            return await custom_objects_api.create_namespaced_custom_object(
                group=group,
                version=version,
                namespace=namespace,
                plural=plural,
                body=body,
            )
        except ApiException as ex:
            if not already_exists_error(ex):
                raise
        # Lost a race with another writer, replace on top of the live version.
        name = body["metadata"]["name"]
        live = await self.get_custom_object(
            custom_objects_api, namespace, group, version, plural, name
        )
        if live is not None:
            body["metadata"]["resourceVersion"] = live["metadata"].get(
                "resourceVersion"
            )
        return await self.replace_custom_object(
            custom_objects_api, namespace, group, version, plural, name, body
        )

    async def replace_custom_object(
        self,
        custom_objects_api: CustomObjectsApi,
        namespace: str,
        group: str,
        version: str,
        plural: str,
        name: str,
        body: Dict,
    ) -> Dict:
        return await custom_objects_api.replace_namespaced_custom_object(
            group=group,
            version=version,
            namespace=namespace,
            plural=plural,
            name=name,
            body=body,
        )

    async def delete_custom_object(
        self,
        custom_objects_api: CustomObjectsApi,
        namespace: str,
        group: str,
        version: str,
        plural: str,
        name: str,
        delete_options: V1DeleteOptions = None,
    ) -> None:
        try:
            await custom_objects_api.delete_namespaced_custom_object(
                group=group,
                version=version,
                namespace=namespace,
                plural=plural,
                name=name,
                body=delete_options,
            )
        except ApiException as ex:
            if not_found_error(ex):
                return
            raise
