"""Shared fixtures for trigger reconciliation tests."""

import pytest
from unittest.mock import AsyncMock, Mock
from fntriggers.resources.client import ResourceClient
from fntriggers.sensors.base import OperatorSensor


@pytest.fixture
def make_trigger():
    """Factory for trigger bodies delivering to a function's service."""

    def _make(
        name,
        function="pay",
        namespace="ns",
        kind="Service",
        labels=None,
        annotations=None,
        resource_version=None,
    ):
        metadata = {"name": name, "namespace": namespace}
        if labels is not None:
            metadata["labels"] = labels
        if annotations is not None:
            metadata["annotations"] = annotations
        if resource_version is not None:
            metadata["resourceVersion"] = resource_version
        return {
            "apiVersion": "eventing.knative.dev/v1alpha1",
            "kind": "Trigger",
            "metadata": metadata,
            "spec": {
                "broker": "default",
                "filter": {"attributes": {"type": name}},
                "subscriber": {
                    "ref": {
                        "apiVersion": "v1",
                        "kind": kind,
                        "name": function,
                        "namespace": namespace,
                    }
                },
            },
        }

    return _make


@pytest.fixture
def make_stream():
    """Factory for fake watch streams yielding the given events."""

    def _make(*events, error=None):
        async def stream(namespace):
            for event in events:
                yield event
            if error is not None:
                raise error

        return stream

    return _make


@pytest.fixture
def client():
    """Resource client whose cluster holds no triggers."""
    client = Mock(spec=ResourceClient)
    client.list = AsyncMock(return_value={"items": []})
    client.get = AsyncMock(return_value=None)
    client.apply = AsyncMock(return_value={})
    client.delete = AsyncMock(return_value=None)
    return client


@pytest.fixture
def sensor():
    return Mock(spec=OperatorSensor)
