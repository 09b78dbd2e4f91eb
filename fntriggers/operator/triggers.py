import copy
import time
import logging
from logging import Logger
from typing import Dict, List, Optional, Sequence
from fntriggers.operator.callbacks import PRE, POST, run_phase
from fntriggers.operator.options import ApplyOptions, DeleteOptions, Options
from fntriggers.operator.predicates import (
    FunctionReference,
    Predicate,
    build_match_removed_trigger_predicate,
)
from fntriggers.operator.waiter import wait_for_trigger
from fntriggers.resources.client import ResourceClient
from fntriggers.resources.document import ResourceDocument
from fntriggers.sensors.base import OperatorSensor
from fntriggers.utils.helpers import merge_map
from fntriggers.utils.errors import (
    FetchFailure,
    ListFailure,
    MutationFailure,
    TriggersError,
)

module_logger = logging.getLogger(__name__)

CREATED = "created"
UPDATED = "updated"


async def wipe_removed(
    client: ResourceClient,
    namespace: str,
    predicate: Predicate,
    options: Optional[Options] = None,
    logger: Logger = None,
) -> List[str]:
    """Delete every listed trigger the predicate matches.

    Each deletion runs between the pre and post callbacks of `options`, with
    the trigger body as subject. The first failure stops the wipe.

    Returns:
        Names of the deleted triggers, in listing order.
    """
    options = options or Options()
    logger = logger or module_logger
    try:
        result = await client.list(namespace)
    except Exception as ex:
        raise ListFailure(f"Listing triggers in `{namespace}` failed: {ex}", ex)

    removed = []
    for body in (result or {}).get("items") or []:
        if not predicate(body):
            continue
        name = ResourceDocument(body).name
        await run_phase(PRE, options.pre_callbacks, body)
        error = None
        try:
            await client.delete(namespace, name)
        except Exception as ex:
            error = MutationFailure(
                f"Deleting orphaned trigger `{namespace}/{name}` failed: {ex}", ex
            )
        await run_phase(POST, options.post_callbacks, body, error)
        logger.warning(f"Deleted orphaned trigger `{namespace}/{name}`")
        removed.append(name)
    return removed


class TriggersOperator:
    """Keeps the triggers of one function in line with its desired triggers.

    An instance covers a single reconciliation pass. Items are resource bodies
    identified by `metadata.name`; they are the only source of truth for what
    should exist. Concurrent passes for the same function must be serialized
    by the caller.
    """

    sensor: OperatorSensor = OperatorSensor()

    client: ResourceClient
    function_ref: FunctionReference
    items: List[Dict]
    logger: Logger

    def __init__(
        self,
        client: ResourceClient,
        function_name: str,
        namespace: str,
        *items: Dict,
        logger: Logger = None,
    ):
        self.client = client
        self.function_ref = FunctionReference(function_name, namespace)
        self.items = list(items)
        self.logger = logger or module_logger

    @property
    def function_name(self) -> str:
        return self.function_ref.name

    @property
    def namespace(self) -> str:
        return self.function_ref.namespace

    async def apply(self, opts: ApplyOptions) -> None:
        """Remove orphaned triggers, then create or update each desired trigger.

        Fails fast: the first error stops the pass and is raised.
        """
        options = opts.options or Options()
        state = self.sensor.on_apply_start(
            self.function_name, self.namespace, len(self.items)
        )
        try:
            predicate = build_match_removed_trigger_predicate(
                self.function_ref, self.items
            )
            removed = await wipe_removed(
                self.client, self.namespace, predicate, options, logger=self.logger
            )
            for name in removed:
                self.sensor.on_trigger_deleted(
                    self.function_name, self.namespace, name, orphan=True
                )
            for item in self.items:
                await self.apply_item(item, opts.owner_references, options)
        except Exception as ex:
            self.sensor.on_apply_complete(
                self.function_name, self.namespace, state, False, ex
            )
            raise
        self.sensor.on_apply_complete(self.function_name, self.namespace, state, True)

    async def apply_item(
        self, item: Dict, owner_references: Sequence[Dict], options: Options
    ) -> None:
        document = ResourceDocument(item)
        namespace = document.namespace or self.namespace
        await run_phase(PRE, options.pre_callbacks, item)
        error = None
        try:
            await self.apply_object(item, namespace, owner_references)
            if options.wait_for_apply:
                await self.wait_for_apply(namespace, document.name, options.wait_timeout)
        except TriggersError as ex:
            error = ex
        await run_phase(POST, options.post_callbacks, item, error)

    async def apply_object(
        self, item: Dict, namespace: str, owner_references: Sequence[Dict]
    ) -> str:
        """Create the trigger, or update it on top of the live one."""
        name = ResourceDocument(item).name
        try:
            existing = await self.client.get(namespace, name)
        except Exception as ex:
            raise FetchFailure(f"Fetching trigger `{namespace}/{name}` failed: {ex}", ex)

        body = self.prepare_body(item, existing, namespace)
        try:
            await self.client.apply(body, list(owner_references or []))
        except Exception as ex:
            raise MutationFailure(f"Applying trigger `{namespace}/{name}` failed: {ex}", ex)

        operation = CREATED if existing is None else UPDATED
        self.logger.info(f"Trigger `{namespace}/{name}` {operation}")
        self.sensor.on_trigger_applied(self.function_name, namespace, name, operation)
        return operation

    def prepare_body(
        self, item: Dict, existing: Optional[Dict], namespace: str
    ) -> Dict:
        """Prepare the body to write: the desired item merged onto `existing`."""
        body = copy.deepcopy(dict(item))
        metadata = body.setdefault("metadata", {})
        metadata.setdefault("namespace", namespace)
        if existing is None:
            return body

        current = ResourceDocument(existing)
        merged = {
            "labels": merge_map(current.labels, metadata.get("labels")),
            "annotations": merge_map(current.annotations, metadata.get("annotations")),
        }
        for key, value in merged.items():
            if value is None:
                metadata.pop(key, None)
            else:
                metadata[key] = value
        if current.resource_version:
            metadata["resourceVersion"] = current.resource_version
        return body

    async def wait_for_apply(
        self, namespace: str, name: str, timeout: Optional[float] = None
    ) -> None:
        started = time.monotonic()
        try:
            await wait_for_trigger(self.client, namespace, name, timeout=timeout)
        except TriggersError:
            self.sensor.on_wait_complete(
                self.function_name, namespace, name, time.monotonic() - started, False
            )
            raise
        self.sensor.on_wait_complete(
            self.function_name, namespace, name, time.monotonic() - started, True
        )

    async def delete(self, opts: DeleteOptions) -> None:
        """Delete every desired trigger with the requested propagation policy."""
        options = opts.options or Options()
        state = self.sensor.on_delete_start(
            self.function_name, self.namespace, len(self.items)
        )
        try:
            await run_phase(PRE, options.pre_callbacks, self.items)
            error = None
            try:
                await self.delete_items(opts.deletion_propagation)
            except MutationFailure as ex:
                error = ex
            await run_phase(POST, options.post_callbacks, self.items, error)
        except Exception as ex:
            self.sensor.on_delete_complete(
                self.function_name, self.namespace, state, False, ex
            )
            raise
        self.sensor.on_delete_complete(self.function_name, self.namespace, state, True)

    async def delete_items(self, propagation) -> None:
        for item in self.items:
            document = ResourceDocument(item)
            namespace = document.namespace or self.namespace
            try:
                await self.client.delete(namespace, document.name, propagation)
            except Exception as ex:
                raise MutationFailure(
                    f"Deleting trigger `{namespace}/{document.name}` failed: {ex}", ex
                )
            self.logger.info(f"Trigger `{namespace}/{document.name}` deleted")
            self.sensor.on_trigger_deleted(
                self.function_name, namespace, document.name, orphan=False
            )
