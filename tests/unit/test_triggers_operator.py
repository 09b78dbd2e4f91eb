"""Unit tests for TriggersOperator apply/delete and the orphan wipe."""

import asyncio
import pytest
from unittest.mock import Mock, call
from fntriggers.operator import (
    ApplyOptions,
    Callbacks,
    DeleteOptions,
    DeletionPropagation,
    FunctionReference,
    Options,
    TriggersOperator,
    build_match_removed_trigger_predicate,
    wipe_removed,
)
from fntriggers.utils.errors import (
    CallbackAborted,
    CallbackObservedFailure,
    DecodeFailure,
    FetchFailure,
    ListFailure,
    MutationFailure,
    WaitTimeout,
)

OWNER = {
    "apiVersion": "serverless.kyma-project.io/v1alpha1",
    "kind": "Function",
    "name": "pay",
    "uid": "0b5c7b7e-2f7a-4d3c-9a55-4f3f5c1e2d11",
    "controller": True,
    "blockOwnerDeletion": True,
}


def veto(subject, error):
    raise ValueError("veto")


def build_operator(client, sensor, *items):
    operator = TriggersOperator(client, "pay", "ns", *items)
    operator.sensor = sensor
    return operator


class TestWipeRemoved:
    @pytest.mark.asyncio
    async def test_deletes_only_orphans(self, client, make_trigger):
        client.list.return_value = {"items": [make_trigger("a"), make_trigger("b")]}
        predicate = build_match_removed_trigger_predicate(
            FunctionReference("pay", "ns"), [make_trigger("a")]
        )

        removed = await wipe_removed(client, "ns", predicate)

        assert removed == ["b"]
        client.list.assert_awaited_once_with("ns")
        client.delete.assert_awaited_once_with("ns", "b")

    @pytest.mark.asyncio
    async def test_list_failure(self, client):
        client.list.side_effect = RuntimeError("forbidden")
        with pytest.raises(ListFailure) as exc_info:
            await wipe_removed(client, "ns", lambda body: True)
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        client.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_failure_reaches_post_callbacks(self, client, make_trigger):
        client.list.return_value = {"items": [make_trigger("b")]}
        client.delete.side_effect = RuntimeError("conflict")
        post = Mock(return_value=None)
        options = Options(callbacks=Callbacks(post=[post]))

        with pytest.raises(MutationFailure):
            await wipe_removed(client, "ns", lambda body: True, options)

        subject, error = post.call_args.args
        assert subject["metadata"]["name"] == "b"
        assert isinstance(error, MutationFailure)

    @pytest.mark.asyncio
    async def test_pre_callback_keeps_orphan(self, client, make_trigger):
        client.list.return_value = {"items": [make_trigger("b")]}
        options = Options(callbacks=Callbacks(pre=[veto]))

        with pytest.raises(CallbackAborted):
            await wipe_removed(client, "ns", lambda body: True, options)
        client.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_stops_at_first_failure(self, client, make_trigger):
        client.list.return_value = {"items": [make_trigger("a"), make_trigger("b")]}
        client.delete.side_effect = RuntimeError("conflict")

        with pytest.raises(MutationFailure):
            await wipe_removed(client, "ns", lambda body: True)
        client.delete.assert_awaited_once_with("ns", "a")

    @pytest.mark.asyncio
    async def test_undecodable_item_fails(self, client):
        client.list.return_value = {"items": [{"kind": "Trigger"}]}
        predicate = build_match_removed_trigger_predicate(
            FunctionReference("pay", "ns"), []
        )
        with pytest.raises(DecodeFailure):
            await wipe_removed(client, "ns", predicate)


class TestTriggersOperatorApply:
    @pytest.mark.asyncio
    async def test_creates_missing_trigger(self, client, sensor, make_trigger):
        operator = build_operator(client, sensor, make_trigger("a"))

        await operator.apply(ApplyOptions(owner_references=[OWNER]))

        client.get.assert_awaited_once_with("ns", "a")
        body, owner_references = client.apply.await_args.args
        assert body["metadata"]["name"] == "a"
        assert owner_references == [OWNER]
        sensor.on_trigger_applied.assert_called_once_with("pay", "ns", "a", "created")
        assert sensor.on_apply_complete.call_args.args[3] is True

    @pytest.mark.asyncio
    async def test_list_failure_stops_apply(self, client, sensor, make_trigger):
        client.list.side_effect = RuntimeError("forbidden")
        operator = build_operator(client, sensor, make_trigger("a"))

        with pytest.raises(ListFailure):
            await operator.apply(ApplyOptions())

        client.get.assert_not_awaited()
        client.apply.assert_not_awaited()
        assert sensor.on_apply_complete.call_args.args[3] is False

    @pytest.mark.asyncio
    async def test_pre_callback_aborts_before_mutation(self, client, sensor, make_trigger):
        operator = build_operator(client, sensor, make_trigger("a"))
        options = Options(callbacks=Callbacks(pre=[veto]))

        with pytest.raises(CallbackAborted):
            await operator.apply(ApplyOptions(options=options))

        client.get.assert_not_awaited()
        client.apply.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_waits_for_applied_trigger(
        self, client, sensor, make_trigger, make_stream
    ):
        client.watch = Mock(
            side_effect=make_stream({"type": "ADDED", "object": make_trigger("a")})
        )
        operator = build_operator(client, sensor, make_trigger("a"))
        options = Options(wait_for_apply=True, wait_timeout=5)

        await operator.apply(ApplyOptions(options=options))

        client.apply.assert_awaited_once()
        client.watch.assert_called_once_with("ns")
        assert sensor.on_wait_complete.call_args.args[4] is True

    @pytest.mark.asyncio
    async def test_wait_timeout_reaches_post_callbacks(self, client, sensor, make_trigger):
        async def idle(namespace):
            await asyncio.sleep(10)
            yield {"type": "ADDED", "object": make_trigger("a")}

        client.watch = Mock(side_effect=idle)
        post = Mock(return_value=None)
        operator = build_operator(client, sensor, make_trigger("a"))
        options = Options(
            wait_for_apply=True, wait_timeout=0.01, callbacks=Callbacks(post=[post])
        )

        with pytest.raises(WaitTimeout):
            await operator.apply(ApplyOptions(options=options))

        assert isinstance(post.call_args.args[1], WaitTimeout)
        assert sensor.on_wait_complete.call_args.args[4] is False

    @pytest.mark.asyncio
    async def test_post_callback_vetoes_after_mutation(self, client, sensor, make_trigger):
        operator = build_operator(client, sensor, make_trigger("a"))
        options = Options(callbacks=Callbacks(post=[veto]))

        with pytest.raises(CallbackObservedFailure):
            await operator.apply(ApplyOptions(options=options))

        client.apply.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_fetch_failure(self, client, sensor, make_trigger):
        client.get.side_effect = RuntimeError("timeout")
        operator = build_operator(client, sensor, make_trigger("a"))

        with pytest.raises(FetchFailure):
            await operator.apply(ApplyOptions())
        client.apply.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_mutation_failure_reaches_post_callbacks(
        self, client, sensor, make_trigger
    ):
        client.apply.side_effect = RuntimeError("invalid")
        post = Mock(return_value=None)
        operator = build_operator(client, sensor, make_trigger("a"), make_trigger("b"))
        options = Options(callbacks=Callbacks(post=[post]))

        with pytest.raises(MutationFailure):
            await operator.apply(ApplyOptions(options=options))

        assert post.call_count == 1
        assert isinstance(post.call_args.args[1], MutationFailure)
        client.get.assert_awaited_once_with("ns", "a")

    @pytest.mark.asyncio
    async def test_updates_existing_trigger_with_merged_metadata(
        self, client, sensor, make_trigger
    ):
        client.get.return_value = make_trigger(
            "a", labels={"team": "payments", "tier": "old"}, resource_version="42"
        )
        item = make_trigger("a", labels={"tier": "new"})
        operator = build_operator(client, sensor, item)

        await operator.apply(ApplyOptions(owner_references=[OWNER]))

        body, owner_references = client.apply.await_args.args
        assert body["metadata"]["labels"] == {"team": "payments", "tier": "new"}
        assert "annotations" not in body["metadata"]
        assert body["metadata"]["resourceVersion"] == "42"
        assert owner_references == [OWNER]
        assert item["metadata"]["labels"] == {"tier": "new"}
        sensor.on_trigger_applied.assert_called_once_with("pay", "ns", "a", "updated")

    @pytest.mark.asyncio
    async def test_keeps_empty_annotations(self, client, sensor, make_trigger):
        client.get.return_value = make_trigger("a", annotations={})
        operator = build_operator(client, sensor, make_trigger("a"))

        await operator.apply(ApplyOptions())

        body = client.apply.await_args.args[0]
        assert body["metadata"]["annotations"] == {}

    @pytest.mark.asyncio
    async def test_item_without_namespace_uses_function_namespace(
        self, client, sensor
    ):
        item = {"metadata": {"name": "a"}, "spec": {}}
        operator = build_operator(client, sensor, item)

        await operator.apply(ApplyOptions())

        client.get.assert_awaited_once_with("ns", "a")
        assert client.apply.await_args.args[0]["metadata"]["namespace"] == "ns"

    @pytest.mark.asyncio
    async def test_wipes_orphans_before_applying(self, client, sensor, make_trigger):
        calls = []
        client.list.return_value = {"items": [make_trigger("a"), make_trigger("b")]}
        client.delete.side_effect = lambda namespace, name: calls.append(("delete", name))
        client.apply.side_effect = lambda body, refs: calls.append(
            ("apply", body["metadata"]["name"])
        )
        operator = build_operator(client, sensor, make_trigger("a"))

        await operator.apply(ApplyOptions())

        assert calls == [("delete", "b"), ("apply", "a")]
        sensor.on_trigger_deleted.assert_called_once_with("pay", "ns", "b", orphan=True)

    @pytest.mark.asyncio
    async def test_reconciles_function_triggers(self, client, sensor, make_trigger):
        client.list.return_value = {
            "items": [
                make_trigger("stale-trigger"),
                make_trigger("ship-trigger", function="ship"),
            ]
        }
        operator = build_operator(client, sensor, make_trigger("order-created"))

        await operator.apply(ApplyOptions(owner_references=[OWNER]))

        client.delete.assert_awaited_once_with("ns", "stale-trigger")
        body, owner_references = client.apply.await_args.args
        assert body["metadata"]["name"] == "order-created"
        assert owner_references == [OWNER]

    @pytest.mark.asyncio
    async def test_does_not_mutate_desired_items(self, client, sensor, make_trigger):
        item = make_trigger("a")
        client.get.return_value = make_trigger("a", resource_version="7")
        operator = build_operator(client, sensor, item)

        await operator.apply(ApplyOptions(owner_references=[OWNER]))

        assert "resourceVersion" not in item["metadata"]


class TestTriggersOperatorDelete:
    @pytest.mark.asyncio
    async def test_deletes_every_item(self, client, sensor, make_trigger):
        operator = build_operator(client, sensor, make_trigger("a"), make_trigger("b"))

        await operator.delete(
            DeleteOptions(deletion_propagation=DeletionPropagation.FOREGROUND)
        )

        assert client.delete.await_args_list == [
            call("ns", "a", DeletionPropagation.FOREGROUND),
            call("ns", "b", DeletionPropagation.FOREGROUND),
        ]
        sensor.on_trigger_deleted.assert_any_call("pay", "ns", "b", orphan=False)
        assert sensor.on_delete_complete.call_args.args[3] is True

    @pytest.mark.asyncio
    async def test_default_propagation(self, client, sensor, make_trigger):
        operator = build_operator(client, sensor, make_trigger("a"))

        await operator.delete(DeleteOptions())

        client.delete.assert_awaited_once_with("ns", "a", DeletionPropagation.BACKGROUND)
        assert str(DeletionPropagation.BACKGROUND) == "Background"

    @pytest.mark.asyncio
    async def test_delete_failure_stops_and_reaches_post(
        self, client, sensor, make_trigger
    ):
        client.delete.side_effect = RuntimeError("forbidden")
        post = Mock(return_value=None)
        items = [make_trigger("a"), make_trigger("b")]
        operator = build_operator(client, sensor, *items)
        options = Options(callbacks=Callbacks(post=[post]))

        with pytest.raises(MutationFailure):
            await operator.delete(DeleteOptions(options=options))

        client.delete.assert_awaited_once()
        subject, error = post.call_args.args
        assert subject == items
        assert isinstance(error, MutationFailure)
        assert sensor.on_delete_complete.call_args.args[3] is False

    @pytest.mark.asyncio
    async def test_pre_callback_prevents_deletion(self, client, sensor, make_trigger):
        operator = build_operator(client, sensor, make_trigger("a"))
        options = Options(callbacks=Callbacks(pre=[veto]))

        with pytest.raises(CallbackAborted):
            await operator.delete(DeleteOptions(options=options))
        client.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_post_callback_vetoes_deletion(self, client, sensor, make_trigger):
        operator = build_operator(client, sensor, make_trigger("a"))
        options = Options(callbacks=Callbacks(post=[veto]))

        with pytest.raises(CallbackObservedFailure):
            await operator.delete(DeleteOptions(options=options))
        client.delete.assert_awaited_once()
