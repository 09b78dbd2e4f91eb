import kopf
from logging import Logger
from typing import Dict, List
from fntriggers.types.schemas import FunctionSpecSchema
from fntriggers.types.models import FunctionSpec
from fntriggers.types.settings import Settings
from fntriggers.resources import FunctionTriggers, ResourceDocument, TriggerClient
from fntriggers.operator import (
    ApplyOptions,
    Callbacks,
    DeleteOptions,
    DeletionPropagation,
    Options,
    TriggersOperator,
)
from fntriggers.utils.errors import TriggersError, convert_triggers_error
from fntriggers.utils.helpers import utc_now

GROUP = "serverless.kyma-project.io"
VERSION = "v1alpha1"
PLURAL = "functions"

TRIGGER_APPLIED = "TriggerApplied"
TRIGGER_FAILED = "TriggerFailed"


def get_settings() -> Settings:
    return TriggerClient.conf or Settings()


def prepare_triggers(spec, name: str, namespace: str) -> List[Dict]:
    """Decode the function spec into desired trigger documents."""
    spec_model: FunctionSpec = FunctionSpecSchema().load(dict(spec or {}))
    builder = FunctionTriggers(name, namespace)
    return builder.prepare_triggers(spec_model.triggers)


def event_callback(body):
    """Build a post callback reporting each trigger outcome as a kopf event."""

    def report(subject, error):
        if isinstance(subject, dict):
            target = f"Trigger `{ResourceDocument(subject).name}`"
        else:
            target = f"{len(subject)} triggers"
        if error is not None:
            kopf.warn(body, reason=TRIGGER_FAILED, message=f"{target}: {error}")
        else:
            kopf.event(
                body, type="Normal", reason=TRIGGER_APPLIED, message=f"{target} reconciled."
            )

    return report


@kopf.on.resume(GROUP, VERSION, PLURAL)
@kopf.on.create(GROUP, VERSION, PLURAL)
@kopf.on.update(GROUP, VERSION, PLURAL, field="spec.triggers")
async def reconciliation(
    body, spec, name, namespace, patch, logger: Logger, **kwargs
):
    """Reconcile the triggers of a function."""
    conf = get_settings()
    triggers = prepare_triggers(spec, name, namespace)
    operator = TriggersOperator(
        TriggerClient(), name, namespace, *triggers, logger=logger
    )
    options = ApplyOptions(
        owner_references=[kopf.build_owner_reference(body)],
        options=Options(
            wait_for_apply=conf.wait_for_apply,
            wait_timeout=conf.wait_timeout,
            callbacks=Callbacks(post=[event_callback(body)]),
        ),
    )
    try:
        await operator.apply(options)
    except TriggersError as e:
        logger.error(f"Failed to reconcile triggers: {e}")
        patch.status["ready"] = False
        convert_triggers_error(e)

    patch.status.update(
        {
            "ready": True,
            "triggers": [ResourceDocument(t).name for t in triggers],
            "lastUpdateTime": utc_now().isoformat(),
        }
    )


@kopf.on.delete(GROUP, VERSION, PLURAL)
async def on_delete(body, spec, name, namespace, logger: Logger, **kwargs):
    """Delete the triggers of a function."""
    conf = get_settings()
    triggers = prepare_triggers(spec, name, namespace)
    operator = TriggersOperator(
        TriggerClient(), name, namespace, *triggers, logger=logger
    )
    try:
        await operator.delete(
            DeleteOptions(
                deletion_propagation=DeletionPropagation(conf.deletion_propagation)
            )
        )
    except TriggersError as e:
        logger.error(f"Failed to delete triggers: {e}")
        convert_triggers_error(e)
    logger.info(f"Deleted {len(triggers)} triggers of function `{namespace}/{name}`")
