from typing import Callable, Dict, NamedTuple, Sequence
from fntriggers.resources.document import ResourceDocument
from fntriggers.utils.helpers import contains

#: Decides whether a listed resource body should be removed.
Predicate = Callable[[Dict], bool]


class FunctionReference(NamedTuple):
    name: str
    namespace: str


def build_match_removed_trigger_predicate(
    function_ref: FunctionReference, items: Sequence[Dict]
) -> Predicate:
    """Match triggers bound to the function that are no longer desired.

    The predicate raises DecodeFailure for bodies that are not triggers.
    """
    items = list(items or [])

    def predicate(body: Dict) -> bool:
        trigger = ResourceDocument(body).decode()
        if not trigger.is_reference(function_ref.name, function_ref.namespace):
            return False
        return not contains(items, trigger.name)

    return predicate
