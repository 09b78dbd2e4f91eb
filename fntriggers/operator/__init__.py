from .options import (
    Callback,
    Callbacks,
    Options,
    ApplyOptions,
    DeleteOptions,
    DeletionPropagation,
)
from .callbacks import run_phase
from .predicates import FunctionReference, build_match_removed_trigger_predicate
from .waiter import wait_for_trigger
from .triggers import TriggersOperator, wipe_removed

__all__ = [
    "Callback",
    "Callbacks",
    "Options",
    "ApplyOptions",
    "DeleteOptions",
    "DeletionPropagation",
    "run_phase",
    "FunctionReference",
    "build_match_removed_trigger_predicate",
    "wait_for_trigger",
    "TriggersOperator",
    "wipe_removed",
]
