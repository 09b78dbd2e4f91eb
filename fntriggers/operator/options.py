from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union
from fntriggers.types.base import BaseModel

#: Called with (subject, error). Raising vetoes the surrounding operation.
Callback = Callable[[Any, Optional[Exception]], Union[None, Awaitable[None]]]


class DeletionPropagation(str, Enum):
    ORPHAN = "Orphan"
    BACKGROUND = "Background"
    FOREGROUND = "Foreground"

    def __str__(self) -> str:
        return self.value


class Callbacks(BaseModel):
    pre: Sequence[Callback] = ()
    post: Sequence[Callback] = ()


class Options(BaseModel):
    wait_for_apply: bool = False
    wait_timeout: Optional[float] = None
    callbacks: Optional[Callbacks] = None

    @property
    def pre_callbacks(self) -> Sequence[Callback]:
        return self.callbacks.pre if self.callbacks else ()

    @property
    def post_callbacks(self) -> Sequence[Callback]:
        return self.callbacks.post if self.callbacks else ()


class ApplyOptions(BaseModel):
    owner_references: List[Dict] = ()
    options: Optional[Options] = None


class DeleteOptions(BaseModel):
    deletion_propagation: DeletionPropagation = DeletionPropagation.BACKGROUND
    options: Optional[Options] = None
