from typing import List, Optional
from fntriggers.types.base import BaseModel


class FunctionTriggerSpec(BaseModel):
    event_type_version: str
    source: str
    type: str


class FunctionSpec(BaseModel):
    triggers: Optional[List[FunctionTriggerSpec]]
