from .client import ResourceClient, TriggerClient
from .document import ResourceDocument
from .function import FunctionTriggers

__all__ = ["ResourceClient", "TriggerClient", "ResourceDocument", "FunctionTriggers"]
