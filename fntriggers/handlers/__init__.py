from . import function, probes

__all__ = ["function", "probes"]
