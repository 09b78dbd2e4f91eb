import jsonpickle
from datetime import datetime, timezone
from typing import Dict, Iterable, Mapping, Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def merge_map(
    left: Optional[Mapping[str, str]], right: Optional[Mapping[str, str]]
) -> Optional[Dict[str, str]]:
    """Merge two string maps, values from `right` win on collision.

    Returns None only when both inputs are None, so callers can tell
    "no map" apart from "empty map". Neither input is modified.
    """
    if left is None and right is None:
        return None
    merged = dict(left or {})
    merged.update(right or {})
    return merged


def contains(items: Optional[Iterable[Mapping]], name: str) -> bool:
    """Return True if any resource body in `items` is named `name`."""
    for item in items or ():
        metadata = item.get("metadata") or {}
        if metadata.get("name") == name:
            return True
    return False


def sort_dict_keys(d):
    """Recursively sort dictionary keys and handle nested structures.

    Args:
        d: Data structure (dict, list, or primitive type)

    Returns:
        Sorted version of the data structure
    """
    if isinstance(d, dict):
        return {key: sort_dict_keys(value) for key, value in sorted(d.items())}
    elif isinstance(d, list):
        return [sort_dict_keys(item) for item in d]
    else:
        return d


def canonicalize_dict(data):
    """
    Returns a canonical JSON representation of a dictionary.

    Keys are sorted recursively so the representation stays the same when key
    order varies.
    """
    return jsonpickle.dumps(sort_dict_keys(data), unpicklable=False)
