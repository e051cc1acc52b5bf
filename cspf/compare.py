from __future__ import annotations

from typing import Any, Mapping, Sequence


def equal_values(left: Any, right: Any) -> bool:
    """Structural equality over the list/dict/scalar values a playlist can hold."""
    if isinstance(left, list) and isinstance(right, list):
        return equal_arrays(left, right)
    if isinstance(left, dict) and isinstance(right, dict):
        return equal_records(left, right)
    if isinstance(left, (list, dict)) or isinstance(right, (list, dict)):
        return False
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    # NaN != NaN, including when both sides are the same object
    return bool(left == right)


def equal_arrays(left: Sequence[Any], right: Sequence[Any]) -> bool:
    if len(left) != len(right):
        return False
    return all(equal_values(a, b) for a, b in zip(left, right))


def equal_records(left: Mapping[Any, Any], right: Mapping[Any, Any]) -> bool:
    if len(left) != len(right):
        return False
    for key, value in left.items():
        if key not in right:
            return False
        if not equal_values(value, right[key]):
            return False
    return True
