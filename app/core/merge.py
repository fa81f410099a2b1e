"""Merge helpers shared by the config and response stores."""

from copy import deepcopy
from typing import Any, Mapping


def deep_merge(defaults: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """
    Return ``defaults`` with ``overrides`` applied recursively.

    Nested mappings are merged key by key; any other value in ``overrides``
    replaces the default outright. Keys missing from ``overrides`` keep the
    default, so the result always carries every default key. Neither input
    is mutated.
    """
    merged = deepcopy(dict(defaults))
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged
