"""Namespaced scratch storage on request/response objects.

Stages share intermediate data through ``obj.locals``.  A *namespace* is a
dotted key grouping one middleware's data: an authentication stage might
keep the user id at ``locals["auth"]["user_id"]`` via namespace
``"auth.user_id"``.

``obj`` is usually a :class:`~exchange_io.exchange.Request` or
:class:`~exchange_io.exchange.Response`, but any object accepting a
``locals`` attribute (or a plain ``dict``) works.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any, Final


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = _Unset()
"""Stand-in for "no value".  Writing it removes the namespace."""

_MISSING = object()


def _root(obj: Any, create: bool) -> MutableMapping[str, Any] | None:
    if isinstance(obj, MutableMapping):
        if obj.get("locals") is None and create:
            obj["locals"] = {}
        return obj.get("locals")
    if getattr(obj, "locals", None) is None and create:
        obj.locals = {}
    return getattr(obj, "locals", None)


def _lookup(root: Mapping[str, Any], keys: list[str]) -> Any:
    node: Any = root
    for key in keys:
        if not isinstance(node, Mapping) or key not in node:
            return _MISSING
        node = node[key]
    return node


def _parent(root: MutableMapping[str, Any], keys: list[str]) -> MutableMapping[str, Any]:
    node = root
    for key in keys[:-1]:
        child = node.get(key)
        if not isinstance(child, MutableMapping):
            child = node[key] = {}
        node = child
    return node


def deep_merge(target: MutableMapping[str, Any], source: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Merge *source* into *target* in place, recursing into nested mappings."""
    for key, value in source.items():
        if value is UNSET:
            continue
        current = target.get(key)
        if isinstance(current, MutableMapping) and isinstance(value, Mapping):
            deep_merge(current, value)
        elif isinstance(value, Mapping):
            target[key] = deep_merge({}, value)
        else:
            target[key] = value
    return target


def get_locals(obj: Any, namespace: str, default: Any = None) -> Any:
    """Read the data stored in *namespace* of ``obj.locals``."""
    root = _root(obj, create=False)
    if root is None:
        return default
    value = _lookup(root, namespace.split("."))
    return default if value is _MISSING else value


def set_locals(obj: Any, namespace: str, data: Any) -> Any:
    """Store *data* in *namespace* of ``obj.locals`` and return *obj*.

    * ``UNSET`` removes the namespace.
    * A mapping written over an existing mapping is deep-merged into it.
    * Anything else replaces the stored value.
    """
    root = _root(obj, create=True)
    keys = namespace.split(".")

    if data is UNSET:
        parent = _lookup(root, keys[:-1])
        if isinstance(parent, MutableMapping):
            parent.pop(keys[-1], None)
        return obj

    parent = _parent(root, keys)
    current = parent.get(keys[-1])
    if isinstance(current, MutableMapping) and isinstance(data, Mapping):
        deep_merge(current, data)
    else:
        parent[keys[-1]] = data
    return obj


def put_locals(obj: Any, namespace: str, data: Any) -> Any:
    """Like :func:`set_locals`, but always replaces instead of merging."""
    root = _root(obj, create=True)
    keys = namespace.split(".")
    _parent(root, keys)[keys[-1]] = data
    return obj
