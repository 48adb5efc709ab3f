"""Property access: get, pick, omit."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from shapefn.kernel.errors import InvalidConfigurationError, InvalidOperandError
from shapefn.kernel.shapes import describe

Path = str | int | Sequence[str | int]

_NOT_FOUND = object()


def parse_path(path: Path) -> list[str | int]:
    """Split a path into keys.

    ``"a.b.0"`` becomes ``["a", "b", "0"]``; numeric segments are resolved
    against sequences when the lookup happens.
    """
    if isinstance(path, bool):
        raise InvalidConfigurationError(f"get(path): expected a str, int or list path, got {describe(path)}", path)
    if isinstance(path, int):
        return [path]
    if isinstance(path, str):
        return path.split(".") if path else []
    if isinstance(path, (list, tuple)):
        return list(path)
    raise InvalidConfigurationError(f"get(path): expected a str, int or list path, got {describe(path)}", path)


def _step(value: Any, key: str | int) -> Any:
    if value is None:
        return _NOT_FOUND
    if isinstance(value, Mapping):
        return value.get(key, _NOT_FOUND)
    if isinstance(value, Sequence) and not isinstance(value, str):
        index = key
        if isinstance(index, str):
            if not index.lstrip("-").isdigit():
                return _NOT_FOUND
            index = int(index)
        try:
            return value[index]
        except IndexError:
            return _NOT_FOUND
    if isinstance(key, str):
        return getattr(value, key, _NOT_FOUND)
    return _NOT_FOUND


def lookup(value: Any, keys: list[str | int]) -> Any:
    """Follow keys into value; the module sentinel when any step is missing."""
    for key in keys:
        value = _step(value, key)
        if value is _NOT_FOUND:
            break
    return value


def get(path: Path, default: Any = None) -> Callable[[Any], Any]:
    """Read a nested property.

    Mappings are indexed by key, sequences by position, anything else by
    attribute. A missing or None value yields default, or default(value)
    when default is callable.

    Example:
        >>> get("user.tags.0")({"user": {"tags": ["admin"]}})
        'admin'
    """
    keys = parse_path(path)

    def getting(value: Any) -> Any:
        found = lookup(value, keys)
        if found is _NOT_FOUND or found is None:
            return default(value) if callable(default) else default
        return found

    return getting


def _require_mapping(value: Any, where: str) -> Mapping[Any, Any]:
    if not isinstance(value, Mapping):
        raise InvalidOperandError(f"{where}: expected a mapping, got {describe(value)}", value)
    return value


def pick(keys: Sequence[str]) -> Callable[[Mapping[Any, Any]], dict[Any, Any]]:
    """New dict with only the listed keys that are present."""
    if isinstance(keys, str) or not isinstance(keys, (list, tuple)):
        raise InvalidConfigurationError(f"pick(keys): expected a list of keys, got {describe(keys)}", keys)
    wanted = list(keys)

    def picking(value: Mapping[Any, Any]) -> dict[Any, Any]:
        source = _require_mapping(value, "pick(...)(value)")
        return {key: source[key] for key in wanted if key in source}

    return picking


def omit(keys: Sequence[str]) -> Callable[[Mapping[Any, Any]], dict[Any, Any]]:
    """New dict without the listed keys."""
    if isinstance(keys, str) or not isinstance(keys, (list, tuple)):
        raise InvalidConfigurationError(f"omit(keys): expected a list of keys, got {describe(keys)}", keys)
    unwanted = frozenset(keys)

    def omitting(value: Mapping[Any, Any]) -> dict[Any, Any]:
        source = _require_mapping(value, "omit(...)(value)")
        return {key: item for key, item in source.items() if key not in unwanted}

    return omitting
