"""Option file loading and command-line overrides."""

from __future__ import annotations

import copy
import json
from enum import Enum
from pathlib import Path
from typing import Any

import numpy as np


def load_json(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _parse_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def apply_overrides(config: dict[str, Any], overrides: list[str]) -> dict[str, Any]:
    """Return a copy of config with ``key=value`` overrides applied.

    Dotted keys address nested mappings. Values are parsed as JSON when
    possible (``step=0.01``, ``permute_on=false``) and kept as strings
    otherwise (``sub_mode=AdaMax``).

    Raises:
        ValueError: If an override has no ``=``.
    """
    result = copy.deepcopy(config)
    for item in overrides:
        key, sep, raw = item.partition("=")
        if not sep or not key:
            raise ValueError(f"Override must be key=value, got: {item}")
        *parents, leaf = key.strip().split(".")
        node = result
        for name in parents:
            child = node.get(name)
            if not isinstance(child, dict):
                child = node[name] = {}
            node = child
        node[leaf] = _parse_value(raw.strip())
    return result


def to_jsonable(value: Any) -> Any:
    """Convert option values (arrays, enums) to values json.dumps accepts.

    Infinite floats are kept; json writes them as ``Infinity``.
    """
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, np.ndarray):
        return to_jsonable(value.tolist())
    if isinstance(value, np.generic):
        return to_jsonable(value.item())
    if isinstance(value, Enum):
        return value.value
    return value
