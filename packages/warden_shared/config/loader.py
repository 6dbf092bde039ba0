"""Settings loading from a YAML file, environment variables and CLI params.

Later layers win, key by key: YAML file, then ``WARDEN_`` variables, then
CLI params, with model defaults filling whatever is left. Environment keys
nest on ``__``, so ``WARDEN_LOGGING__LEVEL=DEBUG`` sets ``logging.level``.
Values are parsed as YAML scalars, which turns ``true``, ``4`` and
``null`` into their typed forms.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .models import DEFAULT_CONFIG_PATH, ENV_PREFIX, WardenSettings


def load_settings(
    *,
    cli_params: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    config_path: str | Path | None = None,
) -> WardenSettings:
    layers = (
        _file_layer(Path(config_path) if config_path else DEFAULT_CONFIG_PATH),
        _env_layer(os.environ if environ is None else environ),
        dict(cli_params or {}),
    )
    merged: dict[str, Any] = {}
    for layer in layers:
        merged = _deep_merge(merged, layer)
    return WardenSettings.model_validate(merged)


def _file_layer(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"config file must contain a top-level mapping: {path}")
    return parsed


def _env_layer(environ: Mapping[str, str]) -> dict[str, Any]:
    layer: dict[str, Any] = {}
    for key, raw in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        path = [part.lower() for part in key[len(ENV_PREFIX) :].split("__") if part]
        if not path:
            continue
        cursor = layer
        for part in path[:-1]:
            child = cursor.get(part)
            if not isinstance(child, dict):
                child = cursor[part] = {}
            cursor = child
        cursor[path[-1]] = _parse_scalar(raw)
    return layer


def _parse_scalar(raw: str) -> Any:
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged
