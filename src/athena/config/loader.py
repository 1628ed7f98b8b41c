# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/athena/config/loader.py

import logging
import os
import yaml
from pathlib import Path
from pydantic import ValidationError
from .models import AthenaConfig
from athena.api.errors import AthenaError

log = logging.getLogger("athena")

# config key -> environment variable supplying its default
ENV_DEFAULTS = {
    "scheme": "ATHENA_SCHEME",
    "address": "ATHENA_ADDRESS",
    "port": "ATHENA_PORT",
    "user": "ATHENA_USER",
    "password": "ATHENA_PASSWORD",
    "verify_ssl": "ATHENA_VERIFY_SSL",
    "request_timeout_seconds": "ATHENA_REQUEST_TIMEOUT",
}


class ConfigError(AthenaError):
    """Raised when the endpoint configuration is missing or invalid."""


def _deep_merge(base: dict, override: dict) -> dict:
    """
    Recursively merge *override* into *base* (mutates base).
    Only overwrites when the override value is non-empty.
    """
    for key, value in override.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, dict)
        ):
            _deep_merge(base[key], value)
        else:
            if value not in (None, ""):
                base[key] = value
    return base


def _env_defaults() -> dict:
    data = {}
    for key, env in ENV_DEFAULTS.items():
        value = os.environ.get(env)
        if value not in (None, ""):
            data[key] = value
    return data


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, expanding ${ENV_VAR} references."""
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    raw = path.read_text()
    expanded = os.path.expandvars(raw)
    data = yaml.safe_load(expanded) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    # allow the provider-style nesting `athena: {...}`
    return data.get("athena", data)


def load_config(path: str | Path | None = None) -> AthenaConfig:
    """
    Build an AthenaConfig.

    Values come from two places:

    **Environment**: ``ATHENA_SCHEME``, ``ATHENA_ADDRESS``, ``ATHENA_PORT``,
    ``ATHENA_USER``, ``ATHENA_PASSWORD``, ``ATHENA_VERIFY_SSL`` and
    ``ATHENA_REQUEST_TIMEOUT`` provide the defaults.

    **YAML file**: ``path`` (or ``ATHENA_CONFIG_FILE`` when no path is given).
    Non-empty values in the file win over the environment.
    """
    data = _env_defaults()

    if path is None:
        path = os.environ.get("ATHENA_CONFIG_FILE") or None

    if path is not None:
        path = Path(path)
        log.debug("Loading athena config from %s", path)
        _deep_merge(data, _load_yaml(path))
    else:
        log.debug("No config file given, using environment only")

    try:
        return AthenaConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid athena configuration: {exc}") from exc
