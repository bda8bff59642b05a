# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/ntpkeeper/config/loader.py

import logging
import os
import yaml
from pathlib import Path
from .models import NtpConfig

log = logging.getLogger("ntpkeeper")


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


def _find_overrides_file(config_path: Path) -> Path | None:
    """
    Locate overrides.yaml using this priority:

    1. NTPKEEPER_OVERRIDES_FILE environment variable (explicit override)
    2. overrides.yaml in the same directory as the config
    """
    env = os.environ.get("NTPKEEPER_OVERRIDES_FILE")
    if env:
        p = Path(env)
        if p.is_file():
            return p
        log.warning("NTPKEEPER_OVERRIDES_FILE=%s does not exist, skipping", env)
        return None

    p = config_path.parent / "overrides.yaml"
    if p.is_file() and p.resolve() != config_path.resolve():
        return p

    return None


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, expanding ${ENV_VAR} references."""
    raw = path.read_text()
    expanded = os.path.expandvars(raw)
    data = yaml.safe_load(expanded) or {}
    # Settings may live at the top level or under an "ntp:" key
    if isinstance(data, dict) and isinstance(data.get("ntp"), dict):
        return data["ntp"]
    return data


def load_config(path: str | Path) -> NtpConfig:
    """
    Load and validate an NTP desired-state YAML file.

    An ``overrides.yaml`` (found next to the config, or named by
    ``NTPKEEPER_OVERRIDES_FILE``) is deep-merged into the config dict before
    Pydantic validation, so site-wide defaults can be kept in one file and
    host specifics in another. ``${ENV_VAR}`` placeholders in either file
    are resolved at load time.
    """
    path = Path(path)
    data = _load_yaml(path)

    overrides_path = _find_overrides_file(path)
    if overrides_path:
        log.debug("Merging overrides from %s", overrides_path)
        _deep_merge(data, _load_yaml(overrides_path))
    else:
        log.debug("No overrides.yaml found, using %s as-is", path)

    return NtpConfig.model_validate(data)
