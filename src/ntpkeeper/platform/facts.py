# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/ntpkeeper/platform/facts.py

from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Dict

log = logging.getLogger("ntpkeeper")

OS_RELEASE = Path("/etc/os-release")

# os-release ID -> family fact
_ID_TO_FAMILY: Dict[str, str] = {
    "rhel": "RedHat",
    "fedora": "RedHat",
    "centos": "CentOS",
    "debian": "Debian",
    "ubuntu": "Ubuntu",
}


def parse_os_release(text: str) -> Dict[str, str]:
    """Parse KEY=value lines of an os-release file, unquoting values."""
    out: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        try:
            parts = shlex.split(value) if value else []
        except ValueError:
            # unbalanced quote
            parts = [value.strip("\"'")]
        out[key.strip()] = parts[0] if parts else ""
    return out


def detect_os_family(os_release_path: str | Path = OS_RELEASE) -> str:
    """
    Best-effort OS family detection from os-release.

    ID is tried first, then each ID_LIKE entry. When nothing matches the raw
    ID is returned so the caller can report it in UnsupportedOSError.
    """
    path = Path(os_release_path)
    data = parse_os_release(path.read_text())
    os_id = data.get("ID", "").lower()

    candidates = [os_id] + data.get("ID_LIKE", "").lower().split()
    for c in candidates:
        family = _ID_TO_FAMILY.get(c)
        if family:
            log.debug("Detected OS family %s from %s (id=%s)", family, path, os_id)
            return family

    log.debug("No known OS family for id=%s in %s", os_id, path)
    return data.get("ID", "unknown")
