# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/ntpkeeper/resources/catalog.py

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .models import ManagedResource, ResourceRef, TemplateFragment


def by_ref(resources: Iterable[ManagedResource]) -> Dict[ResourceRef, ManagedResource]:
    """
    Returns a dictionary mapping each resource ref to its resource.
    Later declarations of the same ref win.
    """
    return {r.ref: r for r in resources}


def find(resources: Iterable[ManagedResource], ref: ResourceRef) -> Optional[ManagedResource]:
    for r in resources:
        if r.ref == ref:
            return r
    return None


def of_kind(resources: Iterable[ManagedResource], kind: str) -> List[ManagedResource]:
    return [r for r in resources if r.kind == kind]


def assemble_fragments(resources: Iterable[ManagedResource], target: str) -> str:
    """
    Join every fragment aimed at ``target`` by (order, name) and make sure the
    result ends with a newline.
    """
    frags = sorted(
        (r for r in resources if isinstance(r, TemplateFragment) and r.target == target),
        key=lambda f: (f.order, f.name),
    )
    body = "".join(f.content for f in frags)
    if not body.endswith("\n"):
        body += "\n"
    return body
