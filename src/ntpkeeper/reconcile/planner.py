# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import heapq
from typing import Dict, Iterable, List, Optional, Set

from ..resources.models import ManagedResource, ResourceRef

# Observer bits
from ..observers.dispatcher import EventBus
from ..observers.events import PlanComputed, PlanFailed, new_ctx


class UnknownDependencyError(ValueError):
    pass


class CyclicDependencyError(ValueError):
    pass


class DuplicateResourceError(ValueError):
    pass


def _index(resources: List[ManagedResource]) -> Dict[ResourceRef, int]:
    idx: Dict[ResourceRef, int] = {}
    for i, r in enumerate(resources):
        if r.ref in idx:
            raise DuplicateResourceError(f"Resource '{r.ref}' is declared more than once")
        idx[r.ref] = i
    return idx


def _edges(resources: List[ManagedResource], idx: Dict[ResourceRef, int]) -> Dict[int, Set[int]]:
    """
    Successor sets by declaration index. require points dependency -> resource,
    before and notify point resource -> target.
    """
    succ: Dict[int, Set[int]] = {i: set() for i in range(len(resources))}
    for i, r in enumerate(resources):
        for edge, refs in (("require", r.require), ("before", r.before), ("notify", r.notify)):
            for ref in refs:
                if ref not in idx:
                    raise UnknownDependencyError(
                        f"Resource '{r.ref}' has {edge} on undeclared resource '{ref}'"
                    )
                if edge == "require":
                    succ[idx[ref]].add(i)
                else:
                    succ[i].add(idx[ref])
    return succ


def plan(
    resources: List[ManagedResource],
    bus: Optional[EventBus] = None,
    run_ctx: Optional[dict] = None,
) -> List[ManagedResource]:
    """
    Stable topological sort of resources over require/before/notify edges.
    Ties keep declaration order. Emits PlanComputed / PlanFailed if an
    EventBus is provided.
    """
    ctx = run_ctx or new_ctx(env="unknown", context=None)
    try:
        resources = list(resources)
        idx = _index(resources)
        succ = _edges(resources, idx)

        indeg: Dict[int, int] = {i: 0 for i in succ}
        for targets in succ.values():
            for t in targets:
                indeg[t] += 1

        queue = [i for i, deg in indeg.items() if deg == 0]
        heapq.heapify(queue)  # smallest declaration index first, deterministic
        order: List[ManagedResource] = []

        while queue:
            n = heapq.heappop(queue)
            order.append(resources[n])
            for m in succ[n]:
                indeg[m] -= 1
                if indeg[m] == 0:
                    heapq.heappush(queue, m)

        if len(order) != len(resources):
            stuck = sorted(str(resources[i].ref) for i, d in indeg.items() if d > 0)
            raise CyclicDependencyError(f"Cyclic dependency detected among resources: {', '.join(stuck)}")

        if bus:
            bus.emit(PlanComputed(order=[str(r.ref) for r in order], **ctx))
        return order

    except Exception as e:
        if bus:
            bus.emit(PlanFailed(error=str(e), **ctx))
        raise


def restart_targets(
    resources: Iterable[ManagedResource],
    changed: Iterable[ResourceRef],
) -> List[ResourceRef]:
    """
    Notify targets to restart after an apply, given the refs that actually
    changed. Each target appears once, in the order it was first triggered.
    """
    changed_set = set(changed)
    out: List[ResourceRef] = []
    for r in resources:
        if r.ref not in changed_set:
            continue
        for target in r.notify:
            if target not in out:
                out.append(target)
    return out
