# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/ntpkeeper/resources/models.py

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, Optional, Tuple


@dataclass(frozen=True, order=True)
class ResourceRef:
    """Identity of a managed resource, printed as ``Kind[name]``."""
    kind: str
    name: str

    def __str__(self) -> str:
        return f"{self.kind}[{self.name}]"


Refs = Tuple[ResourceRef, ...]


@dataclass(frozen=True)
class ManagedResource:
    """
    Common shape of every declared resource.

    require: resources that must be applied first
    before:  resources that must be applied after this one
    notify:  resources to restart when this one changes
    """
    KIND: ClassVar[str] = "Resource"

    name: str
    require: Refs = field(default=(), kw_only=True)
    before: Refs = field(default=(), kw_only=True)
    notify: Refs = field(default=(), kw_only=True)

    @property
    def kind(self) -> str:
        return self.KIND

    @property
    def ref(self) -> ResourceRef:
        return ResourceRef(self.KIND, self.name)

    def attributes(self) -> Dict[str, Any]:
        skip = {"name", "require", "before", "notify"}
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name not in skip}

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"kind": self.KIND, "name": self.name}
        d.update(self.attributes())
        for edge in ("require", "before", "notify"):
            refs = getattr(self, edge)
            if refs:
                d[edge] = [str(r) for r in refs]
        return d


@dataclass(frozen=True)
class Package(ManagedResource):
    KIND: ClassVar[str] = "Package"

    ensure: str = "latest"


@dataclass(frozen=True)
class File(ManagedResource):
    KIND: ClassVar[str] = "File"

    owner: str = "root"
    group: str = "root"
    mode: str = "0644"
    content: Optional[str] = None
    ensure_newline: bool = False
    warn: bool = False

    @property
    def path(self) -> str:
        return self.name


@dataclass(frozen=True)
class Directory(ManagedResource):
    KIND: ClassVar[str] = "Directory"

    owner: str = "root"
    group: str = "root"
    mode: str = "0755"

    @property
    def path(self) -> str:
        return self.name


@dataclass(frozen=True)
class Group(ManagedResource):
    KIND: ClassVar[str] = "Group"

    gid: Optional[int] = None
    ensure: str = "present"


@dataclass(frozen=True)
class User(ManagedResource):
    KIND: ClassVar[str] = "User"

    uid: Optional[int] = None
    gid: Optional[int] = None
    home: Optional[str] = None
    shell: Optional[str] = None
    managehome: bool = False
    ensure: str = "present"


@dataclass(frozen=True)
class Service(ManagedResource):
    KIND: ClassVar[str] = "Service"

    ensure: str = "running"
    enable: bool = True
    hasrestart: bool = True
    hasstatus: bool = True


@dataclass(frozen=True)
class TemplateFragment(ManagedResource):
    """A piece of a composed file; fragments are joined by ``order``."""
    KIND: ClassVar[str] = "TemplateFragment"

    target: str = ""
    order: int = 0
    content: str = ""


@dataclass(frozen=True)
class AuditRule(ManagedResource):
    KIND: ClassVar[str] = "AuditRule"

    content: str = ""
    key: str = ""


@dataclass(frozen=True)
class ModuleInclude(ManagedResource):
    """Dependency on another managed module (e.g. auditd)."""
    KIND: ClassVar[str] = "ModuleInclude"
