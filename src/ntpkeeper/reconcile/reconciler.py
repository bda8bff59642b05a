# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/ntpkeeper/reconcile/reconciler.py

from __future__ import annotations

import logging
from typing import List, Optional

from ..config.models import NtpConfig
from ..platform.profiles import OSFamily, OSProfile, lookup_profile
from ..render.template_renderer import render_ntp_conf
from ..resources.catalog import assemble_fragments
from ..resources.models import (
    AuditRule,
    Directory,
    File,
    Group,
    ManagedResource,
    ModuleInclude,
    Package,
    ResourceRef,
    Service,
    TemplateFragment,
    User,
)

# Observer bits
from ..observers.dispatcher import EventBus
from ..observers.events import ReconcileComputed, ReconcileFailed, new_ctx

log = logging.getLogger("ntpkeeper")

CONFIG_PATH = "/etc/ntp.conf"
CONFIG_DIR = "/etc/ntp"
KEYS_PATH = "/etc/ntp/keys"
STATE_DIR = "/var/lib/ntp"
RUNTIME_USER = "ntp"
AUDIT_KEY = "ntp"


def _audit_resources(conf: ResourceRef, keys: ResourceRef) -> List[ManagedResource]:
    auditd = ModuleInclude("auditd")
    rule = AuditRule(
        "ntp",
        content=(
            f"-w {CONFIG_PATH} -p wa -k {AUDIT_KEY}\n"
            f"-w {KEYS_PATH} -p wa -k {AUDIT_KEY}\n"
        ),
        key=AUDIT_KEY,
        require=(auditd.ref, conf, keys),
    )
    return [auditd, rule]


def _runtime_identity(profile: OSProfile, pkg: ResourceRef, svc: ResourceRef) -> List[ManagedResource]:
    """
    Runtime group and user. Pinned families get fixed ids and need no package;
    the others let the package create them and so must follow it.
    """
    group_ref = ResourceRef(Group.KIND, RUNTIME_USER)
    if profile.pins_user:
        group = Group(RUNTIME_USER, gid=profile.user_uid, before=(svc,))
        user = User(
            RUNTIME_USER,
            uid=profile.user_uid,
            gid=profile.user_uid,
            home=profile.user_home,
            shell=profile.user_shell,
            require=(group_ref,),
            before=(svc,),
        )
    else:
        group = Group(RUNTIME_USER, require=(pkg,), before=(svc,))
        user = User(
            RUNTIME_USER,
            shell=profile.user_shell,
            require=(pkg, group_ref),
            before=(svc,),
        )
    return [group, user]


def build_resources(desired: NtpConfig, profile: OSProfile) -> List[ManagedResource]:
    """
    Assemble the resource catalog for one OS profile. Total: never fails.
    """
    pkg = ResourceRef(Package.KIND, profile.package_name)
    svc = ResourceRef(Service.KIND, profile.service_name)
    conf = ResourceRef(File.KIND, CONFIG_PATH)
    keys = ResourceRef(File.KIND, KEYS_PATH)
    conf_dir = ResourceRef(Directory.KIND, CONFIG_DIR)
    user_ref = ResourceRef(User.KIND, RUNTIME_USER)
    group_ref = ResourceRef(Group.KIND, RUNTIME_USER)

    resources: List[ManagedResource] = []

    if desired.auditd_enabled:
        resources.extend(_audit_resources(conf, keys))

    fragment = TemplateFragment(
        "ntp.conf-main",
        target=CONFIG_PATH,
        order=0,
        content=render_ntp_conf(desired),
        before=(conf,),
    )
    resources.append(
        File(
            CONFIG_PATH,
            owner="root",
            group=RUNTIME_USER,
            mode="0600",
            content=assemble_fragments([fragment], CONFIG_PATH),
            ensure_newline=True,
            warn=True,
            require=(pkg,),
            notify=(svc,),
        )
    )
    resources.append(fragment)

    resources.extend([
        Directory(CONFIG_DIR, owner="root", group="root", mode="0755", notify=(svc,)),
        File(
            KEYS_PATH,
            owner="root",
            group="root",
            mode="0600",
            content="\n",
            require=(conf_dir,),
            notify=(svc,),
        ),
        Directory(
            STATE_DIR,
            owner=RUNTIME_USER,
            group=RUNTIME_USER,
            mode="0750",
            require=(user_ref, group_ref),
            notify=(svc,),
        ),
        File(
            profile.sysconfig_path,
            owner="root",
            group="root",
            mode="0644",
            content=profile.sysconfig_content,
            notify=(svc,),
        ),
    ])

    resources.extend(_runtime_identity(profile, pkg, svc))

    resources.append(Package(profile.package_name, ensure="latest"))
    resources.append(
        Service(
            profile.service_name,
            ensure="running",
            enable=True,
            hasrestart=True,
            hasstatus=True,
            require=(pkg,),
        )
    )
    return resources


def reconcile(
    desired: NtpConfig,
    os_family: str | OSFamily,
    bus: Optional[EventBus] = None,
    run_ctx: Optional[dict] = None,
) -> List[ManagedResource]:
    """
    Compute the managed resources for ``desired`` on ``os_family``.

    Raises UnsupportedOSError before building anything when the family has
    no profile. Emits ReconcileComputed / ReconcileFailed if an EventBus is
    provided.
    """
    family = os_family.value if isinstance(os_family, OSFamily) else str(os_family)
    ctx = run_ctx or new_ctx(env=family, context=None)
    try:
        profile = lookup_profile(os_family)
        resources = build_resources(desired, profile)
    except Exception as e:
        if bus:
            bus.emit(ReconcileFailed(error=str(e), **ctx))
        raise

    log.debug(
        "Reconciled %d resources for %s (service=%s)",
        len(resources), family, profile.service_name,
    )
    if bus:
        bus.emit(ReconcileComputed(resources=[str(r.ref) for r in resources], **ctx))
    return resources
