# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/ntpkeeper/platform/profiles.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from ..errors import UnsupportedOSError


class OSFamily(str, Enum):
    REDHAT = "RedHat"
    CENTOS = "CentOS"
    DEBIAN = "Debian"
    UBUNTU = "Ubuntu"


@dataclass(frozen=True)
class OSProfile:
    """
    Package, service and runtime-user layout of ntpd on one OS family.
    """
    package_name: str
    service_name: str
    user_shell: str
    sysconfig_path: str
    sysconfig_content: str
    user_uid: Optional[int] = None     # None -> left to the package
    user_home: Optional[str] = None

    @property
    def pins_user(self) -> bool:
        return self.user_uid is not None


REDHAT_PROFILE = OSProfile(
    package_name="ntp",
    service_name="ntpd",
    user_uid=38,
    user_home="/etc/ntp",
    user_shell="/sbin/nologin",
    sysconfig_path="/etc/sysconfig/ntpd",
    sysconfig_content='OPTIONS="-A -u ntp:ntp -p /var/run/ntpd.pid"\nSYNC_HWCLOCK=yes\n',
)

DEBIAN_PROFILE = OSProfile(
    package_name="ntp",
    service_name="ntp",
    user_shell="/bin/false",
    sysconfig_path="/etc/default/ntp",
    sysconfig_content="NTPD_OPTS='-g'\n",
)

PROFILES: Dict[OSFamily, OSProfile] = {
    OSFamily.REDHAT: REDHAT_PROFILE,
    OSFamily.CENTOS: REDHAT_PROFILE,
    OSFamily.DEBIAN: DEBIAN_PROFILE,
    OSFamily.UBUNTU: DEBIAN_PROFILE,
}


def resolve_family(name: str | OSFamily) -> OSFamily:
    if isinstance(name, OSFamily):
        return name
    try:
        return OSFamily(name)
    except ValueError:
        raise UnsupportedOSError(str(name)) from None


def lookup_profile(family: str | OSFamily) -> OSProfile:
    """
    Return the OS profile for a family fact such as "RedHat" or "Ubuntu".
    Matching is exact; anything outside the table raises UnsupportedOSError.
    """
    return PROFILES[resolve_family(family)]
