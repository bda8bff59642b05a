# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/ntpkeeper/errors.py
class NtpKeeperError(RuntimeError):
    """Base class for ntpkeeper failures."""


class UnsupportedOSError(NtpKeeperError):
    """Raised when no OS profile exists for the detected family."""

    def __init__(self, family: str, module: str = "ntp"):
        self.family = family
        self.module = module
        super().__init__(
            f"The {module} module is not supported on an {family} based system."
        )
