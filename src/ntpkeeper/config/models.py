# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/ntpkeeper/config/models.py

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Dict, Iterator, List, Tuple, Union

from pydantic import BaseModel, Field, StringConstraints, field_serializer, field_validator

# Hostnames are a single token; option tokens are one non-blank line.
Host = Annotated[str, StringConstraints(pattern=r"^\S+$")]
Option = Annotated[str, StringConstraints(pattern=r"^\S(?:[^\r\n]*\S)?$")]

DEFAULT_LOG_OPTIONS = ("=syncall", "+clockall")
DEFAULT_SERVER_OPTIONS = ("minpoll 4", "maxpoll 4", "iburst")


class ServerMap(Mapping):
    """Read-only, insertion-ordered hostname -> option tuple mapping."""

    def __init__(self, items: Dict[str, Tuple[str, ...]]):
        self._items = {host: tuple(opts) for host, opts in items.items()}

    def __getitem__(self, host: str) -> Tuple[str, ...]:
        return self._items[host]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"ServerMap({self._items!r})"


class NtpConfig(BaseModel):
    """
    Desired state of the NTP daemon.

    ``servers`` accepts either a list of hostnames or a mapping of
    hostname -> option list. A server with an empty option list uses
    ``default_options``; a server with its own options uses only those.
    All collections are stored read-only.
    """

    servers: Dict[Host, Tuple[Option, ...]] = Field(default_factory=dict, validate_default=True)
    stratum: int = Field(default=2, ge=0)
    log_options: Tuple[Option, ...] = DEFAULT_LOG_OPTIONS
    broadcast_delay: Union[
        Annotated[int, Field(ge=0)],
        Annotated[float, Field(ge=0, allow_inf_nan=False)],
    ] = 0.004
    default_options: Tuple[Option, ...] = DEFAULT_SERVER_OPTIONS
    auditd_enabled: bool = False
    monitor_disabled: bool = True

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }

    @field_validator("servers", mode="before")
    @classmethod
    def _servers_from_list(cls, value):
        if value is None:
            return {}
        if isinstance(value, Mapping):
            # hosts given as bare YAML keys ("time.example.net:") load as None
            return {host: (opts or ()) for host, opts in value.items()}
        if isinstance(value, (list, tuple)):
            return {host: () for host in value}
        return value

    @field_validator("servers", mode="after")
    @classmethod
    def _freeze_servers(cls, value: Dict[str, Tuple[str, ...]]) -> ServerMap:
        return ServerMap(value)

    @field_serializer("servers")
    def _dump_servers(self, value: ServerMap) -> Dict[str, List[str]]:
        return {host: list(opts) for host, opts in value.items()}

    def effective_options(self, host: str) -> List[str]:
        opts = self.servers[host]
        return list(opts) if opts else list(self.default_options)

    def server_lines(self) -> List[Tuple[str, List[str]]]:
        """(hostname, effective options) pairs in declaration order."""
        return [(host, self.effective_options(host)) for host in self.servers]
