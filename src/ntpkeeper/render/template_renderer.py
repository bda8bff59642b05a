# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/ntpkeeper/render/template_renderer.py

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..config.models import NtpConfig

TEMPLATES_DIR = Path(__file__).parent / "templates"
NTP_CONF_TEMPLATE = "ntp.conf.j2"


def format_decimal(value) -> str:
    """Print a number in plain decimal form: 0.004, 1, 0.00001 (never 1e-05)."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return format(Decimal(repr(value)), "f")


class TemplateRenderer:
    def __init__(self, templates_dir: Path = TEMPLATES_DIR):
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self.env.filters["decimal"] = format_decimal

    def render(self, template_name: str, context: dict) -> str:
        # ${VAR} references are resolved by the config loader, not here
        tmpl = self.env.get_template(template_name)
        return tmpl.render(**context)


@lru_cache(maxsize=1)
def _default_renderer() -> TemplateRenderer:
    return TemplateRenderer(TEMPLATES_DIR)


def ntp_conf_context(desired: NtpConfig) -> dict:
    return {
        "servers": desired.server_lines(),
        "stratum": desired.stratum,
        "broadcast_delay": desired.broadcast_delay,
        "log_options": list(desired.log_options),
        "monitor_disabled": desired.monitor_disabled,
    }


def render_ntp_conf(desired: NtpConfig) -> str:
    """
    Render the ntp.conf body for ``desired``.

    Pure: no file system writes besides reading the bundled template, and the
    same input always gives the same bytes. The result ends with exactly one
    newline.
    """
    text = _default_renderer().render(NTP_CONF_TEMPLATE, ntp_conf_context(desired))
    return text.rstrip("\n") + "\n"
