from pathlib import Path

from ntpkeeper.config.models import NtpConfig
from ntpkeeper.render.template_renderer import TemplateRenderer, format_decimal, render_ntp_conf

HEADER = """\
# This file is managed by ntpkeeper. Local changes will be overwritten.

driftfile /var/lib/ntp/drift

# Permit time synchronization with our time sources, but do not
# permit the source to query or modify the service on this system.
restrict default kod nomodify notrap nopeer noquery
restrict -6 default kod nomodify notrap nopeer noquery
restrict 127.0.0.1
restrict -6 ::1

keys /etc/ntp/keys

"""


def _lines(text):
    return text.splitlines()


def test_render_full_document_with_servers():
    cfg = NtpConfig(servers={
        "time.local.net": ["iburst", "minpoll 4", "prefer"],
        "time.other.net": [],
    })
    expected = HEADER + (
        "server time.local.net iburst minpoll 4 prefer\n"
        "server time.other.net minpoll 4 maxpoll 4 iburst\n"
        "\n"
        "broadcastdelay 0.004\n"
        "\n"
        "logconfig =syncall\n"
        "logconfig +clockall\n"
        "\n"
        "# Disable the monitoring facility to prevent amplification attacks using ntpdc monlist.\n"
        "disable monitor\n"
    )
    assert render_ntp_conf(cfg) == expected


def test_empty_servers_renders_fudge_block():
    text = render_ntp_conf(NtpConfig(stratum=7))
    lines = _lines(text)
    assert "server 127.127.1.0" in lines
    assert "fudge 127.127.1.0 stratum 7" in lines
    assert [l for l in lines if l.startswith("server ") and l != "server 127.127.1.0"] == []


def test_servers_present_means_no_fudge():
    text = render_ntp_conf(NtpConfig(servers=["0.pool.ntp.org"]))
    assert "fudge" not in text
    assert "server 0.pool.ntp.org minpoll 4 maxpoll 4 iburst" in _lines(text)


def test_monitor_toggle():
    on = _lines(render_ntp_conf(NtpConfig()))
    off = _lines(render_ntp_conf(NtpConfig(monitor_disabled=False)))
    assert on.count("disable monitor") == 1
    assert "disable monitor" not in off


def test_logconfig_order_and_empty():
    lines = _lines(render_ntp_conf(NtpConfig(log_options=["+sysall", "=syncall"])))
    logs = [l for l in lines if l.startswith("logconfig")]
    assert logs == ["logconfig +sysall", "logconfig =syncall"]
    assert not [l for l in _lines(render_ntp_conf(NtpConfig(log_options=[]))) if l.startswith("logconfig")]


def test_broadcastdelay_natural_decimal():
    assert "broadcastdelay 1" in _lines(render_ntp_conf(NtpConfig(broadcast_delay=1)))
    assert "broadcastdelay 0.00001" in _lines(render_ntp_conf(NtpConfig(broadcast_delay=0.00001)))
    assert format_decimal(0.004) == "0.004"
    assert format_decimal(2.5) == "2.5"


def test_render_is_deterministic_and_newline_terminated():
    cfg = NtpConfig(servers={"b": ["prefer"], "a": []}, auditd_enabled=True, monitor_disabled=False)
    first = render_ntp_conf(cfg)
    assert first == render_ntp_conf(cfg)
    assert first == render_ntp_conf(NtpConfig.model_validate(cfg.model_dump()))
    assert first.endswith("\n") and not first.endswith("\n\n")


def test_generic_renderer_uses_decimal_filter(tmp_path: Path):
    (tmp_path / "t.j2").write_text("server {{ host }}\nbroadcastdelay {{ delay | decimal }}\n")
    r = TemplateRenderer(tmp_path)
    assert r.render("t.j2", {"host": "pool.example.org", "delay": 1e-05}) == (
        "server pool.example.org\nbroadcastdelay 0.00001\n"
    )


def test_render_unaffected_by_later_changes_to_caller_lists():
    defaults = ["iburst"]
    cfg = NtpConfig(servers=["a.example.net"], default_options=defaults)
    before = render_ntp_conf(cfg)
    defaults.append("prefer")
    assert render_ntp_conf(cfg) == before
    assert "server a.example.net iburst" in _lines(before)


def test_generic_renderer_leaves_env_references_alone(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("NTP_HOST", "pool.example.org")
    (tmp_path / "t.j2").write_text("server {{ host }}\n")
    r = TemplateRenderer(tmp_path)
    assert r.render("t.j2", {"host": "${NTP_HOST}"}) == "server ${NTP_HOST}\n"
