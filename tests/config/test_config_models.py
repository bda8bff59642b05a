import pytest
from pydantic import ValidationError

from ntpkeeper.config.models import NtpConfig


def test_defaults():
    cfg = NtpConfig()
    assert cfg.servers == {}
    assert cfg.stratum == 2
    assert cfg.log_options == ("=syncall", "+clockall")
    assert cfg.broadcast_delay == 0.004
    assert cfg.default_options == ("minpoll 4", "maxpoll 4", "iburst")
    assert cfg.auditd_enabled is False
    assert cfg.monitor_disabled is True


def test_server_list_becomes_ordered_mapping():
    cfg = NtpConfig(servers=["b.example.net", "a.example.net"])
    assert list(cfg.servers) == ["b.example.net", "a.example.net"]
    assert cfg.servers["a.example.net"] == ()


def test_effective_options_never_merge_with_defaults():
    cfg = NtpConfig(servers={
        "time.local.net": ["iburst", "minpoll 4", "prefer"],
        "time.other.net": [],
    })
    assert cfg.effective_options("time.local.net") == ["iburst", "minpoll 4", "prefer"]
    assert cfg.effective_options("time.other.net") == ["minpoll 4", "maxpoll 4", "iburst"]
    assert cfg.server_lines() == [
        ("time.local.net", ["iburst", "minpoll 4", "prefer"]),
        ("time.other.net", ["minpoll 4", "maxpoll 4", "iburst"]),
    ]


def test_bare_yaml_host_key_loads_as_empty_options():
    cfg = NtpConfig(servers={"time.example.net": None})
    assert cfg.effective_options("time.example.net") == cfg.default_options


def test_negative_stratum_rejected():
    with pytest.raises(ValidationError):
        NtpConfig(stratum=-1)


def test_unknown_field_rejected():
    with pytest.raises(ValidationError):
        NtpConfig(stratums=3)


def test_model_is_frozen():
    cfg = NtpConfig()
    with pytest.raises(ValidationError):
        cfg.stratum = 5


@pytest.mark.parametrize(
    "servers",
    [
        {"evil.example\nrestrict default": []},
        {"": []},
        {"two words": []},
        ["time.example.net\n"],
    ],
)
def test_hostnames_must_be_single_tokens(servers):
    with pytest.raises(ValidationError):
        NtpConfig(servers=servers)


@pytest.mark.parametrize("opts", [["iburst\nrestrict default"], [""], ["   "], [" prefer"]])
def test_option_tokens_must_be_one_nonblank_line(opts):
    with pytest.raises(ValidationError):
        NtpConfig(servers={"time.example.net": opts})
    with pytest.raises(ValidationError):
        NtpConfig(default_options=opts)
    with pytest.raises(ValidationError):
        NtpConfig(log_options=opts)


def test_option_tokens_may_contain_inner_spaces():
    cfg = NtpConfig(servers={"time.example.net": ["minpoll 6", "prefer"]})
    assert cfg.effective_options("time.example.net") == ["minpoll 6", "prefer"]


@pytest.mark.parametrize("delay", [float("inf"), float("-inf"), float("nan"), -0.5])
def test_broadcast_delay_must_be_finite_and_non_negative(delay):
    with pytest.raises(ValidationError):
        NtpConfig(broadcast_delay=delay)


def test_broadcast_delay_keeps_int_and_float():
    assert NtpConfig(broadcast_delay=1).broadcast_delay == 1
    assert isinstance(NtpConfig(broadcast_delay=1).broadcast_delay, int)
    assert NtpConfig(broadcast_delay=0.25).broadcast_delay == 0.25


def test_collections_cannot_be_mutated():
    cfg = NtpConfig(servers={"a.example.net": []})
    with pytest.raises(AttributeError):
        cfg.default_options.append("prefer")
    with pytest.raises(AttributeError):
        cfg.log_options.append("+sysall")
    with pytest.raises(TypeError):
        cfg.servers["b.example.net"] = ("prefer",)
    with pytest.raises(TypeError):
        del cfg.servers["a.example.net"]
    assert list(cfg.servers) == ["a.example.net"]


def test_default_servers_is_read_only():
    with pytest.raises(TypeError):
        NtpConfig().servers["x.example.net"] = ()


def test_effective_options_returns_a_copy():
    cfg = NtpConfig(servers=["a.example.net"])
    cfg.effective_options("a.example.net").append("prefer")
    assert cfg.effective_options("a.example.net") == ["minpoll 4", "maxpoll 4", "iburst"]


def test_dump_and_revalidate_gives_equal_config():
    cfg = NtpConfig(servers={"b": ["prefer"], "a": []}, log_options=["+sysall"])
    dumped = cfg.model_dump()
    assert dumped["servers"] == {"b": ["prefer"], "a": []}
    again = NtpConfig.model_validate(dumped)
    assert list(again.servers) == ["b", "a"]
    assert again.servers == cfg.servers
