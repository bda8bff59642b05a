from pathlib import Path
import textwrap

import pytest

from ntpkeeper.platform.facts import detect_os_family, parse_os_release


def _write(tmp_path: Path, body: str) -> Path:
    p = tmp_path / "os-release"
    p.write_text(textwrap.dedent(body))
    return p


def test_parse_os_release_unquotes_values():
    data = parse_os_release('NAME="Ubuntu"\nID=ubuntu\n# comment\nID_LIKE=debian\n')
    assert data == {"NAME": "Ubuntu", "ID": "ubuntu", "ID_LIKE": "debian"}


@pytest.mark.parametrize(
    "body,family",
    [
        ('ID=ubuntu\nID_LIKE=debian\n', "Ubuntu"),
        ('ID=debian\n', "Debian"),
        ('ID="centos"\nID_LIKE="rhel fedora"\n', "CentOS"),
        ('ID="rhel"\n', "RedHat"),
        ('ID="rocky"\nID_LIKE="rhel centos fedora"\n', "RedHat"),
        ('ID=linuxmint\nID_LIKE="ubuntu debian"\n', "Ubuntu"),
    ],
)
def test_detect_known_families(tmp_path: Path, body, family):
    assert detect_os_family(_write(tmp_path, body)) == family


def test_unknown_id_is_returned_raw(tmp_path: Path):
    assert detect_os_family(_write(tmp_path, "ID=alpine\n")) == "alpine"


def test_unbalanced_quote_falls_back_to_stripped_value(tmp_path: Path):
    data = parse_os_release('ID="ubuntu\nID_LIKE=debian\nNAME="Broken\n')
    assert data["ID"] == "ubuntu"
    assert data["NAME"] == "Broken"
    assert detect_os_family(_write(tmp_path, 'ID="ubuntu\n')) == "Ubuntu"
