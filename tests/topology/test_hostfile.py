from pathlib import Path
import textwrap

import pytest

from gpinstall.errors import ProvisioningFailure
from gpinstall.topology.hostfile import (
    ensure_seed_host_file,
    hostnames_from_hosts_table,
    read_host_lines,
)

HOSTS_TABLE = textwrap.dedent("""\
    127.0.0.1   localhost localhost.localdomain
    10.0.0.1    mdw
    10.0.0.2    sdw1 sdw1.example.com

    10.0.0.3    sdw2
    lonely
""")


def test_hosts_table_skips_first_line_and_blanks():
    assert hostnames_from_hosts_table(HOSTS_TABLE) == ["mdw", "sdw1", "sdw2"]


def test_hosts_table_empty():
    assert hostnames_from_hosts_table("") == []
    assert hostnames_from_hosts_table("127.0.0.1 localhost\n") == []


def test_generates_seed_file_from_hosts_table(tmp_path: Path):
    table = tmp_path / "hosts"
    table.write_text(HOSTS_TABLE)
    seed = tmp_path / "hostfile"

    assert ensure_seed_host_file(seed, table) is True
    assert seed.read_text().splitlines() == ["mdw", "sdw1", "sdw2"]


def test_provisioning_is_idempotent(tmp_path: Path):
    table = tmp_path / "hosts"
    table.write_text(HOSTS_TABLE)
    seed = tmp_path / "hostfile"

    ensure_seed_host_file(seed, table)
    first = seed.read_text()
    # hosts table changes must not leak into an existing seed file
    table.write_text("127.0.0.1 localhost\n10.0.0.9 other\n")
    assert ensure_seed_host_file(seed, table) is False
    assert seed.read_text() == first


def test_existing_seed_file_is_never_touched(tmp_path: Path):
    seed = tmp_path / "hostfile"
    seed.write_text("hand\nwritten\n")
    assert ensure_seed_host_file(seed, tmp_path / "does-not-exist") is False
    assert seed.read_text() == "hand\nwritten\n"


def test_missing_hosts_table_is_fatal(tmp_path: Path):
    seed = tmp_path / "hostfile"
    with pytest.raises(ProvisioningFailure):
        ensure_seed_host_file(seed, tmp_path / "no-hosts")
    assert not seed.exists()


def test_unwritable_seed_location_is_fatal(tmp_path: Path):
    table = tmp_path / "hosts"
    table.write_text(HOSTS_TABLE)
    with pytest.raises(ProvisioningFailure):
        ensure_seed_host_file(tmp_path / "missing-dir" / "hostfile", table)


def test_read_host_lines_drops_blank_lines(tmp_path: Path):
    f = tmp_path / "hostfile"
    f.write_text("m1\n\n  \ns1\ns1\n")
    assert read_host_lines(f) == ["m1", "s1", "s1"]


def test_read_host_lines_missing_file(tmp_path: Path):
    with pytest.raises(ProvisioningFailure):
        read_host_lines(tmp_path / "nope")
