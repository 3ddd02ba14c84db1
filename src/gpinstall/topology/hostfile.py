# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gpinstall/topology/hostfile.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from gpinstall.errors import ProvisioningFailure

log = logging.getLogger("gpinstall")


def hostnames_from_hosts_table(text: str) -> List[str]:
    """
    Second whitespace-delimited field of every line after the first,
    blanks dropped. Lines with a single field contribute nothing.
    """
    names: List[str] = []
    for ln in text.splitlines()[1:]:
        parts = ln.split()
        if len(parts) >= 2 and parts[1]:
            names.append(parts[1])
    return names


def read_host_lines(path: Path) -> List[str]:
    """Return the non-empty lines of a host list file, in file order."""
    try:
        text = Path(path).read_text()
    except OSError as e:
        raise ProvisioningFailure(f"Cannot read host file {path}: {e}") from e
    return [ln.strip() for ln in text.splitlines() if ln.strip()]


def ensure_seed_host_file(path: str | Path, hosts_table: str | Path = "/etc/hosts") -> bool:
    """
    Make sure a seed host file exists at *path*.

    An existing file is never touched. Otherwise one is generated from the
    system hosts table. Returns True when a new file was written.
    """
    path = Path(path)
    log.debug("Generating the hostfile at %s", path)

    if path.exists():
        log.info("Found host file at location: %s", path)
        return False

    log.info("Host file doesn't exist, creating one: %s", path)
    try:
        table = Path(hosts_table).read_text()
    except OSError as e:
        raise ProvisioningFailure(f"Cannot read hosts table {hosts_table}: {e}") from e

    hosts = hostnames_from_hosts_table(table)
    log.debug("Extracted %d hosts from %s", len(hosts), hosts_table)

    try:
        path.write_text("".join(f"{h}\n" for h in hosts))
    except OSError as e:
        raise ProvisioningFailure(f"Cannot write host file {path}: {e}") from e
    return True
