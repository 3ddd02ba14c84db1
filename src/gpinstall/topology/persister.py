# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gpinstall/topology/persister.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from gpinstall.errors import PersistenceFailure
from gpinstall.observers.dispatcher import EventBus
from gpinstall.observers.events import WorkingSetPersisted, new_ctx, stamp

from .models import InstallationTopology

log = logging.getLogger("gpinstall")


def _rewrite(path: Path, hosts: Sequence[str]) -> None:
    """Delete *path* if present, then write *hosts* one per line."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        raise PersistenceFailure(f"Cannot delete {path}: {e}") from e
    try:
        path.write_text("".join(f"{h}\n" for h in hosts))
    except OSError as e:
        raise PersistenceFailure(f"Cannot write {path}: {e}") from e


def persist_host_sets(
    validated_hosts: Sequence[str],
    segment_hosts: Sequence[str],
    working_path: str | Path,
    segment_path: str | Path,
) -> None:
    # working file first; a crash in between leaves the segment file stale
    _rewrite(Path(working_path), validated_hosts)
    _rewrite(Path(segment_path), segment_hosts)


class WorkingSetPersister:
    """Writes the validated host sets that the downstream install steps read."""

    def __init__(self, bus: Optional[EventBus] = None, run_ctx: Optional[dict] = None):
        self.bus = bus or EventBus()
        self.run_ctx = run_ctx

    def persist(self, topo: InstallationTopology) -> None:
        if topo.mode is None:
            raise PersistenceFailure("Refusing to persist a topology that was never validated")

        log.debug("Saving working hosts to %s", topo.working_host_file)
        log.debug("Saving segment hosts to %s", topo.segment_host_file)
        persist_host_sets(
            topo.validated_hosts,
            topo.segment_hosts,
            topo.working_host_file,
            topo.segment_host_file,
        )

        ctx = stamp(self.run_ctx) if self.run_ctx else new_ctx(master=topo.master_hostname)
        self.bus.emit(
            WorkingSetPersisted(
                working_host_file=str(topo.working_host_file),
                segment_host_file=str(topo.segment_host_file),
                hosts=len(topo.validated_hosts),
                segments=len(topo.segment_hosts),
                **ctx,
            )
        )
