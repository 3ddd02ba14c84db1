# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gpinstall/topology/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class TopologyMode(str, Enum):
    SINGLE = "single"
    MULTI = "multi"


@dataclass
class InstallationTopology:
    """
    Host layout of one installation run.

    Filled in strictly in the order provisioning -> probing -> classification
    -> persistence. ``mode`` is only ever set by the validator.
    """
    seed_host_file: Path
    master_hostname: str
    working_host_file: Path
    segment_host_file: Path
    mode: Optional[TopologyMode] = None
    validated_hosts: List[str] = field(default_factory=list)   # probe order, duplicates kept
    segment_hosts: List[str] = field(default_factory=list)     # validated_hosts minus the master

    @property
    def is_multi(self) -> bool:
        return self.mode is TopologyMode.MULTI
