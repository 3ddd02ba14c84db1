# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gpinstall/config/models.py

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

GREENPLUM_LINK = "/usr/local/greenplum-db"


class InstallConfig(BaseModel):
    """Explicit run configuration handed to the topology and install steps."""

    # Host identity and file placement
    master_hostname: str
    temp_dir: Path
    seed_host_file: Path = Field(default_factory=lambda: Path.home() / "hostfile")
    hosts_table: Path = Path("/etc/hosts")

    # Reachability probe
    ssh_port: int = Field(default=22, gt=0, lt=65536)
    probe_timeout: float = Field(default=5.0, gt=0)
    strict_master_check: bool = False

    # Downstream steps
    gphome: Optional[Path] = None
    version: Optional[str] = None
    ssh_username: Optional[str] = None
    ssh_key: Optional[Path] = None

    @field_validator("master_hostname")
    @classmethod
    def _master_not_blank(cls, v: str) -> str:
        # kept verbatim: seed entries are matched against it exactly
        if not v.strip():
            raise ValueError("master hostname must not be empty")
        return v

    @property
    def working_host_file(self) -> Path:
        return self.temp_dir / "hostfile"

    @property
    def segment_host_file(self) -> Path:
        return self.temp_dir / "hostfile_segment"

    @property
    def install_location(self) -> Optional[Path]:
        if not self.version:
            return None
        return Path(f"{GREENPLUM_LINK}-{self.version}")
