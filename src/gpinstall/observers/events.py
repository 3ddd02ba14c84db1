# src/gpinstall/observers/events.py

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import List, Dict, Any, Optional
from datetime import datetime, timezone
import uuid


# ---------------------------------------------------------------------
# Base context and helper
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BaseEvent:
    ts: str           # ISO timestamp
    run_id: str       # correlates all events in a single install invocation
    master: str       # master hostname of the run

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def new_ctx(master: str, run_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "ts": _now(),
        "run_id": run_id or str(uuid.uuid4()),
        "master": master,
    }


def stamp(ctx: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a run context with ts set to the emit time."""
    return {**ctx, "ts": _now()}


# ---------------------------------------------------------------------
# Topology discovery
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class SeedHostFileReady(BaseEvent):
    path: str
    generated: bool

@dataclass(frozen=True)
class HostProbed(BaseEvent):
    host: str
    port: int
    reachable: bool

@dataclass(frozen=True)
class TopologyClassified(BaseEvent):
    mode: str
    validated_hosts: List[str]
    segment_hosts: List[str]

@dataclass(frozen=True)
class TopologyRejected(BaseEvent):
    reason: str
    error: str

@dataclass(frozen=True)
class WorkingSetPersisted(BaseEvent):
    working_host_file: str
    segment_host_file: str
    hosts: int
    segments: int


# ---------------------------------------------------------------------
# Downstream install steps
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class StepStarted(BaseEvent):
    step: str

@dataclass(frozen=True)
class StepSucceeded(BaseEvent):
    step: str
    duration_sec: float

@dataclass(frozen=True)
class StepFailed(BaseEvent):
    step: str
    error: str
