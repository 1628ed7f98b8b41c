# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/athena/observers/events.py

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
    run_id: str       # correlates all events of one operation
    endpoint: str     # address:port of the OneFuse service

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def new_ctx(endpoint: str, run_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "ts": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "run_id": run_id or str(uuid.uuid4()),
        "endpoint": endpoint,
    }


# ---------------------------------------------------------------------
# Job lifecycle
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class JobSubmitted(BaseEvent):
    method: str
    url: str
    job_id: int

@dataclass(frozen=True)
class JobPolled(BaseEvent):
    job_id: int
    job_state: Optional[str]
    attempt: int
    elapsed_ms: int

@dataclass(frozen=True)
class JobSucceeded(BaseEvent):
    job_id: int
    job_type: Optional[str]
    polls: int
    duration_ms: int

@dataclass(frozen=True)
class JobFailed(BaseEvent):
    job_id: int
    job_type: Optional[str]
    messages: List[str]

@dataclass(frozen=True)
class JobTimedOut(BaseEvent):
    job_id: int
    timeout_ms: int

@dataclass(frozen=True)
class ManagedObjectResolved(BaseEvent):
    job_id: int
    url: str
