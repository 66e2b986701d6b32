"""Run result data structures produced by the route orchestrator."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class RouteState(str, Enum):
    PENDING = "pending"
    CAPTURING = "capturing"
    DIFFING = "diffing"
    PACKAGING = "packaging"
    RETRYING = "retrying"
    DONE = "done"
    ABORTED = "aborted"


TERMINAL_STATES = frozenset({RouteState.DONE, RouteState.ABORTED})


class DeviceComparison(BaseModel):
    device: str
    difference_percentage: float = 0.0
    different_pixels: int = 0
    total_pixels: int = 0


class RouteResult(BaseModel):
    name: str
    path: str
    state: RouteState = RouteState.PENDING
    attempts: int = 0
    error: Optional[str] = None
    duration_seconds: float = 0.0
    devices: list[DeviceComparison] = Field(default_factory=list)


class RunResult(BaseModel):
    run_id: str
    started_at: str
    completed_at: str = ""
    before_url: str
    after_url: str
    status: str = "running"  # running, complete, aborted
    duration_seconds: float = 0.0
    archive_path: str = ""
    route_results: list[RouteResult] = Field(default_factory=list)

    @property
    def completed_routes(self) -> int:
        return sum(1 for r in self.route_results if r.state == RouteState.DONE)
