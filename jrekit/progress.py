"""Progress tracking for per-platform pipeline steps."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable

import structlog

log = structlog.get_logger("jrekit.progress")


@dataclass
class StepProgress:
    name: str
    status: str = "pending"  # "pending" | "running" | "completed" | "failed" | "skipped"
    start_time: float | None = None
    end_time: float | None = None
    detail: str = ""
    error: str | None = None

    @property
    def duration(self) -> float | None:
        if self.start_time is not None and self.end_time is not None:
            return round(self.end_time - self.start_time, 2)
        return None

    @property
    def succeeded(self) -> bool:
        return self.status in ("completed", "skipped")


class ProgressTracker:
    """Track the outcome of each step in a batch (one step per platform)."""

    def __init__(self) -> None:
        self.steps: list[StepProgress] = []
        self._by_name: dict[str, StepProgress] = {}
        self.callbacks: list[Callable[[StepProgress], None]] = []

    def start(self, name: str) -> None:
        p = StepProgress(name=name, status="running", start_time=time.monotonic())
        self.steps.append(p)
        self._by_name[name] = p
        self._notify(p)

    def complete(self, name: str, detail: str = "") -> None:
        p = self._by_name.get(name)
        if p:
            p.status = "completed"
            p.end_time = time.monotonic()
            p.detail = detail
            self._notify(p)

    def fail(self, name: str, error: str) -> None:
        p = self._by_name.get(name)
        if p:
            p.status = "failed"
            p.end_time = time.monotonic()
            p.error = error
            self._notify(p)

    def skip(self, name: str, reason: str) -> None:
        """Mark *name* as skipped; a step already started keeps its timing."""
        p = self._by_name.get(name)
        if p is None:
            p = StepProgress(name=name)
            self.steps.append(p)
            self._by_name[name] = p
        p.status = "skipped"
        p.detail = reason
        if p.start_time is not None:
            p.end_time = time.monotonic()
        self._notify(p)

    def get(self, name: str) -> StepProgress | None:
        return self._by_name.get(name)

    @property
    def failed(self) -> list[str]:
        return [p.name for p in self.steps if p.status == "failed"]

    def results(self) -> dict[str, bool]:
        return {p.name: p.succeeded for p in self.steps}

    def get_summary(self) -> dict[str, Any]:
        total_duration = sum(p.duration or 0 for p in self.steps)
        return {
            "steps": [
                {
                    "name": p.name,
                    "status": p.status,
                    "duration": p.duration,
                    "detail": p.detail,
                    "error": p.error,
                }
                for p in self.steps
            ],
            "succeeded": sum(1 for p in self.steps if p.succeeded),
            "total": len(self.steps),
            "total_duration": round(total_duration, 2),
        }

    def _notify(self, p: StepProgress) -> None:
        for cb in self.callbacks:
            try:
                cb(p)
            except Exception:
                log.debug("progress.callback_error", step=p.name, exc_info=True)
