"""Lightweight in-memory gate counters.

Incremented by the gate controller; reset when the server restarts.
Nothing is persisted; the dashboard just shows live activity.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class GateStats:
    started_at: float = field(default_factory=time.time)
    sessions_opened: int = 0
    sessions_closed: int = 0
    unlocks: int = 0
    rejected_notifications: int = 0

    @property
    def uptime_seconds(self) -> int:
        return int(time.time() - self.started_at)

    def reset(self) -> None:
        self.started_at = time.time()
        self.sessions_opened = 0
        self.sessions_closed = 0
        self.unlocks = 0
        self.rejected_notifications = 0


# Module-level singleton, imported directly by the gate and the dashboard
stats = GateStats()
