# File: site_mirror/aggregator.py
"""site_mirror.aggregator: outcome of a mirroring run, one entry per admitted URL."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from site_mirror.crawler.models import TargetState


@dataclass(slots=True)
class CrawlReport:
    """Final state of every admitted URL plus where it was saved or why it failed."""

    states: Dict[str, TargetState] = field(default_factory=dict)
    saved: Dict[str, str] = field(default_factory=dict)
    failed: Dict[str, str] = field(default_factory=dict)
    elapsed: float = 0.0

    def mark(self, url: str, state: TargetState) -> None:
        self.states[url] = state

    def record_saved(self, url: str, path: str) -> None:
        self.saved[url] = path
        self.states[url] = TargetState.SAVED

    def record_failed(self, url: str, reason: str) -> None:
        self.failed[url] = reason
        self.states[url] = TargetState.FAILED

    def in_state(self, state: TargetState) -> List[str]:
        return [url for url, st in self.states.items() if st is state]

    @property
    def admitted(self) -> int:
        return len(self.states)

    def summary(self) -> str:
        """Human-readable one-liner for the CLI and the final log record."""
        rate = len(self.saved) / self.elapsed if self.elapsed else 0.0
        return (
            f"{self.admitted} URLs admitted, {len(self.saved)} saved, "
            f"{len(self.failed)} failed in {self.elapsed:.2f}s ({rate:.2f} files/s)"
        )
