"""Counters for observing URL deduplication."""
from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass
class DedupMetrics:
    checks: int = 0
    new_urls: int = 0
    duplicates: int = 0
    persist_count: int = 0
    lookup_latency_total_us: int = 0
    lookup_count: int = 0

    def record_check(self, seen: bool) -> None:
        self.checks += 1
        if seen:
            self.duplicates += 1
        else:
            self.new_urls += 1

    def record_persist(self) -> None:
        self.persist_count += 1

    def record_lookup_latency(self, micros: int) -> None:
        self.lookup_latency_total_us += micros
        self.lookup_count += 1

    def duplicate_ratio(self) -> float:
        if self.checks == 0:
            return 0.0
        return self.duplicates / float(self.checks)

    def average_lookup_latency_us(self) -> float:
        if self.lookup_count == 0:
            return 0.0
        return self.lookup_latency_total_us / float(self.lookup_count)

    def as_dict(self) -> dict[str, int | float]:
        data: dict[str, int | float] = asdict(self)
        data["duplicate_ratio"] = self.duplicate_ratio()
        data["avg_lookup_latency_us"] = self.average_lookup_latency_us()
        return data
