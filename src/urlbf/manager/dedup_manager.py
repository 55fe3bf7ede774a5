"""Seen-URL manager: the contains-then-add loop a crawler worker runs per page."""
from __future__ import annotations

import logging
import time
from enum import Enum, auto
from typing import Iterable, Optional

from urlbf.bloom.bloom_filter import BloomFilter
from urlbf.config import SATURATION_WARNING
from urlbf.metrics.metrics import DedupMetrics
from urlbf.storage.filter_store import FilterStore

logger = logging.getLogger(__name__)


class CheckResult(Enum):
    NEW = auto()
    SEEN = auto()


class SeenUrlManager:
    def __init__(
        self,
        bloom: BloomFilter,
        store: Optional[FilterStore] = None,
        metrics: Optional[DedupMetrics] = None,
        saturation_warning: float = SATURATION_WARNING,
    ) -> None:
        self.bloom = bloom
        self.store = store
        self.metrics = metrics or DedupMetrics()
        self.saturation_warning = saturation_warning
        self._saturation_reported = False

    @classmethod
    def open(cls, store: FilterStore, capacity: int, **kwargs) -> "SeenUrlManager":
        """Reload the filter from store if a state file exists, else start fresh."""
        bloom = store.load()
        if bloom is None:
            logger.info("No filter state at %s, creating one for capacity=%d", store.path, capacity)
            bloom = BloomFilter.from_capacity(capacity)
        return cls(bloom, store=store, **kwargs)

    def check_and_add(self, url: str) -> CheckResult:
        """Add url if the filter has not seen it; report which case applied."""
        start = time.perf_counter_ns()
        seen = self.bloom.contains(url)
        if not seen:
            self.bloom.add(url)
        self.metrics.record_check(seen)
        self.metrics.record_lookup_latency(self._micros_since(start))
        return CheckResult.SEEN if seen else CheckResult.NEW

    def filter_new(self, urls: Iterable[str]) -> list[str]:
        """Keep URLs not seen before, in order; repeats within urls are dropped too."""
        fresh = [url for url in urls if self.check_and_add(url) is CheckResult.NEW]
        self.maybe_warn_saturation()
        return fresh

    def maybe_warn_saturation(self) -> bool:
        """Log once when truthiness reaches the warning threshold. Returns True if saturated."""
        truthiness = self.bloom.truthiness
        saturated = truthiness >= self.saturation_warning
        if saturated and not self._saturation_reported:
            logger.warning(
                "Seen-URL filter saturated: truthiness=%.3f >= %.3f, est_fpr=%.4f",
                truthiness, self.saturation_warning, self.bloom.estimate_fpr(),
            )
            self._saturation_reported = True
        return saturated

    def persist(self) -> None:
        if self.store is None:
            raise RuntimeError("SeenUrlManager has no FilterStore configured")
        self.store.save(self.bloom)
        self.metrics.record_persist()

    def stats(self) -> dict[str, int | float]:
        data = self.metrics.as_dict()
        data.update(
            bit_count=self.bloom.bit_count,
            hash_count=self.bloom.hash_count,
            truthiness=self.bloom.truthiness,
            estimated_fpr=self.bloom.estimate_fpr(),
        )
        return data

    @staticmethod
    def _micros_since(start_ns: int) -> int:
        end = time.perf_counter_ns()
        return int((end - start_ns) / 1000)
