"""Defaults and environment settings for urlbf."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_CAPACITY = 10_000
DEFAULT_STATE_PATH = "state/seen_urls.bf"
SATURATION_WARNING = 0.5  # truthiness at which the filter is considered saturated
PAGE_EXCERPT_LIMIT = 10_000

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class DedupSettings:
    capacity: int = DEFAULT_CAPACITY
    state_path: str = DEFAULT_STATE_PATH
    saturation_warning: float = SATURATION_WARNING
    log_level: str = "INFO"

    def __post_init__(self):
        if self.capacity < 1:
            raise ValueError(f"capacity must be positive, got {self.capacity}")
        if not (0 < self.saturation_warning <= 1):
            raise ValueError("saturation_warning must be in (0, 1]")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"unknown log level: {self.log_level}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DedupSettings":
        """Read URLBF_* variables, falling back to module defaults."""
        env = os.environ if environ is None else environ
        try:
            return cls(
                capacity=int(env.get("URLBF_CAPACITY", DEFAULT_CAPACITY)),
                state_path=env.get("URLBF_STATE_PATH", DEFAULT_STATE_PATH),
                saturation_warning=float(env.get("URLBF_SATURATION_WARNING", SATURATION_WARNING)),
                log_level=env.get("URLBF_LOG_LEVEL", "INFO"),
            )
        except (TypeError, ValueError) as exc:
            raise ValueError(f"invalid URLBF_* setting: {exc}") from exc


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper()), format=LOG_FORMAT)
