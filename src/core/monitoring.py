"""Aggregate per-cache stats into a health report.

Health is driven by the aggregate hit rate: healthy >= 60%, warning >= 30%,
critical below that. Per-cache recommendations flag a hit rate under 50% or
evictions above 30% of sets.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from core.cache import CacheStats
from core.cache_manager import CacheManager

HealthStatus = Literal["healthy", "warning", "critical"]

HEALTHY_HIT_RATE = 60.0
WARNING_HIT_RATE = 30.0
LOW_CACHE_HIT_RATE = 50.0
HIGH_EVICTION_RATIO = 0.3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverallHealth:
    total_hit_rate: float
    total_size: int
    health_status: HealthStatus


@dataclass(frozen=True)
class CacheReport:
    caches: Dict[str, CacheStats]
    overall: OverallHealth
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "caches": {name: stats.to_dict() for name, stats in self.caches.items()},
            "recommendations": list(self.recommendations),
            "overall": {
                "total_hit_rate": self.overall.total_hit_rate,
                "total_size": self.overall.total_size,
                "health_status": self.overall.health_status,
            },
        }


def classify_health(hit_rate: float) -> HealthStatus:
    if hit_rate < WARNING_HIT_RATE:
        return "critical"
    if hit_rate < HEALTHY_HIT_RATE:
        return "warning"
    return "healthy"


class CacheMonitoring:
    def __init__(self, manager: CacheManager) -> None:
        self._manager = manager
        self._task: Optional[asyncio.Task[None]] = None

    def generate_report(self) -> CacheReport:
        stats = self._manager.get_all_stats()
        recommendations: List[str] = []

        total_hits = 0
        total_requests = 0
        total_size = 0

        for name, stat in stats.items():
            total_hits += stat.hits
            total_requests += stat.hits + stat.misses
            total_size += stat.total_size

            if stat.hit_rate < LOW_CACHE_HIT_RATE:
                recommendations.append(
                    f"{name} cache has low hit rate ({stat.hit_rate:.1f}%). "
                    "Consider increasing TTL or cache size."
                )
            if stat.evictions > stat.sets * HIGH_EVICTION_RATIO:
                recommendations.append(
                    f"{name} cache has high eviction rate. Consider increasing cache size."
                )

        total_hit_rate = (total_hits / total_requests) * 100 if total_requests > 0 else 0.0

        return CacheReport(
            caches=stats,
            recommendations=recommendations,
            overall=OverallHealth(
                total_hit_rate=total_hit_rate,
                total_size=total_size,
                health_status=classify_health(total_hit_rate),
            ),
        )

    def log_metrics(self) -> CacheReport:
        report = self.generate_report()
        level = logging.WARNING if report.overall.health_status == "critical" else logging.INFO
        logger.log(
            level,
            "Cache performance: hit_rate=%.1f%% total_size=%d status=%s recommendations=%s",
            report.overall.total_hit_rate,
            report.overall.total_size,
            report.overall.health_status,
            report.recommendations,
        )
        return report

    # --- Periodic reporting ---

    @property
    def periodic_logging_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start_periodic_logging(self, interval: float) -> None:
        """Log metrics every `interval` seconds; needs a running event loop."""
        if interval <= 0 or self.periodic_logging_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._log_loop(float(interval)))

    def stop_periodic_logging(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _log_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            self.log_metrics()
