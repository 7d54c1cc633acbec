# src/md_segmenter/observability/base.py

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class MetricsHook(Protocol):
    """Sink for pipeline metrics.

    Names come from ``md_segmenter.observability.names``. Durations are
    milliseconds, counters are per-document deltas.
    """

    def record_latency(
        self,
        name: str,
        value_ms: float,
        labels: dict[str, str] | None = None,
    ) -> None: ...

    def increment(
        self,
        name: str,
        value: int = 1,
        labels: dict[str, str] | None = None,
    ) -> None: ...


class NoOpMetricsHook:
    """Default hook. Drops everything."""

    def record_latency(
        self, name: str, value_ms: float, labels: dict[str, str] | None = None
    ) -> None:
        pass

    def increment(
        self, name: str, value: int = 1, labels: dict[str, str] | None = None
    ) -> None:
        pass


class LoggingMetricsHook:
    """Writes every metric to a logger.

    Handy for batch ingestion jobs that have no metrics backend but keep
    their logs. Zero-valued counters are skipped.
    """

    def __init__(self, level: int = logging.INFO, log: logging.Logger = logger) -> None:
        self._level = level
        self._log = log

    def record_latency(
        self, name: str, value_ms: float, labels: dict[str, str] | None = None
    ) -> None:
        self._log.log(self._level, "metric %s=%.1fms%s", name, value_ms, _fmt(labels))

    def increment(
        self, name: str, value: int = 1, labels: dict[str, str] | None = None
    ) -> None:
        if value:
            self._log.log(self._level, "metric %s+=%d%s", name, value, _fmt(labels))


def _fmt(labels: dict[str, str] | None) -> str:
    if not labels:
        return ""
    return " " + ",".join(f"{k}={v}" for k, v in sorted(labels.items()))
