"""Metric hooks and metric names shared by every pipeline stage."""

from . import names
from .base import LoggingMetricsHook, MetricsHook, NoOpMetricsHook

__all__ = [
    "LoggingMetricsHook",
    "MetricsHook",
    "NoOpMetricsHook",
    "names",
]
