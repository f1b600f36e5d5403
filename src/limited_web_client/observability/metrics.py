# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Invocation metrics for the rate-limited API client.

This module provides:
1. InvocationMetrics - Dataclass counting API call outcomes
2. PrometheusInvocationMetrics - Optional Prometheus counters and histogram

Usage:
    metrics = InvocationMetrics()
    metrics.record(InvocationOutcome.SUCCESS, duration_seconds=0.12)
    stats = metrics.get_stats()
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..exceptions import (
    CommunicationError,
    DecodingError,
    DisposedError,
    OperationCancelledError,
    QuotaTimeoutError,
    WebError,
)

logger = logging.getLogger(__name__)

# Type declarations for optional prometheus_client imports
if TYPE_CHECKING:
    from prometheus_client import Counter as CounterType, Histogram as HistogramType
else:
    CounterType = object
    HistogramType = object

# Try to import prometheus_client for optional Prometheus metrics
try:
    from prometheus_client import Counter as _Counter, Histogram as _Histogram

    Counter: type[CounterType] | None = _Counter
    Histogram: type[HistogramType] | None = _Histogram
    PROMETHEUS_AVAILABLE = True
except ImportError:
    Counter = None
    Histogram = None
    PROMETHEUS_AVAILABLE = False


class InvocationOutcome(Enum):
    """How an API call ended."""

    SUCCESS = "success"
    WEB_ERROR = "web_error"
    COMMUNICATION_ERROR = "communication_error"
    CANCELLED = "cancelled"
    QUOTA_TIMEOUT = "quota_timeout"
    DECODING_ERROR = "decoding_error"
    DISPOSED = "disposed"
    OTHER_ERROR = "other_error"

    @classmethod
    def from_exception(cls, error: BaseException | None) -> InvocationOutcome:
        if error is None:
            return cls.SUCCESS
        if isinstance(error, WebError):
            return cls.WEB_ERROR
        if isinstance(error, CommunicationError):
            return cls.COMMUNICATION_ERROR
        if isinstance(error, (OperationCancelledError, asyncio.CancelledError)):
            return cls.CANCELLED
        if isinstance(error, QuotaTimeoutError):
            return cls.QUOTA_TIMEOUT
        if isinstance(error, DecodingError):
            return cls.DECODING_ERROR
        if isinstance(error, DisposedError):
            return cls.DISPOSED
        return cls.OTHER_ERROR


@dataclass
class InvocationMetrics:
    """
    Outcome counters for API calls.

    Thread Safety:
        Counter updates are guarded by a threading.Lock so the object may be
        shared between event loops running in different threads.

    Example:
        >>> metrics = InvocationMetrics()
        >>> metrics.record(InvocationOutcome.SUCCESS, 0.5)
        >>> metrics.get_stats()["success"]
        1
    """

    counts: dict[InvocationOutcome, int] = field(
        default_factory=lambda: dict.fromkeys(InvocationOutcome, 0)
    )
    total_duration_seconds: float = 0.0

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def record(self, outcome: InvocationOutcome, duration_seconds: float = 0.0) -> None:
        with self._lock:
            self.counts[outcome] += 1
            self.total_duration_seconds += duration_seconds

    def get_success_rate(self) -> float:
        """Share of successful calls; 1.0 when nothing was recorded."""
        total = self.total
        return self.counts[InvocationOutcome.SUCCESS] / total if total > 0 else 1.0

    def get_stats(self) -> dict[str, Any]:
        """Return a JSON-serializable snapshot."""
        with self._lock:
            stats: dict[str, Any] = {o.value: n for o, n in self.counts.items()}
            stats["total"] = sum(self.counts.values())
            stats["total_duration_seconds"] = self.total_duration_seconds
        stats["success_rate"] = self.get_success_rate()
        return stats

    def reset(self) -> None:
        with self._lock:
            self.counts = dict.fromkeys(InvocationOutcome, 0)
            self.total_duration_seconds = 0.0


class PrometheusInvocationMetrics:
    """
    Optional Prometheus metrics for API calls.

    Metrics:
        - limited_web_client_invocations_total: Counter by method and outcome
        - limited_web_client_invocation_duration_seconds: Histogram by method

    Only instantiated if prometheus_client is available.
    """

    def __init__(self, registry: Any | None = None) -> None:
        """
        Initialize Prometheus invocation metrics.

        Args:
            registry: Optional CollectorRegistry. If None, uses the default registry.

        Raises:
            ImportError: If prometheus_client is not available.
        """
        if not PROMETHEUS_AVAILABLE or Counter is None or Histogram is None:
            raise ImportError(
                "prometheus_client is not available. "
                "Install with: pip install limited-web-client[metrics]"
            )

        self.invocations = Counter(
            "limited_web_client_invocations_total",
            "Total API invocations by outcome",
            ["method", "outcome"],
            registry=registry,
        )
        self.invocation_duration_seconds = Histogram(
            "limited_web_client_invocation_duration_seconds",
            "Duration of API invocations including quota wait",
            ["method"],
            buckets=[0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30, 60],
            registry=registry,
        )

        logger.info("Prometheus invocation metrics initialized")

    def observe(
        self, method: str, outcome: InvocationOutcome, duration_seconds: float
    ) -> None:
        self.invocations.labels(method=method, outcome=outcome.value).inc()
        self.invocation_duration_seconds.labels(method=method).observe(duration_seconds)


# Module-level singleton for Prometheus metrics (optional)
_prometheus_invocation_metrics: PrometheusInvocationMetrics | None = None
_prometheus_lock = threading.Lock()


def get_prometheus_invocation_metrics() -> PrometheusInvocationMetrics | None:
    """
    Get or create the Prometheus invocation metrics singleton.

    Returns:
        PrometheusInvocationMetrics instance if prometheus_client is available,
        None otherwise.
    """
    global _prometheus_invocation_metrics

    if not PROMETHEUS_AVAILABLE:
        return None

    if _prometheus_invocation_metrics is None:
        with _prometheus_lock:
            # Second check inside lock; duplicate registration raises
            if _prometheus_invocation_metrics is None:
                try:
                    _prometheus_invocation_metrics = PrometheusInvocationMetrics()
                except ValueError as e:
                    logger.warning(
                        "Failed to initialize Prometheus invocation metrics: %s", e
                    )
                    return None

    return _prometheus_invocation_metrics


def reset_prometheus_invocation_metrics() -> None:
    """Reset the Prometheus invocation metrics singleton (mainly for testing)."""
    global _prometheus_invocation_metrics
    _prometheus_invocation_metrics = None


__all__ = [
    "PROMETHEUS_AVAILABLE",
    "InvocationMetrics",
    "InvocationOutcome",
    "PrometheusInvocationMetrics",
    "get_prometheus_invocation_metrics",
    "reset_prometheus_invocation_metrics",
]
