# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Observability for API invocations.

Exports:
    InvocationMetrics: In-process outcome counters
    InvocationOutcome: Outcome classification of a call
    PrometheusInvocationMetrics: Optional Prometheus metrics (requires the
        'metrics' extra)
    get_prometheus_invocation_metrics: Get or create the Prometheus singleton
    reset_prometheus_invocation_metrics: Reset the Prometheus singleton
    PROMETHEUS_AVAILABLE: Whether prometheus_client is available
"""

from .metrics import (
    PROMETHEUS_AVAILABLE,
    InvocationMetrics,
    InvocationOutcome,
    PrometheusInvocationMetrics,
    get_prometheus_invocation_metrics,
    reset_prometheus_invocation_metrics,
)

__all__ = [
    "PROMETHEUS_AVAILABLE",
    "InvocationMetrics",
    "InvocationOutcome",
    "PrometheusInvocationMetrics",
    "get_prometheus_invocation_metrics",
    "reset_prometheus_invocation_metrics",
]
