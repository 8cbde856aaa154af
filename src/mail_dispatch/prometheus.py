# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Prometheus metrics for the mail dispatcher.

All metrics use the ``mds_`` prefix (mail-dispatch).

Metrics exposed:
    - ``mds_sent_total``: Counter of sent emails per category.
    - ``mds_errors_total``: Counter of transport failures per category.
    - ``mds_audit_failures_total``: Counter of audit records that could not be stored.
"""

from prometheus_client import CollectorRegistry, Counter, generate_latest


class MailMetrics:
    """Prometheus metrics collector for the mail dispatcher.

    Attributes:
        registry: The Prometheus CollectorRegistry holding all metrics.
        sent: Counter tracking successfully sent emails.
        errors: Counter tracking transport failures.
        audit_failures: Counter tracking failed audit writes.
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """Initialize metrics with an optional custom registry.

        Args:
            registry: Optional Prometheus CollectorRegistry. If not provided,
                a new registry is created.
        """
        self.registry = registry or CollectorRegistry()
        self.sent = Counter(
            "mds_sent_total",
            "Total sent emails",
            ["category"],
            registry=self.registry,
        )
        self.errors = Counter(
            "mds_errors_total",
            "Total transport errors",
            ["category"],
            registry=self.registry,
        )
        self.audit_failures = Counter(
            "mds_audit_failures_total",
            "Total audit records that could not be stored",
            registry=self.registry,
        )

    def inc_sent(self, category: str) -> None:
        self.sent.labels(category=category or "default").inc()

    def inc_error(self, category: str) -> None:
        self.errors.labels(category=category or "default").inc()

    def inc_audit_failure(self) -> None:
        self.audit_failures.inc()

    def generate_latest(self) -> bytes:
        """Export all metrics in Prometheus text exposition format."""
        return generate_latest(self.registry)
