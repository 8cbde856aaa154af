# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Service wiring: settings in, ready-to-use Mailer out.

``MailService`` owns the process-wide pieces: the database adapter, the
transport with its event stream and the exception sink. ``start()`` creates
the audit schema and attaches the sink once; ``stop()`` detaches it and
closes the adapter.

Example:
    Running inside an application::

        async with MailService(load_settings()) as service:
            message = service.build_common_message(org, "Welcome", body)
            await service.send(message, {"category": "onboarding", "organization_id": org.id})
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .config import Settings
from .logger import get_logger
from .mailer import Mailer
from .models import Address, Attribution, OutboundMessage, TransportReceipt
from .prometheus import MailMetrics
from .sql import create_adapter
from .tables import MailLogTable
from .telemetry import ExceptionSink, TransportEvents
from .transport import LocalTransport, SmtpTransport, Transport


class MailService:
    """Process-wide mail dispatch service.

    Attributes:
        settings: Loaded settings.
        adapter: Database adapter for the audit store.
        logs: Mail log table.
        events: Transport event stream.
        transport: Transport in use (SMTP when a host is configured).
        sink: Exception sink attached to ``events`` while running.
        metrics: Prometheus metrics collector.
        mailer: The send-and-capture entry point.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: Transport | None = None,
        metrics: MailMetrics | None = None,
        logger=None,
    ):
        self.settings = settings or Settings()
        self.logger = logger or get_logger("MailService")
        self.adapter = create_adapter(self.settings.db_path)
        self.logs = MailLogTable(self.adapter)
        if transport is None:
            events = TransportEvents()
            if self.settings.smtp.host:
                transport = SmtpTransport(self.settings.smtp, events)
            else:
                self.logger.warning("No SMTP host configured, using the local transport")
                transport = LocalTransport(events)
        self.transport = transport
        self.events = transport.events
        self.sink = ExceptionSink()
        self.metrics = metrics or MailMetrics()
        self.mailer = Mailer(
            self.transport,
            self.logs,
            config=self.settings.mailer,
            metrics=self.metrics,
        )
        self._started = False

    async def start(self) -> None:
        """Create the audit schema and attach the exception sink."""
        if self._started:
            return
        await self.adapter.connect()
        await self.logs.create_schema()
        self.sink.attach(self.events)
        self._started = True
        self.logger.info(f"Mail service started (transport={self.transport.name})")

    async def stop(self) -> None:
        """Detach the exception sink and release the database."""
        if not self._started:
            return
        self.sink.detach()
        await self.adapter.close()
        self._started = False
        self.logger.info("Mail service stopped")

    async def __aenter__(self) -> MailService:
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    def build_common_message(
        self,
        organization: Any,
        subject: str,
        body: str,
        send_to: Address | tuple[str, str] | None = None,
    ) -> OutboundMessage:
        return self.mailer.build_common_message(organization, subject, body, send_to)

    async def send(
        self,
        message: OutboundMessage,
        attribution: Attribution | Mapping[str, Any] | None,
    ) -> TransportReceipt:
        return await self.mailer.send(message, attribution)


__all__ = ["MailService"]
