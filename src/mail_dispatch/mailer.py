# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Send-and-capture: deliver a message and record exactly one audit row.

``Mailer.send`` is the single entry point every notification goes
through. The transport call completes first; only then is the audit
record written, and the caller receives the transport outcome unchanged:
the receipt on success, the original ``TransportError`` on failure.

If the audit record cannot be written the request is aborted with
``AuditPersistenceFailure`` instead of returning an outcome that has no
matching record.

Example:
    Sending a billing notice::

        mailer = Mailer(transport, MailLogTable(adapter))
        message = mailer.build_common_message(org, "Invoice ready", body)
        receipt = await mailer.send(
            message, Attribution(category="billing", organization_id=org.id)
        )
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from .builder import MessageBuilder
from .config import MailerConfig
from .errors import AttributionMissing, AuditPersistenceFailure, EmptyRecipients, TransportError
from .logger import get_logger
from .models import Address, Attribution, AuditRecord, OutboundMessage, TransportReceipt
from .prometheus import MailMetrics
from .tables import MailLogTable
from .transport import Transport


class Mailer:
    """Dispatcher and audit logger for outbound notifications.

    Attributes:
        transport: Transport used to hand messages off.
        logs: Audit store receiving one record per attempt.
        config: Sender and support identities for built messages.
        metrics: Prometheus metrics collector.
        logger: Logger instance for diagnostic output.
    """

    def __init__(
        self,
        transport: Transport,
        logs: MailLogTable,
        *,
        config: MailerConfig | None = None,
        metrics: MailMetrics | None = None,
        logger=None,
    ):
        self.transport = transport
        self.logs = logs
        self.config = config or MailerConfig()
        self.metrics = metrics or MailMetrics()
        self.logger = logger or get_logger("Mailer")
        self._builder = MessageBuilder(self.config)

    def build_common_message(
        self,
        organization: Any,
        subject: str,
        body: str,
        send_to: Address | tuple[str, str] | None = None,
    ) -> OutboundMessage:
        """Build a notification for ``organization`` with this mailer's identities."""
        return self._builder.build(organization, subject, body, send_to)

    async def send(
        self,
        message: OutboundMessage,
        attribution: Attribution | Mapping[str, Any] | None,
    ) -> TransportReceipt:
        """Deliver ``message`` and record the attempt.

        Args:
            message: The message to deliver.
            attribution: Category and organization id of the call site.

        Returns:
            The transport receipt.

        Raises:
            AttributionMissing: Attribution absent or incomplete. Nothing
                is sent and nothing is recorded.
            EmptyRecipients: The message has no ``to`` recipient. Nothing
                is sent and nothing is recorded.
            TransportError: The message did not leave the system. Raised
                after the ``error`` record is stored.
            AuditPersistenceFailure: The audit record could not be stored.
        """
        attrs = self._check_attribution(attribution)
        if not message.to:
            raise EmptyRecipients()

        try:
            receipt = await self.transport.deliver(message)
        except TransportError as exc:
            await self._capture_log(message, attrs, exc)
            raise
        except Exception as exc:
            error = TransportError(str(exc) or type(exc).__name__)
            await self._capture_log(message, attrs, error)
            raise error from exc

        await self._capture_log(message, attrs)
        return receipt

    @staticmethod
    def _check_attribution(attribution: Attribution | Mapping[str, Any] | None) -> Attribution:
        if isinstance(attribution, Attribution):
            return attribution
        if attribution is None:
            raise AttributionMissing()
        try:
            return Attribution.model_validate(dict(attribution))
        except (ValidationError, TypeError, ValueError) as exc:
            raise AttributionMissing(f"invalid attribution: {exc}") from exc

    async def _capture_log(
        self,
        message: OutboundMessage,
        attribution: Attribution,
        error: TransportError | None = None,
    ) -> AuditRecord:
        record = AuditRecord.for_attempt(message, attribution, error)
        try:
            stored = await self.logs.create(record)
        except Exception as exc:
            self.metrics.inc_audit_failure()
            self.logger.critical(
                "Could not store mail log (category=%s, organization=%s, status=%s): %s",
                attribution.category,
                attribution.organization_id,
                record.status.value,
                exc,
            )
            raise AuditPersistenceFailure(
                f"mail log for organization {attribution.organization_id} "
                f"({attribution.category}) was not stored: {exc}",
                transport_error=error,
            ) from exc

        if error is None:
            self.metrics.inc_sent(attribution.category)
            self.logger.info(
                "Mail sent (category=%s, organization=%s, log=%s)",
                attribution.category,
                attribution.organization_id,
                stored.id,
            )
        else:
            self.metrics.inc_error(attribution.category)
            self.logger.warning(
                "Mail failed (category=%s, organization=%s, log=%s): %s",
                attribution.category,
                attribution.organization_id,
                stored.id,
                error,
            )
        return stored


__all__ = ["Mailer"]
