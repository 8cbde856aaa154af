# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""In-process transport that keeps messages in memory.

Used when no SMTP server is configured and in tests. ``fail_with`` makes
the next deliveries fail with an ordinary ``TransportError``; ``crash_with``
raises an arbitrary exception from inside the transport, which surfaces as a
telemetry ``exception`` event.
"""

from __future__ import annotations

import asyncio
import uuid

from ..errors import TransportError
from ..models import OutboundMessage, TransportReceipt
from ..telemetry import TransportEvents
from .base import Transport


class LocalTransport(Transport):
    """Mailbox transport.

    Attributes:
        outbox: Messages accepted so far, in delivery order.
        fail_with: When set, every delivery raises this error.
        crash_with: When set, every delivery raises this exception.
        delay: Seconds to wait before accepting, to simulate latency.
    """

    name = "local"

    def __init__(
        self,
        events: TransportEvents | None = None,
        *,
        fail_with: TransportError | None = None,
        crash_with: Exception | None = None,
        delay: float = 0.0,
    ):
        super().__init__(events)
        self.outbox: list[OutboundMessage] = []
        self.fail_with = fail_with
        self.crash_with = crash_with
        self.delay = delay

    async def _deliver(self, message: OutboundMessage) -> TransportReceipt:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.crash_with is not None:
            raise self.crash_with
        if self.fail_with is not None:
            raise self.fail_with
        self.outbox.append(message)
        return TransportReceipt(
            message_id=f"<{uuid.uuid4().hex}@local>",
            response="queued",
            accepted=message.recipients,
        )

    def clear(self) -> None:
        self.outbox.clear()


__all__ = ["LocalTransport"]
