# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Base class for transports.

``Transport.deliver`` wraps the concrete ``_deliver`` in a telemetry span:
``start`` before, ``stop`` after an accepted message or a ``TransportError``,
``exception`` when anything else escapes. Escaping exceptions are turned
into a ``TransportError`` so callers only ever see one failure type.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any

from ..errors import TransportError
from ..models import OutboundMessage, TransportReceipt
from ..telemetry import DELIVER_EXCEPTION, DELIVER_START, DELIVER_STOP, TransportEvents


class Transport(ABC):
    """Abstract transport.

    Attributes:
        name: Short transport name reported in event metadata.
        events: Event stream receiving the transport's span events.
    """

    name = "transport"

    def __init__(self, events: TransportEvents | None = None):
        self.events = events or TransportEvents()

    async def deliver(self, message: OutboundMessage) -> TransportReceipt:
        """Hand ``message`` off for delivery.

        Returns:
            The receipt of the accepted message.

        Raises:
            TransportError: The message did not leave the system.
        """
        metadata: dict[str, Any] = {
            "transport": self.name,
            "subject": message.subject,
            "recipients": message.recipients,
        }
        started = time.monotonic()
        self.events.emit(DELIVER_START, {"system_time": time.time()}, metadata)
        try:
            receipt = await self._deliver(message)
        except TransportError as exc:
            self.events.emit(
                DELIVER_STOP,
                {"duration": time.monotonic() - started},
                {**metadata, "error": str(exc)},
            )
            raise
        except Exception as exc:
            self.events.emit(
                DELIVER_EXCEPTION,
                {"duration": time.monotonic() - started},
                {**metadata, "kind": type(exc).__name__, "reason": str(exc)},
            )
            raise TransportError(str(exc) or type(exc).__name__) from exc
        self.events.emit(
            DELIVER_STOP,
            {"duration": time.monotonic() - started},
            {**metadata, "message_id": receipt.message_id},
        )
        return receipt

    @abstractmethod
    async def _deliver(self, message: OutboundMessage) -> TransportReceipt:
        """Deliver the message. Raise ``TransportError`` for ordinary failures."""
        ...


__all__ = ["Transport"]
