# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Transport event stream and the exception sink that observes it.

Transports emit span events named ``("mailer", <action>, <phase>)`` where
phase is ``start``, ``stop`` or ``exception``. ``stop`` covers both accepted
messages and ordinary delivery failures; ``exception`` is reserved for
infrastructure faults raised inside the transport (connection errors,
timeouts, library bugs).

Handlers run out of band: when an event loop is running they are scheduled
with ``loop.call_soon`` so they never execute on the sending coroutine's
path. A failing handler is logged instead of propagating and is detached
unless it was attached as persistent.

Example:
    Wiring the sink at startup::

        events = TransportEvents()
        sink = ExceptionSink()
        sink.attach(events)
        ...
        sink.detach()
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from .logger import get_logger

EventName = tuple[str, ...]
Handler = Callable[[EventName, dict[str, Any], dict[str, Any], Any], None]

DELIVER_START: EventName = ("mailer", "deliver", "start")
DELIVER_STOP: EventName = ("mailer", "deliver", "stop")
DELIVER_EXCEPTION: EventName = ("mailer", "deliver", "exception")

logger = get_logger("Telemetry")


@dataclass(frozen=True)
class _Attachment:
    handler_id: str
    event_names: frozenset[EventName]
    handler: Handler
    config: Any
    persistent: bool = False


class TransportEvents:
    """Registry of event handlers for one transport layer.

    Attributes:
        handlers: Attached handlers keyed by handler id.
    """

    def __init__(self) -> None:
        self.handlers: dict[str, _Attachment] = {}

    def attach(
        self,
        handler_id: str,
        event_names: Iterable[EventName],
        handler: Handler,
        config: Any = None,
        *,
        persistent: bool = False,
    ) -> None:
        """Register ``handler`` for the given event names.

        A persistent handler stays attached after it raises.

        Raises:
            ValueError: If ``handler_id`` is already attached.
        """
        if handler_id in self.handlers:
            raise ValueError(f"Handler '{handler_id}' is already attached")
        self.handlers[handler_id] = _Attachment(
            handler_id, frozenset(tuple(name) for name in event_names), handler, config, persistent
        )
        logger.debug(f"Attached telemetry handler {handler_id}")

    def detach(self, handler_id: str) -> bool:
        """Remove a handler. Returns True if it was attached."""
        removed = self.handlers.pop(handler_id, None) is not None
        if removed:
            logger.debug(f"Detached telemetry handler {handler_id}")
        return removed

    def emit(
        self,
        event_name: EventName,
        measurements: dict[str, Any] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Dispatch an event to every handler subscribed to it. Never raises."""
        event_name = tuple(event_name)
        targets = [a for a in self.handlers.values() if event_name in a.event_names]
        if not targets:
            return
        measurements = dict(measurements or {})
        metadata = dict(metadata or {})
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        for attachment in targets:
            if loop is None:
                self._invoke(attachment, event_name, measurements, metadata)
            else:
                loop.call_soon(self._invoke, attachment, event_name, measurements, metadata)

    def _invoke(
        self,
        attachment: _Attachment,
        event_name: EventName,
        measurements: dict[str, Any],
        metadata: dict[str, Any],
    ) -> None:
        try:
            attachment.handler(event_name, measurements, metadata, attachment.config)
        except Exception:
            if attachment.persistent:
                logger.exception(
                    "Telemetry handler %s failed on %s", attachment.handler_id, event_name
                )
                return
            logger.exception(
                "Telemetry handler %s failed on %s and was detached",
                attachment.handler_id,
                event_name,
            )
            self.handlers.pop(attachment.handler_id, None)


class ExceptionSink:
    """Logs transport ``exception`` events.

    Takes no other action: it never writes audit records and never
    touches the result of the send that triggered the event.
    """

    handler_id = "mail-dispatch-exception-sink"

    def __init__(self, logger=None):
        self.logger = logger or get_logger("ExceptionSink")
        self._events: TransportEvents | None = None

    @property
    def attached(self) -> bool:
        return self._events is not None and self.handler_id in self._events.handlers

    def attach(self, events: TransportEvents) -> None:
        if self.attached:
            raise RuntimeError("ExceptionSink is already attached")
        if self._events is not None:
            self._events.detach(self.handler_id)
        events.attach(self.handler_id, [DELIVER_EXCEPTION], self.handle_event, persistent=True)
        self._events = events

    def detach(self) -> None:
        if self._events is not None:
            self._events.detach(self.handler_id)
            self._events = None

    def handle_event(
        self,
        event_name: EventName,
        measurements: dict[str, Any],
        metadata: dict[str, Any],
        config: Any = None,
    ) -> None:
        match tuple(event_name):
            case ("mailer", _action, "exception"):
                self.logger.error("Error while sending the mail: %r", metadata)
            case _:
                return


__all__ = [
    "DELIVER_EXCEPTION",
    "DELIVER_START",
    "DELIVER_STOP",
    "ExceptionSink",
    "TransportEvents",
]
