# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SMTP transport built on aiosmtplib.

One connection per delivery: connect, optionally authenticate, send, quit.
Server replies that reject the message (4xx/5xx, refused recipients,
authentication failures) become a ``TransportError`` carrying the SMTP
code. Connection-level faults (refused connection, disconnects, timeouts)
are left to escape so the base class reports them as telemetry
``exception`` events.

TLS behavior based on port and ``use_tls``:
- Port 465 with TLS: direct TLS (implicit TLS)
- Other ports with TLS: STARTTLS
- TLS disabled: plain SMTP
"""

from __future__ import annotations

import asyncio
from email.message import EmailMessage
from email.utils import formataddr, make_msgid

import aiosmtplib

from ..config import SmtpConfig
from ..errors import TransportError
from ..logger import get_logger
from ..models import Address, OutboundMessage, TransportReceipt
from ..telemetry import TransportEvents
from .base import Transport

logger = get_logger("SmtpTransport")


def _format_addresses(addresses: list[Address]) -> str:
    return ", ".join(formataddr(addr.as_tuple()) for addr in addresses)


def build_email(message: OutboundMessage) -> EmailMessage:
    """Render an OutboundMessage as a plain-text ``EmailMessage``."""
    msg = EmailMessage()
    msg["From"] = formataddr(message.sender.as_tuple())
    msg["To"] = _format_addresses(message.to)
    if message.cc:
        msg["Cc"] = _format_addresses(message.cc)
    msg["Subject"] = message.subject
    domain = message.sender.email.rpartition("@")[2] or None
    msg["Message-ID"] = make_msgid(domain=domain)
    msg.set_content(message.text_body)
    return msg


class SmtpTransport(Transport):
    """Deliver messages through an SMTP server.

    Attributes:
        config: Server settings.
    """

    name = "smtp"

    def __init__(self, config: SmtpConfig, events: TransportEvents | None = None):
        super().__init__(events)
        if not config.host:
            raise ValueError("SMTP host is not configured")
        self.config = config

    def _client(self) -> aiosmtplib.SMTP:
        use_tls = self.config.tls_enabled
        implicit = use_tls and self.config.port == 465
        return aiosmtplib.SMTP(
            hostname=self.config.host,
            port=self.config.port,
            use_tls=implicit,
            start_tls=use_tls and not implicit,
            timeout=self.config.timeout,
        )

    async def _deliver(self, message: OutboundMessage) -> TransportReceipt:
        email = build_email(message)
        smtp = self._client()
        try:
            await asyncio.wait_for(self._connect(smtp), timeout=self.config.timeout)
            errors, response = await asyncio.wait_for(
                smtp.send_message(email), timeout=self.config.timeout
            )
        except aiosmtplib.SMTPRecipientsRefused as exc:
            refused = {r.recipient: f"{r.code} {r.message}" for r in exc.recipients}
            raise TransportError("all recipients were refused", refused=refused) from exc
        except (
            aiosmtplib.SMTPConnectError,
            aiosmtplib.SMTPServerDisconnected,
            aiosmtplib.SMTPTimeoutError,
        ):
            raise
        except aiosmtplib.SMTPResponseException as exc:
            raise TransportError(exc.message, smtp_code=exc.code) from exc
        finally:
            await self._close(smtp)

        refused = {addr: f"{reply.code} {reply.message}" for addr, reply in errors.items()}
        if refused:
            logger.warning("SMTP server refused %d recipient(s): %s", len(refused), ", ".join(refused))
        return TransportReceipt(
            message_id=email["Message-ID"],
            response=str(response),
            accepted=[addr for addr in message.recipients if addr not in refused],
            refused=refused,
        )

    async def _connect(self, smtp: aiosmtplib.SMTP) -> None:
        await smtp.connect()
        if self.config.user and self.config.password:
            await smtp.login(self.config.user, self.config.password)

    async def _close(self, smtp: aiosmtplib.SMTP) -> None:
        if not smtp.is_connected:
            return
        try:
            await smtp.quit()
        except aiosmtplib.SMTPException as exc:
            logger.debug("QUIT failed, closing connection: %s", exc)
            smtp.close()


__all__ = ["SmtpTransport", "build_email"]
