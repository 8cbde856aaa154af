# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Canonical notification message builder.

All tenant notifications differ only in subject and body, so every call
site builds its message here: the organization is the default recipient,
the platform identity is the sender and the support team is copied.

Example:
    Building a billing notice::

        builder = MessageBuilder(MailerConfig())
        message = builder.build(org, "Invoice ready", body)
"""

from __future__ import annotations

from typing import Any

from .config import MailerConfig
from .models import Address, OutboundMessage


def single_line(subject: str) -> str:
    """Remove line breaks; transports require a one-line subject."""
    return subject.replace("\r", "").replace("\n", "")


class MessageBuilder:
    """Builds ``OutboundMessage`` values from an organization profile.

    Attributes:
        config: Sender and support identities applied to every message.
    """

    def __init__(self, config: MailerConfig | None = None):
        self.config = config or MailerConfig()

    def build(
        self,
        organization: Any,
        subject: str,
        body: str,
        send_to: Address | tuple[str, str] | None = None,
    ) -> OutboundMessage:
        """Assemble a message for ``organization``.

        Args:
            organization: Any object exposing ``name`` and ``email``.
            subject: Subject line; line breaks are stripped.
            body: Plain-text body, used verbatim.
            send_to: Recipient override. Defaults to the organization.

        Returns:
            A new OutboundMessage.

        Raises:
            ValueError: If subject or body is missing.
        """
        if not subject:
            raise ValueError("subject is required")
        if not body:
            raise ValueError("body is required")

        recipient = send_to if send_to is not None else (organization.name, organization.email)
        return OutboundMessage(
            sender=self.config.default_sender,
            to=[recipient],
            cc=[self.config.support_cc],
            subject=single_line(subject),
            text_body=body,
        )


def build_common_message(
    organization: Any,
    subject: str,
    body: str,
    send_to: Address | tuple[str, str] | None = None,
    *,
    config: MailerConfig | None = None,
) -> OutboundMessage:
    """Module-level shortcut for ``MessageBuilder(config).build(...)``."""
    return MessageBuilder(config).build(organization, subject, body, send_to)


__all__ = ["MessageBuilder", "build_common_message", "single_line"]
