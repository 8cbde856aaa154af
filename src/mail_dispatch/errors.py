# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Exception hierarchy for mail dispatch.

    MailDispatchError
    ├── TransportError            email did not leave the system
    ├── AttributionMissing        category / organization id not supplied
    ├── EmptyRecipients           message has no "to" recipient
    └── AuditPersistenceFailure   audit record could not be written (fatal)
"""

from __future__ import annotations


class MailDispatchError(Exception):
    """Base class for all mail dispatch errors."""


class TransportError(MailDispatchError):
    """The transport failed to hand off the email.

    Attributes:
        reason: Human-readable failure cause.
        smtp_code: SMTP reply code when the failure came from a server reply.
        refused: Mapping of refused recipient address to server reply.
    """

    def __init__(
        self,
        reason: str,
        *,
        smtp_code: int | None = None,
        refused: dict[str, str] | None = None,
    ):
        super().__init__(reason)
        self.reason = reason
        self.smtp_code = smtp_code
        self.refused = dict(refused or {})

    def __str__(self) -> str:
        if self.smtp_code:
            return f"{self.reason} (SMTP {self.smtp_code})"
        return self.reason

    def __repr__(self) -> str:
        return f"TransportError(reason={self.reason!r}, smtp_code={self.smtp_code!r})"


class AttributionMissing(MailDispatchError, ValueError):
    """Raised when a send call lacks a category or organization id."""

    def __init__(self, message: str = "category and organization_id are required"):
        super().__init__(message)
        self.code = "attribution_missing"


class EmptyRecipients(MailDispatchError, ValueError):
    """Raised when a message has nobody to deliver to."""

    def __init__(self, message: str = "message has no recipients"):
        super().__init__(message)
        self.code = "empty_recipients"


class AuditPersistenceFailure(MailDispatchError):
    """The audit record for a completed dispatch attempt could not be stored.

    This is not recoverable: the current request is aborted instead of
    reporting an outcome with no matching audit record. ``transport_error``
    holds the original failure when the attempt itself had failed.
    """

    def __init__(self, message: str, *, transport_error: TransportError | None = None):
        super().__init__(message)
        self.transport_error = transport_error


__all__ = [
    "AttributionMissing",
    "AuditPersistenceFailure",
    "EmptyRecipients",
    "MailDispatchError",
    "TransportError",
]
