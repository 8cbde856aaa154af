# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Pydantic models for multi-tenant mail dispatch.

Models:
    - Address: A display name and email address pair
    - Organization: Tenant profile supplying the default recipient
    - OutboundMessage: Canonical message handed to a transport
    - Attribution: Category and tenant required on every send
    - TransportReceipt: Successful hand-off details
    - AuditRecord: Durable record of one dispatch attempt
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class MailStatus(str, Enum):
    """Outcome stored on an audit record.

    Attributes:
        SENT: The transport accepted the message.
        ERROR: The transport failed to hand off the message.
    """

    SENT = "sent"
    ERROR = "error"


class Address(BaseModel):
    """Email address with an optional display name.

    Accepts a ``(name, email)`` tuple, a bare email string or a mapping
    wherever an address is expected.
    """

    model_config = ConfigDict(frozen=True)

    name: Annotated[str, Field(default="", description="Display name")]
    email: Annotated[str, Field(min_length=1, description="Email address")]

    @model_validator(mode="before")
    @classmethod
    def coerce(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"name": "", "email": value}
        if isinstance(value, (tuple, list)):
            if len(value) != 2:
                raise ValueError("address tuple must be (name, email)")
            name, email = value
            return {"name": name or "", "email": email}
        return value

    def as_tuple(self) -> tuple[str, str]:
        return self.name, self.email


class Organization(BaseModel):
    """Tenant organization profile."""

    model_config = ConfigDict(extra="ignore")

    id: Annotated[int | None, Field(default=None, ge=0)]
    name: str
    email: str


class OutboundMessage(BaseModel):
    """Canonical outbound email.

    Built fresh for every call and never persisted as such; ``snapshot()``
    gives the representation stored in the audit trail.
    """

    model_config = ConfigDict(frozen=True)

    sender: Address
    to: Annotated[list[Address], Field(default_factory=list)]
    cc: Annotated[list[Address], Field(default_factory=list)]
    subject: str
    text_body: str

    @field_validator("to", "cc", mode="before")
    @classmethod
    def single_address_to_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (str, Mapping, Address)):
            return [value]
        if isinstance(value, tuple) and len(value) == 2 and all(
            isinstance(part, str) for part in value
        ):
            return [value]
        return value

    @property
    def recipients(self) -> list[str]:
        """Envelope recipient addresses (to + cc)."""
        return [addr.email for addr in (*self.to, *self.cc)]

    def snapshot(self) -> dict[str, Any]:
        return {"data": self.model_dump(mode="json")}


class Attribution(BaseModel):
    """Call-site attribution: why the email was sent and for which tenant."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    category: Annotated[str, Field(min_length=1, description="Business reason, e.g. billing")]
    organization_id: Annotated[int, Field(ge=0, description="Tenant identifier")]

    @field_validator("category")
    @classmethod
    def category_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("category must not be blank")
        return v


class TransportReceipt(BaseModel):
    """What the transport reports back after accepting a message."""

    model_config = ConfigDict(frozen=True)

    message_id: str | None = None
    response: str = ""
    accepted: Annotated[list[str], Field(default_factory=list)]
    refused: Annotated[dict[str, str], Field(default_factory=dict)]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AuditRecord(BaseModel):
    """Durable record of one dispatch attempt.

    ``error`` is set exactly when ``status`` is ``error``. Records are
    written once and never updated, so ``updated_at`` always equals
    ``inserted_at``.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    id: int | None = None
    category: str
    organization_id: Annotated[int, Field(ge=0)]
    status: MailStatus
    content: Annotated[dict[str, Any], Field(default_factory=dict)]
    error: str | None = None
    inserted_at: Annotated[datetime, Field(default_factory=utc_now)]

    @model_validator(mode="after")
    def error_matches_status(self) -> AuditRecord:
        if self.status is MailStatus.ERROR and not self.error:
            raise ValueError("error detail is required when status is 'error'")
        if self.status is MailStatus.SENT and self.error is not None:
            raise ValueError("error detail is only allowed when status is 'error'")
        return self

    @property
    def updated_at(self) -> datetime:
        return self.inserted_at

    @classmethod
    def for_attempt(
        cls,
        message: OutboundMessage,
        attribution: Attribution,
        error: Exception | None = None,
    ) -> AuditRecord:
        """Build the record describing one attempt to send ``message``."""
        if error is None:
            return cls(
                category=attribution.category,
                organization_id=attribution.organization_id,
                status=MailStatus.SENT,
                content=message.snapshot(),
            )
        return cls(
            category=attribution.category,
            organization_id=attribution.organization_id,
            status=MailStatus.ERROR,
            content=message.snapshot(),
            error=f"error while sending the mail. {error}",
        )


__all__ = [
    "Address",
    "Attribution",
    "AuditRecord",
    "MailStatus",
    "Organization",
    "OutboundMessage",
    "TransportReceipt",
]
