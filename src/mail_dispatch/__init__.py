"""Multi-tenant transactional mail dispatch with a durable audit trail.

Every notification goes through one send-and-capture contract: the message
is handed to a transport and exactly one mail log record describing the
attempt is stored, whatever the outcome.

- Canonical notification building (platform sender, support cc)
- SMTP delivery via aiosmtplib, or an in-memory local transport
- Append-only SQLite mail log via aiosqlite
- Transport exception telemetry
- Prometheus metrics

Example:
    Sending an onboarding notice::

        from mail_dispatch import MailService, Organization, load_settings

        async with MailService(load_settings()) as service:
            org = Organization(id=7, name="ACME", email="ops@acme.test")
            message = service.build_common_message(org, "Welcome", "Hello ACME")
            await service.send(message, {"category": "onboarding", "organization_id": 7})

Authors:
    Softwell S.r.l.
    Giovanni Porcari
"""

from .builder import MessageBuilder, build_common_message
from .config import MailerConfig, Settings, SmtpConfig, load_settings
from .errors import (
    AttributionMissing,
    AuditPersistenceFailure,
    EmptyRecipients,
    MailDispatchError,
    TransportError,
)
from .mailer import Mailer
from .models import (
    Address,
    Attribution,
    AuditRecord,
    MailStatus,
    Organization,
    OutboundMessage,
    TransportReceipt,
)
from .service import MailService

__all__ = [
    "Address",
    "Attribution",
    "AttributionMissing",
    "AuditPersistenceFailure",
    "AuditRecord",
    "EmptyRecipients",
    "MailDispatchError",
    "MailService",
    "MailStatus",
    "Mailer",
    "MailerConfig",
    "MessageBuilder",
    "Organization",
    "OutboundMessage",
    "Settings",
    "SmtpConfig",
    "TransportError",
    "TransportReceipt",
    "build_common_message",
    "load_settings",
]
