# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Configuration loader for the mail dispatch service.

Settings are read from an INI file with ``MDS_*`` environment variables
as fallbacks. Missing values fall back to the defaults below.

Example:
    Configuration file format (config.ini)::

        [mailer]
        sender_name = Glific Team
        sender_email = glific-team@coloredcow.com
        support_name = Glific support
        support_email = mohit@coloredcow.in

        [smtp]
        host = smtp.example.com
        port = 587
        user = mailer@example.com
        password = secret
        use_tls = true
        timeout = 30

        [storage]
        db_path = /data/mail_dispatch.db

        [logging]
        level = INFO

    Loading it::

        settings = load_settings("/etc/mail-dispatch/config.ini")
        settings.mailer.default_sender  # Address(name="Glific Team", ...)

Environment variables:
    MDS_CONFIG, MDS_SENDER_NAME, MDS_SENDER_EMAIL, MDS_SUPPORT_NAME,
    MDS_SUPPORT_EMAIL, MDS_SMTP_HOST, MDS_SMTP_PORT, MDS_SMTP_USER,
    MDS_SMTP_PASSWORD, MDS_SMTP_USE_TLS, MDS_SMTP_TIMEOUT, MDS_DB_PATH,
    MDS_LOG_LEVEL
"""

from __future__ import annotations

import configparser
import os
from dataclasses import dataclass, field
from pathlib import Path

from .logger import get_logger
from .models import Address

DEFAULT_SENDER = Address(name="Glific Team", email="glific-team@coloredcow.com")
DEFAULT_SUPPORT_CC = Address(name="Glific support", email="mohit@coloredcow.in")
DEFAULT_DB_PATH = "/data/mail_dispatch.db"

logger = get_logger("ConfigLoader")


@dataclass
class MailerConfig:
    """Identities applied to every outbound notification.

    Attributes:
        default_sender: From address of every message.
        support_cc: Support team address copied on every message.
    """

    default_sender: Address = DEFAULT_SENDER
    support_cc: Address = DEFAULT_SUPPORT_CC


@dataclass
class SmtpConfig:
    """SMTP server settings for ``SmtpTransport``.

    Attributes:
        host: Server hostname. ``None`` means no SMTP server is configured.
        port: Server port (465 implies implicit TLS).
        user: Username for authentication.
        password: Password for authentication.
        use_tls: TLS on/off. ``None`` derives it from the port.
        timeout: Seconds allowed for connecting and for sending.
    """

    host: str | None = None
    port: int = 587
    user: str | None = None
    password: str | None = None
    use_tls: bool | None = None
    timeout: float = 30.0

    @property
    def tls_enabled(self) -> bool:
        return self.port == 465 if self.use_tls is None else self.use_tls


@dataclass
class Settings:
    """Complete service settings."""

    mailer: MailerConfig = field(default_factory=MailerConfig)
    smtp: SmtpConfig = field(default_factory=SmtpConfig)
    db_path: str = DEFAULT_DB_PATH
    log_level: str = "INFO"


def _parse_bool(value: str | None, default: bool | None = None) -> bool | None:
    if value is None:
        return default
    normalized = str(value).strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    logger.warning(f"Invalid boolean value {value!r}, using default {default}")
    return default


def load_settings(config_path: str | None = None) -> Settings:
    """Load settings from an INI file with environment fallbacks.

    Args:
        config_path: Path to the INI file. Defaults to ``$MDS_CONFIG`` or
            ``config.ini``. A missing file is not an error: environment
            variables and defaults apply.

    Returns:
        Settings populated from file, environment and defaults.

    Raises:
        ValueError: If a numeric setting cannot be parsed.
    """
    path = Path(config_path or os.getenv("MDS_CONFIG", "config.ini"))
    parser = configparser.ConfigParser()
    if path.exists():
        parser.read(path)
    elif config_path:
        raise FileNotFoundError(f"Config file not found: {path}")

    def get(section: str, option: str, env: str, default: str | None = None) -> str | None:
        if parser.has_option(section, option):
            value = parser.get(section, option).strip()
            return value or default
        return os.getenv(env, default)

    def get_number(section: str, option: str, env: str, default: float, cast=int):
        value = get(section, option, env)
        if value is None:
            return default
        try:
            return cast(value)
        except ValueError as exc:
            raise ValueError(f"Invalid value for [{section}] {option}: {value!r}") from exc

    mailer = MailerConfig(
        default_sender=Address(
            name=get("mailer", "sender_name", "MDS_SENDER_NAME", DEFAULT_SENDER.name),
            email=get("mailer", "sender_email", "MDS_SENDER_EMAIL", DEFAULT_SENDER.email),
        ),
        support_cc=Address(
            name=get("mailer", "support_name", "MDS_SUPPORT_NAME", DEFAULT_SUPPORT_CC.name),
            email=get("mailer", "support_email", "MDS_SUPPORT_EMAIL", DEFAULT_SUPPORT_CC.email),
        ),
    )
    smtp = SmtpConfig(
        host=get("smtp", "host", "MDS_SMTP_HOST"),
        port=get_number("smtp", "port", "MDS_SMTP_PORT", 587),
        user=get("smtp", "user", "MDS_SMTP_USER"),
        password=get("smtp", "password", "MDS_SMTP_PASSWORD"),
        use_tls=_parse_bool(get("smtp", "use_tls", "MDS_SMTP_USE_TLS")),
        timeout=get_number("smtp", "timeout", "MDS_SMTP_TIMEOUT", 30.0, cast=float),
    )
    settings = Settings(
        mailer=mailer,
        smtp=smtp,
        db_path=get("storage", "db_path", "MDS_DB_PATH", DEFAULT_DB_PATH),
        log_level=(get("logging", "level", "MDS_LOG_LEVEL", "INFO") or "INFO").upper(),
    )
    logger.debug(f"Loaded settings from {path if path.exists() else 'environment'}")
    return settings


__all__ = [
    "DEFAULT_SENDER",
    "DEFAULT_SUPPORT_CC",
    "MailerConfig",
    "Settings",
    "SmtpConfig",
    "load_settings",
]
