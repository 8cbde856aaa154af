# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for settings loading."""

import pytest

from mail_dispatch.config import DEFAULT_SENDER, SmtpConfig, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in (
        "MDS_CONFIG",
        "MDS_SENDER_NAME",
        "MDS_SENDER_EMAIL",
        "MDS_SUPPORT_NAME",
        "MDS_SUPPORT_EMAIL",
        "MDS_SMTP_HOST",
        "MDS_SMTP_PORT",
        "MDS_SMTP_USE_TLS",
        "MDS_DB_PATH",
        "MDS_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    settings = load_settings()
    assert settings.mailer.default_sender == DEFAULT_SENDER
    assert settings.smtp.host is None
    assert settings.log_level == "INFO"


def test_explicit_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(str(tmp_path / "missing.ini"))


def test_reads_ini_file(tmp_path):
    config = tmp_path / "config.ini"
    config.write_text(
        "[mailer]\n"
        "sender_name = Ops\n"
        "sender_email = ops@platform.test\n"
        "support_email = help@platform.test\n"
        "[smtp]\n"
        "host = smtp.platform.test\n"
        "port = 465\n"
        "timeout = 12.5\n"
        "[storage]\n"
        "db_path = /tmp/audit.db\n"
        "[logging]\n"
        "level = debug\n"
    )
    settings = load_settings(str(config))
    assert settings.mailer.default_sender.as_tuple() == ("Ops", "ops@platform.test")
    assert settings.mailer.support_cc.email == "help@platform.test"
    assert settings.smtp.host == "smtp.platform.test"
    assert settings.smtp.port == 465
    assert settings.smtp.timeout == 12.5
    assert settings.smtp.tls_enabled is True
    assert settings.db_path == "/tmp/audit.db"
    assert settings.log_level == "DEBUG"


def test_environment_fallback(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MDS_SMTP_HOST", "env.platform.test")
    monkeypatch.setenv("MDS_SMTP_USE_TLS", "no")
    monkeypatch.setenv("MDS_SUPPORT_EMAIL", "env-support@platform.test")
    settings = load_settings()
    assert settings.smtp.host == "env.platform.test"
    assert settings.smtp.use_tls is False
    assert settings.mailer.support_cc.email == "env-support@platform.test"


def test_invalid_port(tmp_path):
    config = tmp_path / "config.ini"
    config.write_text("[smtp]\nport = abc\n")
    with pytest.raises(ValueError):
        load_settings(str(config))


@pytest.mark.parametrize(
    "port, use_tls, expected",
    [(465, None, True), (587, None, False), (587, True, True), (465, False, False)],
)
def test_tls_enabled(port, use_tls, expected):
    assert SmtpConfig(host="h", port=port, use_tls=use_tls).tls_enabled is expected
