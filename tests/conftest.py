# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Shared fixtures for mail-dispatch tests."""

import pytest
import pytest_asyncio

from mail_dispatch.config import MailerConfig
from mail_dispatch.mailer import Mailer
from mail_dispatch.models import Address, Organization
from mail_dispatch.prometheus import MailMetrics
from mail_dispatch.sql import SqliteAdapter
from mail_dispatch.tables import MailLogTable
from mail_dispatch.telemetry import TransportEvents
from mail_dispatch.transport import LocalTransport


@pytest.fixture
def organization():
    return Organization(id=7, name="ACME Foundation", email="ops@acme.test")


@pytest.fixture
def mailer_config():
    return MailerConfig(
        default_sender=Address(name="Platform Team", email="team@platform.test"),
        support_cc=Address(name="Platform support", email="support@platform.test"),
    )


@pytest_asyncio.fixture
async def logs(tmp_path):
    table = MailLogTable(SqliteAdapter(str(tmp_path / "mail.db")))
    await table.create_schema()
    return table


@pytest.fixture
def events():
    return TransportEvents()


@pytest.fixture
def transport(events):
    return LocalTransport(events)


@pytest.fixture
def mailer(transport, logs, mailer_config):
    return Mailer(transport, logs, config=mailer_config, metrics=MailMetrics())
