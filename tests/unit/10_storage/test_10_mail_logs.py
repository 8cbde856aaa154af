# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for the mail log table."""

import pytest

from mail_dispatch.models import AuditRecord, MailStatus


def _record(category="billing", organization_id=1, status=MailStatus.SENT, error=None):
    return AuditRecord(
        category=category,
        organization_id=organization_id,
        status=status,
        content={"data": {"subject": "Hello"}},
        error=error,
    )


@pytest.mark.asyncio
async def test_create_assigns_id_and_persists(logs):
    stored = await logs.create(_record())
    assert stored.id is not None

    fetched = await logs.get(stored.id)
    assert fetched.category == "billing"
    assert fetched.status is MailStatus.SENT
    assert fetched.content == {"data": {"subject": "Hello"}}
    assert fetched.error is None
    assert fetched.inserted_at == stored.inserted_at


@pytest.mark.asyncio
async def test_get_missing(logs):
    assert await logs.get(999) is None


@pytest.mark.asyncio
async def test_create_schema_is_idempotent(logs):
    await logs.create(_record())
    await logs.create_schema()
    assert await logs.count() == 1


@pytest.mark.asyncio
async def test_filters(logs):
    await logs.create(_record("billing", 1))
    await logs.create(_record("alert", 1, MailStatus.ERROR, "error while sending the mail. boom"))
    await logs.create(_record("billing", 2))

    assert await logs.count() == 3
    assert await logs.count(organization_id=1) == 2
    assert await logs.count(category="billing") == 2
    assert await logs.count(status="error") == 1
    assert await logs.count(category="billing", organization_id=2) == 1

    errors = await logs.list_all(status=MailStatus.ERROR)
    assert [r.category for r in errors] == ["alert"]
    assert errors[0].error == "error while sending the mail. boom"


@pytest.mark.asyncio
async def test_list_all_is_ordered_and_limited(logs):
    for tenant in range(5):
        await logs.create(_record(organization_id=tenant))
    rows = await logs.list_all(limit=3)
    assert [r.organization_id for r in rows] == [0, 1, 2]
