# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for the canonical message builder."""

import types

import pytest

from mail_dispatch.builder import MessageBuilder, build_common_message, single_line
from mail_dispatch.config import DEFAULT_SENDER, DEFAULT_SUPPORT_CC
from mail_dispatch.models import Address


def test_subject_line_breaks_are_removed(organization, mailer_config):
    msg = MessageBuilder(mailer_config).build(organization, "Hi\nthere", "body")
    assert msg.subject == "Hithere"


def test_single_line_strips_crlf():
    assert single_line("a\r\nb\nc") == "abc"


def test_default_recipient_is_organization(organization, mailer_config):
    msg = MessageBuilder(mailer_config).build(organization, "Subject", "body")
    assert [a.as_tuple() for a in msg.to] == [("ACME Foundation", "ops@acme.test")]


def test_recipient_override(organization, mailer_config):
    msg = MessageBuilder(mailer_config).build(
        organization, "Subject", "body", ("Finance", "finance@acme.test")
    )
    assert [a.as_tuple() for a in msg.to] == [("Finance", "finance@acme.test")]


def test_recipient_override_accepts_address(organization, mailer_config):
    override = Address(name="Finance", email="finance@acme.test")
    msg = MessageBuilder(mailer_config).build(organization, "Subject", "body", override)
    assert msg.to == [override]


def test_sender_and_cc_are_fixed(organization, mailer_config):
    msg = MessageBuilder(mailer_config).build(
        organization, "Subject", "body", ("Other", "other@acme.test")
    )
    assert msg.sender == mailer_config.default_sender
    assert msg.cc == [mailer_config.support_cc]


def test_body_is_verbatim(organization, mailer_config):
    body = "Line one\nLine two\n"
    msg = MessageBuilder(mailer_config).build(organization, "Subject", body)
    assert msg.text_body == body


def test_accepts_any_object_with_name_and_email(mailer_config):
    org = types.SimpleNamespace(name="Duck Org", email="duck@org.test")
    msg = MessageBuilder(mailer_config).build(org, "Subject", "body")
    assert msg.to[0].email == "duck@org.test"


@pytest.mark.parametrize("subject, body", [("", "body"), ("Subject", "")])
def test_missing_subject_or_body(organization, subject, body):
    with pytest.raises(ValueError):
        MessageBuilder().build(organization, subject, body)


def test_module_shortcut_uses_default_identities(organization):
    msg = build_common_message(organization, "Subject", "body")
    assert msg.sender == DEFAULT_SENDER
    assert msg.cc == [DEFAULT_SUPPORT_CC]
