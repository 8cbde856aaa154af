# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Table managers for the mail dispatch database."""

from .mail_logs import MailLogTable

__all__ = ["MailLogTable"]
