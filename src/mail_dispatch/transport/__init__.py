# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Transports that hand outbound messages off for delivery."""

from .base import Transport
from .local import LocalTransport
from .smtp import SmtpTransport

__all__ = ["LocalTransport", "SmtpTransport", "Transport"]
