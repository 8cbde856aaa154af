# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Logging utilities for the mail dispatch service.

This module provides a centralized logging helper. The actual logging
setup (level, handlers, format) is configured via ``logging.basicConfig()``
in the command-line entry point to avoid duplicate handlers.

Example:
    Typical usage in a module::

        from mail_dispatch.logger import get_logger

        logger = get_logger("Mailer")
        logger.info("Mail sent")
"""

import logging


def get_logger(name: str = "MailDispatch") -> logging.Logger:
    """Retrieve a named logger instance.

    No handler or formatter is attached here; that responsibility lies
    with the application entry point.

    Args:
        name: The logger name. Defaults to "MailDispatch".

    Returns:
        A ``logging.Logger`` instance bound to the given name.
    """
    return logging.getLogger(name)
