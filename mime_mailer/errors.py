# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Exceptions raised while composing and delivering messages.

File access errors are not wrapped: reading an attachment raises the
builtin :class:`OSError` subclasses unchanged.
"""

from __future__ import annotations

from typing import Optional


class MailError(Exception):
    """Base class for every error raised by the package."""

    default_message = "Mail error"
    code = "mail_error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class AddressFormatError(MailError, ValueError):
    """Raised when an address cannot be parsed as a single RFC 5322 mailbox."""

    default_message = "Invalid address"
    code = "invalid_address"


class ProtocolError(MailError):
    """Raised when the authentication exchange takes an unexpected turn."""

    default_message = "Unexpected authentication exchange"
    code = "protocol_error"


class TransportError(MailError):
    """Raised when the SMTP transport fails to deliver a message."""

    default_message = "SMTP transport failure"
    code = "transport_error"

    def __init__(self, message: Optional[str] = None, smtp_code: Optional[int] = None):
        super().__init__(message)
        self.smtp_code = smtp_code


class ConfigurationError(MailError):
    """Raised when configuration files or values cannot be used."""

    default_message = "Invalid configuration"
    code = "invalid_configuration"
