# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Compose MIME email messages in memory and send them over SMTP.

Example:
    >>> from mime_mailer import new_message, send_unencrypted
    >>> msg = new_message("Hi", "hello")
    >>> msg.from_addr = "Jane <jane@example.com>"
    >>> msg.to = ["bob@example.com"]
    >>> msg.attach("report.pdf")  # doctest: +SKIP
    >>> send_unencrypted("smtp.example.com:25", "jane", "secret", msg)  # doctest: +SKIP
"""

from .address import parse_address
from .attachments import Attachment, AttachmentReaderBase, FileAttachmentReader
from .auth import Authenticator, ServerInfo, UnencryptedAuth, new_unencrypted_authenticator
from .errors import (
    AddressFormatError,
    ConfigurationError,
    MailError,
    ProtocolError,
    TransportError,
)
from .message import Message, new_html_message, new_message
from .mime import BOUNDARY, serialize
from .sender import send, send_async, send_unencrypted, send_unencrypted_async
from .transport import SMTPTransport

__version__ = "0.1.0"

__all__ = [
    "AddressFormatError",
    "Attachment",
    "AttachmentReaderBase",
    "Authenticator",
    "BOUNDARY",
    "ConfigurationError",
    "FileAttachmentReader",
    "MailError",
    "Message",
    "ProtocolError",
    "SMTPTransport",
    "ServerInfo",
    "TransportError",
    "UnencryptedAuth",
    "new_html_message",
    "new_message",
    "new_unencrypted_authenticator",
    "parse_address",
    "send",
    "send_async",
    "send_unencrypted",
    "send_unencrypted_async",
    "serialize",
]
