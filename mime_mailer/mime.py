# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Render a :class:`~mime_mailer.message.Message` into raw email bytes.

The output uses LF line endings and, when attachments are present, a
``multipart/mixed`` body delimited by the fixed :data:`BOUNDARY` token.
The SMTP transport takes care of converting line endings on the wire.
"""

from __future__ import annotations

import base64
import io
from typing import TYPE_CHECKING

from .logger import get_logger

if TYPE_CHECKING:
    from .attachments import Attachment
    from .message import Message

BOUNDARY = "f46d043c813270fc6b04c2d223da"

logger = get_logger()


def _warn_on_boundary_collision(label: str, content: bytes) -> None:
    # Content is written untouched; a collision would split the part early.
    if BOUNDARY.encode("ascii") in content:
        logger.warning("%s contains the MIME boundary %s", label, BOUNDARY)


def _write_attachment(buf: io.BytesIO, attachment: "Attachment") -> None:
    buf.write(f"\n\n--{BOUNDARY}\n".encode("ascii"))
    filename = attachment.filename.encode("utf-8")
    if attachment.inline:
        _warn_on_boundary_collision(f"Inline attachment {attachment.filename}", attachment.data)
        buf.write(b"Content-Type: message/rfc822\n")
        buf.write(b'Content-Disposition: inline; filename="' + filename + b'"\n\n')
        buf.write(attachment.data)
    else:
        buf.write(b"Content-Type: application/octet-stream\n")
        buf.write(b"Content-Transfer-Encoding: base64\n")
        buf.write(b'Content-Disposition: attachment; filename="' + filename + b'"\n\n')
        buf.write(base64.b64encode(attachment.data))
    buf.write(f"\n--{BOUNDARY}".encode("ascii"))


def serialize(message: "Message") -> bytes:
    """Return the message as bytes ready to hand to the SMTP transport.

    Headers are written in a fixed order: From, To, Cc (only when there are
    Cc recipients), Subject and MIME-Version. Bcc recipients are never
    written. Attachments follow the body in the order they were added.
    """
    buf = io.BytesIO()

    def line(text: str) -> None:
        buf.write(text.encode("utf-8"))
        buf.write(b"\n")

    line(f"From: {message.from_addr}")
    line(f"To: {','.join(message.to)}")
    if message.cc:
        line(f"Cc: {','.join(message.cc)}")
    line(f"Subject: {message.subject}")
    line("MIME-Version: 1.0")

    attachments = list(message.attachments.values())
    if attachments:
        line(f"Content-Type: multipart/mixed; boundary={BOUNDARY}\n")
        line(f"--{BOUNDARY}")

    body = message.body.encode("utf-8")
    if attachments:
        _warn_on_boundary_collision("Message body", body)
    line(f"Content-Type: {message.body_content_type}; charset=utf-8")
    buf.write(body)

    if attachments:
        for attachment in attachments:
            _write_attachment(buf, attachment)
        buf.write(b"--")

    data = buf.getvalue()
    logger.debug("Serialized message %r into %d bytes", message.subject, len(data))
    return data
