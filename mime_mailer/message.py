# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Outbound message model.

A :class:`Message` holds the envelope fields, the body and the attachments
of one email under construction. Addresses are stored as plain strings and
only validated when the message is sent.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .attachments import (
    Attachment,
    AttachmentReaderBase,
    FileAttachmentReader,
    PathLike,
    base_filename,
)
from .logger import get_logger

logger = get_logger()

TEXT_PLAIN = "text/plain"
TEXT_HTML = "text/html"


class Message:
    """One outbound email.

    ``from_addr``, ``to``, ``cc``, ``bcc`` and ``subject`` are plain
    attributes meant to be assigned by the caller. The body content type is
    fixed by the factory that created the message.
    """

    def __init__(
        self,
        subject: str = "",
        body: str = "",
        body_content_type: str = TEXT_PLAIN,
        *,
        reader: Optional[AttachmentReaderBase] = None,
    ):
        self.from_addr: str = ""
        self.to: List[str] = []
        self.cc: List[str] = []
        self.bcc: List[str] = []
        self.subject = subject
        self.body = body
        self._body_content_type = body_content_type
        self.attachments: Dict[str, Attachment] = {}
        self.reader = reader or FileAttachmentReader()

    @property
    def body_content_type(self) -> str:
        return self._body_content_type

    def __repr__(self) -> str:
        return (
            f"<Message subject={self.subject!r} type={self._body_content_type} "
            f"recipients={len(self.recipient_list())} attachments={len(self.attachments)}>"
        )

    # ------------------------------------------------------------ attachments
    def _attach(self, path: PathLike, inline: bool) -> Attachment:
        data = self.reader.read(path)
        return self.attach_bytes(base_filename(path), data, inline=inline)

    def attach(self, path: PathLike) -> Attachment:
        """Read ``path`` and add it as a base64 attachment.

        An attachment with the same filename is replaced in place.

        Raises:
            OSError: If the file cannot be read.
        """
        return self._attach(path, False)

    def inline(self, path: PathLike) -> Attachment:
        """Read ``path`` and embed it as an inline ``message/rfc822`` part."""
        return self._attach(path, True)

    def attach_bytes(self, filename: str, data: bytes, *, inline: bool = False) -> Attachment:
        """Add in-memory content under the base name of ``filename``."""
        name = base_filename(filename)
        attachment = Attachment(filename=name, data=bytes(data), inline=inline)
        if name in self.attachments:
            logger.debug("Replacing attachment %s", name)
        self.attachments[name] = attachment
        logger.debug(
            "Attached %s (%d bytes, %s)", name, len(attachment.data), "inline" if inline else "base64"
        )
        return attachment

    # ------------------------------------------------------------- envelope
    def recipient_list(self) -> List[str]:
        """Return the SMTP envelope recipients: To, then Cc, then Bcc.

        Order and duplicates are preserved. Bcc addresses are part of the
        envelope even though they never appear in the headers.
        """
        return [*self.to, *self.cc, *self.bcc]

    def bytes(self) -> bytes:
        """Serialize the message, see :func:`mime_mailer.mime.serialize`."""
        from .mime import serialize

        return serialize(self)


def new_message(subject: str, body: str, *, reader: Optional[AttachmentReaderBase] = None) -> Message:
    """Return a ``text/plain`` message with no recipients and no attachments."""
    return Message(subject, body, TEXT_PLAIN, reader=reader)


def new_html_message(subject: str, body: str, *, reader: Optional[AttachmentReaderBase] = None) -> Message:
    """Return a ``text/html`` message with no recipients and no attachments."""
    return Message(subject, body, TEXT_HTML, reader=reader)
