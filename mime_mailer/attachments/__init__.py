# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Attachment records and the readers that load their payload."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .base import AttachmentReaderBase, PathLike
from .file_reader import FileAttachmentReader


@dataclass(frozen=True)
class Attachment:
    """One payload bundled into a message.

    Attributes:
        filename: Display name written in the MIME headers, never a path.
        data: Raw content of the attachment.
        inline: ``True`` for an embedded ``message/rfc822`` part, ``False``
            for a base64 ``application/octet-stream`` attachment.
    """

    filename: str
    data: bytes
    inline: bool = False


def base_filename(path: PathLike) -> str:
    """Return the last path segment, stripping directory components."""
    return os.path.basename(os.fspath(path))


__all__ = [
    "Attachment",
    "AttachmentReaderBase",
    "FileAttachmentReader",
    "PathLike",
    "base_filename",
]
