# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Read attachments from the local file system."""

from __future__ import annotations

from pathlib import Path

from .base import AttachmentReaderBase, PathLike


class FileAttachmentReader(AttachmentReaderBase):
    def read(self, path: PathLike) -> bytes:
        """Read the whole file in binary mode; errors propagate unchanged."""
        return Path(path).read_bytes()
