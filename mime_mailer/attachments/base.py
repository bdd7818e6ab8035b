# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Base protocol for attachment readers."""

from __future__ import annotations

import os
from typing import Union

PathLike = Union[str, "os.PathLike[str]"]


class AttachmentReaderBase:
    """Interface implemented by concrete attachment readers."""

    def read(self, path: PathLike) -> bytes:
        """Return the payload stored at ``path``.

        Raises:
            OSError: If the payload cannot be read.
        """
        raise NotImplementedError
