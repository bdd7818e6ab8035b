# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SMTP authentication mechanisms.

An :class:`Authenticator` drives one SASL exchange: :meth:`~Authenticator.start`
returns the mechanism name and the initial response, then the transport
feeds every server challenge to :meth:`~Authenticator.next` until the
server accepts or rejects the credentials.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .errors import ProtocolError

STATE_START = "start"
STATE_DONE = "done"


@dataclass(frozen=True)
class ServerInfo:
    """What the transport knows about the server when authentication starts."""

    name: str
    tls: bool = False
    auth: Tuple[str, ...] = field(default_factory=tuple)


class Authenticator:
    """Interface implemented by authentication mechanisms."""

    def start(self, server: ServerInfo) -> Tuple[str, bytes]:
        """Return the mechanism name and the initial response."""
        raise NotImplementedError

    def next(self, from_server: bytes, more: bool) -> Optional[bytes]:
        """Answer a server challenge.

        ``more`` is ``True`` while the server expects another response.
        """
        raise NotImplementedError


class UnencryptedAuth(Authenticator):
    """PLAIN mechanism (RFC 4616) that does not require TLS.

    Unlike a strict PLAIN client it never checks whether the channel is
    encrypted, so credentials may travel in clear text.
    """

    mechanism = "PLAIN"

    def __init__(self, username: str, password: str):
        self.username = username
        self.password = password
        self.state = STATE_START

    def __repr__(self) -> str:
        return f"<UnencryptedAuth username={self.username!r} state={self.state}>"

    def start(self, server: ServerInfo) -> Tuple[str, bytes]:
        response = b"\x00" + self.username.encode("utf-8") + b"\x00" + self.password.encode("utf-8")
        self.state = STATE_DONE
        return self.mechanism, response

    def next(self, from_server: bytes, more: bool) -> Optional[bytes]:
        if more:
            # Everything was sent in the initial response.
            raise ProtocolError("unexpected server challenge")
        return None


def new_unencrypted_authenticator(username: str, password: str) -> UnencryptedAuth:
    """Return a PLAIN authenticator that works over unencrypted connections."""
    return UnencryptedAuth(username, password)
