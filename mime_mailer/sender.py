# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Entry points that validate, serialize and hand a message to the transport.

The synchronous helpers run the transport with :func:`asyncio.run` and so
must not be called from inside a running event loop; use the ``*_async``
variants there.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from .address import parse_address
from .auth import Authenticator, new_unencrypted_authenticator
from .logger import get_logger
from .message import Message
from .mime import serialize
from .transport import SMTPTransport

logger = get_logger()


async def send_async(
    server_address: str,
    authenticator: Optional[Authenticator],
    message: Message,
    *,
    transport: Optional[SMTPTransport] = None,
) -> None:
    """Deliver ``message`` through the SMTP server at ``server_address``.

    The From address is parsed before any connection is opened, so a
    malformed sender fails without network I/O.

    Raises:
        AddressFormatError: If ``message.from_addr`` is not a single mailbox.
        TransportError: If the transport fails to deliver the message.
        ProtocolError: If the authentication exchange goes wrong.
    """
    sender = parse_address(message.from_addr)
    recipients = message.recipient_list()
    data = serialize(message)
    transport = transport or SMTPTransport()
    await transport.send(server_address, authenticator, sender.addr_spec, recipients, data)
    logger.info(
        "Sent message %r from %s to %d recipients via %s",
        message.subject,
        sender.addr_spec,
        len(recipients),
        server_address,
    )


async def send_unencrypted_async(
    server_address: str,
    username: str,
    password: str,
    message: Message,
    *,
    transport: Optional[SMTPTransport] = None,
) -> None:
    """Like :func:`send_async`, authenticating with PLAIN even without TLS."""
    auth = new_unencrypted_authenticator(username, password)
    await send_async(server_address, auth, message, transport=transport)


def send(
    server_address: str,
    authenticator: Optional[Authenticator],
    message: Message,
    *,
    transport: Optional[SMTPTransport] = None,
) -> None:
    """Blocking version of :func:`send_async`."""
    parse_address(message.from_addr)
    asyncio.run(send_async(server_address, authenticator, message, transport=transport))


def send_unencrypted(
    server_address: str,
    username: str,
    password: str,
    message: Message,
    *,
    transport: Optional[SMTPTransport] = None,
) -> None:
    """Blocking version of :func:`send_unencrypted_async`."""
    asyncio.run(send_unencrypted_async(server_address, username, password, message, transport=transport))
