# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SMTP delivery of already serialized messages, built on aiosmtplib."""

from __future__ import annotations

import asyncio
import base64
import binascii
from typing import Iterable, Optional, Tuple

import aiosmtplib

from .auth import Authenticator, ServerInfo
from .errors import ProtocolError, TransportError
from .logger import get_logger

logger = get_logger()

DEFAULT_SMTP_PORT = 25

AUTH_CONTINUE = 334
AUTH_SUCCESSFUL = 235


def split_host_port(server_address: str) -> Tuple[str, int]:
    """Split ``host:port`` (or ``[ipv6]:port``) into its parts.

    A missing port defaults to 25.
    """
    address = server_address.strip()
    if address.startswith("["):
        host, sep, rest = address[1:].partition("]")
        if not sep:
            raise TransportError(f"Invalid server address {server_address!r}: missing ']'")
        port_text = rest[1:] if rest.startswith(":") else rest
    elif address.count(":") == 1:
        host, _, port_text = address.partition(":")
    else:
        host, port_text = address, ""
    if not host:
        raise TransportError(f"Invalid server address {server_address!r}: missing host")
    if not port_text:
        return host, DEFAULT_SMTP_PORT
    try:
        port = int(port_text)
    except ValueError as exc:
        raise TransportError(f"Invalid server address {server_address!r}: bad port") from exc
    if not 0 < port < 65536:
        raise TransportError(f"Invalid server address {server_address!r}: port out of range")
    return host, port


def _smtp_code(exc: Exception) -> Optional[int]:
    """Extract the SMTP reply code carried by an aiosmtplib exception, if any."""
    if isinstance(exc, aiosmtplib.SMTPException):
        # aiosmtplib stores code in different attributes depending on exception type
        code = getattr(exc, "smtp_code", None) or getattr(exc, "code", None)
        if isinstance(code, int):
            return code
    return None


def _advertised_mechanisms(smtp: aiosmtplib.SMTP) -> Tuple[str, ...]:
    params = smtp.esmtp_extensions.get("auth", "")
    return tuple(name.upper() for name in params.split())


class SMTPTransport:
    """Deliver raw message bytes to one SMTP server per call.

    A new connection is opened for every message and closed afterwards;
    there is no pooling and no retry.
    """

    def __init__(self, timeout: float = 10.0, *, use_tls: bool = False, start_tls: Optional[bool] = None):
        """Create a transport.

        Args:
            timeout: Timeout in seconds applied by aiosmtplib to each command.
            use_tls: Connect with implicit TLS (port 465 style).
            start_tls: ``None`` upgrades with STARTTLS when the server offers it,
                ``True`` requires it and ``False`` never tries.
        """
        self.timeout = timeout
        self.use_tls = use_tls
        self.start_tls = start_tls

    async def _connect(self, host: str, port: int) -> aiosmtplib.SMTP:
        """Open a new SMTP connection and greet the server."""
        smtp = aiosmtplib.SMTP(
            hostname=host,
            port=port,
            use_tls=self.use_tls,
            start_tls=self.start_tls,
            timeout=self.timeout,
        )
        await smtp.connect()
        try:
            if smtp.is_ehlo_or_helo_needed:
                await smtp.ehlo()
        except Exception:
            smtp.close()
            raise
        return smtp

    async def _authenticate(self, smtp: aiosmtplib.SMTP, host: str, auth: Authenticator) -> None:
        """Run the challenge/response loop of ``auth`` over the AUTH command."""
        server = ServerInfo(
            name=host,
            tls=smtp.get_transport_info("sslcontext") is not None,
            auth=_advertised_mechanisms(smtp),
        )
        mechanism, initial = auth.start(server)
        logger.debug("Authenticating to %s with %s", host, mechanism)
        args = [b"AUTH", mechanism.encode("ascii")]
        if initial:
            args.append(base64.b64encode(initial))
        response = await smtp.execute_command(*args)
        while True:
            if response.code == AUTH_CONTINUE:
                try:
                    challenge = base64.b64decode(response.message, validate=True)
                except (binascii.Error, ValueError) as exc:
                    await smtp.execute_command(b"*")
                    raise TransportError(f"Malformed authentication challenge: {exc}", AUTH_CONTINUE) from exc
                try:
                    answer = auth.next(challenge, True)
                except ProtocolError:
                    # Abort the exchange before handing the error to the caller.
                    await smtp.execute_command(b"*")
                    raise
                response = await smtp.execute_command(base64.b64encode(answer or b""))
            elif response.code == AUTH_SUCCESSFUL:
                auth.next(response.message.encode("utf-8"), False)
                return
            else:
                raise TransportError(
                    f"Authentication failed: {response.code} {response.message}", response.code
                )

    async def _deliver(
        self,
        smtp: aiosmtplib.SMTP,
        envelope_from: str,
        recipients: Iterable[str],
        data: bytes,
    ) -> None:
        await smtp.mail(envelope_from)
        for recipient in recipients:
            await smtp.rcpt(recipient)
        await smtp.data(data)

    async def send(
        self,
        server_address: str,
        authenticator: Optional[Authenticator],
        envelope_from: str,
        recipients: Iterable[str],
        data: bytes,
    ) -> None:
        """Connect to ``server_address``, authenticate and deliver ``data``.

        Raises:
            TransportError: On any connection, protocol or SMTP reply failure.
            ProtocolError: If the authenticator rejects a server challenge.
        """
        host, port = split_host_port(server_address)
        recipients = list(recipients)
        smtp: Optional[aiosmtplib.SMTP] = None
        try:
            smtp = await self._connect(host, port)
            if authenticator is not None:
                if not smtp.supports_extension("auth"):
                    raise TransportError(f"Server {host} does not support AUTH")
                await self._authenticate(smtp, host, authenticator)
            await self._deliver(smtp, envelope_from, recipients, data)
            await smtp.quit()
            smtp = None
        except (aiosmtplib.SMTPException, asyncio.TimeoutError, OSError) as exc:
            smtp_code = _smtp_code(exc)
            error_info = f"{exc} (SMTP {smtp_code})" if smtp_code else str(exc) or type(exc).__name__
            logger.debug("Delivery through %s failed: %s", server_address, error_info)
            raise TransportError(error_info, smtp_code) from exc
        finally:
            if smtp is not None:
                smtp.close()
        logger.debug("Delivered %d bytes to %d recipients via %s", len(data), len(recipients), server_address)
