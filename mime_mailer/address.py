# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Parse RFC 5322 mailboxes such as ``"Jane <jane@example.com>"``."""

from __future__ import annotations

from email.errors import HeaderParseError
from email.headerregistry import Address
from email.policy import default as default_policy

from .errors import AddressFormatError


def parse_address(value: str) -> Address:
    """Parse a single mailbox and return it as an :class:`Address`.

    Raises:
        AddressFormatError: If ``value`` is empty, malformed, holds more than
            one mailbox, or lacks a local part or a domain.
    """
    if not value or not value.strip():
        raise AddressFormatError("mail: no address")
    try:
        header = default_policy.header_factory("from", value)
    except (HeaderParseError, IndexError, ValueError) as exc:
        raise AddressFormatError(f"mail: invalid address {value!r}: {exc}") from exc
    if header.defects:
        raise AddressFormatError(f"mail: invalid address {value!r}: {header.defects[0]}")
    addresses = header.addresses
    if len(addresses) != 1:
        raise AddressFormatError(f"mail: expected single address, got {len(addresses)} in {value!r}")
    address = addresses[0]
    if not address.username or not address.domain:
        raise AddressFormatError(f"mail: missing '@' or angle-addr in {value!r}")
    return address
