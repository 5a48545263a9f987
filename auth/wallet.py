"""
Chain-address validation for EVM wallet addresses.

An address is accepted when it is 40 hex characters (with or without the
``0x`` prefix) and, if written in mixed case, carries a valid EIP-55
checksum.  Accepted addresses are stored in checksum form so that case
variants of one address map to the same account.
"""

from __future__ import annotations

from typing import Any

from eth_utils import (
    add_0x_prefix,
    is_checksum_address,
    is_checksum_formatted_address,
    is_hex_address,
    to_checksum_address,
)


def is_valid_wallet_address(value: Any) -> bool:
    """Return True if ``value`` is a well-formed EVM address string."""
    if not isinstance(value, str):
        return False
    value = add_0x_prefix(value.strip())
    if not is_hex_address(value):
        return False
    # All-lowercase and all-uppercase carry no checksum; mixed case must match it.
    if is_checksum_formatted_address(value):
        return is_checksum_address(value)
    return True


def normalize_wallet_address(value: str) -> str:
    """Return the EIP-55 checksum form of an already validated address."""
    return to_checksum_address(value.strip())
