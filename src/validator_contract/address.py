"""
20-byte account address value type.

Address Format:
- Canonical: 0xeac51e3fe1afc9894f0dfeab8ceb471899b932df (lowercase hex)
- Checksum:  EIP-55 mixed-case hex, via eth_utils

Short hex strings are left-padded, so "0x1" is the address 0x00..01.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from eth_utils import to_checksum_address

ADDRESS_SIZE = 20


@dataclass(frozen=True)
class Address:
    """Immutable 20-byte address. Compares and hashes by its bytes."""

    value: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.value, (bytes, bytearray)):
            raise TypeError(f"Address value must be bytes, got {type(self.value).__name__}")
        if len(self.value) != ADDRESS_SIZE:
            raise ValueError(f"Address must be {ADDRESS_SIZE} bytes, got {len(self.value)}")
        object.__setattr__(self, "value", bytes(self.value))

    @classmethod
    def from_hex(cls, address: str) -> "Address":
        """
        Parse an address from hex text.

        Args:
            address: Hex string, with or without 0x prefix, any case,
                at most 40 hex digits

        Returns:
            Address instance

        Raises:
            ValueError: If the text is not valid hex or is too long
        """
        hex_part = address[2:] if address[:2].lower() == "0x" else address
        if not hex_part:
            raise ValueError(f"Address has no hex digits: {address!r}")
        if len(hex_part) > ADDRESS_SIZE * 2:
            raise ValueError(f"Address hex part must be at most 40 characters, got {len(hex_part)}")
        try:
            raw = bytes.fromhex(hex_part.rjust(ADDRESS_SIZE * 2, "0"))
        except ValueError:
            raise ValueError(f"Invalid hex characters in address: {address}")
        return cls(raw)

    @classmethod
    def coerce(cls, address: Union["Address", str, bytes]) -> "Address":
        """Accept an Address, hex text or raw bytes."""
        if isinstance(address, Address):
            return address
        if isinstance(address, str):
            return cls.from_hex(address)
        return cls(bytes(address))

    def to_hex(self) -> str:
        """Lowercase 0x-prefixed hex form."""
        return "0x" + self.value.hex()

    def to_checksum(self) -> str:
        """EIP-55 mixed-case form."""
        return to_checksum_address(self.value)

    def __str__(self) -> str:
        return self.to_hex()

    def __repr__(self) -> str:
        return f"Address({self.to_hex()!r})"
