"""
Typed ABI values for contract return data.

Only the ABI types the validator contract actually returns are modelled:
- uint256  -> Uint256Value
- address[] -> AddressArrayValue

Decoding of the raw return bytes is delegated to eth_abi; the plain Python
results are then wrapped into the tagged value classes below so callers can
check the runtime type of each decoded value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, List, Sequence, Tuple

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode

from validator_contract.address import Address

UINT256_MAX = 2**256 - 1


class AbiType(Enum):
    UINT256 = "uint256"
    ADDRESS_ARRAY = "address[]"


@dataclass(frozen=True)
class AbiValue:
    """Base class for decoded ABI values."""

    abi_type: ClassVar[AbiType]


@dataclass(frozen=True)
class Uint256Value(AbiValue):
    abi_type: ClassVar[AbiType] = AbiType.UINT256

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= UINT256_MAX:
            raise ValueError(f"uint256 out of range: {self.value}")


@dataclass(frozen=True)
class AddressArrayValue(AbiValue):
    abi_type: ClassVar[AbiType] = AbiType.ADDRESS_ARRAY

    value: Tuple[Address, ...]


def _wrap(abi_type: AbiType, raw: object) -> AbiValue:
    if abi_type is AbiType.UINT256:
        return Uint256Value(int(raw))
    if abi_type is AbiType.ADDRESS_ARRAY:
        return AddressArrayValue(tuple(Address.from_hex(item) for item in raw))
    raise ValueError(f"Unsupported ABI type: {abi_type}")


def decode_values(types: Sequence[AbiType], data: bytes) -> List[AbiValue]:
    """
    Decode contract return data into tagged values.

    Empty data decodes to an empty list rather than raising, so callers can
    distinguish "no output" from malformed output.

    Raises:
        eth_abi.exceptions.DecodingError: If the data does not match the types
    """
    if not data:
        return []
    raw_values = abi_decode([t.value for t in types], bytes(data))
    return [_wrap(t, raw) for t, raw in zip(types, raw_values)]


def encode_values(types: Sequence[AbiType], values: Sequence[object]) -> bytes:
    """ABI-encode plain Python values for the given types."""
    return abi_encode([t.value for t in types], list(values))
