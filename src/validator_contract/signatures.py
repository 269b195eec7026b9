"""
Selector registry for the validator contract functions.

Each supported function is described by a FunctionSignature; its 4-byte
selector is the first four bytes of keccak256 over the canonical signature
string, e.g. keccak256("getValidators()")[:4].
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, Sequence, Tuple

from eth_utils import function_signature_to_4byte_selector

from validator_contract.abi import AbiType, encode_values
from validator_contract.exceptions import UnknownFunctionError

logger = logging.getLogger(__name__)

GET_VALIDATORS = "getValidators"
GET_EPOCH_COUNTER = "getEpochCounter"

_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")


@dataclass(frozen=True)
class FunctionSignature:
    """Immutable description of a contract function."""

    name: str
    argument_types: Tuple[AbiType, ...] = ()
    return_types: Tuple[AbiType, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not _IDENTIFIER.fullmatch(self.name):
            raise ValueError(f"Invalid function name: {self.name!r}")
        for abi_type in (*self.argument_types, *self.return_types):
            if not isinstance(abi_type, AbiType):
                raise TypeError(f"Unsupported ABI type for {self.name}: {abi_type!r}")

    @property
    def canonical(self) -> str:
        """Canonical signature string, e.g. ``getValidators()``."""
        return f"{self.name}({','.join(t.value for t in self.argument_types)})"

    @property
    def selector(self) -> bytes:
        return function_signature_to_4byte_selector(self.canonical)

    def encode_call(self, args: Sequence[object] = ()) -> bytes:
        """
        Build the call payload: selector followed by the encoded arguments.

        Raises:
            ValueError: If the argument count does not match the signature
        """
        if len(args) != len(self.argument_types):
            raise ValueError(
                f"{self.canonical} takes {len(self.argument_types)} arguments, got {len(args)}"
            )
        return self.selector + encode_values(self.argument_types, args)


class SelectorRegistry:
    """Read-only mapping of function name to FunctionSignature."""

    def __init__(self, signatures: Iterable[FunctionSignature]) -> None:
        self._signatures: Dict[str, FunctionSignature] = {}
        for signature in signatures:
            if signature.name in self._signatures:
                raise ValueError(f"Duplicate function signature: {signature.name}")
            self._signatures[signature.name] = signature

    def get(self, name: str) -> FunctionSignature:
        try:
            return self._signatures[name]
        except KeyError:
            raise UnknownFunctionError(
                f"Unknown smart contract function: {name}",
                details={"function": name},
            ) from None

    def names(self) -> Tuple[str, ...]:
        return tuple(self._signatures)

    def __contains__(self, name: object) -> bool:
        return name in self._signatures

    def __len__(self) -> int:
        return len(self._signatures)


def create_default_registry() -> SelectorRegistry:
    """
    Build the registry with the two validator contract functions.

    Raises:
        RuntimeError: If a signature cannot be constructed
    """
    try:
        registry = SelectorRegistry(
            [
                FunctionSignature(GET_VALIDATORS, (), (AbiType.ADDRESS_ARRAY,)),
                FunctionSignature(GET_EPOCH_COUNTER, (), (AbiType.UINT256,)),
            ]
        )
    except (TypeError, ValueError) as e:
        raise RuntimeError("Error creating smart contract functions") from e
    logger.debug(
        "Selector registry created with %d functions",
        len(registry),
        extra={"event": "validator_contract.registry_created", "functions": list(registry.names())},
    )
    return registry
