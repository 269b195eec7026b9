"""
Validator contract controller.

Reads the validator set and epoch counter from the validator smart contract
by simulating read-only calls at a given block.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Union

from validator_contract.abi import decode_values
from validator_contract.address import Address
from validator_contract.decoding import ReturnDecoder, decode_and_validate
from validator_contract.exceptions import ContractCallError
from validator_contract.signatures import (
    GET_EPOCH_COUNTER,
    GET_VALIDATORS,
    FunctionSignature,
    SelectorRegistry,
    create_default_registry,
)
from validator_contract.simulation import (
    CallParameters,
    OperationTracer,
    TransactionSimulator,
    TransactionSimulatorResult,
    TransactionValidationParams,
)

logger = logging.getLogger(__name__)

AddressLike = Union[Address, str, bytes]


class ValidatorContractController:
    """
    Calls the validator contract through a transaction simulator.

    The controller holds no per-call state; the registry is built once at
    construction and never changes, so one instance can serve concurrent
    callers.
    """

    def __init__(
        self,
        transaction_simulator: TransactionSimulator,
        *,
        decoder: ReturnDecoder = decode_values,
    ) -> None:
        self.transaction_simulator = transaction_simulator
        self._decoder = decoder
        self._registry: SelectorRegistry = create_default_registry()
        self._get_validators_function = self._registry.get(GET_VALIDATORS)
        self._get_epoch_counter_function = self._registry.get(GET_EPOCH_COUNTER)

    @property
    def registry(self) -> SelectorRegistry:
        return self._registry

    def get_validators(self, block_number: int, contract_address: AddressLike) -> List[Address]:
        """
        Get the validator addresses stored in the contract at a block.

        Args:
            block_number: Block at which the call is evaluated
            contract_address: Validator contract address

        Returns:
            Validator addresses in contract order (may be empty)

        Raises:
            NoResultError, CallFailedError, EmptyDecodedOutputError
        """
        return self._call_and_decode(block_number, self._get_validators_function, contract_address)

    def get_epoch_counter(self, block_number: int, contract_address: AddressLike) -> int:
        """
        Get the epoch counter stored in the contract at a block.

        Raises:
            NoResultError, CallFailedError, EmptyDecodedOutputError
        """
        return self._call_and_decode(block_number, self._get_epoch_counter_function, contract_address)

    def call(self, function_name: str, block_number: int, contract_address: AddressLike) -> Any:
        """Call a registered function by name and return its decoded value."""
        return self._call_and_decode(block_number, self._registry.get(function_name), contract_address)

    def call_function(
        self,
        block_number: int,
        function: FunctionSignature,
        contract_address: AddressLike,
    ) -> Optional[TransactionSimulatorResult]:
        """Encode ``function`` and hand it to the simulator. The result is returned as-is."""
        address = Address.coerce(contract_address)
        call_params = CallParameters.read_only(address, function.encode_call())
        validation_params = TransactionValidationParams.transaction_simulator_allow_exceeding_balance()
        logger.debug(
            "Simulating %s on %s at block %s",
            function.canonical,
            address,
            block_number,
            extra={
                "event": "validator_contract.call",
                "function": function.name,
                "selector": function.selector.hex(),
            },
        )
        return self.transaction_simulator.process(
            call_params, validation_params, OperationTracer.NO_TRACING, block_number
        )

    def _call_and_decode(
        self, block_number: int, function: FunctionSignature, contract_address: AddressLike
    ) -> Any:
        address = Address.coerce(contract_address)
        result = self.call_function(block_number, function, address)
        try:
            return decode_and_validate(
                result,
                function,
                decoder=self._decoder,
                details={"contract": address.to_hex(), "block_number": block_number},
            )
        except ContractCallError as e:
            logger.warning(
                "Validator contract call rejected: %s",
                e.message,
                extra={
                    "event": "validator_contract.call_rejected",
                    "error_type": type(e).__name__,
                    **e.details,
                },
            )
            raise
