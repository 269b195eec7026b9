"""
Result decoding and validation for validator contract calls.

Checks run in a fixed order and stop at the first failure:
1. unknown function name      -> UnexpectedFunctionError
2. no simulator result        -> NoResultError
3. unsuccessful result        -> CallFailedError
4. undecodable output         -> CallFailedError
5. zero decoded values        -> EmptyDecodedOutputError
6. wrong type of first value  -> CallFailedError
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Type

from eth_abi.exceptions import DecodingError

from validator_contract.abi import AbiType, AbiValue, AddressArrayValue, Uint256Value, decode_values
from validator_contract.exceptions import (
    CallFailedError,
    EmptyDecodedOutputError,
    NoResultError,
    UnexpectedFunctionError,
)
from validator_contract.signatures import GET_EPOCH_COUNTER, GET_VALIDATORS, FunctionSignature
from validator_contract.simulation import CallOutcome, OutcomeStatus, TransactionSimulatorResult

logger = logging.getLogger(__name__)

CONTRACT_ERROR_MSG = "Failed validator smart contract call"
EPOCH_COUNTER_ERROR_MSG = "Failed epoch counter smart contract call"
UNEXPECTED_FUNCTION_ERROR_MSG = "Failed smart contract call - Unexpected function"
UNEXPECTED_RESULT_VALIDATOR_ERROR_MSG = "Unexpected empty result from validator smart contract call"
UNEXPECTED_RESULT_EPOCH_ERROR_MSG = "Unexpected empty result from epoch counter smart contract call"

ReturnDecoder = Callable[[Sequence[AbiType], bytes], List[AbiValue]]


@dataclass(frozen=True)
class DecodeStrategy:
    """How one registered function's output is checked and unwrapped."""

    expected: Type[AbiValue]
    error_message: str
    empty_message: str
    extract: Callable[[Any], Any]


def _extract_validators(value: AddressArrayValue) -> list:
    return list(value.value)


def _extract_epoch_counter(value: Uint256Value) -> int:
    return value.value


STRATEGIES: Dict[str, DecodeStrategy] = {
    GET_VALIDATORS: DecodeStrategy(
        expected=AddressArrayValue,
        error_message=CONTRACT_ERROR_MSG,
        empty_message=UNEXPECTED_RESULT_VALIDATOR_ERROR_MSG,
        extract=_extract_validators,
    ),
    GET_EPOCH_COUNTER: DecodeStrategy(
        expected=Uint256Value,
        error_message=EPOCH_COUNTER_ERROR_MSG,
        empty_message=UNEXPECTED_RESULT_EPOCH_ERROR_MSG,
        extract=_extract_epoch_counter,
    ),
}


def strategy_for(signature: FunctionSignature) -> DecodeStrategy:
    try:
        return STRATEGIES[signature.name]
    except KeyError:
        raise UnexpectedFunctionError(
            f"{UNEXPECTED_FUNCTION_ERROR_MSG}: {signature.name}",
            details={"function": signature.name},
        ) from None


def decode_and_validate(
    result: Optional[TransactionSimulatorResult],
    signature: FunctionSignature,
    *,
    decoder: ReturnDecoder = decode_values,
    details: Optional[Dict[str, Any]] = None,
) -> Any:
    """
    Turn a simulator result into the typed return value of ``signature``.

    Args:
        result: Simulator result, or None when the simulator produced nothing
        signature: Registered function signature the call was made for
        decoder: Decodes output bytes into tagged ABI values
        details: Extra context attached to raised errors

    Returns:
        list[Address] for getValidators, int for getEpochCounter

    Raises:
        UnexpectedFunctionError, NoResultError, CallFailedError,
        EmptyDecodedOutputError
    """
    strategy = strategy_for(signature)
    context = {"function": signature.name, **(details or {})}
    outcome = CallOutcome.from_result(result)

    if outcome.status is OutcomeStatus.ABSENT:
        raise NoResultError(strategy.error_message, details=context)
    if outcome.status is OutcomeStatus.FAILED:
        raise CallFailedError(strategy.error_message, details=context)

    try:
        decoded = decoder(signature.return_types, outcome.output)
    except DecodingError as e:
        raise CallFailedError(
            strategy.error_message, details={**context, "decoding_error": str(e)}
        ) from e

    if not decoded:
        raise EmptyDecodedOutputError(strategy.empty_message, details=context)

    first = decoded[0]
    if not isinstance(first, strategy.expected):
        logger.debug(
            "Return type mismatch for %s: expected %s, got %s",
            signature.name,
            strategy.expected.abi_type.value,
            type(first).__name__,
        )
        raise CallFailedError(strategy.error_message, details=context)

    return strategy.extract(first)
