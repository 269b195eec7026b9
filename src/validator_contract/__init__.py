"""
Validator Contract - Typed contract-call codec

Reads the validator set and the epoch counter from an on-chain validator
smart contract through a read-only call:
- Selector registry for the supported zero-argument functions
- Call dispatch through an external transaction simulator
- ABI decoding and validation of the returned bytes

Main entry point: ValidatorContractController.
"""

from validator_contract.address import Address
from validator_contract.controller import ValidatorContractController
from validator_contract.exceptions import (
    CallFailedError,
    ContractCallError,
    EmptyDecodedOutputError,
    NoResultError,
    UnexpectedFunctionError,
    UnknownFunctionError,
)
from validator_contract.signatures import GET_EPOCH_COUNTER, GET_VALIDATORS, FunctionSignature
from validator_contract.simulation import (
    CallParameters,
    OperationTracer,
    TransactionSimulator,
    TransactionSimulatorResult,
    TransactionValidationParams,
)

__version__ = "0.1.0"
__author__ = "XAI Development Team"

__all__ = [
    "Address",
    "CallFailedError",
    "CallParameters",
    "ContractCallError",
    "EmptyDecodedOutputError",
    "FunctionSignature",
    "GET_EPOCH_COUNTER",
    "GET_VALIDATORS",
    "NoResultError",
    "OperationTracer",
    "TransactionSimulator",
    "TransactionSimulatorResult",
    "TransactionValidationParams",
    "UnexpectedFunctionError",
    "UnknownFunctionError",
    "ValidatorContractController",
]
