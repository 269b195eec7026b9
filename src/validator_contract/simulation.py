"""
Interface to the transaction simulator.

The simulator evaluates a call against chain state at a given block without
submitting a transaction. This module defines the request types sent to it,
the result type it returns, and CallOutcome, the three-state view of a
result used by the decoder.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from validator_contract.address import Address

# Gas limit sentinel meaning "no explicit limit"
UNBOUNDED_GAS_LIMIT = -1


@dataclass(frozen=True)
class CallParameters:
    """Parameters of a read-only contract call."""

    sender: Optional[Address]
    to: Address
    gas_limit: int
    gas_price: Optional[int]
    value: Optional[int]
    payload: bytes

    @classmethod
    def read_only(cls, to: Address, payload: bytes) -> "CallParameters":
        """Unsigned call with no sender, gas price or value."""
        return cls(
            sender=None,
            to=to,
            gas_limit=UNBOUNDED_GAS_LIMIT,
            gas_price=None,
            value=None,
            payload=bytes(payload),
        )


@dataclass(frozen=True)
class TransactionValidationParams:
    """Validation policy the simulator applies to the simulated transaction."""

    validate_signature: bool = False
    check_nonce: bool = False
    allow_exceeding_balance: bool = False
    allow_future_nonce: bool = True

    @classmethod
    def transaction_simulator(cls) -> "TransactionValidationParams":
        return cls()

    @classmethod
    def transaction_simulator_allow_exceeding_balance(cls) -> "TransactionValidationParams":
        """Simulator defaults, but the sender's balance may be insufficient."""
        return cls(allow_exceeding_balance=True)


class OperationTracer(Enum):
    NO_TRACING = "no_tracing"


class InvalidReason(Enum):
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class TransactionSimulatorResult:
    """
    Result of a simulated call.

    A result is successful only when the transaction was valid and its
    execution completed without reverting.
    """

    valid: bool
    reverted: bool = False
    output: bytes = b""
    invalid_reason: Optional[InvalidReason] = None
    revert_reason: Optional[str] = None

    @property
    def is_successful(self) -> bool:
        return self.valid and not self.reverted

    @classmethod
    def successful(cls, output: bytes) -> "TransactionSimulatorResult":
        return cls(valid=True, output=bytes(output))

    @classmethod
    def failed(
        cls, revert_reason: Optional[str] = None, output: bytes = b""
    ) -> "TransactionSimulatorResult":
        """Valid transaction whose execution reverted or halted."""
        return cls(valid=True, reverted=True, output=bytes(output), revert_reason=revert_reason)

    @classmethod
    def invalid(cls, reason: InvalidReason) -> "TransactionSimulatorResult":
        """Transaction rejected before execution."""
        return cls(valid=False, invalid_reason=reason)


class TransactionSimulator(Protocol):
    def process(
        self,
        call_params: CallParameters,
        validation_params: TransactionValidationParams,
        tracer: OperationTracer,
        block_number: int,
    ) -> Optional[TransactionSimulatorResult]: ...


class OutcomeStatus(Enum):
    ABSENT = "absent"
    FAILED = "failed"
    SUCCEEDED = "succeeded"


@dataclass(frozen=True)
class CallOutcome:
    """Absent, failed, or succeeded with output bytes."""

    status: OutcomeStatus
    output: bytes = b""

    @classmethod
    def from_result(cls, result: Optional[TransactionSimulatorResult]) -> "CallOutcome":
        if result is None:
            return cls(OutcomeStatus.ABSENT)
        if not result.is_successful:
            return cls(OutcomeStatus.FAILED)
        return cls(OutcomeStatus.SUCCEEDED, bytes(result.output))
