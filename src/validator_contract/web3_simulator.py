"""
Transaction simulator backed by a JSON-RPC node through web3.py.

Read-only calls are evaluated with eth_call at the requested block. The
node's result is mapped onto TransactionSimulatorResult:
- block unknown to the node   -> None
- execution reverted          -> failed result with the revert reason
- other JSON-RPC error        -> failed result (invalid opcode, out of gas, ...)
- otherwise                   -> successful result with the returned bytes

Transport failures (connection refused, timeouts) are not results and
propagate to the caller.
"""

from __future__ import annotations

import logging
from typing import Optional

from eth_utils import to_hex
from web3 import Web3
from web3.exceptions import BlockNotFound, ContractLogicError, Web3RPCError
from web3.types import TxParams

from validator_contract.simulation import (
    CallParameters,
    OperationTracer,
    TransactionSimulatorResult,
    TransactionValidationParams,
)

logger = logging.getLogger(__name__)

# Error messages nodes return for eth_call at a block they do not have
UNKNOWN_BLOCK_MESSAGES = ("header not found", "unknown block", "block not found")


def build_call_tx(call_params: CallParameters) -> TxParams:
    """Translate call parameters into an eth_call transaction object."""
    tx: TxParams = {
        "to": call_params.to.to_checksum(),
        "data": to_hex(call_params.payload),
    }
    if call_params.sender is not None:
        tx["from"] = call_params.sender.to_checksum()
    if call_params.gas_limit >= 0:
        tx["gas"] = call_params.gas_limit
    if call_params.gas_price is not None:
        tx["gasPrice"] = call_params.gas_price
    if call_params.value is not None:
        tx["value"] = call_params.value
    return tx


class Web3TransactionSimulator:
    """Evaluates calls with ``eth_call`` on the node behind ``w3``."""

    def __init__(self, w3: Web3) -> None:
        self.w3 = w3

    @classmethod
    def from_rpc_url(cls, rpc_url: str, timeout: float = 30.0) -> "Web3TransactionSimulator":
        provider = Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout})
        return cls(Web3(provider))

    def latest_block_number(self) -> int:
        return int(self.w3.eth.block_number)

    def process(
        self,
        call_params: CallParameters,
        validation_params: TransactionValidationParams,
        tracer: OperationTracer,
        block_number: int,
    ) -> Optional[TransactionSimulatorResult]:
        # eth_call has no tracing or balance-validation knobs; a call that
        # transfers no value is never gated by the sender's balance.
        try:
            output = self.w3.eth.call(build_call_tx(call_params), block_identifier=block_number)
        except ContractLogicError as e:
            logger.info(
                "Simulated call to %s reverted: %s",
                call_params.to,
                e,
                extra={"event": "validator_contract.call_reverted", "block_number": block_number},
            )
            return TransactionSimulatorResult.failed(revert_reason=str(e))
        except BlockNotFound:
            return self._block_not_found(block_number)
        except Web3RPCError as e:
            if not _has_rpc_error(e):
                raise
            if _is_unknown_block(e):
                return self._block_not_found(block_number)
            logger.info(
                "Simulated call to %s failed on the node: %s",
                call_params.to,
                e,
                extra={"event": "validator_contract.call_errored", "block_number": block_number},
            )
            return TransactionSimulatorResult.failed(revert_reason=str(e))
        return TransactionSimulatorResult.successful(bytes(output))

    def _block_not_found(self, block_number: int) -> None:
        logger.warning(
            "Block %s not found, cannot simulate call",
            block_number,
            extra={"event": "validator_contract.block_not_found", "block_number": block_number},
        )
        return None


def _has_rpc_error(exc: Web3RPCError) -> bool:
    response = getattr(exc, "rpc_response", None)
    return isinstance(response, dict) and "error" in response


def _is_unknown_block(exc: Web3RPCError) -> bool:
    error = exc.rpc_response["error"]
    message = error.get("message", "") if isinstance(error, dict) else str(error)
    return any(marker in message.lower() for marker in UNKNOWN_BLOCK_MESSAGES)
