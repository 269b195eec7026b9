"""
Contract-call exception hierarchy.

Provides typed exceptions for validator contract calls so callers can tell
failure causes apart by type as well as by message.
"""

from __future__ import annotations
from typing import Optional, Any, Dict


class ContractCallError(Exception):
    """Base exception for all contract-call errors.

    Attributes:
        message: Human-readable error description
        details: Additional context (function, contract, block)
        recoverable: Whether the operation can be retried
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable


class UnknownFunctionError(ContractCallError):
    """Raised when a function name is not in the selector registry."""
    pass


class NoResultError(ContractCallError):
    """Raised when the transaction simulator produced no result at all."""
    pass


class CallFailedError(ContractCallError):
    """Raised when the call did not succeed or returned an unexpected type.

    Examples: invalid transaction, reverted execution, undecodable output,
    first return value of the wrong ABI type.
    """
    pass


class EmptyDecodedOutputError(ContractCallError):
    """Raised when a successful call decodes to zero return values."""
    pass


class UnexpectedFunctionError(ContractCallError):
    """Raised when decoding is requested for a function outside the registered set."""
    pass
