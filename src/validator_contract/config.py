"""
Validator Contract Configuration

All settings come from environment variables with the VALIDATOR_CONTRACT_
prefix:
- VALIDATOR_CONTRACT_ADDRESS      default contract address
- VALIDATOR_CONTRACT_RPC_URL      JSON-RPC endpoint (default http://127.0.0.1:8545)
- VALIDATOR_CONTRACT_RPC_TIMEOUT  HTTP timeout in seconds (default 30)
- VALIDATOR_CONTRACT_LOG_LEVEL    DEBUG, INFO, WARNING, ERROR or CRITICAL
- VALIDATOR_CONTRACT_LOG_FILE     optional JSON log file
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from validator_contract.address import Address

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


DEFAULT_RPC_URL = "http://127.0.0.1:8545"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ContractConfig:
    contract_address: Optional[Address]
    rpc_url: str
    rpc_timeout: float
    log_level: str
    log_file: Optional[str]

    @classmethod
    def from_env(cls) -> "ContractConfig":
        """
        Read configuration from the environment.

        Raises:
            ConfigurationError: If a value is present but invalid
        """
        raw_address = os.getenv("VALIDATOR_CONTRACT_ADDRESS", "").strip()
        contract_address = None
        if raw_address:
            try:
                contract_address = Address.from_hex(raw_address)
            except ValueError as e:
                raise ConfigurationError(f"VALIDATOR_CONTRACT_ADDRESS is invalid: {e}") from e

        raw_timeout = os.getenv("VALIDATOR_CONTRACT_RPC_TIMEOUT", "30").strip()
        try:
            rpc_timeout = float(raw_timeout)
        except ValueError as e:
            raise ConfigurationError(
                f"VALIDATOR_CONTRACT_RPC_TIMEOUT must be a number, got {raw_timeout!r}"
            ) from e
        if rpc_timeout <= 0:
            raise ConfigurationError("VALIDATOR_CONTRACT_RPC_TIMEOUT must be positive")

        log_level = os.getenv("VALIDATOR_CONTRACT_LOG_LEVEL", "INFO").strip().upper()
        if log_level not in LOG_LEVELS:
            raise ConfigurationError(
                f"VALIDATOR_CONTRACT_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}"
            )

        rpc_url = os.getenv("VALIDATOR_CONTRACT_RPC_URL", DEFAULT_RPC_URL).strip() or DEFAULT_RPC_URL
        if rpc_url == DEFAULT_RPC_URL:
            logger.debug(
                "Using default RPC endpoint %s",
                rpc_url,
                extra={"event": "config.default_rpc_url"},
            )

        return cls(
            contract_address=contract_address,
            rpc_url=rpc_url,
            rpc_timeout=rpc_timeout,
            log_level=log_level,
            log_file=os.getenv("VALIDATOR_CONTRACT_LOG_FILE", "").strip() or None,
        )
