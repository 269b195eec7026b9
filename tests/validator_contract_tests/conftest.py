"""
Shared fixtures for validator contract tests.
"""

from unittest.mock import Mock

import pytest

from validator_contract.controller import ValidatorContractController


@pytest.fixture
def transaction_simulator():
    """Simulator double; returns no result unless a test says otherwise."""
    simulator = Mock()
    simulator.process.return_value = None
    return simulator


@pytest.fixture
def controller(transaction_simulator):
    return ValidatorContractController(transaction_simulator)
