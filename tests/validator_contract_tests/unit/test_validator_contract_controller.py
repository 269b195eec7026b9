"""
Unit tests for ValidatorContractController.

Covers call construction for both contract functions and every rejection
path of the result validation: absent, invalid, reverted, empty and
type-mismatched results.
"""

from unittest.mock import Mock

import pytest
from eth_abi import encode as abi_encode
from eth_utils import keccak

from validator_contract.abi import AddressArrayValue, Uint256Value
from validator_contract.address import Address
from validator_contract.controller import ValidatorContractController
from validator_contract.exceptions import (
    CallFailedError,
    EmptyDecodedOutputError,
    NoResultError,
    UnknownFunctionError,
)
from validator_contract.signatures import GET_EPOCH_COUNTER, GET_VALIDATORS
from validator_contract.simulation import (
    CallParameters,
    InvalidReason,
    OperationTracer,
    TransactionSimulatorResult,
    TransactionValidationParams,
)

GET_VALIDATORS_FUNCTION_RESULT = (
    "0000000000000000000000000000000000000000000000000000000000000020"
    "0000000000000000000000000000000000000000000000000000000000000001"
    "000000000000000000000000eac51e3fe1afc9894f0dfeab8ceb471899b932df"
)
GET_EPOCH_COUNTER_FUNCTION_RESULT = "0x0000000000000000000000000000000000000000000000000000000000000001"
VALIDATOR_ADDRESS = Address.from_hex("0xeac51e3fe1afc9894f0dfeab8ceb471899b932df")
CONTRACT_ADDRESS = Address.from_hex("1")
ALLOW_EXCEEDING_BALANCE_VALIDATION_PARAMS = TransactionValidationParams(allow_exceeding_balance=True)

GET_VALIDATORS_CALL_PARAMETER = CallParameters(
    None, CONTRACT_ADDRESS, -1, None, None, keccak(text="getValidators()")[:4]
)
GET_EPOCH_COUNTER_CALL_PARAMETER = CallParameters(
    None, CONTRACT_ADDRESS, -1, None, None, keccak(text="getEpochCounter()")[:4]
)


def _from_hex(value):
    return bytes.fromhex(value[2:] if value.startswith("0x") else value)


def _successful(output_hex):
    return TransactionSimulatorResult.successful(_from_hex(output_hex))


def _failed():
    return TransactionSimulatorResult.failed(revert_reason="internal error")


def _invalid():
    return TransactionSimulatorResult.invalid(InvalidReason.INTERNAL_ERROR)


# ============================================================================
# getValidators
# ============================================================================


class TestGetValidators:
    def test_decodes_get_validators_result_from_contract_call(self, controller, transaction_simulator):
        transaction_simulator.process.return_value = _successful(GET_VALIDATORS_FUNCTION_RESULT)

        validators = controller.get_validators(1, CONTRACT_ADDRESS)

        assert validators == [VALIDATOR_ADDRESS]
        assert validators[0].to_hex() == "0xeac51e3fe1afc9894f0dfeab8ceb471899b932df"
        transaction_simulator.process.assert_called_once_with(
            GET_VALIDATORS_CALL_PARAMETER,
            ALLOW_EXCEEDING_BALANCE_VALIDATION_PARAMS,
            OperationTracer.NO_TRACING,
            1,
        )

    def test_empty_validator_set_is_valid(self, controller, transaction_simulator):
        transaction_simulator.process.return_value = TransactionSimulatorResult.successful(
            abi_encode(["address[]"], [[]])
        )

        assert controller.get_validators(1, CONTRACT_ADDRESS) == []

    def test_preserves_order_and_duplicates(self, controller, transaction_simulator):
        first = "0x" + "11" * 20
        second = "0x" + "22" * 20
        transaction_simulator.process.return_value = TransactionSimulatorResult.successful(
            abi_encode(["address[]"], [[second, first, second]])
        )

        validators = controller.get_validators(1, CONTRACT_ADDRESS)

        assert [v.to_hex() for v in validators] == [second, first, second]

    def test_accepts_hex_contract_address(self, controller, transaction_simulator):
        transaction_simulator.process.return_value = _successful(GET_VALIDATORS_FUNCTION_RESULT)

        controller.get_validators(1, "0x0000000000000000000000000000000000000001")

        call_params = transaction_simulator.process.call_args[0][0]
        assert call_params.to == CONTRACT_ADDRESS

    def test_throw_error_if_empty_simulation_result(self, controller, transaction_simulator):
        transaction_simulator.process.return_value = None

        with pytest.raises(NoResultError) as exc_info:
            controller.get_validators(1, CONTRACT_ADDRESS)
        assert str(exc_info.value) == "Failed validator smart contract call"
        assert exc_info.value.recoverable is False

    def test_throw_error_if_failed_simulation_result(self, controller, transaction_simulator):
        transaction_simulator.process.return_value = _failed()

        with pytest.raises(CallFailedError, match="Failed validator smart contract call"):
            controller.get_validators(1, CONTRACT_ADDRESS)

    def test_throw_error_if_invalid_simulation_result(self, controller, transaction_simulator):
        transaction_simulator.process.return_value = _invalid()

        with pytest.raises(CallFailedError, match="Failed validator smart contract call"):
            controller.get_validators(1, CONTRACT_ADDRESS)

    def test_throw_error_if_unexpected_successful_empty_simulation_result(
        self, controller, transaction_simulator
    ):
        transaction_simulator.process.return_value = TransactionSimulatorResult.successful(b"")

        with pytest.raises(EmptyDecodedOutputError) as exc_info:
            controller.get_validators(1, CONTRACT_ADDRESS)
        assert str(exc_info.value) == "Unexpected empty result from validator smart contract call"

    def test_throw_error_if_truncated_output(self, controller, transaction_simulator):
        transaction_simulator.process.return_value = _successful(GET_VALIDATORS_FUNCTION_RESULT[:-64])

        with pytest.raises(CallFailedError, match="Failed validator smart contract call"):
            controller.get_validators(1, CONTRACT_ADDRESS)

    def test_error_details_name_call_context(self, controller, transaction_simulator):
        transaction_simulator.process.return_value = None

        with pytest.raises(NoResultError) as exc_info:
            controller.get_validators(7, CONTRACT_ADDRESS)

        assert exc_info.value.details == {
            "function": GET_VALIDATORS,
            "contract": CONTRACT_ADDRESS.to_hex(),
            "block_number": 7,
        }


# ============================================================================
# getEpochCounter
# ============================================================================


class TestGetEpochCounter:
    def test_decodes_get_epoch_counter_result_from_contract_call(self, controller, transaction_simulator):
        transaction_simulator.process.return_value = _successful(GET_EPOCH_COUNTER_FUNCTION_RESULT)

        epoch_counter = controller.get_epoch_counter(1, CONTRACT_ADDRESS)

        assert epoch_counter == 1
        transaction_simulator.process.assert_called_once_with(
            GET_EPOCH_COUNTER_CALL_PARAMETER,
            ALLOW_EXCEEDING_BALANCE_VALIDATION_PARAMS,
            OperationTracer.NO_TRACING,
            1,
        )

    def test_decodes_max_uint256(self, controller, transaction_simulator):
        transaction_simulator.process.return_value = TransactionSimulatorResult.successful(b"\xff" * 32)

        assert controller.get_epoch_counter(1, CONTRACT_ADDRESS) == 2**256 - 1

    def test_throw_error_if_empty_epoch_counter_simulation_result(self, controller, transaction_simulator):
        transaction_simulator.process.return_value = None

        with pytest.raises(NoResultError) as exc_info:
            controller.get_epoch_counter(1, CONTRACT_ADDRESS)
        assert str(exc_info.value) == "Failed epoch counter smart contract call"

    def test_throw_error_if_failed_epoch_counter_simulation_result(self, controller, transaction_simulator):
        transaction_simulator.process.return_value = _failed()

        with pytest.raises(CallFailedError, match="Failed epoch counter smart contract call"):
            controller.get_epoch_counter(1, CONTRACT_ADDRESS)

    def test_throw_error_if_invalid_epoch_counter_simulation_result(self, controller, transaction_simulator):
        transaction_simulator.process.return_value = _invalid()

        with pytest.raises(CallFailedError, match="Failed epoch counter smart contract call"):
            controller.get_epoch_counter(1, CONTRACT_ADDRESS)

    def test_throw_error_if_unexpected_successful_empty_epoch_counter_simulation_result(
        self, controller, transaction_simulator
    ):
        transaction_simulator.process.return_value = TransactionSimulatorResult.successful(b"")

        with pytest.raises(EmptyDecodedOutputError) as exc_info:
            controller.get_epoch_counter(1, CONTRACT_ADDRESS)
        assert str(exc_info.value) == "Unexpected empty result from epoch counter smart contract call"

    def test_throw_error_if_short_output(self, controller, transaction_simulator):
        transaction_simulator.process.return_value = TransactionSimulatorResult.successful(b"\x01")

        with pytest.raises(CallFailedError, match="Failed epoch counter smart contract call"):
            controller.get_epoch_counter(1, CONTRACT_ADDRESS)


# ============================================================================
# Type mismatch and dispatch by name
# ============================================================================


class TestTypeMismatch:
    def test_epoch_counter_rejects_address_array(self, transaction_simulator):
        decoder = Mock(return_value=[AddressArrayValue((VALIDATOR_ADDRESS,))])
        controller = ValidatorContractController(transaction_simulator, decoder=decoder)
        transaction_simulator.process.return_value = _successful(GET_EPOCH_COUNTER_FUNCTION_RESULT)

        with pytest.raises(CallFailedError) as exc_info:
            controller.get_epoch_counter(1, CONTRACT_ADDRESS)
        assert str(exc_info.value) == "Failed epoch counter smart contract call"

    def test_validators_rejects_uint256(self, transaction_simulator):
        decoder = Mock(return_value=[Uint256Value(1)])
        controller = ValidatorContractController(transaction_simulator, decoder=decoder)
        transaction_simulator.process.return_value = _successful(GET_VALIDATORS_FUNCTION_RESULT)

        with pytest.raises(CallFailedError) as exc_info:
            controller.get_validators(1, CONTRACT_ADDRESS)
        assert str(exc_info.value) == "Failed validator smart contract call"


class TestCallByName:
    def test_call_registered_function(self, controller, transaction_simulator):
        transaction_simulator.process.return_value = _successful(GET_EPOCH_COUNTER_FUNCTION_RESULT)

        assert controller.call(GET_EPOCH_COUNTER, 3, CONTRACT_ADDRESS) == 1
        assert transaction_simulator.process.call_args[0][3] == 3

    def test_call_unknown_function(self, controller, transaction_simulator):
        with pytest.raises(UnknownFunctionError, match="getOwner"):
            controller.call("getOwner", 1, CONTRACT_ADDRESS)
        transaction_simulator.process.assert_not_called()

    def test_call_function_returns_raw_result(self, controller, transaction_simulator):
        result = _successful(GET_VALIDATORS_FUNCTION_RESULT)
        transaction_simulator.process.return_value = result

        raw = controller.call_function(1, controller.registry.get(GET_VALIDATORS), CONTRACT_ADDRESS)

        assert raw is result


class TestValidationParams:
    def test_simulator_defaults_do_not_allow_exceeding_balance(self):
        assert TransactionValidationParams.transaction_simulator().allow_exceeding_balance is False

    def test_contract_calls_allow_exceeding_balance(self, controller, transaction_simulator):
        transaction_simulator.process.return_value = _successful(GET_EPOCH_COUNTER_FUNCTION_RESULT)

        controller.get_epoch_counter(1, CONTRACT_ADDRESS)

        validation_params = transaction_simulator.process.call_args[0][1]
        assert validation_params.allow_exceeding_balance is True
        assert validation_params == TransactionValidationParams.transaction_simulator_allow_exceeding_balance()


class TestLogging:
    def test_rejected_call_is_logged(self, controller, transaction_simulator, caplog):
        transaction_simulator.process.return_value = None

        with caplog.at_level("WARNING", logger="validator_contract"):
            with pytest.raises(NoResultError):
                controller.get_epoch_counter(1, CONTRACT_ADDRESS)

        records = [r for r in caplog.records if getattr(r, "event", None) == "validator_contract.call_rejected"]
        assert len(records) == 1
        assert records[0].error_type == "NoResultError"
        assert records[0].function == GET_EPOCH_COUNTER
