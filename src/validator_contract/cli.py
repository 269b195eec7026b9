#!/usr/bin/env python3
"""
Validator contract CLI

Reads the validator contract of a node over JSON-RPC:
- validators     list the validator addresses at a block
- epoch-counter  show the epoch counter at a block
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Optional

import click
import requests
from rich.console import Console
from rich.table import Table

from validator_contract.address import Address
from validator_contract.config import ConfigurationError, ContractConfig
from validator_contract.controller import ValidatorContractController
from validator_contract.exceptions import ContractCallError
from validator_contract.logging_config import setup_logging
from validator_contract.web3_simulator import Web3TransactionSimulator

logger = logging.getLogger(__name__)
console = Console()


def _handle_cli_error(exc: Exception, exit_code: int = 1) -> None:
    """Centralized CLI error handler for consistent messaging/exit codes."""
    logger.error("CLI error: %s", exc, exc_info=True)
    console.print(f"[bold red]Error:[/] {exc}")
    sys.exit(exit_code)


class CliContext:
    def __init__(self, simulator: Web3TransactionSimulator, contract: Address, block: Optional[int]):
        self.simulator = simulator
        self.controller = ValidatorContractController(simulator)
        self.contract = contract
        self.block = block

    def resolve_block(self) -> int:
        if self.block is None:
            return self.simulator.latest_block_number()
        return self.block


def _parse_block(value: str) -> Optional[int]:
    if value == "latest":
        return None
    try:
        block = int(value, 0)
    except ValueError:
        raise click.BadParameter(f"expected a block number or 'latest', got {value!r}")
    if block < 0:
        raise click.BadParameter("block number must not be negative")
    return block


@click.group()
@click.option("--rpc-url", default=None, help="JSON-RPC endpoint (env: VALIDATOR_CONTRACT_RPC_URL)")
@click.option("--contract", default=None, help="Validator contract address (env: VALIDATOR_CONTRACT_ADDRESS)")
@click.option("--block", default="latest", show_default=True, help="Block number or 'latest'")
@click.pass_context
def cli(ctx: click.Context, rpc_url: Optional[str], contract: Optional[str], block: str) -> None:
    """Query the validator smart contract."""
    try:
        config = ContractConfig.from_env()
    except ConfigurationError as e:
        _handle_cli_error(e)
    setup_logging(level=config.log_level, log_file=config.log_file)

    try:
        contract_address = Address.from_hex(contract) if contract else config.contract_address
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--contract")
    if contract_address is None:
        raise click.UsageError("No contract address: pass --contract or set VALIDATOR_CONTRACT_ADDRESS")

    simulator = Web3TransactionSimulator.from_rpc_url(rpc_url or config.rpc_url, config.rpc_timeout)
    ctx.obj = CliContext(simulator, contract_address, _parse_block(block))


@cli.command("validators")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")
@click.pass_obj
def validators_cmd(obj: CliContext, as_json: bool) -> None:
    """List validator addresses."""
    try:
        block = obj.resolve_block()
        validators = obj.controller.get_validators(block, obj.contract)
    except (ContractCallError, requests.RequestException) as e:
        _handle_cli_error(e)

    if as_json:
        click.echo(json.dumps({"block": block, "validators": [v.to_hex() for v in validators]}))
        return

    table = Table(title=f"Validators at block {block}")
    table.add_column("#", justify="right")
    table.add_column("Address")
    for index, validator in enumerate(validators):
        table.add_row(str(index), validator.to_checksum())
    console.print(table)
    if not validators:
        console.print("[yellow]Validator set is empty[/]")


@cli.command("epoch-counter")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of text")
@click.pass_obj
def epoch_counter_cmd(obj: CliContext, as_json: bool) -> None:
    """Show the epoch counter."""
    try:
        block = obj.resolve_block()
        counter = obj.controller.get_epoch_counter(block, obj.contract)
    except (ContractCallError, requests.RequestException) as e:
        _handle_cli_error(e)

    if as_json:
        click.echo(json.dumps({"block": block, "epoch_counter": counter}))
        return
    console.print(f"Epoch counter at block {block}: [bold]{counter}[/]")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
