from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from src.gelato_demo.application.services import TaskSubmissionService, WhitelistService
from src.gelato_demo.application.task_builders import build_kyber_task_spec
from src.gelato_demo.domain.exceptions import ConfigurationError
from src.gelato_demo.domain.models import (
    TransactionFailureKind,
    WorkflowOutcome,
    WorkflowResult,
)
from src.setup.app_config import Wallet, configure_di
from src.setup.demo_config import DemoSettings, get_demo_settings
from src.setup.network_config import NetworkSettings, get_network_settings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PRECONDITION = 2
EXIT_BROADCAST = 3
EXIT_CONFIRMATION = 4
EXIT_POSTCONDITION = 5
EXIT_READ_FAILED = 6
EXIT_CONFIGURATION = 7

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def exit_code(result: WorkflowResult) -> int:
    if result.outcome is WorkflowOutcome.SUCCEEDED:
        return EXIT_OK
    if result.outcome is WorkflowOutcome.PRECONDITION_FAILED:
        return EXIT_PRECONDITION
    if result.outcome is WorkflowOutcome.POSTCONDITION_FAILED:
        return EXIT_POSTCONDITION
    if result.outcome is WorkflowOutcome.READ_FAILED:
        return EXIT_READ_FAILED
    if result.failure is TransactionFailureKind.BROADCAST:
        return EXIT_BROADCAST
    return EXIT_CONFIRMATION


async def _whitelist_task(network: NetworkSettings, demo: DemoSettings) -> WorkflowResult:
    configure_di(Wallet.PROVIDER, network, demo)
    task_spec = build_kyber_task_spec(network, demo.task_spec_gas_price_ceil_wei)
    return await WhitelistService().whitelist(task_spec)


async def _submit_task(network: NetworkSettings, demo: DemoSettings) -> WorkflowResult:
    configure_di(Wallet.USER, network, demo)
    return await TaskSubmissionService().submit()


COMMANDS = {
    "whitelist-task": _whitelist_task,
    "submit-task": _submit_task,
}


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--log-level", default=None, help="Overrides LOG_LEVEL.")

    parser = argparse.ArgumentParser(
        prog="gelato-demo",
        description="Whitelist and submit the Gelato-Kyber automated trading task.",
    )
    subcommands = parser.add_subparsers(dest="command", required=True)
    subcommands.add_parser(
        "whitelist-task",
        parents=[common],
        help="Whitelist the Kyber TaskSpec from the provider wallet.",
    )
    subcommands.add_parser(
        "submit-task",
        parents=[common],
        help="Submit the Kyber task cycle through the user's GelatoUserProxy.",
    )
    return parser


def _configuration_failed(details: str) -> int:
    print(f"CONFIGURATION_FAILED: {details} ❌", file=sys.stderr)
    return EXIT_CONFIGURATION


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        network = get_network_settings()
        demo = get_demo_settings()
    except ValidationError as exc:
        logging.basicConfig(level=(args.log_level or "INFO").upper(), format=LOG_FORMAT)
        logger.error("Invalid configuration", extra={"errors": exc.error_count()})
        return _configuration_failed(str(exc))

    logging.basicConfig(
        level=(args.log_level or network.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
    try:
        result = asyncio.run(COMMANDS[args.command](network, demo))
    except ConfigurationError as exc:
        logger.error("Invalid configuration", extra={"details": str(exc)})
        return _configuration_failed(str(exc))

    if result.ok:
        print(f"{result.message} ✅")
    else:
        print(f"{result.outcome.value}: {result.message} ❌", file=sys.stderr)
    for tx_hash in result.tx_hashes:
        print(f"  tx {tx_hash}")
    return exit_code(result)


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
