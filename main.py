import argparse
import json
import logging
import sys

from Config import constants_core as core
from Config.environment import env
from Config.exceptions import ConfigError
from Config.validators import validate_all_config

from Shared_Utils.logging_manager import LoggerManager
from Shared_Utils.print_data import PrintData

from withdrawal_engine import (
    AllocationError,
    AllocationValidator,
    AllocationResult,
    DryRunSink,
    JsonFileBalanceSource,
    WithdrawalPlanner,
)

EXIT_OK = 0
EXIT_REJECTED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Plan and withdraw escrowed token balances across Aavegotchis."
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help="Enable detailed DEBUG logs to console"
    )
    sub = parser.add_subparsers(dest='command', required=True)

    def add_common(p):
        p.add_argument('--gotchis', required=True, help="JSON file with the wallet's gotchis")
        p.add_argument('--token', choices=[core.TOKEN_OPTION_GHST, core.TOKEN_OPTION_CUSTOM],
                       default=core.TOKEN_OPTION_GHST)
        p.add_argument('--token-address', help="Token contract for --token custom")
        p.add_argument('--decimals', type=int, default=None,
                       help="Token decimals (default: TOKEN_DECIMALS or 18)")
        p.add_argument('--select', default=core.SELECT_ALL,
                       help="'all' owned gotchis or a single token id")

    max_parser = sub.add_parser('max', help="Show the maximum withdrawable amount")
    add_common(max_parser)

    for name, help_text in (('plan', "Compute a proportional withdrawal plan"),
                            ('withdraw', "Plan and submit through the dry-run sink")):
        p = sub.add_parser(name, help=help_text)
        add_common(p)
        p.add_argument('--amount', required=True, help="Total to withdraw, in token units")
        p.add_argument('--recipient', default=None,
                       help="Receiving wallet (default: WITHDRAW_RECIPIENT)")
        p.add_argument('--json', action='store_true', help="Print the plan as JSON")

    return parser


def plan_to_json(plan) -> str:
    token_ids, token_addresses, recipients, amounts = plan.batch_transfer_args()
    return json.dumps({
        'tokenIds': token_ids,
        'tokenAddresses': token_addresses,
        'recipients': recipients,
        # uint256 amounts overflow JSON numbers in most consumers
        'amounts': [str(amount) for amount in amounts],
        'decimals': plan.decimals,
    }, indent=2)


def run(args, logger_manager) -> int:
    shared_logger = logger_manager.get_logger('shared_logger')
    decimals = args.decimals if args.decimals is not None else env.default_token_decimals

    planner = WithdrawalPlanner(logger_manager, ghst_contract_address=env.ghst_contract_address)
    source = JsonFileBalanceSource(args.gotchis, decimals)
    gotchis = source.fetch_gotchis()
    shared_logger.debug(f"Loaded {len(gotchis)} gotchi(s) from {args.gotchis}")

    if args.command == 'max':
        print(planner.max_amount(gotchis, args.token, decimals, selection=args.select))
        return EXIT_OK

    recipient = args.recipient or env.withdraw_recipient
    plan = planner.build_plan(
        gotchis, args.amount, args.token, decimals, recipient,
        custom_token_address=args.token_address, selection=args.select
    )

    accounts = planner.escrow_accounts(
        planner.select_gotchis(gotchis, args.select), args.token, decimals
    )
    result = AllocationResult(
        allocations=list(plan.allocations),
        requested_total=planner.precision.parse_units(args.amount, decimals),
        precision=decimals,
    )
    validation = AllocationValidator(logger_manager).validate(accounts, result)
    if not validation.is_valid:
        shared_logger.error(f"❌ Plan failed validation\n{validation}")
        return EXIT_REJECTED

    if args.json:
        print(plan_to_json(plan))
    else:
        PrintData(logger_manager).print_plan(
            plan, balances={a.account_id: a.balance for a in accounts}, color_output=sys.stdout.isatty()
        )

    if args.command == 'withdraw':
        receipt = planner.execute(plan, DryRunSink(logger_manager))
        print(receipt)
        return EXIT_OK if receipt.success else EXIT_REJECTED
    return EXIT_OK


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        validate_all_config(raise_on_error=True)
    except ConfigError as e:
        # Logging is configured from these values, so report on stderr only
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_REJECTED

    log_config = {"log_level": logging.DEBUG if args.verbose else env.log_level}
    logger_manager = LoggerManager(log_config, log_dir=str(env.log_dir))
    shared_logger = logger_manager.get_logger('shared_logger')

    try:
        return run(args, logger_manager)
    except (AllocationError, ConfigError) as e:
        shared_logger.error(f"❌ {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_REJECTED
    except OSError as e:
        shared_logger.error(f"❌ Could not read gotchis: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_REJECTED


if __name__ == "__main__":
    sys.exit(main())
