"""
Withdrawal Planner

Turns the withdrawal form's inputs (gotchis, a token choice and a decimal
amount) into a WithdrawalPlan for the escrow contract's batchTransferEscrow.
"""

from typing import List, Optional, Sequence

from Config import constants_core as core
from Config.validators import is_address
from Shared_Utils.logging_manager import LoggerManager
from Shared_Utils.precision import PrecisionUtils
from .allocator import ProportionalAllocator
from .exceptions import InsufficientBalance, InvalidInput
from .models import Aavegotchi, EscrowAccount, SubmissionReceipt, WithdrawalPlan
from .sinks import BalanceSource, SubmissionSink

NOT_ENOUGH_BALANCE_MESSAGE = (
    "Not enough balance in selected Aavegotchis to withdraw the total amount requested."
)


class WithdrawalPlanner:
    """
    Builds proportional withdrawal plans across a wallet's gotchis.

    Usage:
        planner = WithdrawalPlanner(logger_manager)
        plan = planner.build_plan(gotchis, "25.5", "ghst", 18, recipient)
        receipt = planner.execute(plan, sink)
    """

    def __init__(
        self,
        logger_manager: Optional[LoggerManager] = None,
        precision_utils: Optional[PrecisionUtils] = None,
        allocator: Optional[ProportionalAllocator] = None,
        ghst_contract_address: str = core.GHST_CONTRACT_ADDRESS,
        logger=None
    ):
        """
        Initialize the planner.

        Args:
            logger_manager: Logging manager (provides 'planner_logger')
            precision_utils: Fixed-point helpers, created when omitted
            allocator: Proportional allocator, created when omitted
            ghst_contract_address: Token address used for the "ghst" option
            logger: Explicit logger, takes precedence over logger_manager
        """
        if logger is None and logger_manager is not None:
            logger = logger_manager.get_logger('planner_logger')
        self.logger = logger
        self.precision = precision_utils or PrecisionUtils(logger_manager)
        self.allocator = allocator or ProportionalAllocator(logger_manager)
        self.ghst_contract_address = ghst_contract_address

    # =========================================================================
    # SELECTION
    # =========================================================================

    @staticmethod
    def owned_gotchis(gotchis: Sequence[Aavegotchi]) -> List[Aavegotchi]:
        """Lent gotchis are excluded; only their borrower may touch the escrow."""
        return [gotchi for gotchi in gotchis if not gotchi.is_lent]

    def select_gotchis(self, gotchis: Sequence[Aavegotchi], selection: str = core.SELECT_ALL) -> List[Aavegotchi]:
        """
        Pick the gotchis a withdrawal applies to.

        Args:
            gotchis: Every gotchi the wallet holds, lent or not
            selection: "all" for every owned gotchi, or a single token id

        Raises:
            InvalidInput: selection names a gotchi that is not owned
        """
        owned = self.owned_gotchis(gotchis)
        if selection is None or str(selection).lower() == core.SELECT_ALL:
            return owned

        selected = [gotchi for gotchi in owned if gotchi.token_id == str(selection)]
        if not selected:
            raise InvalidInput(f"Aavegotchi {selection} is not among the owned gotchis", field='selection')
        return selected

    @staticmethod
    def balance_of(gotchi: Aavegotchi, token_option: str) -> str:
        if token_option.lower() == core.TOKEN_OPTION_GHST:
            return gotchi.ghst_balance
        return gotchi.custom_token_balance or '0'

    def escrow_accounts(self, gotchis: Sequence[Aavegotchi], token_option: str, decimals: int) -> List[EscrowAccount]:
        accounts = []
        for gotchi in gotchis:
            if not gotchi.token_id.isdigit():
                raise InvalidInput(f"token id must be numeric, got {gotchi.token_id!r}", field='account_id')
            balance = self._parse_units(self.balance_of(gotchi, token_option), decimals, field='balance')
            accounts.append(EscrowAccount(account_id=gotchi.token_id, balance=balance))
        return accounts

    def _parse_units(self, value: str, decimals: int, field: str) -> int:
        try:
            return self.precision.parse_units(value, decimals)
        except ValueError as e:
            raise InvalidInput(str(e), field=field)

    def total_balance(self, gotchis: Sequence[Aavegotchi], token_option: str, decimals: int) -> int:
        return sum(account.balance for account in self.escrow_accounts(gotchis, token_option, decimals))

    def max_amount(
        self,
        gotchis: Sequence[Aavegotchi],
        token_option: str,
        decimals: int,
        selection: str = core.SELECT_ALL
    ) -> str:
        """Total withdrawable balance of the selection, as a decimal string."""
        selected = self.select_gotchis(gotchis, selection)
        total = self.total_balance(selected, token_option, decimals)
        try:
            formatted = self.precision.format_units(total, decimals)
        except ValueError as e:
            raise InvalidInput(str(e), field='decimals')
        self._log(
            'info',
            f"Max amount set: {formatted} for {len(selected)} Aavegotchi(s), "
            f"Token Option: {token_option}, Token Decimals: {decimals}"
        )
        return formatted

    def resolve_token_address(self, token_option: str, custom_token_address: Optional[str] = None) -> str:
        if token_option.lower() == core.TOKEN_OPTION_GHST:
            return self.ghst_contract_address
        if not custom_token_address:
            raise InvalidInput("a custom token address is required", field='token_address')
        if not is_address(custom_token_address):
            raise InvalidInput(f"not a valid address: {custom_token_address!r}", field='token_address')
        return custom_token_address

    # =========================================================================
    # PLANNING
    # =========================================================================

    def build_plan(
        self,
        gotchis: Sequence[Aavegotchi],
        amount: str,
        token_option: str,
        decimals: int,
        recipient: str,
        custom_token_address: Optional[str] = None,
        selection: str = core.SELECT_ALL
    ) -> WithdrawalPlan:
        """
        Split `amount` across the selected gotchis in proportion to their balances.

        Args:
            gotchis: Every gotchi the wallet holds
            amount: Decimal string in token units, e.g. "25.5"
            token_option: "ghst" or "custom"
            decimals: Token decimals
            recipient: Wallet receiving the withdrawal
            custom_token_address: Token address for the "custom" option
            selection: "all" or a single token id

        Returns:
            WithdrawalPlan ready for a SubmissionSink

        Raises:
            InvalidInput: bad amount, address, selection or nothing selected
            InsufficientBalance: amount exceeds the selection's total balance
        """
        token_address = self.resolve_token_address(token_option, custom_token_address)
        if not is_address(recipient):
            raise InvalidInput(f"not a valid address: {recipient!r}", field='recipient')

        selected = self.select_gotchis(gotchis, selection)
        total_amount = self._parse_units(amount, decimals, field='amount')

        if not selected:
            raise InvalidInput("No Aavegotchis selected")

        accounts = self.escrow_accounts(selected, token_option, decimals)
        available = sum(account.balance for account in accounts)
        if total_amount > available:
            raise InsufficientBalance(total_amount, available, NOT_ENOUGH_BALANCE_MESSAGE)

        result = self.allocator.allocate(accounts, total_amount, decimals)
        plan = WithdrawalPlan(
            token_address=token_address,
            recipient=recipient,
            decimals=decimals,
            allocations=list(result.allocations),
        )

        self._log('info', "Attempting batch withdrawal:")
        for allocation in plan.allocations:
            self._log(
                'info',
                f"Aavegotchi {allocation.account_id}: {self.precision.format_units(allocation.amount, decimals)}"
            )
        return plan

    def execute(self, plan: WithdrawalPlan, sink: SubmissionSink) -> SubmissionReceipt:
        """Hand a plan to the sink; sink errors propagate to the caller."""
        self._log('debug', f"📤 Submitting {plan}")
        receipt = sink.submit(plan)
        if receipt.success:
            self._log('info', f"✅ {receipt}")
        else:
            self._log('error', f"❌ {receipt}")
        return receipt

    def withdraw(
        self,
        source: BalanceSource,
        sink: SubmissionSink,
        amount: str,
        token_option: str,
        recipient: str,
        custom_token_address: Optional[str] = None,
        selection: str = core.SELECT_ALL
    ) -> SubmissionReceipt:
        """Fetch balances, plan and submit in one go."""
        token_address = self.resolve_token_address(token_option, custom_token_address)
        decimals = source.token_decimals(token_address)
        plan = self.build_plan(
            source.fetch_gotchis(), amount, token_option, decimals, recipient,
            custom_token_address=custom_token_address, selection=selection
        )
        return self.execute(plan, sink)

    def _log(self, level: str, message: str):
        if self.logger is not None:
            getattr(self.logger, level)(message)
