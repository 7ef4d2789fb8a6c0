"""
Proportional Withdrawal Allocator

Splits a requested withdrawal across escrow accounts in proportion to
their balances, using integer arithmetic only.
"""

from typing import Iterable, List, Optional, Sequence

from Shared_Utils.logging_manager import LoggerManager
from .exceptions import AllocationInvariantError, InsufficientBalance, InvalidInput
from .models import AllocationRequest, AllocationResult, EscrowAccount, WithdrawalAllocation


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate(accounts: Sequence[EscrowAccount], requested_total: int, precision: int) -> int:
    """Check a request and return the aggregate balance."""
    if not _is_int(precision) or precision < 0:
        raise InvalidInput(f"must be a non-negative integer, got {precision!r}", field='precision')
    if not _is_int(requested_total) or requested_total < 0:
        raise InvalidInput(
            f"must be a non-negative integer, got {requested_total!r}", field='requested_total'
        )
    if not accounts:
        raise InvalidInput("No account to allocate to")

    seen = set()
    for account in accounts:
        account_id = account.account_id
        if account_id is None or account_id == '':
            raise InvalidInput(f"missing identifier on {account!r}", field='account_id')
        try:
            duplicate = account_id in seen
        except TypeError:
            raise InvalidInput(f"unhashable identifier {account_id!r}", field='account_id')
        if duplicate:
            raise InvalidInput(f"duplicate identifier {account_id!r}", field='account_id')
        seen.add(account_id)

        if not _is_int(account.balance) or account.balance < 0:
            raise InvalidInput(
                f"must be a non-negative integer, got {account.balance!r} for {account_id!r}",
                field='balance'
            )

    total_balance = sum(account.balance for account in accounts)
    if requested_total > total_balance:
        raise InsufficientBalance(requested_total, total_balance)
    return total_balance


def allocate(accounts: Iterable[EscrowAccount], requested_total: int, precision: int) -> AllocationResult:
    """
    Split ``requested_total`` across ``accounts`` proportionally to their balances.

    Each account first receives ``floor(balance * requested_total / total_balance)``
    (clamped to what is still unallocated). The truncation leftover, always
    smaller than the number of accounts, is then handed out one unit at a
    time in input order, so earlier accounts absorb the rounding. Accounts
    whose share divided exactly are skipped: they already hold their ideal
    amount, and a zero-balance account can never receive a unit.

    Args:
        accounts: Ordered escrow accounts; ids must be unique
        requested_total: Amount to withdraw, scaled by 10**precision
        precision: Number of decimal places of the fixed-point amounts

    Returns:
        AllocationResult with one allocation per account, in input order

    Raises:
        InvalidInput: empty account set, negative precision, malformed values or ids
        InsufficientBalance: requested_total exceeds the aggregate balance
    """
    accounts = list(accounts)
    total_balance = _validate(accounts, requested_total, precision)

    if total_balance == 0:
        # Only reachable with requested_total == 0
        amounts = [0] * len(accounts)
    else:
        amounts = []
        truncated = []  # indexes whose floor share dropped a fraction
        remaining = requested_total
        for index, account in enumerate(accounts):
            share, fraction = divmod(account.balance * requested_total, total_balance)
            if share > remaining:
                share = remaining
            if fraction:
                truncated.append(index)
            amounts.append(share)
            remaining -= share

        if remaining < 0 or remaining >= len(accounts) or remaining > len(truncated):
            raise AllocationInvariantError(remaining, len(accounts))

        for index in truncated[:remaining]:
            amounts[index] += 1

    return AllocationResult(
        allocations=[
            WithdrawalAllocation(account_id=account.account_id, amount=amount)
            for account, amount in zip(accounts, amounts)
        ],
        requested_total=requested_total,
        precision=precision,
    )


class ProportionalAllocator:
    """
    Logging front-end for :func:`allocate`.

    Usage:
        allocator = ProportionalAllocator(logger_manager)
        result = allocator.allocate_request(request)
    """

    def __init__(self, logger_manager: Optional[LoggerManager] = None, logger=None):
        """
        Initialize the allocator.

        Args:
            logger_manager: Logging manager (provides 'allocator_logger')
            logger: Explicit logger, takes precedence over logger_manager
        """
        if logger is None and logger_manager is not None:
            logger = logger_manager.get_logger('allocator_logger')
        self.logger = logger

    def allocate(self, accounts: Sequence[EscrowAccount], requested_total: int, precision: int) -> AllocationResult:
        accounts = list(accounts)
        self._debug(
            f"⚙️  Allocating {requested_total} across {len(accounts)} account(s) @ 1e-{precision}"
        )
        try:
            result = allocate(accounts, requested_total, precision)
        except InsufficientBalance as e:
            if self.logger is not None:
                self.logger.insufficient_funds(str(e))
            raise
        except InvalidInput as e:
            if self.logger is not None:
                self.logger.bad_request(str(e))
            raise

        for allocation in result:
            self._debug(f"   {allocation}")
        if self.logger is not None:
            self.logger.info(f"✅ {result}")
        return result

    def allocate_request(self, request: AllocationRequest) -> AllocationResult:
        return self.allocate(request.accounts, request.requested_total, request.precision)

    def _debug(self, message: str):
        if self.logger is not None:
            self.logger.debug(message)


def allocate_request(request: AllocationRequest) -> AllocationResult:
    return allocate(request.accounts, request.requested_total, request.precision)


__all__: List[str] = [
    'allocate',
    'allocate_request',
    'ProportionalAllocator',
]
