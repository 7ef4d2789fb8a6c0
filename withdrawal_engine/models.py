"""
Data models for the withdrawal allocation engine.

Defines core data structures used throughout the allocation system.
Amounts are plain ints scaled by 10**precision; human-readable decimal
strings only appear on Aavegotchi records coming from the balance source.
"""

from dataclasses import dataclass, field
from typing import Hashable, List, Optional

from .exceptions import InvalidInput


@dataclass(frozen=True)
class EscrowAccount:
    """
    An escrow sub-balance addressable independently of the owning wallet.

    The balance is a fixed-point integer scaled by 10**precision.
    """

    account_id: Hashable
    balance: int

    def __str__(self) -> str:
        return f"EscrowAccount({self.account_id}: {self.balance})"


@dataclass(frozen=True)
class AllocationRequest:
    """A requested total to split across an ordered set of escrow accounts."""

    accounts: List[EscrowAccount]
    requested_total: int
    precision: int

    @property
    def total_balance(self) -> int:
        return sum(account.balance for account in self.accounts)


@dataclass(frozen=True)
class WithdrawalAllocation:
    """How much to withdraw from a single escrow account."""

    account_id: Hashable
    amount: int

    def __str__(self) -> str:
        return f"Allocation({self.account_id} → {self.amount})"


@dataclass
class AllocationResult:
    """
    Result of a proportional allocation.

    Holds one allocation per input account, in input order.
    """

    allocations: List[WithdrawalAllocation]
    requested_total: int
    precision: int

    @property
    def amounts(self) -> List[int]:
        return [allocation.amount for allocation in self.allocations]

    @property
    def account_ids(self) -> List[Hashable]:
        return [allocation.account_id for allocation in self.allocations]

    @property
    def total_allocated(self) -> int:
        return sum(self.amounts)

    def as_dict(self) -> dict:
        return {allocation.account_id: allocation.amount for allocation in self.allocations}

    def __len__(self) -> int:
        return len(self.allocations)

    def __iter__(self):
        return iter(self.allocations)

    def __str__(self) -> str:
        return (
            f"AllocationResult({len(self.allocations)} accounts, "
            f"total {self.total_allocated} @ 1e-{self.precision})"
        )


@dataclass
class Aavegotchi:
    """
    A gotchi as reported by the balance source.

    Balances are decimal strings in token units (e.g. "12.5"), not wei.
    Lent gotchis cannot be withdrawn from by the owner.
    """

    token_id: str
    name: str
    escrow_wallet: str
    ghst_balance: str
    custom_token_balance: Optional[str] = None
    is_lent: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> 'Aavegotchi':
        """Build from the camelCase payload the subgraph/dashboard uses."""
        is_lent = data.get('isLent', False)
        if not isinstance(is_lent, bool):
            raise InvalidInput(f"isLent must be true or false, got {is_lent!r}", field='isLent')
        return cls(
            token_id=str(data['tokenId']),
            name=data.get('name') or '',
            escrow_wallet=data.get('escrowWallet') or '',
            ghst_balance=str(data.get('ghstBalance') or '0'),
            custom_token_balance=(
                str(data['customTokenBalance'])
                if data.get('customTokenBalance') is not None else None
            ),
            is_lent=is_lent,
        )

    @property
    def display_name(self) -> str:
        return self.name or f"Aavegotchi #{self.token_id}"

    def __str__(self) -> str:
        lent = " (lent)" if self.is_lent else ""
        return f"Aavegotchi({self.display_name}{lent}: {self.ghst_balance} GHST)"


@dataclass
class WithdrawalPlan:
    """
    A finalized withdrawal, ready for the submission sink.

    Mirrors the argument layout of the escrow contract's
    batchTransferEscrow(tokenIds, tokenAddresses, recipients, amounts).
    """

    token_address: str
    recipient: str
    decimals: int
    allocations: List[WithdrawalAllocation] = field(default_factory=list)

    @property
    def token_ids(self) -> List[int]:
        return [int(allocation.account_id) for allocation in self.allocations]

    @property
    def token_addresses(self) -> List[str]:
        return [self.token_address for _ in self.allocations]

    @property
    def recipients(self) -> List[str]:
        return [self.recipient for _ in self.allocations]

    @property
    def amounts(self) -> List[int]:
        return [allocation.amount for allocation in self.allocations]

    @property
    def total_amount(self) -> int:
        return sum(self.amounts)

    def batch_transfer_args(self) -> tuple:
        """Return the four parallel arrays in contract argument order."""
        return self.token_ids, self.token_addresses, self.recipients, self.amounts

    def __str__(self) -> str:
        return (
            f"WithdrawalPlan({len(self.allocations)} gotchi(s), "
            f"total {self.total_amount} of {self.token_address} → {self.recipient})"
        )


@dataclass
class SubmissionReceipt:
    """What a submission sink reports back after executing a plan."""

    success: bool
    plan: WithdrawalPlan
    reference: Optional[str] = None
    error_message: Optional[str] = None

    def __str__(self) -> str:
        if self.success:
            return f"SubmissionReceipt(✅ {self.reference or 'submitted'})"
        return f"SubmissionReceipt(❌ {self.error_message})"


@dataclass
class ValidationResult:
    """
    Result of allocation validation.

    Contains validation checks and any discrepancies found.
    """

    is_valid: bool
    requested_total: int = 0

    # Validation checks
    total_accounts: int = 0
    total_allocated: int = 0

    # Discrepancies
    over_allocated_accounts: int = 0
    negative_allocations: int = 0
    proportionality_violations: int = 0

    # Error details
    error_messages: List[str] = None
    warnings: List[str] = None

    def __post_init__(self):
        """Initialize default values."""
        if self.error_messages is None:
            self.error_messages = []
        if self.warnings is None:
            self.warnings = []

    @property
    def has_errors(self) -> bool:
        """Check if validation found errors."""
        return not self.is_valid or len(self.error_messages) > 0

    @property
    def has_warnings(self) -> bool:
        """Check if validation found warnings."""
        return len(self.warnings) > 0

    @property
    def has_discrepancies(self) -> bool:
        """Check if validation found any discrepancies."""
        return (
            self.over_allocated_accounts > 0 or
            self.negative_allocations > 0 or
            self.proportionality_violations > 0 or
            self.total_allocated != self.requested_total
        )

    def add_error(self, message: str):
        """Add an error message."""
        self.error_messages.append(message)
        self.is_valid = False

    def add_warning(self, message: str):
        """Add a warning message."""
        self.warnings.append(message)

    def __str__(self) -> str:
        """Human-readable representation."""
        status = "✅ VALID" if self.is_valid else "❌ INVALID"

        parts = [
            f"ValidationResult({status})",
            f"  Accounts: {self.total_accounts}",
            f"  Allocated: {self.total_allocated} / {self.requested_total}",
        ]

        if self.has_discrepancies:
            parts.append("  ⚠️  Discrepancies found:")
            if self.over_allocated_accounts > 0:
                parts.append(f"    - Over-allocated accounts: {self.over_allocated_accounts}")
            if self.negative_allocations > 0:
                parts.append(f"    - Negative allocations: {self.negative_allocations}")
            if self.proportionality_violations > 0:
                parts.append(f"    - Proportionality violations: {self.proportionality_violations}")

        if self.has_errors:
            parts.append(f"  ❌ Errors: {len(self.error_messages)}")
            for err in self.error_messages[:3]:  # Show first 3
                parts.append(f"    - {err}")

        if self.has_warnings:
            parts.append(f"  ⚠️  Warnings: {len(self.warnings)}")
            for warn in self.warnings[:3]:
                parts.append(f"    - {warn}")

        return "\n".join(parts)
