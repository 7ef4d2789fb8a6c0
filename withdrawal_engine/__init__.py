"""
Proportional Withdrawal Engine

Splits a withdrawal across per-gotchi escrow balances and turns the result
into a batch transfer plan.

Key Components:
- allocate / ProportionalAllocator: Exact fixed-point proportional split
- AllocationValidator: Validates allocation invariants
- WithdrawalPlanner: Gotchi selection, token choice, plan building
- Models: Data structures for accounts, allocations and plans

Architecture:
- Balances come in from a BalanceSource, plans go out to a SubmissionSink
- The allocator is pure: integers in, integers out, no I/O
- Any leftover from floor division goes to the earliest-listed accounts

Usage:
    from withdrawal_engine import EscrowAccount, allocate

    result = allocate([EscrowAccount('A', 300), EscrowAccount('B', 100)], 200, 0)
"""

from .allocator import ProportionalAllocator, allocate, allocate_request
from .exceptions import AllocationError, AllocationInvariantError, InsufficientBalance, InvalidInput
from .models import (
    Aavegotchi,
    AllocationRequest,
    AllocationResult,
    EscrowAccount,
    SubmissionReceipt,
    ValidationResult,
    WithdrawalAllocation,
    WithdrawalPlan,
)
from .planner import WithdrawalPlanner
from .sinks import BalanceSource, DryRunSink, JsonFileBalanceSource, SubmissionSink
from .validator import AllocationValidator

__all__ = [
    'allocate',
    'allocate_request',
    'ProportionalAllocator',
    'AllocationValidator',
    'WithdrawalPlanner',
    'AllocationError',
    'AllocationInvariantError',
    'InsufficientBalance',
    'InvalidInput',
    'Aavegotchi',
    'AllocationRequest',
    'AllocationResult',
    'EscrowAccount',
    'SubmissionReceipt',
    'ValidationResult',
    'WithdrawalAllocation',
    'WithdrawalPlan',
    'BalanceSource',
    'DryRunSink',
    'JsonFileBalanceSource',
    'SubmissionSink',
]

__version__ = '1.0.0'
