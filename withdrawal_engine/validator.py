"""
Allocation Validator

Validates proportional allocation invariants and detects discrepancies.
"""

from typing import Optional, Sequence

from Shared_Utils.logging_manager import LoggerManager
from .models import AllocationResult, EscrowAccount, ValidationResult


class AllocationValidator:
    """
    Validates a proportional allocation against the accounts it was computed from.

    Checks:
    - One allocation per account, in input order
    - Allocations sum exactly to the requested total
    - No negative allocation, no allocation above the account balance
    - Each allocation within one unit of its ideal proportional share
    - Zero-balance accounts receive nothing (warning)
    """

    def __init__(self, logger_manager: Optional[LoggerManager] = None, logger=None):
        """
        Initialize Allocation Validator.

        Args:
            logger_manager: Logging manager
            logger: Explicit logger, takes precedence over logger_manager
        """
        if logger is None and logger_manager is not None:
            logger = logger_manager.get_logger('allocator_logger')
        self.logger = logger

    def validate(
        self,
        accounts: Sequence[EscrowAccount],
        result: AllocationResult,
        strict: bool = True
    ) -> ValidationResult:
        """
        Validate an allocation result.

        Args:
            accounts: The accounts passed to the allocator
            result: What the allocator returned
            strict: If True, treat warnings as errors

        Returns:
            ValidationResult with validation details
        """
        validation = ValidationResult(
            is_valid=True,
            requested_total=result.requested_total,
            total_accounts=len(accounts),
            total_allocated=result.total_allocated,
        )

        try:
            self._check_alignment(accounts, result, validation)
            self._check_exact_sum(result, validation)
            self._check_bounds(accounts, result, validation)
            self._check_proportionality(accounts, result, validation)
            self._check_zero_balances(accounts, result, validation)
        except Exception as e:
            self._log('error', f"❌ Validation failed with exception: {e}", exc_info=True)
            validation.add_error(f"Validation exception: {e}")
            return validation

        if validation.has_errors:
            validation.is_valid = False
            self._log('error', f"❌ Validation FAILED\n{validation}")
        elif validation.has_warnings and strict:
            validation.is_valid = False
            self._log('warning', f"⚠️  Validation FAILED (strict mode)\n{validation}")
        else:
            self._log('debug', "✅ Validation PASSED")

        return validation

    # =========================================================================
    # VALIDATION CHECKS
    # =========================================================================

    @staticmethod
    def _check_alignment(accounts, result: AllocationResult, validation: ValidationResult):
        """Check that allocations line up one-to-one with the accounts."""
        if len(result.allocations) != len(accounts):
            validation.add_error(
                f"Expected {len(accounts)} allocations, got {len(result.allocations)}"
            )
            return
        for position, (account, allocation) in enumerate(zip(accounts, result.allocations)):
            if account.account_id != allocation.account_id:
                validation.add_error(
                    f"Position {position}: expected {account.account_id!r}, "
                    f"got {allocation.account_id!r}"
                )

    @staticmethod
    def _check_exact_sum(result: AllocationResult, validation: ValidationResult):
        if result.total_allocated != result.requested_total:
            validation.add_error(
                f"Allocated {result.total_allocated}, requested {result.requested_total}"
            )

    @staticmethod
    def _check_bounds(accounts, result: AllocationResult, validation: ValidationResult):
        for account, allocation in zip(accounts, result.allocations):
            if allocation.amount < 0:
                validation.negative_allocations += 1
                validation.add_error(f"{account.account_id!r}: negative amount {allocation.amount}")
            elif allocation.amount > account.balance:
                validation.over_allocated_accounts += 1
                validation.add_error(
                    f"{account.account_id!r}: amount {allocation.amount} exceeds balance {account.balance}"
                )

    @staticmethod
    def _check_proportionality(accounts, result: AllocationResult, validation: ValidationResult):
        """Each amount must be strictly within one unit of balance * total / aggregate."""
        total_balance = sum(account.balance for account in accounts)
        if total_balance == 0:
            return
        for account, allocation in zip(accounts, result.allocations):
            # |amount - b*T/B| < 1  <=>  |amount*B - b*T| < B
            deviation = abs(allocation.amount * total_balance - account.balance * result.requested_total)
            if deviation >= total_balance:
                validation.proportionality_violations += 1
                validation.add_error(
                    f"{account.account_id!r}: amount {allocation.amount} is a full unit or more "
                    f"away from its proportional share"
                )

    @staticmethod
    def _check_zero_balances(accounts, result: AllocationResult, validation: ValidationResult):
        for account, allocation in zip(accounts, result.allocations):
            if account.balance == 0 and allocation.amount != 0:
                validation.add_warning(f"{account.account_id!r}: zero-balance account received {allocation.amount}")

    def _log(self, level: str, message: str, **kwargs):
        if self.logger is not None:
            getattr(self.logger, level)(message, **kwargs)
