"""
Critical Path Tests: Proportional Withdrawal Allocation

Tests the allocator that splits a withdrawal across escrow balances.
Every unit allocated here is moved on-chain, so sums must be exact.

Priority: 🔴 CRITICAL (funds movement)
"""

import pytest

from conftest import generate_accounts
from withdrawal_engine import (
    AllocationRequest,
    EscrowAccount,
    InsufficientBalance,
    InvalidInput,
    ProportionalAllocator,
    allocate,
    allocate_request,
)


class TestProportionalSplit:
    """Test core allocation algorithm"""

    @pytest.mark.critical
    def test_exact_division(self, sample_accounts):
        """
        Given: A=300, B=100, C=100 and a request of 250
        Then: Shares divide exactly into 150, 50, 50
        """
        result = allocate(sample_accounts, 250, 0)

        assert result.as_dict() == {"A": 150, "B": 50, "C": 50}
        assert result.total_allocated == 250

    @pytest.mark.critical
    def test_rounding_leftover_goes_to_first_accounts(self, equal_accounts):
        """
        Given: A=1, B=1, C=1 and a request of 2
        Then: Floor shares are 0, 0, 0 and the leftover 2 goes to A then B
        """
        result = allocate(equal_accounts, 2, 0)

        assert result.amounts == [1, 1, 0]
        assert result.account_ids == ["A", "B", "C"]

    @pytest.mark.critical
    def test_output_keeps_input_order(self):
        accounts = [EscrowAccount("z", 5), EscrowAccount("a", 7), EscrowAccount("m", 3)]

        result = allocate(accounts, 10, 0)

        assert result.account_ids == ["z", "a", "m"]

    @pytest.mark.critical
    def test_full_withdrawal_returns_balances(self):
        """
        Given: Any balances
        When: Requested total equals the aggregate balance
        Then: Each account gives up exactly its balance
        """
        accounts = [EscrowAccount("1", 7), EscrowAccount("2", 13), EscrowAccount("3", 0), EscrowAccount("4", 1)]

        result = allocate(accounts, 21, 0)

        assert result.amounts == [7, 13, 0, 1]

    @pytest.mark.critical
    def test_zero_request_allocates_nothing(self, sample_accounts):
        result = allocate(sample_accounts, 0, 18)

        assert result.amounts == [0, 0, 0]

    @pytest.mark.critical
    def test_all_zero_balances_with_zero_request(self):
        accounts = [EscrowAccount("A", 0), EscrowAccount("B", 0)]

        result = allocate(accounts, 0, 18)

        assert result.amounts == [0, 0]

    @pytest.mark.critical
    def test_single_account_takes_everything(self):
        result = allocate([EscrowAccount("only", 10**18)], 123456789, 18)

        assert result.amounts == [123456789]

    @pytest.mark.critical
    def test_exactly_divided_account_skipped_for_leftover(self):
        """
        Given: A=2, B=1, C=1 and a request of 2
        Then: A's ideal share is exactly 1, B and C are 0.5 each
        And: The single leftover unit goes to B, the first truncated account
        """
        accounts = [EscrowAccount("A", 2), EscrowAccount("B", 1), EscrowAccount("C", 1)]

        result = allocate(accounts, 2, 0)

        assert result.amounts == [1, 1, 0]

    @pytest.mark.critical
    def test_zero_balance_account_never_receives_leftover(self):
        """
        Given: A=0 listed first, B=1, C=1 and a request of 1
        Then: A stays at 0 and B takes the leftover unit
        """
        accounts = [EscrowAccount("A", 0), EscrowAccount("B", 1), EscrowAccount("C", 1)]

        result = allocate(accounts, 1, 0)

        assert result.amounts == [0, 1, 0]

    @pytest.mark.critical
    def test_wei_scale_balances(self):
        """
        Given: 18-decimal balances of 1, 2 and 3 GHST
        When: Withdrawing 1 GHST
        Then: Shares are 1/6, 2/6, 3/6 GHST with the wei leftover on the first account
        """
        one = 10**18
        accounts = [EscrowAccount("1", one), EscrowAccount("2", 2 * one), EscrowAccount("3", 3 * one)]

        result = allocate(accounts, one, 18)

        assert result.amounts == [166666666666666667, 333333333333333333, 500000000000000000]
        assert sum(result.amounts) == one

    @pytest.mark.critical
    def test_accepts_request_object_and_iterables(self, sample_accounts):
        request = AllocationRequest(accounts=sample_accounts, requested_total=250, precision=0)

        assert allocate_request(request).amounts == [150, 50, 50]
        assert allocate(iter(sample_accounts), 250, 0).amounts == [150, 50, 50]
        assert request.total_balance == 500


class TestAllocationRejections:
    """Test validation performed before any allocation work"""

    @pytest.mark.critical
    def test_empty_accounts(self):
        with pytest.raises(InvalidInput):
            allocate([], 0, 0)

    @pytest.mark.critical
    def test_request_exceeds_balance(self, sample_accounts):
        with pytest.raises(InsufficientBalance) as exc_info:
            allocate(sample_accounts, 501, 0)

        assert exc_info.value.requested == 501
        assert exc_info.value.available == 500

    @pytest.mark.critical
    def test_positive_request_against_zero_balances(self):
        with pytest.raises(InsufficientBalance):
            allocate([EscrowAccount("A", 0), EscrowAccount("B", 0)], 1, 0)

    @pytest.mark.critical
    @pytest.mark.parametrize("precision", [-1, 1.5, "18", None, True])
    def test_bad_precision(self, sample_accounts, precision):
        with pytest.raises(InvalidInput):
            allocate(sample_accounts, 10, precision)

    @pytest.mark.critical
    @pytest.mark.parametrize("requested", [-1, 2.5, "10", None])
    def test_bad_requested_total(self, sample_accounts, requested):
        with pytest.raises(InvalidInput):
            allocate(sample_accounts, requested, 0)

    @pytest.mark.critical
    @pytest.mark.parametrize("balance", [-5, 1.0, "100"])
    def test_bad_balance(self, balance):
        with pytest.raises(InvalidInput):
            allocate([EscrowAccount("A", 10), EscrowAccount("B", balance)], 1, 0)

    @pytest.mark.critical
    @pytest.mark.parametrize("account_id", [None, ""])
    def test_missing_identifier(self, account_id):
        with pytest.raises(InvalidInput):
            allocate([EscrowAccount(account_id, 10)], 1, 0)

    @pytest.mark.critical
    def test_unhashable_identifier(self):
        with pytest.raises(InvalidInput):
            allocate([EscrowAccount(["not", "hashable"], 10)], 1, 0)

    @pytest.mark.critical
    def test_duplicate_identifier(self):
        with pytest.raises(InvalidInput):
            allocate([EscrowAccount("A", 10), EscrowAccount("A", 5)], 1, 0)


class TestAllocationProperties:
    """Properties that must hold for every valid request"""

    @pytest.mark.critical
    @pytest.mark.parametrize("seed", range(25))
    def test_properties_on_random_inputs(self, seed):
        """
        Given: Random accounts (some empty) and a random feasible request
        Then: Sum is exact, each amount is within [0, balance]
        And: Each amount is less than one unit away from its ideal share
        """
        accounts = generate_accounts(count=1 + seed % 9, max_balance=10**21, seed=seed, zero_ratio=0.2)
        total_balance = sum(a.balance for a in accounts)
        requested = (total_balance * (seed + 1)) // 26

        result = allocate(accounts, requested, 18)

        assert sum(result.amounts) == requested
        for account, amount in zip(accounts, result.amounts):
            assert 0 <= amount <= account.balance
            if total_balance:
                # |amount - b*T/B| < 1, compared in integers
                assert abs(amount * total_balance - account.balance * requested) < total_balance

    @pytest.mark.critical
    def test_deterministic(self):
        accounts = generate_accounts(count=7, seed=42)
        total = sum(a.balance for a in accounts) // 3

        first = allocate(accounts, total, 18)
        second = allocate(list(accounts), total, 18)

        assert first.amounts == second.amounts

    @pytest.mark.critical
    def test_inputs_not_mutated(self, sample_accounts):
        before = list(sample_accounts)

        allocate(sample_accounts, 250, 0)

        assert sample_accounts == before


class TestProportionalAllocatorLogging:
    """Test the logging front-end"""

    def test_logs_result(self, sample_accounts, mock_logger):
        allocator = ProportionalAllocator(logger=mock_logger)

        result = allocator.allocate(sample_accounts, 250, 0)

        assert result.amounts == [150, 50, 50]
        mock_logger.info.assert_called_once()

    def test_logs_insufficient_funds_and_reraises(self, sample_accounts, mock_logger):
        allocator = ProportionalAllocator(logger=mock_logger)

        with pytest.raises(InsufficientBalance):
            allocator.allocate(sample_accounts, 10_000, 0)

        mock_logger.insufficient_funds.assert_called_once()
        mock_logger.info.assert_not_called()

    def test_logs_bad_request_and_reraises(self, mock_logger):
        allocator = ProportionalAllocator(logger=mock_logger)

        with pytest.raises(InvalidInput):
            allocator.allocate([], 0, 0)

        mock_logger.bad_request.assert_called_once()

    def test_works_without_logger(self, sample_accounts):
        assert ProportionalAllocator().allocate(sample_accounts, 250, 0).amounts == [150, 50, 50]
