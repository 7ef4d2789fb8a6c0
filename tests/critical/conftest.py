"""
Critical Path Test Fixtures

Shared fixtures for money-critical path testing.
These fixtures provide minimal, fast setup for critical tests.
"""

import random

import pytest
from unittest.mock import MagicMock

from withdrawal_engine import Aavegotchi, EscrowAccount


RECIPIENT = "0x1111111111111111111111111111111111111111"
CUSTOM_TOKEN = "0x2222222222222222222222222222222222222222"


@pytest.fixture
def recipient():
    return RECIPIENT


@pytest.fixture
def custom_token():
    return CUSTOM_TOKEN


@pytest.fixture
def sample_accounts():
    """Three accounts whose balances divide 250 exactly (150/50/50)"""
    return [
        EscrowAccount("A", 300),
        EscrowAccount("B", 100),
        EscrowAccount("C", 100),
    ]


@pytest.fixture
def equal_accounts():
    """Three equal single-unit accounts that force a rounding leftover"""
    return [
        EscrowAccount("A", 1),
        EscrowAccount("B", 1),
        EscrowAccount("C", 1),
    ]


@pytest.fixture
def sample_gotchis():
    """Wallet with two owned gotchis and one lent out"""
    return [
        Aavegotchi(token_id="1001", name="Gotchi One", escrow_wallet="0xaaa",
                   ghst_balance="30", custom_token_balance="1.5"),
        Aavegotchi(token_id="1002", name="", escrow_wallet="0xbbb",
                   ghst_balance="10", custom_token_balance=None),
        Aavegotchi(token_id="1003", name="Rented", escrow_wallet="0xccc",
                   ghst_balance="500", custom_token_balance="7", is_lent=True),
    ]


@pytest.fixture
def mock_logger():
    """Mock logger"""
    logger = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.debug = MagicMock()
    return logger


@pytest.fixture
def mock_sink():
    """Submission sink that accepts every plan"""
    from withdrawal_engine import SubmissionReceipt

    sink = MagicMock()
    sink.submit = MagicMock(side_effect=lambda plan: SubmissionReceipt(success=True, plan=plan, reference="0xabc"))
    return sink


# Test data generators
def generate_accounts(count=5, max_balance=10**20, seed=None, zero_ratio=0.0):
    """Random escrow accounts; some balances can be forced to zero"""
    rng = random.Random(seed)
    accounts = []
    for i in range(count):
        balance = 0 if rng.random() < zero_ratio else rng.randint(1, max_balance)
        accounts.append(EscrowAccount(f"gotchi-{i:03d}", balance))
    return accounts
