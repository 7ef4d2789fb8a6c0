"""
Tests for the withdrawal plan table.
"""

from Shared_Utils.print_data import ColorCodes, PrintData
from withdrawal_engine import WithdrawalAllocation, WithdrawalPlan

TOKEN = "0x385Eeac5cB85A38A9a07A70c73e0a3271CfB54A7"
RECIPIENT = "0x1111111111111111111111111111111111111111"


def _plan():
    return WithdrawalPlan(
        token_address=TOKEN,
        recipient=RECIPIENT,
        decimals=18,
        allocations=[
            WithdrawalAllocation("1001", 15 * 10**18),
            WithdrawalAllocation("1002", 333333333333333333),
        ],
    )


def test_plan_frame_with_shares():
    balances = {"1001": 30 * 10**18, "1002": 10 * 10**18}

    df = PrintData.plan_frame(_plan(), balances)

    assert list(df['gotchi']) == ["1001", "1002"]
    assert list(df['amount']) == ["15.0", "0.333333333333333333"]
    assert list(df['share %']) == [75.0, 25.0]


def test_plan_table_keeps_full_precision():
    table = PrintData().plan_table(_plan(), color_output=False)

    assert "0.333333333333333333" in table
    assert "0x385Eea..." in table
    assert "2 gotchi(s)" in table
    assert ColorCodes.RESET not in table


def test_plan_table_empty():
    plan = WithdrawalPlan(token_address=TOKEN, recipient=RECIPIENT, decimals=18)

    assert "(no gotchis selected)" in PrintData().plan_table(plan, color_output=False)
