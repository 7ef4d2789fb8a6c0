from typing import Optional

import pandas as pd
from tabulate import tabulate

from Shared_Utils.formatting import format_address
from Shared_Utils.precision import PrecisionUtils


class ColorCodes:
    RESET = "\033[0m"

    CYAN = "\033[36m"

    # Styles
    BOLD = "\033[1m"

    @staticmethod
    def format(text: str, color: str) -> str:
        return f"{color}{text}{ColorCodes.RESET}"


class PrintData:
    def __init__(self, logger_manager=None):
        self.logger = logger_manager.get_logger('shared_logger') if logger_manager else None

    @staticmethod
    def plan_frame(plan, balances: Optional[dict] = None) -> pd.DataFrame:
        """
        One row per gotchi in plan order.

        `balances` maps token id -> raw balance; when given, the frame also
        shows each gotchi's share of the selection.
        """
        rows = []
        total_balance = sum(balances.values()) if balances else 0
        for allocation in plan.allocations:
            row = {
                'gotchi': allocation.account_id,
                'amount': PrecisionUtils.format_units(allocation.amount, plan.decimals),
                'raw amount': allocation.amount,
            }
            if balances is not None:
                balance = balances.get(allocation.account_id, 0)
                row['balance'] = PrecisionUtils.format_units(balance, plan.decimals)
                row['share %'] = round(100 * balance / total_balance, 2) if total_balance else 0.0
            rows.append(row)
        return pd.DataFrame(rows)

    def plan_table(self, plan, balances: Optional[dict] = None, color_output: bool = True) -> str:
        """Render a withdrawal plan as a console table with a header and totals line."""
        df = self.plan_frame(plan, balances)
        header = (
            f"Withdraw {PrecisionUtils.format_units(plan.total_amount, plan.decimals)} "
            f"of {format_address(plan.token_address)} → {format_address(plan.recipient)}"
        )
        if color_output:
            header = ColorCodes.format(header, ColorCodes.BOLD)

        if df.empty:
            return f"{header}\n(no gotchis selected)"

        table = tabulate(df, headers='keys', tablefmt='fancy_outline', showindex=False,
                         disable_numparse=True)
        footer = f"{len(df)} gotchi(s)"
        if color_output:
            footer = ColorCodes.format(footer, ColorCodes.CYAN)
        return f"{header}\n{table}\n{footer}"

    def print_plan(self, plan, balances: Optional[dict] = None, color_output: bool = True):
        print(self.plan_table(plan, balances, color_output=color_output))
        if self.logger:
            self.logger.debug(f"Printed {plan}")
