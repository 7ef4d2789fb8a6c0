"""
Collaborator interfaces for the withdrawal planner.

A BalanceSource supplies gotchis with their escrow balances and the token's
decimals; a SubmissionSink executes a finalized WithdrawalPlan. Wallet
signing and on-chain submission live behind these interfaces.
"""

import json
import uuid
from pathlib import Path
from typing import List, Optional, Protocol, Union, runtime_checkable

from Shared_Utils.precision import PrecisionUtils
from .exceptions import InvalidInput
from .models import Aavegotchi, SubmissionReceipt, WithdrawalPlan


@runtime_checkable
class BalanceSource(Protocol):
    def fetch_gotchis(self) -> List[Aavegotchi]:
        ...

    def token_decimals(self, token_address: str) -> int:
        ...


@runtime_checkable
class SubmissionSink(Protocol):
    def submit(self, plan: WithdrawalPlan) -> SubmissionReceipt:
        ...


class JsonFileBalanceSource:
    """
    Reads gotchi records from a JSON file.

    The file holds a list of objects shaped like the dashboard payload:
    {"tokenId": "1234", "name": "...", "escrowWallet": "0x...",
     "ghstBalance": "12.5", "customTokenBalance": "3", "isLent": false}
    """

    def __init__(self, path: Union[str, Path], decimals: int):
        self.path = Path(path)
        self.decimals = decimals

    def fetch_gotchis(self) -> List[Aavegotchi]:
        with open(self.path, 'r', encoding='utf-8') as f:
            try:
                payload = json.load(f)
            except ValueError as e:
                # JSONDecodeError and UnicodeDecodeError both land here
                raise InvalidInput(f"{self.path} is not a readable JSON file: {e}", field='gotchis')
        if not isinstance(payload, list):
            raise InvalidInput(f"{self.path} must contain a JSON list of gotchis", field='gotchis')
        try:
            return [Aavegotchi.from_dict(item) for item in payload]
        except (KeyError, TypeError, AttributeError) as e:
            raise InvalidInput(f"malformed gotchi record in {self.path}: {e}", field='gotchis')

    def token_decimals(self, token_address: str) -> int:
        return self.decimals


class DryRunSink:
    """Logs the batchTransferEscrow call a plan would make, without sending it."""

    def __init__(self, logger_manager=None, logger=None):
        if logger is None and logger_manager is not None:
            logger = logger_manager.get_logger('planner_logger')
        self.logger = logger
        self.submitted: List[WithdrawalPlan] = []

    def submit(self, plan: WithdrawalPlan) -> SubmissionReceipt:
        self.submitted.append(plan)
        reference = f"dry-run-{uuid.uuid4().hex[:12]}"

        if self.logger is not None:
            self.logger.plan_sent(f"🧪 Dry run {reference}: batch withdrawal of {len(plan.allocations)} gotchi(s)")
            for allocation in plan.allocations:
                self.logger.withdrawal(
                    f"Aavegotchi {allocation.account_id}: "
                    f"{PrecisionUtils.format_units(allocation.amount, plan.decimals)}"
                )

        return SubmissionReceipt(success=True, plan=plan, reference=reference)

    @property
    def last_plan(self) -> Optional[WithdrawalPlan]:
        return self.submitted[-1] if self.submitted else None
