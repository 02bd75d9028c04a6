"""
Cash shortfall resolution for financial projections.

A year's deficit is funded from accounts in a fixed priority order, draining
each account type fully before touching the next. Anything left unfunded after
the last tier is charged to checking, which may go negative (overdraft).
"""

import logging
from typing import Dict, Sequence, Tuple

from pydantic import Field

from .accounts import AccountType, empty_balances
from .base import CamelModel

logger = logging.getLogger(__name__)

WITHDRAWAL_ORDER: Tuple[AccountType, ...] = (
    "checking",
    "savings",
    "brokerage",
    "traditional-ira",
    "401k",
    "roth-ira",
)
OVERDRAFT_ACCOUNT: AccountType = "checking"


class ShortfallResolution(CamelModel):
    """How a deficit was funded."""

    deficit: float = Field(..., ge=0, description="Amount that needed funding")
    withdrawn: float = Field(default=0.0, ge=0, description="Funded from balances")
    by_account_type: Dict[AccountType, float] = Field(
        default_factory=empty_balances, description="Withdrawals by account type"
    )
    overdraft: float = Field(
        default=0.0, ge=0, description="Unfunded amount charged to checking"
    )


def withdraw_up_to(
    balances: Dict[str, float], account_type: str, amount: float
) -> float:
    """
    Withdraw as much of ``amount`` as the account type's balance allows.

    Args:
        balances: Running balances by account type (mutated)
        account_type: Account type to draw from
        amount: Amount wanted

    Returns:
        Amount actually withdrawn
    """
    available = max(0.0, balances.get(account_type, 0.0))
    withdrawal = min(amount, available)
    if withdrawal > 0:
        balances[account_type] = balances.get(account_type, 0.0) - withdrawal
    return withdrawal


def cover_shortfall(
    balances: Dict[str, float],
    deficit: float,
    order: Sequence[str] = WITHDRAWAL_ORDER,
) -> ShortfallResolution:
    """
    Fund a deficit from account balances in priority order.

    Args:
        balances: Running balances by account type (mutated)
        deficit: Positive amount to fund
        order: Account types in the order they are drained

    Returns:
        ShortfallResolution describing what was drawn from where
    """
    resolution = ShortfallResolution(deficit=max(0.0, deficit))
    remaining = resolution.deficit

    for account_type in order:
        if remaining <= 0:
            break
        withdrawal = withdraw_up_to(balances, account_type, remaining)
        resolution.by_account_type[account_type] += withdrawal
        resolution.withdrawn += withdrawal
        remaining -= withdrawal

    if remaining > 0:
        balances[OVERDRAFT_ACCOUNT] = balances.get(OVERDRAFT_ACCOUNT, 0.0) - remaining
        resolution.overdraft = remaining
        logger.debug(f"Unfunded shortfall of {remaining:.2f} charged to checking")

    return resolution

