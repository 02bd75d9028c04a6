"""
Account snapshot models for financial projections.

Accounts are the external balance snapshot that seeds a projection. Only the
account TYPE matters to the engine; individual accounts of the same type are
pooled together.
"""

from typing import Dict, Iterable, List, Literal, Optional, Tuple

from pydantic import Field

from .base import CamelModel

AccountType = Literal[
    "401k",
    "traditional-ira",
    "roth-ira",
    "brokerage",
    "savings",
    "checking",
]
AccountStatus = Literal["active", "closed"]
AccountCategory = Literal["retirement", "investment", "cash"]

ACCOUNT_TYPES: Tuple[AccountType, ...] = (
    "401k",
    "traditional-ira",
    "roth-ira",
    "brokerage",
    "savings",
    "checking",
)

# Account types that earn the scenario's investment return
INVESTMENT_ACCOUNT_TYPES: Tuple[AccountType, ...] = (
    "401k",
    "traditional-ira",
    "roth-ira",
    "brokerage",
)
CASH_ACCOUNT_TYPES: Tuple[AccountType, ...] = ("savings", "checking")

ACCOUNT_TYPE_LABELS: Dict[str, str] = {
    "401k": "401(k)",
    "traditional-ira": "Traditional IRA",
    "roth-ira": "Roth IRA",
    "brokerage": "Brokerage",
    "savings": "Savings",
    "checking": "Checking",
}


class Account(CamelModel):
    """A single account balance snapshot."""

    id: Optional[str] = Field(None, description="Account identifier")
    account_type: AccountType = Field(..., description="Type of account")
    account_name: str = Field(..., min_length=1, description="Account name")
    institution: Optional[str] = Field(None, description="Bank or brokerage name")
    balance: float = Field(..., description="Balance as of the snapshot date")
    as_of_date: Optional[str] = Field(
        None, description="ISO date the balance was recorded"
    )
    status: AccountStatus = Field(default="active", description="Account status")
    notes: Optional[str] = Field(None, description="Free-form notes")


class AccountTypeTotal(CamelModel):
    """Count and total balance for one account type."""

    count: int = Field(default=0, ge=0, description="Number of active accounts")
    total: float = Field(default=0.0, description="Total active balance")


class AccountSummary(CamelModel):
    """Balances of active accounts grouped by category and type."""

    total_retirement: float = Field(default=0.0, description="401k and IRA total")
    total_investment: float = Field(default=0.0, description="Brokerage total")
    total_cash: float = Field(default=0.0, description="Savings and checking total")
    total_net_worth: float = Field(default=0.0, description="Sum of all categories")
    account_count: int = Field(default=0, ge=0, description="All accounts, any status")
    by_type: Dict[AccountType, AccountTypeTotal] = Field(
        default_factory=lambda: {t: AccountTypeTotal() for t in ACCOUNT_TYPES},
        description="Totals by account type",
    )


def empty_balances() -> Dict[str, float]:
    """Return a zeroed balance map with every account type present."""
    return {account_type: 0.0 for account_type in ACCOUNT_TYPES}


def get_account_type_label(account_type: str) -> str:
    """Get the display label for an account type."""
    return ACCOUNT_TYPE_LABELS[account_type]


def get_account_category(account_type: str) -> AccountCategory:
    """Categorize an account type as retirement, investment or cash."""
    if account_type in ("401k", "traditional-ira", "roth-ira"):
        return "retirement"
    if account_type == "brokerage":
        return "investment"
    return "cash"


def aggregate_accounts_by_type(accounts: Iterable[Account]) -> Dict[str, float]:
    """
    Pool active account balances by account type.

    Args:
        accounts: Account snapshots

    Returns:
        Mapping of every account type to its summed active balance
    """
    balances = empty_balances()
    for account in accounts:
        if account.status == "active":
            balances[account.account_type] += account.balance
    return balances


def calculate_account_summary(accounts: List[Account]) -> AccountSummary:
    """
    Summarize active accounts by category and type.

    Closed accounts count toward ``account_count`` but not toward any total.
    """
    summary = AccountSummary(account_count=len(accounts))

    for account in accounts:
        if account.status == "closed":
            continue

        category = get_account_category(account.account_type)
        if category == "retirement":
            summary.total_retirement += account.balance
        elif category == "investment":
            summary.total_investment += account.balance
        else:
            summary.total_cash += account.balance

        type_total = summary.by_type[account.account_type]
        type_total.count += 1
        type_total.total += account.balance

    summary.total_net_worth = (
        summary.total_retirement + summary.total_investment + summary.total_cash
    )
    return summary
