"""
Scenario projection result models.

One AnnualProjection is emitted per simulated calendar year. Records are
frozen once emitted; the ScenarioProjection bundles them with the run summary
and any years that were skipped because no assumption bucket covered them.

All monetary values are unrounded floats in each year's own dollars.
"""

from typing import Dict, List, Optional

from pydantic import ConfigDict, Field, computed_field

from .accounts import AccountType, empty_balances
from .base import CamelModel
from .mortgage_amortization import AnnualMortgagePayment


class FrozenModel(CamelModel):
    model_config = ConfigDict(frozen=True)


class IncomeBreakdown(FrozenModel):
    """Income for one year."""

    employment: float = Field(default=0.0, description="Income-inflated salary")
    social_security: float = Field(default=0.0, description="Inflated benefit")
    lump_sum: float = Field(default=0.0, description="Lump-sum income, not inflated")
    mandatory_withdrawal: float = Field(
        default=0.0, description="Forced withdrawal from tax-deferred accounts"
    )
    reported: float = Field(
        default=0.0,
        description="Employment + Social Security + lump-sum + mandatory withdrawal",
    )
    withdrawals: float = Field(
        default=0.0, description="Funded from account balances to cover a deficit"
    )
    investment_gains: float = Field(
        default=0.0, description="Growth credited to investment accounts"
    )
    total: float = Field(
        default=0.0, description="Reported income; excludes waterfall withdrawals"
    )


class SpendingBreakdown(FrozenModel):
    """Spending for one year."""

    living: float = Field(default=0.0, description="Inflated living expenses")
    travel: float = Field(default=0.0, description="Inflated travel budget")
    healthcare: float = Field(default=0.0, description="Inflated healthcare costs")
    lump_sum: float = Field(default=0.0, description="Lump-sum expenses, not inflated")
    mortgages: float = Field(default=0.0, description="All mortgage payments")
    total: float = Field(default=0.0, description="Sum of all spending")


class MortgagePaymentSummary(FrozenModel):
    """Mortgage payments for one year across all mortgages."""

    principal: float = Field(default=0.0, description="Scheduled principal")
    interest: float = Field(default=0.0, description="Interest paid")
    escrow: float = Field(default=0.0, description="Escrow paid")
    additional_principal: float = Field(default=0.0, description="Extra principal")
    total: float = Field(default=0.0, description="Total mortgage payments")
    by_mortgage: List[AnnualMortgagePayment] = Field(
        default_factory=list, description="Breakdown by mortgage"
    )


class ContributionBreakdown(FrozenModel):
    """Contributions for one year by account type."""

    total: float = Field(default=0.0, description="Total contributions")
    by_account_type: Dict[AccountType, float] = Field(
        default_factory=empty_balances, description="Contributions by account type"
    )


class AccountBalances(FrozenModel):
    """Ending balances for one year by account type."""

    by_account_type: Dict[AccountType, float] = Field(
        default_factory=empty_balances, description="Balances by account type"
    )

    @computed_field  # type: ignore[misc]
    @property
    def total(self) -> float:
        return sum(self.by_account_type.values())


class AnnualProjection(FrozenModel):
    """Projected finances for one calendar year."""

    year: int = Field(..., description="Calendar year")
    age: int = Field(..., description="Subject's age during the year")
    income: IncomeBreakdown = Field(..., description="Income breakdown")
    spending: SpendingBreakdown = Field(..., description="Spending breakdown")
    mortgage_payments: MortgagePaymentSummary = Field(
        ..., description="Mortgage payment breakdown"
    )
    contributions: ContributionBreakdown = Field(
        ..., description="Contribution breakdown"
    )
    withdrawals_by_account_type: Dict[AccountType, float] = Field(
        default_factory=empty_balances,
        description="Shortfall withdrawals by account type",
    )
    shortfall: float = Field(
        default=0.0, description="Deficit left unfunded and charged to checking"
    )
    net_before_withdrawals: float = Field(
        ..., description="Reported income - spending - contributions"
    )
    net_income: float = Field(
        ..., description="Net after shortfall withdrawals (negative = overdraft)"
    )
    account_balances: AccountBalances = Field(..., description="Ending balances")


class NoApplicableBucket(FrozenModel):
    """A simulated year skipped because no assumption bucket covers the age."""

    year: int = Field(..., description="Calendar year that was skipped")
    age: int = Field(..., description="Age not covered by any bucket")


class ProjectionSummary(CamelModel):
    """Headline statistics of a projection run."""

    start_year: int = Field(..., description="First requested year")
    end_year: int = Field(..., description="Last requested year")
    total_income: float = Field(default=0.0, description="Sum of yearly income")
    total_spending: float = Field(default=0.0, description="Sum of yearly spending")
    total_contributions: float = Field(
        default=0.0, description="Sum of yearly contributions"
    )
    final_net_worth: float = Field(
        default=0.0, description="Total balance at the end of the last year"
    )
    years_in_deficit: int = Field(
        default=0, ge=0, description="Years with negative net income"
    )
    first_deficit_year: Optional[int] = Field(
        None, description="First year with negative net income"
    )


class ScenarioProjection(CamelModel):
    """The full output of a projection run."""

    scenario_id: Optional[str] = Field(None, description="Scenario identifier")
    scenario_name: str = Field(..., description="Scenario name")
    years: List[AnnualProjection] = Field(
        default_factory=list, description="Yearly projections in ascending order"
    )
    summary: ProjectionSummary = Field(..., description="Run summary")
    skipped_years: List[NoApplicableBucket] = Field(
        default_factory=list, description="Years no bucket covered"
    )

    def get_year(self, year: int) -> Optional[AnnualProjection]:
        """Get the projection for a calendar year, if it was simulated."""
        for projection in self.years:
            if projection.year == year:
                return projection
        return None
