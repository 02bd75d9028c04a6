"""
Scenario projection engine.

This module runs the deterministic year-by-year simulation of a scenario:
for each calendar year it resolves the assumption bucket for the subject's age,
compounds inflation, computes income, spending, mortgage payments and
contributions, grows investment accounts, applies mandatory withdrawals, and
resolves any cash shortfall through the withdrawal waterfall.

A run is a pure function of its inputs. All working state (running balances by
account type and the inflation multipliers) is local to one call.
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .accounts import (
    ACCOUNT_TYPES,
    INVESTMENT_ACCOUNT_TYPES,
    Account,
    aggregate_accounts_by_type,
    empty_balances,
)
from .mortgage_amortization import AnnualMortgagePayment, MortgageCalculator
from .profile import UserProfile
from .projection_result import (
    AccountBalances,
    AnnualProjection,
    ContributionBreakdown,
    IncomeBreakdown,
    MortgagePaymentSummary,
    NoApplicableBucket,
    ScenarioProjection,
    SpendingBreakdown,
)
from .rmd import RMD_START_AGE, FactorMode, calculate_mandatory_withdrawal
from .scenario import AssumptionBucket, Mortgage, Scenario, get_bucket_for_age
from .summary import calculate_projection_summary
from .withdrawals import cover_shortfall

logger = logging.getLogger(__name__)

MAX_PROJECTION_SPAN_YEARS = 100

# Employment income grows at this fixed rate, independent of scenario inflation
INCOME_GROWTH_RATE = 2.0


class ProjectionConfigurationError(ValueError):
    """Raised when a projection cannot start because of caller configuration."""


MortgageSchedules = List[Tuple[Mortgage, Dict[int, AnnualMortgagePayment]]]


def resolve_bucket(
    buckets: Sequence[AssumptionBucket], year: int, age: int
) -> Union[AssumptionBucket, NoApplicableBucket]:
    """Get the bucket for an age, or a NoApplicableBucket marker for the year."""
    bucket = get_bucket_for_age(buckets, age)
    if bucket is None:
        return NoApplicableBucket(year=year, age=age)
    return bucket


def _check_preconditions(scenario: Scenario, start_year: int, end_year: int) -> None:
    if not scenario.assumption_buckets:
        raise ProjectionConfigurationError(
            "Scenario must have at least one assumption bucket"
        )
    if start_year > end_year:
        raise ProjectionConfigurationError(
            "Start year must be less than or equal to end year"
        )
    if end_year - start_year > MAX_PROJECTION_SPAN_YEARS:
        raise ProjectionConfigurationError(
            f"Projection period cannot exceed {MAX_PROJECTION_SPAN_YEARS} years"
        )


def _check_bucket_coverage(
    scenario: Scenario, current_age: int, current_year: int, start_year: int, end_year: int
) -> None:
    for year in range(start_year, end_year + 1):
        age = current_age + (year - current_year)
        if get_bucket_for_age(scenario.assumption_buckets, age) is None:
            raise ProjectionConfigurationError(
                f"No assumption bucket covers age {age} (year {year})"
            )


def _mortgage_payments_for_year(
    schedules: MortgageSchedules, year: int
) -> MortgagePaymentSummary:
    payments = [
        by_year[year]
        for mortgage, by_year in schedules
        if MortgageCalculator.is_mortgage_active(mortgage, year) and year in by_year
    ]
    principal = sum(p.principal for p in payments)
    interest = sum(p.interest for p in payments)
    escrow = sum(p.escrow for p in payments)
    additional = sum(p.additional_principal for p in payments)
    return MortgagePaymentSummary(
        principal=principal,
        interest=interest,
        escrow=escrow,
        additional_principal=additional,
        total=principal + interest + escrow + additional,
        by_mortgage=payments,
    )


def _lump_sums_for_age(scenario: Scenario, event_type: str, age: int) -> float:
    return sum(
        event.amount
        for event in scenario.lump_sum_events
        if event.type == event_type and event.age == age
    )


def calculate_scenario_projection(
    scenario: Scenario,
    profile: UserProfile,
    accounts: Sequence[Account],
    start_year: int,
    end_year: int,
    as_of: Optional[date] = None,
    strict_buckets: bool = False,
    rmd_factor_mode: FactorMode = "legacy",
) -> ScenarioProjection:
    """
    Calculate a year-by-year projection of a scenario.

    The scenario is expected to have passed validate_create_scenario already. Each
    year, in order: resolve the bucket for the subject's age (years no bucket
    covers are skipped and recorded), compound inflation and the fixed 2%
    income growth, compute income, spending and contributions, grow investment
    accounts on their beginning balance, take mandatory withdrawals from age
    73, then fund any deficit through the withdrawal waterfall or deposit the
    surplus into checking.

    Args:
        scenario: Scenario with buckets, lump-sum events and mortgages
        profile: Subject's profile (date of birth)
        accounts: Current account snapshot; only active accounts are used
        start_year: First calendar year to simulate
        end_year: Last calendar year to simulate (inclusive)
        as_of: Date that defines the current year and age (defaults to today)
        strict_buckets: Raise instead of skipping years no bucket covers
        rmd_factor_mode: Life-expectancy divisor lookup, see rmd module

    Returns:
        ScenarioProjection with one record per simulated year and a summary

    Raises:
        ProjectionConfigurationError: If the inputs fail a precondition
    """
    _check_preconditions(scenario, start_year, end_year)

    if as_of is None:
        as_of = date.today()
    current_age = profile.age_on(as_of)
    current_year = as_of.year

    if strict_buckets:
        _check_bucket_coverage(
            scenario, current_age, current_year, start_year, end_year
        )

    balances = aggregate_accounts_by_type(accounts)
    schedules: MortgageSchedules = [
        (mortgage, MortgageCalculator.annual_payments_by_year(mortgage))
        for mortgage in scenario.mortgages
    ]
    inflation_multiplier = 1.0
    income_multiplier = 1.0

    years: List[AnnualProjection] = []
    skipped: List[NoApplicableBucket] = []

    for year in range(start_year, end_year + 1):
        age = current_age + (year - current_year)

        bucket = resolve_bucket(scenario.assumption_buckets, year, age)
        if isinstance(bucket, NoApplicableBucket):
            logger.debug(f"No assumption bucket covers age {age}; skipping {year}")
            skipped.append(bucket)
            continue
        assumptions = bucket.assumptions

        inflation_rate = assumptions.inflation_rate
        if inflation_rate is None:
            inflation_rate = scenario.inflation_rate
        return_rate = assumptions.investment_return_rate
        if return_rate is None:
            return_rate = scenario.investment_return_rate

        inflation_multiplier *= 1 + inflation_rate / 100
        income_multiplier *= 1 + INCOME_GROWTH_RATE / 100

        # Income
        employment = (assumptions.annual_income or 0.0) * income_multiplier
        social_security = 0.0
        if scenario.social_security_age is not None and age >= scenario.social_security_age:
            social_security = scenario.social_security_income * inflation_multiplier
        lump_sum_income = _lump_sums_for_age(scenario, "income", age)

        # Spending
        living = (assumptions.annual_spending or 0.0) * inflation_multiplier
        travel = (assumptions.annual_travel_budget or 0.0) * inflation_multiplier
        healthcare = (assumptions.annual_healthcare_costs or 0.0) * inflation_multiplier
        lump_sum_expenses = _lump_sums_for_age(scenario, "expense", age)
        mortgage_payments = _mortgage_payments_for_year(schedules, year)
        total_spending = (
            living + travel + healthcare + lump_sum_expenses + mortgage_payments.total
        )

        # Contributions and growth on beginning-of-year balances
        contributions = empty_balances()
        investment_gains = 0.0
        for account_type in ACCOUNT_TYPES:
            beginning = balances[account_type]
            contribution = assumptions.contribution_for(account_type) * inflation_multiplier
            gain = 0.0
            if account_type in INVESTMENT_ACCOUNT_TYPES:
                gain = beginning * return_rate / 100
            contributions[account_type] = contribution
            investment_gains += gain
            balances[account_type] = beginning + contribution + gain
        total_contributions = sum(contributions.values())

        # Mandatory withdrawal from tax-deferred accounts
        mandatory = 0.0
        if age >= RMD_START_AGE:
            withdrawal = calculate_mandatory_withdrawal(
                balances["traditional-ira"], balances["401k"], age, rmd_factor_mode
            )
            balances["traditional-ira"] -= withdrawal.from_traditional_ira
            balances["401k"] -= withdrawal.from_401k
            mandatory = withdrawal.total

        reported = employment + social_security + lump_sum_income + mandatory
        net_before_withdrawals = reported - total_spending - total_contributions

        # Shortfall waterfall or surplus to checking
        withdrawn = 0.0
        shortfall = 0.0
        withdrawals_by_type = empty_balances()
        if net_before_withdrawals < 0:
            resolution = cover_shortfall(balances, -net_before_withdrawals)
            withdrawn = resolution.withdrawn
            shortfall = resolution.overdraft
            withdrawals_by_type = dict(resolution.by_account_type)
            if shortfall > 0:
                logger.debug(f"Accounts exhausted in {year}; overdraft {shortfall:.2f}")
        else:
            balances["checking"] += net_before_withdrawals

        years.append(
            AnnualProjection(
                year=year,
                age=age,
                income=IncomeBreakdown(
                    employment=employment,
                    social_security=social_security,
                    lump_sum=lump_sum_income,
                    mandatory_withdrawal=mandatory,
                    reported=reported,
                    withdrawals=withdrawn,
                    investment_gains=investment_gains,
                    total=reported,
                ),
                spending=SpendingBreakdown(
                    living=living,
                    travel=travel,
                    healthcare=healthcare,
                    lump_sum=lump_sum_expenses,
                    mortgages=mortgage_payments.total,
                    total=total_spending,
                ),
                mortgage_payments=mortgage_payments,
                contributions=ContributionBreakdown(
                    total=total_contributions,
                    by_account_type=contributions,
                ),
                withdrawals_by_account_type=withdrawals_by_type,
                shortfall=shortfall,
                net_before_withdrawals=net_before_withdrawals,
                net_income=net_before_withdrawals + withdrawn,
                account_balances=AccountBalances(by_account_type=dict(balances)),
            )
        )

    if skipped:
        logger.warning(
            f"Scenario {scenario.name!r}: {len(skipped)} year(s) skipped because "
            "no assumption bucket covers the subject's age"
        )

    return ScenarioProjection(
        scenario_id=scenario.id,
        scenario_name=scenario.name,
        years=years,
        summary=calculate_projection_summary(years, start_year, end_year),
        skipped_years=skipped,
    )
