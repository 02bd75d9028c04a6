"""Data models and calculators for scenario projections."""

from .accounts import (
    ACCOUNT_TYPES,
    Account,
    AccountSummary,
    aggregate_accounts_by_type,
    calculate_account_summary,
    get_account_category,
    get_account_type_label,
)
from .profile import UserProfile, calculate_age
from .scenario import (
    Assumptions,
    AssumptionBucket,
    LumpSumEvent,
    Mortgage,
    Scenario,
    ScenarioUpdate,
    get_bucket_for_age,
    merge_assumptions,
    validate_assumption_bucket,
    validate_assumptions,
    validate_buckets,
    validate_create_scenario,
    validate_lump_sum_event,
    validate_mortgage,
    validate_update_scenario,
)
from .mortgage_amortization import (
    AmortizationSchedule,
    AnnualMortgagePayment,
    MortgageCalculator,
    MortgagePayment,
    create_sample_mortgage,
)
from .rmd import (
    MandatoryWithdrawal,
    calculate_mandatory_withdrawal,
    get_life_expectancy_factor,
)
from .withdrawals import WITHDRAWAL_ORDER, ShortfallResolution, cover_shortfall
from .projection_result import (
    AnnualProjection,
    NoApplicableBucket,
    ProjectionSummary,
    ScenarioProjection,
)
from .summary import calculate_projection_summary
from .projection import ProjectionConfigurationError, calculate_scenario_projection

__all__ = [
    "ACCOUNT_TYPES",
    "Account",
    "AccountSummary",
    "aggregate_accounts_by_type",
    "calculate_account_summary",
    "get_account_category",
    "get_account_type_label",
    "UserProfile",
    "calculate_age",
    "Assumptions",
    "AssumptionBucket",
    "LumpSumEvent",
    "Mortgage",
    "Scenario",
    "ScenarioUpdate",
    "get_bucket_for_age",
    "merge_assumptions",
    "validate_assumption_bucket",
    "validate_assumptions",
    "validate_buckets",
    "validate_create_scenario",
    "validate_lump_sum_event",
    "validate_mortgage",
    "validate_update_scenario",
    "AmortizationSchedule",
    "AnnualMortgagePayment",
    "MortgageCalculator",
    "MortgagePayment",
    "create_sample_mortgage",
    "MandatoryWithdrawal",
    "calculate_mandatory_withdrawal",
    "get_life_expectancy_factor",
    "WITHDRAWAL_ORDER",
    "ShortfallResolution",
    "cover_shortfall",
    "AnnualProjection",
    "NoApplicableBucket",
    "ProjectionSummary",
    "ScenarioProjection",
    "calculate_projection_summary",
    "ProjectionConfigurationError",
    "calculate_scenario_projection",
]
