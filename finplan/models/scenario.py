"""
Pydantic models and validators for financial planning scenarios.

A scenario splits the subject's life into age-range assumption buckets
(e.g. working years, early retirement, late retirement). The buckets must
partition a contiguous age range with no gaps or overlaps. Scenarios also own
one-off lump-sum events and any mortgages that should be modeled.

Field domains live on the models. The ``validate_*`` functions return ``None``
when the input is valid and a human-readable reason otherwise, so callers can
point at the exact misconfigured field. They accept either a raw JSON mapping
(camelCase keys) or a model instance. Rules that span several buckets
(ordering, gaps and overlaps) are checked by ``validate_buckets``.
"""

from datetime import date
from typing import (
    Annotated,
    Any,
    Callable,
    Dict,
    List,
    Literal,
    Mapping,
    Optional,
    Sequence,
)

from pydantic import (
    AfterValidator,
    BaseModel,
    Field,
    NonNegativeFloat,
    StrictBool,
    ValidationError,
    field_validator,
    model_validator,
)

from .accounts import ACCOUNT_TYPES, AccountType
from .base import CamelModel

MAX_SCENARIO_NAME_LENGTH = 100


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


Rate = Annotated[float, Field(ge=-100, le=100)]
Age = Annotated[int, Field(ge=0, le=120)]
ScenarioName = Annotated[
    str,
    Field(min_length=1, max_length=MAX_SCENARIO_NAME_LENGTH),
    AfterValidator(_require_text),
]


class Assumptions(CamelModel):
    """Financial assumptions for one age bucket, in today's dollars."""

    annual_income: Optional[float] = Field(None, ge=0, description="Employment income")
    annual_spending: Optional[float] = Field(None, ge=0, description="Living expenses")
    annual_travel_budget: Optional[float] = Field(
        None, ge=0, description="Travel budget"
    )
    annual_healthcare_costs: Optional[float] = Field(
        None, ge=0, description="Healthcare costs"
    )
    contributions: Optional[Dict[AccountType, NonNegativeFloat]] = Field(
        None, description="Annual contributions by account type"
    )
    investment_return_rate: Optional[Rate] = Field(
        None, description="Overrides the scenario return rate (percent)"
    )
    inflation_rate: Optional[Rate] = Field(
        None, description="Overrides the scenario inflation rate (percent)"
    )

    def contribution_for(self, account_type: str) -> float:
        """Get the base contribution for an account type (0 when unset)."""
        if not self.contributions:
            return 0.0
        return self.contributions.get(account_type) or 0.0


class AssumptionBucket(CamelModel):
    """Assumptions valid while the subject's age is in [start_age, end_age]."""

    id: Optional[str] = Field(None, description="Bucket identifier")
    order: int = Field(..., ge=0, description="Position of the bucket (0-based)")
    start_age: int = Field(..., ge=0, le=120, description="First age covered")
    end_age: int = Field(..., ge=0, le=999, description="Last age covered")
    assumptions: Assumptions = Field(..., description="Assumptions for this age range")

    @model_validator(mode="after")
    def validate_age_range(self):
        if self.start_age > self.end_age:
            raise ValueError("Bucket start age must be less than or equal to end age")
        return self

    def contains_age(self, age: int) -> bool:
        return self.start_age <= age <= self.end_age


class LumpSumEvent(CamelModel):
    """A one-time, non-inflated cash flow in the year the subject turns ``age``."""

    id: Optional[str] = Field(None, description="Event identifier")
    type: Literal["income", "expense"] = Field(..., description="Cash flow direction")
    age: Age = Field(..., description="Age at which the event occurs")
    amount: float = Field(..., ge=0, description="Amount in actual (future) dollars")
    description: str = Field(..., min_length=1, description="What the event is")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return _require_text(v)


class Mortgage(CamelModel):
    """A fixed-rate, fixed-term amortizing loan, possibly starting in the future."""

    id: Optional[str] = Field(None, description="Mortgage identifier")
    name: str = Field(..., min_length=1, description="Mortgage name")
    start_date: date = Field(..., description="First payment date")
    loan_amount: float = Field(..., gt=0, description="Original loan amount")
    term_years: int = Field(..., ge=1, le=50, description="Loan term in years")
    interest_rate: float = Field(
        ..., ge=0, le=30, description="Annual interest rate as a percentage (e.g. 6.5)"
    )
    monthly_escrow: float = Field(default=0.0, ge=0, description="Taxes and insurance")
    additional_monthly_payment: float = Field(
        default=0.0, ge=0, description="Extra principal paid every month"
    )
    description: Optional[str] = Field(None, description="Notes")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _require_text(v)

    @property
    def start_year(self) -> int:
        return self.start_date.year


class Scenario(CamelModel):
    """A complete financial planning scenario."""

    id: Optional[str] = Field(None, description="Scenario identifier")
    name: ScenarioName = Field(..., description="Scenario name")
    description: Optional[str] = Field(None, description="Scenario description")
    is_default: StrictBool = Field(default=False, description="User's default scenario")
    assumption_buckets: List[AssumptionBucket] = Field(
        default_factory=list, description="Age-range assumption buckets"
    )
    lump_sum_events: List[LumpSumEvent] = Field(
        default_factory=list, description="One-time income and expenses"
    )
    mortgages: List[Mortgage] = Field(
        default_factory=list, description="Mortgages to amortize"
    )
    investment_return_rate: Rate = Field(
        default=0.0, description="Annual return on investment accounts (percent)"
    )
    inflation_rate: Rate = Field(default=0.0, description="Annual inflation rate")
    retirement_age: Optional[Age] = Field(
        None, description="Planned retirement age (informational)"
    )
    social_security_age: Optional[Age] = Field(
        None, description="Age Social Security starts"
    )
    social_security_income: float = Field(
        default=0.0, ge=0, description="Annual Social Security in today's dollars"
    )


class ScenarioUpdate(CamelModel):
    """A partial scenario update; only supplied fields are validated."""

    name: Optional[ScenarioName] = None
    description: Optional[str] = None
    is_default: Optional[StrictBool] = None
    investment_return_rate: Optional[Rate] = None
    inflation_rate: Optional[Rate] = None
    retirement_age: Optional[Age] = None
    social_security_age: Optional[Age] = None
    social_security_income: Optional[float] = Field(None, ge=0)


# Reasons keyed by field alias, by (alias, error type), or by (alias, "missing")
ASSUMPTION_REASONS = {
    "annualIncome": "Annual income must be a non-negative number",
    "annualSpending": "Annual spending must be a non-negative number",
    "annualTravelBudget": "Annual travel budget must be a non-negative number",
    "annualHealthcareCosts": "Annual healthcare costs must be a non-negative number",
    "investmentReturnRate": "Investment return rate must be a number between -100 and 100",
    "inflationRate": "Inflation rate must be a number between -100 and 100",
    "contributions": "Contributions must be an object",
}

BUCKET_REASONS = {
    "order": "Bucket order must be a non-negative integer",
    "startAge": "Bucket start age must be a number between 0 and 120",
    "endAge": "Bucket end age must be a number between 0 and 999",
    ("assumptions", "missing"): "Bucket must have assumptions",
}

LUMP_SUM_REASONS = {
    "type": 'Lump sum event type must be either "income" or "expense"',
    "age": "Lump sum event age must be a number between 0 and 120",
    "amount": "Lump sum event amount must be a non-negative number",
    "description": "Lump sum event description must be a non-empty string",
}

MORTGAGE_REASONS = {
    "name": "Mortgage name is required",
    ("startDate", "missing"): "Mortgage start date is required",
    "startDate": "Invalid start date format (expected YYYY-MM-DD)",
    "loanAmount": "Loan amount must be greater than 0",
    "termYears": "Term must be between 1 and 50 years",
    "interestRate": "Interest rate must be between 0 and 30%",
    "monthlyEscrow": "Monthly escrow must be 0 or greater",
    "additionalMonthlyPayment": "Additional monthly payment must be 0 or greater",
}

SCENARIO_REASONS = {
    "name": "Scenario name is required and must be a non-empty string",
    ("name", "string_too_long"): (
        f"Scenario name must be {MAX_SCENARIO_NAME_LENGTH} characters or less"
    ),
    "description": "Scenario description must be a string",
    "isDefault": "isDefault must be a boolean",
    "investmentReturnRate": "Investment return rate must be a number between -100 and 100",
    "inflationRate": "Inflation rate must be a number between -100 and 100",
    "retirementAge": "Retirement age must be a number between 0 and 120",
    "socialSecurityAge": "Social security age must be a number between 0 and 120",
    "socialSecurityIncome": "Social security income must be a non-negative number",
}


def _as_mapping(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    return value


def _describe_error(
    error: Dict[str, Any], loc: Sequence[Any], reasons: Mapping[Any, str], fallback: str
) -> str:
    """Turn one pydantic error into the reason registered for its field."""
    if not loc:
        if error["type"] == "value_error":
            return str(error["ctx"]["error"])
        return fallback

    field = loc[0]
    is_missing = error["type"] == "missing" or (
        len(loc) == 1 and error.get("input") is None
    )
    keys = [(field, error["type"]), field]
    if is_missing:
        keys.insert(0, (field, "missing"))
    for key in keys:
        if key in reasons:
            return reasons[key]
    return f"{'.'.join(str(part) for part in loc)}: {error['msg']}"


def _assumptions_reason(error: Dict[str, Any], loc: Sequence[Any]) -> str:
    if len(loc) > 1 and loc[0] == "contributions":
        account_type = loc[1]
        if loc[-1] == "[key]":
            return f"Invalid account type: {account_type}"
        return f"Contribution for {account_type} must be a non-negative number"
    return _describe_error(error, loc, ASSUMPTION_REASONS, "Assumptions must be an object")


def _bucket_reason(error: Dict[str, Any]) -> str:
    loc = error["loc"]
    if loc and loc[0] == "assumptions" and error["type"] != "missing":
        if len(loc) > 1 or error.get("input") is not None:
            return _assumptions_reason(error, loc[1:])
    return _describe_error(error, loc, BUCKET_REASONS, "Bucket must be an object")


def _first_error(model: type, data: Any) -> Optional[Dict[str, Any]]:
    try:
        model.model_validate(_as_mapping(data))
    except ValidationError as e:
        return e.errors(include_url=False)[0]
    return None


def _check(
    model: type, data: Any, describe: Callable[[Dict[str, Any]], str]
) -> Optional[str]:
    error = _first_error(model, data)
    return describe(error) if error else None


def validate_assumptions(assumptions: Any) -> Optional[str]:
    """
    Validate a bucket's assumptions.

    Args:
        assumptions: Raw mapping or Assumptions model

    Returns:
        None if valid, otherwise the reason the assumptions are invalid
    """
    return _check(
        Assumptions, assumptions, lambda e: _assumptions_reason(e, e["loc"])
    )


def validate_assumption_bucket(bucket: Any) -> Optional[str]:
    """Validate a single bucket's ages, order and assumptions."""
    return _check(AssumptionBucket, bucket, _bucket_reason)


def validate_lump_sum_event(event: Any) -> Optional[str]:
    """Validate a one-time income or expense event."""
    return _check(
        LumpSumEvent,
        event,
        lambda e: _describe_error(
            e, e["loc"], LUMP_SUM_REASONS, "Lump sum event must be an object"
        ),
    )


def validate_mortgage(mortgage: Any) -> Optional[str]:
    """Validate mortgage terms."""
    return _check(
        Mortgage,
        mortgage,
        lambda e: _describe_error(e, e["loc"], MORTGAGE_REASONS, "Mortgage must be an object"),
    )


def validate_buckets(buckets: Optional[Sequence[Any]]) -> Optional[str]:
    """
    Validate that buckets form a contiguous, non-overlapping partition of ages.

    Each bucket must be individually valid, order values must be exactly
    ``0..n-1``, and after sorting by age every bucket must end exactly one year
    before the next one starts. Gaps and overlaps are reported separately,
    naming the offending pair by their order values.

    Args:
        buckets: Raw mappings or AssumptionBucket models

    Returns:
        None if valid, otherwise the reason the bucket set is invalid
    """
    if not buckets:
        return "Scenario must have at least one assumption bucket"

    parsed: List[AssumptionBucket] = []
    for index, bucket in enumerate(buckets):
        try:
            parsed.append(AssumptionBucket.model_validate(_as_mapping(bucket)))
        except ValidationError as e:
            return f"Bucket {index}: {_bucket_reason(e.errors(include_url=False)[0])}"

    orders = sorted(bucket.order for bucket in parsed)
    if orders != list(range(len(orders))):
        return "Bucket order numbers must be sequential starting from 0"

    by_age = sorted(parsed, key=lambda b: (b.start_age, b.end_age))
    for current, following in zip(by_age, by_age[1:]):
        if current.end_age + 1 != following.start_age:
            if current.end_age >= following.start_age:
                return f"Buckets {current.order} and {following.order} overlap"
            return f"Gap between buckets {current.order} and {following.order}"

    return None


def _validate_items(
    items: Any, label: str, validator: Callable[[Any], Optional[str]]
) -> Optional[str]:
    if not isinstance(items, (list, tuple)):
        return f"{label} must be an array"
    for item in items:
        error = validator(item)
        if error:
            return error
    return None


def _validate_collections(data: Mapping) -> Optional[str]:
    if data.get("lumpSumEvents") is not None:
        error = _validate_items(
            data["lumpSumEvents"], "Lump sum events", validate_lump_sum_event
        )
        if error:
            return error

    if data.get("mortgages") is not None:
        return _validate_items(data["mortgages"], "Mortgages", validate_mortgage)
    return None


def _scenario_fields_reason(error: Dict[str, Any]) -> str:
    return _describe_error(error, error["loc"], SCENARIO_REASONS, "Invalid scenario")


def validate_create_scenario(data: Any) -> Optional[str]:
    """
    Validate a complete scenario payload before it is created or projected.

    Args:
        data: Raw mapping (camelCase keys) or Scenario model

    Returns:
        None if valid, otherwise the first violated rule
    """
    data = _as_mapping(data)
    if not isinstance(data, Mapping):
        return "Scenario data must be an object"

    buckets = data.get("assumptionBuckets")
    if not isinstance(buckets, (list, tuple)):
        return "Scenario must have assumption buckets array"
    error = validate_buckets(buckets) or _validate_collections(data)
    if error:
        return error

    return _check(Scenario, data, _scenario_fields_reason)


def validate_update_scenario(data: Any) -> Optional[str]:
    """Validate a partial scenario update; only supplied fields are checked."""
    data = _as_mapping(data)
    if not isinstance(data, Mapping):
        return "Update data must be an object"

    if data.get("assumptionBuckets") is not None:
        if not isinstance(data["assumptionBuckets"], (list, tuple)):
            return "Assumption buckets must be an array"
        error = validate_buckets(data["assumptionBuckets"])
        if error:
            return error

    error = _validate_collections(data)
    if error:
        return error

    return _check(ScenarioUpdate, data, _scenario_fields_reason)


def get_bucket_for_age(
    buckets: Sequence[AssumptionBucket], age: int
) -> Optional[AssumptionBucket]:
    """
    Get the bucket whose age range contains ``age``.

    Buckets are scanned in ``order``; the first match wins.

    Returns:
        The matching bucket, or None if the age falls outside every bucket
    """
    for bucket in sorted(buckets, key=lambda b: b.order):
        if bucket.contains_age(age):
            return bucket
    return None


def merge_assumptions(
    current: Assumptions, previous: Optional[Assumptions] = None
) -> Assumptions:
    """Carry forward any assumption the current bucket leaves unset."""
    if previous is None:
        return current

    contributions: Optional[Dict[str, float]] = None
    if current.contributions is not None or previous.contributions is not None:
        contributions = {}
        for account_type in ACCOUNT_TYPES:
            value = (current.contributions or {}).get(account_type)
            if value is None:
                value = (previous.contributions or {}).get(account_type)
            if value is not None:
                contributions[account_type] = value

    merged = {
        field: (
            getattr(current, field)
            if getattr(current, field) is not None
            else getattr(previous, field)
        )
        for field in Assumptions.model_fields
        if field != "contributions"
    }
    return Assumptions(contributions=contributions, **merged)
