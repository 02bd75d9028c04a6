"""
Projection service for running scenario projections from JSON payloads.

This service turns a request payload (scenario, profile and account snapshot)
into validated models, fills in the default projection window, runs the
projection engine and returns the camelCase JSON form of the result.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from finplan.models.accounts import Account
from finplan.models.mortgage_amortization import MortgageCalculator
from finplan.models.profile import UserProfile
from finplan.models.projection import (
    ProjectionConfigurationError,
    calculate_scenario_projection,
)
from finplan.models.scenario import (
    Mortgage,
    Scenario,
    validate_create_scenario,
    validate_mortgage,
)

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_YEARS = 60


class ProjectionService:
    """Service for running scenario projections."""

    def __init__(
        self,
        default_horizon_years: int = DEFAULT_HORIZON_YEARS,
        strict_buckets: bool = False,
    ) -> None:
        """Initialize the projection service.

        Args:
            default_horizon_years: Years after startYear used when endYear is omitted
            strict_buckets: Fail runs whose years are not all covered by a bucket
        """
        self.logger = logging.getLogger(__name__)
        self.default_horizon_years = default_horizon_years
        self.strict_buckets = strict_buckets

    def run_projection(
        self, payload: Mapping[str, Any], as_of: Optional[date] = None
    ) -> Dict[str, Any]:
        """Run a projection for a request payload.

        Args:
            payload: Mapping with ``scenario``, ``profile``, ``accounts`` and
                optional ``startYear``, ``endYear``, ``asOf`` and ``rmdFactorMode``
            as_of: Reference date overriding ``asOf`` (defaults to today)

        Returns:
            The projection as a camelCase JSON-compatible dictionary

        Raises:
            ProjectionConfigurationError: If the payload describes an invalid scenario
                or projection window
            pydantic.ValidationError: If the payload cannot be parsed into models
        """
        scenario_data = payload.get("scenario")
        error = validate_create_scenario(scenario_data)
        if error:
            raise ProjectionConfigurationError(error)

        if "profile" not in payload:
            raise ProjectionConfigurationError("Profile is required")

        scenario = Scenario.model_validate(scenario_data)
        profile = UserProfile.model_validate(payload["profile"])
        accounts = self._parse_accounts(payload.get("accounts") or [])

        if as_of is None and payload.get("asOf"):
            as_of = self._parse_as_of(payload["asOf"])
        if as_of is None:
            as_of = date.today()

        start_year = payload.get("startYear")
        if start_year is None:
            start_year = as_of.year
        end_year = payload.get("endYear")
        if end_year is None:
            end_year = start_year + self.default_horizon_years
        if not isinstance(start_year, int) or not isinstance(end_year, int):
            raise ProjectionConfigurationError("Start and end year must be integers")

        rmd_factor_mode = payload.get("rmdFactorMode", "legacy")
        if rmd_factor_mode not in ("legacy", "interpolated"):
            raise ProjectionConfigurationError(
                'RMD factor mode must be either "legacy" or "interpolated"'
            )

        self.logger.info(
            f"Starting projection for scenario {scenario.name!r} "
            f"({start_year}-{end_year}, {len(accounts)} accounts)"
        )
        projection = calculate_scenario_projection(
            scenario,
            profile,
            accounts,
            start_year,
            end_year,
            as_of=as_of,
            strict_buckets=self.strict_buckets,
            rmd_factor_mode=rmd_factor_mode,
        )
        self.logger.info(
            f"Completed projection for scenario {scenario.name!r}: "
            f"{len(projection.years)} years, "
            f"{projection.summary.years_in_deficit} in deficit"
        )
        return projection.model_dump(mode="json", by_alias=True)

    def build_mortgage_schedule(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """Build the annual amortization summary for a mortgage payload.

        Raises:
            ProjectionConfigurationError: If the mortgage terms are invalid
        """
        error = validate_mortgage(payload)
        if error:
            raise ProjectionConfigurationError(error)

        mortgage = Mortgage.model_validate(payload)
        schedule = MortgageCalculator.build_amortization_schedule(mortgage)
        self.logger.info(
            f"Built amortization schedule for {mortgage.name!r}: "
            f"{schedule.total_payments} payments"
        )
        return schedule.model_dump(mode="json", by_alias=True, exclude={"payments"})

    @staticmethod
    def _parse_accounts(raw_accounts: Any) -> List[Account]:
        if not isinstance(raw_accounts, list):
            raise ProjectionConfigurationError("Accounts must be an array")
        return [Account.model_validate(account) for account in raw_accounts]

    @staticmethod
    def _parse_as_of(value: Any) -> date:
        try:
            return date.fromisoformat(value)
        except (TypeError, ValueError) as e:
            raise ProjectionConfigurationError(
                "asOf must be an ISO date (YYYY-MM-DD)"
            ) from e
