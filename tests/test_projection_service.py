"""
Tests for the projection service.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from finplan.models.projection import ProjectionConfigurationError
from finplan.services.projection_service import ProjectionService


class TestProjectionService:
    """Test cases for ProjectionService."""

    def test_run_projection(self, projection_payload):
        """Test that the result is the camelCase projection."""
        result = ProjectionService().run_projection(projection_payload)

        assert result["scenarioName"] == "Baseline"
        assert len(result["years"]) == 3
        assert "netBeforeWithdrawals" in result["years"][0]

    def test_as_of_argument_overrides_payload(self, projection_payload):
        """Test that an explicit as-of date takes precedence."""
        del projection_payload["startYear"]
        del projection_payload["endYear"]

        result = ProjectionService().run_projection(
            projection_payload, as_of=date(2030, 1, 1)
        )

        assert result["summary"]["startYear"] == 2030
        assert result["summary"]["endYear"] == 2090
        assert result["years"][0]["age"] == 46

    def test_default_horizon(self, projection_payload):
        """Test the service-level default horizon."""
        del projection_payload["endYear"]

        result = ProjectionService(default_horizon_years=10).run_projection(
            projection_payload
        )

        assert result["summary"]["endYear"] == 2034

    def test_strict_buckets(self, projection_payload):
        """Test that strict mode is applied to runs."""
        projection_payload["scenario"]["assumptionBuckets"][0]["endAge"] = 41

        with pytest.raises(ProjectionConfigurationError, match="age 42"):
            ProjectionService(strict_buckets=True).run_projection(projection_payload)

    def test_missing_profile(self, projection_payload):
        """Test that a profile is required."""
        del projection_payload["profile"]

        with pytest.raises(ProjectionConfigurationError, match="Profile is required"):
            ProjectionService().run_projection(projection_payload)

    def test_invalid_scenario(self, projection_payload):
        """Test that scenario validation runs before the projection."""
        projection_payload["scenario"]["name"] = ""

        with pytest.raises(ProjectionConfigurationError, match="name is required"):
            ProjectionService().run_projection(projection_payload)

    @pytest.mark.parametrize(
        "field,value,message",
        [
            ("accounts", {"401k": 1}, "Accounts must be an array"),
            ("asOf", "01/01/2024", "asOf must be an ISO date"),
            ("rmdFactorMode", "exact", "RMD factor mode"),
            ("startYear", "2024", "must be integers"),
        ],
    )
    def test_invalid_request_fields(self, projection_payload, field, value, message):
        """Test that malformed request fields are rejected."""
        projection_payload[field] = value

        with pytest.raises(ProjectionConfigurationError, match=message):
            ProjectionService().run_projection(projection_payload)

    def test_malformed_account(self, projection_payload):
        """Test that accounts that cannot be parsed raise ValidationError."""
        projection_payload["accounts"] = [{"accountType": "hsa", "balance": 1}]

        with pytest.raises(ValidationError):
            ProjectionService().run_projection(projection_payload)

    def test_mortgage_schedule(self):
        """Test the annual amortization summary."""
        result = ProjectionService().build_mortgage_schedule(
            {
                "name": "Condo",
                "startDate": "2025-03-01",
                "loanAmount": 120000,
                "termYears": 10,
                "interestRate": 0,
                "monthlyEscrow": 50,
            }
        )

        assert result["monthlyPayment"] == pytest.approx(1000)
        assert result["annualPayments"][0]["year"] == 2025
        assert result["annualPayments"][0]["escrow"] == pytest.approx(500)
        assert (result["payoffYear"], result["payoffMonth"]) == (2035, 2)
