"""
Tests for the projections blueprint endpoints.
"""

from unittest.mock import patch

import pytest


class TestCalculateProjection:
    """Test cases for POST /api/projections/calculate."""

    def test_calculate_projection(self, client, projection_payload):
        """Test a successful projection request."""
        response = client.post("/api/projections/calculate", json=projection_payload)

        assert response.status_code == 201
        data = response.get_json()
        assert data["scenarioName"] == "Baseline"
        assert [y["year"] for y in data["years"]] == [2024, 2025, 2026]

        first = data["years"][0]
        assert first["age"] == 40
        assert first["income"]["employment"] == pytest.approx(102000)
        assert first["spending"]["living"] == pytest.approx(61500)
        assert first["accountBalances"]["byAccountType"]["401k"] == pytest.approx(107000)
        assert first["accountBalances"]["total"] == pytest.approx(147500)
        assert first["netIncome"] == pytest.approx(40500)
        assert data["summary"]["startYear"] == 2024
        assert data["summary"]["yearsInDeficit"] == 0
        assert data["skippedYears"] == []

    def test_default_window(self, client, projection_payload):
        """Test that the window defaults to the as-of year plus the horizon."""
        del projection_payload["startYear"]
        del projection_payload["endYear"]

        response = client.post("/api/projections/calculate", json=projection_payload)

        data = response.get_json()
        assert response.status_code == 201
        assert data["summary"]["startYear"] == 2024
        assert data["summary"]["endYear"] == 2084
        assert len(data["years"]) == 61

    def test_configured_horizon(self, app, client, projection_payload):
        """Test that the default horizon comes from configuration."""
        app.config["PROJECTION_DEFAULT_HORIZON_YEARS"] = 5
        del projection_payload["endYear"]

        response = client.post("/api/projections/calculate", json=projection_payload)

        assert response.get_json()["summary"]["endYear"] == 2029

    def test_skipped_years_reported(self, client, projection_payload):
        """Test that uncovered ages are reported as skipped years."""
        projection_payload["scenario"]["assumptionBuckets"][0]["endAge"] = 40

        response = client.post("/api/projections/calculate", json=projection_payload)

        data = response.get_json()
        assert response.status_code == 201
        assert len(data["years"]) == 1
        assert data["skippedYears"] == [
            {"year": 2025, "age": 41},
            {"year": 2026, "age": 42},
        ]

    def test_strict_buckets(self, app, client, projection_payload):
        """Test that strict mode turns uncovered ages into a 400."""
        app.config["PROJECTION_STRICT_BUCKETS"] = True
        projection_payload["scenario"]["assumptionBuckets"][0]["endAge"] = 40

        response = client.post("/api/projections/calculate", json=projection_payload)

        assert response.status_code == 400
        assert "No assumption bucket covers age 41" in response.get_json()["error"]

    def test_invalid_scenario(self, client, projection_payload):
        """Test that scenario validation errors are returned verbatim."""
        projection_payload["scenario"]["assumptionBuckets"].append(
            {"order": 1, "startAge": 105, "endAge": 110, "assumptions": {}}
        )

        response = client.post("/api/projections/calculate", json=projection_payload)

        assert response.status_code == 400
        assert response.get_json() == {"error": "Gap between buckets 0 and 1"}

    def test_inverted_window(self, client, projection_payload):
        """Test that an inverted window is rejected."""
        projection_payload["startYear"] = 2030

        response = client.post("/api/projections/calculate", json=projection_payload)

        assert response.status_code == 400
        assert "less than or equal" in response.get_json()["error"]

    def test_malformed_profile(self, client, projection_payload):
        """Test that unparseable models are rejected with details."""
        projection_payload["profile"] = {"dateOfBirth": "not-a-date"}

        response = client.post("/api/projections/calculate", json=projection_payload)

        data = response.get_json()
        assert response.status_code == 400
        assert data["error"] == "Invalid request data"
        assert data["details"][0]["loc"] == ["dateOfBirth"]

    def test_missing_body(self, client):
        """Test that a non-JSON body is rejected."""
        response = client.post("/api/projections/calculate", data="nope")

        assert response.status_code == 400

    def test_unexpected_error(self, client, projection_payload):
        """Test that unexpected failures map to a 500."""
        with patch(
            "finplan.services.projection_service.calculate_scenario_projection",
            side_effect=RuntimeError("boom"),
        ):
            response = client.post(
                "/api/projections/calculate", json=projection_payload
            )

        assert response.status_code == 500
        assert response.get_json() == {"error": "Internal server error"}


class TestValidateScenario:
    """Test cases for POST /api/scenarios/validate."""

    def test_valid(self, client, scenario_payload):
        """Test a valid scenario."""
        response = client.post("/api/scenarios/validate", json=scenario_payload)

        assert response.status_code == 200
        assert response.get_json() == {"valid": True, "error": None}

    def test_invalid(self, client, scenario_payload):
        """Test that the first violated rule is reported."""
        scenario_payload["assumptionBuckets"].append(
            {"order": 1, "startAge": 90, "endAge": 110, "assumptions": {}}
        )

        response = client.post("/api/scenarios/validate", json=scenario_payload)

        assert response.get_json() == {
            "valid": False,
            "error": "Buckets 0 and 1 overlap",
        }

    def test_update_mode(self, client):
        """Test partial validation for updates."""
        response = client.post(
            "/api/scenarios/validate?mode=update", json={"description": "New"}
        )

        assert response.get_json()["valid"] is True

    def test_unknown_mode(self, client, scenario_payload):
        """Test that an unknown mode is rejected."""
        response = client.post(
            "/api/scenarios/validate?mode=delete", json=scenario_payload
        )

        assert response.status_code == 400


class TestMortgageSchedule:
    """Test cases for POST /api/mortgages/schedule."""

    @pytest.fixture
    def mortgage_payload(self):
        return {
            "name": "Primary Home",
            "startDate": "2024-01-01",
            "loanAmount": 300000,
            "termYears": 30,
            "interestRate": 6,
            "monthlyEscrow": 0,
        }

    def test_schedule(self, client, mortgage_payload):
        """Test the annual amortization summary."""
        response = client.post("/api/mortgages/schedule", json=mortgage_payload)

        data = response.get_json()
        assert response.status_code == 200
        assert data["monthlyPayment"] == pytest.approx(1798.65, abs=0.01)
        assert data["totalPayments"] == 360
        assert data["payoffYear"] == 2053
        assert len(data["annualPayments"]) == 30
        assert "payments" not in data
        assert data["mortgage"]["startDate"] == "2024-01-01"

    def test_invalid_mortgage(self, client, mortgage_payload):
        """Test that invalid terms are rejected."""
        mortgage_payload["termYears"] = 60

        response = client.post("/api/mortgages/schedule", json=mortgage_payload)

        assert response.status_code == 400
        assert response.get_json() == {"error": "Term must be between 1 and 50 years"}
