"""
Projections blueprint for scenario projection and validation endpoints.

This module provides API endpoints for calculating scenario projections,
validating scenario payloads and summarizing mortgage amortization.
"""

from typing import Any

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from finplan.models.projection import ProjectionConfigurationError
from finplan.models.scenario import validate_create_scenario, validate_update_scenario
from finplan.services.projection_service import ProjectionService

projections_bp = Blueprint("projections", __name__, url_prefix="/api")


def _projection_service() -> ProjectionService:
    return ProjectionService(
        default_horizon_years=current_app.config["PROJECTION_DEFAULT_HORIZON_YEARS"],
        strict_buckets=current_app.config["PROJECTION_STRICT_BUCKETS"],
    )


@projections_bp.route("/projections/calculate", methods=["POST"])
def calculate_projection() -> Any:
    """Calculate a year-by-year projection for a scenario.

    Request body:
        scenario, profile, accounts, and optional startYear, endYear, asOf

    Returns:
        JSON projection with 201, or an error with 400/500
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    try:
        result = _projection_service().run_projection(data)
        return jsonify(result), 201

    except ProjectionConfigurationError as e:
        current_app.logger.info(f"Rejected projection request: {str(e)}")
        return jsonify({"error": str(e)}), 400

    except ValidationError as e:
        current_app.logger.info(f"Malformed projection request: {str(e)}")
        return (
            jsonify(
                {
                    "error": "Invalid request data",
                    "details": e.errors(
                        include_url=False, include_context=False, include_input=False
                    ),
                }
            ),
            400,
        )

    except Exception as e:
        current_app.logger.error(f"Error calculating projection: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@projections_bp.route("/scenarios/validate", methods=["POST"])
def validate_scenario_payload() -> Any:
    """Validate a scenario payload without running it.

    Query parameters:
        mode: "create" (default) for a full scenario, "update" for a partial one

    Returns:
        JSON with ``valid`` and the first ``error`` found (or null)
    """
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "Request body must be JSON"}), 400

    mode = request.args.get("mode", "create")
    if mode == "create":
        error = validate_create_scenario(data)
    elif mode == "update":
        error = validate_update_scenario(data)
    else:
        return jsonify({"error": "Invalid mode"}), 400

    return jsonify({"valid": error is None, "error": error}), 200


@projections_bp.route("/mortgages/schedule", methods=["POST"])
def mortgage_schedule() -> Any:
    """Summarize a mortgage's amortization by calendar year.

    Returns:
        JSON with the monthly payment, payoff date, totals and annual payments
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    try:
        return jsonify(_projection_service().build_mortgage_schedule(data)), 200

    except ProjectionConfigurationError as e:
        return jsonify({"error": str(e)}), 400

    except Exception as e:
        current_app.logger.error(f"Error building mortgage schedule: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500
