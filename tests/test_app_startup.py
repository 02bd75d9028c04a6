"""Tests for Flask application startup with configuration."""

import logging
import os
from unittest.mock import patch

import pytest

from finplan import create_app
from finplan.config import reset_global_settings


class TestAppStartup:
    """Test cases for Flask application startup."""

    def setup_method(self):
        reset_global_settings()

    def teardown_method(self):
        reset_global_settings()

    def test_app_creation_with_valid_config(self):
        """Test that app creates successfully with valid configuration."""
        with patch.dict(os.environ, {"SECRET_KEY": "valid-secret-key-123"}, clear=True):
            app = create_app()

            assert app is not None
            assert app.config["SECRET_KEY"] == "valid-secret-key-123"
            assert app.config["ENV"] == "development"
            assert app.config["DEBUG"] is True
            assert app.config["PROJECTION_DEFAULT_HORIZON_YEARS"] == 60
            assert app.config["PROJECTION_STRICT_BUCKETS"] is False

    def test_app_creation_fails_with_placeholder_secret_key(self):
        """Test that app creation fails with placeholder SECRET_KEY."""
        with patch.dict(
            os.environ,
            {"SECRET_KEY": "your-secret-key-here-change-in-production"},
            clear=True,
        ):
            with pytest.raises(Exception) as exc_info:
                create_app()

            assert "SECRET_KEY must be set to a secure value" in str(exc_info.value)

    def test_app_uses_custom_environment_variables(self):
        """Test that app picks up projection settings and log level."""
        with patch.dict(
            os.environ,
            {
                "SECRET_KEY": "custom-secret-key",
                "APP_ENV": "production",
                "LOG_LEVEL": "WARNING",
                "PROJECTION_DEFAULT_HORIZON_YEARS": "40",
                "PROJECTION_STRICT_BUCKETS": "1",
            },
            clear=True,
        ):
            app = create_app()

            assert app.config["ENV"] == "production"
            assert app.config["DEBUG"] is False
            assert app.config["PROJECTION_DEFAULT_HORIZON_YEARS"] == 40
            assert app.config["PROJECTION_STRICT_BUCKETS"] is True
            assert logging.getLogger("finplan").level == logging.WARNING

    def test_testing_config_name(self, app):
        """Test that the testing configuration sets TESTING."""
        assert app.config["TESTING"] is True

    def test_blueprints_registered(self, app):
        """Test that all blueprints are registered."""
        assert "health" in app.blueprints
        assert "projections" in app.blueprints
