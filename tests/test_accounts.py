"""
Tests for account snapshot aggregation and profile helpers.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from finplan.models.accounts import (
    ACCOUNT_TYPES,
    Account,
    aggregate_accounts_by_type,
    calculate_account_summary,
    get_account_category,
    get_account_type_label,
)
from finplan.models.profile import UserProfile, calculate_age


@pytest.fixture
def accounts():
    return [
        Account(account_type="401k", account_name="Work", balance=150000),
        Account(account_type="401k", account_name="Old job", balance=50000),
        Account(account_type="roth-ira", account_name="Roth", balance=30000),
        Account(account_type="brokerage", account_name="Taxable", balance=40000),
        Account(account_type="checking", account_name="Everyday", balance=5000),
        Account(
            account_type="savings",
            account_name="Closed savings",
            balance=9999,
            status="closed",
        ),
    ]


class TestAccounts:
    """Test cases for account aggregation."""

    def test_aggregate_by_type(self, accounts):
        """Test that active balances are pooled by type."""
        balances = aggregate_accounts_by_type(accounts)

        assert set(balances) == set(ACCOUNT_TYPES)
        assert balances["401k"] == 200000
        assert balances["savings"] == 0
        assert balances["traditional-ira"] == 0

    def test_account_summary(self, accounts):
        """Test category totals and per-type counts."""
        summary = calculate_account_summary(accounts)

        assert summary.total_retirement == 230000
        assert summary.total_investment == 40000
        assert summary.total_cash == 5000
        assert summary.total_net_worth == 275000
        assert summary.account_count == 6
        assert summary.by_type["401k"].count == 2
        assert summary.by_type["savings"].count == 0

    def test_empty_summary(self):
        """Test a summary with no accounts."""
        summary = calculate_account_summary([])

        assert summary.total_net_worth == 0
        assert summary.account_count == 0

    def test_labels_and_categories(self):
        """Test display labels and categories."""
        assert get_account_type_label("401k") == "401(k)"
        assert get_account_type_label("traditional-ira") == "Traditional IRA"
        assert get_account_category("roth-ira") == "retirement"
        assert get_account_category("brokerage") == "investment"
        assert get_account_category("savings") == "cash"

    def test_camel_case_input(self):
        """Test that accounts parse from camelCase JSON."""
        account = Account.model_validate(
            {"accountType": "traditional-ira", "accountName": "IRA", "balance": 1}
        )

        assert account.account_type == "traditional-ira"
        assert account.status == "active"

    def test_invalid_account_type(self):
        """Test that unknown account types are rejected."""
        with pytest.raises(ValidationError):
            Account(account_type="hsa", account_name="HSA", balance=1)


class TestProfile:
    """Test cases for age calculation."""

    def test_age_before_and_on_birthday(self):
        """Test that age increments on the birthday."""
        assert calculate_age("1984-06-15", date(2024, 6, 14)) == 39
        assert calculate_age("1984-06-15", date(2024, 6, 15)) == 40

    def test_profile_age_on(self):
        """Test age through the profile model."""
        profile = UserProfile.model_validate({"dateOfBirth": "1960-03-01"})

        assert profile.age_on(date(2024, 1, 1)) == 63

    def test_invalid_date_of_birth(self):
        """Test that the date of birth must be an ISO date."""
        with pytest.raises(ValidationError) as exc_info:
            UserProfile(date_of_birth="03/01/1960")

        assert "ISO date" in str(exc_info.value)
