"""User profile model and age helpers."""

from datetime import date
from typing import Literal, Optional

from pydantic import Field, field_validator

from .base import CamelModel


class UserProfile(CamelModel):
    """The projection subject. Only the date of birth drives calculations."""

    user_id: Optional[str] = Field(None, description="Owning user identifier")
    firstname: Optional[str] = Field(None, description="First name")
    date_of_birth: str = Field(..., description="Date of birth (YYYY-MM-DD)")
    marital_status: Optional[
        Literal["single", "married", "divorced", "widowed"]
    ] = Field(None, description="Marital status")
    number_of_dependents: int = Field(default=0, ge=0, description="Dependents")

    @field_validator("date_of_birth")
    @classmethod
    def validate_date_of_birth(cls, v: str) -> str:
        try:
            date.fromisoformat(v)
        except ValueError as e:
            raise ValueError("Date of birth must be an ISO date (YYYY-MM-DD)") from e
        return v

    def age_on(self, today: Optional[date] = None) -> int:
        """Get the subject's age in whole years on the given date."""
        return calculate_age(self.date_of_birth, today)


def calculate_age(date_of_birth: str, today: Optional[date] = None) -> int:
    """
    Calculate age in whole years from an ISO date of birth.

    Args:
        date_of_birth: Date of birth (YYYY-MM-DD)
        today: Reference date (defaults to the current local date)

    Returns:
        Age in completed years
    """
    if today is None:
        today = date.today()
    birth_date = date.fromisoformat(date_of_birth)

    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age
