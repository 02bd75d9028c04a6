"""
Mandatory (minimum) withdrawal rules for tax-deferred accounts.

From age 73 a withdrawal is forced out of the combined traditional IRA and
401(k) balance, sized by a life-expectancy divisor. Roth IRAs are exempt.

The divisor table is an abbreviated Uniform Lifetime Table. Ages that are not
tabulated use ``27.4 - (age - 72) * 0.5``; existing projections depend on
these exact numbers, so the formula is kept as-is. A linear interpolation
between tabulated neighbors is available for callers that opt into it.
"""

from typing import Dict, Literal

import numpy as np
from pydantic import Field

from .base import CamelModel

RMD_START_AGE = 73
RMD_ACCOUNT_TYPES = ("traditional-ira", "401k")

LIFE_EXPECTANCY_FACTORS: Dict[int, float] = {
    73: 26.5,
    74: 25.5,
    75: 24.6,
    80: 20.2,
    85: 16.0,
    90: 12.2,
    95: 8.9,
    100: 6.4,
}

FactorMode = Literal["legacy", "interpolated"]


class MandatoryWithdrawal(CamelModel):
    """A year's mandatory withdrawal and how it was split between accounts."""

    age: int = Field(..., description="Subject's age in the withdrawal year")
    factor: float = Field(default=0.0, description="Life-expectancy divisor used")
    total: float = Field(default=0.0, ge=0, description="Total amount withdrawn")
    from_traditional_ira: float = Field(default=0.0, ge=0, description="IRA share")
    from_401k: float = Field(default=0.0, ge=0, description="401(k) share")


def _interpolated_factor(age: int) -> float:
    ages = sorted(LIFE_EXPECTANCY_FACTORS)
    return float(np.interp(age, ages, [LIFE_EXPECTANCY_FACTORS[a] for a in ages]))


def get_life_expectancy_factor(age: int, mode: FactorMode = "legacy") -> float:
    """
    Get the life-expectancy divisor for an age.

    Args:
        age: Subject's age
        mode: "legacy" uses the linear formula for untabulated ages,
            "interpolated" interpolates between the nearest tabulated ages

    Returns:
        The divisor, or 0 below the mandatory withdrawal age
    """
    if age < RMD_START_AGE:
        return 0.0
    if age >= 100:
        return LIFE_EXPECTANCY_FACTORS[100]
    if age in LIFE_EXPECTANCY_FACTORS:
        return LIFE_EXPECTANCY_FACTORS[age]
    if mode == "interpolated":
        return _interpolated_factor(age)
    return 27.4 - (age - 72) * 0.5


def calculate_mandatory_withdrawal(
    traditional_ira_balance: float,
    k401_balance: float,
    age: int,
    mode: FactorMode = "legacy",
) -> MandatoryWithdrawal:
    """
    Size a mandatory withdrawal and split it between the two accounts.

    The withdrawal is ``(ira + 401k) / factor``, split in proportion to each
    account's share of the combined balance.

    Args:
        traditional_ira_balance: Traditional IRA balance
        k401_balance: 401(k) balance
        age: Subject's age this year
        mode: Divisor lookup mode, see get_life_expectancy_factor

    Returns:
        MandatoryWithdrawal (zero before the start age or with no balance)
    """
    if age < RMD_START_AGE:
        return MandatoryWithdrawal(age=age)

    ira = max(0.0, traditional_ira_balance)
    k401 = max(0.0, k401_balance)
    combined = ira + k401
    if combined <= 0:
        return MandatoryWithdrawal(age=age)

    factor = get_life_expectancy_factor(age, mode)
    total = combined / factor
    return MandatoryWithdrawal(
        age=age,
        factor=factor,
        total=total,
        from_traditional_ira=total * ira / combined,
        from_401k=total * k401 / combined,
    )
