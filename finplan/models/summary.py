"""Reduction of yearly projections into headline statistics."""

from typing import Optional, Sequence

from .projection_result import AnnualProjection, ProjectionSummary


def calculate_projection_summary(
    years: Sequence[AnnualProjection], start_year: int, end_year: int
) -> ProjectionSummary:
    """
    Calculate projection summary statistics.

    Args:
        years: Yearly projections in ascending year order (may be empty)
        start_year: First requested year
        end_year: Last requested year

    Returns:
        Totals across all years, the final net worth, and deficit statistics
    """
    total_income = 0.0
    total_spending = 0.0
    total_contributions = 0.0
    years_in_deficit = 0
    first_deficit_year: Optional[int] = None

    for projection in years:
        total_income += projection.income.total
        total_spending += projection.spending.total
        total_contributions += projection.contributions.total

        if projection.net_income < 0:
            years_in_deficit += 1
            if first_deficit_year is None:
                first_deficit_year = projection.year

    final_net_worth = years[-1].account_balances.total if years else 0.0

    return ProjectionSummary(
        start_year=start_year,
        end_year=end_year,
        total_income=total_income,
        total_spending=total_spending,
        total_contributions=total_contributions,
        final_net_worth=final_net_worth,
        years_in_deficit=years_in_deficit,
        first_deficit_year=first_deficit_year,
    )
