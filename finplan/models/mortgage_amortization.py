"""
Mortgage amortization calculations for financial projections.

This module produces month-by-month amortization schedules for fixed-rate
mortgages (including extra principal payments and escrow), rolls them up into
calendar-year summaries, and answers point queries used by the projection
engine. Amounts are never rounded here; rounding is a presentation concern.
"""

from datetime import date
from typing import Dict, List, Optional, Tuple

from pydantic import Field

from .base import CamelModel
from .scenario import Mortgage

# A balance at or below this is treated as paid off
PAYOFF_EPSILON = 0.01


class MortgagePayment(CamelModel):
    """Breakdown of a single monthly mortgage payment."""

    month: int = Field(..., ge=1, description="Payment number (1-based)")
    year: int = Field(..., description="Calendar year of the payment")
    calendar_month: int = Field(..., ge=1, le=12, description="Calendar month")
    principal: float = Field(..., description="Scheduled principal portion")
    interest: float = Field(..., description="Interest portion")
    escrow: float = Field(..., description="Escrow portion")
    additional_principal: float = Field(
        default=0.0, description="Extra principal paid this month"
    )
    total_payment: float = Field(..., description="Principal + interest + escrow + extra")
    remaining_balance: float = Field(..., ge=0, description="Balance after payment")


class AnnualMortgagePayment(CamelModel):
    """All payments of one mortgage within one calendar year."""

    year: int = Field(..., description="Calendar year")
    mortgage_id: Optional[str] = Field(None, description="Mortgage identifier")
    mortgage_name: str = Field(..., description="Mortgage name")
    principal: float = Field(default=0.0, description="Principal paid this year")
    interest: float = Field(default=0.0, description="Interest paid this year")
    escrow: float = Field(default=0.0, description="Escrow paid this year")
    additional_principal: float = Field(
        default=0.0, description="Extra principal paid this year"
    )
    total_payment: float = Field(default=0.0, description="Total paid this year")
    starting_balance: float = Field(..., description="Balance at start of year")
    ending_balance: float = Field(..., description="Balance at end of year")


class AmortizationSchedule(CamelModel):
    """Complete amortization schedule for a mortgage."""

    mortgage: Mortgage = Field(..., description="Mortgage parameters")
    monthly_payment: float = Field(..., description="Principal + interest payment")
    payments: List[MortgagePayment] = Field(..., description="Monthly payments")
    annual_payments: List[AnnualMortgagePayment] = Field(
        ..., description="Payments rolled up by calendar year"
    )
    total_payments: int = Field(..., ge=0, description="Number of payments")
    total_interest: float = Field(..., description="Interest over life of loan")
    total_principal: float = Field(
        ..., description="Principal (scheduled + extra) over life of loan"
    )
    payoff_year: int = Field(..., description="Year the loan is paid off")
    payoff_month: int = Field(..., ge=1, le=12, description="Month the loan is paid off")


def _payment_calendar_date(start: date, months_elapsed: int) -> Tuple[int, int]:
    """Get (year, month) of the payment ``months_elapsed`` months after start."""
    month_index = start.month - 1 + months_elapsed
    return start.year + month_index // 12, month_index % 12 + 1


class MortgageCalculator:
    """Calculator for mortgage amortization and related calculations."""

    @staticmethod
    def calculate_monthly_payment(
        principal: float, annual_rate: float, term_years: int
    ) -> float:
        """
        Calculate the monthly principal + interest payment.

        Uses the standard annuity formula ``M = P*r(1+r)^n / ((1+r)^n - 1)``.

        Args:
            principal: Loan principal amount
            annual_rate: Annual interest rate as a percentage (e.g. 6.5)
            term_years: Loan term in years

        Returns:
            Monthly payment amount, excluding escrow and extra principal
        """
        if principal <= 0 or annual_rate < 0 or term_years <= 0:
            return 0.0

        num_payments = term_years * 12
        if annual_rate == 0:
            return principal / num_payments

        monthly_rate = annual_rate / 100 / 12
        growth = (1 + monthly_rate) ** num_payments
        return principal * monthly_rate * growth / (growth - 1)

    @staticmethod
    def generate_amortization_schedule(mortgage: Mortgage) -> List[MortgagePayment]:
        """
        Generate the month-by-month schedule for a mortgage.

        The schedule ends after ``term_years * 12`` payments or as soon as the
        balance is paid off, whichever comes first; extra principal therefore
        shortens it. The final payment never overpays the remaining balance.

        Args:
            mortgage: Mortgage parameters

        Returns:
            Monthly payments in order
        """
        monthly_rate = mortgage.interest_rate / 100 / 12
        num_payments = mortgage.term_years * 12
        monthly_payment = MortgageCalculator.calculate_monthly_payment(
            mortgage.loan_amount, mortgage.interest_rate, mortgage.term_years
        )
        extra_payment = mortgage.additional_monthly_payment or 0.0
        start = mortgage.start_date

        payments: List[MortgagePayment] = []
        balance = mortgage.loan_amount

        for month in range(1, num_payments + 1):
            if balance <= PAYOFF_EPSILON:
                break

            interest = balance * monthly_rate
            principal = monthly_payment - interest
            additional = extra_payment

            # Final payment: pay off exactly what is left
            if principal + additional > balance:
                principal = balance
                additional = 0.0

            balance -= principal + additional
            year, calendar_month = _payment_calendar_date(start, month - 1)

            payments.append(
                MortgagePayment(
                    month=month,
                    year=year,
                    calendar_month=calendar_month,
                    principal=principal,
                    interest=interest,
                    escrow=mortgage.monthly_escrow,
                    additional_principal=additional,
                    total_payment=principal
                    + interest
                    + mortgage.monthly_escrow
                    + additional,
                    remaining_balance=max(0.0, balance),
                )
            )

        return payments

    @staticmethod
    def aggregate_to_annual_payments(
        schedule: List[MortgagePayment],
        mortgage_id: Optional[str] = None,
        mortgage_name: str = "",
    ) -> List[AnnualMortgagePayment]:
        """
        Roll a monthly schedule up into calendar-year totals.

        Returns:
            One summary per calendar year with payments, in ascending year order
        """
        annual: Dict[int, AnnualMortgagePayment] = {}

        for payment in schedule:
            summary = annual.get(payment.year)
            if summary is None:
                summary = AnnualMortgagePayment(
                    year=payment.year,
                    mortgage_id=mortgage_id,
                    mortgage_name=mortgage_name,
                    starting_balance=payment.remaining_balance
                    + payment.principal
                    + payment.additional_principal,
                    ending_balance=payment.remaining_balance,
                )
                annual[payment.year] = summary

            summary.principal += payment.principal
            summary.interest += payment.interest
            summary.escrow += payment.escrow
            summary.additional_principal += payment.additional_principal
            summary.total_payment += payment.total_payment
            summary.ending_balance = payment.remaining_balance

        return [annual[year] for year in sorted(annual)]

    @staticmethod
    def annual_payments_by_year(mortgage: Mortgage) -> Dict[int, AnnualMortgagePayment]:
        """Get every calendar-year summary of a mortgage keyed by year."""
        schedule = MortgageCalculator.generate_amortization_schedule(mortgage)
        return {
            summary.year: summary
            for summary in MortgageCalculator.aggregate_to_annual_payments(
                schedule, mortgage.id, mortgage.name
            )
        }

    @staticmethod
    def is_mortgage_active(mortgage: Mortgage, year: int) -> bool:
        """
        Check whether a mortgage is within its term in a given year.

        A mortgage is active for ``[start_year, start_year + term_years)``. Early
        payoff from extra payments is not considered here.
        """
        start_year = mortgage.start_year
        return start_year <= year < start_year + mortgage.term_years

    @staticmethod
    def get_mortgage_payment_for_year(
        mortgage: Mortgage, year: int
    ) -> Optional[AnnualMortgagePayment]:
        """
        Get the calendar-year payment summary for a mortgage.

        Returns:
            The year's summary, or None if the mortgage has no payments that year
        """
        if not MortgageCalculator.is_mortgage_active(mortgage, year):
            return None
        return MortgageCalculator.annual_payments_by_year(mortgage).get(year)

    @staticmethod
    def get_payoff_date(mortgage: Mortgage) -> Tuple[int, int]:
        """Get the (year, month) of the final payment."""
        schedule = MortgageCalculator.generate_amortization_schedule(mortgage)
        if not schedule:
            start = mortgage.start_date
            return start.year, start.month
        last_payment = schedule[-1]
        return last_payment.year, last_payment.calendar_month

    @staticmethod
    def build_amortization_schedule(mortgage: Mortgage) -> AmortizationSchedule:
        """Generate the schedule together with its annual roll-up and totals."""
        payments = MortgageCalculator.generate_amortization_schedule(mortgage)
        if payments:
            payoff_year, payoff_month = payments[-1].year, payments[-1].calendar_month
        else:
            start = mortgage.start_date
            payoff_year, payoff_month = start.year, start.month

        return AmortizationSchedule(
            mortgage=mortgage,
            monthly_payment=MortgageCalculator.calculate_monthly_payment(
                mortgage.loan_amount, mortgage.interest_rate, mortgage.term_years
            ),
            payments=payments,
            annual_payments=MortgageCalculator.aggregate_to_annual_payments(
                payments, mortgage.id, mortgage.name
            ),
            total_payments=len(payments),
            total_interest=sum(p.interest for p in payments),
            total_principal=sum(p.principal + p.additional_principal for p in payments),
            payoff_year=payoff_year,
            payoff_month=payoff_month,
        )


def create_sample_mortgage() -> Mortgage:
    """Create a sample mortgage for testing purposes."""
    return Mortgage(
        name="Primary Home",
        start_date=date(2024, 6, 15),
        loan_amount=400000.0,
        term_years=30,
        interest_rate=6.5,
        monthly_escrow=500.0,
        additional_monthly_payment=0.0,
    )
