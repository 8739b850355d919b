import logging
from typing import Optional

from loan_scoring.schemas.loan_schema import LoanCalculation, LoanContext, LoanProvider, LoanTypeEnum

logger = logging.getLogger(__name__)


class LoanCalculator:
    """Amortization and charges for a loan at a given provider."""

    @staticmethod
    def monthly_payment(amount: float, annual_rate: float, months: int) -> float:
        """Standard EMI formula; a zero rate spreads the principal evenly."""
        if months <= 0:
            raise ValueError("Number of payments must be positive")
        monthly_rate = annual_rate / 12 / 100
        if monthly_rate == 0:
            return amount / months
        growth = (1 + monthly_rate) ** months
        return amount * monthly_rate * growth / (growth - 1)

    def calculate(self, provider: LoanProvider, amount: float, duration_years: int) -> LoanCalculation:
        if amount < provider.minimum_loan_amount or amount > provider.maximum_loan_amount:
            raise ValueError(
                f"Loan amount must be between {provider.minimum_loan_amount:,.0f} and "
                f"{provider.maximum_loan_amount:,.0f} for {provider.name}"
            )

        interest_rate = provider.rate_for(duration_years)
        if interest_rate is None:
            offered = sorted(r.duration_years for r in provider.interest_rates)
            raise ValueError(f"{provider.name} does not offer a {duration_years} year term. Available: {offered}")

        months = duration_years * 12
        monthly_payment = self.monthly_payment(amount, interest_rate, months)
        total_interest = monthly_payment * months - amount

        taxes = provider.taxes
        processing_fee = amount * taxes.processing_fee_pct / 100
        documentation_charges = taxes.documentation_charges
        gst_amount = (processing_fee + documentation_charges) * taxes.gst_pct / 100

        calculation = LoanCalculation(
            monthly_payment=monthly_payment,
            total_interest=total_interest,
            processing_fee=processing_fee,
            documentation_charges=documentation_charges,
            gst_amount=gst_amount,
            total_amount=amount + total_interest + processing_fee + documentation_charges + gst_amount,
        )
        logger.info(
            f"Calculated {months}-month loan of {amount:,.2f} at {provider.name}: EMI {monthly_payment:,.2f}"
        )
        return calculation

    # Packages a calculation as the loan terms consumed by the submission service
    def to_loan_context(
        self,
        provider: LoanProvider,
        amount: float,
        duration_years: int,
        calculation: LoanCalculation,
        loan_type: Optional[LoanTypeEnum] = None,
    ) -> LoanContext:
        if loan_type is None:
            loan_type = LoanTypeEnum.normalize(provider.supported_loan_types[0])
        elif not provider.supports(loan_type):
            raise ValueError(f"{provider.name} does not offer {loan_type.value} loans")

        return LoanContext(
            loan_type=loan_type,
            amount=amount,
            term_months=duration_years * 12,
            interest_rate=provider.rate_for(duration_years),
            monthly_payment=calculation.monthly_payment,
            processing_fee=calculation.processing_fee,
        )


loan_calculator = LoanCalculator()
