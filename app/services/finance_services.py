from app import schemas
from app.utils.exception_utils import BadRequestException


MIN_DOWN_PAYMENT_PERCENT = 15
MIN_TENURE_YEARS = 1
MAX_TENURE_YEARS = 20


class FinanceService:
    """
    Car loan estimates for listing pages.
    """
    def calculate_emi(self, request: schemas.EmiRequest) -> schemas.EmiResult:
        """
        Calculate the monthly instalment of a car loan.

        Args:
            request: Price, down payment, interest rate and tenure

        Returns:
            EmiResult with the instalment and totals
        """
        price = request.price
        min_down_payment = price * MIN_DOWN_PAYMENT_PERCENT / 100

        down_payment = (
            request.down_payment if request.down_payment is not None else min_down_payment
        )
        down_payment = min(max(down_payment, min_down_payment), price)
        tenure_years = min(max(request.tenure_years, MIN_TENURE_YEARS), MAX_TENURE_YEARS)

        principal = price - down_payment
        if principal <= 0:
            raise BadRequestException("Loan amount must be greater than zero")

        months = tenure_years * 12
        monthly_rate = request.interest_rate / 12 / 100

        if monthly_rate == 0:
            emi = principal / months
        else:
            growth = (1 + monthly_rate) ** months
            emi = principal * monthly_rate * growth / (growth - 1)

        total_payment = emi * months

        return schemas.EmiResult(
            emi=round(emi, 2),
            total_interest=round(total_payment - principal, 2),
            total_payment=round(total_payment, 2),
            loan_principal=round(principal, 2),
            down_payment=round(down_payment, 2),
            down_payment_percent=round(down_payment / price * 100, 2),
            interest_rate=request.interest_rate,
            tenure_years=tenure_years,
        )


finance_service = FinanceService()
