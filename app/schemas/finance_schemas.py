from pydantic import BaseModel, Field
from typing import Optional


class EmiRequest(BaseModel):
    """
    Schema for a car loan estimate request.
    """
    price: float = Field(..., ge=0, description="Vehicle price")
    down_payment: Optional[float] = Field(
        None, ge=0, description="Down payment, defaults to the 15% minimum"
    )
    interest_rate: float = Field(5.0, ge=0, le=100, description="Annual interest rate in percent")
    tenure_years: int = Field(1, description="Loan tenure in years, clamped to 1-20")


class EmiResult(BaseModel):
    """
    Schema for a car loan estimate.
    """
    emi: float
    total_interest: float
    total_payment: float
    loan_principal: float
    down_payment: float
    down_payment_percent: float
    interest_rate: float
    tenure_years: int
