from fastapi import APIRouter


from app import schemas
from app.services import finance_service


router = APIRouter()


@router.post("/emi", response_model=schemas.EmiResult)
async def calculate_emi(request: schemas.EmiRequest):
    """
    Estimate the monthly instalment of a car loan for any price.

    Args:
        request: Price, down payment, interest rate and tenure

    Returns:
        EMI breakdown
    """
    return finance_service.calculate_emi(request)
