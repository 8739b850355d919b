from fastapi import APIRouter, HTTPException, Depends, Query
from fastapi import status
from typing import Dict, Any, List, Optional
import logging

from loan_scoring.core.exceptions import PredictionServiceError
from loan_scoring.schemas.loan_schema import (
    LoanApprovalRequest,
    LoanCalculationRequest,
    LoanCalculationResponse,
    LoanDecision,
    LoanProvider,
)
from loan_scoring.services.loan_calculator import LoanCalculator, loan_calculator
from loan_scoring.services.loan_provider_service import LoanProviderService, loan_provider_service
from loan_scoring.services.loan_submission_service import LoanSubmissionService, loan_submission_service

logger = logging.getLogger(__name__)

RETRY_MESSAGE = "Failed to process loan application. Please try again."


def get_loan_submission_service() -> LoanSubmissionService:
    return loan_submission_service

def get_loan_provider_service() -> LoanProviderService:
    return loan_provider_service

def get_loan_calculator() -> LoanCalculator:
    return loan_calculator


def _resolve_provider(provider_service: LoanProviderService, provider_id: str) -> LoanProvider:
    provider = provider_service.get_provider(provider_id)
    if not provider:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Provider not found")
    return provider


router = APIRouter(prefix="/loans", tags=["Loan Approval"])

# Lists the lenders offering a loan type
@router.get("/providers", response_model=List[LoanProvider])
async def list_loan_providers(
    loan_type: Optional[str] = Query(default=None, alias="type", description="student, agricultural or business"),
    provider_service: LoanProviderService = Depends(get_loan_provider_service)
):
    try:
        return provider_service.list_providers(loan_type)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

# Retrieves one lender by id
@router.get("/providers/{provider_id}", response_model=LoanProvider)
async def get_loan_provider(
    provider_id: str,
    provider_service: LoanProviderService = Depends(get_loan_provider_service)
):
    return _resolve_provider(provider_service, provider_id)

# Computes EMI and charges and returns the loan terms to submit with the application
@router.post("/providers/{provider_id}/calculate", response_model=LoanCalculationResponse)
async def calculate_loan(
    provider_id: str,
    request_data: LoanCalculationRequest,
    provider_service: LoanProviderService = Depends(get_loan_provider_service),
    calculator: LoanCalculator = Depends(get_loan_calculator)
):
    provider = _resolve_provider(provider_service, provider_id)
    try:
        calculation = calculator.calculate(provider, request_data.loan_amount, request_data.duration_years)
        loan_context = calculator.to_loan_context(
            provider,
            request_data.loan_amount,
            request_data.duration_years,
            calculation,
            loan_type=request_data.loan_type
        )
    except ValueError as e:
        logger.info(f"Loan calculation rejected for provider {provider_id}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return LoanCalculationResponse(provider_id=provider_id, calculation=calculation, loan_context=loan_context)

# Returns the standardized feature vector for an application without requesting a prediction
@router.post("/approval/features", response_model=Dict[str, Any])
async def preview_feature_vector(
    request_data: LoanApprovalRequest,
    service: LoanSubmissionService = Depends(get_loan_submission_service),
    provider_service: LoanProviderService = Depends(get_loan_provider_service)
):
    provider = _resolve_provider(provider_service, request_data.provider_id) if request_data.provider_id else None
    prepared = service.prepare_request(request_data.form_data, request_data.loan_context, provider)
    if not prepared.is_valid:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"field": prepared.field, "message": prepared.error}
        )
    return prepared.vector.to_payload()

# Validates the application, standardizes it and asks the prediction service for a decision
@router.post("/approval", response_model=LoanDecision)
async def request_loan_approval(
    request_data: LoanApprovalRequest,
    service: LoanSubmissionService = Depends(get_loan_submission_service),
    provider_service: LoanProviderService = Depends(get_loan_provider_service)
):
    provider = _resolve_provider(provider_service, request_data.provider_id) if request_data.provider_id else None

    try:
        result = await service.handle_submission(request_data.form_data, request_data.loan_context, provider)
    except PredictionServiceError as e:
        logger.error(f"Loan approval prediction failed: {e}")
        status_code = (
            status.HTTP_504_GATEWAY_TIMEOUT
            if e.reason == PredictionServiceError.TIMEOUT
            else status.HTTP_502_BAD_GATEWAY
        )
        raise HTTPException(status_code=status_code, detail=RETRY_MESSAGE)

    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"field": result.field, "message": result.error}
        )

    return result.data
