import logging
from typing import Any, Mapping, Optional

from loan_scoring.core.exceptions import RangeError, ValidationError
from loan_scoring.core.ranges import RangeRegistry, default_range_registry
from loan_scoring.schemas.loan_schema import (
    LoanContext,
    LoanProvider,
    PreparedRequest,
    SubmissionResult,
)
from loan_scoring.services.prediction_client import PredictionClient, prediction_client
from loan_scoring.services.standardizer import Standardizer
from loan_scoring.services.validator import ApplicationValidator

logger = logging.getLogger(__name__)

UNSUPPORTED_LOAN_TYPE = "unsupported_loan_type"


class LoanSubmissionService:

    def __init__(self,
                 prediction_client: PredictionClient,
                 registry: Optional[RangeRegistry] = None,
                 validator: Optional[ApplicationValidator] = None,
                 standardizer: Optional[Standardizer] = None):
        self.registry = registry or default_range_registry
        self.prediction_client = prediction_client
        self.validator = validator or ApplicationValidator(self.registry)
        self.standardizer = standardizer or Standardizer(self.registry)
        logger.info("LoanSubmissionService initialized")

    # Validates the form and builds the feature vector without calling the prediction service
    def prepare_request(
        self,
        form_data: Mapping[str, Any],
        loan_context: LoanContext,
        provider: Optional[LoanProvider] = None
    ) -> PreparedRequest:
        if provider and not provider.supports(loan_context.loan_type):
            message = f"{provider.name} does not offer {loan_context.loan_type.value} loans"
            logger.info(message)
            return PreparedRequest(
                is_valid=False,
                error=message,
                field="loan_type",
                reason=UNSUPPORTED_LOAN_TYPE
            )

        validation = self.validator.validate(form_data, loan_context.loan_type)
        if not validation.is_valid:
            return PreparedRequest(
                is_valid=False,
                error=validation.error,
                field=validation.field,
                reason=validation.reason
            )

        registry = self.registry.for_provider(provider) if provider else None
        try:
            vector = self.standardizer.build(validation.application, loan_context, registry=registry)
        except ValidationError as e:
            logger.warning(f"Loan terms rejected: {e.message}")
            return PreparedRequest(is_valid=False, error=e.message, field=e.field, reason=e.reason)
        except RangeError as e:
            # Validated input should never reach here out of range
            logger.error(f"Standardization rejected validated input: {e}")
            return PreparedRequest(is_valid=False, error=str(e), field=e.field, reason="out_of_range")

        return PreparedRequest(is_valid=True, vector=vector)

    # Runs validation, standardization and the prediction call for one submission
    async def handle_submission(
        self,
        form_data: Mapping[str, Any],
        loan_context: LoanContext,
        provider: Optional[LoanProvider] = None
    ) -> SubmissionResult:
        logger.info(f"Handling {loan_context.loan_type.value} loan submission")

        prepared = self.prepare_request(form_data, loan_context, provider)
        if not prepared.is_valid:
            return SubmissionResult(success=False, error=prepared.error, field=prepared.field)

        # PredictionServiceError is left to the caller
        decision = await self.prediction_client.predict(prepared.vector)
        return SubmissionResult(success=True, data=decision)


loan_submission_service = LoanSubmissionService(prediction_client)
