import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from loan_scoring.core.config import settings
from loan_scoring.core.exceptions import PredictionServiceError
from loan_scoring.schemas.loan_schema import FeatureVector, LoanDecision

logger = logging.getLogger(__name__)


class PredictionClient(ABC):
    """Anything that can turn a feature vector into an approval decision."""

    @abstractmethod
    async def predict(self, vector: FeatureVector) -> LoanDecision:
        ...


class HttpPredictionClient(PredictionClient):
    """Client for the hosted loan approval model."""

    def __init__(
        self,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url or settings.PREDICTION_API_URL
        self.timeout = timeout if timeout is not None else settings.PREDICTION_TIMEOUT_SECONDS
        self._transport = transport

        if not self.api_url:
            logger.warning("Prediction API URL not configured. Set PREDICTION_API_URL")

    async def predict(self, vector: FeatureVector) -> LoanDecision:
        """
        POST the standardized payload and parse the decision.

        Raises:
            PredictionServiceError: reason is "timeout" when no answer arrives
                within the timeout, "http_error" for transport failures and
                non-2xx responses, "malformed_response" when the body is not
                a decision.
        """
        payload = vector.to_payload()
        logger.info(f"Requesting {payload['loan_type']} loan prediction from {self.api_url}")

        try:
            response = await asyncio.wait_for(self._post(payload), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.error(f"Prediction request timed out after {self.timeout}s")
            raise PredictionServiceError(PredictionServiceError.TIMEOUT, f"No response within {self.timeout}s") from e
        except httpx.HTTPError as e:
            logger.error(f"Prediction request failed: {e}")
            raise PredictionServiceError(PredictionServiceError.HTTP_ERROR, str(e)) from e

        if not response.is_success:
            logger.error(f"Prediction service returned HTTP {response.status_code}: {response.text[:200]}")
            raise PredictionServiceError(
                PredictionServiceError.HTTP_ERROR,
                f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        return self._parse_decision(response)

    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json"
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await client.post(self.api_url, headers=headers, json=payload)

    @staticmethod
    def _parse_decision(response: httpx.Response) -> LoanDecision:
        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Failed to parse JSON response: {response.text[:200]}")
            raise PredictionServiceError(PredictionServiceError.MALFORMED_RESPONSE, "Response is not JSON") from e

        try:
            decision = LoanDecision.model_validate(data)
        except PydanticValidationError as e:
            logger.error(f"Unexpected prediction response shape: {data}")
            raise PredictionServiceError(PredictionServiceError.MALFORMED_RESPONSE, str(e)) from e

        logger.info(f"Prediction received: approved={decision.approved}, confidence={decision.confidence}")
        return decision


prediction_client = HttpPredictionClient()
