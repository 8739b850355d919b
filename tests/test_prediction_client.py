import asyncio
import json

import httpx
import pytest

from loan_scoring.core.exceptions import PredictionServiceError
from loan_scoring.services.prediction_client import HttpPredictionClient
from loan_scoring.services.standardizer import Standardizer
from loan_scoring.services.validator import ApplicationValidator

API_URL = "https://predictor.test/predict"


@pytest.fixture
def student_vector(student_form, student_context):
    application = ApplicationValidator().validate(student_form, "student").application
    return Standardizer().build(application, student_context)


def _client(handler, timeout=5.0):
    return HttpPredictionClient(api_url=API_URL, timeout=timeout, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_successful_prediction_posts_full_payload(student_vector):
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"approved": True, "confidence": 91.2, "feedback": ["Low debt"]})

    decision = await _client(handler).predict(student_vector)

    assert decision.approved is True
    assert decision.confidence == 91.2
    assert decision.feedback == ["Low debt"]
    assert seen["method"] == "POST"
    assert seen["url"] == API_URL
    assert seen["body"]["loan_type"] == "student"
    assert seen["body"]["Mortgage"] is None
    assert seen["body"]["income_to_loan"] == pytest.approx(3.0)


@pytest.mark.asyncio
async def test_non_2xx_is_http_error(student_vector):
    client = _client(lambda request: httpx.Response(503, text="model warming up"))

    with pytest.raises(PredictionServiceError) as exc_info:
        await client.predict(student_vector)

    assert exc_info.value.reason == "http_error"
    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_connection_failure_is_http_error(student_vector):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PredictionServiceError) as exc_info:
        await _client(handler).predict(student_vector)
    assert exc_info.value.reason == "http_error"


@pytest.mark.asyncio
async def test_transport_timeout_is_reported_as_timeout(student_vector):
    def handler(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(PredictionServiceError) as exc_info:
        await _client(handler).predict(student_vector)
    assert exc_info.value.reason == "timeout"


@pytest.mark.asyncio
async def test_slow_service_hits_overall_timeout(student_vector):
    async def handler(request):
        await asyncio.sleep(1)
        return httpx.Response(200, json={"approved": True, "confidence": 50, "feedback": []})

    with pytest.raises(PredictionServiceError) as exc_info:
        await _client(handler, timeout=0.05).predict(student_vector)
    assert exc_info.value.reason == "timeout"


@pytest.mark.asyncio
async def test_non_json_body_is_malformed(student_vector):
    client = _client(lambda request: httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(PredictionServiceError) as exc_info:
        await client.predict(student_vector)
    assert exc_info.value.reason == "malformed_response"


@pytest.mark.asyncio
async def test_unexpected_shape_is_malformed(student_vector):
    client = _client(lambda request: httpx.Response(200, json={"prediction": 1}))

    with pytest.raises(PredictionServiceError) as exc_info:
        await client.predict(student_vector)
    assert exc_info.value.reason == "malformed_response"


@pytest.mark.asyncio
async def test_confidence_outside_percentage_is_malformed(student_vector):
    client = _client(lambda request: httpx.Response(200, json={"approved": False, "confidence": 140, "feedback": []}))

    with pytest.raises(PredictionServiceError) as exc_info:
        await client.predict(student_vector)
    assert exc_info.value.reason == "malformed_response"
