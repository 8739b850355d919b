from fastapi import APIRouter, Depends
from typing import Dict, Any
import logging

from loan_scoring.core.config import settings
from loan_scoring.core.ranges import RangeRegistry, default_range_registry
from loan_scoring.services.standardizer import DEFAULT_TARGET_RANGE

logger = logging.getLogger(__name__)


def get_range_registry() -> RangeRegistry:
    return default_range_registry


router = APIRouter(prefix="/model", tags=["Model Inputs"])

# Exposes the value ranges and target scale used to build feature vectors
@router.get("/ranges", response_model=Dict[str, Any])
async def get_model_ranges(registry: RangeRegistry = Depends(get_range_registry)):
    return {
        "ranges": registry.as_dict(),
        "target_range": {"min": DEFAULT_TARGET_RANGE[0], "max": DEFAULT_TARGET_RANGE[1]},
        "prediction_api_url": settings.PREDICTION_API_URL
    }
