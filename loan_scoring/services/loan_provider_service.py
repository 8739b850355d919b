import logging
from typing import Any, Dict, List, Optional

from loan_scoring.loan_provider import LOAN_PROVIDERS_CATALOG
from loan_scoring.schemas.loan_schema import LoanProvider, LoanTypeEnum

logger = logging.getLogger(__name__)


class LoanProviderService:
    # Initialize the provider service with the lenders from the catalog
    def __init__(self, catalog: Optional[List[Dict[str, Any]]] = None):
        entries = LOAN_PROVIDERS_CATALOG if catalog is None else catalog
        self.providers = [LoanProvider(**entry) for entry in entries]
        logger.info(f"LoanProviderService initialized with {len(self.providers)} providers")

    # Returns the providers that offer the given loan type, in catalog order
    def list_providers(self, loan_type: Any) -> List[LoanProvider]:
        if loan_type is None or str(loan_type).strip() == "":
            raise ValueError("Loan type is required")

        normalized_type = LoanTypeEnum.normalize(loan_type)
        providers = [p for p in self.providers if p.supports(normalized_type)]
        logger.info(f"Found {len(providers)} providers for loan type: {normalized_type.value}")
        return providers

    def get_provider(self, provider_id: str) -> Optional[LoanProvider]:
        for provider in self.providers:
            if provider.provider_id == provider_id:
                return provider
        return None


loan_provider_service = LoanProviderService()
